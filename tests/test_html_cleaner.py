"""Tests for content cleanup."""

import unittest

from sites_liberation.converters import HtmlCleaner
from sites_liberation.models import Entry, EntryType


class TestHtmlCleaner(unittest.TestCase):
    def setUp(self):
        self.cleaner = HtmlCleaner()

    def test_removes_scripts_and_styles(self):
        html = '<p>Keep</p><script>alert(1)</script><style>p {}</style>'
        self.assertEqual(self.cleaner.clean(html), '<p>Keep</p>')

    def test_strips_event_handlers(self):
        cleaned = self.cleaner.clean('<a href="x.html" onclick="evil()">x</a>')
        self.assertEqual(cleaned, '<a href="x.html">x</a>')

    def test_drops_script_urls(self):
        cleaned = self.cleaner.clean('<a href="javascript:void(0)">x</a>')
        self.assertNotIn('javascript', cleaned)

    def test_protocol_relative_urls(self):
        cleaned = self.cleaner.clean('<img src="//cdn.example.com/a.png"/>')
        self.assertIn('src="https://cdn.example.com/a.png"', cleaned)

    def test_unwraps_namespace_wrapper(self):
        html = '<div xmlns="http://www.w3.org/1999/xhtml"><p>One</p><p>Two</p></div>'
        self.assertEqual(self.cleaner.clean(html), '<p>One</p><p>Two</p>')

    def test_removes_empty_elements_and_comments(self):
        html = '<p>Text</p><div></div><span> </span><!-- note --><br/>'
        self.assertEqual(self.cleaner.clean(html), '<p>Text</p><br/>')

    def test_apply_updates_entry(self):
        entry = Entry(id='1', entry_type=EntryType.WEB_PAGE, content='<p>A</p><script></script>')
        self.assertIs(self.cleaner.apply(entry), entry)
        self.assertEqual(entry.content, '<p>A</p>')


if __name__ == '__main__':
    unittest.main()
