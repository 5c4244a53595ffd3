"""Tests for rewriting in-site links to export paths."""

import unittest

from sites_liberation.converters import LinkConverter
from sites_liberation.entry_store import EntryStore

from helpers import SITE_URL, make_attachment, make_page


class TestLinkConverter(unittest.TestCase):
    def setUp(self):
        self.store = EntryStore()
        self.home = make_page('home', 'Home', page_name='home')
        self.about = make_page('about', 'About', parent_id='home', page_name='about')
        self.store.add_entry(self.home)
        self.store.add_entry(self.about)
        self.store.add_entry(make_attachment('doc', 'doc.pdf', parent_id='about'))
        self.converter = LinkConverter()

    def convert(self, html, page=None, **kwargs):
        page = page or self.home
        page.content = html
        count = self.converter.convert_links(page, self.store, SITE_URL, **kwargs)
        return count, page.content

    def test_absolute_site_link(self):
        count, content = self.convert(f'<a href="{SITE_URL}/home/about">About</a>')
        self.assertEqual(count, 1)
        self.assertIn('href="../home/about/index.html"', content)

    def test_host_relative_link(self):
        count, content = self.convert('<a href="/site/test/home/about">About</a>')
        self.assertEqual(count, 1)
        self.assertIn('href="../home/about/index.html"', content)

    def test_link_from_nested_page(self):
        count, content = self.convert(f'<a href="{SITE_URL}/home">Home</a>', page=self.about)
        self.assertEqual(count, 1)
        self.assertIn('href="../../home/index.html"', content)

    def test_attachment_link(self):
        count, content = self.convert(f'<img src="{SITE_URL}/home/about/doc.pdf"/>')
        self.assertEqual(count, 1)
        self.assertIn('src="../home/about/doc.pdf"', content)

    def test_attachment_link_uses_stored_name(self):
        self.store.add_entry(make_attachment('files/5', 'index.html', parent_id='about'))
        _, content = self.convert(f'<a href="{SITE_URL}/home/about/index.html">raw</a>')
        self.assertIn('href="../home/about/index-5.html"', content)

    def test_fragment_is_kept(self):
        _, content = self.convert(f'<a href="{SITE_URL}/home/about#team">Team</a>')
        self.assertIn('href="../home/about/index.html#team"', content)

    def test_out_of_site_link_untouched(self):
        html = '<a href="https://example.com/home/about">Elsewhere</a>'
        count, content = self.convert(html)
        self.assertEqual(count, 0)
        self.assertEqual(content, html)

    def test_similar_site_prefix_untouched(self):
        count, _ = self.convert(f'<a href="{SITE_URL}ing/home">Other site</a>')
        self.assertEqual(count, 0)

    def test_unresolved_link_untouched(self):
        html = f'<a href="{SITE_URL}/home/missing">Gone</a>'
        count, content = self.convert(html)
        self.assertEqual(count, 0)
        self.assertIn(f'href="{SITE_URL}/home/missing"', content)

    def test_site_root_link_untouched(self):
        count, _ = self.convert(f'<a href="{SITE_URL}/">Site</a>')
        self.assertEqual(count, 0)

    def test_for_display_only_climbs_one_more_level(self):
        count, content = self.convert(f'<a href="{SITE_URL}/home/about">About</a>', for_display_only=True)
        self.assertEqual(count, 1)
        self.assertIn('href="../../home/about/index.html"', content)

    def test_unresolvable_page_is_left_alone(self):
        orphan = make_page('orphan', 'Orphan', parent_id='gone')
        self.store.add_entry(orphan)
        html = f'<a href="{SITE_URL}/home">Home</a>'
        count, content = self.convert(html, page=orphan)
        self.assertEqual(count, 0)
        self.assertEqual(content, html)

    def test_empty_content(self):
        count, content = self.convert('')
        self.assertEqual(count, 0)
        self.assertEqual(content, '')


if __name__ == '__main__':
    unittest.main()
