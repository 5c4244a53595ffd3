"""Tests for the in-memory entry graph."""

import threading
import unittest

from sites_liberation.entry_store import EntryStore
from sites_liberation.models import Entry, EntryType

from helpers import make_attachment, make_page


class TestEntryStore(unittest.TestCase):
    def setUp(self):
        self.store = EntryStore()
        self.home = make_page('home', 'Home')
        self.about = make_page('about', 'About', parent_id='home')
        self.team = make_page('team', 'Team', parent_id='about')
        for entry in (self.team, self.about, self.home):
            self.store.add_entry(entry)

    def test_get_entry(self):
        self.assertIs(self.store.get_entry('about'), self.about)
        self.assertIsNone(self.store.get_entry('missing'))
        self.assertIsNone(self.store.get_entry(None))

    def test_add_entry_overwrites(self):
        replacement = make_page('about', 'About us', parent_id='home', revision=2)
        self.store.add_entry(replacement)
        self.assertIs(self.store.get_entry('about'), replacement)
        self.assertEqual(len(self.store), 3)

    def test_add_entry_requires_id(self):
        with self.assertRaises(ValueError):
            self.store.add_entry(Entry(id='', entry_type=EntryType.WEB_PAGE))

    def test_get_parent(self):
        self.assertIs(self.store.get_parent('team'), self.about)

    def test_get_parent_of_root_is_none(self):
        self.assertIsNone(self.store.get_parent('home'))

    def test_get_parent_of_unknown_entry_is_none(self):
        self.assertIsNone(self.store.get_parent('missing'))

    def test_get_parent_dangling(self):
        self.store.add_entry(make_page('orphan', 'Orphan', parent_id='gone'))
        self.assertIsNone(self.store.get_parent('orphan'))

    def test_get_children_sorted_by_title(self):
        self.store.add_entry(make_page('contact', 'Contact', parent_id='about'))
        self.store.add_entry(make_attachment('logo', 'Logo.png', parent_id='about'))
        titles = [child.title for child in self.store.get_children('about')]
        self.assertEqual(titles, ['Contact', 'Logo.png', 'Team'])

    def test_get_children_none_returns_roots(self):
        self.store.add_entry(make_page('other', 'Other'))
        roots = self.store.get_children(None)
        self.assertEqual([root.id for root in roots], ['home', 'other'])

    def test_children_index_refreshes_after_add(self):
        self.assertEqual(self.store.get_children('team'), [])
        self.store.add_entry(make_page('alice', 'Alice', parent_id='team'))
        self.assertEqual([child.id for child in self.store.get_children('team')], ['alice'])

    def test_get_ancestors_root_first(self):
        ancestors = self.store.get_ancestors(self.team)
        self.assertEqual([entry.id for entry in ancestors], ['home', 'about'])
        self.assertEqual(self.store.get_ancestors(self.home), [])

    def test_get_ancestors_stops_at_missing_parent(self):
        orphan = make_page('orphan', 'Orphan', parent_id='gone')
        child = make_page('child', 'Child', parent_id='orphan')
        self.store.add_entry(orphan)
        self.store.add_entry(child)
        self.assertEqual([entry.id for entry in self.store.get_ancestors(child)], ['orphan'])

    def test_get_ancestors_terminates_on_cycle(self):
        self.store.add_entry(make_page('a', 'A', parent_id='b'))
        self.store.add_entry(make_page('b', 'B', parent_id='a'))
        ancestors = self.store.get_ancestors(self.store.get_entry('a'))
        self.assertEqual([entry.id for entry in ancestors], ['b'])

    def test_concurrent_readers(self):
        results = []

        def read():
            results.append([child.id for child in self.store.get_children('home')])

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(results, [['about']] * 8)

    def test_container_protocol(self):
        self.assertIn('home', self.store)
        self.assertNotIn('missing', self.store)
        self.assertEqual({entry.id for entry in self.store}, {'home', 'about', 'team'})


if __name__ == '__main__':
    unittest.main()
