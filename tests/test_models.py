"""Tests for entry kinds and export jobs."""

import unittest

from sites_liberation.models import (
    Entry,
    EntryType,
    ExportJob,
    JobKind,
    _PAGE_KINDS,
)


class TestEntryType(unittest.TestCase):
    def test_every_kind_is_classified(self):
        """Adding a kind without deciding whether it is a page must fail here."""
        self.assertEqual(set(_PAGE_KINDS), set(EntryType))

    def test_page_kinds(self):
        pages = {kind for kind in EntryType if kind.is_page}
        self.assertEqual(pages, {
            EntryType.WEB_PAGE,
            EntryType.FILE_CABINET_PAGE,
            EntryType.ANNOUNCEMENTS_PAGE,
            EntryType.LIST_PAGE,
            EntryType.ANNOUNCEMENT,
        })

    def test_from_kind_full_term(self):
        term = 'http://schemas.google.com/sites/2008#filecabinet'
        self.assertIs(EntryType.from_kind(term), EntryType.FILE_CABINET_PAGE)

    def test_from_kind_round_trips_kind_term(self):
        for kind in EntryType:
            self.assertIs(EntryType.from_kind(kind.kind_term), kind)

    def test_from_kind_unknown(self):
        self.assertIs(EntryType.from_kind('http://example.com#gadget'), EntryType.OTHER)
        self.assertIs(EntryType.from_kind(None), EntryType.OTHER)


class TestEntry(unittest.TestCase):
    def test_equality_uses_id_and_revision(self):
        first = Entry(id='1', entry_type=EntryType.WEB_PAGE, title='A', revision=2)
        second = Entry(id='1', entry_type=EntryType.WEB_PAGE, title='B', revision=2)
        newer = Entry(id='1', entry_type=EntryType.WEB_PAGE, title='A', revision=3)
        self.assertEqual(first, second)
        self.assertNotEqual(first, newer)
        self.assertEqual(len({first, second}), 1)

    def test_to_dict(self):
        entry = Entry(id='1', entry_type=EntryType.COMMENT, fields={'a': 'b'})
        data = entry.to_dict()
        self.assertEqual(data['entry_type'], 'comment')
        self.assertIsNone(data['updated'])
        self.assertEqual(data['fields'], {'a': 'b'})


class TestExportJob(unittest.TestCase):
    def test_page_job(self):
        job = ExportJob.for_entry(Entry(id='p', entry_type=EntryType.LIST_PAGE, title='List'))
        self.assertEqual(job, ExportJob(JobKind.EXPORT_PAGE, 'p', 'List'))

    def test_attachment_job(self):
        job = ExportJob.for_entry(Entry(id='f', entry_type=EntryType.ATTACHMENT))
        self.assertIs(job.kind, JobKind.DOWNLOAD_ATTACHMENT)

    def test_comment_is_not_a_job(self):
        with self.assertRaises(ValueError):
            ExportJob.for_entry(Entry(id='c', entry_type=EntryType.COMMENT))


if __name__ == '__main__':
    unittest.main()
