"""Tests for the command line entry point."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sites_liberation import export
from sites_liberation.exceptions import FetcherError

from helpers import FakeClient, FakeFeedProvider, make_page


class TestExportCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.output = os.path.join(self.tmp.name, 'out')

    def run_cli(self, provider, *extra):
        argv = ['--config', self.write_config(), '--output-dir', self.output, *extra]
        with mock.patch.object(export.FeedProviderFactory, 'create_provider', return_value=provider), \
                mock.patch.object(export.SitesClient, 'from_config', return_value=FakeClient()):
            return export.main(argv)

    def write_config(self):
        path = os.path.join(self.tmp.name, 'config.yaml')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("site:\n  webspace: test\nexport:\n  progress_bars: false\n")
        return path

    def test_successful_export(self):
        exit_code = self.run_cli(FakeFeedProvider([make_page('home', 'Home')]), '--workers', '2')
        self.assertEqual(exit_code, 0)
        self.assertTrue((Path(self.output) / 'Home' / 'index.html').is_file())

    def test_feed_failure_exits_with_error(self):
        provider = FakeFeedProvider([], error=FetcherError('unreachable'))
        self.assertEqual(self.run_cli(provider), 1)

    def test_missing_explicit_config(self):
        missing = os.path.join(self.tmp.name, 'absent.yaml')
        self.assertEqual(export.main(['--config', missing]), 1)

    def test_invalid_worker_count(self):
        self.assertEqual(self.run_cli(FakeFeedProvider([]), '--workers', '0'), 1)

    def test_version(self):
        with self.assertRaises(SystemExit) as ctx, mock.patch('sys.stdout'):
            export.main(['--version'])
        self.assertEqual(ctx.exception.code, 0)


if __name__ == '__main__':
    unittest.main()
