"""Tests for configuration loading and validation."""

import argparse
import os
import tempfile
import unittest
from unittest import mock

from sites_liberation.config_loader import ConfigLoader, get_nested


def write_config(directory, text):
    path = os.path.join(directory, 'config.yaml')
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    return path


class TestConfigLoader(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def valid_config(self):
        config = ConfigLoader.defaults()
        config['site']['webspace'] = 'test'
        config['export']['output_directory'] = os.path.join(self.tmp.name, 'out')
        return config

    def test_load_merges_defaults(self):
        path = write_config(self.tmp.name, "site:\n  webspace: my-site\n")
        config = ConfigLoader.load(path)
        self.assertEqual(get_nested(config, 'site.webspace'), 'my-site')
        self.assertEqual(get_nested(config, 'site.host'), 'sites.google.com')
        self.assertEqual(get_nested(config, 'export.max_workers'), 4)

    def test_env_substitution(self):
        path = write_config(self.tmp.name, "auth:\n  token: ${SITES_TEST_TOKEN}\n")
        with mock.patch.dict(os.environ, {'SITES_TEST_TOKEN': 'secret'}):
            config = ConfigLoader.load(path)
        self.assertEqual(get_nested(config, 'auth.token'), 'secret')

    def test_unset_env_variable_fails_validation(self):
        config = self.valid_config()
        config['auth']['token'] = '${SITES_UNSET_TOKEN}'
        with self.assertRaises(ValueError):
            ConfigLoader.validate(config)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigLoader.load(os.path.join(self.tmp.name, 'absent.yaml'))

    def test_non_mapping_document(self):
        path = write_config(self.tmp.name, "- a\n- b\n")
        with self.assertRaises(ValueError):
            ConfigLoader.load(path)

    def test_valid_config(self):
        ConfigLoader.validate(self.valid_config())

    def test_webspace_required(self):
        with self.assertRaises(ValueError):
            ConfigLoader.validate(ConfigLoader.defaults())

    def test_host_must_be_bare(self):
        config = self.valid_config()
        config['site']['host'] = 'https://sites.google.com/'
        with self.assertRaises(ValueError):
            ConfigLoader.validate(config)

    def test_workers_must_be_positive(self):
        for workers in (0, -2, 'four', True):
            config = self.valid_config()
            config['export']['max_workers'] = workers
            with self.assertRaises(ValueError):
                ConfigLoader.validate(config)

    def test_page_size_must_be_positive(self):
        config = self.valid_config()
        config['advanced']['page_size'] = 0
        with self.assertRaises(ValueError):
            ConfigLoader.validate(config)

    def test_output_directory_may_not_be_a_file(self):
        config = self.valid_config()
        config['export']['output_directory'] = write_config(self.tmp.name, '')
        with self.assertRaises(ValueError):
            ConfigLoader.validate(config)

    def test_merge_with_args(self):
        args = argparse.Namespace(
            host=None, domain='example.com', webspace='cli-site', token=None,
            output_dir='/tmp/export', revisions=True, workers=8, log_file=None
        )
        merged = ConfigLoader.merge_with_args(self.valid_config(), args)
        self.assertEqual(get_nested(merged, 'site.host'), 'sites.google.com')
        self.assertEqual(get_nested(merged, 'site.domain'), 'example.com')
        self.assertEqual(get_nested(merged, 'site.webspace'), 'cli-site')
        self.assertEqual(get_nested(merged, 'export.output_directory'), '/tmp/export')
        self.assertTrue(get_nested(merged, 'export.export_revisions'))
        self.assertEqual(get_nested(merged, 'export.max_workers'), 8)

    def test_no_revisions_flag_overrides_file(self):
        config = self.valid_config()
        config['export']['export_revisions'] = True
        merged = ConfigLoader.merge_with_args(config, argparse.Namespace(revisions=False))
        self.assertFalse(get_nested(merged, 'export.export_revisions'))

    def test_get_nested_default(self):
        self.assertEqual(get_nested({'a': {'b': 1}}, 'a.c', 'x'), 'x')
        self.assertEqual(get_nested({'a': {'b': 1}}, 'a.b'), 1)


if __name__ == '__main__':
    unittest.main()
