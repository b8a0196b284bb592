"""
Unit tests for bzrsource.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

import yaml

from bzrsource.config import (
    Config,
    load_config,
    save_config,
    get_config_path,
    coerce_value,
    get_default_config,
    merge_configs,
    set_config_value,
    setup_logging,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.original_home = os.environ.get('HOME')
        os.environ['HOME'] = self.temp_dir
        self.config_dir = Path(self.temp_dir) / '.bzrsource'

    def tearDown(self):
        """Clean up test environment"""
        if self.original_home:
            os.environ['HOME'] = self.original_home
        else:
            del os.environ['HOME']
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertIn('cache', config)
        self.assertIn('downloader', config)
        self.assertIn('process', config)
        self.assertIn('logging', config)
        self.assertFalse(config['downloader']['discard_changes'])
        self.assertEqual(config['downloader']['bzr_binary'], 'bzr')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config()

        self.assertEqual(config['downloader'], get_default_config()['downloader'])
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self.config_dir.mkdir()
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'downloader': {'discard_changes': True}, 'logging': {'level': 'DEBUG'}}, f)

        config = load_config()

        self.assertTrue(config['downloader']['discard_changes'])
        self.assertEqual(config['downloader']['bzr_binary'], 'bzr')
        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.toml').write_text(
            '[downloader]\ndiscard_changes = true\n\n[process]\ntimeout_seconds = 60\n'
        )

        config = load_config()

        self.assertTrue(config['downloader']['discard_changes'])
        self.assertEqual(config['process']['timeout_seconds'], 60)

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.yaml').write_text(
            yaml.safe_dump({'cache': {'enabled': False}})
        )

        config = load_config()

        self.assertFalse(config['cache']['enabled'])

    def test_config_path_from_environment(self):
        """Test BZRSOURCE_CONFIG points at an explicit file"""
        path = Path(self.temp_dir) / 'custom.json'
        path.write_text(json.dumps({'downloader': {'bzr_binary': 'brz'}}))

        with patch.dict(os.environ, {'BZRSOURCE_CONFIG': str(path)}):
            self.assertEqual(get_config_path(), path)
            self.assertEqual(load_config()['downloader']['bzr_binary'], 'brz')

    def test_broken_file_falls_back_to_defaults(self):
        """Test a corrupt config file does not prevent loading"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text('{not json')

        with self.assertLogs('bzrsource', level='ERROR'):
            config = load_config()

        self.assertEqual(config['downloader'], get_default_config()['downloader'])

    @patch.dict(os.environ, {'BZRSOURCE_DOWNLOADER_DISCARD_CHANGES': 'true'})
    def test_environment_override(self):
        """Test environment variable override"""
        config = load_config()

        self.assertTrue(config['downloader']['discard_changes'])

    @patch.dict(os.environ, {'BZRSOURCE_PROCESS_TIMEOUT_SECONDS': '42'})
    def test_environment_override_int(self):
        """Test numeric environment values are coerced"""
        self.assertEqual(load_config()['process']['timeout_seconds'], 42)

    @patch.dict(os.environ, {'BZRSOURCE_UNKNOWN_SETTING': 'x'})
    def test_unknown_environment_variable_is_ignored(self):
        """Test unknown keys do not create new sections"""
        self.assertNotIn('unknown', load_config())

    def test_save_config_round_trip(self):
        """Test saving and reloading a configuration"""
        config = get_default_config()
        config['downloader']['discard_changes'] = True

        save_config(config)

        self.assertTrue((self.config_dir / 'config.json').exists())
        self.assertTrue(load_config()['downloader']['discard_changes'])

    def test_merge_configs(self):
        """Test nested merge keeps untouched keys"""
        merged = merge_configs({'a': {'b': 1, 'c': 2}, 'd': 3}, {'a': {'b': 10}})

        self.assertEqual(merged, {'a': {'b': 10, 'c': 2}, 'd': 3})


class TestConfigLookup(unittest.TestCase):
    """Test the dashed-key Config wrapper"""

    def test_dashed_keys(self):
        config = Config(merge_configs(get_default_config(), {
            'downloader': {'discard_changes': True},
            'process': {'timeout_seconds': 10},
        }))

        self.assertTrue(config.get('discard-changes'))
        self.assertEqual(config.get('bzr-binary'), 'bzr')
        self.assertEqual(config.get('process-timeout'), 10)
        self.assertTrue(config.get('cache-enabled'))

    def test_directories_are_expanded(self):
        config = Config({'cache': {'repo_dir': '~/cache'}})

        self.assertEqual(config.get('cache-repo-dir'), str(Path('~/cache').expanduser()))

    def test_missing_values_use_default(self):
        config = Config({})

        self.assertIsNone(config.get('discard-changes'))
        self.assertEqual(config.get('bzr-binary', 'bzr'), 'bzr')
        self.assertEqual(config.get('other', 'x'), 'x')

    def test_merge(self):
        config = Config()
        config.merge({'downloader': {'discard_changes': True}})

        self.assertTrue(config.get('discard-changes'))
        self.assertEqual(config.get('bzr-binary'), 'bzr')

    def test_set_config_value(self):
        data = set_config_value(get_default_config(), 'discard-changes', 'true')
        set_config_value(data, 'process-timeout', '600')
        set_config_value(data, 'bzr-binary', '/opt/breezy/brz')

        config = Config(data)
        self.assertIs(config.get('discard-changes'), True)
        self.assertEqual(config.get('process-timeout'), 600)
        self.assertEqual(config.get('bzr-binary'), '/opt/breezy/brz')

    def test_set_unknown_key(self):
        with self.assertRaises(KeyError):
            set_config_value({}, 'no-such-key', 'x')

    def test_coerce_value(self):
        self.assertIs(coerce_value('Yes'), True)
        self.assertIs(coerce_value('off'), False)
        self.assertEqual(coerce_value('42'), 42)
        self.assertEqual(coerce_value('brz'), 'brz')


class TestSetupLogging(unittest.TestCase):
    """Test logger configuration"""

    def tearDown(self):
        logger = logging.getLogger('bzrsource')
        logger.handlers = []
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def test_level_from_config(self):
        setup_logging({'logging': {'level': 'INFO', 'format': '%(message)s'}})

        logger = logging.getLogger('bzrsource')
        self.assertEqual(logger.level, logging.INFO)
        self.assertEqual(len(logger.handlers), 1)

    def test_verbose_forces_debug(self):
        setup_logging(get_default_config(), verbose=True)

        self.assertEqual(logging.getLogger('bzrsource').level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
