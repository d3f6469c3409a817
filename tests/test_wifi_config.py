#!/usr/bin/env python3
"""Unit tests for wofi-wifi configuration loading."""

import os
import sys
import tempfile
import textwrap
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(__file__))
from test_helpers import setup_wofi_wifi_imports

setup_wofi_wifi_imports()

from wofi_wifi.config import (
    Configuration,
    DEFAULT_FIELDS,
    config_paths,
    load_config,
    parse_config,
)


class TestDefaults(unittest.TestCase):

    def test_default_values(self):
        config = Configuration()
        self.assertEqual(config.fields, 'SSID,SECURITY')
        self.assertEqual(config.position, 0)
        self.assertEqual(config.xoff, 0)
        self.assertEqual(config.yoff, 0)
        self.assertEqual(config.rescan, 'no')
        self.assertFalse(config.use_saved_profiles)
        self.assertEqual(dict(config.extras), {})

    def test_immutable(self):
        config = Configuration()
        with self.assertRaises(AttributeError):
            config.position = 3
        with self.assertRaises(TypeError):
            config.extras['X'] = '1'


class TestParseConfig(unittest.TestCase):

    def test_known_keys(self):
        config = parse_config([
            'FIELDS=SSID,SECURITY,BARS\n',
            'POSITION=3\n',
            'XOFF = 12\n',
            'YOFF=-4\n',
            'RESCAN=Auto\n',
            'USE_SAVED_PROFILES=yes\n',
        ])
        self.assertEqual(config.fields, 'SSID,SECURITY,BARS')
        self.assertEqual(config.position, 3)
        self.assertEqual(config.xoff, 12)
        self.assertEqual(config.yoff, -4)
        self.assertEqual(config.rescan, 'auto')
        self.assertTrue(config.use_saved_profiles)

    def test_comments_blank_and_malformed_lines(self):
        config = parse_config([
            '# POSITION=5\n',
            '   # indented comment\n',
            '\n',
            'no equals sign here\n',
            '=orphan value\n',
            'EMPTY=\n',
            'POSITION=2\n',
        ])
        self.assertEqual(config.position, 2)
        self.assertEqual(dict(config.extras), {})

    def test_value_keeps_later_equals(self):
        config = parse_config(['TERM_CMD=foot -e nmtui --opt=a\n'])
        self.assertEqual(config.extras['TERM_CMD'], 'foot -e nmtui --opt=a')

    def test_unknown_keys_pass_through(self):
        config = parse_config(['THEME=nord\n', 'LINES=12\n'])
        self.assertEqual(dict(config.extras), {'THEME': 'nord', 'LINES': '12'})

    def test_invalid_numbers_revert_to_default(self):
        config = parse_config(['POSITION=left\n', 'XOFF=1.5\n', 'YOFF=\x00\n'])
        self.assertEqual(config.position, 0)
        self.assertEqual(config.xoff, 0)
        self.assertEqual(config.yoff, 0)

    def test_later_line_wins(self):
        config = parse_config(['POSITION=1\n', 'POSITION=7\n'])
        self.assertEqual(config.position, 7)

    def test_boolean_false_values(self):
        for value in ('no', 'false', '0', 'off', 'maybe'):
            with self.subTest(value=value):
                config = parse_config([f'USE_SAVED_PROFILES={value}\n'])
                self.assertFalse(config.use_saved_profiles)


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, content):
        path = os.path.join(self.tmpdir, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w') as f:
            f.write(textwrap.dedent(content))
        return path

    def test_no_file_gives_defaults(self):
        missing = [os.path.join(self.tmpdir, 'a'), os.path.join(self.tmpdir, 'b')]
        self.assertEqual(load_config(missing), Configuration())

    def test_first_existing_file_wins(self):
        local = self._write('config', """\
            POSITION=3
            FIELDS=SSID
        """)
        user = self._write('xdg/wofi/wifi', """\
            POSITION=8
            XOFF=40
        """)
        config = load_config([local, user])
        self.assertEqual(config.position, 3)
        self.assertEqual(config.fields, 'SSID')
        self.assertEqual(config.xoff, 0)

    def test_falls_through_to_second_path(self):
        user = self._write('xdg/wofi/wifi', "POSITION=8\n")
        config = load_config([os.path.join(self.tmpdir, 'config'), user])
        self.assertEqual(config.position, 8)
        self.assertEqual(config.fields, DEFAULT_FIELDS)

    def test_directory_is_skipped(self):
        os.makedirs(os.path.join(self.tmpdir, 'config'))
        user = self._write('user', "POSITION=4\n")
        config = load_config([os.path.join(self.tmpdir, 'config'), user])
        self.assertEqual(config.position, 4)

    @patch('wofi_wifi.config.open', side_effect=PermissionError('denied'), create=True)
    def test_unreadable_file_is_skipped(self, mock_open):
        local = self._write('config', "POSITION=3\n")
        self.assertEqual(load_config([local]), Configuration())


class TestConfigPaths(unittest.TestCase):

    @patch('wofi_wifi.config.os.getcwd', return_value='/work')
    @patch('wofi_wifi.config.GLib')
    def test_search_order(self, mock_glib, mock_cwd):
        mock_glib.get_user_config_dir.return_value = '/home/u/.config'
        self.assertEqual(config_paths(), [
            '/work/config',
            '/home/u/.config/wofi/wifi',
        ])


if __name__ == '__main__':
    unittest.main()
