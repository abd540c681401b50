"""Tests for configuration module."""

import os
from unittest.mock import patch

from arena import config


class TestConfigHelpers:
    """Tests for configuration helper functions."""

    def test_get_int_default(self):
        """Default value when environment variable not set."""
        with patch.dict(os.environ, {}, clear=False):
            assert config._get_int('NONEXISTENT_VAR', 42) == 42

    def test_get_int_from_env(self):
        with patch.dict(os.environ, {'TEST_INT': '100'}, clear=False):
            assert config._get_int('TEST_INT', 42) == 100

    def test_get_int_invalid_value(self):
        """Non-integer values fall back to the default."""
        with patch.dict(os.environ, {'TEST_INT': 'not_a_number'}, clear=False):
            assert config._get_int('TEST_INT', 42) == 42

    def test_get_bool_true_variants(self):
        for value in ['true', 'True', '1', 'yes', 'YES']:
            with patch.dict(os.environ, {'TEST_BOOL': value}, clear=False):
                assert config._get_bool('TEST_BOOL', False) is True, f"Failed for value: {value}"

    def test_get_bool_false_variants(self):
        for value in ['false', '0', 'no', 'anything']:
            with patch.dict(os.environ, {'TEST_BOOL': value}, clear=False):
                assert config._get_bool('TEST_BOOL', True) is False, f"Failed for value: {value}"

    def test_get_str(self):
        with patch.dict(os.environ, {'TEST_STR': 'value'}, clear=False):
            assert config._get_str('TEST_STR', 'default') == 'value'
        assert config._get_str('NONEXISTENT_VAR', 'default') == 'default'


class TestDefaults:
    """Module-level settings."""

    def test_types(self):
        assert isinstance(config.PORT, int)
        assert isinstance(config.DATA_DIR, str)
        assert config.LOG_LEVEL == config.LOG_LEVEL.upper()
