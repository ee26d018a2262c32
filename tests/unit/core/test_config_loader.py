"""Unit tests for ConfigLoader."""

import pytest

from camera_controls.core.config_loader import ConfigLoader


class TestConfigLoaderParsing:
    """Untyped value parsing."""

    def test_parse_value_bool(self):
        for val in ['true', 'Yes', 'ON', '1']:
            assert ConfigLoader._parse_value(val) is True
        for val in ['false', 'No', 'OFF', '0']:
            assert ConfigLoader._parse_value(val) is False

    def test_parse_value_numbers(self):
        assert ConfigLoader._parse_value('100') == 100
        assert ConfigLoader._parse_value('2.5') == pytest.approx(2.5)

    def test_parse_value_string(self):
        assert ConfigLoader._parse_value('/dev/video2') == '/dev/video2'
        assert ConfigLoader._parse_value('v4l2-ctl') == 'v4l2-ctl'


class TestConfigLoaderTypedParsing:
    """Parsing against the type of a default."""

    def test_int_accepts_prefixed_literals(self):
        assert ConfigLoader._parse_value_with_type('250', int) == 250
        assert ConfigLoader._parse_value_with_type('0x10', int) == 16

    def test_invalid_int_and_float_become_zero(self):
        assert ConfigLoader._parse_value_with_type('soon', int) == 0
        assert ConfigLoader._parse_value_with_type('later', float) == 0.0

    def test_string_default_keeps_text(self):
        # "1" stays a string when the default is a string
        assert ConfigLoader._parse_value_with_type('1', str) == '1'


class TestConfigLoaderLoad:
    """ConfigLoader.load against files on disk."""

    def test_missing_file_returns_defaults(self, tmp_path):
        defaults = {'device.path': '/dev/video0'}

        assert ConfigLoader.load(tmp_path / "missing.txt", defaults) == defaults

    def test_missing_file_without_defaults(self, tmp_path):
        assert ConfigLoader.load(tmp_path / "missing.txt") == {}

    def test_comments_and_inline_comments(self, tmp_path):
        config_path = tmp_path / "config.txt"
        config_path.write_text("# camera\ndevice.path = /dev/video2  # the usb one\n")

        result = ConfigLoader.load(config_path)

        assert result['device.path'] == '/dev/video2'

    def test_invalid_lines_are_skipped(self, tmp_path):
        config_path = tmp_path / "config.txt"
        config_path.write_text("device.path=/dev/video1\nnot a setting\nui.debounce_ms=50\n")

        result = ConfigLoader.load(config_path)

        assert result == {'device.path': '/dev/video1', 'ui.debounce_ms': 50}

    def test_strict_mode_drops_unknown_keys(self, tmp_path):
        config_path = tmp_path / "config.txt"
        config_path.write_text("device.path=/dev/video1\npreview.fps=5\n")

        result = ConfigLoader.load(config_path, {'device.path': '/dev/video0'}, strict=True)

        assert result == {'device.path': '/dev/video1'}

    def test_types_follow_defaults(self, tmp_path):
        config_path = tmp_path / "config.txt"
        config_path.write_text("v4l2.timeout_s=3\nui.debounce_ms=75\ndevice.path=1\n")
        defaults = {'v4l2.timeout_s': 2.0, 'ui.debounce_ms': 100, 'device.path': '/dev/video0'}

        result = ConfigLoader.load(config_path, defaults)

        assert result['v4l2.timeout_s'] == pytest.approx(3.0)
        assert isinstance(result['v4l2.timeout_s'], float)
        assert result['ui.debounce_ms'] == 75
        assert result['device.path'] == '1'

    def test_empty_value(self, tmp_path):
        config_path = tmp_path / "config.txt"
        config_path.write_text("ui.geometry =\n")

        result = ConfigLoader.load(config_path, {'ui.geometry': ''})

        assert result['ui.geometry'] == ''
