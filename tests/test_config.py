"""
Tests for SpecimenConfig.

Run with: pytest tests/test_config.py -v
"""

import pytest

from specimen.config import DEFAULTS, ConfigError, SpecimenConfig, createFilename


class TestDefaults:
    """Test values used without a configuration file."""

    def test_defaults(self):
        config = SpecimenConfig()
        assert config.filename is None
        assert config.synthesis_counter_start == 1
        assert config.synthesis_text_prefix == "sampleValue"
        assert config.synthesis_bytes_prefix == "sample byte data"
        assert config.tempfile_prefix == "tempFileForCheck"
        assert config.tempfile_suffix == ".zip"
        assert config.filters_config == ""
        assert config.filters_mode == "blacklist"
        assert config.filters_verbose is False

    def test_missing_file(self, tmp_path):
        config = SpecimenConfig(configdir=str(tmp_path), read=True)
        assert config.filename == str(tmp_path / "specimen.conf")
        assert config.synthesis_text_prefix == DEFAULTS["synthesis_text_prefix"]


class TestReadConfig:
    """Test reading a configuration file."""

    def test_read_values(self, tmp_path):
        (tmp_path / "custom.conf").write_text(
            "[synthesis]\n"
            "counter_start = 100\n"
            "text_prefix = fixture\n"
            "\n"
            "[filters]\n"
            "config = /etc/specimen/filters.toml\n"
            "mode = whitelist\n"
            "verbose = yes\n"
        )
        config = SpecimenConfig("custom.conf", str(tmp_path), read=True)
        assert config.synthesis_counter_start == 100
        assert config.synthesis_text_prefix == "fixture"
        assert config.synthesis_bytes_prefix == "sample byte data"
        assert config.filters_config == "/etc/specimen/filters.toml"
        assert config.filters_mode == "whitelist"
        assert config.filters_verbose is True

    def test_invalid_integer(self, tmp_path):
        (tmp_path / "specimen.conf").write_text("[synthesis]\ncounter_start = one\n")
        with pytest.raises(ConfigError, match="counter_start"):
            SpecimenConfig(configdir=str(tmp_path), read=True)

    def test_invalid_boolean(self, tmp_path):
        (tmp_path / "specimen.conf").write_text("[filters]\nverbose = maybe\n")
        with pytest.raises(ConfigError):
            SpecimenConfig(configdir=str(tmp_path), read=True)

    def test_getfloat(self, tmp_path):
        (tmp_path / "specimen.conf").write_text("[extra]\nratio = 0.5\n")
        config = SpecimenConfig(configdir=str(tmp_path), read=True)
        assert config.getfloat("extra", "ratio", 1.0) == 0.5
        assert config.getfloat("extra", "missing", 1.0) == 1.0


class TestCreateFilename:
    """Test configuration file location."""

    def test_explicit_directory(self, tmp_path):
        assert createFilename("a.conf", str(tmp_path)) == str(tmp_path / "a.conf")

    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert createFilename() == str(tmp_path / "specimen.conf")

    def test_home_fallback(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", "/home/tester")
        assert createFilename() == "/home/tester/.config/specimen.conf"

    def test_no_home(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("HOME", raising=False)
        with pytest.raises(ConfigError):
            createFilename()


class TestSampleConfig:
    """Test writing the default configuration."""

    def test_render(self):
        text = SpecimenConfig().write_sample_config()
        assert "[synthesis]" in text
        assert "text_prefix = sampleValue" in text
        assert "# Prefix of synthesized strings" in text
        assert "[tempfile]" in text
        assert "[filters]" in text

    def test_write_and_read_back(self, tmp_path):
        filename = tmp_path / "specimen.conf"
        SpecimenConfig().write_sample_config(str(filename))
        config = SpecimenConfig(configdir=str(tmp_path), read=True)
        assert config.synthesis_bytes_prefix == "sample byte data"
        assert config.tempfile_suffix == ".zip"
        assert config.filters_verbose is False

    def test_existing_file(self, tmp_path):
        filename = tmp_path / "specimen.conf"
        filename.write_text("")
        with pytest.raises(ConfigError):
            SpecimenConfig().write_sample_config(str(filename))
