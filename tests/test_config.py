"""
Tests for settings persistence, models and the console helpers.
"""

import json

import pytest
from pydantic import ValidationError

from micanalyzer.analysis.fft import next_power_of_two
from micanalyzer.config import Config, HOME_ENV_VAR
from micanalyzer.logging_utils import configure_logging, get_log_level, set_log_level
from micanalyzer.main import build_parser, format_bar, format_snapshot, resolve_settings
from micanalyzer.models.features import MIN_FFT_SIZE, AnalyzerSettings, FeatureSnapshot


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point Config at a temporary directory and drop the cached instance."""
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
    Config.reset_instance()
    yield tmp_path
    Config.reset_instance()


class TestConfig:
    """Test cases for Config."""

    def test_defaults(self, config_home):
        config = Config()

        assert config.analyzer_settings == AnalyzerSettings()
        assert config.microphone_index == 0
        assert config.max_record_seconds == 10.0
        assert config.log_level == "INFO"

    def test_singleton(self, config_home):
        assert Config() is Config()

    def test_settings_round_trip_through_disk(self, config_home):
        config = Config()
        config.analyzer_settings = AnalyzerSettings(fft_size_hint=1024, smoothing_coefficient=0.5)
        config.microphone_index = 2

        Config.reset_instance()
        reloaded = Config()

        assert reloaded.analyzer_settings.fft_size == 1024
        assert reloaded.analyzer_settings.smoothing_coefficient == 0.5
        assert reloaded.microphone_index == 2
        assert (config_home / "settings.json").exists()

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]", "42", "null"])
    def test_corrupt_file_uses_defaults(self, config_home, payload):
        (config_home / "settings.json").write_text(payload, encoding="utf-8")

        config = Config()
        assert config.analyzer_settings == AnalyzerSettings()
        assert config.microphone_index == 0

    def test_invalid_stored_scalars_use_defaults(self, config_home):
        data = {"microphone_index": "usb", "max_record_seconds": [5]}
        (config_home / "settings.json").write_text(json.dumps(data), encoding="utf-8")

        config = Config()
        assert config.microphone_index == 0
        assert config.max_record_seconds == 10.0

    def test_invalid_stored_settings_use_defaults(self, config_home):
        data = {"analyzer": {"sample_rate": -1}}
        (config_home / "settings.json").write_text(json.dumps(data), encoding="utf-8")

        assert Config().analyzer_settings == AnalyzerSettings()


class TestAnalyzerSettings:
    """Test cases for AnalyzerSettings derived values."""

    def test_derived_sizes(self):
        settings = AnalyzerSettings(sample_rate=48000, fft_size_hint=300, rms_window_seconds=0.05)

        assert settings.fft_size == 512
        assert settings.spectrum_length == 256
        assert settings.rms_window_length == 2400
        assert settings.freq_per_bin == pytest.approx(93.75)

    def test_fft_size_follows_power_of_two_helper(self):
        for hint in (1, 2, 3, 200, 256, 257, 1000, 4096):
            settings = AnalyzerSettings(fft_size_hint=hint)
            assert settings.fft_size == max(MIN_FFT_SIZE, next_power_of_two(hint))

    def test_frozen(self):
        settings = AnalyzerSettings()
        with pytest.raises(ValidationError):
            settings.sample_rate = 8000

    def test_snapshot_range_enforced(self):
        with pytest.raises(ValidationError):
            FeatureSnapshot(normalized_rms=1.5)


class TestConsole:
    """Test cases for the console helpers."""

    def test_format_bar(self):
        assert format_bar(0.0, 4) == "----"
        assert format_bar(0.5, 4) == "##--"
        assert format_bar(1.0, 4) == "####"

    def test_format_snapshot_lists_channels(self):
        line = format_snapshot(FeatureSnapshot(normalized_rms=0.5, mid_band_energy=1.0))

        for label in ("RMS", "Peak", "Low", "Mid", "High"):
            assert label in line
        assert "0.50" in line

    def test_options_override_stored_settings(self):
        args = build_parser().parse_args(["--fft-size", "1000", "--smoothing", "0.6"])
        stored = AnalyzerSettings(sample_rate=48000)

        settings = resolve_settings(args, stored)

        assert settings.sample_rate == 48000
        assert settings.fft_size == 1024
        assert settings.smoothing_coefficient == 0.6

    def test_invalid_option_rejected(self):
        args = build_parser().parse_args(["--smoothing", "1.5"])
        with pytest.raises(ValueError):
            resolve_settings(args, AnalyzerSettings())


class TestLogging:
    """Test cases for logging_utils."""

    def test_level_round_trip(self):
        configure_logging("WARNING")
        assert get_log_level() == "WARNING"

        set_log_level("debug")
        assert get_log_level() == "DEBUG"

        set_log_level("INFO")
