"""
Tests for the spectrum builder and raw feature extraction.
"""

import numpy as np
import pytest

from micanalyzer.analysis.features import (
    RawFeatures,
    calculate_peak,
    calculate_rms,
    extract_features,
    sum_spectrum,
)
from micanalyzer.analysis.spectrum import BandBoundaries, SpectrumBuilder


class TestLoudnessMeasures:
    """Test cases for RMS and peak."""

    def test_rms_of_constant(self):
        assert calculate_rms(np.full(100, 0.5, dtype=np.float32)) == pytest.approx(0.5)

    def test_rms_of_sine(self):
        """Test that a full-period sine has RMS amplitude / sqrt(2)."""
        sr = 44100
        t = np.arange(4410) / sr
        y = (0.5 * np.sin(2 * np.pi * 1000 * t)).astype(np.float32)

        assert calculate_rms(y) == pytest.approx(0.5 / np.sqrt(2), rel=1e-4)

    def test_peak_uses_absolute_value(self):
        assert calculate_peak(np.array([0.1, -0.7, 0.3], dtype=np.float32)) == pytest.approx(0.7)

    def test_empty_window(self):
        assert calculate_rms(np.zeros(0)) == 0.0
        assert calculate_peak(np.zeros(0)) == 0.0


class TestSumSpectrum:
    """Test cases for band sums."""

    def test_sum_range(self):
        spectrum = np.arange(8, dtype=np.float32)
        assert sum_spectrum(spectrum, 2, 5) == pytest.approx(2 + 3 + 4)

    def test_end_is_clamped(self):
        """Test that an end index past the spectrum is clamped."""
        spectrum = np.ones(8, dtype=np.float32)
        assert sum_spectrum(spectrum, 4, 100) == pytest.approx(4.0)

    def test_empty_range(self):
        spectrum = np.ones(8, dtype=np.float32)
        assert sum_spectrum(spectrum, 8, 20) == 0.0
        assert sum_spectrum(spectrum, 3, 3) == 0.0


class TestBandBoundaries:
    """Test cases for band bin indices."""

    def test_default_resolution(self):
        """Test bins for 44.1 kHz / 256 (172 Hz per bin)."""
        bands = BandBoundaries.from_resolution(44100, 256)

        assert bands.low_bin == 1
        assert bands.mid_bin == 23
        assert bands.spectrum_length == 128

    def test_clamped_to_spectrum_length(self):
        """Test that boundaries beyond the spectrum are clamped."""
        bands = BandBoundaries.from_resolution(1000, 8)  # 125 Hz per bin

        assert bands.low_bin == 2
        assert bands.mid_bin == 4
        assert bands.spectrum_length == 4

    def test_fine_resolution(self):
        bands = BandBoundaries.from_resolution(48000, 4096)  # 11.72 Hz per bin

        assert bands.low_bin == 25
        assert bands.mid_bin == 341


class TestSpectrumBuilder:
    """Test cases for SpectrumBuilder."""

    def test_spectrum_length(self):
        builder = SpectrumBuilder(256)
        spectrum = builder.build(np.zeros(256, dtype=np.float32))

        assert len(spectrum) == 128
        assert np.all(spectrum == 0)

    def test_dc_scaling(self):
        """Test the 1 / (n / 2) energy scaling on a constant signal."""
        n = 64
        builder = SpectrumBuilder(n)
        spectrum = builder.build(np.ones(n, dtype=np.float32))

        # |X[0]|^2 = n^2, divided by n / 2
        assert spectrum[0] == pytest.approx(2 * n)
        np.testing.assert_allclose(spectrum[1:], 0, atol=1e-6)

    def test_non_negative(self):
        rng = np.random.default_rng(3)
        builder = SpectrumBuilder(128)
        spectrum = builder.build(rng.standard_normal(128).astype(np.float32))

        assert np.all(spectrum >= 0)

    def test_sine_bin(self):
        """Test that a 1 kHz tone lands in the expected bin."""
        sr, n = 44100, 1024
        t = np.arange(n) / sr
        builder = SpectrumBuilder(n)
        spectrum = builder.build(np.sin(2 * np.pi * 1000 * t).astype(np.float32))

        expected_bin = 1000 / (sr / n)  # ~23.2
        assert abs(int(np.argmax(spectrum)) - expected_bin) <= 1

    def test_wrong_length_rejected(self):
        builder = SpectrumBuilder(64)
        with pytest.raises(ValueError):
            builder.build(np.zeros(32, dtype=np.float32))


class TestExtractFeatures:
    """Test cases for extract_features and RawFeatures."""

    @pytest.fixture
    def bands(self):
        return BandBoundaries(low_bin=2, mid_bin=5, spectrum_length=8)

    def test_band_sums(self, bands):
        spectrum = np.array([1, 1, 2, 2, 2, 3, 3, 3], dtype=np.float32)
        raw = extract_features(np.zeros(10, dtype=np.float32), spectrum, bands)

        assert raw.low_energy == pytest.approx(2.0)
        assert raw.mid_energy == pytest.approx(6.0)
        assert raw.high_energy == pytest.approx(9.0)
        assert raw.total_energy == pytest.approx(17.0)

    def test_ratios_sum_to_one(self, bands):
        """Test that band ratios of a non-silent spectrum sum to 1."""
        rng = np.random.default_rng(11)
        for _ in range(20):
            spectrum = rng.random(8).astype(np.float32)
            raw = extract_features(np.zeros(4, dtype=np.float32), spectrum, bands)

            assert sum(raw.band_ratios()) == pytest.approx(1.0)

    def test_silence(self, bands):
        raw = RawFeatures(low_energy=0.0001, mid_energy=0.0002, high_energy=0.0)

        assert raw.is_silent(0.001)
        assert not raw.is_silent(0.0001)

    def test_loudness_from_rms_window(self, bands):
        window = np.array([0.5, -0.5, 0.5, -0.5], dtype=np.float32)
        raw = extract_features(window, np.zeros(8, dtype=np.float32), bands)

        assert raw.rms == pytest.approx(0.5)
        assert raw.peak == pytest.approx(0.5)

    def test_zero_energy_is_silent_even_without_threshold(self):
        assert RawFeatures().is_silent(0.0)
