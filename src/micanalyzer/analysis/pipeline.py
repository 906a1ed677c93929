"""
Feature pipeline driven once per host frame.

Per tick:
- Copy the newest samples from the capture source into the RMS and FFT windows
- FFT the FFT window into a magnitude spectrum
- Measure RMS, peak and low/mid/high band energy
- Normalize loudness to 0..1 and turn band energies into shares
- Smooth all five channels and publish a new FeatureSnapshot

Single-threaded: ticks must not overlap. Reconfiguring replaces every buffer
and restarts smoothing.
"""

import logging
from dataclasses import replace
from typing import Optional

import numpy as np
from pydantic import ValidationError

from ..audio_capture.source import CaptureSource
from ..models.features import AnalyzerSettings, FeatureSnapshot
from .features import RawFeatures, extract_features
from .loudness import clamp01, normalize_loudness
from .smoothing import SmoothingState
from .spectrum import BandBoundaries, SpectrumBuilder
from .windows import CaptureWindows

logger = logging.getLogger(__name__)


class FeaturePipeline:
    """
    Live loudness and band energy analysis of a capture source.

    The host calls ``tick()`` at its own frame rate and reads the result
    with ``current_features()``.
    """

    def __init__(
        self,
        source: Optional[CaptureSource] = None,
        settings: Optional[AnalyzerSettings] = None,
    ):
        self._source = source
        self._settings: Optional[AnalyzerSettings] = None
        self._windows: Optional[CaptureWindows] = None
        self._spectrum_builder: Optional[SpectrumBuilder] = None
        self._bands: Optional[BandBoundaries] = None
        self._smoothing = SmoothingState()
        self._features = FeatureSnapshot()
        self._raw = RawFeatures()

        if settings is not None:
            self.apply_settings(settings)

    # ==================== Configuration ====================

    def configure(
        self,
        sample_rate: int = 44100,
        fft_size_hint: int = 256,
        rms_window_seconds: float = 0.1,
        silence_threshold: float = 0.001,
        smoothing_coefficient: float = 0.3,
    ) -> AnalyzerSettings:
        """
        Validate parameters and rebuild the pipeline for them.

        Raises:
            pydantic.ValidationError: If a parameter is out of range; the
                previous configuration is kept
        """
        try:
            settings = AnalyzerSettings(
                sample_rate=sample_rate,
                fft_size_hint=fft_size_hint,
                rms_window_seconds=rms_window_seconds,
                silence_threshold=silence_threshold,
                smoothing_coefficient=smoothing_coefficient,
            )
        except ValidationError as e:
            logger.warning("Rejected analyzer configuration: %s", e)
            raise
        self.apply_settings(settings)
        return settings

    def apply_settings(self, settings: AnalyzerSettings):
        """Reallocate all buffers for ``settings`` and reset smoothing."""
        windows = CaptureWindows(settings.rms_window_length, settings.fft_size)
        spectrum_builder = SpectrumBuilder(settings.fft_size)
        bands = BandBoundaries.from_resolution(settings.sample_rate, settings.fft_size)

        self._settings = settings
        self._windows = windows
        self._spectrum_builder = spectrum_builder
        self._bands = bands
        self._smoothing.reset()
        self._raw = RawFeatures()

        if settings.fft_size != settings.fft_size_hint:
            logger.info(
                "FFT size %d rounded up to %d", settings.fft_size_hint, settings.fft_size
            )
        logger.info(
            "Analyzer configured: rate=%d fft=%d rms_window=%d samples bands=(%d, %d)",
            settings.sample_rate, settings.fft_size, settings.rms_window_length,
            bands.low_bin, bands.mid_bin,
        )

    def attach_source(self, source: Optional[CaptureSource]):
        """Read from another capture source (or none) from the next tick on."""
        self._source = source

    # ==================== Per-frame update ====================

    def tick(self) -> FeatureSnapshot:
        """
        Advance one frame.

        Does nothing (the previous snapshot stays) when the pipeline is not
        configured, has no source, or the source is not ready.
        """
        if self._settings is None or self._source is None:
            return self._features

        if not self._windows.refresh(self._source):
            return self._features

        spectrum = self._spectrum_builder.build(self._windows.fft.data)
        raw = extract_features(self._windows.rms.data, spectrum, self._bands)
        self._raw = raw
        self._features = self._smooth(raw)
        return self._features

    def _smooth(self, raw: RawFeatures) -> FeatureSnapshot:
        alpha = self._settings.smoothing_coefficient
        state = self._smoothing

        rms = state.apply("normalized_rms", normalize_loudness(raw.rms), alpha)
        peak = state.apply("normalized_peak", normalize_loudness(raw.peak), alpha)

        if raw.is_silent(self._settings.silence_threshold):
            # Fade the bands out instead of dividing by ~0
            low, mid, high = 0.0, 0.0, 0.0
        else:
            low, mid, high = raw.band_ratios()

        low = state.apply("low_band", low, alpha)
        mid = state.apply("mid_band", mid, alpha)
        high = state.apply("high_band", high, alpha)

        return FeatureSnapshot(
            normalized_rms=clamp01(rms),
            normalized_peak=clamp01(peak),
            low_band_energy=clamp01(low),
            mid_band_energy=clamp01(mid),
            high_band_energy=clamp01(high),
        )

    # ==================== Accessors ====================

    def current_features(self) -> FeatureSnapshot:
        """Most recent features; unchanged between ticks."""
        return self._features

    def spectrum(self) -> np.ndarray:
        """Copy of the most recent magnitude spectrum (empty if unconfigured)."""
        if self._spectrum_builder is None:
            return np.zeros(0, dtype=np.float32)
        return self._spectrum_builder.spectrum.copy()

    @property
    def raw_features(self) -> RawFeatures:
        """Unsmoothed measurements of the last completed tick."""
        return self._raw

    @property
    def smoothing_state(self) -> SmoothingState:
        """Copy of the per-channel smoothing history."""
        return replace(self._smoothing)

    @property
    def settings(self) -> Optional[AnalyzerSettings]:
        return self._settings

    @property
    def source(self) -> Optional[CaptureSource]:
        return self._source

    @property
    def is_configured(self) -> bool:
        return self._settings is not None

    @property
    def fft_size(self) -> int:
        return self._settings.fft_size if self._settings else 0

    @property
    def rms_window_length(self) -> int:
        return self._settings.rms_window_length if self._settings else 0

    @property
    def spectrum_length(self) -> int:
        return self._settings.spectrum_length if self._settings else 0

    @property
    def freq_per_bin(self) -> float:
        return self._settings.freq_per_bin if self._settings else 0.0

    @property
    def band_boundaries(self) -> Optional[BandBoundaries]:
        return self._bands
