"""
Raw (unsmoothed) loudness and band energy features.
"""

from dataclasses import dataclass

import numpy as np

from .spectrum import BandBoundaries


@dataclass
class RawFeatures:
    """Features of one tick before normalization and smoothing."""
    rms: float = 0.0
    peak: float = 0.0
    low_energy: float = 0.0
    mid_energy: float = 0.0
    high_energy: float = 0.0

    @property
    def total_energy(self) -> float:
        return self.low_energy + self.mid_energy + self.high_energy

    def is_silent(self, silence_threshold: float) -> bool:
        total = self.total_energy
        return total < silence_threshold or total <= 0.0

    def band_ratios(self) -> tuple[float, float, float]:
        """Share of each band in the total energy; call only when not silent."""
        total = self.total_energy
        return (
            self.low_energy / total,
            self.mid_energy / total,
            self.high_energy / total,
        )


def calculate_rms(samples: np.ndarray) -> float:
    if len(samples) == 0:
        return 0.0
    samples = samples.astype(np.float64)
    return float(np.sqrt(np.mean(samples * samples)))


def calculate_peak(samples: np.ndarray) -> float:
    if len(samples) == 0:
        return 0.0
    return float(np.max(np.abs(samples)))


def sum_spectrum(spectrum: np.ndarray, start: int, end: int) -> float:
    """Sum of bins [start, end), with end clamped to the spectrum length."""
    end = min(end, len(spectrum))
    if start >= end:
        return 0.0
    return float(np.sum(spectrum[start:end], dtype=np.float64))


def extract_features(
    rms_window: np.ndarray,
    spectrum: np.ndarray,
    bands: BandBoundaries,
) -> RawFeatures:
    """Compute RMS / peak of the loudness window and per-band spectrum sums."""
    return RawFeatures(
        rms=calculate_rms(rms_window),
        peak=calculate_peak(rms_window),
        low_energy=sum_spectrum(spectrum, 0, bands.low_bin),
        mid_energy=sum_spectrum(spectrum, bands.low_bin, bands.mid_bin),
        high_energy=sum_spectrum(spectrum, bands.mid_bin, len(spectrum)),
    )
