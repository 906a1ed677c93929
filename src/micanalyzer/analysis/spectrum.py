"""
Magnitude spectrum and frequency band boundaries.
"""

import math
from dataclasses import dataclass

import numpy as np

from .complex_math import ComplexBuffer
from .fft import transform

LOW_BAND_MAX_HZ = 300.0
MID_BAND_MAX_HZ = 4000.0


@dataclass(frozen=True)
class BandBoundaries:
    """Bin indices splitting the spectrum into low / mid / high bands."""
    low_bin: int
    mid_bin: int
    spectrum_length: int

    @classmethod
    def from_resolution(cls, sample_rate: int, fft_size: int) -> "BandBoundaries":
        freq_per_bin = sample_rate / fft_size
        spectrum_length = fft_size // 2
        low_bin = math.floor(LOW_BAND_MAX_HZ / freq_per_bin)
        mid_bin = math.floor(MID_BAND_MAX_HZ / freq_per_bin)
        return cls(
            low_bin=min(max(low_bin, 0), spectrum_length),
            mid_bin=min(max(mid_bin, 0), spectrum_length),
            spectrum_length=spectrum_length,
        )


class SpectrumBuilder:
    """
    Runs the FFT over a window and reduces it to bin energies.

    No window function is applied (rectangular window). Energies are scaled
    by 1 / (fft_size / 2) so levels do not depend on the FFT size.
    """

    def __init__(self, fft_size: int):
        self.fft_size = fft_size
        self._buffer = ComplexBuffer(fft_size)
        self._spectrum = np.zeros(fft_size // 2, dtype=np.float32)

    @property
    def spectrum(self) -> np.ndarray:
        """Most recent magnitude spectrum (length fft_size / 2)."""
        return self._spectrum

    def build(self, fft_window: np.ndarray) -> np.ndarray:
        """Compute the magnitude spectrum of ``fft_window`` into the owned array."""
        if len(fft_window) != self.fft_size:
            raise ValueError(
                f"Expected {self.fft_size} samples, got {len(fft_window)}"
            )
        self._buffer.load_real(fft_window)
        transform(self._buffer, inverse=False)

        half = self.fft_size // 2
        self._spectrum[:] = self._buffer.power()[:half] / (self.fft_size / 2.0)
        return self._spectrum
