"""
Synthetic capture source that plays back a known waveform.

Stands in for the microphone in offline runs and tests: each call to
``advance`` writes the next block of the waveform into a ring buffer, the
way the capture thread would.
"""

from typing import Callable

import numpy as np

from .ring_buffer import RingBuffer

# Maps sample times in seconds to sample values
Waveform = Callable[[np.ndarray], np.ndarray]


def sine(frequency: float, amplitude: float = 1.0, phase: float = 0.0) -> Waveform:
    """Pure sine tone."""
    def waveform(t: np.ndarray) -> np.ndarray:
        return amplitude * np.sin(2 * np.pi * frequency * t + phase)
    return waveform


def silence() -> Waveform:
    def waveform(t: np.ndarray) -> np.ndarray:
        return np.zeros_like(t)
    return waveform


class SyntheticSource:
    """Ring buffer fed from a waveform function instead of a device."""

    def __init__(
        self,
        waveform: Waveform,
        sample_rate: int = 44100,
        ring_seconds: float = 10.0,
    ):
        self.sample_rate = sample_rate
        self._waveform = waveform
        self._buffer = RingBuffer(max_duration_seconds=ring_seconds, sample_rate=sample_rate)
        self._sample_index = 0

    def set_waveform(self, waveform: Waveform):
        """Switch the signal; time keeps running."""
        self._waveform = waveform

    def advance(self, n_samples: int):
        """Generate and write the next ``n_samples`` samples."""
        t = (self._sample_index + np.arange(n_samples)) / self.sample_rate
        self._buffer.write(self._waveform(t).astype(np.float32))
        self._sample_index += n_samples

    def advance_seconds(self, seconds: float):
        self.advance(int(round(seconds * self.sample_rate)))

    @property
    def samples_written(self) -> int:
        return self._sample_index

    @property
    def buffer(self) -> RingBuffer:
        return self._buffer

    def current_write_position(self) -> int:
        return self._buffer.current_write_position()

    def ring_length(self) -> int:
        return self._buffer.ring_length()

    def read_slice(self, start: int, length: int) -> np.ndarray:
        return self._buffer.read_slice(start, length)
