"""
Sliding sample windows over the capture ring.

Every tick the newest samples of the ring are copied into two fixed-size
windows: a short one for loudness (RMS / peak) and a power-of-two one for
the FFT.
"""

import logging

import numpy as np

from ..audio_capture.source import CaptureSource

logger = logging.getLogger(__name__)


class SampleWindow:
    """Fixed-length window of float32 samples, refreshed in place."""

    def __init__(self, length: int):
        if length <= 0:
            raise ValueError(f"Window length must be positive, got {length}")
        self._data = np.zeros(length, dtype=np.float32)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> np.ndarray:
        """Current contents (read-only view)."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    @staticmethod
    def start_index(write_pos: int, length: int, ring_length: int) -> int:
        """Ring index of the oldest sample in a window ending at write_pos."""
        return (write_pos - length + ring_length) % ring_length

    def refresh(self, source: CaptureSource, write_pos: int, ring_length: int):
        """Copy the ``len(self)`` samples preceding ``write_pos`` out of the ring."""
        start = self.start_index(write_pos, len(self._data), ring_length)
        self._data[:] = source.read_slice(start, len(self._data))


class CaptureWindows:
    """The RMS window and the FFT window, refreshed together."""

    def __init__(self, rms_length: int, fft_size: int):
        self.rms = SampleWindow(rms_length)
        self.fft = SampleWindow(fft_size)

    def refresh(self, source: CaptureSource) -> bool:
        """
        Refresh both windows from the source.

        Returns:
            False (windows untouched) if the source is not ready yet
        """
        write_pos = source.current_write_position()
        if write_pos < 0:
            logger.debug("Capture not ready (write position %d), skipping refresh", write_pos)
            return False

        ring_length = source.ring_length()
        self.rms.refresh(source, write_pos, ring_length)
        self.fft.refresh(source, write_pos, ring_length)
        return True
