"""
Thread-safe ring buffer for audio capture.

Allows the audio capture thread to write continuously while the feature
pipeline reads the newest samples once per frame.
"""

import numpy as np
import threading
from dataclasses import dataclass


@dataclass
class BufferStats:
    """Statistics about the ring buffer state."""
    total_samples: int
    available_samples: int
    buffer_size: int
    overruns: int  # Writes larger than the whole ring
    underruns: int  # Slices asking for more than has been written


class RingBuffer:
    """
    Thread-safe mono ring buffer of float32 samples.

    Features:
    - Handles wrap-around transparently on write and read
    - Reports its write position for the pipeline (-1 until data arrives)
    - Tracks overruns/underruns
    """

    def __init__(
        self,
        max_duration_seconds: float = 10.0,
        sample_rate: int = 44100,
    ):
        """
        Initialize ring buffer.

        Args:
            max_duration_seconds: Maximum audio to keep in buffer
            sample_rate: Audio sample rate
        """
        self.sample_rate = sample_rate
        self.max_samples = int(max_duration_seconds * sample_rate)
        if self.max_samples <= 0:
            raise ValueError(
                f"Ring buffer must hold at least one sample "
                f"({max_duration_seconds}s at {sample_rate} Hz)"
            )

        # Pre-allocate buffer
        self._buffer = np.zeros(self.max_samples, dtype=np.float32)

        # Position tracking
        self._write_pos = 0
        self._total_written = 0

        # Statistics
        self._overruns = 0
        self._underruns = 0

        # Thread safety
        self._lock = threading.RLock()

    def write(self, samples: np.ndarray):
        """
        Write samples to the buffer.

        Args:
            samples: Mono audio samples (converted to float32)
        """
        samples = np.asarray(samples, dtype=np.float32).reshape(-1)
        n_samples = len(samples)

        if n_samples == 0:
            return

        with self._lock:
            if n_samples > self.max_samples:
                # Only the newest max_samples survive
                self._overruns += 1
                skipped = n_samples - self.max_samples
                self._write_pos = (self._write_pos + skipped) % self.max_samples
                self._total_written += skipped
                samples = samples[skipped:]
                n_samples = self.max_samples

            # Handle wrap-around
            if self._write_pos + n_samples <= self.max_samples:
                # Simple case: no wrap
                self._buffer[self._write_pos:self._write_pos + n_samples] = samples
            else:
                # Wrap-around case
                first_part = self.max_samples - self._write_pos
                self._buffer[self._write_pos:] = samples[:first_part]
                self._buffer[:n_samples - first_part] = samples[first_part:]

            # Update position
            self._write_pos = (self._write_pos + n_samples) % self.max_samples
            self._total_written += n_samples

    def current_write_position(self) -> int:
        """Index of the next write, or -1 if nothing has been written yet."""
        with self._lock:
            if self._total_written == 0:
                return -1
            return self._write_pos

    def ring_length(self) -> int:
        return self.max_samples

    def read_slice(self, start: int, length: int) -> np.ndarray:
        """
        Copy ``length`` samples starting at ring index ``start``.

        Indices wrap at the end of the ring, so a slice may cross the
        boundary (or even be longer than the ring).
        """
        with self._lock:
            if length > min(self._total_written, self.max_samples):
                self._underruns += 1
            start %= self.max_samples
            if start + length <= self.max_samples:
                return self._buffer[start:start + length].copy()
            indices = np.arange(start, start + length)
            return np.take(self._buffer, indices, mode="wrap")

    def get_stats(self) -> BufferStats:
        """Get buffer statistics."""
        with self._lock:
            return BufferStats(
                total_samples=self._total_written,
                available_samples=min(self._total_written, self.max_samples),
                buffer_size=self.max_samples,
                overruns=self._overruns,
                underruns=self._underruns,
            )

    def clear(self):
        """Clear the buffer."""
        with self._lock:
            self._buffer.fill(0)
            self._write_pos = 0
            self._total_written = 0
            self._overruns = 0
            self._underruns = 0

