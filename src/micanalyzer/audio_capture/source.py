"""
Capture source interface consumed by the feature pipeline.

Anything that continuously writes samples into a ring and can report where
it is writing can feed the pipeline: the microphone capture, or a synthetic
source playing back a known waveform.
"""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class CaptureSource(Protocol):
    """Read side of a continuously written sample ring."""

    def current_write_position(self) -> int:
        """Index the next sample will be written to, negative if not ready."""
        ...

    def ring_length(self) -> int:
        """Total capacity of the ring in samples."""
        ...

    def read_slice(self, start: int, length: int) -> np.ndarray:
        """Copy ``length`` samples starting at ``start``, wrapping at the end."""
        ...
