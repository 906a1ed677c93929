"""
One-pole exponential smoothing for the five output channels.

A stored value of exactly 0.0 doubles as the "not started" marker: the next
reading is passed through unchanged instead of ramping up from zero. A
channel that decays to exactly 0.0 is therefore bootstrapped again on the
following reading.
"""

from dataclasses import dataclass, fields


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def low_pass(current: float, previous: float, alpha: float) -> float:
    """
    Smooth one reading.

    Args:
        current: New raw reading
        previous: Last smoothed output for this channel (0.0 = not started)
        alpha: Smoothing coefficient in (0, 1), smaller is smoother

    Returns:
        New smoothed output, which is also the next ``previous``
    """
    if previous == 0.0:
        return current
    return lerp(previous, current, alpha)


@dataclass
class SmoothingState:
    """Last smoothed output per channel."""
    normalized_rms: float = 0.0
    normalized_peak: float = 0.0
    low_band: float = 0.0
    mid_band: float = 0.0
    high_band: float = 0.0

    def apply(self, channel: str, current: float, alpha: float) -> float:
        """Smooth ``current`` for ``channel`` and remember the result."""
        value = low_pass(current, getattr(self, channel), alpha)
        setattr(self, channel, value)
        return value

    def reset(self):
        for f in fields(self):
            setattr(self, f.name, 0.0)
