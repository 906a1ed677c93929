"""
Loudness normalization.

Maps a linear amplitude onto 0..1 through a fixed -40 dB .. 0 dB range:
anything quieter than -40 dBFS is 0, full scale and above is 1.
"""

import math

import numpy as np

FLOOR_DB = -40.0
CEILING_DB = 0.0

# Smallest positive single-precision value, keeps log10 finite at silence
EPSILON = float(np.finfo(np.float32).smallest_subnormal)


def clamp01(value: float) -> float:
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


def inverse_lerp(a: float, b: float, value: float) -> float:
    """Position of value between a and b, clamped to 0..1 (0 when a == b)."""
    if a == b:
        return 0.0
    return clamp01((value - a) / (b - a))


def amplitude_to_db(amplitude: float) -> float:
    return 20.0 * math.log10(amplitude + EPSILON)


def normalize_loudness(amplitude: float) -> float:
    """Normalize a linear amplitude (RMS or peak) to 0..1."""
    return clamp01(inverse_lerp(FLOOR_DB, CEILING_DB, amplitude_to_db(amplitude)))
