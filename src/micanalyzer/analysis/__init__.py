"""
Real-time feature extraction from a capture source.

Each module provides one stage of the per-frame pipeline:
- complex_math / fft: in-place radix-2 FFT
- windows: RMS and FFT sample windows over the capture ring
- spectrum: magnitude spectrum and band boundaries
- features / loudness / smoothing: raw features, 0..1 mapping, jitter removal
"""

from .complex_math import Complex, ComplexBuffer
from .fft import transform, next_power_of_two, is_power_of_two
from .windows import SampleWindow, CaptureWindows
from .spectrum import SpectrumBuilder, BandBoundaries
from .features import RawFeatures, extract_features
from .loudness import normalize_loudness
from .smoothing import SmoothingState, low_pass
from .pipeline import FeaturePipeline

__all__ = [
    "Complex",
    "ComplexBuffer",
    "transform",
    "next_power_of_two",
    "is_power_of_two",
    "SampleWindow",
    "CaptureWindows",
    "SpectrumBuilder",
    "BandBoundaries",
    "RawFeatures",
    "extract_features",
    "normalize_loudness",
    "SmoothingState",
    "low_pass",
    "FeaturePipeline",
]
