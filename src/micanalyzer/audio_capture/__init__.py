"""
Audio capture module: the sample ring the feature pipeline reads from.

Supports:
- Microphone input via sounddevice
- Synthetic waveform playback for offline runs and tests
- Thread-safe ring buffer shared by the capture thread and the pipeline
"""

from .source import CaptureSource
from .ring_buffer import RingBuffer, BufferStats
from .synthetic import SyntheticSource, sine, silence
from .microphone import MicrophoneCapture, AudioDevice, get_input_devices
from .capture_manager import CaptureManager, CaptureState

__all__ = [
    "CaptureSource",
    "RingBuffer",
    "BufferStats",
    "SyntheticSource",
    "sine",
    "silence",
    "MicrophoneCapture",
    "AudioDevice",
    "get_input_devices",
    "CaptureManager",
    "CaptureState",
]
