"""
Microphone capture using sounddevice.

Opens an input stream on the chosen device and hands every block, already
downmixed to mono float32, to a callback (normally a ring buffer write).
"""

import logging
import threading
import numpy as np
from dataclasses import dataclass
from typing import Optional, Callable, List

logger = logging.getLogger(__name__)

# sounddevice raises OSError when the PortAudio library itself is missing
SOUNDDEVICE_AVAILABLE = False
try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    sd = None


@dataclass
class AudioDevice:
    """Audio input device information."""
    index: int
    name: str
    channels: int
    sample_rate: float
    is_default: bool = False

    def __str__(self):
        return f"{self.name} ({self.channels} ch)"


def get_input_devices() -> List[AudioDevice]:
    """Get available microphone/input devices (loopback monitors excluded)."""
    devices = []

    if not SOUNDDEVICE_AVAILABLE:
        logger.warning("sounddevice is not available, no input devices")
        return devices

    try:
        all_devices = sd.query_devices()
        default_input = sd.default.device[0]

        for i, dev in enumerate(all_devices):
            if dev['max_input_channels'] <= 0:
                continue
            name = dev['name']
            if 'monitor' in name.lower() or 'loopback' in name.lower():
                continue

            devices.append(AudioDevice(
                index=i,
                name=name,
                channels=dev['max_input_channels'],
                sample_rate=dev['default_samplerate'],
                is_default=(i == default_input),
            ))
    except Exception as e:
        logger.error("Error getting input devices: %s", e)

    return devices


class MicrophoneCapture:
    """
    Capture mono audio from a microphone.

    The callback runs on the sounddevice stream thread.
    """

    def __init__(
        self,
        device: AudioDevice,
        sample_rate: int = 44100,
        block_size: int = 512,
        callback: Optional[Callable[[np.ndarray], None]] = None,
    ):
        """
        Initialize microphone capture.

        Args:
            device: Input device to capture from
            sample_rate: Sample rate for capture
            block_size: Audio block size in frames
            callback: Function called with each mono block
        """
        self.device = device
        self.sample_rate = sample_rate
        self.channels = max(1, min(device.channels, 2))
        self.block_size = block_size
        self.callback = callback

        self._stream = None
        self._running = False
        self._lock = threading.Lock()
        self._status_count = 0

    def _sounddevice_callback(self, indata: np.ndarray, frames: int, time_info, status):
        """Callback for sounddevice stream."""
        if status:
            with self._lock:
                self._status_count += 1
            logger.debug("Input stream status: %s", status)

        # Downmix to mono
        if indata.ndim == 2:
            audio = np.mean(indata, axis=1).astype(np.float32)
        else:
            audio = indata.astype(np.float32)

        if self.callback:
            self.callback(audio)

    def start(self) -> bool:
        """
        Start audio capture.

        Returns:
            True if started successfully
        """
        if self._running:
            return True

        if not SOUNDDEVICE_AVAILABLE:
            logger.error("sounddevice not available, cannot open %s", self.device.name)
            return False

        try:
            self._stream = sd.InputStream(
                device=self.device.index,
                samplerate=self.sample_rate,
                channels=self.channels,
                blocksize=self.block_size,
                callback=self._sounddevice_callback,
                dtype=np.float32,
            )
            self._stream.start()
            self._running = True
            logger.info(
                "Microphone stream started: device=%s rate=%d channels=%d",
                self.device.name, self.sample_rate, self.channels,
            )
            return True

        except Exception as e:
            logger.error("Failed to start microphone capture on %s: %s", self.device.name, e)
            self._stream = None
            return False

    def stop(self):
        """Stop audio capture."""
        if self._stream:
            try:
                self._stream.stop()
                self._stream.close()
            except Exception as e:
                logger.warning("Error closing input stream: %s", e)
            self._stream = None

        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if capture is running."""
        return self._running

    @property
    def status_count(self) -> int:
        """Number of blocks delivered with an over/underflow status."""
        with self._lock:
            return self._status_count

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
