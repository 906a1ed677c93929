"""
Capture manager that owns the microphone and the capture ring.

Manages:
- Input device list and selection
- Microphone start/stop/switch
- The ring buffer the feature pipeline reads from

The manager itself is a capture source: while it is not capturing it reports
a negative write position, so the pipeline leaves its features untouched.
"""

import logging
import numpy as np
from enum import Enum
from typing import Optional, Callable, List

from .ring_buffer import RingBuffer
from .microphone import MicrophoneCapture, AudioDevice, get_input_devices

logger = logging.getLogger(__name__)


class CaptureState(Enum):
    """State of the capture manager."""
    IDLE = "idle"
    CAPTURING = "capturing"
    ERROR = "error"


class CaptureManager:
    """
    Manages microphone capture into a ring buffer.

    Architecture:
    1. Microphone stream thread writes mono blocks into the ring buffer
    2. The host calls the feature pipeline once per frame
    3. The pipeline reads the newest samples through the capture source methods
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        max_record_seconds: float = 10.0,
        block_size: int = 512,
    ):
        """
        Initialize capture manager.

        Args:
            sample_rate: Capture sample rate
            max_record_seconds: Length of the capture ring in seconds
            block_size: Frames per microphone block
        """
        self.sample_rate = sample_rate
        self.block_size = block_size

        self._capture: Optional[MicrophoneCapture] = None
        self._buffer = RingBuffer(
            max_duration_seconds=max_record_seconds,
            sample_rate=sample_rate,
        )

        self._state = CaptureState.IDLE
        self._devices: List[AudioDevice] = []
        self._selected_index = 0
        self._on_state_changed: Optional[Callable[[CaptureState], None]] = None

    def set_callbacks(self, on_state_changed: Optional[Callable[[CaptureState], None]] = None):
        """Set callback functions."""
        self._on_state_changed = on_state_changed

    def _set_state(self, state: CaptureState):
        """Update state and notify."""
        self._state = state
        if self._on_state_changed:
            self._on_state_changed(state)

    def _audio_callback(self, audio: np.ndarray):
        """Called for each audio block from the microphone."""
        if audio.ndim == 2:
            audio = np.mean(audio, axis=1)
        self._buffer.write(audio)

    # ==================== Devices ====================

    def refresh_devices(self) -> List[AudioDevice]:
        """
        Re-enumerate input devices.

        Stops capture when no device is left. A selected device that is still
        present keeps its selection at its new position. If the device being
        captured disappeared, the selection is clamped into range and capture
        moves to the device now at that index.
        """
        current = self.selected_device
        self._devices = get_input_devices()

        if not self._devices:
            logger.warning("No microphone detected")
            self.stop_capture()
            return self._devices

        names = [d.name for d in self._devices]
        if current is not None and current.name in names:
            self._selected_index = names.index(current.name)
            return self._devices

        self._selected_index = min(max(self._selected_index, 0), len(self._devices) - 1)

        if self.is_capturing and current is not None:
            logger.info(
                "Microphone %s was removed, switching to %s",
                current.name, self._devices[self._selected_index].name,
            )
            self.stop_capture()
            self.start_capture()

        return self._devices

    @property
    def devices(self) -> List[AudioDevice]:
        return list(self._devices)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def selected_device(self) -> Optional[AudioDevice]:
        if not self._devices:
            return None
        return self._devices[self._selected_index]

    def select_device(self, index: int):
        """Choose the device used by the next start_capture (clamped into range)."""
        if self._devices:
            index = min(max(index, 0), len(self._devices) - 1)
        self._selected_index = index

    # ==================== Capture ====================

    def start_capture(self) -> bool:
        """
        Start capturing from the selected device.

        Returns:
            True if capturing afterwards
        """
        if self.is_capturing:
            return True

        device = self.selected_device
        if device is None:
            logger.warning("Cannot start capture: no input device available")
            return False

        self._buffer.clear()
        self._capture = MicrophoneCapture(
            device=device,
            sample_rate=self.sample_rate,
            block_size=self.block_size,
            callback=self._audio_callback,
        )

        if not self._capture.start():
            self._capture = None
            self._set_state(CaptureState.ERROR)
            return False

        logger.info("Recording from %s", device.name)
        self._set_state(CaptureState.CAPTURING)
        return True

    def stop_capture(self):
        """Stop capturing."""
        if self._capture:
            self._capture.stop()
            self._capture = None

        if self._state != CaptureState.IDLE:
            self._set_state(CaptureState.IDLE)

    def switch_microphone(self, index: int) -> bool:
        """
        Move capture to another device.

        Args:
            index: Device index in ``devices`` (clamped into range)

        Returns:
            True if the device changed and capture restarted
        """
        if not self._devices:
            logger.warning("No microphone devices available")
            return False

        index = min(max(index, 0), len(self._devices) - 1)
        if index == self._selected_index:
            logger.info("Microphone %s is already selected", self._devices[index].name)
            return False

        self.stop_capture()
        self._selected_index = index
        started = self.start_capture()
        if started:
            logger.info("Switched microphone to %s", self._devices[index].name)
        return started

    # ==================== Capture source ====================

    def current_write_position(self) -> int:
        if not self.is_capturing:
            return -1
        return self._buffer.current_write_position()

    def ring_length(self) -> int:
        return self._buffer.ring_length()

    def read_slice(self, start: int, length: int) -> np.ndarray:
        return self._buffer.read_slice(start, length)

    @property
    def buffer(self) -> RingBuffer:
        return self._buffer

    @property
    def state(self) -> CaptureState:
        """Get current state."""
        return self._state

    @property
    def is_capturing(self) -> bool:
        """Check if currently capturing."""
        return self._state == CaptureState.CAPTURING
