"""
Live microphone input via sounddevice.

Kept apart from the other frame sources because importing sounddevice needs
the PortAudio shared library, which offline analysis does not.
"""

import logging
import threading

import numpy as np
import sounddevice as sd

from voicelive.config import FRAME_SIZE, SAMPLE_RATE

logger = logging.getLogger(__name__)


class MicrophoneFrameSource:
    """
    Live microphone input.

    sounddevice delivers audio blocks on its own callback thread. Each block is
    appended to a fixed-size "latest window" buffer under a lock, and pull()
    copies that window out under the same lock, so the detection loop always
    sees the newest frame_size samples and never a queue of old ones.
    """

    def __init__(self, sample_rate=SAMPLE_RATE, frame_size=FRAME_SIZE, device=None):
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.device = device
        self._window = np.zeros(frame_size, dtype=np.float32)
        self._lock = threading.Lock()
        self._stream = None

    def _on_audio(self, indata, frames, time, status):
        if status:
            logger.warning("Input stream status: %s", status)
        block = indata[:, 0]
        if not len(block):
            return
        with self._lock:
            if len(block) >= self.frame_size:
                self._window[:] = block[-self.frame_size:]
            else:
                self._window = np.roll(self._window, -len(block))
                self._window[-len(block):] = block

    def open(self):
        if self._stream is not None:
            return self
        self._stream = sd.InputStream(
            samplerate=self.sample_rate,
            channels=1,
            dtype="float32",
            device=self.device,
            callback=self._on_audio,
        )
        self._stream.start()
        logger.info("Microphone open at %d Hz", self.sample_rate)
        return self

    def close(self):
        if self._stream is None:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None
        logger.info("Microphone closed")

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc):
        self.close()

    def pull(self):
        with self._lock:
            frame = self._window.copy()
        return frame, self.sample_rate
