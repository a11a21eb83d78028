"""
Frame sources: where the detection loop gets its audio.

Every source exposes pull() -> (samples, sample_rate), returning the most
recent window of audio, never a backlog.

  - MicrophoneFrameSource (voicelive.microphone): live input via sounddevice
  - ArrayFrameSource: windows over a signal already in memory
  - FileFrameSource: an ArrayFrameSource over an audio file (librosa)
"""

import logging

import librosa
import numpy as np

from voicelive.config import FRAME_SIZE, HOP_SIZE, SAMPLE_RATE

logger = logging.getLogger(__name__)


class ArrayFrameSource:
    """
    Steps through a 1D signal, one window per pull().

    Once the signal is used up every pull() returns a silent frame (which the
    silence gate turns into "no pitch") and `exhausted` becomes True.
    """

    def __init__(self, samples, sample_rate=SAMPLE_RATE, frame_size=FRAME_SIZE, hop_size=HOP_SIZE):
        if frame_size <= 0 or hop_size <= 0:
            raise ValueError("frame_size and hop_size must be positive")
        self.samples = np.asarray(samples, dtype=np.float32).ravel()
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.hop_size = hop_size
        self.position = 0

    @property
    def exhausted(self):
        return self.position >= len(self.samples)

    def __len__(self):
        """Number of frames before the source runs dry."""
        return -(-len(self.samples) // self.hop_size)

    def pull(self):
        start = self.position
        frame = self.samples[start:start + self.frame_size]
        self.position = start + self.hop_size
        # The last frames of a signal are usually short: pad with silence
        if len(frame) < self.frame_size:
            frame = np.pad(frame, (0, self.frame_size - len(frame)))
        return frame, self.sample_rate


class FileFrameSource(ArrayFrameSource):
    """Frame source over an audio file, mixed down to mono at its native rate."""

    def __init__(self, path, frame_size=FRAME_SIZE, hop_size=HOP_SIZE, sample_rate=None):
        # sr=None keeps the file's own rate unless a specific one is requested
        audio, sr = librosa.load(path, sr=sample_rate, mono=True)
        logger.info("Loaded %s (%.2fs at %d Hz)", path, len(audio) / sr, sr)
        super().__init__(audio, sr, frame_size, hop_size)
        self.path = path
