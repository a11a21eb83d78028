"""
Neural alternative to the autocorrelation detector.

CREPE (Convolutional Representation for Pitch Estimation) is a CNN trained on
a large corpus of pitched audio. It reads raw audio and outputs a probability
distribution over 360 pitch bins (20 cents each), plus a periodicity score we
use as confidence. It is far more robust on breathy or noisy voice than
autocorrelation, but needs torch and is much heavier per frame.

Install with the `crepe` extra. Exposes the same .detect(audio, sr) interface
as AutocorrelationDetector so the detection loop can use either.
"""

import numpy as np
import torch
import torchcrepe

from voicelive.config import MAX_FREQUENCY, MIN_FREQUENCY, SAMPLE_RATE
from voicelive.pitch import is_voiced

# Periodicity below this counts as "no pitch"
MIN_PERIODICITY = 0.5


class CREPEDetector:
    """
    Pitch detection using torchcrepe.

    We use the 'tiny' model variant by default so a frame still fits in a
    display tick on CPU.
    """

    def __init__(self, model_capacity="tiny", min_periodicity=MIN_PERIODICITY):
        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        self.model_capacity = model_capacity
        self.min_periodicity = min_periodicity

    def detect(self, audio, sr=SAMPLE_RATE):
        """
        Detect pitch from a frame.

        Returns:
            Frequency in Hz within the voice band, or None.
        """
        audio = np.asarray(audio, dtype=np.float32).ravel()
        if not is_voiced(audio):
            return None

        audio_tensor = torch.from_numpy(audio).unsqueeze(0).to(self.device)

        # torchcrepe resamples to 16kHz internally and returns pitch (Hz)
        # and periodicity (confidence 0-1) per hop
        frequency, periodicity = torchcrepe.predict(
            audio_tensor,
            sr,
            hop_length=len(audio) // 4 or 1,
            fmin=MIN_FREQUENCY,
            fmax=MAX_FREQUENCY,
            model=self.model_capacity,
            batch_size=1,
            device=self.device,
            return_periodicity=True,
        )

        freq_np = frequency.squeeze(0).cpu().numpy()
        conf_np = periodicity.squeeze(0).cpu().numpy()
        mask = conf_np > self.min_periodicity
        if not mask.any():
            return None

        freq = float(np.median(freq_np[mask]))
        if freq < MIN_FREQUENCY or freq > MAX_FREQUENCY:
            return None
        return freq
