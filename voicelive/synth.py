"""
Synthetic voice-like test signals.

Real vocal takes need someone to label what pitch was sung. Generated tones
come with perfect ground truth for free, which makes them the reference
material for checking the detector and for the CLI demo. A voice is roughly:
  1. A fundamental frequency (the pitch we hear)
  2. Harmonics at integer multiples of it, each quieter than the last
  3. Some breath noise
"""

import numpy as np

from voicelive.config import SAMPLE_RATE


def generate_tone(f0, duration=0.1, sr=SAMPLE_RATE, amplitude=0.5, n_harmonics=1, noise_level=0.0, seed=None):
    """
    Generate a steady tone.

    Args:
        f0: Fundamental frequency in Hz
        duration: Length in seconds
        sr: Sample rate
        amplitude: Peak amplitude of the result (before noise)
        n_harmonics: 1 = pure sine; more adds overtones at 1/h amplitude
        noise_level: Standard deviation of added gaussian noise
        seed: Seed for the noise, for repeatable signals

    Returns:
        numpy array of audio samples (float32)
    """
    t = np.arange(int(sr * duration)) / sr
    signal = np.zeros_like(t)
    for h in range(1, n_harmonics + 1):
        signal += np.sin(2 * np.pi * f0 * h * t) / h

    peak = np.max(np.abs(signal)) if signal.size else 0.0
    if peak > 0:
        signal = amplitude * signal / peak

    if noise_level:
        rng = np.random.default_rng(seed)
        signal += noise_level * rng.standard_normal(len(signal))

    return signal.astype(np.float32)


def generate_glide(f_start, f_end, duration=1.0, sr=SAMPLE_RATE, amplitude=0.5, n_harmonics=3):
    """
    Generate a tone sliding exponentially from f_start to f_end.

    Exponential (not linear) so the glide moves at a constant number of
    semitones per second, the way a singer slides between notes.
    """
    n = int(sr * duration)
    t = np.arange(n) / sr
    freq = f_start * (f_end / f_start) ** (t / duration)
    # Integrate frequency to get phase, otherwise the pitch would jump
    phase = 2 * np.pi * np.cumsum(freq) / sr

    signal = np.zeros(n)
    for h in range(1, n_harmonics + 1):
        signal += np.sin(h * phase) / h

    peak = np.max(np.abs(signal)) if signal.size else 0.0
    if peak > 0:
        signal = amplitude * signal / peak
    return signal.astype(np.float32)
