"""
Pitch detection module: raw voice frames in, fundamental frequency out.

HOW IT WORKS:
A voiced sound repeats itself once per period. If we slide a copy of the frame
over itself and multiply-and-sum at every shift (the autocorrelation), the sum
peaks whenever the shift lines up with a whole number of periods. The first
such peak after the zero-shift one gives the period in samples, and
sample_rate / period is the pitch.

Steps, per frame:
  1. Silence gate: skip frames whose RMS is below the noise floor
  2. Trim: cut the frame at the first/last quiet sample so loud onset energy
     at the edges does not dominate the correlation
  3. Autocorrelate the trimmed window
  4. Pick the period peak (skip the trivial zero-lag peak, take the next one)
  5. Convert to Hz and reject anything outside the voice band

Every "no answer" is reported as None, never as 0 Hz.
"""

import numpy as np

from voicelive.config import (
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    PEAK_RATIO,
    SAMPLE_RATE,
    SILENCE_RMS,
    TRIM_THRESHOLD,
)


def frame_rms(frame):
    """Root-mean-square level of a frame (0.0 for an empty frame)."""
    frame = np.asarray(frame, dtype=np.float64)
    if frame.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(frame ** 2)))


def is_voiced(frame, threshold=SILENCE_RMS):
    """True when the frame is loud enough to be worth analysing."""
    return frame_rms(frame) >= threshold


def trim_buffer(frame, threshold=TRIM_THRESHOLD):
    """
    Cut a frame down to the span between its first and last quiet samples.

    The start index is the first sample in the first half of the frame with
    |amplitude| < threshold (0 if none). The end index is the first such
    sample scanning back from the end through the last half (len - 1 if none).
    The end index itself is excluded, like a Python slice.
    """
    n = len(frame)
    half = (n + 1) // 2
    quiet = np.abs(frame) < threshold

    head = np.flatnonzero(quiet[:half])
    r1 = int(head[0]) if head.size else 0

    # quiet[n - half + 1:] covers indices n-1 down to n-half+1 once reversed
    tail = np.flatnonzero(quiet[n - half + 1:][::-1])
    r2 = n - 1 - int(tail[0]) if tail.size else n - 1

    return frame[r1:r2]


def autocorrelate(window):
    """
    Unnormalized autocorrelation for every lag in [0, len(window)).

    C[lag] = sum(window[i] * window[i + lag]) over the overlapping part.
    This is the O(n^2) heart of the detector.
    """
    size = len(window)
    if size == 0:
        return np.zeros(0)
    # 'full' mode is symmetric around index size-1 (lag 0); keep lags >= 0
    return np.correlate(window, window, mode="full")[size - 1:]


def find_period_lag(correlations, peak_ratio=PEAK_RATIO):
    """
    Pick the lag of the fundamental period from an autocorrelation curve.

    A lag is a peak when it is strictly higher than both neighbours. Lag 0 has
    no left neighbour and always counts as higher on that side, so the
    zero-lag maximum is the first peak found. That first peak is skipped; the
    next peak above peak_ratio * best is accepted and the scan stops. `best`
    starts at 0 and only moves on acceptance, so in practice the first peak
    with positive correlation after the zero-lag one wins.

    Returns:
        The accepted lag, or None when no second peak exists.
    """
    size = len(correlations)
    if size < 2:
        return None

    left = np.concatenate(([-np.inf], correlations[:-2]))
    centre = correlations[:-1]
    right = correlations[1:]
    # The last lag has no right neighbour and is never a peak
    peaks = np.flatnonzero((centre > left) & (centre > right))

    best = 0.0
    found_first = False
    for lag in peaks:
        if not found_first:
            found_first = True
        elif correlations[lag] > best * peak_ratio:
            best = correlations[lag]
            return int(lag)

    return None


def estimate_pitch(frame, sample_rate=SAMPLE_RATE):
    """
    Estimate the fundamental frequency of a mono voice frame.

    Args:
        frame: 1D sequence of samples in [-1, 1]
        sample_rate: Sample rate in Hz

    Returns:
        Frequency in Hz within [MIN_FREQUENCY, MAX_FREQUENCY], or None for
        silence, no clear periodicity, or an out-of-band result.
    """
    frame = np.asarray(frame, dtype=np.float64).ravel()
    if not is_voiced(frame):
        return None

    window = trim_buffer(frame)
    lag = find_period_lag(autocorrelate(window))
    if lag is None or lag == 0:
        return None

    frequency = sample_rate / lag
    if frequency < MIN_FREQUENCY or frequency > MAX_FREQUENCY:
        return None

    return float(frequency)


class AutocorrelationDetector:
    """
    Default frame estimator for the detection loop.

    Stateless wrapper around estimate_pitch() so it can be swapped with any
    other object exposing .detect(audio, sr) -> Optional[float].
    """

    def detect(self, audio, sr=SAMPLE_RATE):
        return estimate_pitch(audio, sr)
