"""
Tests for voicelive/pitch.py: silence gate, trimming, autocorrelation and
period peak picking.
"""

import numpy as np
import pytest

from voicelive.pitch import (
    AutocorrelationDetector,
    autocorrelate,
    estimate_pitch,
    find_period_lag,
    frame_rms,
    is_voiced,
    trim_buffer,
)

SR = 44100
FRAME = 2048


def sine(freq, amplitude=0.5, n=FRAME, sr=SR):
    t = np.arange(n) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


# ---------------------------------------------------------------------------
# Silence gate
# ---------------------------------------------------------------------------


class TestFrameGate:
    def test_rms_of_square_wave(self):
        assert frame_rms([0.5, -0.5, 0.5, -0.5]) == pytest.approx(0.5)

    def test_rms_of_empty_frame_is_zero(self):
        assert frame_rms([]) == 0.0

    def test_zeros_are_not_voiced(self):
        assert not is_voiced(np.zeros(FRAME))

    def test_quiet_sine_is_not_voiced(self):
        """Amplitude 0.01 sine has RMS ~0.007, under the 0.01 floor."""
        assert not is_voiced(sine(440, amplitude=0.01))

    def test_normal_sine_is_voiced(self):
        assert is_voiced(sine(440))

    def test_empty_frame_is_not_voiced(self):
        assert not is_voiced(np.zeros(0))


# ---------------------------------------------------------------------------
# Trimming
# ---------------------------------------------------------------------------


class TestTrimBuffer:
    def test_cuts_at_first_and_last_quiet_sample(self):
        frame = np.array([0.5, 0.5, 0.1, 0.3, 0.4, 0.05, 0.5, 0.6])
        np.testing.assert_allclose(trim_buffer(frame), [0.1, 0.3, 0.4])

    def test_no_quiet_samples_keeps_all_but_last(self):
        frame = np.full(6, 0.9)
        assert len(trim_buffer(frame)) == 5

    def test_quiet_sample_in_second_half_does_not_move_start(self):
        frame = np.array([0.9, 0.9, 0.9, 0.9, 0.0, 0.9])
        # Start only searches the first half; end finds index 4 scanning back
        np.testing.assert_allclose(trim_buffer(frame), [0.9, 0.9, 0.9, 0.9])

    def test_empty_frame(self):
        assert len(trim_buffer(np.zeros(0))) == 0


# ---------------------------------------------------------------------------
# Autocorrelation and peak picking
# ---------------------------------------------------------------------------


class TestAutocorrelate:
    def test_small_signal(self):
        np.testing.assert_allclose(autocorrelate(np.array([1.0, 2.0, 3.0])), [14.0, 8.0, 3.0])

    def test_matches_direct_sum(self):
        rng = np.random.default_rng(3)
        x = rng.standard_normal(64)
        direct = [sum(x[i] * x[i + lag] for i in range(64 - lag)) for lag in range(64)]
        np.testing.assert_allclose(autocorrelate(x), direct)

    def test_empty(self):
        assert len(autocorrelate(np.zeros(0))) == 0


class TestFindPeriodLag:
    def test_skips_zero_lag_and_takes_next_peak(self):
        assert find_period_lag(np.array([10.0, 5.0, 7.0, 3.0, 6.0, 2.0])) == 2

    def test_negative_peaks_are_passed_over(self):
        assert find_period_lag(np.array([10.0, -5.0, -2.0, -6.0, 4.0, 1.0])) == 4

    def test_first_peak_is_skipped_when_zero_lag_is_flat(self):
        """With C[1] == C[0] lag 0 is no peak, so the first real peak is consumed."""
        assert find_period_lag(np.array([1.0, 1.0, 0.5, 0.8, 0.2])) is None

    def test_last_lag_is_never_a_peak(self):
        assert find_period_lag(np.array([10.0, 2.0, 1.0, 5.0])) is None

    def test_monotonic_curve_has_no_period(self):
        assert find_period_lag(np.array([5.0, 4.0, 3.0, 2.0, 1.0])) is None

    def test_too_short(self):
        assert find_period_lag(np.array([1.0])) is None


# ---------------------------------------------------------------------------
# Full estimator
# ---------------------------------------------------------------------------


class TestEstimatePitch:
    @pytest.mark.parametrize("freq", [80.0, 110.0, 196.0, 261.63, 440.0, 659.25, 880.0, 1000.0])
    def test_pure_sine_within_two_percent(self, freq):
        detected = estimate_pitch(sine(freq), SR)
        assert detected is not None
        assert detected == pytest.approx(freq, rel=0.02)

    def test_harmonic_tone_with_noise(self):
        t = np.arange(FRAME) / SR
        tone = sum(np.sin(2 * np.pi * 220.0 * h * t) / h for h in range(1, 4))
        tone = 0.5 * tone / np.max(np.abs(tone))
        tone += 0.01 * np.random.default_rng(1).standard_normal(FRAME)
        assert estimate_pitch(tone, SR) == pytest.approx(220.0, rel=0.03)

    def test_silence_is_none(self):
        assert estimate_pitch(np.zeros(FRAME), SR) is None

    def test_quiet_frame_is_none(self):
        assert estimate_pitch(sine(440, amplitude=0.005), SR) is None

    def test_above_voice_band_is_none(self):
        assert estimate_pitch(sine(1500.0), SR) is None

    def test_below_voice_band_is_none(self):
        assert estimate_pitch(sine(40.0, n=4096), SR) is None

    def test_accepts_plain_lists(self):
        assert estimate_pitch(list(sine(440.0)), SR) == pytest.approx(440.0, rel=0.02)

    def test_result_is_python_float(self):
        assert isinstance(estimate_pitch(sine(440.0), SR), float)

    def test_detector_matches_function(self):
        frame = sine(330.0)
        assert AutocorrelationDetector().detect(frame, SR) == estimate_pitch(frame, SR)
