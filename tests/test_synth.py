import numpy as np
import pytest

from voicelive.pitch import estimate_pitch
from voicelive.synth import generate_glide, generate_tone


def test_tone_shape_and_level():
    tone = generate_tone(220.0, duration=0.1, sr=44100, amplitude=0.5)
    assert tone.dtype == np.float32
    assert len(tone) == 4410
    assert np.max(np.abs(tone)) == pytest.approx(0.5, rel=1e-3)


def test_harmonics_keep_peak_level():
    tone = generate_tone(220.0, n_harmonics=5, amplitude=0.8)
    assert np.max(np.abs(tone)) == pytest.approx(0.8, rel=1e-3)


def test_noise_is_repeatable_with_seed():
    a = generate_tone(220.0, noise_level=0.05, seed=7)
    b = generate_tone(220.0, noise_level=0.05, seed=7)
    np.testing.assert_array_equal(a, b)


def test_tone_is_detected():
    tone = generate_tone(330.0, duration=2048 / 44100 + 0.001, sr=44100, n_harmonics=3)
    assert estimate_pitch(tone[:2048], 44100) == pytest.approx(330.0, rel=0.02)


def test_glide_moves_between_endpoints():
    glide = generate_glide(200.0, 300.0, duration=1.0, sr=44100)
    assert len(glide) == 44100
    start = estimate_pitch(glide[:2048], 44100)
    end = estimate_pitch(glide[-2048:], 44100)
    assert start == pytest.approx(200.0, rel=0.03)
    assert end == pytest.approx(300.0, rel=0.03)
