import numpy as np
import pytest

torch = pytest.importorskip("torch")
pytest.importorskip("torchcrepe")

from voicelive import crepe  # noqa: E402
from voicelive.crepe import CREPEDetector  # noqa: E402


def fake_predict(freqs, confs):
    def predict(audio, sr, **kwargs):
        predict.kwargs = kwargs
        return torch.tensor([freqs]), torch.tensor([confs])

    return predict


@pytest.fixture
def tone():
    t = np.arange(2048) / 44100
    return 0.5 * np.sin(2 * np.pi * 220.0 * t)


def test_silence_skips_the_model(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("model should not run on silence")

    monkeypatch.setattr(crepe.torchcrepe, "predict", fail)
    assert CREPEDetector().detect(np.zeros(2048), 44100) is None


def test_median_of_confident_frames(monkeypatch, tone):
    predict = fake_predict([220.0, 221.0, 500.0], [0.9, 0.8, 0.1])
    monkeypatch.setattr(crepe.torchcrepe, "predict", predict)
    assert CREPEDetector().detect(tone, 44100) == pytest.approx(220.5)
    assert predict.kwargs["fmin"] == 60.0
    assert predict.kwargs["fmax"] == 1200.0


def test_low_confidence_is_none(monkeypatch, tone):
    monkeypatch.setattr(crepe.torchcrepe, "predict", fake_predict([220.0, 221.0], [0.2, 0.3]))
    assert CREPEDetector().detect(tone, 44100) is None


def test_out_of_band_is_none(monkeypatch, tone):
    monkeypatch.setattr(crepe.torchcrepe, "predict", fake_predict([50.0, 51.0], [0.9, 0.9]))
    assert CREPEDetector().detect(tone, 44100) is None
