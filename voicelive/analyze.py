"""
Offline analysis: run the detection loop over a recording and print what it
hears, frame by frame.

Run with:
    python -m voicelive.analyze take.wav --key A --amount 40
    python -m voicelive.analyze --demo 466.16 --key A --amount 40
    python -m voicelive.analyze --glide 200 300 --preset billie-eilish

The loop is driven by a ManualTicker, so the file is processed as fast as the
CPU allows instead of in real time.
"""

import argparse
import logging

import numpy as np

from voicelive.config import DEFAULT_PRESET, FRAME_SIZE, HOP_SIZE, SAMPLE_RATE, VOCAL_PRESETS
from voicelive.correction import nearest_in_key_frequency
from voicelive.loop import DetectionLoop
from voicelive.notes import cents_between
from voicelive.pitch import AutocorrelationDetector
from voicelive.sources import ArrayFrameSource, FileFrameSource
from voicelive.synth import generate_glide, generate_tone
from voicelive.ticker import ManualTicker


class FrameReport:
    """Listener collecting one row per tick."""

    def __init__(self, loop, hop_size, sample_rate):
        self.loop = loop
        self.hop_size = hop_size
        self.sample_rate = sample_rate
        self.rows = []

    def __call__(self, frequency, note, shift_ratio):
        index = len(self.rows)
        target = None
        if frequency is not None:
            target = nearest_in_key_frequency(frequency, self.loop.state.target_key)
        self.rows.append(
            {
                "time": index * self.hop_size / self.sample_rate,
                "frequency": frequency,
                "note": note,
                "target": target,
                "shift_ratio": shift_ratio,
            }
        )

    def format_row(self, row):
        if row["frequency"] is None:
            return f"{row['time']:7.3f}s  {'--':>9}  {'--':>4}  {'--':>8}  ratio {row['shift_ratio']:.4f}"
        cents = cents_between(row["frequency"], row["target"])
        return (
            f"{row['time']:7.3f}s  {row['frequency']:7.2f}Hz  {str(row['note']):>4}  "
            f"{cents:+7.1f}c  ratio {row['shift_ratio']:.4f}"
        )

    def summary(self):
        voiced = [r for r in self.rows if r["frequency"] is not None]
        if not voiced:
            return f"{len(self.rows)} frames, no pitch detected"
        ratios = np.array([r["shift_ratio"] for r in voiced])
        freqs = np.array([r["frequency"] for r in voiced])
        return (
            f"{len(self.rows)} frames, {len(voiced)} voiced | "
            f"median pitch {np.median(freqs):.2f} Hz | "
            f"shift ratio min {ratios.min():.4f} / median {np.median(ratios):.4f} / max {ratios.max():.4f}"
        )


def make_detector(name):
    if name == "crepe":
        # Optional extra: only import torch when asked for
        from voicelive.crepe import CREPEDetector

        return CREPEDetector()
    return AutocorrelationDetector()


def make_source(args):
    if args.demo is not None:
        audio = generate_tone(args.demo, duration=args.duration, sr=SAMPLE_RATE, n_harmonics=3)
        return ArrayFrameSource(audio, SAMPLE_RATE, args.frame_size, args.hop_size)
    if args.glide is not None:
        audio = generate_glide(args.glide[0], args.glide[1], duration=args.duration, sr=SAMPLE_RATE)
        return ArrayFrameSource(audio, SAMPLE_RATE, args.frame_size, args.hop_size)
    return FileFrameSource(args.path, args.frame_size, args.hop_size)


def analyze(source, loop, quiet=False):
    """
    Run `loop` over every frame of `source`.

    Returns:
        The FrameReport holding one row per frame.
    """
    report = FrameReport(loop, source.hop_size, source.sample_rate)
    loop.subscribe(report)
    try:
        loop.start(source)
        while not source.exhausted and loop.is_sampling:
            loop.ticker.advance()
    finally:
        loop.stop()
        loop.unsubscribe(report)

    if not quiet:
        for row in report.rows:
            print(report.format_row(row))
        print()
        print(report.summary())
    return report


def build_parser():
    parser = argparse.ArgumentParser(description="Detect pitch and correction ratios in a vocal recording.")
    parser.add_argument("path", nargs="?", help="Audio file to analyse")
    parser.add_argument("--demo", type=float, metavar="HZ", help="Analyse a synthetic tone instead of a file")
    parser.add_argument("--glide", type=float, nargs=2, metavar=("FROM", "TO"), help="Analyse a synthetic glide")
    parser.add_argument("--duration", type=float, default=1.0, help="Length of synthetic signals in seconds")
    parser.add_argument("--key", default=None, help="Key root, e.g. C, F#, Bb")
    parser.add_argument("--amount", type=float, default=None, help="Correction amount in percent (0-100)")
    parser.add_argument("--preset", choices=sorted(VOCAL_PRESETS), default=None)
    parser.add_argument("--detector", choices=["autocorr", "crepe"], default="autocorr")
    parser.add_argument("--frame-size", type=int, default=FRAME_SIZE)
    parser.add_argument("--hop-size", type=int, default=HOP_SIZE)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.path is None and args.demo is None and args.glide is None:
        parser.error("give an audio file, --demo or --glide")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loop = DetectionLoop(detector=make_detector(args.detector), ticker=ManualTicker())
    loop.apply_preset(args.preset or DEFAULT_PRESET)
    if args.key is not None:
        loop.set_key(args.key)
    if args.amount is not None:
        loop.set_amount(args.amount)

    state = loop.state
    print(f"Key {state.target_key.root} major, correction {state.amount * 100:.0f}%")
    print()
    analyze(make_source(args), loop)


if __name__ == "__main__":
    main()
