"""
Pitch correction: how far to shift the voice to land on the key.

Two pieces:
  1. Quantize: find the nearest note of the selected major key
  2. Blend: turn "detected -> target" into a shift ratio, scaled by the
     correction amount (0% = leave the voice alone, 100% = hard snap)

The result is a plain number for an external pitch shifter to apply.
Nothing here keeps state; every call recomputes from its arguments.
"""

import logging
import math
from dataclasses import dataclass, field

from voicelive.config import (
    A4_FREQUENCY,
    A4_MIDI,
    KEY_OFFSETS,
    MAJOR_SCALE,
    MAX_SHIFT_RATIO,
    MIN_SHIFT_RATIO,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Key:
    root: str = "C"
    scale: str = "major"
    offset: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Resolved once here, so an unknown root warns once and not every tick
        object.__setattr__(self, "offset", key_offset(self.root))


def key_offset(root):
    """
    Semitone offset of a key root from C.

    Unknown roots fall back to C (offset 0) and log a warning.
    """
    if root in KEY_OFFSETS:
        return KEY_OFFSETS[root]
    logger.warning("Unknown key %r, falling back to C", root)
    return 0


def nearest_in_key_frequency(frequency, key):
    """
    Snap a frequency to the nearest note of a major key.

    Distances are measured around the pitch-class circle, so B is one
    semitone from C. When two scale notes are equally close, the one whose
    degree comes first in MAJOR_SCALE wins. The octave is taken from the
    detected pitch and is not bumped when the nearest note wraps past C.

    Args:
        frequency: Detected frequency in Hz
        key: Key to quantize to

    Returns:
        Target frequency in Hz
    """
    midi = 12 * math.log2(frequency / A4_FREQUENCY) + A4_MIDI
    octave = math.floor(midi / 12)
    semitone = math.floor(midi % 12 + 0.5)

    offset = key.offset
    min_distance = math.inf
    nearest = semitone
    for degree in MAJOR_SCALE:
        note_in_key = (offset + degree) % 12
        distance = abs(semitone - note_in_key)
        distance = min(distance, 12 - distance)
        if distance < min_distance:
            min_distance = distance
            nearest = note_in_key

    corrected_midi = octave * 12 + nearest
    return A4_FREQUENCY * 2 ** ((corrected_midi - A4_MIDI) / 12)


def compute_shift_ratio(detected, key, amount_percent):
    """
    Shift ratio that moves `detected` toward the key by `amount_percent`.

    Returns exactly 1.0 (pass-through) when nothing was detected or the
    amount is zero. Otherwise the ratio is clamped to one octave either way.
    """
    if detected is None or amount_percent == 0:
        return 1.0

    target = nearest_in_key_frequency(detected, key)
    correction_ratio = target / detected
    amount = amount_percent / 100
    blended = 1.0 + (correction_ratio - 1.0) * amount
    return max(MIN_SHIFT_RATIO, min(MAX_SHIFT_RATIO, blended))
