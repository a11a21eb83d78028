"""
Note naming in 12-tone equal temperament.

Every octave doubles the frequency and is split into 12 equal steps, so a
semitone is a factor of 2 ** (1/12). Counting half steps up from C0 gives
both the pitch class (half_steps mod 12) and the octave (half_steps // 12).
"""

import math
from dataclasses import dataclass

from voicelive.config import A4_FREQUENCY, NOTE_NAMES

# C0 sits 4 octaves and 9 semitones (4.75 octaves) below A4
C0_FREQUENCY = A4_FREQUENCY * 2 ** -4.75


@dataclass(frozen=True)
class Note:
    name: str
    octave: int

    def __str__(self):
        return f"{self.name}{self.octave}"


def to_note(frequency):
    """
    Map a frequency to the nearest equal-tempered note.

    Args:
        frequency: Positive frequency in Hz

    Returns:
        Note, e.g. Note("A", 4) for 440 Hz
    """
    # Halves round up, so a pitch exactly between two notes takes the upper one
    half_steps = math.floor(12 * math.log2(frequency / C0_FREQUENCY) + 0.5)
    return Note(NOTE_NAMES[half_steps % 12], half_steps // 12)


def cents_between(frequency, reference):
    """
    Signed distance from reference to frequency in cents.

    cents = 1200 * log2(frequency / reference)
    Positive = sharp (above reference), negative = flat.
    """
    return 1200 * math.log2(frequency / reference)
