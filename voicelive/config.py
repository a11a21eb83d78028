# Vocal presets: dict of { preset_id: {"key": root, "amount": percent} }
# Only the pitch-correction part of each preset lives here; the effect chain
# settings (reverb, delay, chorus...) belong to the audio graph, not the engine.
VOCAL_PRESETS = {
    "simon-le-bon": {"key": "D", "amount": 30},
    "dave-gahan": {"key": "A", "amount": 20},
    "chris-martin": {"key": "G", "amount": 25},
    "mark-hollis": {"key": "C", "amount": 5},
    "bernard-sumner": {"key": "E", "amount": 35},
    "morten-harket": {"key": "A", "amount": 40},
    "seal": {"key": "F", "amount": 15},
    "freddie-mercury": {"key": "C", "amount": 10},
    "adele": {"key": "D", "amount": 12},
    "frank-sinatra": {"key": "C", "amount": 5},
    "beyonce": {"key": "G", "amount": 45},
    "ed-sheeran": {"key": "G", "amount": 20},
    "billie-eilish": {"key": "A", "amount": 60},
    "bruno-mars": {"key": "F", "amount": 35},
    "ariana-grande": {"key": "E", "amount": 50},
}

# Default preset
DEFAULT_PRESET = "simon-le-bon"

# Audio settings
# Browsers and most USB mics run at 44.1kHz, so that is what we analyse
SAMPLE_RATE = 44100

# Frame size for pitch analysis (~46ms window at 44.1kHz).
# Autocorrelation is O(n^2) in this, so it bounds the real-time budget.
FRAME_SIZE = 2048

# Hop length for offline (file) analysis
HOP_SIZE = 1024

# Seconds between detection ticks (~one display frame at 60 fps)
TICK_INTERVAL = 1 / 60

# Pitch detection settings
SILENCE_RMS = 0.01       # below this RMS a frame counts as silence
TRIM_THRESHOLD = 0.2     # |amplitude| under this marks a trim point
PEAK_RATIO = 0.9         # a period peak must beat this share of the best one
MIN_FREQUENCY = 60.0     # Hz, just below a low male voice
MAX_FREQUENCY = 1200.0   # Hz, above a soprano's top notes

# Tuning reference: A4 = 440 Hz (MIDI note 69)
A4_FREQUENCY = 440.0
A4_MIDI = 69

# Chromatic pitch classes, starting at C
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Semitone offset from C for every accepted key name (sharps and flats)
KEY_OFFSETS = {
    "C": 0, "C#": 1, "Db": 1, "D": 2, "D#": 3, "Eb": 3,
    "E": 4, "F": 5, "F#": 6, "Gb": 6, "G": 7, "G#": 8,
    "Ab": 8, "A": 9, "A#": 10, "Bb": 10, "B": 11,
}

# Major scale degrees, in semitones from the root
MAJOR_SCALE = (0, 2, 4, 5, 7, 9, 11)

# Shift ratio limits: one octave down to one octave up
MIN_SHIFT_RATIO = 0.5
MAX_SHIFT_RATIO = 2.0
