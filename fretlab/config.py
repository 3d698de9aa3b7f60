# config.py

import logging
import os
from pathlib import Path

# ── Musical Constants ─────────────────────────────────────────
NOTE_NAMES = [
    'C',  'C#', 'D',  'D#', 'E',  'F',  'F#', 'G',  'G#', 'A',  'A#', 'B'
]

NOTE_NAMES_FLAT = [
    'C',  'Db', 'D',  'Eb', 'E',  'F',  'Gb', 'G',  'Ab', 'A',  'Bb', 'B'
]

# Every accepted single-accidental spelling -> semitone.
# Double accidentals are folded in by notes.value_of().
NOTE_ALIASES = {
    'B#': 0,  'C':  0,
    'C#': 1,  'Db': 1,
    'D':  2,
    'D#': 3,  'Eb': 3,
    'E':  4,  'Fb': 4,
    'F':  5,  'E#': 5,
    'F#': 6,  'Gb': 6,
    'G':  7,
    'G#': 8,  'Ab': 8,
    'A':  9,
    'A#': 10, 'Bb': 10,
    'B':  11, 'Cb': 11,
}

# Seed table for reverse interval lookups (one label per offset)
INTERVAL_LABELS = {
    0: "1", 1: "b2", 2: "2", 3: "b3", 4: "3", 5: "4",
    6: "b5", 7: "5", 8: "#5", 9: "6", 10: "b7", 11: "7"
}

# Alternate spellings; forward lookups only
INTERVAL_ALIASES = {
    # degrees with accidentals
    "#2": 3, "#4": 6, "b6": 8, "bb7": 9,
    # compound extensions (octave removed)
    "b9": 1, "9": 2, "#9": 3, "11": 5, "#11": 6, "b13": 8, "13": 9,
    # quality names
    "P1": 0, "R": 0, "Root": 0,
    "m2": 1, "min2": 1,
    "M2": 2, "maj2": 2,
    "m3": 3, "min3": 3, "a9": 3,
    "M3": 4, "maj3": 4,
    "P4": 5,
    "A4": 6, "aug4": 6, "d5": 6, "dim5": 6,
    "P5": 7,
    "A5": 8, "aug5": 8, "m6": 8, "min6": 8,
    "M6": 9, "maj6": 9,
    "m7": 10, "min7": 10, "dom7": 10,
    "M7": 11, "maj7": 11,
}

# labels above the octave; their tones sit 12 higher than the folded offset
COMPOUND_LABELS = {"b9", "9", "#9", "a9", "11", "#11", "b13", "13"}

# ── Fretboard ─────────────────────────────────────────────────
MAX_FRETS = 15

TUNINGS = [
    {"name": "Standard (E A D G B E)",          "strings": ["E", "A", "D", "G", "B", "E"]},
    {"name": "Half-Step Down (D# G# C# F# A# D#)", "strings": ["D#", "G#", "C#", "F#", "A#", "D#"]},
    {"name": "All Fourths (E A D G C F)",       "strings": ["E", "A", "D", "G", "C", "F"]},
    {"name": "Drop D (D A D G B E)",            "strings": ["D", "A", "D", "G", "B", "E"]},
    {"name": "Drop C (C G C F A D)",            "strings": ["C", "G", "C", "F", "A", "D"]},
    {"name": "DADGAD (D A D G A D)",            "strings": ["D", "A", "D", "G", "A", "D"]},
    {"name": "Open G (D G D G B D)",            "strings": ["D", "G", "D", "G", "B", "D"]},
    {"name": "Open D (D A D F# A D)",           "strings": ["D", "A", "D", "F#", "A", "D"]},
    {"name": "Open C (C G C G C E)",            "strings": ["C", "G", "C", "G", "C", "E"]},
    {"name": "Standard C (C F A# D# G C)",      "strings": ["C", "F", "A#", "D#", "G", "C"]},
    {"name": "Baritone B (B E A D F# B)",       "strings": ["B", "E", "A", "D", "F#", "B"]},
]

DEFAULT_TUNING = TUNINGS[0]["name"]

# ── Playback ──────────────────────────────────────────────────
# Open strings of standard tuning, low -> high (E2 A2 D3 G3 B3 E4)
STANDARD_OPEN_MIDI = [40, 45, 50, 55, 59, 64]
A4_FREQUENCY = 440.0
A4_MIDI = 69
DEFAULT_VELOCITY = 100
DEFAULT_NOTE_SECONDS = 1.0
DEFAULT_TEMPO = 120   # BPM
TICKS_PER_BEAT = 960
MIDI_PORT_NAME = os.getenv("FRETLAB_MIDI_PORT") or None

# ── Data & Logging ────────────────────────────────────────────
DATA_DIR = Path(os.getenv("FRETLAB_DATA_DIR", Path(__file__).parent / "data"))
LOG_LEVEL = os.getenv("FRETLAB_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None):
    """Configure root logging for applications embedding fretlab."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
