import logging

from .chords import CHORD_FORMULAS, ChordMatch, find_chord, identify_chord
from .errors import FretlabError, InvalidTuning, UnknownIntervalLabel, UnknownNoteSpelling
from .fretboard import FretCell, Fretboard, Highlight, build_fretboard, get_tuning, project_highlights
from .intervals import canonical_label_of, semitones_of
from .notes import name_of, value_of
from .theory import Pattern, PatternTone, load_library, resolve, resolve_pattern

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
