# chords.py

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .notes import name_of, normalize, try_value_of

logger = logging.getLogger(__name__)

# Chord quality -> sorted semitone offsets from the root.
# Every formula is unique, so at most one can match a given rooting.
CHORD_FORMULAS = {
    'Major':      (0, 4, 7),
    'Minor':      (0, 3, 7),
    'Diminished': (0, 3, 6),
    'Augmented':  (0, 4, 8),
    'Sus4':       (0, 5, 7),
    'Sus2':       (0, 2, 7),
    'Maj7':       (0, 4, 7, 11),
    '7':          (0, 4, 7, 10),
    'm7':         (0, 3, 7, 10),
    'm(Maj7)':    (0, 3, 7, 11),
    'm7b5':       (0, 3, 6, 10),   # half-diminished
    'dim7':       (0, 3, 6, 9),
    '6':          (0, 4, 7, 9),
    'm6':         (0, 3, 7, 9),
    '7sus4':      (0, 5, 7, 10),
    'Maj7#5':     (0, 4, 8, 11),
    '7#5':        (0, 4, 8, 10),
    '7b5':        (0, 4, 6, 10),
}

_FORMULA_LOOKUP = {offsets: quality for quality, offsets in CHORD_FORMULAS.items()}

MIN_CHORD_NOTES = 3


@dataclass(frozen=True)
class ChordMatch:
    root: int
    chord_type: str
    offsets: Tuple[int, ...]

    @property
    def root_name(self) -> str:
        return name_of(self.root)

    @property
    def name(self) -> str:
        return f"{self.root_name} {self.chord_type}"

    def __str__(self):
        return self.name


def unique_pitch_classes(notes: Iterable) -> List[int]:
    """Distinct pitch classes in first-seen order; unknown spellings are dropped."""
    seen = []
    for note in notes:
        pc = try_value_of(note)
        if pc is not None and pc not in seen:
            seen.append(pc)
    return seen


def chord_offsets(pitch_classes: Iterable[int], root: int) -> Tuple[int, ...]:
    return tuple(sorted(normalize(pc - root) for pc in pitch_classes))


def find_chord(notes: Iterable) -> Optional[ChordMatch]:
    """
    Try every selected note as the root, in the order the notes were first
    selected, and return the first rooting whose offsets equal a known
    formula exactly. None when nothing matches or fewer than three distinct
    pitch classes are given.
    """
    pcs = unique_pitch_classes(notes)
    if len(pcs) < MIN_CHORD_NOTES:
        return None

    for root in pcs:
        offsets = chord_offsets(pcs, root)
        quality = _FORMULA_LOOKUP.get(offsets)
        if quality is not None:
            return ChordMatch(root=root, chord_type=quality, offsets=offsets)

    logger.debug("No chord for pitch classes %s", pcs)
    return None


def identify_chord(notes: Iterable) -> Optional[str]:
    """'C Major', 'F# m7b5' ... or None."""
    match = find_chord(notes)
    return match.name if match else None
