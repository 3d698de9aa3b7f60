# notes.py

import logging
from typing import Optional, Union

from .config import NOTE_ALIASES, NOTE_NAMES
from .errors import UnknownNoteSpelling

logger = logging.getLogger(__name__)

NoteLike = Union[str, int]

_ACCIDENTAL_STEPS = {'b': -1, '#': 1, 'x': 2}


def normalize(value: int) -> int:
    """Fold any integer (negatives included) into a pitch class 0-11."""
    return value % 12


def _clean(name: str) -> str:
    # "db" / "DB" / "D♭" -> "Db"
    text = name.strip().replace('♯', '#').replace('♭', 'b')
    if not text:
        return text
    return text[0].upper() + text[1:].lower()


def value_of(name: NoteLike) -> int:
    """
    Resolve a note spelling ('C#', 'Db', 'B#', 'Ebb', 'Fx' ...) to its pitch class.
    Integers are accepted and folded mod 12.
    """
    if isinstance(name, bool):
        raise UnknownNoteSpelling(name)
    if isinstance(name, int):
        return normalize(name)
    if not isinstance(name, str):
        raise UnknownNoteSpelling(name)

    spelling = _clean(name)
    if spelling in NOTE_ALIASES:
        return NOTE_ALIASES[spelling]

    # Double accidentals: Cbb, F##, Fx ...
    letter, accidentals = spelling[:1], spelling[1:].replace('##', 'x')
    if letter not in NOTE_ALIASES or len(set(accidentals)) != 1:
        raise UnknownNoteSpelling(name)
    steps = 0
    for char in accidentals:
        if char not in _ACCIDENTAL_STEPS:
            raise UnknownNoteSpelling(name)
        steps += _ACCIDENTAL_STEPS[char]
    if abs(steps) > 2:
        raise UnknownNoteSpelling(name)
    return normalize(NOTE_ALIASES[letter] + steps)


def try_value_of(name: NoteLike) -> Optional[int]:
    """Like value_of() but logs and returns None for unknown spellings."""
    try:
        return value_of(name)
    except UnknownNoteSpelling as e:
        logger.warning("%s; skipping", e)
        return None


def name_of(value: int) -> str:
    """Canonical (sharp) spelling of a pitch class."""
    return NOTE_NAMES[normalize(value)]


def is_valid(name: NoteLike) -> bool:
    try:
        value_of(name)
    except UnknownNoteSpelling:
        return False
    return True


def transpose(note: NoteLike, semitones: int) -> int:
    return normalize(value_of(note) + semitones)


def shift_note(note: NoteLike, semitones: int) -> str:
    return name_of(transpose(note, semitones))


def interval_between(root: NoteLike, note: NoteLike) -> int:
    """Semitones from root up to note, mod 12."""
    return normalize(value_of(note) - value_of(root))
