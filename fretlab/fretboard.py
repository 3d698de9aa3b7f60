# fretboard.py

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .config import MAX_FRETS, TUNINGS
from .errors import InvalidTuning, UnknownNoteSpelling
from .notes import name_of, normalize, value_of

logger = logging.getLogger(__name__)

CellId = Tuple[int, int]  # (string, fret)


@dataclass(frozen=True)
class FretCell:
    string: int
    fret: int
    pitch_class: int

    @property
    def id(self) -> CellId:
        return (self.string, self.fret)

    @property
    def name(self) -> str:
        return name_of(self.pitch_class)

    @property
    def is_open(self) -> bool:
        return self.fret == 0


@dataclass(frozen=True)
class Highlight:
    label: str
    is_root: bool = False


@dataclass
class Fretboard:
    """Pitch-class grid for one tuning. String 0 is the lowest string."""

    tuning: Tuple[str, ...]
    num_frets: int
    rows: Dict[int, List[FretCell]] = field(default_factory=dict)
    skipped_strings: Tuple[int, ...] = ()

    @property
    def strings(self) -> List[int]:
        return sorted(self.rows)

    @property
    def num_strings(self) -> int:
        return len(self.rows)

    def open_value(self, string: int) -> int:
        return self.rows[string][0].pitch_class

    def cell(self, string: int, fret: int) -> FretCell:
        if string not in self.rows:
            raise KeyError(f"No string {string} on this fretboard")
        if not 0 <= fret <= self.num_frets:
            raise KeyError(f"Fret {fret} outside 0..{self.num_frets}")
        return self.rows[string][fret]

    def positions_of(self, pitch_class: int) -> List[FretCell]:
        pc = normalize(pitch_class)
        return [c for c in self if c.pitch_class == pc]

    def __iter__(self) -> Iterator[FretCell]:
        for s in self.strings:
            yield from self.rows[s]

    def __len__(self) -> int:
        return sum(len(row) for row in self.rows.values())


def tuning_names() -> List[str]:
    return [t["name"] for t in TUNINGS]


def get_tuning(name: str) -> Tuple[str, ...]:
    """Open-string spellings (low -> high) for a named tuning."""
    for t in TUNINGS:
        if t["name"] == name:
            return tuple(t["strings"])
    raise InvalidTuning(f"Unknown tuning: {name!r}")


def _open_string_value(tuning: Sequence[str], string: int) -> int:
    try:
        return value_of(tuning[string])
    except UnknownNoteSpelling:
        raise InvalidTuning(
            f"Invalid base note {tuning[string]!r} in tuning", string_index=string
        ) from None


def build_fretboard(tuning: Union[str, Sequence[str]], num_frets: int = MAX_FRETS) -> Fretboard:
    """
    Compute the sounding pitch class of every (string, fret) cell.

    Strings whose open note cannot be resolved are left out of the grid and
    listed in ``skipped_strings``. Always a full rebuild; call again after a
    tuning change.
    """
    if num_frets < 0:
        raise ValueError("num_frets must be >= 0")
    strings = get_tuning(tuning) if isinstance(tuning, str) else tuple(tuning)

    rows: Dict[int, List[FretCell]] = {}
    skipped = []
    for s in range(len(strings)):
        try:
            base = _open_string_value(strings, s)
        except InvalidTuning as e:
            logger.error("%s. Skipping string %d.", e, s)
            skipped.append(s)
            continue
        rows[s] = [FretCell(s, f, (base + f) % 12) for f in range(num_frets + 1)]

    return Fretboard(tuning=strings, num_frets=num_frets, rows=rows,
                     skipped_strings=tuple(skipped))


def project_highlights(pattern, fretboard: Fretboard) -> Dict[CellId, Highlight]:
    """
    Label every cell whose pitch class belongs to the pattern. Cells outside
    the pattern are absent from the result; root cells carry is_root=True.
    """
    if pattern is None:
        return {}
    labels = pattern.labels
    highlights: Dict[CellId, Highlight] = {}
    for cell in fretboard:
        label: Optional[str] = labels.get(cell.pitch_class)
        if label is not None:
            highlights[cell.id] = Highlight(label, cell.pitch_class == pattern.root)
    return highlights
