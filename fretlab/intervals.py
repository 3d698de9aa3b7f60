# intervals.py

from typing import Optional

from .config import INTERVAL_ALIASES, INTERVAL_LABELS
from .errors import UnknownIntervalLabel


def _build_semitone_map(labels: dict, aliases: dict) -> dict:
    """Invert the seed table and layer the aliases on top."""
    semitones = {label: offset for offset, label in labels.items()}
    semitones.update(aliases)
    return semitones


SEMITONES = _build_semitone_map(INTERVAL_LABELS, INTERVAL_ALIASES)


def semitones_of(label) -> Optional[int]:
    """
    Semitone offset (0-11) for an interval label such as '1', 'b3', '#11' or 'maj7'.
    Returns None for labels outside the table.
    """
    if not isinstance(label, str):
        label = str(label)
    return SEMITONES.get(label.strip())


def require_semitones(label) -> int:
    offset = semitones_of(label)
    if offset is None:
        raise UnknownIntervalLabel(label)
    return offset


def canonical_label_of(semitones: int) -> str:
    """Single canonical label for an offset; aliases never come back out."""
    return INTERVAL_LABELS[semitones % 12]


def is_known(label) -> bool:
    return semitones_of(label) is not None
