# theory.py

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .config import COMPOUND_LABELS, DATA_DIR
from .errors import UnknownNoteSpelling
from .intervals import is_known, semitones_of
from .notes import normalize, value_of

logger = logging.getLogger(__name__)

CATEGORIES = ('scales', 'chords', 'arpeggios')

# pattern type -> library category
PATTERN_TYPES = {
    'scale': 'scales',
    'chord': 'chords',
    'arpeggio': 'arpeggios',
}

VOICED_TYPES = ('chord', 'arpeggio')


@dataclass(frozen=True)
class PatternTone:
    label: str
    semitones: int      # octave-aware offset from the root
    pitch_class: int


@dataclass(frozen=True)
class Pattern:
    type: str
    name: str
    root: int
    tones: Tuple[PatternTone, ...]

    @property
    def intervals(self) -> Tuple[str, ...]:
        return tuple(t.label for t in self.tones)

    @property
    def pitch_classes(self) -> frozenset:
        return frozenset(t.pitch_class for t in self.tones)

    @property
    def labels(self) -> Dict[int, str]:
        """pitch class -> interval label; the first tone for a pitch class wins."""
        out: Dict[int, str] = {}
        for t in self.tones:
            out.setdefault(t.pitch_class, t.label)
        return out

    def __len__(self):
        return len(self.tones)


# ── Library loading ───────────────────────────────────────────

def _resolve_aliases(raw_data: dict) -> Dict[str, List[str]]:
    """
    Resolve 'alias_of' entries so every name maps to a plain list of interval labels.
    Entries may be a bare list or a dict with 'intervals' / 'alias_of'.
    Anything malformed resolves to an empty list.
    """
    def intervals_of(entry) -> list:
        if isinstance(entry, list):
            return entry
        if isinstance(entry, dict):
            return entry.get('intervals', [])
        return []

    resolved = {}
    for key, entry in raw_data.items():
        target = entry.get('alias_of', key) if isinstance(entry, dict) else key
        base = raw_data.get(target, {})
        if target != key and isinstance(base, dict) and 'alias_of' in base:
            logger.warning("Chained alias %r -> %r ignored", key, target)
            base = {}
        ivs = intervals_of(base)
        if not isinstance(ivs, list) or not all(isinstance(i, (str, int)) for i in ivs):
            logger.warning("Malformed intervals for %r; treating as empty", key)
            ivs = []
        resolved[key] = [str(i) for i in ivs]
    return resolved


def _load_category(path: Path, category: str) -> Dict[str, List[str]]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Pattern file not found: %s", path)
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e)
        return {}

    # Either {"chords": {...}} or the bare mapping
    if isinstance(data, dict) and isinstance(data.get(category), dict):
        data = data[category]
    if not isinstance(data, dict):
        logger.error("%s does not contain a mapping of patterns", path)
        return {}
    return _resolve_aliases(data)


def load_library(data_dir: Union[str, Path, None] = None) -> Dict[str, Dict[str, List[str]]]:
    """Read scales.json, chords.json and arpeggios.json from data_dir."""
    base = Path(data_dir) if data_dir is not None else DATA_DIR
    return {cat: _load_category(base / f"{cat}.json", cat) for cat in CATEGORIES}


@lru_cache(maxsize=None)
def _bundled_library():
    lib = load_library()
    return {cat: {name: tuple(ivs) for name, ivs in entries.items()}
            for cat, entries in lib.items()}


def default_library() -> Dict[str, Dict[str, Tuple[str, ...]]]:
    """The bundled pattern library (loaded once)."""
    return _bundled_library()


def category_of(pattern_type: str) -> Optional[str]:
    if pattern_type in CATEGORIES:
        return pattern_type
    return PATTERN_TYPES.get(pattern_type)


def pattern_names(pattern_type: str, library=None) -> List[str]:
    library = default_library() if library is None else library
    category = category_of(pattern_type)
    entries = library.get(category) if category else None
    if not isinstance(entries, dict):
        return []
    return sorted(entries, key=str.lower)


def get_intervals(pattern_type: str, name: str, library=None) -> List[str]:
    library = default_library() if library is None else library
    category = category_of(pattern_type)
    entries = library.get(category) if category else None
    if not isinstance(entries, dict):
        return []
    ivs = entries.get(name)
    if not isinstance(ivs, (list, tuple)):
        return []
    return list(ivs)


# ── Voicing arithmetic ────────────────────────────────────────

def invert(labels: Sequence, index: int) -> list:
    """Rotate left: the first `index` items move to the end, order kept."""
    items = list(labels)
    if not items:
        return items
    k = index % len(items)
    return items[k:] + items[:k]


def inversion_count(pattern_type: str, labels: Sequence) -> int:
    """How many inversion states a pattern offers (1 = root position only)."""
    if pattern_type not in VOICED_TYPES:
        return 1
    return max(sum(1 for label in labels if is_known(label)), 1)


def _parse_drop(drop) -> Optional[int]:
    if drop in (None, '', 0, '0'):
        return None
    try:
        n = int(drop)
    except (TypeError, ValueError):
        raise ValueError(f"Unsupported drop voicing: {drop!r}") from None
    if n not in (2, 3):
        raise ValueError(f"Unsupported drop voicing: {drop!r}")
    return n


def drop_voicing(tones: Sequence[PatternTone], drop) -> List[PatternTone]:
    """
    Drop 2 / drop 3 on a four-note close voicing: the 2nd (or 3rd) tone from
    the top is lowered an octave and becomes the bass.
    """
    n = _parse_drop(drop)
    if n is None:
        return list(tones)
    ordered = sorted(tones, key=lambda t: t.semitones)
    if len(ordered) != 4:
        logger.info("Drop %d needs four tones, got %d; leaving voicing as is", n, len(ordered))
        return list(tones)
    dropped = ordered.pop(len(ordered) - n)
    lowered = PatternTone(dropped.label, dropped.semitones - 12, dropped.pitch_class)
    return [lowered] + ordered


# ── Resolution ────────────────────────────────────────────────

def resolve(pattern_type: str, root, labels: Sequence, inversion: int = 0,
            drop=None, name: str = "") -> Optional[Pattern]:
    """
    Build a Pattern from interval labels above a root.

    Unknown labels are skipped. Inversion and drop voicing only apply to
    chords and arpeggios. Returns None when the root is unknown or nothing
    resolves.
    """
    try:
        root_pc = value_of(root)
    except UnknownNoteSpelling as e:
        logger.warning("%s; no pattern", e)
        return None

    valid = []
    for label in labels:
        st = semitones_of(label)
        if st is None:
            logger.warning("Unknown interval %r in %r; skipping", label, name or pattern_type)
            continue
        label = str(label).strip()
        if label in COMPOUND_LABELS:
            st += 12
        valid.append((label, st))
    if not valid:
        return None

    voiced = pattern_type in VOICED_TYPES
    k = inversion % len(valid) if voiced else 0
    tones = [PatternTone(label, st, normalize(root_pc + st)) for label, st in valid]
    if k:
        # tones rotated past the bass go up an octave
        raised = [PatternTone(t.label, t.semitones + 12, t.pitch_class) for t in tones[:k]]
        tones = tones[k:] + raised

    out_type = pattern_type
    try:
        n = _parse_drop(drop) if voiced else None
    except ValueError as e:
        logger.warning("%s; ignoring", e)
        n = None
    if n is not None and len(tones) == 4:
        tones = drop_voicing(tones, n)
        out_type = 'voicing'
        name = f"{name} (Drop {n})".strip()
    elif n is not None:
        logger.info("Drop %d needs four tones, %r has %d", n, name, len(tones))

    return Pattern(type=out_type, name=name, root=root_pc, tones=tuple(tones))


def resolve_pattern(pattern_type: str, root_name, pattern_name: str,
                    inversion: int = 0, drop=None, library=None) -> Optional[Pattern]:
    """Look a pattern up in the library and resolve it above root_name."""
    category = category_of(pattern_type)
    if category is None:
        logger.warning("Unknown pattern type %r", pattern_type)
        return None
    singular = next(t for t, c in PATTERN_TYPES.items() if c == category)
    labels = get_intervals(category, pattern_name, library)
    if not labels:
        logger.warning("No intervals for %s %r", category, pattern_name)
        return None
    return resolve(singular, root_name, labels, inversion=inversion, drop=drop,
                   name=pattern_name)
