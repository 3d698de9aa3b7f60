# state.py

import logging
from typing import Dict, List, Optional

from .chords import ChordMatch, find_chord
from .config import DEFAULT_TUNING, MAX_FRETS, NOTE_NAMES, NOTE_NAMES_FLAT
from .errors import InvalidTuning
from .fretboard import CellId, Fretboard, Highlight, build_fretboard, get_tuning, project_highlights
from .intervals import canonical_label_of
from .notes import normalize, value_of
from .theory import Pattern, default_library, get_intervals, inversion_count, resolve_pattern

logger = logging.getLogger(__name__)


class AppState:
    """
    Mutable session state owned by the UI. Every derived value (board,
    pattern, highlights, chord) is recomputed from these fields on demand.
    """

    def __init__(self, library=None, num_frets: int = MAX_FRETS):
        self.library = default_library() if library is None else library
        self.num_frets = num_frets
        self.reset()

    def reset(self):
        self.tuning = DEFAULT_TUNING
        self.root = 0
        self.pattern_type = "scale"   # "scale", "chord" or "arpeggio"
        self.pattern_name = None
        self.inversion = 0
        self.drop = None
        self.use_flats = False
        self.left_handed = False
        self.audio_enabled = False
        # (string, fret) -> note name, in click order
        self.selected: Dict[CellId, str] = {}

    def update(self, root=None, pattern_type=None, pattern_name=None,
               inversion=None, drop=None, use_flats=None, left_handed=None):
        if root is not None:
            self.root = value_of(root)
        if pattern_type is not None:
            if pattern_type != self.pattern_type:
                self.pattern_name = None
            self.pattern_type = pattern_type
            self.inversion = 0
        if pattern_name is not None:
            self.pattern_name = pattern_name
            self.inversion = 0
        if inversion is not None:
            self.inversion = inversion
        if drop is not None:
            self.drop = drop or None
        if use_flats is not None:
            self.use_flats = use_flats
        if left_handed is not None:
            self.left_handed = left_handed

    def set_tuning(self, name: str) -> bool:
        """Switch tuning; an unknown name keeps the previous one."""
        try:
            get_tuning(name)
        except InvalidTuning as e:
            logger.error("%s; keeping %r", e, self.tuning)
            return False
        self.tuning = name
        self.clear_selection()
        logger.info("Tuning changed to: %s", name)
        return True

    def toggle_audio(self) -> bool:
        self.audio_enabled = not self.audio_enabled
        return self.audio_enabled

    # ── Derived views ─────────────────────────────────────────

    def fretboard(self) -> Fretboard:
        return build_fretboard(self.tuning, self.num_frets)

    def current_pattern(self) -> Optional[Pattern]:
        if not self.pattern_name:
            return None
        return resolve_pattern(self.pattern_type, self.root, self.pattern_name,
                               inversion=self.inversion, drop=self.drop,
                               library=self.library)

    def highlights(self, fretboard: Optional[Fretboard] = None) -> Dict[CellId, Highlight]:
        board = self.fretboard() if fretboard is None else fretboard
        return project_highlights(self.current_pattern(), board)

    def inversion_choices(self) -> int:
        labels = get_intervals(self.pattern_type, self.pattern_name or "", self.library)
        return inversion_count(self.pattern_type, labels)

    # ── Note selection ────────────────────────────────────────

    def toggle_cell(self, string: int, fret: int, fretboard: Optional[Fretboard] = None) -> bool:
        """Select or deselect a cell; returns True when it is now selected."""
        cell_id = (string, fret)
        if cell_id in self.selected:
            del self.selected[cell_id]
            return False
        board = self.fretboard() if fretboard is None else fretboard
        self.selected[cell_id] = board.cell(string, fret).name
        return True

    def selected_notes(self) -> List[str]:
        return list(self.selected.values())

    def clear_selection(self):
        self.selected.clear()

    def identified_chord(self) -> Optional[ChordMatch]:
        return find_chord(self.selected_notes())

    def chord_display(self) -> str:
        match = self.identified_chord()
        if match is None:
            return "---"
        return f"{self.note_label(match.root)} {match.chord_type}"

    # ── Display helpers ───────────────────────────────────────

    def note_label(self, pitch_class: int) -> str:
        names = NOTE_NAMES_FLAT if self.use_flats else NOTE_NAMES
        return names[normalize(pitch_class)]

    def interval_label(self, pitch_class: int) -> str:
        """Interval of a clicked note above the current root."""
        return canonical_label_of(pitch_class - self.root)

    def fret_order(self) -> List[int]:
        frets = list(range(self.num_frets + 1))
        return frets[::-1] if self.left_handed else frets

