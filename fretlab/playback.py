# playback.py

import logging
import threading
from typing import Iterable, List, Optional, Sequence

import mido
from mido import Message, MetaMessage, MidiFile, MidiTrack

from .config import (A4_FREQUENCY, A4_MIDI, DEFAULT_NOTE_SECONDS, DEFAULT_TEMPO,
                     DEFAULT_VELOCITY, MIDI_PORT_NAME, STANDARD_OPEN_MIDI,
                     TICKS_PER_BEAT)

logger = logging.getLogger(__name__)


# ── Pitch helpers ─────────────────────────────────────────────

def open_string_midi(open_values: Sequence[int]) -> List[int]:
    """
    Place each open-string pitch class in the octave closest to the matching
    string of standard tuning (E2 A2 D3 G3 B3 E4). Extra strings continue
    upward in fourths.
    """
    notes = []
    for s, pc in enumerate(open_values):
        if s < len(STANDARD_OPEN_MIDI):
            ref = STANDARD_OPEN_MIDI[s]
        else:
            ref = STANDARD_OPEN_MIDI[-1] + 5 * (s - len(STANDARD_OPEN_MIDI) + 1)
        delta = ((pc - ref) % 12 + 6) % 12 - 6   # -6..5
        notes.append(ref + delta)
    return notes


def midi_note(fretboard, string: int, fret: int) -> int:
    """MIDI note sounding at a fret cell."""
    cell = fretboard.cell(string, fret)
    # skipped strings keep their slot so octaves follow the physical string
    opens = open_string_midi([fretboard.open_value(s) if s in fretboard.rows else 0
                              for s in range(len(fretboard.tuning))])
    return opens[string] + cell.fret


def frequency(midi: int) -> float:
    return A4_FREQUENCY * 2 ** ((midi - A4_MIDI) / 12)


def pattern_midi_notes(pattern, base_midi: int = 48) -> List[int]:
    """
    Octave-aware notes of a resolved pattern. base_midi is lifted to the
    pattern root (C3 = 48 by default).
    """
    root = base_midi + (pattern.root - base_midi) % 12
    return [root + t.semitones for t in pattern.tones]


# ── Live playback ─────────────────────────────────────────────

class Player:
    """
    Sends a short note to a MIDI output when a fret cell is clicked.
    Disabled by default; the port is opened on first use.
    """

    def __init__(self, port=None, port_name: Optional[str] = MIDI_PORT_NAME,
                 enabled: bool = False, duration: float = DEFAULT_NOTE_SECONDS,
                 velocity: int = DEFAULT_VELOCITY, channel: int = 0):
        self.port = port
        self.port_name = port_name
        self.enabled = enabled
        self.duration = duration
        self.velocity = velocity
        self.channel = channel
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def toggle(self, enabled: Optional[bool] = None) -> bool:
        self.enabled = (not self.enabled) if enabled is None else bool(enabled)
        return self.enabled

    def _ensure_port(self) -> bool:
        if self.port is not None:
            return True
        try:
            self.port = mido.open_output(self.port_name)
        except (OSError, ImportError, ValueError) as e:
            logger.error("MIDI output unavailable (%s); audio disabled", e)
            self.enabled = False
            return False
        logger.info("Opened MIDI output %s", getattr(self.port, "name", self.port_name))
        return True

    def play(self, note: int) -> bool:
        """Play one MIDI note; returns False when nothing was sent."""
        if not self.enabled:
            return False
        if not 0 <= note <= 127:
            logger.warning("MIDI note %d out of range", note)
            return False
        if not self._ensure_port():
            return False

        timer = threading.Timer(self.duration, self._release, args=(note,))
        timer.daemon = True
        with self._lock:
            if self.port is None:
                return False
            self.port.send(Message('note_on', note=note, velocity=self.velocity,
                                   channel=self.channel))
            self._timers.append(timer)
        timer.start()
        return True

    def play_cell(self, fretboard, string: int, fret: int) -> bool:
        return self.play(midi_note(fretboard, string, fret))

    def _release(self, note: int):
        with self._lock:
            if self.port is not None:
                self.port.send(Message('note_off', note=note, velocity=0,
                                       channel=self.channel))
            self._timers = [t for t in self._timers if t.is_alive()
                            and t is not threading.current_thread()]

    def close(self):
        with self._lock:
            timers, self._timers = self._timers, []
            port, self.port = self.port, None
        for t in timers:
            t.cancel()
        if port is not None:
            port.reset()
            port.close()


# ── Export ────────────────────────────────────────────────────

def export_notes(notes: Iterable[int], path, bpm: int = DEFAULT_TEMPO,
                 arpeggiate: bool = False, beats: int = 4) -> Optional[MidiFile]:
    """
    Write notes to a type-0 Standard MIDI File.

    Block chord by default (all notes for `beats` quarter notes); with
    arpeggiate=True each note gets one quarter note in turn.
    """
    notes = [n for n in notes if 0 <= n <= 127]
    if not notes:
        logger.warning("Nothing to export to %s", path)
        return None

    mid = MidiFile(type=0, ticks_per_beat=TICKS_PER_BEAT)
    track = MidiTrack()
    mid.tracks.append(track)
    track.append(MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=0))

    ppq = mid.ticks_per_beat
    if arpeggiate:
        for n in notes:
            track.append(Message('note_on', note=n, velocity=DEFAULT_VELOCITY, time=0))
            track.append(Message('note_off', note=n, velocity=0, time=ppq))
    else:
        for n in notes:
            track.append(Message('note_on', note=n, velocity=DEFAULT_VELOCITY, time=0))
        release = beats * ppq
        track.append(Message('note_off', note=notes[0], velocity=0, time=release))
        for n in notes[1:]:
            track.append(Message('note_off', note=n, velocity=0, time=0))

    mid.save(str(path))
    logger.info("Exported %d notes to %s", len(notes), path)
    return mid
