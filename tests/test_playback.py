import mido
import pytest

from fretlab import playback
from fretlab.fretboard import build_fretboard
from fretlab.playback import (Player, export_notes, frequency, midi_note, open_string_midi,
                              pattern_midi_notes)
from fretlab.theory import resolve


def test_standard_open_strings_midi(standard_board):
    opens = [midi_note(standard_board, s, 0) for s in standard_board.strings]
    assert opens == [40, 45, 50, 55, 59, 64]


def test_alternate_tunings_stay_near_standard_octaves():
    assert open_string_midi([2, 9, 2, 7, 11, 4]) == [38, 45, 50, 55, 59, 64]   # drop D
    assert open_string_midi([11])[0] == 35                                      # baritone B1
    assert open_string_midi([4, 9, 2, 7, 11, 4, 9])[6] == 69                    # 7th string


def test_fretted_note(standard_board):
    assert midi_note(standard_board, 0, 12) == 52
    assert midi_note(standard_board, 5, 5) == 69


def test_skipped_string_keeps_octaves():
    board = build_fretboard(["E", "A", "?", "G", "B", "E"], 5)
    assert midi_note(board, 3, 0) == 55


def test_frequency():
    assert frequency(69) == pytest.approx(440.0)
    assert frequency(40) == pytest.approx(82.41, abs=0.01)
    assert frequency(57) == pytest.approx(220.0)


def test_pattern_midi_notes():
    pattern = resolve("chord", "C", ["1", "3", "5", "7"], drop=2)
    assert pattern_midi_notes(pattern) == [43, 48, 52, 59]


def test_disabled_player_sends_nothing(fake_port, standard_board):
    player = Player(port=fake_port)
    assert not player.play_cell(standard_board, 0, 0)
    assert fake_port.sent == []


def test_player_sends_note_on_and_off(fake_port):
    player = Player(port=fake_port, enabled=True, duration=60)
    assert player.play(64)
    on = fake_port.sent[0]
    assert on.type == "note_on" and on.note == 64 and on.velocity == 100

    player._release(64)
    off = fake_port.sent[-1]
    assert off.type == "note_off" and off.note == 64

    player.close()
    assert fake_port.was_reset and fake_port.closed
    assert player.port is None


def test_release_after_close_sends_nothing(fake_port):
    player = Player(port=fake_port, enabled=True, duration=60)
    player.play(60)
    player.close()
    sent = len(fake_port.sent)
    player._release(60)
    assert len(fake_port.sent) == sent
    assert player._timers == []


def test_player_rejects_out_of_range_notes(fake_port):
    player = Player(port=fake_port, enabled=True)
    assert not player.play(128)
    assert fake_port.sent == []


def test_toggle():
    player = Player(port=None)
    assert player.toggle() is True
    assert player.toggle() is False
    assert player.toggle(True) is True


def test_missing_midi_backend_disables_audio(monkeypatch, caplog):
    def boom(name=None):
        raise OSError("no ports")

    monkeypatch.setattr(playback.mido, "open_output", boom)
    player = Player(enabled=True)
    assert not player.play(60)
    assert player.enabled is False
    assert "audio disabled" in caplog.text


def test_player_opens_port_lazily(monkeypatch, fake_port):
    opened = []

    def open_output(name=None):
        opened.append(name)
        return fake_port

    monkeypatch.setattr(playback.mido, "open_output", open_output)
    player = Player(port_name="synth", enabled=True, duration=60)
    assert opened == []
    player.play(60)
    player.play(62)
    assert opened == ["synth"]
    player.close()


def test_export_block_chord(tmp_path):
    path = tmp_path / "chord.mid"
    export_notes([48, 52, 55], path, bpm=90)

    mid = mido.MidiFile(str(path))
    msgs = list(mid.tracks[0])
    tempo = [m for m in msgs if m.type == "set_tempo"][0]
    assert tempo.tempo == mido.bpm2tempo(90)
    ons = [m.note for m in msgs if m.type == "note_on"]
    offs = [m for m in msgs if m.type == "note_off"]
    assert ons == [48, 52, 55]
    assert offs[0].time == 4 * mid.ticks_per_beat


def test_export_arpeggio(tmp_path):
    path = tmp_path / "arp.mid"
    export_notes([60, 64, 67], path, arpeggiate=True)
    msgs = [m for m in mido.MidiFile(str(path)).tracks[0] if not m.is_meta]
    assert [m.type for m in msgs] == ["note_on", "note_off"] * 3
    assert all(m.time == 960 for m in msgs if m.type == "note_off")


def test_export_nothing(tmp_path):
    path = tmp_path / "empty.mid"
    assert export_notes([200, -1], path) is None
    assert not path.exists()
