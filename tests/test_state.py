from fretlab.config import DEFAULT_TUNING
from fretlab.state import AppState
from fretlab.theory import load_library


def test_defaults(app_state):
    assert app_state.tuning == DEFAULT_TUNING
    assert app_state.current_pattern() is None
    assert app_state.highlights() == {}
    assert app_state.chord_display() == "---"


def test_pattern_selection_drives_highlights(app_state):
    app_state.update(root="A", pattern_type="scale", pattern_name="Minor Pentatonic")
    board = app_state.fretboard()
    hl = app_state.highlights(board)
    assert hl[(0, 5)].label == "1" and hl[(0, 5)].is_root
    assert hl[(0, 8)].label == "b3"
    assert (0, 6) not in hl


def test_changing_type_clears_name_and_inversion(app_state):
    app_state.update(pattern_type="chord", pattern_name="Maj7", inversion=2)
    assert app_state.current_pattern().intervals == ("5", "7", "1", "3")
    app_state.update(pattern_type="scale")
    assert app_state.pattern_name is None
    assert app_state.inversion == 0


def test_inversion_choices(app_state):
    app_state.update(pattern_type="chord", pattern_name="Maj7")
    assert app_state.inversion_choices() == 4
    app_state.update(pattern_type="scale", pattern_name="Major")
    assert app_state.inversion_choices() == 1


def test_drop_voicing_through_state(app_state):
    app_state.update(root="C", pattern_type="chord", pattern_name="Maj7", drop="2")
    assert app_state.current_pattern().type == "voicing"
    app_state.update(drop="")
    assert app_state.current_pattern().type == "chord"


def test_unsupported_drop_keeps_a_plain_chord(app_state):
    app_state.update(root="C", pattern_type="chord", pattern_name="Maj7", drop="4")
    pattern = app_state.current_pattern()
    assert pattern.type == "chord"
    assert pattern.intervals == ("1", "3", "5", "7")
    assert len(app_state.highlights()) > 0


def test_inversion_choices_count_resolvable_intervals(library_dir):
    state = AppState(library=load_library(library_dir))
    state.update(pattern_type="chord", pattern_name="Weird")
    assert state.inversion_choices() == 3
    intervals = set()
    for inversion in range(state.inversion_choices()):
        state.update(inversion=inversion)
        intervals.add(state.current_pattern().intervals)
    assert len(intervals) == 3


def test_toggle_cells_identifies_chord(app_state):
    board = app_state.fretboard()
    assert app_state.toggle_cell(1, 3, board)     # C
    assert app_state.toggle_cell(2, 2, board)     # E
    assert app_state.toggle_cell(3, 0, board)     # G
    assert app_state.selected_notes() == ["C", "E", "G"]
    assert app_state.identified_chord().name == "C Major"

    assert not app_state.toggle_cell(1, 3, board)
    assert app_state.identified_chord() is None


def test_click_order_sets_the_preferred_root(app_state):
    board = app_state.fretboard()
    for cell in [(0, 5), (1, 3), (2, 2), (3, 0)]:   # A C E G
        app_state.toggle_cell(*cell, fretboard=board)
    assert app_state.identified_chord().name == "A m7"


def test_flat_display(app_state):
    board = app_state.fretboard()
    for cell in [(1, 1), (1, 5), (2, 3)]:           # A# D F
        app_state.toggle_cell(*cell, fretboard=board)
    assert app_state.chord_display() == "A# Major"
    app_state.update(use_flats=True)
    assert app_state.chord_display() == "Bb Major"
    assert app_state.note_label(3) == "Eb"


def test_set_tuning_rebuilds_and_reverts(app_state):
    assert app_state.set_tuning("Drop D (D A D G B E)")
    assert app_state.fretboard().cell(0, 0).name == "D"
    assert not app_state.set_tuning("Nashville")
    assert app_state.tuning == "Drop D (D A D G B E)"


def test_tuning_change_clears_selection(app_state):
    app_state.toggle_cell(0, 0)
    app_state.set_tuning("Open G (D G D G B D)")
    assert app_state.selected == {}


def test_interval_label(app_state):
    app_state.update(root="G")
    assert app_state.interval_label(11) == "3"
    assert app_state.interval_label(7) == "1"


def test_left_handed_fret_order(app_state):
    assert app_state.fret_order()[0] == 0
    app_state.update(left_handed=True)
    assert app_state.fret_order()[0] == app_state.num_frets


def test_reset_restores_defaults(app_state):
    app_state.update(root="D", pattern_type="chord", pattern_name="m7", use_flats=True)
    app_state.toggle_audio()
    app_state.toggle_cell(0, 3)
    app_state.reset()
    fresh = AppState(library=app_state.library)
    assert vars(app_state) == vars(fresh)
