import json
import os
import sys

import pytest

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fretlab.fretboard import build_fretboard
from fretlab.state import AppState

STANDARD = ["E", "A", "D", "G", "B", "E"]


class FakePort:
    """Stands in for a mido output port."""

    def __init__(self, name="fake"):
        self.name = name
        self.sent = []
        self.closed = False
        self.was_reset = False

    def send(self, msg):
        self.sent.append(msg)

    def reset(self):
        self.was_reset = True

    def close(self):
        self.closed = True


@pytest.fixture
def standard_board():
    return build_fretboard(STANDARD, 15)


@pytest.fixture
def fake_port():
    return FakePort()


@pytest.fixture
def library_dir(tmp_path):
    """A small pattern library on disk, including broken entries."""
    (tmp_path / "scales.json").write_text(json.dumps({
        "scales": {
            "Major": {"intervals": ["1", "2", "3", "4", "5", "6", "7"]},
            "Ionian": {"alias_of": "Major"},
            "Ghost": {"alias_of": "Missing"},
            "Broken": {"intervals": "1 3 5"},
        }
    }))
    (tmp_path / "chords.json").write_text(json.dumps({
        "Maj7": ["1", "3", "5", "7"],
        "Weird": ["1", "3", "nope", "5"],
    }))
    (tmp_path / "arpeggios.json").write_text("{ not json")
    return tmp_path


@pytest.fixture
def app_state():
    return AppState()
