"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_midi_transform.core.rhythm import Time
from chuk_midi_transform.models.message import (
    AfterTouch,
    ControlChange,
    NoteOff,
    NoteOn,
    PitchWheel,
    PolyTouch,
    ProgramChange,
    SetTempo,
    TimeSignature,
)
from chuk_midi_transform.models.sequence import MidiSequence


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def melody() -> MidiSequence:
    """Two notes, C4 then E4, one beat each."""
    return MidiSequence(
        [
            NoteOn(0, 60, 100, Time(0)),
            NoteOff(0, 60, 0, Time(1)),
            NoteOn(0, 64, 90, Time(1)),
            NoteOff(0, 64, 0, Time(2)),
        ]
    )


@pytest.fixture
def every_kind() -> MidiSequence:
    """One message of each of the nine kinds, with all times present."""
    return MidiSequence(
        [
            SetTempo(120, Time(0)),
            TimeSignature(4, 4, 24, Time(0)),
            ProgramChange(0, 5, Time(0)),
            NoteOn(0, 60, 100, Time(0)),
            ControlChange(0, 7, 15, Time(1)),
            PitchWheel(0, 512, Time(1)),
            AfterTouch(0, 40, Time(2)),
            PolyTouch(0, 60, 30, Time(2)),
            NoteOff(0, 60, 0, Time(4)),
        ]
    )
