"""
CHUK MIDI Transform - pure, composable edits of MIDI message sequences.

    from chuk_midi_transform import MidiSequence, NoteOn, NoteOff, Time

    seq = MidiSequence.new().append(NoteOn(0, 60, 100, Time(0))).append(
        NoteOff(0, 60, 0, Time(1))
    )
    harmonized = seq.transpose(2).generate_harmony(2, PitchClass.D, Mode.DORIAN)
"""

from chuk_midi_transform.core import (
    Direction,
    Mode,
    PitchClass,
    ScaleType,
    Time,
    VelocityCurve,
)
from chuk_midi_transform.models import (
    AfterTouch,
    ControlChange,
    Message,
    MidiSequence,
    NoteOff,
    NoteOn,
    Pipeline,
    PitchWheel,
    PolyTouch,
    ProgramChange,
    SetTempo,
    TimeSignature,
)
from chuk_midi_transform.transforms import UnsupportedOperationError

__all__ = [
    # Messages
    "AfterTouch",
    "ControlChange",
    "Message",
    "NoteOff",
    "NoteOn",
    "PitchWheel",
    "PolyTouch",
    "ProgramChange",
    "SetTempo",
    "TimeSignature",
    # Containers
    "MidiSequence",
    "Pipeline",
    # Primitives
    "Direction",
    "Mode",
    "PitchClass",
    "ScaleType",
    "Time",
    "VelocityCurve",
    # Errors
    "UnsupportedOperationError",
]
