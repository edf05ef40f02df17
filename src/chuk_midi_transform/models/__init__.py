"""
Data models for the transform engine.

This module provides:
- The nine MIDI message kinds and the Message union
- MidiSequence: the immutable message container
- Pipeline: pydantic configuration for chained transforms
"""

from chuk_midi_transform.models.message import (
    AfterTouch,
    ControlChange,
    Message,
    NoteOff,
    NoteOn,
    PitchWheel,
    PolyTouch,
    ProgramChange,
    SetTempo,
    TimeSignature,
    message_from_dict,
    message_to_dict,
    with_time,
)
from chuk_midi_transform.models.pipeline import Pipeline, TransformStep
from chuk_midi_transform.models.sequence import MidiSequence

__all__ = [
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
    "message_from_dict",
    "message_to_dict",
    "with_time",
    "MidiSequence",
    "Pipeline",
    "TransformStep",
]
