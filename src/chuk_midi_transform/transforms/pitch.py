"""
Pitch transforms - transposition, range extraction and harmony voices.

Each transform is a single forward pass over the input that builds a new
MidiSequence; the input is never modified. Note numbers are not clamped:
results outside 0-127 are returned as computed and left for the caller
to validate.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, assert_never

from chuk_midi_transform.constants import MAX_NOTE, MIDDLE_C, MIN_NOTE, ErrorMessages
from chuk_midi_transform.core.pitch import PitchClass, to_pitch_class
from chuk_midi_transform.core.scale import (
    Direction,
    Mode,
    ScaleType,
    modal_transposition,
    mode_steps,
)
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
)
from chuk_midi_transform.models.sequence import MidiSequence

logger = logging.getLogger(__name__)


class UnsupportedOperationError(NotImplementedError):
    """Raised by transforms that are declared but not supported."""


def transpose(seq: MidiSequence, semitones: int) -> MidiSequence:
    """
    Shift every note by a number of semitones.

    NoteOn and NoteOff get ``note + semitones``; every other message passes
    through unchanged. The result always has the same length as the input.
    """
    out: list[Message] = []
    for message in seq:
        match message:
            case NoteOn() | NoteOff():
                out.append(replace(message, note=message.note + semitones))
            case (
                SetTempo()
                | TimeSignature()
                | ControlChange()
                | PitchWheel()
                | AfterTouch()
                | PolyTouch()
                | ProgramChange()
            ):
                out.append(message)
            case _:
                assert_never(message)

    logger.debug("transpose %+d: %d messages", semitones, len(out))
    return MidiSequence(out)


def extract(seq: MidiSequence, note_range: int) -> MidiSequence:
    """
    Keep only the notes within ``note_range`` semitones of middle C.

    Bounds are exclusive: with a range of 5 the window is 55 < note < 65.
    Every non-note message is dropped, since meta and controller events
    have no pitch to filter on.
    """
    lower = max(MIN_NOTE, MIDDLE_C - note_range)
    upper = min(MAX_NOTE, MIDDLE_C + note_range)

    out: list[Message] = []
    for message in seq:
        match message:
            case NoteOn() | NoteOff():
                if lower < message.note < upper:
                    out.append(message)
            case (
                SetTempo()
                | TimeSignature()
                | ControlChange()
                | PitchWheel()
                | AfterTouch()
                | PolyTouch()
                | ProgramChange()
            ):
                pass
            case _:
                assert_never(message)

    logger.debug("extract (%d, %d): kept %d of %d messages", lower, upper, len(out), len(seq))
    return MidiSequence(out)


def generate_harmony(
    seq: MidiSequence,
    steps: int,
    tonic: PitchClass | str,
    mode: Mode | ScaleType | str,
) -> MidiSequence:
    """
    Add a harmony voice to every note.

    A NoteOn is moved ``abs(steps)`` scale steps through ``mode`` from
    ``tonic``: negative steps walk up the scale, zero or positive steps walk
    down. A NoteOff is moved by plain semitone arithmetic (``note + steps``).
    Either way the harmony note is emitted first, followed by the original,
    so both voices sound. Other messages are emitted once, unchanged.

    Args:
        seq: Input sequence
        steps: Signed harmony distance
        tonic: Tonic of the mode (PitchClass or name like 'D')
        mode: Mode, ScaleType or mode name

    Returns:
        A new sequence with harmony notes interleaved
    """
    if isinstance(tonic, str):
        tonic = PitchClass.parse(tonic)
    pattern = mode_steps(mode)
    direction = Direction.UP if steps < 0 else Direction.DOWN
    distance = abs(steps)

    out: list[Message] = []
    for message in seq:
        match message:
            case NoteOn():
                harmony = modal_transposition(
                    to_pitch_class(message.note), tonic, pattern, distance, direction
                )
                out.append(replace(message, note=harmony))
                out.append(message)
            case NoteOff():
                out.append(replace(message, note=message.note + steps))
                out.append(message)
            case (
                SetTempo()
                | TimeSignature()
                | ControlChange()
                | PitchWheel()
                | AfterTouch()
                | PolyTouch()
                | ProgramChange()
            ):
                out.append(message)
            case _:
                assert_never(message)

    logger.debug(
        "generate_harmony %+d in %s %s: %d -> %d messages",
        steps,
        tonic.spell(),
        mode.value if isinstance(mode, Mode) else mode,
        len(seq),
        len(out),
    )
    return MidiSequence(out)


def arpeggiate_chords(seq: MidiSequence, pattern: Any) -> MidiSequence:
    """
    Spread chords into arpeggios.

    Not supported: always raises rather than returning the input unchanged.
    """
    raise UnsupportedOperationError(ErrorMessages.UNSUPPORTED_ARPEGGIATE)
