"""
Control transforms - tempo, instruments and dynamics.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from fractions import Fraction
from typing import assert_never

from chuk_midi_transform.constants import NO_TEMPO
from chuk_midi_transform.core.curve import VelocityCurve, sample
from chuk_midi_transform.core.instruments import next_in_group
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


def set_tempo(seq: MidiSequence, new_tempo: int | Fraction) -> MidiSequence:
    """
    Rewrite every tempo message to ``new_tempo`` BPM.

    Tempo messages keep their time. A sequence without any tempo message
    comes back unchanged; no tempo message is inserted.
    """
    out: list[Message] = []
    for message in seq:
        match message:
            case SetTempo():
                out.append(replace(message, tempo=new_tempo))
            case (
                NoteOn()
                | NoteOff()
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

    logger.debug("set_tempo %s: %d messages", new_tempo, len(out))
    return MidiSequence(out)


def get_bpm(seq: MidiSequence) -> int | Fraction:
    """Tempo of the last tempo message in the sequence, or 0 if there is none."""
    bpm: int | Fraction = NO_TEMPO
    for message in seq:
        match message:
            case SetTempo():
                bpm = message.tempo
            case (
                NoteOn()
                | NoteOff()
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
    return bpm


def remap_instruments(seq: MidiSequence, channel: int) -> MidiSequence:
    """
    Move controller values to the next instrument in their GM family.

    Each ControlChange value is replaced by ``next_in_group(value)``;
    every other message passes through.

    ``channel`` is accepted but not used to select messages: controllers
    on every channel are remapped.
    """
    out: list[Message] = []
    for message in seq:
        match message:
            case ControlChange():
                out.append(replace(message, value=next_in_group(message.value)))
            case (
                NoteOn()
                | NoteOff()
                | SetTempo()
                | TimeSignature()
                | PitchWheel()
                | AfterTouch()
                | PolyTouch()
                | ProgramChange()
            ):
                out.append(message)
            case _:
                assert_never(message)

    logger.debug("remap_instruments (channel %d): %d messages", channel, len(out))
    return MidiSequence(out)


def edit_dynamics(seq: MidiSequence, curve: VelocityCurve) -> MidiSequence:
    """
    Shape note velocities with a curve.

    Each NoteOn and NoteOff takes the curve's velocity at its time. Where
    the curve is undefined the original velocity is kept.
    """
    out: list[Message] = []
    reshaped = 0
    for message in seq:
        match message:
            case NoteOn() | NoteOff():
                velocity = sample(curve, message.time)
                if velocity is None:
                    out.append(message)
                else:
                    out.append(replace(message, velocity=velocity))
                    reshaped += 1
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

    logger.debug("edit_dynamics: reshaped %d of %d messages", reshaped, len(out))
    return MidiSequence(out)
