"""
Timing transforms - reversal, quantization and duration scaling.

All time arithmetic is exact (see core.rhythm.Time). Meta events with no
time keep it absent: arithmetic on an absent time is skipped, never
replaced by zero.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from fractions import Fraction
from typing import assert_never

from chuk_midi_transform.core.rhythm import Time, round_to_grid, validate_grid_size
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


def _bound(message: Message) -> Time:
    """Time used as a reversal bound; an absent meta time counts as zero."""
    match message:
        case SetTempo() | TimeSignature():
            return message.time if message.time is not None else Time.zero()
        case (
            NoteOn()
            | NoteOff()
            | ControlChange()
            | PitchWheel()
            | AfterTouch()
            | PolyTouch()
            | ProgramChange()
        ):
            return message.time
        case _:
            assert_never(message)


def reverse(seq: MidiSequence) -> MidiSequence:
    """
    Play a sequence backwards.

    Messages come out in reverse structural order. Each time is reflected
    about the sequence's span as ``(maxtime - time) + mintime``, where
    maxtime is the time of the last message and mintime the time of the
    first. NoteOn and NoteOff swap roles so each note's sounding interval
    is read backward.

    A first or last message that is a meta event without a time leaves
    the corresponding bound at zero.
    """
    if not seq:
        return MidiSequence()

    maxtime = _bound(seq[-1])
    mintime = _bound(seq[0])

    def reflect(time: Time) -> Time:
        return (maxtime - time) + mintime

    out: list[Message] = []
    for message in reversed(seq):
        match message:
            case NoteOn():
                out.append(
                    NoteOff(message.channel, message.note, message.velocity, reflect(message.time))
                )
            case NoteOff():
                out.append(
                    NoteOn(message.channel, message.note, message.velocity, reflect(message.time))
                )
            case SetTempo() | TimeSignature():
                if message.time is None:
                    out.append(message)
                else:
                    out.append(replace(message, time=reflect(message.time)))
            case ControlChange() | PitchWheel() | AfterTouch() | PolyTouch() | ProgramChange():
                out.append(replace(message, time=reflect(message.time)))
            case _:
                assert_never(message)

    logger.debug("reverse: %d messages over [%s, %s]", len(out), mintime, maxtime)
    return MidiSequence(out)


def quantize(seq: MidiSequence, grid_size: int) -> MidiSequence:
    """
    Snap note times to a rhythmic grid.

    NoteOn and NoteOff times are rounded to the nearest multiple of
    ``1/grid_size`` beats (4 = sixteenth notes); tie-breaking is that of
    core.rhythm.round_to_grid. Every other message keeps its time.
    """
    validate_grid_size(grid_size)

    out: list[Message] = []
    for message in seq:
        match message:
            case NoteOn() | NoteOff():
                out.append(replace(message, time=round_to_grid(message.time, grid_size)))
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

    logger.debug("quantize 1/%d: %d messages", grid_size, len(out))
    return MidiSequence(out)


def scale_duration(seq: MidiSequence, factor: int | Fraction | Time) -> MidiSequence:
    """
    Stretch or compress a sequence in time.

    Every present time on every message kind is multiplied by ``factor``.
    The factor must be exact (int, Fraction or Time); a negative factor
    mirrors times through zero.
    """
    scale = Time(factor).beats

    out: list[Message] = []
    for message in seq:
        match message:
            case SetTempo() | TimeSignature():
                if message.time is None:
                    out.append(message)
                else:
                    out.append(replace(message, time=message.time * scale))
            case (
                NoteOn()
                | NoteOff()
                | ControlChange()
                | PitchWheel()
                | AfterTouch()
                | PolyTouch()
                | ProgramChange()
            ):
                out.append(replace(message, time=message.time * scale))
            case _:
                assert_never(message)

    logger.debug("scale_duration x%s: %d messages", scale, len(out))
    return MidiSequence(out)
