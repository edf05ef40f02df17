"""
MIDI codec - reading and writing MidiSequences with mido.

Files store delta times in ticks; sequences store absolute times in beats.
This module converts between the two. Message kinds the engine does not
model (sysex, markers, lyrics, ...) are skipped on read.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from pathlib import Path
from typing import assert_never

import mido
from mido import Message as MidoMessage
from mido import MetaMessage, MidiFile, MidiTrack

from chuk_midi_transform.constants import TICKS_PER_BEAT
from chuk_midi_transform.core.rhythm import Time
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

MICROSECONDS_PER_MINUTE = 60_000_000


def _from_mido(msg: MidoMessage | MetaMessage, time: Time) -> Message | None:
    """Convert one mido message at an absolute time; None for unmodelled kinds."""
    if msg.type == "note_on":
        # Running-status note-offs are note_on with velocity 0
        if msg.velocity == 0:
            return NoteOff(msg.channel, msg.note, 0, time)
        return NoteOn(msg.channel, msg.note, msg.velocity, time)
    if msg.type == "note_off":
        return NoteOff(msg.channel, msg.note, msg.velocity, time)
    if msg.type == "set_tempo":
        bpm = Fraction(MICROSECONDS_PER_MINUTE, msg.tempo)
        return SetTempo(bpm.numerator if bpm.denominator == 1 else bpm, time)
    if msg.type == "time_signature":
        return TimeSignature(msg.numerator, msg.denominator, msg.clocks_per_click, time)
    if msg.type == "control_change":
        return ControlChange(msg.channel, msg.control, msg.value, time)
    if msg.type == "pitchwheel":
        return PitchWheel(msg.channel, msg.pitch, time)
    if msg.type == "aftertouch":
        return AfterTouch(msg.channel, msg.value, time)
    if msg.type == "polytouch":
        return PolyTouch(msg.channel, msg.note, msg.value, time)
    if msg.type == "program_change":
        return ProgramChange(msg.channel, msg.program, time)
    return None


def _to_mido(message: Message) -> MidoMessage | MetaMessage:
    """Convert one message to mido, with time left at zero."""
    match message:
        case NoteOn():
            return MidoMessage(
                "note_on", channel=message.channel, note=message.note, velocity=message.velocity
            )
        case NoteOff():
            return MidoMessage(
                "note_off", channel=message.channel, note=message.note, velocity=message.velocity
            )
        case SetTempo():
            if message.tempo <= 0:
                raise ValueError(f"Tempo must be positive, got {message.tempo}")
            return MetaMessage("set_tempo", tempo=mido.bpm2tempo(message.tempo))
        case TimeSignature():
            return MetaMessage(
                "time_signature",
                numerator=message.numerator,
                denominator=message.denominator,
                clocks_per_click=message.clocks_per_click,
            )
        case ControlChange():
            return MidoMessage(
                "control_change",
                channel=message.channel,
                control=message.control,
                value=message.value,
            )
        case PitchWheel():
            return MidoMessage("pitchwheel", channel=message.channel, pitch=message.pitch)
        case AfterTouch():
            return MidoMessage("aftertouch", channel=message.channel, value=message.value)
        case PolyTouch():
            return MidoMessage(
                "polytouch", channel=message.channel, note=message.note, value=message.value
            )
        case ProgramChange():
            return MidoMessage("program_change", channel=message.channel, program=message.program)
        case _:
            assert_never(message)


def sequence_from_midi(midi_file: MidiFile, track: int | None = None) -> MidiSequence:
    """
    Convert a mido MidiFile to a MidiSequence.

    Args:
        midi_file: The file to read
        track: Track index to read; None merges all tracks into one stream

    Returns:
        A MidiSequence with absolute times in beats
    """
    if track is None:
        source = mido.merge_tracks(midi_file.tracks)
    else:
        source = midi_file.tracks[track]

    ticks_per_beat = midi_file.ticks_per_beat
    messages: list[Message] = []
    skipped = 0
    abs_ticks = 0
    for msg in source:
        abs_ticks += msg.time
        converted = _from_mido(msg, Time.from_ticks(abs_ticks, ticks_per_beat))
        if converted is None:
            skipped += 1
            continue
        messages.append(converted)

    logger.debug("Read %d messages (%d skipped) from MIDI", len(messages), skipped)
    return MidiSequence(messages)


def sequence_to_midi(seq: MidiSequence, ticks_per_beat: int = TICKS_PER_BEAT) -> MidiFile:
    """
    Convert a MidiSequence to a single-track mido MidiFile.

    Messages are written in time order (stable, so structural order breaks
    ties); meta events without a time are placed at tick 0.

    Args:
        seq: The sequence to write
        ticks_per_beat: Resolution (default 480)

    Returns:
        A mido MidiFile ready to be saved

    This function is deterministic: same sequence -> same MIDI file.
    """
    timed: list[tuple[int, MidoMessage | MetaMessage]] = []
    for message in seq:
        ticks = 0 if message.time is None else message.time.to_ticks(ticks_per_beat)
        if ticks < 0:
            raise ValueError(f"Cannot write a message before the start of the file: {message!r}")
        timed.append((ticks, _to_mido(message)))

    timed.sort(key=lambda x: x[0])

    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    current = 0
    for abs_ticks, msg in timed:
        track.append(msg.copy(time=abs_ticks - current))
        current = abs_ticks

    track.append(MetaMessage("end_of_track", time=0))
    return mid


def load_sequence(path: str | Path, track: int | None = None) -> MidiSequence:
    """Load a MIDI file from disk as a MidiSequence."""
    midi_file = MidiFile(str(path))
    seq = sequence_from_midi(midi_file, track=track)
    logger.info(f"Loaded {len(seq)} messages from {path}")
    return seq


def save_sequence(
    seq: MidiSequence,
    path: str | Path,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> Path:
    """Write a MidiSequence to disk. Returns the written path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    sequence_to_midi(seq, ticks_per_beat=ticks_per_beat).save(str(out))
    logger.info(f"Saved {len(seq)} messages to {out}")
    return out
