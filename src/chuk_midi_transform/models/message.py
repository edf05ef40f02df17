"""
Message model - the nine MIDI message kinds a sequence can carry.

Every message is an immutable dataclass with an absolute ``time`` in beats.
The two meta events (SetTempo, TimeSignature) may have no time at all;
that is kept as None so "absent" never looks like "at zero".

Message is a closed Union. Code that dispatches on it uses ``match`` with an
``assert_never`` fallback, so adding a kind fails type checking at every
dispatch site rather than slipping through at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Any, Union

from chuk_midi_transform.constants import MAX_CHANNEL, ErrorMessages
from chuk_midi_transform.core.rhythm import Time


def _check_channel(channel: int) -> None:
    if not 0 <= channel <= MAX_CHANNEL:
        raise ValueError(ErrorMessages.INVALID_CHANNEL.format(channel=channel))


def _check_channel_message(message: Any) -> None:
    """Channel messages need a valid channel and, unlike meta events, a time."""
    _check_channel(message.channel)
    if message.time is None:
        raise ValueError(ErrorMessages.MISSING_TIME.format(type=type(message).__name__))


def _time_to_str(time: Time | None) -> str | None:
    return None if time is None else str(time)


def _time_from_str(value: Any) -> Time | None:
    if value is None:
        return None
    if isinstance(value, int):
        return Time(value)
    return Time.parse(str(value))


@dataclass(frozen=True)
class NoteOn:
    """Begins a sounding note."""

    channel: int
    note: int
    velocity: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class NoteOff:
    """Ends a sounding note."""

    channel: int
    note: int
    velocity: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class SetTempo:
    """
    Tempo meta event.

    ``tempo`` is in beats per minute; it is kept exact (int or Fraction)
    since a file's microseconds-per-beat rarely divide evenly.
    """

    tempo: int | Fraction
    time: Time | None = None


@dataclass(frozen=True)
class TimeSignature:
    """Time signature meta event."""

    numerator: int
    denominator: int
    clocks_per_click: int = 24
    time: Time | None = None


@dataclass(frozen=True)
class ControlChange:
    """Continuous controller."""

    channel: int
    control: int
    value: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class PitchWheel:
    """Pitch bend, -8192 to 8191 with 0 at rest."""

    channel: int
    pitch: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class AfterTouch:
    """Channel pressure."""

    channel: int
    value: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class PolyTouch:
    """Per-note pressure."""

    channel: int
    note: int
    value: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


@dataclass(frozen=True)
class ProgramChange:
    """Instrument selection."""

    channel: int
    program: int
    time: Time

    def __post_init__(self) -> None:
        _check_channel_message(self)


Message = Union[
    NoteOn,
    NoteOff,
    SetTempo,
    TimeSignature,
    ControlChange,
    PitchWheel,
    AfterTouch,
    PolyTouch,
    ProgramChange,
]

# Serialization tags, in the same order as the Message union
MESSAGE_TYPES: dict[str, type] = {
    "note_on": NoteOn,
    "note_off": NoteOff,
    "set_tempo": SetTempo,
    "time_signature": TimeSignature,
    "control_change": ControlChange,
    "pitchwheel": PitchWheel,
    "aftertouch": AfterTouch,
    "polytouch": PolyTouch,
    "program_change": ProgramChange,
}
_TYPE_NAMES: dict[type, str] = {cls: name for name, cls in MESSAGE_TYPES.items()}


def message_type(message: Message) -> str:
    """Get the serialization tag of a message ('note_on', 'set_tempo', ...)."""
    return _TYPE_NAMES[type(message)]


def with_time(message: Message, time: Time | None) -> Message:
    """Return a copy of a message at a new time."""
    return replace(message, time=time)


def message_to_dict(message: Message) -> dict[str, Any]:
    """
    Convert a message to a dictionary for JSON serialization.

    Times are written as exact strings ("3/2"); an absent meta time is
    omitted. Tempo Fractions are written the same way.
    """
    d: dict[str, Any] = {"type": message_type(message)}
    for name, value in vars(message).items():
        if name == "time":
            if value is not None:
                d["time"] = _time_to_str(value)
        elif isinstance(value, Fraction):
            d[name] = str(value) if value.denominator != 1 else value.numerator
        else:
            d[name] = value
    return d


def message_from_dict(d: dict[str, Any]) -> Message:
    """Create a message from its dictionary form."""
    fields = dict(d)
    tag = fields.pop("type", None)
    cls = MESSAGE_TYPES.get(tag)  # type: ignore[arg-type]
    if cls is None:
        raise ValueError(ErrorMessages.UNKNOWN_MESSAGE.format(type=tag))
    fields["time"] = _time_from_str(fields.get("time"))
    if cls is SetTempo and isinstance(fields.get("tempo"), str):
        fields["tempo"] = Fraction(fields["tempo"])
    message: Message = cls(**fields)
    return message
