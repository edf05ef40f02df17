"""
MidiSequence - an ordered, immutable stream of messages.

List order is structural (the order events appear in the stream); message
times are semantic and need not be monotonic. A sequence is never changed
after construction: append and every transform build a new one.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from fractions import Fraction
from typing import TYPE_CHECKING, Any, overload

from chuk_midi_transform.constants import SchemaVersion
from chuk_midi_transform.models.message import Message, message_from_dict, message_to_dict

if TYPE_CHECKING:
    from chuk_midi_transform.core.curve import VelocityCurve
    from chuk_midi_transform.core.pitch import PitchClass
    from chuk_midi_transform.core.rhythm import Time
    from chuk_midi_transform.core.scale import Mode, ScaleType

SCHEMA_VERSION: SchemaVersion = "sequence/v1"


class MidiSequence:
    """
    An ordered, immutable collection of MIDI messages.

    Backed by a tuple, so two sequences never share mutable storage.
    Transforms are available as methods for chaining:

        seq.transpose(2).quantize(4).reverse()
    """

    __slots__ = ("_messages",)
    _messages: tuple[Message, ...]

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        object.__setattr__(self, "_messages", tuple(messages))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("MidiSequence is immutable")

    @classmethod
    def new(cls) -> MidiSequence:
        """An empty sequence."""
        return cls()

    def append(self, message: Message) -> MidiSequence:
        """Return a new sequence with ``message`` added at the end."""
        return MidiSequence((*self._messages, message))

    @property
    def messages(self) -> tuple[Message, ...]:
        """The messages, in structural order."""
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __reversed__(self) -> Iterator[Message]:
        return reversed(self._messages)

    @overload
    def __getitem__(self, index: int) -> Message: ...

    @overload
    def __getitem__(self, index: slice) -> MidiSequence: ...

    def __getitem__(self, index: int | slice) -> Message | MidiSequence:
        if isinstance(index, slice):
            return MidiSequence(self._messages[index])
        return self._messages[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MidiSequence):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        return f"MidiSequence({list(self._messages)!r})"

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON/YAML serialization."""
        return {
            "schema": SCHEMA_VERSION,
            "messages": [message_to_dict(m) for m in self._messages],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MidiSequence:
        """Create from dictionary."""
        schema = d.get("schema", SCHEMA_VERSION)
        if schema != SCHEMA_VERSION:
            raise ValueError(f"Unsupported sequence schema: '{schema}'")
        return cls(message_from_dict(m) for m in d.get("messages", []))

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> MidiSequence:
        """Deserialize from a JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Transform chaining - see chuk_midi_transform.transforms

    def transpose(self, semitones: int) -> MidiSequence:
        from chuk_midi_transform.transforms import transpose

        return transpose(self, semitones)

    def reverse(self) -> MidiSequence:
        from chuk_midi_transform.transforms import reverse

        return reverse(self)

    def quantize(self, grid_size: int) -> MidiSequence:
        from chuk_midi_transform.transforms import quantize

        return quantize(self, grid_size)

    def extract(self, note_range: int) -> MidiSequence:
        from chuk_midi_transform.transforms import extract

        return extract(self, note_range)

    def scale_duration(self, factor: int | Fraction | Time) -> MidiSequence:
        from chuk_midi_transform.transforms import scale_duration

        return scale_duration(self, factor)

    def set_tempo(self, new_tempo: int | Fraction) -> MidiSequence:
        from chuk_midi_transform.transforms import set_tempo

        return set_tempo(self, new_tempo)

    def remap_instruments(self, channel: int) -> MidiSequence:
        from chuk_midi_transform.transforms import remap_instruments

        return remap_instruments(self, channel)

    def get_bpm(self) -> int | Fraction:
        from chuk_midi_transform.transforms import get_bpm

        return get_bpm(self)

    def generate_harmony(
        self, steps: int, tonic: PitchClass, mode: Mode | ScaleType | str
    ) -> MidiSequence:
        from chuk_midi_transform.transforms import generate_harmony

        return generate_harmony(self, steps, tonic, mode)

    def arpeggiate_chords(self, pattern: Any) -> MidiSequence:
        from chuk_midi_transform.transforms import arpeggiate_chords

        return arpeggiate_chords(self, pattern)

    def edit_dynamics(self, curve: VelocityCurve) -> MidiSequence:
        from chuk_midi_transform.transforms import edit_dynamics

        return edit_dynamics(self, curve)


def new() -> MidiSequence:
    """An empty sequence."""
    return MidiSequence.new()


def append(seq: MidiSequence, message: Message) -> MidiSequence:
    """Return a new sequence equal to ``seq`` with ``message`` at the end."""
    return seq.append(message)
