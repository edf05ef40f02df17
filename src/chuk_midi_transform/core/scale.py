"""
Scale primitives - ScaleType, Mode, Direction and modal transposition.

A mode is an interval pattern from a tonic. Modal transposition walks a
pitch up or down that pattern by whole scale steps, so a harmony voice
stays inside the key instead of moving by a fixed number of semitones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from chuk_midi_transform.constants import ErrorMessages
from chuk_midi_transform.core.pitch import (
    AUGMENTED_SECOND,
    HALF_STEP,
    WHOLE_STEP,
    Interval,
    Pitch,
    PitchClass,
)


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by its interval pattern.

    The intervals are from one degree to the next (not cumulative) and
    must sum to an octave. A major scale is: W W H W W W H.

    Immutable and hashable.
    """

    intervals: tuple[Interval, ...]
    name: str = ""

    MAJOR: ClassVar[ScaleType]
    NATURAL_MINOR: ClassVar[ScaleType]

    def __post_init__(self) -> None:
        if not self.intervals:
            raise ValueError("Scale must have at least one interval")
        total = sum(i.semitones for i in self.intervals)
        if total != 12:
            raise ValueError(f"Scale intervals must sum to 12 semitones, got {total}")

    @property
    def steps(self) -> list[int]:
        """Interval pattern as plain semitone counts."""
        return [i.semitones for i in self.intervals]

    def offsets(self) -> list[int]:
        """Cumulative semitone offset of each degree from the tonic."""
        offsets = [0]
        for interval in self.intervals[:-1]:
            offsets.append(offsets[-1] + interval.semitones)
        return offsets

    def get_pitches(self, root: PitchClass) -> list[PitchClass]:
        """Get the pitch classes of this scale starting from root."""
        return [root.transpose(offset) for offset in self.offsets()]

    @classmethod
    def from_steps(cls, steps: list[int] | tuple[int, ...], name: str = "") -> ScaleType:
        """Build a scale from plain semitone steps."""
        return cls(tuple(Interval(s) for s in steps), name)

    def __str__(self) -> str:
        return self.name or f"ScaleType({self.steps})"


_W = WHOLE_STEP
_H = HALF_STEP
_A2 = AUGMENTED_SECOND
_m3 = Interval(3)

ScaleType.MAJOR = ScaleType((_W, _W, _H, _W, _W, _W, _H), "ionian")
ScaleType.NATURAL_MINOR = ScaleType((_W, _H, _W, _W, _H, _W, _W), "aeolian")


class Mode(str, Enum):
    """Named modes with a built-in step pattern."""

    IONIAN = "ionian"
    DORIAN = "dorian"
    PHRYGIAN = "phrygian"
    LYDIAN = "lydian"
    MIXOLYDIAN = "mixolydian"
    AEOLIAN = "aeolian"
    LOCRIAN = "locrian"
    HARMONIC_MINOR = "harmonic_minor"
    MELODIC_MINOR = "melodic_minor"
    MAJOR_PENTATONIC = "major_pentatonic"
    MINOR_PENTATONIC = "minor_pentatonic"

    @property
    def scale(self) -> ScaleType:
        """The step pattern for this mode."""
        return MODE_SCALES[self]

    @classmethod
    def parse(cls, name: str) -> Mode:
        """Parse a mode name; accepts 'major'/'minor' and spaces or dashes."""
        key = name.strip().lower().replace(" ", "_").replace("-", "_")
        key = _MODE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(ErrorMessages.UNKNOWN_MODE.format(mode=name)) from None


MODE_SCALES: dict[Mode, ScaleType] = {
    Mode.IONIAN: ScaleType.MAJOR,
    Mode.DORIAN: ScaleType((_W, _H, _W, _W, _W, _H, _W), "dorian"),
    Mode.PHRYGIAN: ScaleType((_H, _W, _W, _W, _H, _W, _W), "phrygian"),
    Mode.LYDIAN: ScaleType((_W, _W, _W, _H, _W, _W, _H), "lydian"),
    Mode.MIXOLYDIAN: ScaleType((_W, _W, _H, _W, _W, _H, _W), "mixolydian"),
    Mode.AEOLIAN: ScaleType.NATURAL_MINOR,
    Mode.LOCRIAN: ScaleType((_H, _W, _W, _H, _W, _W, _W), "locrian"),
    Mode.HARMONIC_MINOR: ScaleType((_W, _H, _W, _W, _H, _A2, _H), "harmonic minor"),
    Mode.MELODIC_MINOR: ScaleType((_W, _H, _W, _W, _W, _W, _H), "melodic minor"),
    Mode.MAJOR_PENTATONIC: ScaleType((_W, _W, _m3, _W, _m3), "major pentatonic"),
    Mode.MINOR_PENTATONIC: ScaleType((_m3, _W, _W, _m3, _W), "minor pentatonic"),
}

_MODE_ALIASES: dict[str, str] = {
    "major": "ionian",
    "minor": "aeolian",
    "natural_minor": "aeolian",
}


class Direction(str, Enum):
    """Which way modal transposition walks the scale."""

    UP = "up"
    DOWN = "down"


def mode_steps(mode: Mode | ScaleType | str) -> list[int]:
    """
    Get the interval steps of a mode.

    Args:
        mode: A Mode, an explicit ScaleType, or a mode name

    Returns:
        Ordered semitone steps, summing to 12
    """
    if isinstance(mode, ScaleType):
        return mode.steps
    if not isinstance(mode, Mode):
        mode = Mode.parse(mode)
    return mode.scale.steps


def modal_transposition(
    pitch: Pitch,
    tonic: PitchClass,
    steps_pattern: list[int],
    distance: int,
    direction: Direction,
) -> int:
    """
    Move a pitch by a number of scale steps within a mode.

    The pitch is located on the scale built from ``tonic`` with
    ``steps_pattern``. A chromatic pitch is placed on the scale degree at or
    below it and keeps its alteration, so F# in C ionian moves like F.

    Args:
        pitch: Starting pitch (pitch class plus octave)
        tonic: Tonic of the mode
        steps_pattern: Semitone steps of the mode (from mode_steps)
        distance: Number of scale steps to move (non-negative)
        direction: Direction.UP or Direction.DOWN

    Returns:
        The transposed MIDI note number
    """
    if distance < 0:
        raise ValueError(f"Distance must be non-negative, got {distance}")
    if sum(steps_pattern) != 12:
        raise ValueError(f"Scale steps must sum to 12 semitones, got {sum(steps_pattern)}")

    degree_offsets = [0]
    for step in steps_pattern[:-1]:
        degree_offsets.append(degree_offsets[-1] + step)

    relative = (pitch.pitch_class.value - tonic.value) % 12
    degree = max(i for i, offset in enumerate(degree_offsets) if offset <= relative)

    shift = 0
    count = len(steps_pattern)
    for _ in range(distance):
        if direction is Direction.UP:
            shift += steps_pattern[degree]
            degree = (degree + 1) % count
        else:
            degree = (degree - 1) % count
            shift -= steps_pattern[degree]

    return pitch.midi + shift
