"""
Pitch primitives - PitchClass, Pitch and Interval.

PitchClass is the octave-independent chromatic pitch (0-11).
Pitch is a pitch class with its octave context, the form harmony
generation works in. Interval is the distance between pitches in semitones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Display name mappings (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]
_NAME_LOOKUP: dict[str, int] = {
    **{n.lower(): i for i, n in enumerate(_FLAT_NAMES)},
    **{n.lower(): i for i, n in enumerate(_SHARP_NAMES)},
    **{n.replace("#", "s").lower(): i for i, n in enumerate(_SHARP_NAMES)},
}


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """Parse a pitch class from a string like 'C', 'C#', 'Db' or 'Cs' (any case)."""
        try:
            return cls(_NAME_LOOKUP[name.strip().lower()])
        except KeyError:
            raise ValueError(f"Unknown pitch class: {name}") from None


@dataclass(frozen=True)
class Pitch:
    """
    A pitch class with octave context.

    Octaves follow the MIDI convention where C4 = 60 and note 0 is C-1,
    so every MIDI note number maps to exactly one Pitch and back.
    """

    pitch_class: PitchClass
    octave: int

    @property
    def midi(self) -> int:
        """MIDI note number for this pitch."""
        return self.pitch_class.to_midi(self.octave)

    def __str__(self) -> str:
        return f"{self.pitch_class.spell()}{self.octave}"


def to_pitch_class(note: int) -> Pitch:
    """
    Convert a MIDI note number to a Pitch.

    Negative note numbers are accepted (they land in octaves below -1)
    so out-of-range arithmetic results still round-trip.
    """
    octave, pc = divmod(note, 12)
    return Pitch(PitchClass(pc), octave - 1)


class Interval:
    """One step of a scale pattern, in semitones. Immutable and hashable."""

    __slots__ = ("_semitones",)
    _semitones: int

    def __init__(self, semitones: int) -> None:
        self._semitones = semitones

    @property
    def semitones(self) -> int:
        return self._semitones

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._semitones == other._semitones

    def __hash__(self) -> int:
        return hash(self._semitones)

    def __repr__(self) -> str:
        return f"Interval({self._semitones})"


# Step shorthands used by the mode tables
HALF_STEP = Interval(1)
WHOLE_STEP = Interval(2)
AUGMENTED_SECOND = Interval(3)
