"""
Rhythm primitives - Time and grid rounding.

Message times are absolute positions in beats (quarter notes).
Uses Fraction for exact representation, so repeated rescaling,
quantizing and reversing never drift.
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import total_ordering
from typing import Union

from chuk_midi_transform.constants import ErrorMessages

Exact = Union[int, Fraction, "Time"]


def _exact(value: object) -> Fraction:
    """Coerce an exact numeric value to a Fraction, rejecting floats."""
    if isinstance(value, Time):
        return value.beats
    if isinstance(value, bool) or not isinstance(value, (int, Fraction)):
        raise TypeError(ErrorMessages.INEXACT_TIME.format(value=value))
    return Fraction(value)


@total_ordering
class Time:
    """
    A signed, exact position in musical time, expressed in beats.

    Sign and magnitude are both exact: subtracting past zero gives a
    negative Time rather than wrapping, and multiplying by a fraction
    keeps every digit.

    Immutable and hashable.
    """

    __slots__ = ("_beats",)
    _beats: Fraction

    def __init__(self, beats: int | Fraction = 0) -> None:
        object.__setattr__(self, "_beats", _exact(beats))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Time is immutable")

    @property
    def beats(self) -> Fraction:
        """The exact beat value."""
        return self._beats

    @property
    def is_negative(self) -> bool:
        """True when the sign bit is set."""
        return self._beats < 0

    @property
    def magnitude(self) -> Fraction:
        """Absolute value of the time."""
        return abs(self._beats)

    @classmethod
    def zero(cls) -> Time:
        """The start of the stream."""
        return cls(0)

    @classmethod
    def from_ticks(cls, ticks: int, ticks_per_beat: int) -> Time:
        """Create a Time from an absolute tick position."""
        return cls(Fraction(ticks, ticks_per_beat))

    @classmethod
    def parse(cls, text: str) -> Time:
        """Parse a time from '3', '-1/2' or '3/2'."""
        return cls(Fraction(text.strip()))

    def to_ticks(self, ticks_per_beat: int) -> int:
        """
        Convert to MIDI ticks.

        Sub-tick remainders are rounded to the nearest tick.
        """
        return round(self._beats * ticks_per_beat)

    def __add__(self, other: Exact) -> Time:
        try:
            return Time(self._beats + _exact(other))
        except TypeError:
            return NotImplemented

    def __radd__(self, other: Exact) -> Time:
        return self.__add__(other)

    def __sub__(self, other: Exact) -> Time:
        try:
            return Time(self._beats - _exact(other))
        except TypeError:
            return NotImplemented

    def __rsub__(self, other: Exact) -> Time:
        try:
            return Time(_exact(other) - self._beats)
        except TypeError:
            return NotImplemented

    def __mul__(self, factor: Exact) -> Time:
        try:
            return Time(self._beats * _exact(factor))
        except TypeError:
            return NotImplemented

    def __rmul__(self, factor: Exact) -> Time:
        return self.__mul__(factor)

    def __neg__(self) -> Time:
        return Time(-self._beats)

    def __abs__(self) -> Time:
        return Time(self.magnitude)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Time):
            return self._beats == other._beats
        if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
            return self._beats == other
        return NotImplemented

    def __lt__(self, other: Exact) -> bool:
        try:
            return self._beats < _exact(other)
        except TypeError:
            return NotImplemented

    def __hash__(self) -> int:
        return hash(self._beats)

    def __repr__(self) -> str:
        if self._beats.denominator == 1:
            return f"Time({self._beats.numerator})"
        return f"Time(Fraction({self._beats.numerator}, {self._beats.denominator}))"

    def __str__(self) -> str:
        return str(self._beats)


def round_to_grid(time: Time, grid_size: int) -> Time:
    """
    Round a time to the nearest multiple of 1/grid_size beats.

    Ties round half up (towards positive infinity), so 1/8 on a
    quarter-beat grid becomes 1/4 and -1/8 becomes 0.

    Args:
        time: Time to round
        grid_size: Grid divisions per beat (4 = sixteenth notes)

    Returns:
        The rounded Time
    """
    validate_grid_size(grid_size)
    slots = math.floor(time.beats * grid_size + Fraction(1, 2))
    return Time(Fraction(slots, grid_size))


def validate_grid_size(grid_size: int) -> None:
    """Raise ValueError unless grid_size is a positive int."""
    if isinstance(grid_size, bool) or not isinstance(grid_size, int) or grid_size <= 0:
        raise ValueError(ErrorMessages.INVALID_GRID.format(grid_size=grid_size))
