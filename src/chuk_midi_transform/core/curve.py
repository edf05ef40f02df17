"""
Velocity curves - time-indexed loudness shapes.

A curve is a list of breakpoints (time, velocity). Between two breakpoints
the velocity follows an easing shape; outside the first and last breakpoint
the curve is undefined and sampling returns None.

Easing functions map progress in [0, 1] to an eased value in [0, 1]:

    "step"        Hold the previous breakpoint until the next one.
    "linear"      Constant rate (default).
    "ease_in"     Slow start, accelerates - crescendos that bloom late.
    "ease_out"    Fast start, decelerates - natural decays.
    "ease_in_out" Hermite smoothstep S-curve.
    "exponential" Cubic ease-in.
    "logarithmic" Cubic ease-out.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from fractions import Fraction

from chuk_midi_transform.constants import MAX_VELOCITY, MIN_VELOCITY, CurveShape
from chuk_midi_transform.core.rhythm import Time


def step(t: float) -> float:
    """Hold the starting value for the whole segment."""
    return 0.0


def linear(t: float) -> float:
    """No transformation - constant rate of change."""
    return t


def ease_in(t: float) -> float:
    """Quadratic ease-in."""
    return t * t


def ease_out(t: float) -> float:
    """Quadratic ease-out."""
    return 1.0 - (1.0 - t) * (1.0 - t)


def ease_in_out(t: float) -> float:
    """Hermite smoothstep: smooth start and end, faster in the middle."""
    return t * t * (3.0 - 2.0 * t)


def exponential(t: float) -> float:
    """Cubic ease-in: very slow start with rapid acceleration."""
    return t * t * t


def logarithmic(t: float) -> float:
    """Cubic ease-out: rapid initial change that tapers off."""
    return 1.0 - (1.0 - t) ** 3


EASING_FUNCTIONS: dict[str, Callable[[float], float]] = {
    "step": step,
    "linear": linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
    "exponential": exponential,
    "logarithmic": logarithmic,
}


def get_easing(shape: CurveShape | str) -> Callable[[float], float]:
    """Look up an easing function by name."""
    try:
        return EASING_FUNCTIONS[shape]
    except KeyError:
        raise ValueError(
            f"Unknown curve shape: '{shape}'. Available: {', '.join(EASING_FUNCTIONS)}"
        ) from None


@dataclass(frozen=True, order=True)
class CurvePoint:
    """A single breakpoint on a velocity curve."""

    time: Time
    velocity: int


@dataclass(frozen=True)
class VelocityCurve:
    """
    A piecewise velocity curve.

    Points are kept sorted by time. With two points at the same time the
    later one wins from that time onwards, which allows sudden jumps.

    Examples:
        VelocityCurve.from_pairs([(0, 40), (8, 110)])            # crescendo
        VelocityCurve.from_pairs([(0, 100), (4, 30)], "ease_out")  # decay
    """

    points: tuple[CurvePoint, ...] = field(default=())
    shape: CurveShape = "linear"

    def __post_init__(self) -> None:
        get_easing(self.shape)
        object.__setattr__(self, "points", tuple(sorted(self.points, key=lambda p: p.time)))

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[int | Fraction | Time, int]],
        shape: CurveShape = "linear",
    ) -> VelocityCurve:
        """Build a curve from (time, velocity) pairs."""
        return cls(tuple(CurvePoint(Time(t), v) for t, v in pairs), shape)

    @property
    def start(self) -> Time | None:
        return self.points[0].time if self.points else None

    @property
    def end(self) -> Time | None:
        return self.points[-1].time if self.points else None

    def sample(self, time: Time) -> int | None:
        """Velocity at ``time``, or None where the curve is undefined."""
        if not self.points:
            return None
        if time < self.points[0].time or time > self.points[-1].time:
            return None

        easing = get_easing(self.shape)
        previous = self.points[0]
        for point in self.points[1:]:
            if time < point.time:
                span = point.time.beats - previous.time.beats
                progress = float((time.beats - previous.time.beats) / span)
                value = previous.velocity + (point.velocity - previous.velocity) * easing(progress)
                return _clamp_velocity(round(value))
            previous = point
        return _clamp_velocity(previous.velocity)


def _clamp_velocity(value: int) -> int:
    return max(MIN_VELOCITY, min(MAX_VELOCITY, value))


def sample(curve: VelocityCurve, time: Time) -> int | None:
    """Sample a velocity curve at a time."""
    return curve.sample(time)
