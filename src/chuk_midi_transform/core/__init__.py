"""
Core primitives - the support layer the transforms compose on.

- PitchClass / Pitch: chromatic pitch, with and without octave context
- Interval / ScaleType / Mode: step patterns for modal arithmetic
- Direction: which way modal transposition walks
- Time: exact signed beat positions, plus grid rounding
- VelocityCurve: time-indexed velocity shapes
- GM instrument families and program names
"""

from chuk_midi_transform.core.curve import CurvePoint, VelocityCurve, sample
from chuk_midi_transform.core.instruments import (
    GM_PROGRAM_NAMES,
    InstrumentFamily,
    family_of,
    next_in_group,
    program_name,
)
from chuk_midi_transform.core.pitch import Interval, Pitch, PitchClass, to_pitch_class
from chuk_midi_transform.core.rhythm import Time, round_to_grid
from chuk_midi_transform.core.scale import (
    Direction,
    Mode,
    ScaleType,
    modal_transposition,
    mode_steps,
)

__all__ = [
    # Pitch
    "PitchClass",
    "Pitch",
    "Interval",
    "to_pitch_class",
    # Scale
    "ScaleType",
    "Mode",
    "Direction",
    "mode_steps",
    "modal_transposition",
    # Rhythm
    "Time",
    "round_to_grid",
    # Curves
    "CurvePoint",
    "VelocityCurve",
    "sample",
    # Instruments
    "GM_PROGRAM_NAMES",
    "InstrumentFamily",
    "family_of",
    "next_in_group",
    "program_name",
]
