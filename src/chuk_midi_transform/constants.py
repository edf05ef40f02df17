"""
Constants and enums for the transform engine.

No magic strings - use enums and Literal types for constrained values.
"""

from typing import Literal

# Middle C is the centre of pitch-range extraction
MIDDLE_C = 60

# MIDI value ranges
MIN_NOTE = 0
MAX_NOTE = 127
MIN_VELOCITY = 0
MAX_VELOCITY = 127
MAX_CHANNEL = 15

# Standard ticks per beat (quarter note) used when writing files
TICKS_PER_BEAT = 480

# Returned by get_bpm when a sequence carries no tempo message
NO_TEMPO = 0

# Schema versions - frozen for v1
SchemaVersion = Literal[
    "sequence/v1",
    "pipeline/v1",
]

# Easing shapes understood by velocity curves
CurveShape = Literal[
    "step",
    "linear",
    "ease_in",
    "ease_out",
    "ease_in_out",
    "exponential",
    "logarithmic",
]


class ErrorMessages:
    """Standardized error messages."""

    INVALID_CHANNEL = "Channel must be 0-15, got {channel}"
    INVALID_GRID = "Grid size must be a positive integer, got {grid_size!r}"
    INEXACT_TIME = "Time values must be exact (int, Fraction or Time), got {value!r}"
    MISSING_TIME = "{type} requires a time; only tempo and time signature events may omit it"
    UNKNOWN_MODE = "Unknown mode: '{mode}'"
    UNKNOWN_MESSAGE = "Unknown message type: '{type}'"
    UNSUPPORTED_ARPEGGIATE = "Chord arpeggiation is not supported"
    PIPELINE_NOT_FOUND = "Pipeline '{name}' not found."
    INVALID_PIPELINE = "Invalid pipeline '{name}': {error}"


class SuccessMessages:
    """Standardized success messages."""

    TRANSFORMED = "Applied {operation} to {path} ({count} messages)."
    PIPELINE_APPLIED = "Applied pipeline '{name}' ({steps} steps) to {path}."
