"""
Transform engine - pure sequence-to-sequence operations.

Every transform takes a MidiSequence and returns a new one; inputs are
never modified, so transforms compose by plain sequential application:

    out = quantize(transpose(seq, 2), 4)
"""

from chuk_midi_transform.models.sequence import append, new
from chuk_midi_transform.transforms.control import (
    edit_dynamics,
    get_bpm,
    remap_instruments,
    set_tempo,
)
from chuk_midi_transform.transforms.pitch import (
    UnsupportedOperationError,
    arpeggiate_chords,
    extract,
    generate_harmony,
    transpose,
)
from chuk_midi_transform.transforms.timing import quantize, reverse, scale_duration

__all__ = [
    "UnsupportedOperationError",
    # Construction
    "new",
    "append",
    # Pitch
    "transpose",
    "extract",
    "generate_harmony",
    "arpeggiate_chords",
    # Timing
    "reverse",
    "quantize",
    "scale_duration",
    # Control
    "set_tempo",
    "get_bpm",
    "remap_instruments",
    "edit_dynamics",
]
