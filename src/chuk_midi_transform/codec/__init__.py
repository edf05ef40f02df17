"""
Codecs - converting MidiSequences to and from file formats.
"""

from chuk_midi_transform.codec.midi import (
    load_sequence,
    save_sequence,
    sequence_from_midi,
    sequence_to_midi,
)

__all__ = [
    "load_sequence",
    "save_sequence",
    "sequence_from_midi",
    "sequence_to_midi",
]
