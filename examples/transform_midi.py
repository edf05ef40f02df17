#!/usr/bin/env python3
"""
Example: Build a melody and run it through a few transforms.

This demonstrates the transform engine end to end - building a sequence,
chaining transforms and writing the results as playable MIDI files.

Usage:
    python examples/transform_midi.py
    # Creates: examples/output/melody.mid, harmonized.mid, retrograde.mid, swell.mid
"""

from fractions import Fraction
from pathlib import Path

from chuk_midi_transform import (
    MidiSequence,
    Mode,
    NoteOff,
    NoteOn,
    PitchClass,
    SetTempo,
    Time,
    VelocityCurve,
)
from chuk_midi_transform.codec import save_sequence
from chuk_midi_transform.pipeline import PipelineLoader, run_pipeline


def main() -> None:
    """Generate example MIDI files."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    melody = create_melody()
    print(f"Melody: {len(melody)} messages at {melody.get_bpm()} BPM")
    save_sequence(melody, output_dir / "melody.mid")

    # Example 1: Diatonic thirds above, in D dorian
    print("\nGenerating harmonized.mid...")
    harmonized = melody.generate_harmony(-2, PitchClass.D, Mode.DORIAN).quantize(4)
    save_sequence(harmonized, output_dir / "harmonized.mid")
    print(f"  {len(melody)} -> {len(harmonized)} messages")

    # Example 2: Backwards, an octave down, at half speed
    print("\nGenerating retrograde.mid...")
    retrograde = melody.reverse().transpose(-12).scale_duration(2)
    save_sequence(retrograde, output_dir / "retrograde.mid")

    # Example 3: A crescendo curve over the phrase
    print("\nGenerating swell.mid...")
    curve = VelocityCurve.from_pairs([(0, 30), (4, 120), (8, 50)], "ease_in_out")
    save_sequence(melody.edit_dynamics(curve), output_dir / "swell.mid")

    # Example 4: A library pipeline
    print("\nRunning the 'middle_register' pipeline...")
    pipeline = PipelineLoader().get_pipeline("middle_register")
    if pipeline is not None:
        result = run_pipeline(melody, pipeline)
        print(f"  Steps: {', '.join(pipeline.operations)}")
        print(f"  Kept {len(result)} of {len(melody)} messages")

    print("\nDone! Open the MIDI files in your DAW to hear them.")


def create_melody() -> MidiSequence:
    """
    Create a two-bar D dorian phrase at 96 BPM.

    Eighth and quarter notes, with one note nudged off the grid so that
    quantizing has something to do.
    """
    phrase = [
        (62, 0, Fraction(1, 2)),
        (65, Fraction(1, 2), Fraction(1, 2)),
        (69, 1, 1),
        (67, Fraction(41, 20), 1),  # slightly late
        (65, 3, 1),
        (64, 4, 2),
        (62, 6, 2),
    ]

    seq = MidiSequence.new().append(SetTempo(96, Time(0)))
    for note, start, length in phrase:
        seq = seq.append(NoteOn(0, note, 96, Time(start)))
        seq = seq.append(NoteOff(0, note, 0, Time(start) + length))
    return seq


if __name__ == "__main__":
    main()
