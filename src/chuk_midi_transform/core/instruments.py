"""
General MIDI instrument table.

The 128 GM programs are laid out in 16 families of 8 related sounds.
Instrument remapping advances a value to the next program in its family,
wrapping back to the family's first program.
"""

from __future__ import annotations

from enum import IntEnum

PROGRAMS_PER_FAMILY = 8


class InstrumentFamily(IntEnum):
    """The 16 General MIDI instrument families, by index."""

    PIANO = 0
    CHROMATIC_PERCUSSION = 1
    ORGAN = 2
    GUITAR = 3
    BASS = 4
    STRINGS = 5
    ENSEMBLE = 6
    BRASS = 7
    REED = 8
    PIPE = 9
    SYNTH_LEAD = 10
    SYNTH_PAD = 11
    SYNTH_EFFECTS = 12
    ETHNIC = 13
    PERCUSSIVE = 14
    SOUND_EFFECTS = 15

    @property
    def programs(self) -> range:
        """Program numbers belonging to this family."""
        start = self.value * PROGRAMS_PER_FAMILY
        return range(start, start + PROGRAMS_PER_FAMILY)


GM_PROGRAM_NAMES: tuple[str, ...] = (
    # Piano
    "Acoustic Grand Piano", "Bright Acoustic Piano", "Electric Grand Piano", "Honky-tonk Piano",
    "Electric Piano 1", "Electric Piano 2", "Harpsichord", "Clavinet",
    # Chromatic percussion
    "Celesta", "Glockenspiel", "Music Box", "Vibraphone",
    "Marimba", "Xylophone", "Tubular Bells", "Dulcimer",
    # Organ
    "Drawbar Organ", "Percussive Organ", "Rock Organ", "Church Organ",
    "Reed Organ", "Accordion", "Harmonica", "Tango Accordion",
    # Guitar
    "Acoustic Guitar (nylon)", "Acoustic Guitar (steel)", "Electric Guitar (jazz)",
    "Electric Guitar (clean)", "Electric Guitar (muted)", "Overdriven Guitar",
    "Distortion Guitar", "Guitar Harmonics",
    # Bass
    "Acoustic Bass", "Electric Bass (finger)", "Electric Bass (pick)", "Fretless Bass",
    "Slap Bass 1", "Slap Bass 2", "Synth Bass 1", "Synth Bass 2",
    # Strings
    "Violin", "Viola", "Cello", "Contrabass",
    "Tremolo Strings", "Pizzicato Strings", "Orchestral Harp", "Timpani",
    # Ensemble
    "String Ensemble 1", "String Ensemble 2", "Synth Strings 1", "Synth Strings 2",
    "Choir Aahs", "Voice Oohs", "Synth Voice", "Orchestra Hit",
    # Brass
    "Trumpet", "Trombone", "Tuba", "Muted Trumpet",
    "French Horn", "Brass Section", "Synth Brass 1", "Synth Brass 2",
    # Reed
    "Soprano Sax", "Alto Sax", "Tenor Sax", "Baritone Sax",
    "Oboe", "English Horn", "Bassoon", "Clarinet",
    # Pipe
    "Piccolo", "Flute", "Recorder", "Pan Flute",
    "Blown Bottle", "Shakuhachi", "Whistle", "Ocarina",
    # Synth lead
    "Lead 1 (square)", "Lead 2 (sawtooth)", "Lead 3 (calliope)", "Lead 4 (chiff)",
    "Lead 5 (charang)", "Lead 6 (voice)", "Lead 7 (fifths)", "Lead 8 (bass + lead)",
    # Synth pad
    "Pad 1 (new age)", "Pad 2 (warm)", "Pad 3 (polysynth)", "Pad 4 (choir)",
    "Pad 5 (bowed)", "Pad 6 (metallic)", "Pad 7 (halo)", "Pad 8 (sweep)",
    # Synth effects
    "FX 1 (rain)", "FX 2 (soundtrack)", "FX 3 (crystal)", "FX 4 (atmosphere)",
    "FX 5 (brightness)", "FX 6 (goblins)", "FX 7 (echoes)", "FX 8 (sci-fi)",
    # Ethnic
    "Sitar", "Banjo", "Shamisen", "Koto",
    "Kalimba", "Bagpipe", "Fiddle", "Shanai",
    # Percussive
    "Tinkle Bell", "Agogo", "Steel Drums", "Woodblock",
    "Taiko Drum", "Melodic Tom", "Synth Drum", "Reverse Cymbal",
    # Sound effects
    "Guitar Fret Noise", "Breath Noise", "Seashore", "Bird Tweet",
    "Telephone Ring", "Helicopter", "Applause", "Gunshot",
)


def family_of(program: int) -> InstrumentFamily:
    """Get the GM family a program number belongs to."""
    return InstrumentFamily((program % 128) // PROGRAMS_PER_FAMILY)


def program_name(program: int) -> str:
    """Get the GM name of a program number (0-127)."""
    if not 0 <= program <= 127:
        raise ValueError(f"Program must be 0-127, got {program}")
    return GM_PROGRAM_NAMES[program]


def next_in_group(program: int) -> int:
    """
    Advance to the next program in the same GM family.

    Cycles within the family: 0 -> 1 -> ... -> 7 -> 0, 8 -> ... -> 15 -> 8.
    Values outside 0-127 keep their block of eight and cycle within it.
    """
    base = program - program % PROGRAMS_PER_FAMILY
    return base + (program + 1) % PROGRAMS_PER_FAMILY
