"""
Pipeline model - chained transforms declared in YAML.

A pipeline is a named, ordered list of transform steps. Each step names
its operation in ``op`` and carries that operation's arguments:

    schema: pipeline/v1
    name: harmonize
    steps:
      - op: generate_harmony
        steps: 2
        tonic: C
        mode: ionian
      - op: quantize
        grid_size: 4
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_serializer, field_validator

from chuk_midi_transform.constants import CurveShape
from chuk_midi_transform.core.curve import VelocityCurve
from chuk_midi_transform.core.pitch import PitchClass
from chuk_midi_transform.core.scale import Mode

if TYPE_CHECKING:
    from chuk_midi_transform.models.sequence import MidiSequence


def _parse_exact(v: Any) -> Fraction:
    """Accept ints and 'n/d' strings; floats are not exact."""
    if isinstance(v, bool) or isinstance(v, float):
        raise ValueError(f"Expected an int or a 'n/d' string, got {v!r}")
    if isinstance(v, (int, Fraction)):
        return Fraction(v)
    if isinstance(v, str):
        try:
            return Fraction(v.strip())
        except ZeroDivisionError:
            raise ValueError(f"Zero denominator in {v!r}") from None
    raise ValueError(f"Expected an int or a 'n/d' string, got {v!r}")


def _dump_exact(v: Fraction) -> int | str:
    """Write whole numbers as ints and everything else as 'n/d'."""
    return v.numerator if v.denominator == 1 else str(v)


class _Step(BaseModel):
    """Base for transform steps."""

    model_config = {"frozen": True, "extra": "forbid", "arbitrary_types_allowed": True}

    def apply(self, seq: MidiSequence) -> MidiSequence:
        raise NotImplementedError


class TransposeStep(_Step):
    """Shift notes by semitones."""

    op: Literal["transpose"] = "transpose"
    semitones: int = Field(..., description="Signed semitone shift")

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import transpose

        return transpose(seq, self.semitones)


class ReverseStep(_Step):
    """Play the sequence backwards."""

    op: Literal["reverse"] = "reverse"

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import reverse

        return reverse(seq)


class QuantizeStep(_Step):
    """Snap note times to a grid."""

    op: Literal["quantize"] = "quantize"
    grid_size: int = Field(..., gt=0, description="Grid divisions per beat")

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import quantize

        return quantize(seq, self.grid_size)


class ExtractStep(_Step):
    """Keep notes near middle C."""

    op: Literal["extract"] = "extract"
    note_range: int = Field(..., ge=0, description="Semitones either side of middle C")

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import extract

        return extract(seq, self.note_range)


class ScaleDurationStep(_Step):
    """Multiply every time by an exact factor."""

    op: Literal["scale_duration"] = "scale_duration"
    factor: Fraction = Field(..., description="Exact factor, e.g. 2 or '3/2'")

    @field_validator("factor", mode="before")
    @classmethod
    def validate_factor(cls, v: Any) -> Fraction:
        return _parse_exact(v)

    @field_serializer("factor")
    def serialize_factor(self, v: Fraction) -> int | str:
        return _dump_exact(v)

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import scale_duration

        return scale_duration(seq, self.factor)


class SetTempoStep(_Step):
    """Rewrite every tempo message."""

    op: Literal["set_tempo"] = "set_tempo"
    tempo: Fraction = Field(..., description="Tempo in BPM")

    @field_validator("tempo", mode="before")
    @classmethod
    def validate_tempo(cls, v: Any) -> Fraction:
        tempo = _parse_exact(v)
        if tempo <= 0:
            raise ValueError(f"Tempo must be positive, got {tempo}")
        return tempo

    @field_serializer("tempo")
    def serialize_tempo(self, v: Fraction) -> int | str:
        return _dump_exact(v)

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import set_tempo

        tempo: int | Fraction = self.tempo
        if self.tempo.denominator == 1:
            tempo = self.tempo.numerator
        return set_tempo(seq, tempo)


class RemapInstrumentsStep(_Step):
    """Advance controller values to the next GM instrument."""

    op: Literal["remap_instruments"] = "remap_instruments"
    channel: int = Field(0, ge=0, le=15, description="MIDI channel")

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import remap_instruments

        return remap_instruments(seq, self.channel)


class GenerateHarmonyStep(_Step):
    """Add a modal harmony voice."""

    op: Literal["generate_harmony"] = "generate_harmony"
    steps: int = Field(..., description="Signed harmony distance")
    tonic: str = Field("C", description="Tonic pitch class, e.g. 'D' or 'F#'")
    mode: str = Field("ionian", description="Mode name")

    @field_validator("tonic")
    @classmethod
    def validate_tonic(cls, v: str) -> str:
        PitchClass.parse(v)
        return v

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        Mode.parse(v)
        return v

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import generate_harmony

        return generate_harmony(seq, self.steps, PitchClass.parse(self.tonic), Mode.parse(self.mode))


class ArpeggiateChordsStep(_Step):
    """Spread chords into arpeggios (unsupported, always fails)."""

    op: Literal["arpeggiate_chords"] = "arpeggiate_chords"
    pattern: str = Field("up", description="Arpeggio pattern")

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import arpeggiate_chords

        return arpeggiate_chords(seq, self.pattern)


class CurvePointSpec(BaseModel):
    """A velocity curve breakpoint as written in YAML."""

    time: Fraction = Field(..., description="Beat position, e.g. 4 or '9/2'")
    velocity: int = Field(..., ge=0, le=127, description="Velocity at this point")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> Fraction:
        return _parse_exact(v)

    @field_serializer("time")
    def serialize_time(self, v: Fraction) -> int | str:
        return _dump_exact(v)


class EditDynamicsStep(_Step):
    """Shape velocities with a curve."""

    op: Literal["edit_dynamics"] = "edit_dynamics"
    points: list[CurvePointSpec] = Field(..., min_length=1, description="Curve breakpoints")
    shape: CurveShape = Field("linear", description="Easing between breakpoints")

    def to_curve(self) -> VelocityCurve:
        """Build the VelocityCurve for this step."""
        return VelocityCurve.from_pairs([(p.time, p.velocity) for p in self.points], self.shape)

    def apply(self, seq: MidiSequence) -> MidiSequence:
        from chuk_midi_transform.transforms import edit_dynamics

        return edit_dynamics(seq, self.to_curve())


TransformStep = Annotated[
    Union[
        TransposeStep,
        ReverseStep,
        QuantizeStep,
        ExtractStep,
        ScaleDurationStep,
        SetTempoStep,
        RemapInstrumentsStep,
        GenerateHarmonyStep,
        ArpeggiateChordsStep,
        EditDynamicsStep,
    ],
    Field(discriminator="op"),
]


class Pipeline(BaseModel):
    """
    A named chain of transforms.

    Steps run in order; the output of each is the input of the next.
    """

    schema_version: Literal["pipeline/v1"] = Field(
        "pipeline/v1", alias="schema", description="Schema version"
    )
    name: str = Field(..., description="Pipeline name")
    description: str = Field("", description="Human-readable description")
    steps: list[TransformStep] = Field(default_factory=list, description="Ordered steps")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Pipeline name must not be empty")
        return v

    @property
    def operations(self) -> list[str]:
        """Operation names, in order."""
        return [step.op for step in self.steps]
