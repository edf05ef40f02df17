"""
Transform tools - MCP tools that apply transforms to MIDI files.

Each tool reads a MIDI file, applies one transform (or a whole pipeline)
and writes the result to the output directory. Tools never raise: failures
come back as a JSON error payload.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_midi_transform.codec import load_sequence, save_sequence
from chuk_midi_transform.constants import ErrorMessages, SuccessMessages
from chuk_midi_transform.core.curve import VelocityCurve
from chuk_midi_transform.core.instruments import program_name
from chuk_midi_transform.core.pitch import PitchClass
from chuk_midi_transform.core.rhythm import Time
from chuk_midi_transform.core.scale import Mode
from chuk_midi_transform.models.message import ProgramChange, message_type
from chuk_midi_transform.models.sequence import MidiSequence
from chuk_midi_transform.pipeline import PipelineLoader, load_pipeline_file, run_pipeline
from chuk_midi_transform.transforms import (
    edit_dynamics,
    extract,
    generate_harmony,
    get_bpm,
    quantize,
    remap_instruments,
    reverse,
    scale_duration,
    set_tempo,
    transpose,
)

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _bpm_to_json(bpm: Any) -> int | str:
    """BPMs are exact; write whole numbers as ints, the rest as 'n/d'."""
    if isinstance(bpm, int):
        return bpm
    return bpm.numerator if bpm.denominator == 1 else str(bpm)


def describe_sequence(seq: MidiSequence) -> dict[str, Any]:
    """Summarize a sequence: message counts per kind, time span, tempo and instruments."""
    times = [m.time for m in seq if m.time is not None]
    programs = sorted({m.program for m in seq if isinstance(m, ProgramChange)})
    return {
        "messages": len(seq),
        "by_type": dict(sorted(Counter(message_type(m) for m in seq).items())),
        "start": str(min(times)) if times else None,
        "end": str(max(times)) if times else None,
        "bpm": _bpm_to_json(get_bpm(seq)),
        "instruments": [program_name(p) for p in programs if 0 <= p <= 127],
    }


def register_transform_tools(
    mcp: ChukMCPServer,
    output_dir: Path,
    loader: PipelineLoader | None = None,
) -> dict[str, Any]:
    """
    Register transform tools with the MCP server.

    Args:
        mcp: The MCP server instance
        output_dir: Directory for output files
        loader: Pipeline loader used by midi_run_pipeline

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    pipelines = loader or PipelineLoader()

    def apply_to_file(
        operation: str,
        input_path: str,
        output_name: str | None,
        transform: Callable[[MidiSequence], MidiSequence],
    ) -> str:
        seq = load_sequence(input_path)
        result = transform(seq)
        filename = f"{output_name or Path(input_path).stem + '_' + operation}.mid"
        output_path = save_sequence(result, output_dir / filename)
        return json.dumps(
            {
                "status": "success",
                "path": str(output_path),
                "input_messages": len(seq),
                "output_messages": len(result),
                "message": SuccessMessages.TRANSFORMED.format(
                    operation=operation, path=input_path, count=len(result)
                ),
            }
        )

    @mcp.tool  # type: ignore[arg-type]
    async def midi_transpose(
        input_path: str,
        semitones: int,
        output_name: str | None = None,
    ) -> str:
        """
        Transpose every note in a MIDI file.

        Args:
            input_path: Path to the source MIDI file
            semitones: Signed number of semitones to shift
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path

        Example:
            midi_transpose(input_path="melody.mid", semitones=-12)
        """
        try:
            return apply_to_file(
                "transpose", input_path, output_name, lambda s: transpose(s, semitones)
            )
        except Exception as e:
            logger.exception("Failed to transpose MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_transpose"] = midi_transpose

    @mcp.tool  # type: ignore[arg-type]
    async def midi_reverse(input_path: str, output_name: str | None = None) -> str:
        """
        Reverse a MIDI file in time (retrograde).

        Args:
            input_path: Path to the source MIDI file
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            return apply_to_file("reverse", input_path, output_name, reverse)
        except Exception as e:
            logger.exception("Failed to reverse MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_reverse"] = midi_reverse

    @mcp.tool  # type: ignore[arg-type]
    async def midi_quantize(
        input_path: str,
        grid_size: int = 4,
        output_name: str | None = None,
    ) -> str:
        """
        Snap note timing to a grid.

        Args:
            input_path: Path to the source MIDI file
            grid_size: Grid divisions per beat (4 = sixteenths, 2 = eighths)
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            return apply_to_file(
                "quantize", input_path, output_name, lambda s: quantize(s, grid_size)
            )
        except Exception as e:
            logger.exception("Failed to quantize MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_quantize"] = midi_quantize

    @mcp.tool  # type: ignore[arg-type]
    async def midi_extract(
        input_path: str,
        note_range: int,
        output_name: str | None = None,
    ) -> str:
        """
        Keep only the notes within a range of middle C.

        Everything that is not a note (tempo, controllers, ...) is dropped.

        Args:
            input_path: Path to the source MIDI file
            note_range: Semitones either side of middle C (bounds exclusive)
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            return apply_to_file(
                "extract", input_path, output_name, lambda s: extract(s, note_range)
            )
        except Exception as e:
            logger.exception("Failed to extract notes")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_extract"] = midi_extract

    @mcp.tool  # type: ignore[arg-type]
    async def midi_scale_duration(
        input_path: str,
        factor: str,
        output_name: str | None = None,
    ) -> str:
        """
        Stretch or compress a MIDI file in time.

        Args:
            input_path: Path to the source MIDI file
            factor: Exact factor as a string, e.g. "2" or "3/4"
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            exact = Time.parse(factor)
            return apply_to_file(
                "scale", input_path, output_name, lambda s: scale_duration(s, exact)
            )
        except Exception as e:
            logger.exception("Failed to scale MIDI duration")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_scale_duration"] = midi_scale_duration

    @mcp.tool  # type: ignore[arg-type]
    async def midi_set_tempo(
        input_path: str,
        tempo: int,
        output_name: str | None = None,
    ) -> str:
        """
        Rewrite every tempo change in a MIDI file.

        Files without a tempo message are left as they are.

        Args:
            input_path: Path to the source MIDI file
            tempo: New tempo in BPM
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            if tempo <= 0:
                return json.dumps(
                    {"status": "error", "message": f"Tempo must be positive, got {tempo}"}
                )
            return apply_to_file("tempo", input_path, output_name, lambda s: set_tempo(s, tempo))
        except Exception as e:
            logger.exception("Failed to set MIDI tempo")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_set_tempo"] = midi_set_tempo

    @mcp.tool  # type: ignore[arg-type]
    async def midi_remap_instruments(
        input_path: str,
        channel: int = 0,
        output_name: str | None = None,
    ) -> str:
        """
        Advance controller values to the next instrument in their GM family.

        Args:
            input_path: Path to the source MIDI file
            channel: MIDI channel (0-15)
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            return apply_to_file(
                "remap", input_path, output_name, lambda s: remap_instruments(s, channel)
            )
        except Exception as e:
            logger.exception("Failed to remap instruments")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_remap_instruments"] = midi_remap_instruments

    @mcp.tool  # type: ignore[arg-type]
    async def midi_generate_harmony(
        input_path: str,
        steps: int,
        tonic: str = "C",
        mode: str = "ionian",
        output_name: str | None = None,
    ) -> str:
        """
        Add a harmony voice that follows the mode.

        Args:
            input_path: Path to the source MIDI file
            steps: Signed harmony distance in scale steps
            tonic: Tonic pitch class (e.g. "D", "F#", "Bb")
            mode: Mode name (ionian, dorian, ..., minor, harmonic_minor)
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path

        Example:
            midi_generate_harmony(input_path="lead.mid", steps=2, tonic="D", mode="dorian")
        """
        try:
            pc = PitchClass.parse(tonic)
            parsed_mode = Mode.parse(mode)
            return apply_to_file(
                "harmony",
                input_path,
                output_name,
                lambda s: generate_harmony(s, steps, pc, parsed_mode),
            )
        except Exception as e:
            logger.exception("Failed to generate harmony")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_generate_harmony"] = midi_generate_harmony

    @mcp.tool  # type: ignore[arg-type]
    async def midi_edit_dynamics(
        input_path: str,
        points: list[list[str | int]],
        shape: str = "linear",
        output_name: str | None = None,
    ) -> str:
        """
        Reshape note velocities with a curve.

        Args:
            input_path: Path to the source MIDI file
            points: Breakpoints as [time_in_beats, velocity] pairs,
                e.g. [[0, 40], [16, 110]]; times may be "n/d" strings
            shape: Easing between breakpoints (linear, ease_in, ease_out, ...)
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path
        """
        try:
            curve = VelocityCurve.from_pairs(
                [(Time.parse(str(t)), int(v)) for t, v in points],
                shape,  # type: ignore[arg-type]
            )
            return apply_to_file(
                "dynamics", input_path, output_name, lambda s: edit_dynamics(s, curve)
            )
        except Exception as e:
            logger.exception("Failed to edit dynamics")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_edit_dynamics"] = midi_edit_dynamics

    @mcp.tool  # type: ignore[arg-type]
    async def midi_get_bpm(input_path: str) -> str:
        """
        Get the tempo of a MIDI file.

        Returns the last tempo change in the file, or 0 when there is none.

        Args:
            input_path: Path to the MIDI file

        Returns:
            JSON string with the BPM
        """
        try:
            seq = load_sequence(input_path)
            return json.dumps({"status": "success", "bpm": _bpm_to_json(get_bpm(seq))})
        except Exception as e:
            logger.exception("Failed to read MIDI tempo")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_get_bpm"] = midi_get_bpm

    @mcp.tool  # type: ignore[arg-type]
    async def midi_describe(input_path: str) -> str:
        """
        Summarize a MIDI file: message counts, time span and tempo.

        Args:
            input_path: Path to the MIDI file

        Returns:
            JSON string with the summary
        """
        try:
            seq = load_sequence(input_path)
            return json.dumps({"status": "success", "summary": describe_sequence(seq)})
        except Exception as e:
            logger.exception("Failed to describe MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_describe"] = midi_describe

    @mcp.tool  # type: ignore[arg-type]
    async def midi_run_pipeline(
        input_path: str,
        pipeline: str,
        output_name: str | None = None,
    ) -> str:
        """
        Apply a named or file-based pipeline to a MIDI file.

        Args:
            input_path: Path to the source MIDI file
            pipeline: Pipeline name from the library/project, or a path to a YAML file
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with the output path and applied steps
        """
        try:
            if pipeline.endswith((".yaml", ".yml")):
                chosen = load_pipeline_file(Path(pipeline))
            else:
                found = pipelines.get_pipeline(pipeline)
                if found is None:
                    message = ErrorMessages.PIPELINE_NOT_FOUND.format(name=pipeline)
                    return json.dumps({"status": "error", "message": message})
                chosen = found

            payload = json.loads(
                apply_to_file(
                    chosen.name, input_path, output_name, lambda s: run_pipeline(s, chosen)
                )
            )
            payload["steps"] = chosen.operations
            payload["message"] = SuccessMessages.PIPELINE_APPLIED.format(
                name=chosen.name, steps=len(chosen.steps), path=input_path
            )
            return json.dumps(payload)
        except Exception as e:
            logger.exception("Failed to run pipeline")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_run_pipeline"] = midi_run_pipeline

    @mcp.tool  # type: ignore[arg-type]
    async def midi_list_pipelines() -> str:
        """
        List the available transform pipelines.

        Returns:
            JSON string with pipeline names, descriptions and steps
        """
        try:
            return json.dumps(
                {
                    "status": "success",
                    "pipelines": [
                        {"name": p.name, "description": p.description, "steps": p.operations}
                        for p in pipelines.list_pipelines()
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to list pipelines")
            return json.dumps({"status": "error", "message": str(e)})

    tools["midi_list_pipelines"] = midi_list_pipelines

    return tools
