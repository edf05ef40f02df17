"""
Tests for MCP tools.

Tests the transform tools end to end: each reads a MIDI file, applies a
transform and writes the result to the output directory.
"""

import json
from pathlib import Path

import pytest
import yaml

from chuk_midi_transform.codec import load_sequence, save_sequence
from chuk_midi_transform.core.rhythm import Time
from chuk_midi_transform.models import ControlChange, MidiSequence, NoteOff, NoteOn
from chuk_midi_transform.pipeline import PipelineLoader
from chuk_midi_transform.tools import describe_sequence, register_transform_tools


# Mock MCP server for testing tools
class MockMCPServer:
    """Mock MCP server that just stores registered tools."""

    def __init__(self, name: str):
        self.name = name
        self.tools: dict = {}

    def tool(self, func):
        """Decorator to register a tool."""
        self.tools[func.__name__] = func
        return func


@pytest.fixture
def source_file(temp_dir: Path, every_kind: MidiSequence) -> Path:
    """A MIDI file holding one message of each kind."""
    return save_sequence(every_kind, temp_dir / "source.mid")


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    return temp_dir / "output"


@pytest.fixture
def tools(output_dir: Path, temp_dir: Path) -> dict:
    """Transform tools registered against a mock server."""
    mcp = MockMCPServer("test")
    loader = PipelineLoader(project_path=temp_dir / "pipelines")
    return register_transform_tools(mcp, output_dir, loader)


class TestRegistration:
    """Tests for tool registration."""

    def test_all_tools_registered(self, output_dir: Path) -> None:
        """Every tool is registered with the server and returned."""
        mcp = MockMCPServer("test")
        tools = register_transform_tools(mcp, output_dir)
        assert set(tools) == set(mcp.tools)
        assert {
            "midi_transpose",
            "midi_reverse",
            "midi_quantize",
            "midi_extract",
            "midi_scale_duration",
            "midi_set_tempo",
            "midi_remap_instruments",
            "midi_generate_harmony",
            "midi_edit_dynamics",
            "midi_get_bpm",
            "midi_describe",
            "midi_run_pipeline",
            "midi_list_pipelines",
        } <= set(tools)


class TestTransformTools:
    """Tests for the single-transform tools."""

    @pytest.mark.asyncio
    async def test_transpose(self, tools: dict, source_file: Path, output_dir: Path):
        """Transpose writes a shifted copy."""
        result = await tools["midi_transpose"](input_path=str(source_file), semitones=12)
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["path"] == str(output_dir / "source_transpose.mid")

        notes = [m.note for m in load_sequence(data["path"]) if isinstance(m, NoteOn)]
        assert notes == [72]

    @pytest.mark.asyncio
    async def test_output_name(self, tools: dict, source_file: Path, output_dir: Path):
        """An explicit output name is used."""
        result = await tools["midi_reverse"](input_path=str(source_file), output_name="backwards")
        data = json.loads(result)
        assert data["path"] == str(output_dir / "backwards.mid")
        assert Path(data["path"]).exists()

    @pytest.mark.asyncio
    async def test_extract_counts(self, tools: dict, source_file: Path):
        """Extract reports how many messages were kept."""
        result = await tools["midi_extract"](input_path=str(source_file), note_range=12)
        data = json.loads(result)
        assert data["input_messages"] == 9
        assert data["output_messages"] == 2

    @pytest.mark.asyncio
    async def test_quantize_bad_grid(self, tools: dict, source_file: Path):
        """Invalid grids come back as an error payload."""
        result = await tools["midi_quantize"](input_path=str(source_file), grid_size=0)
        data = json.loads(result)
        assert data["status"] == "error"
        assert "Grid size" in data["message"]

    @pytest.mark.asyncio
    async def test_scale_duration(self, tools: dict, source_file: Path):
        """Factors are parsed from exact strings."""
        result = await tools["midi_scale_duration"](input_path=str(source_file), factor="1/2")
        data = json.loads(result)
        assert data["status"] == "success"
        assert load_sequence(data["path"])[-1].time == Time(2)

    @pytest.mark.asyncio
    async def test_set_and_get_tempo(self, tools: dict, source_file: Path):
        """A rewritten tempo is read back by midi_get_bpm."""
        result = await tools["midi_set_tempo"](input_path=str(source_file), tempo=100)
        path = json.loads(result)["path"]

        bpm = json.loads(await tools["midi_get_bpm"](input_path=path))
        assert bpm == {"status": "success", "bpm": 100}

    @pytest.mark.asyncio
    async def test_set_tempo_rejects_zero(self, tools: dict, source_file: Path):
        """Tempo must be positive."""
        result = await tools["midi_set_tempo"](input_path=str(source_file), tempo=0)
        assert json.loads(result)["status"] == "error"

    @pytest.mark.asyncio
    async def test_remap_instruments(self, tools: dict, source_file: Path):
        """Controller values advance within their family."""
        result = await tools["midi_remap_instruments"](input_path=str(source_file))
        seq = load_sequence(json.loads(result)["path"])
        values = [m.value for m in seq if isinstance(m, ControlChange)]
        assert values == [8]

    @pytest.mark.asyncio
    async def test_generate_harmony(self, tools: dict, temp_dir: Path):
        """Harmony notes are added before each original."""
        src = save_sequence(
            MidiSequence([NoteOn(0, 64, 100, Time(0)), NoteOff(0, 64, 0, Time(1))]),
            temp_dir / "e.mid",
        )
        result = await tools["midi_generate_harmony"](
            input_path=str(src), steps=-2, tonic="C", mode="major"
        )
        seq = load_sequence(json.loads(result)["path"])
        assert [m.note for m in seq] == [67, 64, 62, 64]

    @pytest.mark.asyncio
    async def test_generate_harmony_bad_mode(self, tools: dict, source_file: Path):
        """Unknown modes come back as errors."""
        result = await tools["midi_generate_harmony"](
            input_path=str(source_file), steps=2, mode="bebop"
        )
        data = json.loads(result)
        assert data["status"] == "error"
        assert "Unknown mode" in data["message"]

    @pytest.mark.asyncio
    async def test_edit_dynamics(self, tools: dict, source_file: Path):
        """Velocities follow the curve."""
        result = await tools["midi_edit_dynamics"](
            input_path=str(source_file), points=[[0, 20], [4, 100]]
        )
        seq = load_sequence(json.loads(result)["path"])
        velocities = [m.velocity for m in seq if isinstance(m, (NoteOn, NoteOff))]
        assert velocities == [20, 100]

    @pytest.mark.asyncio
    async def test_missing_input(self, tools: dict, temp_dir: Path):
        """Missing files come back as errors."""
        result = await tools["midi_transpose"](
            input_path=str(temp_dir / "missing.mid"), semitones=1
        )
        assert json.loads(result)["status"] == "error"


class TestInfoTools:
    """Tests for describe and tempo tools."""

    @pytest.mark.asyncio
    async def test_describe(self, tools: dict, source_file: Path):
        """Describe summarizes counts, span and tempo."""
        result = await tools["midi_describe"](input_path=str(source_file))
        summary = json.loads(result)["summary"]
        assert summary["messages"] == 9
        assert summary["by_type"]["note_on"] == 1
        assert summary["start"] == "0"
        assert summary["end"] == "4"
        assert summary["bpm"] == 120
        assert summary["instruments"] == ["Electric Piano 2"]

    def test_describe_empty(self) -> None:
        """An empty sequence has no span and no tempo."""
        summary = describe_sequence(MidiSequence())
        assert summary == {
            "messages": 0,
            "by_type": {},
            "start": None,
            "end": None,
            "bpm": 0,
            "instruments": [],
        }


class TestPipelineTools:
    """Tests for pipeline tools."""

    @pytest.mark.asyncio
    async def test_run_library_pipeline(self, tools: dict, source_file: Path):
        """Library pipelines run by name."""
        result = await tools["midi_run_pipeline"](
            input_path=str(source_file), pipeline="middle_register"
        )
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["steps"] == ["extract", "quantize"]
        assert data["output_messages"] == 2

    @pytest.mark.asyncio
    async def test_run_pipeline_file(self, tools: dict, source_file: Path, temp_dir: Path):
        """Pipelines can be given as a YAML path."""
        path = temp_dir / "up.yaml"
        path.write_text(
            yaml.safe_dump({"name": "up", "steps": [{"op": "transpose", "semitones": 1}]})
        )
        result = await tools["midi_run_pipeline"](input_path=str(source_file), pipeline=str(path))
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["path"].endswith("source_up.mid")

    @pytest.mark.asyncio
    async def test_run_unknown_pipeline(self, tools: dict, source_file: Path):
        """Unknown pipeline names are reported."""
        result = await tools["midi_run_pipeline"](input_path=str(source_file), pipeline="nope")
        data = json.loads(result)
        assert data["status"] == "error"
        assert "not found" in data["message"]

    @pytest.mark.asyncio
    async def test_run_unsupported_pipeline(self, tools: dict, source_file: Path, temp_dir: Path):
        """Unsupported steps fail the tool cleanly."""
        project = temp_dir / "pipelines"
        project.mkdir()
        (project / "arp.yaml").write_text("name: arp\nsteps:\n  - op: arpeggiate_chords\n")
        result = await tools["midi_run_pipeline"](input_path=str(source_file), pipeline="arp")
        data = json.loads(result)
        assert data["status"] == "error"
        assert "not supported" in data["message"]

    @pytest.mark.asyncio
    async def test_run_listed_name(self, tools: dict, source_file: Path, temp_dir: Path):
        """Every listed pipeline name can be run."""
        project = temp_dir / "pipelines"
        project.mkdir()
        (project / "a.yaml").write_text(
            "name: octave\nsteps:\n  - op: transpose\n    semitones: 12\n"
        )
        listed = json.loads(await tools["midi_list_pipelines"]())
        assert "octave" in {p["name"] for p in listed["pipelines"]}
        result = await tools["midi_run_pipeline"](input_path=str(source_file), pipeline="octave")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["steps"] == ["transpose"]

    @pytest.mark.asyncio
    async def test_list_pipelines(self, tools: dict):
        """The library pipelines are listed."""
        data = json.loads(await tools["midi_list_pipelines"]())
        names = {p["name"] for p in data["pipelines"]}
        assert "harmonize_thirds" in names
