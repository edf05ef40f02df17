#!/usr/bin/env python3
"""
Async MIDI Transform MCP Server using chuk-mcp-server

This server provides MCP tools for editing MIDI files with pure,
composable transforms:
- Transposition, range extraction and modal harmony voices
- Reversal, quantization and duration scaling
- Tempo rewriting, instrument remapping and velocity curves
- YAML pipelines chaining any of the above
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_midi_transform.pipeline import PipelineLoader
from chuk_midi_transform.tools import register_transform_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-midi-transform")

# Paths - standard project structure, overridable from the environment
BASE_PATH = Path.cwd()
PIPELINES_DIR = Path(os.environ.get("CHUK_MIDI_PIPELINES_DIR", BASE_PATH / "pipelines"))
OUTPUT_DIR = Path(os.environ.get("CHUK_MIDI_OUTPUT_DIR", BASE_PATH / "output"))
LIBRARY_PATH = Path(__file__).parent / "pipeline" / "library"

pipeline_loader = PipelineLoader(library_path=LIBRARY_PATH, project_path=PIPELINES_DIR)

# Register all tools
transform_tools = register_transform_tools(mcp, OUTPUT_DIR, pipeline_loader)

# Export tool functions for direct access
midi_transpose = transform_tools["midi_transpose"]
midi_reverse = transform_tools["midi_reverse"]
midi_quantize = transform_tools["midi_quantize"]
midi_extract = transform_tools["midi_extract"]
midi_scale_duration = transform_tools["midi_scale_duration"]
midi_set_tempo = transform_tools["midi_set_tempo"]
midi_remap_instruments = transform_tools["midi_remap_instruments"]
midi_generate_harmony = transform_tools["midi_generate_harmony"]
midi_edit_dynamics = transform_tools["midi_edit_dynamics"]
midi_get_bpm = transform_tools["midi_get_bpm"]
midi_describe = transform_tools["midi_describe"]
midi_run_pipeline = transform_tools["midi_run_pipeline"]
midi_list_pipelines = transform_tools["midi_list_pipelines"]

logger.info("CHUK MIDI Transform MCP Server initialized")
logger.info(f"  Pipeline library: {LIBRARY_PATH}")
logger.info(f"  Project pipelines: {PIPELINES_DIR}")
logger.info(f"  Output dir: {OUTPUT_DIR}")
