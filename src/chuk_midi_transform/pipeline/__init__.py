"""
Pipeline system - YAML-declared chains of transforms.
"""

from chuk_midi_transform.pipeline.loader import (
    PipelineError,
    PipelineLoader,
    load_pipeline_file,
    parse_pipeline,
)
from chuk_midi_transform.pipeline.runner import run_pipeline

__all__ = [
    "PipelineError",
    "PipelineLoader",
    "load_pipeline_file",
    "parse_pipeline",
    "run_pipeline",
]
