"""
Pipeline loader - discovers and loads YAML transform pipelines.

Pipelines can come from:
1. Built-in library (shipped with package)
2. Project pipelines (user's project/pipelines directory)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_midi_transform.constants import ErrorMessages
from chuk_midi_transform.models.pipeline import Pipeline

logger = logging.getLogger(__name__)


class PipelineError(ValueError):
    """A pipeline file is missing, unreadable or invalid."""


def parse_pipeline(data: Any, name: str = "<inline>") -> Pipeline:
    """
    Validate raw YAML/JSON data as a Pipeline.

    Raises:
        PipelineError: If the data is not a valid pipeline
    """
    if not isinstance(data, dict):
        raise PipelineError(
            ErrorMessages.INVALID_PIPELINE.format(name=name, error="expected a mapping")
        )
    try:
        return Pipeline.model_validate(data)
    except ValidationError as e:
        raise PipelineError(ErrorMessages.INVALID_PIPELINE.format(name=name, error=e)) from e


def load_pipeline_file(path: Path) -> Pipeline:
    """
    Load a single pipeline from a YAML file.

    Raises:
        PipelineError: If the file cannot be read or is not a valid pipeline
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise PipelineError(ErrorMessages.INVALID_PIPELINE.format(name=path, error=e)) from e
    return parse_pipeline(data, name=str(path))


class PipelineLoader:
    """
    Discovers and loads pipeline definitions.

    Pipelines are loaded from YAML files in the library and project directories.
    Project pipelines override library pipelines with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the pipeline loader.

        Args:
            library_path: Path to built-in pipeline library
            project_path: Path to project pipelines directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, Pipeline] = {}

    def list_pipelines(self) -> list[Pipeline]:
        """
        List all available pipelines.

        Invalid files are logged and skipped so one bad file does not hide
        the rest.
        """
        pipelines: dict[str, Pipeline] = {}
        for directory in (self.library_path, self.project_path):
            if directory is None or not directory.exists():
                continue
            for path in sorted(directory.glob("*.yaml")):
                try:
                    pipeline = load_pipeline_file(path)
                except PipelineError as e:
                    logger.warning(f"Skipping invalid pipeline {path}: {e}")
                    continue
                pipelines[pipeline.name] = pipeline
        return list(pipelines.values())

    def get_pipeline(self, name: str) -> Pipeline | None:
        """
        Get a pipeline by name.

        Project pipelines take precedence over library pipelines. A file
        whose stem matches is used directly; otherwise the pipeline is
        found by the name declared inside it, as list_pipelines reports it.

        Args:
            name: Pipeline name

        Returns:
            Pipeline if found, None otherwise

        Raises:
            PipelineError: If the file exists but is invalid
        """
        if name in self._cache:
            return self._cache[name]

        for directory in (self.project_path, self.library_path):
            if directory is None:
                continue
            path = directory / f"{name}.yaml"
            if path.exists():
                pipeline = load_pipeline_file(path)
                self._cache[name] = pipeline
                return pipeline

        for pipeline in self.list_pipelines():
            if pipeline.name == name:
                self._cache[name] = pipeline
                return pipeline

        return None

    def save_to_project(self, pipeline: Pipeline) -> Path:
        """
        Write a pipeline to the project directory as YAML.

        Returns:
            Path to the written file
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        self.project_path.mkdir(parents=True, exist_ok=True)
        dest_file = self.project_path / f"{pipeline.name}.yaml"
        data = pipeline.model_dump(mode="json", by_alias=True)
        dest_file.write_text(yaml.safe_dump(data, sort_keys=False))

        self._cache.pop(pipeline.name, None)
        return dest_file

    def clear_cache(self) -> None:
        """Clear the pipeline cache."""
        self._cache.clear()
