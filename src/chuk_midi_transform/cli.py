#!/usr/bin/env python3
"""
Command-line runner - apply a transform pipeline to a MIDI file.

    chuk-midi-transform song.mid out.mid --pipeline harmonize_thirds
    chuk-midi-transform song.mid out.mid --pipeline my_edit.yaml --track 1
    chuk-midi-transform song.mid --info
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from chuk_midi_transform.codec import load_sequence, save_sequence
from chuk_midi_transform.constants import TICKS_PER_BEAT, ErrorMessages
from chuk_midi_transform.pipeline import (
    PipelineError,
    PipelineLoader,
    load_pipeline_file,
    run_pipeline,
)
from chuk_midi_transform.tools.transforms import describe_sequence
from chuk_midi_transform.transforms import UnsupportedOperationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chuk-midi-transform",
        description="Apply MIDI transform pipelines to files",
    )
    parser.add_argument("input", type=Path, help="Source MIDI file")
    parser.add_argument("output", type=Path, nargs="?", help="Destination MIDI file")
    parser.add_argument(
        "--pipeline",
        help="Pipeline name (library or ./pipelines) or path to a YAML file",
    )
    parser.add_argument(
        "--pipelines-dir",
        type=Path,
        default=Path.cwd() / "pipelines",
        help="Project pipelines directory (default: ./pipelines)",
    )
    parser.add_argument(
        "--track",
        type=int,
        default=None,
        help="Read a single track instead of merging all tracks",
    )
    parser.add_argument(
        "--ticks-per-beat",
        type=int,
        default=TICKS_PER_BEAT,
        help=f"Output resolution (default: {TICKS_PER_BEAT})",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print a summary of the input instead of transforming it",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    seq = load_sequence(args.input, track=args.track)

    if args.info:
        print(json.dumps(describe_sequence(seq), indent=2))
        return 0

    if args.output is None or args.pipeline is None:
        parser.error("OUTPUT and --pipeline are required unless --info is given")

    try:
        if args.pipeline.endswith((".yaml", ".yml")):
            pipeline = load_pipeline_file(Path(args.pipeline))
        else:
            found = PipelineLoader(project_path=args.pipelines_dir).get_pipeline(args.pipeline)
            if found is None:
                logger.error(ErrorMessages.PIPELINE_NOT_FOUND.format(name=args.pipeline))
                return 2
            pipeline = found
        result = run_pipeline(seq, pipeline)
    except PipelineError as e:
        logger.error(str(e))
        return 2
    except UnsupportedOperationError as e:
        logger.error(f"Unsupported operation: {e}")
        return 3

    save_sequence(result, args.output, ticks_per_beat=args.ticks_per_beat)
    return 0


if __name__ == "__main__":
    sys.exit(main())
