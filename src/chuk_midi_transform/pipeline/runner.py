"""
Pipeline runner - applies a Pipeline's steps to a sequence.
"""

from __future__ import annotations

import logging

from chuk_midi_transform.models.pipeline import Pipeline
from chuk_midi_transform.models.sequence import MidiSequence

logger = logging.getLogger(__name__)


def run_pipeline(seq: MidiSequence, pipeline: Pipeline) -> MidiSequence:
    """
    Apply every step of a pipeline in order.

    The input sequence is untouched; each step's output feeds the next.
    Errors from a step propagate unchanged.
    """
    result = seq
    for index, step in enumerate(pipeline.steps):
        before = len(result)
        result = step.apply(result)
        logger.debug(
            "pipeline %s step %d (%s): %d -> %d messages",
            pipeline.name,
            index,
            step.op,
            before,
            len(result),
        )
    logger.info(f"Applied pipeline '{pipeline.name}' ({len(pipeline.steps)} steps)")
    return result
