"""Activation guard for the capture pipeline."""

import logging
from typing import Optional, Sequence

from ..engine.base import Engine, Node

logger = logging.getLogger(__name__)

DEFAULT_FLAG = "--screenshot"


def is_capture_requested(argv: Sequence[str], flag: str = DEFAULT_FLAG) -> bool:
    """Return True if the capture flag is among the command-line arguments."""
    return flag in argv


def guard(
    argv: Sequence[str],
    engine: Engine,
    pipeline_node: Optional[Node] = None,
    flag: str = DEFAULT_FLAG,
) -> bool:
    """
    Decide whether the capture pipeline runs.

    When the flag is absent the pipeline node is removed from the tree and
    nothing else happens.

    Args:
        argv: Process command-line arguments.
        engine: Host engine.
        pipeline_node: The pipeline's own node, if already in the tree.
        flag: Activation flag.

    Returns:
        True if the Lifecycle Controller should take over.
    """
    if is_capture_requested(argv, flag):
        return True
    if pipeline_node is not None:
        engine.free(pipeline_node)
    return False
