"""
MinAll host stack sizing

Parsing, evaluation and AST printing each recurse once per level of
source nesting (and evaluation once per user call), so all three run
with Python's recursion limit lifted to a budget derived from the
configured call depth.
"""

import logging
import sys
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Host frames consumed per nested user call, with generous room for blocks.
FRAMES_PER_CALL = 32
STACK_HEADROOM = 1000


def recursion_budget(max_call_depth: int) -> int:
    """Host recursion limit needed to reach max_call_depth nested calls"""
    return max_call_depth * FRAMES_PER_CALL + STACK_HEADROOM


@contextmanager
def raised_recursion_limit(needed: int):
    """Raise sys.getrecursionlimit() to at least `needed` inside the block"""
    previous = sys.getrecursionlimit()
    raised = needed > previous
    if raised:
        logger.debug("Raising recursion limit from %d to %d", previous, needed)
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        if raised:
            sys.setrecursionlimit(previous)


__all__ = ['FRAMES_PER_CALL', 'STACK_HEADROOM', 'recursion_budget', 'raised_recursion_limit']
