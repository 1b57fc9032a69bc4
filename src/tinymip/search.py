"""
Breadth-first search over XOR-combinable bit-vector states.

Every step XORs the current state with one of a fixed set of masks. The search
expands one level at a time, so the first time the target is produced its
depth is the minimum number of mask applications.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

logger = logging.getLogger(__name__)


def minimum_xor_steps(start: int, target: int, masks: Sequence[int]) -> Optional[int]:
    """
    Fewest XOR applications turning ``start`` into ``target``.

    Returns ``0`` when ``start == target`` and ``None`` when the target cannot
    be reached with the given masks.
    """
    for name, value in (("start", start), ("target", target)):
        if value < 0:
            raise ValueError(f"{name} must be a non-negative integer, got {value}")
    masks = [int(m) for m in masks]
    if any(m < 0 for m in masks):
        raise ValueError("masks must be non-negative integers")

    if start == target:
        return 0

    frontier: List[int] = [start]
    next_frontier: List[int] = []
    visited: Set[int] = {start}
    depth = 0

    while True:
        for state in frontier:
            for mask in masks:
                candidate = state ^ mask
                if candidate == target:
                    logger.debug(
                        f"Reached {target} after {depth + 1} step(s), "
                        f"{len(visited)} state(s) visited"
                    )
                    return depth + 1
                if candidate not in visited:
                    visited.add(candidate)
                    next_frontier.append(candidate)

        if not next_frontier:
            logger.debug(f"{target} unreachable from {start}, {len(visited)} state(s) visited")
            return None

        frontier, next_frontier = next_frontier, frontier
        next_frontier.clear()
        depth += 1
