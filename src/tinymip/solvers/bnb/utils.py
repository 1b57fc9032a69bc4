"""
Utility Functions for Branch-and-Bound

Fractionality checks, child subproblem construction and the final rounding of
floating-point results to integers.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import autograd.numpy as np  # type: ignore

from .node import Subproblem


def first_fractional_index(x: np.ndarray, epsilon: float) -> Optional[int]:
    """Leftmost index whose value is more than ``epsilon`` away from an integer."""
    for idx, val in enumerate(x):
        if abs(val - round(val)) > epsilon:
            return idx
    return None


def create_child_subproblems(
    parent: Subproblem,
    branch_idx: int,
    branch_val: float,
    node_counter: int,
) -> Tuple[Subproblem, Subproblem]:
    """Create the ``x_i <= floor(v)`` and ``x_i >= ceil(v)`` children of ``parent``.

    The ``>=`` bound is stored negated (``-x_i <= -ceil(v)``) to keep every row
    in ``<=`` form.
    """
    n_cols = parent.constraints.cols
    floor_v = math.floor(branch_val)
    ceil_v = math.ceil(branch_val)

    down_row = np.zeros(n_cols)
    down_row[branch_idx] = 1.0
    down_row[n_cols - 1] = floor_v
    down = parent.constraints.copy()
    down.add_row(down_row)

    up_row = np.zeros(n_cols)
    up_row[branch_idx] = -1.0
    up_row[n_cols - 1] = -ceil_v
    up = parent.constraints.copy()
    up.add_row(up_row)

    left = Subproblem(
        node_id=node_counter,
        depth=parent.depth + 1,
        constraints=down,
        objective=parent.objective,
        parent_id=parent.node_id,
        branch=(branch_idx, "<=", float(floor_v)),
    )
    right = Subproblem(
        node_id=node_counter + 1,
        depth=parent.depth + 1,
        constraints=up,
        objective=parent.objective,
        parent_id=parent.node_id,
        branch=(branch_idx, ">=", float(ceil_v)),
    )
    return left, right


def round_to_integers(x: np.ndarray) -> np.ndarray:
    """Round an integral-within-tolerance solution to exact integers."""
    return np.array([int(round(v)) for v in x], dtype=int)


def integral_value(value: float, epsilon: float) -> float | int:
    """``value`` as an ``int`` when it lies within ``epsilon`` of one."""
    nearest = round(value)
    if abs(value - nearest) <= epsilon:
        return int(nearest)
    return value
