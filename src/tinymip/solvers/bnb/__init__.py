"""
Branch-and-Bound MILP Solver

This package holds the pieces of the depth-first branch-and-bound driver that
wraps the dense two-phase simplex.

Modules:
- node: Subproblem, statistics and exploration record dataclasses
- utils: Fractionality checks, child creation and rounding helpers

The driver itself lives in ``tinymip.solvers.bnb_backend``.
"""

from .node import BBStats, NodeOutcome, NodeRecord, Subproblem
from .utils import (
    create_child_subproblems,
    first_fractional_index,
    integral_value,
    round_to_integers,
)

__all__ = [
    "BBStats",
    "NodeOutcome",
    "NodeRecord",
    "Subproblem",
    "create_child_subproblems",
    "first_fractional_index",
    "integral_value",
    "round_to_integers",
]
