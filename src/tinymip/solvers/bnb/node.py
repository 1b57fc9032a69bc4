"""
Branch-and-Bound Subproblems and Statistics

Core data structures of the depth-first branch-and-bound driver: the
subproblems kept on the LIFO stack, per-solve statistics, and the optional
per-node exploration record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import autograd.numpy as np  # type: ignore

from ...matrix import Matrix


class NodeOutcome(Enum):
    """What happened to an explored subproblem."""

    INFEASIBLE = "infeasible"  # LP relaxation has no feasible point
    UNBOUNDED = "unbounded"  # LP relaxation improves without limit
    PRUNED = "pruned"  # Relaxation cannot beat the incumbent
    INTEGRAL = "integral"  # Relaxation solution is already integral
    BRANCHED = "branched"  # Split on the first fractional variable
    LIMIT = "limit"  # LP hit the pivot ceiling


@dataclass
class Subproblem:
    """
    One node of the branch-and-bound tree.

    Each node owns its copy of the constraint matrix. Children are created by
    copying the parent's matrix and appending a single bound row, so a node at
    depth k carries exactly k more rows than the root.
    """

    node_id: int
    depth: int
    constraints: Matrix
    objective: np.ndarray

    parent_id: Optional[int] = None

    # (variable index, "<=" or ">=", bound) of the row that created this node
    branch: Optional[Tuple[int, str, float]] = None


@dataclass
class BBStats:
    """Statistics from the branch-and-bound solve."""

    nodes_explored: int = 0
    nodes_pruned: int = 0
    nodes_infeasible: int = 0
    nodes_unbounded: int = 0
    nodes_branched: int = 0
    integral_solutions: int = 0
    lp_solves: int = 0
    lp_pivots: int = 0
    max_depth: int = 0
    root_bound: float = float("-inf")


@dataclass
class NodeRecord:
    """Exploration record of one subproblem, kept when ``record_tree`` is set."""

    node_id: int
    parent_id: Optional[int]
    depth: int
    lp_value: float
    outcome: NodeOutcome
    branch_index: Optional[int] = None
    branch: Optional[Tuple[int, str, float]] = field(default=None, compare=False)
