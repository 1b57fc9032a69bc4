from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, Optional, Protocol

import autograd.numpy as anp  # type: ignore

from ..matrix import Matrix


ArrayLike = anp.ndarray


class SolverStatus(StrEnum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    MAX_NODES = "max_nodes"
    MAX_ITERATIONS = "max_iterations"
    ERROR = "error"

    @property
    def is_limit(self) -> bool:
        return self in (SolverStatus.MAX_NODES, SolverStatus.MAX_ITERATIONS)


@dataclass
class ProblemData:
    """Numeric instance handed to a backend: rows ``a | b`` meaning ``a @ x <= b``."""

    constraints: Matrix
    objective: ArrayLike
    setup_time: float = 0.0

    @property
    def n_vars(self) -> int:
        return self.constraints.cols - 1


@dataclass
class SolverStats:
    solver_name: str
    solve_time: Optional[float] = None
    setup_time: Optional[float] = None
    num_iters: Optional[int] = None


@dataclass
class SolverResult:
    x: Optional[ArrayLike]
    status: SolverStatus
    stats: SolverStats
    objective_value: Optional[float] = None
    raw_result: Optional[Dict[str, Any]] = None


class SolverLimitError(RuntimeError):
    """A node or pivot ceiling stopped the search before it could finish."""

    def __init__(self, result: SolverResult):
        super().__init__(
            f"{result.stats.solver_name} stopped early ({result.status}) "
            f"after {result.stats.num_iters} node(s)"
        )
        self.result = result


class SolverBackend(Protocol):
    def solve(
        self,
        problem_data: ProblemData,
        solver: str,
        solver_options: Dict[str, object],
    ) -> SolverResult:
        ...
