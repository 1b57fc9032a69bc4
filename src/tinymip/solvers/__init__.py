from __future__ import annotations

from typing import Dict

from ..constants import Solver
from .base import (
    ProblemData,
    SolverBackend,
    SolverLimitError,
    SolverResult,
    SolverStats,
    SolverStatus,
)
from .simplex import LPResult, Tableau, pivot, solve_lp
from .bnb_backend import BranchAndBoundBackend
from .highs_backend import HighsBackend


_SOLVER_BACKENDS: Dict[str, SolverBackend] = {
    Solver.BNB.value: BranchAndBoundBackend(),
    Solver.HIGHS.value: HighsBackend(),
}


def register_solver_backend(solver_name: str, backend: SolverBackend) -> None:
    _SOLVER_BACKENDS[solver_name] = backend


def get_solver_backend(solver: Solver | str) -> SolverBackend:
    solver_name = solver.value if isinstance(solver, Solver) else str(solver)
    if solver_name not in _SOLVER_BACKENDS:
        raise ValueError(f"No solver backend registered for solver '{solver_name}'")
    return _SOLVER_BACKENDS[solver_name]


__all__ = [
    "BranchAndBoundBackend",
    "HighsBackend",
    "LPResult",
    "ProblemData",
    "SolverBackend",
    "SolverLimitError",
    "SolverResult",
    "SolverStats",
    "SolverStatus",
    "Tableau",
    "get_solver_backend",
    "pivot",
    "register_solver_backend",
    "solve_lp",
]
