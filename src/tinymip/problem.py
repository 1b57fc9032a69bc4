from __future__ import annotations

import time
from typing import List, Optional, Sequence, Tuple

import autograd.numpy as np  # type: ignore

from .constants import DEFAULT_EPSILON, DEFAULT_LP_MAX_ITERATIONS, Solver
from .matrix import Matrix
from .solvers import (
    LPResult,
    ProblemData,
    SolverLimitError,
    SolverResult,
    SolverStatus,
    get_solver_backend,
    solve_lp,
)


_SENSES = ("<=", ">=", "==")


class IntegerProgram:
    """
    minimize c @ x  subject to  A @ x <= b,  x >= 0 integer.

    Constraints are rows ``a_1 .. a_n | b``. Objective coefficients must be
    non-negative, which keeps every relaxation bounded below by zero.
    """

    def __init__(self, constraints, objective: Sequence[float]):
        start_setup_time = time.time()

        self.objective = np.asarray(objective, dtype=float).ravel()
        n = self.objective.shape[0]
        if n == 0:
            raise ValueError("Objective must have at least one coefficient")
        if not np.all(np.isfinite(self.objective)):
            raise ValueError("Objective coefficients must be finite")
        if np.any(self.objective < 0):
            raise ValueError("Objective coefficients must be non-negative")

        if constraints is None:
            self.constraints = Matrix(0, n + 1)
        elif isinstance(constraints, Matrix):
            self.constraints = constraints.copy()
        else:
            rows = [list(r) for r in constraints]
            self.constraints = Matrix.from_rows(rows) if rows else Matrix(0, n + 1)

        if self.constraints.cols != n + 1:
            raise ValueError(
                f"Constraint rows have {self.constraints.cols} values, expected "
                f"{n} coefficients plus a right-hand side"
            )
        if not np.all(np.isfinite(self.constraints.to_array())):
            raise ValueError("Constraint values must be finite")

        self.status: Optional[SolverStatus] = None
        self.value = None
        self.assignment: Optional[np.ndarray] = None
        self.solver_stats = None

        self._setup_time = time.time() - start_setup_time

    @classmethod
    def from_inequalities(cls, A, b, objective: Sequence[float]) -> "IntegerProgram":
        """Build from ``A @ x <= b``."""
        A = np.atleast_2d(np.asarray(A, dtype=float))
        b = np.asarray(b, dtype=float).ravel()
        if A.shape[0] != b.shape[0]:
            raise ValueError(f"A has {A.shape[0]} rows but b has {b.shape[0]} entries")
        return cls(Matrix.from_array(np.hstack([A, b[:, None]])), objective)

    @property
    def n_vars(self) -> int:
        return self.objective.shape[0]

    def add_constraint(self, coefficients: Sequence[float], rhs: float, sense: str = "<=") -> None:
        """Append ``coefficients @ x (sense) rhs``; ``>=`` and ``==`` become ``<=`` rows."""
        if sense not in _SENSES:
            raise ValueError(f"Unknown constraint sense '{sense}', expected one of {_SENSES}")
        coeffs = np.asarray(coefficients, dtype=float).ravel()
        if coeffs.shape[0] != self.n_vars:
            raise ValueError(
                f"Constraint has {coeffs.shape[0]} coefficients, expected {self.n_vars}"
            )
        if not (np.all(np.isfinite(coeffs)) and np.isfinite(rhs)):
            raise ValueError("Constraint values must be finite")

        row = np.concatenate([coeffs, [float(rhs)]])
        if sense in ("<=", "=="):
            self.constraints.add_row(row)
        if sense in (">=", "=="):
            self.constraints.add_row(-row)

    def relax(
        self,
        epsilon: float = DEFAULT_EPSILON,
        max_iterations: int = DEFAULT_LP_MAX_ITERATIONS,
    ) -> LPResult:
        """Solve the LP relaxation (integrality dropped)."""
        return solve_lp(self.constraints, self.objective, epsilon, max_iterations)

    def solve(
        self,
        solver: Solver | str = Solver.BNB,
        solver_options: Optional[dict] = None,
    ) -> SolverResult:
        problem_data = ProblemData(
            constraints=self.constraints,
            objective=self.objective,
            setup_time=self._setup_time,
        )
        backend = get_solver_backend(solver)
        result = backend.solve(problem_data, str(solver), dict(solver_options or {}))

        self.status = result.status
        self.value = result.objective_value
        self.assignment = result.x
        self.solver_stats = result.stats
        return result


def solve_integer_program(
    constraints,
    objective: Sequence[float],
    **solver_options,
) -> Tuple[Optional[int | float], Optional[List[int]]]:
    """
    Minimize ``objective @ x`` over non-negative integers with ``constraints``
    rows ``a | b`` meaning ``a @ x <= b``.

    Returns ``(value, assignment)``, or ``(None, None)`` when no integer
    feasible point exists. Raises ``SolverLimitError`` if a node or pivot
    ceiling stops the search early.
    """
    solver = solver_options.pop("solver", Solver.BNB)
    result = IntegerProgram(constraints, objective).solve(solver, solver_options)

    if result.status.is_limit:
        raise SolverLimitError(result)
    if result.status != SolverStatus.OPTIMAL:
        return None, None
    return result.objective_value, [int(v) for v in result.x]
