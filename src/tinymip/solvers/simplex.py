"""
Two-Phase Dense Simplex

Solves small linear programs of the form

    minimize    c @ x
    subject to  A @ x <= b
                x >= 0

given as a constraint Matrix whose last column holds b.

The tableau is kept in dictionary form. A pivot exchanges one basic and one
non-basic variable and the column of the entering variable is reused for the
leaving one, so the (m + 2) x (n + 2) layout never changes:

- rows 0..m-1: constraints; column n is the artificial variable, column n+1 the rhs
- row m: objective row driven to optimality in phase 2
- row m+1: auxiliary row driven to optimality in phase 1

Structural variables have ids 0..n-1, slacks n..n+m-1 and the single
artificial variable has id -1. Entering and leaving ties are resolved by the
smallest id, which keeps the pivot sequence reproducible.

Most-negative entering alone can cycle on degenerate vertices. After a run of
pivots that leave the objective unchanged, entering switches to Bland's rule
(smallest improving id) until a pivot makes progress again.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import autograd.numpy as np  # type: ignore

from ..constants import DEFAULT_EPSILON, DEFAULT_LP_MAX_ITERATIONS
from ..matrix import Matrix
from .base import SolverStatus

logger = logging.getLogger(__name__)

ARTIFICIAL = -1

# Consecutive degenerate pivots tolerated before falling back to Bland's rule
DEGENERATE_RUN_LIMIT = 10


def _precedes(a: float, a_id: int, b: float, b_id: int, eps: float) -> bool:
    """Lexicographic (a, a_id) < (b, b_id) with values compared within eps."""
    if a < b - eps:
        return True
    return abs(a - b) <= eps and a_id < b_id


@dataclass
class LPResult:
    """Outcome of one LP solve.

    ``value`` is ``+inf`` when infeasible, ``-inf`` when unbounded and ``nan``
    when the pivot ceiling was reached. ``x`` is only set when optimal.
    """

    status: SolverStatus
    value: float
    x: Optional[np.ndarray] = None
    iterations: int = 0

    @property
    def is_optimal(self) -> bool:
        return self.status == SolverStatus.OPTIMAL


class Tableau:
    def __init__(
        self,
        constraints: Matrix,
        objective: Sequence[float],
        epsilon: float = DEFAULT_EPSILON,
    ):
        m = constraints.rows
        n = constraints.cols - 1
        if n < 1:
            raise ValueError(
                "Constraint matrix needs at least one variable column and a rhs column"
            )
        c = np.asarray(objective, dtype=float).ravel()
        if c.shape[0] != n:
            raise ValueError(
                f"Objective has {c.shape[0]} coefficients but the constraint "
                f"matrix has {n} variables"
            )

        self.m = m
        self.n = n
        self.epsilon = float(epsilon)
        self.objective = c
        self.iterations = 0

        d = Matrix(m + 2, n + 2)
        if m:
            a = constraints.to_array()
            d[:m, :n] = a[:, :n]
            d[:m, n] = -1.0
            d[:m, n + 1] = a[:, n]
        d[m, :n] = c
        d[m + 1, n] = 1.0
        self.d = d

        self.basic: List[int] = list(range(n, n + m))
        self.nonbasic: List[int] = list(range(n)) + [ARTIFICIAL]

    @property
    def rhs_col(self) -> int:
        return self.n + 1

    @property
    def objective_row(self) -> int:
        return self.m

    @property
    def auxiliary_row(self) -> int:
        return self.m + 1

    def pivot(self, r: int, s: int) -> None:
        pivot(self, r, s)

    def solution(self) -> np.ndarray:
        """Values of the structural variables in the current basis."""
        x = np.zeros(self.n)
        for i, var in enumerate(self.basic):
            if 0 <= var < self.n:
                x[var] = self.d[i, self.rhs_col]
        return x

    def solve(self, max_iterations: int = DEFAULT_LP_MAX_ITERATIONS) -> LPResult:
        eps = self.epsilon
        rhs = self.rhs_col

        if self.m:
            r = int(np.argmin(self.d[: self.m, rhs]))
            if self.d[r, rhs] < -eps:
                logger.debug(f"Phase 1: seeding artificial variable in row {r}")
                pivot(self, r, self.n)

                status = self._optimize(
                    self.auxiliary_row, skip_artificial=False, max_iterations=max_iterations
                )
                if status == SolverStatus.MAX_ITERATIONS:
                    return self._limit_result()
                if status != SolverStatus.OPTIMAL or self.d[self.auxiliary_row, rhs] < -eps:
                    logger.debug(
                        f"Phase 1 ended at {self.d[self.auxiliary_row, rhs]:.3e}: infeasible"
                    )
                    return LPResult(
                        SolverStatus.INFEASIBLE, math.inf, None, self.iterations
                    )

                self._drive_out_artificial()

        status = self._optimize(
            self.objective_row, skip_artificial=True, max_iterations=max_iterations
        )
        if status == SolverStatus.MAX_ITERATIONS:
            return self._limit_result()
        if status == SolverStatus.UNBOUNDED:
            return LPResult(SolverStatus.UNBOUNDED, -math.inf, None, self.iterations)

        x = self.solution()
        value = float(np.dot(self.objective, x))
        logger.debug(f"LP optimal after {self.iterations} pivot(s): {value:.6g}")
        return LPResult(SolverStatus.OPTIMAL, value, x, self.iterations)

    # =========================================================================
    # Pivot selection
    # =========================================================================

    def _entering_column(self, row: int, skip_artificial: bool, bland: bool = False) -> Optional[int]:
        """
        Column with a negative reduced cost in ``row``, or None at optimality.

        Picks the most negative one with ties to the smallest id, or with
        ``bland`` set the one whose variable has the smallest id.
        """
        d, eps = self.d, self.epsilon
        best: Optional[int] = None
        for j in range(self.n + 1):
            var = self.nonbasic[j]
            if skip_artificial and var == ARTIFICIAL:
                continue
            if d[row, j] > -eps:
                continue
            if best is None:
                best = j
            elif bland:
                if var < self.nonbasic[best]:
                    best = j
            elif _precedes(d[row, j], var, d[row, best], self.nonbasic[best], eps):
                best = j
        return best

    def _leaving_row(self, s: int) -> Optional[int]:
        """Minimum-ratio row over positive entries of column ``s``."""
        d, eps, rhs = self.d, self.epsilon, self.rhs_col
        best: Optional[int] = None
        best_ratio = math.inf
        for i in range(self.m):
            if d[i, s] <= eps:
                continue
            ratio = d[i, rhs] / d[i, s]
            if best is None or _precedes(ratio, self.basic[i], best_ratio, self.basic[best], eps):
                best = i
                best_ratio = ratio
        return best

    def _optimize(self, row: int, skip_artificial: bool, max_iterations: int) -> SolverStatus:
        degenerate_run = 0
        while True:
            bland = degenerate_run >= DEGENERATE_RUN_LIMIT
            s = self._entering_column(row, skip_artificial, bland)
            if s is None:
                return SolverStatus.OPTIMAL

            r = self._leaving_row(s)
            if r is None:
                return SolverStatus.UNBOUNDED

            if self.iterations >= max_iterations:
                logger.warning(f"Simplex pivot limit reached ({max_iterations})")
                return SolverStatus.MAX_ITERATIONS

            if abs(self.d[r, self.rhs_col]) <= self.epsilon:
                degenerate_run += 1
                if degenerate_run == DEGENERATE_RUN_LIMIT:
                    logger.debug(
                        f"{degenerate_run} degenerate pivots in a row, switching to Bland's rule"
                    )
            else:
                degenerate_run = 0

            pivot(self, r, s)

    def _drive_out_artificial(self) -> None:
        # A feasible phase 1 leaves the artificial variable at zero, so any
        # non-zero entry of its row is a valid pivot.
        d, eps = self.d, self.epsilon
        for i in range(self.m):
            if self.basic[i] != ARTIFICIAL:
                continue
            best = 0
            for j in range(1, self.n + 1):
                if _precedes(
                    -abs(d[i, j]), self.nonbasic[j], -abs(d[i, best]), self.nonbasic[best], eps
                ):
                    best = j
            if abs(d[i, best]) > eps:
                pivot(self, i, best)
            else:
                logger.debug(f"Row {i} is redundant, artificial variable stays basic at zero")

    def _limit_result(self) -> LPResult:
        return LPResult(SolverStatus.MAX_ITERATIONS, math.nan, None, self.iterations)


def pivot(tableau: Tableau, r: int, s: int) -> None:
    """
    Exchange basic variable ``basic[r]`` with non-basic variable ``nonbasic[s]``.

    Row ``r`` is scaled by ``1 / t[r][s]`` and column ``s`` is eliminated from
    every other row, after which column ``s`` holds the coefficients of the
    variable that just left the basis. Pivoting twice on the same ``(r, s)``
    restores the tableau.
    """
    d = tableau.d
    piv = d[r, s]
    assert abs(piv) > tableau.epsilon, (
        f"Degenerate pivot {piv!r} at ({r}, {s}) is within epsilon of zero"
    )

    inv = 1.0 / piv
    row = d[r].copy()
    col = d.column(s)

    factor = col * inv
    factor[r] = 0.0
    d[:, :] -= np.outer(factor, row)
    d[r] *= inv
    d[:, s] = -col * inv
    d[r, s] = inv

    tableau.basic[r], tableau.nonbasic[s] = tableau.nonbasic[s], tableau.basic[r]
    tableau.iterations += 1


def solve_lp(
    constraints,
    objective: Sequence[float],
    epsilon: float = DEFAULT_EPSILON,
    max_iterations: int = DEFAULT_LP_MAX_ITERATIONS,
) -> LPResult:
    """Minimize ``objective @ x`` subject to ``constraints`` rows ``a | b`` meaning ``a @ x <= b``."""
    if not isinstance(constraints, Matrix):
        rows = [list(r) for r in constraints]
        if rows:
            constraints = Matrix.from_rows(rows)
        else:
            constraints = Matrix(0, np.asarray(objective).size + 1)
    return Tableau(constraints, objective, epsilon).solve(max_iterations)
