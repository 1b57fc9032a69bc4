from __future__ import annotations

import logging
import time
from typing import Dict

import autograd.numpy as np  # type: ignore
from scipy.optimize import Bounds, LinearConstraint, milp  # type: ignore

from ..constants import DEFAULT_EPSILON
from .base import ProblemData, SolverResult, SolverStats, SolverStatus
from .bnb.utils import integral_value, round_to_integers

logger = logging.getLogger(__name__)


class HighsBackend:
    """Reference backend handing the same integer program to SciPy's HiGHS MILP."""

    def solve(
        self,
        problem_data: ProblemData,
        solver: str,  # noqa: ARG002
        solver_options: Dict[str, object],
    ) -> SolverResult:
        options = dict(solver_options)
        epsilon = float(options.pop("epsilon", DEFAULT_EPSILON))
        time_limit = options.pop("time_limit", None)
        for key in options:
            logger.warning(f"Ignoring unknown HiGHS option '{key}'")

        mat = problem_data.constraints.to_array()
        n = problem_data.n_vars
        c = np.asarray(problem_data.objective, dtype=float)

        constraints = None
        if mat.shape[0]:
            constraints = LinearConstraint(mat[:, :n], -np.inf, mat[:, n])

        milp_options = {}
        if time_limit is not None:
            milp_options["time_limit"] = float(time_limit)

        start_time = time.time()
        result = milp(
            c=c,
            constraints=constraints,
            integrality=np.ones(n, dtype=int),
            bounds=Bounds(np.zeros(n), np.full(n, np.inf)),
            options=milp_options,
        )
        solve_time = time.time() - start_time

        status = self._interpret_status(result)
        x_sol = None
        objective_value = None
        if result.x is not None and status == SolverStatus.OPTIMAL:
            x_sol = round_to_integers(result.x)
            objective_value = integral_value(float(np.dot(c, x_sol)), epsilon)

        stats = SolverStats(
            solver_name="HiGHS",
            solve_time=solve_time,
            setup_time=problem_data.setup_time,
            num_iters=getattr(result, "mip_node_count", None),
        )

        return SolverResult(
            x=x_sol,
            status=status,
            stats=stats,
            objective_value=objective_value,
            raw_result={"primary": result},
        )

    @staticmethod
    def _interpret_status(result) -> SolverStatus:
        status_map = {
            0: SolverStatus.OPTIMAL,
            1: SolverStatus.MAX_ITERATIONS,
            2: SolverStatus.INFEASIBLE,
            3: SolverStatus.UNBOUNDED,
        }
        return status_map.get(getattr(result, "status", None), SolverStatus.ERROR)
