import numpy as np
import pytest

import tinymip as tm
from tinymip import IntegerProgram, SolverStatus, solve_integer_program
from tinymip.solvers import (
    BranchAndBoundBackend,
    HighsBackend,
    SolverResult,
    SolverStats,
    get_solver_backend,
    register_solver_backend,
)


def test_registry_lookup():
    assert isinstance(get_solver_backend(tm.BNB), BranchAndBoundBackend)
    assert isinstance(get_solver_backend("BnB"), BranchAndBoundBackend)
    assert isinstance(get_solver_backend(tm.HIGHS), HighsBackend)

    with pytest.raises(ValueError):
        get_solver_backend("simplex-of-doom")


def test_register_custom_backend():
    calls = []

    class RecordingBackend:
        def solve(self, problem_data, solver, solver_options):
            calls.append((problem_data.n_vars, solver, dict(solver_options)))
            return SolverResult(
                x=np.array([7]),
                status=SolverStatus.OPTIMAL,
                stats=SolverStats(solver_name="recording"),
                objective_value=7,
            )

    register_solver_backend("recording", RecordingBackend())
    prob = IntegerProgram([[1, 10]], [1])
    result = prob.solve(solver="recording", solver_options={"flag": True})

    assert calls == [(1, "recording", {"flag": True})]
    assert result.objective_value == 7
    assert prob.value == 7
    assert prob.status == SolverStatus.OPTIMAL
    assert prob.solver_stats.solver_name == "recording"


def test_problem_records_solution():
    prob = IntegerProgram([[-1, -1, -1.5]], [1, 1])
    assert prob.status is None

    result = prob.solve(tm.BNB)

    assert prob.status == SolverStatus.OPTIMAL
    assert prob.value == 2
    assert list(prob.assignment) == list(result.x)
    assert prob.solver_stats.solver_name == "B&B(simplex)"
    assert prob.solver_stats.num_iters == result.raw_result["bb_stats"].nodes_explored


def test_add_constraint_senses():
    prob = IntegerProgram(None, [1, 1])
    prob.add_constraint([1, 0], 3, "==")
    prob.add_constraint([0, 1], 1.5, ">=")
    prob.add_constraint([1, 1], 10)

    assert prob.constraints.rows == 4
    assert list(prob.constraints[1]) == [-1, 0, -3]
    assert list(prob.constraints[2]) == [0, -1, -1.5]

    prob.solve()
    assert prob.value == 5
    assert list(prob.assignment) == [3, 2]


def test_add_constraint_rejects_bad_input():
    prob = IntegerProgram(None, [1, 1])
    with pytest.raises(ValueError):
        prob.add_constraint([1, 0], 3, "<")
    with pytest.raises(ValueError):
        prob.add_constraint([1, 0, 0], 3)
    with pytest.raises(ValueError):
        prob.add_constraint([1, 0], float("nan"))
    assert prob.constraints.rows == 0


def test_from_inequalities():
    prob = IntegerProgram.from_inequalities([[-2, -1], [-1, -3]], [-4, -6], [1, 1])
    assert prob.constraints.shape == (2, 3)

    value, assignment = solve_integer_program(prob.constraints, prob.objective)
    assert value == 3
    assert 2 * assignment[0] + assignment[1] >= 4
    assert assignment[0] + 3 * assignment[1] >= 6

    with pytest.raises(ValueError):
        IntegerProgram.from_inequalities([[1, 1]], [1, 2], [1, 1])


def test_relax_is_root_lp():
    prob = IntegerProgram([[-2, -1]], [1])
    lp = prob.relax()
    assert lp.status == SolverStatus.OPTIMAL
    assert np.isclose(lp.value, 0.5)


def test_solver_input_not_mutated():
    rows = tm.Matrix.from_rows([[-1, 0, -0.5], [0, -1, -0.5]])
    before = rows.to_array()
    solve_integer_program(rows, [1, 1])
    assert np.array_equal(rows.to_array(), before)


@pytest.mark.parametrize("seed", range(6))
def test_bnb_agrees_with_highs(seed):
    rng = np.random.default_rng(seed)
    n_vars, n_rows = 4, 3
    A = rng.integers(0, 5, size=(n_rows, n_vars)).astype(float)
    A[np.arange(n_rows), np.arange(n_rows) % n_vars] += 1.0
    b = rng.integers(2, 15, size=n_rows).astype(float)
    c = rng.integers(1, 8, size=n_vars).astype(float)
    rows = np.hstack([-A, -b[:, None]])

    bnb_value, bnb_x = solve_integer_program(rows, c)
    highs_value, highs_x = solve_integer_program(rows, c, solver=tm.HIGHS)

    assert bnb_value == highs_value
    assert np.all(A @ np.array(bnb_x) >= b)
    assert np.all(A @ np.array(highs_x) >= b)


def test_highs_infeasible():
    prob = IntegerProgram([[-1, -0.2], [1, 0.8]], [1])
    result = prob.solve(tm.HIGHS)
    assert result.status == SolverStatus.INFEASIBLE
    assert result.x is None
    assert solve_integer_program([[-1, -0.2], [1, 0.8]], [1], solver=tm.HIGHS) == (None, None)
