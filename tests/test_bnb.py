"""Tests for the depth-first branch-and-bound solver."""
import logging

import numpy as np
import pytest

import tinymip as tm
from tinymip import IntegerProgram, SolverLimitError, SolverStatus, solve_integer_program
from tinymip.solvers import BranchAndBoundBackend, HighsBackend, ProblemData
from tinymip.solvers.bnb import NodeOutcome, Subproblem, create_child_subproblems, first_fractional_index
from tinymip.solvers.bnb.utils import integral_value, round_to_integers


# x >= 0.5, y >= 0.5: both variables fractional at the root
HALF_BOUNDS = [[-1, 0, -0.5], [0, -1, -0.5]]


def _covering_instance(rng, n_vars=3, n_rows=3):
    A = rng.integers(0, 4, size=(n_rows, n_vars)).astype(float)
    A[np.arange(n_rows), np.arange(n_rows) % n_vars] += 1.0
    b = rng.integers(1, 10, size=n_rows).astype(float)
    c = rng.integers(1, 6, size=n_vars).astype(float)
    return np.hstack([-A, -b[:, None]]), c


def test_bnb_simple_integer():
    """Test B&B when the root relaxation is fractional."""
    # minimize x  s.t.  2x >= 1
    value, assignment = solve_integer_program([[-2, -1]], [1])
    assert value == 1
    assert assignment == [1]


def test_bnb_root_already_integral():
    value, assignment = solve_integer_program([[-1, 0, -2], [0, -1, -3]], [1, 1])
    assert value == 5
    assert assignment == [2, 3]


def test_bnb_returns_ints():
    value, assignment = solve_integer_program(HALF_BOUNDS, [1, 1])
    assert isinstance(value, int)
    assert all(isinstance(v, int) for v in assignment)


def test_bnb_no_constraints():
    prob = IntegerProgram(None, [1, 2])
    result = prob.solve()

    assert result.status == SolverStatus.OPTIMAL
    assert prob.value == 0
    assert list(prob.assignment) == [0, 0]


def test_bnb_leftmost_fractional_search_order():
    """Branch on x before y; the ceil child is explored first."""
    prob = IntegerProgram(HALF_BOUNDS, [1, 1])
    result = prob.solve(solver_options={"record_tree": True})

    assert result.status == SolverStatus.OPTIMAL
    assert result.objective_value == 2
    assert list(result.x) == [1, 1]

    tree = result.raw_result["tree"]
    assert [r.node_id for r in tree] == [0, 2, 4, 3, 1]
    assert [r.outcome for r in tree] == [
        NodeOutcome.BRANCHED,
        NodeOutcome.BRANCHED,
        NodeOutcome.INTEGRAL,
        NodeOutcome.INFEASIBLE,
        NodeOutcome.INFEASIBLE,
    ]
    assert [r.branch_index for r in tree] == [0, 1, None, None, None]
    assert tree[1].branch == (0, ">=", 1.0)
    assert tree[4].branch == (0, "<=", 0.0)
    assert [r.parent_id for r in tree] == [None, 0, 2, 2, 0]


def test_bnb_search_order_stable_across_runs():
    first = IntegerProgram(HALF_BOUNDS, [1, 1]).solve(solver_options={"record_tree": True})
    second = IntegerProgram(HALF_BOUNDS, [1, 1]).solve(solver_options={"record_tree": True})
    assert first.raw_result["tree"] == second.raw_result["tree"]


def test_bnb_prunes_relaxation_equal_to_incumbent():
    """A child whose relaxation ties the incumbent is discarded, not expanded."""
    # minimize x + y  s.t.  x + y >= 1.5
    prob = IntegerProgram([[-1, -1, -1.5]], [1, 1])
    result = prob.solve(solver_options={"record_tree": True})

    assert result.status == SolverStatus.OPTIMAL
    assert result.objective_value == 2

    tree = result.raw_result["tree"]
    stats = result.raw_result["bb_stats"]
    pruned = [r for r in tree if r.outcome == NodeOutcome.PRUNED]
    assert pruned
    assert stats.nodes_pruned == len(pruned)
    assert any(abs(r.lp_value - 2.0) <= 1e-9 for r in pruned)

    parents = {r.parent_id for r in tree}
    for r in pruned:
        assert r.node_id not in parents

    assert stats.nodes_explored == len(tree)
    assert stats.nodes_branched == sum(1 for r in tree if r.outcome == NodeOutcome.BRANCHED)
    assert len(tree) == 1 + 2 * stats.nodes_branched


def test_bnb_infeasible_root():
    # x <= 1 and x >= 2
    assert solve_integer_program([[1, 1], [-1, -2]], [1]) == (None, None)


def test_bnb_unbounded_root_reported():
    """Backends called directly can see a negative cost; both report unbounded."""
    data = ProblemData(constraints=tm.Matrix(0, 2), objective=np.array([-1.0]))
    result = BranchAndBoundBackend().solve(data, "BnB", {"record_tree": True})

    assert result.status == SolverStatus.UNBOUNDED
    assert result.x is None
    assert result.objective_value is None
    assert result.raw_result["tree"][0].outcome == NodeOutcome.UNBOUNDED

    highs = HighsBackend().solve(data, "HiGHS", {})
    assert highs.status == result.status


def test_bnb_no_integer_point():
    # 0.2 <= x <= 0.8 has LP solutions but no integer one
    prob = IntegerProgram([[-1, -0.2], [1, 0.8]], [1])
    result = prob.solve()

    assert result.status == SolverStatus.INFEASIBLE
    assert result.x is None
    assert result.objective_value is None
    assert result.raw_result["bb_stats"].nodes_infeasible == 2
    assert solve_integer_program([[-1, -0.2], [1, 0.8]], [1]) == (None, None)


def test_bnb_max_nodes():
    """Test B&B with max_nodes limit."""
    prob = IntegerProgram(HALF_BOUNDS, [1, 1])
    result = prob.solve(solver_options={"max_nodes": 1})

    assert result.status == SolverStatus.MAX_NODES
    assert result.raw_result["unexplored"] == 2
    assert result.x is None

    with pytest.raises(SolverLimitError) as excinfo:
        solve_integer_program(HALF_BOUNDS, [1, 1], max_nodes=1)
    assert excinfo.value.result.status == SolverStatus.MAX_NODES


def test_bnb_max_nodes_not_hit_when_search_finishes():
    value, assignment = solve_integer_program([[-1, -1]], [1], max_nodes=1)
    assert value == 1
    assert assignment == [1]


def test_bnb_incumbent_kept_on_node_limit():
    # minimize x + y  s.t.  x + y >= 1.5: node 2 finds the incumbent 2
    result = IntegerProgram([[-1, -1, -1.5]], [1, 1]).solve(solver_options={"max_nodes": 2})

    assert result.status == SolverStatus.MAX_NODES
    assert result.objective_value == 2
    assert list(result.x) == [2, 0]


def test_bnb_lp_pivot_limit():
    prob = IntegerProgram(HALF_BOUNDS, [1, 1])
    result = prob.solve(solver_options={"lp_max_iterations": 0, "record_tree": True})

    assert result.status == SolverStatus.MAX_ITERATIONS
    assert result.raw_result["tree"][0].outcome == NodeOutcome.LIMIT

    with pytest.raises(SolverLimitError):
        solve_integer_program(HALF_BOUNDS, [1, 1], lp_max_iterations=0)


def test_bnb_invalid_max_nodes():
    with pytest.raises(ValueError):
        IntegerProgram(HALF_BOUNDS, [1, 1]).solve(solver_options={"max_nodes": 0})


def test_bnb_unknown_option_warns(caplog):
    with caplog.at_level(logging.WARNING):
        value, _ = solve_integer_program(HALF_BOUNDS, [1, 1], bogus=3)
    assert value == 2
    assert "bogus" in caplog.text


def test_bnb_verbose(capsys):
    """Test B&B with verbose output."""
    IntegerProgram(HALF_BOUNDS, [1, 1]).solve(solver_options={"verbose": True})
    out = capsys.readouterr().out
    assert "Branch-and-Bound: 2 integer variables" in out
    assert "Status: optimal" in out
    assert "Best objective: 2" in out


def test_bnb_custom_epsilon():
    # 1e-7 off an integer is integral at a coarse tolerance
    value, assignment = solve_integer_program([[-1, -(1 + 1e-7)]], [1], epsilon=1e-6)
    assert value == 1
    assert assignment == [1]

    value, assignment = solve_integer_program([[-1, -(1 + 1e-7)]], [1])
    assert value == 2
    assert assignment == [2]


@pytest.mark.parametrize("seed", range(8))
def test_bnb_integer_optimum_bounded_by_root_relaxation(seed):
    rng = np.random.default_rng(seed)
    rows, c = _covering_instance(rng)
    prob = IntegerProgram(rows, c)

    root = prob.relax()
    result = prob.solve()

    assert root.status == SolverStatus.OPTIMAL
    assert result.status == SolverStatus.OPTIMAL
    assert result.objective_value >= root.value - 1e-9
    assert result.raw_result["root_bound"] == root.value

    A, b = -rows[:, :-1], -rows[:, -1]
    assert np.all(A @ result.x >= b - 1e-9)
    assert np.all(result.x >= 0)


@pytest.mark.parametrize("seed", range(4))
def test_bnb_deterministic(seed):
    rng = np.random.default_rng(100 + seed)
    rows, c = _covering_instance(rng, n_vars=4, n_rows=3)

    first = IntegerProgram(rows, c).solve(solver_options={"record_tree": True})
    second = IntegerProgram(rows.copy(), c.copy()).solve(solver_options={"record_tree": True})

    assert first.objective_value == second.objective_value
    assert np.array_equal(first.x, second.x)
    assert first.raw_result["tree"] == second.raw_result["tree"]


class TestUtils:
    def test_first_fractional_index(self):
        assert first_fractional_index(np.array([1.0, 2.5, 0.5]), 1e-9) == 1
        assert first_fractional_index(np.array([1.0, 2.0 + 1e-12]), 1e-9) is None
        assert first_fractional_index(np.array([]), 1e-9) is None

    def test_create_child_subproblems(self):
        parent = Subproblem(
            node_id=4,
            depth=2,
            constraints=tm.Matrix.from_rows([[1, 1, 3]]),
            objective=np.array([1.0, 1.0]),
        )
        left, right = create_child_subproblems(parent, 1, 2.4, node_counter=7)

        assert (left.node_id, right.node_id) == (7, 8)
        assert left.depth == right.depth == 3
        assert left.parent_id == right.parent_id == 4
        assert list(left.constraints[1]) == [0.0, 1.0, 2.0]
        assert list(right.constraints[1]) == [0.0, -1.0, -3.0]
        assert left.branch == (1, "<=", 2.0)
        assert right.branch == (1, ">=", 3.0)
        assert parent.constraints.rows == 1

    def test_rounding(self):
        assert list(round_to_integers(np.array([0.9999999999, 2.0000000001]))) == [1, 2]
        assert integral_value(2.9999999999, 1e-9) == 3
        assert isinstance(integral_value(3.0, 1e-9), int)
        assert integral_value(2.5, 1e-9) == 2.5


def test_negative_objective_rejected():
    with pytest.raises(ValueError):
        IntegerProgram([[1, 1, 4]], [-1, -1])


def test_constraint_width_mismatch_rejected():
    with pytest.raises(ValueError):
        IntegerProgram([[1, 1]], [1, 1])
    with pytest.raises(ValueError):
        IntegerProgram([[1, np.inf, 1]], [1, 1])
