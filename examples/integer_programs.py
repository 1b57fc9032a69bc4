"""Small integer programs solved with tinymip.

Each example writes its constraints as rows ``a_1 .. a_n | b`` meaning
``a @ x <= b`` and minimizes a non-negative objective over non-negative
integers. Run this module directly to execute all examples.
"""

from __future__ import annotations

import logging

import autograd.numpy as np

import tinymip as tm
from tinymip import IntegerProgram, solve_integer_program


# =============================================================================
# Covering Problem
# =============================================================================

def covering_problem():
    """
    Covering Problem
    ----------------
    Buy packs of parts so every part count is met at minimum cost.

    Formulation:
        minimize    sum(cost[j] * x[j])
        subject to  sum(parts[i][j] * x[j]) >= need[i]  for every part i
                    x[j] >= 0 integer
    """
    print("=" * 60)
    print("COVERING PROBLEM")
    print("=" * 60)

    packs = ["Starter", "Bolt bag", "Mixed box"]
    cost = [4, 3, 6]
    parts = np.array([
        [2, 5, 3],   # bolts
        [1, 0, 2],   # brackets
        [3, 0, 4],   # washers
    ])
    need = [11, 4, 9]

    prob = IntegerProgram(None, cost)
    for row, rhs in zip(parts, need):
        prob.add_constraint(row, rhs, ">=")

    result = prob.solve(tm.BNB, {"record_tree": True})

    print("\nPacks bought:")
    for name, count in zip(packs, prob.assignment):
        print(f"  {name}: {count}")
    print(f"\nTotal cost: {prob.value}")
    print(f"Status: {result.status}")
    print(f"Root relaxation bound: {result.raw_result['root_bound']:.4f}")
    print(f"Nodes explored: {result.raw_result['bb_stats'].nodes_explored}")

    return result


# =============================================================================
# Exact Change
# =============================================================================

def exact_change():
    """
    Exact Change
    ------------
    Pay an exact amount with the fewest coins.

    Formulation:
        minimize    sum(x[j])
        subject to  sum(value[j] * x[j]) == amount
                    x[j] >= 0 integer
    """
    print("=" * 60)
    print("EXACT CHANGE")
    print("=" * 60)

    values = [1, 7, 10, 22]
    amount = 63

    prob = IntegerProgram(None, np.ones(len(values)))
    prob.add_constraint(values, amount, "==")
    result = prob.solve(solver_options={"verbose": True})

    print("\nCoins used:")
    for value, count in zip(values, prob.assignment):
        if count:
            print(f"  {value}: {count}")
    print(f"\nTotal coins: {prob.value}")

    return result


# =============================================================================
# Relaxation vs Integer Optimum
# =============================================================================

def relaxation_gap():
    """
    Relaxation Gap
    --------------
    Compare the LP relaxation with the integer optimum, and check the
    branch-and-bound answer against SciPy's HiGHS.
    """
    print("=" * 60)
    print("RELAXATION GAP")
    print("=" * 60)

    rows = [
        [-2, -1, -3, -7],
        [-1, -3, -1, -8],
        [-3, -2, -2, -9],
    ]
    c = [5, 4, 6]

    prob = IntegerProgram(rows, c)
    lp = prob.relax()
    value, assignment = solve_integer_program(rows, c)
    highs_value, highs_assignment = solve_integer_program(rows, c, solver=tm.HIGHS)

    print(f"\nLP relaxation:  {lp.value:.4f} at {np.round(lp.x, 4)}")
    print(f"Branch-and-bound: {value} at {assignment}")
    print(f"HiGHS:            {highs_value} at {highs_assignment}")

    return value


ALL_EXAMPLES = [
    covering_problem,
    exact_change,
    relaxation_gap,
]


def run_all_examples():
    """Run all integer program examples."""
    print("\n" + "#" * 60)
    print("# SMALL INTEGER PROGRAMS WITH tinymip")
    print("#" * 60)

    for example in ALL_EXAMPLES:
        try:
            example()
        except Exception as e:
            print(f"\nExample {example.__name__} failed: {e}")
        print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_all_examples()
