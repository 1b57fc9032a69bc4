from enum import StrEnum


class Solver(StrEnum):
    BNB = "BnB"  # Dense two-phase simplex + depth-first branch-and-bound
    HIGHS = "HiGHS"  # scipy.optimize.milp reference backend


# Feasibility, pivot-rejection and fractionality tolerance. Correctness only
# holds while floating error stays well below this threshold.
DEFAULT_EPSILON = 1e-9

DEFAULT_MAX_NODES = 100_000
DEFAULT_LP_MAX_ITERATIONS = 10_000
