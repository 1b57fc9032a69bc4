__all__ = [
    "Matrix",
    "IntegerProgram",
    "solve_integer_program",
    "solve_lp",
    "pivot",
    "Tableau",
    "LPResult",
    "minimum_xor_steps",
    "Machine",
    "parse_machine",
    "parse_machines",
    "solve_factory",
    "BNB",
    "HIGHS",
    "SolverStatus",
    "SolverResult",
    "SolverLimitError",
]

from .matrix import Matrix
from .problem import IntegerProgram, solve_integer_program
from .constants import Solver
from .solvers import (
    LPResult,
    SolverLimitError,
    SolverResult,
    SolverStatus,
    Tableau,
    pivot,
    solve_lp,
)
from .search import minimum_xor_steps
from .machine import Machine, parse_machine, parse_machines, solve_factory

BNB = Solver.BNB
HIGHS = Solver.HIGHS
