"""
gomory_solver: exact simplex tableau solver with Gomory cutting planes.

Maximizes c^T x over mixed-sign linear constraints with x >= 0 using
exact rational arithmetic, then appends Gomory fractional cuts until
the basic solution is integral or the problem is shown infeasible.
"""

from . import config
from .errors import (
    SolverError,
    InvalidInputError,
    DivisionByZeroError,
    ZeroPivotError,
)
from .problem import Problem, Sign
from .lp.solver import SolveResult, SolveStatus, solve, solve_problem

__version__ = "0.1.0"
__all__ = [
    "config",
    "SolverError",
    "InvalidInputError",
    "DivisionByZeroError",
    "ZeroPivotError",
    "Problem",
    "Sign",
    "SolveResult",
    "SolveStatus",
    "solve",
    "solve_problem",
]
