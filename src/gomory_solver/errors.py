"""
Exception hierarchy for the Gomory solver.

Only precondition violations are raised. Infeasible, unbounded and
non-converging problems are normal outcomes and are reported through
``SolveResult.status`` instead.
"""


class SolverError(Exception):
    """Base class for all solver errors."""


class InvalidInputError(SolverError, ValueError):
    """Problem data has the wrong shape or contains unknown values."""


class DivisionByZeroError(SolverError, ZeroDivisionError):
    """A rational value was built or divided with a zero denominator."""


class ZeroPivotError(DivisionByZeroError):
    """A pivot was requested on a zero tableau entry."""

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        super().__init__(f"Pivot element at (row={row}, col={col}) is zero")
