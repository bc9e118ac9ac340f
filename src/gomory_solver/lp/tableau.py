"""
Simplex tableau: storage, construction and the Gauss-Jordan pivot.

Layout of a tableau with k columns for n structural variables and m
original constraints:

    columns 0 .. n-1        structural variables x_1 .. x_n
    columns n .. n+m-1      one slack variable per original constraint
    columns n+m .. k-2      one slack variable per Gomory cut
    column  k-1             right-hand side (always the last column)

Rows start as the m constraint rows. Each Gomory cut appends one row and
inserts its slack column just before the RHS, so existing column indices
never move. Entries are exact Fractions held in a numpy object array so
that row operations stay vectorised without any floating-point rounding.

Each row has one basic variable, a column index, recorded in ``basis``.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidInputError, ZeroPivotError
from ..problem import Problem, Sign


ZERO = Fraction(0)
ONE = Fraction(1)


class Tableau:
    """
    Owned, growable simplex tableau with its basis mapping.

    Parameters
    ----------
    data : np.ndarray
        Object array of Fractions with shape (rows, columns).
    basis : list of int
        Basic variable index for each row.
    n_structural : int
        Number of structural (original) variables n.
    """

    def __init__(
        self,
        data: np.ndarray,
        basis: Sequence[int],
        n_structural: int,
    ):
        data = np.asarray(data, dtype=object)
        if data.ndim != 2:
            raise InvalidInputError(f"Tableau data must be 2-D, got shape {data.shape}")
        if len(basis) != data.shape[0]:
            raise InvalidInputError(
                f"Basis has {len(basis)} entries for {data.shape[0]} rows"
            )
        self.data = data
        self.basis = list(basis)
        self.n_structural = n_structural

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def n_rows(self) -> int:
        return self.data.shape[0]

    @property
    def n_cols(self) -> int:
        """Total column count, RHS included."""
        return self.data.shape[1]

    @property
    def rhs_col(self) -> int:
        return self.n_cols - 1

    @property
    def n_variables(self) -> int:
        """Number of variable columns (structural + slack)."""
        return self.n_cols - 1

    def rhs(self, row: int) -> Fraction:
        return self.data[row, self.rhs_col]

    def rhs_values(self) -> List[Fraction]:
        return list(self.data[:, self.rhs_col])

    def to_lists(self) -> List[List[Fraction]]:
        """Plain nested-list copy of the entries."""
        return [list(row) for row in self.data]

    def copy(self) -> "Tableau":
        """Independent snapshot (entries are immutable, so a shallow copy suffices)."""
        return Tableau(self.data.copy(), list(self.basis), self.n_structural)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_slack_column(self) -> int:
        """
        Insert a zero column just before the RHS and return its index.

        The new column is one past every existing variable column, so each
        call hands out a fresh index and no basis entry is disturbed.
        """
        col = self.rhs_col
        zeros = np.full((self.n_rows, 1), ZERO, dtype=object)
        self.data = np.hstack([self.data[:, :col], zeros, self.data[:, col:]])
        return col

    def append_row(self, row: Sequence[Fraction], basic_index: int) -> int:
        """
        Append a row (RHS included) and its basic variable.

        Returns
        -------
        int
            Index of the new row.
        """
        if len(row) != self.n_cols:
            raise InvalidInputError(
                f"Appended row has {len(row)} entries, expected {self.n_cols}"
            )
        if not 0 <= basic_index < self.rhs_col:
            raise InvalidInputError(f"Basic index {basic_index} is not a variable column")
        new_row = np.empty((1, self.n_cols), dtype=object)
        new_row[0, :] = [Fraction(v) for v in row]
        self.data = np.vstack([self.data, new_row])
        self.basis.append(basic_index)
        return self.n_rows - 1

    def pivot(self, row: int, col: int) -> None:
        """
        Gauss-Jordan transform around (row, col) and make ``col`` basic in ``row``.

        The pivot row is divided by the pivot value P; every other row i
        becomes old[i] - old[row] * old[i][col] / P. Afterwards entry
        (row, col) is exactly 1 and the rest of column ``col`` is exactly 0.

        Raises
        ------
        ZeroPivotError
            If the entry at (row, col) is zero.
        """
        if not 0 <= col < self.rhs_col:
            raise InvalidInputError(f"Pivot column {col} is not a variable column")
        pivot_value = self.data[row, col]
        if pivot_value == 0:
            raise ZeroPivotError(row, col)

        old = self.data
        new = old - np.outer(old[:, col], old[row]) / pivot_value
        new[row] = old[row] / pivot_value
        self.data = new
        self.basis[row] = col


# =============================================================================
# Builder
# =============================================================================

def build_tableau(problem: Problem) -> Tableau:
    """
    Build the initial tableau of a problem.

    Row i holds the structural coefficients of constraint i, a slack entry
    in column n+i (-1 for GREATER_OR_EQUAL rows, +1 for every other sign)
    and the right-hand side. GREATER_OR_EQUAL rows are then negated as a
    whole, which may leave a negative right-hand side for the feasibility
    phase to remove. Row i starts with its own slack n+i as basic variable.

    Parameters
    ----------
    problem : Problem

    Returns
    -------
    Tableau
        Shape (m, n + m + 1).
    """
    n = problem.n_variables
    m = problem.n_constraints
    data = np.full((m, n + m + 1), ZERO, dtype=object)

    for i, (row, sign) in enumerate(zip(problem.constraints, problem.signs)):
        data[i, :n] = row[:-1]
        data[i, n + i] = -ONE if sign is Sign.GREATER_OR_EQUAL else ONE
        data[i, n + m] = row[-1]
        if sign is Sign.GREATER_OR_EQUAL:
            data[i, :] = -data[i, :]

    basis = [n + i for i in range(m)]
    return Tableau(data, basis, n_structural=n)


# =============================================================================
# Snapshots for observers
# =============================================================================

@dataclass
class TableauEvent:
    """
    Snapshot handed to an observer after every state change of a solve.

    Attributes
    ----------
    kind : str
        "initial", "pivot", "cut" or "optimal".
    phase : str
        Phase that produced the event ("build", "feasibility",
        "optimization", "cut").
    tableau : Tableau
        Independent copy of the tableau after the change.
    reduced_costs : list of Fraction or None
        Reduced costs computed by the optimization phase, if any.
    pivot : (int, int) or None
        Pivot position (row, col) for "pivot" events.
    """
    kind: str
    phase: str
    tableau: Tableau
    reduced_costs: Optional[List[Fraction]] = None
    pivot: Optional[Tuple[int, int]] = None


Observer = Callable[[TableauEvent], None]


def notify(observer: Optional[Observer], event: TableauEvent) -> None:
    """Call the observer if one is set."""
    if observer is not None:
        observer(event)
