"""
Gomory fractional cuts.

Given an optimal tableau whose right-hand side has a non-integral entry in
row r, the cut

    - sum_j frac(T[r][j]) x_j + s = - frac(T[r][rhs])

is appended as a new row. Its slack s gets a new zero-cost column (zero in
every earlier row, one in the cut row) and is the basic variable of the
cut row. The cut RHS is negative, so the feasibility phase has to run
again.

The fractional part is taken either as x - floor(x) ("floor", the textbook
derivation) or as x - trunc(x) ("truncate"). Both agree on nonnegative
values. Only "floor" yields a cut valid for every integer point, and only
when the constraint data is integral.
"""

from fractions import Fraction
from typing import List, Optional

from ..config import DEFAULT_FRACTIONAL_MODE
from ..rational import fractional_part, is_integral
from .tableau import ONE, Tableau


def select_cut_row(tableau: Tableau, mode: str = DEFAULT_FRACTIONAL_MODE) -> Optional[int]:
    """
    Row whose RHS has the largest fractional part (first on ties).

    Returns None when every RHS is integral.
    """
    best_row = None
    best_frac = None
    for row, value in enumerate(tableau.rhs_values()):
        if is_integral(value):
            continue
        frac = fractional_part(value, mode)
        if best_frac is None or frac > best_frac:
            best_row = row
            best_frac = frac
    return best_row


def cut_row(tableau: Tableau, row: int, mode: str = DEFAULT_FRACTIONAL_MODE) -> List[Fraction]:
    """Coefficients (RHS included) of the Gomory cut derived from ``row``."""
    return [-fractional_part(value, mode) for value in tableau.data[row]]


def add_gomory_cut(
    tableau: Tableau,
    mode: str = DEFAULT_FRACTIONAL_MODE,
    verbose: bool = False,
) -> Optional[int]:
    """
    Append a cut for the most fractional RHS row.

    Parameters
    ----------
    tableau : Tableau
        Modified in place: one slack column, one row and one basis entry
        are appended.
    mode : str
        "floor" or "truncate".
    verbose : bool
        Print progress.

    Returns
    -------
    int or None
        Index of the appended row, or None when all RHS values are
        integral and no cut was added.
    """
    source = select_cut_row(tableau, mode)
    if source is None:
        return None
    coefficients = cut_row(tableau, source, mode)
    slack = tableau.add_slack_column()
    coefficients.insert(slack, ONE)
    new_row = tableau.append_row(coefficients, slack)
    if verbose:
        print(f"  Gomory cut from row {source} (RHS {tableau.rhs(source)}) "
              f"-> row {new_row}, slack column {slack}")
    return new_row
