"""
Simplex phases operating in place on a Tableau.

- Feasibility phase: removes negative right-hand sides by pivoting on a
  negative entry of the most negative row, or proves infeasibility.
- Optimization phase: primal simplex with most-negative reduced cost
  entering and minimum-ratio leaving rule.

Both phases break ties by taking the first candidate in row / column
order, and both stop after ``max_iterations`` pivots since neither uses
an anti-cycling rule.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Sequence

import numpy as np

from ..config import MAX_PIVOTS_PER_PHASE
from ..rational import divide
from .tableau import Observer, Tableau, TableauEvent, notify


# Phase outcomes
FEASIBLE = "feasible"
INFEASIBLE = "infeasible"
OPTIMAL = "optimal"
UNBOUNDED = "unbounded"
DID_NOT_CONVERGE = "did_not_converge"


@dataclass
class PhaseResult:
    """Outcome of one feasibility or optimization phase."""
    status: str
    pivots: int
    reduced_costs: Optional[List[Fraction]] = None
    row: Optional[int] = None       # offending row (infeasible)
    column: Optional[int] = None    # offending column (unbounded)


# =============================================================================
# Costs
# =============================================================================

def column_cost(objective: Sequence[Fraction], index: int) -> Fraction:
    """Objective coefficient of a column; slack and cut columns cost 0."""
    if index < len(objective):
        return Fraction(objective[index])
    return Fraction(0)


def reduced_costs(tableau: Tableau, objective: Sequence[Fraction]) -> List[Fraction]:
    """
    Reduced cost of every variable column.

    delta_j = sum_r cost(basis[r]) * T[r][j] - cost(j)
    """
    basic_costs = np.array(
        [column_cost(objective, b) for b in tableau.basis], dtype=object
    )
    weighted = basic_costs.dot(tableau.data[:, :tableau.rhs_col])
    return [
        Fraction(weighted[j]) - column_cost(objective, j)
        for j in range(tableau.n_variables)
    ]


def objective_value(tableau: Tableau, objective: Sequence[Fraction]) -> Fraction:
    """Objective value of the current basic solution."""
    return sum(
        (column_cost(objective, b) * tableau.rhs(r) for r, b in enumerate(tableau.basis)),
        Fraction(0),
    )


# =============================================================================
# Pivot selection rules
# =============================================================================

def most_negative_rhs_row(tableau: Tableau) -> Optional[int]:
    """Row with the smallest negative RHS (first on ties), or None if all RHS >= 0."""
    best_row = None
    best_value = Fraction(0)
    for row, value in enumerate(tableau.rhs_values()):
        if value < best_value:
            best_row = row
            best_value = value
    return best_row


def first_negative_column(tableau: Tableau, row: int) -> Optional[int]:
    """First variable column with a strictly negative entry in ``row``."""
    for col in range(tableau.n_variables):
        if tableau.data[row, col] < 0:
            return col
    return None


def entering_column(deltas: Sequence[Fraction]) -> Optional[int]:
    """Column with the most negative reduced cost (first on ties), or None if optimal."""
    best_col = None
    best_value = Fraction(0)
    for col, delta in enumerate(deltas):
        if delta < best_value:
            best_col = col
            best_value = delta
    return best_col


def ratio_test(tableau: Tableau, col: int) -> Optional[int]:
    """
    Minimum-ratio leaving row for entering column ``col``.

    Among rows with a strictly positive entry in ``col``, pick the row
    minimizing RHS / entry (first on ties). None means no such row exists
    and the objective is unbounded along this column.
    """
    best_row = None
    best_ratio = None
    for row in range(tableau.n_rows):
        entry = tableau.data[row, col]
        if entry > 0:
            ratio = divide(tableau.rhs(row), entry)
            if best_ratio is None or ratio < best_ratio:
                best_row = row
                best_ratio = ratio
    return best_row


# =============================================================================
# Phases
# =============================================================================

def restore_feasibility(
    tableau: Tableau,
    max_iterations: int = MAX_PIVOTS_PER_PHASE,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> PhaseResult:
    """
    Drive every right-hand side to a nonnegative value.

    Repeatedly selects the most negative RHS row and pivots on its first
    strictly negative coefficient. A negative row without any negative
    coefficient cannot be repaired, which proves the system infeasible.

    Parameters
    ----------
    tableau : Tableau
        Modified in place.
    max_iterations : int
        Maximum number of pivots.
    observer : callable, optional
        Receives a TableauEvent after every pivot.
    verbose : bool
        Print progress.

    Returns
    -------
    PhaseResult
        status FEASIBLE, INFEASIBLE (``row`` is the offending row) or
        DID_NOT_CONVERGE.
    """
    pivots = 0
    while True:
        row = most_negative_rhs_row(tableau)
        if row is None:
            if verbose:
                print(f"  Feasibility restored after {pivots} pivots")
            return PhaseResult(status=FEASIBLE, pivots=pivots)

        if pivots >= max_iterations:
            if verbose:
                print(f"  Feasibility phase hit max iterations ({max_iterations})")
            return PhaseResult(status=DID_NOT_CONVERGE, pivots=pivots, row=row)

        col = first_negative_column(tableau, row)
        if col is None:
            if verbose:
                print(f"  Row {row} has RHS {tableau.rhs(row)} and no negative "
                      f"coefficient: infeasible")
            return PhaseResult(status=INFEASIBLE, pivots=pivots, row=row)

        tableau.pivot(row, col)
        pivots += 1
        if verbose:
            print(f"  Feasibility pivot {pivots}: row {row}, column {col}")
        notify(observer, TableauEvent(
            kind="pivot", phase="feasibility",
            tableau=tableau.copy(), pivot=(row, col),
        ))


def optimize(
    tableau: Tableau,
    objective: Sequence[Fraction],
    max_iterations: int = MAX_PIVOTS_PER_PHASE,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> PhaseResult:
    """
    Primal simplex on a feasible tableau (maximization).

    Parameters
    ----------
    tableau : Tableau
        Must have all RHS >= 0. Modified in place.
    objective : sequence of Fraction
        Objective coefficients of the structural variables.
    max_iterations : int
        Maximum number of pivots.
    observer : callable, optional
        Receives a TableauEvent after every pivot, carrying the reduced
        costs that selected it.
    verbose : bool
        Print progress.

    Returns
    -------
    PhaseResult
        status OPTIMAL (with final reduced costs), UNBOUNDED (``column`` is
        the entering column without a leaving row) or DID_NOT_CONVERGE.
    """
    pivots = 0
    while True:
        deltas = reduced_costs(tableau, objective)
        col = entering_column(deltas)
        if col is None:
            if verbose:
                print(f"  Optimal after {pivots} pivots: "
                      f"objective = {objective_value(tableau, objective)}")
            return PhaseResult(status=OPTIMAL, pivots=pivots, reduced_costs=deltas)

        if pivots >= max_iterations:
            if verbose:
                print(f"  Optimization phase hit max iterations ({max_iterations})")
            return PhaseResult(status=DID_NOT_CONVERGE, pivots=pivots, reduced_costs=deltas)

        row = ratio_test(tableau, col)
        if row is None:
            if verbose:
                print(f"  Column {col} has no positive entry: unbounded")
            return PhaseResult(
                status=UNBOUNDED, pivots=pivots, reduced_costs=deltas, column=col,
            )

        tableau.pivot(row, col)
        pivots += 1
        if verbose:
            print(f"  Simplex pivot {pivots}: row {row}, column {col} "
                  f"(delta = {deltas[col]})")
        notify(observer, TableauEvent(
            kind="pivot", phase="optimization",
            tableau=tableau.copy(), reduced_costs=deltas, pivot=(row, col),
        ))
