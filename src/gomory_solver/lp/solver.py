"""
Gomory cutting-plane solver: state machine tying the phases together.

    BUILD_TABLEAU -> RESTORE_FEASIBILITY -> OPTIMIZE -> GENERATE_CUT
                          ^                                  |
                          +------------ cut appended --------+
                                                             |
                                    all RHS integral -> EXTRACT_SOLUTION

Terminal states are EXTRACT_SOLUTION (status OPTIMAL), INFEASIBLE,
UNBOUNDED and DID_NOT_CONVERGE (an iteration or cut cap was hit).
"""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional, Sequence, Tuple

from ..config import (
    DEFAULT_FRACTIONAL_MODE, MAX_CUTS, MAX_PIVOTS_PER_PHASE, SolverConfig,
)
from ..problem import Problem
from .cuts import add_gomory_cut
from .phases import (
    DID_NOT_CONVERGE, INFEASIBLE, UNBOUNDED,
    objective_value, optimize, restore_feasibility,
)
from .tableau import Observer, Tableau, TableauEvent, build_tableau, notify


class SolveStatus(Enum):
    """Termination status of a solve."""
    IN_PROGRESS = "in_progress"
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    DID_NOT_CONVERGE = "did_not_converge"


class SolverState(Enum):
    """States of the solver loop."""
    BUILD_TABLEAU = "build_tableau"
    RESTORE_FEASIBILITY = "restore_feasibility"
    OPTIMIZE = "optimize"
    GENERATE_CUT = "generate_cut"
    EXTRACT_SOLUTION = "extract_solution"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    DID_NOT_CONVERGE = "did_not_converge"


TERMINAL_STATES = {
    SolverState.EXTRACT_SOLUTION: SolveStatus.OPTIMAL,
    SolverState.INFEASIBLE: SolveStatus.INFEASIBLE,
    SolverState.UNBOUNDED: SolveStatus.UNBOUNDED,
    SolverState.DID_NOT_CONVERGE: SolveStatus.DID_NOT_CONVERGE,
}


@dataclass
class SolveResult:
    """
    Result of a solve.

    Attributes
    ----------
    status : SolveStatus
        OPTIMAL, INFEASIBLE, UNBOUNDED or DID_NOT_CONVERGE.
    values : tuple of Fraction or None
        One value per structural variable when OPTIMAL, else None.
    objective : Fraction or None
        Objective value c^T x when OPTIMAL, else None.
    tableau : Tableau
        Final tableau (with its basis).
    pivots : int
        Total number of pivots over all phases.
    cuts : int
        Number of Gomory cuts appended.
    message : str
        Human-readable description of the outcome.
    """
    status: SolveStatus
    values: Optional[Tuple[Fraction, ...]]
    objective: Optional[Fraction]
    tableau: Tableau
    pivots: int
    cuts: int
    message: str

    @property
    def is_optimal(self) -> bool:
        return self.status is SolveStatus.OPTIMAL


def extract_solution(tableau: Tableau, n_structural: int) -> Tuple[Fraction, ...]:
    """Value of each structural variable: its row's RHS if basic, else 0."""
    rows = {b: r for r, b in enumerate(tableau.basis)}
    return tuple(
        tableau.rhs(rows[j]) if j in rows else Fraction(0)
        for j in range(n_structural)
    )


# =============================================================================
# Solver
# =============================================================================

class GomorySolver:
    """
    Stateful solver for one problem.

    Owns the tableau, its basis, the objective and the status. Call
    ``run()`` to advance the state machine to a terminal state, or
    ``step()`` to advance one state at a time.
    """

    def __init__(
        self,
        problem: Problem,
        config: Optional[SolverConfig] = None,
        observer: Optional[Observer] = None,
    ):
        config = config if config is not None else SolverConfig()
        config.validate()
        self.problem = problem
        self.config = config
        self.observer = observer
        self.objective = problem.objective
        self.tableau: Optional[Tableau] = None
        self.state = SolverState.BUILD_TABLEAU
        self.status = SolveStatus.IN_PROGRESS
        self.pivots = 0
        self.cuts = 0
        self.message = ""

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def step(self) -> SolverState:
        """Execute the current state and move to the next one."""
        handler = {
            SolverState.BUILD_TABLEAU: self._build,
            SolverState.RESTORE_FEASIBILITY: self._restore_feasibility,
            SolverState.OPTIMIZE: self._optimize,
            SolverState.GENERATE_CUT: self._generate_cut,
        }.get(self.state)
        if handler is None:
            return self.state
        self.state = handler()
        if self.done:
            self.status = TERMINAL_STATES[self.state]
        return self.state

    def run(self) -> SolveResult:
        """Advance to a terminal state and return the result."""
        while not self.done:
            self.step()

        values = None
        objective = None
        if self.status is SolveStatus.OPTIMAL:
            values = extract_solution(self.tableau, self.problem.n_variables)
            objective = objective_value(self.tableau, self.objective)
            self.message = (
                f"Optimal solution found after {self.pivots} pivots "
                f"and {self.cuts} cuts"
            )
        if self.config.verbose:
            print(f"Result: {self.status.value} ({self.message})")
        return SolveResult(
            status=self.status,
            values=values,
            objective=objective,
            tableau=self.tableau,
            pivots=self.pivots,
            cuts=self.cuts,
            message=self.message,
        )

    # -------------------------------------------------------------------------
    # State handlers
    # -------------------------------------------------------------------------

    def _build(self) -> SolverState:
        self.tableau = build_tableau(self.problem)
        if self.config.verbose:
            print(f"Tableau: {self.tableau.n_rows} rows x {self.tableau.n_cols} columns")
        notify(self.observer, TableauEvent(
            kind="initial", phase="build", tableau=self.tableau.copy(),
        ))
        return SolverState.RESTORE_FEASIBILITY

    def _restore_feasibility(self) -> SolverState:
        result = restore_feasibility(
            self.tableau,
            max_iterations=self.config.max_iterations,
            observer=self.observer,
            verbose=self.config.verbose,
        )
        self.pivots += result.pivots
        if result.status == INFEASIBLE:
            self.message = (
                f"Infeasible: row {result.row} has negative RHS "
                f"{self.tableau.rhs(result.row)} and no negative coefficient"
            )
            return SolverState.INFEASIBLE
        if result.status == DID_NOT_CONVERGE:
            self.message = (
                f"Feasibility phase did not converge in "
                f"{self.config.max_iterations} pivots"
            )
            return SolverState.DID_NOT_CONVERGE
        return SolverState.OPTIMIZE

    def _optimize(self) -> SolverState:
        result = optimize(
            self.tableau,
            self.objective,
            max_iterations=self.config.max_iterations,
            observer=self.observer,
            verbose=self.config.verbose,
        )
        self.pivots += result.pivots
        if result.status == UNBOUNDED:
            self.message = f"Unbounded: column {result.column} has no positive entry"
            return SolverState.UNBOUNDED
        if result.status == DID_NOT_CONVERGE:
            self.message = (
                f"Optimization phase did not converge in "
                f"{self.config.max_iterations} pivots"
            )
            return SolverState.DID_NOT_CONVERGE

        notify(self.observer, TableauEvent(
            kind="optimal", phase="optimization",
            tableau=self.tableau.copy(), reduced_costs=result.reduced_costs,
        ))
        if not self.config.integral:
            return SolverState.EXTRACT_SOLUTION
        return SolverState.GENERATE_CUT

    def _generate_cut(self) -> SolverState:
        if self.cuts >= self.config.max_cuts:
            # Stop only if another cut would actually be needed.
            if any(v.denominator != 1 for v in self.tableau.rhs_values()):
                self.message = f"Cut loop did not converge in {self.config.max_cuts} cuts"
                return SolverState.DID_NOT_CONVERGE
            return SolverState.EXTRACT_SOLUTION

        row = add_gomory_cut(
            self.tableau, self.config.fractional_mode, verbose=self.config.verbose,
        )
        if row is None:
            return SolverState.EXTRACT_SOLUTION
        self.cuts += 1
        notify(self.observer, TableauEvent(
            kind="cut", phase="cut", tableau=self.tableau.copy(),
        ))
        return SolverState.RESTORE_FEASIBILITY


# =============================================================================
# Convenience entry points
# =============================================================================

def solve_problem(
    problem: Problem,
    config: Optional[SolverConfig] = None,
    observer: Optional[Observer] = None,
) -> SolveResult:
    """Solve a validated Problem. See ``solve`` for the outcome semantics."""
    return GomorySolver(problem, config=config, observer=observer).run()


def solve(
    objective: Sequence,
    constraints: Sequence[Sequence],
    signs: Sequence,
    *,
    integral: bool = True,
    fractional_mode: str = DEFAULT_FRACTIONAL_MODE,
    max_iterations: int = MAX_PIVOTS_PER_PHASE,
    max_cuts: int = MAX_CUTS,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> SolveResult:
    """
    Maximize objective^T x subject to signed constraints and x >= 0.

    Parameters
    ----------
    objective : sequence of numbers
        Objective coefficients, length n.
    constraints : sequence of sequences
        m rows of n coefficients followed by the right-hand side.
    signs : sequence of Sign or str
        One relational sign per row. Only GREATER_OR_EQUAL is treated
        differently; every other sign is handled as <=.
    integral : bool
        If True, add Gomory cuts until all basic values are integral.
        If False, stop at the optimum of the LP relaxation.
    fractional_mode : str
        "floor" or "truncate" fractional part for cuts.
    max_iterations : int
        Pivot cap per phase invocation.
    max_cuts : int
        Cap on the number of Gomory cuts.
    observer : callable, optional
        Receives a TableauEvent for the initial tableau, every pivot,
        every cut and every optimal tableau.
    verbose : bool
        Print progress.

    Returns
    -------
    SolveResult

    Raises
    ------
    InvalidInputError
        If the problem data is malformed.
    """
    problem = Problem.from_data(objective, constraints, signs)
    config = SolverConfig(
        integral=integral,
        fractional_mode=fractional_mode,
        max_iterations=max_iterations,
        max_cuts=max_cuts,
        verbose=verbose,
    )
    return solve_problem(problem, config=config, observer=observer)
