"""
Tableau simplex and cutting-plane module.

Implements:
- Tableau construction from signed constraints and the Gauss-Jordan pivot
- Feasibility phase (negative RHS removal) and primal simplex phase
- Gomory fractional cut generation
- Solver state machine and solution extraction
- scipy (HiGHS) reference backend for cross-checking

Main entry points:
- `solve(objective, constraints, signs, ...)`: End-to-end solve
- `GomorySolver(problem, config)`: Step-wise state machine
- `solve_reference(problem)`: Floating-point cross-check
"""

from .tableau import (
    Tableau,
    TableauEvent,
    build_tableau,
)

from .phases import (
    PhaseResult,
    reduced_costs,
    objective_value,
    restore_feasibility,
    optimize,
)

from .cuts import (
    select_cut_row,
    cut_row,
    add_gomory_cut,
)

from .solver import (
    GomorySolver,
    SolveResult,
    SolveStatus,
    SolverState,
    extract_solution,
    solve,
    solve_problem,
)

from .reference import (
    ReferenceResult,
    solve_reference,
    agrees_with_reference,
)

__all__ = [
    # Tableau
    "Tableau",
    "TableauEvent",
    "build_tableau",
    # Phases
    "PhaseResult",
    "reduced_costs",
    "objective_value",
    "restore_feasibility",
    "optimize",
    # Cuts
    "select_cut_row",
    "cut_row",
    "add_gomory_cut",
    # Solver
    "GomorySolver",
    "SolveResult",
    "SolveStatus",
    "SolverState",
    "extract_solution",
    "solve",
    "solve_problem",
    # Reference
    "ReferenceResult",
    "solve_reference",
    "agrees_with_reference",
]
