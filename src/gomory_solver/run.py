"""
Solve one of the built-in problem instances and print the result.

Usage:
    python -m gomory_solver.run --example harness --show-tableaux
    python -m gomory_solver.run --example triangle --fractional-mode truncate
    python -m gomory_solver.run --list
"""

import argparse
from typing import List, Optional

from .config import (
    DEFAULT_FRACTIONAL_MODE, FRACTIONAL_MODES, MAX_CUTS, MAX_PIVOTS_PER_PHASE,
    SolverConfig,
)
from .examples import EXAMPLES, get_example, list_examples
from .lp.reference import agrees_with_reference, solve_reference
from .lp.solver import SolveResult, solve_problem
from .problem import Problem
from .rational import format_rational
from .report import format_solution, print_observer


def report_result(problem: Problem, result: SolveResult) -> None:
    """Print status, solution and an exact constraint check."""
    print(f"Status: {result.status.value}")
    print(result.message)
    if result.is_optimal:
        print("Solution:")
        print(format_solution(result.values))
        print(f"Objective = {format_rational(result.objective)}")
        ok = problem.is_satisfied_by(result.values)
        print(f"Constraints satisfied: {'yes' if ok else 'NO'}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Solve a built-in integer program with Gomory cuts"
    )
    parser.add_argument(
        "--example", type=str, default="harness", choices=sorted(EXAMPLES),
        help="Built-in instance to solve (default: harness)"
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List the built-in instances and exit"
    )
    parser.add_argument(
        "--relaxation", action="store_true",
        help="Stop at the LP relaxation optimum (no cuts)"
    )
    parser.add_argument(
        "--fractional-mode", type=str, default=DEFAULT_FRACTIONAL_MODE,
        choices=list(FRACTIONAL_MODES),
        help=f"Fractional part used for cuts (default: {DEFAULT_FRACTIONAL_MODE})"
    )
    parser.add_argument(
        "--max-iterations", type=int, default=MAX_PIVOTS_PER_PHASE,
        help=f"Pivot cap per phase (default: {MAX_PIVOTS_PER_PHASE})"
    )
    parser.add_argument(
        "--max-cuts", type=int, default=MAX_CUTS,
        help=f"Cap on Gomory cuts (default: {MAX_CUTS})"
    )
    parser.add_argument(
        "--show-tableaux", action="store_true",
        help="Print every intermediate tableau"
    )
    parser.add_argument(
        "--reference", action="store_true",
        help="Cross-check against scipy (HiGHS)"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Print progress"
    )

    args = parser.parse_args(argv)

    if args.list:
        for name in list_examples():
            print(f"{name}: {EXAMPLES[name].description}")
        return

    example = get_example(args.example)
    problem = example.problem()
    config = SolverConfig(
        integral=not args.relaxation,
        fractional_mode=args.fractional_mode,
        max_iterations=args.max_iterations,
        max_cuts=args.max_cuts,
        verbose=args.verbose,
    )

    print(f"Example: {example.name} ({example.description})")
    observer = print_observer if args.show_tableaux else None
    result = solve_problem(problem, config=config, observer=observer)
    report_result(problem, result)

    if args.reference:
        reference = solve_reference(problem, integral=config.integral)
        verdict = "agrees" if agrees_with_reference(result, reference) else "DISAGREES"
        print(f"Reference (scipy {reference.status.value}): {verdict}")


if __name__ == "__main__":
    main()
