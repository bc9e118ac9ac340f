"""
End-to-end tests for the Gomory solver state machine.

Covers:
- Bound, contradiction and half-integral scenarios
- The harness instance (LP relaxation and integer program)
- Unbounded and non-converging outcomes
- Observer events and solution extraction
- Exactness, feasibility and integrality of reported solutions
"""

from fractions import Fraction as F
from itertools import product

import numpy as np
import pytest

from gomory_solver import InvalidInputError, Sign, SolveStatus, solve, solve_problem
from gomory_solver.config import SolverConfig
from gomory_solver.problem import Problem
from gomory_solver.examples import (
    CONTRADICTION, HALF, HARNESS, RAY, SINGLE_BOUND, TRIANGLE,
)
from gomory_solver.report import EventRecorder
from gomory_solver.lp.solver import GomorySolver, SolverState, extract_solution
from gomory_solver.lp.tableau import build_tableau


def solve_example(example, **kwargs):
    return solve(example.objective, example.constraints, example.signs, **kwargs)


# ============================================================================
# Scenarios
# ============================================================================

class TestScenarios:
    """Small instances with hand-checked outcomes."""

    def test_single_bound(self):
        """max x s.t. x <= 5 -> x = 5."""
        result = solve_example(SINGLE_BOUND)
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (5,)
        assert result.objective == 5
        assert result.cuts == 0

    def test_contradiction(self):
        """x <= 2 and x >= 5 -> infeasible."""
        result = solve_example(CONTRADICTION)
        assert result.status is SolveStatus.INFEASIBLE
        assert result.values is None
        assert result.objective is None
        assert "Infeasible" in result.message

    def test_half_needs_one_cut(self):
        """max x s.t. 2x <= 3: LP optimum 3/2, one cut brings x down to 1."""
        result = solve_example(HALF)
        assert result.status is SolveStatus.OPTIMAL
        assert result.cuts == 1
        assert result.tableau.n_rows == 2
        assert result.values == (1,)
        assert result.values[0].denominator == 1

    def test_half_relaxation(self):
        result = solve_example(HALF, integral=False)
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (F(3, 2),)
        assert result.cuts == 0

    def test_triangle(self):
        """LP optimum (1, 3/2); two cuts reach the integer optimum (1, 1)."""
        result = solve_example(TRIANGLE)
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (1, 1)
        assert result.objective == 1
        assert result.cuts == 2
        assert result.pivots == 4

    def test_triangle_truncate_mode(self):
        """Truncated fractional parts give an invalid second cut that removes (1, 1)."""
        result = solve_example(TRIANGLE, fractional_mode="truncate")
        assert result.status is SolveStatus.OPTIMAL
        assert result.cuts == 2
        assert result.values == (0, 0)
        assert TRIANGLE.problem().is_satisfied_by(result.values)

    def test_unbounded(self):
        result = solve_example(RAY)
        assert result.status is SolveStatus.UNBOUNDED
        assert result.values is None
        assert "Unbounded" in result.message


class TestHarness:
    """The original harness instance."""

    def test_relaxation(self):
        result = solve_example(HARNESS, integral=False)
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (F(4, 5), F(12, 5))
        assert result.objective == F(-12, 5)
        assert result.pivots == 4
        assert HARNESS.problem().is_satisfied_by(result.values)

    def test_integer_program_infeasible(self):
        """The only LP point is (4/5, 12/5); one cut exposes infeasibility."""
        result = solve_example(HARNESS)
        assert result.status is SolveStatus.INFEASIBLE
        assert result.cuts == 1
        assert result.pivots == 6
        assert result.tableau.n_rows == 5
        assert result.tableau.n_cols == 8

    def test_integer_program_truncate_mode(self):
        """The truncated cut has no negative coefficient, so it is rejected at once."""
        result = solve_example(HARNESS, fractional_mode="truncate")
        assert result.status is SolveStatus.INFEASIBLE
        assert result.cuts == 1
        assert result.pivots == 4



class TestCutSlackColumns:
    """Cut slacks are real columns, so later cuts and pivots can use them."""

    def test_thin_strip_is_feasible_at_origin(self):
        """4 x1 <= 2 forces x1 = 0; the second cut is built from a row that
        depends on the first cut's slack."""
        result = solve(
            [2, 0],
            [[-3, 3, 3], [4, 0, 2], [1, 0, 10], [0, 1, 10]],
            ["<="] * 4,
        )
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (0, 0)
        assert result.objective == 0
        assert result.cuts == 2
        assert result.pivots == 3

    def test_cone_reaches_true_optimum(self):
        """x1 <= 3 x2 and 4 x2 <= 3 x1 in the box [0, 10]^2: optimum (10, 7)."""
        result = solve(
            [2, 1],
            [[1, -3, 0], [-3, 4, 0], [1, 0, 10], [0, 1, 10]],
            ["<="] * 4,
        )
        assert result.status is SolveStatus.OPTIMAL
        assert result.values == (10, 7)
        assert result.objective == 27
        assert result.cuts == 2
        assert result.pivots == 6

    def test_cut_slack_reenters_basis(self):
        """In the cone instance the first cut's slack (column 6) ends up basic."""
        result = solve(
            [2, 1],
            [[1, -3, 0], [-3, 4, 0], [1, 0, 10], [0, 1, 10]],
            ["<="] * 4,
        )
        assert 6 in result.tableau.basis
        assert result.tableau.n_cols == 2 + 4 + 2 + 1


# ============================================================================
# Hardening
# ============================================================================

class TestCaps:
    """Iteration and cut caps surface DID_NOT_CONVERGE."""

    def test_cut_cap(self):
        result = solve_example(HALF, max_cuts=0)
        assert result.status is SolveStatus.DID_NOT_CONVERGE
        assert result.values is None

    def test_cut_cap_not_hit_when_integral(self):
        result = solve_example(SINGLE_BOUND, max_cuts=0)
        assert result.status is SolveStatus.OPTIMAL

    def test_iteration_cap(self):
        result = solve_example(TRIANGLE, max_iterations=1)
        assert result.status is SolveStatus.DID_NOT_CONVERGE
        assert "did not converge" in result.message

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            solve_example(HALF, fractional_mode="nearest")

    def test_invalid_input(self):
        with pytest.raises(InvalidInputError):
            solve([1, 2], [[1, 2]], [Sign.LESS_OR_EQUAL])


# ============================================================================
# State machine and observers
# ============================================================================

class TestStateMachine:
    """Explicit state transitions."""

    def test_half_transitions(self):
        solver = GomorySolver(HALF.problem())
        states = [solver.state]
        while not solver.done:
            states.append(solver.step())
        assert states == [
            SolverState.BUILD_TABLEAU,
            SolverState.RESTORE_FEASIBILITY,
            SolverState.OPTIMIZE,
            SolverState.GENERATE_CUT,
            SolverState.RESTORE_FEASIBILITY,
            SolverState.OPTIMIZE,
            SolverState.GENERATE_CUT,
            SolverState.EXTRACT_SOLUTION,
        ]
        assert solver.status is SolveStatus.OPTIMAL

    def test_status_in_progress_until_done(self):
        solver = GomorySolver(HALF.problem())
        solver.step()
        assert solver.status is SolveStatus.IN_PROGRESS

    def test_step_after_done_is_noop(self):
        solver = GomorySolver(CONTRADICTION.problem())
        solver.run()
        assert solver.step() is SolverState.INFEASIBLE

    def test_relaxation_skips_cuts(self):
        solver = GomorySolver(HALF.problem(), SolverConfig(integral=False))
        solver.run()
        assert solver.state is SolverState.EXTRACT_SOLUTION
        assert solver.cuts == 0

    def test_observer_events(self):
        recorder = EventRecorder()
        solve_example(HALF, observer=recorder)
        assert recorder.kinds() == ["initial", "pivot", "optimal", "cut", "pivot", "optimal"]
        cut_event = recorder.events[3]
        assert cut_event.tableau.n_rows == 2
        assert recorder.events[-1].reduced_costs is not None

    def test_verbose(self, capsys):
        solve_example(HALF, verbose=True)
        out = capsys.readouterr().out
        assert "Gomory cut" in out
        assert "Result: optimal" in out


class TestExtractSolution:
    """Values are read from basic rows; non-basic variables are 0."""

    def test_nonbasic_zero(self):
        t = build_tableau(TRIANGLE.problem())
        assert extract_solution(t, 2) == (0, 0)

    def test_basic_value(self):
        t = build_tableau(TRIANGLE.problem())
        t.pivot(0, 0)
        assert extract_solution(t, 2) == (2, 0)


# ============================================================================
# Soundness properties on a small grid of instances
# ============================================================================

def brute_force_integer_optimum(problem, limit=8):
    """Best integer point in [0, limit]^n, or None if none is feasible."""
    best = None
    for point in product(range(limit + 1), repeat=problem.n_variables):
        values = [F(v) for v in point]
        if problem.is_satisfied_by(values):
            value = problem.objective_value(values)
            if best is None or value > best:
                best = value
    return best


SMALL_INSTANCES = [
    SINGLE_BOUND, CONTRADICTION, HALF, TRIANGLE, HARNESS,
]


class TestSoundness:
    """Properties that must hold for every reported outcome."""

    @pytest.mark.parametrize("example", SMALL_INSTANCES, ids=lambda e: e.name)
    def test_optimal_values_feasible_and_integral(self, example):
        result = solve_example(example)
        if result.is_optimal:
            assert example.problem().is_satisfied_by(result.values)
            assert all(v.denominator == 1 for v in result.values)

    @pytest.mark.parametrize("example", SMALL_INSTANCES, ids=lambda e: e.name)
    def test_values_are_fractions(self, example):
        result = solve_example(example, integral=False)
        assert all(isinstance(v, F) for v in result.tableau.data.flat)
        if result.is_optimal:
            assert all(isinstance(v, F) for v in result.values)

    @pytest.mark.parametrize("example", SMALL_INSTANCES, ids=lambda e: e.name)
    def test_matches_brute_force(self, example):
        """Bounded instances: optimum equals exhaustive search, infeasible has no point."""
        result = solve_example(example)
        expected = brute_force_integer_optimum(example.problem())
        if result.status is SolveStatus.INFEASIBLE:
            assert expected is None
        else:
            assert result.status is SolveStatus.OPTIMAL
            assert result.objective == expected

    def test_basis_entries_distinct(self):
        for example in SMALL_INSTANCES:
            result = solve_example(example)
            basis = result.tableau.basis
            assert len(set(basis)) == len(basis)


# ============================================================================
# Randomized soundness on small boxed instances
# ============================================================================

BOX = 5


def random_boxed_problem(rng, n_variables=2):
    """Integer data, one to three random rows, plus x_j <= BOX for every j."""
    rows = []
    signs = []
    for _ in range(int(rng.integers(1, 4))):
        coefficients = [int(a) for a in rng.integers(-4, 5, size=n_variables)]
        rows.append(coefficients + [int(rng.integers(-3, 13))])
        signs.append(
            Sign.GREATER_OR_EQUAL if rng.random() < 0.3 else Sign.LESS_OR_EQUAL
        )
    for j in range(n_variables):
        unit = [0] * n_variables
        unit[j] = 1
        rows.append(unit + [BOX])
        signs.append(Sign.LESS_OR_EQUAL)
    objective = [int(c) for c in rng.integers(-3, 4, size=n_variables)]
    return Problem.from_data(objective, rows, signs)


class TestRandomizedSoundness:
    """Seeded random instances checked against exhaustive search."""

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_agrees_with_brute_force(self, seed):
        rng = np.random.default_rng(seed)
        config = SolverConfig(max_cuts=100)
        n_instances = 40
        converged = 0
        for _ in range(n_instances):
            problem = random_boxed_problem(rng)
            result = solve_problem(problem, config=config)
            expected = brute_force_integer_optimum(problem, limit=BOX)

            assert result.status is not SolveStatus.UNBOUNDED
            if result.status is SolveStatus.DID_NOT_CONVERGE:
                continue
            converged += 1
            if result.status is SolveStatus.INFEASIBLE:
                assert expected is None, problem
            else:
                assert problem.is_satisfied_by(result.values), problem
                assert result.objective == expected, problem
        assert converged > n_instances // 2
