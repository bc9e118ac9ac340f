"""
Problem instances: relational signs and the validated input container.

A problem is

    maximize    c^T x
    subject to  a_i^T x  (sign_i)  b_i     for each constraint row i
                x >= 0

given as an objective vector of length n, m constraint rows of n
coefficients followed by the right-hand side b_i, and m sign tags.
"""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Sequence, Tuple

from .errors import InvalidInputError
from .rational import Number, rational


class Sign(Enum):
    """Relational sign of a constraint row."""
    LESS = "<"
    LESS_OR_EQUAL = "<="
    EQUAL = "="
    GREATER_OR_EQUAL = ">="
    GREATER = ">"

    @classmethod
    def parse(cls, value) -> "Sign":
        """Accept a Sign, its name ("LESS_OR_EQUAL") or its operator ("<=")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text == "==":
                text = "="
            for sign in cls:
                if text == sign.value or text.upper() == sign.name:
                    return sign
        raise InvalidInputError(f"Unknown relational sign {value!r}")

    def holds(self, lhs: Fraction, rhs: Fraction) -> bool:
        """Evaluate ``lhs (sign) rhs`` exactly."""
        if self is Sign.LESS:
            return lhs < rhs
        if self is Sign.LESS_OR_EQUAL:
            return lhs <= rhs
        if self is Sign.EQUAL:
            return lhs == rhs
        if self is Sign.GREATER_OR_EQUAL:
            return lhs >= rhs
        return lhs > rhs


@dataclass(frozen=True)
class Problem:
    """
    Immutable, validated problem data.

    Attributes
    ----------
    objective : tuple of Fraction
        Objective coefficients c (length n), maximized.
    constraints : tuple of tuple of Fraction
        m rows, each n coefficients followed by the right-hand side.
    signs : tuple of Sign
        One relational sign per constraint row.
    """
    objective: Tuple[Fraction, ...]
    constraints: Tuple[Tuple[Fraction, ...], ...]
    signs: Tuple[Sign, ...]

    @classmethod
    def from_data(
        cls,
        objective: Sequence[Number],
        constraints: Sequence[Sequence[Number]],
        signs: Sequence,
    ) -> "Problem":
        """
        Validate shapes and convert every value to an exact Fraction.

        Raises
        ------
        InvalidInputError
            If the objective is empty, there are no constraints, a row does
            not have n + 1 entries, the number of signs differs from the
            number of rows, or a sign is unknown.
        """
        objective = _to_fractions(objective, "objective")
        n = len(objective)
        if n == 0:
            raise InvalidInputError("Objective must have at least one coefficient")

        rows = []
        for i, row in enumerate(constraints):
            row = _to_fractions(row, f"constraint row {i}")
            if len(row) != n + 1:
                raise InvalidInputError(
                    f"Constraint row {i} has {len(row)} entries, expected {n + 1} "
                    f"({n} coefficients + right-hand side)"
                )
            rows.append(row)
        if not rows:
            raise InvalidInputError("At least one constraint row is required")

        signs = tuple(Sign.parse(s) for s in signs)
        if len(signs) != len(rows):
            raise InvalidInputError(
                f"Got {len(signs)} signs for {len(rows)} constraint rows"
            )

        return cls(objective=objective, constraints=tuple(rows), signs=signs)

    @property
    def n_variables(self) -> int:
        return len(self.objective)

    @property
    def n_constraints(self) -> int:
        return len(self.constraints)

    def lhs(self, row: int, values: Sequence[Fraction]) -> Fraction:
        """Left-hand side a_i^T x of constraint row i."""
        coefficients = self.constraints[row][:-1]
        return sum((a * x for a, x in zip(coefficients, values)), Fraction(0))

    def rhs(self, row: int) -> Fraction:
        return self.constraints[row][-1]

    def objective_value(self, values: Sequence[Fraction]) -> Fraction:
        """c^T x."""
        return sum((c * x for c, x in zip(self.objective, values)), Fraction(0))

    def is_satisfied_by(self, values: Sequence[Fraction]) -> bool:
        """
        Check nonnegativity and every constraint with its own sign, exactly.

        Raises
        ------
        InvalidInputError
            If ``values`` does not have one entry per variable.
        """
        if len(values) != self.n_variables:
            raise InvalidInputError(
                f"Expected {self.n_variables} values, got {len(values)}"
            )
        if any(x < 0 for x in values):
            return False
        return all(
            sign.holds(self.lhs(i, values), self.rhs(i))
            for i, sign in enumerate(self.signs)
        )


def _to_fractions(values, label: str) -> Tuple[Fraction, ...]:
    try:
        return tuple(rational(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Non-numeric value in {label}: {exc}") from exc
