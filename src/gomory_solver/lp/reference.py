"""
Floating-point reference backend built on scipy.optimize (HiGHS).

Used to cross-check the exact solver: the same problem is handed to
``linprog`` (LP relaxation) or ``milp`` (integer program) and the status
and objective value are compared.

Sign handling
-------------
"solver" (default) models the rows the way the tableau builder does:
GREATER_OR_EQUAL rows are >=, every other sign is <=. "exact" models
EQUAL rows as equalities; strict signs are relaxed to their non-strict
counterparts since an LP cannot express them.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, linprog, milp

from ..config import REFERENCE_METHOD, REFERENCE_TOLERANCE
from ..problem import Problem, Sign
from .solver import SolveResult, SolveStatus


SIGN_HANDLING = ("solver", "exact")

# scipy status codes (shared by linprog and milp)
_SCIPY_STATUS = {
    0: SolveStatus.OPTIMAL,
    1: SolveStatus.DID_NOT_CONVERGE,
    2: SolveStatus.INFEASIBLE,
    3: SolveStatus.UNBOUNDED,
}


@dataclass
class ReferenceResult:
    """
    Result of the scipy reference solve.

    Attributes
    ----------
    status : SolveStatus
        Mapped scipy status (anything unknown maps to DID_NOT_CONVERGE).
    lp_status : int
        Raw scipy status code.
    values : Optional[np.ndarray]
        Variable values if optimal.
    objective : Optional[float]
        Maximized objective value if optimal.
    message : str
        scipy's message.
    """
    status: SolveStatus
    lp_status: int
    values: Optional[np.ndarray] = None
    objective: Optional[float] = None
    message: str = ""


def constraint_arrays(problem: Problem, sign_handling: str = "solver"):
    """
    Float arrays describing the constraints as lower <= A x <= upper.

    Returns
    -------
    A : np.ndarray, shape (m, n)
    lower : np.ndarray, shape (m,)
    upper : np.ndarray, shape (m,)
    """
    if sign_handling not in SIGN_HANDLING:
        raise ValueError(f"sign_handling must be one of {SIGN_HANDLING}, got {sign_handling!r}")

    m, n = problem.n_constraints, problem.n_variables
    A = np.array([[float(a) for a in row[:-1]] for row in problem.constraints]).reshape(m, n)
    b = np.array([float(row[-1]) for row in problem.constraints])
    lower = np.full(m, -np.inf)
    upper = np.full(m, np.inf)

    for i, sign in enumerate(problem.signs):
        if sign is Sign.GREATER_OR_EQUAL:
            lower[i] = b[i]
        elif sign_handling == "exact" and sign is Sign.EQUAL:
            lower[i] = b[i]
            upper[i] = b[i]
        elif sign_handling == "exact" and sign is Sign.GREATER:
            lower[i] = b[i]
        else:
            upper[i] = b[i]
    return A, lower, upper


def solve_reference(
    problem: Problem,
    integral: bool = True,
    sign_handling: str = "solver",
) -> ReferenceResult:
    """
    Solve the problem with scipy's HiGHS backend.

    Parameters
    ----------
    problem : Problem
    integral : bool
        If True, solve the integer program with ``milp``; otherwise the LP
        relaxation with ``linprog``.
    sign_handling : str
        "solver" or "exact", see module docstring.

    Returns
    -------
    ReferenceResult
    """
    A, lower, upper = constraint_arrays(problem, sign_handling)
    # scipy minimizes
    c = -np.array([float(v) for v in problem.objective])
    n = problem.n_variables

    if integral:
        res = milp(
            c,
            constraints=LinearConstraint(A, lower, upper),
            integrality=np.ones(n),
            bounds=Bounds(0, np.inf),
        )
    else:
        # Split two-sided rows into A_ub x <= b_ub
        rows, rhs = [], []
        for i in range(A.shape[0]):
            if np.isfinite(upper[i]):
                rows.append(A[i])
                rhs.append(upper[i])
            if np.isfinite(lower[i]):
                rows.append(-A[i])
                rhs.append(-lower[i])
        res = linprog(
            c, A_ub=np.array(rows), b_ub=np.array(rhs),
            bounds=[(0, None)] * n, method=REFERENCE_METHOD,
        )

    status = _SCIPY_STATUS.get(res.status, SolveStatus.DID_NOT_CONVERGE)
    if status is SolveStatus.OPTIMAL:
        return ReferenceResult(
            status=status,
            lp_status=res.status,
            values=np.asarray(res.x),
            objective=-float(res.fun),
            message=res.message,
        )
    return ReferenceResult(status=status, lp_status=res.status, message=res.message)


def agrees_with_reference(
    result: SolveResult,
    reference: ReferenceResult,
    tolerance: float = REFERENCE_TOLERANCE,
) -> bool:
    """
    True if both solves report the same status and, when optimal, the same
    objective value within ``tolerance`` (values may differ between
    alternative optima).
    """
    if result.status is not reference.status:
        return False
    if result.status is not SolveStatus.OPTIMAL:
        return True
    return abs(float(result.objective) - reference.objective) <= tolerance * (
        1.0 + abs(reference.objective)
    )
