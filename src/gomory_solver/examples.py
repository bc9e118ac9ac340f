"""
Built-in problem instances.

All instances maximize the objective with x >= 0. Rows are coefficients
followed by the right-hand side.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .problem import Problem, Sign


@dataclass(frozen=True)
class Example:
    """A named problem instance."""
    name: str
    description: str
    objective: Tuple
    constraints: Tuple
    signs: Tuple

    def problem(self) -> Problem:
        return Problem.from_data(self.objective, self.constraints, self.signs)


EXAMPLES: Dict[str, Example] = {}


def _register(example: Example) -> Example:
    EXAMPLES[example.name] = example
    return example


HARNESS = _register(Example(
    name="harness",
    description=(
        "min 3 x1 s.t. 3 x2 >= 4, 2 x1 + x2 >= 4, -4 x1 + 3 x2 <= 4, "
        "-3 x1 + x2 >= 0. LP optimum (4/5, 12/5); no integer point."
    ),
    objective=(-3, 0),
    constraints=(
        (0, 3, 4),
        (2, 1, 4),
        (-4, 3, 4),
        (-3, 1, 0),
    ),
    signs=(
        Sign.GREATER_OR_EQUAL,
        Sign.GREATER_OR_EQUAL,
        Sign.LESS_OR_EQUAL,
        Sign.GREATER_OR_EQUAL,
    ),
))

SINGLE_BOUND = _register(Example(
    name="single-bound",
    description="max x s.t. x <= 5.",
    objective=(1,),
    constraints=((1, 5),),
    signs=(Sign.LESS_OR_EQUAL,),
))

CONTRADICTION = _register(Example(
    name="contradiction",
    description="max x s.t. x <= 2, x >= 5.",
    objective=(1,),
    constraints=((1, 2), (1, 5)),
    signs=(Sign.LESS_OR_EQUAL, Sign.GREATER_OR_EQUAL),
))

HALF = _register(Example(
    name="half",
    description="max x s.t. 2 x <= 3. LP optimum 3/2, integer optimum 1.",
    objective=(1,),
    constraints=((2, 3),),
    signs=(Sign.LESS_OR_EQUAL,),
))

TRIANGLE = _register(Example(
    name="triangle",
    description=(
        "max x2 s.t. 3 x1 + 2 x2 <= 6, -3 x1 + 2 x2 <= 0. "
        "LP optimum (1, 3/2), integer optimum (1, 1)."
    ),
    objective=(0, 1),
    constraints=((3, 2, 6), (-3, 2, 0)),
    signs=(Sign.LESS_OR_EQUAL, Sign.LESS_OR_EQUAL),
))

RAY = _register(Example(
    name="ray",
    description="max x s.t. -x <= 1. Unbounded.",
    objective=(1,),
    constraints=((-1, 1),),
    signs=(Sign.LESS_OR_EQUAL,),
))


def list_examples() -> List[str]:
    return sorted(EXAMPLES)


def get_example(name: str) -> Example:
    """Look up a built-in example, raising KeyError with the known names."""
    try:
        return EXAMPLES[name]
    except KeyError:
        raise KeyError(
            f"Unknown example {name!r}, expected one of {list_examples()}"
        ) from None
