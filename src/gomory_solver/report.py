"""
Text rendering of tableau snapshots.

The solver never prints tableaux itself; pass ``print_observer`` (or any
callable built on ``format_tableau``) as the observer of a solve to get a
trace of every intermediate tableau.

Layout:

    Basis  x_1   x_2   x_3   x_4   B
    x_3    2     1     1     0     4
    x_4    -3/2  1     0     1     0
"""

from fractions import Fraction
from typing import Callable, List, Optional, Sequence, TextIO

from .lp.tableau import Tableau, TableauEvent
from .rational import format_rational


def variable_label(index: int) -> str:
    """1-based label of a variable column."""
    return f"x_{index + 1}"


def format_tableau(tableau: Tableau, width: Optional[int] = None) -> str:
    """
    Render the tableau with a basis column and a header row.

    Parameters
    ----------
    tableau : Tableau
    width : int, optional
        Column width; defaults to the widest rendered cell plus two.
    """
    header = ["Basis"] + [variable_label(j) for j in range(tableau.n_variables)] + ["B"]
    body = [
        [variable_label(b)] + [format_rational(v) for v in tableau.data[r]]
        for r, b in enumerate(tableau.basis)
    ]
    if width is None:
        width = max(len(cell) for line in [header] + body for cell in line) + 2
    lines = ["".join(cell.ljust(width) for cell in line).rstrip()
             for line in [header] + body]
    return "\n".join(lines)


def format_reduced_costs(deltas: Sequence[Fraction]) -> str:
    """One ``Delta_j = value`` line per column."""
    return "\n".join(
        f"Delta_{j + 1} = {format_rational(d)}" for j, d in enumerate(deltas)
    )


def format_solution(values: Sequence[Fraction]) -> str:
    """One ``x_j = value`` line per structural variable."""
    return "\n".join(
        f"{variable_label(j)} = {format_rational(v)}" for j, v in enumerate(values)
    )


def format_event(event: TableauEvent) -> str:
    """Title line, tableau and (if present) reduced costs of one event."""
    if event.kind == "pivot":
        row, col = event.pivot
        title = f"[{event.phase}] pivot on row {row + 1}, column {variable_label(col)}"
    elif event.kind == "cut":
        title = f"[cut] appended row {event.tableau.n_rows}"
    else:
        title = f"[{event.phase}] {event.kind} tableau"

    parts = [title, format_tableau(event.tableau)]
    if event.reduced_costs is not None:
        parts.append(format_reduced_costs(event.reduced_costs))
    return "\n".join(parts)


def make_print_observer(stream: Optional[TextIO] = None) -> Callable[[TableauEvent], None]:
    """Observer that prints every event followed by a blank line."""
    def observer(event: TableauEvent) -> None:
        print(format_event(event), file=stream)
        print(file=stream)
    return observer


print_observer = make_print_observer()


class EventRecorder:
    """Observer that keeps every event, for inspection after a solve."""

    def __init__(self):
        self.events: List[TableauEvent] = []

    def __call__(self, event: TableauEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]
