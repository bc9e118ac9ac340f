"""
Global configuration and numerical defaults for the Gomory solver.

All tableau arithmetic is exact (fractions.Fraction), so the only
tolerance here is the one used when comparing against the floating-point
reference backend.
"""

from dataclasses import dataclass


# =============================================================================
# Iteration Caps
# =============================================================================

MAX_PIVOTS_PER_PHASE = 1000
"""Maximum number of pivots in a single feasibility or optimization phase."""

MAX_CUTS = 200
"""Maximum number of Gomory cuts appended before giving up."""


# =============================================================================
# Gomory Cuts
# =============================================================================

FRACTIONAL_MODES = ("floor", "truncate")
"""Supported definitions of the fractional part of a rational value.

- "floor":    frac(x) = x - floor(x), always in [0, 1)
- "truncate": frac(x) = x - trunc(x), in (-1, 1), same sign as x
"""

DEFAULT_FRACTIONAL_MODE = "floor"
"""Fractional part used for cut selection and cut-row construction."""


# =============================================================================
# Reference Backend
# =============================================================================

REFERENCE_TOLERANCE = 1e-7
"""Tolerance (scaled by 1 + |objective|) when comparing with scipy/HiGHS."""

REFERENCE_METHOD = "highs"
"""scipy.optimize.linprog method used by the reference backend."""


# =============================================================================
# Run Configuration
# =============================================================================

@dataclass
class SolverConfig:
    """Per-run knobs for a single solve."""
    integral: bool = True
    fractional_mode: str = DEFAULT_FRACTIONAL_MODE
    max_iterations: int = MAX_PIVOTS_PER_PHASE
    max_cuts: int = MAX_CUTS
    verbose: bool = False

    def validate(self) -> None:
        """Raise ValueError if any knob is out of range."""
        if self.fractional_mode not in FRACTIONAL_MODES:
            raise ValueError(
                f"fractional_mode must be one of {FRACTIONAL_MODES}, "
                f"got {self.fractional_mode!r}"
            )
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )
        if self.max_cuts < 0:
            raise ValueError(f"max_cuts must be non-negative, got {self.max_cuts}")
