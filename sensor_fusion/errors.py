"""Exceptions raised by the fusion filter."""
import numpy as np


class FusionError(Exception):
    """Base class for all sensor fusion errors."""


class DegenerateLinearizationError(FusionError, ArithmeticError):
    """Radar Jacobian is undefined because the state is at or near the origin."""

    def __init__(self, range_sq, eps):
        self.range_sq = range_sq
        self.eps = eps
        super().__init__(
            f"Cannot linearize radar model: px^2 + py^2 = {range_sq:.3e} < {eps:.3e}"
        )


class SingularInnovationError(FusionError, np.linalg.LinAlgError):
    """Innovation covariance S is singular or too ill-conditioned to invert."""

    def __init__(self, cond):
        self.cond = cond
        super().__init__(f"Innovation covariance is ill-conditioned (cond={cond:.3e})")


class MalformedObservationError(FusionError, ValueError):
    """Observation record does not match the arity of its sensor type."""
