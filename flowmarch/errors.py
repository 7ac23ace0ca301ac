# flowmarch/errors.py
"""
Exception hierarchy for flowmarch.

Every error derives from FlowMarchError and from the closest builtin
exception, so callers may catch either ``FlowMarchError`` or e.g.
``ValueError`` / ``IndexError``.
"""

from __future__ import annotations
from typing import Optional


class FlowMarchError(Exception):
    """Base class for all flowmarch errors."""


class InvalidParameterError(FlowMarchError, ValueError):
    """Non-positive dt, negative horizon or otherwise nonsensical input."""


class MismatchedInitialConditionsError(FlowMarchError, ValueError):
    """x0 and y0 initial condition vectors have different lengths."""


class NotInitializedError(FlowMarchError, RuntimeError):
    """Marching, reporting or export requested before setup is complete."""


class ParticleIndexError(FlowMarchError, IndexError):
    """Particle index outside [0, particle_count)."""


class TrajectoryExportError(FlowMarchError, OSError):
    """Export target could not be written, or an export file could not be read."""


class MarchCancelledError(FlowMarchError, RuntimeError):
    """Marching stopped early by the progress callback."""

    def __init__(self, message: str, completed_steps: int = 0):
        super().__init__(message)
        self.completed_steps = completed_steps


class NumericalFailureError(FlowMarchError, ArithmeticError):
    """
    Velocity evaluation raised or produced a non-finite value.

    Attributes
    ----------
    step : int
        Time index at which the failure occurred
    time : float
        Physical time of that step
    particle : int, optional
        Index of the offending particle (None when unknown)
    """

    def __init__(
        self,
        message: str,
        step: int = -1,
        time: float = float("nan"),
        particle: Optional[int] = None,
    ):
        super().__init__(message)
        self.step = step
        self.time = time
        self.particle = particle


__all__ = [
    "FlowMarchError",
    "InvalidParameterError",
    "MismatchedInitialConditionsError",
    "NotInitializedError",
    "ParticleIndexError",
    "TrajectoryExportError",
    "MarchCancelledError",
    "NumericalFailureError",
]
