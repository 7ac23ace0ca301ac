# flowmarch/tracking/time_grid.py
"""
Uniform time grid derived from (dt, tmax).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
import numpy as np

from ..errors import InvalidParameterError


def _as_finite_float(value, name: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(out):
        raise InvalidParameterError(f"{name} must be finite, got {out}")
    return out


@dataclass(frozen=True)
class TimeGrid:
    """
    Sampled instants ``times[i] = i * dt`` for ``i`` in ``[0, step_count)``.

    ``step_count = floor(tmax / dt) + 1``. When ``tmax / dt`` is not
    integral the last sampled time falls short of ``tmax``.

    Attributes
    ----------
    dt : float
        Positive time step
    tmax : float
        Non-negative horizon
    step_count : int
        Number of sampled instants
    times : np.ndarray
        Time points, shape (step_count,), float64
    """
    dt: float
    tmax: float
    step_count: int = field(init=False)
    times: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        dt = _as_finite_float(self.dt, "dt")
        tmax = _as_finite_float(self.tmax, "tmax")
        if dt <= 0.0:
            raise InvalidParameterError(f"dt must be positive, got {dt}")
        if tmax < 0.0:
            raise InvalidParameterError(f"tmax must be non-negative, got {tmax}")

        step_count = int(math.floor(tmax / dt)) + 1
        times = dt * np.arange(step_count, dtype=np.float64)
        times.setflags(write=False)

        object.__setattr__(self, "dt", dt)
        object.__setattr__(self, "tmax", tmax)
        object.__setattr__(self, "step_count", step_count)
        object.__setattr__(self, "times", times)

    @classmethod
    def configure(cls, dt: float, tmax: float) -> "TimeGrid":
        """Validate (dt, tmax) and build the grid."""
        return cls(dt, tmax)

    def __len__(self) -> int:
        return self.step_count

    @property
    def buffer_length(self) -> int:
        """Length of every particle history: one slot beyond the last sampled time."""
        return self.step_count + 1

    @property
    def t_final(self) -> float:
        """Last sampled time (<= tmax)."""
        return float(self.times[-1])
