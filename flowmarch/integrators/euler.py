# flowmarch/integrators/euler.py
"""
Forward (explicit) Euler time marching: x_{i+1} = x_i + dt * u(t_i, x_i).
"""

from __future__ import annotations
from typing import Tuple
import numpy as np


def euler_step(
    x: np.ndarray,
    y: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Forward Euler update for every particle.

    Parameters
    ----------
    x, y : np.ndarray
        Current positions, shape (N,)
    u, v : np.ndarray
        Velocity at the current positions and time, shape (N,)
    dt : float
        Time step size

    Returns
    -------
    (x_next, y_next) : tuple of np.ndarray
        Updated positions, shape (N,)
    """
    return x + dt * u, y + dt * v


class ExplicitEuler:
    """First-order single-step scheme. Carries no state between steps."""

    name = "euler"
    order = 1

    def reset(self, n_particles: int) -> None:
        pass

    def advance(self, i, x, y, u, v, dt):
        return euler_step(x, y, u, v, dt)

    def __repr__(self) -> str:
        return "ExplicitEuler()"
