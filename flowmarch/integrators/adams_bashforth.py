# flowmarch/integrators/adams_bashforth.py
"""
Two-step Adams-Bashforth (AB2) time marching.

    x_{i+1} = x_i + dt * (3/2 u_i - 1/2 u_{i-1})

No previous velocity exists at i == 0, so the first step is a forward
Euler step. The previous velocity is stored per particle.
"""

from __future__ import annotations
from typing import Optional, Tuple
import numpy as np

from .euler import euler_step

AB2_CURRENT = 1.5
AB2_PREVIOUS = 0.5


def ab2_step(
    x: np.ndarray,
    y: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    u_prev: np.ndarray,
    v_prev: np.ndarray,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Adams-Bashforth-2 update for every particle.

    Parameters
    ----------
    x, y : np.ndarray
        Current positions, shape (N,)
    u, v : np.ndarray
        Velocity at step i, shape (N,)
    u_prev, v_prev : np.ndarray
        Velocity at step i-1 for the same particles, shape (N,)
    dt : float
        Time step size

    Returns
    -------
    (x_next, y_next) : tuple of np.ndarray
        Updated positions, shape (N,)
    """
    x_next = x + dt * (AB2_CURRENT * u - AB2_PREVIOUS * u_prev)
    y_next = y + dt * (AB2_CURRENT * v - AB2_PREVIOUS * v_prev)
    return x_next, y_next


class AdamsBashforth2:
    """
    Explicit two-step scheme bootstrapped by one Euler step.

    ``u_prev[n]``/``v_prev[n]`` hold the velocity particle ``n`` saw on the
    previous step; they are only ever read back for the same ``n``.
    """

    name = "ab2"
    order = 2

    def __init__(self):
        self.u_prev: Optional[np.ndarray] = None
        self.v_prev: Optional[np.ndarray] = None

    def reset(self, n_particles: int) -> None:
        self.u_prev = np.zeros(n_particles, dtype=np.float64)
        self.v_prev = np.zeros(n_particles, dtype=np.float64)

    def advance(self, i, x, y, u, v, dt):
        if self.u_prev is None or self.u_prev.shape[0] != x.shape[0]:
            self.reset(x.shape[0])

        if i == 0:
            x_next, y_next = euler_step(x, y, u, v, dt)
        else:
            x_next, y_next = ab2_step(x, y, u, v, self.u_prev, self.v_prev, dt)

        self.u_prev[:] = u
        self.v_prev[:] = v
        return x_next, y_next

    def __repr__(self) -> str:
        return "AdamsBashforth2()"
