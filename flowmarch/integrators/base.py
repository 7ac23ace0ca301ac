# flowmarch/integrators/base.py

from __future__ import annotations
from typing import Protocol, Tuple
import numpy as np


class Scheme(Protocol):
    """
    Protocol for explicit time-marching schemes.

    The tracker calls ``reset`` once before the time loop and ``advance``
    once per time index, in strictly increasing order. Arrays hold one
    entry per particle, indexed by particle identity.
    """

    name: str

    def reset(self, n_particles: int) -> None:
        """Discard any history carried from a previous march."""
        ...

    def advance(
        self,
        i: int,
        x: np.ndarray,
        y: np.ndarray,
        u: np.ndarray,
        v: np.ndarray,
        dt: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Positions at step i+1 from positions and velocities at step i.

        Parameters
        ----------
        i : int
            Current time index
        x, y : np.ndarray
            Positions at step i, shape (N,)
        u, v : np.ndarray
            Velocity evaluated at (t_i, x, y), shape (N,)
        dt : float
            Time step

        Returns
        -------
        (x_next, y_next) : tuple of np.ndarray
            Positions at step i+1, shape (N,)
        """
        ...
