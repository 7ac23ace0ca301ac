# flowmarch/fields/base.py
"""
Velocity field representation.

A velocity field is a pair of scalar functions u(t, x, y) and v(t, x, y).
The tracker never owns or mutates them; it only evaluates them, once per
particle per time step.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import warnings
import numpy as np

from ..errors import InvalidParameterError, NumericalFailureError
from ..utils.jax_utils import JAX_AVAILABLE, enable_x64, maybe_jit, maybe_vmap

# Scalar component signature: (time, x, y) -> velocity component
ComponentFn = Callable[[float, float, float], float]

BACKENDS = ("python", "numpy", "jax")


@dataclass
class VelocityField:
    """
    Pair of velocity components evaluated on particle positions.

    Attributes
    ----------
    u, v : callable
        Component functions ``f(t, x, y) -> float``
    backend : str
        How components are evaluated for a set of particles:

        - ``"python"``: one scalar call per particle (default)
        - ``"numpy"``: one call with the whole ``x``/``y`` arrays;
          components must be written with NumPy ufuncs
        - ``"jax"``: components vmapped over particles and jitted;
          components must be JAX-traceable
    name : str, optional
        Label recorded in trajectory metadata
    """
    u: ComponentFn
    v: ComponentFn
    backend: str = "python"
    name: Optional[str] = None

    _batched: Optional[Callable] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not callable(self.u):
            raise InvalidParameterError("u must be callable: u(t, x, y) -> float")
        if not callable(self.v):
            raise InvalidParameterError("v must be callable: v(t, x, y) -> float")
        if self.backend not in BACKENDS:
            raise InvalidParameterError(
                f"Unknown backend '{self.backend}'. Available: {list(BACKENDS)}"
            )
        if self.name is None:
            self.name = getattr(self.u, "__name__", "field")

        if self.backend == "jax":
            if not JAX_AVAILABLE:
                warnings.warn("JAX not available; 'jax' backend evaluates particles one by one")
            else:
                enable_x64()
            u_fn, v_fn = self.u, self.v

            def _pair(t, x, y):
                return u_fn(t, x, y), v_fn(t, x, y)

            self._batched = maybe_jit(maybe_vmap(_pair, in_axes=(None, 0, 0)))

    def __call__(self, t: float, x: float, y: float) -> Tuple[float, float]:
        """Velocity at a single point."""
        return float(self.u(t, x, y)), float(self.v(t, x, y))

    def evaluate(self, t: float, xs: np.ndarray, ys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate both components for every particle at time t.

        Parameters
        ----------
        t : float
            Physical time
        xs, ys : np.ndarray
            Particle positions, shape (N,)

        Returns
        -------
        (us, vs) : tuple of np.ndarray
            Velocity components, shape (N,), dtype float64
        """
        n = xs.shape[0]
        if n == 0:
            return np.zeros(0), np.zeros(0)
        if self.backend == "python":
            us = np.empty(n, dtype=np.float64)
            vs = np.empty(n, dtype=np.float64)
            for p in range(n):
                try:
                    us[p] = self.u(t, xs[p], ys[p])
                    vs[p] = self.v(t, xs[p], ys[p])
                except Exception as e:
                    raise NumericalFailureError(
                        f"Velocity evaluation failed for particle {p}: {e}", particle=p
                    ) from e
            return us, vs

        try:
            if self.backend == "numpy":
                us = self.u(t, xs, ys)
                vs = self.v(t, xs, ys)
            else:
                us, vs = self._batched(t, xs, ys)

            # Components that ignore x/y may return a scalar
            us = np.broadcast_to(np.asarray(us, dtype=np.float64), (n,))
            vs = np.broadcast_to(np.asarray(vs, dtype=np.float64), (n,))
        except Exception as e:
            raise NumericalFailureError(
                f"Velocity evaluation failed on the '{self.backend}' backend: {e}"
            ) from e
        return us, vs


def as_velocity_field(u, v=None, backend: str = "python") -> VelocityField:
    """
    Normalize the accepted field specifications into a VelocityField.

    ``u`` may already be a VelocityField (then ``v`` must be omitted), or
    ``u`` and ``v`` are the two component callables.
    """
    if isinstance(u, VelocityField):
        if v is not None:
            raise InvalidParameterError("v must be omitted when passing a VelocityField")
        return u
    if v is None:
        raise InvalidParameterError("Both u and v components are required")
    return VelocityField(u=u, v=v, backend=backend)
