# flowmarch/fields/analytic.py
"""
Analytic 2D velocity fields.

Each factory returns a VelocityField whose components are written with
array functions, so they work with every evaluation backend. Fields are
also reachable by name through :func:`get_field`, which is what the
command-line runner uses.
"""

from __future__ import annotations
from typing import Callable, Dict
import numpy as np

from .base import VelocityField
from ..errors import InvalidParameterError
from ..utils.jax_utils import JAX_AVAILABLE

if JAX_AVAILABLE:
    import jax.numpy as jnp
else:
    jnp = None  # type: ignore


def _xp(backend: str):
    """Array namespace the component functions should use."""
    if backend == "jax" and JAX_AVAILABLE:
        return jnp
    return np


def uniform_flow(u0: float = 1.0, v0: float = 0.0, backend: str = "python") -> VelocityField:
    """Constant velocity (u0, v0) everywhere."""
    def u(t, x, y):
        return u0 + 0.0 * x

    def v(t, x, y):
        return v0 + 0.0 * y

    return VelocityField(u, v, backend=backend, name="uniform")


def solid_body_rotation(omega: float = 1.0, backend: str = "python") -> VelocityField:
    """Rigid rotation about the origin: u = -omega*y, v = omega*x."""
    def u(t, x, y):
        return -omega * y

    def v(t, x, y):
        return omega * x

    return VelocityField(u, v, backend=backend, name="rotation")


def linear_shear(rate: float = 1.0, backend: str = "python") -> VelocityField:
    """Plane shear flow: u = rate*y, v = 0."""
    def u(t, x, y):
        return rate * y

    def v(t, x, y):
        return 0.0 * x

    return VelocityField(u, v, backend=backend, name="shear")


def oscillating_flow(amplitude: float = 1.0, frequency: float = 1.0, backend: str = "python") -> VelocityField:
    """Spatially uniform, time-periodic flow: u = A*cos(2*pi*f*t), v = A*sin(2*pi*f*t)."""
    xp = _xp(backend)

    def u(t, x, y):
        return amplitude * xp.cos(2.0 * np.pi * frequency * t) + 0.0 * x

    def v(t, x, y):
        return amplitude * xp.sin(2.0 * np.pi * frequency * t) + 0.0 * y

    return VelocityField(u, v, backend=backend, name="oscillating")


def double_gyre(
    A: float = 0.1,
    epsilon: float = 0.25,
    omega: float = 2.0 * np.pi / 10.0,
    backend: str = "python",
) -> VelocityField:
    """
    Time-periodic double gyre on [0, 2] x [0, 1].

    psi(t, x, y) = A * sin(pi * f(t, x)) * sin(pi * y),
    f(t, x) = a(t) x^2 + b(t) x,  a = eps sin(omega t),  b = 1 - 2 eps sin(omega t)
    """
    xp = _xp(backend)

    def _f(t, x):
        a = epsilon * xp.sin(omega * t)
        b = 1.0 - 2.0 * a
        return a * x * x + b * x, 2.0 * a * x + b

    def u(t, x, y):
        f, _ = _f(t, x)
        return -np.pi * A * xp.sin(np.pi * f) * xp.cos(np.pi * y)

    def v(t, x, y):
        f, dfdx = _f(t, x)
        return np.pi * A * xp.cos(np.pi * f) * xp.sin(np.pi * y) * dfdx

    return VelocityField(u, v, backend=backend, name="double_gyre")


FIELD_REGISTRY: Dict[str, Callable[..., VelocityField]] = {
    "uniform": uniform_flow,
    "rotation": solid_body_rotation,
    "shear": linear_shear,
    "oscillating": oscillating_flow,
    "double_gyre": double_gyre,
}


def available_fields():
    """Names accepted by get_field()."""
    return sorted(FIELD_REGISTRY)


def get_field(name: str, backend: str = "python", **params) -> VelocityField:
    """
    Build a named analytic field.

    Parameters
    ----------
    name : str
        One of available_fields()
    backend : str
        Evaluation backend passed to VelocityField
    **params
        Factory keyword arguments, e.g. ``omega=2.0``
    """
    key = name.lower()
    if key not in FIELD_REGISTRY:
        raise InvalidParameterError(f"Unknown field: {name}. Available: {available_fields()}")
    try:
        return FIELD_REGISTRY[key](backend=backend, **params)
    except TypeError as e:
        raise InvalidParameterError(f"Invalid parameters for field '{name}': {e}") from e
