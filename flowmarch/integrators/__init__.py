"""
flowmarch integrators

Explicit time-marching schemes for particle advection. Each scheme follows
the Scheme protocol:

    scheme.reset(n_particles)
    x_next, y_next = scheme.advance(i, x, y, u, v, dt)

where x, y, u, v are (N,) arrays indexed by particle.
"""

from typing import Callable, Dict, List

from .base import Scheme
from .euler import euler_step, ExplicitEuler
from .adams_bashforth import ab2_step, AdamsBashforth2
from ..errors import InvalidParameterError

SCHEMES: Dict[str, Callable[[], Scheme]] = {
    "euler": ExplicitEuler,
    "ab2": AdamsBashforth2,
}

_ALIASES = {
    "ee": "euler",
    "explicit_euler": "euler",
    "forward_euler": "euler",
    "ab": "ab2",
    "adams_bashforth": "ab2",
}


def available_schemes() -> List[str]:
    """Canonical scheme names."""
    return sorted(SCHEMES)


def canonical_scheme_name(name: str) -> str:
    """Resolve aliases such as 'ee' or 'adams_bashforth'."""
    key = str(name).lower().replace("-", "_")
    key = _ALIASES.get(key, key)
    if key not in SCHEMES:
        raise InvalidParameterError(f"Unknown scheme: {name}. Available: {available_schemes()}")
    return key


def get_scheme(name: str) -> Scheme:
    """Fresh scheme instance by (alias-aware) name."""
    return SCHEMES[canonical_scheme_name(name)]()


__all__ = [
    "Scheme",
    "euler_step",
    "ab2_step",
    "ExplicitEuler",
    "AdamsBashforth2",
    "SCHEMES",
    "available_schemes",
    "canonical_scheme_name",
    "get_scheme",
]
