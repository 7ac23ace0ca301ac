# flowmarch/fields/__init__.py
"""
Velocity fields for particle advection.

- VelocityField: pair of component callables u(t, x, y), v(t, x, y)
- Analytic fields: uniform, rotation, shear, oscillating, double gyre
"""

from .base import VelocityField, ComponentFn, BACKENDS, as_velocity_field
from .analytic import (
    uniform_flow,
    solid_body_rotation,
    linear_shear,
    oscillating_flow,
    double_gyre,
    available_fields,
    get_field,
)

__all__ = [
    "VelocityField",
    "ComponentFn",
    "BACKENDS",
    "as_velocity_field",
    "uniform_flow",
    "solid_body_rotation",
    "linear_shear",
    "oscillating_flow",
    "double_gyre",
    "available_fields",
    "get_field",
]
