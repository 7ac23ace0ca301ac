"""
flowmarch: explicit time marching of particles through 2D velocity fields.

A small package for Lagrangian transport analysis with:
- Uniform time grids derived from (dt, tmax)
- Per-particle position histories
- Explicit Euler and two-step Adams-Bashforth schemes
- Optional JAX evaluation of analytic velocity fields with NumPy fallbacks
- Fixed-width trajectory printing and JSON / HDF5 export

Core workflow:
1. Pick a velocity field -> VelocityField / get_field
2. Configure the tracker -> ParticleTracker(dt, tmax, x0, y0, u, v)
3. March -> tracker.march("euler" | "ab2")
4. Report -> tracker.print_trajectory(n), tracker.export_to_file(path)
"""

from __future__ import annotations

# Version info
__version__ = "0.1.0"
__author__ = "flowmarch Contributors"

__all__ = [
    # Version
    "__version__",
    # Utilities - JAX availability check
    "JAX_AVAILABLE",
    # Errors
    "FlowMarchError",
    "InvalidParameterError",
    "MismatchedInitialConditionsError",
    "NotInitializedError",
    "ParticleIndexError",
    "TrajectoryExportError",
    "MarchCancelledError",
    "NumericalFailureError",
    # Fields
    "VelocityField",
    "as_velocity_field",
    "available_fields",
    "get_field",
    # Integrators
    "euler_step",
    "ab2_step",
    "available_schemes",
    "get_scheme",
    # Tracking
    "TimeGrid",
    "Particle",
    "ParticleSet",
    "Trajectory",
    "ParticleTracker",
    "TrackerOptions",
    # Analysis
    "analyze_trajectory_results",
    "compare_schemes",
    # I/O
    "export_trajectories",
    "load_trajectories",
    # Reporting
    "print_trajectory",
    "generate_summary_report",
    # Configuration
    "configure",
    "get_config",
    "reset_config",
]

from .utils.jax_utils import JAX_AVAILABLE  # noqa: F401

from .errors import (  # noqa: F401
    FlowMarchError,
    InvalidParameterError,
    MismatchedInitialConditionsError,
    NotInitializedError,
    ParticleIndexError,
    TrajectoryExportError,
    MarchCancelledError,
    NumericalFailureError,
)

from .fields import VelocityField, as_velocity_field, available_fields, get_field  # noqa: F401
from .integrators import euler_step, ab2_step, available_schemes, get_scheme  # noqa: F401

from .tracking import (  # noqa: F401
    TimeGrid,
    Particle,
    ParticleSet,
    Trajectory,
    ParticleTracker,
    TrackerOptions,
    analyze_trajectory_results,
    compare_schemes,
)

from .io import export_trajectories, load_trajectories  # noqa: F401
from .utils.reporting import print_trajectory, generate_summary_report  # noqa: F401
from .utils.config import configure, get_config, reset_config  # noqa: F401

# Visualization - matplotlib is optional
try:
    from .visualization.static import (
        plot_particles_2d,  # noqa: F401
        plot_trajectories_2d,  # noqa: F401
    )
    __all__.extend(["plot_particles_2d", "plot_trajectories_2d"])
except Exception:
    pass
