"""
Visualization utilities for flowmarch.

- static: Matplotlib-based plots of 2D particle paths and snapshots
"""

from .static import (
    MPL_AVAILABLE,
    plot_particles_2d,
    plot_trajectories_2d,
    plot_trajectory_frame,
)

__all__ = [
    "MPL_AVAILABLE",
    "plot_particles_2d",
    "plot_trajectories_2d",
    "plot_trajectory_frame",
]
