# flowmarch/tracking/__init__.py
"""
Particle tracking: time grid, particle histories and the time-marching tracker.

Main Components:
- TimeGrid: uniform time sequence derived from (dt, tmax)
- Particle / ParticleSet: per-particle x/y history buffers
- Trajectory: (T, N, 2) snapshot of marched histories
- ParticleTracker: setters, Euler / Adams-Bashforth marching, report and export
"""

from .time_grid import TimeGrid
from .particles import Particle, ParticleSet, Trajectory
from .tracker import ParticleTracker, TrackerOptions
from .analysis import (
    analyze_trajectory_results,
    compute_trajectory_statistics,
    validate_trajectory_data,
    compare_schemes,
)

__all__ = [
    "TimeGrid",
    "Particle",
    "ParticleSet",
    "Trajectory",
    "ParticleTracker",
    "TrackerOptions",
    "analyze_trajectory_results",
    "compute_trajectory_statistics",
    "validate_trajectory_data",
    "compare_schemes",
]
