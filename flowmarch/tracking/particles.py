# flowmarch/tracking/particles.py
"""
Particle position histories.

Each Particle owns growable x/y history buffers indexed by time step.
A ParticleSet is the ordered collection built from initial conditions;
Trajectory is a read-only (T, N, 2) snapshot taken after marching.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple, Union
import numpy as np

from ..errors import (
    InvalidParameterError,
    MismatchedInitialConditionsError,
    ParticleIndexError,
)

ArrayLike = Union[Sequence[float], np.ndarray, float]


def _as_ic_vector(values: ArrayLike, name: str) -> np.ndarray:
    """Initial-condition vector as a 1D float64 array."""
    try:
        arr = np.atleast_1d(np.asarray(values, dtype=np.float64))
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a sequence of numbers") from e
    if arr.ndim != 1:
        raise InvalidParameterError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidParameterError(f"{name} contains non-finite values")
    return arr


class Particle:
    """
    A single advected point with its position history.

    ``x[i]``/``y[i]`` is the position at time index ``i``. Histories start
    with one slot (the initial condition) and are resized to the time grid.
    """

    __slots__ = ("x", "y")

    def __init__(self, x0: float, y0: float, dtype=np.float64):
        self.x = np.array([x0], dtype=dtype)
        self.y = np.array([y0], dtype=dtype)

    def __len__(self) -> int:
        return self.x.shape[0]

    def __repr__(self) -> str:
        return f"Particle(x0={self.x[0]!r}, y0={self.y[0]!r}, length={len(self)})"

    def resize(self, length: int) -> None:
        """
        Conservative resize to ``length`` slots.

        Entries below ``length`` are kept and new slots are zero. Only a
        time grid reconfigured to fewer steps makes the history shorter.
        """
        current = self.x.shape[0]
        if length == current:
            return
        keep = min(current, length)
        new_x = np.zeros(length, dtype=self.x.dtype)
        new_y = np.zeros(length, dtype=self.y.dtype)
        new_x[:keep] = self.x[:keep]
        new_y[:keep] = self.y[:keep]
        self.x = new_x
        self.y = new_y

    @property
    def initial_position(self) -> Tuple[float, float]:
        return float(self.x[0]), float(self.y[0])

    @property
    def history(self) -> np.ndarray:
        """Copy of the full history, shape (L, 2)."""
        return np.stack([self.x, self.y], axis=1)


class ParticleSet:
    """
    Ordered collection of particles; list index is particle identity.

    Built in full from ``x0``/``y0`` before being returned, so a failed
    construction never leaves a partial set behind.
    """

    def __init__(self, particles: List[Particle]):
        self._particles = list(particles)

    @classmethod
    def initialize(cls, x0: ArrayLike, y0: ArrayLike, dtype=np.float64) -> "ParticleSet":
        """
        Create one particle per initial condition.

        Raises
        ------
        MismatchedInitialConditionsError
            If ``len(x0) != len(y0)``
        InvalidParameterError
            If an entry is not a finite number
        """
        xs = _as_ic_vector(x0, "x0")
        ys = _as_ic_vector(y0, "y0")
        if xs.shape[0] != ys.shape[0]:
            raise MismatchedInitialConditionsError(
                f"Mismatched initial condition vectors: len(x0)={xs.shape[0]}, len(y0)={ys.shape[0]}"
            )
        return cls([Particle(xi, yi, dtype=dtype) for xi, yi in zip(xs, ys)])

    def resize_to_step_count(self, step_count: int) -> None:
        """Resize every history to ``step_count + 1`` slots, keeping written entries."""
        for particle in self._particles:
            particle.resize(step_count + 1)

    # ---------- Container protocol ----------

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._particles)

    def __getitem__(self, n: int) -> Particle:
        return self._particles[self.check_index(n)]

    def check_index(self, n: int) -> int:
        """Validate a particle index; negative indices are not wrapped."""
        count = len(self._particles)
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or not 0 <= n < count:
            raise ParticleIndexError(f"Particle index {n} out of range [0, {count})")
        return int(n)

    # ---------- Column access used by the marchers ----------

    @property
    def buffer_length(self) -> int:
        return len(self._particles[0]) if self._particles else 0

    @property
    def dtype(self) -> np.dtype:
        """Precision of the history buffers."""
        return self._particles[0].x.dtype if self._particles else np.dtype(np.float64)

    def positions_at(self, i: int) -> Tuple[np.ndarray, np.ndarray]:
        """Positions of every particle at time index i, each shape (N,)."""
        n = len(self._particles)
        xs = np.fromiter((p.x[i] for p in self._particles), dtype=np.float64, count=n)
        ys = np.fromiter((p.y[i] for p in self._particles), dtype=np.float64, count=n)
        return xs, ys

    def write_step(self, i: int, xs: np.ndarray, ys: np.ndarray) -> None:
        """Store positions for time index i."""
        for p, particle in enumerate(self._particles):
            particle.x[i] = xs[p]
            particle.y[i] = ys[p]

    @property
    def initial_positions(self) -> np.ndarray:
        """Initial conditions, shape (N, 2)."""
        xs, ys = self.positions_at(0)
        return np.stack([xs, ys], axis=1)

    def as_arrays(self, length: int = None) -> Tuple[np.ndarray, np.ndarray]:
        """x and y histories stacked as (N, L) arrays, optionally truncated to ``length``."""
        if not self._particles:
            return np.zeros((0, 0)), np.zeros((0, 0))
        stop = self.buffer_length if length is None else length
        x = np.stack([p.x[:stop] for p in self._particles], axis=0)
        y = np.stack([p.y[:stop] for p in self._particles], axis=0)
        return x, y


@dataclass
class Trajectory:
    """
    Read-only snapshot of marched particle histories.

    Attributes
    ----------
    positions : np.ndarray
        Particle positions, shape (T, N, 2)
    times : np.ndarray
        Time points, shape (T,)
    metadata : dict
        Scheme, dt, tmax and timing information
    """
    positions: np.ndarray
    times: np.ndarray
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=np.float64)
        self.times = np.asarray(self.times, dtype=np.float64)
        if self.positions.ndim != 3 or self.positions.shape[2] != 2:
            raise ValueError(f"positions must have shape (T, N, 2), got {self.positions.shape}")
        self.T, self.N, _ = self.positions.shape
        if self.times.shape != (self.T,):
            raise ValueError(f"Times shape {self.times.shape} doesn't match trajectory length {self.T}")
        self.metadata.setdefault("format_version", "1.0")

    def __len__(self) -> int:
        return self.T

    @property
    def num_particles(self) -> int:
        return self.N

    @property
    def num_timesteps(self) -> int:
        return self.T

    @property
    def duration(self) -> float:
        """Total trajectory duration."""
        return float(self.times[-1] - self.times[0]) if self.T > 1 else 0.0

    def get_positions_at_time(self, t_idx: int) -> np.ndarray:
        """Positions at time index t_idx, shape (N, 2)."""
        if not 0 <= t_idx < self.T:
            raise IndexError(f"Time index {t_idx} out of range [0, {self.T})")
        return self.positions[t_idx].copy()

    def get_particle_trajectory(self, p_idx: int) -> Tuple[np.ndarray, np.ndarray]:
        """(positions (T, 2), times (T,)) for one particle."""
        if not 0 <= p_idx < self.N:
            raise ParticleIndexError(f"Particle index {p_idx} out of range [0, {self.N})")
        return self.positions[:, p_idx].copy(), self.times.copy()

    def compute_displacement(self) -> np.ndarray:
        """Straight-line distance from start to end, shape (N,)."""
        if self.T < 2:
            return np.zeros(self.N)
        return np.linalg.norm(self.positions[-1] - self.positions[0], axis=1)

    def compute_path_length(self) -> np.ndarray:
        """Sum of step lengths along each path, shape (N,)."""
        if self.T < 2:
            return np.zeros(self.N)
        steps = np.linalg.norm(np.diff(self.positions, axis=0), axis=2)
        return steps.sum(axis=0)

    def compute_speeds(self) -> np.ndarray:
        """Finite-difference speeds, shape (T-1, N)."""
        if self.T < 2:
            return np.zeros((0, self.N))
        dt = np.diff(self.times)[:, None]
        return np.linalg.norm(np.diff(self.positions, axis=0), axis=2) / dt

    @classmethod
    def from_particle_set(cls, particles: ParticleSet, times: np.ndarray, metadata=None) -> "Trajectory":
        """Snapshot of the first ``len(times)`` slots of every history."""
        T = len(times)
        if len(particles) == 0:
            positions = np.zeros((T, 0, 2))
        else:
            x, y = particles.as_arrays(length=T)       # (N, T)
            positions = np.stack([x.T, y.T], axis=2)    # (T, N, 2)
        return cls(positions=positions, times=np.array(times), metadata=dict(metadata or {}))

