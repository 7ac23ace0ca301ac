# flowmarch/tracking/tracker.py
"""
Particle tracker: time-marches independent particles through a 2D velocity field.

- Setters for time grid, initial conditions and velocity field, callable in any order
- History buffers sized once both the time grid and initial conditions are known
- Explicit Euler and Adams-Bashforth-2 marching through the scheme registry
- Optional tqdm / single-line progress and cooperative cancellation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Dict, Any, TextIO
import numpy as np
import warnings

from ..errors import (
    InvalidParameterError,
    MarchCancelledError,
    NotInitializedError,
    NumericalFailureError,
)
from ..fields.base import VelocityField, as_velocity_field
from ..integrators import canonical_scheme_name, get_scheme
from ..utils.config import get_config
from ..utils.logging import Timer, create_progress_callback
from .particles import ParticleSet, Trajectory
from .time_grid import TimeGrid

# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@dataclass
class TrackerOptions:
    """
    Configuration options for a ParticleTracker.

    Fields left as None take their value from the package configuration
    (see flowmarch.configure) at the time they are used.
    """
    # Numerical safety
    check_finite: Optional[bool] = None   # Raise NumericalFailureError on NaN/Inf

    # History buffer precision: 'float32' | 'float64'
    dtype: Optional[str] = None

    # Progress monitoring
    progress_callback: Optional[Callable[[float], Optional[bool]]] = None
    progress_style: Optional[str] = None  # "auto" | "tqdm" | "simple" | "none"
    progress_desc: str = "Marching"

    verbose: Optional[bool] = None

    def resolved(self, key: str):
        value = getattr(self, key)
        if value is not None:
            return value
        config = get_config()
        if key == "progress_style":
            return "auto" if config.show_progress else "none"
        return getattr(config, key)

# ---------------------------------------------------------------------------
# Particle Tracker
# ---------------------------------------------------------------------------

class ParticleTracker:
    """
    Time-marching analysis of independent particles in a velocity field.

    Holds the time grid, the particle set and a reference to the velocity
    field for one analysis run. Construction with every argument yields a
    tracker ready to march; otherwise use the setters in any order.

    Parameters
    ----------
    dt, tmax : float, optional
        Time step and horizon
    x0, y0 : sequence of float, optional
        Initial particle positions
    u, v : callable, optional
        Velocity components ``f(t, x, y) -> float``. ``u`` may also be a
        VelocityField, in which case ``v`` is omitted.
    options : TrackerOptions, optional
    backend : str
        Evaluation backend used when u/v are plain callables
    """

    def __init__(
        self,
        dt: Optional[float] = None,
        tmax: Optional[float] = None,
        x0=None,
        y0=None,
        u=None,
        v=None,
        options: Optional[TrackerOptions] = None,
        backend: str = "python",
    ):
        self.options = options if options is not None else TrackerOptions()
        self.backend = backend

        self._time_grid: Optional[TimeGrid] = None
        self._particles: Optional[ParticleSet] = None
        self._field: Optional[VelocityField] = None

        # Readiness flags; the buffers are sized when both are True
        self._time_set = False
        self._ics_set = False

        self._last_scheme: Optional[str] = None
        self._last_elapsed: Optional[float] = None

        if dt is not None or tmax is not None:
            self.set_time(dt, tmax)
        if x0 is not None or y0 is not None:
            self.set_initial_conditions(x0, y0)
        if u is not None:
            self.set_velocity_field(u, v)

    @classmethod
    def from_field(cls, dt: float, tmax: float, x0, y0, field: VelocityField,
                   options: Optional[TrackerOptions] = None) -> "ParticleTracker":
        """Tracker built from a ready-made VelocityField."""
        return cls(dt, tmax, x0, y0, field, options=options)

    # ------------------------ Setup ------------------------

    def set_time(self, dt: float, tmax: float) -> None:
        """
        Configure the time grid.

        The grid is validated and built before being installed, so an
        InvalidParameterError leaves the previous configuration in place.
        """
        if dt is None or tmax is None:
            raise InvalidParameterError("Both dt and tmax are required")
        grid = TimeGrid.configure(dt, tmax)
        self._time_grid = grid
        self._time_set = True
        self._resize_if_ready()

    def set_initial_conditions(self, x0, y0) -> None:
        """
        Configure one particle per (x0[n], y0[n]).

        Raises MismatchedInitialConditionsError when the vectors differ in
        length; the previous particle set is then left untouched.
        """
        if x0 is None or y0 is None:
            raise InvalidParameterError("Both x0 and y0 are required")
        particles = ParticleSet.initialize(x0, y0, dtype=np.dtype(self.options.resolved("dtype")))
        self._particles = particles
        self._ics_set = True
        self._resize_if_ready()

    def set_velocity_field(self, u, v=None) -> None:
        """Set the velocity components, or a VelocityField when ``v`` is omitted."""
        self._field = as_velocity_field(u, v, backend=self.backend)

    def _resize_if_ready(self) -> None:
        """Grow particle histories once both time grid and initial conditions are set."""
        if not (self._time_set and self._ics_set):
            return
        step_count = self._time_grid.step_count
        needed_gb = get_config().estimate_buffer_memory_gb(len(self._particles), step_count)
        if needed_gb > get_config().memory_limit_gb:
            warnings.warn(
                f"Trajectory buffers need {needed_gb:.2f}GB, above the configured "
                f"limit of {get_config().memory_limit_gb:.2f}GB"
            )
        self._particles.resize_to_step_count(step_count)

    # ------------------------ Properties ------------------------

    @property
    def time_grid(self) -> Optional[TimeGrid]:
        return self._time_grid

    @property
    def particles(self) -> Optional[ParticleSet]:
        return self._particles

    @property
    def field(self) -> Optional[VelocityField]:
        return self._field

    @property
    def times(self) -> np.ndarray:
        self._require_ready(need_field=False)
        return self._time_grid.times

    @property
    def dt(self) -> float:
        self._require_ready(need_field=False)
        return self._time_grid.dt

    @property
    def step_count(self) -> int:
        self._require_ready(need_field=False)
        return self._time_grid.step_count

    @property
    def num_particles(self) -> int:
        return len(self._particles) if self._particles is not None else 0

    @property
    def is_ready(self) -> bool:
        """True when marching can start."""
        return self._time_set and self._ics_set and self._field is not None

    @property
    def last_scheme(self) -> Optional[str]:
        return self._last_scheme

    def _require_ready(self, need_field: bool = True) -> None:
        missing = []
        if not self._time_set:
            missing.append("time grid (set_time)")
        if not self._ics_set:
            missing.append("initial conditions (set_initial_conditions)")
        if need_field and self._field is None:
            missing.append("velocity field (set_velocity_field)")
        if missing:
            raise NotInitializedError("Tracker not initialized; missing " + ", ".join(missing))

    # ------------------------ Progress ------------------------

    def _make_progress(self, total: int):
        """
        Create a progress reporter.

        Returns a tuple (update_fn(i), close_fn()).
        """
        style = (self.options.resolved("progress_style") or "none").lower()
        desc = self.options.progress_desc

        if style == "none":
            return (lambda i: None), (lambda: None)

        if style in ("auto", "tqdm"):
            try:
                from tqdm import tqdm  # type: ignore
                bar = tqdm(total=total, desc=desc, leave=True)
                return (lambda i: bar.update(1)), bar.close
            except ImportError:
                if style == "tqdm":
                    warnings.warn("tqdm not installed; using simple progress output")

        callback = create_progress_callback(desc, update_every=max(total // 20, 1), show_rate=False)
        return (lambda i: callback(i + 1, total)), (lambda: None)

    # ------------------------ Marching ------------------------

    def march(self, scheme: Optional[str] = None) -> None:
        """
        Fill every particle history through index ``step_count``.

        Parameters
        ----------
        scheme : str, optional
            'euler' or 'ab2' (aliases accepted); defaults to the configured
            default scheme.

        Re-running recomputes all buffers from index 0, giving the same
        result for the same inputs.
        """
        name = canonical_scheme_name(scheme or get_config().default_scheme)
        self._require_ready()
        self._run(name)

    def march_euler(self) -> None:
        """Explicit Euler marching."""
        self.march("euler")

    def march_adams_bashforth(self) -> None:
        """Two-step Adams-Bashforth marching, first step by Euler."""
        self.march("ab2")

    def _evaluate(self, i: int, t: float, xs: np.ndarray, ys: np.ndarray):
        try:
            us, vs = self._field.evaluate(t, xs, ys)
        except NumericalFailureError as e:
            e.step, e.time = i, t
            raise
        except Exception as e:
            raise NumericalFailureError(
                f"Velocity evaluation failed at step {i} (t={t}): {e}", step=i, time=t
            ) from e

        if self.options.resolved("check_finite"):
            bad = ~(np.isfinite(us) & np.isfinite(vs))
            if bad.any():
                p = int(np.flatnonzero(bad)[0])
                raise NumericalFailureError(
                    f"Non-finite velocity ({us[p]}, {vs[p]}) for particle {p} at step {i} (t={t})",
                    step=i, time=t, particle=p,
                )
        return us, vs

    def _run(self, name: str) -> None:
        grid = self._time_grid
        particles = self._particles
        times, dt = grid.times, grid.dt
        total = grid.step_count

        scheme = get_scheme(name)
        scheme.reset(len(particles))
        check_finite = self.options.resolved("check_finite")
        callback = self.options.progress_callback

        update, close = self._make_progress(total)
        verbose = bool(self.options.resolved("verbose"))
        timer = Timer(f"march[{name}]", track_memory=verbose, verbose=verbose)
        timer.start()
        try:
            for i in range(total):
                t = float(times[i])
                xs, ys = particles.positions_at(i)
                us, vs = self._evaluate(i, t, xs, ys)
                x_next, y_next = scheme.advance(i, xs, ys, us, vs, dt)

                if check_finite:
                    self._check_positions(i, t, x_next, y_next, particles.dtype)

                particles.write_step(i + 1, x_next, y_next)
                update(i)

                if callback is not None and callback((i + 1) / total) is False:
                    raise MarchCancelledError(
                        f"Marching cancelled after {i + 1} of {total} steps", completed_steps=i + 1
                    )
        finally:
            close()
            self._last_elapsed = timer.stop()

        if timer.verbose:
            timer.report()
        self._last_scheme = name

    @staticmethod
    def _check_positions(i, t, x_next, y_next, dtype) -> None:
        """Raise if a new position is not finite once stored at buffer precision."""
        with np.errstate(over="ignore"):
            xs = np.asarray(x_next).astype(dtype)
            ys = np.asarray(y_next).astype(dtype)
        bad = ~(np.isfinite(xs) & np.isfinite(ys))
        if bad.any():
            p = int(np.flatnonzero(bad)[0])
            raise NumericalFailureError(
                f"Position of particle {p} overflowed {np.dtype(dtype).name} at step {i} (t={t})",
                step=i, time=t, particle=p,
            )

    # ------------------------ Output ------------------------

    def trajectory(self) -> Trajectory:
        """Snapshot of the histories on the time grid (trailing slot excluded)."""
        self._require_ready(need_field=False)
        return Trajectory.from_particle_set(self._particles, self._time_grid.times, metadata=self.summary())

    def print_trajectory(self, n: int, stream: Optional[TextIO] = None) -> None:
        """
        Print (t, x, y) rows of particle ``n`` to ``stream`` (stdout by default).

        Raises NotInitializedError before setup and ParticleIndexError for
        an index outside [0, num_particles).
        """
        from ..utils.reporting import print_trajectory

        self._require_ready(need_field=False)
        particle = self._particles[n]
        print_trajectory(self._time_grid.times, particle.x, particle.y, stream=stream)

    def export_to_file(self, path, fmt: Optional[str] = None) -> str:
        """
        Write the time grid and every particle's full history to ``path``.

        JSON by default; ``.h5``/``.hdf5`` paths (or ``fmt='hdf5'``) use HDF5.
        Raises TrajectoryExportError when the target cannot be written.
        """
        from ..io import export_trajectories

        self._require_ready(need_field=False)
        x, y = self._particles.as_arrays()
        return export_trajectories(
            path,
            times=self._time_grid.times,
            x=x,
            y=y,
            fmt=fmt,
            metadata=self.summary(),
        )

    def summary(self) -> Dict[str, Any]:
        """Configuration and last-run information."""
        info: Dict[str, Any] = {
            "scheme": self._last_scheme,
            "num_particles": self.num_particles,
            "field": self._field.name if self._field is not None else None,
            "backend": self._field.backend if self._field is not None else self.backend,
        }
        if self._time_grid is not None:
            info.update({
                "dt": self._time_grid.dt,
                "tmax": self._time_grid.tmax,
                "step_count": self._time_grid.step_count,
            })
        if self._last_elapsed is not None:
            info["elapsed_s"] = self._last_elapsed
        return info

    def __repr__(self) -> str:
        grid = self._time_grid
        grid_txt = f"dt={grid.dt}, tmax={grid.tmax}, steps={grid.step_count}" if grid else "no time grid"
        return f"ParticleTracker({grid_txt}, particles={self.num_particles}, scheme={self._last_scheme})"


__all__ = [
    "ParticleTracker",
    "TrackerOptions",
]
