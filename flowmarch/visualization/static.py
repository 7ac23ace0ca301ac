# flowmarch/visualization/static.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple, Any
import numpy as np

try:
    import matplotlib.pyplot as plt
    MPL_AVAILABLE = True
except Exception:
    MPL_AVAILABLE = False

Bounds = Tuple[Tuple[float, float], Tuple[float, float]]


def _ensure_mpl():
    if not MPL_AVAILABLE:
        raise RuntimeError("Matplotlib is required (pip install matplotlib)")


def _as_positions(trajectory: Any) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """(T, N, 2) positions and optional times from a Trajectory or array."""
    if hasattr(trajectory, "positions") and hasattr(trajectory, "times"):
        return np.asarray(trajectory.positions), np.asarray(trajectory.times)
    arr = np.asarray(trajectory)
    if arr.ndim != 3 or arr.shape[-1] != 2:
        raise ValueError("positions must be (T,N,2)")
    return arr, None


def _infer_bounds(points2d: np.ndarray, margin: float = 0.05) -> Bounds:
    xmin, ymin = np.min(points2d, axis=0)
    xmax, ymax = np.max(points2d, axis=0)
    dx = (xmax - xmin) * margin or margin
    dy = (ymax - ymin) * margin or margin
    return (xmin - dx, xmax + dx), (ymin - dy, ymax + dy)


def plot_particles_2d(
    positions,
    bounds: Optional[Bounds] = None,
    color=None,
    s: float = 12.0,
    alpha: float = 0.9,
    title: Optional[str] = None,
    equal: bool = True,
    ax=None,
    show: bool = False,
    save_path: Optional[str] = None,
):
    """
    Scatter plot of one set of particle positions.

    positions: (N,2)
    bounds: ((xmin,xmax),(ymin,ymax)) or None to infer
    """
    _ensure_mpl()
    pts = np.asarray(positions)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("positions must have shape (N,2)")

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5), dpi=120)
    else:
        fig = ax.figure

    ax.scatter(pts[:, 0], pts[:, 1], c=color, s=s, alpha=alpha, edgecolors="none")
    ax.set_xlabel("x"); ax.set_ylabel("y")
    if pts.shape[0]:
        (xmin, xmax), (ymin, ymax) = bounds if bounds is not None else _infer_bounds(pts)
        ax.set_xlim(xmin, xmax); ax.set_ylim(ymin, ymax)
    if equal:
        ax.set_aspect("equal", adjustable="box")
    if title:
        ax.set_title(title)
    fig.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    return fig, ax


def plot_trajectories_2d(
    trajectory,
    particles: Optional[Sequence[int]] = None,
    show_markers: bool = True,
    linewidth: float = 1.2,
    title: Optional[str] = None,
    equal: bool = True,
    ax=None,
    show: bool = False,
    save_path: Optional[str] = None,
):
    """
    Plot particle paths in the x-y plane.

    trajectory: Trajectory or (T,N,2) array
    particles: indices to draw; all particles when None
    show_markers: mark start (circle) and end (cross) of each path
    """
    _ensure_mpl()
    positions, times = _as_positions(trajectory)
    T, N, _ = positions.shape
    indices = range(N) if particles is None else list(particles)

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5), dpi=120)
    else:
        fig = ax.figure

    for n in indices:
        path = positions[:, n, :]
        line, = ax.plot(path[:, 0], path[:, 1], linewidth=linewidth, label=f"particle {n}")
        if show_markers and T:
            ax.plot(path[0, 0], path[0, 1], "o", color=line.get_color(), markersize=4)
            ax.plot(path[-1, 0], path[-1, 1], "x", color=line.get_color(), markersize=5)

    ax.set_xlabel("x"); ax.set_ylabel("y")
    if equal:
        ax.set_aspect("equal", adjustable="datalim")
    if title is None and times is not None and times.size:
        title = f"Trajectories, t in [{times[0]:.3g}, {times[-1]:.3g}]"
    if title:
        ax.set_title(title)
    if len(indices) <= 10:
        ax.legend(fontsize="small")
    fig.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    return fig, ax


def plot_trajectory_frame(trajectory, frame_index: int = -1, **kwargs):
    """
    Plot particle positions at one time index of a trajectory.

    kwargs: forwarded to plot_particles_2d
    """
    positions, times = _as_positions(trajectory)
    T = positions.shape[0]
    fi = (T - 1) if frame_index == -1 else int(frame_index)
    fi = max(0, min(fi, T - 1))
    title = kwargs.pop("title", None)
    if title is None:
        title = f"Particles at frame {fi}" + (f", t={float(times[fi]):.4f}" if times is not None else "")
    return plot_particles_2d(positions[fi], title=title, **kwargs)
