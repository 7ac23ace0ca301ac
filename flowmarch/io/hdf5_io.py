# flowmarch/io/hdf5_io.py
"""
HDF5 export of particle histories.

Layout (group ``trajectories`` by default):

- ``t``: time points, shape (T,)
- ``x``, ``y``: position histories, shape (N, L), chunked and compressed
- group attrs: ``num_particles``, ``buffer_length``, ``format_version`` and
  any scalar run metadata (dt, tmax, step_count, scheme, ...)
"""

from __future__ import annotations
import warnings
from typing import Any, Dict, Optional
import numpy as np

from ..errors import TrajectoryExportError

try:
    import h5py
    HDF5_AVAILABLE = True
except Exception:
    HDF5_AVAILABLE = False


def _require_h5py():
    if not HDF5_AVAILABLE:
        raise RuntimeError("h5py not available; install h5py to use HDF5 export")


def write_hdf5(
    path: str,
    times: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    metadata: Optional[Dict[str, Any]] = None,
    group: str = "trajectories",
    compression: Optional[str] = "gzip",
    compression_opts: int = 4,
) -> str:
    """
    Write particle histories to an HDF5 file.

    Parameters
    ----------
    path : str
        Output filename
    times : np.ndarray
        Time values, shape (T,)
    x, y : np.ndarray
        Position histories, shape (N, L)
    metadata : dict, optional
        Scalar run information stored as group attributes; None values are skipped
    group : str
        HDF5 group name for trajectory data
    compression : str, optional
        Compression algorithm ('gzip', 'lzf')
    compression_opts : int
        Compression level (0-9 for gzip)

    Returns
    -------
    str
        Path to written file
    """
    _require_h5py()

    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape or x.ndim != 2:
        raise ValueError(f"x and y must share an (N, L) shape, got {x.shape} and {y.shape}")
    N, L = x.shape

    # Chunk by particle rows; empty datasets cannot be chunked
    chunks = (max(1, min(N, 1024)), max(1, L)) if N and L else None
    opts = dict(chunks=chunks, compression=compression, compression_opts=compression_opts) if chunks else {}
    if compression != "gzip":
        opts.pop("compression_opts", None)

    try:
        with h5py.File(path, "w") as f:
            grp = f.require_group(group)
            grp.create_dataset("t", data=np.asarray(times, dtype=np.float64))
            grp.create_dataset("x", data=x, **opts)
            grp.create_dataset("y", data=y, **opts)

            grp.attrs["num_particles"] = N
            grp.attrs["buffer_length"] = L
            grp.attrs["format_version"] = "1.0"
            for key, value in (metadata or {}).items():
                if value is None:
                    continue
                if isinstance(value, (str, int, float, bool, np.number)):
                    grp.attrs[key] = value
                else:
                    warnings.warn(f"Skipping non-scalar metadata '{key}' in HDF5 export")
    except OSError as e:
        raise TrajectoryExportError(f"Cannot write HDF5 file {path}: {e}") from e

    return str(path)


def read_hdf5(path: str, group: str = "trajectories") -> Dict[str, Any]:
    """
    Read histories written by write_hdf5().

    Returns
    -------
    dict
        {"t": ndarray, "x": [ndarray...], "y": [ndarray...], "attrs": dict}
    """
    _require_h5py()
    try:
        with h5py.File(path, "r") as f:
            if group not in f:
                raise TrajectoryExportError(f"Group '{group}' not found in {path}")
            grp = f[group]
            t = np.asarray(grp["t"][...], dtype=np.float64)
            x = np.asarray(grp["x"][...], dtype=np.float64)
            y = np.asarray(grp["y"][...], dtype=np.float64)
            attrs = {k: (v.item() if hasattr(v, "item") else v) for k, v in grp.attrs.items()}
    except TrajectoryExportError:
        raise
    except KeyError as e:
        raise TrajectoryExportError(f"Malformed HDF5 trajectory file {path}: {e}") from e
    except OSError as e:
        raise TrajectoryExportError(f"Cannot read HDF5 file {path}: {e}") from e

    return {"t": t, "x": list(x), "y": list(y), "attrs": attrs}
