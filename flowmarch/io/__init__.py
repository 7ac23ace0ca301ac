# flowmarch/io/__init__.py
"""
flowmarch I/O: export and re-load of particle histories.

Main entry points:
- export_trajectories() - write time grid and histories (JSON or HDF5)
- load_trajectories() - read them back
"""

from typing import Any, Dict, Optional

import numpy as np

from ..errors import InvalidParameterError
from ..utils.config import get_config
from .registry import detect_format, list_supported_formats, format_info
from .json_io import build_document, write_json, read_json
from .hdf5_io import HDF5_AVAILABLE, write_hdf5, read_hdf5


def export_trajectories(
    path,
    times: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    fmt: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Write the time grid and per-particle histories.

    Parameters
    ----------
    path : str or Path
        Target file
    times : np.ndarray
        Time grid, shape (T,)
    x, y : np.ndarray
        Histories, shape (N, L)
    fmt : str, optional
        'json' or 'hdf5'; detected from the extension when omitted
    metadata : dict, optional
        Run information (stored by formats that support it)

    Returns
    -------
    str
        Path written
    """
    try:
        fmt = detect_format(path, fmt)
    except ValueError as e:
        raise InvalidParameterError(str(e)) from e

    if fmt == "hdf5":
        return write_hdf5(str(path), times, x, y, metadata=metadata)
    return write_json(path, times, x, y, indent=get_config().export_indent)


def load_trajectories(path, fmt: Optional[str] = None) -> Dict[str, Any]:
    """Read a file written by export_trajectories()."""
    try:
        fmt = detect_format(path, fmt)
    except ValueError as e:
        raise InvalidParameterError(str(e)) from e

    if fmt == "hdf5":
        return read_hdf5(str(path))
    return read_json(path)


__all__ = [
    "export_trajectories",
    "load_trajectories",
    "detect_format",
    "list_supported_formats",
    "format_info",
    "build_document",
    "write_json",
    "read_json",
    "write_hdf5",
    "read_hdf5",
    "HDF5_AVAILABLE",
]
