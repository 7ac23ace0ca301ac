# flowmarch/io/json_io.py
"""
JSON export of particle histories.

Document layout::

    {
        "t": [t_0, ..., t_{T-1}],
        "parts": [
            {"x": [...], "y": [...]},
            ...
        ]
    }

One "parts" entry per particle, in particle index order.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Union
import numpy as np

from ..errors import TrajectoryExportError

PathLike = Union[str, Path]


def build_document(times: np.ndarray, x: np.ndarray, y: np.ndarray) -> Dict[str, Any]:
    """
    Assemble the JSON document.

    Parameters
    ----------
    times : np.ndarray
        Time points, shape (T,)
    x, y : np.ndarray
        Position histories, shape (N, L)
    """
    return {
        "t": np.asarray(times, dtype=np.float64).tolist(),
        "parts": [
            {"x": np.asarray(xn, dtype=np.float64).tolist(),
             "y": np.asarray(yn, dtype=np.float64).tolist()}
            for xn, yn in zip(x, y)
        ],
    }


def write_json(path: PathLike, times: np.ndarray, x: np.ndarray, y: np.ndarray, indent: int = 4) -> str:
    """
    Write histories to ``path`` with human-readable indentation.

    The document is serialized before the file is opened, so a failure
    never leaves a truncated file behind.
    """
    text = json.dumps(build_document(times, x, y), indent=indent)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
    except OSError as e:
        raise TrajectoryExportError(f"Cannot write trajectory file {path}: {e}") from e
    return str(path)


def read_json(path: PathLike) -> Dict[str, Any]:
    """
    Read a document written by write_json().

    Returns
    -------
    dict
        {"t": ndarray (T,), "x": [ndarray, ...], "y": [ndarray, ...]}
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = json.load(f)
    except OSError as e:
        raise TrajectoryExportError(f"Cannot read trajectory file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TrajectoryExportError(f"Malformed trajectory file {path}: {e}") from e

    if not isinstance(doc, dict) or "t" not in doc or "parts" not in doc:
        raise TrajectoryExportError(f"Trajectory file {path} lacks 't' and 'parts' entries")

    try:
        parts = doc["parts"]
        return {
            "t": np.asarray(doc["t"], dtype=np.float64),
            "x": [np.asarray(p["x"], dtype=np.float64) for p in parts],
            "y": [np.asarray(p["y"], dtype=np.float64) for p in parts],
        }
    except (KeyError, TypeError, ValueError) as e:
        raise TrajectoryExportError(f"Malformed particle entry in {path}: {e}") from e
