# flowmarch/io/registry.py
"""
Export format registry with detection by file extension.
"""

import os
from typing import Any, Dict, List, Optional

from .hdf5_io import HDF5_AVAILABLE

# Registry of supported formats and their characteristics
_format_registry = {
    "json": {
        "extensions": [".json"],
        "description": "JSON document {t, parts: [{x, y}, ...]}",
        "available": True,
    },
    "hdf5": {
        "extensions": [".h5", ".hdf5"],
        "description": "HDF5 group with t, x, y datasets",
        "available": HDF5_AVAILABLE,
    },
}

DEFAULT_FORMAT = "json"

# File extension to format mapping
_extension_to_format = {}
for format_name, info in _format_registry.items():
    for ext in info["extensions"]:
        _extension_to_format[ext.lower()] = format_name


def list_supported_formats() -> List[str]:
    """Formats whose dependencies are installed."""
    return [name for name, info in _format_registry.items() if info["available"]]


def format_info(fmt: str) -> Dict[str, Any]:
    """Registry entry for one format."""
    if fmt not in _format_registry:
        raise ValueError(f"Unknown format '{fmt}'. Known formats: {list(_format_registry)}")
    return dict(_format_registry[fmt])


def detect_format(path, fmt: Optional[str] = None) -> str:
    """
    Resolve the export format.

    An explicit ``fmt`` wins; otherwise the extension decides, and unknown
    extensions fall back to JSON.
    """
    if fmt is not None:
        key = fmt.lower()
        if key == "h5":
            key = "hdf5"
        if key not in _format_registry:
            raise ValueError(f"Unknown format '{fmt}'. Known formats: {list(_format_registry)}")
        return key
    ext = os.path.splitext(str(path))[1].lower()
    return _extension_to_format.get(ext, DEFAULT_FORMAT)
