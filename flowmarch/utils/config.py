# flowmarch/utils/config.py
"""
Global package configuration.

Provides centralized defaults for buffer precision, finite-value checking,
progress display and memory limits used by the tracker and exporters.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Any
import warnings
import psutil

from .jax_utils import JAX_AVAILABLE


_VALID_DTYPES = ("float32", "float64")


@dataclass
class PackageConfig:
    """
    Global configuration for flowmarch.

    Controls history buffer precision, numerical safety checks, console
    output and the memory budget for trajectory buffers.
    """
    # Data type settings
    dtype: str = "float64"              # 'float32' | 'float64'

    # Numerical safety
    check_finite: bool = True           # Raise on NaN/Inf velocity samples

    # Scheme used by ParticleTracker.march() when none is given
    default_scheme: str = "euler"

    # Progress and monitoring
    show_progress: bool = False
    verbose: bool = False

    # Memory management
    memory_limit_gb: float = 2.0

    # Export settings
    export_indent: int = 4

    _system_memory_gb: float = field(init=False, default=0.0)

    def __post_init__(self):
        self._detect_system_resources()
        self._validate_config()

    def _detect_system_resources(self):
        """Detect available system memory."""
        try:
            self._system_memory_gb = psutil.virtual_memory().total / (1024**3)
        except Exception:
            self._system_memory_gb = 8.0  # Conservative default

    def _validate_config(self):
        """Validate configuration settings."""
        if self.dtype not in _VALID_DTYPES:
            raise ValueError(f"dtype must be 'float32' or 'float64', got '{self.dtype}'")

        if self.export_indent < 0:
            raise ValueError(f"export_indent must be non-negative, got {self.export_indent}")

        # Auto-adjust memory limit if needed
        if self.memory_limit_gb <= 0:
            self.memory_limit_gb = max(self._system_memory_gb * 0.5, 1.0)

        if self.memory_limit_gb > self._system_memory_gb * 0.8:
            warnings.warn(
                f"Memory limit {self.memory_limit_gb}GB exceeds 80% of system memory "
                f"{self._system_memory_gb:.1f}GB"
            )

    # ---------- Configuration methods ----------

    def set_dtype(self, dtype: str) -> None:
        """Set history buffer precision."""
        if dtype not in _VALID_DTYPES:
            raise ValueError("dtype must be 'float32' or 'float64'")
        self.dtype = dtype

    def set_memory_limit(self, limit_gb: float) -> None:
        """Set memory usage limit."""
        if limit_gb <= 0:
            raise ValueError("Memory limit must be positive")
        self.memory_limit_gb = limit_gb

    # ---------- Utility methods ----------

    def estimate_buffer_memory_gb(self, n_particles: int, step_count: int) -> float:
        """Memory needed for x and y histories of every particle (step_count + 1 slots)."""
        bytes_per_element = 8 if self.dtype == "float64" else 4
        total = 2 * n_particles * (step_count + 1) * bytes_per_element
        return total / (1024**3)

    def get_system_info(self) -> Dict[str, Any]:
        """Get system resource information."""
        return {
            "system_memory_gb": self._system_memory_gb,
            "jax_available": JAX_AVAILABLE,
            "current_config": {
                "dtype": self.dtype,
                "check_finite": self.check_finite,
                "default_scheme": self.default_scheme,
                "memory_limit_gb": self.memory_limit_gb,
            },
        }


# Global configuration instance
_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Configure package settings.

    Parameters
    ----------
    **kwargs : dict
        Configuration parameters to update

    The updated configuration is built and validated before it replaces
    the current one, so a ValueError leaves the settings unchanged.
    """
    global _global_config
    settable = {f.name for f in fields(PackageConfig) if f.init}
    known = {}
    for key, value in kwargs.items():
        if key in settable:
            known[key] = value
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")

    _global_config = replace(_global_config, **known)


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()
