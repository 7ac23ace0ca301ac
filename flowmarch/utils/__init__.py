# flowmarch/utils/__init__.py
"""
Utilities for flowmarch.

Contains:
- jax_utils: JAX availability guard, jit/vmap helpers
- config: package-wide defaults (precision, finite checks, progress)
- logging: timers, memory monitoring, progress tracking
- reporting: trajectory printing and summary reports
"""

from .jax_utils import (
    JAX_AVAILABLE,
    enable_x64,
    maybe_jit,
    maybe_vmap,
)

from .config import (
    PackageConfig,
    configure,
    get_config,
    reset_config,
)

from .logging import (
    Timer,
    timeit,
    memory_info,
    create_progress_callback,
)

from .reporting import (
    format_trajectory,
    print_trajectory,
    generate_summary_report,
)

__all__ = [
    # jax_utils
    "JAX_AVAILABLE",
    "enable_x64",
    "maybe_jit",
    "maybe_vmap",
    # config
    "PackageConfig",
    "configure",
    "get_config",
    "reset_config",
    # logging
    "Timer",
    "timeit",
    "memory_info",
    "create_progress_callback",
    # reporting
    "format_trajectory",
    "print_trajectory",
    "generate_summary_report",
]
