# flowmarch/utils/jax_utils.py
from __future__ import annotations
from typing import Callable, Optional, Sequence, Tuple, Union

try:
    import jax
    import jax.numpy as jnp
    from jax import jit as _jit, vmap as _vmap
    JAX_AVAILABLE = True
except Exception:
    JAX_AVAILABLE = False
    jax = None  # type: ignore
    jnp = None  # type: ignore

import numpy as np


def enable_x64() -> None:
    """Switch JAX to double precision so results match the NumPy path."""
    if JAX_AVAILABLE:
        jax.config.update("jax_enable_x64", True)


def maybe_jit(fn: Callable, enable: bool = True, static_argnums: Optional[Sequence[int]] = None):
    """
    JIT-wrap `fn` with JAX when available and enabled; otherwise return `fn` unchanged.
    """
    if JAX_AVAILABLE and enable:
        return _jit(fn, static_argnums=static_argnums)
    return fn


def maybe_vmap(fn: Callable, in_axes: Union[int, None, Tuple] = 0, out_axes=0):
    """
    vmap-wrap `fn` with JAX when available; otherwise return a NumPy loop.

    The fallback honours per-argument ``in_axes`` given as a tuple, where
    ``None`` marks an argument broadcast unchanged to every call.
    """
    if JAX_AVAILABLE:
        return _vmap(fn, in_axes=in_axes, out_axes=out_axes)

    def _fallback(*args):
        axes = in_axes if isinstance(in_axes, tuple) else (in_axes,) * len(args)
        mapped = [a for a, ax in zip(args, axes) if ax is not None]
        if not mapped:
            return fn(*args)
        B = np.shape(mapped[0])[0]
        outs = []
        for i in range(B):
            slice_args = [a if ax is None else a[i] for a, ax in zip(args, axes)]
            outs.append(fn(*slice_args))
        # Tuple outputs are stacked per component, as vmap does
        if outs and isinstance(outs[0], tuple):
            return tuple(np.stack([np.asarray(o[k]) for o in outs], axis=0) for k in range(len(outs[0])))
        return np.stack([np.asarray(o) for o in outs], axis=0)
    return _fallback
