import numbers

import numpy as np

from fem1d.utilities.config import CONFIG
from fem1d.utilities.errors import DimensionMismatchError, InvalidArgumentError


def mesh_coordinates(x):
    """Node coordinates of a 1D mesh as a numpy array.

    Accepts any one-dimensional sequence (list, array, Vector, Mesh1D). The
    mesh needs at least two finite, strictly increasing nodes.
    """
    coords = np.asarray(x, dtype=CONFIG.scalar)
    if coords.ndim != 1:
        raise InvalidArgumentError(f"Mesh must be one-dimensional, got shape {coords.shape}")
    if coords.size < 2:
        raise InvalidArgumentError(f"Mesh needs at least 2 nodes, got {coords.size}")
    if not np.all(np.isfinite(coords)):
        raise InvalidArgumentError("Mesh coordinates must be finite")
    h = np.diff(coords)
    if np.any(h <= 0):
        i = int(np.argmax(h <= 0)) + 1
        raise InvalidArgumentError(
            f"Mesh must be strictly increasing: x[{i - 1}] = {coords[i - 1]}, x[{i}] = {coords[i]}"
        )
    return coords


def check_output(out, shape, check_zero=None):
    """Output buffers must have the mesh shape and, by default, be all zeros."""
    if check_zero is None:
        check_zero = CONFIG.check_zero
    out_shape = tuple(getattr(out, "shape", ()))
    if out_shape != tuple(shape):
        raise DimensionMismatchError(f"Output has shape {out_shape}, expected {tuple(shape)}")
    if check_zero and np.any(np.asarray(out)):
        raise InvalidArgumentError("Output must be zero-initialized before assembly")


def check_real(name, value):
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"{name} must be a real number, got {value!r}")
    if not np.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")


def check_robin(k0, kN):
    for name, k in (("k0", k0), ("kN", kN)):
        check_real(f"Robin coefficient {name}", k)
        if k < 0:
            raise InvalidArgumentError(f"Robin coefficient {name} must be non-negative, got {k}")
