"""Array helpers shared by the distributions and the log-density reduction.

Arrays in this package align on their LEADING axes: the intrinsic axes of a
variable come first and any sample axes trail. Before handing arrays to numpy
(which aligns on trailing axes) they are padded with trailing singleton axes.
"""

from typing import Any

import numpy as np

from ._errors import ShapeMismatchError


def pad_trailing(x: Any, ndim: int) -> Any:
    """Append singleton axes to `x` until it has `ndim` dimensions."""
    missing = ndim - np.ndim(x)
    if missing <= 0:
        return x
    return np.reshape(x, np.shape(x) + (1,) * missing)


def align_leading(*arrays: Any) -> tuple[Any, ...]:
    """Pad all arrays to a common number of dimensions so they broadcast on leading axes.

    Raises:
        ShapeMismatchError: If the padded shapes are not broadcast compatible.

    """
    ndim = max((np.ndim(x) for x in arrays), default=0)
    padded = tuple(pad_trailing(x, ndim) for x in arrays)
    broadcast_shape(*(np.shape(x) for x in padded))
    return padded


def broadcast_shape(*shapes: tuple[int, ...]) -> tuple[int, ...]:
    """Broadcast shapes that already share their number of dimensions."""
    try:
        return np.broadcast_shapes(*shapes)
    except ValueError:
        raise ShapeMismatchError(*shapes) from None


def leading_broadcast_shape(*shapes: tuple[int, ...]) -> tuple[int, ...]:
    """Broadcast shapes aligned on their leading axes, e.g. (3,) and (3, 4) give (3, 4)."""
    ndim = max((len(s) for s in shapes), default=0)
    return broadcast_shape(*(tuple(s) + (1,) * (ndim - len(s)) for s in shapes))


def sum_leading(x: Any, ndims: int) -> Any:
    """Sum over the first `ndims` axes, keeping the trailing sample axes."""
    if ndims == 0:
        return x
    return np.sum(x, axis=tuple(range(ndims)))


def insert_axes(x: Any, at: int, count: int) -> Any:
    """Insert `count` singleton axes before axis `at`."""
    if count <= 0:
        return x
    shape = np.shape(x)
    return np.reshape(x, shape[:at] + (1,) * count + shape[at:])


def add_logdensity(a: Any, b: Any) -> Any:
    """Add two log-density contributions elementwise over their sample axes.

    Scalars are additive identities with respect to shape, so a graph mixing
    scalar and batched contributions reduces to the batched shape.

    Raises:
        ShapeMismatchError: If the sample shapes differ.

    """
    try:
        return np.add(a, b)
    except ValueError:
        raise ShapeMismatchError(np.shape(a), np.shape(b)) from None
