import numpy as np

from .basis import ArraySource, FlatSource

__all__ = ["vec_to_source", "reshape_to_source"]


def vec_to_source(vec):
    """
    Turn a flat sequence into a single-column source: width 1, height len(vec).

    Args:
        vec (N,): values

    Returns:
        ArraySource: element (0, i) is vec[i]
    """
    return ArraySource(np.reshape(np.asarray(vec), (-1, 1)))


def reshape_to_source(vec, width):
    """Lay a flat sequence out row by row, `width` values per row."""
    return FlatSource(np.ravel(np.asarray(vec)), width)
