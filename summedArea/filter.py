import numpy as np
from summedArea.basis import SummedAreaTable

__all__ = ["box_sum", "box_mean", "cross_mean"]


def _as_matrix(mat):
    mat = np.asarray(mat)
    if mat.ndim != 2:
        raise ValueError("input must be a 2D array, got shape {}".format(mat.shape))
    return mat


def _pair(value, name):
    value = np.broadcast_to(np.asarray(value, dtype=int), (2,))
    if np.any(value < 0):
        raise ValueError("{} must be non-negative, got {}".format(name, tuple(value)))
    return int(value[0]), int(value[1])


def _windows(shape, halfX, halfY):
    rows, cols = shape
    y, x = np.indices((rows, cols))
    x1 = np.clip(x - halfX, 0, cols - 1)
    x2 = np.clip(x + halfX, 0, cols - 1)
    y1 = np.clip(y - halfY, 0, rows - 1)
    y2 = np.clip(y + halfY, 0, rows - 1)
    return x1, y1, x2, y2


def box_sum(mat, half_window):
    """
    Sum of the window around every cell, clipped at the grid border.

    Parameters
    ----------
    mat : (H, W) array_like
        Input grid.
    half_window : int or (hx, hy)
        The window spans 2*hx+1 columns and 2*hy+1 rows centered on the cell.

    Returns
    -------
    (H, W) ndarray
        Window sums in the accumulator dtype of `mat`.
    """
    mat = _as_matrix(mat)
    halfX, halfY = _pair(half_window, "half_window")
    sat = SummedAreaTable.from_array(mat)
    return sat.get_sums(*_windows(mat.shape, halfX, halfY))


def box_mean(mat, half_window):
    """Mean of the window around every cell. Border windows average over the cells they actually cover."""
    mat = _as_matrix(mat)
    halfX, halfY = _pair(half_window, "half_window")
    sat = SummedAreaTable.from_array(mat)
    x1, y1, x2, y2 = _windows(mat.shape, halfX, halfY)
    counts = (x2 - x1 + 1) * (y2 - y1 + 1)
    return sat.get_sums(x1, y1, x2, y2) / counts


def cross_mean(mat, numTrain, numGuard):
    """
    Noise level from cross-shaped training cells, the grid wrapped at its borders.

    For every cell, the four training strips above, below, left and right of it, each
    beyond `numGuard` guard cells, are averaged and the largest mean is kept.

    Args:
        mat (M,N): input grid
        numTrain: training cells along (rows, cols)
        numGuard: guard cells along (rows, cols)

    Returns:
        numpy.ndarray: (M,N) noise level
    """
    mat = _as_matrix(mat)
    rows, cols = mat.shape
    numTrainY, numTrainX = _pair(numTrain, "numTrain")
    numGuardY, numGuardX = _pair(numGuard, "numGuard")
    padY = numTrainY + numGuardY
    padX = numTrainX + numGuardX

    padded_mat = np.pad(mat, ((padY, padY), (padX, padX)), mode="wrap")
    sat = SummedAreaTable.from_array(padded_mat)

    y, x = np.indices((rows, cols))
    y = y + padY
    x = x + padX

    # (dx1, dy1, dx2, dy2, cells) relative to the center: up, down, left, right
    areas = [
        (0, -padY, 0, -numGuardY - 1, numTrainY),
        (0, numGuardY + 1, 0, padY, numTrainY),
        (-padX, 0, -numGuardX - 1, 0, numTrainX),
        (numGuardX + 1, 0, padX, 0, numTrainX),
    ]

    means = []
    for dx1, dy1, dx2, dy2, num_cells in areas:
        if num_cells == 0:
            means.append(np.zeros(mat.shape))
        else:
            means.append(sat.get_sums(x + dx1, y + dy1, x + dx2, y + dy2) / num_cells)

    return np.max(means, axis=0)
