import abc

import numpy as np

__all__ = ["SummedAreaTableSource", "ArraySource", "FlatSource", "as_source"]


class SummedAreaTableSource(abc.ABC):
    """
    Read-only view over a 2D grid of numeric values, used as data source for a summed area table.

    Element access is by (x, y), x being the column and y the row. The element type must
    support addition, subtraction and a zero; the table promotes it to its accumulator type.
    Accessing a coordinate outside [0, width) x [0, height) is a contract violation; the
    sources in this module raise IndexError for it.
    """

    @abc.abstractmethod
    def width(self):
        """Number of columns, fixed and positive."""

    @abc.abstractmethod
    def height(self):
        """Number of rows, fixed and positive."""

    @abc.abstractmethod
    def at(self, x, y):
        """Value in column `x`, row `y`."""

    @property
    def shape(self):
        return self.height(), self.width()

    def values(self, from_=None, to=None):
        """
        Return the rectangle [from_, to] (both inclusive, (x, y) tuples) as a 2D array
        indexed [row, col]. Defaults to the whole grid.

        Subclasses backed by an array should override this with slicing.
        """
        (x1, y1), (x2, y2) = self._rect(from_, to)
        return np.array([[self.at(x, y) for x in range(x1, x2 + 1)] for y in range(y1, y2 + 1)])

    def _rect(self, from_, to):
        if from_ is None:
            from_ = (0, 0)
        if to is None:
            to = (self.width() - 1, self.height() - 1)
        return tuple(from_), tuple(to)

    def _check_point(self, x, y):
        if not (0 <= x < self.width() and 0 <= y < self.height()):
            raise IndexError(
                "({}/{}) not within source bounds [(0/0)..({}/{})]".format(x, y, self.width() - 1, self.height() - 1)
            )


class ArraySource(SummedAreaTableSource):
    """
    Dense 2D source, row-major: `data[y][x]` is the element at (x, y).

    Parameters
    ----------
    data : (H, W) array_like
        Grid of values. Nested lists are converted with numpy.asarray.
    """

    def __init__(self, data):
        data = np.asarray(data)
        if data.ndim != 2:
            raise ValueError("ArraySource requires a 2D array, got shape {}".format(data.shape))
        if data.size == 0:
            raise ValueError("ArraySource requires a non-empty grid, got shape {}".format(data.shape))
        self.data = data

    def width(self):
        return self.data.shape[1]

    def height(self):
        return self.data.shape[0]

    def at(self, x, y):
        self._check_point(x, y)
        return self.data[y, x]

    def values(self, from_=None, to=None):
        (x1, y1), (x2, y2) = self._rect(from_, to)
        return self.data[y1 : y2 + 1, x1 : x2 + 1]

    def __repr__(self):
        return "ArraySource(width={}, height={}, dtype={})".format(self.width(), self.height(), self.data.dtype)


class FlatSource(SummedAreaTableSource):
    """
    Flat 1D buffer with an explicit row width. Element (x, y) is `buffer[y * width + x]`.

    Args:
        buffer (N,): values, N must be a positive multiple of `width`
        width (int): number of columns
    """

    def __init__(self, buffer, width):
        buffer = np.asarray(buffer)
        if buffer.ndim != 1:
            raise ValueError("FlatSource requires a 1D buffer, got shape {}".format(buffer.shape))
        if int(width) <= 0:
            raise ValueError("width must be positive, got {}".format(width))
        width = int(width)
        if buffer.size == 0 or buffer.size % width != 0:
            raise ValueError("buffer length {} is not a positive multiple of width {}".format(buffer.size, width))
        self.buffer = buffer
        self._width = width

    def width(self):
        return self._width

    def height(self):
        return self.buffer.size // self._width

    def at(self, x, y):
        self._check_point(x, y)
        return self.buffer[y * self._width + x]

    def values(self, from_=None, to=None):
        (x1, y1), (x2, y2) = self._rect(from_, to)
        grid = self.buffer.reshape(self.height(), self._width)
        return grid[y1 : y2 + 1, x1 : x2 + 1]

    def __repr__(self):
        return "FlatSource(width={}, height={}, dtype={})".format(self.width(), self.height(), self.buffer.dtype)


def as_source(obj):
    """Wrap `obj` as a source. Sources pass through, 2D arrays and nested lists become an ArraySource."""
    if isinstance(obj, SummedAreaTableSource):
        return obj
    if isinstance(obj, (np.ndarray, list, tuple)):
        return ArraySource(obj)
    raise TypeError("cannot use {} as summed area table source".format(type(obj).__name__))
