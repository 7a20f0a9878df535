import logging

import numpy as np

from ..errors import AccumulatorOverflowError, OutOfBoundsError, RectangleOrderError
from .source import ArraySource, as_source

__all__ = ["SummedAreaTable", "accumulator_dtype", "build", "build_full"]

logger = logging.getLogger(__name__)


def accumulator_dtype(dtype):
    """
    Pick the accumulator type for source values of `dtype`.

    bool and signed integers accumulate in int64, unsigned integers in uint64, floats in
    float64 (or wider), complex in complex128 (or wider). Everything else accumulates as
    Python objects, using the value type's own `+` and `-`.
    """
    dtype = np.dtype(dtype)
    if dtype.kind in "bi":
        return np.dtype(np.int64)
    if dtype.kind == "u":
        return np.dtype(np.uint64)
    if dtype.kind == "f":
        return np.promote_types(dtype, np.float64)
    if dtype.kind == "c":
        return np.promote_types(dtype, np.complex128)
    return np.dtype(object)


def _to_scalar(value):
    return value.item() if isinstance(value, np.generic) else value


def _check_rect(from_, to, width, height):
    (x1, y1), (x2, y2) = from_, to
    if not (x1 <= x2 and y1 <= y2):
        logger.debug("rejecting rectangle (%s/%s)..(%s/%s): wrong point order", x1, y1, x2, y2)
        raise RectangleOrderError("`from` ({}/{}) must not be right of or below `to` ({}/{})".format(x1, y1, x2, y2))
    if not (0 <= x1 and 0 <= y1 and x2 < width and y2 < height):
        logger.debug("rejecting rectangle (%s/%s)..(%s/%s): out of bounds", x1, y1, x2, y2)
        raise OutOfBoundsError(
            "`from` ({}/{}) or `to` ({}/{}) not within table bounds [(0/0)..({}/{})]".format(
                x1, y1, x2, y2, width - 1, height - 1
            )
        )


class SummedAreaTable:
    """
    Summed area table (integral image) over a source grid or a sub-rectangle of it.

    Cell [row, col] of `table` holds the sum of all source values in rows [0..row] and
    columns [0..col] of the covered rectangle. All query points are (x, y) tuples, x being
    the column and y the row, in the table's own coordinates: when built over a
    sub-rectangle, (0, 0) is the sub-rectangle's top-left corner.

    The table is immutable after construction and keeps no reference to its source.

    Parameters
    ----------
    source : SummedAreaTableSource or (H, W) array_like
        Data source.
    from_, to : (x, y) tuples, optional
        Top-left and bottom-right corner (both inclusive) of the rectangle to cover.
        Defaults to the whole source.
    dtype : numpy dtype, optional
        Accumulator type. Derived from the source values by `accumulator_dtype` if omitted.
    check : bool
        Validate rectangle order, bounds and unsigned wrap-around. On by default.
    """

    def __init__(self, source, from_=None, to=None, dtype=None, check=True):
        source = as_source(source)
        if from_ is None:
            from_ = (0, 0)
        if to is None:
            to = (source.width() - 1, source.height() - 1)
        from_, to = tuple(from_), tuple(to)
        if check:
            _check_rect(from_, to, source.width(), source.height())

        mat = np.asarray(source.values(from_, to))
        self.dtype = accumulator_dtype(mat.dtype) if dtype is None else np.dtype(dtype)
        self.check = check
        logger.debug(
            "building %dx%d summed area table over (%s/%s)..(%s/%s), accumulator %s",
            mat.shape[1], mat.shape[0], from_[0], from_[1], to[0], to[1], self.dtype,
        )
        self.table = self.__compute_prefix_sum(mat)

    @classmethod
    def from_array(cls, mat, **kwargs):
        """Build a table over the whole of a row-major 2D array."""
        return cls(ArraySource(mat), **kwargs)

    def __compute_prefix_sum(self, mat):
        # cumulative sum down the rows, then along the columns
        prefix_sum = np.cumsum(np.cumsum(mat, axis=0, dtype=self.dtype), axis=1, dtype=self.dtype)

        if self.check and self.dtype.kind == "u":
            if not (np.all(prefix_sum[1:, :] >= prefix_sum[:-1, :]) and np.all(prefix_sum[:, 1:] >= prefix_sum[:, :-1])):
                raise AccumulatorOverflowError("accumulated values wrapped around {}".format(self.dtype))

        prefix_sum.flags.writeable = False
        return prefix_sum

    def width(self):
        return self.table.shape[1]

    def height(self):
        return self.table.shape[0]

    @property
    def shape(self):
        return self.table.shape

    def _unsigned(self):
        return self.check and self.dtype.kind == "u"

    def get_sum(self, from_, to):
        """
        Sum over the rectangle from `from_` (top-left) to `to` (bottom-right), both inclusive.

        Raises RectangleOrderError if `from_` is right of or below `to`, OutOfBoundsError if a
        point lies outside the table, and AccumulatorOverflowError if an unsigned accumulator
        wrapped around.
        """
        x1, y1 = from_
        x2, y2 = to
        if self.check:
            _check_rect((x1, y1), (x2, y2), self.width(), self.height())

        table = self.table
        total = table[y2, x2]
        if x1 > 0 and y1 > 0:
            total = total + table[y1 - 1, x1 - 1]
        if x1 > 0:
            temp = table[y2, x1 - 1]
            if self._unsigned() and temp > total:
                raise AccumulatorOverflowError(
                    "Overflow-Alarm 1: p1({}/{}) p2({}/{}) temp({}) sum({})".format(x1, y1, x2, y2, temp, total)
                )
            total = total - temp
        if y1 > 0:
            temp = table[y1 - 1, x2]
            if self._unsigned() and temp > total:
                raise AccumulatorOverflowError(
                    "Overflow-Alarm 2: p1({}/{}) p2({}/{}) temp({}) sum({})".format(x1, y1, x2, y2, temp, total)
                )
            total = total - temp
        return _to_scalar(total)

    def getSum(self, x1, y1, x2, y2):
        """
        Sum of the sub-matrix from (x1, y1) to (x2, y2), corners inclusive.

        x is the column, y the row.
        """
        return self.get_sum((x1, y1), (x2, y2))

    def get_sums(self, x1, y1, x2, y2):
        """
        Vectorized get_sum.

        Args:
            x1, y1, x2, y2 (array_like): corner coordinates, broadcast against each other

        Returns:
            numpy.ndarray: rectangle sums in the broadcast shape, in the accumulator dtype
        """
        x1, y1, x2, y2 = np.broadcast_arrays(*(np.asarray(a, dtype=np.intp) for a in (x1, y1, x2, y2)))
        if self.check:
            bad = (x1 > x2) | (y1 > y2)
            if np.any(bad):
                i = tuple(np.argwhere(bad)[0])
                raise RectangleOrderError(
                    "`from` ({}/{}) must not be right of or below `to` ({}/{})".format(x1[i], y1[i], x2[i], y2[i])
                )
            bad = (x1 < 0) | (y1 < 0) | (x2 >= self.width()) | (y2 >= self.height())
            if np.any(bad):
                i = tuple(np.argwhere(bad)[0])
                raise OutOfBoundsError(
                    "`from` ({}/{}) or `to` ({}/{}) not within table bounds [(0/0)..({}/{})]".format(
                        x1[i], y1[i], x2[i], y2[i], self.width() - 1, self.height() - 1
                    )
                )

        table = self.table
        zero = np.zeros((), dtype=table.dtype)
        # index -1 wraps to the last row/column, those lanes are masked out
        total = table[y2, x2] + np.where((x1 > 0) & (y1 > 0), table[y1 - 1, x1 - 1], zero)
        for n, temp in enumerate((np.where(x1 > 0, table[y2, x1 - 1], zero), np.where(y1 > 0, table[y1 - 1, x2], zero)), 1):
            if self._unsigned() and np.any(temp > total):
                raise AccumulatorOverflowError("Overflow-Alarm {}: subtrahend exceeds running sum".format(n))
            total = total - temp
        return total

    def get_average(self, from_, to):
        """Average over the rectangle from `from_` to `to`, both inclusive. Always floating point."""
        total = self.get_sum(from_, to)
        data_count = self.get_data_count(from_, to)
        if isinstance(total, complex):
            return total / data_count
        return float(total) / data_count

    def get_data_count(self, from_, to):
        """Number of data points in the rectangle from `from_` to `to`."""
        (x1, y1), (x2, y2) = from_, to
        if self.check:
            _check_rect((x1, y1), (x2, y2), self.width(), self.height())
        return (x2 - x1 + 1) * (y2 - y1 + 1)

    def _full(self):
        return (0, 0), (self.width() - 1, self.height() - 1)

    def get_overall_sum(self):
        return self.get_sum(*self._full())

    def get_overall_average(self):
        return self.get_average(*self._full())

    def get_overall_data_count(self):
        return self.width() * self.height()

    def __repr__(self):
        return "SummedAreaTable(width={}, height={}, dtype={})".format(self.width(), self.height(), self.dtype)


def build(source, from_, to, **kwargs):
    """Build a summed area table over the rectangle [from_, to] of `source`."""
    return SummedAreaTable(source, from_, to, **kwargs)


def build_full(source, **kwargs):
    """Build a summed area table over the whole of `source`."""
    return SummedAreaTable(source, **kwargs)
