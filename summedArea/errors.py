class SummedAreaTableError(Exception):
    """Base class of all summed area table faults."""


class RectangleOrderError(SummedAreaTableError, ValueError):
    """`from` lies right of or below `to`."""


class OutOfBoundsError(SummedAreaTableError, IndexError):
    """A coordinate lies outside the grid."""


class AccumulatorOverflowError(SummedAreaTableError, ArithmeticError):
    """An accumulated value wrapped around. Only possible with unsigned accumulators."""
