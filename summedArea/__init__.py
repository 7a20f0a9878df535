"""
Summed area tables (integral images): constant time sum, average and count queries
over axis-aligned rectangles of a 2D grid.
"""

from summedArea.errors import AccumulatorOverflowError, OutOfBoundsError, RectangleOrderError, SummedAreaTableError
from summedArea.basis import (
    ArraySource,
    FlatSource,
    SummedAreaTable,
    SummedAreaTableSource,
    accumulator_dtype,
    as_source,
    build,
    build_full,
)
from summedArea.util import reshape_to_source, vec_to_source
from summedArea.filter import box_mean, box_sum, cross_mean

__version__ = "0.1.0"

__all__ = [
    "SummedAreaTableSource",
    "ArraySource",
    "FlatSource",
    "as_source",
    "SummedAreaTable",
    "accumulator_dtype",
    "build",
    "build_full",
    "vec_to_source",
    "reshape_to_source",
    "box_sum",
    "box_mean",
    "cross_mean",
    "SummedAreaTableError",
    "RectangleOrderError",
    "OutOfBoundsError",
    "AccumulatorOverflowError",
]
