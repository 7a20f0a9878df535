import numpy as np
import pytest

from summedArea import ArraySource, SummedAreaTable, build_full

SHAPES = [(1, 1), (1, 7), (6, 1), (9, 13), (32, 17)]


def random_rects(rng, shape, n=50):
    rows, cols = shape
    xs = np.sort(rng.integers(0, cols, size=(n, 2)), axis=1)
    ys = np.sort(rng.integers(0, rows, size=(n, 2)), axis=1)
    return [((x1, y1), (x2, y2)) for (x1, x2), (y1, y2) in zip(xs, ys)]


@pytest.mark.parametrize("shape", SHAPES)
def test_zero_source(shape):
    rng = np.random.default_rng(0)
    table = build_full(ArraySource(np.zeros(shape, dtype=int)))
    for from_, to in random_rects(rng, shape):
        assert table.get_sum(from_, to) == 0


@pytest.mark.parametrize("shape", SHAPES)
@pytest.mark.parametrize("k", [1, 3, -2])
def test_constant_fill(shape, k):
    rng = np.random.default_rng(1)
    table = build_full(ArraySource(np.full(shape, k)))
    for from_, to in random_rects(rng, shape):
        assert table.get_sum(from_, to) == k * table.get_data_count(from_, to)


@pytest.mark.parametrize("shape", [s for s in SHAPES if s[0] > 1 and s[1] > 1])
def test_quadrants_add_up(shape):
    rng = np.random.default_rng(2)
    rows, cols = shape
    table = SummedAreaTable.from_array(rng.integers(-50, 50, size=shape))
    for _ in range(20):
        px = int(rng.integers(1, cols))
        py = int(rng.integers(1, rows))
        quadrants = [
            table.get_sum((0, 0), (px - 1, py - 1)),
            table.get_sum((px, 0), (cols - 1, py - 1)),
            table.get_sum((0, py), (px - 1, rows - 1)),
            table.get_sum((px, py), (cols - 1, rows - 1)),
        ]
        assert sum(quadrants) == table.get_overall_sum()


@pytest.mark.parametrize("shape", SHAPES)
def test_single_cell(shape):
    rng = np.random.default_rng(3)
    src = ArraySource(rng.normal(size=shape))
    table = build_full(src)
    for y in range(src.height()):
        for x in range(src.width()):
            assert table.get_sum((x, y), (x, y)) == pytest.approx(src.at(x, y), abs=1e-9)


@pytest.mark.parametrize("shape", SHAPES)
def test_prefix_sums_are_monotonic_for_non_negative_values(shape):
    rng = np.random.default_rng(4)
    rows, cols = shape
    table = SummedAreaTable.from_array(rng.integers(0, 10, size=shape, dtype=np.uint16))
    prefix = np.array([[table.get_sum((0, 0), (x, y)) for x in range(cols)] for y in range(rows)])
    assert np.all(np.diff(prefix, axis=0) >= 0)
    assert np.all(np.diff(prefix, axis=1) >= 0)


@pytest.mark.parametrize("shape", SHAPES)
def test_sums_match_brute_force(shape):
    rng = np.random.default_rng(5)
    mat = rng.integers(-100, 100, size=shape)
    table = SummedAreaTable.from_array(mat)
    for (x1, y1), (x2, y2) in random_rects(rng, shape):
        assert table.get_sum((x1, y1), (x2, y2)) == mat[y1 : y2 + 1, x1 : x2 + 1].sum()
        assert table.get_average((x1, y1), (x2, y2)) == pytest.approx(mat[y1 : y2 + 1, x1 : x2 + 1].mean())
