import numpy as np
import pytest

from hetnet_scenario.components.scenario import GridLayout
from hetnet_scenario.components.topology import TopologyBuilder
from hetnet_scenario.errors import ConfigurationError


def make_builder(max_x=100000.0, max_y=100000.0, **grid):
    return TopologyBuilder(max_x, max_y, GridLayout(**grid))


def test_reference_grid():
    positions = make_builder().build(10)
    assert positions.shape == (11, 3)
    np.testing.assert_allclose(positions[0], [50000, 50000, 3])
    np.testing.assert_allclose(positions[1], [20000, 20000, 3])
    np.testing.assert_allclose(positions[2], [50000, 20000, 3])
    np.testing.assert_allclose(positions[3], [80000, 20000, 3])
    np.testing.assert_allclose(positions[4], [20000, 50000, 3])
    np.testing.assert_allclose(positions[10], [20000, 110000, 3])


@pytest.mark.parametrize('n', [1, 2, 5, 10, 17])
def test_anchor_at_area_centre(n):
    positions = make_builder(max_x=60000, max_y=40000).build(n)
    assert len(positions) == n + 1
    np.testing.assert_allclose(positions[0], [30000, 20000, 3])


def test_custom_grid_formula():
    builder = make_builder(row_width=4, spacing=1000, origin_x=100, origin_y=200, height=10)
    positions = builder.small_cell_positions(9)
    for i, xyz in enumerate(positions):
        assert xyz[0] == 100 + (i % 4) * 1000
        assert xyz[1] == 200 + (i // 4) * 1000
        assert xyz[2] == 10


def test_build_is_pure():
    a = make_builder().build(12)
    b = make_builder().build(12)
    assert np.array_equal(a, b)


@pytest.mark.parametrize('n', range(1, 25))
def test_small_cells_are_distinct(n):
    positions = make_builder().small_cell_positions(n)
    assert len(np.unique(positions, axis=0)) == n


@pytest.mark.parametrize('n', range(1, 5))
def test_all_positions_distinct_before_grid_reaches_centre(n):
    positions = make_builder().build(n)
    assert len(np.unique(positions, axis=0)) == n + 1


def test_overlap_with_anchor_is_reported():
    builder = make_builder()
    assert builder.overlaps_anchor(4).tolist() == []
    assert builder.overlaps_anchor(10).tolist() == [4]


def test_zero_small_cells_leaves_only_anchor():
    positions = make_builder().build(0)
    assert positions.shape == (1, 3)


@pytest.mark.parametrize('kwargs', [
    dict(max_x=0),
    dict(max_y=-5),
    dict(row_width=0),
    dict(spacing=0),
])
def test_invalid_layout_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        make_builder(**kwargs)


def test_negative_count_rejected():
    with pytest.raises(ConfigurationError):
        make_builder().build(-1)
