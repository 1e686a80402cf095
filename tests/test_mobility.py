import numpy as np
import pytest

from hetnet_scenario.components.cell import AnchorCell, SmallCell
from hetnet_scenario.components.mobility import (
    MobilityConfigurator,
    MobilityEngine,
    MobilityProfile,
    MotionModel,
    Rectangle,
)
from hetnet_scenario.components.scenario import MobilityConfig
from hetnet_scenario.components.ue import Terminal
from hetnet_scenario.errors import CollaboratorFailure, ConfigurationError
from hetnet_scenario.simulator import Simulator
from hetnet_scenario.utils.helpers import reflect_into_range


AREA = Rectangle(0.0, 100000.0, 0.0, 100000.0)


def terminals(n, first=0):
    return [Terminal(first + k) for k in range(n)]


@pytest.mark.parametrize('value,expected', [
    (5.0, (5.0, False)),
    (12.0, (8.0, True)),
    (-3.0, (3.0, True)),
    (25.0, (5.0, False)),
    (10.0, (10.0, False)),
])
def test_reflect_into_range(value, expected):
    assert reflect_into_range(value, 0.0, 10.0) == pytest.approx(expected)


def test_initial_positions_inside_area(mobility_engine, rng):
    configurator = MobilityConfigurator(mobility_engine, AREA, MobilityConfig(), rng)
    positions = configurator.configure_terminals(terminals(200))
    assert len(positions) == 200
    for xyz in positions:
        assert AREA.contains(xyz)
        assert xyz[2] == 1.5


def test_draw_order_is_x_then_y_per_terminal(mobility_engine):
    configurator = MobilityConfigurator(mobility_engine, AREA, MobilityConfig(), np.random.default_rng(9))
    positions = configurator.configure_terminals(terminals(5))
    reference = np.random.default_rng(9)
    for xyz in positions:
        assert xyz[0] == reference.uniform(0.0, 100000.0)
        assert xyz[1] == reference.uniform(0.0, 100000.0)


def test_same_seed_same_positions():
    runs = []
    for _ in range(2):
        sim = Simulator()
        rng = np.random.default_rng(42)
        configurator = MobilityConfigurator(MobilityEngine(sim, rng), AREA, MobilityConfig(), rng)
        runs.append(configurator.configure_terminals(terminals(20)))
    np.testing.assert_array_equal(np.array(runs[0]), np.array(runs[1]))


def test_terminals_get_bounded_random_walk(mobility_engine, rng):
    configurator = MobilityConfigurator(mobility_engine, AREA, MobilityConfig(min_speed=2, max_speed=3), rng)
    ts = terminals(3)
    configurator.configure_terminals(ts)
    profile = mobility_engine.get_profile(ts[0])
    assert profile.kind is MotionModel.RANDOM_WALK
    assert profile.speed_range == (2, 3)
    assert profile.bounds == AREA


def test_cells_are_static(sim, mobility_engine, rng):
    configurator = MobilityConfigurator(mobility_engine, AREA, MobilityConfig(), rng)
    cells = [AnchorCell(0), SmallCell(1)]
    positions = np.array([[50000.0, 50000.0, 3.0], [20000.0, 20000.0, 3.0]])
    configurator.configure_cells(cells, positions)
    sim.run_for(100.0)
    for cell, xyz in zip(cells, positions):
        assert mobility_engine.get_profile(cell).kind is MotionModel.STATIC
        np.testing.assert_array_equal(mobility_engine.get_position(cell), xyz)


def test_cell_position_count_must_match(mobility_engine, rng):
    configurator = MobilityConfigurator(mobility_engine, AREA, MobilityConfig(), rng)
    with pytest.raises(ConfigurationError):
        configurator.configure_cells([SmallCell(0)], np.zeros((2, 3)))


def test_static_terminal_model(sim, mobility_engine, rng):
    config = MobilityConfig(model=MotionModel.STATIC)
    configurator = MobilityConfigurator(mobility_engine, AREA, config, rng)
    ts = terminals(4)
    start = configurator.configure_terminals(ts)
    sim.run_for(50.0)
    for t, xyz in zip(ts, start):
        np.testing.assert_array_equal(mobility_engine.get_position(t), xyz)


def test_walker_never_leaves_small_area(sim, rng):
    engine = MobilityEngine(sim, rng, step_distance=30.0)
    area = Rectangle(0.0, 100.0, 0.0, 50.0)
    configurator = MobilityConfigurator(engine, area, MobilityConfig(), rng)
    ts = terminals(25)
    start = configurator.configure_terminals(ts)
    moved = False
    for _ in range(200):
        sim.run_for(1.0)
        for t, xyz0 in zip(ts, start):
            xyz = engine.get_position(t)
            assert area.contains(xyz)
            assert xyz[2] == 1.5
            moved = moved or not np.allclose(xyz, xyz0)
    assert moved


def test_walk_speed_within_range(sim, rng):
    engine = MobilityEngine(sim, rng, step_distance=30.0)
    profile = MobilityProfile(MotionModel.RANDOM_WALK, (5.0, 10.0), AREA)
    t = Terminal(0)
    start = np.array([50000.0, 50000.0, 1.5])
    engine.set_random_walk(t, start, profile)
    # legs last at least 3 s at 10 m/s, so the first second is one straight leg
    sim.run_for(1.0)
    travelled = np.linalg.norm(engine.get_position(t) - start)
    assert 5.0 - 1e-9 <= travelled <= 10.0 + 1e-9


def test_no_walk_draws_before_run(sim, rng):
    engine = MobilityEngine(sim, rng)
    state = rng.bit_generator.state
    engine.set_random_walk(Terminal(0), [1.0, 1.0, 1.5], MobilityProfile(MotionModel.RANDOM_WALK, (5.0, 10.0), AREA))
    assert rng.bit_generator.state == state


def test_walk_start_outside_bounds_rejected(mobility_engine):
    profile = MobilityProfile(MotionModel.RANDOM_WALK, (5.0, 10.0), AREA)
    with pytest.raises(CollaboratorFailure):
        mobility_engine.set_random_walk(Terminal(0), [-1.0, 5.0, 1.5], profile)


def test_static_profile_rejected_for_walk(mobility_engine):
    with pytest.raises(CollaboratorFailure):
        mobility_engine.set_random_walk(Terminal(0), [1.0, 5.0, 1.5], MobilityProfile.static())


def test_unknown_node_position(mobility_engine):
    with pytest.raises(CollaboratorFailure):
        mobility_engine.get_position(Terminal(99))


def test_teardown_clears_state(sim, mobility_engine):
    mobility_engine.set_static_position(SmallCell(0), [1.0, 2.0, 3.0])
    sim.stop_and_teardown()
    assert mobility_engine.profiles == {}


@pytest.mark.parametrize('config', [
    MobilityConfig(min_speed=11.0, max_speed=10.0),
    MobilityConfig(min_speed=-1.0),
])
def test_invalid_speed_range(mobility_engine, rng, config):
    with pytest.raises(ConfigurationError):
        MobilityConfigurator(mobility_engine, AREA, config, rng)


def test_degenerate_area(mobility_engine, rng):
    with pytest.raises(ConfigurationError):
        MobilityConfigurator(mobility_engine, Rectangle(0.0, 0.0, 0.0, 10.0), MobilityConfig(), rng)


def test_non_positive_step_distance(sim, rng):
    with pytest.raises(ConfigurationError):
        MobilityEngine(sim, rng, step_distance=0.0)
