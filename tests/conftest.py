import numpy as np
import pytest

from hetnet_scenario.components.mobility import MobilityEngine
from hetnet_scenario.components.radio import RadioEngine
from hetnet_scenario.components.scenario import RadioConfig
from hetnet_scenario.simulator import Simulator
from hetnet_scenario.utils.logger import SimulationLogger


@pytest.fixture
def quiet_logger():
    logger = SimulationLogger('hetnet_scenario_tests', level='DEBUG', console_output=False)
    yield logger
    logger.close()


@pytest.fixture
def sim():
    return Simulator()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def radio(sim):
    return RadioEngine(sim, RadioConfig())


@pytest.fixture
def mobility_engine(sim, rng):
    return MobilityEngine(sim, rng)
