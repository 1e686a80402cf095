import logging

import pytest

from hetnet_scenario.components.cell import SmallCell
from hetnet_scenario.components.scenario import LoggingConfig
from hetnet_scenario.utils.logger import SimulationLogger


def test_log_event_is_json(caplog):
    logger = SimulationLogger('hetnet_scenario_events', console_output=False)
    with caplog.at_level(logging.INFO, logger='hetnet_scenario_events'):
        logger.log_event('attach', {'terminal': 3, 'small_cell': 1})
    assert 'Event: attach - {"terminal": 3, "small_cell": 1}' in caplog.text
    logger.close()


def test_file_output(tmp_path):
    config = LoggingConfig(level='DEBUG', directory=str(tmp_path), console=False, file=True)
    logger = SimulationLogger.from_config('hetnet_scenario_file', config)
    logger.log_deployment([SmallCell(0)], [])
    logger.close()
    files = list(tmp_path.glob('hetnet_scenario_file_*.log'))
    assert len(files) == 1
    assert 'Deployment' in files[0].read_text()


def test_handlers_not_duplicated():
    SimulationLogger('hetnet_scenario_dup')
    logger = SimulationLogger('hetnet_scenario_dup')
    assert len(logger.get_logger().handlers) == 1
    logger.close()


def test_unknown_level():
    with pytest.raises(ValueError):
        SimulationLogger('hetnet_scenario_bad', level='LOUD')


def test_unknown_rotation():
    with pytest.raises(ValueError):
        SimulationLogger('hetnet_scenario_bad', file_output=True, rotation='weekly')


def test_time_rotation(tmp_path):
    config = LoggingConfig(directory=str(tmp_path), console=False, file=True, rotation='time')
    logger = SimulationLogger.from_config('hetnet_scenario_time', config)
    handlers = logger.get_logger().handlers
    assert [type(h).__name__ for h in handlers] == ['TimedRotatingFileHandler']
    logger.close()
