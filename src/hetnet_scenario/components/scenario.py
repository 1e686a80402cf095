import ipaddress
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Dict, Optional, Union, get_args, get_origin

from .mobility import MotionModel, Rectangle
from ..errors import ConfigurationError
from ..utils.helpers import load_results, save_results
from ..utils.logger import LEVELS, ROTATIONS


@dataclass
class AreaConfig:
    """Terminal area in metres"""
    max_x: float = 100000.0
    max_y: float = 100000.0

    def rectangle(self) -> Rectangle:
        return Rectangle(0.0, self.max_x, 0.0, self.max_y)


@dataclass
class GridLayout:
    """Small-cell grid"""
    row_width: int = 3           # cells per row
    spacing: float = 30000.0     # m
    origin_x: float = 20000.0    # m
    origin_y: float = 20000.0    # m
    height: float = 3.0          # antenna elevation, m


@dataclass
class MobilityConfig:
    """Terminal motion"""
    model: MotionModel = MotionModel.RANDOM_WALK
    min_speed: float = 5.0        # m/s
    max_speed: float = 10.0       # m/s
    terminal_height: float = 1.5  # m
    step_distance: float = 30.0   # m per random-walk leg


@dataclass
class RadioConfig:
    bandwidth: float = 20e6
    center_frequency: float = 3.5e9
    anchor_frequency: float = 2.12e9
    inter_site_distance: float = 20000.0
    pathloss_model: str = 'ThreeGppUmiStreetCanyonPropagationLossModel'
    channel_condition_model: str = 'ThreeGppUmiStreetCanyonChannelConditionModel'
    terminal_network: str = '7.0.0.0/8'


@dataclass
class LoggingConfig:
    level: str = 'INFO'
    directory: str = 'logs'
    console: bool = True
    file: bool = False
    rotation: str = 'size'


@dataclass
class ScenarioConfig:
    """
    Complete scenario description. The defaults reproduce the reference
    deployment: one anchor cell, ten small cells and fifty terminals in a
    100 km x 100 km area, run for five simulated seconds.

    Parameters
    ----------
    name : str
        Scenario name
    duration : float
        Simulated run time (s)
    seed : int, optional
        Seed of the shared random generator; ``None`` draws fresh entropy
    n_small_cells : int
        Number of small cells N
    n_terminals : int
        Number of terminals M
    """
    name: str = 'scenario_two'
    duration: float = 5.0
    seed: Optional[int] = 1
    n_small_cells: int = 10
    n_terminals: int = 50
    area: AreaConfig = field(default_factory=AreaConfig)
    grid: GridLayout = field(default_factory=GridLayout)
    mobility: MobilityConfig = field(default_factory=MobilityConfig)
    radio: RadioConfig = field(default_factory=RadioConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict) -> 'ScenarioConfig':
        data = dict(data or {})
        sections = {
            'area': AreaConfig,
            'grid': GridLayout,
            'mobility': MobilityConfig,
            'radio': RadioConfig,
            'logging': LoggingConfig,
        }
        kwargs = {}
        for key, section_type in sections.items():
            if key in data:
                kwargs[key] = _build(section_type, data.pop(key), key)
        kwargs.update(_check_types(cls, _check_keys(cls, data, 'scenario'), 'scenario'))
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str) -> 'ScenarioConfig':
        """Load a YAML or JSON scenario file"""
        path = Path(path)
        try:
            data = load_results(path)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if not isinstance(data, dict):
            raise ConfigurationError(f'{path}: expected a mapping at top level')
        return cls.from_dict(data)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['mobility']['model'] = self.mobility.model.value
        return data

    def save(self, path: str) -> None:
        """Write the configuration as YAML or JSON, chosen by suffix"""
        path = Path(path)
        if path.suffix == '.json':
            save_results(self.to_dict(), path, format='json')
        elif path.suffix in ['.yml', '.yaml']:
            save_results(self.to_dict(), path, format='yaml')
        else:
            raise ConfigurationError(f"Unsupported config file format: {path.suffix}")

    def validate(self) -> None:
        """Raise ConfigurationError on the first invalid parameter"""
        if self.n_small_cells < 0:
            raise ConfigurationError(f'n_small_cells must be non-negative, got {self.n_small_cells}')
        if self.n_terminals < 0:
            raise ConfigurationError(f'n_terminals must be non-negative, got {self.n_terminals}')
        if self.n_terminals > 0 and self.n_small_cells == 0:
            raise ConfigurationError(f'{self.n_terminals} terminals but no small cell to attach them to')
        if self.area.max_x <= 0 or self.area.max_y <= 0:
            raise ConfigurationError(f'area must have positive size, got {self.area.max_x} x {self.area.max_y}')
        if self.duration <= 0:
            raise ConfigurationError(f'duration must be positive, got {self.duration}')
        if self.grid.row_width < 1:
            raise ConfigurationError(f'grid row width must be at least 1, got {self.grid.row_width}')
        if self.grid.spacing <= 0:
            raise ConfigurationError(f'grid spacing must be positive, got {self.grid.spacing}')
        m = self.mobility
        if m.min_speed < 0 or m.max_speed < 0:
            raise ConfigurationError(f'speeds must be non-negative, got [{m.min_speed}, {m.max_speed}]')
        if m.min_speed > m.max_speed:
            raise ConfigurationError(f'min speed {m.min_speed} exceeds max speed {m.max_speed}')
        if m.step_distance <= 0:
            raise ConfigurationError(f'step distance must be positive, got {m.step_distance}')
        if self.radio.bandwidth <= 0 or self.radio.center_frequency <= 0:
            raise ConfigurationError('bandwidth and centre frequency must be positive')
        try:
            ipaddress.IPv4Network(self.radio.terminal_network)
        except ValueError as e:
            raise ConfigurationError(f'invalid terminal network: {e}') from None
        if str(self.logging.level).upper() not in LEVELS:
            raise ConfigurationError(f'unknown logging level {self.logging.level!r}, expected one of {LEVELS}')
        if self.logging.rotation not in ROTATIONS:
            raise ConfigurationError(f'unknown log rotation {self.logging.rotation!r}, expected one of {ROTATIONS}')

    def get_summary(self) -> Dict:
        return {
            'name': self.name,
            'duration': self.duration,
            'seed': self.seed,
            'n_anchor_cells': 1,
            'n_small_cells': self.n_small_cells,
            'n_terminals': self.n_terminals,
            'area': (self.area.max_x, self.area.max_y),
            'motion_model': self.mobility.model.value,
        }


def _check_keys(section_type, data: Dict, section: str) -> Dict:
    known = {f.name for f in fields(section_type)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown {section} option(s): {', '.join(sorted(unknown))}")
    return data


def _check_types(section_type, data: Dict, section: str) -> Dict:
    expected_types = {f.name: f.type for f in fields(section_type)}
    for key, value in data.items():
        expected = expected_types[key]
        if get_origin(expected) is Union:
            if value is None and type(None) in get_args(expected):
                continue
            expected = next(a for a in get_args(expected) if a is not type(None))
        if expected is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        elif expected is int:
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif expected in (str, bool):
            ok = isinstance(value, expected)
        else:
            continue  # enums are converted by the caller
        if not ok:
            raise ConfigurationError(f'{section}.{key}: expected {expected.__name__}, got {value!r}')
    return data


def _build(section_type, data, section: str):
    if data is None:
        return section_type()
    if not isinstance(data, dict):
        raise ConfigurationError(f'{section}: expected a mapping, got {type(data).__name__}')
    data = dict(_check_types(section_type, _check_keys(section_type, data, section), section))
    if section_type is MobilityConfig and 'model' in data:
        try:
            data['model'] = MotionModel(data['model'])
        except ValueError:
            raise ConfigurationError(f"Unknown motion model: {data['model']!r}") from None
    return section_type(**data)
