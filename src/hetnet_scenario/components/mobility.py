"""
Terminal mobility: motion profiles, the configurator that assigns them,
and a simpy-driven mobility engine that evaluates positions.
"""

from dataclasses import dataclass
from enum import Enum
from math import cos, sin, pi
from typing import Dict, List, Tuple

import numpy as np

from ..errors import CollaboratorFailure, ConfigurationError
from ..utils.helpers import reflect_into_range


class MotionModel(Enum):
    STATIC = 'static'
    RANDOM_WALK = 'random_walk'


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned bounding box in metres"""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, xyz) -> bool:
        return (self.x_min <= xyz[0] <= self.x_max and
                self.y_min <= xyz[1] <= self.y_max)


@dataclass(frozen=True)
class MobilityProfile:
    """Motion model attached to a node"""
    kind: MotionModel
    speed_range: Tuple[float, float] = (0.0, 0.0)  # m/s
    bounds: Rectangle = None

    @classmethod
    def static(cls) -> 'MobilityProfile':
        return cls(MotionModel.STATIC)


class MobilityEngine:
    '''
    Position bookkeeping for all nodes of a simulation.

    Static nodes keep a fixed position. Random-walk nodes move in straight
    legs: each leg draws a heading uniformly in [0, 2pi) and a speed
    uniformly in the profile's speed range, and lasts ``step_distance/speed``
    seconds. A leg that reaches the bounding rectangle is reflected, so a
    walker never leaves it. Positions are computed on demand from the
    current leg, so no per-tick events are scheduled.

    Parameters
    ----------
    sim : Simulator
      Simulation engine providing ``env`` and teardown hooks.
    rng : numpy.random.Generator
      Random source for leg draws. Legs are only drawn once the run starts.
    step_distance : float
      Distance in metres covered by one leg.
    '''

    def __init__(self, sim, rng: np.random.Generator, step_distance: float = 30.0):
        if step_distance <= 0:
            raise ConfigurationError(f'step distance must be positive, got {step_distance}')
        self.sim = sim
        self.rng = rng
        self.step_distance = step_distance
        self.profiles: Dict[int, MobilityProfile] = {}
        self._nodes = {}
        # node id -> (leg start time, leg start position, velocity)
        self._legs: Dict[int, Tuple[float, np.ndarray, np.ndarray]] = {}
        self.sim.register_teardown(self.clear)

    def set_static_position(self, node, xyz) -> None:
        '''
        Pin ``node`` at ``xyz`` for the whole run.
        '''
        xyz = np.array(xyz, dtype=float)
        node.xyz = xyz
        self.profiles[node.i] = MobilityProfile.static()
        self._nodes[node.i] = node
        self._legs[node.i] = (self.sim.now, xyz, np.zeros(3))

    def set_random_walk(self, node, xyz, profile: MobilityProfile) -> None:
        '''
        Start ``node`` at ``xyz`` and let it wander according to ``profile``.
        The walk begins when the simulation engine starts running.
        '''
        if profile.kind is not MotionModel.RANDOM_WALK:
            raise CollaboratorFailure(f'Node[{node.i}]: expected a random walk profile, got {profile.kind.value}')
        if profile.bounds is None or not profile.bounds.contains(xyz):
            raise CollaboratorFailure(f'Node[{node.i}]: start position {xyz} is outside the walk bounds')
        xyz = np.array(xyz, dtype=float)
        node.xyz = xyz
        self.profiles[node.i] = profile
        self._nodes[node.i] = node
        self._legs[node.i] = (self.sim.now, xyz, np.zeros(3))
        self.sim.env.process(self._walk(node.i))

    def get_position(self, node) -> np.ndarray:
        '''
        Current position of ``node`` at the engine's simulation time.
        '''
        if node.i not in self._legs:
            raise CollaboratorFailure(f'Node[{node.i}] has no mobility model')
        xyz = self._position_at(node.i, self.sim.now)
        node.xyz = xyz
        return xyz

    def get_profile(self, node) -> MobilityProfile:
        return self.profiles[node.i]

    def _position_at(self, i: int, t: float) -> np.ndarray:
        t0, start, velocity = self._legs[i]
        xyz = start + velocity * (t - t0)
        profile = self.profiles[i]
        if profile.kind is MotionModel.RANDOM_WALK:
            b = profile.bounds
            xyz[0], _ = reflect_into_range(xyz[0], b.x_min, b.x_max)
            xyz[1], _ = reflect_into_range(xyz[1], b.y_min, b.y_max)
        return xyz

    def _walk(self, i: int):
        profile = self.profiles[i]
        lo, hi = profile.speed_range
        while True:
            now = self.sim.now
            start = self._position_at(i, now)
            heading = self.rng.uniform(0.0, 2.0 * pi)
            speed = self.rng.uniform(lo, hi)
            velocity = np.array([speed * cos(heading), speed * sin(heading), 0.0])
            self._legs[i] = (now, start, velocity)
            self._nodes[i].xyz = start
            # a zero-speed walker stays put but still re-draws each step
            leg_time = self.step_distance / speed if speed > 0 else 1.0
            yield self.sim.wait(leg_time)

    def clear(self) -> None:
        self.profiles.clear()
        self._nodes.clear()
        self._legs.clear()


class MobilityConfigurator:
    """
    Assigns mobility to every node of the scenario.

    Base stations get a static profile at their grid position. Terminals get
    an i.i.d. uniform initial position in the area and a bounded random walk.

    Parameters
    ----------
    engine : MobilityEngine
        Mobility collaborator
    area : Rectangle
        Terminal area
    config : MobilityConfig
        Speed range, terminal height and motion model
    rng : numpy.random.Generator
        Injected random source; draws are x then y per terminal in index order
    """

    def __init__(self, engine, area: Rectangle, config, rng: np.random.Generator):
        if config.min_speed < 0 or config.max_speed < 0:
            raise ConfigurationError(f'speeds must be non-negative, got [{config.min_speed}, {config.max_speed}]')
        if config.min_speed > config.max_speed:
            raise ConfigurationError(f'min speed {config.min_speed} exceeds max speed {config.max_speed}')
        if area.x_max <= area.x_min or area.y_max <= area.y_min:
            raise ConfigurationError(f'degenerate terminal area {area}')
        self.engine = engine
        self.area = area
        self.config = config
        self.rng = rng

    def terminal_profile(self) -> MobilityProfile:
        if self.config.model is MotionModel.STATIC:
            return MobilityProfile.static()
        return MobilityProfile(MotionModel.RANDOM_WALK,
                               (self.config.min_speed, self.config.max_speed),
                               self.area)

    def configure_cells(self, cells: List, positions: np.ndarray) -> None:
        if len(cells) != len(positions):
            raise ConfigurationError(f'{len(cells)} cells but {len(positions)} positions')
        for cell, xyz in zip(cells, positions):
            self.engine.set_static_position(cell, xyz)

    def initial_position(self) -> np.ndarray:
        x = self.rng.uniform(self.area.x_min, self.area.x_max)
        y = self.rng.uniform(self.area.y_min, self.area.y_max)
        return np.array([x, y, self.config.terminal_height])

    def configure_terminals(self, terminals: List) -> List[np.ndarray]:
        """Place and animate terminals in index order; return initial positions"""
        profile = self.terminal_profile()
        positions = []
        for terminal in terminals:
            xyz = self.initial_position()
            if profile.kind is MotionModel.STATIC:
                self.engine.set_static_position(terminal, xyz)
            else:
                self.engine.set_random_walk(terminal, xyz, profile)
            positions.append(xyz)
        return positions
