"""
Discrete-event simulation engine
"""

from sys import version as pyversion
from time import time
from typing import Callable, List, Optional

import numpy as np
import simpy

from .errors import CollaboratorFailure
from .utils.logger import SimulationLogger


class Simulator:
    """Simulation engine wrapping a simpy environment

    The scenario driver only uses the "run for duration D, then stop"
    contract: ``run_for`` followed by ``stop_and_teardown``. Collaborators
    that own per-node state register a teardown hook so that the whole
    graph is released at once.

    Parameters
    ----------
    logger : SimulationLogger, optional
        Logger for engine events
    """

    def __init__(self, logger: Optional[SimulationLogger] = None):
        self.env = simpy.Environment()
        self.logger = logger
        self.destroyed = False
        self.stop_time = None
        self._teardown_hooks: List[Callable[[], None]] = []
        if self.logger is not None:
            pyv = pyversion.replace('\n', '')
            self.logger.debug(f'python version={pyv}')
            self.logger.debug(f'numpy  version={np.__version__}')
            self.logger.debug(f'simpy  version={simpy.__version__}')

    @property
    def now(self) -> float:
        return float(self.env.now)

    def wait(self, interval: float = 1.0):
        '''
        Convenience function to avoid low-level reference to env.timeout().
        '''
        return self.env.timeout(interval)

    def register_teardown(self, hook: Callable[[], None]) -> None:
        self._check_alive()
        self._teardown_hooks.append(hook)

    def run_for(self, duration: float) -> None:
        """Advance simulation time by ``duration`` seconds

        Parameters
        ----------
        duration : float
            Simulated time to run, in seconds
        """
        self._check_alive()
        if duration <= 0:
            raise CollaboratorFailure(f'run duration must be positive, got {duration}')
        self.stop_time = self.now + duration
        if self.logger is not None:
            self.logger.info(f'Sim: starting run for simulation time {duration} seconds...')
        t0 = time()
        self.env.run(until=self.stop_time)
        if self.logger is not None:
            self.logger.info(f'Sim: finished main loop in {(time() - t0):.2f} seconds.')

    def stop_and_teardown(self) -> None:
        """Release every collaborator's state; the engine cannot run again"""
        if self.destroyed:
            return
        for hook in reversed(self._teardown_hooks):
            hook()
        self._teardown_hooks.clear()
        self.destroyed = True
        if self.logger is not None:
            self.logger.info(f'Sim: torn down at t={self.now}')

    def _check_alive(self) -> None:
        if self.destroyed:
            raise CollaboratorFailure('simulation engine has already been torn down')
