"""
HetNet scenario: macro anchor cell plus small-cell grid
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Builds a heterogeneous cellular deployment (one anchor cell, N small cells
on a grid, M randomly walking terminals with random small-cell attachment)
and runs it on a simpy-based discrete-event engine.
"""

__version__ = '1.0.0'
__license__ = 'MIT'

from .components.addressing import AddressBinding, AddressingService
from .components.attachment import AttachmentPolicy, AttachmentRecord
from .components.cell import AnchorCell, CellDevice, Node, SmallCell
from .components.mobility import (
    MobilityConfigurator,
    MobilityEngine,
    MobilityProfile,
    MotionModel,
    Rectangle,
)
from .components.radio import RadioEngine
from .components.scenario import (
    AreaConfig,
    GridLayout,
    LoggingConfig,
    MobilityConfig,
    RadioConfig,
    ScenarioConfig,
)
from .components.topology import TopologyBuilder
from .components.ue import Terminal, TerminalDevice
from .errors import CollaboratorFailure, ConfigurationError, HetNetError
from .utils.logger import SimulationLogger
from .simulator import Simulator
from .driver import ScenarioDriver

__all__ = [
    # Scenario construction
    'TopologyBuilder',
    'MobilityConfigurator',
    'AttachmentPolicy',
    'ScenarioDriver',

    # Data model
    'Node',
    'AnchorCell',
    'SmallCell',
    'Terminal',
    'CellDevice',
    'TerminalDevice',
    'MobilityProfile',
    'MotionModel',
    'Rectangle',
    'AttachmentRecord',
    'AddressBinding',

    # Configuration
    'ScenarioConfig',
    'AreaConfig',
    'GridLayout',
    'MobilityConfig',
    'RadioConfig',
    'LoggingConfig',

    # Collaborators
    'Simulator',
    'RadioEngine',
    'AddressingService',
    'MobilityEngine',

    # Errors and utilities
    'HetNetError',
    'ConfigurationError',
    'CollaboratorFailure',
    'SimulationLogger',
]
