"""
Radio engine: node creation, device installation and attachment
"""

from typing import List, Type

from .cell import AnchorCell, CellDevice, Node, SmallCell
from .ue import Terminal, TerminalDevice
from ..errors import CollaboratorFailure


class RadioEngine:
    """
    Creates nodes, installs radio devices on them and binds terminals to
    their serving cells.

    Parameters
    ----------
    sim : Simulator
        Simulation engine; node state is dropped at teardown
    config : RadioConfig
        Bandwidth, centre frequencies and channel model names
    logger : SimulationLogger, optional
        Logger for attachment events
    """

    def __init__(self, sim, config, logger=None):
        self.sim = sim
        self.config = config
        self.logger = logger
        self.pathloss_model = config.pathloss_model
        self.channel_condition_model = config.channel_condition_model
        self.nodes: List[Node] = []
        self._next_i = 0
        self.devices = []
        self.sim.register_teardown(self.clear)

    def _create(self, count: int, node_type: Type[Node]) -> List[Node]:
        if count < 0:
            raise CollaboratorFailure(f'cannot create {count} nodes')
        created = []
        for _ in range(count):
            node = node_type(self._next_i)
            self._next_i += 1
            self.nodes.append(node)
            created.append(node)
        return created

    def create_cells(self, count: int, kind: Type[Node] = SmallCell) -> List[Node]:
        if kind not in (SmallCell, AnchorCell):
            raise CollaboratorFailure(f'{kind.__name__} is not a base station type')
        return self._create(count, kind)

    def create_terminals(self, count: int) -> List[Terminal]:
        return self._create(count, Terminal)

    def _install_cells(self, nodes, node_type, fc_Hz) -> List[CellDevice]:
        devices = []
        for index, node in enumerate(nodes):
            if not isinstance(node, node_type):
                raise CollaboratorFailure(f'{node!r} is not a {node_type.__name__}')
            devices.append(CellDevice(node, index, self.config.bandwidth, fc_Hz))
        self.devices.extend(devices)
        return devices

    def install_small_cell_devices(self, nodes) -> List[CellDevice]:
        return self._install_cells(nodes, SmallCell, self.config.center_frequency)

    def install_anchor_cell_device(self, nodes) -> List[CellDevice]:
        if len(nodes) != 1:
            raise CollaboratorFailure(f'expected exactly one anchor cell, got {len(nodes)}')
        return self._install_cells(nodes, AnchorCell, self.config.anchor_frequency)

    def install_terminal_devices(self, nodes) -> List[TerminalDevice]:
        devices = []
        for index, node in enumerate(nodes):
            if not isinstance(node, Terminal):
                raise CollaboratorFailure(f'{node!r} is not a Terminal')
            devices.append(TerminalDevice(node, index))
        self.devices.extend(devices)
        return devices

    def attach(self, terminal_device, small_cell_device, anchor_device) -> None:
        """Bind a terminal to one small cell and the anchor cell

        Parameters
        ----------
        terminal_device : TerminalDevice
        small_cell_device : CellDevice
            Must sit on a SmallCell
        anchor_device : CellDevice
            Must sit on the AnchorCell
        """
        if not isinstance(terminal_device, TerminalDevice):
            raise CollaboratorFailure(f'{terminal_device!r} is not a terminal device')
        if small_cell_device.kind != SmallCell.kind:
            raise CollaboratorFailure(f'{small_cell_device!r} is not a small-cell device')
        if anchor_device.kind != AnchorCell.kind:
            raise CollaboratorFailure(f'{anchor_device!r} is not an anchor-cell device')
        if terminal_device.is_attached():
            raise CollaboratorFailure(f'terminal {terminal_device.index} is already attached')
        terminal_device.small_cell = small_cell_device
        terminal_device.anchor_cell = anchor_device
        small_cell_device.attached.add(terminal_device.index)
        anchor_device.attached.add(terminal_device.index)
        if self.logger is not None:
            self.logger.debug(f'Terminal[{terminal_device.index:2}] <-> small cell[{small_cell_device.index}] + anchor')

    def get_attached(self, cell_device) -> List[int]:
        return sorted(cell_device.attached)

    def clear(self) -> None:
        for device in self.devices:
            if isinstance(device, CellDevice):
                device.attached.clear()
            else:
                device.small_cell = device.anchor_cell = None
        self.devices.clear()
        self.nodes.clear()
