"""
IPv4 addressing for terminal devices, in the style of an EPC packet
gateway: terminals share one network and are numbered in device order
after the gateway address.
"""

import ipaddress
from dataclasses import dataclass
from typing import List

from ..errors import CollaboratorFailure


@dataclass(frozen=True)
class AddressBinding:
    """Terminal device index and the address it received"""
    device_index: int
    node_i: int
    address: ipaddress.IPv4Address


class AddressingService:
    """
    Parameters
    ----------
    sim : Simulator
        Simulation engine; bindings are released at teardown
    network : str
        Terminal network in CIDR form
    logger : SimulationLogger, optional
    """

    def __init__(self, sim, network: str = '7.0.0.0/8', logger=None):
        try:
            self.network = ipaddress.IPv4Network(network)
        except ValueError as e:
            raise CollaboratorFailure(f'invalid terminal network {network!r}: {e}') from e
        self.logger = logger
        hosts = self.network.hosts()
        try:
            self.gateway = next(hosts)
        except StopIteration:
            raise CollaboratorFailure(f'terminal network {network} has no host addresses') from None
        self._hosts = hosts
        self.stacks = set()  # node ids with an IP stack
        self.bindings: List[AddressBinding] = []
        sim.register_teardown(self.clear)

    def install_internet_stack(self, nodes) -> None:
        for node in nodes:
            self.stacks.add(node.i)

    def has_internet_stack(self, node) -> bool:
        return node.i in self.stacks

    def assign_addresses(self, devices) -> List[AddressBinding]:
        """Give each device the next free address, in device order

        Parameters
        ----------
        devices : list of TerminalDevice

        Returns
        -------
        list of AddressBinding
        """
        bindings = []
        for device in devices:
            if not self.has_internet_stack(device.node):
                raise CollaboratorFailure(f'node {device.node.i} has no IP stack installed')
            if device.address is not None:
                raise CollaboratorFailure(f'node {device.node.i} already has address {device.address}')
            try:
                address = next(self._hosts)
            except StopIteration:
                raise CollaboratorFailure(f'address pool {self.network} exhausted') from None
            device.address = address
            bindings.append(AddressBinding(device.index, device.node.i, address))
        self.bindings.extend(bindings)
        if self.logger is not None and bindings:
            self.logger.info(f'Assigned {len(bindings)} addresses from {self.network} '
                             f'({bindings[0].address} .. {bindings[-1].address})')
        return bindings

    def clear(self) -> None:
        self.stacks.clear()
        self.bindings.clear()
