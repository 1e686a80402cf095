import ipaddress

import pytest

from hetnet_scenario.components.addressing import AddressingService
from hetnet_scenario.components.ue import Terminal, TerminalDevice
from hetnet_scenario.errors import CollaboratorFailure


def terminal_devices(n):
    return [TerminalDevice(Terminal(10 + k), k) for k in range(n)]


def test_addresses_follow_gateway_in_device_order(sim):
    service = AddressingService(sim)
    devices = terminal_devices(3)
    service.install_internet_stack([d.node for d in devices])
    bindings = service.assign_addresses(devices)
    assert service.gateway == ipaddress.IPv4Address('7.0.0.1')
    assert [str(b.address) for b in bindings] == ['7.0.0.2', '7.0.0.3', '7.0.0.4']
    assert [b.device_index for b in bindings] == [0, 1, 2]
    assert [b.node_i for b in bindings] == [10, 11, 12]
    assert devices[2].address == ipaddress.IPv4Address('7.0.0.4')


def test_requires_ip_stack(sim):
    service = AddressingService(sim)
    with pytest.raises(CollaboratorFailure):
        service.assign_addresses(terminal_devices(1))


def test_pool_exhaustion(sim):
    service = AddressingService(sim, network='10.1.0.0/30')
    devices = terminal_devices(2)
    service.install_internet_stack([d.node for d in devices])
    with pytest.raises(CollaboratorFailure):
        service.assign_addresses(devices)


def test_no_double_assignment(sim):
    service = AddressingService(sim)
    devices = terminal_devices(1)
    service.install_internet_stack([devices[0].node])
    service.assign_addresses(devices)
    with pytest.raises(CollaboratorFailure):
        service.assign_addresses(devices)


def test_invalid_network(sim):
    with pytest.raises(CollaboratorFailure):
        AddressingService(sim, network='7.0.0.0/40')


def test_teardown_forgets_stacks(sim):
    service = AddressingService(sim)
    service.install_internet_stack([Terminal(0)])
    sim.stop_and_teardown()
    assert not service.has_internet_stack(Terminal(0))
