"""Pytest configuration file for the cloudletsim package."""

import pytest

from cloudmodel.unified.units import CurrencyPerTime, Storage

from cloudletsim.broker import Broker
from cloudletsim.config import default_catalog, web_vm_type
from cloudletsim.model import HostSpec, VmType
from cloudletsim.resources import ResourcePool
from cloudletsim.simulation import Simulation


@pytest.fixture(scope="module")
def catalog() -> tuple[VmType, ...]:
    """Small, Medium and Large VM types."""
    return default_catalog()


@pytest.fixture(scope="module")
def web_type() -> VmType:
    """VM type with 1000 MIPS, 2 PEs and 2048 MiB of RAM."""
    return web_vm_type()


@pytest.fixture(scope="module")
def tiny_type() -> VmType:
    """VM type with 1000 MIPS, 1 PE and 1024 MiB of RAM."""
    return VmType(
        name="Tiny",
        mips=1000,
        pes=1,
        ram=Storage("1024 mebibytes"),
        price=CurrencyPerTime("0.01 usd/hour"),
    )


@pytest.fixture(scope="module")
def host_16g() -> HostSpec:
    """Host with 4 PEs of 1000 MIPS, 16 GiB of RAM and 10000 of bandwidth."""
    return HostSpec(
        num_pes=4,
        pe_mips=1000,
        ram=Storage("16384 mebibytes"),
        bw=10000,
    )


@pytest.fixture(scope="module")
def host_4g() -> HostSpec:
    """Host with room for only two VMs of 2048 MiB."""
    return HostSpec(
        num_pes=4,
        pe_mips=1000,
        ram=Storage("4096 mebibytes"),
        bw=10000,
    )


@pytest.fixture
def make_broker():
    """Returns a function that creates a simulation and a broker on a pool
    with the given hosts."""

    def _make(*host_specs: HostSpec, **kwargs) -> tuple[Simulation, Broker]:
        sim = Simulation()
        broker = Broker(sim, ResourcePool(list(host_specs)), **kwargs)
        return sim, broker

    return _make
