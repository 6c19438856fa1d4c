"""This module defines ResourcePool, which places VMs on hosts. Hosts use a
time-shared model for their PEs: several VMs share the PEs by time slicing,
so a VM is accepted when:

- its number of PEs is not greater than the number of PEs of the host,
- its MIPS per PE is not greater than the MIPS of a host PE, and
- the RAM and bandwidth reserved by the VMs on the host, plus the ones of the
  new VM, do not exceed the host capacity.

The placement policy is a PlacementPolicy value:

- FIRST_FIT: the first host, in id order, where the VM fits.
- BEST_FIT: the host where the VM fits leaving the least free RAM (and then
  the least free bandwidth).
"""

from enum import Enum
import logging
from typing import Callable, Optional

from .errors import CapacityExceeded, VmNotFound
from .model import Host, HostSpec, Vm, VmPlacement


class PlacementPolicy(Enum):
    """How to choose among the hosts that can fit a VM."""

    FIRST_FIT = 1
    BEST_FIT = 2


def vm_fits(host: Host, vm: Vm) -> bool:
    """Checks if the VM can be placed in the host."""
    pe_mips = vm.mips / vm.pes
    return (
        vm.pes <= host.spec.num_pes
        and pe_mips <= host.spec.pe_mips
        and host.ram_used + vm.ram <= host.spec.ram
        and host.bw_used + vm.bw <= host.spec.bw
    )


class ResourcePool:
    """Set of hosts of a datacenter and the placement of VMs on them."""

    def __init__(
        self,
        host_specs: list[HostSpec],
        policy: PlacementPolicy = PlacementPolicy.FIRST_FIT,
    ) -> None:
        """Constructor.

        Args:
            host_specs: capacity of each host. Host ids follow this order.
            policy: placement policy"""
        self.hosts = [Host(id_=i, spec=spec) for i, spec in enumerate(host_specs)]
        self.policy = policy
        self.placements: dict[int, Host] = {}  # vm id -> host
        self.resident: dict[int, Vm] = {}  # vm id -> placed VM
        self._release_listeners: list[Callable[[], None]] = []

    def allocate(self, vm: Vm) -> VmPlacement:
        """Reserves the RAM and bandwidth of the VM on a host. It raises
        CapacityExceeded if no host can fit it."""
        host = self._select_host(vm)
        if host is None:
            raise CapacityExceeded(vm.id_)

        host.ram_used = host.ram_used + vm.ram
        host.bw_used += vm.bw
        host.vm_ids.append(vm.id_)
        self.placements[vm.id_] = host
        self.resident[vm.id_] = vm

        logging.info(
            "  VM %i placed on host %i (RAM %s/%s, BW %i/%i)",
            vm.id_,
            host.id_,
            host.ram_used,
            host.spec.ram,
            host.bw_used,
            host.spec.bw,
        )
        return VmPlacement(vm_id=vm.id_, host_id=host.id_)

    def release(self, vm_id: int) -> None:
        """Frees the reservation of the VM."""
        host = self.placements.pop(vm_id, None)
        if host is None:
            raise VmNotFound(vm_id)
        vm = self.resident.pop(vm_id)

        host.ram_used = host.ram_used - vm.ram
        host.bw_used -= vm.bw
        host.vm_ids.remove(vm.id_)

        for listener in self._release_listeners:
            listener()

    def on_release(self, listener: Callable[[], None]) -> None:
        """Registers a function to call, in registration order, each time a VM
        is released and its capacity becomes free."""
        self._release_listeners.append(listener)

    def _select_host(self, vm: Vm) -> Optional[Host]:
        candidates = [host for host in self.hosts if vm_fits(host, vm)]
        if not candidates:
            return None

        if self.policy == PlacementPolicy.FIRST_FIT:
            return candidates[0]

        if self.policy == PlacementPolicy.BEST_FIT:
            return min(
                candidates,
                key=lambda h: (h.free_ram() - vm.ram, h.free_bw() - vm.bw, h.id_),
            )

        raise ValueError(f"Unknown placement policy: {self.policy}")

    def host_of(self, vm_id: int) -> Host:
        """Returns the host where the VM is placed."""
        try:
            return self.placements[vm_id]
        except KeyError as exc:
            raise VmNotFound(vm_id) from exc
