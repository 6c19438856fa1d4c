"""This module defines CostModel, which computes what the VMs of a run cost.

Each VM is billed at the hourly price of its type for the exact fraction of
hours it was active (there is no rounding up to whole hours). A VM is active
from the moment it is placed until it is destroyed or, if it is never
destroyed, until its last task finishes. VMs that were never placed cost
nothing. Destroyed VMs are billed like the others."""

from collections import defaultdict
from typing import Iterable

from cloudmodel.unified.units import Currency, CurrencyPerTime, Time

from .model import Task, TaskState, Vm, VmType


class CostModel:
    """Prices VMs using a catalog of VM types."""

    def __init__(self, catalog: Iterable[VmType]) -> None:
        self.rates: dict[str, CurrencyPerTime] = {
            vm_type.name: vm_type.price for vm_type in catalog
        }

    def rate(self, vm: Vm) -> CurrencyPerTime:
        """Hourly price of the VM. Raises KeyError if its type is not in the
        catalog."""
        return self.rates[vm.vm_type.name]

    def active_duration(self, vm: Vm, tasks: Iterable[Task]) -> float:
        """Seconds the VM has to be paid for."""
        if vm.started_at is None:
            return 0.0

        if vm.destroyed_at is not None:
            return vm.destroyed_at - vm.started_at

        finish_times = [
            task.finish_time
            for task in tasks
            if task.vm_id == vm.id_ and task.state == TaskState.FINISHED
        ]
        if not finish_times:
            return 0.0
        return max(finish_times) - vm.started_at

    def cost(self, vm: Vm, tasks: Iterable[Task]) -> Currency:
        """Cost of one VM given the tasks of the run."""
        duration = Time(f"{self.active_duration(vm, tasks)} s")
        return (self.rate(vm) * duration).to("usd")

    def total_cost(self, vms: Iterable[Vm], tasks: Iterable[Task]) -> Currency:
        """Cost of all the VMs ever created in a run."""
        tasks_per_vm: dict[int, list[Task]] = defaultdict(list)
        for task in tasks:
            if task.vm_id is not None:
                tasks_per_vm[task.vm_id].append(task)

        total = Currency("0 usd")
        for vm in vms:
            total += self.cost(vm, tasks_per_vm[vm.id_])
        return total


def average_completion_time(tasks: Iterable[Task]) -> float:
    """Average CPU time, in seconds, of the finished tasks. Tasks that did not
    finish do not count. Returns 0 if no task finished."""
    times = [task.actual_cpu_time for task in tasks if task.state == TaskState.FINISHED]
    if not times:
        return 0.0
    return sum(times) / len(times)
