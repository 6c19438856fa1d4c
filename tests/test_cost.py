"""Tests for `CostModel` and the average completion time."""

import unittest

import pytest

from cloudmodel.unified.units import CurrencyPerTime, Storage

from cloudletsim.cost import CostModel, average_completion_time
from cloudletsim.model import Task, TaskState, Vm, VmState, VmType

assertions = unittest.TestCase("__init__")


def finished_task(id_: int, vm_id: int, start: float, finish: float) -> Task:
    task = Task(id_=id_, length=1000, vm_id=vm_id)
    task.state = TaskState.FINISHED
    task.exec_start = start
    task.finish_time = finish
    return task


def running_vm(id_: int, vm_type: VmType, started_at: float = 0.0) -> Vm:
    return Vm(
        id_=id_,
        broker_id=0,
        vm_type=vm_type,
        state=VmState.RUNNING,
        host_id=0,
        started_at=started_at,
    )


class TestCostModel:
    """Billing of VMs for the fraction of hours they were active."""

    def test_ten_vms_one_hour(self, catalog) -> None:
        """Ten VMs at 0.05 usd/hour whose tasks finish after one hour."""
        small = catalog[0]
        vms = [running_vm(i, small) for i in range(10)]
        tasks = [finished_task(i, i, 0, 3600) for i in range(10)]

        total = CostModel(catalog).total_cost(vms, tasks)

        assert total.to("usd").magnitude == pytest.approx(0.50)

    def test_fractional_hours(self, catalog) -> None:
        """Half an hour is billed as half an hour."""
        medium = catalog[1]
        vm = running_vm(0, medium, started_at=100)
        tasks = [finished_task(0, 0, 100, 1000), finished_task(1, 0, 100, 1900)]

        model = CostModel(catalog)

        assert model.active_duration(vm, tasks) == 1800
        assertions.assertAlmostEqual(model.cost(vm, tasks).to("usd").magnitude, 0.05)

    def test_destroyed_vm(self, catalog) -> None:
        """A destroyed VM is billed until its destruction."""
        large = catalog[2]
        vm = running_vm(0, large)
        vm.state = VmState.DESTROYED
        vm.destroyed_at = 7200

        cost = CostModel(catalog).cost(vm, [])

        assert cost.to("usd").magnitude == pytest.approx(0.40)

    def test_vm_never_placed(self, catalog) -> None:
        vm = Vm(id_=0, broker_id=0, vm_type=catalog[0])
        assert CostModel(catalog).cost(vm, []).to("usd").magnitude == 0

    def test_vm_without_tasks(self, catalog) -> None:
        """A running VM that finished no task costs nothing."""
        vm = running_vm(0, catalog[0])
        assert CostModel(catalog).cost(vm, []).to("usd").magnitude == 0

    def test_unknown_type(self, catalog) -> None:
        other = VmType(
            name="Other",
            mips=100,
            pes=1,
            ram=Storage("128 mebibytes"),
            price=CurrencyPerTime("1 usd/hour"),
        )
        with pytest.raises(KeyError):
            CostModel(catalog).rate(running_vm(0, other))


class TestAverageCompletionTime:
    """Average CPU time of the finished tasks."""

    def test_average(self) -> None:
        tasks = [finished_task(0, 0, 0, 2), finished_task(1, 0, 1, 5)]
        assert average_completion_time(tasks) == pytest.approx(3.0)

    def test_cancelled_tasks_do_not_count(self) -> None:
        cancelled = Task(id_=2, length=1000, vm_id=0)
        cancelled.state = TaskState.CANCELLED
        cancelled.exec_start = 0
        tasks = [finished_task(0, 0, 0, 2), cancelled]

        assert average_completion_time(tasks) == pytest.approx(2.0)

    def test_no_finished_tasks(self) -> None:
        assert average_completion_time([]) == 0
