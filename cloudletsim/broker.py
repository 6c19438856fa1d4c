"""This module defines Broker, which acts on behalf of a tenant: it owns the
lifecycle of its VMs and submits its tasks to them.

- VM requests that do not fit in the datacenter stay REQUESTED in a FIFO queue
  and are retried each time a VM is released from the datacenter, whichever
  broker owned it. Several brokers can share a simulation and a datacenter.
- Tasks that arrive when there is no running VM able to take them wait until
  one is created. Tasks that never get a VM are reported as unprocessed.
- Destroying a VM loses the work of its tasks: they are cancelled, not
  finished.
"""

from collections import deque
from enum import Enum
import logging

from .errors import CapacityExceeded, NoAvailableVm, VmNotFound
from .model import Event, EventKind, Task, Vm, VmState, VmType
from .resources import ResourcePool
from .scheduler import TaskScheduler
from .simulation import Simulation


class RoutingPolicy(Enum):
    """How the broker chooses the VM for a task."""

    ROUND_ROBIN = 1
    LEAST_LOADED = 2


class Broker:
    """Creates and destroys VMs and routes tasks to them."""

    def __init__(
        self,
        sim: Simulation,
        pool: ResourcePool,
        routing: RoutingPolicy = RoutingPolicy.ROUND_ROBIN,
        name: str = "Broker",
    ) -> None:
        """Constructor. It registers the handlers of VM and task events in
        the simulation.

        Args:
            sim: simulation where the broker lives
            pool: datacenter where the VMs are placed
            routing: policy to choose the VM of each task
            name: name used in the logs"""
        self.sim = sim
        self.pool = pool
        self.routing = routing
        self.name = name
        self.id_ = sim.next_broker_id()
        self.scheduler = TaskScheduler(sim.queue, owner=self.id_)

        self.vms: dict[int, Vm] = {}  # All the VMs ever created, by id
        self.tasks: dict[int, Task] = {}  # All the tasks submitted, by id
        self.pending_vms: deque[int] = deque()  # Ids of VMs waiting for capacity
        self.waiting_tasks: deque[Task] = deque()  # Tasks waiting for a VM
        self.cancelled_tasks: list[Task] = []
        self._next_vm = 0  # Round robin cursor

        pool.on_release(self._retry_pending_vms)

        sim.register(EventKind.VM_CREATE, self._on_vm_create, owner=self.id_)
        sim.register(EventKind.VM_DESTROY, self._on_vm_destroy, owner=self.id_)
        sim.register(EventKind.TASK_SUBMIT, self._on_task_submit, owner=self.id_)
        sim.register(EventKind.TASK_COMPLETE, self._on_task_complete, owner=self.id_)

    def create_vm(self, vm_type: VmType) -> int:
        """Requests a new VM. It is placed when its VM_CREATE event is
        processed. Returns the id of the VM."""
        vm = Vm(
            id_=self.sim.next_vm_id(),
            broker_id=self.id_,
            vm_type=vm_type,
            requested_at=self.sim.now,
        )
        self.vms[vm.id_] = vm
        self.sim.queue.schedule(EventKind.VM_CREATE, vm.id_, owner=self.id_)

        logging.info("%s: VM %i (%s) requested", self.name, vm.id_, vm_type.name)
        return vm.id_

    def destroy_vm(self, vm_id: int) -> None:
        """Destroys a VM. Its tasks are cancelled and its host capacity is
        released. A VM still waiting for capacity is withdrawn."""
        vm = self.vms.get(vm_id)
        if vm is None or vm.state == VmState.DESTROYED:
            raise VmNotFound(vm_id)

        was_running = vm.state == VmState.RUNNING
        if was_running:
            self.cancelled_tasks.extend(self.scheduler.cancel_vm(vm_id))
        elif vm_id in self.pending_vms:
            self.pending_vms.remove(vm_id)

        vm.state = VmState.DESTROYED
        vm.destroyed_at = self.sim.now
        logging.info("%s: VM %i destroyed", self.name, vm_id)

        if was_running:
            # The pool calls _retry_pending_vms of every broker sharing it
            self.pool.release(vm_id)

    def request_destroy(self, vm_id: int) -> None:
        """Schedules the destruction of the VM as a VM_DESTROY event."""
        self.sim.queue.schedule(EventKind.VM_DESTROY, vm_id, owner=self.id_)

    def submit_task(self, task: Task, delay: float = 0.0) -> None:
        """Submits a task, which arrives after the delay."""
        if task.id_ in self.tasks:
            raise ValueError(f"Task {task.id_} has already been submitted")

        task.broker_id = self.id_
        task.submitted_at = self.sim.now + delay
        self.tasks[task.id_] = task
        self.sim.queue.schedule(
            EventKind.TASK_SUBMIT, task.id_, delay, owner=self.id_
        )

    def route(self, task: Task) -> Vm:
        """Chooses a running VM with enough PEs for the task."""
        candidates = [vm for vm in self.running_vms() if vm.pes >= task.pes]
        if not candidates:
            raise NoAvailableVm(task.id_)

        if self.routing == RoutingPolicy.ROUND_ROBIN:
            vm = candidates[self._next_vm % len(candidates)]
            self._next_vm += 1
            return vm

        if self.routing == RoutingPolicy.LEAST_LOADED:
            return min(
                candidates,
                key=lambda vm: (len(self.scheduler.active_tasks(vm.id_)), vm.id_),
            )

        raise ValueError(f"Unknown routing policy: {self.routing}")

    def live_vms(self) -> list[Vm]:
        """VMs that are requested or running, in creation order."""
        return [vm for vm in self.vms.values() if vm.state != VmState.DESTROYED]

    def running_vms(self) -> list[Vm]:
        return [vm for vm in self.vms.values() if vm.state == VmState.RUNNING]

    def finished_tasks(self) -> list[Task]:
        return self.scheduler.finished

    def unprocessed_tasks(self) -> list[Task]:
        """Tasks that did not finish: the ones still waiting for a VM and the
        ones lost when their VM was destroyed."""
        return list(self.waiting_tasks) + self.cancelled_tasks

    def _on_vm_create(self, event: Event) -> None:
        vm = self.vms[event.target]
        if vm.state != VmState.REQUESTED:
            return  # Destroyed before being placed

        if not self._try_place(vm):
            logging.info(
                "%s: not enough capacity for VM %i, request queued", self.name, vm.id_
            )
            self.pending_vms.append(vm.id_)

    def _on_vm_destroy(self, event: Event) -> None:
        try:
            self.destroy_vm(event.target)
        except VmNotFound as exc:
            logging.warning("%s: %s", self.name, exc)

    def _on_task_submit(self, event: Event) -> None:
        self._dispatch(self.tasks[event.target])

    def _on_task_complete(self, event: Event) -> None:
        self.scheduler.complete(event.target)

    def _try_place(self, vm: Vm) -> bool:
        """Places the VM in the datacenter. Returns False if there is no
        capacity for it."""
        try:
            placement = self.pool.allocate(vm)
        except CapacityExceeded:
            return False

        vm.state = VmState.RUNNING
        vm.host_id = placement.host_id
        vm.started_at = self.sim.now
        self.scheduler.add_vm(vm)
        logging.info("%s: VM %i running", self.name, vm.id_)

        self._dispatch_waiting_tasks()
        return True

    def _retry_pending_vms(self) -> None:
        for vm_id in list(self.pending_vms):
            if self._try_place(self.vms[vm_id]):
                self.pending_vms.remove(vm_id)

    def _dispatch(self, task: Task) -> None:
        try:
            vm = self.route(task)
        except NoAvailableVm:
            logging.info("%s: no VM available for task %i, waiting", self.name, task.id_)
            self.waiting_tasks.append(task)
            return

        self.scheduler.submit(task, vm.id_)

    def _dispatch_waiting_tasks(self) -> None:
        waiting = self.waiting_tasks
        self.waiting_tasks = deque()
        for task in waiting:
            self._dispatch(task)
