"""This module defines TaskScheduler, a time-shared scheduler of tasks on VMs.

All the tasks resident in a VM progress at the same time, each one receiving
vm.mips / N MIPS, where N is the number of active tasks of the VM. When a task
joins or leaves a VM, the progress of every task of that VM is brought up to
date with the old share and their TASK_COMPLETE events are rescheduled with
the new one."""

from dataclasses import dataclass, field
import logging
from typing import Optional

from .errors import TaskNotFound, VmCapacityExceeded, VmNotFound
from .events import EventQueue
from .model import Event, EventKind, Task, TaskState, Vm


@dataclass
class VmExecution:
    """Execution state of the tasks of one VM."""

    vm: Vm
    last_update: float
    tasks: dict[int, Task] = field(default_factory=dict)
    events: dict[int, Event] = field(default_factory=dict)

    def share(self) -> float:
        """MIPS received by each active task."""
        if not self.tasks:
            return self.vm.mips
        return self.vm.mips / len(self.tasks)


class TaskScheduler:
    """Assigns tasks to VMs and computes their completion events."""

    def __init__(self, queue: EventQueue, owner: Optional[int] = None) -> None:
        """The completion events are scheduled on behalf of the owner."""
        self.queue = queue
        self.owner = owner
        self.executions: dict[int, VmExecution] = {}
        self.task_locations: dict[int, VmExecution] = {}  # active task id -> VM
        self.finished: list[Task] = []

    def add_vm(self, vm: Vm) -> None:
        """Makes a running VM available for tasks."""
        self.executions[vm.id_] = VmExecution(vm=vm, last_update=self.queue.now)

    def submit(self, task: Task, vm_id: int) -> None:
        """Starts the execution of the task in the VM."""
        execution = self.executions.get(vm_id)
        if execution is None:
            raise VmNotFound(vm_id)

        if task.pes > execution.vm.pes:
            raise VmCapacityExceeded(task.id_, vm_id)

        self._progress(execution)

        task.vm_id = vm_id
        task.state = TaskState.RUNNING
        task.exec_start = self.queue.now
        execution.tasks[task.id_] = task
        self.task_locations[task.id_] = execution

        self._reschedule(execution)

    def complete(self, task_id: int) -> Task:
        """Finishes the task. It is called when its TASK_COMPLETE event is
        processed."""
        execution = self.task_locations.pop(task_id, None)
        if execution is None:
            raise TaskNotFound(task_id)

        self._progress(execution)

        task = execution.tasks.pop(task_id)
        execution.events.pop(task_id, None)
        task.remaining = 0.0
        task.state = TaskState.FINISHED
        task.finish_time = self.queue.now
        self.finished.append(task)

        logging.debug(
            "  Task %i finished in VM %i (cpu time %.2f s)",
            task.id_,
            execution.vm.id_,
            task.actual_cpu_time,
        )

        self._reschedule(execution)
        return task

    def cancel_vm(self, vm_id: int) -> list[Task]:
        """Removes the VM, cancelling the completion events of its tasks. The
        tasks are marked as cancelled and returned; their progress is lost."""
        execution = self.executions.pop(vm_id, None)
        if execution is None:
            raise VmNotFound(vm_id)

        cancelled = []
        for task_id, task in execution.tasks.items():
            self.queue.cancel(execution.events[task_id])
            del self.task_locations[task_id]
            task.state = TaskState.CANCELLED
            cancelled.append(task)

        if cancelled:
            logging.info(
                "  %i tasks of VM %i cancelled", len(cancelled), execution.vm.id_
            )
        return cancelled

    def active_tasks(self, vm_id: int) -> list[Task]:
        return list(self._execution(vm_id).tasks.values())

    def mips_shares(self, vm_id: int) -> dict[int, float]:
        """Returns the MIPS each active task of the VM receives now."""
        execution = self._execution(vm_id)
        share = execution.share()
        return {task_id: share for task_id in execution.tasks}

    def utilization(self, vm_id: int, window: float) -> float:
        """Returns the fraction (0 to 1) of the next window of time the VM
        needs to execute the instructions of its active tasks."""
        execution = self._execution(vm_id)
        self._progress(execution)

        pending = sum(task.remaining for task in execution.tasks.values())
        return min(pending / (execution.vm.mips * window), 1.0)

    def _execution(self, vm_id: int) -> VmExecution:
        try:
            return self.executions[vm_id]
        except KeyError as exc:
            raise VmNotFound(vm_id) from exc

    def _progress(self, execution: VmExecution) -> None:
        """Executes the instructions of the tasks from the last update until
        now with the current share."""
        elapsed = self.queue.now - execution.last_update
        if elapsed > 0 and execution.tasks:
            executed = execution.share() * elapsed
            for task in execution.tasks.values():
                task.remaining = max(task.remaining - executed, 0.0)

        execution.last_update = self.queue.now

    def _reschedule(self, execution: VmExecution) -> None:
        """Cancels and schedules again the completion events of the tasks of
        the VM according to the current share."""
        share = execution.share()
        for task_id, task in execution.tasks.items():
            old_event = execution.events.get(task_id)
            if old_event is not None:
                self.queue.cancel(old_event)

            execution.events[task_id] = self.queue.schedule(
                EventKind.TASK_COMPLETE,
                task_id,
                task.remaining / share,
                owner=self.owner,
            )
