"""Exceptions raised by the simulation core. Only InvalidDelay aborts a run;
the rest are recovered by the caller (queued, parked or logged)."""


class SimulationError(Exception):
    """Base class of the errors of cloudletsim."""


class InvalidDelay(SimulationError):
    """An event was scheduled in the past."""

    def __init__(self, delay: float) -> None:
        super().__init__(f"Cannot schedule an event with negative delay {delay}")
        self.delay = delay


class EndOfSimulation(SimulationError):
    """There are no pending events left."""


class CapacityExceeded(SimulationError):
    """No host can fit the VM."""

    def __init__(self, vm_id: int) -> None:
        super().__init__(f"No host has capacity for VM {vm_id}")
        self.vm_id = vm_id


class VmNotFound(SimulationError):
    """The VM id does not refer to a live VM."""

    def __init__(self, vm_id: int) -> None:
        super().__init__(f"VM {vm_id} not found")
        self.vm_id = vm_id


class TaskNotFound(SimulationError):
    """The task id does not refer to an active task."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class NoAvailableVm(SimulationError):
    """A task was submitted and there is no running VM that can take it."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"No running VM available for task {task_id}")
        self.task_id = task_id


class VmCapacityExceeded(SimulationError):
    """The task requires more PEs than the VM has."""

    def __init__(self, task_id: int, vm_id: int) -> None:
        super().__init__(f"Task {task_id} requires more PEs than VM {vm_id} has")
        self.task_id = task_id
        self.vm_id = vm_id
