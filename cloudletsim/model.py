"""Data classes for the simulation model of cloudletsim"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from cloudmodel.unified.units import (
    Currency,
    CurrencyPerTime,
    Storage,
)


class VmState(Enum):
    "Lifecycle of a VM"
    REQUESTED = 0
    RUNNING = 1
    DESTROYED = 2


class TaskState(Enum):
    "Lifecycle of a task"
    SUBMITTED = 0
    RUNNING = 1
    FINISHED = 2
    CANCELLED = 3


class EventKind(Enum):
    "Kinds of events in the simulation timeline"
    VM_CREATE = 0
    TASK_SUBMIT = 1
    TASK_COMPLETE = 2
    VM_DESTROY = 3
    HOUR_TICK = 4


class ScaleAction(Enum):
    "Decision taken by the autoscaler in one hour"
    NONE = 0
    SCALE_UP = 1
    SCALE_DOWN = 2


@dataclass(frozen=True)
class VmType:
    """Represents a type of VM in the catalog, with its capacity and its
    price. The mips is the capacity of the VM that its tasks share."""

    name: str
    mips: float
    pes: int
    ram: Storage
    price: CurrencyPerTime
    bw: int = 1000  # Mbps
    size: Storage = Storage("10000 megabytes")

    def __post_init__(self):
        """Checks dimensions are valid and store them in the standard units."""
        object.__setattr__(self, "price", self.price.to("usd/hour"))
        object.__setattr__(self, "ram", self.ram.to("mebibytes"))
        object.__setattr__(self, "size", self.size.to("mebibytes"))
        if self.mips <= 0 or self.pes <= 0 or self.bw < 0:
            raise ValueError(f"VM type {self.name} has a non positive capacity")


@dataclass(frozen=True)
class HostSpec:
    """Represents the capacity of a physical host: its processing elements
    (PEs), each with a MIPS rating, RAM, bandwidth and storage."""

    num_pes: int
    pe_mips: float
    ram: Storage
    bw: int
    storage: Storage = Storage("1000000 megabytes")

    def __post_init__(self):
        """Checks dimensions are valid and store them in the standard units.
        Negative capacities are not allowed."""
        object.__setattr__(self, "ram", self.ram.to("mebibytes"))
        object.__setattr__(self, "storage", self.storage.to("mebibytes"))
        if (
            self.num_pes < 0
            or self.pe_mips < 0
            or self.bw < 0
            or self.ram.magnitude < 0
            or self.storage.magnitude < 0
        ):
            raise ValueError("Host capacities cannot be negative")

    @property
    def total_mips(self) -> float:
        return self.num_pes * self.pe_mips


@dataclass
class Host:
    """A physical host. It keeps the RAM and bandwidth reserved by the VMs
    that reside on it. PEs are time-shared, so MIPS are not reserved."""

    id_: int
    spec: HostSpec
    vm_ids: list[int] = field(default_factory=list)
    ram_used: Storage = Storage("0 mebibytes")
    bw_used: int = 0

    def free_ram(self) -> Storage:
        return self.spec.ram - self.ram_used

    def free_bw(self) -> int:
        return self.spec.bw - self.bw_used


@dataclass
class Vm:
    """A resource reservation carved from a host. The VM belongs to the
    broker that created it; the host only keeps its id."""

    id_: int
    broker_id: int
    vm_type: VmType
    state: VmState = VmState.REQUESTED
    host_id: Optional[int] = None
    requested_at: float = 0.0
    started_at: Optional[float] = None
    destroyed_at: Optional[float] = None

    @property
    def mips(self) -> float:
        return self.vm_type.mips

    @property
    def pes(self) -> int:
        return self.vm_type.pes

    @property
    def ram(self) -> Storage:
        return self.vm_type.ram

    @property
    def bw(self) -> int:
        return self.vm_type.bw


@dataclass
class Task:
    """A unit of work (cloudlet), measured in millions of instructions."""

    id_: int
    length: float
    pes: int = 1
    file_size: int = 300
    output_size: int = 300
    broker_id: int = 0
    vm_id: Optional[int] = None
    state: TaskState = TaskState.SUBMITTED
    submitted_at: Optional[float] = None
    exec_start: Optional[float] = None
    finish_time: Optional[float] = None
    remaining: float = field(init=False)

    def __post_init__(self):
        if self.length <= 0:
            raise ValueError(f"Task {self.id_} must have a positive length")
        self.remaining = self.length

    @property
    def actual_cpu_time(self) -> float:
        """Time the task spent executing. It is only meaningful for finished
        tasks."""
        if self.finish_time is None or self.exec_start is None:
            return 0.0
        return self.finish_time - self.exec_start


@dataclass
class Event:
    """An entry in the timeline. Events are ordered by time and, for the same
    time, by insertion sequence. The owner is the id of the broker whose VM or
    task the event refers to, or None for events of nobody."""

    time: float
    seq: int
    kind: EventKind
    target: int
    owner: Optional[int] = None
    cancelled: bool = False
    processed: bool = False  # Already returned by the queue

    def __lt__(self, other: "Event") -> bool:
        return (self.time, self.seq) < (other.time, other.seq)


@dataclass(frozen=True)
class VmPlacement:
    """Result of placing a VM on a host."""

    vm_id: int
    host_id: int


@dataclass(frozen=True)
class UtilizationSample:
    """Utilization observed by the autoscaler at an hour boundary."""

    hour: int
    utilization: float  # Percentage
    num_vms: int
    action: ScaleAction


@dataclass(frozen=True)
class SimulationSummary:
    """Final figures of an autoscaling run."""

    vms_created: int
    tasks_processed: int
    tasks_unprocessed: int
    average_response_time: float  # Seconds
    samples: tuple[UtilizationSample, ...]


@dataclass(frozen=True)
class StrategyResult:
    """Final figures of a run of the cost scenario for one strategy."""

    strategy_name: str
    cost: Currency
    average_completion_time: float  # Seconds
    vms_used: int
    tasks_processed: int

    def __post_init__(self):
        """Checks dimensions are valid and store them in the standard units."""
        object.__setattr__(self, "cost", self.cost.to("usd"))
