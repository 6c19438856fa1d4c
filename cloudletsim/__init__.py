"""Top-level package for cloudletsim."""

__version__ = "0.1.0"

from .model import (
    VmType,
    HostSpec,
    Host,
    Vm,
    Task,
    Event,
    EventKind,
    VmState,
    TaskState,
    ScaleAction,
    VmPlacement,
    UtilizationSample,
    SimulationSummary,
    StrategyResult,
)
from .errors import (
    SimulationError,
    CapacityExceeded,
    VmNotFound,
    TaskNotFound,
    NoAvailableVm,
    VmCapacityExceeded,
    InvalidDelay,
    EndOfSimulation,
)
from .events import EventQueue
from .resources import ResourcePool, PlacementPolicy
from .scheduler import TaskScheduler
from .simulation import Simulation
from .broker import Broker, RoutingPolicy
from .config import (
    AutoscaleConfig,
    WebAppConfig,
    CostConfig,
    default_catalog,
    web_vm_type,
)
from .autoscaler import AutoscaleController
from .cost import CostModel, average_completion_time
from .strategies import AllocationStrategy, allocate_vm_types
from .optimal import CostOptimalAllocator
from .scenarios import run_autoscaling, run_cost_comparison, run_strategy
