"""Configuration of the autoscaler and of the two scenarios. Every value is
validated when the dataclass is created."""

from dataclasses import dataclass, field

from cloudmodel.unified.units import CurrencyPerTime, Storage

from .broker import RoutingPolicy
from .model import HostSpec, VmType


def default_catalog() -> tuple[VmType, ...]:
    """VM types of the cost scenario."""
    return (
        VmType(
            name="Small",
            mips=500,
            pes=1,
            ram=Storage("512 mebibytes"),
            price=CurrencyPerTime("0.05 usd/hour"),
        ),
        VmType(
            name="Medium",
            mips=1000,
            pes=2,
            ram=Storage("1024 mebibytes"),
            price=CurrencyPerTime("0.10 usd/hour"),
        ),
        VmType(
            name="Large",
            mips=2000,
            pes=4,
            ram=Storage("2048 mebibytes"),
            price=CurrencyPerTime("0.20 usd/hour"),
        ),
    )


def web_vm_type() -> VmType:
    """VM type used by the web application scenario."""
    return VmType(
        name="Web",
        mips=1000,
        pes=2,
        ram=Storage("2048 mebibytes"),
        price=CurrencyPerTime("0.10 usd/hour"),
    )


@dataclass(frozen=True)
class AutoscaleConfig:
    """Thresholds (percentages) and floor of the autoscaler, and the type of
    the VMs it creates."""

    vm_type: VmType
    scale_up_threshold: float = 80.0
    scale_down_threshold: float = 30.0
    min_vms: int = 2

    def __post_init__(self):
        """Checks that the thresholds make a valid band."""
        for threshold in (self.scale_up_threshold, self.scale_down_threshold):
            if not 0 <= threshold <= 100:
                raise ValueError(f"Threshold {threshold} is not a percentage")

        if self.scale_down_threshold >= self.scale_up_threshold:
            raise ValueError(
                "The scale down threshold must be lower than the scale up threshold"
            )

        if self.min_vms < 0:
            raise ValueError("The minimum number of VMs cannot be negative")


@dataclass(frozen=True)
class WebAppConfig:
    """Configuration of the web application autoscaling scenario. Business
    hours go from business_hour_start to business_hour_end, both included."""

    business_hour_start: int = 8
    business_hour_end: int = 17
    business_requests: int = 150  # Per hour
    off_hours_requests: int = 50  # Per hour
    initial_vms: int = 2
    simulation_hours: int = 24
    request_length: float = 2000  # MI
    request_pes: int = 1
    request_file_size: int = 300
    request_output_size: int = 300
    business_utilization: float = 85.0
    off_hours_utilization: float = 25.0
    derived_utilization: bool = False
    routing: RoutingPolicy = RoutingPolicy.ROUND_ROBIN
    host: HostSpec = HostSpec(
        num_pes=4,
        pe_mips=1000,
        ram=Storage("16384 mebibytes"),
        bw=10000,
        storage=Storage("1000000 megabytes"),
    )
    autoscale: AutoscaleConfig = field(
        default_factory=lambda: AutoscaleConfig(vm_type=web_vm_type())
    )

    def __post_init__(self):
        """Checks the hour window and the workload."""
        if not 0 <= self.business_hour_start <= self.business_hour_end <= 23:
            raise ValueError("Invalid business hour window")
        if self.simulation_hours <= 0:
            raise ValueError("The simulation must last at least one hour")
        if self.initial_vms < 0 or self.business_requests < 0 or self.off_hours_requests < 0:
            raise ValueError("Counts cannot be negative")

    def is_business_hour(self, hour: int) -> bool:
        hour_of_day = hour % 24
        return self.business_hour_start <= hour_of_day <= self.business_hour_end

    def requests_at(self, hour: int) -> int:
        if self.is_business_hour(hour):
            return self.business_requests
        return self.off_hours_requests

    def profile_utilization(self, hour: int) -> float:
        """Utilization assumed for the hour when it is not derived from the
        load of the VMs."""
        if self.is_business_hour(hour):
            return self.business_utilization
        return self.off_hours_utilization


@dataclass(frozen=True)
class CostConfig:
    """Configuration of the cost optimization scenario."""

    catalog: tuple[VmType, ...] = field(default_factory=default_catalog)
    num_tasks: int = 50
    base_task_length: float = 1000  # MI
    task_length_step: float = 2000  # MI
    task_kinds: int = 3
    cheapest_count: int = 10
    performance_count: int = 3
    balanced_count: int = 5
    target_mips: float = 5000  # Capacity the cost optimal allocation must reach
    host: HostSpec = HostSpec(
        num_pes=8,
        pe_mips=2000,
        ram=Storage("16384 mebibytes"),
        bw=10000,
        storage=Storage("1000000 megabytes"),
    )

    def __post_init__(self):
        """Checks that there is a catalog and the counts are valid."""
        if not self.catalog:
            raise ValueError("The VM catalog cannot be empty")
        if len({vm_type.name for vm_type in self.catalog}) != len(self.catalog):
            raise ValueError("VM type names must be unique in the catalog")
        if min(self.cheapest_count, self.performance_count, self.balanced_count) < 0:
            raise ValueError("VM counts cannot be negative")
        if self.num_tasks < 0 or self.task_kinds <= 0:
            raise ValueError("Invalid workload")

    def task_length(self, i: int) -> float:
        """Length of the i-th task: small, medium and large tasks in turn."""
        return self.base_task_length + (i % self.task_kinds) * self.task_length_step
