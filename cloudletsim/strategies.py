"""VM allocation strategies of the cost scenario. A strategy is a value of
AllocationStrategy and allocate_vm_types() turns it into the list of VM types
to create:

- CHEAPEST_FIRST: only VMs of the cheapest type.
- PERFORMANCE_FIRST: only VMs of the type with the highest MIPS.
- BALANCED: VMs of the second cheapest type (even positions) and of the
  cheapest type (odd positions).
- COST_OPTIMAL: the cheapest mix of types that reaches a target capacity,
  found by solving an integer linear program (see optimal.py).
"""

from enum import Enum
import logging

from . import catalog_helper
from .config import CostConfig
from .model import VmType
from .optimal import CostOptimalAllocator


class AllocationStrategy(Enum):
    """Ways of choosing the VMs of a run."""

    CHEAPEST_FIRST = 1
    PERFORMANCE_FIRST = 2
    BALANCED = 3
    COST_OPTIMAL = 4

    def label(self) -> str:
        return self.name.replace("_", "-").title()


def allocate_vm_types(strategy: AllocationStrategy, config: CostConfig) -> list[VmType]:
    """Returns the VM types to create for the strategy."""
    catalog = config.catalog

    if strategy == AllocationStrategy.CHEAPEST_FIRST:
        vm_types = [catalog_helper.compute_cheapest_type(catalog)] * config.cheapest_count
    elif strategy == AllocationStrategy.PERFORMANCE_FIRST:
        vm_types = [
            catalog_helper.compute_fastest_type(catalog)
        ] * config.performance_count
    elif strategy == AllocationStrategy.BALANCED:
        vm_types = _balanced(catalog, config.balanced_count)
    elif strategy == AllocationStrategy.COST_OPTIMAL:
        vm_types = CostOptimalAllocator(
            catalog, config.host, config.target_mips
        ).solve()
    else:
        raise ValueError(f"Unknown allocation strategy: {strategy}")

    logging.info(
        "Strategy %s allocates %i VMs: %s",
        strategy.label(),
        len(vm_types),
        ", ".join(vm_type.name for vm_type in vm_types),
    )
    return vm_types


def _balanced(catalog: tuple[VmType, ...], count: int) -> list[VmType]:
    """Alternates the second cheapest and the cheapest types. With only one
    type in the catalog, all the VMs are of that type."""
    by_price = catalog_helper.get_types_ordered_by_price_asc(catalog)
    cheapest = by_price[0]
    second = by_price[1] if len(by_price) > 1 else cheapest
    return [second if i % 2 == 0 else cheapest for i in range(count)]
