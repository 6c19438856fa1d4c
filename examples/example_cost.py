"""An example of how to compare allocation strategies with cloudletsim."""

import logging

from cloudmodel.unified.units import CurrencyPerTime, Storage

from cloudletsim import (
    AllocationStrategy,
    CostConfig,
    VmType,
    default_catalog,
    run_cost_comparison,
)
from cloudletsim.visualization import CostPrettyPrinter, print_catalog

# A type that is cheaper per MIPS than the default ones
spot = VmType(
    name="Spot",
    mips=1500,
    pes=2,
    ram=Storage("1 gibibytes"),
    price=CurrencyPerTime("0.09 usd/hour"),
)

config = CostConfig(
    catalog=default_catalog() + (spot,),
    num_tasks=200,
    target_mips=6000,
)

logging.basicConfig(level=logging.INFO)

print_catalog(config.catalog)

results = run_cost_comparison(config, strategies=list(AllocationStrategy))

CostPrettyPrinter(results).print()
