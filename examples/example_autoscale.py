"""A simple example of how to use cloudletsim for autoscaling."""

import logging

from cloudmodel.unified.units import CurrencyPerTime, Storage

from cloudletsim import (
    AutoscaleConfig,
    RoutingPolicy,
    VmType,
    WebAppConfig,
    run_autoscaling,
)
from cloudletsim.visualization import SummaryPrettyPrinter

vm_type = VmType(
    name="m5.large",
    mips=1000,
    pes=2,
    ram=Storage("2 gibibytes"),
    price=CurrencyPerTime("0.1 usd/hour"),
)

config = WebAppConfig(
    business_requests=300,
    simulation_hours=48,  # Two days
    routing=RoutingPolicy.LEAST_LOADED,
    autoscale=AutoscaleConfig(
        vm_type=vm_type,
        scale_up_threshold=70,
        scale_down_threshold=20,
        min_vms=2,
    ),
)

logging.basicConfig(level=logging.INFO)

# If you want the utilization to be computed from the load of the VMs instead
# of the business hours profile, use:
#
# config = dataclasses.replace(config, derived_utilization=True)

summary = run_autoscaling(config)

SummaryPrettyPrinter(summary).print()
