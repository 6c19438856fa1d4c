"""The two scenarios of cloudletsim as functions that receive a configuration
and return the final figures:

- run_autoscaling(): a web application with more requests in business hours,
  whose VMs are scaled every hour.
- run_cost_comparison(): the same batch workload run with the VMs chosen by
  each allocation strategy, comparing cost and completion time.

Each run uses its own Simulation, so runs do not share any state."""

import logging
from typing import Iterable, Optional

from .autoscaler import HOUR, AutoscaleController
from .broker import Broker
from .config import CostConfig, WebAppConfig
from .cost import CostModel, average_completion_time
from .model import SimulationSummary, StrategyResult, Task
from .resources import ResourcePool
from .simulation import Simulation
from .strategies import AllocationStrategy, allocate_vm_types


def submit_requests(sim: Simulation, broker: Broker, config: WebAppConfig) -> None:
    """Submits the requests of every hour. They arrive evenly spread in the
    hour, each one in the middle of its slot, so none arrives at the hour
    boundary."""
    for hour in range(config.simulation_hours):
        count = config.requests_at(hour)
        for i in range(count):
            task = Task(
                id_=sim.next_task_id(),
                length=config.request_length,
                pes=config.request_pes,
                file_size=config.request_file_size,
                output_size=config.request_output_size,
            )
            broker.submit_task(task, delay=hour * HOUR + (i + 0.5) * HOUR / count)


def run_autoscaling(config: Optional[WebAppConfig] = None) -> SimulationSummary:
    """Runs the web application scenario and returns its summary."""
    if config is None:
        config = WebAppConfig()

    sim = Simulation()
    pool = ResourcePool([config.host])
    broker = Broker(sim, pool, routing=config.routing, name="WebApp-Broker")

    if config.derived_utilization:
        utilization_source = None
    else:
        utilization_source = config.profile_utilization
    controller = AutoscaleController(
        sim, broker, config.autoscale, utilization_source=utilization_source
    )

    for _ in range(config.initial_vms):
        broker.create_vm(config.autoscale.vm_type)

    controller.schedule_hours(config.simulation_hours)
    submit_requests(sim, broker, config)

    sim.run()

    finished = broker.finished_tasks()
    summary = SimulationSummary(
        vms_created=len(broker.vms),
        tasks_processed=len(finished),
        tasks_unprocessed=len(broker.unprocessed_tasks()),
        average_response_time=average_completion_time(finished),
        samples=tuple(controller.samples),
    )
    logging.info("Autoscaling summary: %s", summary)
    return summary


def run_strategy(strategy: AllocationStrategy, config: CostConfig) -> StrategyResult:
    """Runs the cost scenario with the VMs of one strategy."""
    sim = Simulation()
    pool = ResourcePool([config.host])
    broker = Broker(sim, pool, name="CostAware-Broker")

    for vm_type in allocate_vm_types(strategy, config):
        broker.create_vm(vm_type)

    for i in range(config.num_tasks):
        broker.submit_task(Task(id_=sim.next_task_id(), length=config.task_length(i)))

    sim.run()

    tasks = list(broker.tasks.values())
    cost = CostModel(config.catalog).total_cost(broker.vms.values(), tasks)
    result = StrategyResult(
        strategy_name=strategy.label(),
        cost=cost,
        average_completion_time=average_completion_time(tasks),
        vms_used=len(broker.vms),
        tasks_processed=len(broker.finished_tasks()),
    )
    logging.info(
        "Results - Cost: %s | Avg Time: %.2f sec | VMs Used: %i",
        result.cost,
        result.average_completion_time,
        result.vms_used,
    )
    return result


def run_cost_comparison(
    config: Optional[CostConfig] = None,
    strategies: Iterable[AllocationStrategy] = (
        AllocationStrategy.CHEAPEST_FIRST,
        AllocationStrategy.PERFORMANCE_FIRST,
        AllocationStrategy.BALANCED,
    ),
) -> list[StrategyResult]:
    """Runs the cost scenario once per strategy."""
    if config is None:
        config = CostConfig()

    results = []
    for strategy in strategies:
        logging.info("=== Testing Strategy: %s ===", strategy.label())
        results.append(run_strategy(strategy, config))
    return results
