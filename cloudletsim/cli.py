"""Console script for cloudletsim."""

import logging
import sys

import click
from rich.logging import RichHandler

from .broker import RoutingPolicy
from .config import AutoscaleConfig, CostConfig, WebAppConfig, web_vm_type
from .scenarios import run_autoscaling, run_cost_comparison
from .strategies import AllocationStrategy
from .visualization import CostPrettyPrinter, SummaryPrettyPrinter, print_catalog

STRATEGY_NAMES = {strategy.label().lower(): strategy for strategy in AllocationStrategy}
ROUTING_NAMES = {
    "round-robin": RoutingPolicy.ROUND_ROBIN,
    "least-loaded": RoutingPolicy.LEAST_LOADED,
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx):
    """Discrete-event simulation of autoscaling and cost-aware VM allocation."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
    return 0


@main.command()
@click.option("--hours", default=24, show_default=True, help="Simulated hours.")
@click.option("--initial-vms", default=2, show_default=True)
@click.option("--scale-up", default=80.0, show_default=True, help="Threshold (%).")
@click.option("--scale-down", default=30.0, show_default=True, help="Threshold (%).")
@click.option(
    "--derived-utilization",
    is_flag=True,
    help="Compute the utilization from the load of the VMs.",
)
@click.option(
    "--routing",
    type=click.Choice(sorted(ROUTING_NAMES)),
    default="round-robin",
    show_default=True,
)
@click.option("-v", "--verbose", is_flag=True, help="Log the simulation events.")
def autoscale(hours, initial_vms, scale_up, scale_down, derived_utilization, routing, verbose):
    """Web application with business-hour traffic and hourly autoscaling."""
    _setup_logging(verbose)
    try:
        config = WebAppConfig(
            simulation_hours=hours,
            initial_vms=initial_vms,
            derived_utilization=derived_utilization,
            routing=ROUTING_NAMES[routing],
            autoscale=AutoscaleConfig(
                vm_type=web_vm_type(),
                scale_up_threshold=scale_up,
                scale_down_threshold=scale_down,
                min_vms=initial_vms,
            ),
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    SummaryPrettyPrinter(run_autoscaling(config)).print()


@main.command()
@click.option(
    "--strategy",
    "strategy_names",
    type=click.Choice(sorted(STRATEGY_NAMES)),
    multiple=True,
    help="Strategy to test. Can be repeated. Default: all but cost-optimal.",
)
@click.option("--tasks", default=50, show_default=True, help="Number of tasks.")
@click.option("-v", "--verbose", is_flag=True, help="Log the simulation events.")
def cost(strategy_names, tasks, verbose):
    """Compare the cost of several VM allocation strategies."""
    _setup_logging(verbose)
    try:
        config = CostConfig(num_tasks=tasks)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    if strategy_names:
        strategies = [STRATEGY_NAMES[name] for name in strategy_names]
    else:
        strategies = [
            AllocationStrategy.CHEAPEST_FIRST,
            AllocationStrategy.PERFORMANCE_FIRST,
            AllocationStrategy.BALANCED,
        ]

    click.echo("Starting Cost Optimization Simulation...")
    if verbose:
        print_catalog(config.catalog)
    CostPrettyPrinter(run_cost_comparison(config, strategies)).print()


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
