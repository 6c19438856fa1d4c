"""This module provides ways of visualizing configurations and results of
cloudletsim runs."""

from rich.table import Table, Column
from rich import print

from .model import ScaleAction, SimulationSummary, StrategyResult, VmType


class SummaryPrettyPrinter:
    """Utility methods to create pretty presentations of an autoscaling run."""

    def __init__(self, summary: SimulationSummary):
        self.summary = summary

    def get_summary(self) -> str:
        """Returns the final figures of the run."""
        res = (
            "\n========== FINAL RESULTS ==========\n"
            f"Total VMs created: {self.summary.vms_created}\n"
            f"Total requests processed: {self.summary.tasks_processed}\n"
            f"Average response time: {self.summary.average_response_time:.2f} seconds"
        )
        if self.summary.tasks_unprocessed:
            res += (
                f"\n[bold red]Requests not processed: {self.summary.tasks_unprocessed}"
            )
        return res

    def get_hours_table(self) -> Table:
        """Returns a Rich table with the utilization and action of each hour."""
        table = Table(
            Column(header="Hour", justify="right"),
            Column(header="Utilization", justify="right"),
            Column(header="VMs", justify="right"),
            "Action",
            title="Autoscaling",
        )

        for sample in self.summary.samples:
            if sample.action == ScaleAction.NONE:
                action = ""
            else:
                action = sample.action.name.replace("_", " ").lower()
            table.add_row(
                str(sample.hour),
                f"{sample.utilization:.2f}%",
                str(sample.num_vms),
                action,
            )

        return table

    def print(self):
        """Prints a table and a summary of the run."""
        print(self.get_hours_table())
        print(self.get_summary())


class CostPrettyPrinter:
    """Utility methods to compare the results of the allocation strategies."""

    def __init__(self, results: list[StrategyResult]):
        self.results = results

    def get_table(self) -> Table:
        """Returns a Rich table with a row per strategy."""
        table = Table(
            "Strategy",
            Column(header="Cost", justify="right"),
            Column(header="Avg. time (s)", justify="right"),
            Column(header="VMs", justify="right"),
            Column(header="Tasks", justify="right"),
            title="Cost optimization",
        )

        if not self.results:
            return table

        cheapest = min(self.results, key=lambda r: r.cost)
        for result in self.results:
            name = result.strategy_name
            if result is cheapest:
                name = f"[bold green]{name}"
            table.add_row(
                name,
                f"${result.cost.to('usd').magnitude:.2f}",
                f"{result.average_completion_time:.2f}",
                str(result.vms_used),
                str(result.tasks_processed),
            )

        return table

    def print(self):
        print(self.get_table())


def table_catalog(catalog: tuple[VmType, ...]) -> Table:
    """Returns a table with information about the VM types."""
    table = Table(title="VM types")
    table.add_column("VM type")
    table.add_column("MIPS", justify="right")
    table.add_column("PEs", justify="right")
    table.add_column("RAM", justify="right")
    table.add_column("Price", justify="right")

    for vm_type in catalog:
        table.add_row(
            vm_type.name,
            str(vm_type.mips),
            str(vm_type.pes),
            str(vm_type.ram),
            str(vm_type.price),
        )

    return table


def print_catalog(catalog: tuple[VmType, ...]) -> None:
    """Prints information about the VM types."""
    print(table_catalog(catalog))
