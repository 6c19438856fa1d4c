"""This module defines CostOptimalAllocator, which receives a catalog of VM
types, the host where they have to be placed and a target capacity in MIPS,
and constructs and solves the corresponding integer linear programming problem
using pulp:

- Variables: N_t, number of VMs of each type t.
- Objective: minimize the hourly price of the VMs. A tiny penalty per VM
  makes the solver prefer fewer VMs among mixes with the same price.
- Restrictions: the MIPS of the VMs reach the target, and their RAM and
  bandwidth fit in the host. Types whose PEs do not fit in the host are not
  considered.
"""

import logging
import time
from typing import Any

import pulp  # type: ignore
from pulp import LpVariable, lpSum, LpProblem, LpMinimize, PulpSolverError  # type: ignore
from pulp.constants import LpInteger  # type: ignore

from .model import HostSpec, VmType

VM_COUNT_PENALTY = 1e-6  # usd/hour per VM, only used to break ties


class CostOptimalAllocator:
    """Finds the cheapest set of VMs that reaches a target capacity."""

    def __init__(
        self, catalog: tuple[VmType, ...], host: HostSpec, target_mips: float
    ) -> None:
        """Constructor.

        Args:
            catalog: VM types that can be used
            host: host where all the VMs have to fit
            target_mips: minimum total MIPS of the VMs"""
        self.catalog = catalog
        self.host = host
        self.target_mips = target_mips

        self.usable_types = [
            vm_type
            for vm_type in catalog
            if vm_type.pes <= host.num_pes and vm_type.mips / vm_type.pes <= host.pe_mips
        ]
        self.lp_problem = LpProblem("VM_mix_problem", LpMinimize)
        self.n_vars: dict[str, LpVariable] = {}

    def solve(self, solver: Any = None) -> list[VmType]:
        """Solves the problem and returns the VM types to create, ordered by
        decreasing MIPS. Raises ValueError if there is no feasible mix. A
        pulp solver with options can be passed, for instance:

            from pulp import PULP_CBC_CMD
            solver = PULP_CBC_CMD(timeLimit=10, msg=False)
        """
        if self.target_mips <= 0:
            return []

        if not self.usable_types:
            raise ValueError("No VM type of the catalog fits in the host")

        start_creation = time.perf_counter()
        self.__create_vars()
        self.__create_objective()
        self.__create_restrictions()
        creation_time = time.perf_counter() - start_creation

        if solver is None:
            solver = pulp.PULP_CBC_CMD(msg=False)

        start_solving = time.perf_counter()
        try:
            self.lp_problem.solve(solver)
        except PulpSolverError as exception:
            raise ValueError(f"The solver failed: {exception}") from exception
        solving_time = time.perf_counter() - start_solving

        logging.info(
            "VM mix problem: status %s, creation %.3f s, solving %.3f s",
            pulp.LpStatus[self.lp_problem.status],
            creation_time,
            solving_time,
        )

        if self.lp_problem.status != pulp.LpStatusOptimal:
            raise ValueError(
                f"No mix of VMs reaches {self.target_mips} MIPS in the host "
                f"({pulp.LpStatus[self.lp_problem.status]})"
            )

        return self.__create_solution()

    def __create_vars(self) -> None:
        self.n_vars = LpVariable.dicts(
            name="N",
            indices=[vm_type.name for vm_type in self.usable_types],
            cat=LpInteger,
            lowBound=0,
        )

    def __create_objective(self) -> None:
        self.lp_problem += lpSum(
            self.n_vars[vm_type.name]
            * (vm_type.price.to("usd/h").magnitude + VM_COUNT_PENALTY)
            for vm_type in self.usable_types
        )

    def __create_restrictions(self) -> None:
        self.lp_problem += (
            lpSum(
                self.n_vars[vm_type.name] * vm_type.mips
                for vm_type in self.usable_types
            )
            >= self.target_mips,
            "Enough_mips",
        )

        self.lp_problem += (
            lpSum(
                self.n_vars[vm_type.name] * vm_type.ram.to("mebibytes").magnitude
                for vm_type in self.usable_types
            )
            <= self.host.ram.to("mebibytes").magnitude,
            "Enough_ram_in_host",
        )

        self.lp_problem += (
            lpSum(
                self.n_vars[vm_type.name] * vm_type.bw
                for vm_type in self.usable_types
            )
            <= self.host.bw,
            "Enough_bw_in_host",
        )

    def __create_solution(self) -> list[VmType]:
        vm_types = []
        for vm_type in sorted(self.usable_types, key=lambda t: -t.mips):
            count = round(self.n_vars[vm_type.name].value() or 0)
            if count > 0:
                logging.info("  %s = %i", self.n_vars[vm_type.name], count)
            vm_types.extend([vm_type] * count)

        return vm_types
