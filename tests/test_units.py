"""Tests about units for the `cloudletsim` package."""
import unittest

import pytest

import pint

from cloudmodel.unified.units import (
    Currency,
    CurrencyPerTime,
    Time,
    Storage,
)

from cloudletsim.model import HostSpec, StrategyResult, VmType


class TestUnits(unittest.TestCase):
    """Test that correct units work and that incorrect units give an error."""

    def test_valid_units_vm_type(self):
        """Checks a case with valid units for a VM type."""
        vm_type = VmType(
            name="vm0",
            mips=1000,
            pes=1,
            ram=Storage("1 gibibytes"),
            price=CurrencyPerTime("24 usd/day"),
        )
        self.assertAlmostEqual(vm_type.price.magnitude, 1.0)
        self.assertAlmostEqual(vm_type.ram.magnitude, 1024)

    def test_no_units_vm_type(self):
        """Checks a case with no units for the price of a VM type."""
        with pytest.raises(AttributeError):
            VmType(
                name="vm0",
                mips=1000,
                pes=1,
                ram=Storage("1 gibibytes"),
                price=1,
            )

    def test_invalid_price_units_vm_type(self):
        """Checks a case with invalid units for the price of a VM type."""
        with pytest.raises(pint.DimensionalityError):
            VmType(
                name="vm0",
                mips=1000,
                pes=1,
                ram=Storage("1 gibibytes"),
                price=Time("1 s"),
            )

    def test_invalid_ram_units_vm_type(self):
        """Checks a case with invalid units for the RAM of a VM type."""
        with pytest.raises(pint.DimensionalityError):
            VmType(
                name="vm0",
                mips=1000,
                pes=1,
                ram=Time("1 s"),
                price=CurrencyPerTime("1 usd/hour"),
            )

    def test_non_positive_mips(self):
        """Checks that a VM type without capacity is rejected."""
        with pytest.raises(ValueError):
            VmType(
                name="vm0",
                mips=0,
                pes=1,
                ram=Storage("1 gibibytes"),
                price=CurrencyPerTime("1 usd/hour"),
            )

    def test_invalid_ram_units_host(self):
        """Checks a case with invalid units for the RAM of a host."""
        with pytest.raises(pint.DimensionalityError):
            HostSpec(num_pes=1, pe_mips=1000, ram=Currency("1 usd"), bw=1000)

    def test_invalid_cost_units_result(self):
        """Checks a case with invalid units for the cost of a result."""
        with pytest.raises(pint.DimensionalityError):
            StrategyResult(
                strategy_name="s",
                cost=Time("1 s"),
                average_completion_time=0,
                vms_used=0,
                tasks_processed=0,
            )
