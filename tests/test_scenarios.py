"""Tests for the two complete scenarios."""

import pytest

from cloudletsim.config import CostConfig, WebAppConfig
from cloudletsim.model import ScaleAction
from cloudletsim.scenarios import run_autoscaling, run_cost_comparison, run_strategy
from cloudletsim.strategies import AllocationStrategy

# 50 tasks of 1000, 3000 and 5000 MI in turn
TOTAL_MI = 148_000
# Every type of the default catalog costs 0.0001 usd/hour per MIPS
PRICE_PER_MIPS_HOUR = 0.0001


@pytest.fixture(scope="module")
def autoscaling_summary():
    return run_autoscaling()


class TestAutoscalingScenario:
    """Web application with the default configuration."""

    def test_final_figures(self, autoscaling_summary) -> None:
        """Ten business hours add one VM each; no request is lost."""
        assert autoscaling_summary.vms_created == 12
        assert autoscaling_summary.tasks_processed == 10 * 150 + 14 * 50
        assert autoscaling_summary.tasks_unprocessed == 0
        # Requests never overlap, so each one runs alone on a 1000 MIPS VM
        assert autoscaling_summary.average_response_time == pytest.approx(2.0)

    def test_actions(self, autoscaling_summary) -> None:
        actions = [sample.action for sample in autoscaling_summary.samples]
        assert actions == (
            [ScaleAction.NONE] * 8
            + [ScaleAction.SCALE_UP] * 10
            + [ScaleAction.SCALE_DOWN] * 6
        )

    def test_deterministic(self, autoscaling_summary) -> None:
        assert run_autoscaling() == autoscaling_summary

    def test_short_run(self) -> None:
        summary = run_autoscaling(WebAppConfig(simulation_hours=2))
        assert summary.vms_created == 2
        assert summary.tasks_processed == 100
        assert len(summary.samples) == 2

    def test_derived_utilization(self) -> None:
        """The requests hardly load the VMs, so the autoscaler never adds
        one."""
        summary = run_autoscaling(WebAppConfig(derived_utilization=True))
        assert summary.vms_created == 2
        assert summary.tasks_processed == 2200
        assert all(sample.action == ScaleAction.NONE for sample in summary.samples)


class TestCostScenario:
    """Cost comparison with the default catalog and workload."""

    def test_cheapest_first(self) -> None:
        result = run_strategy(AllocationStrategy.CHEAPEST_FIRST, CostConfig())
        assert result.strategy_name == "Cheapest-First"
        assert result.vms_used == 10
        assert result.tasks_processed == 50

    def test_default_comparison(self) -> None:
        results = run_cost_comparison()

        assert [r.strategy_name for r in results] == [
            "Cheapest-First",
            "Performance-First",
            "Balanced",
        ]
        assert [r.vms_used for r in results] == [10, 3, 5]
        for result in results:
            assert result.tasks_processed == 50
            assert result.average_completion_time > 0

    def test_same_price_per_mips_gives_same_cost(self) -> None:
        """No VM is idle before its last task finishes, so each strategy pays
        for exactly the work done."""
        expected = TOTAL_MI * PRICE_PER_MIPS_HOUR / 3600
        results = run_cost_comparison(
            strategies=list(AllocationStrategy),
        )

        for result in results:
            assert result.cost.to("usd").magnitude == pytest.approx(expected)

    def test_no_tasks(self) -> None:
        result = run_strategy(AllocationStrategy.BALANCED, CostConfig(num_tasks=0))
        assert result.tasks_processed == 0
        assert result.cost.to("usd").magnitude == 0
        assert result.average_completion_time == 0
