"""This module defines AutoscaleController, which evaluates the utilization of
the VMs of a broker once per simulated hour:

- If the utilization is above the scale up threshold, it requests one more VM.
- If it is below the scale down threshold and there are more live VMs than the
  minimum, it destroys the most recently created one.

There is no hysteresis apart from the band between the two thresholds."""

import logging
from typing import Callable, Optional

from .broker import Broker
from .config import AutoscaleConfig
from .model import Event, EventKind, ScaleAction, UtilizationSample
from .simulation import Simulation

HOUR = 3600.0  # Seconds

UtilizationSource = Callable[[int], float]


class AutoscaleController:
    """Hourly autoscaling loop of a broker."""

    def __init__(
        self,
        sim: Simulation,
        broker: Broker,
        config: AutoscaleConfig,
        utilization_source: Optional[UtilizationSource] = None,
    ) -> None:
        """Constructor.

        Args:
            sim: simulation where the HOUR_TICK events are processed
            broker: broker whose VMs are scaled
            config: thresholds, minimum number of VMs and type of the new VMs
            utilization_source: function that returns the utilization
              percentage for an hour. If it is None, the utilization is
              computed from the load of the running VMs."""
        self.sim = sim
        self.broker = broker
        self.config = config
        self.utilization_source = utilization_source
        self.samples: list[UtilizationSample] = []

        sim.register(EventKind.HOUR_TICK, self._on_hour_tick, owner=broker.id_)

    def schedule_hours(self, hours: int) -> None:
        """Schedules an HOUR_TICK event at the beginning of each hour."""
        for hour in range(hours):
            self.sim.queue.schedule(
                EventKind.HOUR_TICK,
                hour,
                hour * HOUR - self.sim.now,
                owner=self.broker.id_,
            )

    def measure_utilization(self, hour: int) -> float:
        """Returns the utilization percentage for the hour."""
        if self.utilization_source is not None:
            return self.utilization_source(hour)

        running = self.broker.running_vms()
        if not running:
            return 0.0

        total = sum(self.broker.scheduler.utilization(vm.id_, HOUR) for vm in running)
        return 100 * total / len(running)

    def evaluate(self, hour: int) -> ScaleAction:
        """Takes the scaling decision for the hour and records it."""
        utilization = self.measure_utilization(hour)
        live_vms = self.broker.live_vms()

        logging.info("Hour %d - Utilization: %.2f%%", hour, utilization)

        action = ScaleAction.NONE
        if utilization > self.config.scale_up_threshold:
            vm_id = self.broker.create_vm(self.config.vm_type)
            logging.info("Scaling UP - Added VM %i", vm_id)
            action = ScaleAction.SCALE_UP
        elif (
            utilization < self.config.scale_down_threshold
            and len(live_vms) > self.config.min_vms
        ):
            newest = max(live_vms, key=lambda vm: vm.id_)
            self.broker.request_destroy(newest.id_)
            logging.info("Scaling DOWN - Removed VM %i", newest.id_)
            action = ScaleAction.SCALE_DOWN

        self.samples.append(
            UtilizationSample(
                hour=hour,
                utilization=utilization,
                num_vms=len(live_vms),
                action=action,
            )
        )
        return action

    def _on_hour_tick(self, event: Event) -> None:
        self.evaluate(event.target)
