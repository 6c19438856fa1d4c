"""Main loop of a simulation run. A Simulation owns the event queue and the id
counters of one run, and dispatches each popped event to the handler
registered for its kind and owner. Several brokers can share a simulation:
each one registers its handlers under its own id and only receives the events
of its VMs and tasks. Nothing is shared between two Simulation objects."""

from collections import Counter
import itertools
import logging
from typing import Callable, Optional

from .events import EventQueue
from .model import Event, EventKind

Handler = Callable[[Event], None]


class Simulation:
    """Discrete-event simulation kernel."""

    def __init__(self) -> None:
        self.queue = EventQueue()
        self.handlers: dict[tuple[EventKind, Optional[int]], Handler] = {}
        self.processed: Counter = Counter()  # Number of events processed per kind

        self._vm_ids = itertools.count()
        self._task_ids = itertools.count()
        self._broker_ids = itertools.count()

    @property
    def now(self) -> float:
        return self.queue.now

    def register(
        self, kind: EventKind, handler: Handler, owner: Optional[int] = None
    ) -> None:
        """Sets the handler for the events of a kind that belong to the owner.
        There can only be one per kind and owner."""
        if (kind, owner) in self.handlers:
            raise ValueError(
                f"There is already a handler for {kind.name} events of owner {owner}"
            )
        self.handlers[(kind, owner)] = handler

    def next_vm_id(self) -> int:
        return next(self._vm_ids)

    def next_task_id(self) -> int:
        return next(self._task_ids)

    def next_broker_id(self) -> int:
        return next(self._broker_ids)

    def run(self, until: Optional[float] = None) -> float:
        """Processes events until the queue is empty or the next event is after
        `until`. Each handler runs to completion before the next event is
        popped. Returns the simulated time at the end."""
        logging.info("Starting simulation")

        while self.queue:
            if until is not None and self.queue.peek_time() > until:
                break

            event = self.queue.advance()
            handler = self.handlers.get((event.kind, event.owner))
            if handler is None:
                raise ValueError(
                    f"No handler for {event.kind.name} events of owner {event.owner}"
                )

            self.processed[event.kind] += 1
            handler(event)

        logging.info(
            "Simulation finished at %.2f s after %i events",
            self.now,
            sum(self.processed.values()),
        )
        return self.now
