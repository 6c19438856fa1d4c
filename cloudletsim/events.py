"""This module defines EventQueue, the logical clock of a simulation run. It
keeps the pending events in a heap ordered by (time, insertion sequence), so
events with the same timestamp are processed in FIFO order."""

import heapq
import itertools
import logging
from typing import Optional

from .errors import EndOfSimulation, InvalidDelay
from .model import Event, EventKind


class EventQueue:
    """Priority queue of events plus the current simulated time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._heap: list[Event] = []
        self._seq = itertools.count()
        self._live = 0  # Number of events in the heap that are not cancelled

    def __len__(self) -> int:
        return self._live

    def __bool__(self) -> bool:
        return self._live > 0

    def schedule(
        self,
        kind: EventKind,
        target: int,
        delay: float = 0.0,
        owner: Optional[int] = None,
    ) -> Event:
        """Inserts an event at now + delay and returns it, so that it can be
        cancelled later."""
        if delay < 0:
            raise InvalidDelay(delay)

        event = Event(
            time=self.now + delay,
            seq=next(self._seq),
            kind=kind,
            target=target,
            owner=owner,
        )
        heapq.heappush(self._heap, event)
        self._live += 1
        return event

    def cancel(self, event: Event) -> None:
        """Removes the event from the timeline. Cancelled events stay in the
        heap but advance() skips them. Events already cancelled or returned by
        advance() are ignored."""
        if event.cancelled or event.processed:
            return
        event.cancelled = True
        self._live -= 1

    def advance(self) -> Event:
        """Pops the next live event and moves the clock to its time."""
        while self._heap:
            event = heapq.heappop(self._heap)
            if event.cancelled:
                continue

            self._live -= 1
            event.processed = True
            self.now = event.time
            logging.debug("t=%.3f %s(%d)", self.now, event.kind.name, event.target)
            return event

        raise EndOfSimulation()

    def peek_time(self) -> float:
        """Returns the time of the next live event, or infinity if there is
        none."""
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)

        if not self._heap:
            return float("inf")
        return self._heap[0].time
