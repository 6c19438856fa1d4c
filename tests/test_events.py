"""Tests for `EventQueue` and `Simulation`."""

import pytest

from cloudletsim.errors import EndOfSimulation, InvalidDelay
from cloudletsim.events import EventQueue
from cloudletsim.model import EventKind
from cloudletsim.simulation import Simulation


class TestEventQueue:
    """Ordering, clock and cancellation of events."""

    def test_negative_delay(self) -> None:
        """Scheduling in the past is a programming error."""
        queue = EventQueue()
        with pytest.raises(InvalidDelay):
            queue.schedule(EventKind.TASK_SUBMIT, 0, delay=-1)

    def test_empty_queue(self) -> None:
        """Advancing an empty queue ends the simulation."""
        queue = EventQueue()
        assert not queue
        with pytest.raises(EndOfSimulation):
            queue.advance()

    def test_time_order(self) -> None:
        """Events are returned by time and the clock follows them."""
        queue = EventQueue()
        queue.schedule(EventKind.TASK_SUBMIT, 1, delay=10)
        queue.schedule(EventKind.TASK_SUBMIT, 2, delay=5)

        event = queue.advance()
        assert event.target == 2
        assert queue.now == 5

        event = queue.advance()
        assert event.target == 1
        assert queue.now == 10

    def test_fifo_tie_break(self) -> None:
        """Events with the same time are returned in insertion order."""
        queue = EventQueue()
        kinds = [EventKind.VM_DESTROY, EventKind.TASK_SUBMIT, EventKind.VM_CREATE]
        for target, kind in enumerate(kinds):
            queue.schedule(kind, target, delay=3)

        popped = [queue.advance() for _ in kinds]

        assert [event.target for event in popped] == [0, 1, 2]
        assert [event.kind for event in popped] == kinds

    def test_delay_is_relative_to_now(self) -> None:
        """The delay counts from the current time."""
        queue = EventQueue()
        queue.schedule(EventKind.HOUR_TICK, 0, delay=100)
        queue.advance()

        event = queue.schedule(EventKind.HOUR_TICK, 1, delay=50)

        assert event.time == 150

    def test_cancel(self) -> None:
        """Cancelled events are not returned and do not count."""
        queue = EventQueue()
        first = queue.schedule(EventKind.TASK_COMPLETE, 0, delay=1)
        queue.schedule(EventKind.TASK_COMPLETE, 1, delay=2)
        assert len(queue) == 2

        queue.cancel(first)
        queue.cancel(first)

        assert len(queue) == 1
        assert queue.peek_time() == 2
        assert queue.advance().target == 1
        with pytest.raises(EndOfSimulation):
            queue.advance()

    def test_cancel_processed_event(self) -> None:
        """Cancelling an event that was already returned changes nothing."""
        queue = EventQueue()
        first = queue.schedule(EventKind.TASK_COMPLETE, 0, delay=1)
        queue.schedule(EventKind.TASK_COMPLETE, 1, delay=2)

        assert queue.advance() is first
        queue.cancel(first)

        assert len(queue) == 1
        assert queue.advance().target == 1


class TestSimulation:
    """Dispatch of events to handlers."""

    def test_invalid_delay_is_fatal(self) -> None:
        """A handler that schedules in the past aborts the run."""
        sim = Simulation()

        def handler(event):
            sim.queue.schedule(EventKind.HOUR_TICK, event.target + 1, delay=-5)

        sim.register(EventKind.HOUR_TICK, handler)
        sim.queue.schedule(EventKind.HOUR_TICK, 0, delay=10)

        with pytest.raises(InvalidDelay):
            sim.run()
        assert sim.processed[EventKind.HOUR_TICK] == 1

    def test_one_handler_per_kind_and_owner(self) -> None:
        sim = Simulation()
        sim.register(EventKind.HOUR_TICK, lambda event: None, owner=0)
        sim.register(EventKind.HOUR_TICK, lambda event: None, owner=1)

        with pytest.raises(ValueError):
            sim.register(EventKind.HOUR_TICK, lambda event: None, owner=0)

    def test_events_go_to_their_owner(self) -> None:
        sim = Simulation()
        received: dict[int, list[int]] = {0: [], 1: []}
        for owner in received:
            sim.register(
                EventKind.TASK_SUBMIT,
                lambda event, owner=owner: received[owner].append(event.target),
                owner=owner,
            )
        sim.queue.schedule(EventKind.TASK_SUBMIT, 10, owner=1)
        sim.queue.schedule(EventKind.TASK_SUBMIT, 20, owner=0)
        sim.queue.schedule(EventKind.TASK_SUBMIT, 30, owner=1)

        sim.run()

        assert received == {0: [20], 1: [10, 30]}

    def test_event_without_handler(self) -> None:
        sim = Simulation()
        sim.register(EventKind.VM_CREATE, lambda event: None, owner=0)
        sim.queue.schedule(EventKind.VM_CREATE, 0, owner=1)

        with pytest.raises(ValueError):
            sim.run()
