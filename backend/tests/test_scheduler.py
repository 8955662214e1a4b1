"""Scheduler tests: virtual clock ordering and phase timer groups."""
import asyncio

import pytest

from diamond_hunt.logic.scheduler import AsyncioScheduler, ManualScheduler, TimerGroup


class TestManualScheduler:
    """Tests for the virtual clock."""

    def test_runs_due_callbacks_in_time_order(self, scheduler):
        """Callbacks run in due-time order up to the target."""
        fired = []
        scheduler.call_later(0.3, lambda: fired.append("b"))
        scheduler.call_later(0.1, lambda: fired.append("a"))
        scheduler.call_later(1.0, lambda: fired.append("c"))

        scheduler.advance(0.5)
        assert fired == ["a", "b"]
        assert scheduler.time() == 0.5

        scheduler.advance(0.5)
        assert fired == ["a", "b", "c"]

    def test_same_instant_runs_in_scheduling_order(self, scheduler):
        """Ties run in the order they were scheduled."""
        fired = []
        for name in ("first", "second", "third"):
            scheduler.call_later(1.0, lambda n=name: fired.append(n))
        scheduler.advance(1.0)
        assert fired == ["first", "second", "third"]

    def test_clock_set_to_due_time_during_callback(self, scheduler):
        """time() reads the due instant inside a callback."""
        seen = []
        scheduler.call_later(0.25, lambda: seen.append(scheduler.time()))
        scheduler.advance(2)
        assert seen == [0.25]

    def test_callbacks_scheduled_during_advance_run_if_due(self, scheduler):
        """Timers added mid-advance run if they fall inside the window."""
        fired = []

        def chain():
            fired.append(scheduler.time())
            scheduler.call_later(0.5, lambda: fired.append(scheduler.time()))

        scheduler.call_later(0.5, chain)
        scheduler.advance(1.0)
        assert fired == [0.5, 1.0]

    def test_cancelled_timer_never_fires(self, scheduler):
        """A cancelled handle never runs."""
        fired = []
        handle = scheduler.call_later(1, lambda: fired.append(1))
        handle.cancel()
        scheduler.advance(5)
        assert fired == []
        assert scheduler.pending() == 0

    def test_hundred_ms_steps_land_exactly(self, scheduler):
        """25 steps of 100ms land exactly on 2.5s."""
        ticks = []
        group = TimerGroup(scheduler)
        group.every(0.1, lambda: ticks.append(scheduler.time()))
        scheduler.advance(2.5)
        assert len(ticks) == 25
        assert ticks[-1] == 2.5

    def test_negative_delay_rejected(self, scheduler):
        """Negative delays are refused."""
        with pytest.raises(ValueError):
            scheduler.call_later(-1, lambda: None)


class TestTimerGroup:
    """Tests for per-phase timer groups."""

    def test_every_repeats_until_cancelled(self, scheduler):
        """every() re-arms until the group is cancelled."""
        count = []
        group = TimerGroup(scheduler)
        group.every(1, lambda: count.append(1))
        scheduler.advance(3)
        assert len(count) == 3
        group.cancel_all()
        scheduler.advance(10)
        assert len(count) == 3
        assert scheduler.pending() == 0

    def test_cancel_all_from_inside_callback(self, scheduler):
        """A repeating callback that cancels its own group does not re-fire."""
        group = TimerGroup(scheduler)
        count = []

        def tick():
            count.append(1)
            if len(count) == 2:
                group.cancel_all()

        group.every(1, tick)
        scheduler.advance(10)
        assert len(count) == 2
        assert scheduler.pending() == 0

    def test_cancel_all_blocks_timer_due_at_same_instant(self, scheduler):
        """cancel_all() stops a sibling due at the same instant."""
        group = TimerGroup(scheduler)
        fired = []
        group.after(1, group.cancel_all)
        group.after(1, lambda: fired.append("stale"))
        scheduler.advance(1)
        assert fired == []

    def test_cancel_single_timer(self, scheduler):
        """cancel(key) stops one timer and leaves the rest."""
        group = TimerGroup(scheduler)
        fired = []
        key = group.every(0.1, lambda: fired.append("tick"))
        group.after(1, lambda: fired.append("done"))
        scheduler.advance(0.35)
        group.cancel(key)
        scheduler.advance(1)
        assert fired == ["tick", "tick", "tick", "done"]
        assert len(group) == 0

    def test_after_is_removed_once_fired(self, scheduler):
        """One-shot timers leave the group after firing."""
        group = TimerGroup(scheduler)
        group.after(1, lambda: None)
        assert len(group) == 1
        scheduler.advance(1)
        assert len(group) == 0

    def test_closed_group_refuses_new_timers(self, scheduler):
        """A cancelled group refuses new timers."""
        group = TimerGroup(scheduler)
        group.cancel_all()
        with pytest.raises(RuntimeError):
            group.after(1, lambda: None)
        with pytest.raises(RuntimeError):
            group.every(1, lambda: None)


class TestAsyncioScheduler:
    """Tests for the event-loop scheduler."""

    def test_call_later_runs_on_loop(self):
        """call_later runs the callback on the running loop."""
        async def scenario():
            scheduler = AsyncioScheduler()
            fired = asyncio.Event()
            scheduler.call_later(0.01, fired.set)
            await asyncio.wait_for(fired.wait(), timeout=1)
            return True

        assert asyncio.run(scenario())

    def test_cancelled_handle_does_not_run(self):
        """A cancelled loop handle never runs."""
        async def scenario():
            scheduler = AsyncioScheduler()
            fired = []
            handle = scheduler.call_later(0.01, lambda: fired.append(1))
            handle.cancel()
            await asyncio.sleep(0.05)
            return fired

        assert asyncio.run(scenario()) == []
