"""
Tests for the timer services.

Tests cover:
- Virtual clock ordering and cancellation
- TimerHandle idempotent cancel and stale fire guard
- Asyncio-backed timer service
"""

import asyncio

from conductor.timing.timer_service import AsyncioTimerService, TimerHandle
from conductor.timing.virtual import ManualTimerService


class TestManualTimerService:
	"""Tests for the virtual clock."""

	def test_fires_in_due_order(self, timers):
		"""Callbacks fire in due-time order regardless of registration order."""
		order = []
		timers.call_later(300, lambda: order.append('c'))
		timers.call_later(100, lambda: order.append('a'))
		timers.call_later(200, lambda: order.append('b'))

		fired = timers.advance(1000)

		assert order == ['a', 'b', 'c']
		assert fired == 3
		assert timers.now() == 1000

	def test_same_due_time_keeps_registration_order(self, timers):
		"""Test that callbacks due at the same time fire in registration order."""
		order = []
		for label in ('first', 'second', 'third'):
			timers.call_later(50, lambda label=label: order.append(label))

		timers.advance(50)

		assert order == ['first', 'second', 'third']

	def test_callbacks_see_their_due_time(self, timers):
		"""The clock reads the callback's due time while it runs."""
		seen = []
		timers.call_later(250, lambda: seen.append(timers.now()))
		timers.advance(1000)
		assert seen == [250]

	def test_callback_scheduled_while_advancing_fires_in_same_advance(self, timers):
		"""Test that a callback scheduled during advance fires if due."""
		order = []

		def _first():
			order.append('first')
			timers.call_later(100, lambda: order.append('nested'))

		timers.call_later(100, _first)
		timers.advance(200)

		assert order == ['first', 'nested']

	def test_nested_callback_past_target_waits(self, timers):
		"""Test that a callback scheduled past the target time waits."""
		order = []
		timers.call_later(100, lambda: timers.call_later(500, lambda: order.append('late')))

		timers.advance(200)
		assert order == []

		timers.advance(400)
		assert order == ['late']

	def test_cancelled_handle_never_fires(self, timers):
		"""Test that a cancelled handle never fires."""
		calls = []
		handle = timers.call_later(100, lambda: calls.append(1))
		handle.cancel()

		timers.advance(1000)

		assert calls == []
		assert timers.pending_count() == 0

	def test_advance_zero_fires_due_callbacks(self, timers):
		"""Test that advance(0) fires zero-delay callbacks."""
		calls = []
		timers.call_later(0, lambda: calls.append(1))
		assert calls == []

		timers.advance(0)
		assert calls == [1]

	def test_pending_count_and_next_due(self, timers):
		"""Test pending count and next due time bookkeeping."""
		timers.call_later(100, lambda: None)
		handle = timers.call_later(50, lambda: None)
		assert timers.pending_count() == 2
		assert timers.next_due() == 50

		handle.cancel()
		assert timers.pending_count() == 1
		assert timers.next_due() == 100

	def test_run_until_idle(self, timers):
		"""Test running the virtual clock until no timers remain."""
		calls = []
		timers.call_later(1000, lambda: timers.call_later(1000, lambda: calls.append('done')))

		timers.run_until_idle()

		assert calls == ['done']
		assert timers.now() == 2000
		assert timers.next_due() is None

	def test_run_until_idle_respects_limit(self):
		"""Test that run_until_idle stops at its limit."""
		timers = ManualTimerService(start_ms=0)
		calls = []
		timers.call_later(5000, lambda: calls.append(1))

		timers.run_until_idle(limit_ms=1000)

		assert calls == []
		assert timers.pending_count() == 1


class TestTimerHandle:
	"""Tests for TimerHandle cancellation semantics."""

	def test_cancel_is_idempotent(self):
		"""Test that cancelling a handle twice is harmless."""
		handle = TimerHandle(lambda: None, due_ms=0)
		handle.cancel()
		handle.cancel()
		assert handle.cancelled
		assert not handle.active

	def test_cancel_after_fire_is_noop(self):
		"""Test that cancelling a fired handle is a no-op."""
		calls = []
		handle = TimerHandle(lambda: calls.append(1), due_ms=0)
		handle._fire()
		handle.cancel()

		assert calls == [1]
		assert handle.fired
		assert not handle.cancelled

	def test_stale_fire_is_ignored(self):
		"""A fire that was queued before cancel() took effect does nothing."""
		calls = []
		handle = TimerHandle(lambda: calls.append(1), due_ms=0)
		handle.cancel()
		handle._fire()
		assert calls == []

	def test_fires_at_most_once(self):
		"""Test that a handle fires at most once."""
		calls = []
		handle = TimerHandle(lambda: calls.append(1), due_ms=0)
		handle._fire()
		handle._fire()
		assert calls == [1]


class TestAsyncioTimerService:
	"""Tests for the event-loop backed timer service."""

	async def test_call_later_fires(self):
		"""Test that the asyncio timer service fires callbacks."""
		service = AsyncioTimerService()
		done = asyncio.Event()

		service.call_later(10, done.set)

		await asyncio.wait_for(done.wait(), timeout=1.0)

	async def test_cancel_prevents_fire(self):
		"""Test that cancelling an asyncio timer prevents the callback."""
		service = AsyncioTimerService()
		calls = []

		handle = service.call_later(10, lambda: calls.append(1))
		handle.cancel()
		await asyncio.sleep(0.05)

		assert calls == []

	async def test_now_is_milliseconds(self):
		"""Test that now() reports milliseconds."""
		service = AsyncioTimerService()
		start = service.now()
		await asyncio.sleep(0.02)
		assert service.now() - start >= 15
