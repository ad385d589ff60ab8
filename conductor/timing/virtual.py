"""
Virtual Clock Timer Service

Deterministic TimerService driven by explicit `advance()` calls. Used to
rehearse a full presentation or demo run instantly and to exercise timing
behaviour in tests.
"""

import heapq
import itertools
import logging
from typing import Any, Callable

from conductor.timing.timer_service import TimerHandle

logger = logging.getLogger(__name__)


class ManualTimerService:
	"""
	TimerService with a manually advanced clock.

	Callbacks fire in (due time, registration order) order. Callbacks scheduled
	while advancing fire in the same `advance()` call if they fall due before
	its target time.
	"""

	def __init__(self, start_ms: float = 0.0):
		self._now = float(start_ms)
		self._queue: list[tuple[float, int, TimerHandle]] = []
		self._counter = itertools.count()

	def now(self) -> float:
		return self._now

	def call_later(self, delay_ms: float, callback: Callable[[], Any], label: str | None = None) -> TimerHandle:
		due = self._now + max(0.0, float(delay_ms))
		handle = TimerHandle(callback, due_ms=due, label=label)
		heapq.heappush(self._queue, (due, next(self._counter), handle))
		return handle

	def pending_count(self) -> int:
		"""Number of handles that are still waiting to fire."""
		return sum(1 for _, _, handle in self._queue if handle.active)

	def next_due(self) -> float | None:
		"""Due time of the earliest pending handle, or None when idle."""
		self._discard_inactive()
		return self._queue[0][0] if self._queue else None

	def advance(self, delta_ms: float) -> int:
		"""
		Move the clock forward, firing every callback that falls due.

		Args:
			delta_ms: Milliseconds to advance (0 fires callbacks already due)

		Returns:
			Number of callbacks fired
		"""
		target = self._now + max(0.0, float(delta_ms))
		fired = 0
		while True:
			self._discard_inactive()
			if not self._queue or self._queue[0][0] > target:
				break
			due, _, handle = heapq.heappop(self._queue)
			self._now = max(self._now, due)
			handle._fire()
			fired += 1
		self._now = target
		return fired

	def advance_to(self, time_ms: float) -> int:
		"""Advance the clock to an absolute time."""
		return self.advance(max(0.0, time_ms - self._now))

	def run_until_idle(self, limit_ms: float = 3_600_000.0) -> int:
		"""
		Fire pending callbacks until none remain or the time limit is reached.

		Args:
			limit_ms: Maximum virtual time to advance past the current clock

		Returns:
			Number of callbacks fired
		"""
		deadline = self._now + limit_ms
		fired = 0
		while True:
			due = self.next_due()
			if due is None or due > deadline:
				break
			fired += self.advance_to(due)
		if self.next_due() is not None:
			logger.warning(f"Virtual clock stopped at limit with {self.pending_count()} timers pending")
		return fired

	def _discard_inactive(self) -> None:
		while self._queue and not self._queue[0][2].active:
			heapq.heappop(self._queue)
