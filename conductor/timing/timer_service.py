"""
Timer Service

Cancellable delayed callbacks for the presentation conductor.

Every piece of scheduled work in the conductor (flow step actions, auto-advance,
demo steps, scene animation frames) is registered here and receives an
individually revocable TimerHandle.
"""

import asyncio
import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle:
	"""
	Handle for a single delayed callback.

	Cancellation is idempotent and synchronous: once `cancel()` returns, the
	callback will not run, even if the underlying loop already queued it.
	"""

	def __init__(self, callback: Callable[[], Any], due_ms: float, label: str | None = None):
		self._callback = callback
		self.due_ms = due_ms
		self.label = label or getattr(callback, '__name__', 'timer')
		self.cancelled = False
		self.fired = False
		self._loop_handle: asyncio.TimerHandle | None = None

	@property
	def active(self) -> bool:
		"""True while the callback is still pending."""
		return not self.cancelled and not self.fired

	def cancel(self) -> None:
		"""Revoke the callback. No-op on fired or already cancelled handles."""
		if not self.active:
			return
		self.cancelled = True
		if self._loop_handle is not None:
			self._loop_handle.cancel()
			self._loop_handle = None

	def _fire(self) -> None:
		if not self.active:
			# Queued before cancel() took effect
			logger.debug(f"Ignoring stale timer fire: {self.label}")
			return
		self.fired = True
		self._loop_handle = None
		self._callback()

	def __repr__(self) -> str:
		state = 'cancelled' if self.cancelled else 'fired' if self.fired else 'pending'
		return f"TimerHandle(label={self.label}, due={self.due_ms:.0f}ms, {state})"


class TimerService(Protocol):
	"""The single conceptual timer service all conductor components share."""

	def now(self) -> float:
		"""Monotonic time in milliseconds."""
		...

	def call_later(self, delay_ms: float, callback: Callable[[], Any], label: str | None = None) -> TimerHandle:
		"""Schedule `callback` after `delay_ms` milliseconds."""
		...


class AsyncioTimerService:
	"""TimerService backed by the running asyncio event loop."""

	def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
		"""
		Initialize the timer service.

		Args:
			loop: Event loop to schedule on. If None, the running loop is looked up on first use.
		"""
		self._loop = loop

	@property
	def loop(self) -> asyncio.AbstractEventLoop:
		if self._loop is None:
			self._loop = asyncio.get_running_loop()
		return self._loop

	def now(self) -> float:
		return self.loop.time() * 1000.0

	def call_later(self, delay_ms: float, callback: Callable[[], Any], label: str | None = None) -> TimerHandle:
		delay_ms = max(0.0, float(delay_ms))
		handle = TimerHandle(callback, due_ms=self.now() + delay_ms, label=label)
		handle._loop_handle = self.loop.call_later(delay_ms / 1000.0, handle._fire)
		return handle
