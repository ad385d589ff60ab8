"""
Observer list for conductor notifications.
"""

import logging
from collections import deque
from typing import Callable, Generic, TypeVar

from conductor.utils import run_maybe_async

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Signal(Generic[T]):
	"""
	Synchronous publish/subscribe point.

	Listeners run in subscription order; a failing listener is logged and does
	not prevent the remaining listeners from running. A payload emitted from
	inside a listener is queued until the current payload has reached every
	listener, so all listeners see payloads in emission order.
	"""

	def __init__(self, name: str):
		self.name = name
		self._listeners: list[Callable[[T], object]] = []
		self._pending: deque[T] = deque()
		self._emitting = False

	def connect(self, listener: Callable[[T], object]) -> Callable[[], None]:
		"""
		Subscribe a listener.

		Returns:
			A callable that unsubscribes the listener
		"""
		self._listeners.append(listener)
		return lambda: self.disconnect(listener)

	def disconnect(self, listener: Callable[[T], object]) -> None:
		if listener in self._listeners:
			self._listeners.remove(listener)

	def emit(self, payload: T) -> None:
		self._pending.append(payload)
		if self._emitting:
			return
		self._emitting = True
		try:
			while self._pending:
				self._deliver(self._pending.popleft())
		finally:
			self._emitting = False

	def _deliver(self, payload: T) -> None:
		for listener in list(self._listeners):
			try:
				run_maybe_async(listener(payload), name=f"{self.name}_listener")
			except Exception as e:
				logger.error(f"Listener {listener!r} on signal '{self.name}' failed: {e}", exc_info=True)

	def __len__(self) -> int:
		return len(self._listeners)
