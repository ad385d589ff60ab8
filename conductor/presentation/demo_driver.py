"""
Demo Automation Driver

Replays a scripted walkthrough of the presentation without a human operator.
The script is a chain of single-shot timers: each step runs its action and
then schedules the next step after its post-delay. Only one timer is ever
pending, so pausing cancels exactly that timer and keeps the position.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from conductor.presentation.errors import ActionExecutionError, StaleTimerFire
from conductor.schemas.flow import DemoStatus
from conductor.timing.timer_service import TimerHandle, TimerService
from conductor.utils import run_maybe_async

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoStep:
	"""One scripted demo step."""

	name: str
	action: Callable[[], Any]
	post_delay_ms: int = 3000


@dataclass
class DemoRunState:
	"""Mutable state of a demo run. Exists only between start() and stop()."""

	is_running: bool = False
	is_paused: bool = False
	current_step_index: int = 0
	pending_handle: TimerHandle | None = None
	executed_index: int | None = None


class DemoDriver:
	"""
	Drives the demo script.

	States: idle -> running -> (paused <-> running) -> idle. The driver does
	not lock out manual navigation; the hosting application is expected to
	stop it when it detects direct user interaction.
	"""

	def __init__(
		self,
		timer_service: TimerService,
		steps: list[DemoStep] | None = None,
		cleanup: Callable[[], Any] | None = None,
		on_step: Callable[[int, DemoStep], Any] | None = None,
	):
		"""
		Initialize the demo driver.

		Args:
			timer_service: Timer service for post-delay timers
			steps: Demo script. Can also be supplied later via set_steps().
			cleanup: Called by stop() to undo cosmetic demo effects
			on_step: Called with (index, step) each time a step's action runs
		"""
		self.timer_service = timer_service
		self.steps: list[DemoStep] = list(steps or [])
		self._cleanup = cleanup
		self._on_step = on_step
		self.speed = 1.0
		self._state: DemoRunState | None = None

	def set_steps(self, steps: list[DemoStep]) -> None:
		if self.is_running:
			raise RuntimeError("Cannot replace the demo script while the demo is running")
		self.steps = list(steps)

	# ------------------------------------------------------------------
	# Queries
	# ------------------------------------------------------------------

	@property
	def is_running(self) -> bool:
		return self._state is not None and self._state.is_running

	@property
	def is_paused(self) -> bool:
		return self._state is not None and self._state.is_paused

	@property
	def current_step_index(self) -> int:
		return self._state.current_step_index if self._state is not None else 0

	def progress_percent(self) -> int:
		if not self.is_running or not self.steps:
			return 0
		return round(self.current_step_index / len(self.steps) * 100)

	def status(self) -> DemoStatus:
		index = self.current_step_index
		step = self.steps[index] if self.is_running and index < len(self.steps) else None
		return DemoStatus(
			is_running=self.is_running,
			is_paused=self.is_paused,
			current_step_index=index,
			total_steps=len(self.steps),
			current_step_name=step.name if step else None,
			progress_percent=self.progress_percent(),
		)

	def set_speed(self, multiplier: float) -> None:
		"""Scale post-delays (2.0 plays twice as fast). Applies from the next scheduled step."""
		if multiplier <= 0:
			raise ValueError("Demo speed multiplier must be positive")
		self.speed = multiplier

	# ------------------------------------------------------------------
	# Lifecycle
	# ------------------------------------------------------------------

	def start(self) -> bool:
		"""Start the demo from the first step, restarting it if already running."""
		if self.is_running:
			self.stop()
		if not self.steps:
			logger.warning("Demo script is empty; not starting")
			return False

		self._state = DemoRunState(is_running=True)
		logger.info(f"Demo mode started ({len(self.steps)} steps)")
		self._execute_current()
		return True

	def stop(self) -> bool:
		"""
		Stop the demo, cancel its pending timer and undo its cosmetic effects.

		Returns:
			True if a running demo was stopped
		"""
		state = self._state
		if state is None or not state.is_running:
			return False
		self._cancel_pending(state)
		state.is_running = False
		state.is_paused = False
		self._state = None
		logger.info("Demo mode stopped")

		if self._cleanup is not None:
			try:
				run_maybe_async(self._cleanup(), name="demo_cleanup")
			except Exception as e:
				logger.error(f"Demo cleanup failed: {e}", exc_info=True)
		return True

	def shutdown(self) -> None:
		"""Cancel the pending timer and drop the run without running cleanup."""
		state = self._state
		if state is not None:
			self._cancel_pending(state)
			state.is_running = False
			self._state = None

	def pause(self) -> bool:
		"""Cancel the pending step timer, keeping the current position."""
		state = self._state
		if state is None or not state.is_running or state.is_paused:
			return False
		state.is_paused = True
		self._cancel_pending(state)
		logger.info(f"Demo mode paused at step {state.current_step_index}")
		return True

	def resume(self) -> bool:
		"""
		Continue a paused demo.

		The current step's post-delay is scheduled again from now; its action
		is not run a second time.
		"""
		state = self._state
		if state is None or not state.is_running or not state.is_paused:
			return False
		state.is_paused = False
		logger.info(f"Demo mode resumed at step {state.current_step_index}")
		self._execute_current()
		return True

	def toggle(self) -> bool:
		"""Start the demo if idle, otherwise stop it. Returns the new running state."""
		if self.is_running:
			self.stop()
		else:
			self.start()
		return self.is_running

	def skip_to_step(self, index: int) -> bool:
		"""Jump to a step of a running demo and run it immediately."""
		state = self._state
		if state is None or not state.is_running or not 0 <= index < len(self.steps):
			return False
		self._cancel_pending(state)
		state.current_step_index = index
		state.executed_index = None
		self._execute_current()
		return True

	# ------------------------------------------------------------------
	# Internals
	# ------------------------------------------------------------------

	def _cancel_pending(self, state: DemoRunState) -> None:
		if state.pending_handle is not None:
			state.pending_handle.cancel()
			state.pending_handle = None

	def _execute_current(self) -> None:
		state = self._state
		if state is None or not state.is_running or state.is_paused:
			return
		index = state.current_step_index
		if index >= len(self.steps):
			self.stop()
			return
		step = self.steps[index]

		if state.executed_index != index:
			state.executed_index = index
			logger.info(f"Demo step {index + 1}/{len(self.steps)}: {step.name}")
			if self._on_step is not None:
				try:
					self._on_step(index, step)
				except Exception as e:
					logger.error(f"Demo step observer failed: {e}", exc_info=True)
			try:
				run_maybe_async(step.action(), name=f"demo_step_{index}")
			except Exception as e:
				logger.error(str(ActionExecutionError(step.name, e)), exc_info=True)

		# The action may have stopped, paused or redirected the demo
		if self._state is not state or not state.is_running or state.is_paused:
			return
		if state.current_step_index != index or state.pending_handle is not None:
			return

		state.pending_handle = self.timer_service.call_later(
			step.post_delay_ms / self.speed,
			partial(self._advance, state, index),
			label=f"demo:{step.name}",
		)

	def _advance(self, state: DemoRunState, index: int) -> None:
		if self._state is not state or not state.is_running or state.is_paused or state.current_step_index != index:
			logger.debug(str(StaleTimerFire(f"Demo timer for step {index} fired after cancellation")))
			return
		state.pending_handle = None
		state.current_step_index += 1
		if state.current_step_index >= len(self.steps):
			self.stop()
			return
		self._execute_current()
