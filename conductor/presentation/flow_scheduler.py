"""
Flow Step Scheduler

Plays one flow step at a time: fires each scheduled action at its offset from
the step start and, when auto-advance is enabled, reports the end of the step.

A run owns one timer per scheduled action plus one auto-advance timer.
Cancelling a run revokes all of them synchronously; every fire callback also
re-checks that its run is still active before doing anything.
"""

import itertools
import logging
from functools import partial
from typing import Callable

from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.presentation.errors import StaleTimerFire
from conductor.schemas.flow import ActionResult, FlowStep, ScheduledAction
from conductor.timing.timer_service import TimerHandle, TimerService

logger = logging.getLogger(__name__)

StepElapsedCallback = Callable[["FlowRun"], None]


class FlowRun:
	"""One live execution of a flow step."""

	def __init__(self, run_id: int, step: FlowStep, started_at: float):
		self.run_id = run_id
		self.step = step
		self.started_at = started_at
		self.action_handles: list[TimerHandle] = []
		self.auto_advance_handle: TimerHandle | None = None
		self.fired: list[int] = []  # indexes into step.actions
		self.results: list[ActionResult] = []
		self.cancelled = False

	@property
	def active(self) -> bool:
		return not self.cancelled

	def pending_actions(self) -> list[ScheduledAction]:
		"""Scheduled actions that have neither fired nor been cancelled."""
		return [
			self.step.actions[index]
			for index, handle in enumerate(self.action_handles)
			if handle.active
		]

	def handles(self) -> list[TimerHandle]:
		owned = list(self.action_handles)
		if self.auto_advance_handle is not None:
			owned.append(self.auto_advance_handle)
		return owned

	def cancel(self) -> None:
		"""Revoke every owned timer. Idempotent."""
		self.cancelled = True
		for handle in self.handles():
			handle.cancel()

	def __repr__(self) -> str:
		return f"FlowRun(id={self.run_id}, section={self.step.section.value}, active={self.active})"


class FlowStepScheduler:
	"""
	Schedules the timed actions of the active flow step.

	At most one run is active at a time; starting a run cancels the previous one.
	"""

	def __init__(self, action_registry: PresentationActionRegistry, timer_service: TimerService):
		"""
		Initialize the scheduler.

		Args:
			action_registry: Registry used to execute scheduled actions by name
			timer_service: Timer service providing cancellable delayed callbacks
		"""
		self.action_registry = action_registry
		self.timer_service = timer_service
		self._active_run: FlowRun | None = None
		self._run_ids = itertools.count(1)

	@property
	def active_run(self) -> FlowRun | None:
		if self._active_run is not None and self._active_run.active:
			return self._active_run
		return None

	def start_run(
		self,
		step: FlowStep,
		auto_advance: bool = False,
		on_step_elapsed: StepElapsedCallback | None = None,
	) -> FlowRun:
		"""
		Start playing a flow step.

		Args:
			step: Flow step to play
			auto_advance: Whether to arm the end-of-step timer
			on_step_elapsed: Called with the run once the step duration has elapsed

		Returns:
			The new FlowRun
		"""
		self.cancel_run()

		run = FlowRun(run_id=next(self._run_ids), step=step, started_at=self.timer_service.now())
		for index, scheduled in enumerate(step.actions):
			handle = self.timer_service.call_later(
				scheduled.delay_ms,
				partial(self._fire_action, run, index),
				label=f"run{run.run_id}:{scheduled.action}",
			)
			run.action_handles.append(handle)

		self._active_run = run
		if auto_advance and on_step_elapsed is not None:
			self._arm_auto_advance(run, step.duration_ms, on_step_elapsed)

		logger.debug(
			f"Started run {run.run_id} for '{step.title}' "
			f"({len(step.actions)} actions, auto_advance={auto_advance})"
		)
		return run

	def cancel_run(self, run: FlowRun | None = None) -> None:
		"""
		Cancel a run (the active run by default).

		Safe to call with an already cancelled or finished run.
		"""
		target = run if run is not None else self._active_run
		if target is None:
			return
		if target.active:
			target.cancel()
			logger.debug(f"Cancelled run {target.run_id} ({target.step.section.value})")
		if target is self._active_run:
			self._active_run = None

	def set_auto_advance(self, enabled: bool, on_step_elapsed: StepElapsedCallback | None = None) -> None:
		"""
		Arm or disarm the end-of-step timer of the active run.

		When arming, the timer is set for the part of the step duration that
		has not yet elapsed.
		"""
		run = self.active_run
		if run is None:
			return
		if not enabled:
			if run.auto_advance_handle is not None:
				run.auto_advance_handle.cancel()
				run.auto_advance_handle = None
			return
		if on_step_elapsed is None:
			return
		if run.auto_advance_handle is not None and run.auto_advance_handle.active:
			return
		remaining = run.step.duration_ms - (self.timer_service.now() - run.started_at)
		self._arm_auto_advance(run, max(0.0, remaining), on_step_elapsed)

	def shutdown(self) -> None:
		self.cancel_run()

	def _arm_auto_advance(self, run: FlowRun, delay_ms: float, on_step_elapsed: StepElapsedCallback) -> None:
		run.auto_advance_handle = self.timer_service.call_later(
			delay_ms,
			partial(self._fire_auto_advance, run, on_step_elapsed),
			label=f"run{run.run_id}:auto_advance",
		)

	def _fire_action(self, run: FlowRun, index: int) -> None:
		scheduled = run.step.actions[index]
		if not run.active:
			logger.debug(str(StaleTimerFire(f"Run {run.run_id} cancelled before '{scheduled.action}' fired")))
			return
		if index in run.fired:
			return
		run.fired.append(index)
		run.results.append(self.action_registry.execute(scheduled.action))

	def _fire_auto_advance(self, run: FlowRun, on_step_elapsed: StepElapsedCallback) -> None:
		if not run.active:
			logger.debug(str(StaleTimerFire(f"Run {run.run_id} cancelled before auto-advance")))
			return
		run.auto_advance_handle = None
		logger.debug(f"Step '{run.step.title}' elapsed (run {run.run_id})")
		try:
			on_step_elapsed(run)
		except Exception as e:
			logger.error(f"Auto-advance handler failed for run {run.run_id}: {e}", exc_info=True)
