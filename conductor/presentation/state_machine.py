"""
Section State Machine

Owns the current section, the current flow step index and the playback state
of the presentation. Every navigation request (presenter click, keyboard
shortcut, auto-advance, demo driver) funnels through `navigate_to`, which
tears down the previous step's run before anything else happens.
"""

import logging
from typing import Callable

from conductor.presentation.errors import InvalidTransition
from conductor.presentation.flow_scheduler import FlowRun, FlowStepScheduler
from conductor.presentation.signals import Signal
from conductor.scene.contract import SceneSynchronizer
from conductor.schemas.flow import FlowStep, PresentationState, SectionChangedEvent, SectionId
from conductor.timing.timer_service import TimerService

logger = logging.getLogger(__name__)


class SectionStateMachine:
	"""
	Cyclic section state machine with timed playback.

	The machine starts on the first section and has no terminal state.
	`current_section` and `current_step_index` always refer to the same flow
	step; both are updated together before the new run's timers are armed.
	"""

	def __init__(
		self,
		flow_steps: tuple[FlowStep, ...] | list[FlowStep],
		scheduler: FlowStepScheduler,
		scene: SceneSynchronizer,
		timer_service: TimerService,
		on_presentation_finished: Callable[[], None] | None = None,
	):
		"""
		Initialize the state machine.

		Args:
			flow_steps: Static flow script, one step per section in section order
			scheduler: Scheduler that plays the active step's timed actions
			scene: Visual subsystem notified on every section entry
			timer_service: Clock used for elapsed-time accounting
			on_presentation_finished: Called once when auto-advance runs past the last step
		"""
		self._steps: tuple[FlowStep, ...] = tuple(flow_steps)
		self._index_by_section: dict[SectionId, int] = {
			step.section: index for index, step in enumerate(self._steps)
		}
		self.scheduler = scheduler
		self.scene = scene
		self.timer_service = timer_service
		self._on_presentation_finished = on_presentation_finished

		self.section_changed: Signal[SectionChangedEvent] = Signal('section_changed')
		self.auto_advance = False
		self.in_transition = False

		self.current_section: SectionId = self._steps[0].section if self._steps else SectionId.CHAOS
		self.current_step_index = 0
		self.state = PresentationState(
			total_duration_ms=sum(step.duration_ms for step in self._steps),
		)

		if not self._steps:
			logger.error("No flow steps configured: playback is disabled")
		logger.debug(
			f"SectionStateMachine initialized ({len(self._steps)} steps, "
			f"total {self.state.total_duration_ms}ms)"
		)

	# ------------------------------------------------------------------
	# Queries
	# ------------------------------------------------------------------

	@property
	def flow_steps(self) -> tuple[FlowStep, ...]:
		return self._steps

	@property
	def current_step(self) -> FlowStep | None:
		if not self._steps:
			return None
		return self._steps[self.current_step_index]

	@property
	def first_section(self) -> SectionId:
		return self._steps[0].section if self._steps else SectionId.CHAOS

	def get_presentation_state(self) -> PresentationState:
		"""Return a copy of the playback state."""
		return self.state.model_copy()

	def elapsed_ms(self) -> float:
		"""Elapsed presentation time, excluding paused periods."""
		if self.state.is_playing and not self.state.is_paused and self.state.start_timestamp_ms is not None:
			return max(0.0, self.timer_service.now() - self.state.start_timestamp_ms)
		return self.state.accumulated_ms

	def total_ms(self) -> int:
		return self.state.total_duration_ms

	def timing(self) -> tuple[float, int]:
		"""Elapsed/total pair for timer display chrome, computed on demand."""
		return self.elapsed_ms(), self.total_ms()

	def progress_percent(self) -> float:
		total = self.total_ms()
		if total <= 0:
			return 0.0
		return min(self.elapsed_ms() / total * 100.0, 100.0)

	def format_elapsed(self) -> str:
		"""Elapsed time as M:SS."""
		elapsed = int(self.elapsed_ms())
		minutes, remainder = divmod(elapsed, 60_000)
		return f"{minutes}:{remainder // 1000:02d}"

	# ------------------------------------------------------------------
	# Navigation
	# ------------------------------------------------------------------

	def navigate_to(self, target: SectionId | str) -> bool:
		"""
		Make `target` the active section.

		Cancels the abandoned step's timers, updates the section and step index,
		notifies the scene, starts the new step's run and emits `section_changed`.

		Args:
			target: Section to enter

		Returns:
			True if the section changed, False for a no-op
		"""
		section = SectionId.parse(target)
		if section is None:
			logger.warning(str(InvalidTransition(f"Unknown section: {target!r}")))
			return False
		if section == self.current_section:
			return False
		index = self._index_by_section.get(section)
		if index is None:
			logger.warning(str(InvalidTransition(f"No flow step configured for section '{section.value}'")))
			return False

		self.scheduler.cancel_run()

		previous = self.current_section
		self.current_section = section
		self.current_step_index = index
		step = self._steps[index]
		logger.info(f"Navigating {previous.value} -> {section.value} ({step.title})")

		self._enter_scene(section)
		self.scheduler.start_run(
			step,
			auto_advance=self._auto_advance_armed(),
			on_step_elapsed=self._on_step_elapsed,
		)
		self.section_changed.emit(SectionChangedEvent(
			previous_section=previous,
			new_section=section,
			step_index=index,
			title=step.title,
			presenter_notes=step.presenter_notes,
		))
		return True

	def next(self) -> bool:
		"""Advance to the following section, wrapping after the last."""
		return self.navigate_to(self.current_section.next())

	def previous(self) -> bool:
		"""Return to the preceding section, wrapping before the first."""
		return self.navigate_to(self.current_section.previous())

	def goto(self, index: int) -> bool:
		"""
		Navigate to a flow step by index.

		Out-of-range indexes are logged and ignored.
		"""
		if not 0 <= index < len(self._steps):
			logger.warning(str(InvalidTransition(f"Step index {index} out of range [0, {len(self._steps)})")))
			return False
		return self.navigate_to(self._steps[index].section)

	def goto_section(self, section: SectionId | str) -> bool:
		return self.navigate_to(section)

	# ------------------------------------------------------------------
	# Playback
	# ------------------------------------------------------------------

	def play(self) -> bool:
		"""
		Start or resume timed playback from the current section.

		Elapsed time continues from where a pause left it; after the show has
		finished it starts again from zero. The current step's run is restarted
		with auto-advance armed.

		Returns:
			True if playback started, False if already playing or not configured
		"""
		if not self._steps:
			logger.error("Cannot play: no flow steps configured")
			return False
		if self.state.is_playing and not self.state.is_paused:
			return False
		if not self.state.is_playing:
			# Only a finished show leaves time banked while not playing
			self.state.accumulated_ms = 0.0

		self.state.is_playing = True
		self.state.is_paused = False
		self.state.start_timestamp_ms = self.timer_service.now() - self.state.accumulated_ms
		self.auto_advance = True

		step = self._steps[self.current_step_index]
		self.scheduler.start_run(step, auto_advance=True, on_step_elapsed=self._on_step_elapsed)
		logger.info(f"Presentation playing from '{step.title}' at {self.format_elapsed()}")
		return True

	def pause(self) -> bool:
		"""Halt elapsed-time accrual and auto-advance, keeping the current section."""
		if not self.state.is_playing or self.state.is_paused:
			return False
		self.state.accumulated_ms = self.elapsed_ms()
		self.state.start_timestamp_ms = None
		self.state.is_paused = True
		self._disable_auto_advance()
		logger.info(f"Presentation paused at {self.format_elapsed()}")
		return True

	def stop(self) -> None:
		"""Stop playback and clear elapsed time. The current section is left untouched."""
		self.state.is_playing = False
		self.state.is_paused = False
		self.state.start_timestamp_ms = None
		self.state.accumulated_ms = 0.0
		self._disable_auto_advance()
		logger.info("Presentation stopped")

	def reset(self) -> None:
		"""Stop playback and return to the first section."""
		self.stop()
		if not self.navigate_to(self.first_section):
			self.scheduler.cancel_run()
		logger.info("Presentation reset")

	def enable_auto_advance(self) -> None:
		self.auto_advance = True
		if self._auto_advance_armed():
			self.scheduler.set_auto_advance(True, self._on_step_elapsed)

	def disable_auto_advance(self) -> None:
		self._disable_auto_advance()

	def shutdown(self) -> None:
		self._disable_auto_advance()
		self.scheduler.shutdown()

	# ------------------------------------------------------------------
	# Internals
	# ------------------------------------------------------------------

	def _auto_advance_armed(self) -> bool:
		return self.auto_advance and self.state.is_playing and not self.state.is_paused

	def _disable_auto_advance(self) -> None:
		self.auto_advance = False
		self.scheduler.set_auto_advance(False)

	def _enter_scene(self, section: SectionId) -> None:
		self.in_transition = True
		try:
			self.scene.enter_section(section)
		except Exception as e:
			logger.error(f"Scene failed to enter section '{section.value}': {e}", exc_info=True)
		finally:
			self.in_transition = False

	def _on_step_elapsed(self, run: FlowRun) -> None:
		if not self._auto_advance_armed() or run.step.section != self.current_section:
			return
		if self.current_step_index >= len(self._steps) - 1:
			self._finish()
			return
		self.navigate_to(self._steps[self.current_step_index + 1].section)

	def _finish(self) -> None:
		self.state.accumulated_ms = self.elapsed_ms()
		self.state.start_timestamp_ms = None
		self.state.is_playing = False
		self.state.is_paused = False
		self._disable_auto_advance()
		logger.info(f"Presentation finished at {self.format_elapsed()}")
		if self._on_presentation_finished is not None:
			try:
				self._on_presentation_finished()
			except Exception as e:
				logger.error(f"Presentation finished handler failed: {e}", exc_info=True)
