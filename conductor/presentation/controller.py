"""
Presentation Controller

Composition root for one presentation: wires the action registry, flow step
scheduler, section state machine and demo driver over injected collaborators
and exposes the commands the hosting application calls (navigation,
playback, demo control and host signals such as keys and tab visibility).
"""

import logging
from typing import Any

from conductor.config.features import FeatureFlags, get_feature_flags
from conductor.content.collaborators import DialogSubsystem, DocumentExporter
from conductor.content.store import ContentStore
from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.presentation.actions import CueSink, PresentationActions
from conductor.presentation.demo_driver import DemoDriver, DemoStep
from conductor.presentation.demo_script import build_demo_script
from conductor.presentation.errors import ConfigurationError
from conductor.presentation.flow_scheduler import FlowStepScheduler
from conductor.presentation.flow_steps import DEFAULT_FLOW_STEPS
from conductor.presentation.signals import Signal
from conductor.presentation.state_machine import SectionStateMachine
from conductor.scene.contract import SceneSynchronizer
from conductor.schemas.flow import DemoStatus, FlowStep, PresentationState, SectionChangedEvent, SectionId
from conductor.timing.timer_service import TimerService

logger = logging.getLogger(__name__)

NEXT_KEYS = ('ArrowRight', ' ', 'Space')
PREVIOUS_KEYS = ('ArrowLeft',)


class PresentationController:
	"""
	One presentation session.

	All components share a single timer service so a virtual clock can drive
	the whole show in tests and rehearsals.
	"""

	def __init__(
		self,
		scene: SceneSynchronizer,
		content: ContentStore,
		dialogs: DialogSubsystem,
		exporter: DocumentExporter,
		cues: CueSink,
		timer_service: TimerService,
		flow_steps: tuple[FlowStep, ...] | list[FlowStep] = DEFAULT_FLOW_STEPS,
		demo_steps: list[DemoStep] | None = None,
		feature_flags: FeatureFlags | None = None,
		demo_speed: float = 1.0,
	):
		"""
		Initialize the controller.

		Args:
			scene: Visual subsystem
			content: Content store backing the actions
			dialogs: Modal dialog subsystem
			exporter: Document exporter
			cues: Sink for chrome cues emitted by actions
			timer_service: Shared timer service
			flow_steps: Flow script (defaults to the built-in five-section show)
			demo_steps: Demo script (defaults to the built-in walkthrough)
			feature_flags: Feature flags (defaults to the global flags)
			demo_speed: Demo post-delay multiplier
		"""
		self.scene = scene
		self.timer_service = timer_service
		self.feature_flags = feature_flags or get_feature_flags()
		self.presenter_mode = False
		self._demo_paused_for_hidden = False

		self.presentation_finished: Signal[PresentationState] = Signal('presentation_finished')
		self.demo_step: Signal[DemoStatus] = Signal('demo_step')

		self.registry = PresentationActionRegistry()
		self.actions = PresentationActions(scene, content, dialogs, exporter, cues)
		self.actions.register_all(self.registry)
		self._check_flow_actions(flow_steps)

		self.scheduler = FlowStepScheduler(self.registry, timer_service)
		self.state_machine = SectionStateMachine(
			flow_steps,
			self.scheduler,
			scene,
			timer_service,
			on_presentation_finished=self._on_presentation_finished,
		)

		self.demo = DemoDriver(
			timer_service,
			cleanup=self._demo_cleanup,
			on_step=self._on_demo_step,
		)
		self.demo.set_steps(demo_steps if demo_steps is not None else build_demo_script(
			self.navigate_to,
			self.registry,
			self.demo.stop,
		))
		self.demo.set_speed(demo_speed)

		logger.info(
			f"PresentationController ready ({len(self.state_machine.flow_steps)} sections, "
			f"{len(self.demo.steps)} demo steps, {len(self.registry.names())} actions)"
		)

	# ------------------------------------------------------------------
	# Queries
	# ------------------------------------------------------------------

	@property
	def section_changed(self) -> Signal[SectionChangedEvent]:
		return self.state_machine.section_changed

	@property
	def current_section(self) -> SectionId:
		return self.state_machine.current_section

	@property
	def current_step_index(self) -> int:
		return self.state_machine.current_step_index

	def get_presentation_state(self) -> PresentationState:
		return self.state_machine.get_presentation_state()

	def presenter_notes(self) -> dict[str, Any]:
		"""Notes and timing for the presenter overlay."""
		step = self.state_machine.current_step
		return {
			'section': self.current_section.value,
			'title': step.title if step else '',
			'notes': step.presenter_notes if step else '',
			'elapsed': self.state_machine.format_elapsed(),
			'progress_percent': round(self.state_machine.progress_percent(), 1),
		}

	def snapshot(self) -> dict[str, Any]:
		"""Full read-only view for chrome and the state endpoint."""
		elapsed, total = self.state_machine.timing()
		return {
			'current_section': self.current_section.value,
			'current_step_index': self.current_step_index,
			'presentation': self.get_presentation_state().model_dump(),
			'elapsed_ms': elapsed,
			'total_ms': total,
			'progress_percent': round(self.state_machine.progress_percent(), 1),
			'presenter_mode': self.presenter_mode,
			'demo': self.demo.status().model_dump(),
		}

	# ------------------------------------------------------------------
	# Commands
	# ------------------------------------------------------------------

	def navigate_to(self, section: SectionId | str) -> bool:
		return self.state_machine.navigate_to(section)

	def next(self) -> bool:
		return self.state_machine.next()

	def previous(self) -> bool:
		return self.state_machine.previous()

	def goto(self, index: int) -> bool:
		return self.state_machine.goto(index)

	def play(self) -> bool:
		started = self.state_machine.play()
		if started and not self.feature_flags.auto_advance_on_play:
			self.state_machine.disable_auto_advance()
		return started

	def pause(self) -> bool:
		return self.state_machine.pause()

	def stop(self) -> None:
		self.state_machine.stop()

	def reset(self) -> None:
		self.state_machine.reset()
		self.actions.reset()

	def toggle_demo(self) -> bool:
		self._demo_paused_for_hidden = False
		return self.demo.toggle()

	def toggle_presenter_mode(self) -> bool:
		self.presenter_mode = not self.presenter_mode
		logger.info(f"Presenter mode {'enabled' if self.presenter_mode else 'disabled'}")
		return self.presenter_mode

	def close_dialogs(self) -> bool:
		return self.registry.execute('closeDialogs').success

	# ------------------------------------------------------------------
	# Host signals
	# ------------------------------------------------------------------

	def handle_user_interaction(self) -> bool:
		"""
		Direct user interaction while the demo runs hands control back to the presenter.

		Returns:
			True if the demo was stopped
		"""
		if not self.demo.is_running or not self.feature_flags.stop_demo_on_interaction:
			return False
		logger.info("User interaction detected, stopping demo")
		self._demo_paused_for_hidden = False
		return self.demo.stop()

	def handle_visibility_change(self, hidden: bool) -> bool:
		"""
		Pause the demo while the page is hidden and resume it when shown again.

		Only a pause caused by visibility is undone on show; a demo the presenter
		paused stays paused.
		"""
		if not self.feature_flags.pause_demo_on_hidden:
			return False
		if hidden:
			if not self.demo.pause():
				return False
			self._demo_paused_for_hidden = True
			return True
		if self._demo_paused_for_hidden:
			self._demo_paused_for_hidden = False
			return self.demo.resume()
		return False

	def handle_key(self, key: str, ctrl: bool = False) -> str | None:
		"""
		Dispatch a keyboard shortcut.

		Returns:
			Name of the command run, or None if the key is not bound
		"""
		if ctrl:
			lowered = key.lower()
			if lowered == 'd':
				self.toggle_demo()
				return 'toggle_demo'
			if lowered == 'p':
				self.toggle_presenter_mode()
				return 'toggle_presenter_mode'
			return None
		if key in NEXT_KEYS:
			self.next()
			return 'next'
		if key in PREVIOUS_KEYS:
			self.previous()
			return 'previous'
		if key == 'Escape':
			self.close_dialogs()
			return 'close_dialogs'
		return None

	def shutdown(self) -> None:
		"""Cancel every outstanding timer and animation."""
		self.demo.shutdown()
		self.state_machine.shutdown()
		scene_shutdown = getattr(self.scene, 'shutdown', None)
		if callable(scene_shutdown):
			scene_shutdown()
		logger.info("PresentationController shut down")

	# ------------------------------------------------------------------
	# Internals
	# ------------------------------------------------------------------

	def _check_flow_actions(self, flow_steps: tuple[FlowStep, ...] | list[FlowStep]) -> None:
		names = [name for step in flow_steps for name in step.action_names()]
		for name in self.registry.validate(names):
			logger.warning(f"Flow script references an unregistered action: {ConfigurationError(name)}")

	def _demo_cleanup(self) -> None:
		self.registry.execute('closeDialogs')
		self.registry.execute('clearDemoEffects')
		self.state_machine.navigate_to(self.state_machine.first_section)

	def _on_demo_step(self, index: int, step: DemoStep) -> None:
		self.demo_step.emit(self.demo.status())

	def _on_presentation_finished(self) -> None:
		self.presentation_finished.emit(self.get_presentation_state())
