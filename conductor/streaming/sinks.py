"""
Broadcast-backed collaborators.

Cue sink, dialog subsystem and document exporter implementations that turn
conductor requests into events for the front ends of one room, plus the
wiring that forwards controller notifications to the same room.
"""

import logging
from typing import Any, Callable

from conductor.schemas.content import KPIRecord, ProblemRecord, ROIResult
from conductor.schemas.flow import DemoStatus, PresentationState, SectionChangedEvent
from conductor.streaming.broadcaster import EventBroadcaster

logger = logging.getLogger(__name__)


class BroadcastCueSink:
	def __init__(self, broadcaster: EventBroadcaster, room_name: str):
		self.broadcaster = broadcaster
		self.room_name = room_name

	async def emit_cue(self, cue: str, payload: dict[str, Any] | None = None) -> None:
		await self.broadcaster.broadcast_action_cue(self.room_name, cue, payload)


class BroadcastDialogs:
	"""DialogSubsystem that asks front ends to open and close modals."""

	def __init__(self, broadcaster: EventBroadcaster, room_name: str):
		self.broadcaster = broadcaster
		self.room_name = room_name
		self.open_dialogs: list[str] = []

	async def show_problem_modal(self, problem: ProblemRecord) -> None:
		self.open_dialogs.append(f"problem:{problem.id}")
		await self.broadcaster.broadcast_dialog_opened(self.room_name, 'problem', problem.model_dump())

	async def show_kpi_modal(self, kpi: KPIRecord) -> None:
		self.open_dialogs.append(f"kpi:{kpi.id}")
		await self.broadcaster.broadcast_dialog_opened(self.room_name, 'kpi', kpi.model_dump())

	async def close_all(self) -> None:
		self.open_dialogs.clear()
		await self.broadcaster.broadcast_dialogs_closed(self.room_name)


class BroadcastExporter:
	"""DocumentExporter that hands the ROI summary to front ends for rendering."""

	def __init__(self, broadcaster: EventBroadcaster, room_name: str):
		self.broadcaster = broadcaster
		self.room_name = room_name

	async def export_roi_summary(self, result: ROIResult) -> None:
		logger.info(f"Requesting ROI summary export for investment ${result.investment:,.0f}")
		await self.broadcaster.broadcast_export_requested(self.room_name, 'roi_summary', result.model_dump())


def forward_controller_events(controller: Any, broadcaster: EventBroadcaster, room_name: str) -> Callable[[], None]:
	"""
	Forward a controller's notifications to a room.

	Args:
		controller: PresentationController to observe
		broadcaster: Event broadcaster
		room_name: Presentation room name

	Returns:
		A callable that removes the forwarding listeners
	"""
	async def _section_changed(event: SectionChangedEvent) -> None:
		await broadcaster.broadcast_section_changed(room_name, event.to_event())

	async def _demo_step(status: DemoStatus) -> None:
		await broadcaster.broadcast_demo_status(room_name, status.model_dump())

	async def _finished(state: PresentationState) -> None:
		await broadcaster.broadcast_presentation_finished(room_name, state.model_dump())

	unsubscribers = [
		controller.section_changed.connect(_section_changed),
		controller.demo_step.connect(_demo_step),
		controller.presentation_finished.connect(_finished),
	]

	def _disconnect() -> None:
		for unsubscribe in unsubscribers:
			unsubscribe()

	return _disconnect
