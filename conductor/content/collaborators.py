"""Dialog and document export collaborators driven by presentation actions."""

from typing import Any, Protocol

from conductor.schemas.content import KPIRecord, ProblemRecord, ROIResult


class DialogSubsystem(Protocol):
	"""Modal dialogs shown over the presentation."""

	def show_problem_modal(self, problem: ProblemRecord) -> Any:
		...

	def show_kpi_modal(self, kpi: KPIRecord) -> Any:
		...

	def close_all(self) -> Any:
		...


class DocumentExporter(Protocol):
	"""Produces leave-behind documents (ROI summary)."""

	def export_roi_summary(self, result: ROIResult) -> Any:
		...
