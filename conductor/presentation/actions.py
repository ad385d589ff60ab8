"""
Presentation Actions

Effects behind the action names used by the default flow script and the demo
script. Each effect is a zero-argument method over the injected collaborators
(scene, content store, dialogs, exporter and a cue sink for chrome updates).
"""

import logging
from typing import Any, Callable, Protocol

from conductor.content.collaborators import DialogSubsystem, DocumentExporter
from conductor.content.store import ContentStore
from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.scene.contract import SceneSynchronizer
from conductor.schemas.flow import SectionId
from conductor.utils import run_maybe_async

logger = logging.getLogger(__name__)

BINDER_REF = 'binder'
ROI_DEMO_INVESTMENTS: tuple[int, ...] = (25_000, 50_000, 75_000, 100_000)


class CueSink(Protocol):
	"""Receives named visual cues for presentation chrome (highlights, counters, overlays)."""

	def emit_cue(self, cue: str, payload: dict[str, Any] | None = None) -> Any:
		...


def paper_ref(problem_id: str) -> str:
	"""Scene object ref of the paper representing a problem."""
	return f"paper:{problem_id}"


class PresentationActions:
	"""
	Named presentation effects.

	A problem counts as filed once its paper has landed in the binder. Papers
	still in flight are tracked separately so each paper is flown once;
	`reset()` forgets both.
	"""

	def __init__(
		self,
		scene: SceneSynchronizer,
		content: ContentStore,
		dialogs: DialogSubsystem,
		exporter: DocumentExporter,
		cues: CueSink,
		roi_base_investment: int = 50_000,
	):
		self.scene = scene
		self.content = content
		self.dialogs = dialogs
		self.exporter = exporter
		self.cues = cues
		self.roi_base_investment = roi_base_investment
		self.filed_problem_ids: list[str] = []
		self.in_flight_problem_ids: set[str] = set()

	def effects(self) -> dict[str, Callable[[], Any]]:
		"""Action name to effect mapping."""
		return {
			# chaos
			'highlight3DPapers': self.highlight_papers,
			'showProblemCount': self.show_problem_count,
			'emphasizeCosts': self.emphasize_costs,
			# valet
			'showFirefighter': self._cue('showFirefighter', show=True),
			'demonstrateProblemSolving': self._cue('demonstrateProblemSolving', demonstrate=True),
			'showTrainingSolutions': self.show_training_solutions,
			'animatePaperToBinder': self.animate_paper_to_binder,
			# manager
			'showWatchtower': self._cue('showWatchtower', show=True),
			'openBinder': self.open_binder,
			'showProcesses': self._cue('showProcesses', stagger_ms=300),
			'demonstrateOversight': self._cue('demonstrateOversight', demonstrate=True),
			# executive
			'showPlane': self._cue('showPlane', show=True),
			'displayKPIs': self.display_kpis,
			'showROICalculator': self._cue('showROICalculator', highlight=True),
			'demonstrateROI': self.demonstrate_roi,
			'showPredictiveAnalytics': self._cue('showPredictiveAnalytics', show=True),
			# closing
			'showTransformation': self._cue('showTransformation', show=True),
			'highlightPilotProgram': self._cue('highlightPilotProgram', highlight=True),
			'showNextSteps': self._cue('showNextSteps', show=True),
			'emphasizeCTA': self._cue('emphasizeCTA', emphasize=True),
			# demo interactions
			'showProblemDetails': self.show_problem_details,
			'showKPIDetails': self.show_kpi_details,
			'exportROISummary': self.export_roi_summary,
			'closeDialogs': self.close_dialogs,
			'highlightLaunchButton': self._cue('highlightLaunchButton', highlight=True),
			'clearDemoEffects': self._cue('clearDemoEffects'),
		}

	def register_all(self, registry: PresentationActionRegistry) -> None:
		for name, effect in self.effects().items():
			registry.register(name, effect)

	def reset(self) -> None:
		self.filed_problem_ids.clear()
		self.in_flight_problem_ids.clear()

	# ------------------------------------------------------------------
	# Effects
	# ------------------------------------------------------------------

	def highlight_papers(self) -> Any:
		refs = [paper_ref(problem.id) for problem in self._open_problems()]
		return self.cues.emit_cue('highlight3DPapers', {'highlight': True, 'papers': refs})

	def show_problem_count(self) -> Any:
		count = len(self.content.get_problems_by_section(SectionId.CHAOS.value))
		return self.cues.emit_cue('showProblemCount', {'count': count})

	def emphasize_costs(self) -> Any:
		total = sum(problem.financial_impact for problem in self.content.get_problems_by_section(SectionId.CHAOS.value))
		return self.cues.emit_cue('emphasizeCosts', {'total': total, 'formatted': f"${total:,.0f}"})

	def show_training_solutions(self) -> Any:
		ids = [solution.id for solution in self.content.get_solutions_by_category('training')]
		return self.cues.emit_cue('showTrainingSolutions', {'solutions': ids, 'stagger_ms': 200})

	def animate_paper_to_binder(self) -> None:
		"""Fly the next unfiled chaos problem's paper into the binder."""
		problems = self._open_problems()
		if not problems:
			logger.debug("No open problems left to file into the binder")
			return
		problem_id = problems[0].id
		self.in_flight_problem_ids.add(problem_id)

		def _on_filed() -> None:
			# Flights started before a reset land unrecorded
			if problem_id not in self.in_flight_problem_ids:
				return
			self.in_flight_problem_ids.discard(problem_id)
			self.filed_problem_ids.append(problem_id)
			run_maybe_async(
				self.cues.emit_cue('removeProblemRecord', {'problem_id': problem_id}),
				name='removeProblemRecord',
			)

		self.scene.fly_object_to_target(paper_ref(problem_id), BINDER_REF, on_complete=_on_filed)

	def open_binder(self) -> Any:
		ids = [solution.id for solution in self.content.get_solutions_by_category('process')]
		return self.cues.emit_cue('openBinder', {'solutions': ids, 'filed': list(self.filed_problem_ids)})

	def display_kpis(self) -> Any:
		ids = [kpi.id for kpi in self.content.get_executive_kpis()]
		return self.cues.emit_cue('displayKPIs', {'kpis': ids, 'stagger_ms': 250})

	def demonstrate_roi(self) -> Any:
		results = [self.content.calculate_roi(investment).model_dump() for investment in ROI_DEMO_INVESTMENTS]
		return self.cues.emit_cue('demonstrateROI', {'results': results})

	def show_problem_details(self) -> Any:
		problems = self._open_problems()
		if not problems:
			logger.debug("No problem to show")
			return None
		return self.dialogs.show_problem_modal(problems[0])

	def show_kpi_details(self) -> Any:
		kpis = self.content.get_executive_kpis()
		if not kpis:
			logger.debug("No KPI to show")
			return None
		return self.dialogs.show_kpi_modal(kpis[0])

	def export_roi_summary(self) -> Any:
		return self.exporter.export_roi_summary(self.content.calculate_roi(self.roi_base_investment))

	def close_dialogs(self) -> Any:
		return self.dialogs.close_all()

	# ------------------------------------------------------------------
	# Internals
	# ------------------------------------------------------------------

	def _open_problems(self):
		return [
			problem
			for problem in self.content.get_problems_by_section(SectionId.CHAOS.value)
			if problem.id not in self.filed_problem_ids and problem.id not in self.in_flight_problem_ids
		]

	def _cue(self, cue: str, **payload: Any) -> Callable[[], Any]:
		def _emit() -> Any:
			return self.cues.emit_cue(cue, dict(payload))

		_emit.__name__ = f"cue_{cue}"
		return _emit
