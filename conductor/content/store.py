"""
Content Store

Read-only source of presentation content: problems, solutions, executive KPIs,
section info and the ROI simulator. The conductor only consumes the
`ContentStore` protocol; `StaticContentStore` is the reference implementation
backed by a validated `PresentationData` document.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from conductor.schemas.content import (
	KPIRecord,
	PresentationData,
	ProblemRecord,
	ROIResult,
	ROISimulatorConfig,
	SectionInfo,
	SolutionRecord,
)

logger = logging.getLogger(__name__)

# Fixed terms of the reference ROI arithmetic
ANNUAL_DAMAGE_COST = 25_000
DAILY_REVENUE_BASE = 2_555


class ContentStore(Protocol):
	"""Content queries used by presentation actions."""

	def get_problems_by_section(self, section: str) -> list[ProblemRecord]:
		...

	def get_solutions_by_category(self, category: str) -> list[SolutionRecord]:
		...

	def get_executive_kpis(self) -> list[KPIRecord]:
		...

	def calculate_roi(self, investment: float) -> ROIResult:
		...


def fallback_presentation_data() -> PresentationData:
	"""Minimal content used when no data file is available."""
	return PresentationData(
		sections=[
			SectionInfo(id='chaos', title='The Chaotic Desk', subtitle='Current Reality'),
			SectionInfo(id='valet', title='The Firefighter Solution', subtitle='Valet Layer'),
			SectionInfo(id='manager', title='The Watchtower Perspective', subtitle='Manager Layer'),
			SectionInfo(id='executive', title='The Strategic Altitude', subtitle='Executive Layer'),
			SectionInfo(id='closing', title='The Transformation', subtitle='Call to Action'),
		],
		pilot={
			'location': 'Marriott Marquis San Diego Marina',
			'duration': '6 months',
			'phases': [{'phase': 1, 'title': 'Foundational Systems & Data Capture', 'duration': '3-6 months'}],
			'expectedOutcomes': [
				'Significant cost reductions in turnover, damages, and bonuses',
				'Enhanced revenue through improved billing accuracy',
			],
		},
	)


class StaticContentStore:
	"""ContentStore over an in-memory PresentationData document."""

	def __init__(self, data: PresentationData | None = None):
		self.data = data or fallback_presentation_data()
		logger.debug(
			f"StaticContentStore initialized ({len(self.data.problems)} problems, "
			f"{len(self.data.solutions)} solutions, {len(self.data.executive_kpis)} KPIs)"
		)

	@classmethod
	def from_dict(cls, raw: dict[str, Any]) -> 'StaticContentStore':
		"""
		Build a store from a raw content document.

		Accepts both a flat document and one whose title, subtitle and sections
		are nested under a `presentation` key.
		"""
		payload = dict(raw)
		header = payload.pop('presentation', None)
		if isinstance(header, dict):
			for key in ('title', 'subtitle', 'sections'):
				if key in header:
					payload.setdefault(key, header[key])
		return cls(PresentationData.model_validate(payload))

	@classmethod
	def load_from_file(cls, path: str | Path | None) -> 'StaticContentStore':
		"""
		Load content from a JSON file, falling back to the built-in content.

		A missing or invalid file is logged and replaced by the fallback data so
		the presentation can always start.
		"""
		if not path:
			logger.info("No content file configured, using fallback content")
			return cls()
		file_path = Path(path)
		try:
			raw = json.loads(file_path.read_text(encoding='utf-8'))
			store = cls.from_dict(raw)
			logger.info(f"Loaded presentation content from {file_path}")
			return store
		except FileNotFoundError:
			logger.warning(f"Content file not found: {file_path}, using fallback content")
		except (json.JSONDecodeError, ValidationError) as e:
			logger.error(f"Invalid content file {file_path}: {e}", exc_info=True)
		return cls()

	# ------------------------------------------------------------------
	# ContentStore
	# ------------------------------------------------------------------

	def get_problems_by_section(self, section: str) -> list[ProblemRecord]:
		return [problem for problem in self.data.problems if problem.section == section]

	def get_solutions_by_category(self, category: str) -> list[SolutionRecord]:
		return [solution for solution in self.data.solutions if solution.category == category]

	def get_executive_kpis(self) -> list[KPIRecord]:
		return list(self.data.executive_kpis)

	def calculate_roi(self, investment: float) -> ROIResult:
		"""
		Project annual savings for a training investment.

		Args:
			investment: Training investment in dollars (must be positive)

		Returns:
			Rounded ROI breakdown
		"""
		if investment <= 0:
			raise ValueError("Investment must be positive")
		calc = self.data.roi_simulator.calculations

		employees_trained = math.floor(investment / calc.training_cost_per_employee)
		damage_savings = calc.damage_reduction_rate * ANNUAL_DAMAGE_COST
		retention_savings = (
			calc.retention_improvement_rate
			* employees_trained
			* calc.average_employee_salary
			* calc.turnover_cost_multiplier
		)
		revenue_increase = calc.revenue_increase_rate * DAILY_REVENUE_BASE * 365
		total_savings = damage_savings + retention_savings + revenue_increase
		roi_percentage = (total_savings - investment) / investment * 100

		return ROIResult(
			investment=investment,
			employees_trained=employees_trained,
			damage_savings=_round_half_up(damage_savings),
			retention_savings=_round_half_up(retention_savings),
			revenue_increase=_round_half_up(revenue_increase),
			total_savings=_round_half_up(total_savings),
			net_profit=_round_half_up(total_savings - investment),
			roi_percentage=_round_half_up(roi_percentage),
		)

	# ------------------------------------------------------------------
	# Extra queries
	# ------------------------------------------------------------------

	def get_problem(self, problem_id: str) -> ProblemRecord | None:
		return next((problem for problem in self.data.problems if problem.id == problem_id), None)

	def get_section_info(self, section: str) -> SectionInfo | None:
		return next((info for info in self.data.sections if info.id == section), None)

	def get_total_financial_impact(self) -> float:
		return sum(problem.financial_impact for problem in self.data.problems)

	def get_problems_by_category(self) -> dict[str, list[ProblemRecord]]:
		groups: dict[str, list[ProblemRecord]] = {}
		for problem in self.data.problems:
			groups.setdefault(problem.category or 'other', []).append(problem)
		return groups

	def search_problems(self, term: str) -> list[ProblemRecord]:
		needle = term.lower()
		return [
			problem
			for problem in self.data.problems
			if needle in problem.title.lower()
			or needle in problem.description.lower()
			or needle in problem.impact.lower()
		]

	def get_roi_simulator(self) -> ROISimulatorConfig:
		return self.data.roi_simulator

	def get_pilot_info(self) -> dict[str, Any]:
		return dict(self.data.pilot)


def _round_half_up(value: float) -> int:
	# Halves round toward positive infinity
	return math.floor(value + 0.5)
