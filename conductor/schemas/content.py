"""
Presentation content schemas.

Pydantic models for the records served by the content store: problems shown
as papers on the chaos desk, solutions, executive KPIs and the ROI simulator.
Field aliases accept the camelCase keys used by the presentation data file.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ContentModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra='ignore')


class ProblemRecord(_ContentModel):
	"""A problem card (rendered as a paper on the chaos desk)."""

	id: str
	section: str = "chaos"
	title: str
	description: str = ""
	impact: str = ""
	solution: str = ""
	category: str = "other"
	financial_impact: float = Field(default=0.0, description="Estimated annual cost in dollars")


class SolutionRecord(_ContentModel):
	"""A systematic solution card."""

	id: str
	title: str
	category: str
	description: str = ""


class KPIRecord(_ContentModel):
	"""An executive dashboard KPI."""

	id: str
	title: str
	value: str
	trend: str | None = None
	description: str = ""


class SectionInfo(_ContentModel):
	"""Section title and presenter cue shown in presenter chrome."""

	id: str
	title: str
	subtitle: str = ""
	presenter_cue: str | None = Field(default=None, alias="presenterCue")


class ROICalculations(_ContentModel):
	"""Coefficients used by the ROI simulator."""

	training_cost_per_employee: float = Field(default=200, alias="trainingCostPerEmployee")
	damage_reduction_rate: float = Field(default=0.6, alias="damageReductionRate")
	revenue_increase_rate: float = Field(default=0.15, alias="revenueIncreaseRate")
	retention_improvement_rate: float = Field(default=0.35, alias="retentionImprovementRate")
	average_employee_salary: float = Field(default=35000, alias="averageEmployeeSalary")
	turnover_cost_multiplier: float = Field(default=1.5, alias="turnoverCostMultiplier")


class ROISimulatorConfig(_ContentModel):
	"""ROI simulator slider range and coefficients."""

	base_investment: int = Field(default=50000, alias="baseInvestment")
	min_investment: int = Field(default=10000, alias="minInvestment")
	max_investment: int = Field(default=100000, alias="maxInvestment")
	step: int = 5000
	calculations: ROICalculations = Field(default_factory=ROICalculations)


class ROIResult(_ContentModel):
	"""Result of an ROI calculation for a training investment."""

	investment: float
	employees_trained: int
	damage_savings: int
	retention_savings: int
	revenue_increase: int
	total_savings: int
	net_profit: int
	roi_percentage: int


class PresentationData(_ContentModel):
	"""Complete content document backing the static content store."""

	title: str = "ACE Valet Operations Improvement Proposal"
	subtitle: str = "From Reactive Chaos to Proactive Excellence"
	sections: list[SectionInfo] = Field(default_factory=list)
	problems: list[ProblemRecord] = Field(default_factory=list)
	solutions: list[SolutionRecord] = Field(default_factory=list)
	executive_kpis: list[KPIRecord] = Field(default_factory=list, alias="executiveKPIs")
	roi_simulator: ROISimulatorConfig = Field(default_factory=ROISimulatorConfig, alias="roiSimulator")
	pilot: dict[str, Any] = Field(default_factory=dict)
