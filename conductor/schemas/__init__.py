"""Pydantic schemas for the presentation script, runtime snapshots and content records."""

from conductor.schemas.content import (
	KPIRecord,
	PresentationData,
	ProblemRecord,
	ROICalculations,
	ROIResult,
	ROISimulatorConfig,
	SectionInfo,
	SolutionRecord,
)
from conductor.schemas.flow import (
	ActionResult,
	DemoStatus,
	FlowStep,
	PresentationState,
	ScheduledAction,
	SectionChangedEvent,
	SectionId,
	validate_flow_steps,
)

__all__ = [
	'ActionResult',
	'DemoStatus',
	'FlowStep',
	'KPIRecord',
	'PresentationData',
	'PresentationState',
	'ProblemRecord',
	'ROICalculations',
	'ROIResult',
	'ROISimulatorConfig',
	'ScheduledAction',
	'SectionChangedEvent',
	'SectionId',
	'SectionInfo',
	'SolutionRecord',
	'validate_flow_steps',
]
