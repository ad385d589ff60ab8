"""
Default presentation flow script.

Five sections, seven minutes in total. Each step's scheduled actions are
offsets from the moment the section is entered.
"""

from conductor.schemas.flow import FlowStep, ScheduledAction, SectionId, validate_flow_steps


def _actions(*pairs: tuple[str, int]) -> tuple[ScheduledAction, ...]:
	return tuple(ScheduledAction(action=name, delay_ms=delay) for name, delay in pairs)


DEFAULT_FLOW_STEPS: tuple[FlowStep, ...] = validate_flow_steps([
	FlowStep(
		section=SectionId.CHAOS,
		title='The Current State - Chaos',
		duration_ms=60_000,
		actions=_actions(
			('highlight3DPapers', 2000),
			('showProblemCount', 4000),
			('emphasizeCosts', 6000),
		),
		presenter_notes=(
			'Introduce the current chaotic state. Point out the scattered papers representing problems. '
			'Emphasize financial impact.'
		),
	),
	FlowStep(
		section=SectionId.VALET,
		title='The Valet - Firefighter Response',
		duration_ms=90_000,
		actions=_actions(
			('showFirefighter', 2000),
			('demonstrateProblemSolving', 4000),
			('showTrainingSolutions', 6000),
			('animatePaperToBinder', 8000),
		),
		presenter_notes=(
			'Explain the valet as a firefighter. Show how problems are addressed reactively. '
			'Introduce systematic solutions.'
		),
	),
	FlowStep(
		section=SectionId.MANAGER,
		title='The Manager - Watchtower Oversight',
		duration_ms=90_000,
		actions=_actions(
			('showWatchtower', 2000),
			('openBinder', 4000),
			('showProcesses', 6000),
			('demonstrateOversight', 8000),
		),
		presenter_notes=(
			'Introduce the manager as watchtower. Show systematic oversight. Demonstrate process organization.'
		),
	),
	FlowStep(
		section=SectionId.EXECUTIVE,
		title='The Executive - Strategic Overview',
		duration_ms=120_000,
		actions=_actions(
			('showPlane', 2000),
			('displayKPIs', 4000),
			('showROICalculator', 6000),
			('demonstrateROI', 8000),
			('showPredictiveAnalytics', 10000),
		),
		presenter_notes=(
			'Present executive view as fire-spotter plane. Show KPIs and ROI. Demonstrate predictive capabilities.'
		),
	),
	FlowStep(
		section=SectionId.CLOSING,
		title='The Path Forward - Call to Action',
		duration_ms=60_000,
		actions=_actions(
			('showTransformation', 2000),
			('highlightPilotProgram', 4000),
			('showNextSteps', 6000),
			('emphasizeCTA', 8000),
		),
		presenter_notes='Summarize transformation. Highlight pilot program. Strong call to action.',
	),
])


def total_duration_ms(steps: tuple[FlowStep, ...] | list[FlowStep]) -> int:
	return sum(step.duration_ms for step in steps)
