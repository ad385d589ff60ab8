"""
Pytest configuration for presentation flow tests.

Provides a recording scene, a registry whose effects record their fire time,
and the scheduler, state machine and demo driver wired over the virtual clock.
"""

from typing import Callable
from unittest.mock import MagicMock

import pytest

from conductor.content.store import StaticContentStore
from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.presentation.controller import PresentationController
from conductor.presentation.flow_scheduler import FlowStepScheduler
from conductor.presentation.flow_steps import DEFAULT_FLOW_STEPS
from conductor.presentation.state_machine import SectionStateMachine
from conductor.schemas.content import KPIRecord, PresentationData, ProblemRecord, SolutionRecord
from conductor.schemas.flow import SectionId


class RecordingScene:
	"""SceneSynchronizer that records requests without animating."""

	def __init__(self):
		self.entered: list[SectionId] = []
		self.flights: list[tuple[str, str, Callable[[], None] | None]] = []

	def enter_section(self, section: SectionId) -> None:
		self.entered.append(section)

	def fly_object_to_target(self, object_ref, target_ref, on_complete=None) -> None:
		self.flights.append((object_ref, target_ref, on_complete))


@pytest.fixture(scope='function')
def scene():
	return RecordingScene()


@pytest.fixture(scope='function')
def fired():
	"""(action name, virtual time) for every executed action."""
	return []


@pytest.fixture(scope='function')
def registry(timers, fired):
	"""Registry with a recording effect for every action of the default flow."""
	registry = PresentationActionRegistry()
	for step in DEFAULT_FLOW_STEPS:
		for name in step.action_names():
			registry.register(name, lambda name=name: fired.append((name, timers.now())))
	return registry


@pytest.fixture(scope='function')
def scheduler(registry, timers):
	return FlowStepScheduler(registry, timers)


@pytest.fixture(scope='function')
def finished(timers):
	"""Virtual times at which the presentation reported it finished."""
	return []


@pytest.fixture(scope='function')
def state_machine(scheduler, scene, timers, finished):
	return SectionStateMachine(
		DEFAULT_FLOW_STEPS,
		scheduler,
		scene,
		timers,
		on_presentation_finished=lambda: finished.append(timers.now()),
	)


@pytest.fixture(scope='function')
def content():
	"""Content store with a few chaos problems, solutions and KPIs."""
	return StaticContentStore(PresentationData(
		problems=[
			ProblemRecord(id='p1', section='chaos', title='Lost keys', category='operations', financial_impact=12000),
			ProblemRecord(id='p2', section='chaos', title='Vehicle damage', category='damage', financial_impact=25000),
			ProblemRecord(id='p3', section='valet', title='Slow retrieval', category='operations', financial_impact=8000),
		],
		solutions=[
			SolutionRecord(id='s1', title='Key control training', category='training'),
			SolutionRecord(id='s2', title='Damage inspection process', category='process'),
		],
		executive_kpis=[
			KPIRecord(id='k1', title='Turnover', value='-35%'),
			KPIRecord(id='k2', title='Damage claims', value='-60%'),
		],
	))


@pytest.fixture(scope='function')
def dialogs():
	return MagicMock()


@pytest.fixture(scope='function')
def exporter():
	return MagicMock()


@pytest.fixture(scope='function')
def cues():
	return MagicMock()


@pytest.fixture(scope='function')
def controller(scene, content, dialogs, exporter, cues, timers, feature_flags):
	"""Controller over the default flow and demo scripts with mocked chrome collaborators."""
	controller = PresentationController(
		scene=scene,
		content=content,
		dialogs=dialogs,
		exporter=exporter,
		cues=cues,
		timer_service=timers,
		feature_flags=feature_flags,
	)
	yield controller
	controller.shutdown()
