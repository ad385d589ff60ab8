"""
Presentation Conductor

Timer-driven orchestration of a five-section interactive presentation:
section state machine, timed flow step actions, auto-advance playback and a
scripted demo mode, all driven by one shared timer service.
"""

from conductor.presentation.controller import PresentationController
from conductor.presentation.flow_steps import DEFAULT_FLOW_STEPS
from conductor.schemas.flow import SectionId
from conductor.timing.timer_service import AsyncioTimerService
from conductor.timing.virtual import ManualTimerService

__version__ = '0.1.0'

__all__ = [
	'AsyncioTimerService',
	'DEFAULT_FLOW_STEPS',
	'ManualTimerService',
	'PresentationController',
	'SectionId',
]
