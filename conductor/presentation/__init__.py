"""
Presentation Flow Components

Section state machine, timed flow step scheduling, the action registry and
the demo driver, composed by PresentationController.
"""

from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.presentation.controller import PresentationController
from conductor.presentation.demo_driver import DemoDriver, DemoRunState, DemoStep
from conductor.presentation.flow_scheduler import FlowRun, FlowStepScheduler
from conductor.presentation.state_machine import SectionStateMachine

__all__ = [
	"DemoDriver",
	"DemoRunState",
	"DemoStep",
	"FlowRun",
	"FlowStepScheduler",
	"PresentationActionRegistry",
	"PresentationController",
	"SectionStateMachine",
]
