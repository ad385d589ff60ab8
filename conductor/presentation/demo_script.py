"""
Default demo script.

A thirty-odd second walkthrough: chaos desk, a problem dialog, the valet and
manager layers, the executive KPIs and ROI export, and the closing call to
action. Dialog closes that precede a transition are separate steps with a
short post-delay, so every pending timer belongs to the demo driver.
"""

from typing import Any, Callable

from conductor.presentation.action_registry import PresentationActionRegistry
from conductor.presentation.demo_driver import DemoStep
from conductor.schemas.flow import SectionId

DIALOG_CLOSE_DELAY_MS = 500


def build_demo_script(
	navigate: Callable[[SectionId], Any],
	registry: PresentationActionRegistry,
	reset: Callable[[], Any],
) -> list[DemoStep]:
	"""
	Build the demo steps.

	Args:
		navigate: Navigates the presentation to a section
		registry: Registry holding the demo interaction actions
		reset: Ends the demo; run by the final step

	Returns:
		Ordered demo steps
	"""
	def goto(section: SectionId) -> Callable[[], Any]:
		return lambda: navigate(section)

	return [
		DemoStep('Show chaos section', goto(SectionId.CHAOS), 4000),
		DemoStep('Open a problem paper', registry.bind('showProblemDetails'), 3000),
		DemoStep('Close problem dialog', registry.bind('closeDialogs'), DIALOG_CLOSE_DELAY_MS),
		DemoStep('Transition to valet section', goto(SectionId.VALET), 4000 - DIALOG_CLOSE_DELAY_MS),
		DemoStep('Transition to manager section', goto(SectionId.MANAGER), 3000),
		DemoStep('Open binder', registry.bind('openBinder'), 3000),
		DemoStep('Transition to executive section', goto(SectionId.EXECUTIVE), 4000),
		DemoStep('Open KPI card', registry.bind('showKPIDetails'), 3000),
		DemoStep('Export ROI summary', registry.bind('exportROISummary'), 2000),
		DemoStep('Close KPI dialog', registry.bind('closeDialogs'), DIALOG_CLOSE_DELAY_MS),
		DemoStep('Transition to closing section', goto(SectionId.CLOSING), 4000 - DIALOG_CLOSE_DELAY_MS),
		DemoStep('Highlight launch button', registry.bind('highlightLaunchButton'), 2000),
		DemoStep('Reset demo', reset, 0),
	]
