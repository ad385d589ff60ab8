"""
Presentation flow data schemas.

This module defines Pydantic models for the static presentation script
(sections, flow steps and their scheduled actions) and for the snapshots the
conductor hands to chrome (presentation state, section change notifications,
action results, demo status).
"""

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Sections
# =============================================================================

class SectionId(str, Enum):
	"""
	The five narrative phases, in canonical presentation order.

	Declaration order defines forward/backward adjacency.
	"""

	CHAOS = "chaos"
	VALET = "valet"
	MANAGER = "manager"
	EXECUTIVE = "executive"
	CLOSING = "closing"

	@classmethod
	def ordered(cls) -> list["SectionId"]:
		"""Return all sections in presentation order."""
		return list(cls)

	@classmethod
	def parse(cls, value: "SectionId | str") -> "SectionId | None":
		"""Coerce a raw section id, returning None when it is not a known section."""
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).lower())
		except ValueError:
			return None

	def next(self) -> "SectionId":
		"""Following section, wrapping from the last back to the first."""
		order = SectionId.ordered()
		return order[(order.index(self) + 1) % len(order)]

	def previous(self) -> "SectionId":
		"""Preceding section, wrapping from the first to the last."""
		order = SectionId.ordered()
		return order[(order.index(self) - 1) % len(order)]


# =============================================================================
# Static flow script
# =============================================================================

class ScheduledAction(BaseModel):
	"""A named effect fired at an offset relative to its flow step's start."""

	model_config = ConfigDict(frozen=True)

	action: str = Field(min_length=1, description="Action registry name")
	delay_ms: int = Field(default=0, ge=0, description="Delay from step start in milliseconds")


class FlowStep(BaseModel):
	"""
	The static script for one section.

	Immutable once constructed. Scheduled actions are kept in non-decreasing
	delay order; actions sharing a delay keep their declared order.
	"""

	model_config = ConfigDict(frozen=True)

	section: SectionId
	title: str
	duration_ms: int = Field(gt=0, description="Total step duration in milliseconds")
	presenter_notes: str = ""
	actions: tuple[ScheduledAction, ...] = ()

	@field_validator("actions")
	@classmethod
	def _sort_by_delay(cls, actions: tuple[ScheduledAction, ...]) -> tuple[ScheduledAction, ...]:
		return tuple(sorted(actions, key=lambda a: a.delay_ms))

	@model_validator(mode="after")
	def _actions_within_duration(self) -> "FlowStep":
		for scheduled in self.actions:
			if scheduled.delay_ms > self.duration_ms:
				raise ValueError(
					f"Action '{scheduled.action}' in step '{self.section.value}' is scheduled at "
					f"{scheduled.delay_ms}ms, past the step duration of {self.duration_ms}ms"
				)
		return self

	def action_names(self) -> list[str]:
		return [scheduled.action for scheduled in self.actions]


def validate_flow_steps(steps: list[FlowStep] | tuple[FlowStep, ...]) -> tuple[FlowStep, ...]:
	"""
	Check that a flow script has exactly one step per section, in section order.

	Args:
		steps: Candidate flow steps, in presentation order

	Returns:
		The steps as an immutable tuple

	Raises:
		ValueError: If a section is missing, appears twice or is out of order
	"""
	seen: dict[SectionId, int] = {}
	for index, step in enumerate(steps):
		if step.section in seen:
			raise ValueError(f"Section '{step.section.value}' appears in steps {seen[step.section]} and {index}")
		seen[step.section] = index
	missing = [section.value for section in SectionId.ordered() if section not in seen]
	if steps and missing:
		raise ValueError(f"Flow script is missing steps for sections: {', '.join(missing)}")
	if steps and [step.section for step in steps] != SectionId.ordered():
		raise ValueError("Flow steps must follow the canonical section order")
	return tuple(steps)


# =============================================================================
# Runtime snapshots
# =============================================================================

class PresentationState(BaseModel):
	"""
	Playback state owned by the section state machine.

	`total_duration_ms` is derived once from the flow script; `accumulated_ms`
	holds elapsed time banked by pauses.
	"""

	model_config = ConfigDict(validate_assignment=True)

	is_playing: bool = False
	is_paused: bool = False
	start_timestamp_ms: float | None = None
	accumulated_ms: float = 0.0
	total_duration_ms: int = 0


class SectionChangedEvent(BaseModel):
	"""Notification emitted after a navigation completes."""

	model_config = ConfigDict(frozen=True)

	previous_section: SectionId
	new_section: SectionId
	step_index: int
	title: str
	presenter_notes: str = ""
	timestamp: float = Field(default_factory=time.time)

	def to_event(self) -> dict[str, Any]:
		"""Render as a broadcastable event dictionary."""
		return {
			"type": "section_changed",
			"previous_section": self.previous_section.value,
			"new_section": self.new_section.value,
			"step_index": self.step_index,
			"title": self.title,
			"presenter_notes": self.presenter_notes,
			"timestamp": self.timestamp,
		}


class ActionResult(BaseModel):
	"""Result of executing a registered action."""

	action: str = Field(..., description="Action registry name")
	success: bool = Field(..., description="Whether the action effect completed")
	error: str | None = Field(default=None, description="Error message if the action failed or was unknown")
	timestamp: float = Field(default_factory=time.time, description="Timestamp of result")


class DemoStatus(BaseModel):
	"""Snapshot of the demo driver for chrome (demo indicator, controls)."""

	is_running: bool
	is_paused: bool
	current_step_index: int
	total_steps: int
	current_step_name: str | None = None
	progress_percent: int = 0
