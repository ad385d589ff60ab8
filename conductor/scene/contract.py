"""
Scene Transition Synchronizer contract.

The conductor treats the visual subsystem as a write-only sink: it asks the
scene to enter a section and, for the paper-to-binder action, to fly an object
to a target. It never reads scene state back and never waits for a
transition to finish.
"""

from typing import Callable, Protocol

from conductor.schemas.flow import SectionId


class SceneSynchronizer(Protocol):
	"""Visual subsystem consumed by the conductor."""

	def enter_section(self, section: SectionId) -> None:
		"""Begin the camera and visibility transition for a section. Fire-and-forget."""
		...

	def fly_object_to_target(
		self,
		object_ref: str,
		target_ref: str,
		on_complete: Callable[[], None] | None = None,
	) -> None:
		"""Move and fade `object_ref` onto `target_ref`, then invoke `on_complete`."""
		...


class NullScene:
	"""Scene that ignores transitions. Fly requests complete immediately."""

	def enter_section(self, section: SectionId) -> None:
		return None

	def fly_object_to_target(
		self,
		object_ref: str,
		target_ref: str,
		on_complete: Callable[[], None] | None = None,
	) -> None:
		if on_complete is not None:
			on_complete()
