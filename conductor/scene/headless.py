"""
Headless scene model.

Reference SceneSynchronizer that keeps the scene's logical state (camera
position, object visibility, object positions and opacity) and drives its
transitions through keyed animations on the shared timer service. It renders
nothing; a rendering front end can mirror `snapshot()`.
"""

import logging
import math
from typing import Any, Callable

from conductor.scene.animation import AnimationScheduler, lerp
from conductor.schemas.flow import SectionId
from conductor.timing.timer_service import TimerService

logger = logging.getLogger(__name__)

Vector = tuple[float, float, float]

CAMERA_TRANSITION_MS = 2000.0
FLY_DURATION_MS = 1000.0
BINDER_SLIDE_MS = 1000.0
PLANE_ORBIT_MS = 5000.0

CAMERA_TARGETS: dict[SectionId, Vector] = {
	SectionId.CHAOS: (0.0, 8.0, 12.0),
	SectionId.VALET: (0.0, 6.0, 10.0),
	SectionId.MANAGER: (-3.0, 7.0, 8.0),
	SectionId.EXECUTIVE: (0.0, 12.0, 6.0),
	SectionId.CLOSING: (0.0, 8.0, 12.0),
}

# Which landmark objects are shown in each section; papers are handled separately
SECTION_VISIBILITY: dict[SectionId, dict[str, bool]] = {
	SectionId.CHAOS: {'firefighter': False, 'watchtower': False, 'plane': False, 'binder': False},
	SectionId.VALET: {'firefighter': True, 'watchtower': True, 'plane': False, 'binder': False},
	SectionId.MANAGER: {'firefighter': True, 'watchtower': True, 'plane': True, 'binder': True},
	SectionId.EXECUTIVE: {'firefighter': True, 'watchtower': True, 'plane': True, 'binder': True},
	SectionId.CLOSING: {'firefighter': True, 'watchtower': True, 'plane': True, 'binder': True},
}

PAPERS_VISIBLE: dict[SectionId, bool] = {
	SectionId.CHAOS: True,
	SectionId.VALET: True,
	SectionId.MANAGER: True,
	SectionId.EXECUTIVE: False,
	SectionId.CLOSING: False,
}

DEFAULT_POSITIONS: dict[str, Vector] = {
	'firefighter': (-4.0, 0.0, 2.0),
	'watchtower': (-6.0, 0.0, -6.0),
	'plane': (6.0, 8.0, -8.0),
	'binder': (2.0, 0.5, 0.0),
}


class SceneObject:
	"""Logical state of one scene object."""

	def __init__(self, ref: str, position: Vector, visible: bool = False):
		self.ref = ref
		self.position = position
		self.home = position
		self.visible = visible
		self.opacity = 1.0
		self.retired = False  # papers filed into the binder stay hidden

	def to_dict(self) -> dict[str, Any]:
		return {
			'ref': self.ref,
			'position': list(self.position),
			'visible': self.visible,
			'opacity': round(self.opacity, 3),
		}


class HeadlessScene:
	"""
	SceneSynchronizer implementation without a renderer.

	Entering a section while a camera pan is still running supersedes the pan
	from the camera's current position rather than dropping the request.
	"""

	def __init__(self, timer_service: TimerService, paper_refs: list[str] | None = None):
		"""
		Initialize the scene.

		Args:
			timer_service: Timer service used for animation frames
			paper_refs: Object refs of the problem papers on the chaos desk
		"""
		self.animations = AnimationScheduler(timer_service)
		self.current_section: SectionId | None = None
		self.camera_position: Vector = CAMERA_TARGETS[SectionId.CHAOS]
		self.objects: dict[str, SceneObject] = {
			ref: SceneObject(ref, position) for ref, position in DEFAULT_POSITIONS.items()
		}
		for index, ref in enumerate(paper_refs or []):
			self.add_paper(ref, index)
		self._plane_angle = 0.0
		self._flying: set[str] = set()

	def add_paper(self, ref: str, index: int = 0) -> SceneObject:
		"""Place a paper on the desk in a scattered position."""
		position = (-3.0 + (index % 5) * 1.5, 0.1, -1.0 + (index // 5) * 1.2)
		paper = SceneObject(ref, position, visible=self.current_section in (None, SectionId.CHAOS))
		self.objects[ref] = paper
		return paper

	def paper_refs(self) -> list[str]:
		return [ref for ref in self.objects if ref.startswith('paper:')]

	# ------------------------------------------------------------------
	# SceneSynchronizer contract
	# ------------------------------------------------------------------

	def enter_section(self, section: SectionId) -> None:
		if section == self.current_section:
			return
		previous = self.current_section
		self.current_section = section
		logger.debug(f"Scene transition: {previous.value if previous else None} -> {section.value}")

		for ref, visible in SECTION_VISIBILITY[section].items():
			self.objects[ref].visible = visible

		papers_visible = PAPERS_VISIBLE[section]
		for index, ref in enumerate(self.paper_refs()):
			paper = self.objects[ref]
			# Papers on their way to a target finish the flight
			if paper.retired or ref in self._flying:
				continue
			paper.visible = papers_visible
			if section == SectionId.CHAOS and paper.position != paper.home:
				self._move(ref, paper.home, duration_ms=1000.0, delay_ms=index * 100.0)

		if section == SectionId.MANAGER:
			self._slide_in_binder()
		if section == SectionId.EXECUTIVE:
			self._start_plane_orbit()
		else:
			self.animations.cancel('plane')

		self._pan_camera(CAMERA_TARGETS[section])

	def fly_object_to_target(
		self,
		object_ref: str,
		target_ref: str,
		on_complete: Callable[[], None] | None = None,
	) -> None:
		obj = self.objects.get(object_ref)
		target = self.objects.get(target_ref)
		if obj is None or target is None:
			logger.warning(f"Cannot fly '{object_ref}' to '{target_ref}': unknown scene object")
			return

		start = obj.position
		tx, ty, tz = target.position
		end = (tx, ty + 0.2, tz)
		obj.visible = True
		self._flying.add(object_ref)

		def _step(t: float) -> None:
			obj.position = _lerp_vector(start, end, t)
			obj.opacity = 1.0 - t

		def _done() -> None:
			self._flying.discard(object_ref)
			obj.visible = False
			obj.retired = True
			if on_complete is not None:
				on_complete()

		self.animations.animate(object_ref, FLY_DURATION_MS, _step, on_complete=_done)

	# ------------------------------------------------------------------
	# Queries and teardown
	# ------------------------------------------------------------------

	def is_animating(self) -> bool:
		return self.animations.is_animating()

	def visible_objects(self) -> list[str]:
		return sorted(ref for ref, obj in self.objects.items() if obj.visible)

	def snapshot(self) -> dict[str, Any]:
		return {
			'section': self.current_section.value if self.current_section else None,
			'camera_position': list(self.camera_position),
			'animating': self.animations.active_keys(),
			'objects': [obj.to_dict() for obj in self.objects.values()],
		}

	def shutdown(self) -> None:
		self.animations.cancel_all()

	# ------------------------------------------------------------------
	# Animations
	# ------------------------------------------------------------------

	def _pan_camera(self, target: Vector) -> None:
		start = self.camera_position

		def _step(t: float) -> None:
			self.camera_position = _lerp_vector(start, target, t)

		self.animations.animate('camera', CAMERA_TRANSITION_MS, _step)

	def _move(self, ref: str, target: Vector, duration_ms: float, delay_ms: float = 0.0) -> None:
		obj = self.objects[ref]
		start = obj.position

		def _step(t: float) -> None:
			obj.position = _lerp_vector(start, target, t)

		self.animations.animate(ref, duration_ms, _step, delay_ms=delay_ms)

	def _slide_in_binder(self) -> None:
		binder = self.objects['binder']
		binder.position = (8.0, 0.5, 0.0)
		self._move('binder', binder.home, BINDER_SLIDE_MS)

	def _start_plane_orbit(self) -> None:
		plane = self.objects['plane']
		radius, center = 6.0, (0.0, 8.0, -8.0)
		start_angle = self._plane_angle

		def _step(t: float) -> None:
			self._plane_angle = start_angle + t * 2 * math.pi
			plane.position = (
				center[0] + math.cos(self._plane_angle) * radius,
				center[1],
				center[2] + math.sin(self._plane_angle) * radius,
			)

		def _loop() -> None:
			if self.current_section == SectionId.EXECUTIVE:
				self._start_plane_orbit()

		# Constant angular speed
		self.animations.animate('plane', PLANE_ORBIT_MS, _step, on_complete=_loop, easing=lambda t: t)


def _lerp_vector(start: Vector, end: Vector, t: float) -> Vector:
	return (lerp(start[0], end[0], t), lerp(start[1], end[1], t), lerp(start[2], end[2], t))
