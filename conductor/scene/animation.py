"""
Keyed frame animations.

Per-frame interpolation loops (camera pans, object flights, bounce effects)
run as cancellable tasks on the shared timer service. Each animation is keyed
by its target; starting a new animation for a key supersedes the one in
flight instead of racing with it.
"""

import logging
from typing import Callable

from conductor.timing.timer_service import TimerHandle, TimerService

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16.0

StepFunction = Callable[[float], None]


def ease_out_cubic(t: float) -> float:
	"""Ease-out cubic curve on [0, 1]."""
	return 1 - (1 - t) ** 3


def lerp(start: float, end: float, t: float) -> float:
	return start + (end - start) * t


class Animation:
	"""A single keyed interpolation."""

	def __init__(
		self,
		key: str,
		duration_ms: float,
		step: StepFunction,
		on_complete: Callable[[], None] | None,
		started_at: float,
		easing: Callable[[float], float] = ease_out_cubic,
	):
		self.key = key
		self.duration_ms = max(0.0, duration_ms)
		self.step = step
		self.on_complete = on_complete
		self.started_at = started_at
		self.easing = easing
		self.frame_handle: TimerHandle | None = None
		self.cancelled = False
		self.finished = False

	@property
	def active(self) -> bool:
		return not self.cancelled and not self.finished

	def cancel(self) -> None:
		self.cancelled = True
		if self.frame_handle is not None:
			self.frame_handle.cancel()
			self.frame_handle = None


class AnimationScheduler:
	"""Runs keyed animations frame by frame on a timer service."""

	def __init__(self, timer_service: TimerService, frame_interval_ms: float = FRAME_INTERVAL_MS):
		self.timer_service = timer_service
		self.frame_interval_ms = frame_interval_ms
		self._animations: dict[str, Animation] = {}

	def animate(
		self,
		key: str,
		duration_ms: float,
		step: StepFunction,
		on_complete: Callable[[], None] | None = None,
		delay_ms: float = 0.0,
		easing: Callable[[float], float] = ease_out_cubic,
	) -> Animation:
		"""
		Start an animation, superseding any animation already running for `key`.

		Args:
			key: Animation target key (e.g. "camera", "paper:p1")
			duration_ms: Animation length
			step: Called with eased progress in [0, 1] on every frame
			on_complete: Called once after the final frame. Not called when superseded or cancelled.
			delay_ms: Delay before the first frame
			easing: Progress curve applied before calling `step`

		Returns:
			The started Animation
		"""
		self.cancel(key)
		animation = Animation(
			key=key,
			duration_ms=duration_ms,
			step=step,
			on_complete=on_complete,
			started_at=self.timer_service.now() + max(0.0, delay_ms),
			easing=easing,
		)
		self._animations[key] = animation
		animation.frame_handle = self.timer_service.call_later(
			delay_ms,
			lambda: self._frame(animation),
			label=f"animation:{key}",
		)
		return animation

	def cancel(self, key: str) -> bool:
		"""Cancel the animation for `key`. Returns True if one was running."""
		animation = self._animations.pop(key, None)
		if animation is None or not animation.active:
			return False
		animation.cancel()
		logger.debug(f"Cancelled animation: {key}")
		return True

	def cancel_all(self) -> None:
		for key in list(self._animations):
			self.cancel(key)

	def is_animating(self, key: str | None = None) -> bool:
		if key is not None:
			animation = self._animations.get(key)
			return animation is not None and animation.active
		return any(animation.active for animation in self._animations.values())

	def active_keys(self) -> list[str]:
		return [key for key, animation in self._animations.items() if animation.active]

	def _frame(self, animation: Animation) -> None:
		if not animation.active:
			return
		if animation.duration_ms == 0:
			progress = 1.0
		else:
			elapsed = self.timer_service.now() - animation.started_at
			progress = min(max(elapsed / animation.duration_ms, 0.0), 1.0)

		try:
			animation.step(animation.easing(progress))
		except Exception as e:
			logger.error(f"Animation '{animation.key}' frame failed: {e}", exc_info=True)
			animation.cancel()
			self._animations.pop(animation.key, None)
			return

		if progress < 1.0:
			animation.frame_handle = self.timer_service.call_later(
				self.frame_interval_ms,
				lambda: self._frame(animation),
				label=f"animation:{animation.key}",
			)
			return

		animation.finished = True
		animation.frame_handle = None
		if self._animations.get(animation.key) is animation:
			del self._animations[animation.key]
		if animation.on_complete is not None:
			try:
				animation.on_complete()
			except Exception as e:
				logger.error(f"Completion callback for animation '{animation.key}' failed: {e}", exc_info=True)
