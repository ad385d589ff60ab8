"""
Tests for keyed frame animations.
"""

import logging

import pytest

from conductor.scene.animation import AnimationScheduler, ease_out_cubic, lerp


@pytest.fixture(scope='function')
def animations(timers):
	return AnimationScheduler(timers)


class TestEasing:
	def test_ease_out_cubic_endpoints(self):
		"""Test ease-out cubic at its endpoints and midpoint."""
		assert ease_out_cubic(0.0) == 0.0
		assert ease_out_cubic(1.0) == 1.0
		assert ease_out_cubic(0.5) == pytest.approx(0.875)

	def test_lerp(self):
		"""Test linear interpolation."""
		assert lerp(2.0, 6.0, 0.25) == 3.0


class TestAnimationScheduler:
	"""Tests for frame scheduling, completion and supersede."""

	def test_runs_to_completion(self, animations, timers):
		"""Test that an animation runs its frames and completes."""
		progress = []
		completed = []

		animations.animate('camera', 100, progress.append, on_complete=lambda: completed.append(timers.now()))
		assert animations.is_animating('camera')

		timers.advance(200)

		assert progress[0] == 0.0
		assert progress[-1] == 1.0
		assert progress == sorted(progress)
		assert len(completed) == 1
		assert completed[0] >= 100
		assert not animations.is_animating()

	def test_new_animation_supersedes_same_key(self, animations, timers):
		"""Test that a new animation on a key replaces the running one."""
		first_done = []
		second_done = []

		animations.animate('camera', 100, lambda t: None, on_complete=lambda: first_done.append(1))
		timers.advance(50)
		animations.animate('camera', 100, lambda t: None, on_complete=lambda: second_done.append(1))
		timers.advance(500)

		assert first_done == []
		assert second_done == [1]

	def test_different_keys_run_concurrently(self, animations, timers):
		"""Test that animations on different keys run side by side."""
		animations.animate('camera', 100, lambda t: None)
		animations.animate('paper:p1', 100, lambda t: None)

		assert sorted(animations.active_keys()) == ['camera', 'paper:p1']

	def test_cancel(self, animations, timers):
		"""Test cancelling one animation."""
		completed = []
		animations.animate('plane', 100, lambda t: None, on_complete=lambda: completed.append(1))

		assert animations.cancel('plane') is True
		assert animations.cancel('plane') is False
		timers.advance(500)

		assert completed == []
		assert timers.pending_count() == 0

	def test_cancel_all(self, animations, timers):
		"""Test cancelling every animation."""
		animations.animate('a', 100, lambda t: None)
		animations.animate('b', 100, lambda t: None)

		animations.cancel_all()

		assert not animations.is_animating()
		assert timers.pending_count() == 0

	def test_delay_before_first_frame(self, animations, timers):
		"""Test that a delayed animation starts after its delay."""
		progress = []
		animations.animate('paper:p2', 100, progress.append, delay_ms=300)

		timers.advance(299)
		assert progress == []

		timers.advance(1)
		assert progress == [0.0]

	def test_zero_duration_completes_on_first_frame(self, animations, timers):
		"""Test that a zero-duration animation completes on its first frame."""
		progress = []
		animations.animate('binder', 0, progress.append)
		timers.advance(0)
		assert progress == [1.0]

	def test_failing_frame_stops_animation(self, animations, timers, caplog):
		"""Test that a raising frame step stops the animation."""
		def _broken(t):
			raise RuntimeError('mesh disposed')

		completed = []
		with caplog.at_level(logging.ERROR):
			animations.animate('camera', 100, _broken, on_complete=lambda: completed.append(1))
			timers.advance(500)

		assert completed == []
		assert not animations.is_animating('camera')
		assert any('mesh disposed' in record.getMessage() for record in caplog.records)

	def test_custom_easing(self, animations, timers):
		"""Test animating with a custom easing function."""
		progress = []
		animations.animate('plane', 160, progress.append, easing=lambda t: t)
		timers.advance(80)
		assert progress[-1] == pytest.approx(0.5)
