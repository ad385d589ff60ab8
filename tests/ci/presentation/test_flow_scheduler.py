"""
Tests for the Flow Step Scheduler.

Tests cover:
- Timed action firing
- Run cancellation (no action of an abandoned run ever fires)
- Auto-advance arming, disarming and re-arming
"""

from conductor.presentation.flow_steps import DEFAULT_FLOW_STEPS
from conductor.schemas.flow import FlowStep, ScheduledAction, SectionId

CHAOS, VALET, MANAGER, EXECUTIVE, CLOSING = DEFAULT_FLOW_STEPS


def _names(fired):
	return [name for name, _ in fired]


class TestFlowSchedulerActions:
	"""Tests for firing scheduled actions."""

	def test_actions_fire_at_their_offsets(self, scheduler, timers, fired):
		"""Test that actions fire at their offsets from the step start."""
		scheduler.start_run(CHAOS)
		timers.advance(10_000)

		assert fired == [
			('highlight3DPapers', 2000),
			('showProblemCount', 4000),
			('emphasizeCosts', 6000),
		]

	def test_run_owns_one_handle_per_action(self, scheduler, timers):
		"""Test that a run owns one handle per action plus auto-advance."""
		run = scheduler.start_run(VALET, auto_advance=True, on_step_elapsed=lambda run: None)

		assert len(run.action_handles) == 4
		assert run.auto_advance_handle is not None
		assert len(run.handles()) == 5
		assert timers.pending_count() == 5

	def test_each_action_fires_once(self, scheduler, timers, fired):
		"""Test that each action fires exactly once per run."""
		run = scheduler.start_run(CHAOS)
		timers.advance(60_000)

		assert sorted(run.fired) == [0, 1, 2]
		assert len(fired) == 3
		assert all(result.success for result in run.results)

	def test_zero_delay_action_fires_on_next_tick(self, registry, scheduler, timers, fired):
		"""Zero-delay actions go through the timer service, not inline."""
		step = FlowStep(
			section=SectionId.VALET,
			title='Valet',
			duration_ms=5000,
			actions=(ScheduledAction(action='showFirefighter', delay_ms=0),),
		)

		scheduler.start_run(step)
		assert fired == []

		timers.advance(0)
		assert _names(fired) == ['showFirefighter']

	def test_failing_action_does_not_block_later_actions(self, registry, scheduler, timers, fired):
		"""Test that a failing action does not block later ones."""
		def _boom():
			raise RuntimeError('boom')

		registry.register('showProblemCount', _boom)

		run = scheduler.start_run(CHAOS)
		timers.advance(10_000)

		assert _names(fired) == ['highlight3DPapers', 'emphasizeCosts']
		assert [result.success for result in run.results] == [True, False, True]


class TestFlowSchedulerCancellation:
	"""Tests for the cancellation invariant."""

	def test_cancel_run_stops_every_pending_action(self, scheduler, timers, fired):
		"""Test that cancelling a run stops all its pending timers."""
		run = scheduler.start_run(VALET, auto_advance=True, on_step_elapsed=lambda run: fired.append(('elapsed', 0)))
		timers.advance(3000)

		scheduler.cancel_run()
		timers.advance(200_000)

		assert _names(fired) == ['showFirefighter']
		assert not run.active
		assert run.pending_actions() == []
		assert timers.pending_count() == 0
		assert scheduler.active_run is None

	def test_cancel_run_is_idempotent(self, scheduler):
		"""Test that cancelling a run repeatedly is harmless."""
		run = scheduler.start_run(CHAOS)
		scheduler.cancel_run()
		scheduler.cancel_run()
		scheduler.cancel_run(run)
		assert not run.active

	def test_start_run_cancels_previous_run(self, scheduler, timers, fired):
		"""Test that starting a run cancels the previous one."""
		first = scheduler.start_run(VALET)
		timers.advance(500)
		second = scheduler.start_run(MANAGER)
		timers.advance(20_000)

		assert not first.active
		assert second.active
		assert 'animatePaperToBinder' not in _names(fired)
		assert _names(fired) == ['showWatchtower', 'openBinder', 'showProcesses', 'demonstrateOversight']

	def test_stale_fire_of_cancelled_run_is_ignored(self, scheduler, fired):
		"""A timer callback that runs after cancellation does nothing."""
		run = scheduler.start_run(CHAOS)
		handle = run.action_handles[0]
		scheduler.cancel_run()

		scheduler._fire_action(run, 0)
		handle._fire()

		assert fired == []

	def test_pending_actions_tracks_progress(self, scheduler, timers):
		"""Test that pending actions shrink as actions fire."""
		run = scheduler.start_run(EXECUTIVE)
		timers.advance(5000)

		pending = [scheduled.action for scheduled in run.pending_actions()]
		assert pending == ['showROICalculator', 'demonstrateROI', 'showPredictiveAnalytics']


class TestFlowSchedulerAutoAdvance:
	"""Tests for the end-of-step timer."""

	def test_auto_advance_reports_step_end(self, scheduler, timers):
		"""Test that auto-advance reports the end of the step."""
		elapsed = []
		scheduler.start_run(CHAOS, auto_advance=True, on_step_elapsed=lambda run: elapsed.append(timers.now()))

		timers.advance(CHAOS.duration_ms)

		assert elapsed == [60_000]

	def test_no_auto_advance_when_disabled(self, scheduler, timers):
		"""Test that no step end is reported without auto-advance."""
		elapsed = []
		scheduler.start_run(CHAOS, auto_advance=False, on_step_elapsed=lambda run: elapsed.append(1))
		timers.advance(200_000)
		assert elapsed == []

	def test_disarm_auto_advance(self, scheduler, timers, fired):
		"""Test disarming auto-advance on a running step."""
		elapsed = []
		scheduler.start_run(CHAOS, auto_advance=True, on_step_elapsed=lambda run: elapsed.append(1))
		timers.advance(1000)

		scheduler.set_auto_advance(False)
		timers.advance(200_000)

		assert elapsed == []
		# Scheduled actions keep running
		assert len(fired) == 3

	def test_rearm_uses_remaining_duration(self, scheduler, timers):
		"""Test that re-arming auto-advance waits only the remaining duration."""
		elapsed = []
		scheduler.start_run(CHAOS)
		timers.advance(20_000)

		scheduler.set_auto_advance(True, lambda run: elapsed.append(timers.now()))
		timers.advance(100_000)

		assert elapsed == [60_000]

	def test_set_auto_advance_without_run_is_noop(self, scheduler, timers):
		"""Test that arming auto-advance without a run does nothing."""
		scheduler.set_auto_advance(True, lambda run: None)
		assert timers.pending_count() == 0
