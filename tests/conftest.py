"""
Pytest configuration and shared fixtures for all tests.
"""

import pytest

from conductor.config.features import FeatureFlags
from conductor.timing.virtual import ManualTimerService

FEATURE_ENV_VARS = (
	'FEATURE_AUTO_ADVANCE_ON_PLAY',
	'FEATURE_PAUSE_DEMO_ON_HIDDEN',
	'FEATURE_STOP_DEMO_ON_INTERACTION',
	'FEATURE_REDIS_BROADCAST',
)


@pytest.fixture(scope='function')
def timers():
	"""Virtual clock shared by every component under test."""
	return ManualTimerService()


@pytest.fixture(scope='function')
def feature_flags(monkeypatch):
	"""Feature flags with every flag at its default."""
	for var in FEATURE_ENV_VARS:
		monkeypatch.delenv(var, raising=False)
	return FeatureFlags()
