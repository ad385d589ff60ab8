"""
Feature Flags

Toggles for optional presentation behaviour, read from FEATURE_* environment
variables.
"""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_TRUTHY = ('true', '1', 'yes', 'on', 'enabled')


class FeatureFlags:
	"""
	Presentation behaviour toggles.

	Environment variables (defaults in brackets):
	- FEATURE_AUTO_ADVANCE_ON_PLAY [true]: play() advances sections when a step elapses
	- FEATURE_PAUSE_DEMO_ON_HIDDEN [true]: hiding the page pauses a running demo
	- FEATURE_STOP_DEMO_ON_INTERACTION [true]: direct user input stops a running demo
	- FEATURE_REDIS_BROADCAST [false]: publish events to Redis in addition to WebSocket
	"""

	def __init__(self):
		self.auto_advance_on_play = self._read('FEATURE_AUTO_ADVANCE_ON_PLAY', True)
		self.pause_demo_on_hidden = self._read('FEATURE_PAUSE_DEMO_ON_HIDDEN', True)
		self.stop_demo_on_interaction = self._read('FEATURE_STOP_DEMO_ON_INTERACTION', True)
		self.redis_broadcast_enabled = self._read('FEATURE_REDIS_BROADCAST', False)

		active = [name for name, enabled in self.to_dict().items() if enabled]
		logger.info(f"Feature flags on: {', '.join(active) if active else 'none'}")

	@staticmethod
	def _read(env_var: str, default: bool) -> bool:
		raw = os.getenv(env_var)
		if raw is None:
			return default
		return raw.strip().lower() in _TRUTHY

	def is_redis_broadcast_enabled(self) -> bool:
		return self.redis_broadcast_enabled

	def to_dict(self) -> dict[str, Any]:
		return {
			'auto_advance_on_play': self.auto_advance_on_play,
			'pause_demo_on_hidden': self.pause_demo_on_hidden,
			'stop_demo_on_interaction': self.stop_demo_on_interaction,
			'redis_broadcast': self.redis_broadcast_enabled,
		}


_feature_flags: FeatureFlags | None = None


def get_feature_flags() -> FeatureFlags:
	"""Process-wide flags, read from the environment on first use."""
	global _feature_flags
	if _feature_flags is None:
		_feature_flags = FeatureFlags()
	return _feature_flags


def reload_feature_flags() -> FeatureFlags:
	"""Re-read the flags after the environment changed."""
	global _feature_flags
	_feature_flags = FeatureFlags()
	return _feature_flags
