"""
Conductor settings.

Process-level configuration read from environment variables.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
	return os.getenv(name, str(default)).lower() in ('true', '1', 'yes', 'on')


@dataclass
class ConductorSettings:
	"""Server and presentation configuration."""

	# HTTP bind address
	host: str = "0.0.0.0"
	port: int = 8000

	# Presentation content JSON; fallback content is used when unset
	content_path: str | None = None

	# Demo post-delay multiplier (2.0 plays twice as fast)
	demo_speed: float = 1.0

	# Redis Pub/Sub for event fan-out; WebSocket only when unset
	redis_url: str | None = None

	# Room that receives this presentation's events
	room: str = "main"

	debug: bool = False

	@classmethod
	def from_env(cls) -> "ConductorSettings":
		"""
		Create configuration from environment variables.

		Environment variables:
		- CONDUCTOR_HOST: Bind host (default: 0.0.0.0)
		- CONDUCTOR_PORT: Bind port (default: 8000)
		- CONDUCTOR_CONTENT_PATH: Presentation content JSON file (optional)
		- CONDUCTOR_DEMO_SPEED: Demo speed multiplier (default: 1.0)
		- REDIS_URL: Redis connection URL (optional)
		- CONDUCTOR_ROOM: Event room name (default: main)
		- CONDUCTOR_DEBUG: Enable debug logging (default: false)
		"""
		demo_speed = float(os.getenv("CONDUCTOR_DEMO_SPEED", "1.0"))
		if demo_speed <= 0:
			logger.warning(f"Ignoring non-positive CONDUCTOR_DEMO_SPEED={demo_speed}")
			demo_speed = 1.0
		return cls(
			host=os.getenv("CONDUCTOR_HOST", "0.0.0.0"),
			port=int(os.getenv("CONDUCTOR_PORT", "8000")),
			content_path=os.getenv("CONDUCTOR_CONTENT_PATH") or None,
			demo_speed=demo_speed,
			redis_url=os.getenv("REDIS_URL") or None,
			room=os.getenv("CONDUCTOR_ROOM", "main"),
			debug=_env_bool("CONDUCTOR_DEBUG"),
		)
