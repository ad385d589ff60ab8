"""
Redis Client Helper

Provides the Redis async client used for Pub/Sub event fan-out.
"""

import logging
import os
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)

# Global Redis async client
_redis_client: Any | None = None


def get_redis_url() -> str:
	"""
	Get Redis URL from environment variable.

	Returns:
		Redis URL string

	Raises:
		ValueError: If REDIS_URL is not set
	"""
	redis_url = os.getenv("REDIS_URL")
	if not redis_url:
		raise ValueError(
			"Redis connection URL not found. "
			"Please set REDIS_URL in your .env.local file."
		)
	return redis_url


async def get_redis_client(redis_url: str | None = None) -> Any | None:
	"""
	Get or create the Redis async client.

	Args:
		redis_url: Connection URL (defaults to REDIS_URL)

	Returns:
		Redis async client instance or None if Redis is not reachable
	"""
	global _redis_client

	if _redis_client is None:
		try:
			url = redis_url or get_redis_url()
			client = redis.from_url(url, decode_responses=True)
			await client.ping()
			_redis_client = client
			logger.info(f"Redis client connected to {url}")
		except Exception as e:
			logger.warning(f"Redis client not available: {e}")
			return None

	return _redis_client


async def close_redis_client() -> None:
	global _redis_client
	if _redis_client is not None:
		await _redis_client.aclose()
		_redis_client = None
		logger.info("Redis client closed")
