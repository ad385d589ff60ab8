"""
Startup script for the Presentation Conductor

Starts the HTTP/WebSocket server that hosts one presentation.
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env.local first, then .env
load_dotenv(dotenv_path='.env.local', override=False)
load_dotenv(override=True)

# Set CONDUCTOR_DEBUG=true to enable debug logging
debug_mode = os.getenv('CONDUCTOR_DEBUG', 'false').lower() == 'true'

logging.basicConfig(
	level=logging.DEBUG if debug_mode else logging.INFO,
	format='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
	force=True,
)
logger = logging.getLogger(__name__)

logging.getLogger('uvicorn').setLevel(logging.INFO)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('fastapi').setLevel(logging.INFO)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('redis').setLevel(logging.WARNING)

# Animation frames and timer fires are very chatty at DEBUG
logging.getLogger('conductor.timing').setLevel(logging.INFO)
logging.getLogger('conductor.scene.animation').setLevel(logging.INFO)


def main() -> None:
	from conductor.config.settings import ConductorSettings
	from conductor.server.websocket import create_app

	settings = ConductorSettings.from_env()

	logger.info('=' * 70)
	logger.info('Starting Presentation Conductor')
	logger.info('=' * 70)
	logger.info(f'Commands: http://{settings.host}:{settings.port}/presentation/{{command}}')
	logger.info(f'Events: ws://{settings.host}:{settings.port}/presentation/events/{settings.room}')
	logger.info(f'Health check: http://{settings.host}:{settings.port}/health')
	logger.info(f"Content: {settings.content_path or 'built-in fallback'}")
	logger.info(f"Redis: {'configured' if settings.redis_url else 'not configured (WebSocket only)'}")
	logger.info('=' * 70)

	app = create_app(settings)

	# Logging is configured above, so uvicorn must not install its own config
	uvicorn.run(
		app,
		host=settings.host,
		port=settings.port,
		log_config=None,
	)


if __name__ == '__main__':
	main()
