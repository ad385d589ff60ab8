"""
HTTP and WebSocket Server for the Presentation Conductor

Exposes the presentation commands to the hosting application over HTTP and
streams presentation events to front ends over WebSocket.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from conductor.config.features import FeatureFlags, get_feature_flags
from conductor.config.settings import ConductorSettings
from conductor.content.store import StaticContentStore
from conductor.presentation.actions import paper_ref
from conductor.presentation.controller import PresentationController
from conductor.scene.headless import HeadlessScene
from conductor.schemas.flow import SectionId
from conductor.streaming.broadcaster import EventBroadcaster
from conductor.streaming.redis_client import close_redis_client, get_redis_client
from conductor.streaming.sinks import BroadcastCueSink, BroadcastDialogs, BroadcastExporter, forward_controller_events
from conductor.timing.timer_service import AsyncioTimerService, TimerService

logger = logging.getLogger(__name__)

PRESENTATION_COMMANDS = ('next', 'previous', 'play', 'pause', 'stop', 'reset')
DEMO_COMMANDS = ('start', 'stop', 'pause', 'resume', 'toggle')

# FastAPI app instance (created on demand)
_app: FastAPI | None = None


class VisibilityRequest(BaseModel):
	hidden: bool = Field(..., description="Whether the presentation page is hidden")


class KeyRequest(BaseModel):
	key: str = Field(..., min_length=1, description="Key name as reported by the browser (e.g. ArrowRight)")
	ctrl: bool = Field(default=False, description="Ctrl or Cmd modifier held")


def build_controller(
	settings: ConductorSettings,
	broadcaster: EventBroadcaster,
	timer_service: TimerService,
	content: StaticContentStore | None = None,
	feature_flags: FeatureFlags | None = None,
) -> PresentationController:
	"""
	Build a presentation controller whose collaborators publish to the configured room.

	Args:
		settings: Conductor settings
		broadcaster: Event broadcaster shared with the WebSocket endpoint
		timer_service: Timer service for the whole presentation
		content: Content store (loaded from settings.content_path if None)
		feature_flags: Feature flags (global flags if None)
	"""
	content = content or StaticContentStore.load_from_file(settings.content_path)
	papers = [paper_ref(problem.id) for problem in content.get_problems_by_section(SectionId.CHAOS.value)]
	room = settings.room

	controller = PresentationController(
		scene=HeadlessScene(timer_service, paper_refs=papers),
		content=content,
		dialogs=BroadcastDialogs(broadcaster, room),
		exporter=BroadcastExporter(broadcaster, room),
		cues=BroadcastCueSink(broadcaster, room),
		timer_service=timer_service,
		feature_flags=feature_flags,
		demo_speed=settings.demo_speed,
	)
	forward_controller_events(controller, broadcaster, room)
	return controller


def create_app(
	settings: ConductorSettings | None = None,
	timer_service: TimerService | None = None,
	content: StaticContentStore | None = None,
	feature_flags: FeatureFlags | None = None,
	redis_client: Any | None = None,
) -> FastAPI:
	"""
	Create the FastAPI app for one presentation.

	Args:
		settings: Conductor settings (read from the environment if None)
		timer_service: Timer service (asyncio-backed if None)
		content: Content store (loaded from settings.content_path if None)
		feature_flags: Feature flags (global flags if None)
		redis_client: Redis client for Pub/Sub. If None, one is connected on startup
			when FEATURE_REDIS_BROADCAST is enabled and REDIS_URL is set.
	"""
	settings = settings or ConductorSettings.from_env()
	feature_flags = feature_flags or get_feature_flags()
	broadcaster = EventBroadcaster(redis_client=redis_client)
	controller = build_controller(
		settings,
		broadcaster,
		timer_service or AsyncioTimerService(),
		content=content,
		feature_flags=feature_flags,
	)

	@asynccontextmanager
	async def lifespan(app: FastAPI) -> AsyncIterator[None]:
		connected_here = False
		if broadcaster.redis_client is None and feature_flags.is_redis_broadcast_enabled() and settings.redis_url:
			broadcaster.redis_client = await get_redis_client(settings.redis_url)
			connected_here = broadcaster.redis_client is not None

		yield

		controller.shutdown()
		if connected_here:
			await close_redis_client()

	app = FastAPI(title='Presentation Conductor API', lifespan=lifespan)
	app.state.settings = settings
	app.state.broadcaster = broadcaster
	app.state.controller = controller
	app.state.content = controller.actions.content
	_setup_routes(app)
	return app


def get_app() -> FastAPI:
	"""Get or create the FastAPI app instance configured from the environment."""
	global _app
	if _app is None:
		_app = create_app()
	return _app


def _setup_routes(app: FastAPI) -> None:
	"""Setup HTTP and WebSocket routes."""
	controller: PresentationController = app.state.controller
	broadcaster: EventBroadcaster = app.state.broadcaster

	@app.post('/presentation/goto/{section}')
	async def goto_section(section: str):
		"""Navigate to a section by id, or to a flow step by numeric index."""
		if section.isdigit():
			changed = controller.goto(int(section))
		elif SectionId.parse(section) is None:
			return JSONResponse({'error': f'Unknown section: {section}'}, status_code=404)
		else:
			changed = controller.navigate_to(section)
		return JSONResponse({'command': 'goto', 'changed': changed, 'state': controller.snapshot()})

	@app.post('/presentation/{command}')
	async def presentation_command(command: str):
		"""Run a navigation or playback command."""
		if command not in PRESENTATION_COMMANDS:
			return JSONResponse({'error': f'Unknown presentation command: {command}'}, status_code=404)
		result = getattr(controller, command)()
		return JSONResponse({
			'command': command,
			'accepted': result is not False,
			'state': controller.snapshot(),
		})

	@app.get('/presentation/state')
	async def presentation_state():
		return JSONResponse(controller.snapshot())

	@app.get('/presentation/notes')
	async def presenter_notes():
		return JSONResponse(controller.presenter_notes())

	@app.post('/demo/skip/{index}')
	async def demo_skip(index: int):
		accepted = controller.demo.skip_to_step(index)
		return JSONResponse({'command': 'skip', 'accepted': accepted, 'demo': controller.demo.status().model_dump()})

	@app.post('/demo/{command}')
	async def demo_command(command: str):
		"""Control the demo driver."""
		if command not in DEMO_COMMANDS:
			return JSONResponse({'error': f'Unknown demo command: {command}'}, status_code=404)
		if command == 'toggle':
			accepted = True
			controller.toggle_demo()
		else:
			accepted = getattr(controller.demo, command)()
		return JSONResponse({'command': command, 'accepted': accepted, 'demo': controller.demo.status().model_dump()})

	@app.post('/interaction')
	async def user_interaction():
		stopped = controller.handle_user_interaction()
		return JSONResponse({'demo_stopped': stopped})

	@app.post('/visibility')
	async def visibility_change(request: VisibilityRequest):
		changed = controller.handle_visibility_change(request.hidden)
		return JSONResponse({'hidden': request.hidden, 'demo_changed': changed})

	@app.post('/keys')
	async def key_press(request: KeyRequest):
		handled = controller.handle_key(request.key, ctrl=request.ctrl)
		return JSONResponse({'key': request.key, 'command': handled, 'state': controller.snapshot()})

	@app.get('/content/roi')
	async def roi(investment: float):
		if investment <= 0:
			return JSONResponse({'error': 'Investment must be positive'}, status_code=400)
		return JSONResponse(app.state.content.calculate_roi(investment).model_dump())

	@app.get('/health')
	async def health_check():
		"""Health check endpoint."""
		return JSONResponse({
			'status': 'ok',
			'service': 'presentation-conductor',
			'redis': broadcaster.redis_client is not None,
			'connections': broadcaster.connection_count(),
		})

	@app.websocket('/presentation/events/{room_name}')
	async def presentation_events_websocket(websocket: WebSocket, room_name: str):
		"""
		WebSocket endpoint for real-time presentation events.

		Args:
			websocket: WebSocket connection
			room_name: Presentation room name
		"""
		logger.info(f"[WebSocket] New connection for room: {room_name}")
		await broadcaster.register_websocket(websocket, room_name)

		try:
			# Front ends may push key presses over the socket
			while True:
				data = await websocket.receive_json()
				if isinstance(data, dict) and data.get('type') == 'key' and data.get('key'):
					controller.handle_key(str(data['key']), ctrl=bool(data.get('ctrl', False)))
				else:
					logger.debug(f"[WebSocket] Ignoring message from room {room_name}: {data}")
		except WebSocketDisconnect:
			logger.info(f"[WebSocket] Client disconnected from room: {room_name}")
		except Exception as e:
			logger.error(f"[WebSocket] Error in WebSocket connection for room {room_name}: {e}", exc_info=True)
		finally:
			await broadcaster.unregister_websocket(websocket, room_name)
