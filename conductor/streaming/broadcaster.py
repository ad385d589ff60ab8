"""
Event Broadcaster for the Presentation Conductor

Broadcasts presentation events (section changes, action cues, dialog and
export requests, demo progress) to front ends via Redis Pub/Sub and
WebSocket. Supports multiple WebSocket connections per room.
"""

import asyncio
import json
import logging
import time
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

logger = logging.getLogger(__name__)


def channel_for(room_name: str) -> str:
	return f"presentation:events:{room_name}"


class EventBroadcaster:
	"""Broadcasts presentation events via Redis Pub/Sub and WebSocket."""

	def __init__(self, redis_client: Any | None = None, use_websocket: bool = True):
		"""
		Initialize event broadcaster.

		Args:
			redis_client: Optional Redis client (from redis.asyncio). If None, only WebSocket is used.
			use_websocket: Whether to fan out to WebSocket connections (default: True)
		"""
		self.redis_client = redis_client
		self.use_websocket = use_websocket

		# room_name -> set of WebSocket connections
		self.room_websockets: dict[str, set[WebSocket]] = {}
		self._lock = asyncio.Lock()

		logger.debug(
			f"EventBroadcaster initialized (redis: {'enabled' if redis_client else 'disabled'}, "
			f"websocket: {'enabled' if use_websocket else 'disabled'})"
		)

	async def register_websocket(self, websocket: WebSocket, room_name: str) -> None:
		"""
		Accept and register a WebSocket connection for a room.

		Args:
			websocket: WebSocket connection
			room_name: Presentation room name
		"""
		await websocket.accept()

		async with self._lock:
			self.room_websockets.setdefault(room_name, set()).add(websocket)
			count = len(self.room_websockets[room_name])

		logger.info(f"WebSocket registered for room: {room_name} (total connections: {count})")

	async def unregister_websocket(self, websocket: WebSocket, room_name: str) -> None:
		async with self._lock:
			if room_name in self.room_websockets:
				self.room_websockets[room_name].discard(websocket)
				if not self.room_websockets[room_name]:
					del self.room_websockets[room_name]

		logger.info(f"WebSocket unregistered for room: {room_name}")

	def connection_count(self, room_name: str | None = None) -> int:
		if room_name is not None:
			return len(self.room_websockets.get(room_name, ()))
		return sum(len(sockets) for sockets in self.room_websockets.values())

	async def broadcast_event(self, room_name: str, event: dict[str, Any]) -> None:
		"""
		Broadcast an event via Redis Pub/Sub (if available) and WebSocket.

		Delivery failures are logged; they never propagate to the caller.

		Args:
			room_name: Presentation room name
			event: Event dictionary to broadcast
		"""
		event_type = event.get('type', 'unknown')
		if 'timestamp' not in event:
			event['timestamp'] = time.time()

		if self.redis_client:
			channel = channel_for(room_name)
			try:
				await self.redis_client.publish(channel, json.dumps(event))
				logger.debug(f"Published event {event_type} to Redis channel: {channel}")
			except Exception as e:
				logger.error(f"Error publishing event to Redis: {e}", exc_info=True)

		if not self.use_websocket:
			return

		async with self._lock:
			websockets = self.room_websockets.get(room_name, set()).copy()

		if not websockets:
			logger.debug(f"No WebSocket connections for room: {room_name}")
			return

		disconnected = set()
		for websocket in websockets:
			try:
				if websocket.client_state == WebSocketState.DISCONNECTED:
					disconnected.add(websocket)
					continue
				await websocket.send_json(event)
			except WebSocketDisconnect:
				disconnected.add(websocket)
			except Exception as e:
				logger.error(f"Error sending event to WebSocket: {e}", exc_info=True)
				disconnected.add(websocket)

		if disconnected:
			async with self._lock:
				if room_name in self.room_websockets:
					self.room_websockets[room_name] -= disconnected
					if not self.room_websockets[room_name]:
						del self.room_websockets[room_name]

		logger.debug(
			f"Broadcasted event {event_type} to {len(websockets) - len(disconnected)} "
			f"WebSocket connections in room: {room_name}"
		)

	async def broadcast_section_changed(self, room_name: str, event: dict[str, Any]) -> None:
		await self.broadcast_event(room_name, {**event, 'type': 'section_changed'})

	async def broadcast_action_cue(self, room_name: str, cue: str, payload: dict[str, Any] | None = None) -> None:
		"""
		Broadcast a visual cue for presentation chrome.

		Args:
			room_name: Presentation room name
			cue: Cue name (e.g. highlight3DPapers)
			payload: Cue parameters
		"""
		await self.broadcast_event(room_name, {'type': 'action_cue', 'cue': cue, 'payload': payload or {}})

	async def broadcast_dialog_opened(self, room_name: str, dialog: str, data: dict[str, Any]) -> None:
		await self.broadcast_event(room_name, {'type': 'dialog_opened', 'dialog': dialog, 'data': data})

	async def broadcast_dialogs_closed(self, room_name: str) -> None:
		await self.broadcast_event(room_name, {'type': 'dialogs_closed'})

	async def broadcast_export_requested(self, room_name: str, document: str, data: dict[str, Any]) -> None:
		await self.broadcast_event(room_name, {'type': 'export_requested', 'document': document, 'data': data})

	async def broadcast_demo_status(self, room_name: str, status: dict[str, Any]) -> None:
		await self.broadcast_event(room_name, {'type': 'demo_status', 'status': status})

	async def broadcast_presentation_finished(self, room_name: str, state: dict[str, Any]) -> None:
		await self.broadcast_event(room_name, {'type': 'presentation_finished', 'state': state})
