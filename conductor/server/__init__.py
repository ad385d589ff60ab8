"""HTTP and WebSocket surface of the presentation conductor."""

from conductor.server.websocket import build_controller, create_app, get_app

__all__ = ['build_controller', 'create_app', 'get_app']
