"""Event fan-out to presentation front ends."""

from conductor.streaming.broadcaster import EventBroadcaster, channel_for
from conductor.streaming.sinks import BroadcastCueSink, BroadcastDialogs, BroadcastExporter, forward_controller_events

__all__ = [
	'BroadcastCueSink',
	'BroadcastDialogs',
	'BroadcastExporter',
	'EventBroadcaster',
	'channel_for',
	'forward_controller_events',
]
