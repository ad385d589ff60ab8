"""Presentation content and the dialog/export collaborators."""

from conductor.content.collaborators import DialogSubsystem, DocumentExporter
from conductor.content.store import ContentStore, StaticContentStore, fallback_presentation_data

__all__ = [
	'ContentStore',
	'DialogSubsystem',
	'DocumentExporter',
	'StaticContentStore',
	'fallback_presentation_data',
]
