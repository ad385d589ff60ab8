"""
Conductor error taxonomy.

These errors are reported (logged, attached to ActionResult.error) at the
boundary where they occur. None of them cross the public command surface.
"""


class ConductorError(Exception):
	"""Base class for presentation conductor errors."""


class ConfigurationError(ConductorError):
	"""A flow step or demo step references an unknown action name."""

	def __init__(self, action: str, message: str | None = None):
		self.action = action
		super().__init__(message or f"Unknown action: {action}")


class ActionExecutionError(ConductorError):
	"""An action's effect raised."""

	def __init__(self, action: str, cause: BaseException):
		self.action = action
		self.cause = cause
		super().__init__(f"Action '{action}' failed: {cause}")


class InvalidTransition(ConductorError):
	"""A navigation request named an unknown section or an out-of-range step index."""


class StaleTimerFire(ConductorError):
	"""A callback fired for a run or demo step that was already cancelled."""
