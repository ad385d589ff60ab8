"""
Presentation Action Registry

Maps symbolic action names to zero-argument effects and executes them in
isolation. Used by the flow step scheduler for timed sub-actions and by the
demo script for named interactions.
"""

import logging
from typing import Any, Callable, Iterable

from conductor.presentation.errors import ActionExecutionError, ConfigurationError
from conductor.schemas.flow import ActionResult
from conductor.utils import run_maybe_async

logger = logging.getLogger(__name__)

Effect = Callable[[], Any]


class PresentationActionRegistry:
	"""
	Action registry for presentation flows.

	Effects are plain side-effecting callables. An effect may return an
	awaitable, in which case it is scheduled on the running event loop and its
	failure is logged when it completes.
	"""

	def __init__(self, effects: dict[str, Effect] | None = None):
		"""
		Initialize the presentation action registry.

		Args:
			effects: Optional initial mapping of action name to effect
		"""
		self._effects: dict[str, Effect] = {}
		for name, effect in (effects or {}).items():
			self.register(name, effect)
		logger.debug(f"PresentationActionRegistry initialized with {len(self._effects)} actions")

	def register(self, name: str, effect: Effect) -> None:
		"""
		Register (or replace) an action.

		Args:
			name: Action name referenced by flow steps and demo steps
			effect: Zero-argument callable
		"""
		if not callable(effect):
			raise TypeError(f"Effect for action '{name}' is not callable")
		if name in self._effects:
			logger.debug(f"Replacing effect for action: {name}")
		self._effects[name] = effect

	def unregister(self, name: str) -> None:
		self._effects.pop(name, None)

	def has(self, name: str) -> bool:
		return name in self._effects

	def names(self) -> list[str]:
		return sorted(self._effects)

	def resolve(self, name: str) -> Effect:
		"""
		Look up the effect for an action name.

		Raises:
			ConfigurationError: If the action is not registered
		"""
		try:
			return self._effects[name]
		except KeyError:
			raise ConfigurationError(name) from None

	def validate(self, names: Iterable[str]) -> list[str]:
		"""
		Return the names that are not registered, in first-seen order.
		"""
		unknown: list[str] = []
		for name in names:
			if name not in self._effects and name not in unknown:
				unknown.append(name)
		return unknown

	def bind(self, name: str) -> Callable[[], ActionResult]:
		"""
		Return a zero-argument callable that executes the named action.

		The name is resolved at call time, so effects registered later are picked up.
		"""
		def _run() -> ActionResult:
			return self.execute(name)

		_run.__name__ = f"action_{name}"
		return _run

	def execute(self, name: str) -> ActionResult:
		"""
		Execute an action.

		Unknown names and failing effects are logged and reported in the
		result; this method never raises.

		Args:
			name: Action name

		Returns:
			ActionResult with execution result
		"""
		try:
			effect = self.resolve(name)
		except ConfigurationError as e:
			logger.warning(f"Skipping action: {e}")
			return ActionResult(action=name, success=False, error=str(e))

		logger.debug(f"Executing action: {name}")
		try:
			result = effect()
			run_maybe_async(result, name=f"action_{name}")
		except Exception as e:
			error = ActionExecutionError(name, e)
			logger.error(str(error), exc_info=True)
			return ActionResult(action=name, success=False, error=str(error))

		return ActionResult(action=name, success=True)
