"""
Async helpers shared across the conductor.
"""

import asyncio
import inspect
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)

# Strong references to fire-and-forget tasks so they are not garbage collected mid-flight
_background_tasks: set[asyncio.Task[Any]] = set()


def create_task_with_error_handling(
	coro: Coroutine[Any, Any, Any],
	name: str | None = None,
	suppress_exceptions: bool = True,
) -> asyncio.Task[Any]:
	"""
	Schedule a coroutine as a background task that logs its failure.

	Args:
		coro: Coroutine to run
		name: Task name (used in log messages)
		suppress_exceptions: If True, a failure is logged and the task result is cleared.
			If False, the exception stays on the task for whoever awaits it.

	Returns:
		The created asyncio.Task
	"""
	task = asyncio.get_running_loop().create_task(coro, name=name)
	_background_tasks.add(task)

	def _on_done(done: asyncio.Task[Any]) -> None:
		_background_tasks.discard(done)
		if done.cancelled() or not suppress_exceptions:
			return
		error = done.exception()
		if error is not None:
			logger.error(f"Background task '{done.get_name()}' failed: {error}", exc_info=error)

	task.add_done_callback(_on_done)
	return task


def run_maybe_async(result: Any, name: str) -> None:
	"""
	Dispatch the result of a zero-argument effect.

	Awaitable results are scheduled as background tasks on the running loop;
	plain values are ignored.
	"""
	if not inspect.isawaitable(result):
		return
	try:
		asyncio.get_running_loop()
	except RuntimeError:
		logger.warning(f"Effect '{name}' returned an awaitable but no event loop is running; dropping it")
		if inspect.iscoroutine(result):
			result.close()
		return

	async def _await() -> Any:
		return await result

	create_task_with_error_handling(_await(), name=name, suppress_exceptions=True)
