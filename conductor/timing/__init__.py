"""Timer services shared by the scheduler, demo driver and scene animations."""
from conductor.timing.timer_service import AsyncioTimerService, TimerHandle, TimerService
from conductor.timing.virtual import ManualTimerService

__all__ = ['AsyncioTimerService', 'ManualTimerService', 'TimerHandle', 'TimerService']
