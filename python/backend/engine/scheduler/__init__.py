from backend.engine.scheduler.scheduler import (
    ManualScheduler,
    MonotonicScheduler,
    ScheduledTask,
    Scheduler,
    TaskHandle,
)

__all__ = [
    "ManualScheduler",
    "MonotonicScheduler",
    "ScheduledTask",
    "Scheduler",
    "TaskHandle",
]
