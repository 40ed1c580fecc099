from typing import Optional


class SchedulerError(Exception):
    """Base class for everything the scheduler raises or reports."""


class ConfigurationError(SchedulerError):
    """Scheduler set up wrongly (duplicate handler, registration while running)."""


class DispatchError(SchedulerError):
    """No handler is registered for a dequeued job's type."""

    def __init__(self, job_type: str):
        super().__init__(f"No handler for job type '{job_type}'")
        self.job_type = job_type


class HandlerError(SchedulerError):
    """A user handler failed. The original exception is kept as the cause."""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class StorageError(SchedulerError):
    """A storage backend call failed."""
