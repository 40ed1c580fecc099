from .errors import ConfigurationError, DispatchError, HandlerError, SchedulerError, StorageError
from .memory import InMemoryStorage, Lease
from .models import Job
from .scheduler import Scheduler
from .storage import Storage

__all__ = [
    "ConfigurationError",
    "DispatchError",
    "HandlerError",
    "InMemoryStorage",
    "Job",
    "Lease",
    "Scheduler",
    "SchedulerError",
    "Storage",
    "StorageError",
]
