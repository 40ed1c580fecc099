from abc import ABC, abstractmethod
from typing import Optional

from .models import Job


class Storage(ABC):
    """
    What a backend must provide to the scheduler.

    Ownership of a job between dequeue and delete/release is tracked with a
    lease. Leases are backend state and never part of the Job itself.
    """

    @abstractmethod
    def enqueue(self, job: Job) -> None:
        """Add or replace the job stored under ``job.id``. Leases are left alone."""

    @abstractmethod
    def dequeue(self) -> Optional[Job]:
        """
        Claim the earliest due job nobody holds a lease on and return it.
        Returns None when nothing is due. Two concurrent callers never get
        the same id while its lease is held.
        """

    @abstractmethod
    def delete(self, job_id: str) -> None:
        """Remove the job and any lease on it. Unknown ids are ignored."""

    @abstractmethod
    def release_job(self, job_id: str) -> None:
        """Drop the lease on ``job_id`` but keep the job."""
