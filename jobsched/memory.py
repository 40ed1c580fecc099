import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .config import LEASE_TIMEOUT_SECONDS, POLL_INTERVAL_SECONDS
from .models import Job
from .storage import Storage
from .utils import utc_now


@dataclass(frozen=True)
class Lease:
    job_id: str
    expires_at: datetime


class InMemoryStorage(Storage):
    """
    Process-local storage. One lock guards both the job table and the lease
    table; the lock is never held while waiting for a lease.
    """

    def __init__(
        self,
        lease_timeout: float = LEASE_TIMEOUT_SECONDS,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.lease_timeout = timedelta(seconds=lease_timeout)
        self.poll_interval = poll_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._jobs: Dict[str, Job] = {}
        self._leases: Dict[str, Lease] = {}

    # ---------- Storage contract ----------
    def enqueue(self, job: Job) -> None:
        with self._lock:
            # re-insert so a replaced job loses its old tie-break position
            self._jobs.pop(job.id, None)
            self._jobs[job.id] = job

    def dequeue(self) -> Optional[Job]:
        while True:
            now = self._clock()
            self._expire_leases(now)
            candidate = self._next_due(now)
            if candidate is None:
                return None
            job = self._try_lease(candidate.id, now)
            if job is not None:
                return job
            # lost the race for this id; look again after a pause
            time.sleep(self.poll_interval)

    def delete(self, job_id: str) -> None:
        with self._lock:
            self._jobs.pop(job_id, None)
            self._leases.pop(job_id, None)

    def release_job(self, job_id: str) -> None:
        with self._lock:
            self._leases.pop(job_id, None)

    # ---------- Inspection ----------
    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def is_leased(self, job_id: str) -> bool:
        now = self._clock()
        with self._lock:
            lease = self._leases.get(job_id)
            return lease is not None and lease.expires_at > now

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._jobs

    # ---------- Internals ----------
    def _expire_leases(self, now: datetime) -> None:
        with self._lock:
            expired = [job_id for job_id, lease in self._leases.items() if lease.expires_at <= now]
            for job_id in expired:
                del self._leases[job_id]

    def _next_due(self, now: datetime) -> Optional[Job]:
        with self._lock:
            due = [
                job for job in self._jobs.values()
                if job.execute_at <= now and job.id not in self._leases
            ]
            if not due:
                return None
            return min(due, key=lambda job: job.execute_at)

    def _try_lease(self, job_id: str, now: datetime) -> Optional[Job]:
        with self._lock:
            if job_id in self._leases:
                return None
            job = self._jobs.get(job_id)
            # deleted or pushed into the future since it was picked
            if job is None or job.execute_at > now:
                return None
            self._leases[job_id] = Lease(job_id, now + self.lease_timeout)
            return job
