from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from .config import DEFAULT_RECURRING_DELAY_MS
from .utils import utc_now


@dataclass(frozen=True)
class Job:
    """
    One unit of scheduled work.

    Jobs are immutable: every ``with_*`` call returns a new Job, so a copy
    already handed to storage never sees changes made through another copy.

    max_retries < 0 means retry forever; recurring_delay_ms <= 0 means one-shot.
    """
    id: str
    type: str
    execute_at: datetime = field(default_factory=utc_now)
    last_error: Optional[BaseException] = field(default=None, compare=False)
    error_count: int = 0
    max_retries: int = -1
    recurring_delay_ms: int = 0
    payload: Optional[str] = None

    def __post_init__(self):
        # naive datetimes are taken as UTC
        if self.execute_at.tzinfo is None:
            object.__setattr__(self, "execute_at", self.execute_at.replace(tzinfo=timezone.utc))

    def with_execution_at(self, when: datetime) -> "Job":
        return replace(self, execute_at=when)

    def with_next_execution_at(self) -> "Job":
        # Anchored on the scheduled time, not on completion time.
        delay_ms = self.recurring_delay_ms
        if delay_ms <= 0:
            delay_ms = DEFAULT_RECURRING_DELAY_MS
        return replace(self, execute_at=self.execute_at + timedelta(milliseconds=delay_ms))

    def with_max_retries(self, max_retries: int) -> "Job":
        return replace(self, max_retries=max_retries)

    def with_recurring(self, delay_ms: int) -> "Job":
        return replace(self, recurring_delay_ms=delay_ms)

    def with_payload(self, payload: Optional[str]) -> "Job":
        return replace(self, payload=payload)

    def with_error(self, err: BaseException) -> "Job":
        return replace(self, last_error=err, error_count=self.error_count + 1)

    def should_retry(self) -> bool:
        if self.max_retries < 0:
            return True
        return self.error_count <= self.max_retries

    def is_recurring(self) -> bool:
        return self.recurring_delay_ms > 0

    @property
    def key(self) -> str:
        return f"{self.type}:{self.id}"
