import logging
import threading
from typing import Callable, Dict, Optional

from .config import POLL_INTERVAL_SECONDS
from .errors import ConfigurationError, DispatchError, HandlerError, SchedulerError, StorageError
from .models import Job
from .storage import Storage
from .utils import to_iso

Handler = Callable[[Job], None]
ExceptionHandler = Callable[[Optional[Job], BaseException], None]


def _describe(err: BaseException) -> str:
    name = type(err).__name__
    return f"{name}: {err}" if str(err) else name


def _storage_error(err: Exception) -> StorageError:
    if isinstance(err, StorageError):
        return err
    wrapped = StorageError(str(err) or type(err).__name__)
    wrapped.__cause__ = err
    return wrapped


class Scheduler:
    """
    Runs one worker thread that claims due jobs from ``storage`` and hands
    each one to the handler registered for its type, one at a time.

    ``logger`` only needs ``info(msg)`` and ``error(msg)``; it is used as
    given and never configured here.
    """

    def __init__(self, storage: Storage, logger=None, poll_interval: float = POLL_INTERVAL_SECONDS):
        self.storage = storage
        self.logger = logger if logger is not None else logging.getLogger("jobsched")
        self.poll_interval = poll_interval
        self._handlers: Dict[str, Handler] = {}
        self._exception_handler: Optional[ExceptionHandler] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lifecycle = threading.Lock()

    # ---------- Setup ----------
    def with_handler(self, job_type: str, handler: Handler) -> "Scheduler":
        if self.running:
            raise ConfigurationError("handlers must be registered before start()")
        if job_type in self._handlers:
            raise ConfigurationError(f"Job type {job_type} already has a handler")
        self._handlers[job_type] = handler
        return self

    def with_exception_handler(self, handler: Optional[ExceptionHandler]) -> "Scheduler":
        self._exception_handler = handler
        return self

    @property
    def has_exception_handler(self) -> bool:
        return self._exception_handler is not None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ---------- Public API ----------
    def enqueue(self, job: Job) -> None:
        try:
            self.storage.enqueue(job)
        except Exception as e:
            raise _storage_error(e) from e
        self.logger.info(f"enqueued job {job.id} of type {job.type}, execute at {to_iso(job.execute_at)}")

    def start(self) -> None:
        with self._lifecycle:
            if self.running:
                raise ConfigurationError("scheduler is already running")
            self._stop.clear()
            self._thread = threading.Thread(target=self._worker, name="jobsched-worker", daemon=True)
            self._thread.start()
        self.logger.info("scheduler started")

    def stop(self) -> None:
        """Ask the worker to stop and wait for it. A running handler is not interrupted."""
        with self._lifecycle:
            thread = self._thread
            if thread is None:
                return
            self._stop.set()
            thread.join()
            self._thread = None
        self.logger.info("scheduler stopped")

    # ---------- Worker loop ----------
    def _worker(self) -> None:
        while not self._stop.is_set():
            try:
                job = self.storage.dequeue()
            except Exception as e:
                self._handle_exception(None, _storage_error(e))
                self._stop.wait(self.poll_interval)
                continue

            if job is None:
                if self._stop.is_set():
                    break
                self._stop.wait(self.poll_interval)
                continue

            try:
                self._process_job(job)
            except SchedulerError as err:
                self._handle_exception(job, err)
                self._finish(job, self._handle_failure, err)
            else:
                self._finish(job, self._handle_success)

    def _process_job(self, job: Job) -> None:
        handler = self._handlers.get(job.type)
        if handler is None:
            raise DispatchError(job.type)
        try:
            handler(job)
        except (Exception, SystemExit) as e:
            # a handler calling sys.exit() must not take the worker down
            raise HandlerError(_describe(e), original=e) from e

    def _finish(self, job: Job, step, *args) -> None:
        try:
            step(job, *args)
        except Exception as e:
            self._handle_exception(job, _storage_error(e))

    def _handle_success(self, job: Job) -> None:
        if job.is_recurring():
            next_job = job.with_next_execution_at()
            self.storage.enqueue(next_job)
            self.storage.release_job(job.id)
            self.logger.info(
                f"processed recurring job '{job.key}', next execution at {to_iso(next_job.execute_at)}"
            )
            return

        self.storage.delete(job.id)
        self.logger.info(f"processed job '{job.key}'")

    def _handle_failure(self, job: Job, err: SchedulerError) -> None:
        failed = job.with_error(err)
        if failed.should_retry():
            self.storage.enqueue(failed)
            self.storage.release_job(job.id)
            self.logger.error(f"re-queued job '{job.key}': {err}")
            return

        self.storage.delete(job.id)
        self.logger.error(f"deleted job '{job.key}': {err}")

    def _handle_exception(self, job: Optional[Job], err: BaseException) -> None:
        if job is not None:
            self.logger.error(f"failed to process job '{job.key}': {err}")
        else:
            self.logger.error(f"an exception occurred: {err}")
        if self._exception_handler is None:
            return
        try:
            self._exception_handler(job, err)
        except Exception as e:
            self.logger.error(f"exception handler failed: {e}")
