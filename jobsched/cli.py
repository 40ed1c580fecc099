import signal
import threading
from datetime import timedelta

import click

from .config import COMMAND_TIMEOUT_SECONDS
from .handlers import CommandHandler
from .memory import InMemoryStorage
from .models import Job
from .scheduler import Scheduler
from .utils import parse_delay_to_seconds, utc_now


class ClickLogger:
    """Logger collaborator that writes straight to the terminal."""

    def info(self, message: str) -> None:
        click.secho(message, fg="green")

    def error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)


def setup_signal_handlers(stop: threading.Event):
    def _handler(signum, frame):
        click.secho(f"\nReceived signal {signum}. Stopping scheduler", fg="yellow")
        stop.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[sig] = signal.signal(sig, _handler)
        except ValueError:
            # not on the main thread
            pass
    return previous


def _seconds(value):
    return parse_delay_to_seconds(value) if value else None


@click.group(help="jobsched: in-process job scheduler")
def cli():
    pass


@cli.command("run", help="Schedule shell commands and run them until stopped")
@click.option("--cmd", "commands", multiple=True, required=True, help="Command to execute (repeatable)")
@click.option("--max-retries", default=-1, type=int, show_default=True,
              help="Retries per job after a failure; negative = unlimited")
@click.option("--delay", "delay_str", default=None, help="Start after a delay, e.g. 20s, 5m, 1h30m")
@click.option("--every", "every_str", default=None, help="Repeat every interval, e.g. 30s, 5m")
@click.option("--timeout", default=COMMAND_TIMEOUT_SECONDS, type=int, show_default=True,
              help="Per-command timeout in seconds")
@click.option("--duration", "duration_str", default=None,
              help="Stop after this long, e.g. 1m (default: run until Ctrl+C)")
def run_cmd(commands, max_retries, delay_str, every_str, timeout, duration_str):
    try:
        delay = _seconds(delay_str)
        every = _seconds(every_str)
        duration = _seconds(duration_str)
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red")
        raise SystemExit(1)

    storage = InMemoryStorage()
    scheduler = (
        Scheduler(storage, logger=ClickLogger())
        .with_handler("command", CommandHandler(timeout=timeout, echo=click.echo))
    )

    start_at = utc_now()
    for i, command in enumerate(commands, start=1):
        job = Job(f"cmd-{i}", "command", payload=command).with_max_retries(max_retries)
        if delay:
            job = job.with_execution_at(start_at + timedelta(seconds=delay))
        if every:
            job = job.with_recurring(every * 1000)
        scheduler.enqueue(job)

    stop = threading.Event()
    previous = setup_signal_handlers(stop)
    scheduler.start()
    try:
        stop.wait(duration)
    finally:
        scheduler.stop()
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)
    click.secho(f"{len(storage)} job(s) left unfinished.", fg="yellow")


def main():
    cli()
