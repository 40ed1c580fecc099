import shlex
import subprocess
import sys

from .config import COMMAND_TIMEOUT_SECONDS
from .models import Job


class CommandFailed(RuntimeError):
    def __init__(self, command: str, returncode: int, detail: str = ""):
        msg = f"command {command!r} exited with code {returncode}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.command = command
        self.returncode = returncode


class CommandHandler:
    """Runs ``job.payload`` as a shell command. Any non-zero exit raises CommandFailed."""

    def __init__(self, timeout: int = COMMAND_TIMEOUT_SECONDS, echo=print):
        self.timeout = timeout
        self.echo = echo

    def __call__(self, job: Job) -> None:
        cmd = job.payload
        if not cmd or not cmd.strip():
            raise ValueError(f"job {job.id} has no command to run")

        args = shlex.split(cmd, posix=not sys.platform.startswith("win"))
        try:
            result = subprocess.run(args, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            raise CommandFailed(cmd, 124, f"timed out after {self.timeout}s")  # common exit code for timeout
        except FileNotFoundError:
            raise CommandFailed(cmd, 127, "command not found")

        if result.stdout:
            self.echo(result.stdout.strip())
        if result.stderr:
            self.echo(result.stderr.strip())
        if result.returncode != 0:
            raise CommandFailed(cmd, result.returncode)
