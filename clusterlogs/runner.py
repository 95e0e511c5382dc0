"""Shell command execution on the local machine."""

import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Iterator, Protocol

import structlog

logger = structlog.get_logger(__name__)

SHELL = "/bin/bash"


def shell_args(command: str) -> list[str]:
    """Wrap a command string so it runs through bash."""
    return [SHELL, "-c", command]


@dataclass
class RunResult:
    """Outcome of one executed command, stdout and stderr interleaved."""

    args: list[str]
    output: bytes = b""
    exit_code: int = -1

    def command(self) -> str:
        return " ".join(self.args)

    def text(self) -> str:
        return self.output.decode("utf-8", errors="replace")


class CommandError(RuntimeError):
    """A command could not be started or exited non-zero."""

    def __init__(self, result: RunResult, reason: str):
        super().__init__(f"{result.command()}: {reason}")
        self.result = result
        self.reason = reason


class RunningCommand(Protocol):
    """A started command whose combined output is read line by line."""

    def lines(self) -> Iterator[bytes]: ...

    def terminate(self) -> None: ...

    def wait(self) -> int: ...


class CommandRunner(Protocol):
    """Executes shell commands somewhere: locally, or on a node over SSH."""

    def run(self, command: str) -> RunResult: ...

    def start(self, command: str) -> RunningCommand: ...


def read_failure_line(error: Exception) -> bytes:
    return f"failed to read output: {error}\n".encode("utf-8")


class LocalProcess:
    """A bash process started in its own session so it can be killed as a group."""

    def __init__(self, args: list[str]):
        self.args = args
        self.proc = subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )

    def lines(self) -> Iterator[bytes]:
        try:
            for line in self.proc.stdout:
                yield line
        except (OSError, ValueError) as e:
            yield read_failure_line(e)

    def terminate(self) -> None:
        # The group outlives bash when it backgrounded children.
        try:
            os.killpg(self.proc.pid, signal.SIGTERM)
        except ProcessLookupError:
            pass

    def wait(self) -> int:
        code = self.proc.wait()
        self.proc.stdout.close()
        return code


class LocalRunner:
    """Runs commands on this machine through bash."""

    def run(self, command: str) -> RunResult:
        result = RunResult(args=shell_args(command))
        logger.debug("Running command", command=command)
        try:
            completed = subprocess.run(
                result.args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            raise CommandError(result, f"failed to start: {e}") from e

        result.output = completed.stdout or b""
        result.exit_code = completed.returncode
        if result.exit_code != 0:
            raise CommandError(result, f"exit status {result.exit_code}")
        return result

    def start(self, command: str) -> LocalProcess:
        args = shell_args(command)
        logger.debug("Starting command", command=command)
        try:
            return LocalProcess(args)
        except OSError as e:
            raise CommandError(RunResult(args=args), f"failed to start: {e}") from e
