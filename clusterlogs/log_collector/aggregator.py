"""Gathering logs from every source: followed, snapshotted, or scanned for problems."""

import queue
import threading
from typing import Optional, TextIO

import structlog

from ..config import ClusterConfig
from ..reporting.console import console
from ..reporting.formatter import section_header
from ..runner import CommandError, CommandRunner, RunningCommand
from ..runtime import ContainerRuntime
from .commands import Bootstrapper, log_commands
from .problems import DEFAULT_RULES, RuleSet, find_problem_lines

logger = structlog.get_logger(__name__)

# How far back to look in a log for problems. Large enough to include usage
# messages from a failed binary, small enough to skip irrelevant problems.
LOOK_BACKWARDS_COUNT = 400

KERNEL_INFO_CMD = "uptime && uname -a && grep PRETTY /etc/os-release"


class FollowError(RuntimeError):
    """Following logs could not be started."""


_SOURCE_DONE = object()


class FollowGroup:
    """Runs every source concurrently and merges their lines into one sink.

    Each source gets a reader thread feeding a shared queue; the calling
    thread is the only writer to the sink. Setting ``cancel`` terminates
    every source together.
    """

    def __init__(
        self,
        runner: CommandRunner,
        commands: dict[str, str],
        sink: TextIO,
        cancel: Optional[threading.Event] = None,
        poll_interval: float = 0.1
    ):
        self.runner = runner
        self.commands = commands
        self.sink = sink
        self.cancel = cancel or threading.Event()
        self.poll_interval = poll_interval
        self._lines: queue.Queue = queue.Queue()
        self._stopping = threading.Event()

    def _pump(self, name: str, proc: RunningCommand) -> None:
        try:
            for line in proc.lines():
                if self._stopping.is_set():
                    break
                self._lines.put(line)
            code = proc.wait()
            if code != 0 and not self._stopping.is_set():
                logger.warning("Log source exited", source=name, exit_code=code)
        finally:
            self._lines.put(_SOURCE_DONE)

    def _write(self, line: bytes) -> None:
        text = line.decode("utf-8", errors="replace")
        if not text.endswith("\n"):
            text += "\n"
        self.sink.write(text)
        self.sink.flush()

    def run(self) -> None:
        """Stream until every source exits or the group is cancelled."""
        procs: dict[str, RunningCommand] = {}
        threads: list[threading.Thread] = []
        try:
            for name in sorted(self.commands):
                try:
                    procs[name] = self.runner.start(self.commands[name])
                except CommandError as e:
                    logger.error("Failed to start log source", source=name, error=str(e))
                    raise FollowError(f"log follow: {name}: {e}") from e

            for name, proc in procs.items():
                thread = threading.Thread(target=self._pump, args=(name, proc), daemon=True)
                thread.start()
                threads.append(thread)

            logger.info("Following logs", sources=len(procs))
            remaining = len(threads)
            while remaining and not self.cancel.is_set():
                try:
                    item = self._lines.get(timeout=self.poll_interval)
                except queue.Empty:
                    continue
                if item is _SOURCE_DONE:
                    remaining -= 1
                else:
                    self._write(item)
        finally:
            self._stopping.set()
            for proc in procs.values():
                proc.terminate()
            for thread in threads:
                thread.join(timeout=1)
            if not threads:
                for proc in procs.values():
                    proc.wait()


def follow(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    runner: CommandRunner,
    log_output: TextIO,
    cancel: Optional[threading.Event] = None
) -> None:
    """Follow logs from every source in tail(1) format until cancelled."""
    cmds = log_commands(runtime, bootstrapper, cfg, 0, True)
    FollowGroup(runner, cmds, log_output, cancel=cancel).run()


def find_problems(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    runner: CommandRunner,
    rules: RuleSet = DEFAULT_RULES
) -> dict[str, list[str]]:
    """Find possible root causes among the logs.

    Returns:
        Dictionary mapping source names to matched lines; sources without
        matches are left out
    """
    problems: dict[str, list[str]] = {}
    cmds = log_commands(runtime, bootstrapper, cfg, LOOK_BACKWARDS_COUNT, False)
    for name in sorted(cmds):
        logger.info("Gathering logs", source=name)
        try:
            result = runner.run(cmds[name])
        except CommandError as e:
            logger.warning("Failed gathering logs", source=name,
                           command=e.result.command(), error=e.reason, output=e.result.text())
            continue

        lines = find_problem_lines(result.text(), rules)
        for line in lines:
            logger.warning("Found problem", source=name, line=line)
        if lines:
            problems[name] = lines
    return problems


def output(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    runner: CommandRunner,
    lines: int,
    log_output: Optional[TextIO] = None
) -> None:
    """Display logs from multiple sources in tail(1) format."""
    cmds = log_commands(runtime, bootstrapper, cfg, lines, False)
    cmds["kernel"] = KERNEL_INFO_CMD

    with console.redirected(out=log_output, err=log_output):
        for i, name in enumerate(sorted(cmds)):
            if i > 0:
                console.styled("")
            console.styled(section_header(name))
            try:
                result = runner.run(cmds[name])
            except CommandError as e:
                console.styled(f"command {e.result.command()} failed with error: {e.reason}")
                continue
            console.styled(result.text())
