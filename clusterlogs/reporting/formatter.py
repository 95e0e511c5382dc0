"""Rendering of detected problems and offline log sections."""

import os
from typing import Optional, TextIO

import structlog

from .console import console

logger = structlog.get_logger(__name__)


def section_header(name: str) -> str:
    return f"==> {name} <=="


def last_lines(lines: list[str], max_lines: int) -> list[str]:
    """Keep the most recent max_lines lines, oldest dropped first."""
    if max_lines <= 0:
        return []
    return lines[-max_lines:]


def output_problems(
    problems: dict[str, list[str]],
    max_lines: int,
    log_output: Optional[TextIO] = None
) -> None:
    """Output discovered problems, one failure-styled section per source.

    Args:
        problems: Source name to matched lines, in capture order
        max_lines: Most recent lines to show per source
        log_output: Sink for the report (default: stderr)
    """
    with console.redirected(err=log_output):
        for name in sorted(problems):
            console.failure(f"Problems detected in {name}:")
            for line in last_lines(problems[name], max_lines):
                console.log_entry(line)


def output_last_start(path: str) -> None:
    """Output the log written by the last cluster start.

    A missing file is reported in the section, not raised.
    """
    console.styled("")
    console.styled(section_header("Last Start"))
    path = os.path.expanduser(path)
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            content = f.read()
    except FileNotFoundError:
        console.styled(f"Last start log file not found at {path}")
        return
    console.styled(content)


def output_offline(last_start_log: str, log_output: Optional[TextIO] = None) -> None:
    """Output logs that don't need a running cluster."""
    with console.redirected(out=log_output, err=log_output):
        try:
            output_last_start(last_start_log)
        except OSError as e:
            logger.error("Failed to output last start logs", path=last_start_log, error=str(e))
        console.styled("")
