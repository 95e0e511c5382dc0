#!/usr/bin/env python3
"""Command-line access to cluster logs.

Usage:
    python -m clusterlogs                       # Snapshot of every source (60 lines each)
    python -m clusterlogs -n 200                # Snapshot with 200 lines per source
    python -m clusterlogs --problems            # Only lines matching known failures
    python -m clusterlogs --follow              # Stream every source until Ctrl-C
    python -m clusterlogs --file logs.txt       # Write the snapshot to a file
    python -m clusterlogs --ssh                 # Run commands on the node over SSH
    python -m clusterlogs --show-commands       # Print the commands without running them
"""

import argparse
import contextlib
import sys
from typing import Iterator, Optional

import structlog

from .bootstrapper import Kubeadm
from .config import LogsConfig, load_config
from .log_collector import find_problems, follow, log_commands, output
from .logging_setup import configure_logging
from .remote_logs import SSHRunner
from .reporting import output_offline, output_problems
from .runner import CommandRunner, LocalRunner
from .runtime import new_runtime

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clusterlogs",
        description="Gather logs from a local Kubernetes cluster and detect known failures",
    )
    parser.add_argument("--config", help="Path to the YAML configuration file")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-f", "--follow", action="store_true", help="Stream logs from every source")
    mode.add_argument("--problems", action="store_true", help="Show only lines matching known failures")
    mode.add_argument("--show-commands", action="store_true", help="Print the log commands and exit")
    parser.add_argument("-n", "--length", type=int, help="Lines per source in the snapshot")
    parser.add_argument("--problem-lines", type=int, help="Lines per source in the problem summary")
    parser.add_argument("--file", help="Write the output to this file instead of stdout")
    parser.add_argument("--ssh", action="store_true", help="Run commands on the node over SSH (implied when an ssh section is configured)")
    parser.add_argument("--log-level", help="Logging level (default: from config)")
    return parser


@contextlib.contextmanager
def open_runner(config: LogsConfig, use_ssh: bool) -> Iterator[CommandRunner]:
    """Yield a runner for the node, connected for the duration of the block."""
    if not use_ssh:
        yield LocalRunner()
        return
    if config.ssh is None:
        raise ValueError("SSH requested but no ssh section is configured")
    with SSHRunner.from_config(config.ssh) as runner:
        yield runner


def run(args: argparse.Namespace, config: LogsConfig, sink) -> int:
    with open_runner(config, args.ssh or config.ssh is not None) as runner:
        runtime = new_runtime(config.cluster.container_runtime, runner)
        bootstrapper = Kubeadm()
        cluster = config.cluster

        if args.show_commands:
            length = args.length if args.length is not None else config.lines
            cmds = log_commands(runtime, bootstrapper, cluster, length, False)
            for name in sorted(cmds):
                print(f"{name}: {cmds[name]}", file=sink)
            return 0

        if args.follow:
            try:
                follow(runtime, bootstrapper, cluster, runner, sink)
            except KeyboardInterrupt:
                logger.info("Stopped following logs")
            return 0

        if args.problems:
            problem_lines = args.problem_lines if args.problem_lines is not None else config.problem_lines
            problems = find_problems(runtime, bootstrapper, cluster, runner)
            if not problems:
                print("✅ No known problems detected", file=sink)
                return 0
            output_problems(problems, problem_lines, sink)
            return 0

        length = args.length if args.length is not None else config.lines
        output(runtime, bootstrapper, cluster, runner, length, sink)
        output_offline(config.last_start_log, sink)
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        if args.log_level:
            config.log_level = args.log_level
        configure_logging(config.log_level)

        if args.file:
            with open(args.file, "w", encoding="utf-8") as sink:
                code = run(args, config, sink)
            print(f"✅ Logs written to: {args.file}")
            return code
        return run(args, config, sys.stdout)

    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
