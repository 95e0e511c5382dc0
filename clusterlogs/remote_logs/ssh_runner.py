"""SSH-based command execution on a cluster node.

Log commands are read-only. Commands that would modify containers or the
cluster are refused before they ever reach the node.
"""

import os
import shlex
from typing import Iterator, Optional

import paramiko
import structlog

from ..config import SSHConfig
from ..runner import CommandError, RunResult, read_failure_line, shell_args

logger = structlog.get_logger(__name__)

FORBIDDEN_OPERATIONS = (
    'docker exec',
    'docker run',
    'docker start',
    'docker stop',
    'docker restart',
    'docker kill',
    'docker rm',
    'crictl exec',
    'crictl rm',
    'crictl stop',
    'kubectl apply',
    'kubectl delete',
    'kubectl edit',
    'systemctl stop',
    'systemctl restart',
)


class UnsafeCommandError(CommandError):
    """A command would modify the node and was not sent."""


def check_read_only(command: str) -> None:
    """Refuse commands that would modify containers or the cluster."""
    lowered = command.lower()
    for forbidden in FORBIDDEN_OPERATIONS:
        if forbidden in lowered:
            logger.error("BLOCKED: Forbidden operation detected",
                         command=command, forbidden_op=forbidden)
            raise UnsafeCommandError(RunResult(args=shell_args(command)), "unsafe command blocked")


class SSHProcess:
    """A command running in its own SSH channel."""

    def __init__(self, channel: paramiko.Channel):
        self.channel = channel

    def lines(self) -> Iterator[bytes]:
        stream = self.channel.makefile("rb")
        try:
            for line in stream:
                yield line
        except (OSError, EOFError, paramiko.SSHException) as e:
            yield read_failure_line(e)
        finally:
            stream.close()

    def terminate(self) -> None:
        self.channel.close()

    def wait(self) -> int:
        if self.channel.closed and not self.channel.exit_status_ready():
            return -1
        return self.channel.recv_exit_status()


class SSHRunner:
    """Runs commands on a remote node through bash over SSH."""

    def __init__(self, host: str, username: str, key_path: str, port: int = 22):
        """Initialize the runner.

        Args:
            host: Node hostname/IP
            username: SSH username
            key_path: Path to the SSH private key
            port: SSH port (default: 22)
        """
        self.host = host
        self.username = username
        self.key_path = os.path.expanduser(key_path)
        self.port = port
        self.ssh_client: Optional[paramiko.SSHClient] = None

        logger.info("SSH runner initialized", host=host, username=username, port=port)

    @classmethod
    def from_config(cls, config: SSHConfig) -> "SSHRunner":
        return cls(host=config.host, username=config.username,
                   key_path=config.key_path, port=config.port)

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def connect(self) -> None:
        """Establish the SSH connection to the node."""
        try:
            self.ssh_client = paramiko.SSHClient()
            self.ssh_client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

            logger.info("Connecting to node", host=self.host)
            self.ssh_client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                key_filename=self.key_path,
                timeout=30
            )
            logger.info("Connected to node", host=self.host)

        except Exception as e:
            logger.error("Failed to connect to node", host=self.host, error=str(e))
            if self.ssh_client:
                self.ssh_client.close()
                self.ssh_client = None
            raise

    def disconnect(self) -> None:
        if self.ssh_client:
            self.ssh_client.close()
            self.ssh_client = None
            logger.info("Disconnected from node", host=self.host)

    def _open_channel(self, args: list[str]) -> paramiko.Channel:
        if not self.ssh_client:
            raise RuntimeError("Not connected to node")
        channel = self.ssh_client.get_transport().open_session()
        try:
            channel.set_combine_stderr(True)
            channel.exec_command(shlex.join(args))
        except Exception:
            channel.close()
            raise
        return channel

    def run(self, command: str) -> RunResult:
        check_read_only(command)
        result = RunResult(args=shell_args(command))
        logger.debug("Running remote command", command=command)

        try:
            channel = self._open_channel(result.args)
        except (paramiko.SSHException, OSError) as e:
            raise CommandError(result, f"failed to start: {e}") from e

        process = SSHProcess(channel)
        result.output = b"".join(process.lines())
        result.exit_code = process.wait()
        channel.close()

        if result.exit_code != 0:
            raise CommandError(result, f"exit status {result.exit_code}")
        return result

    def start(self, command: str) -> SSHProcess:
        check_read_only(command)
        args = shell_args(command)
        logger.debug("Starting remote command", command=command)
        try:
            return SSHProcess(self._open_channel(args))
        except (paramiko.SSHException, OSError) as e:
            raise CommandError(RunResult(args=args), f"failed to start: {e}") from e
