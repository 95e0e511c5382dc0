"""Runtime-specific commands for listing containers and reading their logs."""

from typing import Protocol

import structlog

from ..runner import CommandRunner

logger = structlog.get_logger(__name__)

CRICTL = "sudo `which crictl || echo crictl`"


class ContainerRuntime(Protocol):
    def name(self) -> str: ...

    def list_containers(self, name: str) -> list[str]: ...

    def container_log_cmd(self, container_id: str, length: int, follow: bool) -> str: ...

    def system_log_cmd(self, length: int) -> str: ...


def container_status_command() -> str:
    """Command that shows container status under any runtime."""
    return f"{CRICTL} ps -a || sudo docker ps -a"


def journalctl_cmd(units: list[str], length: int) -> str:
    parts = ["sudo journalctl"]
    parts.extend(f"-u {unit}" for unit in units)
    if length > 0:
        parts.append(f"-n {length}")
    return " ".join(parts)


def _ids(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class Docker:
    """Docker Engine, with Kubernetes containers named k8s_<container>_..."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def name(self) -> str:
        return "Docker"

    def list_containers(self, name: str) -> list[str]:
        result = self.runner.run(f"docker ps -a --filter=name=k8s_{name} --format={{{{.ID}}}}")
        return _ids(result.text())

    def container_log_cmd(self, container_id: str, length: int, follow: bool) -> str:
        cmd = ["docker logs"]
        if length > 0:
            cmd.append(f"--tail {length}")
        if follow:
            cmd.append("--follow")
        cmd.append(container_id)
        return " ".join(cmd)

    def system_log_cmd(self, length: int) -> str:
        return journalctl_cmd(["docker", "cri-docker"], length)


class Containerd:
    """containerd, inspected through crictl."""

    unit = "containerd"

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def name(self) -> str:
        return "containerd"

    def list_containers(self, name: str) -> list[str]:
        result = self.runner.run(f"sudo crictl ps -a --quiet --name={name}")
        return _ids(result.text())

    def container_log_cmd(self, container_id: str, length: int, follow: bool) -> str:
        cmd = [f"{CRICTL} logs"]
        if length > 0:
            cmd.append(f"--tail {length}")
        if follow:
            cmd.append("--follow")
        cmd.append(container_id)
        return " ".join(cmd)

    def system_log_cmd(self, length: int) -> str:
        return journalctl_cmd([self.unit], length)


class CRIO(Containerd):
    """CRI-O shares crictl with containerd; only the name and unit differ."""

    unit = "crio"

    def name(self) -> str:
        return "CRI-O"


RUNTIMES = {
    "docker": Docker,
    "containerd": Containerd,
    "crio": CRIO,
    "cri-o": CRIO,
}


def new_runtime(name: str, runner: CommandRunner) -> ContainerRuntime:
    """Return the runtime implementation for a configured runtime name."""
    try:
        runtime_cls = RUNTIMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown container runtime: {name}") from None
    logger.debug("Selected container runtime", runtime=name)
    return runtime_cls(runner)
