"""Container runtimes: discovery of Kubernetes containers and their log commands."""

from .runtimes import (
    CRIO,
    Containerd,
    ContainerRuntime,
    Docker,
    container_status_command,
    new_runtime,
)

__all__ = [
    "ContainerRuntime",
    "Docker",
    "Containerd",
    "CRIO",
    "container_status_command",
    "new_runtime",
]
