"""Catalog of commands that produce the logs worth looking at."""

from typing import Protocol

import structlog

from ..bootstrapper import LogOptions
from ..config import ClusterConfig
from ..runtime import ContainerRuntime, container_status_command

logger = structlog.get_logger(__name__)

# Pods to retrieve logs for, in addition to the bootstrapper logs.
IMPORTANT_PODS = (
    "kube-apiserver",
    "etcd",
    "coredns",
    "kube-scheduler",
    "kube-proxy",
    "kube-controller-manager",
    "kindnet",
)

# Not every addon: only the ones whose pods users most often report issues with.
ADDON_PODS = {
    "dashboard": "kubernetes-dashboard",
    "gcp-auth": "gcp-auth",
    "ingress": "controller_ingress",
    "storage-provisioner": "storage-provisioner",
}


class Bootstrapper(Protocol):
    def log_commands(self, cfg: ClusterConfig, options: LogOptions) -> dict[str, str]: ...


def enabled_addon_pods(cfg: ClusterConfig) -> list[str]:
    """Return the pod names for enabled addons."""
    return [pod for addon, pod in ADDON_PODS.items() if cfg.addons.get(addon, False)]


def log_commands(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    length: int,
    follow: bool
) -> dict[str, str]:
    """Return the commands that would be run to receive the anticipated logs.

    Args:
        runtime: Container runtime used to discover pod containers
        bootstrapper: Supplies the kubelet/kernel/node commands
        cfg: Cluster configuration (enabled addons select extra pods)
        length: Lines per source, 0 for everything
        follow: Whether the commands should keep streaming

    Returns:
        Dictionary mapping source names to shell commands
    """
    cmds = dict(bootstrapper.log_commands(cfg, LogOptions(lines=length, follow=follow)))

    pods = list(IMPORTANT_PODS) + enabled_addon_pods(cfg)
    for pod in pods:
        try:
            ids = runtime.list_containers(pod)
        except Exception as e:
            logger.error("Failed to list containers", pod=pod, error=str(e))
            continue

        logger.info("Found containers", pod=pod, count=len(ids), ids=ids)
        if not ids:
            logger.warning("No container was found matching pod", pod=pod)
            continue

        for container_id in ids:
            cmds[f"{pod} [{container_id}]"] = runtime.container_log_cmd(container_id, length, follow)

    cmds[runtime.name()] = runtime.system_log_cmd(length)
    cmds["container status"] = container_status_command()

    return cmds
