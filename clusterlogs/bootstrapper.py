"""Log commands owned by the cluster bootstrapper (kubeadm)."""

import posixpath
from dataclasses import dataclass

from .config import ClusterConfig

GUEST_PERSISTENT_DIR = "/var/lib/minikube"


@dataclass(frozen=True)
class LogOptions:
    lines: int = 0
    follow: bool = False


def kubectl_path(cfg: ClusterConfig) -> str:
    return posixpath.join(GUEST_PERSISTENT_DIR, "binaries", cfg.kubernetes_version, "kubectl")


class Kubeadm:
    """Bootstrapper for kubeadm-provisioned nodes."""

    def log_commands(self, cfg: ClusterConfig, options: LogOptions) -> dict[str, str]:
        kubelet = "sudo journalctl -u kubelet"
        if options.lines > 0:
            kubelet += f" -n {options.lines}"
        if options.follow:
            kubelet += " -f"

        dmesg = "sudo dmesg -PH -L=never --level warn,err,crit,alert,emerg"
        if options.follow:
            dmesg += " --follow"
        if options.lines > 0:
            dmesg += f" | tail -n {options.lines}"

        kubeconfig = posixpath.join(GUEST_PERSISTENT_DIR, "kubeconfig")
        describe_nodes = f"sudo {kubectl_path(cfg)} describe nodes --kubeconfig={kubeconfig}"

        return {
            "kubelet": kubelet,
            "dmesg": dmesg,
            "describe nodes": describe_nodes,
        }
