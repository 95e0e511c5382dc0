"""Configuration management for cluster log collection."""

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ClusterConfig(BaseModel):
    """Cluster settings the log commands depend on."""
    name: str = Field(default="minikube", description="Cluster profile name")
    kubernetes_version: str = Field(default="v1.28.3", description="Kubernetes version running on the node")
    container_runtime: str = Field(default="docker", description="Container runtime: docker, containerd or crio")
    addons: dict[str, bool] = Field(default_factory=dict, description="Addon name to enabled flag")


class SSHConfig(BaseModel):
    """SSH access to the cluster node."""
    host: str = Field(description="Node hostname/IP")
    username: str = Field(default="docker", description="SSH username")
    key_path: str = Field(description="Path to the SSH private key")
    port: int = Field(default=22, description="SSH port")


class LogsConfig(BaseModel):
    """Main configuration for log collection."""

    log_level: str = Field(default="INFO", description="Logging level")

    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    ssh: Optional[SSHConfig] = Field(default=None, description="Run commands over SSH instead of locally")

    # Output settings
    lines: int = Field(default=60, description="Lines to show per source in snapshot output")
    problem_lines: int = Field(default=10, description="Lines to show per source in the problem summary")
    last_start_log: str = Field(
        default="~/.minikube/logs/lastStart.txt",
        description="Log file written by the last cluster start",
    )


def load_config(config_path: Optional[str] = None) -> LogsConfig:
    """Load configuration from file or environment variables."""
    if config_path is None:
        config_path = os.getenv("CLUSTERLOGS_CONFIG", "config/clusterlogs.yaml")

    config_data = {}

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

    if os.getenv("LOG_LEVEL"):
        config_data["log_level"] = os.getenv("LOG_LEVEL")
    if os.getenv("CLUSTERLOGS_LAST_START_LOG"):
        config_data["last_start_log"] = os.getenv("CLUSTERLOGS_LAST_START_LOG")
    if os.getenv("CLUSTERLOGS_RUNTIME"):
        cluster = dict(config_data.get("cluster") or {})
        cluster["container_runtime"] = os.getenv("CLUSTERLOGS_RUNTIME")
        config_data["cluster"] = cluster

    ssh_overrides = {
        "host": os.getenv("CLUSTERLOGS_SSH_HOST"),
        "username": os.getenv("CLUSTERLOGS_SSH_USER"),
        "key_path": os.getenv("CLUSTERLOGS_SSH_KEY"),
    }
    ssh_overrides = {key: value for key, value in ssh_overrides.items() if value is not None}
    if ssh_overrides:
        ssh = dict(config_data.get("ssh") or {})
        ssh.update(ssh_overrides)
        config_data["ssh"] = ssh

    return LogsConfig(**config_data)
