from __future__ import annotations

from pathlib import Path

import pytest

from clusterlogs.config import LogsConfig, load_config

ENV_VARS = (
    "LOG_LEVEL",
    "CLUSTERLOGS_CONFIG",
    "CLUSTERLOGS_RUNTIME",
    "CLUSTERLOGS_SSH_HOST",
    "CLUSTERLOGS_SSH_USER",
    "CLUSTERLOGS_SSH_KEY",
    "CLUSTERLOGS_LAST_START_LOG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(str(tmp_path / "missing.yaml"))

    assert config == LogsConfig()
    assert config.cluster.container_runtime == "docker"
    assert config.cluster.addons == {}
    assert config.ssh is None
    assert config.lines == 60


def test_load_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "clusterlogs.yaml"
    path.write_text(
        "cluster:\n"
        "  container_runtime: containerd\n"
        "  addons:\n"
        "    ingress: true\n"
        "ssh:\n"
        "  host: 192.168.49.2\n"
        "  key_path: /keys/id_rsa\n"
        "problem_lines: 25\n"
    )

    config = load_config(str(path))

    assert config.cluster.container_runtime == "containerd"
    assert config.cluster.addons == {"ingress": True}
    assert config.ssh is not None
    assert config.ssh.host == "192.168.49.2"
    assert config.ssh.username == "docker"
    assert config.ssh.port == 22
    assert config.problem_lines == 25


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "clusterlogs.yaml"
    path.write_text("cluster:\n  name: dev\n  container_runtime: docker\n")
    monkeypatch.setenv("CLUSTERLOGS_CONFIG", str(path))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CLUSTERLOGS_RUNTIME", "crio")
    monkeypatch.setenv("CLUSTERLOGS_SSH_HOST", "node-1")
    monkeypatch.setenv("CLUSTERLOGS_SSH_KEY", "~/.ssh/id_ed25519")
    monkeypatch.setenv("CLUSTERLOGS_LAST_START_LOG", "/tmp/last.txt")

    config = load_config()

    assert config.log_level == "DEBUG"
    assert config.cluster.name == "dev"
    assert config.cluster.container_runtime == "crio"
    assert config.ssh is not None
    assert config.ssh.host == "node-1"
    assert config.ssh.key_path == "~/.ssh/id_ed25519"
    assert config.last_start_log == "/tmp/last.txt"


def test_empty_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == LogsConfig()
