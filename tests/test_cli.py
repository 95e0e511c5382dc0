from __future__ import annotations

from pathlib import Path

import pytest

import clusterlogs.cli as cli
from clusterlogs.runner import RunResult, shell_args


class FakeRuntime:
    def name(self) -> str:
        return "Docker"

    def list_containers(self, name: str) -> list[str]:
        return ["abc123"] if name == "etcd" else []

    def container_log_cmd(self, container_id: str, length: int, follow: bool) -> str:
        return f"docker logs --tail {length} {container_id}"

    def system_log_cmd(self, length: int) -> str:
        return f"sudo journalctl -u docker -n {length}"


class CannedRunner:
    def __init__(self, output: str):
        self.output = output

    def run(self, command: str) -> RunResult:
        return RunResult(args=shell_args(command), output=self.output.encode(), exit_code=0)

    def start(self, command: str):
        raise NotImplementedError


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    monkeypatch.setattr(cli, "new_runtime", lambda name, runner: FakeRuntime())
    for name in ("CLUSTERLOGS_SSH_HOST", "CLUSTERLOGS_SSH_USER", "CLUSTERLOGS_SSH_KEY"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "clusterlogs.yaml"
    path.write_text(f"last_start_log: {tmp_path / 'lastStart.txt'}\n")
    return path


def test_show_commands(config_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "commands.txt"

    code = cli.main(["--config", str(config_file), "--show-commands", "-n", "30", "--file", str(out)])

    assert code == 0
    lines = out.read_text().splitlines()
    assert "etcd [abc123]: docker logs --tail 30 abc123" in lines
    assert "Docker: sudo journalctl -u docker -n 30" in lines
    assert "kubelet: sudo journalctl -u kubelet -n 30" in lines
    assert lines == sorted(lines)


def test_problems_mode(config_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "LocalRunner", lambda: CannedRunner("fine\nFailed to admit pod x\n"))
    out = tmp_path / "problems.txt"

    code = cli.main(["--config", str(config_file), "--problems", "--problem-lines", "1", "--file", str(out)])

    assert code == 0
    text = out.read_text()
    assert "Problems detected in etcd [abc123]:" in text
    assert "    Failed to admit pod x" in text


def test_problems_mode_nothing_found(config_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "LocalRunner", lambda: CannedRunner("all quiet\n"))
    out = tmp_path / "problems.txt"

    assert cli.main(["--config", str(config_file), "--problems", "--file", str(out)]) == 0
    assert "No known problems detected" in out.read_text()


def test_snapshot_includes_offline_section(config_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "LocalRunner", lambda: CannedRunner("hello\n"))
    out = tmp_path / "logs.txt"

    assert cli.main(["--config", str(config_file), "--file", str(out)]) == 0

    text = out.read_text()
    assert "==> etcd [abc123] <==" in text
    assert "==> kernel <==" in text
    assert "==> Last Start <==" in text
    assert "Last start log file not found" in text


def test_ssh_without_config_fails(config_file: Path) -> None:
    assert cli.main(["--config", str(config_file), "--ssh", "--show-commands"]) == 1
