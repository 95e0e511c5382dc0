from __future__ import annotations

import pytest

from clusterlogs.runner import CommandError, LocalRunner, shell_args


def test_shell_args_wraps_in_bash() -> None:
    assert shell_args("echo hi") == ["/bin/bash", "-c", "echo hi"]


def test_run_captures_stdout_and_stderr_interleaved() -> None:
    result = LocalRunner().run("echo out; echo err 1>&2; echo out2")

    assert result.exit_code == 0
    assert result.text().splitlines() == ["out", "err", "out2"]
    assert result.command() == "/bin/bash -c echo out; echo err 1>&2; echo out2"


def test_run_nonzero_exit_raises_with_partial_output() -> None:
    with pytest.raises(CommandError) as excinfo:
        LocalRunner().run("echo partial; exit 3")

    assert excinfo.value.result.exit_code == 3
    assert excinfo.value.result.text() == "partial\n"
    assert excinfo.value.reason == "exit status 3"


def test_run_replaces_undecodable_bytes() -> None:
    result = LocalRunner().run(r"printf 'ok\xff\n'")
    assert result.text() == "ok�\n"


def test_start_streams_lines_in_order() -> None:
    proc = LocalRunner().start("printf 'one\\ntwo\\nthree\\n'")

    assert list(proc.lines()) == [b"one\n", b"two\n", b"three\n"]
    proc.wait()


def test_terminate_stops_the_whole_process_group() -> None:
    proc = LocalRunner().start("sleep 30 & sleep 30; wait")
    proc.terminate()
    assert proc.wait() != 0


def test_lines_turns_read_error_into_a_line() -> None:
    proc = LocalRunner().start("echo hi")
    proc.proc.stdout.close()

    lines = list(proc.lines())

    assert len(lines) == 1
    assert lines[0].startswith(b"failed to read output: ")
    proc.wait()
