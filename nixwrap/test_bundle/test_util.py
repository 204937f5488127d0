"""Tests for CommandRunner and small helpers."""

import logging
import sys

import pytest

from nixwrap.errors import ProcessFailure
from nixwrap.util import CommandRunner, output_lines, sh_join


@pytest.fixture
def runner(logger):
    return CommandRunner(logger=logger)


def test_run_captures_output(runner, procs):
    procs.respond(0, "one\ntwo  \n", "")
    res = runner.run(["nix-env", "--query", "--installed"], check=True)
    assert res.returncode == 0
    assert res.args == ["nix-env", "--query", "--installed"]
    assert res.lines == ["one", "two"]


def test_unchecked_failure_returns_result(runner, procs):
    procs.respond(3, "", "bad")
    res = runner.run(["nix-env", "--install", "x"])
    assert res.returncode == 3
    assert res.stderr == "bad"


def test_checked_failure_raises_process_failure(runner, procs):
    procs.respond(2, "", "error: oops\n")
    with pytest.raises(ProcessFailure) as excinfo:
        runner.run(["nix-channel", "--update"], check=True)
    assert excinfo.value.returncode == 2
    assert excinfo.value.stderr == "error: oops\n"
    assert excinfo.value.argv == ["nix-channel", "--update"]


def test_checked_launch_failure(runner, procs):
    procs.fail_to_launch()
    with pytest.raises(ProcessFailure) as excinfo:
        runner.run(["nix-env", "--install", "x"], check=True)
    assert excinfo.value.returncode is None
    assert "Could not launch nix-env" in str(excinfo.value)


def test_unchecked_launch_failure_propagates_oserror(runner, procs):
    procs.fail_to_launch()
    with pytest.raises(FileNotFoundError):
        runner.run(["nix-env"])


def test_run_logs_argv_at_debug(runner, procs, caplog):
    with caplog.at_level(logging.DEBUG, logger="test.nixwrap"):
        runner.run(["nix-env", "--install", "hello world"])
    assert "RUN nix-env --install 'hello world'" in caplog.text


def test_sh_join_quotes():
    assert sh_join(["a", "b c"]) == "a 'b c'"


def test_output_lines():
    assert output_lines("x \ny\t\n") == ["x", "y"]
    assert output_lines("") == []
    assert output_lines("a\r\nb\r\n") == ["a", "b"]
    assert output_lines("no newline at end") == ["no newline at end"]
    assert output_lines("\n") == [""]


def test_output_lines_only_breaks_on_newline():
    assert output_lines("x\x0cy z\n\x1cw\n") == ["x\x0cy z", "\x1cw"]


def test_run_decodes_utf8_with_replacement(runner, procs):
    runner.run(["nix-env", "--query", "--installed"], check=True)
    kwargs = procs.kwargs[-1]
    assert kwargs["encoding"] == "utf-8"
    assert kwargs["errors"] == "replace"


def test_run_real_process_with_invalid_utf8(runner):
    script = "import sys; sys.stdout.buffer.write(b'hello-\\xff\\xfe\\n')"
    res = runner.run([sys.executable, "-c", script], check=True)
    assert res.lines == ["hello-��"]
