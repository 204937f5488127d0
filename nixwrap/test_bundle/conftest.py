"""Shared fixtures: a scripted stand-in for ``subprocess.run``."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field

import pytest

import nixwrap.util


@dataclass
class FakeProcesses:
    """Records every argv and answers with queued results.

    Queue entries are either ``(returncode, stdout, stderr)`` tuples or an
    exception instance to raise (e.g. ``FileNotFoundError``).  When the
    queue is empty, commands succeed with empty output.
    """

    calls: list[list[str]] = field(default_factory=list)
    queue: list = field(default_factory=list)

    kwargs: list[dict] = field(default_factory=list)

    def respond(self, returncode: int = 0, stdout: str | bytes = "", stderr: str | bytes = "") -> None:
        self.queue.append((returncode, stdout, stderr))

    def fail_to_launch(self, exc: OSError | None = None) -> None:
        self.queue.append(exc or FileNotFoundError(2, "No such file or directory"))

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        self.kwargs.append(kwargs)
        if not self.queue:
            return subprocess.CompletedProcess(argv, 0, "", "")
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        returncode, stdout, stderr = item
        # Raw bytes are decoded the way subprocess.run would decode them.
        encoding = kwargs.get("encoding") or "utf-8"
        errors = kwargs.get("errors") or "strict"
        if isinstance(stdout, bytes):
            stdout = stdout.decode(encoding, errors)
        if isinstance(stderr, bytes):
            stderr = stderr.decode(encoding, errors)
        return subprocess.CompletedProcess(argv, returncode, stdout, stderr)

    @property
    def last(self) -> list[str]:
        return self.calls[-1]


@pytest.fixture
def procs(monkeypatch) -> FakeProcesses:
    fake = FakeProcesses()
    monkeypatch.setattr(nixwrap.util.subprocess, "run", fake)
    return fake


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("test.nixwrap")
