from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from nixwrap.errors import ProcessFailure


def xdg_config_home(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    value = env.get("XDG_CONFIG_HOME")
    if value:
        return Path(value)
    return home_dir(env) / ".config"


def home_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    home = env.get("HOME")
    return Path(home) if home else Path.home()


def expand_path(s: str) -> Path:
    # Expand ~ and $VARS
    return Path(os.path.expandvars(os.path.expanduser(s)))


def sh_join(args: Sequence[str]) -> str:
    return shlex.join(list(args))


def output_lines(text: str) -> list[str]:
    """
    Split captured stdout into lines with trailing whitespace removed.

    Only ``\\n`` ends a line; other characters that ``str.splitlines`` treats
    as boundaries (form feed, U+2028, ...) stay inside the line.
    """
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return [line.rstrip() for line in text.split("\n")]


@dataclass(frozen=True)
class RunResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def lines(self) -> list[str]:
        return output_lines(self.stdout)


class CommandRunner:
    def __init__(self, *, logger) -> None:
        self._logger = logger

    def run(self, args: Iterable[str], *, check: bool = False) -> RunResult:
        argv = list(args)

        # Process-level logs stay at DEBUG; backends log the high-level action.
        self._logger.debug("RUN %s", sh_join(argv))

        try:
            cp = subprocess.run(
                argv,
                text=True,
                # Nix prints UTF-8; undecodable bytes become U+FFFD.
                encoding="utf-8",
                errors="replace",
                capture_output=True,
                check=False,  # we handle below to keep stderr on the error
            )
        except OSError as e:
            self._logger.debug("Failed to launch %s: %s", argv[0] if argv else "<empty>", e)
            if check:
                raise ProcessFailure(argv, None, str(e)) from e
            raise

        stdout = cp.stdout or ""
        stderr = cp.stderr or ""
        if stdout.strip():
            self._logger.debug("stdout:\n%s", stdout.rstrip())
        if stderr.strip():
            self._logger.debug("stderr:\n%s", stderr.rstrip())

        if check and cp.returncode != 0:
            raise ProcessFailure(argv, cp.returncode, stderr)
        return RunResult(
            args=argv,
            returncode=cp.returncode,
            stdout=stdout,
            stderr=stderr,
        )
