"""
Exception classes for nixwrap.

Hierarchy::

    NixError
    ├── InvalidArgument      (also a ValueError)
    ├── ConfigurationError
    ├── ProcessFailure       (raised by CommandRunner, wrapped by the backends)
    └── CommandError
        ├── ExecutionError
        └── QueryError

Callers only ever see the static message of a CommandError; the failing argv,
exit code and captured stderr stay available as attributes.
"""

from __future__ import annotations

from typing import Sequence


class NixError(Exception):
    """Root of every exception raised by nixwrap."""


class InvalidArgument(NixError, ValueError):
    """A field passed to an operation failed validation."""


class ConfigurationError(NixError):
    """The Nix environment check in ``initialize()`` failed."""


class ProcessFailure(NixError):
    def __init__(
        self,
        args: Sequence[str],
        returncode: int | None,
        stderr: str = "",
    ) -> None:
        self.argv = list(args)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"Could not launch {self.argv[0] if self.argv else '<empty>'}"
        else:
            msg = f"Command exited with status {returncode}"
        super().__init__(msg)


class CommandError(NixError):
    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr

    @classmethod
    def from_failure(cls, message: str, failure: ProcessFailure) -> "CommandError":
        return cls(
            message,
            argv=failure.argv,
            returncode=failure.returncode,
            stderr=failure.stderr,
        )


class ExecutionError(CommandError):
    """A mutating or channel command failed to launch or exited non-zero."""


class QueryError(CommandError):
    """A package listing failed (this includes "nothing matched")."""
