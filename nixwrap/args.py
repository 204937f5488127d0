"""
Typed argument builders for nix-env and nix-channel.

Each invocation is a frozen dataclass that validates its fields on
construction and serializes to a fresh argv via ``to_argv(executable)``.
Operands are never interpolated into a shell string, and values that the
tools would read as options (leading ``-``) are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from nixwrap.errors import InvalidArgument

PACKAGE_VERBS = ("install", "uninstall", "upgrade")
QUERY_SCOPES = ("installed", "available")


def _check_operand(value: str, *, what: str, required: bool) -> None:
    if not isinstance(value, str):
        raise InvalidArgument(f"{what} must be a string, got {type(value).__name__}")
    if not value:
        if required:
            raise InvalidArgument(f"Please specify {what}")
        return
    if value.startswith("-"):
        raise InvalidArgument(f"{what} must not start with '-': {value!r}")
    if "\x00" in value or "\n" in value:
        raise InvalidArgument(f"{what} contains a control character: {value!r}")


@dataclass(frozen=True)
class PackageAction:
    verb: str
    name: str = ""
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.verb not in PACKAGE_VERBS:
            raise InvalidArgument(f"Unknown package action: {self.verb!r}")
        # upgrade without a name upgrades everything
        _check_operand(self.name, what="package name", required=self.verb != "upgrade")

    def to_argv(self, executable: str = "nix-env") -> list[str]:
        argv = [executable, f"--{self.verb}"]
        if self.dry_run:
            argv.append("--dry-run")
        if self.name:
            argv.append(self.name)
        return argv


@dataclass(frozen=True)
class PackageQuery:
    scope: str
    filter: str = ""

    def __post_init__(self) -> None:
        if self.scope not in QUERY_SCOPES:
            raise InvalidArgument(f"Unknown query scope: {self.scope!r}")
        _check_operand(self.filter, what="package filter", required=False)

    def to_argv(self, executable: str = "nix-env") -> list[str]:
        argv = [executable, "--query", f"--{self.scope}"]
        if self.filter:
            argv.append(self.filter)
        return argv


@dataclass(frozen=True)
class ChannelAdd:
    url: str
    name: str = ""

    def __post_init__(self) -> None:
        _check_operand(self.url, what="channel URL", required=True)
        _check_operand(self.name, what="channel name", required=False)

    def to_argv(self, executable: str = "nix-channel") -> list[str]:
        argv = [executable, "--add", self.url]
        if self.name:
            argv.append(self.name)
        return argv


@dataclass(frozen=True)
class ChannelList:
    def to_argv(self, executable: str = "nix-channel") -> list[str]:
        return [executable, "--list"]


@dataclass(frozen=True)
class ChannelRemove:
    name: str

    def __post_init__(self) -> None:
        _check_operand(self.name, what="channel name", required=True)

    def to_argv(self, executable: str = "nix-channel") -> list[str]:
        return [executable, "--remove", self.name]


@dataclass(frozen=True)
class ChannelUpdate:
    name: str = ""

    def __post_init__(self) -> None:
        _check_operand(self.name, what="channel name", required=False)

    def to_argv(self, executable: str = "nix-channel") -> list[str]:
        argv = [executable, "--update"]
        if self.name:
            argv.append(self.name)
        return argv


@dataclass(frozen=True)
class ChannelRollback:
    generation: int = 0

    def __post_init__(self) -> None:
        # bool is an int subclass; True/False are almost certainly a mistake here.
        if isinstance(self.generation, bool) or not isinstance(self.generation, int):
            raise InvalidArgument(
                f"generation must be an integer, got {type(self.generation).__name__}"
            )
        if self.generation < 0:
            raise InvalidArgument(f"generation must be >= 0, got {self.generation}")

    def to_argv(self, executable: str = "nix-channel") -> list[str]:
        argv = [executable, "--rollback"]
        if self.generation != 0:
            argv.append(str(self.generation))
        return argv
