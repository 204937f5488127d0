from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from nixwrap.args import ChannelAdd, ChannelList, ChannelRemove, ChannelRollback, ChannelUpdate
from nixwrap.errors import ExecutionError, ProcessFailure
from nixwrap.util import CommandRunner


def parse_channel_list(lines: Iterable[str], logger: logging.Logger | None = None) -> dict[str, str]:
    """
    Turn ``nix-channel --list`` output into a name -> URL mapping.

    Each line is split on its first space. Blank lines and lines without a
    space are skipped (with a warning); a repeated name keeps its last URL.
    """
    channels: dict[str, str] = {}
    for line in lines:
        line = line.strip()
        if not line:
            continue
        name, sep, url = line.partition(" ")
        url = url.strip()
        if not sep or not url:
            if logger is not None:
                logger.warning("Skipping malformed channel entry: %r", line)
            continue
        channels[name] = url
    return channels


@dataclass(frozen=True)
class NixChannelBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: str = "nix-channel"

    def _run(self, argv: list[str], message: str):
        try:
            return self.runner.run(argv, check=True)
        except ProcessFailure as e:
            raise ExecutionError.from_failure(message, e) from e

    def add(self, url: str, name: str = "") -> None:
        cmd = ChannelAdd(url, name)
        self._run(cmd.to_argv(self.executable), f"Cannot add new channel `{url}`")
        self.logger.info("Added channel %s.", f"{name} ({url})" if name else url)

    def channels(self) -> dict[str, str]:
        res = self._run(ChannelList().to_argv(self.executable), "Cannot list channels")
        return parse_channel_list(res.lines, self.logger)

    def remove(self, name: str) -> None:
        cmd = ChannelRemove(name)
        self._run(cmd.to_argv(self.executable), f"Cannot remove channel `{name}`")
        self.logger.info("Removed channel %s.", name)

    def update(self, name: str = "") -> None:
        cmd = ChannelUpdate(name)
        msg = f"Cannot update channel `{name}`" if name else "Cannot update channels"
        self._run(cmd.to_argv(self.executable), msg)
        self.logger.info("Updated %s.", f"channel {name}" if name else "all channels")

    def rollback(self, generation: int = 0) -> None:
        cmd = ChannelRollback(generation)
        msg = "Cannot rollback channel"
        if generation:
            msg += f" to generation {generation}"
        self._run(cmd.to_argv(self.executable), msg)
        if generation:
            self.logger.info("Rolled back channels to generation %d.", generation)
        else:
            self.logger.info("Rolled back the last channel update.")
