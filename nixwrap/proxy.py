"""
Public facade over nix-env and nix-channel.

Typical use::

    from nixwrap import Nix

    nix = Nix.from_environment()      # runs initialize(); raises ConfigurationError
    nix.add("hello", dry_run=True)
    nix.list_installed()              # ['hello-2.12.1', ...]
    nix.list_channels()               # {'nixpkgs': 'https://nixos.org/channels/nixpkgs-unstable'}

Every call runs exactly one external process and blocks until it exits.
Failures are raised as InvalidArgument (before any process runs),
ExecutionError or QueryError.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Mapping

from nixwrap.backends.nix_channel import NixChannelBackend
from nixwrap.backends.nix_env import NixEnvBackend
from nixwrap.core import NixConfig, build_context, initialize
from nixwrap.util import CommandRunner


class Nix:
    def __init__(
        self,
        config: NixConfig | None = None,
        *,
        runner: CommandRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._ctx = build_context(config=config, logger=logger, runner=runner)
        self._env = NixEnvBackend(
            runner=self._ctx.runner,
            logger=self._ctx.logger,
            executable=self._ctx.config.nix_env,
        )
        self._channel = NixChannelBackend(
            runner=self._ctx.runner,
            logger=self._ctx.logger,
            executable=self._ctx.config.nix_channel,
        )

    @classmethod
    def from_environment(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        config_path: Path | None = None,
        runner: CommandRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> "Nix":
        config = initialize(environ=environ, config_path=config_path)
        return cls(config, runner=runner, logger=logger)

    @property
    def config(self) -> NixConfig:
        return self._ctx.config

    def is_available(self) -> tuple[bool, str | None]:
        for exe in (self.config.nix_env, self.config.nix_channel):
            if shutil.which(exe) is None:
                return False, f"`{exe}` not found on PATH"
        return True, None

    # -- packages -----------------------------------------------------------

    def add(self, name: str, dry_run: bool = False) -> None:
        """Install package *name* (``nix-env --install``)."""
        self._env.install(name, dry_run=dry_run)

    def remove(self, name: str, dry_run: bool = False) -> None:
        """Uninstall package *name* (``nix-env --uninstall``)."""
        self._env.uninstall(name, dry_run=dry_run)

    def upgrade(self, name: str = "", dry_run: bool = False) -> None:
        """Upgrade package *name*, or every installed package when empty."""
        self._env.upgrade(name, dry_run=dry_run)

    def list_installed(self, filter: str = "") -> list[str]:
        """
        List installed packages, optionally only those matching *filter*.

        A QueryError may also mean that nothing matched.
        """
        return self._env.installed(filter)

    def list_available(self, filter: str = "") -> list[str]:
        """List packages available in the active Nix expression."""
        return self._env.available(filter)

    # -- channels -----------------------------------------------------------

    def add_channel(self, url: str, name: str = "") -> None:
        """Subscribe to the channel at *url*, optionally naming it *name*."""
        self._channel.add(url, name)

    def list_channels(self) -> dict[str, str]:
        """Return the names and URLs of all subscribed channels."""
        return self._channel.channels()

    def remove_channel(self, name: str) -> None:
        """Unsubscribe from the channel named *name*."""
        self._channel.remove(name)

    def update_channel(self, name: str = "") -> None:
        """Fetch the latest Nix expressions for *name*, or for all channels."""
        self._channel.update(name)

    def rollback_channel(self, generation: int = 0) -> None:
        """
        Revert the previous channel update.

        A non-zero *generation* restores that specific channel generation.
        """
        self._channel.rollback(generation)
