from __future__ import annotations

import logging
from dataclasses import dataclass

from nixwrap.args import PackageAction, PackageQuery
from nixwrap.errors import ExecutionError, ProcessFailure, QueryError
from nixwrap.util import CommandRunner


@dataclass(frozen=True)
class NixEnvBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: str = "nix-env"

    def _apply(self, action: PackageAction, message: str) -> None:
        try:
            self.runner.run(action.to_argv(self.executable), check=True)
        except ProcessFailure as e:
            raise ExecutionError.from_failure(message, e) from e

    def install(self, package: str, *, dry_run: bool = False) -> None:
        action = PackageAction("install", package, dry_run)
        self._apply(action, f"Cannot install package `{package}`")
        self.logger.info("%s package %s.", "Would install" if dry_run else "Installed", package)

    def uninstall(self, package: str, *, dry_run: bool = False) -> None:
        action = PackageAction("uninstall", package, dry_run)
        self._apply(action, f"Cannot uninstall package `{package}`")
        self.logger.info("%s package %s.", "Would uninstall" if dry_run else "Uninstalled", package)

    def upgrade(self, package: str = "", *, dry_run: bool = False) -> None:
        action = PackageAction("upgrade", package, dry_run)
        what = f"package `{package}`" if package else "installed packages"
        self._apply(action, f"Cannot upgrade {what}")
        self.logger.info(
            "%s %s.",
            "Would upgrade" if dry_run else "Upgraded",
            f"package {package}" if package else "all packages",
        )

    def query(self, scope: str, package: str = "") -> list[str]:
        # nix-env exits non-zero both on failure and when nothing matches.
        query = PackageQuery(scope, package)
        try:
            res = self.runner.run(query.to_argv(self.executable), check=True)
        except ProcessFailure as e:
            raise QueryError.from_failure(f"Cannot list {scope} packages", e) from e
        return res.lines

    def installed(self, package: str = "") -> list[str]:
        return self.query("installed", package)

    def available(self, package: str = "") -> list[str]:
        return self.query("available", package)
