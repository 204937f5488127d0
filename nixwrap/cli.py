from __future__ import annotations

import argparse
import logging
from pathlib import Path

from nixwrap.core import NixConfig, initialize
from nixwrap.errors import CommandError, ConfigurationError, InvalidArgument
from nixwrap.proxy import Nix


def _setup_logger(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("nixwrap")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nixwrap", description="Drive nix-env and nix-channel.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (*.toml, *.json, *.yaml, *.yml). "
        "Defaults to $NIXWRAP_CONFIG or ~/.config/nixwrap/config.*.",
    )
    parser.add_argument(
        "--skip-env-check",
        action="store_true",
        help="Do not check for a Nix profile and PATH entry before running.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logs (including every command that is run).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for verb, help_text in (
        ("install", "Install a package."),
        ("uninstall", "Uninstall a package."),
    ):
        p = sub.add_parser(verb, help=help_text)
        p.add_argument("name")
        p.add_argument("--dry-run", action="store_true", help="Show what would happen.")

    p = sub.add_parser("upgrade", help="Upgrade one package, or all installed packages.")
    p.add_argument("name", nargs="?", default="")
    p.add_argument("--dry-run", action="store_true", help="Show what would happen.")

    p = sub.add_parser("installed", help="List installed packages.")
    p.add_argument("filter", nargs="?", default="")
    p = sub.add_parser("available", help="List available packages.")
    p.add_argument("filter", nargs="?", default="")

    channel = sub.add_parser("channel", help="Manage channel subscriptions.")
    csub = channel.add_subparsers(dest="channel_command", required=True)
    p = csub.add_parser("add", help="Subscribe to a channel.")
    p.add_argument("url")
    p.add_argument("name", nargs="?", default="")
    csub.add_parser("list", help="List subscribed channels.")
    p = csub.add_parser("remove", help="Unsubscribe from a channel.")
    p.add_argument("name")
    p = csub.add_parser("update", help="Update one channel, or all channels.")
    p.add_argument("name", nargs="?", default="")
    p = csub.add_parser("rollback", help="Revert the last channel update.")
    p.add_argument("generation", nargs="?", type=int, default=0)
    return parser


def _dispatch(nix: Nix, args: argparse.Namespace) -> None:
    cmd = args.command
    if cmd == "install":
        nix.add(args.name, dry_run=args.dry_run)
    elif cmd == "uninstall":
        nix.remove(args.name, dry_run=args.dry_run)
    elif cmd == "upgrade":
        nix.upgrade(args.name, dry_run=args.dry_run)
    elif cmd == "installed":
        for line in nix.list_installed(args.filter):
            print(line)
    elif cmd == "available":
        for line in nix.list_available(args.filter):
            print(line)
    elif cmd == "channel":
        ccmd = args.channel_command
        if ccmd == "add":
            nix.add_channel(args.url, args.name)
        elif ccmd == "list":
            for name, url in sorted(nix.list_channels().items()):
                print(f"{name} {url}")
        elif ccmd == "remove":
            nix.remove_channel(args.name)
        elif ccmd == "update":
            nix.update_channel(args.name)
        elif ccmd == "rollback":
            nix.rollback_channel(args.generation)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = _setup_logger(args.verbose)

    try:
        if args.skip_env_check:
            config = NixConfig()
        else:
            config = initialize(config_path=args.config)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2
    if config.config_path is not None:
        logger.debug("Using settings from %s", config.config_path)

    nix = Nix(config, logger=logger)
    ok, reason = nix.is_available()
    if not ok:
        logger.warning("%s", reason)

    try:
        _dispatch(nix, args)
    except InvalidArgument as e:
        logger.error("%s", e)
        return 2
    except CommandError as e:
        logger.error("%s", e)
        if e.returncode is not None:
            logger.debug("Exit status: %d", e.returncode)
        if e.stderr.strip():
            logger.debug("stderr:\n%s", e.stderr.rstrip())
        return 1
    return 0
