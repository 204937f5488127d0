from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from nixwrap.config_loader import LoadedConfig, default_config_path, load_config_file
from nixwrap.errors import ConfigurationError
from nixwrap.util import CommandRunner, expand_path, home_dir

DEFAULT_NIX_ENV = "nix-env"
DEFAULT_NIX_CHANNEL = "nix-channel"
DEFAULT_PATH_MARKER = ".nix-profile"

_NOT_CONFIGURED = """Nix is not configured on your system.

    - Install Nix, e.g. "curl -L https://nixos.org/nix/install | sh"
    - Add the location of your Nix profile to $PATH, e.g. "source ~/.nix-profile/etc/profile.d/nix.sh"
"""


@dataclass(frozen=True)
class NixConfig:
    profile_dir: Path | None = None
    nix_env: str = DEFAULT_NIX_ENV
    nix_channel: str = DEFAULT_NIX_CHANNEL
    path_marker: str = DEFAULT_PATH_MARKER
    config_path: Path | None = None


@dataclass(frozen=True)
class Context:
    config: NixConfig
    logger: logging.Logger
    runner: CommandRunner


def _load_settings(
    config_path: Path | None,
    environ: Mapping[str, str],
) -> LoadedConfig | None:
    if config_path is None:
        env_path = environ.get("NIXWRAP_CONFIG")
        if env_path:
            config_path = expand_path(env_path)
        else:
            config_path = default_config_path(environ)
    if config_path is None:
        return None
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")
    try:
        return load_config_file(config_path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to load config {config_path}: {e}") from e


def _resolve_profile_dir(
    profile_dir: Path | str | None,
    settings: LoadedConfig | None,
    environ: Mapping[str, str],
) -> Path:
    if profile_dir is not None:
        return expand_path(str(profile_dir))
    env_profile = environ.get("NIX_PROFILE")
    if env_profile:
        return expand_path(env_profile)
    if settings is not None and settings.profile:
        return expand_path(settings.profile)
    return home_dir(environ) / ".nix-profile"


def path_has_marker(path_value: str, marker: str) -> bool:
    return any(marker in entry for entry in path_value.split(os.pathsep) if entry)


def initialize(
    *,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    profile_dir: Path | str | None = None,
) -> NixConfig:
    """
    Check that Nix is usable from this process and return its configuration.

    The host application calls this once. It resolves the profile directory
    (argument, $NIX_PROFILE, settings file, ~/.nix-profile), checks that it
    exists and that some $PATH entry contains the profile marker.

    Raises ConfigurationError with remediation instructions otherwise.
    """
    env = os.environ if environ is None else environ
    settings = _load_settings(config_path, env)

    profile = _resolve_profile_dir(profile_dir, settings, env)
    if not profile.is_dir():
        raise ConfigurationError(f"No Nix profile found in {profile}")

    marker = (settings.path_marker if settings else None) or DEFAULT_PATH_MARKER
    if not path_has_marker(env.get("PATH", ""), marker):
        raise ConfigurationError(_NOT_CONFIGURED)

    return NixConfig(
        profile_dir=profile,
        nix_env=(settings.nix_env if settings else None) or DEFAULT_NIX_ENV,
        nix_channel=(settings.nix_channel if settings else None) or DEFAULT_NIX_CHANNEL,
        path_marker=marker,
        config_path=settings.path if settings else None,
    )


def build_context(
    *,
    config: NixConfig | None = None,
    logger: logging.Logger | None = None,
    runner: CommandRunner | None = None,
) -> Context:
    logger = logger or logging.getLogger("nixwrap")
    return Context(
        config=config or NixConfig(),
        logger=logger,
        runner=runner or CommandRunner(logger=logger),
    )
