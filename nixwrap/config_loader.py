from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
from json import JSONDecodeError

from nixwrap.util import xdg_config_home

SUPPORTED_SUFFIXES = (".toml", ".json", ".yaml", ".yml")
KNOWN_KEYS = ("profile", "nix_env", "nix_channel", "path_marker")


@dataclass(frozen=True)
class LoadedConfig:
    path: Path
    profile: str | None = None
    nix_env: str | None = None
    nix_channel: str | None = None
    path_marker: str | None = None


def _require_str(value: Any, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{what}' must be a non-empty string")
    return value


def _normalize_top_level(obj: Any, path: Path) -> dict[str, str]:
    if obj is None:
        # Empty YAML file.
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"{path}: settings must be a table/object of key = value pairs")

    extra_keys = set(obj.keys()) - set(KNOWN_KEYS)
    if extra_keys:
        extra = ", ".join(sorted(str(k) for k in extra_keys))
        known = ", ".join(KNOWN_KEYS)
        raise ValueError(f"{path}: unknown settings ({extra}); known settings: {known}")

    out: dict[str, str] = {}
    for key in KNOWN_KEYS:
        if key in obj:
            out[key] = _require_str(obj[key], what=key)
    return out


def _load_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


def _load_toml(text: str, path: Path) -> Any:
    # TOML parsing is in stdlib as of Python 3.11; older Pythons get tomli.
    try:
        import tomllib  # type: ignore
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    try:
        return tomllib.loads(text)
    except Exception as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _load_yaml(text: str, path: Path) -> Any:
    import yaml

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None and hasattr(mark, "line") and hasattr(mark, "column"):
            line = int(mark.line) + 1
            col = int(mark.column) + 1
            raise ValueError(f"Invalid YAML in {path} at line {line}, column {col}: {e}") from e
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_config_file(path: Path) -> LoadedConfig:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    if suffix == ".json":
        raw = _load_json(text, path)
    elif suffix == ".toml":
        raw = _load_toml(text, path)
    elif suffix in (".yaml", ".yml"):
        raw = _load_yaml(text, path)
    else:
        raise ValueError(
            f"Unsupported config format for {path} (expected .toml, .json, .yaml, .yml)."
        )
    values = _normalize_top_level(raw, path)
    return LoadedConfig(path=path, **values)


def default_config_path(environ: Mapping[str, str] | None = None) -> Path | None:
    """
    Return the first existing ``$XDG_CONFIG_HOME/nixwrap/config.<ext>``.

    Suffixes are tried in SUPPORTED_SUFFIXES order; ``None`` if none exists.
    """
    base = xdg_config_home(environ) / "nixwrap"
    for suffix in SUPPORTED_SUFFIXES:
        candidate = base / f"config{suffix}"
        if candidate.is_file():
            return candidate
    return None
