"""
Python bindings for the Nix package manager's command-line tools.

Importing this package has no side effects; call ``initialize()`` (or
``Nix.from_environment()``) once to check that Nix is set up.
"""

from nixwrap.core import NixConfig, initialize
from nixwrap.errors import (
    CommandError,
    ConfigurationError,
    ExecutionError,
    InvalidArgument,
    NixError,
    QueryError,
)
from nixwrap.proxy import Nix

__all__ = [
    "Nix",
    "NixConfig",
    "initialize",
    "NixError",
    "CommandError",
    "ConfigurationError",
    "ExecutionError",
    "InvalidArgument",
    "QueryError",
]
