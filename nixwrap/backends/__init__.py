"""
Backends that drive the Nix command-line tools.

Each backend owns one executable; the public API is ``nixwrap.proxy.Nix``.
"""

from nixwrap.backends.nix_channel import NixChannelBackend, parse_channel_list
from nixwrap.backends.nix_env import NixEnvBackend

__all__ = [
    "NixChannelBackend",
    "NixEnvBackend",
    "parse_channel_list",
]
