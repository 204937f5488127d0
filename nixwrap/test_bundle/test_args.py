"""Tests for the typed nix-env / nix-channel argument builders."""

import pytest

from nixwrap.args import (
    ChannelAdd,
    ChannelList,
    ChannelRemove,
    ChannelRollback,
    ChannelUpdate,
    PackageAction,
    PackageQuery,
)
from nixwrap.errors import InvalidArgument


class TestPackageAction:

    def test_install(self):
        assert PackageAction("install", "hello").to_argv() == ["nix-env", "--install", "hello"]

    def test_dry_run_keeps_name_last(self):
        argv = PackageAction("uninstall", "hello", dry_run=True).to_argv()
        assert argv == ["nix-env", "--uninstall", "--dry-run", "hello"]
        assert argv[-1] == "hello"

    def test_custom_executable(self):
        argv = PackageAction("install", "hello").to_argv("/opt/nix/bin/nix-env")
        assert argv[0] == "/opt/nix/bin/nix-env"

    @pytest.mark.parametrize("verb", ["install", "uninstall"])
    def test_empty_name_rejected(self, verb):
        with pytest.raises(InvalidArgument):
            PackageAction(verb, "")

    def test_upgrade_without_name_upgrades_everything(self):
        assert PackageAction("upgrade").to_argv() == ["nix-env", "--upgrade"]
        assert PackageAction("upgrade", dry_run=True).to_argv() == ["nix-env", "--upgrade", "--dry-run"]

    def test_option_like_name_rejected(self):
        with pytest.raises(InvalidArgument, match="must not start with '-'"):
            PackageAction("install", "--remove-all")

    def test_newline_in_name_rejected(self):
        with pytest.raises(InvalidArgument):
            PackageAction("install", "hello\nworld")

    def test_unknown_verb(self):
        with pytest.raises(InvalidArgument):
            PackageAction("reinstall", "hello")

    def test_argv_is_fresh_list(self):
        action = PackageAction("install", "hello")
        action.to_argv().append("junk")
        assert action.to_argv() == ["nix-env", "--install", "hello"]


class TestPackageQuery:

    def test_installed_without_filter(self):
        assert PackageQuery("installed").to_argv() == ["nix-env", "--query", "--installed"]

    def test_available_with_filter(self):
        assert PackageQuery("available", "firefox").to_argv() == [
            "nix-env", "--query", "--available", "firefox",
        ]

    def test_unknown_scope(self):
        with pytest.raises(InvalidArgument):
            PackageQuery("everything")


class TestChannelCommands:

    def test_add_with_and_without_name(self):
        url = "https://nixos.org/channels/nixpkgs-unstable"
        assert ChannelAdd(url).to_argv() == ["nix-channel", "--add", url]
        assert ChannelAdd(url, "nixpkgs").to_argv() == ["nix-channel", "--add", url, "nixpkgs"]

    def test_add_requires_url(self):
        with pytest.raises(InvalidArgument):
            ChannelAdd("")

    def test_list(self):
        assert ChannelList().to_argv() == ["nix-channel", "--list"]

    def test_remove_requires_name(self):
        assert ChannelRemove("nixpkgs").to_argv() == ["nix-channel", "--remove", "nixpkgs"]
        with pytest.raises(InvalidArgument):
            ChannelRemove("")

    def test_update(self):
        assert ChannelUpdate().to_argv() == ["nix-channel", "--update"]
        assert ChannelUpdate("nixpkgs").to_argv() == ["nix-channel", "--update", "nixpkgs"]

    def test_rollback_zero_has_no_generation(self):
        assert ChannelRollback(0).to_argv() == ["nix-channel", "--rollback"]

    def test_rollback_generation(self):
        assert ChannelRollback(5).to_argv() == ["nix-channel", "--rollback", "5"]

    @pytest.mark.parametrize("bad", [-1, True, "5", 1.5])
    def test_rollback_rejects_bad_generation(self, bad):
        with pytest.raises(InvalidArgument):
            ChannelRollback(bad)
