"""Tests for vault discovery and paths."""

import json

import pytest

from wsm.core import vault as vault_module
from wsm.core.vault import Vault, discover_vaults, obsidian_config_path


@pytest.fixture
def obsidian_json(tmp_path):
    """An obsidian.json listing two vaults."""
    path = tmp_path / "obsidian" / "obsidian.json"
    path.parent.mkdir()
    path.write_text(
        json.dumps(
            {
                "vaults": {
                    "aaa": {"path": "/home/me/Work", "ts": 100},
                    "bbb": {"path": "/home/me/Notes", "ts": 200, "open": True},
                },
                "frame": "hidden",
            }
        ),
        encoding="utf-8",
    )
    return path


class TestDiscoverVaults:
    """Tests for discover_vaults()."""

    def test_most_recent_first(self, obsidian_json):
        """Vaults are ordered by last-opened time."""
        vaults = discover_vaults(obsidian_json)

        assert [vault.name for vault in vaults] == ["Notes", "Work"]
        assert vaults[0].id == "bbb"
        assert vaults[0].open

    def test_missing_config(self, tmp_path):
        """No obsidian.json means no vaults."""
        assert discover_vaults(tmp_path / "nope.json") == []

    def test_invalid_config(self, tmp_path, caplog):
        """Unreadable config logs a warning and gives no vaults."""
        path = tmp_path / "obsidian.json"
        path.write_text("{not json", encoding="utf-8")

        assert discover_vaults(path) == []
        assert "Could not read" in caplog.text


class TestObsidianConfigPath:
    """Tests for obsidian_config_path()."""

    def test_override(self, monkeypatch, tmp_path):
        """OBSIDIAN_CONFIG_PATH wins."""
        monkeypatch.setattr(
            vault_module, "OBSIDIAN_CONFIG_PATH", str(tmp_path / "o.json")
        )

        assert obsidian_config_path() == tmp_path / "o.json"

    def test_linux_uses_xdg(self, monkeypatch, tmp_path):
        """On Linux XDG_CONFIG_HOME is honoured."""
        monkeypatch.setattr(vault_module, "OBSIDIAN_CONFIG_PATH", None)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert obsidian_config_path("linux") == tmp_path / "obsidian" / "obsidian.json"

    def test_macos(self, monkeypatch):
        """On macOS the Application Support folder is used."""
        monkeypatch.setattr(vault_module, "OBSIDIAN_CONFIG_PATH", None)

        path = obsidian_config_path("darwin")

        assert path.parts[-4:] == (
            "Library",
            "Application Support",
            "obsidian",
            "obsidian.json",
        )


class TestVault:
    """Tests for Vault paths."""

    def test_paths(self, vault_dir):
        """Workspaces file and backups live under .obsidian."""
        vault = Vault(vault_dir)

        assert vault.exists
        assert vault.name == "vault"
        assert vault.workspaces_file == vault.root / ".obsidian" / "workspaces.json"
        assert vault.backup_dir == vault.root / ".obsidian" / "backups"

    def test_custom_backup_dir(self, tmp_path):
        """A relative backup dir is resolved against the root."""
        vault = Vault(tmp_path, backup_dir="archive")

        assert vault.backup_dir == tmp_path.resolve() / "archive"
        assert not vault.exists
