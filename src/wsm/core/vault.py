"""Vault discovery and per-vault paths.

Obsidian lists known vaults in ``obsidian.json`` in its per-user config
directory. A Vault resolves where its workspaces.json and backups live.
"""

import json
import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from wsm.core.config import (
    OBSIDIAN_CONFIG_PATH,
    OBSIDIAN_DIR_NAME,
    WORKSPACES_FILENAME,
    resolve_backup_dir,
)

logger = logging.getLogger(__name__)


class ObsidianVault(BaseModel):
    """A vault entry from obsidian.json."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    path: str
    ts: int = 0
    open: bool = False

    @property
    def name(self) -> str:
        return Path(self.path).name


class ObsidianConfig(BaseModel):
    """The parts of obsidian.json we read."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    vaults: dict[str, ObsidianVault] = Field(default_factory=dict)


def obsidian_config_path(platform: str | None = None) -> Path:
    """
    Locate obsidian.json for the current platform.

    OBSIDIAN_CONFIG_PATH overrides the platform default.
    """
    if OBSIDIAN_CONFIG_PATH:
        return Path(OBSIDIAN_CONFIG_PATH).expanduser()

    platform = platform or sys.platform
    home = Path.home()
    if platform == "darwin":
        return home / "Library" / "Application Support" / "obsidian" / "obsidian.json"
    if platform.startswith("win"):
        appdata = os.environ.get("APPDATA") or str(home / "AppData" / "Roaming")
        return Path(appdata) / "obsidian" / "obsidian.json"
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(home / ".config")
    return Path(config_home) / "obsidian" / "obsidian.json"


def discover_vaults(config_path: Path | None = None) -> list[ObsidianVault]:
    """
    List the vaults Obsidian knows about, most recently opened first.

    Returns an empty list if obsidian.json is missing or unreadable.
    """
    config_path = config_path or obsidian_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        config = ObsidianConfig.model_validate(raw)
    except FileNotFoundError:
        logger.debug(f"No Obsidian config at {config_path}")
        return []
    except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning(f"Could not read Obsidian config {config_path}: {e}")
        return []

    vaults = [
        vault.model_copy(update={"id": vault.id or key})
        for key, vault in config.vaults.items()
    ]
    return sorted(vaults, key=lambda vault: vault.ts, reverse=True)


class Vault:
    """Paths for one Obsidian vault.

    Example:
        vault = Vault("~/Notes")
        vault.workspaces_file  # ~/Notes/.obsidian/workspaces.json
    """

    def __init__(self, path: Path | str, backup_dir: str | None = None):
        """
        Initialize vault.

        Args:
            path: Vault root directory
            backup_dir: Backup location, absolute or relative to the root
        """
        self.root = Path(path).expanduser().resolve()
        self.config_dir = self.root / OBSIDIAN_DIR_NAME
        self.workspaces_file = self.config_dir / WORKSPACES_FILENAME
        self.backup_dir = resolve_backup_dir(self.root, backup_dir)

    @property
    def exists(self) -> bool:
        """Check if the vault has an Obsidian config directory."""
        return self.config_dir.is_dir()

    @property
    def name(self) -> str:
        return self.root.name

    def __repr__(self) -> str:
        return f"Vault({self.root})"
