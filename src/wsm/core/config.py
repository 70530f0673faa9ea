"""Configuration management for wsm core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key}={value!r}, using {default}")
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Obsidian keeps these under <vault>/.obsidian
OBSIDIAN_DIR_NAME = ".obsidian"
WORKSPACES_FILENAME = "workspaces.json"
DEFAULT_BACKUP_LOCATION = f"{OBSIDIAN_DIR_NAME}/backups"

# Vault selection
WSM_VAULT = get_env("WSM_VAULT")
OBSIDIAN_CONFIG_PATH = get_env("OBSIDIAN_CONFIG_PATH")

# Backups
WSM_BACKUP_DIR = get_env("WSM_BACKUP_DIR", DEFAULT_BACKUP_LOCATION)
WSM_MAX_BACKUPS = get_env_int("WSM_MAX_BACKUPS", 10)

# Transfer behaviour
WSM_STRICT = get_env_bool("WSM_STRICT", False)
WSM_CHECK_RUNNING = get_env_bool("WSM_CHECK_RUNNING", True)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")

# API Server settings
WSM_API_KEY = get_env("WSM_API_KEY")
WSM_HOST = get_env("WSM_HOST", "127.0.0.1")
WSM_PORT = get_env_int("WSM_PORT", 5005)
WSM_ALLOW_NO_AUTH = get_env_bool("WSM_ALLOW_NO_AUTH", False)
WSM_CORS_ORIGINS = [
    origin.strip()
    for origin in (
        get_env("WSM_CORS_ORIGINS", "http://localhost:5173") or "http://localhost:5173"
    ).split(",")
    if origin.strip()
]


def resolve_backup_dir(vault_root: Path, backup_dir: str | None = None) -> Path:
    """
    Resolve the backup directory for a vault.

    Relative locations are taken relative to the vault root, matching
    the way Obsidian plugin settings store them.

    Args:
        vault_root: Vault root directory
        backup_dir: Configured location (defaults to WSM_BACKUP_DIR)

    Returns:
        Absolute backup directory path
    """
    location = Path(backup_dir or WSM_BACKUP_DIR or DEFAULT_BACKUP_LOCATION)
    location = location.expanduser()
    if location.is_absolute():
        return location
    return vault_root / location


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (LOG_LEVEL or "INFO").upper(), logging.INFO),
    )
    return logging.getLogger(__name__)


def validate_environment() -> tuple[bool, str]:
    """
    Validate environment variables for workspace operations.

    Returns:
        (is_valid, message) - If not valid, message explains what's wrong.
    """
    if WSM_MAX_BACKUPS < 1:
        return (
            False,
            "WSM_MAX_BACKUPS must be at least 1 - rollback needs a backup",
        )

    if WSM_VAULT and not Path(WSM_VAULT).expanduser().is_dir():
        return False, f"WSM_VAULT does not point to a directory: {WSM_VAULT}"

    return True, ""


def validate_api_environment() -> tuple[bool, str]:
    """
    Validate environment variables for the REST API.

    Returns:
        (is_valid, message) - If not valid, message explains what's missing.
    """
    if not WSM_API_KEY and not WSM_ALLOW_NO_AUTH:
        return (
            False,
            "Missing WSM_API_KEY - set it or WSM_ALLOW_NO_AUTH=true for local use",
        )

    return True, ""
