"""Detect a running Obsidian.

Obsidian rewrites workspaces.json from memory, so edits made while it
runs are lost or overwritten. Callers check this before writing.
"""

import logging
from dataclasses import dataclass, field

import psutil

logger = logging.getLogger(__name__)

PROCESS_NAME = "obsidian"


@dataclass(frozen=True)
class ObsidianStatus:
    """Whether Obsidian is running, and which processes matched."""

    is_running: bool
    pids: list[int] = field(default_factory=list)


def get_obsidian_status() -> ObsidianStatus:
    """Scan the process table for Obsidian."""
    pids = []
    for proc in psutil.process_iter(["pid", "name"]):
        name = proc.info.get("name") or ""
        if PROCESS_NAME in name.lower():
            pids.append(proc.info["pid"])
    if pids:
        logger.debug(f"Obsidian running: pids={pids}")
    return ObsidianStatus(is_running=bool(pids), pids=pids)


def is_obsidian_running() -> bool:
    """Return True if any process looks like Obsidian."""
    return get_obsidian_status().is_running
