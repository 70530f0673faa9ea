"""Shared test fixtures and configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from wsm.core.manager import WorkspaceManager, reset_managers

SAMPLE_DOCUMENT = {
    "workspaces": {
        "Source Workspace": {
            "main": {
                "id": "main-source",
                "type": "split",
                "children": [
                    {
                        "id": "tabs-source",
                        "type": "tabs",
                        "children": [
                            {
                                "id": "leaf1",
                                "type": "leaf",
                                "state": {
                                    "type": "markdown",
                                    "state": {
                                        "file": "notes/file1.md",
                                        "mode": "source",
                                    },
                                    "title": "File One",
                                },
                            },
                            {
                                "id": "leaf2",
                                "type": "leaf",
                                "state": {
                                    "type": "markdown",
                                    "state": {"file": "notes/file2.md"},
                                    "icon": "lucide-file",
                                },
                            },
                            {
                                "id": "empty1",
                                "type": "leaf",
                                "state": {"type": "empty", "state": {}},
                            },
                        ],
                        "currentTab": 1,
                    }
                ],
                "direction": "vertical",
            },
            "left": {
                "id": "left-sidebar",
                "type": "split",
                "children": [],
                "direction": "horizontal",
                "width": 300,
            },
            "active": "leaf1",
            "mtime": "2023-01-01T00:00:00.000Z",
        },
        "Target Workspace": {
            "main": {
                "id": "main-target",
                "type": "split",
                "children": [{"id": "tabs-target", "type": "tabs", "children": []}],
                "direction": "vertical",
            },
            "active": "",
            "mtime": "2023-01-02T00:00:00.000Z",
        },
    },
    "active": "Source Workspace",
}


def write_document(path: Path, data: dict) -> bytes:
    """Write a document the way Obsidian does and return the bytes."""
    content = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return content


@pytest.fixture
def sample_data():
    """A fresh copy of the sample workspaces document."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_bytes(sample_data):
    """Sample document serialized with 2-space indent."""
    return json.dumps(sample_data, indent=2, ensure_ascii=False).encode("utf-8")


@pytest.fixture
def vault_dir(tmp_path):
    """A vault with a .obsidian directory and the sample workspaces.json."""
    vault = tmp_path / "vault"
    write_document(vault / ".obsidian" / "workspaces.json", SAMPLE_DOCUMENT)
    return vault


@pytest.fixture
def workspaces_file(vault_dir):
    """Path of the sample vault's workspaces.json."""
    return vault_dir / ".obsidian" / "workspaces.json"


@pytest.fixture
def manager(vault_dir):
    """WorkspaceManager over the sample vault, without the Obsidian check."""
    return WorkspaceManager(vault_dir, max_backups=10, check_running=False)


@pytest.fixture(autouse=True)
def _reset_shared_managers():
    """Keep shared managers from leaking between tests."""
    reset_managers()
    yield
    reset_managers()
