"""Tests for WorkspaceManager persistence and safety."""

import json

import pytest

from wsm.core import manager as manager_module
from wsm.core.errors import (
    IOFailure,
    NotFoundError,
    ObsidianRunningError,
    RollbackFailure,
    WorkspaceError,
)
from wsm.core.manager import WorkspaceManager, get_manager, set_manager
from wsm.core.vault import Vault

SOURCE = "Source Workspace"
TARGET = "Target Workspace"


def _tab_ids(manager, name):
    return [tab.id for tab in manager.list_tabs(name)]


class TestReading:
    """Tests for listing workspaces and tabs."""

    def test_list_workspaces_newest_first(self, manager):
        """Summaries are sorted by mtime, newest first."""
        summaries = manager.list_workspaces()

        assert [summary.name for summary in summaries] == [TARGET, SOURCE]
        source = summaries[1]
        assert source.tab_count == 2
        assert source.is_active

    def test_list_tabs_unknown_workspace(self, manager):
        """Unknown workspace names raise NotFoundError."""
        with pytest.raises(NotFoundError):
            manager.list_tabs("Nope")

    def test_missing_file_has_no_workspaces(self, tmp_path):
        """A vault without workspaces.json lists nothing."""
        manager = WorkspaceManager(tmp_path, check_running=False)

        assert manager.list_workspaces() == []


class TestTransfers:
    """Tests for persisted move, copy and delete."""

    def test_move_is_persisted(self, manager, workspaces_file):
        """A move is written to disk with a backup taken first."""
        original = workspaces_file.read_bytes()

        result = manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        assert result.count == 1
        assert _tab_ids(manager, SOURCE) == ["leaf2"]
        assert _tab_ids(manager, TARGET) == ["leaf1"]
        backups = manager.list_backups()
        assert len(backups) == 1
        assert backups[0].read_bytes() == original

    def test_written_file_keeps_unknown_fields(self, manager, workspaces_file):
        """Fields the engine does not model survive a write."""
        manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        data = json.loads(workspaces_file.read_text(encoding="utf-8"))
        source = data["workspaces"][SOURCE]
        assert source["left"]["width"] == 300
        assert source["main"]["children"][0]["currentTab"] == 1
        assert data["active"] == SOURCE

    def test_copy_is_persisted(self, manager):
        """A copy adds a tab with the same file to the target."""
        manager.copy_tabs(SOURCE, TARGET, ["leaf2"])

        assert _tab_ids(manager, SOURCE) == ["leaf1", "leaf2"]
        assert [tab.file_path for tab in manager.list_tabs(TARGET)] == [
            "notes/file2.md"
        ]

    def test_delete_is_persisted(self, manager):
        """A delete removes the tab from disk."""
        manager.delete_tabs(SOURCE, ["leaf2"])

        assert _tab_ids(manager, SOURCE) == ["leaf1"]

    def test_repeated_move_leaves_file_unchanged(self, manager, workspaces_file):
        """Re-running a completed move transfers nothing and writes nothing."""
        manager.move_tabs(SOURCE, TARGET, ["leaf1"])
        after_first = workspaces_file.read_bytes()

        result = manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        assert result.count == 0
        assert result.missing == ["leaf1"]
        assert workspaces_file.read_bytes() == after_first

    def test_strict_override(self, manager, workspaces_file):
        """strict=True fails without touching the file."""
        original = workspaces_file.read_bytes()

        with pytest.raises(NotFoundError):
            manager.move_tabs(SOURCE, TARGET, ["ghost"], strict=True)

        assert workspaces_file.read_bytes() == original

    def test_unknown_workspace_leaves_file_unchanged(
        self, manager, workspaces_file
    ):
        """A failed lookup inside the transaction rolls back cleanly."""
        original = workspaces_file.read_bytes()

        with pytest.raises(NotFoundError):
            manager.move_tabs(SOURCE, "Nope", ["leaf1"])

        assert workspaces_file.read_bytes() == original


class TestRollback:
    """Tests for recovery when the write fails."""

    def test_failed_write_leaves_document_byte_identical(
        self, manager, workspaces_file, monkeypatch
    ):
        """A write that corrupts the file and fails is fully undone."""
        original = workspaces_file.read_bytes()
        real_write = manager.writer.write_document
        calls = []

        def flaky_write(data):
            calls.append(data)
            if len(calls) == 1:
                workspaces_file.write_bytes(b'{"workspaces": {"half')
                raise IOFailure("disk full")
            real_write(data)

        monkeypatch.setattr(manager.writer, "write_document", flaky_write)

        with pytest.raises(IOFailure, match="disk full"):
            manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        assert len(calls) == 2
        assert workspaces_file.read_bytes() == original

    def test_failed_rollback_is_fatal(self, manager, workspaces_file, monkeypatch):
        """If the restore also fails, RollbackFailure names the backup."""

        def broken_write(data):
            workspaces_file.write_bytes(b"garbage")
            raise IOFailure("disk gone")

        monkeypatch.setattr(manager.writer, "write_document", broken_write)

        with pytest.raises(RollbackFailure) as exc_info:
            manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        assert isinstance(exc_info.value.__cause__, IOFailure)
        assert exc_info.value.backup_path in manager.list_backups()
        assert not manager.transaction.active


class TestRetention:
    """Tests for backup retention across operations."""

    def test_twelve_operations_keep_ten_newest(self, manager):
        """Only the ten most recent backups survive."""
        created = []
        for _ in range(6):
            manager.move_tabs(SOURCE, TARGET, ["leaf1"])
            created.append(manager.list_backups()[0])
            manager.move_tabs(TARGET, SOURCE, ["leaf1"])
            created.append(manager.list_backups()[0])

        backups = manager.list_backups()

        assert len(set(created)) == 12
        assert backups == list(reversed(created))[:10]
        assert not created[0].exists()
        assert not created[1].exists()

    def test_retention_count_is_configurable(self, vault_dir):
        """max_backups controls how many are kept."""
        manager = WorkspaceManager(vault_dir, max_backups=2, check_running=False)

        for _ in range(2):
            manager.copy_tabs(SOURCE, TARGET, ["leaf1"])
        manager.delete_tabs(TARGET, [_tab_ids(manager, TARGET)[0]])

        assert len(manager.list_backups()) == 2


class TestObsidianCheck:
    """Tests for the running-Obsidian guard."""

    def test_refuses_while_running(self, vault_dir, workspaces_file):
        """Writes are refused while Obsidian runs."""
        manager = WorkspaceManager(
            vault_dir, check_running=True, running_check=lambda: True
        )
        original = workspaces_file.read_bytes()

        with pytest.raises(ObsidianRunningError):
            manager.move_tabs(SOURCE, TARGET, ["leaf1"])

        assert workspaces_file.read_bytes() == original
        assert manager.list_backups() == []

    def test_force_writes_anyway(self, vault_dir):
        """force=True writes despite Obsidian running."""
        manager = WorkspaceManager(
            vault_dir, check_running=True, running_check=lambda: True
        )

        result = manager.move_tabs(SOURCE, TARGET, ["leaf1"], force=True)

        assert result.count == 1

    def test_not_running_writes(self, vault_dir):
        """The guard passes when Obsidian is not running."""
        manager = WorkspaceManager(
            vault_dir, check_running=True, running_check=lambda: False
        )

        assert manager.delete_tabs(SOURCE, ["leaf1"]).count == 1


class TestRestore:
    """Tests for restore_backup()."""

    def test_restore_by_name(self, manager, workspaces_file):
        """A backup can be restored by file name."""
        original = workspaces_file.read_bytes()
        manager.move_tabs(SOURCE, TARGET, ["leaf1"])
        backup = manager.list_backups()[0]

        restored = manager.restore_backup(backup.name)

        assert restored == backup
        assert workspaces_file.read_bytes() == original

    def test_restore_backs_up_current_first(self, manager, workspaces_file):
        """The document being replaced is backed up."""
        manager.move_tabs(SOURCE, TARGET, ["leaf1"])
        moved = workspaces_file.read_bytes()

        manager.restore_backup(manager.list_backups()[0])

        assert manager.list_backups()[0].read_bytes() == moved

    def test_restore_missing_backup(self, manager):
        """Restoring an unknown backup raises IOFailure."""
        with pytest.raises(IOFailure):
            manager.restore_backup("workspaces-backup-nope.json")


class TestSharedManagers:
    """Tests for get_manager()/set_manager()."""

    def test_one_manager_per_vault(self, vault_dir):
        """The same vault root gives the same manager."""
        assert get_manager(vault_dir) is get_manager(str(vault_dir))

    def test_set_manager_overrides(self, vault_dir, manager):
        """set_manager installs a manager for its vault."""
        set_manager(manager)

        assert get_manager(vault_dir) is manager

    def test_falls_back_to_env_vault(self, vault_dir, monkeypatch):
        """Without an argument WSM_VAULT is used."""
        monkeypatch.setattr(manager_module, "WSM_VAULT", str(vault_dir))

        assert get_manager().vault.root == Vault(vault_dir).root

    def test_no_vault_configured(self, monkeypatch):
        """Without any vault get_manager raises."""
        monkeypatch.setattr(manager_module, "WSM_VAULT", None)

        with pytest.raises(WorkspaceError, match="No vault configured"):
            get_manager()
