"""Tests for parsing and serializing workspaces.json."""

import json

import pytest

from wsm.core.document import parse_document, read_document, serialize_document
from wsm.core.errors import ValidationError
from wsm.core.types import NodeType, WorkspacesDocument


class TestParseDocument:
    """Tests for parse_document()."""

    def test_parses_workspaces_and_active(self, sample_bytes):
        """Workspaces are keyed by name and active is kept."""
        document = parse_document(sample_bytes)

        assert set(document.workspaces) == {"Source Workspace", "Target Workspace"}
        assert document.active == "Source Workspace"

    def test_parses_node_tree(self, sample_bytes):
        """Node types, children and leaf state are parsed."""
        document = parse_document(sample_bytes)
        main = document.workspaces["Source Workspace"].main

        assert main.type == NodeType.SPLIT
        tabs = main.children[0]
        assert tabs.type == NodeType.TABS
        assert tabs.children[0].state.file == "notes/file1.md"
        assert tabs.children[2].state.file is None

    @pytest.mark.parametrize(
        "content",
        [b"", b"{not json", b"\xff\xfe"],
    )
    def test_rejects_invalid_json(self, content):
        """Unparseable content raises ValidationError."""
        with pytest.raises(ValidationError, match="Invalid JSON"):
            parse_document(content)

    def test_rejects_non_object(self):
        """A JSON array is not a workspaces document."""
        with pytest.raises(ValidationError, match="must be an object"):
            parse_document(b"[1, 2]")

    def test_rejects_layout_without_main(self):
        """Every layout needs a main node."""
        with pytest.raises(ValidationError, match="Malformed"):
            parse_document(b'{"workspaces": {"A": {"active": ""}}, "active": ""}')


class TestSerializeDocument:
    """Tests for serialize_document()."""

    def test_round_trip_is_byte_identical(self, sample_bytes):
        """An untouched document serializes back to the same bytes."""
        assert serialize_document(parse_document(sample_bytes)) == sample_bytes

    def test_preserves_unknown_fields(self, sample_bytes):
        """Sizing keys, sidebars and viewer state survive."""
        data = json.loads(serialize_document(parse_document(sample_bytes)))
        source = data["workspaces"]["Source Workspace"]

        assert source["left"]["width"] == 300
        assert source["main"]["children"][0]["currentTab"] == 1
        leaf = source["main"]["children"][0]["children"][0]
        assert leaf["state"]["state"]["mode"] == "source"

    def test_omits_fields_that_were_absent(self, sample_bytes):
        """Defaults are not written for keys the input lacked."""
        data = json.loads(serialize_document(parse_document(sample_bytes)))
        leaf = data["workspaces"]["Source Workspace"]["main"]["children"][0][
            "children"
        ][0]

        assert "children" not in leaf
        assert "icon" not in leaf["state"]

    def test_keeps_non_ascii_text(self):
        """Non-ASCII titles are written as-is."""
        document = parse_document(
            '{"workspaces": {"Été": {"main": {"id": "m", "type": "split"}}}}'
        )

        assert "Été".encode("utf-8") in serialize_document(document)


class TestReadDocument:
    """Tests for read_document()."""

    def test_missing_file_is_empty_document(self, tmp_path):
        """No workspaces.json yet means no workspaces."""
        document = read_document(tmp_path / "workspaces.json")

        assert document == WorkspacesDocument()
        assert document.workspaces == {}

    def test_reads_existing_file(self, workspaces_file):
        """An existing file is parsed."""
        document = read_document(workspaces_file)

        assert "Target Workspace" in document.workspaces
