"""Parsing and serializing workspaces.json."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from wsm.core.errors import IOFailure, ValidationError
from wsm.core.types import WorkspacesDocument

logger = logging.getLogger(__name__)


def check_json(data: bytes | str) -> object:
    """
    Confirm bytes are well-formed JSON.

    Raises:
        ValidationError: If they do not parse
    """
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON: {e}") from e


def parse_document(data: bytes | str) -> WorkspacesDocument:
    """
    Parse workspaces.json content.

    Args:
        data: Raw file content

    Returns:
        Parsed document

    Raises:
        ValidationError: If the content is not JSON or not a workspaces document
    """
    raw = check_json(data)
    if not isinstance(raw, dict):
        raise ValidationError(
            f"workspaces.json must be an object, got {type(raw).__name__}"
        )
    try:
        return WorkspacesDocument.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed workspaces document: {e}") from e


def serialize_document(document: WorkspacesDocument) -> bytes:
    """Serialize a document the way Obsidian formats it (2-space indent)."""
    payload = document.model_dump(mode="json", exclude_unset=True)
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def read_document(path: Path) -> WorkspacesDocument:
    """
    Load a document from disk.

    A missing file is an empty document: there are no workspaces yet.

    Raises:
        IOFailure: If the file exists but cannot be read
        ValidationError: If it cannot be parsed
    """
    if not path.exists():
        logger.debug(f"No workspaces file at {path}")
        return WorkspacesDocument()
    try:
        data = path.read_bytes()
    except OSError as e:
        raise IOFailure(f"Failed to read {path}: {e}", path=path) from e
    return parse_document(data)
