"""Atomic replacement of the workspaces file.

Content is written to a temporary file next to the target, read back and
checked to be valid JSON, and only then renamed over the target. Until
the rename the target is untouched; the rename itself is atomic on the
same filesystem.
"""

import logging
import os
import tempfile
from pathlib import Path

from wsm.core.document import check_json
from wsm.core.errors import IOFailure

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Writes whole documents with temp file + rename."""

    def __init__(self, target: Path | str):
        """
        Initialize writer.

        Args:
            target: File to replace
        """
        self.target = Path(target)

    def _write_temp(self, data: bytes) -> Path:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.target.name}.",
            suffix=".tmp",
            dir=self.target.parent,
        )
        temp_path = Path(temp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        return temp_path

    def write_document(self, data: bytes) -> None:
        """
        Replace the target with ``data``.

        Args:
            data: Serialized document

        Raises:
            ValidationError: If the written content does not parse back
            IOFailure: If writing or renaming fails
        """
        temp_path: Path | None = None
        try:
            self.target.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self._write_temp(data)
            check_json(temp_path.read_bytes())
            os.replace(temp_path, self.target)
        except OSError as e:
            self._cleanup(temp_path)
            raise IOFailure(
                f"Failed to write {self.target}: {e}", path=self.target
            ) from e
        except Exception:
            self._cleanup(temp_path)
            raise

        logger.debug(f"Wrote {len(data)} bytes to {self.target}")

    def _cleanup(self, temp_path: Path | None) -> None:
        if temp_path is None:
            return
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {temp_path}: {e}")

    def __repr__(self) -> str:
        return f"AtomicWriter({self.target})"
