"""Persisted snapshot file: whole-file reads and atomic writes."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import TYPE_CHECKING

from pydantic import ValidationError

from backend.schemas.inventory import PersistedSnapshot

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_persisted_snapshot(snapshot_path: Path) -> PersistedSnapshot | None:
    """Read and parse the persisted snapshot.

    Returns None when the file is absent, unreadable or corrupt; callers fall
    back to live data in every one of those cases.
    """
    try:
        raw = snapshot_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No persisted snapshot at %s", snapshot_path)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read persisted snapshot %s: %s", snapshot_path, exc)
        return None

    try:
        return PersistedSnapshot.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning(
            "Persisted snapshot %s is corrupt, using live data: %d error(s)",
            snapshot_path,
            exc.error_count(),
        )
        return None


def write_snapshot(snapshot_path: Path, document: PersistedSnapshot) -> None:
    """Write the snapshot so that readers never observe a partial file."""
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    payload = document.model_dump_json(by_alias=True, indent=2)
    fd, tmp_name = tempfile.mkstemp(
        dir=snapshot_path.parent, prefix=f".{snapshot_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.write("\n")
        os.replace(tmp_name, snapshot_path)
    except BaseException:
        os.unlink(tmp_name)
        raise
