"""Workspace directory scanner: classification and recursive sizing."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from backend.exceptions import WorkspaceUnreadableError
from backend.models.inventory import Entry, EntryCategory, Snapshot, sort_entries
from backend.services.datetime_service import from_timestamp, now_utc

if TYPE_CHECKING:
    from collections.abc import Collection

    from backend.config import ScanRules

logger = logging.getLogger(__name__)


def _list_directory(path: str | Path) -> list[os.DirEntry[str]]:
    """List a directory in name order. Raises OSError when unlistable."""
    with os.scandir(path) as it:
        return sorted(it, key=lambda child: child.name)


def directory_size(path: str | Path, exclusions: Collection[str]) -> int:
    """Sum the sizes of all regular files below ``path``.

    Children named in ``exclusions`` are skipped at every depth. Symlinks are
    not followed. A child that cannot be listed or statted contributes zero.
    """
    total = 0
    pending: list[str | Path] = [path]
    while pending:
        current = pending.pop()
        try:
            children = _list_directory(current)
        except OSError:
            logger.debug("Skipping unreadable directory %s", current, exc_info=True)
            continue
        for child in children:
            if child.name in exclusions:
                continue
            try:
                if child.is_file(follow_symlinks=False):
                    total += child.stat(follow_symlinks=False).st_size
                elif child.is_dir(follow_symlinks=False):
                    pending.append(child.path)
            except OSError:
                logger.debug("Skipping unreadable entry %s", child.path, exc_info=True)
    return total


def has_documentation(path: Path, rules: ScanRules) -> bool:
    """Check for a documentation or manifest marker directly inside ``path``."""
    markers = (*rules.documentation_markers, *rules.manifest_markers)
    return any((path / marker).exists() for marker in markers)


def _classify(child: os.DirEntry[str], rules: ScanRules) -> Entry | None:
    """Turn one top-level child into an entry, or None when it is not listed."""
    location = Path(child.path)
    if child.is_dir(follow_symlinks=False):
        stat = child.stat(follow_symlinks=False)
        return Entry(
            name=child.name,
            location=str(location),
            category=EntryCategory.PROJECT,
            has_documentation=has_documentation(location, rules),
            last_modified_at=from_timestamp(stat.st_mtime),
            size_bytes=directory_size(location, rules.size_exclusions),
        )
    if child.is_file(follow_symlinks=False) and child.name in rules.config_file_names:
        stat = child.stat(follow_symlinks=False)
        return Entry(
            name=child.name,
            location=str(location),
            category=EntryCategory.CONFIG,
            has_documentation=False,
            last_modified_at=from_timestamp(stat.st_mtime),
            size_bytes=stat.st_size,
        )
    return None


def build_snapshot(root_path: str | Path, rules: ScanRules) -> Snapshot:
    """Scan the workspace root and return a sorted inventory snapshot.

    Raises WorkspaceUnreadableError if the root cannot be listed.
    """
    root = Path(os.path.abspath(root_path))
    try:
        children = _list_directory(root)
    except OSError as exc:
        raise WorkspaceUnreadableError(root, exc) from exc

    entries: list[Entry] = []
    for child in children:
        if not rules.admits(child.name):
            continue
        try:
            entry = _classify(child, rules)
        except OSError as exc:
            logger.warning("Skipping workspace entry %s: %s", child.path, exc)
            continue
        if entry is not None:
            entries.append(entry)

    snapshot = Snapshot(entries=sort_entries(entries), generated_at=now_utc(), root_path=root)
    logger.debug("Scanned %s: %d entries", root, len(snapshot.entries))
    return snapshot
