"""Application-level exception types.

Convention:
- ``WorkspaceUnreadableError`` is the only failure allowed to reach the
  projects panel. The global handler in ``backend/main.py`` turns it into a
  500 carrying the underlying message and an empty project list.
- Everything below the workspace root (unreadable subtrees, corrupt persisted
  snapshots, an unreachable session service) is recovered where it happens
  and never raised to API callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class WorkspaceUnreadableError(Exception):
    """Raised when the workspace root itself cannot be listed."""

    def __init__(self, root_path: Path, reason: BaseException) -> None:
        self.root_path = root_path
        self.reason = reason
        super().__init__(f"Workspace root {root_path} is unreadable: {reason}")
