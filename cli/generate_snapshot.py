"""CLI that precomputes the workspace snapshot served by the dashboard."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from backend.config import ScanRules, Settings
from backend.exceptions import WorkspaceUnreadableError
from backend.filesystem.snapshot_store import write_snapshot
from backend.filesystem.workspace_scanner import build_snapshot
from backend.schemas.inventory import PersistedSnapshot, ProjectEntry
from backend.services.session_client import Degraded, fetch_sessions

logger = logging.getLogger(__name__)


async def collect_snapshot(
    settings: Settings,
    rules: ScanRules,
    include_sessions: bool = True,
) -> PersistedSnapshot:
    """Scan the workspace and fetch sessions into one persistable document.

    Raises WorkspaceUnreadableError if the workspace root cannot be listed.
    """
    snapshot = await asyncio.to_thread(build_snapshot, settings.workspace_path, rules)

    sessions: list[dict[str, Any]] = []
    if include_sessions:
        result = await fetch_sessions(settings)
        if isinstance(result, Degraded):
            print(f"Could not fetch sessions: {result.reason}")
        else:
            sessions = result.value

    return PersistedSnapshot(
        projects=[ProjectEntry.from_entry(entry) for entry in snapshot.entries],
        sessions=sessions,
        generated_at=snapshot.generated_at,
        workspace=str(snapshot.root_path),
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Write the workspace dashboard snapshot file",
    )
    parser.add_argument("--workspace", help="Workspace root (default: WORKSPACE_PATH)")
    parser.add_argument("--output", help="Snapshot file (default: SNAPSHOT_PATH)")
    parser.add_argument(
        "--skip-sessions",
        action="store_true",
        help="Do not query the session service",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.workspace:
        overrides["workspace_path"] = Path(args.workspace)
    if args.output:
        overrides["snapshot_path"] = Path(args.output)
    settings = Settings(**overrides)

    try:
        document = asyncio.run(
            collect_snapshot(settings, ScanRules(), include_sessions=not args.skip_sessions)
        )
    except WorkspaceUnreadableError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    write_snapshot(settings.snapshot_path, document)
    project_count = len(document.projects or [])
    session_count = len(document.sessions or [])
    print(
        f"Generated {settings.snapshot_path} with {project_count} projects "
        f"and {session_count} sessions"
    )


if __name__ == "__main__":
    main()
