"""Inventory resolution: persisted snapshot first, live data otherwise.

Both dashboard panels follow the same policy through ``resolve_with_fallback``:

1. Read the persisted snapshot (whole file, parsed and discarded per call).
2. If it parses and carries the field of interest, serve that field tagged
   ``Origin.PERSISTED`` together with the snapshot's ``generatedAt``.
3. Otherwise run the live computation, which tags its own origin.

Nothing is cached between calls.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from backend.filesystem.snapshot_store import load_persisted_snapshot
from backend.filesystem.workspace_scanner import build_snapshot
from backend.services.session_client import Degraded, fetch_sessions

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime

    import httpx

    from backend.config import ScanRules, Settings
    from backend.models.inventory import Entry
    from backend.schemas.inventory import PersistedSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Origin(str, Enum):
    """Where a resolved value came from; values are the wire ``source`` labels."""

    PERSISTED = "static"
    LIVE = "live"
    UNAVAILABLE = "fallback"


@dataclass(frozen=True)
class Resolution(Generic[T]):
    value: T
    origin: Origin
    workspace: str | None = None
    generated_at: datetime | None = None
    note: str | None = None


async def resolve_with_fallback(
    load_persisted: Callable[[], Awaitable[PersistedSnapshot | None]],
    select: Callable[[PersistedSnapshot], T | None],
    compute_live: Callable[[], Awaitable[Resolution[T]]],
) -> Resolution[T]:
    """Serve ``select(snapshot)`` from the persisted snapshot, else compute live."""
    snapshot = await load_persisted()
    if snapshot is not None:
        value = select(snapshot)
        if value is not None:
            return Resolution(
                value=value,
                origin=Origin.PERSISTED,
                workspace=snapshot.workspace,
                generated_at=snapshot.generated_at,
            )
    return await compute_live()


def _persisted_loader(settings: Settings) -> Callable[[], Awaitable[PersistedSnapshot | None]]:
    async def load() -> PersistedSnapshot | None:
        return await asyncio.to_thread(load_persisted_snapshot, settings.snapshot_path)

    return load


def _select_projects(snapshot: PersistedSnapshot) -> list[Entry] | None:
    if snapshot.projects is None:
        return None
    return [project.to_entry() for project in snapshot.projects]


def _select_sessions(snapshot: PersistedSnapshot) -> list[dict[str, Any]] | None:
    if snapshot.sessions is None:
        return None
    records = [record for record in snapshot.sessions if isinstance(record, dict)]
    if len(records) != len(snapshot.sessions):
        logger.warning(
            "Dropped %d malformed persisted session records",
            len(snapshot.sessions) - len(records),
        )
    return records


async def resolve_projects(settings: Settings, rules: ScanRules) -> Resolution[list[Entry]]:
    """Resolve the project inventory.

    Raises WorkspaceUnreadableError when no persisted projects exist and the
    workspace root cannot be listed.
    """

    async def scan_live() -> Resolution[list[Entry]]:
        snapshot = await asyncio.to_thread(build_snapshot, settings.workspace_path, rules)
        return Resolution(
            value=list(snapshot.entries),
            origin=Origin.LIVE,
            workspace=str(snapshot.root_path),
        )

    return await resolve_with_fallback(_persisted_loader(settings), _select_projects, scan_live)


async def resolve_sessions(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Resolution[list[dict[str, Any]]]:
    """Resolve the session list. Network problems yield ``Origin.UNAVAILABLE``."""

    async def query_live() -> Resolution[list[dict[str, Any]]]:
        result = await fetch_sessions(settings, transport=transport)
        if isinstance(result, Degraded):
            return Resolution(value=[], origin=Origin.UNAVAILABLE, note=result.reason)
        return Resolution(value=result.value, origin=Origin.LIVE)

    return await resolve_with_fallback(_persisted_loader(settings), _select_sessions, query_live)
