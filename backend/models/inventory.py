"""Workspace inventory model: entries and immutable snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from pathlib import Path


class EntryCategory(str, Enum):
    """Kind of inventory entry.

    ``MEMORY`` is reserved: snapshots written elsewhere may carry it, but the
    scanner never produces it.
    """

    PROJECT = "project"
    CONFIG = "config"
    MEMORY = "memory"


@dataclass(frozen=True)
class Entry:
    """One top-level workspace item."""

    name: str
    location: str
    category: EntryCategory
    has_documentation: bool
    last_modified_at: datetime
    size_bytes: int


def sort_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Order entries newest first; equal timestamps keep discovery order.

    Timestamps compare at millisecond precision, the precision they are
    published with.
    """
    return tuple(sorted(entries, key=_millisecond_key, reverse=True))


def _millisecond_key(entry: Entry) -> datetime:
    stamp = entry.last_modified_at
    return stamp.replace(microsecond=stamp.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class Snapshot:
    """Result of one workspace scan."""

    entries: tuple[Entry, ...]
    generated_at: datetime
    root_path: Path

    def __post_init__(self) -> None:
        locations = [entry.location for entry in self.entries]
        if len(set(locations)) != len(locations):
            raise ValueError("Snapshot entries must have unique locations")
