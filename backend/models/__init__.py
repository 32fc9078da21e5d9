"""Domain models for the workspace inventory."""

from backend.models.inventory import Entry, EntryCategory, Snapshot, sort_entries

__all__ = [
    "Entry",
    "EntryCategory",
    "Snapshot",
    "sort_entries",
]
