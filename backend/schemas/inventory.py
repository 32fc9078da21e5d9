"""Inventory wire schemas shared by the API and the persisted snapshot file."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from backend.models.inventory import Entry, EntryCategory
from backend.services.datetime_service import format_iso, parse_datetime


class TimestampedModel(BaseModel):
    """Base for payloads carrying an optional ``generatedAt`` timestamp."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime | None = Field(default=None, alias="generatedAt")

    @field_validator("generated_at", mode="before")
    @classmethod
    def parse_generated_at(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_datetime(value)
        return value

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime | None) -> str | None:
        return format_iso(value) if value is not None else None


class ProjectEntry(BaseModel):
    """Serialized form of one inventory entry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    type: EntryCategory
    has_readme: bool = Field(alias="hasReadme")
    last_modified: datetime = Field(alias="lastModified")
    size: int = Field(ge=0)

    @field_validator("last_modified", mode="before")
    @classmethod
    def parse_last_modified(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_datetime(value)
        return value

    @field_serializer("last_modified")
    def serialize_last_modified(self, value: datetime) -> str:
        return format_iso(value)

    @classmethod
    def from_entry(cls, entry: Entry) -> ProjectEntry:
        return cls(
            name=entry.name,
            path=entry.location,
            type=entry.category,
            has_readme=entry.has_documentation,
            last_modified=entry.last_modified_at,
            size=entry.size_bytes,
        )

    def to_entry(self) -> Entry:
        return Entry(
            name=self.name,
            location=self.path,
            category=self.type,
            has_documentation=self.has_readme,
            last_modified_at=self.last_modified,
            size_bytes=self.size,
        )


class PersistedSnapshot(TimestampedModel):
    """On-disk snapshot written by ``workdash-snapshot``.

    ``projects`` and ``sessions`` are optional so that each read path can fall
    back to live data independently when its field is missing.
    """

    projects: list[ProjectEntry] | None = None
    # Records stay opaque here; malformed ones are dropped when served.
    sessions: list[Any] | None = None
    workspace: str


class ProjectsResponse(TimestampedModel):
    """Projects panel payload."""

    projects: list[ProjectEntry]
    workspace: str
    source: Literal["static", "live"]


class SessionsResponse(TimestampedModel):
    """Sessions panel payload. Session records pass through unchanged."""

    sessions: list[dict[str, Any]]
    count: int = Field(ge=0)
    source: Literal["static", "live", "fallback"]
    note: str | None = None


class ProjectsErrorResponse(BaseModel):
    """Returned with status 500 when the workspace root is unreadable."""

    error: str
    projects: list[ProjectEntry] = Field(default_factory=list)
