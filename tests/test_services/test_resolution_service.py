"""Tests for persisted-versus-live inventory resolution."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import httpx
import pytest

from backend.config import ScanRules
from backend.exceptions import WorkspaceUnreadableError
from backend.filesystem.workspace_scanner import build_snapshot
from backend.schemas.inventory import PersistedSnapshot
from backend.services.resolution_service import (
    Origin,
    Resolution,
    resolve_projects,
    resolve_sessions,
    resolve_with_fallback,
)

if TYPE_CHECKING:
    from pathlib import Path

    from backend.config import Settings

PERSISTED = {
    "projects": [
        {
            "name": "beta",
            "path": "/elsewhere/beta",
            "type": "project",
            "hasReadme": False,
            "lastModified": "2023-06-01T00:00:00.000Z",
            "size": 1,
        }
    ],
    "sessions": [{"key": "k1", "channel": "discord", "updatedAt": 1, "sessionId": "s1"}],
    "generatedAt": "2024-02-01T00:00:00.000Z",
    "workspace": "/elsewhere",
}


def _write_snapshot(settings: Settings, data: object) -> None:
    settings.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    settings.snapshot_path.write_text(json.dumps(data))


class TestResolveWithFallback:
    async def test_persisted_value_wins(self) -> None:
        snapshot = PersistedSnapshot.model_validate(PERSISTED)
        live = AsyncMock()

        result = await resolve_with_fallback(
            AsyncMock(return_value=snapshot), lambda s: s.sessions, live
        )

        assert result.origin is Origin.PERSISTED
        assert result.value == PERSISTED["sessions"]
        assert result.workspace == "/elsewhere"
        assert result.generated_at == datetime(2024, 2, 1, tzinfo=UTC)
        live.assert_not_awaited()

    async def test_missing_snapshot_runs_live(self) -> None:
        live_result = Resolution(value=[1, 2], origin=Origin.LIVE)
        live = AsyncMock(return_value=live_result)

        result = await resolve_with_fallback(AsyncMock(return_value=None), lambda s: [0], live)

        assert result is live_result
        live.assert_awaited_once()

    async def test_missing_field_runs_live(self) -> None:
        snapshot = PersistedSnapshot.model_validate({"workspace": "/ws"})
        live_result = Resolution(value=["live"], origin=Origin.LIVE)

        result = await resolve_with_fallback(
            AsyncMock(return_value=snapshot),
            lambda s: s.sessions,
            AsyncMock(return_value=live_result),
        )

        assert result is live_result

    async def test_empty_persisted_list_is_still_persisted(self) -> None:
        snapshot = PersistedSnapshot.model_validate({"workspace": "/ws", "sessions": []})

        result = await resolve_with_fallback(
            AsyncMock(return_value=snapshot), lambda s: s.sessions, AsyncMock()
        )

        assert result.origin is Origin.PERSISTED
        assert result.value == []


class TestResolveProjects:
    async def test_live_when_no_snapshot(self, test_settings: Settings) -> None:
        rules = ScanRules()

        result = await resolve_projects(test_settings, rules)

        assert result.origin is Origin.LIVE
        assert result.generated_at is None
        assert result.workspace == str(test_settings.workspace_path)
        expected = build_snapshot(test_settings.workspace_path, rules)
        assert result.value == list(expected.entries)

    async def test_persisted_snapshot_served(self, test_settings: Settings) -> None:
        _write_snapshot(test_settings, PERSISTED)

        result = await resolve_projects(test_settings, ScanRules())

        assert result.origin is Origin.PERSISTED
        assert [e.name for e in result.value] == ["beta"]
        assert result.workspace == "/elsewhere"
        assert result.generated_at == datetime(2024, 2, 1, tzinfo=UTC)

    async def test_corrupt_snapshot_falls_back_to_live(self, test_settings: Settings) -> None:
        test_settings.snapshot_path.parent.mkdir(parents=True)
        test_settings.snapshot_path.write_text("not json at all")

        result = await resolve_projects(test_settings, ScanRules())

        assert result.origin is Origin.LIVE
        assert [e.name for e in result.value] == ["AGENTS.md", "alpha"]

    async def test_snapshot_without_projects_falls_back_to_live(
        self, test_settings: Settings
    ) -> None:
        _write_snapshot(test_settings, {"workspace": "/elsewhere", "sessions": []})

        result = await resolve_projects(test_settings, ScanRules())

        assert result.origin is Origin.LIVE

    async def test_unreadable_workspace_raises(
        self, test_settings: Settings, tmp_path: Path
    ) -> None:
        settings = test_settings.model_copy(update={"workspace_path": tmp_path / "missing"})

        with pytest.raises(WorkspaceUnreadableError):
            await resolve_projects(settings, ScanRules())

    async def test_malformed_session_record_keeps_persisted_projects(
        self, test_settings: Settings, tmp_path: Path
    ) -> None:
        settings = test_settings.model_copy(update={"workspace_path": tmp_path / "missing"})
        _write_snapshot(settings, {**PERSISTED, "sessions": [None, *PERSISTED["sessions"]]})

        result = await resolve_projects(settings, ScanRules())

        assert result.origin is Origin.PERSISTED
        assert [e.name for e in result.value] == ["beta"]

    async def test_persisted_snapshot_hides_unreadable_workspace(
        self, test_settings: Settings, tmp_path: Path
    ) -> None:
        settings = test_settings.model_copy(update={"workspace_path": tmp_path / "missing"})
        _write_snapshot(settings, PERSISTED)

        result = await resolve_projects(settings, ScanRules())

        assert result.origin is Origin.PERSISTED


class TestResolveSessions:
    async def test_persisted_sessions_served(self, test_settings: Settings) -> None:
        _write_snapshot(test_settings, PERSISTED)

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("session service must not be called")

        result = await resolve_sessions(test_settings, transport=httpx.MockTransport(handler))

        assert result.origin is Origin.PERSISTED
        assert result.value == PERSISTED["sessions"]

    async def test_malformed_persisted_records_dropped(
        self, test_settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        sessions = [None, "x", *PERSISTED["sessions"]]
        _write_snapshot(test_settings, {**PERSISTED, "sessions": sessions})

        result = await resolve_sessions(test_settings)

        assert result.origin is Origin.PERSISTED
        assert result.value == PERSISTED["sessions"]
        assert "Dropped 2 malformed" in caplog.text

    async def test_live_sessions(self, test_settings: Settings) -> None:
        sessions = [{"key": "k", "channel": "web", "updatedAt": 5, "sessionId": "x"}]
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"sessions": sessions})
        )

        result = await resolve_sessions(test_settings, transport=transport)

        assert result.origin is Origin.LIVE
        assert result.value == sessions
        assert result.note is None

    async def test_timeout_yields_unavailable(self, test_settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = await resolve_sessions(test_settings, transport=httpx.MockTransport(handler))

        assert result.origin is Origin.UNAVAILABLE
        assert result.value == []
        assert result.note
