"""Shared test fixtures for the workspace dashboard."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from backend.config import ScanRules, Settings
from backend.main import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters"
TEST_PASSWORD = "dashboard-test-password"


def set_mtime(path: Path, when: datetime) -> None:
    """Pin a path's modification time."""
    stamp = when.timestamp()
    os.utime(path, (stamp, stamp))


@asynccontextmanager
async def create_test_client(settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client for a freshly configured app.

    ASGITransport does not run the lifespan, so startup validation is called
    directly here.
    """
    app = create_app(settings, ScanRules())
    settings.validate_runtime_security()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def login(client: AsyncClient, password: str = TEST_PASSWORD) -> None:
    """Log in; the auth cookie stays in the client's cookie jar."""
    resp = await client.post("/api/auth", json={"password": password})
    assert resp.status_code == 200, resp.text


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Workspace with one documented project and one config file.

    ``alpha`` holds 4096 bytes and is dated 2024-01-02; ``AGENTS.md`` is 300
    bytes and dated 2024-01-03.
    """
    workspace = tmp_path / "workspace"
    workspace.mkdir()

    alpha = workspace / "alpha"
    alpha.mkdir()
    (alpha / "README.md").write_bytes(b"a" * 4096)
    set_mtime(alpha, datetime(2024, 1, 2, tzinfo=UTC))

    agents = workspace / "AGENTS.md"
    agents.write_bytes(b"b" * 300)
    set_mtime(agents, datetime(2024, 1, 3, tzinfo=UTC))

    return workspace


@pytest.fixture
def test_settings(tmp_workspace: Path, tmp_path: Path) -> Settings:
    """Create test settings with temporary paths and no persisted snapshot."""
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET_KEY,
        debug=True,
        dashboard_password=TEST_PASSWORD,
        workspace_path=tmp_workspace,
        snapshot_path=tmp_path / "data" / "workspace.json",
        frontend_dir=tmp_path / "frontend",
        session_service_url="http://sessions.test",
        session_timeout_seconds=0.5,
    )


@pytest.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Unauthenticated test HTTP client."""
    async with create_test_client(test_settings) as ac:
        yield ac


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Test HTTP client holding a valid auth cookie."""
    await login(client)
    return client
