"""Projects and sessions endpoints consumed by the dashboard UI."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.api.deps import get_scan_rules, get_settings, require_auth
from backend.config import ScanRules, Settings
from backend.schemas.inventory import (
    ProjectEntry,
    ProjectsErrorResponse,
    ProjectsResponse,
    SessionsResponse,
)
from backend.services.resolution_service import resolve_projects, resolve_sessions

router = APIRouter(tags=["inventory"], dependencies=[Depends(require_auth)])


@router.get(
    "/api/projects",
    response_model=ProjectsResponse,
    response_model_exclude_unset=True,
    responses={500: {"model": ProjectsErrorResponse}},
)
@router.get(
    "/projects-resolution",
    response_model=ProjectsResponse,
    response_model_exclude_unset=True,
    responses={500: {"model": ProjectsErrorResponse}},
)
async def list_projects(
    settings: Annotated[Settings, Depends(get_settings)],
    rules: Annotated[ScanRules, Depends(get_scan_rules)],
) -> ProjectsResponse:
    """List workspace projects and config files, newest first."""
    resolution = await resolve_projects(settings, rules)
    payload: dict[str, Any] = {
        "projects": [ProjectEntry.from_entry(entry) for entry in resolution.value],
        "workspace": resolution.workspace or str(settings.workspace_path),
        "source": resolution.origin.value,
    }
    if resolution.generated_at is not None:
        payload["generated_at"] = resolution.generated_at
    return ProjectsResponse(**payload)


@router.get(
    "/api/sessions",
    response_model=SessionsResponse,
    response_model_exclude_unset=True,
)
@router.get(
    "/sessions-resolution",
    response_model=SessionsResponse,
    response_model_exclude_unset=True,
)
async def list_sessions(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionsResponse:
    """List active agent sessions. Always succeeds; see ``source`` and ``note``."""
    resolution = await resolve_sessions(settings)
    payload: dict[str, Any] = {
        "sessions": resolution.value,
        "count": len(resolution.value),
        "source": resolution.origin.value,
    }
    if resolution.generated_at is not None:
        payload["generated_at"] = resolution.generated_at
    if resolution.note is not None:
        payload["note"] = resolution.note
    return SessionsResponse(**payload)
