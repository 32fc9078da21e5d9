"""Health check endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_settings
from backend.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str
    version: str
    workspace: str
    snapshot: str


@router.get("/api/health", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    workspace_status = "ok" if settings.workspace_path.is_dir() else "unreadable"
    snapshot_status = "present" if settings.snapshot_path.is_file() else "absent"
    if workspace_status != "ok":
        logger.warning("Health check: workspace %s is not a directory", settings.workspace_path)

    return HealthResponse(
        # A persisted snapshot still serves projects when the workspace is gone.
        status="ok" if workspace_status == "ok" or snapshot_status == "present" else "degraded",
        version=VERSION,
        workspace=workspace_status,
        snapshot=snapshot_status,
    )
