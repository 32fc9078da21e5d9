"""Authentication API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from backend.api.deps import get_login_limiter, get_settings
from backend.config import Settings
from backend.schemas.auth import AuthResponse, LoginRequest
from backend.services.auth_service import (
    AUTH_COOKIE_NAME,
    create_auth_token,
    verify_dashboard_password,
)
from backend.services.rate_limit_service import LoginAttemptLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _client_key(request: Request) -> str:
    host = request.client.host if request.client is not None else "unknown"
    return f"login:{host}"


@router.post("", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
    limiter: Annotated[LoginAttemptLimiter, Depends(get_login_limiter)],
) -> AuthResponse:
    """Check the dashboard password and set the auth cookie."""
    key = _client_key(request)
    retry_after = limiter.retry_after(key)
    if retry_after:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many failed login attempts",
            headers={"Retry-After": str(retry_after)},
        )

    if not verify_dashboard_password(body.password, settings.dashboard_password):
        limiter.record_failure(key)
        logger.warning("Failed dashboard login from %s", key)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    limiter.reset(key)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=create_auth_token(settings.secret_key, settings.auth_cookie_max_age_days),
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        path="/",
        max_age=settings.auth_cookie_max_age_days * 24 * 60 * 60,
    )
    return AuthResponse(success=True)


@router.delete("", response_model=AuthResponse)
async def logout(response: Response) -> AuthResponse:
    """Clear the auth cookie."""
    response.delete_cookie(key=AUTH_COOKIE_NAME, path="/")
    return AuthResponse(success=True)
