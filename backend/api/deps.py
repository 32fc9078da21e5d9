"""Shared API dependencies: settings, scan rules, auth."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from backend.config import ScanRules, Settings
from backend.services.auth_service import AUTH_COOKIE_NAME, is_valid_auth_token
from backend.services.rate_limit_service import LoginAttemptLimiter


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_scan_rules(request: Request) -> ScanRules:
    """Get workspace scan rules from app state."""
    rules: ScanRules = request.app.state.scan_rules
    return rules


def get_login_limiter(request: Request) -> LoginAttemptLimiter:
    limiter: LoginAttemptLimiter = request.app.state.login_limiter
    return limiter


def is_authenticated(request: Request, settings: Settings) -> bool:
    return is_valid_auth_token(request.cookies.get(AUTH_COOKIE_NAME), settings.secret_key)


async def require_auth(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Require a valid auth cookie. Raises 401 otherwise."""
    if not is_authenticated(request, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
