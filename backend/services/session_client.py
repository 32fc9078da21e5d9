"""Best-effort client for the companion session-listing service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx

if TYPE_CHECKING:
    from backend.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSIONS_ENDPOINT = "/api/sessions"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful fetch."""

    value: T


@dataclass(frozen=True)
class Degraded:
    """A fetch that failed softly; ``reason`` is safe to show to users."""

    reason: str


SessionFetchResult = Ok[list[dict[str, Any]]] | Degraded


def build_sessions_url(settings: Settings) -> str:
    return settings.session_service_url.rstrip("/") + SESSIONS_ENDPOINT


async def fetch_sessions(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionFetchResult:
    """Fetch session metadata once, never raising on transport problems.

    Message bodies are not requested (``messageLimit=0``). The call is bounded
    by ``settings.session_timeout_seconds`` and is not retried.
    """
    url = build_sessions_url(settings)
    params = {"limit": settings.session_limit, "messageLimit": 0}
    headers: dict[str, str] = {}
    if settings.session_service_token:
        headers["Authorization"] = f"Bearer {settings.session_service_token}"

    try:
        async with httpx.AsyncClient(
            timeout=settings.session_timeout_seconds,
            transport=transport,
        ) as http_client:
            resp = await http_client.get(url, params=params, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Session service at %s unreachable: %s", url, exc)
        return Degraded(f"Could not connect to session service: {type(exc).__name__}")

    if resp.status_code != 200:
        logger.warning("Session service at %s returned HTTP %d", url, resp.status_code)
        return Degraded(f"Session service responded with HTTP {resp.status_code}")

    try:
        body = resp.json()
    except ValueError:
        logger.warning("Session service at %s returned a non-JSON body", url)
        return Degraded("Session service returned an invalid response")

    sessions = body.get("sessions") if isinstance(body, dict) else None
    if not isinstance(sessions, list):
        logger.warning("Session service at %s returned no session list", url)
        return Degraded("Session service returned an invalid response")

    records = [record for record in sessions if isinstance(record, dict)]
    if len(records) != len(sessions):
        logger.warning("Dropped %d malformed session records", len(sessions) - len(records))
    return Ok(records)
