"""Application configuration loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VCS_DIR_NAME = ".git"

DEFAULT_CONFIG_FILE_NAMES = frozenset(
    {
        "AGENTS.md",
        "SOUL.md",
        "USER.md",
        "MEMORY.md",
        "TOOLS.md",
        "HEARTBEAT.md",
        "IDENTITY.md",
    }
)
DEFAULT_SKIP_NAMES = frozenset(
    {".git", "node_modules", ".next", "security", "secrets", "backups", ".vercel"}
)
# Narrower than DEFAULT_SKIP_NAMES and tuned separately.
DEFAULT_SIZE_EXCLUSIONS = frozenset({"node_modules", ".git"})
DEFAULT_DOCUMENTATION_MARKERS = ("README.md", "PLAN.md")
DEFAULT_MANIFEST_MARKERS = ("package.json",)


@dataclass(frozen=True)
class ScanRules:
    """Fixed classification rules for workspace scans.

    Built once in ``create_app`` and shared by the snapshot builder, the
    resolver and the snapshot CLI so the name lists never drift apart.
    """

    config_file_names: frozenset[str] = DEFAULT_CONFIG_FILE_NAMES
    skip_names: frozenset[str] = DEFAULT_SKIP_NAMES
    size_exclusions: frozenset[str] = DEFAULT_SIZE_EXCLUSIONS
    documentation_markers: tuple[str, ...] = DEFAULT_DOCUMENTATION_MARKERS
    manifest_markers: tuple[str, ...] = DEFAULT_MANIFEST_MARKERS

    def admits(self, name: str) -> bool:
        """Return True when a top-level entry name takes part in the scan.

        The hidden-name rule runs before the skip list, so ``.git`` passes the
        first check and is then dropped by the second.
        """
        if name.startswith(".") and name != VCS_DIR_NAME:
            return False
        return name not in self.skip_names


class Settings(BaseSettings):
    """Workspace dashboard settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    secret_key: str = "change-me-in-production"
    debug: bool = False
    expose_docs: bool = False

    # Workspace
    workspace_path: Path = Path("./workspace")
    snapshot_path: Path = Path("./public/data/workspace.json")
    frontend_dir: Path = Path("./frontend/dist")

    # Session service
    session_service_url: str = Field(
        default="http://localhost:8024",
        validation_alias=AliasChoices("session_service_url", "moltbot_url"),
    )
    session_service_token: str = Field(
        default="",
        validation_alias=AliasChoices("session_service_token", "moltbot_token"),
    )
    session_limit: int = Field(default=50, ge=1, le=1000)
    session_timeout_seconds: float = Field(default=10.0, gt=0)

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    # CORS
    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=list)

    # Auth
    dashboard_password: str = "change-me"
    auth_cookie_max_age_days: int = Field(default=7, ge=1)
    auth_login_max_failures: int = Field(default=5, ge=1)
    auth_rate_limit_window_seconds: int = Field(default=300, ge=1)

    # Response hardening
    security_headers_enabled: bool = True
    content_security_policy: str = (
        "default-src 'self'; "
        "script-src 'self'; "
        "style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data:; "
        "connect-src 'self'; "
        "base-uri 'self'; "
        "form-action 'self'; "
        "frame-ancestors 'none'"
    )

    def validate_runtime_security(self) -> None:
        """Validate security-critical production settings."""
        if self.debug:
            return

        violations: list[str] = []
        if self.secret_key == "change-me-in-production" or len(self.secret_key) < 32:
            violations.append(
                "SECRET_KEY must be overridden with a high-entropy value (>=32 chars)"
            )
        if self.dashboard_password == "change-me" or len(self.dashboard_password) < 8:
            violations.append("DASHBOARD_PASSWORD must be overridden with a strong value (>=8 chars)")

        if violations:
            joined = "; ".join(violations)
            raise ValueError(f"Insecure production configuration: {joined}")
