"""Settings contract for the portal configuration service.

This module provides the Pydantic-validated settings model that carries
logging switches and the distinguished identifiers of the portal
(super user, guest group, makable membership type, default portal).

Direct os.environ/os.getenv usage is allowed ONLY in
load_settings_from_env(). Everything else receives a PortalSettings
instance at construction time.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PortalSettings(BaseModel):
    """Settings for a portal configuration service instance.

    The distinguished identifiers are read once when the service is
    assembled and never change afterwards.

    Environment variables:
        LOG_LEVEL            — logging level
        LOG_JSON             — JSON log output (true/false)
        SERVICE_NAME         — logger name for the hosting service
        PORTAL_SUPER_USER    — identity with visibility over every group
        PORTAL_GUESTS_GROUP  — group whose navigation is never aggregated
        PORTAL_MAKABLE_MT    — membership type allowing navigation creation
        PORTAL_DEFAULT       — fallback default portal name
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the service",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as logger name (e.g. 'portal')",
    )

    # Distinguished identifiers
    super_identity: str = Field(
        default="root",
        description="Identity that sees the navigation of all groups",
    )
    guest_group_id: str = Field(
        default="/platform/guests",
        description="Group excluded from identity-bearing navigation resolution",
    )
    makable_membership_type: str = Field(
        default="*",
        description="Membership type granting navigation creation in a group",
    )
    default_portal: str = Field(
        default="classic",
        description="Default portal name when no template bootstrap provides one",
    )

    @field_validator("super_identity", "makable_membership_type", "default_portal")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Trim identifiers and reject empty values."""
        v = v.strip()
        if not v:
            raise ValueError("Identifier must not be empty")
        return v

    @field_validator("guest_group_id")
    @classmethod
    def validate_group_id(cls, v: str) -> str:
        """Group ids are absolute paths such as /platform/guests."""
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError(f"Group id must start with '/': {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "validate_default": True,
        "extra": "forbid",
        "frozen": True,
    }


def load_settings_from_env() -> PortalSettings:
    """Load portal settings from environment variables.

    This is the ONLY place where os.getenv is allowed for these settings.
    Unset variables fall back to the model defaults.

    Returns:
        PortalSettings instance with values from environment or defaults.
    """
    import os

    values: dict[str, object] = {
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        "service_name": os.getenv("SERVICE_NAME"),
    }

    env_map = {
        "super_identity": "PORTAL_SUPER_USER",
        "guest_group_id": "PORTAL_GUESTS_GROUP",
        "makable_membership_type": "PORTAL_MAKABLE_MT",
        "default_portal": "PORTAL_DEFAULT",
    }
    for field_name, env_name in env_map.items():
        raw = os.getenv(env_name)
        if raw is not None:
            values[field_name] = raw

    return PortalSettings(**values)


__all__ = [
    "LogLevel",
    "PortalSettings",
    "load_settings_from_env",
]
