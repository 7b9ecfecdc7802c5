"""Configuration for the desktop auth SDK.

Uses Pydantic v2 frozen models so a client's configuration cannot
change underneath an in-flight login.
"""

from __future__ import annotations

from typing import Annotated, Any, Self
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    field_validator,
)

DEFAULT_AUTHORITY = "https://login.microsoftonline.com/common"
DEFAULT_POPUP_HEIGHT = 600
DEFAULT_POPUP_WIDTH = 483


class WindowConfig(BaseModel):
    """Options passed to the host window factory for the login popup."""

    model_config = ConfigDict(frozen=True)

    height: Annotated[int, Field(gt=0)] = DEFAULT_POPUP_HEIGHT
    width: Annotated[int, Field(gt=0)] = DEFAULT_POPUP_WIDTH
    always_on_top: bool = True
    context_isolation: bool = True
    title: str = "Sign in"


class TelemetryConfig(BaseModel):
    """OpenTelemetry and logging configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "desktop-auth-sdk"
    log_level: str = "INFO"
    # Leave structlog alone unless the host app asks the SDK to own it
    configure_logging: bool = False


class AuthOptions(BaseModel):
    """Static configuration of a public client application."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    client_id: str = Field(..., min_length=1)
    redirect_uri: str = Field(..., min_length=1)

    authority: str = DEFAULT_AUTHORITY

    # Flow behaviour
    use_pkce: bool = True
    interaction_timeout: PositiveFloat | None = None

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0

    # Sub-configurations
    window: WindowConfig = Field(default_factory=WindowConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("redirect_uri")
    @classmethod
    def validate_redirect_uri(cls, v: str) -> str:
        """Redirect URI must use an application-private scheme."""
        scheme = urlsplit(v).scheme.lower()
        if not scheme:
            msg = f"redirect_uri must include a scheme: {v!r}"
            raise ValueError(msg)
        if scheme in {"http", "https"}:
            msg = "redirect_uri must use a custom scheme, not http(s)"
            raise ValueError(msg)
        return v

    @field_validator("authority")
    @classmethod
    def normalize_authority(cls, v: str) -> str:
        return v.rstrip("/") or DEFAULT_AUTHORITY

    @property
    def redirect_scheme(self) -> str:
        """Private URI scheme the auth code listener intercepts."""
        return urlsplit(self.redirect_uri).scheme.lower()

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new options with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "DESKTOP_AUTH_") -> Self:
        """Create options from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        client_id = get_env("CLIENT_ID")
        if not client_id:
            msg = f"{prefix}CLIENT_ID environment variable is required"
            raise ValueError(msg)

        redirect_uri = get_env("REDIRECT_URI")
        if not redirect_uri:
            msg = f"{prefix}REDIRECT_URI environment variable is required"
            raise ValueError(msg)

        interaction_timeout = get_env("INTERACTION_TIMEOUT")

        return cls(
            client_id=client_id,
            redirect_uri=redirect_uri,
            authority=get_env("AUTHORITY", DEFAULT_AUTHORITY),
            timeout=float(get_env("TIMEOUT", "30.0")),
            interaction_timeout=float(interaction_timeout) if interaction_timeout else None,
        )
