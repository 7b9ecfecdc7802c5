"""Error classes for the desktop auth SDK.

Structured error hierarchy with error codes so callers can tell
configuration mistakes (fixable before any I/O) apart from provider
errors that are only knowable after the user interacts with the window.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the desktop auth SDK."""

    # Configuration errors (1xxx)
    SCOPES_REQUIRED = "CFG_1001"
    SCOPES_NON_ARRAY = "CFG_1002"
    EMPTY_SCOPES = "CFG_1003"
    INVALID_SCOPE_ENTRY = "CFG_1004"
    INVALID_CONFIG = "CFG_1005"

    # Authorization (redirect) errors (2xxx)
    AUTHORIZATION_DENIED = "AUTHZ_2001"
    INVALID_AUTH_CODE_RESPONSE = "AUTHZ_2002"
    STATE_MISMATCH = "AUTHZ_2003"

    # Token exchange errors (3xxx)
    TOKEN_REQUEST_FAILED = "TOKEN_3001"

    # Interaction errors (4xxx)
    INTERACTION_TIMEOUT = "UI_4001"
    LISTENER_STATE = "UI_4002"


class DesktopAuthError(Exception):
    """Base error for the desktop auth SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ClientConfigurationError(DesktopAuthError):
    """Caller supplied an invalid request or client configuration."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_CONFIG,
        *,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, code, details=details)
        self.field = field

    @classmethod
    def create_scopes_required_error(cls, scopes: Any) -> ClientConfigurationError:
        return cls(
            f"Scopes are required to obtain an access token. Given value: {scopes!r}",
            ErrorCode.SCOPES_REQUIRED,
            field="scopes",
            value=scopes,
        )

    @classmethod
    def create_scopes_non_array_error(cls, scopes: Any) -> ClientConfigurationError:
        return cls(
            f"Scopes must be passed as a list of strings. Given value: {scopes!r}",
            ErrorCode.SCOPES_NON_ARRAY,
            field="scopes",
            value=scopes,
        )

    @classmethod
    def create_empty_scopes_array_error(cls, scopes: Any) -> ClientConfigurationError:
        return cls(
            f"Scopes cannot be an empty list. Given value: {scopes!r}",
            ErrorCode.EMPTY_SCOPES,
            field="scopes",
            value=scopes,
        )

    @classmethod
    def create_invalid_scope_entry_error(cls, entry: Any) -> ClientConfigurationError:
        return cls(
            f"Each scope must be a non-blank string. Given entry: {entry!r}",
            ErrorCode.INVALID_SCOPE_ENTRY,
            field="scopes",
            value=entry,
        )


class AuthorizationError(DesktopAuthError):
    """The identity provider redirected back with an error (e.g. access_denied)."""

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
    ) -> None:
        message = f"Authorization error: {error}"
        if error_description:
            message += f" - {error_description}"
        super().__init__(
            message,
            ErrorCode.AUTHORIZATION_DENIED,
            details={"error": error, "error_description": error_description},
        )
        self.error = error
        self.error_description = error_description


class AuthCodeResponseError(DesktopAuthError):
    """The redirect could not be interpreted as an authorization response."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_AUTH_CODE_RESPONSE,
    ) -> None:
        super().__init__(message, code)


class TokenRequestError(DesktopAuthError):
    """The token endpoint rejected the authorization code exchange."""

    def __init__(
        self,
        error: str,
        error_description: str | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        message = f"Token request failed: {error}"
        if error_description:
            message += f" - {error_description}"
        super().__init__(
            message,
            ErrorCode.TOKEN_REQUEST_FAILED,
            details={
                "error": error,
                "error_description": error_description,
                "status_code": status_code,
            },
        )
        self.error = error
        self.error_description = error_description
        self.status_code = status_code


class InteractionTimeoutError(DesktopAuthError):
    """The user did not complete the login within the configured timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"No redirect received within {timeout_seconds} seconds",
            ErrorCode.INTERACTION_TIMEOUT,
            details={"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds


class ListenerStateError(DesktopAuthError):
    """Auth code listener used outside its start/close lifecycle."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.LISTENER_STATE)
