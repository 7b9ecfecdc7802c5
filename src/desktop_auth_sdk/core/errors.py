"""Centralized error factory for the desktop auth SDK.

Turns parsed redirect and token endpoint payloads into SDK errors
with consistent codes and details.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from ..errors import (
    AuthCodeResponseError,
    AuthorizationError,
    ErrorCode,
    TokenRequestError,
)

if TYPE_CHECKING:
    from ..models import AuthCodeError, TokenErrorResponse


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def from_auth_code_error(response: AuthCodeError) -> AuthorizationError:
        return AuthorizationError(response.error, response.error_description)

    @staticmethod
    def from_token_error(
        response: TokenErrorResponse,
        *,
        status_code: int | None = None,
    ) -> TokenRequestError:
        """Create token exchange error from a parsed error body.

        Args:
            response: Parsed token endpoint error.
            status_code: HTTP status of the token response.

        Returns:
            TokenRequestError carrying the provider's error code and description.
        """
        error = TokenRequestError(
            response.error,
            response.error_description,
            status_code=status_code,
        )
        if response.error_codes:
            error.details["error_codes"] = response.error_codes
        if response.correlation_id:
            error.details["correlation_id"] = response.correlation_id
        return error

    @staticmethod
    def missing_code(response_url: str) -> AuthCodeResponseError:
        parts = urlsplit(response_url)
        return AuthCodeResponseError(
            f"No authorization code in redirect to {parts.scheme}://{parts.netloc}{parts.path}",
        )

    @staticmethod
    def state_mismatch() -> AuthCodeResponseError:
        return AuthCodeResponseError(
            "State mismatch in authorization response",
            ErrorCode.STATE_MISMATCH,
        )
