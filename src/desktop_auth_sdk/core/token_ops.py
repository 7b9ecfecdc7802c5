"""Token request building and token endpoint response parsing.

The token request reuses the client ID and redirect URI of the
authorization request; the provider rejects the exchange otherwise.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from ..models import token_endpoint_response_adapter
from .authority import Authority

if TYPE_CHECKING:
    from ..models import TokenEndpointResponse

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class TokenRequestParameters(BaseModel):
    """Authorization code grant request for the token endpoint."""

    model_config = ConfigDict(frozen=True)

    authority: Authority
    client_id: str
    redirect_uri: str
    scopes: tuple[str, ...]
    code: str
    code_verifier: str | None = None
    grant_type: str = "authorization_code"

    @property
    def endpoint(self) -> str:
        return self.authority.token_endpoint

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for the token request."""
        data: dict[str, str] = {
            "grant_type": self.grant_type,
            "code": self.code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "scope": " ".join(self.scopes),
        }
        if self.code_verifier:
            data["code_verifier"] = self.code_verifier
        return data

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": FORM_CONTENT_TYPE,
            "Accept": "application/json",
        }


def _unwrap_error(payload: dict[str, Any]) -> dict[str, Any] | None:
    """Return the error object, unwrapping ``{"error": {"error": ...}}``."""
    error = payload.get("error")
    if isinstance(error, dict):
        return error if error.get("error") else None
    if error:
        return payload
    return None


def parse_token_response(
    status_code: int,
    body: str | bytes,
) -> TokenEndpointResponse:
    """Parse a token endpoint response body.

    Raises:
        json.JSONDecodeError: If the body is not JSON.
        pydantic.ValidationError: If a successful body has no access token.
    """
    payload = json.loads(body)

    if isinstance(payload, dict):
        error = _unwrap_error(payload)
        if error is not None:
            return token_endpoint_response_adapter.validate_python(
                {
                    "kind": "token_error",
                    "error": str(error["error"]),
                    "error_description": error.get("error_description"),
                    "error_codes": error.get("error_codes"),
                    "correlation_id": error.get("correlation_id"),
                }
            )

    if status_code >= 400:
        return token_endpoint_response_adapter.validate_python(
            {
                "kind": "token_error",
                "error": "http_error",
                "error_description": f"Token endpoint returned HTTP {status_code}",
            }
        )

    if isinstance(payload, dict):
        payload = {**payload, "kind": "token"}
    return token_endpoint_response_adapter.validate_python(payload)
