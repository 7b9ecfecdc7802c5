"""Pydantic models for the desktop auth SDK.

Redirect and token endpoint payloads are parsed into explicit tagged
variants on construction instead of being read ad hoc afterwards.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class AuthenticationParameters(BaseModel):
    """Per-call input to ``PublicClientApplication.acquire_token``.

    ``scopes`` is left unvalidated here; the client checks it before any
    window is opened so each kind of mistake gets its own error.
    """

    model_config = ConfigDict(frozen=True)

    scopes: Any = None
    authority: str | None = None
    prompt: str | None = None
    login_hint: str | None = None


class AuthCodeSuccess(BaseModel):
    """Redirect carrying an authorization code."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["code"] = "code"
    code: str = Field(..., min_length=1)
    state: str | None = None


class AuthCodeError(BaseModel):
    """Redirect carrying a provider error instead of a code."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    error: str = Field(..., min_length=1)
    error_description: str | None = None
    state: str | None = None


AuthCodeResponse = Annotated[
    AuthCodeSuccess | AuthCodeError,
    Field(discriminator="kind"),
]

auth_code_response_adapter: TypeAdapter[AuthCodeResponse] = TypeAdapter(AuthCodeResponse)


class TokenResponse(BaseModel):
    """Successful OAuth 2.0 token endpoint response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["token"] = "token"
    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="Bearer")
    expires_in: int | None = None
    scope: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None

    @property
    def scopes(self) -> list[str]:
        """Get granted scopes as list."""
        if self.scope is None:
            return []
        return self.scope.split()


class TokenErrorResponse(BaseModel):
    """Structured error returned by the token endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["token_error"] = "token_error"
    error: str = Field(..., min_length=1)
    error_description: str | None = None
    error_codes: list[int] | None = None
    correlation_id: str | None = None


TokenEndpointResponse = Annotated[
    TokenResponse | TokenErrorResponse,
    Field(discriminator="kind"),
]

token_endpoint_response_adapter: TypeAdapter[TokenEndpointResponse] = TypeAdapter(
    TokenEndpointResponse
)


class PKCEChallenge(BaseModel):
    """PKCE verifier/challenge pair for one authorization code flow."""

    model_config = ConfigDict(frozen=True)

    code_verifier: str = Field(..., min_length=43, max_length=128)
    code_challenge: str = Field(..., min_length=43)
    code_challenge_method: str = Field(default="S256")

    @field_validator("code_challenge_method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        if v != "S256":
            msg = "Only S256 code_challenge_method is supported"
            raise ValueError(msg)
        return v
