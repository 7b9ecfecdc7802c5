"""Authorization request URL builder and redirect response parser.

The URL built here is loaded into the login window; the redirect the
listener captures afterwards is turned back into a code or an error by
``parse_auth_code_response``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from pydantic import BaseModel, ConfigDict

from ..models import auth_code_response_adapter
from .authority import Authority
from .errors import ErrorFactory

if TYPE_CHECKING:
    from ..models import AuthCodeResponse, PKCEChallenge


class AuthorizationCodeRequestParameters(BaseModel):
    """Parameters of one authorization request, serialized into a URL."""

    model_config = ConfigDict(frozen=True)

    authority: Authority
    client_id: str
    redirect_uri: str
    scopes: tuple[str, ...]
    response_type: str = "code"
    response_mode: str = "query"
    state: str | None = None
    code_challenge: str | None = None
    code_challenge_method: str | None = None
    prompt: str | None = None
    login_hint: str | None = None

    @property
    def scope(self) -> str:
        return " ".join(self.scopes)

    def to_query_params(self) -> dict[str, str]:
        """Convert to URL query parameters."""
        params: dict[str, str] = {
            "response_type": self.response_type,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "response_mode": self.response_mode,
        }
        if self.state:
            params["state"] = self.state
        if self.code_challenge:
            params["code_challenge"] = self.code_challenge
            params["code_challenge_method"] = self.code_challenge_method or "S256"
        if self.prompt:
            params["prompt"] = self.prompt
        if self.login_hint:
            params["login_hint"] = self.login_hint
        return params

    def build_request_url(self) -> str:
        query = urlencode(self.to_query_params(), quote_via=quote)
        return f"{self.authority.authorization_endpoint}?{query}"

    @classmethod
    def create(
        cls,
        authority: Authority,
        client_id: str,
        redirect_uri: str,
        scopes: tuple[str, ...],
        *,
        state: str | None = None,
        pkce: PKCEChallenge | None = None,
        prompt: str | None = None,
        login_hint: str | None = None,
    ) -> AuthorizationCodeRequestParameters:
        return cls(
            authority=authority,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=tuple(scopes),
            state=state,
            code_challenge=pkce.code_challenge if pkce else None,
            code_challenge_method=pkce.code_challenge_method if pkce else None,
            prompt=prompt,
            login_hint=login_hint,
        )


def _first(params: dict[str, list[str]], key: str) -> str | None:
    values = params.get(key)
    return values[0] if values else None


def parse_auth_code_response(
    response_url: str,
    *,
    expected_state: str | None = None,
) -> AuthCodeResponse:
    """Parse the redirect URL captured by the listener.

    The state is checked first, so a forged error redirect is reported as
    a state mismatch. ``error`` takes precedence over ``code``. The
    fragment is consulted only when the query string is empty.

    Raises:
        AuthCodeResponseError: If neither a code nor an error is present,
            or the returned state does not match ``expected_state``.
    """
    parts = urlsplit(response_url)
    params = parse_qs(parts.query or parts.fragment, keep_blank_values=True)

    state = _first(params, "state")
    if expected_state is not None and state != expected_state:
        raise ErrorFactory.state_mismatch()

    error = _first(params, "error")
    if error:
        return auth_code_response_adapter.validate_python(
            {
                "kind": "error",
                "error": error,
                "error_description": _first(params, "error_description") or None,
                "state": state,
            }
        )

    code = _first(params, "code")
    if not code:
        raise ErrorFactory.missing_code(response_url)

    return auth_code_response_adapter.validate_python(
        {"kind": "code", "code": code, "state": state}
    )
