"""Property-based tests for the token exchange payloads.

Property 4: Token Request Mirrors Authorization Request
- client_id and redirect_uri in the form equal the configured values
- grant_type is always authorization_code

Property 5: Token Response Parsing
- Any body with an access token parses to that token
- Any body with an error field parses to the error variant
"""

from __future__ import annotations

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from desktop_auth_sdk.core.authority import Authority
from desktop_auth_sdk.core.token_ops import TokenRequestParameters, parse_token_response
from desktop_auth_sdk.models import TokenErrorResponse, TokenResponse

text_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="-_.~"),
    min_size=1,
    max_size=64,
)

scopes_strategy = st.lists(text_strategy, min_size=1, max_size=5)


class TestTokenRequestMirroring:
    """Property tests for the token request body."""

    @given(
        client_id=text_strategy,
        scheme=st.sampled_from(["msal", "myapp", "com.example.app"]),
        code=text_strategy,
        scopes=scopes_strategy,
    )
    @settings(max_examples=100)
    def test_form_mirrors_inputs(
        self,
        client_id: str,
        scheme: str,
        code: str,
        scopes: list[str],
    ) -> None:
        """Property: Form data carries exactly the configured identifiers."""
        redirect_uri = f"{scheme}://redirect"
        request = TokenRequestParameters(
            authority=Authority.from_url("https://login.example.com/tenant"),
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=tuple(scopes),
            code=code,
        )

        data = request.to_form_data()

        assert data["grant_type"] == "authorization_code"
        assert data["client_id"] == client_id
        assert data["redirect_uri"] == redirect_uri
        assert data["code"] == code
        assert data["scope"].split(" ") == scopes


class TestTokenResponseParsing:
    """Property tests for token endpoint bodies."""

    @given(
        token=text_strategy,
        expires_in=st.integers(min_value=1, max_value=86400),
        status=st.sampled_from([200, 201]),
    )
    @settings(max_examples=100)
    def test_access_token_parsed(self, token: str, expires_in: int, status: int) -> None:
        """Property: A success body yields its access token."""
        body = json.dumps({"access_token": token, "expires_in": expires_in})

        parsed = parse_token_response(status, body)

        assert isinstance(parsed, TokenResponse)
        assert parsed.access_token == token

    @given(
        error=text_strategy,
        description=st.one_of(st.none(), st.text(min_size=1, max_size=100)),
        status=st.sampled_from([200, 400, 401, 500]),
        nested=st.booleans(),
    )
    @settings(max_examples=100)
    def test_error_parsed(
        self,
        error: str,
        description: str | None,
        status: int,
        nested: bool,
    ) -> None:
        """Property: An error body yields both error fields, wrapped or not."""
        payload = {"error": error, "error_description": description}
        body = json.dumps({"error": payload} if nested else payload)

        parsed = parse_token_response(status, body)

        assert isinstance(parsed, TokenErrorResponse)
        assert parsed.error == error
        assert parsed.error_description == description
