"""Core protocol pieces of the authorization code flow.

Pure builders and parsers with no window or network access; the client
sequences them.
"""

from __future__ import annotations

from .auth_builder import AuthorizationCodeRequestParameters, parse_auth_code_response
from .authority import Authority, resolve_authority
from .errors import ErrorFactory
from .scopes import validate_input_scopes
from .token_ops import TokenRequestParameters, parse_token_response

__all__ = [
    "Authority",
    "AuthorizationCodeRequestParameters",
    "ErrorFactory",
    "TokenRequestParameters",
    "parse_auth_code_response",
    "parse_token_response",
    "resolve_authority",
    "validate_input_scopes",
]
