"""PKCE (RFC 7636) and state helpers for the public client flow.

A desktop app cannot keep a client secret, so the code exchange is
bound to the window that started it with an S256 challenge.
"""

from __future__ import annotations

import base64
import hashlib
import secrets

from .models import PKCEChallenge

VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def generate_code_verifier(length: int = 64) -> str:
    """Generate a random code verifier of ``length`` URL-safe characters.

    Raises:
        ValueError: If length is outside 43..128.
    """
    if not VERIFIER_MIN_LENGTH <= length <= VERIFIER_MAX_LENGTH:
        msg = (
            f"Code verifier length must be between {VERIFIER_MIN_LENGTH} "
            f"and {VERIFIER_MAX_LENGTH} characters"
        )
        raise ValueError(msg)
    return _b64url(secrets.token_bytes(length))[:length]


def generate_code_challenge(code_verifier: str) -> str:
    """Base64url-encoded SHA-256 of the verifier, without padding."""
    return _b64url(hashlib.sha256(code_verifier.encode("ascii")).digest())


def create_pkce_challenge(verifier_length: int = 64) -> PKCEChallenge:
    verifier = generate_code_verifier(verifier_length)
    return PKCEChallenge(
        code_verifier=verifier,
        code_challenge=generate_code_challenge(verifier),
    )


def generate_state(length: int = 32) -> str:
    """Random opaque value echoed back by the provider on redirect."""
    return secrets.token_urlsafe(length)
