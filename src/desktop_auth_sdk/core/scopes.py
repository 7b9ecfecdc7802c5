"""Scope validation run before any window or network activity."""

from __future__ import annotations

from typing import Any

from ..errors import ClientConfigurationError


def validate_input_scopes(scopes: Any) -> tuple[str, ...]:
    """Check the scopes of an ``acquire_token`` request.

    Returns the scopes as a tuple; the caller's list is never mutated.

    Raises:
        ClientConfigurationError: If scopes are missing, not a list, empty,
            or contain a non-string / blank entry.
    """
    if not scopes:
        if isinstance(scopes, (list, tuple)):
            raise ClientConfigurationError.create_empty_scopes_array_error(scopes)
        raise ClientConfigurationError.create_scopes_required_error(scopes)

    if not isinstance(scopes, (list, tuple)):
        raise ClientConfigurationError.create_scopes_non_array_error(scopes)

    for entry in scopes:
        if not isinstance(entry, str) or not entry.strip():
            raise ClientConfigurationError.create_invalid_scope_entry_error(entry)

    return tuple(scopes)
