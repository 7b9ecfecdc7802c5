"""Authority resolution for Azure AD style identity providers.

Endpoints are derived from the authority base URL with fixed suffixes.
No discovery or network validation is performed: a malformed authority
surfaces later as a URL or HTTP failure.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field

from ..config import DEFAULT_AUTHORITY

AUTHORIZATION_ENDPOINT_SUFFIX = "/oauth2/v2.0/authorize"
TOKEN_ENDPOINT_SUFFIX = "/oauth2/v2.0/token"


class Authority(BaseModel):
    """Identity provider base URL and the endpoints derived from it."""

    model_config = ConfigDict(frozen=True)

    base_url: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def authorization_endpoint(self) -> str:
        return f"{self.base_url}{AUTHORIZATION_ENDPOINT_SUFFIX}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def token_endpoint(self) -> str:
        return f"{self.base_url}{TOKEN_ENDPOINT_SUFFIX}"

    @classmethod
    def from_url(cls, url: str) -> Authority:
        return cls(base_url=url.strip().rstrip("/"))


def resolve_authority(
    request_authority: str | None,
    default_authority: str | None = None,
) -> Authority:
    """Pick the request override, else the client default, else the common tenant."""
    url = request_authority or default_authority or DEFAULT_AUTHORITY
    return Authority.from_url(url)
