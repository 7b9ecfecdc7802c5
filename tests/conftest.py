"""
Shared test fixtures for desktop auth SDK tests.

Provides a scriptable fake login window, token endpoint mocking
and common configuration.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx
import pytest

from desktop_auth_sdk.config import AuthOptions, TelemetryConfig, WindowConfig
from desktop_auth_sdk.window import NavigationEvent

REDIRECT_URI = "msal://redirect"
AUTHORITY = "https://login.example.com/tenant"


class FakeWindow:
    """In-memory stand-in for a host login window.

    ``on_load`` receives the navigated URL and returns the redirect the
    provider would send the window to (or None to stay put).
    """

    def __init__(self, on_load: Callable[[str], str | None] | None = None) -> None:
        self.on_load = on_load
        self.loaded: list[str] = []
        self.handlers: list[Callable[[NavigationEvent], None]] = []
        self.navigations: list[NavigationEvent] = []
        self.close_calls = 0
        self.handlers_at_load: int | None = None

    def load_url(self, url: str) -> None:
        self.loaded.append(url)
        self.handlers_at_load = len(self.handlers)
        if self.on_load is not None:
            target = self.on_load(url)
            if target is not None:
                self.navigate(target)

    def navigate(self, url: str) -> NavigationEvent:
        event = NavigationEvent(url)
        for handler in list(self.handlers):
            handler(event)
        self.navigations.append(event)
        return event

    def add_navigation_handler(self, handler: Callable[[NavigationEvent], None]) -> None:
        self.handlers.append(handler)

    def remove_navigation_handler(self, handler: Callable[[NavigationEvent], None]) -> None:
        self.handlers.remove(handler)

    def close(self) -> None:
        self.close_calls += 1


def redirect_with(**params: str) -> Callable[[str], str]:
    """Build an ``on_load`` hook redirecting to REDIRECT_URI with params.

    The state sent in the authorization URL is echoed back unless the
    caller overrides it.
    """

    def on_load(url: str) -> str:
        query = parse_qs(urlsplit(url).query)
        response = dict(params)
        if "state" not in response and "state" in query:
            response["state"] = query["state"][0]
        return f"{REDIRECT_URI}?{urlencode(response)}"

    return on_load


class WindowRecorder:
    """Window factory that keeps every window it opened."""

    def __init__(self, on_load: Callable[[str], str | None] | None = None) -> None:
        self.on_load = on_load
        self.windows: list[FakeWindow] = []
        self.configs: list[WindowConfig] = []

    def __call__(self, config: WindowConfig) -> FakeWindow:
        self.configs.append(config)
        window = FakeWindow(self.on_load)
        self.windows.append(window)
        return window


class TokenEndpoint:
    """httpx mock transport handler recording token requests."""

    def __init__(self, status_code: int = 200, body: Any = None, *, raw: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else {"access_token": "xyz"}
        self.raw = raw
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def form(self) -> dict[str, str]:
        """Form fields of the last request."""
        content = self.requests[-1].content.decode()
        return {k: v[0] for k, v in parse_qs(content).items()}


@pytest.fixture
def options() -> AuthOptions:
    """Basic client options pointing at a test authority."""
    return AuthOptions(
        client_id="test-client-id",
        redirect_uri=REDIRECT_URI,
        authority=AUTHORITY,
        telemetry=TelemetryConfig(enabled=False),
    )


@pytest.fixture
def fake_window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture
def token_endpoint() -> TokenEndpoint:
    return TokenEndpoint()


@pytest.fixture
def make_token_endpoint() -> type[TokenEndpoint]:
    return TokenEndpoint


@pytest.fixture
def make_http_client() -> Callable[[TokenEndpoint], httpx.AsyncClient]:
    def factory(endpoint: TokenEndpoint) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(endpoint))

    return factory


@pytest.fixture
def make_window_recorder() -> type[WindowRecorder]:
    return WindowRecorder


@pytest.fixture
def make_redirect() -> Callable[..., Callable[[str], str]]:
    return redirect_with
