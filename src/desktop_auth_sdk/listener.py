"""Auth code listeners intercepting the redirect to the app's private scheme.

The redirect URI has no live server behind it. The listener cancels the
window's navigation to it and hands the URL to the awaiting flow.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from .errors import ListenerStateError
from .telemetry import get_logger

if TYPE_CHECKING:
    from .window import AuthWindow, NavigationEvent


class AuthCodeListener(ABC):
    """Arms/disarms redirect interception for one login flow."""

    @abstractmethod
    def start(self) -> None:
        """Arm interception. Must run before the window navigates."""

    @abstractmethod
    def close(self) -> None:
        """Disarm interception and release the window hook."""

    @abstractmethod
    async def wait_for_redirect(self) -> str:
        """Wait for the intercepted redirect URL."""


class CustomSchemeListener(AuthCodeListener):
    """Intercepts navigations to ``<scheme>://`` on a single window.

    The first matching navigation wins; later ones are still cancelled
    but not delivered. Handlers may fire on a UI thread, so delivery to
    the event loop goes through ``call_soon_threadsafe``.
    """

    def __init__(self, scheme: str, window: AuthWindow) -> None:
        scheme = scheme.lower().split(":", 1)[0]
        if not scheme:
            raise ValueError("scheme must not be empty")
        self.scheme = scheme
        self._window = window
        self._handler = self._on_navigation
        self._loop: asyncio.AbstractEventLoop | None = None
        self._redirect: asyncio.Future[str] | None = None
        self._armed = False
        self._logger = get_logger().bind(scheme=scheme)

    @property
    def is_armed(self) -> bool:
        return self._armed

    def matches(self, url: str) -> bool:
        return urlsplit(url).scheme.lower() == self.scheme

    def start(self) -> None:
        if self._armed:
            raise ListenerStateError("Auth code listener already started")
        if self._redirect is not None:
            raise ListenerStateError("Auth code listener cannot be restarted")
        self._loop = asyncio.get_running_loop()
        self._redirect = self._loop.create_future()
        self._window.add_navigation_handler(self._handler)
        self._armed = True
        self._logger.debug("Auth code listener armed")

    def close(self) -> None:
        if not self._armed:
            return
        self._armed = False
        self._window.remove_navigation_handler(self._handler)
        if self._redirect is not None and not self._redirect.done():
            self._redirect.cancel()
        self._logger.debug("Auth code listener closed")

    async def wait_for_redirect(self) -> str:
        if self._redirect is None:
            raise ListenerStateError(
                "Auth code listener must be started before navigation"
            )
        return await self._redirect

    def _on_navigation(self, event: NavigationEvent) -> None:
        loop = self._loop
        if not self._armed or loop is None or not self.matches(event.url):
            return
        event.prevent_default()
        loop.call_soon_threadsafe(self._deliver, event.url)

    def _deliver(self, url: str) -> None:
        if self._redirect is not None and not self._redirect.done():
            self._redirect.set_result(url)
