"""Host window capability used to present the login page.

The SDK does not own a UI toolkit. Applications adapt their toolkit's
browser widget to ``AuthWindow`` and hand a ``WindowFactory`` to the
client.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import WindowConfig


class NavigationEvent:
    """A navigation or redirect the window is about to perform."""

    __slots__ = ("url", "_prevented")

    def __init__(self, url: str) -> None:
        self.url = url
        self._prevented = False

    def prevent_default(self) -> None:
        """Stop the window from performing this navigation."""
        self._prevented = True

    @property
    def default_prevented(self) -> bool:
        return self._prevented

    def __repr__(self) -> str:
        return f"NavigationEvent(url={self.url!r}, prevented={self._prevented})"


NavigationHandler = Callable[[NavigationEvent], None]


@runtime_checkable
class AuthWindow(Protocol):
    """Interactive browser surface provided by the host application.

    Navigation handlers are invoked before each navigation or redirect,
    possibly from the toolkit's UI thread.
    """

    def load_url(self, url: str) -> None:
        ...

    def add_navigation_handler(self, handler: NavigationHandler) -> None:
        ...

    def remove_navigation_handler(self, handler: NavigationHandler) -> None:
        ...

    def close(self) -> None:
        ...


class WindowFactory(Protocol):
    """Opens a new login window for one flow."""

    def __call__(self, config: WindowConfig) -> AuthWindow:
        ...
