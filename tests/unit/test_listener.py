"""Unit tests for the custom scheme auth code listener."""

from __future__ import annotations

import asyncio
import threading

import pytest

from desktop_auth_sdk.errors import ListenerStateError
from desktop_auth_sdk.listener import CustomSchemeListener
from desktop_auth_sdk.window import NavigationEvent


class TestCustomSchemeListener:
    """Tests for redirect interception on a window."""

    def test_scheme_normalized(self, fake_window) -> None:
        listener = CustomSchemeListener("MSAL://", fake_window)
        assert listener.scheme == "msal"

    def test_empty_scheme_rejected(self, fake_window) -> None:
        with pytest.raises(ValueError):
            CustomSchemeListener("", fake_window)

    def test_start_registers_handler(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            assert listener.is_armed
            assert len(fake_window.handlers) == 1
            listener.close()

        asyncio.run(scenario())
        assert fake_window.handlers == []

    def test_intercepts_private_scheme(self, fake_window) -> None:
        async def scenario() -> str:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            event = fake_window.navigate("msal://redirect?code=ABC123")
            assert event.default_prevented
            try:
                return await listener.wait_for_redirect()
            finally:
                listener.close()

        assert asyncio.run(scenario()) == "msal://redirect?code=ABC123"

    def test_ignores_other_schemes(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            event = fake_window.navigate("https://login.example.com/tenant/login")
            assert not event.default_prevented
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(listener.wait_for_redirect(), 0.01)
            listener.close()

        asyncio.run(scenario())

    def test_first_redirect_wins(self, fake_window) -> None:
        async def scenario() -> str:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            fake_window.navigate("msal://redirect?code=first")
            second = fake_window.navigate("msal://redirect?code=second")
            assert second.default_prevented
            result = await listener.wait_for_redirect()
            listener.close()
            return result

        assert asyncio.run(scenario()) == "msal://redirect?code=first"

    def test_delivery_from_ui_thread(self, fake_window) -> None:
        async def scenario() -> str:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            thread = threading.Thread(
                target=fake_window.navigate, args=("msal://redirect?code=threaded",)
            )
            thread.start()
            result = await listener.wait_for_redirect()
            thread.join()
            listener.close()
            return result

        assert asyncio.run(scenario()) == "msal://redirect?code=threaded"

    def test_wait_before_start_is_fatal(self, fake_window) -> None:
        listener = CustomSchemeListener("msal", fake_window)

        with pytest.raises(ListenerStateError, match="started before navigation"):
            asyncio.run(listener.wait_for_redirect())

    def test_double_start_rejected(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            with pytest.raises(ListenerStateError):
                listener.start()
            listener.close()

        asyncio.run(scenario())

    def test_restart_after_close_rejected(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            listener.close()
            with pytest.raises(ListenerStateError, match="restarted"):
                listener.start()

        asyncio.run(scenario())

    def test_close_is_idempotent(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            listener.close()
            listener.close()

        asyncio.run(scenario())
        assert fake_window.handlers == []

    def test_close_cancels_pending_wait(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            waiter = asyncio.ensure_future(listener.wait_for_redirect())
            await asyncio.sleep(0)
            listener.close()
            with pytest.raises(asyncio.CancelledError):
                await waiter

        asyncio.run(scenario())

    def test_navigation_after_close_not_intercepted(self, fake_window) -> None:
        async def scenario() -> None:
            listener = CustomSchemeListener("msal", fake_window)
            listener.start()
            handler = fake_window.handlers[0]
            listener.close()

            event = NavigationEvent("msal://redirect?code=late")
            handler(event)
            assert not event.default_prevented

        asyncio.run(scenario())

    def test_navigation_before_start_not_intercepted(self, fake_window) -> None:
        listener = CustomSchemeListener("msal", fake_window)

        event = NavigationEvent("msal://redirect?code=early")
        listener._on_navigation(event)

        assert not event.default_prevented
        assert not listener.is_armed
