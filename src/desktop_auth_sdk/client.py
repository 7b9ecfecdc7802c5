"""Public client application for desktop apps.

Runs the OAuth 2.0 authorization code flow in a host-provided login
window and exchanges the intercepted code for an access token.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Self

import httpx

from .config import AuthOptions
from .core.auth_builder import AuthorizationCodeRequestParameters, parse_auth_code_response
from .core.authority import Authority, resolve_authority
from .core.errors import ErrorFactory
from .core.scopes import validate_input_scopes
from .core.token_ops import TokenRequestParameters, parse_token_response
from .errors import DesktopAuthError, InteractionTimeoutError
from .http import create_async_http_client, send_token_request
from .listener import AuthCodeListener, CustomSchemeListener
from .models import (
    AuthCodeError,
    AuthenticationParameters,
    TokenErrorResponse,
    TokenResponse,
)
from .pkce import create_pkce_challenge, generate_state
from .telemetry import create_tracer, get_logger, trace_operation

if TYPE_CHECKING:
    from opentelemetry import trace

    from .models import PKCEChallenge
    from .window import AuthWindow, WindowFactory

ListenerFactory = Callable[[str, "AuthWindow"], AuthCodeListener]


class FlowState(StrEnum):
    """States of one ``acquire_token`` call."""

    IDLE = "idle"
    VALIDATING_SCOPES = "validating_scopes"
    RESOLVING_AUTHORITY = "resolving_authority"
    AWAITING_USER_INTERACTION = "awaiting_user_interaction"
    EXCHANGING_CODE = "exchanging_code"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = frozenset({FlowState.COMPLETED, FlowState.FAILED})


@dataclass
class AuthFlow:
    """Call-scoped state: the window and listener belong to one flow only."""

    flow_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: FlowState = FlowState.IDLE
    history: list[FlowState] = field(default_factory=lambda: [FlowState.IDLE])
    window: AuthWindow | None = None
    listener: AuthCodeListener | None = None

    def transition(self, new_state: FlowState) -> None:
        if self.state in TERMINAL_STATES:
            msg = f"Flow {self.flow_id} already {self.state}"
            raise RuntimeError(msg)
        self.state = new_state
        self.history.append(new_state)
        get_logger().debug("Auth flow transition", flow_id=self.flow_id, state=str(new_state))

    def release(self) -> None:
        """Close window and listener; safe to call again once released."""
        listener, self.listener = self.listener, None
        window, self.window = self.window, None
        try:
            if listener is not None:
                listener.close()
        finally:
            if window is not None:
                window.close()


class PublicClientApplication:
    """Acquires access tokens for a desktop (public) client.

    Each ``acquire_token`` call opens its own window and listener, so
    concurrent calls on one instance do not interfere.
    """

    def __init__(
        self,
        options: AuthOptions,
        window_factory: WindowFactory,
        *,
        listener_factory: ListenerFactory | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            options: Client configuration.
            window_factory: Opens the host login window.
            listener_factory: Builds the redirect listener for a window;
                defaults to ``CustomSchemeListener``.
            http_client: Optional preconfigured HTTP client. The client
                only closes HTTP clients it created itself.
        """
        self.options = options
        self._window_factory = window_factory
        self._listener_factory: ListenerFactory = listener_factory or CustomSchemeListener
        self._owns_http = http_client is None
        self._http = http_client or create_async_http_client(options)
        self._tracer = create_tracer(options.telemetry)
        self._logger = get_logger().bind(client_id=options.client_id)

    @property
    def tracer(self) -> trace.Tracer:
        """Tracer built from this client's ``TelemetryConfig``."""
        return self._tracer

    @property
    def client_id(self) -> str:
        return self.options.client_id

    @property
    def redirect_uri(self) -> str:
        return self.options.redirect_uri

    @property
    def authority_url(self) -> str:
        return self.options.authority

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def acquire_token(self, request: AuthenticationParameters) -> str:
        """Run the authorization code flow and return the access token.

        Args:
            request: Scopes and optional authority override.

        Returns:
            Access token string.

        Raises:
            ClientConfigurationError: Invalid scopes, before any window opens.
            AuthorizationError: The provider redirected with an error.
            AuthCodeResponseError: The redirect carried no usable code.
            TokenRequestError: The token endpoint rejected the exchange.
            InteractionTimeoutError: ``interaction_timeout`` elapsed.
            httpx.HTTPError: Transport failure on the token request.
        """
        response = await self.acquire_token_response(request)
        return response.access_token

    async def acquire_token_response(
        self,
        request: AuthenticationParameters,
    ) -> TokenResponse:
        """Like ``acquire_token`` but returns the full token response."""
        flow = AuthFlow()
        with trace_operation(
            "acquire_token",
            attributes={"flow.id": flow.flow_id},
            tracer=self._tracer,
        ):
            try:
                return await self._run_flow(flow, request)
            except Exception as e:
                if flow.state not in TERMINAL_STATES:
                    flow.transition(FlowState.FAILED)
                self._log_failure(flow, e)
                raise
            finally:
                flow.release()

    async def _run_flow(
        self,
        flow: AuthFlow,
        request: AuthenticationParameters,
    ) -> TokenResponse:
        flow.transition(FlowState.VALIDATING_SCOPES)
        scopes = validate_input_scopes(request.scopes)

        flow.transition(FlowState.RESOLVING_AUTHORITY)
        authority = resolve_authority(request.authority, self.authority_url)
        self._logger.info(
            "Acquiring token",
            flow_id=flow.flow_id,
            authority=authority.base_url,
            scopes=list(scopes),
        )

        code, pkce = await self._acquire_auth_code(flow, authority, scopes, request)

        flow.transition(FlowState.EXCHANGING_CODE)
        token = await self._trade_auth_code_for_token(authority, scopes, code, pkce)

        flow.transition(FlowState.COMPLETED)
        self._logger.info("Token acquired", flow_id=flow.flow_id, scope=token.scope)
        return token

    async def _acquire_auth_code(
        self,
        flow: AuthFlow,
        authority: Authority,
        scopes: tuple[str, ...],
        request: AuthenticationParameters,
    ) -> tuple[str, PKCEChallenge | None]:
        """Open the login window and wait for the redirect carrying the code.

        The window and listener are released before the redirect is
        interpreted, on every exit path.
        """
        pkce = create_pkce_challenge() if self.options.use_pkce else None
        oauth_state = generate_state()
        navigate_url = AuthorizationCodeRequestParameters.create(
            authority,
            self.client_id,
            self.redirect_uri,
            scopes,
            state=oauth_state,
            pkce=pkce,
            prompt=request.prompt,
            login_hint=request.login_hint,
        ).build_request_url()

        with trace_operation(
            "user_interaction",
            attributes={"flow.id": flow.flow_id},
            tracer=self._tracer,
        ):
            try:
                flow.window = self._window_factory(self.options.window)
                flow.listener = self._listener_factory(self.options.redirect_scheme, flow.window)
                flow.listener.start()
                flow.transition(FlowState.AWAITING_USER_INTERACTION)
                flow.window.load_url(navigate_url)
                response_url = await self._wait_for_redirect(flow.listener)
            finally:
                flow.release()

        response = parse_auth_code_response(response_url, expected_state=oauth_state)
        if isinstance(response, AuthCodeError):
            raise ErrorFactory.from_auth_code_error(response)
        return response.code, pkce

    async def _wait_for_redirect(self, listener: AuthCodeListener) -> str:
        timeout = self.options.interaction_timeout
        if timeout is None:
            return await listener.wait_for_redirect()
        try:
            return await asyncio.wait_for(listener.wait_for_redirect(), timeout)
        except TimeoutError as e:
            raise InteractionTimeoutError(timeout) from e

    async def _trade_auth_code_for_token(
        self,
        authority: Authority,
        scopes: tuple[str, ...],
        code: str,
        pkce: PKCEChallenge | None,
    ) -> TokenResponse:
        """Exchange the authorization code at the token endpoint."""
        request = TokenRequestParameters(
            authority=authority,
            client_id=self.client_id,
            redirect_uri=self.redirect_uri,
            scopes=scopes,
            code=code,
            code_verifier=pkce.code_verifier if pkce else None,
        )
        response = await send_token_request(self._http, request, tracer=self._tracer)

        try:
            parsed = parse_token_response(response.status_code, response.content)
        except json.JSONDecodeError:
            if response.is_error:
                response.raise_for_status()
            raise

        if isinstance(parsed, TokenErrorResponse):
            raise ErrorFactory.from_token_error(parsed, status_code=response.status_code)
        return parsed

    def _log_failure(self, flow: AuthFlow, exc: Exception) -> None:
        failed_in = flow.history[-2] if len(flow.history) > 1 else flow.state
        if isinstance(exc, DesktopAuthError):
            self._logger.warning(
                "Token acquisition failed",
                flow_id=flow.flow_id,
                failed_in=str(failed_in),
                **exc.to_dict(),
            )
        else:
            self._logger.error(
                "Token acquisition failed",
                flow_id=flow.flow_id,
                failed_in=str(failed_in),
                error=repr(exc),
            )
