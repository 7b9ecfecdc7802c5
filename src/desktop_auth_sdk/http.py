"""HTTP plumbing for the token exchange.

A single request per flow: no retry and no circuit breaker.
Transport errors from httpx propagate unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from .telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from opentelemetry import trace

    from .config import AuthOptions
    from .core.token_ops import TokenRequestParameters

USER_AGENT = "desktop-auth-sdk/0.1.0 Python"


def create_async_http_client(
    options: AuthOptions,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Args:
        options: Client configuration.
        transport: Optional transport override.

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=options.connect_timeout,
            read=options.timeout,
            write=options.timeout,
            pool=options.timeout,
        ),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        follow_redirects=False,
        transport=transport,
    )


async def send_token_request(
    client: httpx.AsyncClient,
    request: TokenRequestParameters,
    *,
    tracer: trace.Tracer | None = None,
) -> httpx.Response:
    """POST the token request once and return the raw response.

    Non-2xx responses are returned, not raised; the caller parses the
    error body.
    """
    with trace_operation(
        "token_request",
        attributes={"http.method": "POST", "http.url": request.endpoint},
        tracer=tracer,
    ) as span:
        response = await client.post(
            request.endpoint,
            data=request.to_form_data(),
            headers=request.build_headers(),
        )
        span.set_attribute("http.status_code", response.status_code)

    get_logger().debug(
        "Token endpoint responded",
        status_code=response.status_code,
        endpoint=request.endpoint,
    )
    return response
