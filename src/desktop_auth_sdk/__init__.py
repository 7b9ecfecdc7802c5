"""Desktop auth SDK: OAuth 2.0 authorization code flow for native apps."""

from .client import AuthFlow, FlowState, PublicClientApplication
from .config import AuthOptions, TelemetryConfig, WindowConfig
from .core.authority import Authority
from .errors import (
    AuthCodeResponseError,
    AuthorizationError,
    ClientConfigurationError,
    DesktopAuthError,
    ErrorCode,
    InteractionTimeoutError,
    ListenerStateError,
    TokenRequestError,
)
from .listener import AuthCodeListener, CustomSchemeListener
from .models import (
    AuthCodeError,
    AuthCodeSuccess,
    AuthenticationParameters,
    TokenErrorResponse,
    TokenResponse,
)
from .window import AuthWindow, NavigationEvent, WindowFactory

__all__ = [
    "AuthCodeError",
    "AuthCodeListener",
    "AuthCodeResponseError",
    "AuthCodeSuccess",
    "AuthFlow",
    "AuthOptions",
    "AuthWindow",
    "AuthenticationParameters",
    "Authority",
    "AuthorizationError",
    "ClientConfigurationError",
    "CustomSchemeListener",
    "DesktopAuthError",
    "ErrorCode",
    "FlowState",
    "InteractionTimeoutError",
    "ListenerStateError",
    "NavigationEvent",
    "PublicClientApplication",
    "TelemetryConfig",
    "TokenErrorResponse",
    "TokenRequestError",
    "TokenResponse",
    "WindowConfig",
    "WindowFactory",
]

__version__ = "0.1.0"
