"""API client layers for CFTools Cloud.

Requests flow from the typed client through the resilient executor, which
attaches credentials from an authorization provider and classifies errors,
down to the httpx based transport.
"""

from .auth import (
    AuthorizationProvider,
    CFToolsAuthorizationProvider,
    EnterpriseAuthorizationProvider,
    NoOpAuthorizationProvider,
)
from .base_client import CFToolsClient
from .caching_client import CachingCFToolsClient
from .cftools_client import HttpCFToolsClient, game_server_id
from .error_classifier import ErrorClassifier
from .executor import RequestState, ResilientRequestExecutor
from .resolver import IdentifierResolver
from .transport import HttpTransport, RequestOptions

__all__ = [
    # Authorization
    "AuthorizationProvider",
    "CFToolsAuthorizationProvider",
    "EnterpriseAuthorizationProvider",
    "NoOpAuthorizationProvider",
    # Clients
    "CFToolsClient",
    "CachingCFToolsClient",
    "HttpCFToolsClient",
    "game_server_id",
    # Request pipeline
    "ErrorClassifier",
    "RequestState",
    "ResilientRequestExecutor",
    "IdentifierResolver",
    "HttpTransport",
    "RequestOptions",
]
