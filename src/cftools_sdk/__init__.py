"""
CFTools SDK - async client for the CFTools Cloud game server management API.

Resolves player identifiers, manages priority queue, whitelist and ban list
entries and reads player, leaderboard and server data. Bearer tokens are
obtained, cached and refreshed transparently.
"""

__version__ = "1.0.0"

from .api_clients import CachingCFToolsClient, CFToolsClient, HttpCFToolsClient
from .builder import CFToolsClientBuilder
from .cache import Cache, InMemoryCache
from .config import CacheConfiguration, ClientConfig
from .exceptions import (
    AccountCreationFailed,
    AmbiguousDeleteBanRequest,
    AuthenticationRequired,
    CFToolsError,
    DuplicateResourceCreation,
    GameServerQueryError,
    GrantRequired,
    InvalidCredentials,
    RequestLimitExceeded,
    ResourceNotConfigured,
    ResourceNotFound,
    ServerApiIdRequired,
    ServiceUnavailable,
    TimeoutError,
    TokenExpired,
    UnknownError,
)
from .models import (
    PERMANENT,
    Authorization,
    Ban,
    Banlist,
    BattlEyeGUID,
    BohemiaInteractiveId,
    CFToolsId,
    DeleteBanRequest,
    DeleteBansRequest,
    Game,
    GetGameServerDetailsRequest,
    GetLeaderboardRequest,
    IPAddress,
    ListBansRequest,
    LoginCredentials,
    PlayerRequest,
    PutBanRequest,
    PutPriorityQueueItemRequest,
    PutWhitelistItemRequest,
    ServerApiId,
    Statistic,
    SteamId64,
)

__all__ = [
    "__version__",
    # Clients
    "CFToolsClient",
    "CFToolsClientBuilder",
    "CachingCFToolsClient",
    "HttpCFToolsClient",
    "Cache",
    "InMemoryCache",
    "CacheConfiguration",
    "ClientConfig",
    # Errors
    "AccountCreationFailed",
    "AmbiguousDeleteBanRequest",
    "AuthenticationRequired",
    "CFToolsError",
    "DuplicateResourceCreation",
    "GameServerQueryError",
    "GrantRequired",
    "InvalidCredentials",
    "RequestLimitExceeded",
    "ResourceNotConfigured",
    "ResourceNotFound",
    "ServerApiIdRequired",
    "ServiceUnavailable",
    "TimeoutError",
    "TokenExpired",
    "UnknownError",
    # Models
    "PERMANENT",
    "Authorization",
    "Ban",
    "Banlist",
    "BattlEyeGUID",
    "BohemiaInteractiveId",
    "CFToolsId",
    "DeleteBanRequest",
    "DeleteBansRequest",
    "Game",
    "GetGameServerDetailsRequest",
    "GetLeaderboardRequest",
    "IPAddress",
    "ListBansRequest",
    "LoginCredentials",
    "PlayerRequest",
    "PutBanRequest",
    "PutPriorityQueueItemRequest",
    "PutWhitelistItemRequest",
    "ServerApiId",
    "Statistic",
    "SteamId64",
]
