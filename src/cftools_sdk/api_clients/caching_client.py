"""Read-through caching decorator for a CFTools client."""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from ..cache import Cache
from ..config import CacheConfiguration
from ..models import (
    Ban,
    CFToolsId,
    DeleteBanRequest,
    DeleteBansRequest,
    GameServerItem,
    GameSession,
    GenericId,
    GetGameServerDetailsRequest,
    GetLeaderboardRequest,
    LeaderboardItem,
    ListBansRequest,
    Player,
    PriorityQueueItem,
    PutBanRequest,
    PutPriorityQueueItemRequest,
    PutWhitelistItemRequest,
    ServerApiId,
    ServerInfo,
    WhitelistItem,
)
from .base_client import CFToolsClient, PlayerArgument, ServerArgument, as_player_request

logger = logging.getLogger(__name__)

# Marks a miss, so that cached None results stay distinguishable
_MISSING = object()


def identifier_key(identifier: GenericId) -> str:
    return f"{type(identifier).__name__}:{identifier.id}"


class CachingCFToolsClient(CFToolsClient):
    """Serves read operations from a cache and delegates everything else.

    Each read category has its own lifetime from ``CacheConfiguration``.
    Writes are never cached and do not invalidate cached reads.
    """

    def __init__(
        self,
        cache: Cache,
        config: CacheConfiguration,
        client: CFToolsClient,
        server_api_id: Optional[ServerApiId] = None,
    ):
        self.cache = cache
        self.config = config
        self.client = client
        self.server_api_id = server_api_id

    async def _cached(
        self,
        cache_key: Optional[str],
        expiry: int,
        fetch: Callable[[], Awaitable[Any]],
    ) -> Any:
        if cache_key is None:
            return await fetch()

        value = self.cache.get(cache_key, _MISSING)
        if value is not _MISSING:
            logger.debug(f"Cache hit for {cache_key}")
            return value

        value = await fetch()
        self.cache.set(cache_key, value, expiry)
        return value

    def _server_key(self, server_api_id: ServerArgument) -> Optional[str]:
        server = server_api_id or self.server_api_id
        return server.id if server is not None else None

    def _player_key(self, category: str, request: PlayerArgument) -> Optional[str]:
        player_request = as_player_request(request)
        server = self._server_key(player_request.server_api_id)
        if server is None:
            return None
        return f"{category}:{server}:{identifier_key(player_request.player_id)}"

    async def resolve(self, identifier: GenericId) -> CFToolsId:
        return await self._cached(
            f"resolve:{identifier_key(identifier)}",
            self.config.resolve,
            lambda: self.client.resolve(identifier),
        )

    async def get_player_details(self, request: PlayerArgument) -> Player:
        return await self._cached(
            self._player_key("player_details", request),
            self.config.player_details,
            lambda: self.client.get_player_details(request),
        )

    async def get_leaderboard(
        self, request: GetLeaderboardRequest
    ) -> List[LeaderboardItem]:
        server = self._server_key(request.server_api_id)
        cache_key = None
        if server is not None:
            cache_key = (
                f"leaderboard:{server}:{request.statistic.value}"
                f":{request.order}:{request.limit}"
            )
        return await self._cached(
            cache_key,
            self.config.leaderboard,
            lambda: self.client.get_leaderboard(request),
        )

    async def get_priority_queue(
        self, request: PlayerArgument
    ) -> Optional[PriorityQueueItem]:
        return await self._cached(
            self._player_key("priority_queue", request),
            self.config.priority_queue,
            lambda: self.client.get_priority_queue(request),
        )

    async def put_priority_queue(self, request: PutPriorityQueueItemRequest) -> None:
        await self.client.put_priority_queue(request)

    async def delete_priority_queue(self, request: PlayerArgument) -> None:
        await self.client.delete_priority_queue(request)

    async def get_whitelist(self, request: PlayerArgument) -> Optional[WhitelistItem]:
        return await self._cached(
            self._player_key("whitelist", request),
            self.config.whitelist,
            lambda: self.client.get_whitelist(request),
        )

    async def put_whitelist(self, request: PutWhitelistItemRequest) -> None:
        await self.client.put_whitelist(request)

    async def delete_whitelist(self, request: PlayerArgument) -> None:
        await self.client.delete_whitelist(request)

    async def get_server_info(self, server_api_id: ServerArgument = None) -> ServerInfo:
        server = self._server_key(server_api_id)
        return await self._cached(
            f"server_info:{server}" if server is not None else None,
            self.config.server_info,
            lambda: self.client.get_server_info(server_api_id),
        )

    async def list_game_sessions(
        self, server_api_id: ServerArgument = None
    ) -> List[GameSession]:
        server = self._server_key(server_api_id)
        return await self._cached(
            f"game_sessions:{server}" if server is not None else None,
            self.config.game_sessions,
            lambda: self.client.list_game_sessions(server_api_id),
        )

    async def get_game_server_details(
        self, request: GetGameServerDetailsRequest
    ) -> GameServerItem:
        return await self._cached(
            f"game_server_details:{request.game.value}:{request.ip}:{request.port}",
            self.config.game_server_details,
            lambda: self.client.get_game_server_details(request),
        )

    async def list_bans(self, request: ListBansRequest) -> List[Ban]:
        return await self._cached(
            f"banlist:{request.list.id}:{identifier_key(request.player_id)}",
            self.config.banlist,
            lambda: self.client.list_bans(request),
        )

    async def put_ban(self, request: PutBanRequest) -> None:
        await self.client.put_ban(request)

    async def delete_ban(self, request: DeleteBanRequest) -> None:
        await self.client.delete_ban(request)

    async def delete_bans(self, request: DeleteBansRequest) -> None:
        await self.client.delete_bans(request)

    async def close(self) -> None:
        await self.client.close()
