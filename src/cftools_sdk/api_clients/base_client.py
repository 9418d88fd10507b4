"""Operation surface shared by every CFTools Cloud client."""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

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
    PlayerRequest,
    PriorityQueueItem,
    PutBanRequest,
    PutPriorityQueueItemRequest,
    PutWhitelistItemRequest,
    ServerApiId,
    ServerInfo,
    WhitelistItem,
)

PlayerArgument = Union[PlayerRequest, GenericId]
ServerArgument = Optional[ServerApiId]


def as_player_request(request: PlayerArgument) -> PlayerRequest:
    """Normalize a bare identifier into a PlayerRequest."""
    if isinstance(request, PlayerRequest):
        return request
    return PlayerRequest(player_id=request)


class CFToolsClient(ABC):
    """Typed operations against CFTools Cloud.

    Server-scoped operations use the ``server_api_id`` of the request and
    fall back to the default of the client.
    """

    @abstractmethod
    async def resolve(self, identifier: GenericId) -> CFToolsId:
        """Resolve any supported identifier to the CFTools id of the player."""

    @abstractmethod
    async def get_player_details(self, request: PlayerArgument) -> Player:
        """Metadata and statistics of a player on the server."""

    @abstractmethod
    async def get_leaderboard(
        self, request: GetLeaderboardRequest
    ) -> List[LeaderboardItem]:
        """Leaderboard of the server ranked by the requested statistic."""

    @abstractmethod
    async def get_priority_queue(
        self, request: PlayerArgument
    ) -> Optional[PriorityQueueItem]:
        """Priority queue entry of the player, None if there is none."""

    @abstractmethod
    async def put_priority_queue(self, request: PutPriorityQueueItemRequest) -> None:
        """Create the priority queue entry, replacing an existing one."""

    @abstractmethod
    async def delete_priority_queue(self, request: PlayerArgument) -> None:
        """Remove the priority queue entry of the player."""

    @abstractmethod
    async def get_whitelist(self, request: PlayerArgument) -> Optional[WhitelistItem]:
        """Whitelist entry of the player, None if there is none."""

    @abstractmethod
    async def put_whitelist(self, request: PutWhitelistItemRequest) -> None:
        """Create the whitelist entry, replacing an existing one."""

    @abstractmethod
    async def delete_whitelist(self, request: PlayerArgument) -> None:
        """Remove the whitelist entry of the player."""

    @abstractmethod
    async def get_server_info(
        self, server_api_id: ServerArgument = None
    ) -> ServerInfo:
        """CFTools Cloud metadata of the server."""

    @abstractmethod
    async def list_game_sessions(
        self, server_api_id: ServerArgument = None
    ) -> List[GameSession]:
        """Sessions of the players currently connected to the server."""

    @abstractmethod
    async def get_game_server_details(
        self, request: GetGameServerDetailsRequest
    ) -> GameServerItem:
        """Public game server details; needs no authentication."""

    @abstractmethod
    async def list_bans(self, request: ListBansRequest) -> List[Ban]:
        """Bans of the player on the ban list."""

    @abstractmethod
    async def put_ban(self, request: PutBanRequest) -> None:
        """Ban the player on the ban list."""

    @abstractmethod
    async def delete_ban(self, request: DeleteBanRequest) -> None:
        """Delete one ban of the player."""

    @abstractmethod
    async def delete_bans(self, request: DeleteBansRequest) -> None:
        """Delete every ban of the player on the ban list."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
