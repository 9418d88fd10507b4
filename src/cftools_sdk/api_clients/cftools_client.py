"""HTTP implementation of the CFTools Cloud operations."""

import hashlib
import logging
from typing import Any, Dict, List, Optional

from ..exceptions import (
    AmbiguousDeleteBanRequest,
    AuthenticationRequired,
    GameServerQueryError,
    ServerApiIdRequired,
)
from ..models import (
    Ban,
    CFToolsId,
    DeleteBanRequest,
    DeleteBansRequest,
    Expiration,
    GameServerItem,
    GameSession,
    GenericId,
    GetGameServerDetailsRequest,
    GetLeaderboardRequest,
    IPAddress,
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
from . import mappers
from .auth import NoOpAuthorizationProvider
from .base_client import CFToolsClient, PlayerArgument, ServerArgument, as_player_request
from .executor import ResilientRequestExecutor
from .resolver import IdentifierResolver
from .transport import RequestOptions

logger = logging.getLogger(__name__)

PRIORITY_QUEUE_BUCKET = "queuepriority"
WHITELIST_BUCKET = "whitelist"
GAME_SERVER_QUERY_OK = "GameServerQueryError.NONE"
MAX_LEADERBOARD_LIMIT = 100


def game_server_id(game: str, ip: str, port: int) -> str:
    """CFTools game server id: sha1 over game id, address and game port."""
    return hashlib.sha1(f"{game}{ip}{port}".encode("utf-8")).hexdigest()


class HttpCFToolsClient(CFToolsClient):
    """Client issuing every operation as one or more API requests."""

    def __init__(
        self,
        executor: ResilientRequestExecutor,
        resolver: Optional[IdentifierResolver] = None,
        server_api_id: Optional[ServerApiId] = None,
    ):
        """Initialize the client.

        Args:
            executor: Executor issuing the requests
            resolver: Identifier resolver; built on the executor when omitted
            server_api_id: Default server for server-scoped operations
        """
        self.executor = executor
        self.resolver = resolver or IdentifierResolver(executor)
        self.server_api_id = server_api_id

    @property
    def authenticated(self) -> bool:
        return not isinstance(self.executor.auth_provider, NoOpAuthorizationProvider)

    async def resolve(self, identifier: GenericId) -> CFToolsId:
        return await self.resolver.resolve(identifier)

    async def get_player_details(self, request: PlayerArgument) -> Player:
        self._assert_authentication()
        player_request = as_player_request(request)
        server_id = self._resolve_server_api_id(player_request.server_api_id)
        cftools_id = await self.resolve(player_request.player_id)

        response = await self.executor.get(
            f"v1/server/{server_id.id}/player",
            RequestOptions(params={"cftools_id": cftools_id.id}),
        )
        body = response.json()
        return mappers.to_player(body[cftools_id.id])

    async def get_leaderboard(
        self, request: GetLeaderboardRequest
    ) -> List[LeaderboardItem]:
        self._assert_authentication()
        server_id = self._resolve_server_api_id(request.server_api_id)
        params: Dict[str, Any] = {
            "stat": request.statistic.value,
            "order": -1 if request.order == "ASC" else 1,
        }
        if request.limit is not None and 0 < request.limit <= MAX_LEADERBOARD_LIMIT:
            params["limit"] = request.limit

        response = await self.executor.get(
            f"v1/server/{server_id.id}/leaderboard", RequestOptions(params=params)
        )
        return mappers.to_leaderboard(response.json())

    async def get_priority_queue(
        self, request: PlayerArgument
    ) -> Optional[PriorityQueueItem]:
        self._assert_authentication()
        player_request = as_player_request(request)
        server_id = self._resolve_server_api_id(player_request.server_api_id)
        cftools_id = await self.resolve(player_request.player_id)
        body = await self._get_entry(PRIORITY_QUEUE_BUCKET, server_id, cftools_id)
        return mappers.to_priority_queue_item(body)

    async def put_priority_queue(self, request: PutPriorityQueueItemRequest) -> None:
        self._assert_authentication()
        server_id = self._resolve_server_api_id(request.server_api_id)
        cftools_id = await self.resolve(request.id)
        await self._put_entry(
            PRIORITY_QUEUE_BUCKET,
            server_id,
            cftools_id,
            request.comment,
            request.expires,
        )

    async def delete_priority_queue(self, request: PlayerArgument) -> None:
        self._assert_authentication()
        player_request = as_player_request(request)
        server_id = self._resolve_server_api_id(player_request.server_api_id)
        cftools_id = await self.resolve(player_request.player_id)
        await self._delete_entry(PRIORITY_QUEUE_BUCKET, server_id, cftools_id)

    async def get_whitelist(self, request: PlayerArgument) -> Optional[WhitelistItem]:
        self._assert_authentication()
        player_request = as_player_request(request)
        server_id = self._resolve_server_api_id(player_request.server_api_id)
        cftools_id = await self.resolve(player_request.player_id)
        body = await self._get_entry(WHITELIST_BUCKET, server_id, cftools_id)
        return mappers.to_whitelist_item(body)

    async def put_whitelist(self, request: PutWhitelistItemRequest) -> None:
        self._assert_authentication()
        server_id = self._resolve_server_api_id(request.server_api_id)
        cftools_id = await self.resolve(request.id)
        await self._put_entry(
            WHITELIST_BUCKET, server_id, cftools_id, request.comment, request.expires
        )

    async def delete_whitelist(self, request: PlayerArgument) -> None:
        self._assert_authentication()
        player_request = as_player_request(request)
        server_id = self._resolve_server_api_id(player_request.server_api_id)
        cftools_id = await self.resolve(player_request.player_id)
        await self._delete_entry(WHITELIST_BUCKET, server_id, cftools_id)

    async def get_server_info(self, server_api_id: ServerArgument = None) -> ServerInfo:
        self._assert_authentication()
        server_id = self._resolve_server_api_id(server_api_id)
        response = await self.executor.get(f"v1/server/{server_id.id}/info")
        return mappers.to_server_info(response.json())

    async def list_game_sessions(
        self, server_api_id: ServerArgument = None
    ) -> List[GameSession]:
        self._assert_authentication()
        server_id = self._resolve_server_api_id(server_api_id)
        response = await self.executor.get(f"v1/server/{server_id.id}/GSM/list")
        return mappers.to_game_sessions(response.json())

    async def get_game_server_details(
        self, request: GetGameServerDetailsRequest
    ) -> GameServerItem:
        server_hash = game_server_id(request.game.value, request.ip, request.port)
        response = await self.executor.get(
            f"v1/gameserver/{server_hash}", authenticate=False
        )
        server = response.json()[server_hash]

        query_error = server.get("_object", {}).get("error")
        if query_error != GAME_SERVER_QUERY_OK:
            raise GameServerQueryError(str(query_error), str(response.request.url))
        return mappers.to_game_server(server)

    async def list_bans(self, request: ListBansRequest) -> List[Ban]:
        self._assert_authentication()
        identifier = await self._ban_identifier(request.player_id)
        response = await self.executor.get(
            f"v1/banlist/{request.list.id}/bans",
            RequestOptions(params={"filter": identifier}),
        )
        return mappers.to_bans(response.json())

    async def put_ban(self, request: PutBanRequest) -> None:
        self._assert_authentication()
        if isinstance(request.player_id, IPAddress):
            ban_format = request.player_id.format
        else:
            ban_format = "cftools_id"
        identifier = await self._ban_identifier(request.player_id)

        body: Dict[str, Any] = {
            "format": ban_format,
            "identifier": identifier,
            "reason": request.reason,
        }
        expires_at = mappers.expiration_to_wire(request.expiration)
        if expires_at is not None:
            body["expires_at"] = expires_at

        await self.executor.post(
            f"v1/banlist/{request.list.id}/bans", RequestOptions(json=body)
        )

    async def delete_ban(self, request: DeleteBanRequest) -> None:
        """Delete a ban.

        When the request names a player instead of a ban, the player must have
        at most one ban on the list; nothing is deleted if there is none.

        Raises:
            AmbiguousDeleteBanRequest: If the player has more than one ban
            ValueError: If the request names neither a ban nor a player
        """
        self._assert_authentication()
        ban: Optional[Ban] = request.ban
        if ban is None:
            if request.player_id is None:
                raise ValueError("DeleteBanRequest needs a ban or a player_id")
            bans = await self.list_bans(
                ListBansRequest(player_id=request.player_id, list=request.list)
            )
            if not bans:
                return
            if len(bans) > 1:
                raise AmbiguousDeleteBanRequest(len(bans))
            ban = bans[0]

        await self._delete_ban_by_id(request.list.id, ban.id)

    async def delete_bans(self, request: DeleteBansRequest) -> None:
        self._assert_authentication()
        bans = await self.list_bans(
            ListBansRequest(player_id=request.player_id, list=request.list)
        )
        for ban in bans:
            await self._delete_ban_by_id(request.list.id, ban.id)

    async def close(self) -> None:
        await self.executor.transport.close()

    def _assert_authentication(self) -> None:
        if not self.authenticated:
            raise AuthenticationRequired()

    def _resolve_server_api_id(self, server_api_id: ServerArgument) -> ServerApiId:
        resolved = server_api_id or self.server_api_id
        if resolved is None:
            raise ServerApiIdRequired()
        return resolved

    async def _ban_identifier(self, player_id: GenericId) -> str:
        if isinstance(player_id, IPAddress):
            return player_id.id
        return (await self.resolve(player_id)).id

    async def _get_entry(
        self, bucket: str, server_id: ServerApiId, cftools_id: CFToolsId
    ) -> Dict[str, Any]:
        response = await self.executor.get(
            f"v1/server/{server_id.id}/{bucket}",
            RequestOptions(params={"cftools_id": cftools_id.id}),
        )
        return response.json()

    async def _put_entry(
        self,
        bucket: str,
        server_id: ServerApiId,
        cftools_id: CFToolsId,
        comment: str,
        expires: Expiration,
    ) -> None:
        existing = await self._get_entry(bucket, server_id, cftools_id)
        if existing.get("entries"):
            logger.debug(f"Replacing {bucket} entry of {cftools_id.id}")
            await self._delete_entry(bucket, server_id, cftools_id)

        body: Dict[str, Any] = {"cftools_id": cftools_id.id, "comment": comment}
        expires_at = mappers.expiration_to_wire(expires)
        if expires_at is not None:
            body["expires_at"] = expires_at

        await self.executor.post(
            f"v1/server/{server_id.id}/{bucket}", RequestOptions(json=body)
        )

    async def _delete_entry(
        self, bucket: str, server_id: ServerApiId, cftools_id: CFToolsId
    ) -> None:
        await self.executor.delete(
            f"v1/server/{server_id.id}/{bucket}",
            RequestOptions(params={"cftools_id": cftools_id.id}),
        )

    async def _delete_ban_by_id(self, banlist_id: str, ban_id: str) -> None:
        await self.executor.delete(
            f"v1/banlist/{banlist_id}/bans", RequestOptions(params={"ban_id": ban_id})
        )
