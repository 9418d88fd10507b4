"""Resolution of player identifiers to CFTools ids."""

import logging
from typing import Any, Dict

from ..exceptions import AccountCreationFailed, CFToolsError, ResourceNotFound
from ..models import CFToolsId, GenericId, IPAddress, SteamId64
from .executor import ResilientRequestExecutor
from .transport import RequestOptions

logger = logging.getLogger(__name__)

LOOKUP_PATH = "v1/users/lookup"
ACCOUNT_CREATED_NOTICE = "Account created"


class IdentifierResolver:
    """Turns any supported player identifier into a CFTools id.

    CFTools ids are returned as-is. Steam64 ids, BattlEye GUIDs and Bohemia
    Interactive ids are looked up remotely. With account creation enabled
    (an enterprise grant), an unknown Steam64 id gets a new CFTools account.
    """

    def __init__(
        self, executor: ResilientRequestExecutor, account_creation: bool = False
    ):
        self.executor = executor
        self.account_creation = account_creation

    async def resolve(self, identifier: GenericId) -> CFToolsId:
        """Resolve an identifier.

        Raises:
            ResourceNotFound: If CFTools does not know the identifier
            AccountCreationFailed: If the creation fallback did not confirm
            ValueError: For IP addresses, which have no CFTools account
        """
        if isinstance(identifier, CFToolsId):
            return identifier
        if isinstance(identifier, IPAddress):
            raise ValueError("IP addresses cannot be resolved to a CFTools id")

        try:
            body = await self._lookup(identifier.id, create=False)
        except ResourceNotFound:
            if not (self.account_creation and isinstance(identifier, SteamId64)):
                raise
            return await self._create_account(identifier)

        return CFToolsId(self._cftools_id(body))

    async def _create_account(self, identifier: SteamId64) -> CFToolsId:
        logger.info(f"No CFTools account for Steam64 {identifier.id}, creating one")
        body = await self._lookup(identifier.id, create=True)
        notice = body.get("notice")
        if notice != ACCOUNT_CREATED_NOTICE:
            raise AccountCreationFailed(identifier.id, notice)
        return CFToolsId(self._cftools_id(body))

    async def _lookup(self, raw_identifier: str, create: bool) -> Dict[str, Any]:
        params: Dict[str, Any] = {"identifier": raw_identifier}
        if create:
            params["create"] = "true"
        response = await self.executor.get(LOOKUP_PATH, RequestOptions(params=params))
        body = response.json()
        if not isinstance(body, dict):
            raise CFToolsError(
                "Unexpected lookup response", url=str(response.request.url)
            )
        return body

    @staticmethod
    def _cftools_id(body: Dict[str, Any]) -> str:
        cftools_id = body.get("cftools_id")
        if not cftools_id:
            raise CFToolsError("Lookup response did not contain a cftools_id")
        return str(cftools_id)
