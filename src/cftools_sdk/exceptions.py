"""Error taxonomy for the CFTools Cloud client.

Every failure the SDK recognises is raised as a subclass of ``CFToolsError``.
Errors produced from an HTTP exchange carry the URL of the failing request;
local precondition errors are raised before any request is made.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import Authorization


class CFToolsError(Exception):
    """Base exception for CFTools client errors."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ResourceNotFound(CFToolsError):
    """The requested resource (server, entry, player id) does not exist."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("ResourceNotFound", url)


class ResourceNotConfigured(CFToolsError):
    """The resource exists but the required bucket is not configured on it.

    Retry only after the bucket (e.g. ``queuepriority`` or ``whitelist``)
    has been enabled for the resource.
    """

    def __init__(self, bucket: str, url: Optional[str] = None):
        super().__init__(f"ResourceNotConfigured: {bucket}", url)
        self.bucket = bucket


class RequestLimitExceeded(CFToolsError):
    """The rate limit of the requested route was exceeded."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("RequestLimitExceeded", url)


class DuplicateResourceCreation(CFToolsError):
    """The resource to create already exists.

    For operations that delete an existing entry before creating the new one
    this usually means a concurrent writer created it in between.
    """

    def __init__(self, url: Optional[str] = None):
        super().__init__("DuplicateResourceCreation", url)


class GrantRequired(CFToolsError):
    """The application has no grant for the requested resource."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("GrantRequired", url)


class TokenExpired(CFToolsError):
    """The bearer token used for the request is expired.

    The request executor consumes the first occurrence of this error per
    operation by refreshing the token and retrying once.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        authorization: Optional["Authorization"] = None,
    ):
        super().__init__("TokenExpired", url)
        self.authorization = authorization


class UnknownError(CFToolsError):
    """The service failed with an unexpected error.

    ``request_id`` identifies the request when contacting support.
    """

    def __init__(self, request_id: Optional[str], url: Optional[str] = None):
        super().__init__(f"UnknownError: {request_id}", url)
        self.request_id = request_id


class TimeoutError(CFToolsError):
    """The request exceeded the time it is allowed to run on the service."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("TimeoutError", url)


class ServiceUnavailable(CFToolsError):
    """CFTools Cloud reported that the service is currently unavailable."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("ServiceUnavailable", url)


class InvalidCredentials(CFToolsError):
    """The login exchange rejected the application id and secret."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("InvalidCredentials", url)


class AuthenticationRequired(CFToolsError):
    """An authenticated operation was called on an anonymous client."""

    def __init__(self) -> None:
        super().__init__("AuthenticationRequired")


class ServerApiIdRequired(CFToolsError):
    """Neither the request nor the client provided a server api id."""

    def __init__(self) -> None:
        super().__init__("ServerApiIdRequired")


class AmbiguousDeleteBanRequest(CFToolsError):
    """A delete-by-player request matched more than one ban."""

    def __init__(self, ban_count: int):
        super().__init__(
            f"AmbiguousDeleteBanRequest: player has {ban_count} bans, delete by ban instead"
        )
        self.ban_count = ban_count


class AccountCreationFailed(CFToolsError):
    """Creating an account for an unknown identifier did not succeed."""

    def __init__(self, identifier: str, notice: Optional[str]):
        super().__init__(f"AccountCreationFailed: {identifier} ({notice})")
        self.identifier = identifier
        self.notice = notice


class GameServerQueryError(CFToolsError):
    """CFTools could not query the upstream game server."""

    def __init__(self, kind: str, url: Optional[str] = None):
        super().__init__(f"GameServerQueryError: {kind}", url)
        self.kind = kind
