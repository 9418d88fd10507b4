"""Error classification for CFTools Cloud API responses.

Maps a failed HTTP exchange onto the typed error taxonomy. CFTools signals
the failure kind with an ``error`` tag in a JSON body next to the status
code; several kinds share a status code, so both are needed to decide.
"""

import logging
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

import httpx

from ..exceptions import (
    CFToolsError,
    DuplicateResourceCreation,
    GrantRequired,
    RequestLimitExceeded,
    ResourceNotConfigured,
    ResourceNotFound,
    ServiceUnavailable,
    TimeoutError,
    TokenExpired,
    UnknownError,
)
from ..models import Authorization

logger = logging.getLogger(__name__)

_ErrorFactory = Callable[[str, dict, Optional[Authorization]], CFToolsError]


def _bucket_from_url(url: str) -> str:
    path = urlparse(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1]


class ErrorClassifier:
    """Translates ``httpx.HTTPStatusError`` into CFTools errors."""

    def __init__(self) -> None:
        self._exact: Dict[Tuple[int, str], _ErrorFactory] = {
            (404, "invalid-bucket"): lambda url, body, auth: ResourceNotConfigured(
                _bucket_from_url(url), url
            ),
            (400, "duplicate"): lambda url, body, auth: DuplicateResourceCreation(url),
            (403, "no-grant"): lambda url, body, auth: GrantRequired(url),
            (403, "expired-token"): lambda url, body, auth: TokenExpired(url, auth),
            (500, "unexpected-error"): lambda url, body, auth: UnknownError(
                body.get("request_id"), url
            ),
            (500, "timeout"): lambda url, body, auth: TimeoutError(url),
            (500, "system-unavailable"): lambda url, body, auth: ServiceUnavailable(
                url
            ),
        }
        # Decided by status code alone when no exact pair matched
        self._by_status: Dict[int, Callable[[str], CFToolsError]] = {
            404: ResourceNotFound,
            429: RequestLimitExceeded,
        }

    @staticmethod
    def error_tag(response: httpx.Response) -> Tuple[Optional[str], dict]:
        """Extract the ``error`` tag and the parsed body.

        Returns:
            Tuple of tag (None when the body is not a JSON object) and body
        """
        try:
            body = response.json()
        except ValueError:
            return None, {}
        if not isinstance(body, dict):
            return None, {}
        tag = body.get("error")
        return (tag if isinstance(tag, str) else ""), body

    def classify(
        self,
        error: httpx.HTTPStatusError,
        authorization: Optional[Authorization] = None,
    ) -> Optional[CFToolsError]:
        """Classify a failed exchange.

        Args:
            error: The status error raised by the transport
            authorization: Credential used for the request, attached to
                TokenExpired errors

        Returns:
            The typed error, or None when the failure is not recognised and
            the original error must be propagated unchanged
        """
        response = error.response
        status = response.status_code
        url = str(error.request.url)
        tag, body = self.error_tag(response)

        if tag is not None:
            factory = self._exact.get((status, tag))
            if factory is not None:
                return factory(url, body, authorization)

        status_factory = self._by_status.get(status)
        if status_factory is not None:
            return status_factory(url)

        logger.debug(f"Unclassified response {status} (tag={tag!r}) for {url}")
        return None
