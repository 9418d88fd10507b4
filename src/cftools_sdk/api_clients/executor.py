"""Resilient request execution for the CFTools Cloud API.

Every API call goes through ``ResilientRequestExecutor``. It attaches the
current credential, classifies failures and recovers from exactly one
expired-token response per call:

    IDLE -> REQUESTING -> SUCCEEDED | FAILED
    REQUESTING --(TokenExpired)--> REFRESHING -> RETRYING -> SUCCEEDED | FAILED

The retry budget is one, and only attempts that sent a credential are
retried. A failure of the retry is classified on its own and
raised, even when it is another TokenExpired.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import httpx

from ..exceptions import TokenExpired
from ..models import Authorization
from .auth import AuthorizationProvider
from .error_classifier import ErrorClassifier
from .transport import HttpTransport, RequestOptions

logger = logging.getLogger(__name__)


class RequestState(Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    REFRESHING = "refreshing"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class _Attempt:
    """Outcome of one HTTP exchange."""

    response: Optional[httpx.Response] = None
    error: Optional[Exception] = None
    cause: Optional[Exception] = None
    authorization: Optional[Authorization] = None

    @property
    def succeeded(self) -> bool:
        return self.response is not None

    @property
    def token_expired(self) -> bool:
        return isinstance(self.error, TokenExpired)


class ResilientRequestExecutor:
    """Issues API requests with credential handling and typed errors."""

    def __init__(
        self,
        transport: HttpTransport,
        auth_provider: AuthorizationProvider,
        classifier: Optional[ErrorClassifier] = None,
    ):
        self.transport = transport
        self.auth_provider = auth_provider
        self.classifier = classifier or ErrorClassifier()

    async def request(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        """Execute a request, refreshing an expired token at most once.

        Args:
            method: HTTP method
            path: Path relative to the API origin
            options: Query params, headers, body and context of the request
            authenticate: Attach the provider's credential, if it has one

        Returns:
            The successful HTTP response

        Raises:
            CFToolsError: Typed error for every recognised failure
            httpx.HTTPStatusError: For unrecognised failure responses
            httpx.HTTPError: For transport failures
        """
        options = options or RequestOptions()
        state = RequestState.IDLE
        retried = False

        state = self._transition(state, RequestState.REQUESTING, method, path)
        attempt = await self._attempt(method, path, options, authenticate)

        while True:
            if attempt.succeeded:
                self._transition(state, RequestState.SUCCEEDED, method, path)
                assert attempt.response is not None
                return attempt.response

            if (
                attempt.token_expired
                and attempt.authorization is not None
                and not retried
                and self.auth_provider.can_refresh
            ):
                state = self._transition(state, RequestState.REFRESHING, method, path)
                self.auth_provider.report_expired()
                retried = True

                state = self._transition(state, RequestState.RETRYING, method, path)
                attempt = await self._attempt(method, path, options, authenticate)
                continue

            self._transition(state, RequestState.FAILED, method, path)
            assert attempt.error is not None
            if attempt.cause is not None:
                raise attempt.error from attempt.cause
            raise attempt.error

    async def get(
        self,
        path: str,
        options: Optional[RequestOptions] = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        return await self.request("GET", path, options, authenticate)

    async def post(
        self,
        path: str,
        options: Optional[RequestOptions] = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        return await self.request("POST", path, options, authenticate)

    async def delete(
        self,
        path: str,
        options: Optional[RequestOptions] = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        return await self.request("DELETE", path, options, authenticate)

    async def _attempt(
        self,
        method: str,
        path: str,
        options: RequestOptions,
        authenticate: bool,
    ) -> _Attempt:
        authorization: Optional[Authorization] = None
        if authenticate:
            authorization = await self.auth_provider.provide(self.transport)

        headers = dict(options.headers)
        if authorization is not None:
            headers.update(authorization.as_header())

        try:
            response = await self.transport.request(
                method, path, replace(options, headers=headers)
            )
        except httpx.HTTPStatusError as e:
            classified = self.classifier.classify(e, authorization)
            if classified is None:
                return _Attempt(error=e, authorization=authorization)
            return _Attempt(error=classified, cause=e, authorization=authorization)
        return _Attempt(response=response, authorization=authorization)

    @staticmethod
    def _transition(
        current: RequestState, new: RequestState, method: str, path: str
    ) -> RequestState:
        logger.debug(f"{method} {path}: {current.value} -> {new.value}")
        return new
