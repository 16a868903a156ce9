"""
Implementation of session functionality.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from logging import Logger
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .entity.types import ID, IdMapping
from .exceptions import DecodingError, TransportError

if TYPE_CHECKING:
    from .section.client import SectionClient

__all__ = [
    "Session",
    "decode_body",
]
__canonical_syms__ = __all__


DEFAULT_HOST = "https://api.todoist.com/sync/v9/"
"""
Base URL of Todoist sync API.
"""

REQUEST_TIMEOUT = 10.0
"""
Timeout for requests if not provided by caller.
"""


class Session:
    """
    Interface to Todoist and context in which to queue changes to entities.

    Changes made through the resource clients are visible locally right away
    and queued as commands. A flush collaborator drains the queue, transmits
    it and applies the server's response using
    {obj}`Session.apply_temp_id_mapping` and {obj}`SectionClient.apply`.
    """

    _host: str
    """
    Base URL as configured by user.
    """

    _token: str
    """
    API token.
    """

    _timeout: float
    """
    Default request timeout in seconds.
    """

    _http: requests.Session
    """
    HTTP session used for requests.
    """

    _headers: dict[str, str]
    """
    Common HTTP headers for requests.
    """

    _ids: IdMapping
    """
    Mapping of temporary ids to permanent ids.
    """

    _sections: SectionClient
    """
    Client for sections.
    """

    _logger: Logger
    """
    Logger to use.
    """

    def __init__(
        self,
        token: str,
        host: str = DEFAULT_HOST,
        *,
        timeout: float = REQUEST_TIMEOUT,
        logger: Logger | None = None,
    ):
        """
        :param token: Todoist API token
        :param host: Base URL of sync API
        :param timeout: Default timeout of requests in seconds
        :param logger: Logger to use, or `None` to use default logger
        """
        from .section.client import SectionClient

        assert len(token), "Token is required to connect to Todoist"

        self._logger = logger or logging.getLogger()

        # ensure relative endpoint paths are joined under the api path
        self._host = host if host.endswith("/") else f"{host}/"
        self._token = token
        self._timeout = timeout
        self._headers = {"Authorization": f"Bearer {token}"}

        self._http = requests.Session()
        self._ids = IdMapping()
        self._sections = SectionClient(self)

    def __str__(self):
        return f"Session(host='{self._host}')"

    def __enter__(self):
        self._logger.debug(f"Entering context: {self}")
        return self

    def __exit__(self, exc_type, exc_val, traceback):
        if exc_type:
            self._logger.error(f"Exiting context with error: {self}")
        else:
            self._logger.debug(f"Exiting context: {self}")

        self.close()

    @property
    def host(self) -> str:
        """
        Base URL as configured by user.
        """
        return self._host

    @property
    def ids(self) -> IdMapping:
        """
        Mapping of temporary ids to permanent ids learned from the server.
        """
        return self._ids

    @property
    def sections(self) -> SectionClient:
        """
        Client for sections.
        """
        return self._sections

    @property
    def pending_count(self) -> int:
        """
        Number of commands pending transmission.
        """
        return len(self._sections.queue)

    def new_request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> requests.PreparedRequest:
        """
        Build a request for the provided endpoint.

        :param method: HTTP method, e.g. `GET`
        :param path: Endpoint path relative to host, e.g. `sections/get`
        :param params: Query parameters

        :raises TransportError: If the request can't be built
        """
        request = requests.Request(
            method,
            urljoin(self._host, path),
            params=dict(params or {}),
            headers=self._headers,
        )

        try:
            return self._http.prepare_request(request)
        except (requests.RequestException, ValueError) as e:
            raise TransportError(
                f"Failed to build request {method} {path}: {e}"
            ) from e

    def send(
        self,
        request: requests.PreparedRequest,
        *,
        timeout: float | None = None,
    ) -> requests.Response:
        """
        Execute a request.

        :param request: Request from {obj}`Session.new_request`
        :param timeout: Timeout in seconds, or `None`{l=python} to use the session default

        :raises TransportError: If the request fails or the server responds with an error status
        """
        self._logger.debug(f"Sending request: {request.method} {request.url}")

        # pick up proxies and CA bundle from environment
        settings = self._http.merge_environment_settings(
            request.url, {}, None, None, None
        )

        try:
            response = self._http.send(
                request,
                timeout=self._timeout if timeout is None else timeout,
                **settings,
            )
        except requests.RequestException as e:
            self._logger.error(
                f"Request failed: {request.method} {request.url}: {e}"
            )
            raise TransportError(f"Request failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"Request {request.method} {request.url} returned status code {response.status_code}",
                status_code=response.status_code,
            )

        return response

    def apply_temp_id_mapping(self, mapping: Mapping[str, str]):
        """
        Register permanent ids the server assigned to entities created with
        temporary ids, and re-key cached entities to use them.

        :param mapping: Mapping of temporary id to permanent id, as in the `temp_id_mapping` field of a sync response
        """
        for temp_id, permanent_id in mapping.items():
            self._ids.register(ID(temp_id, is_temporary=True), ID(permanent_id))

        if len(mapping):
            self._logger.debug(f"Applied {len(mapping)} temporary id mappings")

        self._sections._cache.rekey()

    def close(self):
        """
        Release HTTP resources. Pending commands are left queued.
        """
        if self.pending_count:
            self._logger.warning(
                f"Closing with {self.pending_count} pending commands: {self._sections.queue.summary}"
            )

        self._http.close()


class SessionContainer:
    """
    Indicates that an object is associated with a Session.
    """

    _session: Session

    def __init__(self, session: Session):
        self._session = session

    @property
    def session(self) -> Session:
        """
        Session to which this object belongs.
        """
        return self._session


def decode_body[ModelT: BaseModel](
    response: requests.Response, model: type[ModelT]
) -> ModelT:
    """
    Decode the JSON body of a response into the provided model.

    :raises DecodingError: If the body isn't valid JSON or doesn't match the model
    """
    try:
        return model.model_validate_json(response.content)
    except PydanticValidationError as e:
        raise DecodingError(
            f"Failed to decode {model.__name__} from response: {e}"
        ) from e


def _get_params(**kwargs: Any) -> dict[str, str]:
    """
    Get query parameters, dropping those which are `None`.
    """
    return {k: str(v) for k, v in kwargs.items() if v is not None}
