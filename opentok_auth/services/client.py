"""OpenTok REST client configuration and authenticated request plumbing."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

from ..core.config import DEFAULT_API_HOST, Settings, get_settings
from ..core.errors import APIError, ConfigurationError
from ..schemas.tokens import IssueType
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-OPENTOK-AUTH"


@runtime_checkable
class HttpDoer(Protocol):
    """Anything able to send one request and return one response."""

    async def send(self, request: httpx.Request) -> httpx.Response: ...


def _normalize_host(url: str | None) -> str:
    host = (url or "").strip().rstrip("/")
    if not host:
        raise ConfigurationError("OpenTok API host cannot be empty")
    return host


class OpenTok:
    """API key, secret and transport used to call the OpenTok REST API.

    Instances never change after construction. ``with_api_host`` and
    ``with_http_client`` return reconfigured copies, so one client can be
    shared between threads and tasks without locking.
    """

    __slots__ = ("_api_key", "_api_secret", "_api_host", "_http_client", "_issuer")

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        api_host: str = DEFAULT_API_HOST,
        http_client: HttpDoer | None = None,
    ) -> None:
        object.__setattr__(self, "_api_key", api_key)
        object.__setattr__(self, "_api_secret", api_secret)
        object.__setattr__(self, "_api_host", _normalize_host(api_host))
        object.__setattr__(self, "_http_client", http_client)
        object.__setattr__(self, "_issuer", TokenIssuer(api_key, api_secret))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; use with_api_host/with_http_client")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"OpenTok(api_key={self._api_key!r}, api_host={self._api_host!r})"

    @classmethod
    def from_settings(cls, settings: Settings | None = None, *, http_client: HttpDoer | None = None) -> "OpenTok":
        """Build a client from ``OPENTOK_*`` environment settings."""

        settings = settings or get_settings()
        if not settings.api_key or not settings.api_secret.get_secret_value():
            raise ConfigurationError("OPENTOK_API_KEY and OPENTOK_API_SECRET must both be set")
        return cls(
            settings.api_key,
            settings.api_secret.get_secret_value(),
            api_host=settings.api_host,
            http_client=http_client,
        )

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def api_host(self) -> str:
        return self._api_host

    @property
    def http_client(self) -> HttpDoer | None:
        return self._http_client

    def with_api_host(self, url: str) -> "OpenTok":
        """Return a copy that targets ``url``.

        Raises:
            ConfigurationError: ``url`` is empty. ``self`` is left untouched.
        """

        return type(self)(self._api_key, self._api_secret, api_host=_normalize_host(url), http_client=self._http_client)

    def with_http_client(self, client: HttpDoer | None) -> "OpenTok":
        """Return a copy that sends requests through ``client``; ``None`` keeps the current one."""

        return type(self)(
            self._api_key,
            self._api_secret,
            api_host=self._api_host,
            http_client=client if client is not None else self._http_client,
        )

    def jwt_token(self, issue_type: IssueType | str = IssueType.PROJECT) -> str:
        return self._issuer.issue_token(issue_type)

    def project_token(self) -> str:
        return self.jwt_token(IssueType.PROJECT)

    def account_token(self) -> str:
        return self.jwt_token(IssueType.ACCOUNT)

    def auth_headers(self, issue_type: IssueType | str = IssueType.PROJECT) -> dict[str, str]:
        """Headers authorizing one REST call. Tokens expire quickly, so build these per request."""

        return {
            AUTH_HEADER: self.jwt_token(issue_type),
            "Accept": "application/json",
        }

    def url_for(self, path: str) -> str:
        return f"{self._api_host}/{path.lstrip('/')}"

    def build_request(
        self,
        method: str,
        path: str,
        *,
        issue_type: IssueType | str = IssueType.PROJECT,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        return httpx.Request(
            method.upper(),
            self.url_for(path),
            headers=self.auth_headers(issue_type),
            json=json,
            params=params,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        issue_type: IssueType | str = IssueType.PROJECT,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request to ``path`` on the configured host.

        Raises:
            APIError: the API answered with a 4xx or 5xx status.
            httpx.HTTPError: the transport failed.
        """

        request = self.build_request(method, path, issue_type=issue_type, json=json, params=params)
        if self._http_client is not None:
            response = await self._http_client.send(request)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.send(request)

        if response.status_code >= 400:
            logger.warning(
                "OpenTok API %s %s failed with %s",
                request.method,
                request.url.path,
                response.status_code,
            )
            raise APIError(response.status_code, response.text)
        return response
