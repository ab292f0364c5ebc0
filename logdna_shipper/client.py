"""HTTP client for shipping single log lines to the ingestion endpoint."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

import httpx

from .payload import DEFAULT_INGEST_URL, IngestRequest, build_ingest_request, now_millis

if TYPE_CHECKING:  # pragma: no cover
    from .config import ShipperSettings

__all__ = [
    "HostnameError",
    "LogShipper",
    "Session",
    "ShipperError",
    "ShipperTransportError",
    "build_default_shipper",
]

logger = logging.getLogger(__name__)


class ShipperError(RuntimeError):
    """Base exception for log shipper failures."""


class HostnameError(ShipperError):
    """Raised when the local hostname cannot be resolved to usable text."""


class ShipperTransportError(ShipperError):
    """Raised when a request could not be sent or no response arrived."""

    def __init__(self, method: str, url: str, message: str):
        super().__init__(message)
        self.method = method
        self.url = url


@dataclass(frozen=True)
class Session:
    """Per-process identity shared read-only by every submission."""

    api_key: str = field(repr=False)
    hostname: str
    tags: str
    app: str


def _resolve_hostname(resolver: Callable[[], str | bytes]) -> str:
    try:
        raw = resolver()
    except OSError as exc:
        raise HostnameError(f"unable to determine hostname: {exc}") from exc

    try:
        hostname = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
        # surrogate escapes from undecodable bytes fail here
        hostname.encode("utf-8")
    except UnicodeError as exc:
        raise HostnameError(f"hostname is not valid text: {raw!r}") from exc

    if not hostname:
        raise HostnameError("hostname is empty")
    return hostname


class LogShipper:
    """Send log lines to the ingestion API, blocking or async."""

    def __init__(
        self,
        api_key: str,
        tags: str,
        app: str,
        *,
        base_url: str = DEFAULT_INGEST_URL,
        timeout: float = 5.0,
        hostname_resolver: Callable[[], str | bytes] = socket.gethostname,
        sync_transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        hostname = _resolve_hostname(hostname_resolver)
        self._session = Session(api_key=api_key, hostname=hostname, tags=tags, app=app)
        self._base_url = base_url
        self._client = httpx.Client(timeout=timeout, transport=sync_transport)
        self._async_client = httpx.AsyncClient(
            timeout=timeout,
            transport=async_transport or sync_transport,
        )
        logger.debug("log shipper ready host=%s app=%s url=%s", hostname, app, base_url)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def hostname(self) -> str:
        return self._session.hostname

    @property
    def tags(self) -> str:
        return self._session.tags

    @property
    def app(self) -> str:
        return self._session.app

    @property
    def base_url(self) -> str:
        return self._base_url

    def submit_blocking(self, message: str, level: str) -> httpx.Response:
        """Send one line, holding the calling thread until the exchange ends.

        The response is returned whatever its status. Connection problems
        raise :class:`ShipperTransportError`.
        """

        request = self._prepare(message, level)
        try:
            response = self._client.post(request.url, content=request.body, headers=request.headers)
        except httpx.TransportError as exc:
            raise ShipperTransportError("POST", request.url, str(exc)) from exc

        logger.debug("log line shipped status=%s url=%s", response.status_code, request.url)
        return response

    async def submit(self, message: str, level: str) -> httpx.Response:
        """Async counterpart of :meth:`submit_blocking`.

        Suspends only while the HTTP exchange is in flight; cancelling the
        surrounding task aborts the request.
        """

        request = self._prepare(message, level)
        try:
            response = await self._async_client.post(
                request.url, content=request.body, headers=request.headers
            )
        except httpx.TransportError as exc:
            raise ShipperTransportError("POST", request.url, str(exc)) from exc

        logger.debug("log line shipped status=%s url=%s", response.status_code, request.url)
        return response

    def _prepare(self, message: str, level: str) -> IngestRequest:
        return build_ingest_request(
            self._session,
            message,
            level,
            now_millis(),
            base_url=self._base_url,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed and self._async_client.is_closed

    def close(self) -> None:
        """Release the blocking connection pool only.

        The async pool belongs to an event loop; use :meth:`aclose` (or
        ``async with``) to release both.
        """

        self._client.close()

    async def aclose(self) -> None:
        """Release both connection pools."""

        self._client.close()
        await self._async_client.aclose()

    def __enter__(self) -> "LogShipper":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "LogShipper":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"LogShipper(app={self.app!r}, hostname={self.hostname!r}, base_url={self.base_url!r})"


def build_default_shipper(settings: Optional["ShipperSettings"] = None) -> LogShipper:
    if settings is None:
        from .config import get_settings

        settings = get_settings()
    return LogShipper(
        settings.api_key,
        settings.tags,
        settings.app,
        base_url=settings.ingest_url,
        timeout=settings.timeout,
    )
