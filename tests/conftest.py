from __future__ import annotations

import json
from typing import Callable, Iterator, List

import httpx
import pytest

from logdna_shipper import LogShipper


# Force anyio to use ONLY asyncio, so it doesn't try to pull in trio
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def cleanup_env(monkeypatch):
    for name in ("LOGDNA_APIKEY", "LOGDNA_TAGS", "LOGDNA_APP", "LOGDNA_INGEST_URL", "LOGDNA_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def captured() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_shipper(captured) -> Iterator[Callable[..., LogShipper]]:
    """Build a shipper whose transport records requests and answers 200."""

    shippers: List[LogShipper] = []

    def factory(handler=None, **kwargs) -> LogShipper:
        def default_handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"status": "ok"})

        transport = httpx.MockTransport(handler or default_handler)
        kwargs.setdefault("hostname_resolver", lambda: "h1")
        shipper = LogShipper(
            kwargs.pop("api_key", "secret-key"),
            kwargs.pop("tags", "prod,api"),
            kwargs.pop("app", "svc"),
            sync_transport=transport,
            async_transport=transport,
            **kwargs,
        )
        shippers.append(shipper)
        return shipper

    yield factory

    for shipper in shippers:
        shipper.close()


@pytest.fixture
def read_line() -> Callable[[httpx.Request], dict]:
    """Return the single ingest line carried by a captured request."""

    def reader(request: httpx.Request) -> dict:
        body = json.loads(request.content)
        assert len(body["lines"]) == 1
        return body["lines"][0]

    return reader
