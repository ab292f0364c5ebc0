"""Request construction for the ingestion endpoint.

Everything here is pure: both the blocking and the async submit paths build
their request through :func:`build_ingest_request` and only differ in how the
resulting bytes are sent.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping
from urllib.parse import quote

if TYPE_CHECKING:  # pragma: no cover
    from .client import Session

__all__ = [
    "DEFAULT_INGEST_URL",
    "IngestRequest",
    "build_ingest_body",
    "build_ingest_request",
    "build_ingest_url",
    "now_millis",
    "serialise_body",
]

DEFAULT_INGEST_URL = "https://logs.logdna.com/logs/ingest"

# Commas separate tags; everything else outside the unreserved set is escaped.
_QUERY_SAFE = ","


@dataclass(frozen=True)
class IngestRequest:
    url: str
    headers: Mapping[str, str]
    body: bytes


def now_millis() -> int:
    """Milliseconds since the Unix epoch, from the wall clock."""

    return time.time_ns() // 1_000_000


def build_ingest_url(base_url: str, hostname: str, timestamp_ms: int, tags: str) -> str:
    query = "hostname={}&timestamp={}&tags={}".format(
        quote(hostname, safe=_QUERY_SAFE),
        timestamp_ms,
        quote(tags, safe=_QUERY_SAFE),
    )
    return f"{base_url}?{query}"


def build_ingest_body(message: str, app: str, level: str, timestamp_ms: int) -> Dict[str, Any]:
    return {
        "lines": [
            {
                "line": message,
                "app": app,
                "level": level,
                "timestamp": str(timestamp_ms),
            }
        ]
    }


def serialise_body(body: Mapping[str, Any]) -> bytes:
    """Encode a request body as compact UTF-8 JSON."""

    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def build_ingest_request(
    session: "Session",
    message: str,
    level: str,
    timestamp_ms: int,
    *,
    base_url: str = DEFAULT_INGEST_URL,
) -> IngestRequest:
    url = build_ingest_url(base_url, session.hostname, timestamp_ms, session.tags)
    body = build_ingest_body(message, session.app, level, timestamp_ms)
    headers = {
        "Content-Type": "application/json",
        "apikey": session.api_key,
    }
    return IngestRequest(url=url, headers=headers, body=serialise_body(body))
