"""Client for shipping structured log lines to the LogDNA ingestion API.

A :class:`LogShipper` resolves the local hostname once and then sends one
line per request, either blocking the calling thread
(:meth:`LogShipper.submit_blocking`) or as a coroutine
(:meth:`LogShipper.submit`). Responses are handed back untouched; transport
failures raise :class:`ShipperTransportError`.
"""

from __future__ import annotations

from .client import (
    HostnameError,
    LogShipper,
    Session,
    ShipperError,
    ShipperTransportError,
    build_default_shipper,
)
from .payload import DEFAULT_INGEST_URL, IngestRequest, build_ingest_request

__all__ = [
    "DEFAULT_INGEST_URL",
    "HostnameError",
    "IngestRequest",
    "LogShipper",
    "Session",
    "ShipperError",
    "ShipperTransportError",
    "build_default_shipper",
    "build_ingest_request",
]
