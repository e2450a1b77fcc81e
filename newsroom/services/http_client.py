"""Shared httpx client for outbound provider calls."""

import logging

import httpx

from newsroom.config import get_settings

logger = logging.getLogger(__name__)

# Module-level shared client (created lazily, lives for the process lifetime)
_client: httpx.AsyncClient | None = None


def get_shared_client() -> httpx.AsyncClient:
    """Return a shared httpx.AsyncClient, creating it on first call.

    The default timeout bounds every outbound translation request; callers
    may still pass a per-request ``timeout``.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=get_settings().translation_timeout)
    return _client


async def close_shared_client() -> None:
    """Close the shared client if one was created."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed shared HTTP client")
    _client = None
