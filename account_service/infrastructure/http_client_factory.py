"""Shared outbound HTTP client used by the media uploader."""
import httpx
import logging
from typing import Optional

from ..core.config import get_settings

logger = logging.getLogger(__name__)

_shared_client: Optional[httpx.AsyncClient] = None


def build_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    # Connect timeout capped at 10s
    timeout = httpx.Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))
    return httpx.AsyncClient(
        timeout=timeout,
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=50, keepalive_expiry=30.0),
        http2=True,
    )


def get_shared_http_client() -> httpx.AsyncClient:
    """
    Get or lazily create the process-wide AsyncClient.

    Returns:
        Shared AsyncClient instance
    """
    global _shared_client

    if _shared_client is None or _shared_client.is_closed:
        timeout_seconds = get_settings().upload_timeout_seconds
        _shared_client = build_http_client(timeout_seconds)
        logger.info(f"Created shared HTTP client (timeout {timeout_seconds}s)")

    return _shared_client


async def close_shared_http_client() -> None:
    """Close the shared client on application shutdown."""
    global _shared_client

    if _shared_client is None:
        return
    client, _shared_client = _shared_client, None
    await client.aclose()
    logger.info("Closed shared HTTP client")
