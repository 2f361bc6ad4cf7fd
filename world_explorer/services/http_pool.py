"""
Shared HTTP Client Pool

One reusable ``httpx.AsyncClient`` per running event loop, so every provider
shares connection pooling, keep-alive and timeouts instead of opening a new
client per request. Limits and timeouts come from ``Settings``.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Any, Dict, Optional

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)


class HTTPClientPool:
    """Holds the loop-scoped shared clients."""

    _loop_clients: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, httpx.AsyncClient] = weakref.WeakKeyDictionary()
    _sync_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def _current_loop(cls) -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            # Called outside a running event loop (e.g., sync startup code).
            return None

    @classmethod
    def _initialize_client(cls) -> httpx.AsyncClient:
        settings = get_settings()
        limits = httpx.Limits(
            max_connections=settings.http_max_connections,
            max_keepalive_connections=settings.http_max_keepalive_connections,
            keepalive_expiry=settings.http_keepalive_expiry,
        )
        timeout = httpx.Timeout(
            timeout=settings.http_timeout,
            connect=settings.http_connect_timeout,
        )
        client = httpx.AsyncClient(
            limits=limits,
            timeout=timeout,
            http2=True,
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )
        logger.info(
            "HTTP Client Pool initialized: max_connections=%s, timeout=%ss",
            settings.http_max_connections,
            settings.http_timeout,
        )
        return client

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """Get a shared client scoped to the current event loop."""
        loop = cls._current_loop()
        if loop is None:
            if cls._sync_client is None or cls._sync_client.is_closed:
                cls._sync_client = cls._initialize_client()
            return cls._sync_client

        client = cls._loop_clients.get(loop)
        if client is None or client.is_closed:
            client = cls._initialize_client()
            cls._loop_clients[loop] = client
        return client

    @classmethod
    async def close(cls) -> None:
        """Close all shared HTTP clients across event loops."""
        clients = list(cls._loop_clients.values())
        if cls._sync_client is not None:
            clients.append(cls._sync_client)
        if not clients:
            return

        cls._loop_clients = weakref.WeakKeyDictionary()
        cls._sync_client = None

        closed_ids = set()
        for client in clients:
            if id(client) in closed_ids:
                continue
            closed_ids.add(id(client))
            try:
                await client.aclose()
            except Exception as exc:  # pragma: no cover - cleanup of a client bound to a dead loop
                logger.debug("Error closing HTTP client: %s", exc)
        logger.info("HTTP Client Pool closed")

    @classmethod
    def get_stats(cls) -> Dict[str, Any]:
        active_clients = sum(1 for c in cls._loop_clients.values() if not c.is_closed)
        if cls._sync_client is not None and not cls._sync_client.is_closed:
            active_clients += 1
        if not active_clients:
            return {"status": "not_initialized", "active_clients": 0}
        return {"status": "active", "active_clients": active_clients}


def get_http_client() -> httpx.AsyncClient:
    """Return the shared client; providers call this instead of building their own."""
    return HTTPClientPool.get_client()


async def close_http_pool() -> None:
    """Close the HTTP client pool (called on application shutdown)."""
    await HTTPClientPool.close()
