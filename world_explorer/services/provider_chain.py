"""
Ordered provider chains.

A chain holds a fixed list of providers for one data category and a bundled
fallback. ``run`` tries the providers strictly in order; each attempt is
bounded by a timeout and produces a tagged ``ProviderAttempt``. The first
successful attempt wins. When all attempts fail the fallback is returned.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from ..exceptions import SchemaError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_SOURCE = "fallback"


@dataclass(frozen=True)
class ChainLink(Generic[T]):
    """One provider in a chain: a name and the coroutine function that fetches."""

    name: str
    fetch: Callable[..., Awaitable[T]]


@dataclass(frozen=True)
class ProviderAttempt:
    provider: str
    ok: bool
    elapsed_ms: float
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "ok": self.ok,
            "elapsed_ms": round(self.elapsed_ms, 2),
            "error": self.error,
        }


@dataclass
class ChainResult(Generic[T]):
    value: T
    source: str
    attempts: List[ProviderAttempt] = field(default_factory=list)

    @property
    def from_fallback(self) -> bool:
        return self.source == FALLBACK_SOURCE


class ProviderChain(Generic[T]):
    def __init__(
        self,
        category: str,
        links: Sequence[ChainLink[T]],
        fallback: Callable[..., T],
        timeout: Optional[float] = None,
    ) -> None:
        self.category = category
        self.links = list(links)
        self.fallback = fallback
        self.timeout = timeout

    async def _attempt(self, link: ChainLink[T], *args: Any, **kwargs: Any) -> tuple[ProviderAttempt, Any]:
        started = time.perf_counter()
        try:
            if self.timeout is not None:
                value = await asyncio.wait_for(link.fetch(*args, **kwargs), timeout=self.timeout)
            else:
                value = await link.fetch(*args, **kwargs)
        except asyncio.TimeoutError:
            error: Exception = TransportError(
                f"{link.name} timed out", details={"timeout_s": self.timeout}
            )
        except (TransportError, SchemaError) as exc:
            error = exc
        except Exception as exc:
            logger.exception("Unexpected error from %s provider %s", self.category, link.name)
            error = exc
        else:
            elapsed = (time.perf_counter() - started) * 1000
            return ProviderAttempt(provider=link.name, ok=True, elapsed_ms=elapsed), value

        elapsed = (time.perf_counter() - started) * 1000
        logger.warning("%s provider %s failed: %s", self.category, link.name, error)
        return ProviderAttempt(provider=link.name, ok=False, elapsed_ms=elapsed, error=str(error)), None

    async def run(self, *args: Any, **kwargs: Any) -> ChainResult[T]:
        """Try each provider in order; return the first success or the fallback."""
        attempts: List[ProviderAttempt] = []
        for link in self.links:
            attempt, value = await self._attempt(link, *args, **kwargs)
            attempts.append(attempt)
            if attempt.ok:
                if len(attempts) > 1:
                    logger.info("%s served by %s after %d failed attempt(s)", self.category, link.name, len(attempts) - 1)
                return ChainResult(value=value, source=link.name, attempts=attempts)

        if self.links:
            logger.warning("All %s providers failed; using bundled fallback", self.category)
        return ChainResult(value=self.fallback(*args, **kwargs), source=FALLBACK_SOURCE, attempts=attempts)
