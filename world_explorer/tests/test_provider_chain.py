from __future__ import annotations

import asyncio

import pytest

from world_explorer.exceptions import SchemaError, TransportError
from world_explorer.services.provider_chain import FALLBACK_SOURCE, ChainLink, ProviderChain


def _returning(value):
    async def fetch(*args, **kwargs):
        return value

    return fetch


def _raising(exc):
    async def fetch(*args, **kwargs):
        raise exc

    return fetch


@pytest.mark.asyncio
async def test_first_successful_provider_wins() -> None:
    second_called = False

    async def second():
        nonlocal second_called
        second_called = True
        return ["second"]

    chain = ProviderChain(
        "demo",
        [ChainLink("first", _returning(["first"])), ChainLink("second", second)],
        fallback=lambda: ["fallback"],
    )

    result = await chain.run()

    assert result.value == ["first"]
    assert result.source == "first"
    assert not result.from_fallback
    assert not second_called
    assert [attempt.provider for attempt in result.attempts] == ["first"]


@pytest.mark.asyncio
async def test_failures_fall_through_in_order() -> None:
    chain = ProviderChain(
        "demo",
        [
            ChainLink("down", _raising(TransportError("connection refused"))),
            ChainLink("garbled", _raising(SchemaError("payload must be a list"))),
            ChainLink("healthy", _returning([3])),
        ],
        fallback=lambda: [],
    )

    result = await chain.run()

    assert result.value == [3]
    assert result.source == "healthy"
    assert [(a.provider, a.ok) for a in result.attempts] == [
        ("down", False),
        ("garbled", False),
        ("healthy", True),
    ]
    assert "connection refused" in result.attempts[0].error


@pytest.mark.asyncio
async def test_all_failures_return_fallback_with_arguments() -> None:
    chain = ProviderChain(
        "growth",
        [ChainLink("down", _raising(TransportError("boom")))],
        fallback=lambda codes: [f"static:{code}" for code in codes],
    )

    result = await chain.run(["USA", "CHN"])

    assert result.from_fallback
    assert result.source == FALLBACK_SOURCE
    assert result.value == ["static:USA", "static:CHN"]
    assert len(result.attempts) == 1


@pytest.mark.asyncio
async def test_unexpected_exception_counts_as_failed_attempt() -> None:
    chain = ProviderChain(
        "demo",
        [ChainLink("buggy", _raising(KeyError("name"))), ChainLink("ok", _returning("ok"))],
        fallback=lambda: "fallback",
    )

    result = await chain.run()

    assert result.value == "ok"
    assert result.attempts[0].ok is False


@pytest.mark.asyncio
async def test_slow_provider_times_out() -> None:
    async def slow():
        await asyncio.sleep(5)
        return "late"

    chain = ProviderChain(
        "demo",
        [ChainLink("slow", slow), ChainLink("fast", _returning("fast"))],
        fallback=lambda: "fallback",
        timeout=0.01,
    )

    result = await chain.run()

    assert result.value == "fast"
    assert "timed out" in result.attempts[0].error


@pytest.mark.asyncio
async def test_chain_without_providers_serves_fallback() -> None:
    chain = ProviderChain("languages", [], fallback=lambda: ["curated"])

    result = await chain.run()

    assert result.value == ["curated"]
    assert result.from_fallback
    assert result.attempts == []


def test_attempt_to_dict_rounds_elapsed() -> None:
    from world_explorer.services.provider_chain import ProviderAttempt

    attempt = ProviderAttempt(provider="World Bank", ok=False, elapsed_ms=12.3456, error="HTTP 503")

    assert attempt.to_dict() == {
        "provider": "World Bank",
        "ok": False,
        "elapsed_ms": 12.35,
        "error": "HTTP 503",
    }
