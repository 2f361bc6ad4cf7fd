from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import httpx

from ..models import CountryRecord


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


class MockAsyncResponse:
    def __init__(
        self,
        payload: Any,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        url: str = "https://example.test/",
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.url = url

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("GET", self.url)
            response = httpx.Response(self.status_code, request=request)
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}", request=request, response=response
            )


class MockAsyncClient:
    """
    Stand-in for the shared ``httpx.AsyncClient``.

    Responses are handed out in call order; an exception in the queue is
    raised instead of returned. Every call is recorded in ``calls``.
    """

    def __init__(self, responses: Iterable[Union[MockAsyncResponse, Exception]]) -> None:
        self._responses: List[Union[MockAsyncResponse, Exception]] = list(responses)
        self.calls: List[Tuple[str, Optional[Dict[str, Any]]]] = []

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> MockAsyncResponse:
        self.calls.append((url, params))
        if not self._responses:
            raise httpx.ConnectError("No mock response queued", request=httpx.Request("GET", url))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_country(
    iso3: str,
    common_name: str,
    official_name: Optional[str] = None,
    population: int = 1_000_000,
    area: float = 1000.0,
    capital: Optional[List[str]] = None,
    region: str = "Europe",
) -> CountryRecord:
    return CountryRecord(
        iso3=iso3,
        common_name=common_name,
        official_name=official_name or common_name,
        population=population,
        area=area,
        capital=capital or [],
        region=region,
    )


def rest_country(
    cca3: str,
    common: str,
    official: Optional[str] = None,
    population: Optional[int] = 1_000_000,
    area: Optional[float] = 1000.0,
    cca2: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """A REST Countries v3.1 bulk-list element."""
    item: Dict[str, Any] = {
        "name": {"common": common, "official": official or common},
        "cca3": cca3,
        "cca2": cca2 or cca3[:2],
        "area": area,
        "capital": [],
        "region": "Europe",
    }
    if population is not None:
        item["population"] = population
    item.update(extra)
    return item


def worldbank_page(rows: Iterable[Tuple[str, str, str, str, Optional[float]]]) -> List[Any]:
    """World Bank v2 indicator payload from ``(iso2, iso3, name, date, value)`` rows."""
    data = [
        {
            "indicator": {"id": "SP.POP.TOTL", "value": "Population, total"},
            "country": {"id": iso2, "value": name},
            "countryiso3code": iso3,
            "date": date,
            "value": value,
        }
        for iso2, iso3, name, date, value in rows
    ]
    return [{"page": 1, "pages": 1, "per_page": 20000, "total": len(data)}, data]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
