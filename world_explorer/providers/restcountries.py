from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..config import get_settings
from ..exceptions import SchemaError
from ..models import CountryRecord, Currency, RankingRecord
from ..utils.geographies import flag_glyph
from .base import BaseProvider

logger = logging.getLogger(__name__)


class _CountryName(BaseModel):
    common: str
    official: str = ""


class _CurrencyPayload(BaseModel):
    name: str = ""
    symbol: str = ""


class RestCountry(BaseModel):
    """One element of a REST Countries style bulk list (mledoze layout is compatible)."""

    name: _CountryName
    cca3: str
    cca2: Optional[str] = None
    population: Optional[int] = None
    area: Optional[float] = None
    capital: List[str] = Field(default_factory=list)
    region: str = ""
    subregion: Optional[str] = None
    languages: Dict[str, str] = Field(default_factory=dict)
    currencies: Dict[str, _CurrencyPayload] = Field(default_factory=dict)
    flag: Optional[str] = None
    latlng: List[float] = Field(default_factory=list)


class PopulatedCountry(BaseModel):
    """Minimal shape required to rank countries by population."""

    name: _CountryName
    cca3: str
    population: int
    flag: Optional[str] = None


def to_country_record(item: RestCountry) -> Optional[CountryRecord]:
    """Convert a validated bulk-list element; ``None`` if it breaks record invariants."""
    centroid = None
    if len(item.latlng) >= 2:
        centroid = (float(item.latlng[0]), float(item.latlng[1]))
    try:
        return CountryRecord(
            iso3=item.cca3.strip().upper(),
            common_name=item.name.common,
            official_name=item.name.official or item.name.common,
            population=item.population or 0,
            area=item.area if item.area is not None else 0,
            capital=list(item.capital),
            region=item.region,
            subregion=item.subregion or None,
            languages=dict(item.languages),
            currencies={
                code: Currency(name=currency.name, symbol=currency.symbol)
                for code, currency in item.currencies.items()
            },
            flag_glyph=item.flag or flag_glyph(item.cca2) or "",
            centroid=centroid,
        )
    except ValidationError as exc:
        logger.debug("Skipping country %s: %s", item.cca3, exc.errors()[0].get("msg"))
        return None


class RestCountriesProvider(BaseProvider):
    """
    Bulk country list source.

    The same class serves the REST Countries API and the mledoze GitHub
    dataset, which share the element layout; the mirror omits population.
    """

    def __init__(self, url: Optional[str] = None, name: str = "REST Countries", timeout: float = 30.0) -> None:
        super().__init__(timeout=timeout)
        self.url = url or get_settings().restcountries_url
        self._name = name

    @property
    def provider_name(self) -> str:
        return self._name

    async def fetch_countries(self) -> List[CountryRecord]:
        payload = self._expect_list(await self._get_json(self.url), "country list")
        items = self._validate_items(payload, RestCountry, "country list")

        records: List[CountryRecord] = []
        for item in items:
            record = to_country_record(item)
            if record is not None:
                records.append(record)
        if not records:
            raise SchemaError(f"{self.provider_name} returned no usable countries", details={"elements": len(items)})
        logger.info("%s: %d countries loaded (%d skipped)", self.provider_name, len(records), len(items) - len(records))
        return records

    async def fetch_population_ranking(self) -> List[RankingRecord]:
        payload = self._expect_list(await self._get_json(self.url), "population")
        items = self._validate_items(payload, PopulatedCountry, "population")

        rankings = [
            RankingRecord(
                country=item.name.common,
                iso3=item.cca3.upper(),
                value=item.population,
                flag=item.flag,
            )
            for item in items
            if item.population and item.cca3
        ]
        rankings.sort(key=lambda record: record.value, reverse=True)
        return rankings
