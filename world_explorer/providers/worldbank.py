from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ..config import Settings, get_settings
from ..exceptions import SchemaError
from ..models import GrowthPoint, GrowthSeries, RankingRecord
from ..utils.geographies import flag_glyph, is_country_code
from .base import BaseProvider

logger = logging.getLogger(__name__)


class _Reference(BaseModel):
    id: str = ""
    value: str = ""


class WorldBankObservation(BaseModel):
    indicator: _Reference
    country: _Reference
    countryiso3code: str = ""
    date: str
    value: Optional[float] = None


class WorldBankProvider(BaseProvider):
    """World Bank indicators API (v2) for population and GDP."""

    POPULATION_INDICATOR = "SP.POP.TOTL"
    GDP_INDICATOR = "NY.GDP.MKTP.CD"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0, settings: Optional[Settings] = None) -> None:
        super().__init__(timeout=timeout)
        settings = settings or get_settings()
        self.base_url = (base_url or settings.worldbank_base_url).rstrip("/")
        self.ranking_date_range = settings.ranking_date_range
        self.growth_date_range = f"{settings.growth_start_year}:{settings.growth_end_year}"

    @property
    def provider_name(self) -> str:
        return "World Bank"

    async def _fetch_observations(
        self, path: str, params: Dict[str, object], envelope_as_missing: bool = False
    ) -> Optional[List[WorldBankObservation]]:
        """
        Fetch one indicator page.

        Returns ``None`` when the API answers with an empty data page (no
        observations for that country/indicator). Raises ``SchemaError`` for
        malformed pages, and for API error envelopes unless
        ``envelope_as_missing`` is set, in which case they also give ``None``.
        """
        payload = self._expect_list(
            await self._get_json(f"{self.base_url}/{path}", params={"format": "json", **params}),
            "indicator",
        )

        # Error envelope: [{"message": [{"id": "120", "value": "Invalid value"}]}]
        if payload and isinstance(payload[0], dict) and "message" in payload[0]:
            messages = payload[0].get("message") or []
            detail = messages[0].get("value", "Unknown error") if messages and isinstance(messages[0], dict) else "Unknown error"
            if envelope_as_missing:
                logger.debug("World Bank rejected %s: %s", path, detail)
                return None
            raise SchemaError(f"World Bank API error: {detail}", details={"path": path})

        if len(payload) < 2:
            raise SchemaError("World Bank response missing data page", details={"path": path})
        records = payload[1]
        if records is None:
            return None
        records = self._expect_list(records, "indicator data")
        return self._validate_items(records, WorldBankObservation, "indicator data")

    async def fetch_latest_ranking(self, indicator: str, date_range: str) -> List[RankingRecord]:
        """Most recent non-null observation per country, sorted descending."""
        observations = await self._fetch_observations(
            f"country/all/indicator/{indicator}",
            {"date": date_range, "per_page": 20000},
        )
        if not observations:
            raise SchemaError(f"World Bank returned no observations for {indicator}")

        latest: Dict[str, WorldBankObservation] = {}
        for observation in observations:
            iso3 = observation.countryiso3code.upper()
            if observation.value is None or not is_country_code(iso3):
                continue
            existing = latest.get(iso3)
            if existing is None or observation.date > existing.date:
                latest[iso3] = observation

        rankings = [
            RankingRecord(
                country=observation.country.value or iso3,
                iso3=iso3,
                value=observation.value,
                flag=flag_glyph(observation.country.id),
            )
            for iso3, observation in latest.items()
        ]
        rankings.sort(key=lambda record: record.value, reverse=True)
        return rankings

    async def fetch_population_ranking(self) -> List[RankingRecord]:
        return await self.fetch_latest_ranking(self.POPULATION_INDICATOR, self.ranking_date_range)

    async def fetch_gdp_ranking(self) -> List[RankingRecord]:
        return await self.fetch_latest_ranking(self.GDP_INDICATOR, self.ranking_date_range)

    async def _fetch_country_series(self, country_code: str) -> Optional[GrowthSeries]:
        observations = await self._fetch_observations(
            f"country/{country_code}/indicator/{self.POPULATION_INDICATOR}",
            {"date": self.growth_date_range, "per_page": 100},
            envelope_as_missing=True,
        )
        if not observations:
            logger.debug("No population observations for %s", country_code)
            return None

        points = sorted(
            (
                GrowthPoint(year=int(observation.date), value=observation.value)
                for observation in observations
                if observation.value is not None and observation.date.isdigit()
            ),
            key=lambda point: point.year,
        )
        first = observations[0]
        return GrowthSeries(
            country=first.country.value or country_code,
            iso3=(first.countryiso3code or country_code).upper(),
            points=points,
        )

    async def fetch_growth_series(self, country_codes: Sequence[str]) -> List[GrowthSeries]:
        """Population series per country, fetched concurrently.

        Countries the API does not cover are dropped; a transport failure on
        any request fails the batch, as does ending up with no series at all."""
        results = await asyncio.gather(*(self._fetch_country_series(code) for code in country_codes))
        series_list = [series for series in results if series is not None]
        if country_codes and not series_list:
            raise SchemaError("World Bank returned no population series", details={"countries": list(country_codes)})
        return series_list
