"""
Resilient Source Fetcher.

Every data category is served by a fixed, ordered ``ProviderChain`` ending in
a bundled fallback, and every category is wrapped by the shared ``TTLCache``:
a live hit is returned without touching any provider. Only live results (and
the "no Factbook document" enrichment outcome) are cached, so a provider that
recovers is picked up on the next request after a fallback.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..config import Settings, get_settings
from ..models import (
    BoundaryFeature,
    CountryRecord,
    DashboardSnapshot,
    EnrichmentFields,
    GrowthSeries,
    LanguageRanking,
    RankingCategory,
    RankingRecord,
    ReligionShare,
)
from ..providers import static_data
from ..providers.factbook import FactbookProvider
from ..providers.natural_earth import NaturalEarthProvider
from ..providers.restcountries import RestCountriesProvider
from ..providers.worldbank import WorldBankProvider
from ..routing.country_registry import CountryRegistry
from .cache import TTLCache
from .enrichment import extract_enrichment, factbook_document_path
from .http_pool import close_http_pool
from .provider_chain import ChainLink, ProviderChain

logger = logging.getLogger(__name__)


def _enrichment_link(provider: FactbookProvider) -> ChainLink[EnrichmentFields]:
    async def fetch(path: str) -> EnrichmentFields:
        return extract_enrichment(await provider.fetch_document(path))

    return ChainLink(provider.provider_name, fetch)


class ResilientFetcher:
    """Cached, fallback-backed access to every data category."""

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        settings: Optional[Settings] = None,
        restcountries: Optional[RestCountriesProvider] = None,
        countries_mirror: Optional[RestCountriesProvider] = None,
        worldbank: Optional[WorldBankProvider] = None,
        factbook: Optional[FactbookProvider] = None,
        factbook_mirror: Optional[FactbookProvider] = None,
        natural_earth: Optional[NaturalEarthProvider] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else TTLCache(self.settings.cache_ttl_seconds)
        self.diagnostics: Dict[str, List[Dict[str, Any]]] = {}

        s = self.settings
        self.restcountries = restcountries or RestCountriesProvider(url=s.restcountries_url)
        self.countries_mirror = countries_mirror or RestCountriesProvider(
            url=s.countries_mirror_url, name="Countries dataset (GitHub)"
        )
        self.worldbank = worldbank or WorldBankProvider(base_url=s.worldbank_base_url, settings=s)
        self.factbook = factbook or FactbookProvider(base_url=s.factbook_base_url)
        self.factbook_mirror = factbook_mirror or FactbookProvider(
            base_url=s.factbook_mirror_url, name="Factbook (jsDelivr)"
        )
        self.natural_earth = natural_earth or NaturalEarthProvider(url=s.natural_earth_url)

        timeout = s.provider_timeout_seconds
        self.chains: Dict[str, ProviderChain] = {
            "countries": ProviderChain(
                "countries",
                [
                    ChainLink(self.restcountries.provider_name, self.restcountries.fetch_countries),
                    ChainLink(self.countries_mirror.provider_name, self.countries_mirror.fetch_countries),
                ],
                fallback=list,
                timeout=timeout,
            ),
            RankingCategory.POPULATION.value: ProviderChain(
                "population",
                [
                    ChainLink(self.restcountries.provider_name, self.restcountries.fetch_population_ranking),
                    ChainLink(self.worldbank.provider_name, self.worldbank.fetch_population_ranking),
                ],
                fallback=static_data.population_ranking,
                timeout=timeout,
            ),
            RankingCategory.GDP.value: ProviderChain(
                "gdp",
                [ChainLink(self.worldbank.provider_name, self.worldbank.fetch_gdp_ranking)],
                fallback=static_data.gdp_ranking,
                timeout=timeout,
            ),
            # Curated tables only; no public API serves these figures.
            "languages": ProviderChain("languages", [], fallback=static_data.language_ranking),
            "religions": ProviderChain("religions", [], fallback=static_data.religion_distribution),
            "growth": ProviderChain(
                "growth",
                [ChainLink(self.worldbank.provider_name, self.worldbank.fetch_growth_series)],
                fallback=static_data.growth_series,
                timeout=timeout,
            ),
            "enrichment": ProviderChain(
                "enrichment",
                [_enrichment_link(self.factbook), _enrichment_link(self.factbook_mirror)],
                fallback=lambda path: EnrichmentFields(),
                timeout=timeout,
            ),
            "boundaries": ProviderChain(
                "boundaries",
                [ChainLink(self.natural_earth.provider_name, self.natural_earth.fetch_features)],
                fallback=list,
                timeout=max(timeout, self.natural_earth.timeout),
            ),
        }

    async def _cached(self, key: str, category: str, *args: Any) -> Any:
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        result = await self.chains[category].run(*args)
        self.diagnostics[key] = [attempt.to_dict() for attempt in result.attempts]
        if not result.from_fallback:
            self.cache.set(key, result.value)
        return result.value

    def _top_n(self, top_n: Optional[int]) -> int:
        return max(0, self.settings.ranking_top_n if top_n is None else top_n)

    async def fetch_countries(self) -> List[CountryRecord]:
        return list(await self._cached("countries", "countries"))

    async def load_registry(self) -> CountryRegistry:
        return await CountryRegistry.load(self)

    async def fetch_ranking(
        self, category: Union[RankingCategory, str], top_n: Optional[int] = None
    ) -> List[RankingRecord]:
        """Top-N records for ``population`` or ``gdp``, sorted descending."""
        category = RankingCategory(category)
        rankings = await self._cached(f"ranking:{category.value}", category.value)
        return list(rankings[: self._top_n(top_n)])

    async def fetch_language_ranking(self, top_n: Optional[int] = None) -> List[LanguageRanking]:
        rankings = await self._cached("languages", "languages")
        return list(rankings[: self._top_n(top_n)])

    async def fetch_religion_distribution(self) -> List[ReligionShare]:
        return list(await self._cached("religions", "religions"))

    async def fetch_growth_series(self, country_codes: Optional[Sequence[str]] = None) -> List[GrowthSeries]:
        if country_codes is None:
            country_codes = self.settings.default_growth_countries
        codes = list(dict.fromkeys(code.strip().upper() for code in country_codes if code and code.strip()))
        if not codes:
            return []
        return list(await self._cached(f"growth:{','.join(codes)}", "growth", codes))

    async def fetch_enrichment(self, iso3: str, common_name: str) -> EnrichmentFields:
        """Factbook facts for one country; empty fields when it has no document or all sources fail."""
        key = f"enrichment:{iso3}:{common_name}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        path = factbook_document_path(iso3, common_name)
        if path is None:
            logger.debug("No Factbook document for %s (%s)", iso3, common_name)
            fields = EnrichmentFields()
            self.diagnostics[key] = []
            self.cache.set(key, fields)
            return fields
        return await self._cached(key, "enrichment", path)

    async def fetch_boundary_features(self) -> List[BoundaryFeature]:
        return list(await self._cached("boundaries", "boundaries"))

    async def fetch_dashboard(self, country_codes: Optional[Sequence[str]] = None) -> DashboardSnapshot:
        """All chart categories requested concurrently; a failing category comes back empty."""
        requests: Dict[str, Callable[[], Any]] = {
            "population": lambda: self.fetch_ranking(RankingCategory.POPULATION),
            "gdp": lambda: self.fetch_ranking(RankingCategory.GDP),
            "languages": self.fetch_language_ranking,
            "religions": self.fetch_religion_distribution,
            "growth": lambda: self.fetch_growth_series(country_codes),
        }
        results = await asyncio.gather(*(request() for request in requests.values()), return_exceptions=True)

        snapshot: Dict[str, Any] = {}
        for name, result in zip(requests, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error("Dashboard category %s failed: %s", name, result)
                snapshot[name] = []
            else:
                snapshot[name] = result
        return DashboardSnapshot(**snapshot)

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.get_stats()

    async def close(self) -> None:
        await close_http_pool()
