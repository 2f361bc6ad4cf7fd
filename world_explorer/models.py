from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import NotFoundError


class Currency(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    symbol: str = ""


class CountryRecord(BaseModel):
    """Canonical country record; identity is ``iso3``."""

    model_config = ConfigDict(frozen=True)

    iso3: str
    common_name: str
    official_name: str
    population: int = Field(default=0, ge=0)
    area: float = Field(gt=0)
    capital: List[str] = Field(default_factory=list)
    region: str = ""
    subregion: Optional[str] = None
    languages: Dict[str, str] = Field(default_factory=dict)
    currencies: Dict[str, Currency] = Field(default_factory=dict)
    flag_glyph: str = ""
    centroid: Optional[Tuple[float, float]] = None

    @field_validator("iso3")
    @classmethod
    def _validate_iso3(cls, value: str) -> str:
        if len(value) != 3 or not value.isascii() or not value.isalpha() or not value.isupper():
            raise ValueError(f"ISO3 code must be 3 uppercase letters, got '{value}'")
        return value


class BoundaryFeature(BaseModel):
    """External boundary geometry; only the property bag matters for resolution."""

    model_config = ConfigDict(frozen=True)

    properties: Dict[str, Any] = Field(default_factory=dict)
    geometry: Optional[Dict[str, Any]] = None

    @classmethod
    def from_geojson(cls, feature: Mapping[str, Any]) -> "BoundaryFeature":
        return cls(
            properties=dict(feature.get("properties") or {}),
            geometry=feature.get("geometry"),
        )


class MatchTier(str, Enum):
    CODE = "code"
    EXACT_COMMON = "exact_common"
    EXACT_OFFICIAL = "exact_official"
    CONTAINMENT = "containment"


class ResolvedMatch(BaseModel):
    """Outcome of resolving a boundary feature: a record, or ``not_found``."""

    model_config = ConfigDict(frozen=True)

    record: Optional[CountryRecord] = None
    tier: Optional[MatchTier] = None

    @property
    def not_found(self) -> bool:
        return self.record is None

    @classmethod
    def missing(cls) -> "ResolvedMatch":
        return cls()

    def require(self) -> CountryRecord:
        if self.record is None:
            raise NotFoundError("No country matches the boundary feature")
        return self.record


class RankingCategory(str, Enum):
    POPULATION = "population"
    GDP = "gdp"


class RankingRecord(BaseModel):
    country: str
    iso3: str
    value: float
    flag: Optional[str] = None


class LanguageRanking(BaseModel):
    language: str
    speakers: int
    countries: List[str] = Field(default_factory=list)


class ReligionShare(BaseModel):
    religion: str
    adherents: int
    percentage: float


class GrowthPoint(BaseModel):
    year: int
    value: float


class GrowthSeries(BaseModel):
    country: str
    iso3: str
    points: List[GrowthPoint] = Field(default_factory=list)


class EnrichmentFields(BaseModel):
    religion: Optional[str] = None
    head_of_state: Optional[str] = None
    independence_date: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.religion or self.head_of_state or self.independence_date)


class EnrichedCountry(BaseModel):
    record: CountryRecord
    enrichment: EnrichmentFields = Field(default_factory=EnrichmentFields)


class DashboardSnapshot(BaseModel):
    population: List[RankingRecord] = Field(default_factory=list)
    gdp: List[RankingRecord] = Field(default_factory=list)
    languages: List[LanguageRanking] = Field(default_factory=list)
    religions: List[ReligionShare] = Field(default_factory=list)
    growth: List[GrowthSeries] = Field(default_factory=list)
