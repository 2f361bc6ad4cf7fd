"""Runtime configuration loaded from the environment (prefix ``WORLD_EXPLORER_``)."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WORLD_EXPLORER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cache / provider chain behaviour
    cache_ttl_seconds: float = Field(default=30 * 60, gt=0)
    provider_timeout_seconds: float = Field(default=10.0, gt=0)
    ranking_top_n: int = Field(default=10, ge=1)

    # Upstream endpoints
    restcountries_url: str = (
        "https://restcountries.com/v3.1/all"
        "?fields=name,cca2,cca3,population,area,capital,region,subregion,"
        "languages,currencies,flag,latlng"
    )
    countries_mirror_url: str = "https://raw.githubusercontent.com/mledoze/countries/master/countries.json"
    worldbank_base_url: str = "https://api.worldbank.org/v2"
    factbook_base_url: str = "https://raw.githubusercontent.com/factbook/factbook.json/master"
    factbook_mirror_url: str = "https://cdn.jsdelivr.net/gh/factbook/factbook.json@master"
    natural_earth_url: str = (
        "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/"
        "geojson/ne_50m_admin_0_countries.geojson"
    )

    # Indicator windows
    ranking_date_range: str = "2022:2024"
    growth_start_year: int = 2010
    growth_end_year: int = 2023
    default_growth_countries: List[str] = Field(
        default_factory=lambda: ["USA", "CHN", "IND", "BRA", "RUS"]
    )

    # HTTP pool
    user_agent: str = "world-explorer/0.1 (country-data-aggregator)"
    http_max_connections: int = 50
    http_max_keepalive_connections: int = 20
    http_keepalive_expiry: float = 5.0
    http_timeout: float = 30.0
    http_connect_timeout: float = 10.0

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
