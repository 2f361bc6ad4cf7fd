"""
Bundled datasets used when every live provider of a category fails.

Population and GDP figures are 2024/2025 estimates; language speaker counts
and religion shares are curated from Ethnologue and Pew Research summaries.
Every accessor returns fresh model instances shaped and sorted exactly like
a live response.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..models import GrowthPoint, GrowthSeries, LanguageRanking, RankingRecord, ReligionShare

# (country, iso3, value, flag)
POPULATION_TOP: Tuple[Tuple[str, str, float, str], ...] = (
    ("India", "IND", 1441719852, "🇮🇳"),
    ("China", "CHN", 1425178782, "🇨🇳"),
    ("United States", "USA", 341814420, "🇺🇸"),
    ("Indonesia", "IDN", 279798049, "🇮🇩"),
    ("Pakistan", "PAK", 240485658, "🇵🇰"),
    ("Nigeria", "NGA", 232679478, "🇳🇬"),
    ("Brazil", "BRA", 217637297, "🇧🇷"),
    ("Bangladesh", "BGD", 174701211, "🇧🇩"),
    ("Russia", "RUS", 144820423, "🇷🇺"),
    ("Mexico", "MEX", 130861007, "🇲🇽"),
)

# Nominal GDP, current USD
GDP_TOP: Tuple[Tuple[str, str, float, str], ...] = (
    ("United States", "USA", 28781000000000, "🇺🇸"),
    ("China", "CHN", 18532000000000, "🇨🇳"),
    ("Germany", "DEU", 4591000000000, "🇩🇪"),
    ("Japan", "JPN", 4110000000000, "🇯🇵"),
    ("India", "IND", 4051000000000, "🇮🇳"),
    ("United Kingdom", "GBR", 3495000000000, "🇬🇧"),
    ("France", "FRA", 3130000000000, "🇫🇷"),
    ("Italy", "ITA", 2255000000000, "🇮🇹"),
    ("Brazil", "BRA", 2173000000000, "🇧🇷"),
    ("Canada", "CAN", 2117000000000, "🇨🇦"),
)

LANGUAGES: Tuple[Tuple[str, int, Tuple[str, ...]], ...] = (
    ("English", 1500000000, ("USA", "UK", "Canada", "Australia", "India")),
    ("Mandarin Chinese", 1118000000, ("China", "Taiwan", "Singapore")),
    ("Hindi", 602000000, ("India",)),
    ("Spanish", 559000000, ("Spain", "Mexico", "Argentina", "Colombia")),
    ("Arabic", 422000000, ("Saudi Arabia", "Egypt", "UAE", "Morocco")),
    ("French", 280000000, ("France", "Canada", "Belgium", "Switzerland")),
    ("Bengali", 268000000, ("Bangladesh", "India")),
    ("Portuguese", 258000000, ("Brazil", "Portugal", "Angola")),
    ("Russian", 258000000, ("Russia", "Belarus", "Kazakhstan")),
    ("Japanese", 125000000, ("Japan",)),
)

RELIGIONS: Tuple[Tuple[str, int, float], ...] = (
    ("Christianity", 2400000000, 31.1),
    ("Islam", 1800000000, 24.1),
    ("Hinduism", 1200000000, 15.1),
    ("Buddhism", 500000000, 6.9),
    ("Folk Religions", 400000000, 5.7),
    ("Judaism", 14000000, 0.2),
    ("Other Religions", 58000000, 0.8),
    ("Unaffiliated", 1200000000, 16.3),
)

# Total population (SP.POP.TOTL) at five-year marks plus the latest year.
GROWTH: Dict[str, Tuple[str, Dict[int, float]]] = {
    "USA": ("United States", {2010: 309327143, 2015: 320738994, 2020: 331526933, 2023: 334914895}),
    "CHN": ("China", {2010: 1337705000, 2015: 1379860000, 2020: 1411100000, 2023: 1410710000}),
    "IND": ("India", {2010: 1240613620, 2015: 1322866505, 2020: 1396387127, 2023: 1428627663}),
    "BRA": ("Brazil", {2010: 196353492, 2015: 204471769, 2020: 213196304, 2023: 216422446}),
    "RUS": ("Russian Federation", {2010: 142849468, 2015: 144096870, 2020: 144073139, 2023: 143826130}),
}


def _ranking(rows: Sequence[Tuple[str, str, float, str]]) -> List[RankingRecord]:
    records = [RankingRecord(country=country, iso3=iso3, value=value, flag=flag) for country, iso3, value, flag in rows]
    records.sort(key=lambda record: record.value, reverse=True)
    return records


def population_ranking() -> List[RankingRecord]:
    return _ranking(POPULATION_TOP)


def gdp_ranking() -> List[RankingRecord]:
    return _ranking(GDP_TOP)


def language_ranking() -> List[LanguageRanking]:
    rankings = [
        LanguageRanking(language=language, speakers=speakers, countries=list(countries))
        for language, speakers, countries in LANGUAGES
    ]
    rankings.sort(key=lambda ranking: ranking.speakers, reverse=True)
    return rankings


def religion_distribution() -> List[ReligionShare]:
    return [
        ReligionShare(religion=religion, adherents=adherents, percentage=percentage)
        for religion, adherents, percentage in RELIGIONS
    ]


def _series(iso3: str) -> GrowthSeries:
    country, values = GROWTH[iso3]
    return GrowthSeries(
        country=country,
        iso3=iso3,
        points=[GrowthPoint(year=year, value=value) for year, value in sorted(values.items())],
    )


def growth_series(country_codes: Sequence[str] = ()) -> List[GrowthSeries]:
    """
    Bundled series for the requested codes that have one.

    When none of the requested codes is bundled, all bundled series are
    returned so the chart is never empty.
    """
    requested = [code.upper() for code in country_codes if code and code.upper() in GROWTH]
    codes = list(dict.fromkeys(requested)) or list(GROWTH)
    return [_series(code) for code in codes]
