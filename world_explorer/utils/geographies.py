"""Small helpers for country codes."""

from __future__ import annotations

from typing import Optional

_REGIONAL_INDICATOR_OFFSET = 127397

# World Bank regional, income and lending aggregates. These carry ISO3-like
# codes in indicator responses but are not countries.
WORLDBANK_AGGREGATE_CODES = frozenset({
    "AFE", "AFR", "AFW", "ARB", "CEB", "CSS", "EAP", "EAR", "EAS", "ECA",
    "ECS", "EMU", "EUU", "FCS", "HIC", "HPC", "IBD", "IBT", "IDA", "IDB",
    "IDX", "INX", "LAC", "LCN", "LDC", "LIC", "LMC", "LMY", "LTE", "MEA",
    "MIC", "MNA", "NAC", "OED", "OSS", "PRE", "PSS", "PST", "SAS", "SSA",
    "SSF", "SST", "TEA", "TEC", "TLA", "TMN", "TSA", "TSS", "UMC", "WLD",
})


def flag_glyph(iso2: Optional[str]) -> Optional[str]:
    """Regional-indicator flag emoji for a two-letter code, e.g. ``"FR"`` -> 🇫🇷."""
    if not iso2:
        return None
    code = iso2.strip().upper()
    if len(code) != 2 or not (code.isascii() and code.isalpha()):
        return None
    return "".join(chr(_REGIONAL_INDICATOR_OFFSET + ord(char)) for char in code)


def is_country_code(code: Optional[str]) -> bool:
    """True for a three-letter code that is not a World Bank aggregate."""
    if not code or len(code) != 3 or not (code.isascii() and code.isalpha()):
        return False
    return code.upper() not in WORLDBANK_AGGREGATE_CODES
