"""
Enrichment Assembler - Factbook facts merged onto a resolved country.

Only countries listed in ``FACTBOOK_DOCUMENTS`` have a document; every other
country is enriched with empty fields, which is a normal outcome.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from ..models import CountryRecord, EnrichedCountry, EnrichmentFields
from .text_extraction import parse_head_of_state, parse_independence, parse_religion

if TYPE_CHECKING:
    from .fetcher import ResilientFetcher

logger = logging.getLogger(__name__)

# Paths are relative to the factbook.json repository root. Keys are ISO3
# codes and registry common names.
FACTBOOK_DOCUMENTS: Dict[str, str] = {
    # North America
    "USA": "north-america/us.json",
    "United States": "north-america/us.json",
    "CAN": "north-america/ca.json",
    "Canada": "north-america/ca.json",
    "MEX": "north-america/mx.json",
    "Mexico": "north-america/mx.json",
    # Europe
    "FRA": "europe/fr.json",
    "France": "europe/fr.json",
    "DEU": "europe/gm.json",
    "Germany": "europe/gm.json",
    "GBR": "europe/uk.json",
    "United Kingdom": "europe/uk.json",
    "ITA": "europe/it.json",
    "Italy": "europe/it.json",
    "ESP": "europe/sp.json",
    "Spain": "europe/sp.json",
    # Central / South / East Asia
    "RUS": "central-asia/rs.json",
    "Russia": "central-asia/rs.json",
    "CHN": "east-n-southeast-asia/ch.json",
    "China": "east-n-southeast-asia/ch.json",
    "JPN": "east-n-southeast-asia/ja.json",
    "Japan": "east-n-southeast-asia/ja.json",
    "KOR": "east-n-southeast-asia/ks.json",
    "South Korea": "east-n-southeast-asia/ks.json",
    "IDN": "east-n-southeast-asia/id.json",
    "Indonesia": "east-n-southeast-asia/id.json",
    "IND": "south-asia/in.json",
    "India": "south-asia/in.json",
    "PAK": "south-asia/pk.json",
    "Pakistan": "south-asia/pk.json",
    "BGD": "south-asia/bg.json",
    "Bangladesh": "south-asia/bg.json",
    # Africa
    "NGA": "africa/ni.json",
    "Nigeria": "africa/ni.json",
    "EGY": "africa/eg.json",
    "Egypt": "africa/eg.json",
    "ZAF": "africa/sf.json",
    "South Africa": "africa/sf.json",
    # South America
    "BRA": "south-america/br.json",
    "Brazil": "south-america/br.json",
    "ARG": "south-america/ar.json",
    "Argentina": "south-america/ar.json",
    # Oceania
    "AUS": "australia-oceania/as.json",
    "Australia": "australia-oceania/as.json",
}


def factbook_document_path(iso3: Optional[str], common_name: Optional[str]) -> Optional[str]:
    """Document path for a country, by code first and then by common name."""
    if iso3:
        path = FACTBOOK_DOCUMENTS.get(iso3.strip().upper())
        if path:
            return path
    if common_name:
        return FACTBOOK_DOCUMENTS.get(common_name.strip())
    return None


def _field_text(document: Mapping[str, Any], *path: str) -> Optional[str]:
    node: Any = document
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    if isinstance(node, Mapping):
        node = node.get("text")
    if isinstance(node, str) and node.strip():
        return node
    return None


def extract_enrichment(document: Mapping[str, Any]) -> EnrichmentFields:
    """Apply the text rules to whichever of the three source fields the document has."""
    religions = _field_text(document, "People and Society", "Religions")
    chief = _field_text(document, "Government", "Executive branch", "chief of state")
    independence = _field_text(document, "Government", "Independence")

    return EnrichmentFields(
        religion=parse_religion(religions) if religions else None,
        head_of_state=parse_head_of_state(chief) if chief else None,
        independence_date=parse_independence(independence) if independence else None,
    )


class EnrichmentAssembler:
    def __init__(self, fetcher: "ResilientFetcher") -> None:
        self.fetcher = fetcher

    async def assemble(self, record: CountryRecord) -> EnrichedCountry:
        enrichment = await self.fetcher.fetch_enrichment(record.iso3, record.common_name)
        if enrichment.is_empty:
            logger.debug("No enrichment available for %s", record.iso3)
        return EnrichedCountry(record=record, enrichment=enrichment)
