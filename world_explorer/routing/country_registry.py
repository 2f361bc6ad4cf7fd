"""
Country Registry - normalized lookup indices over the canonical country list.

Three indices are built once per registry: ISO3 code, normalized common name
and normalized official name. Name lookups can return several candidates;
choosing between them is the feature resolver's job.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple

from ..models import CountryRecord

if TYPE_CHECKING:
    from ..services.fetcher import ResilientFetcher

logger = logging.getLogger(__name__)

_HYPHEN_MARK = "\x00"
_INTERNAL_HYPHEN_RE = re.compile(r"(?<=[^\W_])-(?=[^\W_])")
_PUNCTUATION_RE = re.compile(r"[^\w\s\x00]|_")


def normalize_name(value: object) -> str:
    """
    Case-fold, strip diacritics and punctuation (internal hyphens survive), collapse whitespace.

    >>> normalize_name("  Côte d'Ivoire ")
    'cote divoire'
    >>> normalize_name("Guinea-Bissau")
    'guinea-bissau'
    """
    if value is None:
        return ""
    text = unicodedata.normalize("NFKD", str(value))
    text = "".join(char for char in text if not unicodedata.combining(char)).casefold()
    text = _INTERNAL_HYPHEN_RE.sub(_HYPHEN_MARK, text)
    text = _PUNCTUATION_RE.sub("", text).replace(_HYPHEN_MARK, "-")
    return " ".join(text.split())


class CountryRegistry:
    """Immutable set of country records with code and name indices."""

    def __init__(self, records: Iterable[CountryRecord] = ()) -> None:
        self._records: List[CountryRecord] = []
        self._by_code: Dict[str, CountryRecord] = {}
        self._by_common: Dict[str, List[CountryRecord]] = {}
        self._by_official: Dict[str, List[CountryRecord]] = {}
        self._normalized: List[Tuple[CountryRecord, str, str]] = []

        for record in records:
            if record.iso3 in self._by_code:
                logger.warning("Duplicate ISO3 %s (%s) ignored", record.iso3, record.common_name)
                continue
            common = normalize_name(record.common_name)
            official = normalize_name(record.official_name)
            self._records.append(record)
            self._by_code[record.iso3] = record
            if common:
                self._by_common.setdefault(common, []).append(record)
            if official:
                self._by_official.setdefault(official, []).append(record)
            self._normalized.append((record, common, official))

    @classmethod
    async def load(cls, fetcher: "ResilientFetcher") -> "CountryRegistry":
        """Build from the fetcher's bulk list; an unavailable list gives an empty registry."""
        records = await fetcher.fetch_countries()
        registry = cls(records)
        if registry.is_empty:
            logger.warning("Country registry is empty; all lookups will miss")
        else:
            logger.info("Country registry loaded with %d countries", len(registry))
        return registry

    def __iter__(self) -> Iterator[CountryRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def is_empty(self) -> bool:
        return not self._records

    def normalized_names(self) -> Iterator[Tuple[CountryRecord, str, str]]:
        """``(record, normalized common, normalized official)`` in registry order."""
        return iter(self._normalized)

    def lookup_by_code(self, code: Optional[str]) -> Optional[CountryRecord]:
        if not code:
            return None
        return self._by_code.get(str(code).strip().upper())

    def lookup_by_common_name(self, name: object) -> List[CountryRecord]:
        return list(self._by_common.get(normalize_name(name), ()))

    def lookup_by_official_name(self, name: object) -> List[CountryRecord]:
        return list(self._by_official.get(normalize_name(name), ()))

    def lookup_by_name(self, name: object) -> List[CountryRecord]:
        """Exact normalized matches: common-name hits first, then official-name hits."""
        seen = set()
        matches: List[CountryRecord] = []
        for record in self.lookup_by_common_name(name) + self.lookup_by_official_name(name):
            if record.iso3 not in seen:
                seen.add(record.iso3)
                matches.append(record)
        return matches

    def suggest(self, query: str, limit: int = 8) -> List[CountryRecord]:
        """Search-box suggestions: substring of common/official name, region or a capital."""
        needle = (query or "").strip().casefold()
        if not needle or limit <= 0:
            return []

        suggestions: List[CountryRecord] = []
        for record in self._records:
            haystacks = [record.common_name, record.official_name, record.region, *record.capital]
            if any(needle in text.casefold() for text in haystacks if text):
                suggestions.append(record)
                if len(suggestions) >= limit:
                    break
        return suggestions
