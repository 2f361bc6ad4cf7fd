"""
Feature Resolver - match a boundary feature to a registry country.

Boundary datasets label countries inconsistently, so resolution runs through
increasingly permissive tiers and stops at the first one that yields a
candidate:

1. code tier: ISO3-like code properties looked up by code
2. exact-name tier: normalized names equal to a common or official name
3. containment tier: normalized names containing, or contained in, a
   common or official name

Within the name tiers a common-name match beats an official-name match and
ties go to the record that comes first in registry order. No candidate gives
``ResolvedMatch.missing()``; resolution never raises and never guesses.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..models import BoundaryFeature, CountryRecord, MatchTier, ResolvedMatch
from .country_registry import CountryRegistry, normalize_name

logger = logging.getLogger(__name__)

CODE_PROPERTY_KEYS: Sequence[str] = (
    "ISO_A3",
    "ADM0_A3",
    "ISO_A3_EH",
    "ADM0_A3_US",
    "SOV_A3",
    "GU_A3",
    "iso_a3",
    "ISO3",
)

NAME_PROPERTY_KEYS: Sequence[str] = (
    "NAME",
    "ADMIN",
    "NAME_EN",
    "NAME_LONG",
    "FORMAL_EN",
    "name",
)

FeatureLike = Union[BoundaryFeature, Mapping[str, Any]]


def _properties(feature: FeatureLike) -> Mapping[str, Any]:
    if isinstance(feature, BoundaryFeature):
        return feature.properties
    if isinstance(feature, Mapping):
        # A raw GeoJSON feature, or a bare property bag.
        props = feature.get("properties")
        if isinstance(props, Mapping):
            return props
        return feature
    return {}


def candidate_codes(properties: Mapping[str, Any]) -> List[str]:
    """Code property values in priority order; anything that is not three letters is dropped."""
    codes: List[str] = []
    for key in CODE_PROPERTY_KEYS:
        value = properties.get(key)
        if not isinstance(value, str):
            continue
        code = value.strip().upper()
        if len(code) == 3 and code.isascii() and code.isalpha() and code not in codes:
            codes.append(code)
    return codes


def candidate_names(properties: Mapping[str, Any]) -> List[str]:
    """Normalized, non-empty name property values in priority order."""
    names: List[str] = []
    for key in NAME_PROPERTY_KEYS:
        value = properties.get(key)
        if not isinstance(value, str):
            continue
        normalized = normalize_name(value)
        if normalized and normalized not in names:
            names.append(normalized)
    return names


class FeatureResolver:
    """Resolves boundary features against one registry."""

    def __init__(self, registry: CountryRegistry) -> None:
        self.registry = registry

    def _by_code(self, codes: Sequence[str]) -> Optional[CountryRecord]:
        for code in codes:
            record = self.registry.lookup_by_code(code)
            if record is not None:
                return record
        return None

    def _by_exact_name(self, names: Sequence[str]) -> Optional[ResolvedMatch]:
        wanted = set(names)
        official_hit: Optional[CountryRecord] = None
        for record, common, official in self.registry.normalized_names():
            if common in wanted:
                return ResolvedMatch(record=record, tier=MatchTier.EXACT_COMMON)
            if official_hit is None and official in wanted:
                official_hit = record
        if official_hit is not None:
            return ResolvedMatch(record=official_hit, tier=MatchTier.EXACT_OFFICIAL)
        return None

    def _by_containment(self, names: Sequence[str]) -> Optional[CountryRecord]:
        for record, common, official in self.registry.normalized_names():
            for registry_name in (common, official):
                if not registry_name:
                    continue
                if any(registry_name in name or name in registry_name for name in names):
                    return record
        return None

    def resolve(self, feature: FeatureLike) -> ResolvedMatch:
        properties = _properties(feature)

        record = self._by_code(candidate_codes(properties))
        if record is not None:
            return ResolvedMatch(record=record, tier=MatchTier.CODE)

        names = candidate_names(properties)
        if not names:
            logger.debug("Feature has no usable code or name properties")
            return ResolvedMatch.missing()

        match = self._by_exact_name(names)
        if match is not None:
            return match

        record = self._by_containment(names)
        if record is not None:
            logger.debug("Feature %r matched %s by containment", names[0], record.iso3)
            return ResolvedMatch(record=record, tier=MatchTier.CONTAINMENT)

        logger.debug("No country matches feature %r", names[0])
        return ResolvedMatch.missing()


def resolve_country(feature: FeatureLike, registry: CountryRegistry) -> ResolvedMatch:
    return FeatureResolver(registry).resolve(feature)
