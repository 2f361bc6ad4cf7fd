"""
Selection session: resolve a clicked feature, then enrich it.

Each selection takes a new epoch. Enrichment can take a while, and the user
may pick another country in the meantime; a result that arrives for an epoch
that is no longer current is dropped instead of overwriting the newer
selection.

    IDLE -> RESOLVING -> NOT_FOUND
                      -> RESOLVED -> ENRICHMENT_PENDING -> ENRICHMENT_READY
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..models import CountryRecord, EnrichedCountry, MatchTier
from ..routing.feature_resolver import FeatureLike, FeatureResolver
from .enrichment import EnrichmentAssembler

logger = logging.getLogger(__name__)


class SelectionStatus(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    NOT_FOUND = "not_found"
    RESOLVED = "resolved"
    ENRICHMENT_PENDING = "enrichment_pending"
    ENRICHMENT_READY = "enrichment_ready"


@dataclass(frozen=True)
class SelectionState:
    status: SelectionStatus = SelectionStatus.IDLE
    epoch: int = 0
    record: Optional[CountryRecord] = None
    tier: Optional[MatchTier] = None
    enriched: Optional[EnrichedCountry] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (SelectionStatus.NOT_FOUND, SelectionStatus.ENRICHMENT_READY)


class SelectionSession:
    def __init__(self, resolver: FeatureResolver, assembler: EnrichmentAssembler) -> None:
        self.resolver = resolver
        self.assembler = assembler
        self._epoch = 0
        self.state = SelectionState()

    @property
    def epoch(self) -> int:
        return self._epoch

    def _begin(self) -> int:
        self._epoch += 1
        return self._epoch

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def _transition(self, epoch: int, state: SelectionState) -> None:
        if self._is_current(epoch):
            self.state = state

    async def select_feature(self, feature: FeatureLike) -> Optional[SelectionState]:
        """
        Resolve and enrich a boundary feature.

        Returns the terminal state for this selection, or ``None`` when a newer
        selection superseded it before enrichment arrived.
        """
        epoch = self._begin()
        self._transition(epoch, SelectionState(status=SelectionStatus.RESOLVING, epoch=epoch))

        match = self.resolver.resolve(feature)
        if match.not_found:
            state = SelectionState(status=SelectionStatus.NOT_FOUND, epoch=epoch)
            self._transition(epoch, state)
            return state

        resolved = SelectionState(status=SelectionStatus.RESOLVED, epoch=epoch, record=match.record, tier=match.tier)
        self._transition(epoch, resolved)
        return await self._enrich(epoch, resolved)

    async def select_record(self, record: CountryRecord) -> Optional[SelectionState]:
        """Search-box path: the record is already known, so resolution is skipped."""
        epoch = self._begin()
        resolved = SelectionState(status=SelectionStatus.RESOLVED, epoch=epoch, record=record)
        self._transition(epoch, resolved)
        return await self._enrich(epoch, resolved)

    async def _enrich(self, epoch: int, resolved: SelectionState) -> Optional[SelectionState]:
        pending = replace(resolved, status=SelectionStatus.ENRICHMENT_PENDING)
        self._transition(epoch, pending)

        enriched = await self.assembler.assemble(resolved.record)
        if not self._is_current(epoch):
            logger.info(
                "Discarding enrichment for %s: selection %d superseded by %d",
                resolved.record.iso3,
                epoch,
                self._epoch,
            )
            return None

        ready = replace(pending, status=SelectionStatus.ENRICHMENT_READY, enriched=enriched)
        self.state = ready
        return ready
