#!/usr/bin/env python3
"""
World Explorer snapshot.

Loads the country registry, fetches every dashboard category concurrently
and, when a country is given, resolves and enriches it the same way a map
click would. The report shows which provider served each category.

Usage:
  python scripts/world_snapshot.py
  python scripts/world_snapshot.py --code FRA --top 5
  python scripts/world_snapshot.py --name "Côte d'Ivoire" --countries USA,NGA --output snapshot.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from world_explorer.config import get_settings
from world_explorer.routing.feature_resolver import FeatureResolver
from world_explorer.services.cache import TTLCache
from world_explorer.services.enrichment import EnrichmentAssembler
from world_explorer.services.fetcher import ResilientFetcher
from world_explorer.services.selection import SelectionSession


def _split_codes(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    return [code.strip().upper() for code in raw.split(",") if code.strip()]


def _feature_from_args(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    properties: Dict[str, Any] = {}
    if args.code:
        properties["ISO_A3"] = args.code
    if args.name:
        properties["NAME"] = args.name
    if not properties:
        return None
    return {"type": "Feature", "properties": properties, "geometry": None}


async def build_snapshot(args: argparse.Namespace) -> Dict[str, Any]:
    settings = get_settings()
    fetcher = ResilientFetcher(cache=TTLCache(settings.cache_ttl_seconds), settings=settings)
    started = time.perf_counter()
    try:
        registry = await fetcher.load_registry()
        dashboard = await fetcher.fetch_dashboard(_split_codes(args.countries))
        top_n = max(1, args.top)

        report: Dict[str, Any] = {
            "run_timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "registry_size": len(registry),
            "population": [r.model_dump() for r in dashboard.population[:top_n]],
            "gdp": [r.model_dump() for r in dashboard.gdp[:top_n]],
            "languages": [r.model_dump() for r in dashboard.languages[:top_n]],
            "religions": [r.model_dump() for r in dashboard.religions],
            "growth": [s.model_dump() for s in dashboard.growth],
        }

        feature = _feature_from_args(args)
        if feature is not None:
            session = SelectionSession(FeatureResolver(registry), EnrichmentAssembler(fetcher))
            state = await session.select_feature(feature)
            selection: Dict[str, Any] = {"status": state.status.value}
            if state.enriched is not None:
                selection["tier"] = state.tier.value if state.tier else None
                selection["country"] = state.enriched.model_dump()
            report["selection"] = selection

        report["sources"] = fetcher.diagnostics
        report["cache"] = fetcher.cache_stats()
        report["elapsed_s"] = round(time.perf_counter() - started, 2)
        return report
    finally:
        await fetcher.close()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch a World Explorer data snapshot")
    parser.add_argument("--countries", type=str, default=None, help="Comma-separated ISO3 codes for growth series")
    parser.add_argument("--code", type=str, default=None, help="ISO3 code of a country to resolve and enrich")
    parser.add_argument("--name", type=str, default=None, help="Country name to resolve and enrich")
    parser.add_argument("--top", type=int, default=get_settings().ranking_top_n, help="Ranking entries to report")
    parser.add_argument("--output", type=Path, default=None, help="Write the JSON report to this file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    report = await build_snapshot(args)
    text = json.dumps(report, indent=2, ensure_ascii=False, default=str)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Report: {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    asyncio.run(main())
