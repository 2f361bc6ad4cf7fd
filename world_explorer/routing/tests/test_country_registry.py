from __future__ import annotations

import unittest
from unittest.mock import AsyncMock, MagicMock

from world_explorer.routing.country_registry import CountryRegistry, normalize_name
from world_explorer.tests.utils import make_country, run


def _registry() -> CountryRegistry:
    return CountryRegistry(
        [
            make_country("FRA", "France", "French Republic", capital=["Paris"], region="Europe"),
            make_country("CIV", "Ivory Coast", "Republic of Côte d'Ivoire", capital=["Yamoussoukro"], region="Africa"),
            make_country("GNB", "Guinea-Bissau", "Republic of Guinea-Bissau", capital=["Bissau"], region="Africa"),
            make_country("GIN", "Guinea", "Republic of Guinea", capital=["Conakry"], region="Africa"),
            make_country("ZAF", "South Africa", "Republic of South Africa", capital=["Pretoria", "Bloemfontein", "Cape Town"], region="Africa"),
        ]
    )


class NormalizeNameTests(unittest.TestCase):
    def test_normalization_rules(self) -> None:
        cases = [
            ("France", "france"),
            ("  FRANCE  ", "france"),
            ("Côte d'Ivoire", "cote divoire"),
            ("São Tomé and Príncipe", "sao tome and principe"),
            ("Guinea-Bissau", "guinea-bissau"),
            ("Korea, Republic of", "korea republic of"),
            ("Bosnia   and\tHerzegovina", "bosnia and herzegovina"),
            ("St. Kitts & Nevis", "st kitts nevis"),
            ("- leading hyphen", "leading hyphen"),
            ("under_score", "underscore"),
        ]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                self.assertEqual(normalize_name(raw), expected)

    def test_none_is_empty(self) -> None:
        self.assertEqual(normalize_name(None), "")


class CountryRegistryTests(unittest.TestCase):
    def test_lookup_by_code_is_case_insensitive(self) -> None:
        registry = _registry()

        self.assertEqual(registry.lookup_by_code("fra").common_name, "France")
        self.assertEqual(registry.lookup_by_code(" CIV ").common_name, "Ivory Coast")
        self.assertIsNone(registry.lookup_by_code("XYZ"))
        self.assertIsNone(registry.lookup_by_code(""))
        self.assertIsNone(registry.lookup_by_code(None))

    def test_lookup_by_name_uses_both_indices(self) -> None:
        registry = _registry()

        self.assertEqual([r.iso3 for r in registry.lookup_by_name("FRANCE")], ["FRA"])
        self.assertEqual([r.iso3 for r in registry.lookup_by_name("french republic")], ["FRA"])
        self.assertEqual([r.iso3 for r in registry.lookup_by_name("Republic of Cote d'Ivoire")], ["CIV"])
        self.assertEqual(registry.lookup_by_name("Lilliput"), [])

    def test_common_and_official_halves(self) -> None:
        registry = _registry()

        self.assertEqual(registry.lookup_by_official_name("France"), [])
        self.assertEqual([r.iso3 for r in registry.lookup_by_common_name("guinea")], ["GIN"])

    def test_duplicate_iso3_keeps_first_record(self) -> None:
        registry = CountryRegistry([make_country("FRA", "France"), make_country("FRA", "Duplicate France")])

        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.lookup_by_code("FRA").common_name, "France")
        self.assertEqual(registry.lookup_by_name("Duplicate France"), [])

    def test_iteration_preserves_input_order(self) -> None:
        registry = _registry()

        self.assertEqual([record.iso3 for record in registry], ["FRA", "CIV", "GNB", "GIN", "ZAF"])
        self.assertFalse(registry.is_empty)

    def test_suggest_matches_names_region_and_capitals(self) -> None:
        registry = _registry()

        self.assertEqual([r.iso3 for r in registry.suggest("guinea")], ["GNB", "GIN"])
        self.assertEqual([r.iso3 for r in registry.suggest("PARIS")], ["FRA"])
        self.assertEqual([r.iso3 for r in registry.suggest("cape town")], ["ZAF"])
        self.assertEqual([r.iso3 for r in registry.suggest("africa")], ["CIV", "GNB", "GIN", "ZAF"])

    def test_suggest_limit_and_blank_query(self) -> None:
        registry = _registry()

        self.assertEqual(len(registry.suggest("a", limit=2)), 2)
        self.assertEqual(registry.suggest("   "), [])
        self.assertEqual(registry.suggest(""), [])

    def test_load_builds_registry_from_fetcher(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch_countries = AsyncMock(return_value=[make_country("FRA", "France")])

        registry = run(CountryRegistry.load(fetcher))

        self.assertEqual(len(registry), 1)

    def test_load_fails_closed_to_empty_registry(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch_countries = AsyncMock(return_value=[])

        registry = run(CountryRegistry.load(fetcher))

        self.assertTrue(registry.is_empty)
        self.assertIsNone(registry.lookup_by_code("FRA"))
        self.assertEqual(registry.lookup_by_name("France"), [])


if __name__ == "__main__":
    unittest.main()
