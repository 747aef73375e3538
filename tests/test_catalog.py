import json
import os
import tempfile
import unittest
from unittest import mock

from requests import RequestException

from spcoder.services.catalog_service import CatalogEntry, CatalogService, CatalogServiceError

CATALOG = [
    {"code": "COMP1001", "title": "Introduction to Programming", "credits": 15, "semester": "1"},
    {"code": "MATH1002", "title": "Linear Algebra", "credits": 10, "semester": "2"},
    {"code": "STAT2001", "title": "Probability and Statistics", "credits": 15},
]


class CatalogFileTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "modules.json")
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(CATALOG, fh)
        self.catalog = CatalogService(path=self.path)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_assigns_index(self):
        entries = self.catalog.load()
        self.assertEqual([e.index for e in entries], [0, 1, 2])
        self.assertEqual(entries[1].credits, 10.0)
        self.assertIsNone(entries[2].semester)

    def test_empty_query_returns_all(self):
        self.assertEqual(len(self.catalog.search("")), 3)

    def test_search_matches_code_and_title_case_insensitive(self):
        self.assertEqual([e.code for e in self.catalog.search("comp")], ["COMP1001"])
        self.assertEqual([e.code for e in self.catalog.search("ALGEBRA")], ["MATH1002"])
        self.assertEqual(self.catalog.search("biology"), [])

    def test_repeated_query_served_from_cache(self):
        first = self.catalog.search("stat")
        with mock.patch.object(CatalogEntry, "matches", side_effect=AssertionError):
            second = self.catalog.search("stat")
        self.assertEqual(first, second)

    def test_get_by_index(self):
        self.assertEqual(self.catalog.get(1).code, "MATH1002")
        with self.assertRaises(CatalogServiceError):
            self.catalog.get(99)

    def test_missing_file(self):
        with self.assertRaises(CatalogServiceError):
            CatalogService(path=os.path.join(self.tmp.name, "missing.json")).load()

    def test_non_list_catalog(self):
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump({"code": "X"}, fh)
        with self.assertRaises(CatalogServiceError):
            self.catalog.load()

    def test_requires_source(self):
        with self.assertRaises(CatalogServiceError):
            CatalogService()


class CatalogUrlTests(unittest.TestCase):
    @mock.patch("spcoder.services.catalog_service.requests.get")
    def test_fetches_from_url(self, get):
        get.return_value.json.return_value = CATALOG
        catalog = CatalogService(url="https://example.org/modules.json")
        self.assertEqual(len(catalog.load()), 3)
        get.assert_called_once_with("https://example.org/modules.json", timeout=15)

    @mock.patch("spcoder.services.catalog_service.requests.get", side_effect=RequestException("down"))
    def test_fetch_failure(self, _get):
        with self.assertRaises(CatalogServiceError):
            CatalogService(url="https://example.org/modules.json").load()


if __name__ == "__main__":
    unittest.main()
