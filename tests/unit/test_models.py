"""
Unit tests for record parsing, the in-memory index and asset URLs.
"""

import pytest

from logo_search.models import LogoIndex, Record, resolve_asset_url

pytestmark = pytest.mark.unit


class TestRecordFromDict:
    """Tolerant parsing of index entries"""

    def test_full_entry(self):
        record = Record.from_dict({
            "id": "1",
            "category": "Finance",
            "categories": ["Finance", "Tech"],
            "keywords": ["bank"],
            "labels": ["blue"],
            "svg": "1.svg",
        })
        assert record == Record("1", "Finance", ("Finance", "Tech"), ("bank",), ("blue",), "1.svg")

    def test_optional_fields_default_empty(self):
        record = Record.from_dict({"id": "1"})
        assert record.category is None
        assert record.categories == ()
        assert record.keywords == ()
        assert record.labels == ()
        assert record.svg is None

    def test_malformed_fields_become_empty(self):
        record = Record.from_dict({
            "id": "1",
            "category": 42,
            "categories": "Solo",
            "keywords": ["ok", None, 3],
            "labels": {"not": "a list"},
            "svg": "",
        })
        assert record.category is None
        assert record.categories == ("Solo",)
        assert record.keywords == ("ok",)
        assert record.labels == ()
        assert record.svg is None

    def test_numeric_id_coerced(self):
        assert Record.from_dict({"id": 966294985}).id == "966294985"

    @pytest.mark.parametrize("entry", [None, "1", [], {}, {"id": ""}, {"id": "  "}, {"id": None}, {"id": True}])
    def test_unusable_entries(self, entry):
        assert Record.from_dict(entry) is None

    def test_field_text(self):
        record = Record("1", category="Finance", keywords=("bank", "secure"))
        assert record.field_text("keywords") == "bank secure"
        assert record.field_text("category") == "Finance"
        assert record.field_text("categories") == ""
        assert record.field_text("svg") == ""

    def test_to_dict(self):
        record = Record("1", category="Finance", keywords=("bank",), svg="1.svg")
        assert record.to_dict("https://x.test/logos/1.svg") == {
            "id": "1",
            "category": "Finance",
            "categories": [],
            "keywords": ["bank"],
            "labels": [],
            "svg": "https://x.test/logos/1.svg",
        }


class TestLogoIndex:
    """Index construction and lookups"""

    def test_from_json(self, sample_payload):
        index = LogoIndex.from_json(sample_payload)
        assert len(index) == 5
        assert [r.id for r in index] == ["101", "102", "103", "104", "105"]

    def test_lookup(self, sample_index):
        assert sample_index.get("103").category == "Food & Beverage"
        assert sample_index.get("999") is None

    def test_duplicate_ids_first_wins(self):
        index = LogoIndex.from_json([{"id": "1", "category": "First"}, {"id": "1", "category": "Second"}])
        assert index.get("1").category == "First"
        assert len(index) == 2  # Both kept for full scans

    def test_skips_bad_entries(self, caplog):
        index = LogoIndex.from_json([{"id": "1"}, {"name": "no id"}, "junk"])
        assert [r.id for r in index] == ["1"]
        assert "Skipped 2" in caplog.text

    @pytest.mark.parametrize("payload", [{}, "[]", None, 3])
    def test_rejects_non_array(self, payload):
        with pytest.raises(ValueError):
            LogoIndex.from_json(payload)


class TestResolveAssetUrl:
    """Stored filename -> absolute URL"""

    def test_relative_to_origin(self):
        url = resolve_asset_url("966294985.svg", "https://logos.example.com/search")
        assert url == "https://logos.example.com/logos/966294985.svg"

    def test_none_or_empty(self):
        assert resolve_asset_url(None, "https://x.test") is None
        assert resolve_asset_url("", "https://x.test") is None

    def test_custom_asset_path(self):
        assert resolve_asset_url("a.svg", "https://cdn.test/", "/static/img") == "https://cdn.test/static/img/a.svg"
        assert resolve_asset_url("a.svg", "https://cdn.test/", "/") == "https://cdn.test/a.svg"

    def test_absolute_reference_kept(self):
        assert resolve_asset_url("https://cdn.test/a.svg", "https://x.test") == "https://cdn.test/a.svg"
