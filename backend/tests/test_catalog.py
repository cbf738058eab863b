"""
LocalPros Backend — Catalog Tests
===================================

What:  Reference data integrity and the normalisation helpers.
"""

import pytest

from localpros import catalog


class TestReferenceData:
    def test_every_state_has_cities(self):
        assert len(catalog.STATES) == 27
        for code, _ in catalog.STATES:
            assert catalog.cities_for_state(code), code

    def test_categories(self):
        assert len(catalog.PROFESSIONAL_CATEGORIES) == 21
        assert catalog.PROFESSIONAL_CATEGORIES[0] == "Eletricista"
        assert catalog.PROFESSIONAL_CATEGORIES[-1] == "Outros"
        assert catalog.is_valid_category("Encanador")
        assert not catalog.is_valid_category("encanador")

    def test_urgency_levels(self):
        assert [code for code, _ in catalog.URGENCY_LEVELS] == ["low", "normal", "high", "urgent"]
        assert catalog.DEFAULT_URGENCY == "normal"


class TestLocations:
    def test_valid_city_for_state(self):
        assert catalog.is_valid_state("SP")
        assert catalog.is_valid_city("SP", "Campinas")
        assert not catalog.is_valid_city("RJ", "Campinas")

    def test_unknown_state(self):
        assert not catalog.is_valid_state("XX")
        assert catalog.cities_for_state("XX") == []

    def test_cities_for_state_returns_copy(self):
        catalog.cities_for_state("SP").append("Atlantis")
        assert "Atlantis" not in catalog.CITIES_BY_STATE["SP"]


class TestNormalisation:
    @pytest.mark.parametrize("raw", ["01310100", "01310-100", "01.310-100", " 01310 100 "])
    def test_zip_code(self, raw):
        assert catalog.normalize_zip_code(raw) == "01310-100"

    @pytest.mark.parametrize("raw", ["", "1234567", "123456789", "abcdefgh"])
    def test_bad_zip_code(self, raw):
        with pytest.raises(ValueError):
            catalog.normalize_zip_code(raw)

    @pytest.mark.parametrize(
        "raw,expected",
        [("(11) 98765-4321", "11987654321"), ("11 3456-7890", "1134567890")],
    )
    def test_phone(self, raw, expected):
        assert catalog.normalize_phone(raw) == expected

    @pytest.mark.parametrize("raw", ["", "12345", "+55 (11) 98765-4321"])
    def test_bad_phone(self, raw):
        with pytest.raises(ValueError):
            catalog.normalize_phone(raw)
