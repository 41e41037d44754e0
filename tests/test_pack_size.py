"""Paket boyutu çözümleyici testleri."""

import pytest

from src.insights.pack_size import parse_pack_size


class TestParsePackSize:

    @pytest.mark.parametrize(
        "name, grams",
        [
            ("250G", 250),
            ("40g", 40),
            ("500gm", 500),
            ("250 grams", 250),
            ("1KG", 1000),
            ("1 kg", 1000),
            ("2 Kilo", 2000),
            ("1.5kg", 1500),
            ("Value Pack 200G", 200),
        ],
    )
    def test_parses_sizes(self, name, grams):
        assert parse_pack_size(name) == grams

    @pytest.mark.parametrize("name", ["Pouch", "Jar", "", None, "Family Pack"])
    def test_unparseable_returns_none(self, name):
        assert parse_pack_size(name) is None
