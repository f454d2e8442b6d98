"""Unit tests for title metadata, entity references and unit conversions."""
from decimal import Decimal

import pytest

from pollpulse.data_models.poll_schemas import EntityRef, TokenRef

from ..entity_refs import normalize_ref
from ..metadata import TOKEN_DELIMITER, embed_title_metadata, parse_title_metadata
from ..units import from_token_units, to_iso


class TestTitleMetadata:
    """Test the "TITLE|TOKEN:SYMBOL" convention."""

    def test_title_with_token(self):
        metadata = parse_title_metadata("Best chain?|TOKEN:USDC")
        assert metadata.title == "Best chain?"
        assert metadata.token_symbol == "USDC"

    def test_plain_title(self):
        metadata = parse_title_metadata("Best chain?")
        assert metadata.title == "Best chain?"
        assert metadata.token_symbol is None

    def test_none_and_empty(self):
        assert parse_title_metadata(None) == ("", None)
        assert parse_title_metadata("") == ("", None)

    def test_multiple_delimiters_keep_whole_title(self):
        raw = "A|TOKEN:USDC|TOKEN:MNT"
        metadata = parse_title_metadata(raw)
        assert metadata.title == raw
        assert metadata.token_symbol is None

    @pytest.mark.parametrize("title", ["", "Best chain?", "pipes | allowed", "TOKEN: alone"])
    @pytest.mark.parametrize("symbol", ["USDC", "MNT", "PULSE"])
    def test_parse_recovers_embedded_symbol(self, title, symbol):
        stored = embed_title_metadata(title, symbol)
        assert stored == f"{title}{TOKEN_DELIMITER}{symbol}"
        assert parse_title_metadata(stored) == (title, symbol)

    def test_embed_without_symbol(self):
        assert embed_title_metadata("Plain") == "Plain"


class TestNormalizeRef:
    """Test flat and nested entity references."""

    def test_flat_string(self):
        ref = normalize_ref("0xabc")
        assert ref.id == "0xabc"
        assert ref.decimals is None
        assert ref.nested is False

    def test_nested_dict(self):
        ref = normalize_ref({"id": "0xabc", "decimals": "6"})
        assert ref == ("0xabc", 6, True)

    def test_models(self):
        assert normalize_ref(EntityRef(id="0xabc")) == ("0xabc", None, True)
        assert normalize_ref(TokenRef(id="0xabc", decimals=18)) == ("0xabc", 18, True)

    def test_none(self):
        assert normalize_ref(None).id is None

    def test_flat_and_nested_ids_agree(self):
        assert normalize_ref("0xabc").id == normalize_ref({"id": "0xabc"}).id


class TestUnits:
    """Test token unit and timestamp conversions."""

    @pytest.mark.parametrize("amount,decimals,expected", [
        (0, 18, Decimal("0")),
        (1000000, 6, Decimal("1")),
        (123456789 * 10**12, 18, Decimal("0.123456789")),
    ])
    def test_from_token_units(self, amount, decimals, expected):
        assert from_token_units(amount, decimals) == expected

    def test_from_token_units_is_exact(self):
        assert from_token_units(1, 18) == Decimal("0.000000000000000001")

    def test_to_iso(self):
        assert to_iso(0) == "1970-01-01T00:00:00.000Z"
