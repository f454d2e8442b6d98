"""Unit tests for the funding mapper."""
from datetime import datetime, timezone
from decimal import Decimal

from pollpulse.config.network_config import NetworkConfig
from pollpulse.tokens.registry import TokenRegistry

from ..funding_mapper import DEFAULT_FUNDING_DECIMALS, map_funding, map_fundings

FUNDER = "0x1111111111111111111111111111111111111111"
SEPOLIA_USDC = "0x6763442EbDe3705C4AE49Ca926b001997C67cC51"
PULSE = "0xa3713739c39419aA1c6daf349dB4342Be59b9142"


class TestMapFunding:
    """Test flat (contract) and nested (subgraph) funding records."""

    def test_flat_and_nested_shapes_are_equivalent(self):
        flat = {"funder": FUNDER, "token": PULSE, "amount": str(3 * 10**18), "timestamp": 1700000000}
        nested = {
            "funder": {"id": FUNDER},
            "token": {"id": PULSE, "decimals": 18},
            "amount": str(3 * 10**18),
            "timestamp": "1700000000",
        }

        assert map_funding(flat) == map_funding(nested)

    def test_nested_decimals_are_used(self):
        funding = map_funding({
            "funder": {"id": FUNDER},
            "token": {"id": SEPOLIA_USDC, "decimals": "6"},
            "amount": "1500000",
            "timestamp": 1700000000,
        })
        assert funding.amount == Decimal("1.5")
        assert funding.token == SEPOLIA_USDC
        assert funding.funder == FUNDER

    def test_timestamp_is_utc_datetime(self):
        funding = map_funding({"funder": FUNDER, "token": PULSE, "amount": 1, "timestamp": 1700000000})
        assert funding.timestamp == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_nested_token_without_decimals_defaults(self):
        funding = map_funding({
            "funder": {"id": FUNDER},
            "token": {"id": PULSE},
            "amount": str(10**18),
            "timestamp": 1700000000,
        })
        assert funding.amount == Decimal("1")

    def test_map_fundings(self):
        raws = [
            {"funder": FUNDER, "token": PULSE, "amount": str(10**18), "timestamp": 1},
            {"funder": FUNDER, "token": PULSE, "amount": str(2 * 10**18), "timestamp": 2},
        ]
        assert [f.amount for f in map_fundings(raws)] == [Decimal("1"), Decimal("2")]


class TestStablecoinDecimalsDivergence:
    """
    A flat stablecoin funding record has no decimals, so the funding mapper
    falls back to 18 while the token registry knows the stablecoin uses 6.
    The two paths disagree on purpose; these tests pin that down.
    """

    def test_flat_stablecoin_funding_uses_default_decimals(self):
        funding = map_funding({"funder": FUNDER, "token": SEPOLIA_USDC, "amount": "1000000", "timestamp": 1})

        assert DEFAULT_FUNDING_DECIMALS == 18
        assert funding.amount == Decimal("1000000").scaleb(-18)

    def test_registry_disagrees_for_the_same_token(self):
        registry = TokenRegistry(NetworkConfig(environ={}))
        funding = map_funding({"funder": FUNDER, "token": SEPOLIA_USDC, "amount": "1000000", "timestamp": 1})

        assert registry.resolve_decimals(SEPOLIA_USDC) == 6
        assert funding.amount != Decimal("1")
