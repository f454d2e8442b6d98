"""Unit tests for the poll mapper.

Covers subgraph records, contract structs, vote percentages and the
status/funding/voting derivation rules.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pollpulse.config.network_config import NetworkConfig
from pollpulse.data_models.poll_schemas import FundingType, PollStatus, VotingType
from pollpulse.tokens.registry import TokenRegistry

from ..poll_mapper import map_contract_poll, map_poll, map_polls, option_percentage

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
NOW_TS = int(NOW.timestamp())

SEPOLIA_USDC = "0x6763442EbDe3705C4AE49Ca926b001997C67cC51"


@pytest.fixture
def registry():
    return TokenRegistry(NetworkConfig(environ={}))


def make_raw(**overrides):
    raw = {
        "id": "0x01",
        "pollId": "1",
        "question": "Best chain?|TOKEN:USDC",
        "options": ["A", "B"],
        "votes": [3, 1],
        "totalFundingAmount": "1000000",
        "endTime": NOW_TS + 3600,
        "isActive": True,
    }
    raw.update(overrides)
    return raw


class TestMapPoll:
    """Test mapping of subgraph poll records."""

    def test_stablecoin_funded_poll(self, registry):
        poll = map_poll(make_raw(), registry=registry, now=NOW)

        assert poll.id == "1"
        assert poll.title == "Best chain?"
        assert poll.funding_token == "USDC"
        assert poll.total_reward == Decimal("1")
        assert poll.status == PollStatus.ACTIVE
        assert [o.percentage for o in poll.options] == [75, 25]
        assert poll.total_votes == 4

    def test_defaults(self, registry):
        poll = map_poll(make_raw(), registry=registry, now=NOW)

        assert poll.description == ""
        assert poll.category == "General"
        assert poll.voting_type == VotingType.STANDARD
        assert poll.created_at is None

    def test_option_ids_and_labels(self, registry):
        poll = map_poll(make_raw(), registry=registry, now=NOW)

        assert [o.id for o in poll.options] == ["0x01-0", "0x01-1"]
        assert [o.text for o in poll.options] == ["A", "B"]
        assert [o.votes for o in poll.options] == [3, 1]

    def test_entity_id_used_without_poll_id(self, registry):
        raw = make_raw()
        del raw["pollId"]
        poll = map_poll(raw, registry=registry, now=NOW)
        assert poll.id == "0x01"

    def test_poll_id_used_without_entity_id(self, registry):
        raw = make_raw()
        del raw["id"]
        poll = map_poll(raw, registry=registry, now=NOW)
        assert poll.id == "1"
        assert poll.options[0].id == "1-0"

    def test_reward_token_defaults_to_18_decimals(self, registry):
        raw = make_raw(question="Untagged", totalFundingAmount=str(25 * 10**17))
        poll = map_poll(raw, registry=registry, now=NOW)

        assert poll.title == "Untagged"
        assert poll.funding_token is None
        assert poll.total_reward == Decimal("2.5")

    def test_timestamps_are_iso_utc(self, registry):
        poll = map_poll(make_raw(createdAt=0, endTime=1700000000), registry=registry, now=NOW)
        assert poll.created_at == "1970-01-01T00:00:00.000Z"
        assert poll.ends_at == "2023-11-14T22:13:20.000Z"

    def test_creator_flat_and_nested(self, registry):
        flat = map_poll(make_raw(creator="0xabc"), registry=registry, now=NOW)
        nested = map_poll(make_raw(creator={"id": "0xabc"}), registry=registry, now=NOW)
        assert flat.creator == nested.creator == "0xabc"

    def test_map_polls(self, registry):
        polls = map_polls([make_raw(pollId="1"), make_raw(pollId="2")], registry=registry, now=NOW)
        assert [p.id for p in polls] == ["1", "2"]


class TestPercentages:
    """Test option percentages."""

    def test_zero_votes_give_zero_percent(self, registry):
        poll = map_poll(make_raw(options=["A", "B", "C"], votes=[0, 0, 0]), registry=registry, now=NOW)
        assert [o.percentage for o in poll.options] == [0, 0, 0]
        assert poll.total_votes == 0

    @pytest.mark.parametrize("votes", [[1, 1, 1], [2, 2, 3], [1, 1, 1, 1, 1, 1, 1], [5, 0, 7], [999, 1]])
    def test_sum_within_rounding_slack(self, registry, votes):
        options = [f"Option {i}" for i in range(len(votes))]
        poll = map_poll(make_raw(options=options, votes=votes), registry=registry, now=NOW)
        total = sum(o.percentage for o in poll.options)
        assert abs(total - 100) <= len(votes)

    def test_rounds_half_up(self):
        assert option_percentage(1, 8) == 13
        assert option_percentage(1, 3) == 33
        assert option_percentage(2, 3) == 67

    def test_zero_total(self):
        assert option_percentage(0, 0) == 0


class TestDerivedFields:
    """Test status, funding type and voting type derivation."""

    def test_explicit_status_wins_over_flags(self, registry):
        ended = map_poll(make_raw(status="ENDED"), registry=registry, now=NOW)
        active = map_poll(make_raw(status="ACTIVE", endTime=NOW_TS - 10, isActive=False), registry=registry, now=NOW)
        assert ended.status == PollStatus.ENDED
        assert active.status == PollStatus.ACTIVE

    def test_status_from_flags(self, registry):
        expired = map_poll(make_raw(endTime=NOW_TS - 1), registry=registry, now=NOW)
        inactive = map_poll(make_raw(isActive=False), registry=registry, now=NOW)
        assert expired.status == PollStatus.ENDED
        assert inactive.status == PollStatus.ENDED

    def test_explicit_funding_type(self, registry):
        community = map_poll(make_raw(fundingType="COMMUNITY"), registry=registry, now=NOW)
        self_funded = map_poll(make_raw(fundingType="SELF", totalFundingAmount="0"), registry=registry, now=NOW)
        unknown = map_poll(make_raw(fundingType="SPONSORED"), registry=registry, now=NOW)
        assert community.funding_type == FundingType.COMMUNITY
        assert self_funded.funding_type == FundingType.SELF
        assert unknown.funding_type == FundingType.NONE

    def test_funding_type_from_amount(self, registry):
        funded = map_poll(make_raw(), registry=registry, now=NOW)
        unfunded = map_poll(make_raw(totalFundingAmount="0"), registry=registry, now=NOW)
        assert funded.funding_type == FundingType.SELF
        assert unfunded.funding_type == FundingType.NONE

    def test_quadratic_voting(self, registry):
        poll = map_poll(make_raw(votingType="QUADRATIC"), registry=registry, now=NOW)
        assert poll.voting_type == VotingType.QUADRATIC

    def test_enum_values_are_case_sensitive(self, registry):
        poll = map_poll(
            make_raw(status="active", fundingType="community", votingType="quadratic"),
            registry=registry,
            now=NOW,
        )
        assert poll.status == PollStatus.ENDED
        assert poll.funding_type == FundingType.NONE
        assert poll.voting_type == VotingType.STANDARD


class TestRawPollValidation:
    """Test validation of malformed subgraph records."""

    def test_options_and_votes_length_mismatch(self, registry):
        with pytest.raises(ValidationError):
            map_poll(make_raw(options=["A", "B", "C"]), registry=registry, now=NOW)

    def test_negative_votes_rejected(self, registry):
        with pytest.raises(ValidationError):
            map_poll(make_raw(votes=[3, -1]), registry=registry, now=NOW)

    def test_negative_funding_rejected(self, registry):
        with pytest.raises(ValidationError):
            map_poll(make_raw(totalFundingAmount="-5"), registry=registry, now=NOW)


class TestMapContractPoll:
    """Test mapping of structs read directly from the polls contract."""

    def make_struct(self, **overrides):
        struct = {
            "id": 7,
            "question": "Fund the grants round?|TOKEN:USDC",
            "options": ["Yes", "No"],
            "votes": [2, 2],
            "endTime": NOW_TS + 60,
            "isActive": True,
            "creator": "0xCreator",
            "totalFunding": 2500000,
            "fundingToken": SEPOLIA_USDC,
            "fundingType": 2,
            "status": 0,
            "votingType": 1,
        }
        struct.update(overrides)
        return struct

    def test_contract_enums(self, registry):
        poll = map_contract_poll(self.make_struct(), registry=registry)

        assert poll.id == "7"
        assert poll.title == "Fund the grants round?"
        assert poll.status == PollStatus.ACTIVE
        assert poll.funding_type == FundingType.COMMUNITY
        assert poll.voting_type == VotingType.QUADRATIC
        assert poll.total_reward == Decimal("2.5")
        assert poll.creator == "0xCreator"
        assert [o.percentage for o in poll.options] == [50, 50]

    def test_token_symbol_from_funding_token_address(self, registry):
        poll = map_contract_poll(self.make_struct(question="Untagged", totalFunding=5000000), registry=registry)
        assert poll.funding_token == "USDC"
        assert poll.total_reward == Decimal("5")

    def test_native_funding_token(self, registry):
        struct = self.make_struct(
            question="Native",
            totalFunding=10**18,
            fundingToken="0x0000000000000000000000000000000000000000",
            fundingType=1,
        )
        poll = map_contract_poll(struct, registry=registry)
        assert poll.funding_token == "MNT"
        assert poll.funding_type == FundingType.SELF
        assert poll.total_reward == Decimal("1")

    def test_unfunded_poll_has_no_token(self, registry):
        poll = map_contract_poll(self.make_struct(question="Q", totalFunding=0, fundingType=0), registry=registry)
        assert poll.funding_token is None
        assert poll.funding_type == FundingType.NONE

    @pytest.mark.parametrize("status", [1, 2, 3, 4, 5])
    def test_non_active_status_is_ended(self, registry, status):
        poll = map_contract_poll(self.make_struct(status=status, isActive=True), registry=registry)
        assert poll.status == PollStatus.ENDED
