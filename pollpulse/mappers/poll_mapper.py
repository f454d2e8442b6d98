"""
Poll mapper.

Turns a raw poll record (subgraph entity or contract struct) into the
canonical `FormattedPoll` the rest of the application displays.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from pollpulse.data_models.poll_schemas import (
    FormattedPoll,
    FundingType,
    PollOption,
    PollStatus,
    RawContractPoll,
    RawIndexedPoll,
    VotingType,
)
from pollpulse.tokens.registry import TokenRegistry

from .entity_refs import normalize_ref
from .metadata import parse_title_metadata
from .units import from_token_units, to_iso

DEFAULT_CATEGORY = "General"

# Contract enums (PollsContract.sol)
CONTRACT_STATUS_ACTIVE = 0
CONTRACT_FUNDING_TYPES = {0: FundingType.NONE, 1: FundingType.SELF, 2: FundingType.COMMUNITY}
CONTRACT_VOTING_QUADRATIC = 1


def option_percentage(votes: int, total_votes: int) -> int:
    """Share of the vote in whole percent, rounded half up; 0 when nobody voted."""
    if total_votes <= 0:
        return 0
    return (votes * 200 + total_votes) // (2 * total_votes)


def map_status(explicit: Optional[str], is_active: bool, end_time: int, now: datetime) -> PollStatus:
    if explicit:
        return PollStatus.ACTIVE if explicit == "ACTIVE" else PollStatus.ENDED
    if is_active and now.timestamp() < end_time:
        return PollStatus.ACTIVE
    return PollStatus.ENDED


def map_funding_type(explicit: Optional[str], total_funding_amount: int) -> FundingType:
    if explicit:
        if explicit == "COMMUNITY":
            return FundingType.COMMUNITY
        if explicit == "SELF":
            return FundingType.SELF
        return FundingType.NONE
    return FundingType.SELF if total_funding_amount > 0 else FundingType.NONE


def map_voting_type(explicit: Optional[str]) -> VotingType:
    if explicit == "QUADRATIC":
        return VotingType.QUADRATIC
    return VotingType.STANDARD


def _build_options(option_id_prefix: str, labels: List[str], votes: List[int]) -> List[PollOption]:
    total_votes = sum(votes)
    return [
        PollOption(
            id=f"{option_id_prefix}-{index}",
            text=label,
            votes=count,
            percentage=option_percentage(count, total_votes),
        )
        for index, (label, count) in enumerate(zip(labels, votes))
    ]


def map_poll(
    raw: Union[RawIndexedPoll, Dict[str, Any]],
    registry: Optional[TokenRegistry] = None,
    now: Optional[datetime] = None,
) -> FormattedPoll:
    """
    Map a subgraph poll record to a FormattedPoll.

    Args:
        raw: RawIndexedPoll or the raw JSON dict from the subgraph
        registry: Token registry used for decimals (default registry if omitted)
        now: Reference time for deriving the status (default: current UTC time)

    Returns:
        FormattedPoll
    """
    poll = raw if isinstance(raw, RawIndexedPoll) else RawIndexedPoll.model_validate(raw)
    registry = registry or TokenRegistry()
    now = now or datetime.now(timezone.utc)

    poll_id = poll.poll_id or poll.id
    metadata = parse_title_metadata(poll.question)
    options = _build_options(poll.id or poll_id, poll.options, poll.votes)
    decimals = registry.resolve_decimals(metadata.token_symbol)

    return FormattedPoll(
        id=poll_id,
        title=metadata.title,
        description="",
        creator=normalize_ref(poll.creator).id,
        created_at=to_iso(poll.created_at) if poll.created_at is not None else None,
        ends_at=to_iso(poll.end_time),
        total_votes=sum(poll.votes),
        total_reward=from_token_units(poll.total_funding_amount, decimals),
        status=map_status(poll.status, poll.is_active, poll.end_time, now),
        category=DEFAULT_CATEGORY,
        funding_type=map_funding_type(poll.funding_type, poll.total_funding_amount),
        funding_token=metadata.token_symbol,
        voting_type=map_voting_type(poll.voting_type),
        options=options,
    )


def map_polls(
    raws: Iterable[Union[RawIndexedPoll, Dict[str, Any]]],
    registry: Optional[TokenRegistry] = None,
    now: Optional[datetime] = None,
) -> List[FormattedPoll]:
    registry = registry or TokenRegistry()
    now = now or datetime.now(timezone.utc)
    return [map_poll(raw, registry=registry, now=now) for raw in raws]


def map_contract_poll(
    raw: Union[RawContractPoll, Dict[str, Any]],
    registry: Optional[TokenRegistry] = None,
) -> FormattedPoll:
    """
    Map a poll struct read directly from the polls contract to a FormattedPoll.

    The contract exposes numeric enums and the funding token address, so the
    token symbol comes from the registry unless the question embeds one.
    """
    poll = raw if isinstance(raw, RawContractPoll) else RawContractPoll.model_validate(raw)
    registry = registry or TokenRegistry()

    metadata = parse_title_metadata(poll.question)
    token_symbol = metadata.token_symbol
    if token_symbol is None and poll.total_funding > 0:
        token_symbol = registry.resolve_symbol(poll.funding_token)
    decimals = registry.resolve_decimals(metadata.token_symbol or poll.funding_token)

    is_open = poll.status == CONTRACT_STATUS_ACTIVE
    return FormattedPoll(
        id=str(poll.id),
        title=metadata.title,
        description="",
        creator=poll.creator,
        created_at=None,
        ends_at=to_iso(poll.end_time),
        total_votes=sum(poll.votes),
        total_reward=from_token_units(poll.total_funding, decimals),
        status=PollStatus.ACTIVE if is_open else PollStatus.ENDED,
        category=DEFAULT_CATEGORY,
        funding_type=CONTRACT_FUNDING_TYPES.get(poll.funding_type, FundingType.NONE),
        funding_token=token_symbol,
        voting_type=(
            VotingType.QUADRATIC if poll.voting_type == CONTRACT_VOTING_QUADRATIC else VotingType.STANDARD
        ),
        options=_build_options(str(poll.id), poll.options, poll.votes),
    )
