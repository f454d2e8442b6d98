"""
Schemas for raw and canonical poll records.
"""
from .poll_schemas import (
    EntityRef,
    FormattedFunding,
    FormattedPoll,
    FundingType,
    PollOption,
    PollStats,
    PollStatus,
    RawContractPoll,
    RawGlobalStats,
    RawIndexedFunding,
    RawIndexedPoll,
    TokenDescriptor,
    TokenRef,
    VotingType,
)

__all__ = [
    "EntityRef",
    "FormattedFunding",
    "FormattedPoll",
    "FundingType",
    "PollOption",
    "PollStats",
    "PollStatus",
    "RawContractPoll",
    "RawGlobalStats",
    "RawIndexedFunding",
    "RawIndexedPoll",
    "TokenDescriptor",
    "TokenRef",
    "VotingType",
]
