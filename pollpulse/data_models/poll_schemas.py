"""
Pydantic schemas for raw poll/funding records and their canonical forms.

Raw records mirror what the subgraph and the polls contract return
(camelCase keys, integer token units, unix seconds). Canonical records
are what the rest of the application displays.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ==================
# Canonical Enums
# ==================

class PollStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class FundingType(str, Enum):
    COMMUNITY = "community"
    SELF = "self"
    NONE = "none"


class VotingType(str, Enum):
    STANDARD = "standard"
    QUADRATIC = "quadratic"


# ==================
# Entity References
# ==================

class EntityRef(BaseModel):
    """Nested entity as returned by the subgraph (e.g. `creator { id }`)."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str


class TokenRef(EntityRef):
    """Nested token entity; carries the token's decimals."""
    decimals: Optional[int] = None


class TokenDescriptor(BaseModel):
    """Display symbol and decimal precision of a token."""
    symbol: str
    decimals: int


# ==================
# Raw Indexed Records
# ==================

class RawIndexedPoll(BaseModel):
    """Poll record from the subgraph."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    id: str = ""
    poll_id: Optional[str] = Field(None, alias="pollId")
    question: str = ""
    options: List[str] = Field(default_factory=list)
    votes: List[int] = Field(default_factory=list)
    end_time: int = Field(..., alias="endTime")
    is_active: bool = Field(False, alias="isActive")
    status: Optional[str] = None
    total_funding_amount: int = Field(0, alias="totalFundingAmount")
    funding_type: Optional[str] = Field(None, alias="fundingType")
    voting_type: Optional[str] = Field(None, alias="votingType")
    created_at: Optional[int] = Field(None, alias="createdAt")
    creator: Union[EntityRef, str, None] = None

    @field_validator("votes")
    @classmethod
    def _votes_non_negative(cls, votes: List[int]) -> List[int]:
        if any(v < 0 for v in votes):
            raise ValueError("vote counts must be non-negative")
        return votes

    @field_validator("total_funding_amount")
    @classmethod
    def _funding_non_negative(cls, amount: int) -> int:
        if amount < 0:
            raise ValueError("totalFundingAmount must be non-negative")
        return amount

    @model_validator(mode="after")
    def _options_match_votes(self) -> "RawIndexedPoll":
        if len(self.options) != len(self.votes):
            raise ValueError(
                f"options ({len(self.options)}) and votes ({len(self.votes)}) must have equal length"
            )
        return self


class RawIndexedFunding(BaseModel):
    """Funding record from the subgraph (nested refs) or the contract (flat)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    funder: Union[EntityRef, str]
    token: Union[TokenRef, str]
    amount: int
    timestamp: int


# ==================
# Raw Contract Records
# ==================

class RawContractPoll(BaseModel):
    """Poll struct as returned by the polls contract `getPoll` call."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    id: int
    question: str = ""
    options: List[str] = Field(default_factory=list)
    votes: List[int] = Field(default_factory=list)
    end_time: int = Field(..., alias="endTime")
    is_active: bool = Field(False, alias="isActive")
    creator: str
    total_funding: int = Field(0, alias="totalFunding")
    funding_token: str = Field("0x0000000000000000000000000000000000000000", alias="fundingToken")
    funding_type: int = Field(0, alias="fundingType")
    status: int = 0
    voting_type: int = Field(0, alias="votingType")

    @model_validator(mode="after")
    def _options_match_votes(self) -> "RawContractPoll":
        if len(self.options) != len(self.votes):
            raise ValueError(
                f"options ({len(self.options)}) and votes ({len(self.votes)}) must have equal length"
            )
        return self


class RawGlobalStats(BaseModel):
    """`globalStats` singleton entity from the subgraph."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    total_polls: int = Field(0, alias="totalPolls")
    total_votes: int = Field(0, alias="totalVotes")
    total_funding: int = Field(0, alias="totalFunding")
    total_distributions: int = Field(0, alias="totalDistributions")
    total_users: int = Field(0, alias="totalUsers")
    total_voters: int = Field(0, alias="totalVoters")
    total_funders: int = Field(0, alias="totalFunders")


# ==================
# Canonical Records
# ==================

class PollOption(BaseModel):
    id: str
    text: str
    votes: int
    percentage: int


class FormattedPoll(BaseModel):
    """Canonical, display-ready poll."""
    id: str
    title: str
    description: str = ""
    creator: Optional[str] = None
    created_at: Optional[str] = None
    ends_at: str
    total_votes: int
    total_reward: Decimal
    status: PollStatus
    category: str = "General"
    funding_type: FundingType
    funding_token: Optional[str] = None
    voting_type: VotingType = VotingType.STANDARD
    options: List[PollOption] = Field(default_factory=list)


class FormattedFunding(BaseModel):
    """Canonical funding contribution."""
    funder: str
    token: str
    amount: Decimal
    timestamp: datetime


class PollStats(BaseModel):
    """Platform-wide totals plus a display summary of the rewards on offer."""
    data_source: str
    total_polls: int = 0
    total_votes: int = 0
    total_funding: int = 0
    total_distributions: int = 0
    total_users: int = 0
    total_voters: int = 0
    total_funders: int = 0
    reward_summary: str = "0 PULSE"
