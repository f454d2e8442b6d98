"""
Poll service.

Serves canonical polls, fundings and platform stats from whichever data
source the gateway currently selects: the subgraph (indexed) or the polls
contract (direct). Network failures propagate to the caller.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pollpulse.config.common_settings import CHAIN_ID, SUBGRAPH_PAGE_SIZE
from pollpulse.data_models.poll_schemas import (
    FormattedFunding,
    FormattedPoll,
    PollStats,
    RawContractPoll,
    RawGlobalStats,
)
from pollpulse.exceptions import PollNotFoundError
from pollpulse.formatting.reward_formatter import RewardTotals, format_aggregate, format_amount
from pollpulse.mappers.funding_mapper import map_fundings
from pollpulse.mappers.poll_mapper import map_contract_poll, map_polls
from pollpulse.tokens.registry import TokenRegistry
from pollpulse.utils.logger import logger

from .contract_reader import ContractReader
from .data_source import DataSourceGateway
from .subgraph_client import DEFAULT_PAGE_SIZE, SubgraphClient, SubgraphClientFactory


class PollService:
    """Read side of the poll data layer, routed through the data source gateway."""

    def __init__(
        self,
        gateway: DataSourceGateway,
        subgraph_factory: SubgraphClientFactory,
        contract_reader: ContractReader,
        registry: Optional[TokenRegistry] = None,
        chain_id: int = CHAIN_ID,
        page_size: int = SUBGRAPH_PAGE_SIZE,
    ):
        """
        Initialize the poll service.

        Args:
            gateway: Selects between the subgraph and the contract
            subgraph_factory: Provides the subgraph client for `chain_id`
            contract_reader: Direct reads of the polls contract
            registry: Token registry for decimals and symbols
            chain_id: Chain the service reads from
            page_size: Page size used when walking every poll (stats)
        """
        self.gateway = gateway
        self.subgraph_factory = subgraph_factory
        self.contract_reader = contract_reader
        self.registry = registry or TokenRegistry(subgraph_factory.network_config)
        self.chain_id = chain_id
        self.page_size = page_size

    @property
    def subgraph(self) -> SubgraphClient:
        return self.subgraph_factory.get(self.chain_id)

    # -------------------------
    # Polls
    # -------------------------
    async def list_polls(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        now: Optional[datetime] = None,
    ) -> List[FormattedPoll]:
        """
        Get one page of polls, newest first on the subgraph.

        Indexed pages are served from the merged cache entry; missing pages
        are fetched in order until the requested window is covered or a short
        page has shown the subgraph holds no more polls.
        """
        if self.gateway.is_direct:
            raws = await self.contract_reader.get_active_polls()
            polls = [map_contract_poll(raw, registry=self.registry) for raw in raws]
            return polls[skip:skip + first]

        client = self.subgraph
        records = await client.query_polls(first=first, skip=0)
        while len(records) < skip + first and not client.has_all_polls():
            records = await client.fetch_more_polls(skip=len(records), first=first)

        return map_polls(records[skip:skip + first], registry=self.registry, now=now)

    async def get_poll(self, poll_id: str, now: Optional[datetime] = None) -> FormattedPoll:
        """
        Get a single poll by its on-chain poll id.

        Raises:
            PollNotFoundError: The active data source has no such poll
        """
        if self.gateway.is_direct:
            raw = await self.contract_reader.get_poll(_contract_poll_id(poll_id))
            if raw is None:
                raise PollNotFoundError(poll_id)
            return map_contract_poll(raw, registry=self.registry)

        record = await self.subgraph.get_poll(poll_id)
        if record is None:
            raise PollNotFoundError(poll_id)
        return map_polls([record], registry=self.registry, now=now)[0]

    async def get_poll_fundings(self, poll_id: str) -> List[FormattedFunding]:
        """Funding contributions of a poll, oldest first."""
        if self.gateway.is_direct:
            raws = await self.contract_reader.get_poll_fundings(_contract_poll_id(poll_id))
        else:
            raws = await self.subgraph.get_poll_fundings(poll_id)
        return map_fundings(raws)

    # -------------------------
    # Stats
    # -------------------------
    async def get_stats(self) -> PollStats:
        """
        Platform totals and a reward summary across all polls.

        The subgraph keeps running totals in its `globalStats` entity; on the
        contract path the totals are computed from the active polls.
        """
        source = self.gateway.data_source.value

        if self.gateway.is_direct:
            raws = await self.contract_reader.get_active_polls()
            contract_polls = [RawContractPoll.model_validate(raw) for raw in raws]
            polls = [map_contract_poll(raw, registry=self.registry) for raw in contract_polls]
            return PollStats(
                data_source=source,
                total_polls=len(contract_polls),
                total_votes=sum(sum(p.votes) for p in contract_polls),
                total_funding=sum(p.total_funding for p in contract_polls),
                reward_summary=format_aggregate(RewardTotals.from_polls(polls)),
            )

        client = self.subgraph
        raw_stats = await client.get_global_stats()
        if raw_stats is None:
            logger.warning(f"[PollService] No globalStats entity on chainId {self.chain_id}, reporting zeros")
        stats = RawGlobalStats.model_validate(raw_stats or {})

        polls: List[FormattedPoll] = []
        async for page in client.iter_poll_pages(page_size=self.page_size):
            polls.extend(map_polls(page, registry=self.registry))

        return PollStats(
            data_source=source,
            **stats.model_dump(),
            reward_summary=format_aggregate(RewardTotals.from_polls(polls)),
        )

    # -------------------------
    # Display helpers
    # -------------------------
    def poll_display(self, poll: FormattedPoll) -> Dict[str, Any]:
        """JSON-ready poll with a `reward_display` string, e.g. "100 PULSE"."""
        data = poll.model_dump(mode="json")
        data["reward_display"] = format_amount(poll.total_reward, poll.funding_token)
        return data

    def funding_display(self, funding: FormattedFunding) -> Dict[str, Any]:
        data = funding.model_dump(mode="json")
        data["amount_display"] = format_amount(funding.amount, self.registry.resolve_symbol(funding.token))
        return data


def _contract_poll_id(poll_id: str) -> int:
    try:
        return int(poll_id)
    except (TypeError, ValueError):
        raise PollNotFoundError(str(poll_id)) from None
