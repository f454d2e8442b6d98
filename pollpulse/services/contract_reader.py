"""
Direct-read access to the polls contract.

The contract itself (and the RPC/signing stack behind it) is an external
collaborator; this module only defines the read interface the data layer
consumes, plus an in-memory implementation for fixtures and local runs.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pollpulse.config.network_config import NetworkConfig
from pollpulse.utils.logger import logger


class ContractReader(ABC):
    """
    Read operations of the polls contract for one chain.

    Poll structs are returned as dicts with the contract's field names
    (`id`, `question`, `options`, `votes`, `endTime`, `isActive`, `creator`,
    `totalFunding`, `fundingToken`, `fundingType`, `status`, `votingType`);
    funding structs as `{token, amount, funder, timestamp}`.
    """

    def __init__(self, chain_id: int, network_config: Optional[NetworkConfig] = None):
        self.chain_id = chain_id
        config = network_config or NetworkConfig()
        self.contract_address = config.get_polls_contract(chain_id)

    @abstractmethod
    async def get_active_polls(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def get_poll(self, poll_id: int) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def get_poll_fundings(self, poll_id: int) -> List[Dict[str, Any]]:
        ...


class StaticContractReader(ContractReader):
    """ContractReader serving a fixed set of poll and funding structs."""

    def __init__(
        self,
        chain_id: int,
        polls: Iterable[Dict[str, Any]] = (),
        fundings: Optional[Dict[int, List[Dict[str, Any]]]] = None,
        network_config: Optional[NetworkConfig] = None,
    ):
        super().__init__(chain_id, network_config)
        self._polls = {int(p["id"]): p for p in polls}
        self._fundings = {int(k): list(v) for k, v in (fundings or {}).items()}
        logger.info(f"[ContractReader] Serving {len(self._polls)} static polls for chainId {chain_id}")

    async def get_active_polls(self) -> List[Dict[str, Any]]:
        return [p for p in self._polls.values() if p.get("isActive")]

    async def get_poll(self, poll_id: int) -> Optional[Dict[str, Any]]:
        return self._polls.get(int(poll_id))

    async def get_poll_fundings(self, poll_id: int) -> List[Dict[str, Any]]:
        return list(self._fundings.get(int(poll_id), []))
