"""
Network configuration for the PollPulse data layer.

Centralizes the per-chain tables the data layer needs: indexed-service
endpoints, known token addresses and the contract address book. Every
table has hardcoded defaults that environment variables can override.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional
from urllib.parse import urlparse

from pollpulse.utils.logger import logger

MANTLE_MAINNET = 5000
MANTLE_SEPOLIA = 5003

# Chain used when the active chain has no subgraph endpoint configured
FALLBACK_CHAIN_ID = MANTLE_SEPOLIA

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_TOKEN_ADDRESS = ZERO_ADDRESS
WRAPPED_NATIVE_ADDRESS = "0xdeaddeaddeaddeaddeaddeaddeaddeaddead1111"


@dataclass(frozen=True)
class NetworkInfo:
    chain_id: int
    name: str
    short_name: str
    is_testnet: bool


NETWORKS: Dict[int, NetworkInfo] = {
    MANTLE_MAINNET: NetworkInfo(MANTLE_MAINNET, "Mantle Mainnet", "Mantle", False),
    MANTLE_SEPOLIA: NetworkInfo(MANTLE_SEPOLIA, "Mantle Sepolia", "Sepolia", True),
}

# (env var, default)
_SUBGRAPH_URLS = {
    MANTLE_MAINNET: (
        "SUBGRAPH_URL_MANTLE_MAINNET",
        "https://subgraph.mantle.xyz/subgraphs/name/mantlepulse-mainnet",
    ),
    MANTLE_SEPOLIA: (
        "SUBGRAPH_URL_MANTLE_SEPOLIA",
        "https://subgraph.mantle.xyz/subgraphs/name/mantlepulse-sepolia",
    ),
}

_PULSE_TOKEN_ADDRESSES = {
    MANTLE_MAINNET: ("PULSE_TOKEN_MANTLE", ZERO_ADDRESS),  # not deployed yet
    MANTLE_SEPOLIA: ("PULSE_TOKEN_MANTLE_SEPOLIA", "0xa3713739c39419aA1c6daf349dB4342Be59b9142"),
}

_USDC_ADDRESSES = {
    MANTLE_MAINNET: ("USDC_TOKEN_MANTLE", "0x09Bc4E0D864854c6aFB6eB9A9cdF58aC190D0dF9"),
    MANTLE_SEPOLIA: ("USDC_TOKEN_MANTLE_SEPOLIA", "0x6763442EbDe3705C4AE49Ca926b001997C67cC51"),  # MockUSDC
}

_POLLS_CONTRACT_ADDRESSES = {
    MANTLE_MAINNET: ("POLLS_CONTRACT_MANTLE", ZERO_ADDRESS),
    MANTLE_SEPOLIA: ("POLLS_CONTRACT_MANTLE_SEPOLIA", ZERO_ADDRESS),
}


class NetworkConfig:
    """Per-chain endpoint, token and contract tables with env overrides."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ
        self.fallback_chain_id = FALLBACK_CHAIN_ID
        self.subgraph_urls = self._load_table(_SUBGRAPH_URLS)
        self.pulse_token_addresses = self._load_table(_PULSE_TOKEN_ADDRESSES)
        self.usdc_addresses = self._load_table(_USDC_ADDRESSES)
        self.polls_contract_addresses = self._load_table(_POLLS_CONTRACT_ADDRESSES)

    def _load_table(self, table: Dict[int, tuple]) -> Dict[int, str]:
        return {
            chain_id: (self._environ.get(env_var) or default)
            for chain_id, (env_var, default) in table.items()
        }

    def get_subgraph_url(self, chain_id: int) -> Optional[str]:
        """Configured subgraph URL for a chain, or None if the chain has none."""
        return self.subgraph_urls.get(chain_id)

    def is_chain_supported(self, chain_id: int) -> bool:
        return chain_id in NETWORKS

    def get_network_name(self, chain_id: int) -> str:
        info = NETWORKS.get(chain_id)
        return info.name if info else f"Chain {chain_id}"

    def get_polls_contract(self, chain_id: int) -> Optional[str]:
        return self.polls_contract_addresses.get(chain_id)

    def known_token_addresses(self) -> Dict[str, List[str]]:
        """
        All known token addresses across networks, grouped by symbol.

        Undeployed (zero address) reward tokens are left out so the zero
        address keeps resolving to the native currency.
        """
        pulse = [a for a in self.pulse_token_addresses.values() if a.lower() != ZERO_ADDRESS]
        return {
            "MNT": [NATIVE_TOKEN_ADDRESS],
            "PULSE": pulse,
            "WMNT": [WRAPPED_NATIVE_ADDRESS],
            "USDC": list(self.usdc_addresses.values()),
        }

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems = []
        for chain_id, url in self.subgraph_urls.items():
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                problems.append(f"Invalid subgraph URL for chain {chain_id}: {url!r}")
        if self.fallback_chain_id not in self.subgraph_urls:
            problems.append(f"Fallback chain {self.fallback_chain_id} has no subgraph URL")
        for chain_id, address in self.polls_contract_addresses.items():
            if address.lower() == ZERO_ADDRESS:
                logger.warning(
                    f"[NetworkConfig] Polls contract not configured for {self.get_network_name(chain_id)}"
                )
        return problems
