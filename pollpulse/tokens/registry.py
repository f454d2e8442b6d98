"""
Token registry.

Resolves a token symbol or address to its decimal precision and display
symbol. Lookups never fail: unknown tokens get documented defaults.
"""
from typing import Dict, Optional

from pollpulse.config.network_config import NetworkConfig
from pollpulse.data_models.poll_schemas import TokenDescriptor

STABLECOIN_SYMBOL = "USDC"
REWARD_TOKEN_SYMBOL = "PULSE"
NATIVE_SYMBOL = "MNT"
WRAPPED_NATIVE_SYMBOL = "WMNT"
UNKNOWN_SYMBOL = "TOKEN"

DEFAULT_DECIMALS = 18
STABLECOIN_DECIMALS = 6


class TokenRegistry:
    """Symbol and decimals lookup backed by the network address tables."""

    def __init__(self, network_config: Optional[NetworkConfig] = None):
        config = network_config or NetworkConfig()
        self._symbols_by_address: Dict[str, str] = {}
        for symbol, addresses in config.known_token_addresses().items():
            for address in addresses:
                self._symbols_by_address.setdefault(address.lower(), symbol)

    def resolve_symbol(self, address: Optional[str]) -> str:
        """Display symbol for a token address, "TOKEN" when unknown."""
        if not address:
            return UNKNOWN_SYMBOL
        return self._symbols_by_address.get(address.lower(), UNKNOWN_SYMBOL)

    def resolve_decimals(self, symbol_or_address: Optional[str]) -> int:
        """6 for the stablecoin (by symbol or address), 18 for everything else."""
        if not symbol_or_address:
            return DEFAULT_DECIMALS
        value = symbol_or_address.strip()
        if value.upper() == STABLECOIN_SYMBOL:
            return STABLECOIN_DECIMALS
        if self._symbols_by_address.get(value.lower()) == STABLECOIN_SYMBOL:
            return STABLECOIN_DECIMALS
        return DEFAULT_DECIMALS

    def describe(self, symbol_or_address: Optional[str]) -> TokenDescriptor:
        value = (symbol_or_address or "").strip()
        if value.lower().startswith("0x"):
            symbol = self.resolve_symbol(value)
        else:
            symbol = value.upper() or REWARD_TOKEN_SYMBOL
        return TokenDescriptor(symbol=symbol, decimals=self.resolve_decimals(value))
