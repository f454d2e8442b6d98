"""
Reward formatting utilities.

Formats token amounts for human-readable display based on the token type:
- USDC: always 2 decimal places (e.g. "0.10 USDC")
- MNT/ETH and their wrapped forms: 2-4 decimals, up to 6 below 1 (e.g. "0.001 MNT")
- PULSE and other tokens: up to 2 decimals, 2-4 below 1 (e.g. "100 PULSE")
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, Optional, Tuple, Union

from pollpulse.data_models.poll_schemas import FormattedPoll
from pollpulse.utils.logger import logger

Number = Union[int, float, Decimal]

REWARD_TOKEN_SYMBOL = "PULSE"
STABLECOIN_SYMBOL = "USDC"
NATIVE_SYMBOL = "MNT"

STABLECOIN_SYMBOLS = frozenset({"USDC"})
NATIVE_SYMBOLS = frozenset({"MNT", "WMNT", "ETH", "WETH"})


def _to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, float):
        # repr of a float is the shortest string that round-trips
        value = Decimal(repr(amount))
    else:
        value = Decimal(amount)
    if not value.is_finite():
        raise ValueError(f"Cannot format non-finite amount: {amount}")
    return value


def _fraction_digits(value: Decimal, symbol: str) -> Tuple[int, int]:
    """(min, max) fraction digits for an amount of the given token."""
    if symbol in STABLECOIN_SYMBOLS:
        return 2, 2
    if symbol in NATIVE_SYMBOLS:
        return (2, 4) if value >= 1 else (2, 6)
    return (0, 2) if value >= 1 else (2, 4)


def format_decimal(value: Number, min_digits: int, max_digits: int) -> str:
    """
    Format with thousands separators, rounding half up to `max_digits` and
    trimming trailing zeros down to `min_digits`.
    """
    with localcontext() as ctx:
        ctx.prec = 100
        quantized = _to_decimal(value).quantize(Decimal(1).scaleb(-max_digits), rounding=ROUND_HALF_UP)
    text = f"{quantized:,.{max_digits}f}"
    if max_digits == 0:
        return text
    whole, fraction = text.split(".")
    fraction = fraction.rstrip("0").ljust(min_digits, "0")
    return f"{whole}.{fraction}" if fraction else whole


def format_amount(amount: Number, symbol: Optional[str] = None) -> str:
    """
    Format a token amount for display.

    Args:
        amount: Amount in whole tokens (already divided by the token decimals)
        symbol: Token symbol, case-insensitive (default PULSE)

    Returns:
        Display string such as "1,234.5 PULSE" or "0.10 USDC"
    """
    token = (symbol or REWARD_TOKEN_SYMBOL).upper()
    value = _to_decimal(amount)

    if value == 0:
        return f"0 {token}"

    min_digits, max_digits = _fraction_digits(value, token)
    return f"{format_decimal(value, min_digits, max_digits)} {token}"


@dataclass
class RewardTotals:
    """Reward totals per token category, in whole tokens."""

    reward_token: Number = 0
    stablecoin: Number = 0
    native_currency: Number = 0

    @classmethod
    def from_polls(cls, polls: Iterable[FormattedPoll]) -> "RewardTotals":
        """Sum poll rewards by the category of each poll's funding token."""
        totals = cls(Decimal(0), Decimal(0), Decimal(0))
        for poll in polls:
            symbol = (poll.funding_token or REWARD_TOKEN_SYMBOL).upper()
            if symbol in STABLECOIN_SYMBOLS:
                totals.stablecoin += poll.total_reward
            elif symbol in NATIVE_SYMBOLS:
                totals.native_currency += poll.total_reward
            elif symbol == REWARD_TOKEN_SYMBOL:
                totals.reward_token += poll.total_reward
            else:
                logger.debug(f"[RewardFormatter] Skipping poll {poll.id} funded in unknown token {symbol}")
        return totals


def format_aggregate(totals: RewardTotals) -> str:
    """
    Format a rewards summary across tokens, e.g. "100 PULSE + 5.00 USDC".

    Always shows at least one token: "0 PULSE" when every total is zero.
    """
    parts = []
    if totals.reward_token > 0:
        parts.append(format_amount(totals.reward_token, REWARD_TOKEN_SYMBOL))
    if totals.stablecoin > 0:
        parts.append(format_amount(totals.stablecoin, STABLECOIN_SYMBOL))
    if totals.native_currency > 0:
        parts.append(format_amount(totals.native_currency, NATIVE_SYMBOL))

    if not parts:
        return f"0 {REWARD_TOKEN_SYMBOL}"
    return " + ".join(parts)
