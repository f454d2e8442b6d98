"""
Display formatting for token amounts.
"""
from .reward_formatter import RewardTotals, format_aggregate, format_amount

__all__ = [
    "RewardTotals",
    "format_aggregate",
    "format_amount",
]
