"""
Token symbol and decimals lookup.
"""
from .registry import TokenRegistry

__all__ = [
    "TokenRegistry",
]
