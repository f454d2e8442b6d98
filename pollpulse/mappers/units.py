"""Conversions from on-chain encodings (token units, unix seconds)."""
from datetime import datetime, timezone
from decimal import Decimal


def from_token_units(amount: int, decimals: int) -> Decimal:
    """Integer amount in the token's smallest unit -> exact decimal tokens."""
    return Decimal(int(amount)).scaleb(-int(decimals))


def from_unix_seconds(seconds: int) -> datetime:
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def to_iso(seconds: int) -> str:
    """Unix seconds -> ISO-8601 UTC string with millisecond precision and a Z suffix."""
    return from_unix_seconds(seconds).isoformat(timespec="milliseconds").replace("+00:00", "Z")
