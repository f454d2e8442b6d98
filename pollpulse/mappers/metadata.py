"""
Title metadata embedded in a poll question.

Polls store their funding token inside the question text using the
convention "TITLE|TOKEN:SYMBOL", since the contract has no separate field.
"""
from typing import NamedTuple, Optional

TOKEN_DELIMITER = "|TOKEN:"


class TitleMetadata(NamedTuple):
    title: str
    token_symbol: Optional[str] = None


def parse_title_metadata(raw: Optional[str]) -> TitleMetadata:
    """
    Split a stored question into its title and funding token symbol.

    Only a single delimiter is recognized; zero or several delimiters leave
    the whole string as the title with no token symbol.
    """
    text = raw or ""
    parts = text.split(TOKEN_DELIMITER)
    if len(parts) == 2:
        return TitleMetadata(title=parts[0], token_symbol=parts[1])
    return TitleMetadata(title=text)


def embed_title_metadata(title: str, token_symbol: Optional[str] = None) -> str:
    """Build the stored question for a title and optional token symbol."""
    if not token_symbol:
        return title
    return f"{title}{TOKEN_DELIMITER}{token_symbol}"
