"""
Funding mapper.

Turns a raw funding record into a `FormattedFunding`. Decimals come from
the nested token entity when the record carries one and default to 18
otherwise; the token registry is not consulted here.
"""
from typing import Any, Dict, Iterable, List, Union

from pollpulse.data_models.poll_schemas import FormattedFunding, RawIndexedFunding

from .entity_refs import normalize_ref
from .units import from_token_units, from_unix_seconds

DEFAULT_FUNDING_DECIMALS = 18


def map_funding(raw: Union[RawIndexedFunding, Dict[str, Any]]) -> FormattedFunding:
    funding = raw if isinstance(raw, RawIndexedFunding) else RawIndexedFunding.model_validate(raw)

    funder = normalize_ref(funding.funder)
    token = normalize_ref(funding.token)
    decimals = token.decimals if token.decimals is not None else DEFAULT_FUNDING_DECIMALS

    return FormattedFunding(
        funder=funder.id,
        token=token.id,
        amount=from_token_units(funding.amount, decimals),
        timestamp=from_unix_seconds(funding.timestamp),
    )


def map_fundings(raws: Iterable[Union[RawIndexedFunding, Dict[str, Any]]]) -> List[FormattedFunding]:
    return [map_funding(raw) for raw in raws]
