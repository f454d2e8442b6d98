"""
Normalization of entity references.

The subgraph returns relations as nested entities (`{"id": ...}`, tokens
also carry `decimals`) while contract reads return flat address strings.
Both mappers resolve them through `normalize_ref` only.
"""
from typing import Any, NamedTuple, Optional, Union

from pollpulse.data_models.poll_schemas import EntityRef, TokenRef

EntityLike = Union[EntityRef, TokenRef, dict, str, None]


class NormalizedRef(NamedTuple):
    id: Optional[str]
    decimals: Optional[int] = None
    nested: bool = False


def normalize_ref(value: EntityLike) -> NormalizedRef:
    """Resolve a flat or nested reference to its identifier (and decimals)."""
    if value is None:
        return NormalizedRef(id=None)
    if isinstance(value, str):
        return NormalizedRef(id=value)
    if isinstance(value, TokenRef):
        return NormalizedRef(id=value.id, decimals=value.decimals, nested=True)
    if isinstance(value, EntityRef):
        return NormalizedRef(id=value.id, nested=True)
    if isinstance(value, dict):
        return NormalizedRef(id=_as_str(value.get("id")), decimals=_as_int(value.get("decimals")), nested=True)
    return NormalizedRef(id=str(value))


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)
