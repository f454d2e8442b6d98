"""
Mappers from raw subgraph/contract records to canonical poll models.
"""
from .entity_refs import NormalizedRef, normalize_ref
from .funding_mapper import map_funding, map_fundings
from .metadata import TitleMetadata, embed_title_metadata, parse_title_metadata
from .poll_mapper import map_contract_poll, map_poll, map_polls

__all__ = [
    "NormalizedRef",
    "normalize_ref",
    "map_funding",
    "map_fundings",
    "TitleMetadata",
    "embed_title_metadata",
    "parse_title_metadata",
    "map_contract_poll",
    "map_poll",
    "map_polls",
]
