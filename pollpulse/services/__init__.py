"""
Data access services: data source selection, subgraph access, direct
contract reads and the poll service that routes between them.
"""
from .contract_reader import ContractReader, StaticContractReader
from .data_source import (
    DataSource,
    DataSourceGateway,
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceStore,
)
from .poll_service import PollService
from .subgraph_client import (
    FetchPolicy,
    PageKey,
    QueryCache,
    SubgraphClient,
    SubgraphClientFactory,
    merge_pages,
    resolve_subgraph_endpoint,
)

__all__ = [
    "ContractReader",
    "DataSource",
    "DataSourceGateway",
    "FetchPolicy",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "PageKey",
    "PollService",
    "PreferenceStore",
    "QueryCache",
    "StaticContractReader",
    "SubgraphClient",
    "SubgraphClientFactory",
    "merge_pages",
    "resolve_subgraph_endpoint",
]
