"""
Application context.

Everything the HTTP surface needs (settings, token registry, data source
gateway, subgraph clients, contract reader, poll service) is built once at
startup and attached to `app.state.context`. Handlers reach it through the
`get_app_context` dependency, which fails fast when startup never ran.
"""
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from pollpulse.config.common_settings import AppSettings
from pollpulse.config.network_config import NetworkConfig
from pollpulse.exceptions import ConfigurationError, ContextNotInitializedError
from pollpulse.services.contract_reader import ContractReader, StaticContractReader
from pollpulse.services.data_source import DataSource, DataSourceGateway, JsonFilePreferenceStore, PreferenceStore
from pollpulse.services.poll_service import PollService
from pollpulse.services.subgraph_client import SubgraphClientFactory
from pollpulse.tokens.registry import TokenRegistry
from pollpulse.utils.logger import logger


@dataclass
class AppContext:
    settings: AppSettings
    network_config: NetworkConfig
    registry: TokenRegistry
    gateway: DataSourceGateway
    subgraph_factory: SubgraphClientFactory
    contract_reader: ContractReader
    poll_service: PollService

    async def close(self) -> None:
        await self.subgraph_factory.close_all()


def build_app_context(
    settings: Optional[AppSettings] = None,
    network_config: Optional[NetworkConfig] = None,
    contract_reader: Optional[ContractReader] = None,
    preference_store: Optional[PreferenceStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AppContext:
    """
    Build the application context.

    Args:
        settings: Application settings (default: read from the environment)
        network_config: Endpoint and address tables (default: read from the environment)
        contract_reader: Direct-read implementation (default: empty StaticContractReader)
        preference_store: Where the data source choice persists (default: JSON file at
            `settings.preference_path`)
        transport: Optional httpx transport for the subgraph clients (used by tests)

    Raises:
        ConfigurationError: If the default data source name is unknown
    """
    settings = settings or AppSettings()
    network_config = network_config or NetworkConfig()
    try:
        DataSource.parse(settings.default_data_source)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    registry = TokenRegistry(network_config)
    gateway = DataSourceGateway(
        default=settings.default_data_source,
        store=preference_store or JsonFilePreferenceStore(settings.preference_path),
        locked=settings.subgraph_disabled,
    )
    factory = SubgraphClientFactory(
        network_config=network_config,
        timeout=settings.subgraph_timeout,
        transport=transport,
    )
    if contract_reader is None:
        logger.warning("[AppContext] No contract reader configured, direct reads will return no polls")
        contract_reader = StaticContractReader(settings.chain_id, network_config=network_config)

    service = PollService(
        gateway=gateway,
        subgraph_factory=factory,
        contract_reader=contract_reader,
        registry=registry,
        chain_id=settings.chain_id,
        page_size=settings.subgraph_page_size,
    )
    logger.info(
        f"[AppContext] Built for {network_config.get_network_name(settings.chain_id)} "
        f"(data source: {gateway.data_source.value})"
    )
    return AppContext(
        settings=settings,
        network_config=network_config,
        registry=registry,
        gateway=gateway,
        subgraph_factory=factory,
        contract_reader=contract_reader,
        poll_service=service,
    )


def get_app_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context built at startup."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise ContextNotInitializedError(f"{request.method} {request.url.path}")
    return context
