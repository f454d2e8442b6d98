import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

# --------------------------------------------------
# Network Configuration
# --------------------------------------------------
# Mantle Sepolia (5003) for development, Mantle Mainnet (5000) in production
CHAIN_ID = int(os.environ.get("POLLPULSE_CHAIN_ID") or "5003")

# --------------------------------------------------
# Data Source Configuration
# --------------------------------------------------
# "contract" reads polls directly from the polls contract,
# "subgraph" reads them from the indexed query service
DEFAULT_DATA_SOURCE = os.environ.get("POLLPULSE_DEFAULT_DATA_SOURCE", "contract")

# Pins the data source to "contract" when the indexer is unavailable
SUBGRAPH_DISABLED = os.environ.get("POLLPULSE_SUBGRAPH_DISABLED", "false").lower() in ("true", "1", "yes", "on")

# Where the user's data source choice is persisted between sessions
PREFERENCE_PATH = os.environ.get("POLLPULSE_PREFERENCE_PATH", ".pollpulse/preferences.json")

# --------------------------------------------------
# Subgraph Client Configuration
# --------------------------------------------------
SUBGRAPH_TIMEOUT = float(os.environ.get("POLLPULSE_SUBGRAPH_TIMEOUT", "30.0"))
SUBGRAPH_PAGE_SIZE = int(os.environ.get("POLLPULSE_SUBGRAPH_PAGE_SIZE", "100"))

# --------------------------------------------------
# HTTP Configuration
# --------------------------------------------------
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


@dataclass
class AppSettings:
    """
    Snapshot of the settings above, built once at startup and passed to
    every component that needs configuration.
    """

    chain_id: int = CHAIN_ID
    default_data_source: str = DEFAULT_DATA_SOURCE
    subgraph_disabled: bool = SUBGRAPH_DISABLED
    preference_path: Path = field(default_factory=lambda: Path(PREFERENCE_PATH))
    subgraph_timeout: float = SUBGRAPH_TIMEOUT
    subgraph_page_size: int = SUBGRAPH_PAGE_SIZE
    allowed_origins: List[str] = field(default_factory=lambda: list(ALLOWED_ORIGINS))
