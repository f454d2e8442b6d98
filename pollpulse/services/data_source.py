"""
Data source selection.

Decides whether poll data is read directly from the polls contract or from
the indexed subgraph, and persists the user's choice between sessions.
"""
import json
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from pollpulse.utils.logger import logger

PREFERENCE_KEY = "pollpulse-data-source"


class DataSource(str, Enum):
    CONTRACT = "contract"
    SUBGRAPH = "subgraph"

    @classmethod
    def parse(cls, value: Union["DataSource", str]) -> "DataSource":
        """Parse a data source name; "direct" and "indexed" are accepted as aliases."""
        if isinstance(value, DataSource):
            return value
        normalized = str(value).strip().lower()
        aliases = {"direct": cls.CONTRACT, "indexed": cls.SUBGRAPH}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown data source {value!r}; expected one of: contract, subgraph"
            ) from None

    def flipped(self) -> "DataSource":
        return DataSource.SUBGRAPH if self is DataSource.CONTRACT else DataSource.CONTRACT


# ==================
# Preference Stores
# ==================

class PreferenceStore(ABC):
    """String key/value storage for user preferences."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFilePreferenceStore(PreferenceStore):
    """Preferences kept in a single JSON object on disk; last write wins."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[DataSource] Ignoring unreadable preference file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ==================
# Gateway
# ==================

class DataSourceGateway:
    """
    Process-wide switch between direct contract reads and the subgraph.

    The initial value is the configured default, overridden by a persisted
    choice when one exists. In locked mode the gateway stays on "contract"
    and every mutation only logs a warning.
    """

    def __init__(
        self,
        default: Union[DataSource, str] = DataSource.CONTRACT,
        store: Optional[PreferenceStore] = None,
        locked: bool = False,
    ):
        self.store = store or InMemoryPreferenceStore()
        self._locked = locked

        if locked:
            self._source = DataSource.CONTRACT
            logger.info("[DataSource] Subgraph disabled, pinned to contract reads")
            return

        self._source = DataSource.parse(default)
        persisted = self.store.get(PREFERENCE_KEY)
        if persisted:
            try:
                self._source = DataSource.parse(persisted)
            except ValueError:
                logger.warning(f"[DataSource] Ignoring invalid persisted data source {persisted!r}")
        logger.info(f"[DataSource] Active data source: {self._source.value}")

    @property
    def data_source(self) -> DataSource:
        return self._source

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_indexed(self) -> bool:
        return self._source is DataSource.SUBGRAPH

    @property
    def is_direct(self) -> bool:
        return self._source is DataSource.CONTRACT

    # Names used by the persisted values
    is_subgraph = is_indexed
    is_contract = is_direct

    def set(self, source: Union[DataSource, str]) -> DataSource:
        """Switch the active data source and persist the choice."""
        if self._locked:
            logger.warning("[DataSource] Subgraph is currently disabled. Using contract data source only.")
            return self._source

        self._source = DataSource.parse(source)
        self.store.set(PREFERENCE_KEY, self._source.value)
        logger.info(f"[DataSource] Switched data source to {self._source.value}")
        return self._source

    def toggle(self) -> DataSource:
        if self._locked:
            logger.warning("[DataSource] Subgraph is currently disabled. Using contract data source only.")
            return self._source
        return self.set(self._source.flipped())

    def to_dict(self) -> dict:
        return {
            "data_source": self._source.value,
            "is_subgraph": self.is_subgraph,
            "is_contract": self.is_contract,
            "is_subgraph_disabled": self._locked,
        }
