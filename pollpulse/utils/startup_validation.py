"""
Startup validation of the PollPulse configuration.

Checks the settings and the per-chain network tables before the app starts
serving, collecting critical errors and non-critical warnings.
"""

import os
import sys
from typing import List, Optional

from pollpulse.config.common_settings import AppSettings
from pollpulse.config.network_config import ZERO_ADDRESS, NetworkConfig
from pollpulse.services.data_source import DataSource
from pollpulse.utils.logger import logger


class StartupValidator:
    """Startup validation for the PollPulse API."""

    def __init__(self, settings: Optional[AppSettings] = None, network_config: Optional[NetworkConfig] = None):
        self.settings = settings or AppSettings()
        self.network_config = network_config or NetworkConfig()
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if all critical checks pass, False otherwise.
        """
        logger.info("StartupValidator: Beginning configuration validation")

        # Critical validations (must pass)
        self._validate_data_source()
        self._validate_network_config()
        self._validate_numeric_settings()

        # Non-critical validations (warnings only)
        self._validate_chain()
        self._validate_optional_config()

        self._report_results()

        return len(self.errors) == 0

    def _validate_data_source(self) -> None:
        try:
            DataSource.parse(self.settings.default_data_source)
        except ValueError as e:
            self.errors.append(f"POLLPULSE_DEFAULT_DATA_SOURCE is invalid: {e}")

    def _validate_network_config(self) -> None:
        self.errors.extend(self.network_config.validate())

    def _validate_numeric_settings(self) -> None:
        if self.settings.subgraph_timeout <= 0:
            self.errors.append(f"POLLPULSE_SUBGRAPH_TIMEOUT must be positive, got {self.settings.subgraph_timeout}")
        if self.settings.subgraph_page_size <= 0:
            self.errors.append(
                f"POLLPULSE_SUBGRAPH_PAGE_SIZE must be positive, got {self.settings.subgraph_page_size}"
            )

    def _validate_chain(self) -> None:
        chain_id = self.settings.chain_id
        if not self.network_config.is_chain_supported(chain_id):
            self.warnings.append(
                f"Chain {chain_id} is not a known network; subgraph queries fall back to "
                f"{self.network_config.get_network_name(self.network_config.fallback_chain_id)}"
            )
        contract = self.network_config.get_polls_contract(chain_id)
        if not contract or contract.lower() == ZERO_ADDRESS:
            self.warnings.append(f"No polls contract configured for chain {chain_id}")
        if self.settings.subgraph_disabled:
            self.warnings.append("Subgraph is disabled; serving contract data only")

    def _validate_optional_config(self) -> None:
        optional_configs = {
            "ALLOWED_ORIGINS": "CORS configuration (defaults to http://localhost:3000)",
            "POLLPULSE_CHAIN_ID": "Chain id (defaults to 5003, Mantle Sepolia)",
        }
        for var, description in optional_configs.items():
            if not os.environ.get(var):
                self.warnings.append(f"Optional config {var} not set: {description}")

    def _report_results(self) -> None:
        if self.errors:
            logger.error("StartupValidator: %d critical errors found:", len(self.errors))
            for error in self.errors:
                logger.error("  - %s", error)

        if self.warnings:
            logger.warning("StartupValidator: %d warnings found:", len(self.warnings))
            for warning in self.warnings:
                logger.warning("  - %s", warning)

        if not self.errors and not self.warnings:
            logger.info("StartupValidator: All validation checks passed successfully")
        elif not self.errors:
            logger.info("StartupValidator: Critical validation passed with %d warnings", len(self.warnings))


def validate_startup(settings: Optional[AppSettings] = None, network_config: Optional[NetworkConfig] = None) -> bool:
    """
    Run startup validation and return success status.

    Returns:
        True if validation passes, False if critical errors found.
    """
    return StartupValidator(settings, network_config).validate_all()


def validate_or_exit() -> None:
    """Run startup validation and exit if critical errors are found."""
    if not validate_startup():
        logger.error("StartupValidator: Critical validation errors found. Exiting.")
        sys.exit(1)

    logger.info("StartupValidator: System validation completed successfully")


if __name__ == "__main__":
    validate_or_exit()
