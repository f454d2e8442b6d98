"""
Project logger.

Every module logs through the shared `pollpulse-logger`; messages carry a
`[Component]` prefix such as `[Subgraph]` or `[DataSource]`.
"""
import logging
import os

LOGGER_NAME = "pollpulse-logger"
LOG_FORMAT = "%(asctime)s - [%(levelname)s] - %(name)s - %(funcName)s() - %(message)s"

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(os.environ.get("POLLPULSE_LOG_LEVEL", "INFO").upper())
logger.propagate = False  # uvicorn installs its own root handler

# Attach the console handler once, even if the module is reloaded
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    logger.addHandler(console_handler)
