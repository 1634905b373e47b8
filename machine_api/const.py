"""Constants for machine_api."""

import os
from logging import Logger, getLogger

DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
LOGGER: Logger = getLogger(__package__)

# Network
INADDR_ANY = "0.0.0.0"  # noqa: S104
MAX_DATAGRAM_SIZE = 1536

# Configuration keys
CONF_ACCESS_CODE = "access_code"
CONF_BAMBULABS = "bambulabs"
CONF_MACHINES = "machines"
CONF_SLICER_CONFIG = "slicer_config"
