"""Config module exports."""

from hcenav.config.loader import load_config
from hcenav.config.models import (
    HceNavConfig,
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "HceNavConfig",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ServerConfig",
]
