"""Core module exports."""

from hcenav.core.errors import (
    ConfigError,
    ErrorCode,
    FetchError,
    HceNavError,
)
from hcenav.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "HceNavError",
    "ConfigError",
    "ErrorCode",
    "FetchError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
