"""hcenav error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Fetch (remote index server)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Fetch (3xxx)
    FETCH_CONNECTION_REFUSED = 3001
    FETCH_NOT_FOUND = 3002
    FETCH_TRANSPORT_ERROR = 3003
    FETCH_BAD_STATUS = 3004
    FETCH_DECODE_ERROR = 3005


@dataclass(frozen=True, slots=True)
class HceNavError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'FETCH_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(HceNavError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class FetchError(HceNavError):
    """Failures talking to the code explorer server.

    Never escapes the HTTP client: callers only ever see ``None``.
    """

    @classmethod
    def connection_refused(cls, host: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_CONNECTION_REFUSED,
            message=f"haskell-code-server not running at {host}",
            retryable=True,
            details={"host": host},
        )

    @classmethod
    def not_found(cls, url: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_NOT_FOUND,
            message=f"404 Not Found: {url}",
            details={"url": url},
        )

    @classmethod
    def transport(cls, url: str, reason: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_TRANSPORT_ERROR,
            message=f"Failed to fetch {url}: {reason}",
            retryable=True,
            details={"url": url, "reason": reason},
        )

    @classmethod
    def bad_status(cls, url: str, status: int) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_BAD_STATUS,
            message=f"Unexpected HTTP {status} from {url}",
            retryable=status >= 500,
            details={"url": url, "status": status},
        )

    @classmethod
    def decode(cls, url: str, reason: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_DECODE_ERROR,
            message=f"Malformed response from {url}: {reason}",
            details={"url": url, "reason": reason},
        )
