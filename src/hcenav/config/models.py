"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (HCENAV__SECTION__KEY)
3. Workspace YAML (.hcenav.yaml)
4. Global YAML (~/.config/hcenav/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    HCENAV__<SECTION>__<KEY>=<VALUE>

Examples:
    HCENAV__SERVER__HOST=http://explorer.internal:8080
    HCENAV__SERVER__REQUEST_TIMEOUT_SEC=10
    HCENAV__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from hcenav.config.constants import (
    DEFAULT_HCE_HOST,
    HCE_INDEX_DIRECTORY,
    PACKAGE_MANIFEST_SUFFIX,
    REFERENCES_PER_PAGE,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        HCENAV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. INFO records every lookup miss; DEBUG every fetch.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """Remote haskell-code-server connection.

    Env vars:
        HCENAV__SERVER__HOST: Base URL of the server (default: http://localhost:8080)
        HCENAV__SERVER__REQUEST_TIMEOUT_SEC: Per-request timeout, 0 disables
        HCENAV__SERVER__REFERENCES_PER_PAGE: Page size for reference queries
    """

    host: str = Field(
        default=DEFAULT_HCE_HOST,
        description="Base URL of haskell-code-server, scheme included.",
    )
    request_timeout_sec: float | None = Field(
        default=30.0,
        description="Timeout for each request. None or 0 waits forever.",
    )
    references_per_page: int = Field(
        default=REFERENCES_PER_PAGE,
        description="Page size for per-package reference queries.",
    )
    accept_gzip: bool = Field(
        default=True,
        description="Ask for gzip-encoded module tables. They are large.",
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Host must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("request_timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is None or v == 0:
            return None
        if v < 0:
            raise ValueError(f"Timeout must not be negative, got {v}")
        return v

    @field_validator("references_per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Page size must be positive, got {v}")
        return v


class IndexConfig(BaseModel):
    """Local layout of indexed packages.

    Env vars:
        HCENAV__INDEX__INDEX_DIRECTORY: Index directory name inside each package
        HCENAV__INDEX__MANIFEST_SUFFIX: Package manifest file suffix
    """

    index_directory: str = Field(
        default=HCE_INDEX_DIRECTORY,
        description="Directory written by haskell-code-indexer inside each package.",
    )
    manifest_suffix: str = Field(
        default=PACKAGE_MANIFEST_SUFFIX,
        description="Suffix of package manifests used for package discovery.",
    )


class HceNavConfig(BaseModel):
    """Root configuration for hcenav.

    All settings can be configured via:
    1. Environment variables: HCENAV__SECTION__KEY
    2. YAML config files (workspace or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
