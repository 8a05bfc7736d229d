"""Configuration constants.

This module contains values that should NOT be user-configurable: the URL
layout of the haskell-code-server API and resolution bounds.

For configurable values, see models.py.
"""

# =============================================================================
# Server URL layout
# =============================================================================

DEFAULT_HCE_HOST = "http://localhost:8080"
"""Where haskell-code-server listens by default."""

STATIC_URL_PREFIX = "files"
"""Prefix for static per-module index files."""

API_URL_PREFIX = "api"
"""Prefix for API endpoints (definition sites, references)."""

HCE_INDEX_DIRECTORY = ".haskell-code-explorer"
"""Directory inside each indexed package that holds the module JSON files."""

REFERENCES_PER_PAGE = 500
"""Page size for per-package reference queries. Big enough to get all
references in a package in one call."""

# =============================================================================
# Resolution bounds
# =============================================================================

DEFINITION_SITE_MAX_HOPS = 1
"""Remote lookups allowed when resolving an approximate location. A definition
site that is itself not exact is reported as unresolved."""

# =============================================================================
# Path segment escaping
# =============================================================================
# "." and ".." would be removed by path segment normalization (RFC 3986
# §6.2.2.3), so they are sent as reserved sentinels.

DOT_NAME_SENTINEL = "%20%2E"
DOT_DOT_NAME_SENTINEL = "%20%2E%2E"
ESCAPED_DOT = "%2E"

# =============================================================================
# Source files
# =============================================================================

HASKELL_SOURCE_SUFFIXES: frozenset[str] = frozenset((".hs", ".lhs"))
"""Files the index server has module tables for."""

PACKAGE_MANIFEST_SUFFIX = ".cabal"
