"""Directories never traversed during package manifest discovery.

PRUNABLE_DIRS = VCS internals | Haskell build outputs | index data.
Manifests found under these directories are copies or vendored sources and
would shadow the real package folder.
"""

from __future__ import annotations

# =============================================================================
# VCS internals
# =============================================================================

VCS_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

# =============================================================================
# Build outputs and caches
# =============================================================================

BUILD_DIRS: frozenset[str] = frozenset(
    (
        # Cabal
        "dist",
        "dist-newstyle",
        ".cabal-sandbox",
        # Stack
        ".stack-work",
        # Nix
        "result",
        # Editor tooling that vendors package sources
        "node_modules",
        ".vscode-test",
    )
)

# =============================================================================
# Index data written by haskell-code-indexer
# =============================================================================

INDEX_DIRS: frozenset[str] = frozenset((".haskell-code-explorer",))

PRUNABLE_DIRS: frozenset[str] = VCS_DIRS | BUILD_DIRS | INDEX_DIRS


def is_prunable_dir(name: str) -> bool:
    """Return True if a directory with this name should not be traversed."""
    return name in PRUNABLE_DIRS
