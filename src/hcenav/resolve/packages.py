"""Local package discovery and the package registry.

A package is bound to the folder holding its ``.cabal`` manifest. The
registry translates the package ids reported by the server into local
folders, and local files into the package that owns them.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import structlog

from hcenav.config.constants import PACKAGE_MANIFEST_SUFFIX
from hcenav.core.excludes import is_prunable_dir
from hcenav.index.models import PackageId

log = structlog.get_logger(__name__)

_NAME_RE = re.compile(r"^name:\s+(.+)")
_VERSION_RE = re.compile(r"^version:\s+(.+)")


@dataclass(frozen=True)
class PackageInfo:
    """A package id bound to its absolute root folder."""

    package_id: PackageId
    package_folder: Path

    @property
    def key(self) -> str:
        return str(self.package_id)


def parse_package_id(contents: str) -> PackageId | None:
    """Read ``name:`` and ``version:`` from manifest text.

    Later lines win. Both fields are required.
    """
    name: str | None = None
    version: str | None = None
    for line in contents.splitlines():
        if match := _NAME_RE.match(line):
            name = match.group(1).strip()
            continue
        if match := _VERSION_RE.match(line):
            version = match.group(1).strip()

    if name and version:
        return PackageId(name=name, version=version)
    return None


def read_package_id(manifest: Path) -> PackageId | None:
    try:
        contents = manifest.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.warning("manifest_unreadable", path=str(manifest), error=str(e))
        return None
    return parse_package_id(contents)


def find_manifests(root: Path, suffix: str = PACKAGE_MANIFEST_SUFFIX) -> list[Path]:
    """All manifest files under ``root``, skipping build and VCS directories."""
    manifests: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable_dir(d))
        manifests.extend(Path(dirpath) / f for f in sorted(filenames) if f.endswith(suffix))
    return manifests


def discover_packages(
    root: Path, suffix: str = PACKAGE_MANIFEST_SUFFIX
) -> list[PackageInfo]:
    """Packages whose manifests live under ``root``."""
    packages: list[PackageInfo] = []
    for manifest in find_manifests(root, suffix):
        package_id = read_package_id(manifest)
        if package_id is None:
            log.debug("manifest_incomplete", path=str(manifest))
            continue
        packages.append(
            PackageInfo(package_id=package_id, package_folder=manifest.parent.resolve())
        )
    return packages


class PackageRegistry:
    """Known packages of the current workspace.

    Built once from discovered manifests; ``refresh`` rebuilds it when the set
    of workspace folders changes.
    """

    def __init__(
        self,
        packages: Iterable[PackageInfo] = (),
        manifest_suffix: str = PACKAGE_MANIFEST_SUFFIX,
    ) -> None:
        self._manifest_suffix = manifest_suffix
        self._packages: list[PackageInfo] = list(packages)

    @property
    def packages(self) -> list[PackageInfo]:
        return list(self._packages)

    def refresh(self, roots: Iterable[Path]) -> list[PackageInfo]:
        packages: list[PackageInfo] = []
        for root in roots:
            packages.extend(discover_packages(root, self._manifest_suffix))
        self._packages = packages
        log.info("packages_loaded", count=len(packages))
        return self.packages

    def folder_of(self, package_id: str) -> Path | None:
        """Local folder of a package, by its ``name-version`` string."""
        for package in self._packages:
            if package.key == package_id:
                return package.package_folder
        return None

    def package_for_file(self, path: Path) -> PackageInfo | None:
        """The closest package folder containing ``path``."""
        best: PackageInfo | None = None
        best_depth = -1
        for package in self._packages:
            if not path.is_relative_to(package.package_folder):
                continue
            depth = len(package.package_folder.parts)
            if depth > best_depth:
                best, best_depth = package, depth
        return best

    def relative_module_path(self, package: PackageInfo, path: Path) -> PurePosixPath:
        return PurePosixPath(path.relative_to(package.package_folder).as_posix())
