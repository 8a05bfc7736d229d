"""Translation of index coordinates into local file locations.

The index uses 1-based lines and columns; hosts use 0-based ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hcenav.index.models import ExactLocation, IdentifierSrcSpan
from hcenav.resolve.packages import PackageRegistry


@dataclass(frozen=True)
class ConcreteLocation:
    """A file and a 0-based, end-exclusive range."""

    path: Path
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "start": {"line": self.start_line, "character": self.start_column},
            "end": {"line": self.end_line, "character": self.end_column},
        }


@dataclass(frozen=True)
class ReferenceWithPackageId:
    """A reference span tagged with the package it was found in."""

    package_id: str
    id_src_span: IdentifierSrcSpan


def exact_to_concrete(
    location: ExactLocation, registry: PackageRegistry
) -> ConcreteLocation | None:
    folder = registry.folder_of(str(location.package_id))
    if folder is None:
        return None
    return ConcreteLocation(
        path=folder / location.module_path,
        start_line=location.start_line - 1,
        start_column=location.start_column - 1,
        end_line=location.end_line - 1,
        end_column=location.end_column - 1,
    )


def reference_to_concrete(
    reference: ReferenceWithPackageId, registry: PackageRegistry
) -> ConcreteLocation | None:
    folder = registry.folder_of(reference.package_id)
    if folder is None:
        return None
    span = reference.id_src_span
    return ConcreteLocation(
        path=folder / span.module_path,
        start_line=span.line - 1,
        start_column=span.start_column - 1,
        end_line=span.line - 1,
        end_column=span.end_column - 1,
    )


def references_to_concrete(
    references: list[ReferenceWithPackageId], registry: PackageRegistry
) -> list[ConcreteLocation]:
    """Translate references, dropping those in packages unknown locally."""
    result: list[ConcreteLocation] = []
    for reference in references:
        location = reference_to_concrete(reference, registry)
        if location is not None:
            result.append(location)
    return result
