"""Hover text for identifiers and module names."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from hcenav.index.models import (
    ApproximateLocation,
    ExactLocation,
    IdentifierInfo,
    IdentifierOccurrence,
    IdType,
    LocationInfo,
    UnknownLocation,
)
from hcenav.resolve.position import WordRange


@dataclass(frozen=True)
class HoverSection:
    """One block of hover content: Haskell code or markdown prose."""

    kind: Literal["haskell", "markdown"]
    value: str


@dataclass(frozen=True)
class HoverInfo:
    sections: list[HoverSection] = field(default_factory=list)
    word_range: WordRange | None = None

    def to_markdown(self) -> str:
        parts = []
        for section in self.sections:
            if section.kind == "haskell":
                parts.append(f"```haskell\n{section.value}\n```")
            else:
                parts.append(section.value)
        return "\n\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {
            "contents": [{"kind": s.kind, "value": s.value} for s in self.sections],
        }
        if self.word_range is not None:
            result["range"] = {
                "start": {
                    "line": self.word_range.start.line,
                    "character": self.word_range.start.character,
                },
                "end": {
                    "line": self.word_range.end.line,
                    "character": self.word_range.end.character,
                },
            }
        return result


def expression_type(identifier: IdentifierInfo, id_type: IdType) -> str:
    """``name :: signature``, preferring the demangled name."""
    return f"{identifier.display_name} :: {id_type.signature()}"


def defined_in(location: LocationInfo) -> str | None:
    if isinstance(location, ApproximateLocation):
        return f"Defined in package `{location.package_id.name}` module `{location.module_name}`"
    if isinstance(location, ExactLocation):
        return (
            f"Defined in `{location.module_path}` line `{location.start_line}` "
            f"column `{location.start_column}`"
        )
    return None


def identifier_hover(
    identifier: IdentifierInfo,
    occurrence: IdentifierOccurrence,
    word_range: WordRange | None = None,
) -> HoverInfo:
    sections = [HoverSection("haskell", expression_type(identifier, identifier.id_type))]

    if occurrence.id_occ_type is not None:
        sections.append(
            HoverSection(
                "markdown",
                "Instantiated type:\n\n```haskell\n"
                + expression_type(identifier, occurrence.id_occ_type)
                + "\n```",
            )
        )

    if (where := defined_in(identifier.location_info)) is not None:
        sections.append(HoverSection("markdown", where))

    return HoverInfo(sections=sections, word_range=word_range)


def module_hover_text(location: LocationInfo) -> str | None:
    """``{- path -}`` header (exact locations only) and ``module Name``."""
    if isinstance(location, UnknownLocation):
        return None
    header = f"{{- {location.module_path} -}}\n" if isinstance(location, ExactLocation) else ""
    return f"{header}module {location.module_name}"


def module_hover(location: LocationInfo, word_range: WordRange | None = None) -> HoverInfo | None:
    text = module_hover_text(location)
    if text is None:
        return None
    return HoverInfo(sections=[HoverSection("haskell", text)], word_range=word_range)
