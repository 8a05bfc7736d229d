"""Cursor position to occurrence and identifier.

A "word" is carved out of the line with the same grammar the index uses for
occurrences: qualified names like ``T.pack`` are one word, operators such as
``<$>`` or ``>>=`` are not words at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from hcenav.index.models import (
    IdentifierInfo,
    IdentifierOccurrence,
    LocationInfo,
    ModuleIdSort,
    OccurrenceId,
)
from hcenav.resolve.modules import ModuleCache

log = structlog.get_logger(__name__)

# Leading word char or apostrophe, then word chars, apostrophes or dots.
# Numeric literals get no special case: 1.23E-4 splits into 1.23E and 4.
WORD_PATTERN = re.compile(r"[\w'][\w'.]*")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class Feature(str, Enum):
    HOVER = "hover"
    DEFINITION = "definition"
    REFERENCES = "references"


class MissReason(str, Enum):
    """Why a lookup produced no result. Each is logged, none is an error."""

    NO_WORD_RANGE = "Could not get word range"
    MULTILINE_WORD = "Identifier spans multiple lines"
    NO_MODULE = "Module info not available"
    NO_OCCURRENCE = "Could not find occurrence"
    NO_INTERNAL_ID = "No internalId"
    NO_IDENTIFIER = "Could not find identifier"
    BINDER = "Occurrence is binder"
    NO_MODULE_INFO = "No info for module"
    MODULE_OCCURRENCE = "Occurrence is a module name"
    NO_EXTERNAL_ID = "No externalId"
    UNKNOWN_LOCATION = "Location is unknown"
    NO_DEFINITION_SITE = "Could not fetch definition site"
    NOT_EXACT = "Location is not exact location"
    PACKAGE_NOT_LOADED = "Package folder not known"
    NO_REFERENCES = "Could not fetch references"


@dataclass(frozen=True, order=True)
class Position:
    """0-based line and character, as hosts report cursors."""

    line: int
    character: int


@dataclass(frozen=True)
class WordRange:
    """Range of a word; ``end`` is exclusive."""

    start: Position
    end: Position
    text: str

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line


def word_range_at(text: str, position: Position) -> WordRange | None:
    """The word touching ``position``, if any.

    A cursor right after the last character of a word still selects it.
    """
    lines = _LINE_BREAK.split(text)
    if not 0 <= position.line < len(lines):
        return None
    line = lines[position.line]
    for match in WORD_PATTERN.finditer(line):
        if match.start() <= position.character <= match.end():
            return WordRange(
                start=Position(position.line, match.start()),
                end=Position(position.line, match.end()),
                text=match.group(),
            )
        if match.start() > position.character:
            break
    return None


def occurrence_id(word_range: WordRange) -> OccurrenceId:
    """``line-startColumn-endColumn``, all 1-based."""
    return f"{word_range.start.line + 1}-{word_range.start.character + 1}-{word_range.end.character + 1}"


@dataclass(frozen=True)
class Resolution:
    """What the cursor points at.

    Exactly one of ``identifier`` and ``module_location`` is set.
    """

    word_range: WordRange
    occurrence: IdentifierOccurrence
    identifier: IdentifierInfo | None = None
    module_location: LocationInfo | None = None


def log_miss(
    feature: Feature,
    reason: MissReason,
    path: Path,
    position: Position,
    word_range: WordRange | None = None,
) -> None:
    log.info(
        "lookup_miss",
        feature=feature.value,
        reason=reason.value,
        file=str(path),
        word=word_range.text if word_range else "<NA>",
        line=position.line,
        character=position.character,
    )


class PositionResolver:
    """Maps a cursor in a file to its occurrence and identifier.

    Only cached modules are consulted. On a cache miss a background fetch is
    started so that the next request for the same file can succeed.
    """

    def __init__(self, modules: ModuleCache) -> None:
        self._modules = modules

    def resolve(
        self,
        path: Path,
        text: str,
        position: Position,
        feature: Feature = Feature.HOVER,
    ) -> Resolution | None:
        word_range = word_range_at(text, position)
        if word_range is None:
            log_miss(feature, MissReason.NO_WORD_RANGE, path, position)
            return None

        # Guards the column arithmetic below; words never contain line breaks
        if not word_range.is_single_line:
            log_miss(feature, MissReason.MULTILINE_WORD, path, position, word_range)
            return None

        module = self._modules.peek(path)
        if module is None:
            self._modules.prefetch(path)
            log_miss(feature, MissReason.NO_MODULE, path, position, word_range)
            return None

        occurrence = module.occurrences.get(occurrence_id(word_range))
        if occurrence is None:
            log_miss(feature, MissReason.NO_OCCURRENCE, path, position, word_range)
            return None

        if isinstance(occurrence.sort, ModuleIdSort):
            return Resolution(
                word_range=word_range,
                occurrence=occurrence,
                module_location=occurrence.sort.contents,
            )

        if not occurrence.internal_id:
            log_miss(feature, MissReason.NO_INTERNAL_ID, path, position, word_range)
            return None

        identifier = module.identifiers.get(occurrence.internal_id)
        if identifier is None:
            log_miss(feature, MissReason.NO_IDENTIFIER, path, position, word_range)
            return None

        return Resolution(word_range=word_range, occurrence=occurrence, identifier=identifier)
