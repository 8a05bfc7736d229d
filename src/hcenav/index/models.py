"""Wire models for the haskell-code-server API.

Only the parts of the API that navigation needs are modelled. Field names are
snake_case in Python and camelCase on the wire; unknown keys are ignored so
newer servers keep working.

Tagged unions (``LocationInfo``, ``TypeComponent``, ``IdentifierOccurrenceSort``)
are closed: a payload with an unknown ``tag`` fails validation instead of
silently producing a half-filled object.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

# Plain string aliases, for readability of signatures
InternalId = str
ExternalId = str
OccurrenceId = str
ComponentId = str
HaskellModulePath = str
HaskellModuleName = str


class WireModel(BaseModel):
    """Base for all server payloads: camelCase aliases, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============================================================================
# ENUMS
# ============================================================================


class NameSort(str, Enum):
    """Visibility of a name outside its module."""

    EXTERNAL = "External"
    INTERNAL = "Internal"


class LocatableEntity(str, Enum):
    """Kind of entity an approximate location points at."""

    TYP = "Typ"
    VAL = "Val"
    INST = "Inst"
    MOD = "Mod"


# ============================================================================
# PACKAGES
# ============================================================================


class PackageId(WireModel):
    """Package name and version, e.g. ``text-1.2.3.1``."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


# ============================================================================
# TYPES
# ============================================================================


class TextComponent(WireModel):
    tag: Literal["Text"] = "Text"
    contents: str


class TyConComponent(WireModel):
    tag: Literal["TyCon"] = "TyCon"
    internal_id: InternalId
    name: str


TypeComponent = Annotated[TextComponent | TyConComponent, Field(discriminator="tag")]


class IdType(WireModel):
    """A rendered Haskell type, split into text and type constructor parts."""

    components: list[TypeComponent] = Field(default_factory=list)
    # Same type with all type synonyms expanded
    components_expanded: list[TypeComponent] | None = None

    def signature(self) -> str:
        return "".join(
            c.contents if isinstance(c, TextComponent) else c.name for c in self.components
        )


# ============================================================================
# LOCATIONS
# ============================================================================


class ExactLocation(WireModel):
    """Fully resolved source span. Lines and columns are 1-based."""

    tag: Literal["ExactLocation"] = "ExactLocation"
    package_id: PackageId
    module_path: HaskellModulePath
    module_name: HaskellModuleName
    start_line: int
    end_line: int
    start_column: int
    end_column: int


class ApproximateLocation(WireModel):
    """Names a definition without coordinates; resolved via the definition site API."""

    tag: Literal["ApproximateLocation"] = "ApproximateLocation"
    package_id: PackageId
    module_name: HaskellModuleName
    entity: LocatableEntity
    name: str
    component_id: ComponentId
    haddock_anchor_id: str | None = None


class UnknownLocation(WireModel):
    tag: Literal["UnknownLocation"] = "UnknownLocation"


LocationInfo = Annotated[
    ExactLocation | ApproximateLocation | UnknownLocation,
    Field(discriminator="tag"),
]


class DefinitionSite(WireModel):
    """Result of resolving an approximate location."""

    location: LocationInfo
    doc: str | None = None  # HTML


# ============================================================================
# IDENTIFIERS AND OCCURRENCES
# ============================================================================


class IdentifierInfo(WireModel):
    """A Haskell identifier (value or type) defined or used in a module."""

    sort: NameSort
    occ_name: str
    demangled_occ_name: str | None = None
    location_info: LocationInfo
    id_type: IdType
    # Only set for identifiers visible outside their module
    external_id: ExternalId | None = None

    @property
    def display_name(self) -> str:
        return self.demangled_occ_name or self.occ_name


class ValueIdSort(WireModel):
    tag: Literal["ValueId"] = "ValueId"


class TypeIdSort(WireModel):
    tag: Literal["TypeId"] = "TypeId"


class ModuleIdSort(WireModel):
    """Occurrence of a module name, e.g. in an import."""

    tag: Literal["ModuleId"] = "ModuleId"
    contents: LocationInfo


IdentifierOccurrenceSort = Annotated[
    ValueIdSort | TypeIdSort | ModuleIdSort,
    Field(discriminator="tag"),
]


class IdentifierOccurrence(WireModel):
    """One textual appearance of an identifier in a module."""

    internal_id: InternalId | None = None
    is_binder: bool = False
    id_occ_type: IdType | None = None
    sort: IdentifierOccurrenceSort


class ModuleInfo(WireModel):
    """Identifier and occurrence tables of one source file.

    Occurrence keys are ``line-startColumn-endColumn`` (1-based).
    """

    identifiers: dict[InternalId, IdentifierInfo] = Field(default_factory=dict)
    occurrences: dict[OccurrenceId, IdentifierOccurrence] = Field(default_factory=dict)


# ============================================================================
# REFERENCES
# ============================================================================


class GlobalReferences(WireModel):
    """A package known to reference an external identifier."""

    count: int
    package_id: str


class IdentifierSrcSpan(WireModel):
    """Single-line span of a reference. 1-based."""

    module_path: HaskellModulePath
    line: int
    start_column: int
    end_column: int


class ReferenceWithSource(WireModel):
    source_code_html: str = ""
    id_src_span: IdentifierSrcSpan


class SourceFile(WireModel):
    name: str
    references: list[ReferenceWithSource] = Field(default_factory=list)


GLOBAL_REFERENCES_ADAPTER: TypeAdapter[list[GlobalReferences]] = TypeAdapter(
    list[GlobalReferences]
)
SOURCE_FILES_ADAPTER: TypeAdapter[list[SourceFile]] = TypeAdapter(list[SourceFile])
