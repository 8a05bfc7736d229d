"""Index data model exports."""

from hcenav.index.models import (
    ApproximateLocation,
    DefinitionSite,
    ExactLocation,
    GlobalReferences,
    IdentifierInfo,
    IdentifierOccurrence,
    IdentifierSrcSpan,
    IdType,
    LocatableEntity,
    LocationInfo,
    ModuleIdSort,
    ModuleInfo,
    NameSort,
    PackageId,
    ReferenceWithSource,
    SourceFile,
    TextComponent,
    TyConComponent,
    TypeIdSort,
    UnknownLocation,
    ValueIdSort,
)

__all__ = [
    "ApproximateLocation",
    "DefinitionSite",
    "ExactLocation",
    "GlobalReferences",
    "IdentifierInfo",
    "IdentifierOccurrence",
    "IdentifierSrcSpan",
    "IdType",
    "LocatableEntity",
    "LocationInfo",
    "ModuleIdSort",
    "ModuleInfo",
    "NameSort",
    "PackageId",
    "ReferenceWithSource",
    "SourceFile",
    "TextComponent",
    "TyConComponent",
    "TypeIdSort",
    "UnknownLocation",
    "ValueIdSort",
]
