"""URL construction for the haskell-code-server API.

Endpoints:
    GET /files/{packageId}/{indexDir}/{encoded relative path}.json
    GET /api/definitionSite/{packageId}/{componentId}/{module}/{entity}/{name}
    GET /api/globalReferences/{externalId}
    GET /api/references/{packageId}/{externalId}?per_page=N
"""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import quote

from hcenav.config.constants import (
    API_URL_PREFIX,
    DOT_DOT_NAME_SENTINEL,
    DOT_NAME_SENTINEL,
    ESCAPED_DOT,
    HCE_INDEX_DIRECTORY,
    REFERENCES_PER_PAGE,
    STATIC_URL_PREFIX,
)
from hcenav.index.models import ApproximateLocation, LocatableEntity, PackageId


# Characters operator names may contain that end or split a path segment
_SEGMENT_ESCAPES = str.maketrans({"%": "%25", "#": "%23", "?": "%3F", "/": "%2F"})


def encode_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


def escape_name(name: str) -> str:
    """Escape a name so it survives as one URL path segment.

    ``"."`` and ``".."`` become reserved sentinels. Any other name has the
    characters that would end or split the segment (``%``, ``#``, ``?``, ``/``)
    percent-encoded, then each ``.`` replaced by ``%2E``.
    """
    if name == ".":
        return DOT_NAME_SENTINEL
    if name == "..":
        return DOT_DOT_NAME_SENTINEL
    return name.translate(_SEGMENT_ESCAPES).replace(".", ESCAPED_DOT)


def module_url(
    host: str,
    package_id: PackageId | str,
    relative_path: PurePosixPath | str,
    index_directory: str = HCE_INDEX_DIRECTORY,
) -> str:
    # File names are stored URL-encoded on the server, hence the double encoding
    encoded = encode_component(encode_component(str(relative_path)))
    return f"{host}/{STATIC_URL_PREFIX}/{package_id}/{index_directory}/{encoded}.json"


def definition_site_key(location: ApproximateLocation) -> str:
    """Deterministic key of an approximate location, also its URL suffix."""
    name = location.module_name if location.entity is LocatableEntity.MOD else location.name
    return "/".join(
        (
            str(location.package_id),
            location.component_id,
            location.module_name,
            location.entity.value,
            escape_name(name),
        )
    )


def definition_site_url(host: str, location: ApproximateLocation) -> str:
    return f"{host}/{API_URL_PREFIX}/definitionSite/{definition_site_key(location)}"


def global_references_url(host: str, external_id: str) -> str:
    return f"{host}/{API_URL_PREFIX}/globalReferences/{encode_component(external_id)}"


def references_url(
    host: str,
    package_id: str,
    external_id: str,
    per_page: int = REFERENCES_PER_PAGE,
) -> str:
    return (
        f"{host}/{API_URL_PREFIX}/references/{package_id}/"
        f"{encode_component(external_id)}?per_page={per_page}"
    )
