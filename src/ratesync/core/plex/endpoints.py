"""Plex endpoint contracts.

Each logical operation maps to a request-parameter model, a response model
and a URL template. The registry is checked once at import time so a typo in
a template fails on startup rather than mid-sync.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from string import Formatter
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type
from urllib.parse import quote

import requests
from pydantic import BaseModel, ConfigDict, Field

LIBRARY_IDENTIFIER = "com.plexapp.plugins.library"


class SearchType(IntEnum):
    """Plex media kinds accepted by the ``type`` filter."""

    MOVIE = 1
    SHOW = 2
    SEASON = 3
    EPISODE = 4
    TRAILER = 5
    COMIC = 6
    PERSON = 7
    ARTIST = 8
    ALBUM = 9
    TRACK = 10
    PICTURE = 11
    CLIP = 12
    PHOTO = 13
    PHOTOALBUM = 14
    PLAYLIST = 15
    PLAYLIST_FOLDER = 16
    COLLECTION = 18
    OPTIMIZED_VERSION = 42
    USER_PLAYLIST_ITEM = 1001


class Endpoint(str, Enum):
    """Logical Plex operations used by the client."""

    LIBRARY_SECTION_GET_ALL = "library_section_get_all"
    METADATA_GET_CHILDREN = "metadata_get_children"
    ENTITY_RATING_UPDATE = "entity_rating_update"


# Request parameter models


class SectionGetAllParams(BaseModel):
    """Parameters for ``/library/sections/{key}/all``."""

    key: str = Field(min_length=1)
    type: SearchType
    sort: Optional[List[str]] = None
    container_start: Optional[int] = Field(
        default=None, ge=0, serialization_alias="X-Plex-Container-Start"
    )
    container_size: Optional[int] = Field(
        default=None, gt=0, serialization_alias="X-Plex-Container-Size"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class MetadataGetChildrenParams(BaseModel):
    """Parameters for ``/library/metadata/{key}/children``."""

    key: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")


class EntityRatingUpdateParams(BaseModel):
    """Parameters for ``/:/rate``; ``rating`` is on Plex's 0-10 scale."""

    identifier: Literal["com.plexapp.plugins.library"] = LIBRARY_IDENTIFIER
    key: str = Field(min_length=1)
    rating: int = Field(ge=0, le=10)

    model_config = ConfigDict(frozen=True, extra="forbid")


# Response models


class SectionItem(BaseModel):
    ratingKey: str
    title: str
    parentTitle: Optional[str] = None


class SectionContainer(BaseModel):
    # Plex omits Metadata entirely for an empty listing
    Metadata: List[SectionItem] = []


class SectionGetAllResponse(BaseModel):
    MediaContainer: SectionContainer


class ChildItem(BaseModel):
    ratingKey: str
    title: str
    type: Literal["album", "track"]
    parentTitle: Optional[str] = None
    userRating: Optional[float] = Field(default=None, ge=0, le=10)


class ChildContainer(BaseModel):
    Metadata: List[ChildItem] = []


class MetadataGetChildrenResponse(BaseModel):
    MediaContainer: ChildContainer


class EntityRatingUpdateResponse(BaseModel):
    """Plex normally answers ``/:/rate`` with an empty body."""

    model_config = ConfigDict(extra="allow")


@dataclass(frozen=True)
class EndpointSpec:
    """Static contract for one endpoint."""

    params_model: Type[BaseModel]
    response_model: Type[BaseModel]
    path_template: str
    query_fields: Tuple[str, ...] = ()
    fixed_query: Mapping[str, str] = field(default_factory=dict)

    @property
    def path_fields(self) -> Tuple[str, ...]:
        """Names of the placeholders in the path template."""
        return tuple(
            name for _, name, _, _ in Formatter().parse(self.path_template) if name
        )


ENDPOINTS: Dict[Endpoint, EndpointSpec] = {
    Endpoint.LIBRARY_SECTION_GET_ALL: EndpointSpec(
        params_model=SectionGetAllParams,
        response_model=SectionGetAllResponse,
        path_template="/library/sections/{key}/all",
        query_fields=(
            "type",
            "sort",
            "X-Plex-Container-Start",
            "X-Plex-Container-Size",
        ),
    ),
    Endpoint.METADATA_GET_CHILDREN: EndpointSpec(
        params_model=MetadataGetChildrenParams,
        response_model=MetadataGetChildrenResponse,
        path_template="/library/metadata/{key}/children",
        fixed_query={"excludeAllLeaves": "1"},
    ),
    Endpoint.ENTITY_RATING_UPDATE: EndpointSpec(
        params_model=EntityRatingUpdateParams,
        response_model=EntityRatingUpdateResponse,
        path_template="/:/rate",
        query_fields=("identifier", "key", "rating"),
    ),
}


def _serialized_names(model: Type[BaseModel]) -> set:
    names = set()
    for name, info in model.model_fields.items():
        names.add(info.serialization_alias or name)
    return names


def validate_registry(registry: Mapping[Endpoint, EndpointSpec]) -> None:
    """Check that every endpoint is registered and its templates line up.

    Raises:
        ValueError: If an endpoint is missing or a template references a
            field its parameter model does not declare
    """
    missing = [endpoint.value for endpoint in Endpoint if endpoint not in registry]
    if missing:
        raise ValueError(f"Endpoints without a contract: {', '.join(missing)}")

    for endpoint, spec in registry.items():
        declared = _serialized_names(spec.params_model)
        unknown = [
            name
            for name in spec.path_fields + spec.query_fields
            if name not in declared
        ]
        if unknown:
            raise ValueError(
                f"{endpoint.value} template uses undeclared fields: "
                f"{', '.join(unknown)}"
            )


def build_url(base_url: str, spec: EndpointSpec, params: BaseModel) -> str:
    """Expand an endpoint template into a full URL.

    Path placeholders are percent-encoded. Optional query parameters that
    are unset are left out of the URL entirely; list values are joined with
    commas.
    """
    values: Dict[str, Any] = params.model_dump(
        mode="json", by_alias=True, exclude_none=True
    )

    path = spec.path_template.format(
        **{name: quote(str(values[name]), safe="") for name in spec.path_fields}
    )

    query: Dict[str, str] = dict(spec.fixed_query)
    for name in spec.query_fields:
        if name not in values:
            continue
        value = values[name]
        if isinstance(value, list):
            value = ",".join(str(item) for item in value)
        query[name] = str(value)

    url = base_url.rstrip("/") + path
    prepared = requests.Request("GET", url, params=query).prepare()
    return prepared.url


validate_registry(ENDPOINTS)
