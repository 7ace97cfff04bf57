"""Plex Media Server integration."""

from .client import (
    ARTIST_PAGE_SIZE,
    PlexClient,
    PlexError,
    PlexFetchError,
    PlexRequestError,
    PlexResponseError,
    ReferenceNotImplementedError,
    resolve_key,
)
from .endpoints import ENDPOINTS, Endpoint, EndpointSpec, SearchType, build_url

__all__ = [
    "ARTIST_PAGE_SIZE",
    "ENDPOINTS",
    "Endpoint",
    "EndpointSpec",
    "PlexClient",
    "PlexError",
    "PlexFetchError",
    "PlexRequestError",
    "PlexResponseError",
    "ReferenceNotImplementedError",
    "SearchType",
    "build_url",
    "resolve_key",
]
