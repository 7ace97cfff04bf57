"""Typed client for the parts of the Plex Media Server API used by the sync."""

import logging
from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ...models import (
    AlbumByName,
    AlbumEntry,
    AlbumRef,
    ArtistByName,
    ArtistEntry,
    ArtistRef,
    ByKey,
    EntityRef,
    SectionByName,
    SectionRef,
    TrackByName,
    TrackEntry,
    TrackRef,
)
from ...utils.logging_config import TRACE
from ..ratings import from_plex
from .endpoints import (
    ENDPOINTS,
    ChildItem,
    Endpoint,
    MetadataGetChildrenResponse,
    SearchType,
    SectionGetAllResponse,
    build_url,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# Artists are fetched as a single capped page, not paginated
ARTIST_PAGE_SIZE = 10


class PlexError(Exception):
    """Base class for Plex client errors."""


class PlexFetchError(PlexError):
    """Plex could not be reached or answered with a non-success status."""

    def __init__(
        self,
        message: str = "Failed to fetch",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        """Initialize with the HTTP status and body when there was a response."""
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PlexResponseError(PlexError):
    """Plex answered, but not in the shape the client expects."""


class PlexRequestError(PlexError):
    """Outbound parameters do not match the endpoint contract."""


class ReferenceNotImplementedError(PlexError, NotImplementedError):
    """The reference uses an addressing mode the client cannot resolve yet."""


def resolve_key(ref: EntityRef) -> str:
    """Resolve an entity reference to the key Plex expects.

    Only ``ByKey`` references are supported. Name-based references fail
    loudly instead of falling back to a search.

    Raises:
        ReferenceNotImplementedError: For any ``*ByName`` reference
        TypeError: For anything that is not an entity reference
    """
    if isinstance(ref, ByKey):
        return ref.key
    if isinstance(ref, (SectionByName, ArtistByName, AlbumByName, TrackByName)):
        raise ReferenceNotImplementedError(
            f"Resolving {type(ref).__name__} references is not implemented"
        )
    raise TypeError(f"Unsupported reference type: {type(ref).__name__}")


class PlexClient:
    """Client for listing library content and rating tracks on a Plex server."""

    def __init__(
        self,
        base_url: str,
        auth_token: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize Plex client.

        Args:
            base_url: Origin of the Plex server, e.g. http://192.168.1.100:32400
            auth_token: Plex session token
            session: Optional requests session to reuse
        """
        self.base_url = base_url
        self.auth_token = auth_token
        self.session = session or requests.Session()

    def list_artists(
        self, section: SectionRef, limit: int = ARTIST_PAGE_SIZE
    ) -> List[ArtistEntry]:
        """List artists of a library section.

        Only the first ``limit`` artists are returned; there is no paging.
        """
        logger.debug("Fetching artists for %r", section)
        section_key = resolve_key(section)
        logger.debug("Resolved section key: %s", section_key)

        data = self._fetch_listing(
            Endpoint.LIBRARY_SECTION_GET_ALL,
            SectionGetAllResponse,
            key=section_key,
            type=SearchType.ARTIST,
            container_start=0,
            container_size=limit,
        )
        items = data.MediaContainer.Metadata
        logger.debug("Fetched %d artists", len(items))

        return [ArtistEntry(key=item.ratingKey, name=item.title) for item in items]

    def list_albums(self, section: SectionRef) -> List[AlbumEntry]:
        """List every album in a library section.

        Raises:
            PlexResponseError: If an album has no artist name
        """
        logger.debug("Fetching albums for %r", section)
        section_key = resolve_key(section)
        logger.debug("Resolved section key: %s", section_key)

        data = self._fetch_listing(
            Endpoint.LIBRARY_SECTION_GET_ALL,
            SectionGetAllResponse,
            key=section_key,
            type=SearchType.ALBUM,
        )
        items = data.MediaContainer.Metadata
        logger.debug("Fetched %d albums", len(items))

        albums = []
        for item in items:
            logger.log(TRACE, "Transforming album: %s", item)
            albums.append(
                AlbumEntry(
                    key=item.ratingKey,
                    name=item.title,
                    artist_name=self._require_parent(item.parentTitle, item),
                )
            )
        return albums

    def list_artist_albums(self, artist: ArtistRef) -> List[AlbumEntry]:
        """List the albums of one artist.

        Raises:
            PlexResponseError: If an album has no artist name
        """
        logger.debug("Fetching albums for artist %r", artist)
        key = resolve_key(artist)
        logger.debug("Resolved artist key: %s", key)

        items = self._fetch_children(key, expected_type="album")
        logger.debug("Fetched %d albums", len(items))

        return [
            AlbumEntry(
                key=item.ratingKey,
                name=item.title,
                artist_name=self._require_parent(item.parentTitle, item),
            )
            for item in items
        ]

    def list_album_tracks(self, album: AlbumRef) -> List[TrackEntry]:
        """List the tracks of one album with ratings on the shared 0-5 scale.

        Raises:
            PlexResponseError: If a track has no album name
        """
        logger.debug("Fetching tracks for album %r", album)
        key = resolve_key(album)
        logger.debug("Resolved album key: %s", key)

        items = self._fetch_children(key, expected_type="track")
        logger.debug("Fetched %d tracks", len(items))

        tracks = []
        for item in items:
            logger.log(TRACE, "Transforming track: %s", item)
            tracks.append(
                TrackEntry(
                    key=item.ratingKey,
                    name=item.title,
                    album_name=self._require_parent(item.parentTitle, item),
                    rating=from_plex(item.userRating or 0),
                )
            )
        return tracks

    def set_track_rating(self, track: TrackRef, rating: int) -> None:
        """Set the user rating of a track.

        Args:
            track: Track reference
            rating: Rating on Plex's native 0-10 scale

        Raises:
            PlexRequestError: If the rating is outside 0-10
        """
        key = resolve_key(track)
        logger.debug("Setting rating %d on track %s", rating, key)
        self._fetch(
            Endpoint.ENTITY_RATING_UPDATE,
            key=key,
            rating=rating,
        )

    def _fetch_children(self, key: str, expected_type: str) -> List[ChildItem]:
        data = self._fetch_listing(
            Endpoint.METADATA_GET_CHILDREN, MetadataGetChildrenResponse, key=key
        )
        items = data.MediaContainer.Metadata
        for item in items:
            if item.type != expected_type:
                raise PlexResponseError(
                    f"Expected {expected_type} children of {key}, "
                    f"got {item.type} ({item.ratingKey})"
                )
        return items

    def _fetch_listing(
        self, endpoint: Endpoint, response_type: Type[ResponseT], **params: Any
    ) -> ResponseT:
        data = self._fetch(endpoint, **params)
        if not isinstance(data, response_type):
            raise PlexResponseError(f"Unexpected empty response from {endpoint.value}")
        return data

    @staticmethod
    def _require_parent(parent_title: Optional[str], item: Any) -> str:
        if parent_title is None:
            raise PlexResponseError(
                f"Missing parent title for {item.ratingKey} ({item.title!r})"
            )
        return parent_title

    def _fetch(self, endpoint: Endpoint, **params: Any) -> Optional[BaseModel]:
        """Validate parameters, issue the request and validate the response.

        Returns:
            The validated response model, or None for an empty body

        Raises:
            PlexRequestError: If the parameters do not match the contract
            PlexFetchError: If the server is unreachable or returns an error
            PlexResponseError: If the body does not match the contract
        """
        spec = ENDPOINTS[endpoint]

        try:
            request_params = spec.params_model.model_validate(params)
        except ValidationError as e:
            raise PlexRequestError(
                f"Invalid parameters for {endpoint.value}: {e}"
            ) from e

        url = build_url(self.base_url, spec, request_params)
        headers = {
            # Plex answers with XML unless asked for JSON
            "Accept": "application/json",
            "X-Plex-Token": self.auth_token,
        }

        logger.log(TRACE, "GET %s", url)
        try:
            response = self.session.get(url, headers=headers)
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", endpoint.value, e)
            raise PlexFetchError(f"Failed to fetch {endpoint.value}: {e}") from e

        if not response.ok:
            logger.error(
                "Fetch failed: %s %s - %s",
                response.status_code,
                response.reason,
                response.text,
            )
            raise PlexFetchError(
                f"Failed to fetch {endpoint.value}: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.content:
            logger.debug("Empty response body from %s", endpoint.value)
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise PlexResponseError(
                f"Unexpected response from {endpoint.value}: not JSON"
            ) from e

        logger.log(TRACE, "Validating response: %s", body)
        try:
            return spec.response_model.model_validate(body)
        except ValidationError as e:
            raise PlexResponseError(
                f"Unexpected response from {endpoint.value}: {e}"
            ) from e
