"""Tests for the Plex client."""

import json
import logging
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from ratesync.core.plex import (
    Endpoint,
    PlexClient,
    PlexFetchError,
    PlexRequestError,
    PlexResponseError,
    ReferenceNotImplementedError,
    resolve_key,
)
from ratesync.models import (
    AlbumByName,
    AlbumEntry,
    ArtistByName,
    ArtistEntry,
    ByKey,
    SectionByName,
    TrackByName,
    TrackEntry,
)

BASE_URL = "http://plex.local:32400"
TOKEN = "secret-token"


def make_response(status_code=200, json_body=None, content=b"", reason="OK"):
    """Build a fake requests response."""
    if json_body is not None:
        content = json.dumps(json_body).encode()
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    response.content = content
    response.text = content.decode()
    response.json.side_effect = lambda: json.loads(content)
    return response


def container(*items):
    return {"MediaContainer": {"size": len(items), "Metadata": list(items)}}


@pytest.fixture
def session():
    """Create a mock requests session."""
    return Mock()


@pytest.fixture
def client(session):
    """Create a PlexClient with a mock session."""
    return PlexClient(base_url=BASE_URL, auth_token=TOKEN, session=session)


def requested_url(session) -> str:
    return session.get.call_args[0][0]


class TestResolveKey:
    """Test reference resolution."""

    def test_by_key(self):
        """Test that key references resolve to the key itself."""
        assert resolve_key(ByKey(key="42")) == "42"

    @pytest.mark.parametrize(
        "ref",
        [
            SectionByName(name="Music"),
            ArtistByName(name="The Beatles", section=ByKey(key="3")),
            AlbumByName(name="Abbey Road", artist=ByKey(key="8")),
            AlbumByName(name="Abbey Road", section=SectionByName(name="Music")),
            TrackByName(name="Come Together", album=ByKey(key="9")),
        ],
    )
    def test_by_name_not_implemented(self, ref):
        """Test that name references fail loudly."""
        with pytest.raises(ReferenceNotImplementedError):
            resolve_key(ref)

    def test_unknown_reference_type(self):
        """Test that arbitrary objects are rejected."""
        with pytest.raises(TypeError):
            resolve_key("42")

    def test_album_by_name_needs_one_parent(self):
        """Test that an album name reference needs exactly one parent."""
        with pytest.raises(ValueError):
            AlbumByName(name="Abbey Road")


class TestRequests:
    """Test request construction shared by every operation."""

    def test_headers(self, client, session):
        """Test that JSON and the auth token are requested."""
        session.get.return_value = make_response(json_body=container())

        client.list_albums(ByKey(key="3"))

        headers = session.get.call_args.kwargs["headers"]
        assert headers["Accept"] == "application/json"
        assert headers["X-Plex-Token"] == TOKEN

    def test_name_reference_sends_nothing(self, client, session):
        """Test that unresolvable references fail before any request."""
        with pytest.raises(ReferenceNotImplementedError):
            client.list_albums(SectionByName(name="Music"))

        session.get.assert_not_called()

    def test_invalid_parameters_fail_before_request(self, client, session):
        """Test that parameter validation happens before the network call."""
        with pytest.raises(PlexRequestError):
            client.set_track_rating(ByKey(key="7"), 11)

        session.get.assert_not_called()

    def test_negative_rating_rejected(self, client, session):
        """Test the lower bound of the rating range."""
        with pytest.raises(PlexRequestError):
            client.set_track_rating(ByKey(key="7"), -1)

        session.get.assert_not_called()


class TestResponses:
    """Test response handling shared by every operation."""

    def test_http_error_raises_fetch_error(self, client, session, caplog):
        """Test that a non-success status is a transport failure."""
        session.get.return_value = make_response(
            status_code=401, content=b"Unauthorized", reason="Unauthorized"
        )

        with caplog.at_level(logging.ERROR):
            with pytest.raises(PlexFetchError) as exc_info:
                client.list_albums(ByKey(key="3"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "Unauthorized"
        assert "401" in caplog.text
        assert "Unauthorized" in caplog.text

    def test_connection_error_raises_fetch_error(self, client, session):
        """Test that an unreachable server is a transport failure."""
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(PlexFetchError):
            client.list_albums(ByKey(key="3"))

    def test_unexpected_shape_raises_response_error(self, client, session):
        """Test that a contract change is not reported as a fetch failure."""
        session.get.return_value = make_response(json_body={"unexpected": True})

        with pytest.raises(PlexResponseError) as exc_info:
            client.list_albums(ByKey(key="3"))

        assert not isinstance(exc_info.value, PlexFetchError)

    def test_non_json_body_raises_response_error(self, client, session):
        """Test that an XML answer is a response error."""
        session.get.return_value = make_response(content=b"<MediaContainer/>")

        with pytest.raises(PlexResponseError):
            client.list_albums(ByKey(key="3"))

    def test_empty_body_skips_validation(self, client, session):
        """Test that an empty body yields None instead of an error."""
        session.get.return_value = make_response(content=b"")

        result = client._fetch(Endpoint.ENTITY_RATING_UPDATE, key="7", rating=8)

        assert result is None

    def test_empty_body_on_listing_is_an_error(self, client, session):
        """Test that a listing cannot silently come back empty-bodied."""
        session.get.return_value = make_response(content=b"")

        with pytest.raises(PlexResponseError):
            client.list_albums(ByKey(key="3"))


class TestListArtists:
    """Test listing artists."""

    def test_list_artists(self, client, session):
        """Test artist listing and the page cap."""
        session.get.return_value = make_response(
            json_body=container(
                {"ratingKey": "8", "title": "The Beatles", "type": "artist"},
                {"ratingKey": "12", "title": "Nina Simone", "type": "artist"},
            )
        )

        artists = client.list_artists(ByKey(key="3"))

        assert artists == [
            ArtistEntry(key="8", name="The Beatles"),
            ArtistEntry(key="12", name="Nina Simone"),
        ]
        url = requested_url(session)
        assert urlparse(url).path == "/library/sections/3/all"
        query = parse_qs(urlparse(url).query)
        assert query["type"] == ["8"]
        assert query["X-Plex-Container-Size"] == ["10"]


class TestListAlbums:
    """Test listing albums of a section."""

    def test_list_albums(self, client, session):
        """Test album listing."""
        session.get.return_value = make_response(
            json_body=container(
                {"ratingKey": "9", "title": "Abbey Road", "parentTitle": "The Beatles"},
                {"ratingKey": "10", "title": "", "parentTitle": "Unknown"},
            )
        )

        albums = client.list_albums(ByKey(key="3"))

        assert albums == [
            AlbumEntry(key="9", name="Abbey Road", artist_name="The Beatles"),
            AlbumEntry(key="10", name="", artist_name="Unknown"),
        ]
        assert requested_url(session) == f"{BASE_URL}/library/sections/3/all?type=9"

    def test_missing_artist_name(self, client, session):
        """Test that an album without an artist name is rejected."""
        session.get.return_value = make_response(
            json_body=container({"ratingKey": "9", "title": "Abbey Road"})
        )

        with pytest.raises(PlexResponseError):
            client.list_albums(ByKey(key="3"))

    def test_empty_section(self, client, session):
        """Test that Plex omitting Metadata means no albums."""
        session.get.return_value = make_response(
            json_body={"MediaContainer": {"size": 0}}
        )

        assert client.list_albums(ByKey(key="3")) == []


class TestListArtistAlbums:
    """Test listing albums of an artist."""

    def test_list_artist_albums(self, client, session):
        """Test artist album listing."""
        session.get.return_value = make_response(
            json_body=container(
                {
                    "ratingKey": "9",
                    "title": "Abbey Road",
                    "parentTitle": "The Beatles",
                    "type": "album",
                }
            )
        )

        albums = client.list_artist_albums(ByKey(key="8"))

        assert albums == [
            AlbumEntry(key="9", name="Abbey Road", artist_name="The Beatles")
        ]
        assert (
            requested_url(session)
            == f"{BASE_URL}/library/metadata/8/children?excludeAllLeaves=1"
        )

    def test_missing_artist_name(self, client, session):
        """Test that an album without an artist name is rejected."""
        session.get.return_value = make_response(
            json_body=container({"ratingKey": "9", "title": "Help!", "type": "album"})
        )

        with pytest.raises(PlexResponseError):
            client.list_artist_albums(ByKey(key="8"))


class TestListAlbumTracks:
    """Test listing tracks of an album."""

    def test_list_album_tracks(self, client, session):
        """Test track listing with rating normalization."""
        session.get.return_value = make_response(
            json_body=container(
                {
                    "ratingKey": "100",
                    "title": "Come Together",
                    "parentTitle": "Abbey Road",
                    "type": "track",
                },
                {
                    "ratingKey": "101",
                    "title": "Something",
                    "parentTitle": "Abbey Road",
                    "type": "track",
                    "userRating": 8.0,
                },
            )
        )

        tracks = client.list_album_tracks(ByKey(key="9"))

        assert tracks == [
            TrackEntry(key="100", name="Come Together", album_name="Abbey Road"),
            TrackEntry(
                key="101", name="Something", album_name="Abbey Road", rating=4
            ),
        ]
        assert tracks[0].rating == 0

    def test_missing_album_name(self, client, session):
        """Test that a track without an album name is rejected."""
        session.get.return_value = make_response(
            json_body=container(
                {"ratingKey": "100", "title": "Come Together", "type": "track"}
            )
        )

        with pytest.raises(PlexResponseError):
            client.list_album_tracks(ByKey(key="9"))

    def test_unexpected_child_type(self, client, session):
        """Test that non-track children are a contract break."""
        session.get.return_value = make_response(
            json_body=container(
                {
                    "ratingKey": "9",
                    "title": "Abbey Road",
                    "parentTitle": "The Beatles",
                    "type": "album",
                }
            )
        )

        with pytest.raises(PlexResponseError):
            client.list_album_tracks(ByKey(key="9"))


class TestSetTrackRating:
    """Test writing ratings."""

    def test_set_track_rating(self, client, session):
        """Test the rating write request."""
        session.get.return_value = make_response(content=b"")

        assert client.set_track_rating(ByKey(key="100"), 8) is None

        url = requested_url(session)
        assert urlparse(url).path == "/:/rate"
        assert parse_qs(urlparse(url).query) == {
            "identifier": ["com.plexapp.plugins.library"],
            "key": ["100"],
            "rating": ["8"],
        }

    def test_set_track_rating_by_name(self, client, session):
        """Test that track name references are not resolved."""
        with pytest.raises(ReferenceNotImplementedError):
            client.set_track_rating(
                TrackByName(name="Come Together", album=ByKey(key="9")), 8
            )

        session.get.assert_not_called()

    def test_set_track_rating_failure(self, client, session):
        """Test that a failed write raises."""
        session.get.return_value = make_response(
            status_code=500, content=b"boom", reason="Internal Server Error"
        )

        with pytest.raises(PlexFetchError):
            client.set_track_rating(ByKey(key="100"), 8)
