"""Data models for the rating sync application.

Entity references address a Plex library object either by its opaque
``ratingKey`` or by name scoped to a parent. Entries are the flattened
read-models built from Plex listing payloads.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ByKey(BaseModel):
    """Reference any library object by its unique Plex key."""

    key: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True)


class SectionByName(BaseModel):
    """Reference a library section by name."""

    name: str

    model_config = ConfigDict(frozen=True)


class ArtistByName(BaseModel):
    """Reference an artist by name within a library section."""

    name: str
    section: "SectionRef"

    model_config = ConfigDict(frozen=True)


class AlbumByName(BaseModel):
    """Reference an album by name within an artist or a library section."""

    name: str
    artist: Optional["ArtistRef"] = None
    section: Optional["SectionRef"] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_single_parent(self) -> "AlbumByName":
        """Require exactly one parent scope."""
        if (self.artist is None) == (self.section is None):
            raise ValueError("AlbumByName needs exactly one of artist or section")
        return self


class TrackByName(BaseModel):
    """Reference a track by name within an album."""

    name: str
    album: "AlbumRef"

    model_config = ConfigDict(frozen=True)


SectionRef = Union[ByKey, SectionByName]
ArtistRef = Union[ByKey, ArtistByName]
AlbumRef = Union[ByKey, AlbumByName]
TrackRef = Union[ByKey, TrackByName]

EntityRef = Union[ByKey, SectionByName, ArtistByName, AlbumByName, TrackByName]

ArtistByName.model_rebuild()
AlbumByName.model_rebuild()
TrackByName.model_rebuild()


class ArtistEntry(BaseModel):
    """Artist as listed in a library section."""

    key: str
    name: str

    model_config = ConfigDict(frozen=True)


class AlbumEntry(BaseModel):
    """Album with the display name of its artist."""

    key: str
    name: str
    artist_name: str

    model_config = ConfigDict(frozen=True)


class TrackEntry(BaseModel):
    """Track with its album name and rating on the shared 0-5 scale."""

    key: str
    name: str
    album_name: str
    rating: int = Field(default=0, ge=0, le=5)  # 0 means unrated

    model_config = ConfigDict(frozen=True)
