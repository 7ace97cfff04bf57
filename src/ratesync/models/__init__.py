"""Data models package."""

from .models import (
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

__all__ = [
    "AlbumByName",
    "AlbumEntry",
    "AlbumRef",
    "ArtistByName",
    "ArtistEntry",
    "ArtistRef",
    "ByKey",
    "EntityRef",
    "SectionByName",
    "SectionRef",
    "TrackByName",
    "TrackEntry",
    "TrackRef",
]
