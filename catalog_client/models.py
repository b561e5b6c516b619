"""
Pydantic models for the YouTube Data API responses the catalog reads.

Only the fields the assigner needs are declared; everything else in the
payload is ignored.
"""
from __future__ import annotations

from datetime import datetime
import typing as t

from pydantic import BaseModel, ConfigDict, Field


class ApiError(BaseModel):
    code: t.Optional[int] = None
    message: str = "Unknown API error"


class ResourceId(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: t.Optional[str] = Field(default=None, alias="videoId")


class Snippet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    published_at: datetime = Field(alias="publishedAt")
    resource_id: t.Optional[ResourceId] = Field(default=None, alias="resourceId")


class SearchResult(BaseModel):
    """One item of ``search.list``."""
    id: ResourceId = Field(default_factory=ResourceId)
    snippet: Snippet


class SearchResponse(BaseModel):
    items: list[SearchResult] = Field(default_factory=list)


class RelatedPlaylists(BaseModel):
    uploads: str = ""


class ContentDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    related_playlists: RelatedPlaylists = Field(
        default_factory=RelatedPlaylists, alias="relatedPlaylists"
    )


class Channel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content_details: ContentDetails = Field(
        default_factory=ContentDetails, alias="contentDetails"
    )


class ChannelResponse(BaseModel):
    items: list[Channel] = Field(default_factory=list)


class PlaylistItem(BaseModel):
    """One item of ``playlistItems.list``."""
    snippet: Snippet


class PlaylistItemsResponse(BaseModel):
    items: list[PlaylistItem] = Field(default_factory=list)
