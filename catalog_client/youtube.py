"""
Client for the channel's recent uploads on the YouTube Data API.

Recent videos come from two sources: the search endpoint (required) and the
channel's uploads playlist (best effort, it catches uploads that search has not
indexed yet). Both are merged and deduplicated by video id before the
assignment engine sees them.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
import time
import typing as t

import httpx
from pydantic import BaseModel, ValidationError

from catalog_client.models import (
    ApiError,
    ChannelResponse,
    PlaylistItemsResponse,
    SearchResponse,
)
from schedule_engine.errors import CatalogError
from schedule_engine.models import CandidateVideo

logger = logging.getLogger(__name__)

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"

# Timeout settings (in seconds)
REQUEST_TIMEOUT = 30.0

DEFAULT_WINDOW = timedelta(days=2)
SEARCH_PAGE_SIZE = 50
PLAYLIST_PAGE_SIZE = 20

ModelT = t.TypeVar("ModelT", bound=BaseModel)


class YouTubeCatalog:
    """Reads recently published videos of one channel."""

    def __init__(
        self,
        api_key: str,
        channel_id: str,
        base_url: str = YOUTUBE_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = 3,
        transport: t.Optional[httpx.BaseTransport] = None,
        sleep: t.Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.channel_id = channel_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._sleep = sleep

    def request_json(self, endpoint: str, params: dict[str, t.Any], context: str) -> dict:
        """GET an API endpoint, retrying with exponential backoff.

        A JSON body carrying an ``error`` object counts as a failed attempt.
        Waits 2s, 4s, 8s... between attempts.

        Raises:
            CatalogError: If every attempt fails
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                logger.info("%s - Attempt %d/%d", context, attempt, self.max_retries)
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.get(
                        f"{self.base_url}/{endpoint}",
                        params={"key": self.api_key, **params},
                    )
                    response.raise_for_status()
                    payload = response.json()

                if isinstance(payload, dict) and payload.get("error"):
                    error = ApiError.model_validate(payload["error"])
                    raise CatalogError(f"API Error: {error.message}")

                logger.info("%s successful", context)
                return payload

            except (httpx.HTTPError, ValueError, CatalogError) as e:
                logger.warning("%s attempt %d failed: %s", context, attempt, _describe(e))
                if attempt == self.max_retries:
                    logger.error("All %s attempts failed after %d tries", context, self.max_retries)
                    raise CatalogError(f"{context} failed: {_describe(e)}") from e

                wait_seconds = 2 ** attempt
                logger.info("Waiting %ds before retry...", wait_seconds)
                self._sleep(wait_seconds)

        raise CatalogError(f"{context} failed: no attempts made")

    def _fetch(
        self, endpoint: str, params: dict[str, t.Any], model: type[ModelT], context: str
    ) -> ModelT:
        payload = self.request_json(endpoint, params, context)
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise CatalogError(f"{context} returned an unexpected payload: {e}") from e

    def search_recent(self, published_after: datetime) -> list[CandidateVideo]:
        """Videos returned by the search endpoint, newest first."""
        response = self._fetch(
            "search",
            {
                "channelId": self.channel_id,
                "part": "snippet",
                "order": "date",
                "type": "video",
                "maxResults": SEARCH_PAGE_SIZE,
                "publishedAfter": _rfc3339(published_after),
            },
            SearchResponse,
            "YouTube Search API",
        )
        videos = []
        for item in response.items:
            if not item.id.video_id:
                continue
            videos.append(
                CandidateVideo(
                    external_id=item.id.video_id,
                    title=item.snippet.title,
                    published_at=item.snippet.published_at,
                )
            )
        return videos

    def uploads_playlist_id(self) -> t.Optional[str]:
        response = self._fetch(
            "channels",
            {"id": self.channel_id, "part": "contentDetails"},
            ChannelResponse,
            "YouTube Channel API",
        )
        if not response.items:
            return None
        return response.items[0].content_details.related_playlists.uploads or None

    def playlist_recent(self, playlist_id: str, published_after: datetime) -> list[CandidateVideo]:
        """Uploads playlist entries published after ``published_after``."""
        response = self._fetch(
            "playlistItems",
            {
                "playlistId": playlist_id,
                "part": "snippet",
                "order": "date",
                "maxResults": PLAYLIST_PAGE_SIZE,
            },
            PlaylistItemsResponse,
            "YouTube Playlist API",
        )
        videos = []
        for item in response.items:
            resource = item.snippet.resource_id
            if resource is None or not resource.video_id:
                continue
            if item.snippet.published_at <= published_after:
                continue
            videos.append(
                CandidateVideo(
                    external_id=resource.video_id,
                    title=item.snippet.title,
                    published_at=item.snippet.published_at,
                )
            )
        return videos

    def fetch_recent_videos(
        self,
        now: t.Optional[datetime] = None,
        window: timedelta = DEFAULT_WINDOW,
    ) -> list[CandidateVideo]:
        """Recent channel videos from search plus the uploads playlist.

        Search results keep their order; playlist entries not already seen are
        appended after them.

        Raises:
            CatalogError: If the search endpoint cannot be read
        """
        now = now or datetime.now(timezone.utc)
        published_after = now - window

        logger.info("Fetching recent videos from YouTube...")
        videos = self.search_recent(published_after)
        logger.info("Found %d videos from search API", len(videos))

        try:
            playlist_id = self.uploads_playlist_id()
            if playlist_id:
                playlist_videos = self.playlist_recent(playlist_id, published_after)
                logger.info("Found %d recent videos from uploads playlist", len(playlist_videos))
                videos = merge_videos(videos, playlist_videos)
                logger.info("Total unique videos after merge: %d", len(videos))
        except CatalogError as e:
            logger.warning("Could not fetch uploads playlist, using search results only: %s", e)

        return videos


def merge_videos(
    primary: t.Sequence[CandidateVideo], extra: t.Iterable[CandidateVideo]
) -> list[CandidateVideo]:
    """Append ``extra`` videos whose id is not already in ``primary``."""
    merged = list(primary)
    seen = {video.external_id for video in merged}
    for video in extra:
        if video.external_id not in seen:
            merged.append(video)
            seen.add(video.external_id)
    return merged


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _describe(error: Exception) -> str:
    # Status errors carry the request URL, which includes the API key
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    if isinstance(error, httpx.TimeoutException):
        return "request timed out"
    return str(error)
