"""Tests for the YouTube catalog client.

HTTP traffic is served by ``httpx.MockTransport``; backoff sleeps are recorded
instead of waited.
"""
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from catalog_client.youtube import YouTubeCatalog, merge_videos
from schedule_engine.errors import CatalogError
from schedule_engine.models import CandidateVideo

NOW = datetime(2025, 8, 28, 12, 0, tzinfo=timezone.utc)


def _search_item(video_id: str, title: str, published: str) -> dict:
    return {
        "kind": "youtube#searchResult",
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {"title": title, "publishedAt": published, "channelId": "UC123"},
    }


def _playlist_item(video_id: str, title: str, published: str) -> dict:
    return {
        "snippet": {
            "title": title,
            "publishedAt": published,
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        }
    }


SEARCH_BODY = {
    "items": [
        _search_item("vidsearch01", "AVC185 8/27/2025", "2025-08-27T20:00:00Z"),
        _search_item("vidsearch02", "AVC200 8/27/2025", "2025-08-27T18:00:00Z"),
    ]
}
CHANNEL_BODY = {"items": [{"contentDetails": {"relatedPlaylists": {"uploads": "UU123"}}}]}
PLAYLIST_BODY = {
    "items": [
        _playlist_item("vidsearch01", "AVC185 8/27/2025", "2025-08-27T20:00:00Z"),
        _playlist_item("vidplaylst1", "AVC285 8/27/2025", "2025-08-27T21:00:00Z"),
        _playlist_item("vidtoo0old1", "AVC240 8/20/2025", "2025-08-20T18:00:00Z"),
    ]
}


class Recorder:
    """Serves canned responses per endpoint and records requests."""

    def __init__(self, responses: dict[str, list[httpx.Response]]) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        queue = self.responses[endpoint]
        return queue.pop(0) if len(queue) > 1 else queue[0]


def _catalog(recorder: Recorder, sleeps: list[float]) -> YouTubeCatalog:
    return YouTubeCatalog(
        api_key="test-key",
        channel_id="UC123",
        base_url="https://yt.test/v3",
        transport=httpx.MockTransport(recorder),
        sleep=sleeps.append,
    )


def test_fetch_merges_search_and_playlist() -> None:
    """Test that playlist uploads are appended after search results without duplicates."""
    recorder = Recorder({
        "search": [httpx.Response(200, json=SEARCH_BODY)],
        "channels": [httpx.Response(200, json=CHANNEL_BODY)],
        "playlistItems": [httpx.Response(200, json=PLAYLIST_BODY)],
    })
    sleeps: list[float] = []

    videos = _catalog(recorder, sleeps).fetch_recent_videos(now=NOW)

    assert [v.external_id for v in videos] == ["vidsearch01", "vidsearch02", "vidplaylst1"]
    assert videos[2].title == "AVC285 8/27/2025"
    assert videos[0].published_at == datetime(2025, 8, 27, 20, 0, tzinfo=timezone.utc)
    assert sleeps == []


def test_search_request_parameters() -> None:
    """Test the search query sent to the API."""
    recorder = Recorder({
        "search": [httpx.Response(200, json={"items": []})],
        "channels": [httpx.Response(200, json={"items": []})],
    })

    _catalog(recorder, []).fetch_recent_videos(now=NOW, window=timedelta(days=2))

    params = recorder.requests[0].url.params
    assert params["key"] == "test-key"
    assert params["channelId"] == "UC123"
    assert params["type"] == "video"
    assert params["order"] == "date"
    assert params["maxResults"] == "50"
    assert params["publishedAfter"] == "2025-08-26T12:00:00Z"


def test_retries_with_exponential_backoff() -> None:
    """Test that transient failures are retried after 2s and 4s waits."""
    recorder = Recorder({
        "search": [
            httpx.Response(500, text="boom"),
            httpx.Response(200, json={"error": {"code": 403, "message": "quotaExceeded"}}),
            httpx.Response(200, json=SEARCH_BODY),
        ],
        "channels": [httpx.Response(200, json={"items": []})],
    })
    sleeps: list[float] = []

    videos = _catalog(recorder, sleeps).fetch_recent_videos(now=NOW)

    assert len(videos) == 2
    assert sleeps == [2, 4]


def test_search_failure_after_retries_is_fatal() -> None:
    """Test that exhausting retries on search raises CatalogError."""
    recorder = Recorder({"search": [httpx.Response(503, text="unavailable")]})
    sleeps: list[float] = []

    with pytest.raises(CatalogError) as exc_info:
        _catalog(recorder, sleeps).fetch_recent_videos(now=NOW)

    assert "YouTube Search API failed" in str(exc_info.value)
    # The API key must not leak into the error
    assert "test-key" not in str(exc_info.value)
    assert sleeps == [2, 4]
    assert len(recorder.requests) == 3


def test_playlist_failure_falls_back_to_search() -> None:
    """Test that the uploads playlist is best effort."""
    recorder = Recorder({
        "search": [httpx.Response(200, json=SEARCH_BODY)],
        "channels": [httpx.Response(500, text="down")],
    })

    videos = _catalog(recorder, []).fetch_recent_videos(now=NOW)

    assert [v.external_id for v in videos] == ["vidsearch01", "vidsearch02"]


def test_invalid_json_counts_as_failure() -> None:
    """Test that a non-JSON body is retried and then reported."""
    recorder = Recorder({"search": [httpx.Response(200, text="<html>oops</html>")]})

    with pytest.raises(CatalogError):
        _catalog(recorder, []).fetch_recent_videos(now=NOW)


def test_merge_videos_keeps_first_occurrence() -> None:
    """Test merge order and deduplication by id."""
    a = CandidateVideo("a", "first", NOW)
    b = CandidateVideo("b", "second", NOW)
    a_again = CandidateVideo("a", "first again", NOW)

    assert merge_videos([a], [a_again, b]) == [a, b]
