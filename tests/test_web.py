"""
Tests for the HTTP surface.

Run with: pytest tests/test_web.py -v
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import CLIP_SERVER_URL, DOWNLOAD_URL_SCHEME
from app.core.http_client import get_http_client, new_http_client
from app.main import create_app

TWEET = "https://twitter.com/u/status/1"
LOCATOR = "clips.example/download/clipped_1.mp4"
VIDEO = b"\x00\x00\x00\x18ftypmp42" + b"\x01" * 4096


class Upstream:
    """Fake clipping server and file host behind one mock transport."""

    def __init__(self):
        self.requests = []
        self.clip_reply = httpx.Response(200, json={"downloadUrl": LOCATOR})
        self.file_reply = httpx.Response(200, content=VIDEO, headers={"content-type": "video/mp4"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == f"{CLIP_SERVER_URL}/clip":
            return self.clip_reply
        return self.file_reply


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def client(upstream):
    app = create_app(debug=False)

    async def _http_client():
        async with new_http_client(transport=httpx.MockTransport(upstream)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = _http_client
    with TestClient(app) as test_client:
        yield test_client


class TestPage:
    def test_index_served(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'id="tweetUrl"' in response.text
        assert "/static/clip.js" in response.text

    def test_script_served(self, client):
        response = client.get("/static/clip.js")
        assert response.status_code == 200
        assert "revokeObjectURL" in response.text

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_echoed(self, client):
        response = client.get("/ready", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestDownloadProxy:
    def test_success_is_byte_identical(self, client, upstream):
        response = client.post("/api/download", json={"downloadUrl": "http://clips.example/a.mp4"})

        assert response.status_code == 200
        assert response.content == VIDEO
        assert response.headers["content-length"] == str(len(VIDEO))
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["content-disposition"] == 'attachment; filename="clipx-video.mp4"'
        assert response.headers["cache-control"] == "no-cache"
        assert [str(r.url) for r in upstream.requests] == ["http://clips.example/a.mp4"]

    def test_upstream_failure(self, client, upstream):
        upstream.file_reply = httpx.Response(404, content=b"missing")

        response = client.post("/api/download", json={"downloadUrl": "http://clips.example/a.mp4"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch video"}
        assert b"missing" not in response.content

    @pytest.mark.parametrize("body", [b"", b"{}", b'{"downloadUrl": ""}', b"not json", b"[1, 2]"])
    def test_missing_url_is_rejected_without_fetch(self, client, upstream, body):
        response = client.post("/api/download", content=body, headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Download URL is required"}
        assert upstream.requests == []

    def test_redirected_locator(self, client):
        def moved(request):
            if request.url.path == "/old.mp4":
                return httpx.Response(301, headers={"location": "http://clips.example/new.mp4"})
            return httpx.Response(200, content=b"video", headers={"content-type": "video/mp4"})

        client.app.dependency_overrides[get_http_client] = _client_for(moved)

        response = client.post("/api/download", json={"downloadUrl": "http://clips.example/old.mp4"})

        assert response.status_code == 200
        assert response.content == b"video"
        assert response.headers["content-length"] == "5"

    def test_transport_failure(self, client, upstream):
        def broken(request):
            raise httpx.ConnectError("refused", request=request)

        client.app.dependency_overrides[get_http_client] = _client_for(broken)

        response = client.post("/api/download", json={"downloadUrl": "http://clips.example/a.mp4"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


def _client_for(handler):
    async def _http_client():
        async with new_http_client(transport=httpx.MockTransport(handler)) as http_client:
            yield http_client
    return _http_client


class TestClipEndpoint:
    def test_valid_submission_returns_file(self, client, upstream):
        response = client.post("/api/clip", json={"tweetUrl": TWEET, "start": "00:01:30", "end": "00:02:00"})

        assert response.status_code == 200
        assert response.content == VIDEO
        assert response.headers["content-disposition"] == 'attachment; filename="clipx-video.mp4"'

        clip_call, file_call = upstream.requests
        assert json.loads(clip_call.content) == {"tweetUrl": TWEET, "start": "00:01:30", "end": "00:02:00"}
        assert str(file_call.url) == f"{DOWNLOAD_URL_SCHEME}{LOCATOR}"

    def test_foreign_url_blocked(self, client, upstream):
        response = client.post("/api/clip", json={"tweetUrl": "https://example.com/video"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Please enter a valid Twitter/X URL"
        assert body["state"]["tweetUrl"] == "https://example.com/video"
        assert body["state"]["phase"] == "idle"
        assert upstream.requests == []

    def test_clip_server_error_keeps_fields(self, client, upstream):
        upstream.clip_reply = httpx.Response(500, text="Error downloading the video")

        response = client.post("/api/clip", json={"tweetUrl": TWEET, "start": "00:00:05", "end": ""})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "Something went wrong."
        assert body["state"]["tweetUrl"] == TWEET
        assert body["state"]["start"] == "00:00:05"
        assert body["state"]["phase"] == "error"
        assert body["state"]["loading"] is False

    def test_download_hop_failure(self, client, upstream):
        upstream.file_reply = httpx.Response(503)

        response = client.post("/api/clip", json={"tweetUrl": TWEET})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "Failed to fetch video"
        assert body["state"]["downloadUrl"] == f"{DOWNLOAD_URL_SCHEME}{LOCATOR}"
        assert body["state"]["tweetUrl"] == TWEET

    def test_wrong_field_type(self, client):
        response = client.post("/api/clip", json={"tweetUrl": ["x.com"]})
        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"

    def test_padded_time_rejected_without_call(self, client, upstream):
        response = client.post("/api/clip", json={"tweetUrl": TWEET, "start": " 00:01:30"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Start time must be in HH:MM:SS format (e.g., 00:01:30)"
        assert body["state"]["start"] == " 00:01:30"
        assert upstream.requests == []

    def test_fields_relayed_as_typed(self, client, upstream):
        padded_url = "  https://x.com/u/status/1 "

        response = client.post("/api/clip", json={"tweetUrl": padded_url, "start": "0:1:30", "end": ""})

        assert response.status_code == 200
        clip_call = upstream.requests[0]
        assert json.loads(clip_call.content) == {"tweetUrl": padded_url, "start": "0:1:30", "end": ""}

    def test_long_time_gets_form_message(self, client, upstream):
        response = client.post("/api/clip", json={"tweetUrl": TWEET, "end": "0" * 100})

        assert response.status_code == 400
        assert response.json()["error"] == "End time must be in HH:MM:SS format (e.g., 00:01:30)"
        assert upstream.requests == []
