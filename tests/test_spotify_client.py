import json

import pytest
import requests
import responses

from spotify_mcp.errors import NotAuthenticated, SpotifyUnavailable, UpstreamError

from conftest import API, TOKEN_URL, token_response


class TestRequest:
    @responses.activate
    def test_sends_bearer_token_and_decodes_json(self, client, connected):
        responses.add(responses.GET, f"{API}/me", json={"id": "me"}, status=200)

        assert client.request(connected, "/me") == {"id": "me"}
        assert responses.calls[0].request.headers["Authorization"] == "Bearer access-1"

    @responses.activate
    def test_query_params_and_json_body(self, client, connected):
        responses.add(responses.PUT, f"{API}/me/tracks", status=200, body="")

        client.request(connected, "/me/tracks", "PUT", body={"ids": ["t1"]}, params={"market": "US"})

        request = responses.calls[0].request
        assert request.method == "PUT"
        assert "market=US" in request.url
        assert json.loads(request.body) == {"ids": ["t1"]}

    @responses.activate
    def test_no_content_returns_none(self, client, connected):
        responses.add(responses.DELETE, f"{API}/me/albums", status=204)

        assert client.request(connected, "/me/albums", "DELETE", body={"ids": ["a1"]}) is None

    @responses.activate
    def test_error_status_raises_upstream_error(self, client, connected):
        responses.add(
            responses.GET,
            f"{API}/search",
            json={"error": {"status": 429, "message": "API rate limit exceeded"}},
            status=429,
        )

        with pytest.raises(UpstreamError) as excinfo:
            client.request(connected, "/search", params={"q": "x"})

        assert excinfo.value.status == 429
        assert str(excinfo.value).startswith("Spotify API error: 429")
        assert "rate limit" in str(excinfo.value)

    @responses.activate
    def test_refreshes_expired_token_before_calling(self, client, connected, clock):
        responses.add(responses.POST, TOKEN_URL, json=token_response(access_token="access-2"), status=200)
        responses.add(responses.GET, f"{API}/me", json={"id": "me"}, status=200)
        clock.advance(7200)

        client.request(connected, "/me")

        assert len(responses.calls) == 2
        assert responses.calls[1].request.headers["Authorization"] == "Bearer access-2"

    @responses.activate
    def test_connection_failure_raises_unavailable(self, client, connected):
        responses.add(responses.GET, f"{API}/me", body=requests.exceptions.ReadTimeout("read timed out"))

        with pytest.raises(SpotifyUnavailable, match="read timed out"):
            client.request(connected, "/me")

    def test_unknown_session(self, client):
        with pytest.raises(NotAuthenticated):
            client.request("nobody", "/me")
