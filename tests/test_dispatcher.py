import json
from urllib.parse import parse_qs, urlparse

import requests
import responses

from spotify_mcp.tools import AUDIOBOOK_REFUSAL

from conftest import API, TOKEN_URL


def text_of(result) -> str:
    return result.content[0].text


def query_of(call) -> dict:
    return {k: v[0] for k, v in parse_qs(urlparse(call.request.url).query).items()}


def track(track_id, name="Song", explicit=False):
    return {
        "id": track_id,
        "name": name,
        "artists": [{"name": "Artist A"}, {"name": "Artist B"}],
        "album": {"name": "Album", "images": [{"url": f"https://img/{track_id}"}]},
        "duration_ms": 200000,
        "explicit": explicit,
        "uri": f"spotify:track:{track_id}",
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
    }


class TestAuthenticationGate:
    @responses.activate
    def test_unconnected_session_gets_authorization_link(self, dispatcher, pending):
        result = dispatcher.call_tool("new-session", "search", {"query": "jazz"})

        assert not result.isError
        assert text_of(result).startswith(
            "Please authenticate with Spotify to use this feature. Visit: https://accounts.spotify.com/authorize?"
        )
        assert len(responses.calls) == 0
        assert [entry.session_id for _, entry in pending.items()] == ["new-session"]

    @responses.activate
    def test_gate_runs_before_argument_validation(self, dispatcher):
        result = dispatcher.call_tool("new-session", "fetch_tracks", {})

        assert "Please authenticate with Spotify" in text_of(result)

    @responses.activate
    def test_failed_refresh_is_reported(self, dispatcher, connected, clock):
        responses.add(responses.POST, TOKEN_URL, json={"error": "invalid_grant"}, status=400)
        clock.advance(3600)

        result = dispatcher.call_tool(connected, "search", {"query": "jazz"})

        assert result.isError
        assert text_of(result).startswith("Failed to refresh token")


class TestSearch:
    @responses.activate
    def test_audiobook_query_makes_no_spotify_call(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "search", {"query": "Harry Potter AUDIOBOOK"})

        assert not result.isError
        assert text_of(result) == AUDIOBOOK_REFUSAL
        assert len(responses.calls) == 0

    @responses.activate
    def test_defaults_and_projection(self, dispatcher, connected):
        responses.add(
            responses.GET,
            f"{API}/search",
            json={
                "tracks": {"items": [track("t1", "Take Five")]},
                "artists": {"items": [{
                    "id": "ar1",
                    "name": "Dave Brubeck",
                    "genres": ["jazz"],
                    "followers": {"total": 1234},
                    "images": [],
                    "uri": "spotify:artist:ar1",
                    "external_urls": {},
                }]},
                "playlists": {"items": [None, {
                    "id": "p1",
                    "name": "Jazz Classics",
                    "owner": {"display_name": "Spotify"},
                    "tracks": {"total": 50},
                    "images": [{"url": "https://img/p1"}],
                    "uri": "spotify:playlist:p1",
                    "external_urls": {"spotify": "https://open.spotify.com/playlist/p1"},
                }]},
            },
            status=200,
        )

        result = dispatcher.call_tool(connected, "search", {"query": "take five"})

        assert query_of(responses.calls[0]) == {
            "q": "take five",
            "type": "track,album,artist,playlist",
            "limit": "20",
            "market": "US",
        }
        assert not result.isError
        assert text_of(result) == 'Found 3 results for "take five".'
        assert result.meta["openai/outputTemplate"] == "ui://widget/spotify-search.html"

        content = result.structuredContent
        assert content["query"] == "take five"
        assert content["results"]["tracks"][0] == {
            "id": "t1",
            "name": "Take Five",
            "artists": "Artist A, Artist B",
            "album": "Album",
            "duration_ms": 200000,
            "explicit": False,
            "uri": "spotify:track:t1",
            "external_url": "https://open.spotify.com/track/t1",
            "image": "https://img/t1",
        }
        assert content["results"]["artists"][0]["followers"] == 1234
        assert [p["id"] for p in content["results"]["playlists"]] == ["p1"]
        assert "albums" not in content["results"]

    @responses.activate
    def test_explicit_types_and_limit_cap(self, dispatcher, connected):
        responses.add(responses.GET, f"{API}/search", json={"shows": {"items": []}}, status=200)

        result = dispatcher.call_tool(
            connected, "search",
            {"query": "news", "types": ["show", "episode"], "limit": 500, "market": "GB"},
        )

        params = query_of(responses.calls[0])
        assert params["type"] == "show,episode"
        assert params["limit"] == "50"
        assert params["market"] == "GB"
        assert text_of(result) == 'Found 0 results for "news".'

    @responses.activate
    def test_non_positive_limit_falls_back_to_default(self, dispatcher, connected):
        responses.add(responses.GET, f"{API}/search", json={}, status=200)

        dispatcher.call_tool(connected, "search", {"query": "x", "limit": 0})

        assert query_of(responses.calls[0])["limit"] == "20"

    @responses.activate
    def test_upstream_error_becomes_error_result(self, dispatcher, connected):
        responses.add(responses.GET, f"{API}/search", body="boom", status=500)

        result = dispatcher.call_tool(connected, "search", {"query": "x"})

        assert result.isError
        assert text_of(result) == "Spotify API error: 500 boom"

    @responses.activate
    def test_network_failure_becomes_error_result(self, dispatcher, connected):
        responses.add(responses.GET, f"{API}/search", body=requests.exceptions.ConnectTimeout("timed out"))

        result = dispatcher.call_tool(connected, "search", {"query": "jazz"})

        assert result.isError
        assert text_of(result) == "Spotify API request failed: timed out"


class TestLibrary:
    @responses.activate
    def test_add_artist_follows_with_ids_body(self, dispatcher, connected):
        responses.add(responses.PUT, f"{API}/me/following", status=204)

        result = dispatcher.call_tool(connected, "add_to_library", {"itemType": "artist", "itemId": "ar1"})

        request = responses.calls[0].request
        assert request.method == "PUT"
        assert query_of(responses.calls[0]) == {"type": "artist"}
        assert json.loads(request.body) == {"ids": ["ar1"]}
        assert text_of(result) == "Successfully added artist to your library."

    @responses.activate
    def test_remove_artist_unfollows_with_ids_body(self, dispatcher, connected):
        responses.add(responses.DELETE, f"{API}/me/following", status=204)

        result = dispatcher.call_tool(connected, "remove_from_library", {"itemType": "artist", "itemId": "ar1"})

        request = responses.calls[0].request
        assert request.method == "DELETE"
        assert "type=artist" in request.url
        assert json.loads(request.body) == {"ids": ["ar1"]}
        assert text_of(result) == "Successfully removed artist from your library."

    @responses.activate
    def test_track_album_show_episode_endpoints(self, dispatcher, connected):
        for path in ("/me/tracks", "/me/albums", "/me/shows", "/me/episodes"):
            responses.add(responses.PUT, f"{API}{path}", status=200, body="")

        for item_type in ("track", "album", "show", "episode"):
            result = dispatcher.call_tool(connected, "add_to_library", {"itemType": item_type, "itemId": "x1"})
            assert not result.isError

        paths = [urlparse(call.request.url).path for call in responses.calls]
        assert paths == ["/v1/me/tracks", "/v1/me/albums", "/v1/me/shows", "/v1/me/episodes"]

    @responses.activate
    def test_playlist_is_followed(self, dispatcher, connected):
        responses.add(responses.PUT, f"{API}/playlists/p1/followers", status=200, body="")

        result = dispatcher.call_tool(connected, "add_to_library", {"itemType": "playlist", "itemId": "p1"})

        assert not result.isError
        assert responses.calls[0].request.body is None

    @responses.activate
    def test_unsupported_item_type_is_rejected(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "add_to_library", {"itemType": "audiobook", "itemId": "b1"})

        assert result.isError
        assert text_of(result).startswith("Invalid arguments")
        assert len(responses.calls) == 0


class TestFetchTracks:
    @responses.activate
    def test_tracks_carry_saved_status(self, dispatcher, connected):
        responses.add(
            responses.GET,
            f"{API}/playlists/p1/tracks",
            json={"items": [{"track": track("t1")}, {"track": None}, {"track": track("t2", explicit=True)}], "total": 3},
            status=200,
        )
        responses.add(responses.GET, f"{API}/me/tracks/contains", json=[True, False], status=200)

        result = dispatcher.call_tool(connected, "fetch_tracks", {"playlistId": "p1"})

        assert query_of(responses.calls[0]) == {"offset": "0", "limit": "100"}
        assert query_of(responses.calls[1]) == {"ids": "t1,t2"}

        tracks = result.structuredContent["tracks"]
        assert len(tracks) == 3
        assert [t["is_saved"] for t in tracks] == [True, False, False]
        assert tracks[1]["id"] is None
        assert tracks[2]["explicit"] is True
        assert result.structuredContent["total"] == 3
        assert text_of(result) == "Loaded 3 tracks from playlist."

    @responses.activate
    def test_empty_page_skips_saved_check(self, dispatcher, connected):
        responses.add(responses.GET, f"{API}/playlists/p1/tracks", json={"items": [], "total": 0}, status=200)

        result = dispatcher.call_tool(connected, "fetch_tracks", {"playlistId": "p1", "offset": 200, "limit": 500})

        assert len(responses.calls) == 1
        assert query_of(responses.calls[0]) == {"offset": "200", "limit": "100"}
        assert result.structuredContent["tracks"] == []

    @responses.activate
    def test_saved_status_checked_in_batches_of_fifty(self, dispatcher, connected):
        items = [{"track": track(f"t{i}")} for i in range(75)]
        responses.add(responses.GET, f"{API}/playlists/p1/tracks", json={"items": items, "total": 75}, status=200)
        responses.add(responses.GET, f"{API}/me/tracks/contains", json=[True] * 50, status=200)
        responses.add(responses.GET, f"{API}/me/tracks/contains", json=[False] * 25, status=200)

        result = dispatcher.call_tool(connected, "fetch_tracks", {"playlistId": "p1"})

        assert len(responses.calls) == 3
        assert len(query_of(responses.calls[1])["ids"].split(",")) == 50
        assert len(query_of(responses.calls[2])["ids"].split(",")) == 25
        saved = [t["is_saved"] for t in result.structuredContent["tracks"]]
        assert saved == [True] * 50 + [False] * 25

    @responses.activate
    def test_negative_offset_is_rejected(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "fetch_tracks", {"playlistId": "p1", "offset": -1})

        assert result.isError
        assert len(responses.calls) == 0


class TestDispatch:
    def test_list_tools(self, dispatcher):
        names = [tool.name for tool in dispatcher.list_tools()]
        assert names == ["add_to_library", "remove_from_library", "fetch_tracks", "search"]

    def test_unknown_tool(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "play_song", {})

        assert result.isError
        assert text_of(result) == "Unknown tool: play_song"

    def test_extra_arguments_are_rejected(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "search", {"query": "x", "shuffle": True})

        assert result.isError
        assert "shuffle" in text_of(result)

    def test_missing_required_argument(self, dispatcher, connected):
        result = dispatcher.call_tool(connected, "search", {})

        assert result.isError
        assert "query" in text_of(result)
