"""Reshape Spotify Web API objects into the reduced projections the widget consumes."""

from typing import Optional

from .schemas.projections import (
    AlbumProjection,
    ArtistProjection,
    EpisodeProjection,
    PlaylistProjection,
    PlaylistTrackProjection,
    SearchResults,
    ShowProjection,
    TrackProjection,
)


def first_image_url(images) -> Optional[str]:
    if not images:
        return None
    return images[0].get("url")


def join_artist_names(artists) -> str:
    return ", ".join(a["name"] for a in artists or [])


def spotify_link(item: dict) -> Optional[str]:
    return (item.get("external_urls") or {}).get("spotify")


def format_track(track: dict) -> TrackProjection:
    album = track.get("album") or {}
    return TrackProjection(
        id=track["id"],
        name=track["name"],
        artists=join_artist_names(track.get("artists")),
        album=album.get("name"),
        duration_ms=track.get("duration_ms", 0),
        explicit=bool(track.get("explicit")),
        uri=track["uri"],
        external_url=spotify_link(track),
        image=first_image_url(album.get("images")),
    )


def format_album(album: dict) -> AlbumProjection:
    return AlbumProjection(
        id=album["id"],
        name=album["name"],
        artists=join_artist_names(album.get("artists")),
        release_date=album.get("release_date"),
        total_tracks=album.get("total_tracks"),
        uri=album["uri"],
        external_url=spotify_link(album),
        image=first_image_url(album.get("images")),
    )


def format_artist(artist: dict) -> ArtistProjection:
    return ArtistProjection(
        id=artist["id"],
        name=artist["name"],
        genres=artist.get("genres") or [],
        followers=(artist.get("followers") or {}).get("total") or 0,
        uri=artist["uri"],
        external_url=spotify_link(artist),
        image=first_image_url(artist.get("images")),
    )


def format_playlist(playlist: dict) -> PlaylistProjection:
    return PlaylistProjection(
        id=playlist["id"],
        name=playlist["name"],
        owner=(playlist.get("owner") or {}).get("display_name"),
        tracks_total=(playlist.get("tracks") or {}).get("total"),
        uri=playlist["uri"],
        external_url=spotify_link(playlist),
        image=first_image_url(playlist.get("images")),
    )


def format_show(show: dict) -> ShowProjection:
    return ShowProjection(
        id=show["id"],
        name=show["name"],
        publisher=show.get("publisher"),
        total_episodes=show.get("total_episodes"),
        uri=show["uri"],
        external_url=spotify_link(show),
        image=first_image_url(show.get("images")),
    )


def format_episode(episode: dict) -> EpisodeProjection:
    return EpisodeProjection(
        id=episode["id"],
        name=episode["name"],
        release_date=episode.get("release_date"),
        duration_ms=episode.get("duration_ms"),
        explicit=bool(episode.get("explicit")),
        uri=episode["uri"],
        external_url=spotify_link(episode),
        image=first_image_url(episode.get("images")),
    )


# Search response facets, keyed the same way in the projected results
SEARCH_FACETS = {
    "tracks": format_track,
    "albums": format_album,
    "artists": format_artist,
    "playlists": format_playlist,
    "shows": format_show,
    "episodes": format_episode,
}


def format_search_results(response: dict) -> SearchResults:
    """Project every facet present in a /search response.

    Spotify pads some facets (notably playlists) with null items; those are dropped.
    """
    results: SearchResults = {}
    for key, formatter in SEARCH_FACETS.items():
        facet = response.get(key)
        if facet is None:
            continue
        results[key] = [formatter(item) for item in facet.get("items") or [] if item]
    return results


def count_results(results: dict) -> int:
    return sum(len(items) for items in results.values() if isinstance(items, list))


def format_playlist_track(item: dict, is_saved: bool) -> PlaylistTrackProjection:
    """Project one playlist entry; removed or local tracks come back with empty fields."""
    track = item.get("track") or {}
    return PlaylistTrackProjection(
        id=track.get("id"),
        name=track.get("name"),
        artists=join_artist_names(track.get("artists")),
        album=(track.get("album") or {}).get("name"),
        duration_ms=track.get("duration_ms"),
        explicit=bool(track.get("explicit")),
        is_saved=bool(is_saved),
        uri=track.get("uri"),
        external_url=spotify_link(track),
    )
