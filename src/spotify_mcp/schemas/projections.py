from typing import TypedDict, List, Optional


class TrackProjection(TypedDict):
    """A search-result track as the widget consumes it."""
    id: str
    name: str
    artists: str  # comma-joined artist names
    album: Optional[str]
    duration_ms: int
    explicit: bool
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class AlbumProjection(TypedDict):
    id: str
    name: str
    artists: str
    release_date: Optional[str]
    total_tracks: Optional[int]
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class ArtistProjection(TypedDict):
    id: str
    name: str
    genres: List[str]
    followers: int
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class PlaylistProjection(TypedDict):
    id: str
    name: str
    owner: Optional[str]  # owner display name
    tracks_total: Optional[int]
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class ShowProjection(TypedDict):
    """A podcast show."""
    id: str
    name: str
    publisher: Optional[str]
    total_episodes: Optional[int]
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class EpisodeProjection(TypedDict):
    """A podcast episode."""
    id: str
    name: str
    release_date: Optional[str]
    duration_ms: Optional[int]
    explicit: bool
    uri: str
    external_url: Optional[str]
    image: Optional[str]


class PlaylistTrackProjection(TypedDict):
    """A playlist entry joined with the user's saved status."""
    id: Optional[str]
    name: Optional[str]
    artists: str
    album: Optional[str]
    duration_ms: Optional[int]
    explicit: bool
    is_saved: bool
    uri: Optional[str]
    external_url: Optional[str]


class SearchResults(TypedDict, total=False):
    """Facets present in a search response; absent facets are omitted."""
    tracks: List[TrackProjection]
    albums: List[AlbumProjection]
    artists: List[ArtistProjection]
    playlists: List[PlaylistProjection]
    shows: List[ShowProjection]
    episodes: List[EpisodeProjection]
