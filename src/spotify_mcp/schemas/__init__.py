from .projections import (
    TrackProjection,
    AlbumProjection,
    ArtistProjection,
    PlaylistProjection,
    ShowProjection,
    EpisodeProjection,
    PlaylistTrackProjection,
    SearchResults,
)
from .tool_arguments import (
    ItemType,
    SearchType,
    SearchArguments,
    LibraryItemArguments,
    FetchTracksArguments,
)

__all__ = [
    "TrackProjection",
    "AlbumProjection",
    "ArtistProjection",
    "PlaylistProjection",
    "ShowProjection",
    "EpisodeProjection",
    "PlaylistTrackProjection",
    "SearchResults",
    "ItemType",
    "SearchType",
    "SearchArguments",
    "LibraryItemArguments",
    "FetchTracksArguments",
]
