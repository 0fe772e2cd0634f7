"""Widget descriptors and the search-results renderer.

The descriptor's ``html`` is the static template the host fetches once via
``resources/read``; it renders client-side from the props the host injects.
``render_search_results`` produces the same markup server-side from a props
dict and backs the preview route.
"""

import html
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .formats import count_results

ASSETS_DIR = Path(__file__).parent / "assets"

WIDGET_MIME_TYPE = "text/html+skybridge"

# Songs section cap; other sections are uncapped
TRACK_DISPLAY_LIMIT = 10

TRACK_PLACEHOLDER = "https://via.placeholder.com/40"
CARD_PLACEHOLDER = "https://via.placeholder.com/180"


def read_asset(name: str) -> str:
    path = ASSETS_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Widget asset {name!r} not found in {ASSETS_DIR}")
    return path.read_text(encoding="utf-8")


def build_template(component: str, title: str) -> str:
    """Assemble the static widget document from its stylesheet and client script."""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{html.escape(title)}</title>\n"
        f"  <style>\n{read_asset(component + '.css')}  </style>\n"
        "</head>\n"
        "<body>\n"
        '  <div id="root"></div>\n'
        f"  <script>\n{read_asset(component + '.js')}  </script>\n"
        "</body>\n"
        "</html>\n"
    )


@dataclass(frozen=True)
class WidgetDescriptor:
    id: str
    title: str
    template_uri: str
    invoking: str
    invoked: str
    html: str
    response_text: str


def widget_meta(widget: WidgetDescriptor) -> dict:
    return {
        "openai/outputTemplate": widget.template_uri,
        "openai/toolInvocation/invoking": widget.invoking,
        "openai/toolInvocation/invoked": widget.invoked,
        "openai/widgetAccessible": True,
        "openai/resultCanProduceWidget": True,
    }


SEARCH_WIDGET = WidgetDescriptor(
    id="search",
    title="Spotify Search",
    template_uri="ui://widget/spotify-search.html",
    invoking="Asking Spotify",
    invoked="Asked Spotify",
    html=build_template("spotify-search", "Spotify Search"),
    response_text="Found Spotify content",
)

WIDGETS_BY_ID: Dict[str, WidgetDescriptor] = {SEARCH_WIDGET.id: SEARCH_WIDGET}
WIDGETS_BY_URI: Dict[str, WidgetDescriptor] = {w.template_uri: w for w in WIDGETS_BY_ID.values()}


def format_duration(duration_ms: Optional[int]) -> str:
    duration_ms = duration_ms or 0
    return f"{duration_ms // 60000}:{(duration_ms % 60000) // 1000:02d}"


def _e(value) -> str:
    return html.escape("" if value is None else str(value))


def _section(title: str, body: str) -> str:
    return f'<div class="section"><div class="section-title">{title}</div>{body}</div>'


def _card(item: dict, meta: str, round_image: bool = False) -> str:
    image_class = "item-image round" if round_image else "item-image"
    return (
        '<div class="item-card">'
        f'<img src="{_e(item.get("image") or CARD_PLACEHOLDER)}" class="{image_class}" alt="{_e(item.get("name"))}">'
        f'<div class="item-name">{_e(item.get("name"))}</div>'
        f'<div class="item-meta">{meta}</div>'
        "</div>"
    )


def _track_row(track: dict) -> str:
    badge = '<span class="explicit-badge">E</span>' if track.get("explicit") else ""
    return (
        '<div class="track-item">'
        f'<img src="{_e(track.get("image") or TRACK_PLACEHOLDER)}" class="track-image" alt="{_e(track.get("name"))}">'
        '<div class="track-info">'
        f'<div class="track-name">{_e(track.get("name"))}{badge}</div>'
        f'<div class="track-artist">{_e(track.get("artists"))}</div>'
        "</div>"
        f'<div class="track-duration">{format_duration(track.get("duration_ms"))}</div>'
        "</div>"
    )


def render_search_results(props: Optional[dict]) -> str:
    """Render search results to a markup fragment.

    Args:
        props: ``{"query": str, "results": {facet: [projection, ...]}}`` as
            returned in the search tool's structured content

    Returns:
        HTML fragment: header, one section per non-empty facet and an empty
        state when nothing matched
    """
    props = props or {}
    results = props.get("results") or {}
    total = count_results(results)

    parts = [
        '<div class="search-header">'
        f'<div class="search-query">"{_e(props.get("query", ""))}"</div>'
        f'<div class="search-stats">{total} results found</div>'
        "</div>"
    ]

    tracks = results.get("tracks") or []
    if tracks:
        rows = "".join(_track_row(t) for t in tracks[:TRACK_DISPLAY_LIMIT])
        parts.append(_section("Songs", f'<div class="track-list">{rows}</div>'))

    artists = results.get("artists") or []
    if artists:
        cards = "".join(
            _card(a, f"{a.get('followers') or 0:,} followers", round_image=True) for a in artists
        )
        parts.append(_section("Artists", f'<div class="items-grid">{cards}</div>'))

    albums = results.get("albums") or []
    if albums:
        cards = "".join(
            _card(a, f"{_e(a.get('artists'))} &bull; {_e((a.get('release_date') or '').split('-')[0])}")
            for a in albums
        )
        parts.append(_section("Albums", f'<div class="items-grid">{cards}</div>'))

    playlists = results.get("playlists") or []
    if playlists:
        cards = "".join(_card(p, f"By {_e(p.get('owner'))}") for p in playlists)
        parts.append(_section("Playlists", f'<div class="items-grid">{cards}</div>'))

    if total == 0:
        parts.append(
            '<div class="empty-state">'
            '<div class="empty-icon">&#127925;</div>'
            '<div class="empty-title">No results found</div>'
            "<div>Try adjusting your search or check your spelling.</div>"
            "</div>"
        )

    return "".join(parts)


def render_widget_document(props: Optional[dict], widget: WidgetDescriptor = SEARCH_WIDGET) -> str:
    """Self-contained HTML page: widget stylesheet, pre-rendered results and the props they came from."""
    props_json = json.dumps(props or {}).replace("</", "<\\/")
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        f"  <title>{_e(widget.title)}</title>\n"
        f"  <style>\n{read_asset('spotify-search.css')}  </style>\n"
        "</head>\n"
        "<body>\n"
        f'  <div id="root">{render_search_results(props)}</div>\n'
        f"  <script>window.__WIDGET_PROPS__ = {props_json};</script>\n"
        "</body>\n"
        "</html>\n"
    )


# Sample props for the preview route
PREVIEW_PROPS = {
    "query": "jazz piano",
    "results": {
        "tracks": [
            {
                "id": "1",
                "name": "Take Five",
                "artists": "Dave Brubeck Quartet",
                "album": "Time Out",
                "duration_ms": 324000,
                "image": None,
                "explicit": False,
                "uri": "spotify:track:1",
                "external_url": "https://open.spotify.com/track/1",
            },
            {
                "id": "2",
                "name": "Autumn Leaves",
                "artists": "Bill Evans",
                "album": "Portrait in Jazz",
                "duration_ms": 287000,
                "image": None,
                "explicit": False,
                "uri": "spotify:track:2",
                "external_url": "https://open.spotify.com/track/2",
            },
            {
                "id": "3",
                "name": "So What",
                "artists": "Miles Davis",
                "album": "Kind of Blue",
                "duration_ms": 562000,
                "image": None,
                "explicit": False,
                "uri": "spotify:track:3",
                "external_url": "https://open.spotify.com/track/3",
            },
        ],
    },
}
