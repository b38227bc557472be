"""FastAPI web server for Rainbow Playlists."""
from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from rainbow_playlists import playlists as playlist_helpers
from rainbow_playlists.config import RainbowSettings, load_local_env_file
from rainbow_playlists.resolver import ColorCache, HttpImageSource, track_image_url
from rainbow_playlists.sorter import sort_tracks_by_hue
from rainbow_playlists.spotify_service import SpotifyService

app = FastAPI(title="Rainbow Playlists")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Cover colors are keyed by immutable image URLs, so one cache serves every request.
color_cache = ColorCache()


class PlaylistSummary(BaseModel):
    id: str
    name: str
    owner: str | None = None
    track_count: int = 0
    collaborative: bool = False
    snapshot_id: str | None = None


class PlaylistsResponse(BaseModel):
    owned: list[PlaylistSummary]
    collaborative: list[PlaylistSummary]


class TrackMove(BaseModel):
    """Move the track at `from_index` so it ends up at `to_index`."""
    from_index: int
    to_index: int


class RainbowRequest(BaseModel):
    """Preview the rainbow order, optionally writing it back to Spotify.

    `moves` are manual adjustments applied in order on top of the sorted
    (and de-duplicated) list before it is returned or written.
    """
    apply: bool = False
    purge_duplicates: bool = False
    moves: list[TrackMove] = []


class TrackSummary(BaseModel):
    id: str | None = None
    name: str = ""
    artists: list[str] = []
    uri: str | None = None
    image_url: str | None = None


class RainbowResponse(BaseModel):
    playlist_id: str
    tracks: list[TrackSummary]
    has_duplicates: bool
    applied: bool = False
    snapshot_id: str | None = None


def get_spotify_service() -> SpotifyService:
    """Build an authenticated Spotify service from environment credentials."""
    load_local_env_file()
    return SpotifyService()


def _playlist_summary(playlist: dict) -> PlaylistSummary:
    return PlaylistSummary(
        id=playlist["id"],
        name=playlist.get("name") or "",
        owner=(playlist.get("owner") or {}).get("display_name"),
        track_count=(playlist.get("tracks") or {}).get("total", 0),
        collaborative=bool(playlist.get("collaborative")),
        snapshot_id=playlist.get("snapshot_id"),
    )


def _track_summary(item: dict) -> TrackSummary:
    track = item.get("track") or {}
    return TrackSummary(
        id=track.get("id"),
        name=track.get("name") or "",
        artists=[artist.get("name", "") for artist in track.get("artists") or []],
        uri=track.get("uri"),
        image_url=track_image_url(item),
    )


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/playlists", response_model=PlaylistsResponse)
def list_editable_playlists():
    """List playlists the current user may reorder, split by ownership."""
    try:
        service = get_spotify_service()
        owned, collaborative = service.categorize_editable_playlists()
        return PlaylistsResponse(
            owned=[_playlist_summary(p) for p in owned],
            collaborative=[_playlist_summary(p) for p in collaborative],
        )
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")


@app.get("/api/playlists/structure")
def playlist_structure():
    """Playlists grouped into folders inferred from their names."""
    try:
        service = get_spotify_service()
        return service.get_playlist_folder_structure()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")


@app.post("/api/playlists/{playlist_id}/rainbow", response_model=RainbowResponse)
async def rainbow_playlist(playlist_id: str, request: RainbowRequest):
    """Sort a playlist by cover-art hue and optionally apply the new order."""
    try:
        service = get_spotify_service()
        items = await run_in_threadpool(service.get_playlist_tracks, playlist_id)
        if not items:
            raise HTTPException(status_code=404, detail=f"No tracks found in playlist '{playlist_id}'")

        settings = RainbowSettings.from_env()
        async with HttpImageSource(
            timeout=settings.image_timeout,
            max_dimension=settings.max_image_dimension,
        ) as source:
            ordered = await sort_tracks_by_hue(
                items,
                image_source=source,
                cache=color_cache,
                batch_size=settings.batch_size,
                delay=settings.batch_delay,
            )

        if request.purge_duplicates:
            ordered = playlist_helpers.purge_duplicates(ordered)
        for move in request.moves:
            ordered = playlist_helpers.move_track(ordered, move.from_index, move.to_index)

        snapshot_id = None
        if request.apply:
            uris = playlist_helpers.track_uris(ordered)
            snapshot_id = await run_in_threadpool(service.reorder_playlist_tracks, playlist_id, uris)
            if snapshot_id is None:
                raise HTTPException(status_code=403, detail=f"Playlist '{playlist_id}' cannot be modified")

        return RainbowResponse(
            playlist_id=playlist_id,
            tracks=[_track_summary(item) for item in ordered],
            has_duplicates=playlist_helpers.has_duplicates(ordered),
            applied=request.apply,
            snapshot_id=snapshot_id,
        )

    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")
