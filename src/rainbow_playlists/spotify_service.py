from __future__ import annotations

import os
import warnings

import spotipy
from requests.exceptions import HTTPError
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyPKCE

from rainbow_playlists import playlists as playlist_helpers

SCOPES = (
    "user-read-private",
    "user-read-email",
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-public",
    "playlist-modify-private",
)


def _status_of(exc: HTTPError | SpotifyException) -> int | None:
    if isinstance(exc, HTTPError):
        return exc.response.status_code if exc.response is not None else None
    return exc.http_status


class SpotifyService:
    # Page sizes are the Web API maxima for each endpoint.
    PLAYLIST_PAGE_LIMIT = 50
    TRACK_PAGE_LIMIT = 100
    # A single replace/add call accepts at most 100 URIs.
    WRITE_CHUNK_SIZE = 100

    def __init__(self, client: spotipy.Spotify | None = None) -> None:
        if client is None:
            self._validate_credentials()
            auth_manager = SpotifyPKCE(scope=" ".join(SCOPES), cache_path=os.getenv("SPOTIPY_CACHE_PATH"))
            client = spotipy.Spotify(auth_manager=auth_manager)
        self.client = client
        self._user_id: str | None = None

    @staticmethod
    def _validate_credentials() -> None:
        missing = [name for name in ("SPOTIPY_CLIENT_ID", "SPOTIPY_REDIRECT_URI") if not os.getenv(name)]
        if missing:
            missing_list = ", ".join(missing)
            raise ValueError(
                f"Missing Spotify credentials: {missing_list}. "
                "Set them in environment variables or local .env file."
            )

    def _collect_pages(self, page: dict | None, include_all_pages: bool) -> list[dict]:
        items: list[dict] = []
        while page:
            items.extend(page.get("items") or [])
            if not include_all_pages or not page.get("next"):
                break
            page = self.client.next(page)
        return items

    def get_user_profile(self) -> dict:
        profile = self.client.current_user()
        self._user_id = profile.get("id")
        return profile

    def current_user_id(self) -> str | None:
        if self._user_id is None:
            self.get_user_profile()
        return self._user_id

    def get_user_playlists(self, include_all_pages: bool = True) -> list[dict]:
        first = self.client.current_user_playlists(limit=self.PLAYLIST_PAGE_LIMIT)
        return self._collect_pages(first, include_all_pages)

    def get_playlists_with_edit_info(self) -> list[dict]:
        return playlist_helpers.mark_editable(self.get_user_playlists(), self.current_user_id())

    def get_editable_playlists(self) -> list[dict]:
        return [playlist for playlist in self.get_playlists_with_edit_info() if playlist["is_editable"]]

    def get_sorted_editable_playlists(self) -> list[dict]:
        return playlist_helpers.sort_by_name(self.get_editable_playlists())

    def categorize_editable_playlists(self) -> tuple[list[dict], list[dict]]:
        return playlist_helpers.categorize_playlists(self.get_editable_playlists(), self.current_user_id())

    def get_playlist_folder_structure(self) -> dict:
        return playlist_helpers.build_folder_structure(self.get_user_playlists())

    def get_playlist_tracks(self, playlist_id: str, include_all_pages: bool = True) -> list[dict]:
        try:
            first = self.client.playlist_items(
                playlist_id,
                limit=self.TRACK_PAGE_LIMIT,
                additional_types=("track",),
            )
        except (HTTPError, SpotifyException) as exc:
            if _status_of(exc) == 404:
                warnings.warn(
                    f"Spotify playlist {playlist_id} was not found. Returning no tracks.",
                    RuntimeWarning,
                    stacklevel=2,
                )
                return []
            raise
        return self._collect_pages(first, include_all_pages)

    def reorder_playlist_tracks(self, playlist_id: str, uris: list[str]) -> str | None:
        """Replace the playlist contents with ``uris`` in the given order.

        The first chunk replaces the playlist and the rest are appended, so
        playlists longer than one request are written in full.  Returns the
        final snapshot id, or ``None`` when Spotify refuses the write.
        """

        chunks = [uris[start:start + self.WRITE_CHUNK_SIZE] for start in range(0, len(uris), self.WRITE_CHUNK_SIZE)]
        try:
            result = self.client.playlist_replace_items(playlist_id, chunks[0] if chunks else [])
            for chunk in chunks[1:]:
                result = self.client.playlist_add_items(playlist_id, chunk)
        except (HTTPError, SpotifyException) as exc:
            if _status_of(exc) == 403:
                warnings.warn(
                    f"Spotify refused to modify playlist {playlist_id} (403 Forbidden). "
                    "The playlist is probably not owned by or shared with this user.",
                    RuntimeWarning,
                    stacklevel=2,
                )
                return None
            raise
        return (result or {}).get("snapshot_id")
