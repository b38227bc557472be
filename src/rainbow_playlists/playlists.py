"""Helpers over Spotify playlist and playlist-item JSON."""
from __future__ import annotations

import re
from typing import Any, Iterable

# "Folder/Name", "Folder: Name", "Folder | Name", "Folder - Name"
_FOLDER_PATTERN = re.compile(r"^(.+?)[/:|\-]\s*(.+)$")


def _name_key(item: dict) -> str:
    return (item.get("name") or "").casefold()


def sort_by_name(items: Iterable[dict]) -> list[dict]:
    return sorted(items, key=_name_key)


def mark_editable(playlists: Iterable[dict], user_id: str) -> list[dict]:
    """Copy each playlist with an ``is_editable`` flag (owned or collaborative)."""

    marked: list[dict] = []
    for playlist in playlists:
        owned = (playlist.get("owner") or {}).get("id") == user_id
        marked.append({**playlist, "is_editable": owned or bool(playlist.get("collaborative"))})
    return marked


def categorize_playlists(playlists: Iterable[dict], user_id: str) -> tuple[list[dict], list[dict]]:
    owned: list[dict] = []
    collaborative: list[dict] = []
    for playlist in playlists:
        if (playlist.get("owner") or {}).get("id") == user_id:
            owned.append(playlist)
        elif playlist.get("collaborative"):
            collaborative.append(playlist)
    return sort_by_name(owned), sort_by_name(collaborative)


def _folder_id(name: str) -> str:
    return "folder-" + re.sub(r"\s+", "-", name.lower())


def build_folder_structure(playlists: Iterable[dict]) -> dict:
    """Group playlists into folders inferred from their names.

    The Web API does not expose the client's folders, so a name such as
    ``"Moods / Chill"`` is read as playlist ``Chill`` inside folder
    ``Moods``.  Folders are listed before loose playlists; both are sorted
    by name, as are each folder's children.
    """

    all_playlists: list[dict] = []
    folders: dict[str, dict] = {}
    root_items: list[dict] = []

    for playlist in playlists:
        item = {
            "type": "playlist",
            "id": playlist.get("id"),
            "name": playlist.get("name") or "",
            "playlist": playlist,
        }
        all_playlists.append(item)

        match = _FOLDER_PATTERN.match(item["name"])
        if not match:
            root_items.append(item)
            continue

        folder_name = match.group(1).strip()
        item["name"] = match.group(2).strip()
        folder = folders.get(folder_name)
        if folder is None:
            folder = {"type": "folder", "id": _folder_id(folder_name), "name": folder_name, "children": []}
            folders[folder_name] = folder
            root_items.append(folder)
        folder["children"].append(item)

    for folder in folders.values():
        folder["children"] = sort_by_name(folder["children"])
    root_items.sort(key=lambda item: (item["type"] != "folder", _name_key(item)))

    return {"root_items": root_items, "all_playlists": all_playlists}


def _track_of(item: dict) -> dict:
    return item.get("track") or {}


def track_uris(items: Iterable[dict]) -> list[str]:
    return [_track_of(item)["uri"] for item in items if _track_of(item).get("uri")]


def has_duplicates(items: Iterable[dict]) -> bool:
    ids = [_track_of(item).get("id") for item in items]
    return len(ids) > len(set(ids))


def purge_duplicates(items: Iterable[dict]) -> list[dict]:
    """Drop repeated tracks (by id), keeping the first occurrence."""

    seen: set[Any] = set()
    unique: list[dict] = []
    for item in items:
        track_id = _track_of(item).get("id")
        if track_id in seen:
            continue
        seen.add(track_id)
        unique.append(item)
    return unique


def move_track(items: list[dict], old_index: int, new_index: int) -> list[dict]:
    moved = list(items)
    if not (0 <= old_index < len(moved) and 0 <= new_index < len(moved)):
        return moved
    moved.insert(new_index, moved.pop(old_index))
    return moved
