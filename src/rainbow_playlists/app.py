from __future__ import annotations

import argparse
import asyncio
import logging
import os

from rainbow_playlists import playlists as playlist_helpers
from rainbow_playlists.config import RainbowSettings, load_local_env_file
from rainbow_playlists.resolver import ColorCache, HttpImageSource
from rainbow_playlists.sorter import sort_tracks_by_hue


def parse_args(argv: list[str] | None = None, settings: RainbowSettings | None = None) -> argparse.Namespace:
    settings = settings or RainbowSettings.from_env()
    parser = argparse.ArgumentParser(description="Sort a Spotify playlist into rainbow order by cover art")
    target_group = parser.add_mutually_exclusive_group(required=True)
    target_group.add_argument("--playlist-id", help="Playlist to sort")
    target_group.add_argument("--list", action="store_true", help="List playlists you can reorder")
    parser.add_argument("--apply", action="store_true", help="Write the new order back to Spotify")
    parser.add_argument(
        "--purge-duplicates",
        action="store_true",
        help="Drop repeated tracks, keeping their first position",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.batch_size,
        help="Cover images fetched concurrently (defaults to RAINBOW_BATCH_SIZE env or 8)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.batch_delay,
        help="Seconds to pause between batches (defaults to RAINBOW_BATCH_DELAY env or 0.1)",
    )
    args = parser.parse_args(argv)
    if args.batch_size < 1:
        parser.error("--batch-size must be at least 1")
    if args.delay < 0:
        parser.error("--delay must not be negative")
    return args


def format_track(index: int, item: dict) -> str:
    track = item.get("track") or {}
    artist_names = ", ".join(a.get("name", "") for a in track.get("artists") or [])
    return f"{index:>4}. {track.get('name', '<unknown>')} - {artist_names}"


def print_playlists(service: object) -> None:
    owned, collaborative = service.categorize_editable_playlists()
    for title, group in (("Owned", owned), ("Collaborative", collaborative)):
        print(f"{title} playlists:")
        if not group:
            print("  (none)")
        for playlist in group:
            total = (playlist.get("tracks") or {}).get("total", 0)
            print(f"  {playlist['id']}  {playlist.get('name', '')} ({total} tracks)")


async def build_rainbow_order(items: list[dict], settings: RainbowSettings, args: argparse.Namespace) -> list[dict]:
    async with HttpImageSource(timeout=settings.image_timeout, max_dimension=settings.max_image_dimension) as source:
        ordered = await sort_tracks_by_hue(
            items,
            image_source=source,
            cache=ColorCache(),
            batch_size=args.batch_size,
            delay=args.delay,
        )
    if args.purge_duplicates:
        ordered = playlist_helpers.purge_duplicates(ordered)
    return ordered


def run_playlist(args: argparse.Namespace, service: object, settings: RainbowSettings) -> int:
    items = service.get_playlist_tracks(args.playlist_id)
    if not items:
        print("No tracks found in this playlist.")
        return 1

    print(f"Processing {len(items)} tracks...")
    ordered = asyncio.run(build_rainbow_order(items, settings, args))
    for index, item in enumerate(ordered, start=1):
        print(format_track(index, item))

    if playlist_helpers.has_duplicates(ordered):
        print("Playlist contains duplicate tracks (use --purge-duplicates to drop them).")

    if not args.apply:
        print("Preview only. Re-run with --apply to save this order.")
        return 0

    snapshot_id = service.reorder_playlist_tracks(args.playlist_id, playlist_helpers.track_uris(ordered))
    if snapshot_id is None:
        print("Could not apply the rainbow order.")
        return 1
    print(f"Rainbow order applied (snapshot {snapshot_id}).")
    return 0


def main() -> int:
    load_local_env_file()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = RainbowSettings.from_env()
    args = parse_args(settings=settings)
    from rainbow_playlists.spotify_service import SpotifyService

    service = SpotifyService()
    if args.list:
        print_playlists(service)
        return 0
    return run_playlist(args, service, settings)


if __name__ == "__main__":
    raise SystemExit(main())
