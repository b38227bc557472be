from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol

import httpx

from rainbow_playlists.colors import classify_track, rgb_to_hsl
from rainbow_playlists.extraction import (
    DEFAULT_MAX_DIMENSION,
    ImageUnavailableError,
    decode_image,
    dominant_color,
)
from rainbow_playlists.models import ClassifiedTrack, HSLColor, PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TIMEOUT = 10.0


class ImageSource(Protocol):
    async def fetch(self, url: str) -> PixelBuffer:
        ...


def track_image_url(record: Any) -> str | None:
    """Return the cover-art URL of a Spotify track or playlist item, if any."""

    if isinstance(record, dict):
        # Playlist items wrap the track and carry None once it is removed.
        # Track objects themselves use "track" as a boolean type flag.
        wrapped = record.get("track", record)
        if wrapped is None:
            return None
        track = wrapped if isinstance(wrapped, dict) else record
        if "image_url" in track:
            return track["image_url"] or None
        images = (track.get("album") or {}).get("images") or []
        if not images:
            return None
        return images[0].get("url") or None
    return getattr(record, "image_url", None) or None


class HttpImageSource:
    """Fetch cover art over HTTP and decode it into a downscaled buffer."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_IMAGE_TIMEOUT,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self.max_dimension = max_dimension

    async def fetch(self, url: str) -> PixelBuffer:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ImageUnavailableError(f"Could not fetch {url}: {exc}") from exc
        return decode_image(response.content, self.max_dimension)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpImageSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class ColorCache:
    """Image URL -> HSL memo shared by every resolution that uses it.

    Album art URLs are content-addressed, so entries never go stale and are
    never evicted.  Concurrent misses for one URL wait on a single
    computation instead of fetching the image twice.
    """

    def __init__(self) -> None:
        self._colors: dict[str, HSLColor] = {}
        self._pending: dict[str, asyncio.Future[HSLColor]] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, url: object) -> bool:
        return url in self._colors

    def get(self, url: str) -> HSLColor | None:
        return self._colors.get(url)

    async def get_or_compute(self, url: str, compute: Callable[[], Awaitable[HSLColor]]) -> HSLColor:
        cached = self._colors.get(url)
        if cached is not None:
            return cached

        # The computation runs as its own task, so cancelling any one caller
        # (including the one that started it) leaves the other waiters intact.
        pending = self._pending.get(url)
        if pending is None:
            pending = asyncio.ensure_future(self._compute_and_store(url, compute))
            self._pending[url] = pending
            pending.add_done_callback(lambda task: self._finish(url, task))
        return await asyncio.shield(pending)

    async def _compute_and_store(self, url: str, compute: Callable[[], Awaitable[HSLColor]]) -> HSLColor:
        color = await compute()
        self._colors[url] = color
        return color

    def _finish(self, url: str, task: asyncio.Future[HSLColor]) -> None:
        if self._pending.get(url) is task:
            del self._pending[url]
        if not task.cancelled():
            # Mark retrieved so a failure every waiter abandoned is not logged.
            task.exception()


class TrackColorResolver:
    """Classify one track by its cover art.  Never raises for a bad image."""

    def __init__(
        self,
        image_source: ImageSource,
        cache: ColorCache | None = None,
        image_url: Callable[[Any], str | None] = track_image_url,
    ) -> None:
        self.image_source = image_source
        self.cache = cache if cache is not None else ColorCache()
        self._image_url = image_url

    async def _compute(self, url: str) -> HSLColor:
        buffer = await self.image_source.fetch(url)
        return rgb_to_hsl(dominant_color(buffer))

    async def resolve(self, track: Any) -> ClassifiedTrack:
        try:
            url = self._image_url(track)
            if not url:
                return ClassifiedTrack.undetermined(track)
            hsl = await self.cache.get_or_compute(url, lambda: self._compute(url))
        except Exception as exc:
            logger.warning("Error analyzing cover art color: %s", exc)
            return ClassifiedTrack.undetermined(track)
        return classify_track(track, hsl)
