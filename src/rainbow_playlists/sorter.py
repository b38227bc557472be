from __future__ import annotations

import logging
from typing import Any, Sequence

from rainbow_playlists.models import ClassifiedTrack
from rainbow_playlists.resolver import ColorCache, HttpImageSource, ImageSource, TrackColorResolver
from rainbow_playlists.scheduler import DEFAULT_BATCH_DELAY, DEFAULT_BATCH_SIZE, BatchScheduler
from rainbow_playlists.sequencer import rainbow_sequence

logger = logging.getLogger(__name__)


class RainbowSorter:
    def __init__(self, resolver: TrackColorResolver, scheduler: BatchScheduler | None = None) -> None:
        self.resolver = resolver
        self.scheduler = scheduler or BatchScheduler()

    async def classify(self, tracks: Sequence[Any]) -> list[ClassifiedTrack]:
        return await self.scheduler.run(tracks, self.resolver.resolve)

    async def sort(self, tracks: Sequence[Any]) -> list[Any]:
        classified = await self.classify(tracks)
        undetermined = sum(1 for item in classified if item.color_category == -1)
        if undetermined:
            logger.info("%d of %d tracks have no usable cover color", undetermined, len(classified))
        return rainbow_sequence(classified)


async def sort_tracks_by_hue(
    tracks: Sequence[Any],
    *,
    image_source: ImageSource | None = None,
    cache: ColorCache | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = DEFAULT_BATCH_DELAY,
) -> list[Any]:
    """Return ``tracks`` reordered by the hue of their cover art.

    When no image source is given an :class:`HttpImageSource` is opened for
    the duration of the call.
    """

    scheduler = BatchScheduler(batch_size=batch_size, delay=delay)
    if image_source is not None:
        return await RainbowSorter(TrackColorResolver(image_source, cache), scheduler).sort(tracks)

    async with HttpImageSource() as source:
        return await RainbowSorter(TrackColorResolver(source, cache), scheduler).sort(tracks)
