from __future__ import annotations

import math
from typing import Any, Iterable

from rainbow_playlists.models import Categorized, ClassifiedTrack, ColorCategory

# Hues closer than this are treated as equal and fall through to saturation;
# saturations closer than the second tolerance fall through to lightness.
HUE_TOLERANCE = 0.01
SATURATION_TOLERANCE = 0.1


def _category_sort_key(item: ClassifiedTrack) -> tuple[int, int, float]:
    # Tolerances are fixed-width bins, so the key is a total order.
    return (
        math.floor(item.hue / HUE_TOLERANCE),
        -math.floor(item.saturation / SATURATION_TOLERANCE),
        item.lightness,
    )


def rainbow_sequence(classified: Iterable[ClassifiedTrack]) -> list[Any]:
    """Order classified tracks red to magenta, then white, then grayscale.

    Returns the original track records; the color annotations are dropped.
    Every input appears exactly once and duplicates are kept.
    """

    categories: dict[ColorCategory, list[ClassifiedTrack]] = {category: [] for category in ColorCategory}
    white: list[ClassifiedTrack] = []
    grayscale: list[ClassifiedTrack] = []

    for item in classified:
        if item.is_white:
            white.append(item)
        elif item.is_grayscale or not isinstance(item.bucket, Categorized):
            grayscale.append(item)
        else:
            categories[item.bucket.category].append(item)

    ordered: list[ClassifiedTrack] = []
    for category in ColorCategory:
        ordered.extend(sorted(categories[category], key=_category_sort_key))
    ordered.extend(sorted(white, key=lambda item: item.lightness, reverse=True))
    ordered.extend(sorted(grayscale, key=lambda item: item.lightness))

    return [item.track for item in ordered]
