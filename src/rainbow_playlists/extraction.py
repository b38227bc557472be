"""Dominant-color extraction from cover art pixels."""
from __future__ import annotations

import io
import math
from collections import Counter

from PIL import Image

from rainbow_playlists.colors import rgb_to_hsl
from rainbow_playlists.models import PixelBuffer, RGBColor

DEFAULT_MAX_DIMENSION = 100

# Fraction of width/height ignored on each side; borders and text overlays
# tend to sit there.
_EDGE_MARGIN = 0.25
_MIN_ALPHA = 200
_BUCKET_SIZE = 16

_NEAR_BLACK = 30
_NEAR_WHITE = 220
_GRAY_SPREAD = 20

_MIN_SATURATION_WEIGHT = 0.2
_EXTREME_LIGHTNESS_WEIGHT = 0.5


class ImageUnavailableError(Exception):
    """Cover art could not be fetched or decoded."""


def decode_image(image_bytes: bytes, max_dimension: int = DEFAULT_MAX_DIMENSION) -> PixelBuffer:
    """Decode image bytes into an RGBA buffer no larger than ``max_dimension``.

    Only the first frame of animated formats is used.  The aspect ratio is
    preserved and images already small enough are left at full size.
    """

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageUnavailableError(f"Could not decode image: {exc}") from exc

    width, height = rgba.size
    scale = min(1.0, max_dimension / max(width, height, 1))
    if scale < 1.0:
        size = (max(1, math.floor(width * scale)), max(1, math.floor(height * scale)))
        rgba = rgba.resize(size, Image.Resampling.BILINEAR)

    return PixelBuffer(width=rgba.width, height=rgba.height, data=rgba.tobytes())


def _quantize(value: int) -> int:
    return value // _BUCKET_SIZE * _BUCKET_SIZE


def _is_neutral(color: RGBColor) -> bool:
    r, g, b = color
    if r < _NEAR_BLACK and g < _NEAR_BLACK and b < _NEAR_BLACK:
        return True
    if r > _NEAR_WHITE and g > _NEAR_WHITE and b > _NEAR_WHITE:
        return True
    return abs(r - g) < _GRAY_SPREAD and abs(g - b) < _GRAY_SPREAD and abs(r - b) < _GRAY_SPREAD


def _candidate_counts(buffer: PixelBuffer) -> Counter[RGBColor]:
    margin_x = math.floor(buffer.width * _EDGE_MARGIN)
    margin_y = math.floor(buffer.height * _EDGE_MARGIN)

    counts: Counter[RGBColor] = Counter()
    for y in range(margin_y, buffer.height - margin_y):
        for x in range(margin_x, buffer.width - margin_x):
            r, g, b, alpha = buffer.pixel(x, y)
            if alpha < _MIN_ALPHA:
                continue
            color = RGBColor(_quantize(r), _quantize(g), _quantize(b))
            if _is_neutral(color):
                continue
            counts[color] += 1
    return counts


def _vibrancy_score(color: RGBColor, count: int) -> float:
    _, saturation, lightness = rgb_to_hsl(color)
    saturation_weight = max(saturation, _MIN_SATURATION_WEIGHT)
    brightness_weight = _EXTREME_LIGHTNESS_WEIGHT if lightness < 0.1 or lightness > 0.9 else 1.0
    return count * saturation_weight * brightness_weight


def average_color(buffer: PixelBuffer) -> RGBColor:
    pixel_count = buffer.width * buffer.height
    if pixel_count == 0:
        return RGBColor(0, 0, 0)

    data = buffer.data
    return RGBColor(
        sum(data[0::4]) // pixel_count,
        sum(data[1::4]) // pixel_count,
        sum(data[2::4]) // pixel_count,
    )


def dominant_color(buffer: PixelBuffer) -> RGBColor:
    """Pick the most vibrant frequent color from the center of the image.

    Colors are quantized to 16-level steps so anti-aliasing noise does not
    split a genuine mode.  Near-black, near-white and gray colors are
    skipped, and the remaining counts are weighted by saturation and
    penalised at extreme lightness.  When nothing survives the filters the
    plain average of the whole buffer is returned.
    """

    best: RGBColor | None = None
    best_score = 0.0
    for color, count in _candidate_counts(buffer).items():
        score = _vibrancy_score(color, count)
        if score > best_score:
            best, best_score = color, score

    if best is None:
        return average_color(buffer)
    return best
