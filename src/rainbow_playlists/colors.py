from __future__ import annotations

from rainbow_playlists.models import (
    Categorized,
    ClassifiedTrack,
    ColorCategory,
    ColorClassification,
    HSLColor,
    RGBColor,
)

# Exclusive upper bound of each hue range, walked in order.  Hues at or past
# the last bound wrap around to red.
_HUE_BOUNDS: tuple[tuple[float, ColorCategory], ...] = (
    (0.025, ColorCategory.RED),
    (0.075, ColorCategory.RED_ORANGE),
    (0.125, ColorCategory.ORANGE),
    (0.175, ColorCategory.ORANGE_YELLOW),
    (0.225, ColorCategory.YELLOW),
    (0.375, ColorCategory.GREEN),
    (0.5, ColorCategory.TURQUOISE),
    (0.575, ColorCategory.LIGHT_BLUE),
    (0.675, ColorCategory.BLUE),
    (0.775, ColorCategory.PURPLE),
    (0.875, ColorCategory.PINK),
    (0.975, ColorCategory.MAGENTA),
)

WHITE_MIN_LIGHTNESS = 0.9
WHITE_MAX_SATURATION = 0.15
GRAYSCALE_MAX_SATURATION = 0.2


def rgb_to_hsl(color: RGBColor | tuple[int, int, int]) -> HSLColor:
    r, g, b = (channel / 255 for channel in color)

    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    if high == low:
        return HSLColor(0.0, 0.0, lightness)

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2 - high - low)
    else:
        saturation = delta / (high + low)

    if high == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif high == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4

    return HSLColor(hue / 6, saturation, lightness)


def hue_category(hue: float) -> ColorCategory:
    for upper, category in _HUE_BOUNDS:
        if hue < upper:
            return category
    return ColorCategory.RED


def classify_color(hsl: HSLColor) -> ColorClassification:
    """Bucket a color by hue and flag near-white and low-saturation colors.

    The hue bucket is always assigned; the white and grayscale flags win
    over it when tracks are grouped.
    """

    hue, saturation, lightness = hsl
    is_white = lightness > WHITE_MIN_LIGHTNESS and saturation < WHITE_MAX_SATURATION
    is_grayscale = saturation < GRAYSCALE_MAX_SATURATION and not is_white
    return ColorClassification(
        bucket=Categorized(hue_category(hue)),
        is_grayscale=is_grayscale,
        is_white=is_white,
    )


def classify_track(track: object, hsl: HSLColor) -> ClassifiedTrack:
    classification = classify_color(hsl)
    return ClassifiedTrack(
        track=track,
        hue=hsl.hue,
        saturation=hsl.saturation,
        lightness=hsl.lightness,
        bucket=classification.bucket,
        is_grayscale=classification.is_grayscale,
        is_white=classification.is_white,
    )
