from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, NamedTuple, Union


class RGBColor(NamedTuple):
    r: int
    g: int
    b: int


class HSLColor(NamedTuple):
    hue: float
    saturation: float
    lightness: float


@dataclass(slots=True)
class PixelBuffer:
    """Decoded RGBA samples, row-major, four bytes per pixel."""

    width: int
    height: int
    data: bytes

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * 4
        r, g, b, a = self.data[offset:offset + 4]
        return r, g, b, a


class ColorCategory(IntEnum):
    RED = 0
    RED_ORANGE = 1
    ORANGE = 2
    ORANGE_YELLOW = 3
    YELLOW = 4
    GREEN = 5
    TURQUOISE = 6
    LIGHT_BLUE = 7
    BLUE = 8
    PURPLE = 9
    PINK = 10
    MAGENTA = 11


@dataclass(frozen=True, slots=True)
class Categorized:
    category: ColorCategory


@dataclass(frozen=True, slots=True)
class Undetermined:
    pass


HueBucket = Union[Categorized, Undetermined]

UNDETERMINED = Undetermined()


@dataclass(frozen=True, slots=True)
class ColorClassification:
    bucket: HueBucket
    is_grayscale: bool
    is_white: bool


@dataclass(slots=True)
class ClassifiedTrack:
    track: Any
    hue: float
    saturation: float
    lightness: float
    bucket: HueBucket
    is_grayscale: bool
    is_white: bool

    @property
    def color_category(self) -> int:
        if isinstance(self.bucket, Categorized):
            return int(self.bucket.category)
        return -1

    @classmethod
    def undetermined(cls, track: Any) -> ClassifiedTrack:
        return cls(
            track=track,
            hue=-1.0,
            saturation=0.0,
            lightness=0.0,
            bucket=UNDETERMINED,
            is_grayscale=True,
            is_white=False,
        )
