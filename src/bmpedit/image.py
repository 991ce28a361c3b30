from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Pixel:
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0 <= int(value) <= 255:
                raise ValueError(f"{name} must be in [0, 255], got {value}")

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)


PixelLike = Union[Pixel, Sequence[int]]


@dataclass(eq=False)
class PixelBuffer:
    """
    Rectangular RGB image, top row first.

    pixels: uint8 array of shape (height, width, 3), channel order R, G, B.
    The array is copied on construction and marked read-only, so transforms
    always build a new buffer instead of editing one in place.
    """
    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels)
        if arr.size == 0:
            arr = np.zeros((0, 0, 3), dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"pixels must have shape (H, W, 3), got {arr.shape}")
        if arr.dtype != np.uint8:
            if np.issubdtype(arr.dtype, np.floating):
                if not np.isfinite(arr).all() or not np.array_equal(arr, np.trunc(arr)):
                    raise ValueError("channel values must be whole numbers")
            if arr.min() < 0 or arr.max() > 255:
                raise ValueError("channel values must be in [0, 255]")
            arr = arr.astype(np.uint8)
        arr = np.array(arr, dtype=np.uint8, copy=True)
        arr.flags.writeable = False
        self.pixels = arr

    @classmethod
    def empty(cls) -> "PixelBuffer":
        """The 0x0 image returned by the decoder when a file is rejected."""
        return cls(np.zeros((0, 0, 3), dtype=np.uint8))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[PixelLike]]) -> "PixelBuffer":
        grid: List[List[Tuple[int, int, int]]] = []
        for r in rows:
            grid.append([p.as_tuple() if isinstance(p, Pixel) else tuple(p) for p in r])
        if not grid:
            return cls.empty()
        width = len(grid[0])
        for i, r in enumerate(grid):
            if len(r) != width:
                raise ValueError(f"row {i} has {len(r)} pixels, expected {width}")
        return cls(np.array(grid, dtype=np.int64).reshape(len(grid), width, 3))

    @classmethod
    def filled(cls, height: int, width: int, color: PixelLike) -> "PixelBuffer":
        rgb = color.as_tuple() if isinstance(color, Pixel) else tuple(color)
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[...] = rgb
        return cls(arr)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def is_empty(self) -> bool:
        return self.height == 0 or self.width == 0

    def pixel(self, row: int, col: int) -> Pixel:
        r, g, b = (int(v) for v in self.pixels[row, col])
        return Pixel(r, g, b)

    def rows(self) -> List[List[Pixel]]:
        return [[Pixel(*(int(v) for v in px)) for px in row] for row in self.pixels]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer(height={self.height}, width={self.width})"
