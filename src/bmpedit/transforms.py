"""
Pixel-level and geometric image operations.

Every function takes a PixelBuffer and returns a new one; inputs are never
modified. Channel arithmetic is done in float, truncated toward zero and
clamped to [0, 255].
"""
from __future__ import annotations
import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np

from .config import TransformConfig
from .image import PixelBuffer

logger = logging.getLogger(__name__)

HIGH_CONTRAST_THRESHOLD = 128
CLARENDON_BRIGHT = 170
CLARENDON_DARK = 90
POSTERIZE_WHITE_SUM = 550
POSTERIZE_BLACK_SUM = 150


# helpers

def _require_pixels(image: PixelBuffer) -> np.ndarray:
    if image.is_empty:
        raise ValueError("cannot transform an empty image")
    return image.pixels.astype(np.int64)


def _check_scale(scale: float) -> float:
    try:
        s = float(scale)
    except (TypeError, ValueError) as e:
        raise ValueError(f"scale must be a number, got {scale!r}") from e
    if not math.isfinite(s):
        raise ValueError(f"scale must be finite, got {scale!r}")
    return s


def _to_buffer(values: np.ndarray) -> PixelBuffer:
    """Truncate toward zero, clamp to the 8-bit range and wrap."""
    return PixelBuffer(np.clip(np.trunc(values), 0, 255).astype(np.uint8))


def _lighten_channels(rgb: np.ndarray, scale: float) -> np.ndarray:
    return 255 - (255 - rgb) * scale


def _darken_channels(rgb: np.ndarray, scale: float) -> np.ndarray:
    return rgb * scale


def _channel_mean(rgb: np.ndarray) -> np.ndarray:
    """Integer mean of R, G, B per pixel, shape (H, W)."""
    return rgb.sum(axis=2) // 3


# 1..10

def vignette(image: PixelBuffer) -> PixelBuffer:
    """Darken pixels in proportion to their distance from the image centre."""
    rgb = _require_pixels(image)
    h, w = image.shape
    rows, cols = np.ogrid[0:h, 0:w]
    distance = np.sqrt((cols - w // 2) ** 2 + (rows - h // 2) ** 2)
    factor = (h - distance) / h
    return _to_buffer(rgb * factor[..., None])


def clarendon(image: PixelBuffer, scale: float) -> PixelBuffer:
    """Push bright pixels toward white and dark pixels toward black by `scale`."""
    s = _check_scale(scale)
    rgb = _require_pixels(image)
    avg = _channel_mean(rgb)[..., None]
    out = np.where(
        avg >= CLARENDON_BRIGHT,
        _lighten_channels(rgb, s),
        np.where(avg < CLARENDON_DARK, _darken_channels(rgb, s), rgb),
    )
    return _to_buffer(out)


def grayscale(image: PixelBuffer) -> PixelBuffer:
    rgb = _require_pixels(image)
    total = rgb.sum(axis=2)
    # round(total / 3) with halves going up, in integers
    gray = (2 * total + 3) // 6
    return PixelBuffer(np.repeat(gray[..., None], 3, axis=2))


def rotate90(image: PixelBuffer) -> PixelBuffer:
    """Rotate 90 degrees clockwise: input (row, col) lands on (col, H-1-row)."""
    _require_pixels(image)
    return PixelBuffer(np.rot90(image.pixels, k=-1, axes=(0, 1)))


def rotate(image: PixelBuffer, count: float) -> PixelBuffer:
    """
    Rotate clockwise by `count` quarter turns. Negative counts turn the other
    way. A count whose angle is not a multiple of 90 degrees is reported and
    the image is returned unchanged.
    """
    _require_pixels(image)
    angle = count * 90
    if angle % 90 != 0:
        logger.warning("Rotation angle %s is not a multiple of 90 degrees; image left unchanged", angle)
        return image.copy()

    turns = int(angle % 360) // 90
    out = image.copy()
    for _ in range(turns):
        out = rotate90(out)
    return out


def enlarge(image: PixelBuffer, x_scale: int, y_scale: int) -> PixelBuffer:
    """Nearest-neighbour upscale: output (row, col) copies input (row // y_scale, col // x_scale)."""
    for name, v in (("x_scale", x_scale), ("y_scale", y_scale)):
        if isinstance(v, bool) or int(v) != v or v < 1:
            raise ValueError(f"{name} must be an integer >= 1, got {v!r}")
    _require_pixels(image)
    out = np.repeat(image.pixels, int(y_scale), axis=0)
    out = np.repeat(out, int(x_scale), axis=1)
    return PixelBuffer(out)


def high_contrast(image: PixelBuffer) -> PixelBuffer:
    rgb = _require_pixels(image)
    white = _channel_mean(rgb) >= HIGH_CONTRAST_THRESHOLD
    out = np.where(white[..., None], 255, 0)
    return PixelBuffer(np.broadcast_to(out, rgb.shape))


def lighten(image: PixelBuffer, scale: float) -> PixelBuffer:
    s = _check_scale(scale)
    return _to_buffer(_lighten_channels(_require_pixels(image), s))


def darken(image: PixelBuffer, scale: float) -> PixelBuffer:
    s = _check_scale(scale)
    return _to_buffer(_darken_channels(_require_pixels(image), s))


def posterize(image: PixelBuffer) -> PixelBuffer:
    """Map every pixel to black, white, red, green or blue."""
    rgb = _require_pixels(image)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    total = r + g + b
    maxc = rgb.max(axis=2)

    # ties go to red, then green
    is_red = r == maxc
    is_green = ~is_red & (g == maxc)
    is_blue = ~is_red & ~is_green

    out = np.zeros_like(rgb)
    out[is_red, 0] = 255
    out[is_green, 1] = 255
    out[is_blue, 2] = 255
    out[total <= POSTERIZE_BLACK_SUM] = 0
    out[total >= POSTERIZE_WHITE_SUM] = 255
    return PixelBuffer(out)


# driver

class TransformPipeline:
    """Apply one named operation with parameters taken from a TransformConfig."""

    _OPS: Dict[str, Callable[[PixelBuffer, TransformConfig], PixelBuffer]] = {
        "vignette": lambda img, c: vignette(img),
        "clarendon": lambda img, c: clarendon(img, c.scale),
        "grayscale": lambda img, c: grayscale(img),
        "rotate90": lambda img, c: rotate90(img),
        "rotate": lambda img, c: rotate(img, c.rotations),
        "enlarge": lambda img, c: enlarge(img, c.x_scale, c.y_scale),
        "high_contrast": lambda img, c: high_contrast(img),
        "lighten": lambda img, c: lighten(img, c.scale),
        "darken": lambda img, c: darken(img, c.scale),
        "posterize": lambda img, c: posterize(img),
    }

    def __init__(self, config: Optional[TransformConfig] = None) -> None:
        self.config = config or TransformConfig()
        if self.config.operation not in self._OPS:
            raise ValueError(f"Unknown operation: {self.config.operation}")

    @classmethod
    def available_operations(cls) -> List[str]:
        return list(cls._OPS)

    def run(self, image: PixelBuffer) -> PixelBuffer:
        op = self._OPS[self.config.operation]
        logger.info("Applying %s to %dx%d image", self.config.operation, image.width, image.height)
        return op(image, self.config)
