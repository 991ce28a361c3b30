from __future__ import annotations
import logging
import os

import numpy as np

from .bmp import BmpHeader
from .image import PixelBuffer

logger = logging.getLogger(__name__)


class BmpEncoder:
    """PixelBuffer -> 24-bit uncompressed BMP."""

    def encode_bytes(self, image: PixelBuffer) -> bytes:
        if image.is_empty:
            raise ValueError(f"cannot encode an empty image ({image.width}x{image.height})")

        header = BmpHeader.for_image(image.width, image.height)
        # bottom row first, channels as B, G, R
        bgr = image.pixels[::-1, :, ::-1].reshape(image.height, header.scanline_bytes)
        rows = np.zeros((image.height, header.row_stride), dtype=np.uint8)
        rows[:, :header.scanline_bytes] = bgr
        return header.to_bytes() + rows.tobytes()

    def encode(self, image: PixelBuffer, path: str | os.PathLike) -> bool:
        """Write `image` to `path`. Returns False if the image is empty or the file cannot be written."""
        try:
            payload = self.encode_bytes(image)
        except ValueError as e:
            logger.error("Not writing %s: %s", path, e)
            return False

        try:
            with open(path, "wb") as fh:
                fh.write(payload)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            return False
        logger.debug("Wrote %s (%d bytes)", path, len(payload))
        return True


def write_bmp(path: str | os.PathLike, image: PixelBuffer) -> bool:
    return BmpEncoder().encode(image, path)
