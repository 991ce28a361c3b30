from __future__ import annotations
import logging
import os

import numpy as np

from .bmp import BITS_PER_PIXEL, BmpFormatError, BmpHeader
from .image import PixelBuffer

logger = logging.getLogger(__name__)


class BmpDecoder:
    """Uncompressed BMP (24 bpp, or 32 bpp with the extra byte ignored) -> PixelBuffer."""

    def parse(self, data: bytes) -> PixelBuffer:
        """Strict decode. Raises BmpFormatError instead of returning the empty image."""
        header = BmpHeader.parse(data)

        if header.bits_per_pixel % 8 != 0 or header.bits_per_pixel < BITS_PER_PIXEL:
            raise BmpFormatError(f"unsupported bits per pixel: {header.bits_per_pixel}")
        if header.width == 0 or header.height == 0:
            raise BmpFormatError(f"zero-sized image: {header.width}x{header.height}")
        if header.file_size != header.expected_file_size:
            raise BmpFormatError(
                f"declared file size {header.file_size} != expected {header.expected_file_size} "
                f"({header.width}x{header.height}, {header.bits_per_pixel} bpp)"
            )
        if len(data) < header.expected_file_size:
            raise BmpFormatError(f"truncated pixel array: have {len(data)} bytes, need {header.expected_file_size}")

        raw = np.frombuffer(data, dtype=np.uint8, count=header.pixel_array_bytes, offset=header.pixel_offset)
        # drop row padding, then split each scanline into per-pixel byte groups
        scan = raw.reshape(header.height, header.row_stride)[:, :header.scanline_bytes]
        bgr = scan.reshape(header.height, header.width, header.bytes_per_pixel)[:, :, :3]
        # storage row s holds logical row height-1-s; bytes are B, G, R
        rgb = bgr[::-1, :, ::-1]
        return PixelBuffer(rgb)

    def decode_bytes(self, data: bytes) -> PixelBuffer:
        try:
            return self.parse(data)
        except BmpFormatError as e:
            logger.warning("Rejected BMP data: %s", e)
            return PixelBuffer.empty()

    def decode(self, path: str | os.PathLike) -> PixelBuffer:
        """Read a BMP file. Returns PixelBuffer.empty() if it is unreadable or invalid."""
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return PixelBuffer.empty()

        try:
            image = self.parse(data)
        except BmpFormatError as e:
            logger.warning("Rejected %s: %s", path, e)
            return PixelBuffer.empty()
        logger.debug("Decoded %s (%dx%d)", path, image.width, image.height)
        return image


def read_bmp(path: str | os.PathLike) -> PixelBuffer:
    return BmpDecoder().decode(path)
