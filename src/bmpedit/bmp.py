"""
BMP header layout shared by the decoder and encoder.

File header (14 bytes) followed by a BITMAPINFOHEADER (40 bytes); all
integers little-endian. Offsets are measured from the start of the file.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple

MAGIC = b"BM"
FILE_HEADER_SIZE = 14
DIB_HEADER_SIZE = 40
PIXEL_ARRAY_OFFSET = FILE_HEADER_SIZE + DIB_HEADER_SIZE  # 54
BITS_PER_PIXEL = 24
RESOLUTION_PPM = 2835  # 72 dpi

# name -> (offset, width in bytes)
FIELDS: Dict[str, Tuple[int, int]] = {
    "file_size": (2, 4),
    "reserved1": (6, 2),
    "reserved2": (8, 2),
    "pixel_offset": (10, 4),
    "dib_size": (14, 4),
    "width": (18, 4),
    "height": (22, 4),
    "planes": (26, 2),
    "bits_per_pixel": (28, 2),
    "compression": (30, 4),
    "image_size": (34, 4),
    "x_ppm": (38, 4),
    "y_ppm": (42, 4),
    "colors_used": (46, 4),
    "colors_important": (50, 4),
}


class BmpFormatError(ValueError):
    """Raised when a byte buffer is not a BMP this codec can read."""


def read_le(buf: bytes, offset: int, width: int) -> int:
    """Unsigned little-endian integer of `width` bytes at `offset`."""
    if offset < 0 or offset + width > len(buf):
        raise BmpFormatError(f"field at offset {offset} (+{width}) is past end of data ({len(buf)} bytes)")
    return int.from_bytes(buf[offset:offset + width], "little", signed=False)


def write_le(buf: bytearray, offset: int, width: int, value: int) -> None:
    """Store `value` as an unsigned little-endian integer of `width` bytes."""
    buf[offset:offset + width] = int(value).to_bytes(width, "little", signed=False)


def scanline_padding(scanline_bytes: int) -> int:
    """Zero bytes appended so a scanline ends on a 4-byte boundary."""
    return (4 - scanline_bytes % 4) % 4


@dataclass
class BmpHeader:
    file_size: int
    pixel_offset: int
    width: int
    height: int
    bits_per_pixel: int

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def scanline_bytes(self) -> int:
        return self.width * self.bytes_per_pixel

    @property
    def padding_bytes(self) -> int:
        return scanline_padding(self.scanline_bytes)

    @property
    def row_stride(self) -> int:
        return self.scanline_bytes + self.padding_bytes

    @property
    def pixel_array_bytes(self) -> int:
        return self.row_stride * self.height

    @property
    def expected_file_size(self) -> int:
        return self.pixel_offset + self.pixel_array_bytes

    @classmethod
    def parse(cls, data: bytes) -> "BmpHeader":
        if len(data) < PIXEL_ARRAY_OFFSET:
            raise BmpFormatError(f"too short for a BMP header: {len(data)} bytes")
        if bytes(data[0:2]) != MAGIC:
            raise BmpFormatError(f"bad magic {bytes(data[0:2])!r}, expected {MAGIC!r}")
        return cls(
            file_size=read_le(data, *FIELDS["file_size"]),
            pixel_offset=read_le(data, *FIELDS["pixel_offset"]),
            width=read_le(data, *FIELDS["width"]),
            height=read_le(data, *FIELDS["height"]),
            bits_per_pixel=read_le(data, *FIELDS["bits_per_pixel"]),
        )

    @classmethod
    def for_image(cls, width: int, height: int) -> "BmpHeader":
        """Header the encoder writes for a 24-bit image of the given size."""
        header = cls(
            file_size=0,
            pixel_offset=PIXEL_ARRAY_OFFSET,
            width=width,
            height=height,
            bits_per_pixel=BITS_PER_PIXEL,
        )
        header.file_size = header.expected_file_size
        return header

    def to_bytes(self) -> bytes:
        buf = bytearray(PIXEL_ARRAY_OFFSET)
        buf[0:2] = MAGIC
        values = {
            "file_size": self.file_size,
            "reserved1": 0,
            "reserved2": 0,
            "pixel_offset": self.pixel_offset,
            "dib_size": DIB_HEADER_SIZE,
            "width": self.width,
            "height": self.height,
            "planes": 1,
            "bits_per_pixel": self.bits_per_pixel,
            "compression": 0,
            "image_size": self.pixel_array_bytes,
            "x_ppm": RESOLUTION_PPM,
            "y_ppm": RESOLUTION_PPM,
            "colors_used": 0,
            "colors_important": 0,
        }
        for name, value in values.items():
            write_le(buf, *FIELDS[name], value)
        return bytes(buf)
