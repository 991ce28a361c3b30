from .config import TransformConfig, PipelineConfig
from .helpers import ensure_dir, list_images, setup_logging
from .image import Pixel, PixelBuffer
from .bmp import BmpHeader, BmpFormatError, scanline_padding
from .decoder import BmpDecoder, read_bmp
from .encoder import BmpEncoder, write_bmp
from .transforms import (
    TransformPipeline,
    vignette, clarendon, grayscale, rotate90, rotate, enlarge,
    high_contrast, lighten, darken, posterize,
)

__all__ = [
    "TransformConfig", "PipelineConfig", "ensure_dir", "list_images", "setup_logging",
    "Pixel", "PixelBuffer",
    "BmpHeader", "BmpFormatError", "scanline_padding",
    "BmpDecoder", "read_bmp",
    "BmpEncoder", "write_bmp",
    "TransformPipeline",
    "vignette", "clarendon", "grayscale", "rotate90", "rotate", "enlarge",
    "high_contrast", "lighten", "darken", "posterize",
]
