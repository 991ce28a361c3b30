from __future__ import annotations
from pathlib import Path
from typing import List, Tuple

import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# logging & filesystem helpers

def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for command line use. Library code never calls this."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def ensure_dir(path: str | os.PathLike) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def list_images(
    dir_path: str | os.PathLike,
    extensions: Tuple[str, ...] = (".bmp",),
) -> List[str]:
    p = Path(dir_path)
    if not p.is_dir():
        raise FileNotFoundError(f"Not a directory: {dir_path}")
    return [
        str(fp) for fp in sorted(p.iterdir())
        if fp.is_file() and fp.suffix.lower() in extensions
    ]


def output_path(src: str | os.PathLike, save_dir: str | os.PathLike, operation: str) -> str:
    """<save_dir>/<stem>_<operation>.bmp"""
    stem = Path(src).stem
    return str(Path(save_dir) / f"{stem}_{operation}.bmp")
