from __future__ import annotations
import argparse
import logging
import math
import os
from typing import Optional, Sequence

from .config import PipelineConfig, TransformConfig
from .decoder import BmpDecoder
from .encoder import BmpEncoder
from .helpers import ensure_dir, list_images, output_path, setup_logging
from .transforms import TransformPipeline
from .viz import Visualizer

logger = logging.getLogger(__name__)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Apply simple effects to 24-bit BMP images")
    g_io = p.add_argument_group("I/O")
    g_io.add_argument("--image", type=str, help="Path to a single BMP")
    g_io.add_argument("--dir", type=str, help="Path to a directory of BMPs")
    g_io.add_argument("--out", type=str, default=None, help="Output file (with --image)")
    g_io.add_argument("--save_dir", type=str, default=None, help="Output folder (required with --dir)")
    g_io.add_argument("--show", action="store_true", help="Display before/after")
    g_io.add_argument("-v", "--verbose", action="store_true")

    g_op = p.add_argument_group("Operation")
    g_op.add_argument("--op", type=str, required=True, choices=TransformPipeline.available_operations())
    g_op.add_argument("--scale", type=float, default=0.5, help="clarendon / lighten / darken factor")
    g_op.add_argument("--rotations", type=int, default=1, help="quarter turns clockwise (rotate)")
    g_op.add_argument("--x_scale", type=int, default=2)
    g_op.add_argument("--y_scale", type=int, default=2)

    return p


def _process_one(src: str, dst: str, pipe_cfg: PipelineConfig, pipeline: TransformPipeline,
                 decoder: BmpDecoder, encoder: BmpEncoder, viz: Visualizer) -> bool:
    image = decoder.decode(src)
    if image.is_empty:
        logger.error("Skipping %s: not a readable 24-bit BMP", src)
        return False

    result = pipeline.run(image)

    if pipe_cfg.show:
        viz.show_side_by_side([image, result], ["Input", pipe_cfg.transform.operation])

    if not encoder.encode(result, dst):
        return False
    logger.info("Saved %s", dst)
    return True


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    tr_cfg = TransformConfig(
        operation=args.op,
        scale=args.scale,
        rotations=args.rotations,
        x_scale=args.x_scale,
        y_scale=args.y_scale,
    )
    pipe_cfg = PipelineConfig(transform=tr_cfg, save_dir=args.save_dir, show=args.show)

    try:
        pipeline = TransformPipeline(tr_cfg)
        if args.op == "enlarge" and (args.x_scale < 1 or args.y_scale < 1):
            raise ValueError("--x_scale and --y_scale must be >= 1")
        if not math.isfinite(args.scale):
            raise ValueError(f"--scale must be finite, got {args.scale}")
    except ValueError as e:
        parser.error(str(e))

    decoder, encoder, viz = BmpDecoder(), BmpEncoder(), Visualizer()

    if args.image:
        dst = args.out
        if dst is None:
            if not pipe_cfg.save_dir:
                parser.error("--image needs --out or --save_dir")
            dst = output_path(args.image, pipe_cfg.save_dir, args.op)
        if pipe_cfg.save_dir:
            ensure_dir(pipe_cfg.save_dir)
        if not _process_one(args.image, dst, pipe_cfg, pipeline, decoder, encoder, viz):
            raise SystemExit(1)
    elif args.dir:
        if not pipe_cfg.save_dir:
            parser.error("--dir needs --save_dir")
        if not os.path.isdir(args.dir):
            parser.error(f"--dir is not a directory: {args.dir}")
        ensure_dir(pipe_cfg.save_dir)
        failed = 0
        for src in list_images(args.dir):
            dst = output_path(src, pipe_cfg.save_dir, args.op)
            if not _process_one(src, dst, pipe_cfg, pipeline, decoder, encoder, viz):
                failed += 1
        if failed:
            raise SystemExit(f"{failed} image(s) failed")
    else:
        raise SystemExit("Provide either --image or --dir")


if __name__ == "__main__":
    main()
