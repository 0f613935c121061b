#!/usr/bin/env python3
"""
make_frames.py

Writes a numbered PNG sequence to try the player without real assets:
  • Each frame is a blocky grey static background (numpy) with scan-lines
  • The frame number is drawn large in the middle, plus a progress bar
  • File names follow the player's rule: <prefix><zero-padded n><ext>

    python make_frames.py frames/frame_ --start 0 --end 120 --size 640x360
"""

import argparse
import logging
import os
import sys

import numpy as np
import pygame

import config
from frame_store import frame_filename
from logging_utils import setup_logging

log = logging.getLogger(__name__)


def parse_resolution(res_str):
    try:
        w_str, h_str = res_str.lower().split('x')
        return int(w_str), int(h_str)
    except ValueError:
        raise argparse.ArgumentTypeError(
            "Invalid resolution. Use WIDTHxHEIGHT, e.g. 640x360.") from None


def generate_static_frame(w, h, rng, block=4):
    """One frame of blocky static as an (h, w, 3) uint8 array."""
    sigma = config.GEN_GAUSS_SIGMA
    scan  = config.GEN_SCANLINE_INTENSITY

    small_w = (w + block - 1) // block
    small_h = (h + block - 1) // block

    # 1) Gaussian mid-gray noise
    base = rng.normal(96, sigma, (small_h, small_w))
    img = np.clip(base, 0, 255).astype(np.uint8)[..., None]
    img = np.repeat(img, 3, axis=2)

    # 2) Upscale to full size
    img = np.repeat(np.repeat(img, block, axis=0), block, axis=1)[:h, :w]

    # 3) Scan-lines
    img[::2, :] = (img[::2, :] * scan).astype(np.uint8)
    return img


def render_frame(n, start, end, size, rng):
    w, h = size
    arr  = generate_static_frame(w, h, rng)
    surf = pygame.surfarray.make_surface(arr.swapaxes(0, 1))

    font = pygame.font.SysFont("monospace", h // 3, bold=True)
    txt  = font.render(str(n), True, (0, 255, 0))
    surf.blit(txt, ((w - txt.get_width()) // 2, (h - txt.get_height()) // 2))

    span = max(1, end - start)
    bar  = int(w * (n - start) / span)
    pygame.draw.rect(surf, (0, 255, 0), (0, h - 8, bar, 8))
    return surf


def make_frames(prefix, start, end, size=config.GEN_SIZE, extension=".png", seed=None):
    """Write frames start‥end; returns the list of paths written."""
    if start > end:
        raise ValueError(f"start {start} is after end {end}")
    folder = os.path.dirname(prefix)
    if folder:
        os.makedirs(folder, exist_ok=True)

    pygame.font.init()
    rng = np.random.default_rng(seed)
    paths = []
    for n in range(start, end + 1):
        fp = frame_filename(prefix, n, end, extension)
        pygame.image.save(render_frame(n, start, end, size, rng), fp)
        paths.append(fp)
        if (n - start + 1) % 24 == 0:
            log.info("  %d/%d frames written", n - start + 1, end - start + 1)
    return paths


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a demo frame sequence")
    parser.add_argument("prefix", nargs="?", default=config.SEQUENCE_PATH,
                        help=f"path prefix (default: {config.SEQUENCE_PATH})")
    parser.add_argument("--start", type=int, default=config.SEQUENCE_START)
    parser.add_argument("--end", type=int, default=config.SEQUENCE_END)
    parser.add_argument("--size", type=parse_resolution,
                        default=config.GEN_SIZE, help="WIDTHxHEIGHT")
    parser.add_argument("--ext", default=config.FILE_EXTENSION)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    setup_logging(config.LOG_LEVEL, log_file="")
    try:
        paths = make_frames(args.prefix, args.start, args.end, args.size,
                            args.ext, args.seed)
    except ValueError as exc:
        parser.error(str(exc))
    log.info("Done! %d frames, %s … %s", len(paths), paths[0], paths[-1])
    return 0


if __name__ == "__main__":
    sys.exit(main())
