#!/usr/bin/env python
"""
Render a banner preview locally.
Draws the title banner over an optional content image and writes the PNG to disk,
optionally alongside the plain banner and the content-panel variant.
"""

import os
import sys
import json
import random
import asyncio
import argparse
from pathlib import Path

# Add the project root to the path so we can import our modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from banner_generator import (
    create_banner_image,
    create_banner_with_background,
    generate_preview_image,
)
from banner_generator.logger import get_logger
from utils.helpers import write_bytes

logger = get_logger(__name__)


def load_overrides(json_path):
    """Load a settings override mapping from a JSON file, or {} when no file is given."""
    if not json_path:
        return {}
    with open(json_path, 'r') as f:
        return json.load(f)


async def render(args):
    os.makedirs(args.output, exist_ok=True)
    settings = load_overrides(args.settings)
    rng = random.Random(args.seed) if args.seed is not None else None

    preview_path = os.path.join(args.output, "preview.png")
    await generate_preview_image(args.title, preview_path, args.image, placement=settings.get('placement'),
                                 settings={k: v for k, v in settings.items() if k != 'placement'}, rng=rng)
    logger.info(f"Saved preview to {preview_path}")

    if args.all:
        banner_path = os.path.join(args.output, "banner.png")
        write_bytes(banner_path, create_banner_image(args.title, settings))
        logger.info(f"Saved banner to {banner_path}")

        canvas = await create_banner_with_background(args.title, settings)
        panel_path = os.path.join(args.output, "banner_with_panel.png")
        write_bytes(panel_path, canvas.to_png())
        logger.info(f"Saved banner with content panel to {panel_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render a banner preview image")
    parser.add_argument("title", help="Title text drawn on the banner")
    parser.add_argument("--image", "-i", default=None,
                        help="Content image path or URL placed behind the banner")
    parser.add_argument("--output", "-o", default="preview_output",
                        help="Directory to save output images (default: preview_output)")
    parser.add_argument("--settings", "-s", default=None,
                        help="JSON file with settings overrides; a 'placement' key overrides image placement")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the placement jitter")
    parser.add_argument("--all", "-a", action="store_true",
                        help="Also render the plain banner and the content-panel variant")
    args = parser.parse_args()

    asyncio.run(render(args))
