"""
Content placement module.
Loads content images and places them on the canvas scaled to fit, rotated and jittered.
"""

import asyncio
import math
import random
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple

import requests
from PIL import Image

from .logger import get_logger
from .settings import PlacementSettings, Point, Size

logger = get_logger(__name__)

IMAGE_REQUEST_TIMEOUT = 20


@dataclass(frozen=True)
class Placement:
    """Where and how a content image is drawn. `angle` is in radians."""
    available_size: Size
    ratio: float
    target_size: Size
    target_position: Point
    angle: float


def _is_url(source: str) -> bool:
    return source.startswith('http://') or source.startswith('https://')


def load_image_from_url(url: str) -> Image.Image:
    """Download an image and return it as an RGBA PIL Image."""
    try:
        response = requests.get(url, timeout=IMAGE_REQUEST_TIMEOUT)
        response.raise_for_status()
        img = Image.open(BytesIO(response.content))
        img.load()
    except requests.RequestException as e:
        logger.error(f"Failed to load image from URL '{url}': {e}")
        raise
    except Exception as e:
        logger.error(f"Error decoding image from URL '{url}': {e}")
        raise
    return img if img.mode == 'RGBA' else img.convert('RGBA')


def load_image(source: str) -> Image.Image:
    """Decode a content image from a file path or an http(s) URL."""
    source = str(source)
    if _is_url(source):
        return load_image_from_url(source)
    try:
        with Image.open(source) as img:
            img.load()
            decoded = img if img.mode == 'RGBA' else img.convert('RGBA')
            # detach from the file handle before it closes
            decoded = decoded.copy()
    except Exception as e:
        logger.error(f"Failed to load content image '{source}': {e}")
        raise
    logger.debug(f"Loaded content image '{source}' ({decoded.width}x{decoded.height})")
    return decoded


async def load_image_async(source: str) -> Image.Image:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_image, source)


def compute_placement(image_size: Tuple[float, float], canvas_size: Tuple[float, float],
                      settings: PlacementSettings, rng: Optional[random.Random] = None) -> Placement:
    """
    Fit the image inside `scale` of the canvas and pick its centre and rotation.

    Jitter is sampled uniformly from `rng` (any object with a `uniform(a, b)` method)
    only for non-zero magnitudes: first the angle, then the x and y offsets.
    """
    if rng is None:
        rng = random.Random()
    image_width, image_height = image_size
    canvas_width, canvas_height = canvas_size

    available = Size(canvas_width * settings.scale, canvas_height * settings.scale)
    ratio = min(available.width / image_width, available.height / image_height)
    target_size = Size(image_width * ratio, image_height * ratio)

    angle_degrees = settings.angle
    if settings.random_angle:
        angle_degrees += rng.uniform(-settings.random_angle, settings.random_angle)
    angle = math.radians(angle_degrees)

    position_x = canvas_width * settings.position.x
    position_y = canvas_height * settings.position.y
    if settings.random_position:
        magnitude = settings.random_position
        position_x += rng.uniform(-magnitude, magnitude) * target_size.width
        position_y += rng.uniform(-magnitude, magnitude) * target_size.height

    return Placement(
        available_size=available,
        ratio=ratio,
        target_size=target_size,
        target_position=Point(position_x, position_y),
        angle=angle,
    )


def draw_content_image(canvas, image: Image.Image, settings: PlacementSettings,
                       rng: Optional[random.Random] = None) -> Placement:
    """Draw `image` centred on its placement, rotated about that point. Restores the transform afterwards."""
    placement = compute_placement((image.width, image.height), (canvas.width, canvas.height), settings, rng)
    logger.info(
        f"Placing content image {image.width}x{image.height} at "
        f"({placement.target_position.x:.1f}, {placement.target_position.y:.1f}), "
        f"size {placement.target_size.width:.1f}x{placement.target_size.height:.1f}, "
        f"angle {math.degrees(placement.angle):.2f} deg"
    )

    width, height = placement.target_size.width, placement.target_size.height
    canvas.save()
    try:
        canvas.translate(placement.target_position.x, placement.target_position.y)
        canvas.rotate(placement.angle)
        canvas.draw_image(image, -width / 2, -height / 2, width, height)
    finally:
        canvas.restore()
    return placement
