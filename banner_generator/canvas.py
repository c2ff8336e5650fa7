"""
Canvas module.
A Pillow-backed 2D drawing surface with paths, affine transforms, text and image blits.
"""

import io
import math
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from utils.helpers import parse_color
from .logger import get_logger

logger = get_logger(__name__)

IDENTITY = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# polygon edges are rasterised at this multiple and box-filtered down for anti-aliasing
SUPERSAMPLE = 4

# Pillow text anchors: horizontal letter + vertical letter
ALIGN_ANCHORS = {'left': 'l', 'start': 'l', 'center': 'm', 'right': 'r', 'end': 'r'}
BASELINE_ANCHORS = {
    'top': 'a',
    'hanging': 'a',
    'middle': 'm',
    'alphabetic': 's',
    'ideographic': 'd',
    'bottom': 'd',
}


def rotate_image(image: Image.Image, angle: float) -> Image.Image:
    """Rotate image counter-clockwise by `angle` degrees, expanding to fit."""
    if angle == 0:
        return image
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return image.rotate(angle, expand=True, resample=Image.Resampling.BICUBIC)


class Canvas:
    """
    Fixed-size RGBA drawing surface, transparent at creation.

    The transform is a 2x3 affine matrix (a, b, c, d, e, f) mapping user space to
    pixels as x' = a*x + c*y + e, y' = b*x + d*y + f. Images follow the rotation of
    the matrix; text is drawn upright at its transformed anchor. Every fill, text run
    and image is composited source-over onto what is already drawn.
    """

    def __init__(self, width: float, height: float):
        width, height = int(round(width)), int(round(height))
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.image = Image.new('RGBA', (width, height), (0, 0, 0, 0))
        self._matrix = IDENTITY
        self._saved: List[Tuple[float, ...]] = []
        self._subpaths: List[List[Tuple[float, float]]] = []

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    # --- transform state ---

    def save(self):
        self._saved.append(self._matrix)

    def restore(self):
        if self._saved:
            self._matrix = self._saved.pop()

    def translate(self, dx: float, dy: float):
        a, b, c, d, e, f = self._matrix
        self._matrix = (a, b, c, d, a * dx + c * dy + e, b * dx + d * dy + f)

    def rotate(self, angle: float):
        """Rotate the user space by `angle` radians (clockwise on screen)."""
        cos, sin = math.cos(angle), math.sin(angle)
        a, b, c, d, e, f = self._matrix
        self._matrix = (
            a * cos + c * sin,
            b * cos + d * sin,
            c * cos - a * sin,
            d * cos - b * sin,
            e,
            f,
        )

    @property
    def transform(self) -> Tuple[float, ...]:
        return self._matrix

    @property
    def rotation(self) -> float:
        """Rotation of the current transform in radians."""
        a, b = self._matrix[0], self._matrix[1]
        return math.atan2(b, a)

    def _apply(self, x: float, y: float) -> Tuple[float, float]:
        a, b, c, d, e, f = self._matrix
        return (a * x + c * y + e, b * x + d * y + f)

    # --- paths ---

    def begin_path(self):
        self._subpaths = []

    def move_to(self, x: float, y: float):
        self._subpaths.append([self._apply(x, y)])

    def line_to(self, x: float, y: float):
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append(self._apply(x, y))

    def close_path(self):
        # the next segment starts from the first point of the closed sub-path
        if self._subpaths and self._subpaths[-1]:
            self._subpaths.append([self._subpaths[-1][0]])

    def fill(self, colour):
        rgba = parse_color(colour)
        for subpath in self._subpaths:
            if len(subpath) < 3:
                continue
            self._fill_polygon(subpath, rgba)

    def fill_rect(self, x: float, y: float, width: float, height: float, colour):
        corners = [
            self._apply(x, y),
            self._apply(x + width, y),
            self._apply(x + width, y + height),
            self._apply(x, y + height),
        ]
        self._fill_polygon(corners, parse_color(colour))

    def _fill_polygon(self, points: List[Tuple[float, float]], rgba: Tuple[int, int, int, int]):
        """Fill a polygon given in pixel space with an anti-aliased edge."""
        alpha = rgba[3]
        if alpha == 0:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        left, top = max(0, math.floor(min(xs))), max(0, math.floor(min(ys)))
        right, bottom = min(self.width, math.ceil(max(xs))), min(self.height, math.ceil(max(ys)))
        if right <= left or bottom <= top:
            return

        size = (right - left, bottom - top)
        mask = Image.new('L', (size[0] * SUPERSAMPLE, size[1] * SUPERSAMPLE), 0)
        scaled = [((px - left) * SUPERSAMPLE, (py - top) * SUPERSAMPLE) for px, py in points]
        ImageDraw.Draw(mask).polygon(scaled, fill=255)
        mask = mask.resize(size, Image.Resampling.BOX)
        if alpha < 255:
            mask = mask.point(lambda v: v * alpha // 255)

        layer = Image.new('RGBA', size, rgba[:3] + (0,))
        layer.putalpha(mask)
        self.image.alpha_composite(layer, (left, top))

    def _composite(self, layer: Image.Image, x: int, y: int):
        """Composite an RGBA layer source-over with its top-left at (x, y), clipped to the canvas."""
        if x >= self.width or y >= self.height or x + layer.width <= 0 or y + layer.height <= 0:
            return
        self.image.alpha_composite(layer, (max(x, 0), max(y, 0)), (max(-x, 0), max(-y, 0)))

    # --- text ---

    def fill_text(self, text: str, x: float, y: float, font: ImageFont.FreeTypeFont, colour,
                  max_width: Optional[float] = None, align: str = 'center', baseline: str = 'middle'):
        """
        Draw a single line of text anchored at (x, y).

        When max_width is given and the text is wider, the rendered line is condensed
        horizontally to exactly max_width. A non-positive max_width draws nothing.
        """
        if not text:
            return
        if max_width is not None and max_width <= 0:
            return
        anchor = ALIGN_ANCHORS[align] + BASELINE_ANCHORS[baseline]
        fill = parse_color(colour)
        origin_x, origin_y = self._apply(x, y)
        text_width = font.getlength(text)

        left, top, right, bottom = font.getbbox(text, anchor=anchor)
        layer = Image.new('RGBA', (max(1, math.ceil(right - left)), max(1, math.ceil(bottom - top))), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text((-left, -top), text, font=font, fill=fill, anchor=anchor)

        factor = 1.0
        if max_width is not None and text_width > max_width:
            factor = max_width / text_width
            layer = layer.resize((max(1, round(layer.width * factor)), layer.height), Image.Resampling.LANCZOS)
            logger.debug(f"Condensed text '{text}' by {factor:.3f} to fit {max_width}px")
        self._composite(layer, round(origin_x + left * factor), round(origin_y + top))

    # --- images ---

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float):
        """Draw `image` into the destination rectangle, following the current rotation."""
        target = (max(1, round(width)), max(1, round(height)))
        layer = image if image.mode == 'RGBA' else image.convert('RGBA')
        layer = layer.resize(target, Image.Resampling.LANCZOS)
        layer = rotate_image(layer, -math.degrees(self.rotation))

        centre_x, centre_y = self._apply(x + width / 2, y + height / 2)
        paste_x = round(centre_x - layer.width / 2)
        paste_y = round(centre_y - layer.height / 2)
        self._composite(layer, paste_x, paste_y)

    # --- encoding ---

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format='PNG')
        return buffer.getvalue()
