import re
import logging
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

COLOR_NAME_MAP = {
    "white": (255, 255, 255, 255),
    "black": (0, 0, 0, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255), # standard green, not lime
    "blue": (0, 0, 255, 255),
    "yellow": (255, 255, 0, 255),
    "cyan": (0, 255, 255, 255),
    "magenta": (255, 0, 255, 255),
    "silver": (192, 192, 192, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
    "maroon": (128, 0, 0, 255),
    "olive": (128, 128, 0, 255),
    "purple": (128, 0, 128, 255),
    "teal": (0, 128, 128, 255),
    "navy": (0, 0, 128, 255),
    "transparent": (0, 0, 0, 0)
}

RGBA_PATTERN = re.compile(r'rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d*[.]?\d+)\s*\)')
RGB_PATTERN = re.compile(r'rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)')


def _clamp(value: int) -> int:
    return max(0, min(255, value))


def _parse_hex(hex_val: str) -> Optional[RGBA]:
    """Parse the digits of #rgb, #rgba, #rrggbb or #rrggbbaa."""
    if len(hex_val) in (3, 4):
        hex_val = ''.join(c * 2 for c in hex_val)
    if len(hex_val) == 6:
        hex_val += 'ff'
    if len(hex_val) != 8:
        return None
    r, g, b, a = (int(hex_val[i:i + 2], 16) for i in range(0, 8, 2))
    return (r, g, b, a)


def parse_color(color_input: Any, default_color: Optional[RGBA] = (0, 0, 0, 255)) -> Optional[RGBA]:
    """Parses a colour token (hex, rgb(), rgba(), name string, or tuple) into an RGBA tuple."""
    if isinstance(color_input, (tuple, list)):
        if len(color_input) in (3, 4) and all(isinstance(c, int) for c in color_input):
            channels = [_clamp(c) for c in color_input]
            if len(channels) == 3:
                channels.append(255)
            return tuple(channels)
        logger.warning(f"Invalid tuple/list format for color: {color_input}. Using default.")
        return default_color

    if not isinstance(color_input, str):
        logger.warning(f"Invalid color type provided: {type(color_input)}. Expected string or tuple/list. Using default.")
        return default_color

    color_str = color_input.strip().lower()

    if color_str in COLOR_NAME_MAP:
        return COLOR_NAME_MAP[color_str]

    if color_str.startswith('#'):
        try:
            parsed = _parse_hex(color_str[1:])
        except ValueError:
            parsed = None
        if parsed is None:
            logger.warning(f"Invalid hex color format: '{color_str}'. Using default.")
            return default_color
        return parsed

    rgba_match = RGBA_PATTERN.fullmatch(color_str)
    if rgba_match:
        r, g, b = (int(v) for v in rgba_match.groups()[:3])
        alpha = float(rgba_match.group(4)) # 0.0 to 1.0
        if max(r, g, b) > 255:
            logger.warning(f"Channel out of range in rgba color: '{color_str}'. Using default.")
            return default_color
        return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * 255)))

    rgb_match = RGB_PATTERN.fullmatch(color_str)
    if rgb_match:
        r, g, b = (int(v) for v in rgb_match.groups())
        if max(r, g, b) > 255:
            logger.warning(f"Channel out of range in rgb color: '{color_str}'. Using default.")
            return default_color
        return (r, g, b, 255)

    logger.warning(f"Unrecognized color format: '{color_str}'. Using default.")
    return default_color


def write_bytes(path: str, data: bytes) -> str:
    """Write `data` to `path`, returning the path."""
    with open(path, 'wb') as f:
        f.write(data)
    return path
