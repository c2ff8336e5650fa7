# banner_generator/__init__.py

"""
Banner generation module.
Composes slanted title banners with optional content panels and preview images.

The Staatliches title font is not bundled. Drop Staatliches-Regular.ttf into
banner_generator/fonts/, point BANNER_FONT_PATH at a copy, or set GOOGLE_API_KEY so
it can be fetched. Otherwise titles render in Pillow's built-in font.
"""

# Import configuration and logging setup first
from .config import CONFIG
from .logger import get_logger

from .settings import (
    BannerSettings,
    ContentPanelSettings,
    PlacementSettings,
    DEFAULT_BANNER_SETTINGS,
    DEFAULT_CONTENT_PANEL_SETTINGS,
    DEFAULT_PLACEMENT_SETTINGS,
    resolve_settings,
)
from .canvas import Canvas
from .font_manager import FontManager, get_font_manager
from .banner import (
    BannerRenderer,
    create_banner_image,
    create_banner_with_background,
    generate_preview_image,
)

logger = get_logger(__name__)
logger.debug("Banner generator module initialized")

__all__ = [
    'create_banner_image',
    'create_banner_with_background',
    'generate_preview_image',
    'BannerRenderer',
    'BannerSettings',
    'ContentPanelSettings',
    'PlacementSettings',
    'DEFAULT_BANNER_SETTINGS',
    'DEFAULT_CONTENT_PANEL_SETTINGS',
    'DEFAULT_PLACEMENT_SETTINGS',
    'resolve_settings',
    'Canvas',
    'FontManager',
    'get_font_manager',
    'CONFIG',
    'get_logger'
]
