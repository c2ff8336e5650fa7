"""
Banner module.
Entry points that resolve settings, compose the banner layers and encode the result.
"""

import asyncio
import random
from typing import Any, Dict, List, Mapping, Optional, Union

from PIL import features

from utils.helpers import write_bytes
from .canvas import Canvas
from .compositor import (
    draw_background,
    draw_banner,
    draw_banner_background,
    draw_banner_foreground,
    draw_banner_title,
    draw_content_panel,
    title_font_size,
)
from .config import CONFIG
from .content_placement import draw_content_image, load_image_async
from .font_manager import FontManager, get_font_manager
from .logger import get_logger
from .settings import (
    DEFAULT_BANNER_SETTINGS,
    DEFAULT_CONTENT_PANEL_SETTINGS,
    DEFAULT_PLACEMENT_SETTINGS,
    BannerSettings,
    ContentPanelSettings,
    PlacementSettings,
    resolve_settings,
)

logger = get_logger(__name__)

SettingsOverride = Optional[Union[Mapping[str, Any], BannerSettings]]
PlacementOverride = Optional[Union[Mapping[str, Any], PlacementSettings]]


class BannerRenderer:
    """Renders banner images. Each call works on its own canvas and settings."""

    def __init__(self, font_mgr: Optional[FontManager] = None, title_family: Optional[str] = None):
        if not features.check('freetype2'):
            logger.warning(
                "Pillow was built without FreeType support. Title text cannot be sized "
                "and will render with the bitmap default font."
            )
        self.font_mgr = font_mgr or get_font_manager()
        self.title_family = title_family or CONFIG['fonts']['title_family']

    def _title_font(self, settings: BannerSettings):
        return self.font_mgr.get_font(self.title_family, title_font_size(settings))

    async def _title_font_async(self, settings: BannerSettings):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._title_font, settings)

    def create_banner_image(self, title: str, settings: SettingsOverride = None) -> bytes:
        """Render the banner (wedges, ribbon, title) and return it as PNG bytes."""
        _settings = resolve_settings(DEFAULT_BANNER_SETTINGS, settings)
        canvas = Canvas(_settings.canvas.size.width, _settings.canvas.size.height)

        draw_banner(title, canvas, _settings, self._title_font(_settings))
        logger.info(f"Rendered banner '{title}' ({canvas.width}x{canvas.height})")
        return canvas.to_png()

    async def create_banner_with_background(self, title: str, settings: SettingsOverride = None) -> Canvas:
        """Render the banner with its content panel and return the live canvas."""
        _settings: ContentPanelSettings = resolve_settings(DEFAULT_CONTENT_PANEL_SETTINGS, settings)
        canvas = Canvas(_settings.canvas.size.width, _settings.canvas.size.height)
        font = await self._title_font_async(_settings)

        draw_banner_background(canvas, _settings)
        draw_content_panel(canvas, _settings)
        draw_banner_foreground(canvas, _settings)
        draw_banner_title(title, canvas, _settings, font)
        logger.info(f"Rendered banner '{title}' with content panel ({canvas.width}x{canvas.height})")
        return canvas

    async def generate_preview_image(self, title: str, target_path: str, content_path: Optional[str] = None,
                                     tags: Optional[List[Dict[str, str]]] = None,
                                     placement: PlacementOverride = None, *,
                                     settings: SettingsOverride = None,
                                     rng: Optional[random.Random] = None) -> None:
        """
        Render a preview with a flat background and an optional content image behind
        the ribbon, then write it to `target_path` as PNG.

        `tags` are accepted for labelling collaborators and are not drawn.
        I/O and decode errors from loading the content image or writing the file propagate.
        """
        _settings = resolve_settings(DEFAULT_BANNER_SETTINGS, settings)
        _placement = resolve_settings(DEFAULT_PLACEMENT_SETTINGS, placement)
        if tags:
            logger.debug(f"Preview '{title}' tags: {[tag.get('label') for tag in tags]}")

        canvas = Canvas(_settings.canvas.size.width, _settings.canvas.size.height)
        font = await self._title_font_async(_settings)

        draw_background(canvas, _settings)
        draw_banner_background(canvas, _settings)
        if content_path:
            image = await load_image_async(content_path)
            draw_content_image(canvas, image, _placement, rng)
        draw_banner_foreground(canvas, _settings)
        draw_banner_title(title, canvas, _settings, font)

        image_buffer = canvas.to_png()
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, write_bytes, str(target_path), image_buffer)
        except OSError as e:
            logger.error(f"Failed to write preview image to {target_path}: {e}", exc_info=True)
            raise
        logger.info(f"Wrote preview '{title}' to {target_path}")


_renderer_singleton: Optional[BannerRenderer] = None


def get_renderer() -> BannerRenderer:
    global _renderer_singleton
    if _renderer_singleton is None:
        _renderer_singleton = BannerRenderer()
    return _renderer_singleton


def create_banner_image(title: str, settings: SettingsOverride = None) -> bytes:
    return get_renderer().create_banner_image(title, settings)


async def create_banner_with_background(title: str, settings: SettingsOverride = None) -> Canvas:
    return await get_renderer().create_banner_with_background(title, settings)


async def generate_preview_image(title: str, target_path: str, content_path: Optional[str] = None,
                                 tags: Optional[List[Dict[str, str]]] = None,
                                 placement: PlacementOverride = None, *,
                                 settings: SettingsOverride = None,
                                 rng: Optional[random.Random] = None) -> None:
    await get_renderer().generate_preview_image(
        title, target_path, content_path, tags, placement, settings=settings, rng=rng
    )
