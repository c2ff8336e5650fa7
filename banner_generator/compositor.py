"""
Compositor module.
Builds closed polygon paths and fills the banner layers in their fixed order:
background, banner wedges, content panel, banner foreground, title.
"""

from .config import CONFIG
from .geometry import get_banner_corners, get_content_panel_corners, get_wedge_points
from .logger import get_logger
from .settings import BannerSettings, ContentPanelSettings, Point

logger = get_logger(__name__)

TITLE_SIZE_FACTOR = CONFIG['fonts']['title_size_factor']


def create_path(canvas, *points: Point) -> None:
    """Start a new path through `points` in order and close it back to the first."""
    canvas.begin_path()
    first, rest = points[0], points[1:]
    canvas.move_to(first.x, first.y)
    for point in rest:
        canvas.line_to(point.x, point.y)
    canvas.close_path()


def title_font_size(settings: BannerSettings) -> int:
    return max(1, int(round(settings.banner.size.height * TITLE_SIZE_FACTOR)))


def draw_background(canvas, settings: BannerSettings) -> None:
    """Fill the whole canvas with the background colour."""
    canvas.fill_rect(0, 0, canvas.width, canvas.height, settings.colours['bg'])


def draw_banner_background(canvas, settings: BannerSettings) -> None:
    corners = get_banner_corners(settings)
    points = get_wedge_points(settings, corners)
    colour = settings.colours['banner_bg']

    create_path(canvas, corners.top_left, points.left, corners.bottom_left)
    canvas.fill(colour)
    create_path(canvas, corners.bottom_right, points.right, corners.top_right)
    canvas.fill(colour)


def draw_content_panel(canvas, settings: ContentPanelSettings) -> None:
    corners = get_content_panel_corners(settings)
    logger.debug(f"Content panel corners: {corners}")
    create_path(canvas, corners.top_left, corners.bottom_left, corners.bottom_right, corners.top_right)
    canvas.fill(settings.colours['box_bg'])


def draw_banner_foreground(canvas, settings: BannerSettings) -> None:
    # drawn after the wedges and panel so the ribbon masks their edges
    corners = get_banner_corners(settings)
    create_path(canvas, corners.top_left, corners.top_right, corners.bottom_right, corners.bottom_left)
    canvas.fill(settings.colours['banner_fg'])


def draw_banner_title(title: str, canvas, settings: BannerSettings, font) -> None:
    """Centre the title on the ribbon, condensed to the banner width if needed."""
    banner = settings.banner
    canvas.fill_text(
        title,
        banner.offset.x + (banner.size.width + banner.slant) / 2,
        banner.offset.y + banner.size.height / 2,
        font,
        settings.colours['text'],
        max_width=banner.size.width,
        align='center',
        baseline='middle',
    )


def draw_banner(title: str, canvas, settings: BannerSettings, font) -> None:
    draw_banner_background(canvas, settings)
    draw_banner_foreground(canvas, settings)
    draw_banner_title(title, canvas, settings, font)
