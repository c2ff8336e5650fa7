"""
Geometry module.
Derives the polygon corners of the banner ribbon, its wedges and the content panel.
"""

from dataclasses import dataclass

from .settings import BannerSettings, ContentPanelSettings, Point


@dataclass(frozen=True)
class Corners:
    """Four corners of a quadrilateral. Not required to be convex or axis-aligned."""
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point


@dataclass(frozen=True)
class WedgePoints:
    """Tips of the two background wedges flanking the banner."""
    left: Point
    right: Point


def get_banner_corners(settings: BannerSettings) -> Corners:
    """Corners of the ribbon: a parallelogram whose bottom edge is shifted right by the slant."""
    banner = settings.banner
    ox, oy = banner.offset.x, banner.offset.y
    width, height = banner.size.width, banner.size.height
    slant = banner.slant
    return Corners(
        top_left=Point(ox, oy),
        top_right=Point(ox + width, oy),
        bottom_left=Point(ox + slant, oy + height),
        bottom_right=Point(ox + width + slant, oy + height),
    )


def get_wedge_points(settings: BannerSettings, corners: Corners = None) -> WedgePoints:
    if corners is None:
        corners = get_banner_corners(settings)
    point_offset = settings.banner.point_offset
    return WedgePoints(
        left=Point(corners.top_left.x + point_offset.x, corners.top_left.y - point_offset.y),
        right=Point(corners.bottom_right.x - point_offset.x, corners.bottom_right.y + point_offset.y),
    )


def get_content_panel_corners(settings: ContentPanelSettings) -> Corners:
    """
    Corners of the content panel hanging below the banner.

    The panel is anchored at the banner's bottom-left corner plus the content offset.
    Its right-hand corners share the y of the bottom-left corner, and the bottom-right
    corner is pulled back by the content slant.
    """
    anchor = get_banner_corners(settings).bottom_left
    content = settings.content
    top_left = Point(anchor.x + content.offset.x, anchor.y + content.offset.y)
    bottom_y = top_left.y + content.size.height
    top_right = Point(top_left.x + content.size.width, bottom_y)
    return Corners(
        top_left=top_left,
        top_right=top_right,
        bottom_left=Point(top_left.x + content.slant, bottom_y),
        bottom_right=Point(top_right.x - content.slant, bottom_y),
    )
