"""
Settings module.
Typed banner configuration and the resolver that merges caller overrides into defaults.
"""

import copy
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional, Union

from .config import CONFIG
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Point:
    """A 2-D coordinate in canvas pixel space."""
    x: float
    y: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Point":
        return cls(x=data['x'], y=data['y'])


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Size":
        return cls(width=data['width'], height=data['height'])


@dataclass(frozen=True)
class CanvasSettings:
    size: Size

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanvasSettings":
        return cls(size=Size.from_dict(data['size']))


@dataclass(frozen=True)
class BannerShape:
    """Size and position of the slanted ribbon. `slant` skews the bottom edge to the right."""
    size: Size
    offset: Point
    point_offset: Point
    slant: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BannerShape":
        return cls(
            size=Size.from_dict(data['size']),
            offset=Point.from_dict(data['offset']),
            point_offset=Point.from_dict(data['point_offset']),
            slant=data['slant'],
        )


@dataclass(frozen=True)
class ContentPanel:
    # margin is carried for layout but not used by the corner computation
    size: Size
    offset: Point
    margin: float
    slant: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContentPanel":
        return cls(
            size=Size.from_dict(data['size']),
            offset=Point.from_dict(data['offset']),
            margin=data['margin'],
            slant=data['slant'],
        )


@dataclass(frozen=True)
class BannerSettings:
    canvas: CanvasSettings
    banner: BannerShape
    colours: Dict[str, str]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BannerSettings":
        return cls(
            canvas=CanvasSettings.from_dict(data['canvas']),
            banner=BannerShape.from_dict(data['banner']),
            colours=dict(data['colours']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ContentPanelSettings(BannerSettings):
    content: ContentPanel

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContentPanelSettings":
        return cls(
            canvas=CanvasSettings.from_dict(data['canvas']),
            banner=BannerShape.from_dict(data['banner']),
            colours=dict(data['colours']),
            content=ContentPanel.from_dict(data['content']),
        )


# Keys of the older size-factor/wiggle-room placement variant
LEGACY_PLACEMENT_KEYS = {
    'size_factor': 'scale',
    'sizeFactor': 'scale',
    'wiggle_room': 'random_position',
    'wiggleRoom': 'random_position',
    'angle_radians': 'random_angle',
    'angleRadians': 'random_angle',
    'randomPosition': 'random_position',
    'randomAngle': 'random_angle',
}


@dataclass(frozen=True)
class PlacementSettings:
    """
    Placement of a content image on the canvas.

    position is a fractional anchor (0..1 of the canvas), scale a fraction of the
    canvas size, angle the base rotation in degrees. random_position jitters the
    anchor by up to that fraction of the drawn size, random_angle by up to that many
    degrees.
    """
    position: Point
    scale: float
    angle: float
    random_position: float
    random_angle: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlacementSettings":
        data = normalize_placement_keys(data)
        return cls(
            position=Point.from_dict(data['position']),
            scale=data['scale'],
            angle=data['angle'],
            random_position=data['random_position'],
            random_angle=data['random_angle'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# camelCase spellings of banner settings keys
SETTINGS_KEY_ALIASES = {
    'pointOffset': 'point_offset',
    'bannerBg': 'banner_bg',
    'bannerFg': 'banner_fg',
    'boxBg': 'box_bg',
}


def normalize_settings_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively rename camelCase banner keys to their snake_case names. Snake_case wins on conflict."""
    normalized = {}
    for key, value in data.items():
        target = SETTINGS_KEY_ALIASES.get(key, key)
        if target != key and target in data:
            continue
        if isinstance(value, Mapping):
            value = normalize_settings_keys(value)
        normalized[target] = value
    return normalized


def _warn_unknown_keys(known: Mapping[str, Any], override: Mapping[str, Any], path: str = '') -> None:
    for key, value in override.items():
        name = f"{path}.{key}" if path else str(key)
        if key not in known:
            logger.warning(f"Unknown settings key '{name}' has no effect")
        elif isinstance(value, Mapping) and isinstance(known[key], Mapping):
            _warn_unknown_keys(known[key], value, name)


def normalize_placement_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename legacy placement keys to their current names. Current names win on conflict."""
    normalized = {}
    for key, value in data.items():
        target = LEGACY_PLACEMENT_KEYS.get(key, key)
        if target != key and target in data:
            continue
        normalized[target] = value
    return normalized


Settings = Union[BannerSettings, PlacementSettings]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge `override` into a copy of `base`.

    Nested mappings present on both sides are merged key by key; any other value in
    `override` (lists, numbers, strings) replaces the base value wholesale. Keys whose
    override value is None keep the base value. Neither argument is modified.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def resolve_settings(defaults: Settings, override: Optional[Union[Mapping[str, Any], Settings]] = None) -> Settings:
    """
    Merge a partial override (mapping or full settings object) into `defaults`, returning a new object.

    Mapping overrides may use camelCase or legacy key names. Keys that match no
    setting are logged as warnings and otherwise ignored.
    """
    base = defaults.to_dict()
    if override is None:
        override = {}
    elif hasattr(override, 'to_dict'):
        override = override.to_dict()
    else:
        if isinstance(defaults, PlacementSettings):
            override = normalize_placement_keys(override)
        override = normalize_settings_keys(override)
        _warn_unknown_keys(base, override)
    return type(defaults).from_dict(deep_merge(base, override))


def _settings_source(*sections: str) -> Dict[str, Any]:
    return {section: CONFIG[section] for section in sections}


DEFAULT_BANNER_SETTINGS = BannerSettings.from_dict(_settings_source('canvas', 'banner', 'colours'))
DEFAULT_CONTENT_PANEL_SETTINGS = ContentPanelSettings.from_dict(
    _settings_source('canvas', 'banner', 'colours', 'content')
)
DEFAULT_PLACEMENT_SETTINGS = PlacementSettings.from_dict(CONFIG['placement'])

__all__ = [
    'Point',
    'Size',
    'CanvasSettings',
    'BannerShape',
    'ContentPanel',
    'BannerSettings',
    'ContentPanelSettings',
    'PlacementSettings',
    'deep_merge',
    'resolve_settings',
    'DEFAULT_BANNER_SETTINGS',
    'DEFAULT_CONTENT_PANEL_SETTINGS',
    'DEFAULT_PLACEMENT_SETTINGS',
]
