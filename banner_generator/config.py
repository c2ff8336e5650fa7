"""
Configuration settings for the banner generator.
Contains default banner geometry, colours and deployment options.
"""

import os

CONFIG = {
    'canvas': {
        'size': {'width': 1920, 'height': 1080},
    },
    'banner': {
        'size': {'width': 1680, 'height': 192},
        'offset': {'x': 96, 'y': 696},
        'point_offset': {'x': 256, 'y': 128},  # wedge tips
        'slant': 48,
    },
    'colours': {
        'banner_bg': '#145398',
        'banner_fg': '#2c87e9',
        'box_bg': '#1a222b',
        'text': '#fff',
        'bg': '#222',
    },
    'content': {
        'size': {'width': 1200, 'height': 300},
        'offset': {'x': 0, 'y': 0},
        'margin': 24,
        'slant': 48,
    },
    'placement': {
        'position': {'x': 0.5, 'y': 0.5},
        'scale': 0.9,
        'angle': 0,
        'random_position': 0.05,
        'random_angle': 12,  # degrees
    },
    'fonts': {
        'title_family': 'Staatliches',
        'title_size_factor': 1.1,
        'default_font_path': os.environ.get(
            'BANNER_FONT_PATH',
            os.path.join(os.path.dirname(__file__), 'fonts', 'Staatliches-Regular.ttf'),
        ),
        'cache_dir': os.environ.get('BANNER_FONT_CACHE_DIR', '/tmp'),
        's3_bucket': os.environ.get('FONT_S3_BUCKET'),
        'google_api_key': os.environ.get('GOOGLE_API_KEY'),
    },
    'debug': {
        'verbose_logging': os.environ.get('BANNER_VERBOSE_LOGGING', 'false').lower() in ('1', 'true', 'yes'),
    },
}
