"""
Font management module for the banner generator.
Registers bundled fonts and resolves families through a local cache, S3 storage and
the Google Fonts API.
"""

import os
import logging
from typing import Dict, Optional

import boto3
import requests
from botocore.exceptions import ClientError
from fontTools.ttLib import TTFont
from PIL import ImageFont

from .config import CONFIG

# Setup logger for this module
logger = logging.getLogger(__name__)

# Constants
DEFAULT_FONT_S3_PREFIX = "fonts/"
GOOGLE_FONTS_API_URL = "https://www.googleapis.com/webfonts/v1/webfonts"
GOOGLE_FONTS_VARIANT = "regular"


def read_family_name(font_path: str) -> str:
    """Read the family name from a font's name table, falling back to the file name."""
    with TTFont(font_path, lazy=True) as font:
        family = font["name"].getBestFamilyName()
    if not family:
        family = os.path.splitext(os.path.basename(font_path))[0].split("-")[0]
        logger.warning(f"Font {font_path} has no family name record. Using '{family}'.")
    return family


class FontManager:
    """
    Resolves font families to TrueType files and loads them with Pillow.

    Lookup order: registered fonts, the local cache directory, S3 (when a bucket is
    configured), then the Google Fonts API (when an API key is configured).
    """

    def __init__(self, s3_bucket_name: Optional[str] = None, google_api_key: Optional[str] = None,
                 default_font_path: Optional[str] = None, cache_dir: Optional[str] = None):
        """
        Args:
            s3_bucket_name: Bucket used as a shared font cache, or None to skip S3
            google_api_key: Google Fonts API key, or None to skip Google Fonts
            default_font_path: Font used when a family cannot be resolved
            cache_dir: Directory where downloaded fonts are kept
        """
        self.s3_bucket_name = s3_bucket_name
        self.google_api_key = google_api_key
        self.default_font_path = default_font_path
        self.cache_dir = cache_dir or CONFIG['fonts']['cache_dir']
        self._registered: Dict[str, str] = {}
        self._s3_client = None

        if self.default_font_path and not os.path.exists(self.default_font_path):
            logger.warning(
                f"Default font not found at {self.default_font_path}. "
                f"Unresolved families will fall back to Pillow's built-in font."
            )

    @property
    def s3_client(self):
        if self._s3_client is None:
            self._s3_client = boto3.client("s3")
        return self._s3_client

    def register_font(self, font_path: str, family: Optional[str] = None) -> str:
        """
        Register a font file under a family name and return the name.

        Raises:
            FileNotFoundError: if the font file does not exist
        """
        if not os.path.isfile(font_path):
            raise FileNotFoundError(f"Font file not found: {font_path}")
        if family is None:
            family = read_family_name(font_path)
        self._registered[family.lower()] = font_path
        logger.info(f"Registered font family '{family}' from {font_path}")
        return family

    def is_registered(self, family_name: str) -> bool:
        return family_name.lower() in self._registered

    def get_font(self, family_name: str, font_size: int) -> ImageFont.FreeTypeFont:
        """Load a family at `font_size` px, falling back to the default font and then Pillow's own."""
        font_path = self.get_font_path(family_name)
        if not font_path:
            if self.default_font_path and os.path.exists(self.default_font_path):
                logger.warning(f"Could not resolve font family '{family_name}'. Using default font {self.default_font_path}.")
                font_path = self.default_font_path
            else:
                logger.warning(f"Could not resolve font family '{family_name}'. Using Pillow's built-in font.")
                return ImageFont.load_default(size=font_size)

        try:
            font = ImageFont.truetype(font_path, font_size)
            logger.debug(f"Loaded font: {font_path} size: {font_size}")
            return font
        except OSError as e:
            logger.warning(f"Failed to load font {font_path} with size {font_size}: {e}. Using Pillow's built-in font.")
            return ImageFont.load_default(size=font_size)

    def get_font_path(self, family_name: str) -> Optional[str]:
        """Get the path to a font file for `family_name`, fetching it if necessary."""
        registered = self._registered.get(family_name.lower())
        if registered:
            return registered

        font_filename = self._generate_font_filename(family_name)
        local_font_path = os.path.join(self.cache_dir, font_filename)

        # 1. Local cache
        if os.path.exists(local_font_path):
            logger.info(f"Font found in cache: {local_font_path}")
            return local_font_path

        # 2. S3
        s3_key = self._get_s3_key(font_filename)
        if self.s3_bucket_name and self._check_s3_exists(s3_key):
            if self._download_from_s3(s3_key, local_font_path):
                return local_font_path
            logger.warning(f"Failed to download {s3_key} from S3. Attempting Google Fonts.")

        # 3. Google Fonts API
        font_family_data = self._fetch_from_google_fonts_api(family_name)
        if font_family_data:
            font_url = font_family_data.get("files", {}).get(GOOGLE_FONTS_VARIANT)
            if font_url and self._download_font_url(font_url, local_font_path):
                if self.s3_bucket_name:
                    self._upload_to_s3(local_font_path, s3_key)
                return local_font_path
            logger.warning(f"No '{GOOGLE_FONTS_VARIANT}' file listed for font family '{family_name}'.")

        return None

    def _generate_font_filename(self, family_name: str) -> str:
        safe_family_name = family_name.replace(" ", "")
        return f"{safe_family_name}-{GOOGLE_FONTS_VARIANT}.ttf"

    def _get_s3_key(self, font_filename: str) -> str:
        return f"{DEFAULT_FONT_S3_PREFIX}{font_filename}"

    def _check_s3_exists(self, s3_key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.s3_bucket_name, Key=s3_key)
            logger.info(f"Font found in S3: s3://{self.s3_bucket_name}/{s3_key}")
            return True
        except ClientError as e:
            if e.response['Error']['Code'] == '404':
                logger.info(f"Font not found in S3: s3://{self.s3_bucket_name}/{s3_key}")
            else:
                logger.error(f"Error checking S3 for {s3_key}: {e}")
            return False

    def _download_from_s3(self, s3_key: str, local_path: str) -> bool:
        try:
            os.makedirs(os.path.dirname(local_path) or ".", exist_ok=True)
            self.s3_client.download_file(self.s3_bucket_name, s3_key, local_path)
            logger.info(f"Downloaded {s3_key} from S3 to {local_path}")
            return True
        except ClientError as e:
            logger.error(f"Error downloading {s3_key} from S3: {e}")
            return False

    def _fetch_from_google_fonts_api(self, family_name: str) -> Optional[dict]:
        """Query the Google Fonts API for a font family."""
        if not self.google_api_key:
            logger.debug("Skipping Google Fonts API lookup: API key is missing.")
            return None

        params = {"key": self.google_api_key, "family": family_name}
        try:
            response = requests.get(GOOGLE_FONTS_API_URL, params=params, timeout=10)
            response.raise_for_status()
            items = response.json().get("items")
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching font '{family_name}' from Google Fonts API: {e}")
            return None
        except ValueError as e:
            logger.error(f"Error parsing Google Fonts API response for '{family_name}': {e}")
            return None

        if not items:
            logger.warning(f"Font family '{family_name}' not found in Google Fonts API response.")
            return None
        return items[0]

    def _download_font_url(self, font_url: str, local_path: str) -> bool:
        try:
            response = requests.get(font_url, stream=True, timeout=20)
            response.raise_for_status()
            os.makedirs(os.path.dirname(local_path) or ".", exist_ok=True)
            with open(local_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
            logger.info(f"Downloaded font from {font_url} to {local_path}")
            return True
        except requests.exceptions.RequestException as e:
            logger.error(f"Error downloading font from URL {font_url}: {e}")
            if os.path.exists(local_path):
                os.remove(local_path)
            return False

    def _upload_to_s3(self, local_path: str, s3_key: str) -> bool:
        try:
            self.s3_client.upload_file(local_path, self.s3_bucket_name, s3_key)
            logger.info(f"Uploaded {local_path} to s3://{self.s3_bucket_name}/{s3_key}")
            return True
        except ClientError as e:
            logger.error(f"Error uploading {local_path} to S3 ({s3_key}): {e}")
            return False


_font_manager_singleton = None


def get_font_manager() -> FontManager:
    """Shared FontManager built from CONFIG, with the bundled title font registered when present."""
    global _font_manager_singleton
    if _font_manager_singleton is None:
        fonts = CONFIG['fonts']
        manager = FontManager(
            s3_bucket_name=fonts['s3_bucket'],
            google_api_key=fonts['google_api_key'],
            default_font_path=fonts['default_font_path'],
            cache_dir=fonts['cache_dir'],
        )
        if os.path.isfile(fonts['default_font_path']):
            manager.register_font(fonts['default_font_path'], fonts['title_family'])
        _font_manager_singleton = manager
    return _font_manager_singleton
