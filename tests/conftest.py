import pytest
from PIL import Image

import banner_generator.banner as banner_module
from banner_generator.banner import BannerRenderer
from banner_generator.font_manager import FontManager


class RecordingCanvas:
    """Stands in for Canvas and records every drawing call in order."""

    def __init__(self, width=1920, height=1080):
        self.width = width
        self.height = height
        self.calls = []
        self._path = []

    def begin_path(self):
        self._path = []

    def move_to(self, x, y):
        self._path.append((x, y))

    def line_to(self, x, y):
        self._path.append((x, y))

    def close_path(self):
        self.calls.append(('close_path',))

    def fill(self, colour):
        self.calls.append(('fill', colour, list(self._path)))

    def fill_rect(self, x, y, width, height, colour):
        self.calls.append(('fill_rect', colour, (x, y, width, height)))

    def fill_text(self, text, x, y, font, colour, max_width=None, align='center', baseline='middle'):
        self.calls.append(('fill_text', text, x, y, colour, max_width))

    def save(self):
        self.calls.append(('save',))

    def restore(self):
        self.calls.append(('restore',))

    def translate(self, dx, dy):
        self.calls.append(('translate', dx, dy))

    def rotate(self, angle):
        self.calls.append(('rotate', angle))

    def draw_image(self, image, x, y, width, height):
        self.calls.append(('draw_image', x, y, width, height))

    def drawn(self):
        return [call for call in self.calls if call[0] in ('fill', 'fill_rect', 'fill_text', 'draw_image')]


@pytest.fixture
def recording_canvas():
    return RecordingCanvas()


@pytest.fixture
def font_mgr(tmp_path):
    # no bucket, no API key: families resolve to Pillow's built-in font
    return FontManager(cache_dir=str(tmp_path / "font-cache"))


@pytest.fixture
def renderer(font_mgr, monkeypatch):
    instance = BannerRenderer(font_mgr=font_mgr)
    monkeypatch.setattr(banner_module, "_renderer_singleton", instance)
    return instance


@pytest.fixture
def content_image_path(tmp_path):
    path = tmp_path / "content.png"
    Image.new("RGB", (100, 50), (255, 0, 0)).save(path)
    return path
