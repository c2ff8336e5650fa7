import io
import random

import pytest
from PIL import Image

import banner_generator
from banner_generator.canvas import Canvas

BANNER_BG = (0x14, 0x53, 0x98, 255)
BANNER_FG = (0x2c, 0x87, 0xe9, 255)
BOX_BG = (0x1a, 0x22, 0x2b, 255)
BG = (0x22, 0x22, 0x22, 255)
TRANSPARENT = (0, 0, 0, 0)
RED = (255, 0, 0, 255)

STILL = {'scale': 0.5, 'random_position': 0, 'random_angle': 0}


def decode(data):
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def has_white_pixel(image, box):
    colours = image.crop(box).getcolors(maxcolors=1 << 24)
    return any(colour[:3] == (255, 255, 255) for _, colour in colours)


def test_create_banner_image_defaults(renderer):
    image = decode(banner_generator.create_banner_image("TEST", {}))

    assert image.format == 'PNG'
    assert image.size == (1920, 1080)
    assert image.getpixel((10, 10)) == TRANSPARENT
    assert image.getpixel((250, 660)) == BANNER_BG
    assert image.getpixel((1650, 950)) == BANNER_BG
    assert image.getpixel((200, 720)) == BANNER_FG
    assert has_white_pixel(image, (700, 700, 1220, 888))


def test_create_banner_image_without_settings(renderer):
    assert decode(banner_generator.create_banner_image("TEST")).size == (1920, 1080)


def test_create_banner_image_custom_canvas(renderer):
    data = banner_generator.create_banner_image("Small", {
        'canvas': {'size': {'width': 640, 'height': 360}},
        'banner': {'size': {'width': 560, 'height': 64}, 'offset': {'x': 32, 'y': 232}, 'slant': 16},
    })
    image = decode(data)
    assert image.size == (640, 360)
    assert image.getpixel((40, 240)) == BANNER_FG


def test_non_positive_canvas_raises(renderer):
    with pytest.raises(ValueError):
        banner_generator.create_banner_image("TEST", {'canvas': {'size': {'width': 0}}})


@pytest.mark.asyncio
async def test_create_banner_with_background(renderer):
    canvas = await banner_generator.create_banner_with_background("TEST")

    assert isinstance(canvas, Canvas)
    assert (canvas.width, canvas.height) == (1920, 1080)
    assert canvas.image.getpixel((300, 1000)) == BOX_BG
    assert canvas.image.getpixel((200, 720)) == BANNER_FG
    assert canvas.image.getpixel((250, 660)) == BANNER_BG
    assert canvas.image.getpixel((10, 10)) == TRANSPARENT
    assert canvas.to_png().startswith(b'\x89PNG')


@pytest.mark.asyncio
async def test_banner_foreground_masks_content_panel(renderer):
    canvas = await banner_generator.create_banner_with_background(
        "TEST", {'content': {'offset': {'y': -100}}}
    )
    # the panel now starts inside the ribbon, which is drawn over it
    assert canvas.image.getpixel((200, 860)) == BANNER_FG
    assert canvas.image.getpixel((300, 1000)) == BOX_BG


@pytest.mark.asyncio
async def test_generate_preview_without_content(renderer, tmp_path):
    target = tmp_path / "preview.png"
    await banner_generator.generate_preview_image("A", str(target))

    image = decode(target.read_bytes())
    assert image.size == (1920, 1080)
    assert image.getpixel((10, 10)) == BG
    assert image.getpixel((250, 660)) == BANNER_BG
    assert image.getpixel((500, 750)) == BANNER_FG


@pytest.mark.asyncio
async def test_generate_preview_places_content_behind_ribbon(renderer, tmp_path, content_image_path):
    target = tmp_path / "preview.png"
    tags = [{'label': 'news', 'colour': '#f00'}]
    await banner_generator.generate_preview_image("A", str(target), str(content_image_path), tags, STILL)

    image = decode(target.read_bytes())
    # 100x50 fitted into 960x540 -> 960x480 centred on (960, 540)
    assert image.getpixel((960, 400)) == RED
    assert image.getpixel((500, 320)) == RED
    assert image.getpixel((960, 290)) == BG
    assert image.getpixel((500, 750)) == BANNER_FG


@pytest.mark.asyncio
async def test_generate_preview_is_reproducible_with_seeded_random(renderer, tmp_path, content_image_path):
    first, second = tmp_path / "first.png", tmp_path / "second.png"
    await banner_generator.generate_preview_image("A", first, content_image_path, rng=random.Random(3))
    await banner_generator.generate_preview_image("A", second, content_image_path, rng=random.Random(3))
    assert first.read_bytes() == second.read_bytes()


@pytest.mark.asyncio
async def test_generate_preview_accepts_banner_settings(renderer, tmp_path):
    target = tmp_path / "preview.png"
    await banner_generator.generate_preview_image(
        "A", target, settings={'colours': {'bg': '#fff'}, 'canvas': {'size': {'width': 800, 'height': 450}}}
    )
    image = decode(target.read_bytes())
    assert image.size == (800, 450)
    assert image.getpixel((5, 5)) == (255, 255, 255, 255)


@pytest.mark.asyncio
async def test_generate_preview_missing_content_raises(renderer, tmp_path):
    target = tmp_path / "preview.png"
    with pytest.raises(FileNotFoundError):
        await banner_generator.generate_preview_image("A", target, str(tmp_path / "missing.png"))
    assert not target.exists()


@pytest.mark.asyncio
async def test_generate_preview_unwritable_target_raises(renderer, tmp_path):
    with pytest.raises(OSError):
        await banner_generator.generate_preview_image("A", tmp_path / "no-such-dir" / "preview.png")


def test_create_banner_image_accepts_camel_case_colours(renderer):
    image = decode(banner_generator.create_banner_image("TEST", {'colours': {'bannerFg': '#f00'}}))
    assert image.getpixel((200, 720)) == RED
