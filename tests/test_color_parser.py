import pytest

from utils.helpers import parse_color


@pytest.mark.parametrize("color_str, expected", [
    ("rgba(255, 255, 255, 1)", (255, 255, 255, 255)),
    ("rgba(139, 87, 42, 0.66)", (139, 87, 42, 168)),
    ("rgb(0, 0, 255)", (0, 0, 255, 255)),
    ("#FF0000", (255, 0, 0, 255)),
    ("#0F0", (0, 255, 0, 255)),
    ("#fff", (255, 255, 255, 255)),
    ("#222", (34, 34, 34, 255)),
    ("#0008", (0, 0, 0, 136)),
    ("#000000FF", (0, 0, 0, 255)),
    ("#00000080", (0, 0, 0, 128)),
    ("#2c87e9", (44, 135, 233, 255)),
    ("white", (255, 255, 255, 255)),
    ("transparent", (0, 0, 0, 0)),
    ("rgba(50, 50, 50, 1.5)", (50, 50, 50, 255)),
    ((10, 20, 30), (10, 20, 30, 255)),
    ((300, 20, 30, 40), (255, 20, 30, 40)),
])
def test_parse_color(color_str, expected):
    assert parse_color(color_str) == expected


@pytest.mark.parametrize("color_str", ["invalid-color", "rgb(300, 0, 0)", "#12345", "#ggg", 42])
def test_parse_color_falls_back_to_default(color_str):
    assert parse_color(color_str, default_color=None) is None
    assert parse_color(color_str) == (0, 0, 0, 255)
