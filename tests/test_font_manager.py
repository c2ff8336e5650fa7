import logging
import os

import pytest
import requests
from PIL import ImageFont

import banner_generator.font_manager as font_module
from banner_generator.font_manager import FontManager


def test_register_missing_font_raises(font_mgr, tmp_path):
    with pytest.raises(FileNotFoundError):
        font_mgr.register_font(str(tmp_path / "Nope-Regular.ttf"), "Nope")


def test_registered_font_resolves_case_insensitively(font_mgr, tmp_path):
    font_file = tmp_path / "Staatliches-Regular.ttf"
    font_file.write_bytes(b"placeholder")
    assert font_mgr.register_font(str(font_file), "Staatliches") == "Staatliches"
    assert font_mgr.is_registered("staatliches")
    assert font_mgr.get_font_path("STAATLICHES") == str(font_file)


def test_register_reads_family_name_when_not_given(font_mgr, tmp_path, monkeypatch):
    font_file = tmp_path / "Custom-Regular.ttf"
    font_file.write_bytes(b"placeholder")
    monkeypatch.setattr(font_module, "read_family_name", lambda path: "Custom Display")
    assert font_mgr.register_font(str(font_file)) == "Custom Display"
    assert font_mgr.is_registered("Custom Display")


def test_unresolved_family_falls_back_to_builtin_font(font_mgr):
    font = font_mgr.get_font("Definitely Not A Font", 48)
    assert isinstance(font, ImageFont.FreeTypeFont)
    assert font.size == 48


def test_unreadable_font_file_falls_back_to_builtin_font(font_mgr, tmp_path):
    font_file = tmp_path / "Broken-Regular.ttf"
    font_file.write_bytes(b"not a font")
    font_mgr.register_font(str(font_file), "Broken")
    font = font_mgr.get_font("Broken", 30)
    assert font.getlength("A") > 0


def test_cached_font_is_used(font_mgr):
    os.makedirs(font_mgr.cache_dir, exist_ok=True)
    cached = os.path.join(font_mgr.cache_dir, "OpenSans-regular.ttf")
    with open(cached, "wb") as f:
        f.write(b"cached")
    assert font_mgr.get_font_path("Open Sans") == cached


class FakeResponse:
    def __init__(self, payload=None, chunks=(), status_code=200):
        self.payload = payload
        self.chunks = chunks
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload

    def iter_content(self, chunk_size):
        return iter(self.chunks)


def test_google_fonts_download(tmp_path, monkeypatch):
    manager = FontManager(google_api_key="key", cache_dir=str(tmp_path))
    requests_made = []

    def fake_get(url, params=None, timeout=None, stream=False):
        requests_made.append(url)
        if url == font_module.GOOGLE_FONTS_API_URL:
            assert params == {"key": "key", "family": "Staatliches"}
            return FakeResponse({"items": [{"files": {"regular": "https://fonts.example/s.ttf"}}]})
        return FakeResponse(chunks=[b"font-", b"bytes"])

    monkeypatch.setattr(font_module.requests, "get", fake_get)
    path = manager.get_font_path("Staatliches")

    assert path == str(tmp_path / "Staatliches-regular.ttf")
    assert (tmp_path / "Staatliches-regular.ttf").read_bytes() == b"font-bytes"
    assert requests_made == [font_module.GOOGLE_FONTS_API_URL, "https://fonts.example/s.ttf"]


def test_google_fonts_errors_resolve_to_none(tmp_path, monkeypatch):
    manager = FontManager(google_api_key="key", cache_dir=str(tmp_path))
    monkeypatch.setattr(font_module.requests, "get", lambda *args, **kwargs: FakeResponse(status_code=500))
    assert manager.get_font_path("Staatliches") is None


class FakeS3:
    def __init__(self, keys):
        self.keys = keys
        self.uploaded = []

    def head_object(self, Bucket, Key):
        if Key not in self.keys:
            raise font_module.ClientError({"Error": {"Code": "404"}}, "HeadObject")

    def download_file(self, bucket, key, local_path):
        with open(local_path, "wb") as f:
            f.write(self.keys[key])

    def upload_file(self, local_path, bucket, key):
        self.uploaded.append((bucket, key))


def test_s3_cached_font_is_downloaded(tmp_path):
    manager = FontManager(s3_bucket_name="fonts-bucket", cache_dir=str(tmp_path))
    manager._s3_client = FakeS3({"fonts/Staatliches-regular.ttf": b"from-s3"})
    path = manager.get_font_path("Staatliches")
    assert path == str(tmp_path / "Staatliches-regular.ttf")
    assert (tmp_path / "Staatliches-regular.ttf").read_bytes() == b"from-s3"


def test_google_download_is_uploaded_to_s3(tmp_path, monkeypatch):
    manager = FontManager(s3_bucket_name="fonts-bucket", google_api_key="key", cache_dir=str(tmp_path))
    s3 = FakeS3({})
    manager._s3_client = s3

    def fake_get(url, params=None, timeout=None, stream=False):
        if url == font_module.GOOGLE_FONTS_API_URL:
            return FakeResponse({"items": [{"files": {"regular": "https://fonts.example/s.ttf"}}]})
        return FakeResponse(chunks=[b"font"])

    monkeypatch.setattr(font_module.requests, "get", fake_get)
    assert manager.get_font_path("Staatliches") is not None
    assert s3.uploaded == [("fonts-bucket", "fonts/Staatliches-regular.ttf")]


def test_missing_default_font_is_reported(tmp_path, caplog):
    missing = str(tmp_path / "Staatliches-Regular.ttf")
    with caplog.at_level(logging.WARNING, logger='banner_generator.font_manager'):
        manager = FontManager(default_font_path=missing, cache_dir=str(tmp_path))
    assert "Default font not found" in caplog.text
    assert isinstance(manager.get_font("Staatliches", 24), ImageFont.FreeTypeFont)
