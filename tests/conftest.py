"""Shared test fixtures for noteleaf."""

import io

import pytest
from PIL import Image

from noteleaf.config.models import NoteleafConfig
from noteleaf.leaflet.converter import MarkdownConverter
from noteleaf.leaflet.models import CID, Blob


def _image_bytes(fmt: str, size: tuple[int, int]) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buf, format=fmt)
    return buf.getvalue()


class RecordingUploader:
    """Uploader double that remembers every call and returns a fixed CID."""

    def __init__(self, link: str = "bafkreitestcid"):
        self.link = link
        self.calls: list[tuple[bytes, str]] = []

    def __call__(self, data: bytes, mime_type: str) -> Blob:
        self.calls.append((data, mime_type))
        return Blob(ref=CID(link=self.link), mime_type=mime_type, size=len(data))


@pytest.fixture
def converter():
    return MarkdownConverter()


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG", (64, 32))


@pytest.fixture
def gif_bytes():
    return _image_bytes("GIF", (10, 20))


@pytest.fixture
def note_dir(tmp_path, png_bytes):
    """A note directory holding images/diagram.png (64x32)."""
    notes = tmp_path / "notes"
    (notes / "images").mkdir(parents=True)
    (notes / "images" / "diagram.png").write_bytes(png_bytes)
    return notes


@pytest.fixture
def uploader():
    return RecordingUploader()


@pytest.fixture
def sample_config():
    return NoteleafConfig()
