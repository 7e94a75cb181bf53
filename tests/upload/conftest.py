"""Shared fixtures for upload tests."""

import io
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from src.upload.files import SelectedFile
from src.upload.preview import PreviewStore


def make_jpeg(size=(160, 120)) -> bytes:
    """Encode a noisy JPEG so the payload has realistic size."""
    img = Image.effect_noise(size, 64).convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=90)
    return buf.getvalue()


@pytest.fixture
def jpeg_file():
    """A selected JPEG of roughly 10KB."""
    return SelectedFile(name="photo.jpg", content_type="image/jpeg", data=make_jpeg())


@pytest.fixture
def png_file():
    img = Image.new("RGB", (100, 200), color=(255, 0, 0))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return SelectedFile(name="other.png", content_type="image/png", data=buf.getvalue())


@pytest.fixture
def text_file():
    return SelectedFile(name="notes.txt", content_type="text/plain", data=b"not an image")


@pytest.fixture
def preview_store():
    """Preview store rooted in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = PreviewStore(Path(tmpdir))
        yield store
        store.close()
