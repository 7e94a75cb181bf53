"""Tests for preview handle lifecycle."""

import io

from PIL import Image

from src.upload.files import SelectedFile
from src.upload.preview import PreviewStore


def test_create_writes_downscaled_preview(tmp_path):
    img = Image.new("RGB", (3000, 1500), color=(10, 20, 30))
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    big = SelectedFile(name="big.jpg", content_type="image/jpeg", data=buf.getvalue())

    store = PreviewStore(tmp_path, max_size=(300, 300))
    handle = store.create(big)

    assert handle.path.exists()
    assert handle.path.suffix == ".png"
    assert handle.url.startswith("file://")
    assert store.is_live(handle)
    with Image.open(handle.path) as preview:
        assert preview.size == (300, 150)


def test_undecodable_image_is_stored_raw(preview_store):
    broken = SelectedFile(name="broken.PNG", content_type="image/png", data=b"\x89PNG truncated")

    handle = preview_store.create(broken)

    assert handle.path.suffix == ".png"
    assert handle.path.read_bytes() == broken.data


def test_release_is_exactly_once(preview_store, jpeg_file):
    handle = preview_store.create(jpeg_file)

    assert preview_store.release(handle) is True
    assert not handle.path.exists()
    assert preview_store.release(handle) is False
    assert preview_store.released_count == 1
    assert preview_store.live_count == 0


def test_release_all(preview_store, jpeg_file, png_file):
    preview_store.create(jpeg_file)
    preview_store.create(png_file)

    assert preview_store.release_all() == 2
    assert preview_store.release_all() == 0


def test_close_removes_owned_directory(jpeg_file):
    store = PreviewStore()
    handle = store.create(jpeg_file)
    root = store.root

    store.close()

    assert not handle.path.exists()
    assert not root.exists()
