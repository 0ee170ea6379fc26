import os, sys
import base64
import logging

import pytest
from PIL import Image
from io import BytesIO

# Ensure project root on path for `import gallery...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from gallery.core.errors import ErrorKind, ImageServiceError
from gallery.core.models import UploadRequest
from gallery.storage.local import ImageStore


@pytest.fixture
def store(tmp_path):
    s = ImageStore(str(tmp_path / "uploads"))
    s.ensure_directory()
    return s


def _png_bytes():
    # Generate a tiny 2x2 PNG in-memory
    img = Image.new('RGB', (2, 2), color=(255, 0, 0))
    buf = BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def test_store_save_upload_writes_bytes_success(store, monkeypatch, caplog):
    # Freeze time for a deterministic filename
    monkeypatch.setattr("gallery.storage.local.time.time", lambda: 1000.7)
    content = _png_bytes()

    with caplog.at_level(logging.INFO, logger="gallery.storage.local"):
        filename = store.save_upload(
            UploadRequest(title="My Photo!", description="beach", image=_b64(content))
        )

    assert filename == "1000_My_Photo!.png"
    with open(os.path.join(store.upload_dir, filename), "rb") as f:
        assert f.read() == content
    assert "Image uploaded successfully: 1000_My_Photo!.png" in caplog.text
    assert "Description: beach" in caplog.text


def test_store_save_upload_empty_title_falls_back_success(store, monkeypatch):
    monkeypatch.setattr("gallery.storage.local.time.time", lambda: 42)

    assert store.save_upload(UploadRequest(image=_b64(b"GIF89a..."))) == "42_image.gif"


def test_store_save_upload_unknown_bytes_stored_as_jpg_success(store, monkeypatch):
    monkeypatch.setattr("gallery.storage.local.time.time", lambda: 42)

    assert store.save_upload(UploadRequest(title="x", image=_b64(b"hello world"))) == "42_x.jpg"


def test_store_save_upload_missing_image_failure(store):
    with pytest.raises(ImageServiceError) as exc:
        store.save_upload(UploadRequest(title="t", image=""))
    assert exc.value.kind is ErrorKind.MISSING_IMAGE_DATA
    assert os.listdir(store.upload_dir) == []


@pytest.mark.parametrize("bad", ["%%%", "aGVsbG8", "aGVs bG8=", "ümlaut=="])
def test_store_save_upload_invalid_base64_failure(store, bad):
    with pytest.raises(ImageServiceError) as exc:
        store.save_upload(UploadRequest(title="t", image=bad))
    assert exc.value.kind is ErrorKind.INVALID_IMAGE_ENCODING
    assert os.listdir(store.upload_dir) == []


def test_store_save_upload_write_failure(tmp_path):
    # A regular file where the directory should be makes open() fail
    blocker = tmp_path / "uploads"
    blocker.write_bytes(b"")
    store = ImageStore(str(blocker))

    with pytest.raises(ImageServiceError) as exc:
        store.save_upload(UploadRequest(title="t", image=_b64(_png_bytes())))
    assert exc.value.kind is ErrorKind.STORAGE_WRITE_FAILURE
    assert exc.value.kind.status_code == 500


def test_store_same_second_same_title_overwrites_success(store, monkeypatch):
    monkeypatch.setattr("gallery.storage.local.time.time", lambda: 1000)

    first = store.save_upload(UploadRequest(title="dup", image=_b64(b"\xff\xd8first")))
    second = store.save_upload(UploadRequest(title="dup", image=_b64(b"\xff\xd8second")))

    assert first == second == "1000_dup.jpg"
    assert os.listdir(store.upload_dir) == ["1000_dup.jpg"]
    with open(os.path.join(store.upload_dir, first), "rb") as f:
        assert f.read() == b"\xff\xd8second"


def test_store_list_images_projection_success(store, monkeypatch):
    counter = {"t": 1000}
    def fake_time():
        v = counter["t"]
        counter["t"] += 500  # 1000, 1500
        return v
    monkeypatch.setattr("gallery.storage.local.time.time", fake_time)

    png = _png_bytes()
    store.save_upload(UploadRequest(title="b", image=_b64(png)))
    store.save_upload(UploadRequest(title="a", image=_b64(b"RIFF0000WEBP")))
    os.mkdir(os.path.join(store.upload_dir, "nested"))

    items = store.list_images(base_url="http://localhost:5174/")
    assert [i.name for i in items] == ["1000_b.png", "1500_a.webp"]

    first = items[0]
    assert first.size == len(png)
    assert first.title == "1000_b"
    assert first.description == "Uploaded image"
    assert first.url == "http://localhost:5174/uploads/1000_b.png"
    path = os.path.join(store.upload_dir, "1000_b.png")
    assert first.upload_time == int(os.stat(path).st_mtime)


def test_store_list_images_empty_success(store):
    assert store.list_images() == []


def test_store_list_images_missing_directory_failure(tmp_path):
    store = ImageStore(str(tmp_path / "does-not-exist"))
    with pytest.raises(ImageServiceError) as exc:
        store.list_images()
    assert exc.value.kind is ErrorKind.DIRECTORY_READ_FAILURE
    assert exc.value.to_payload() == {
        "success": False,
        "error": "Failed to read uploads directory",
    }
