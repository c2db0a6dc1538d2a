import io

import pytest
from PIL import Image

from photagg.models import PhotoItem, PhotoMetadata, ProcessingStatus


def make_jpeg(size=(16, 12), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()


def make_png(size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (0, 120, 0)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes():
    return make_jpeg()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def sample_metadata():
    return PhotoMetadata(
        title="A Red Car!!",
        description='Vintage red car parked on a "quiet" street at dusk',
        keywords=["car", "red", "vintage", "street"],
        category="Travel",
    )


@pytest.fixture
def make_item(tmp_path):
    """Write bytes to disk and wrap them in a completed PhotoItem."""

    def _make(name, data, mime_type, metadata=None):
        path = tmp_path / "src" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        item = PhotoItem(path=path, mime_type=mime_type)
        if metadata is not None:
            item.data = metadata
            item.status = ProcessingStatus.COMPLETED
        return item

    return _make
