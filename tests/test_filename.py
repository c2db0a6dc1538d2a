import pytest

from photagg.export.filename import construct_filename, photo_filename, title_to_base
from photagg.models import PhotoItem, PhotoMetadata


def test_title_based_name_with_category():
    assert construct_filename("photo.JPG", "A Red Car!!", "Nature", False) == "a_red_car__(Nature).JPG"


@pytest.mark.parametrize(
    "category, expected",
    [("Category", "IMG_003(Category).png"), ("", "IMG_003.png"), (None, "IMG_003.png")],
)
def test_keep_original_name(category, expected):
    assert construct_filename("IMG_003.png", "ignored title", category, True) == expected


def test_title_truncated_to_50_chars():
    name = construct_filename("x.jpg", "Word " * 30, None, False)
    base = name[: -len(".jpg")]
    assert len(base) == 50
    assert base == ("word_" * 10)


def test_extension_defaults_to_jpg():
    assert construct_filename("noext", "T", None, False) == "t.jpg"
    assert construct_filename("noext", "T", None, True) == "noext.jpg"
    assert construct_filename("trailing.", "T", None, False) == "t.jpg"


def test_only_last_dot_is_extension():
    assert construct_filename("my.holiday.photo.jpeg", "T", None, True) == "my.holiday.photo.jpeg"


def test_non_ascii_title_characters_replaced():
    assert title_to_base("Café über") == "caf___ber"


def test_photo_filename_without_metadata_uses_original(tmp_path):
    item = PhotoItem(path=tmp_path / "IMG_1.jpg", mime_type="image/jpeg")
    assert photo_filename(item, False) == "IMG_1.jpg"
    item.data = PhotoMetadata(title="Blue Sky", description="d", category="Nature")
    assert photo_filename(item, False) == "blue_sky(Nature).jpg"
