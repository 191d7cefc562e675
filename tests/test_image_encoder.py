import base64

import pytest

import evocaition as mod

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 16
WEBP = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 8


@pytest.mark.parametrize(
    "data, mime",
    [(PNG, "image/png"), (JPEG, "image/jpeg"), (WEBP, "image/webp"), (b"GIF89a....", None), (b"", None)],
)
def test_detect_image_mime(data, mime):
    assert mod.detect_image_mime(data) == mime


def test_png_file_is_inlined(tmp_path):
    path = tmp_path / "picture.jpg"  # extension is ignored, content decides
    path.write_bytes(PNG)
    image = mod.encode_image(str(path))
    assert isinstance(image, mod.InlineImage)
    assert image.mime_type == "image/png"
    assert base64.b64decode(image.data) == PNG
    assert image.url.startswith("data:image/png;base64,")


def test_unknown_format_rejected(tmp_path):
    path = tmp_path / "notes.png"
    path.write_bytes(b"just some text")
    with pytest.raises(mod.UnsupportedImageFormatError):
        mod.encode_image(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(mod.ImageNotFoundError):
        mod.encode_image(str(tmp_path / "nope.png"))


def test_directory_is_unreadable(tmp_path):
    with pytest.raises(mod.UnreadableImageError):
        mod.encode_image(str(tmp_path))


@pytest.mark.parametrize(
    "url",
    ["https://example.com/cat.png", "http://example.com/cat", "data:image/png;base64,AAAA"],
)
def test_urls_pass_through_without_reading(url):
    def reader(path):
        raise AssertionError("URL must not be read locally")

    image = mod.encode_image(url, reader=reader)
    assert image == mod.RemoteImage(url=url)


def test_reader_collaborator_is_used():
    image = mod.encode_image("in-memory", reader=lambda ref: JPEG)
    assert image.mime_type == "image/jpeg"
