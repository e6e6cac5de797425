"""Tests for photo compression."""

import io

import pytest
from PIL import Image

from sitebook.services.images import compress_image


def _png(size, mode="RGB", color=(200, 30, 30)):
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


def test_compress_downscales_longest_edge():
    data = compress_image(_png((3000, 1500)), max_dim=1000, quality=60)

    img = Image.open(io.BytesIO(data))
    assert img.format == "JPEG"
    assert img.size == (1000, 500)


def test_small_images_keep_their_size():
    data = compress_image(_png((320, 240)), max_dim=1280)
    assert Image.open(io.BytesIO(data)).size == (320, 240)


def test_transparent_images_are_flattened():
    data = compress_image(_png((64, 64), mode="RGBA", color=(0, 0, 0, 0)))

    img = Image.open(io.BytesIO(data))
    assert img.mode == "RGB"
    r, g, b = img.getpixel((32, 32))
    assert min(r, g, b) > 240


def test_empty_bytes_pass_through():
    assert compress_image(b"") == b""


def test_garbage_raises_value_error():
    with pytest.raises(ValueError):
        compress_image(b"definitely not an image")
