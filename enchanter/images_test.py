# enchanter/images_test.py

import io

from PIL import Image

from enchanter.images import validate_image


def encoded(fmt):
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), (10, 20, 30)).save(buffer, format=fmt)
    buffer.seek(0)
    return buffer


def test_accepts_png_and_rewinds():
    image_file = encoded("PNG")

    assert validate_image(image_file) == (True, "Valid")
    assert image_file.tell() == 0


def test_rejects_disallowed_format():
    assert validate_image(encoded("BMP")) == (False, "Invalid format")


def test_rejects_garbage():
    assert validate_image(io.BytesIO(b"definitely not pixels")) == (False, "File is not a readable image")
