"""Tests for PPM and Pillow-backed image loading and saving."""

import numpy as np
import pytest
from PIL import Image as PILImage

from imagelab.models.image import Image
from imagelab.models.pixel import Pixel
from imagelab.services.image_service import ImageService, image_from_pil, image_to_pil


@pytest.fixture
def service():
    return ImageService()


@pytest.fixture
def image():
    data = np.array(
        [[[255, 0, 0], [0, 255, 0], [0, 0, 255]], [[10, 20, 30], [40, 50, 60], [70, 80, 90]]],
        dtype=np.uint8,
    )
    return Image.from_array(data)


def test_ppm_round_trip(service, image, tmp_path):
    path = service.save_image(tmp_path / "out.ppm", image)
    loaded = service.load_image(path)
    assert loaded.image == image
    assert (loaded.width, loaded.height, loaded.format) == (3, 2, "PPM")
    assert loaded.size_bytes == path.stat().st_size


def test_ppm_writer_layout(service, image, tmp_path):
    path = service.save_image(tmp_path / "out.ppm", image)
    lines = path.read_text().splitlines()
    assert lines[:3] == ["P3", "3 2", "255"]
    assert lines[3] == "255 0 0 0 255 0 0 0 255"


def test_ppm_reader_skips_comments(service, tmp_path):
    path = tmp_path / "in.ppm"
    path.write_text("P3\n# a comment\n2 1\n# another\n255\n1 2 3\n4 5 6\n")
    loaded = service.load_image(path)
    assert loaded.image.get_pixel(0, 0) == Pixel(1, 2, 3)
    assert loaded.image.get_pixel(1, 0) == Pixel(4, 5, 6)
    assert loaded.format == "PPM"


def test_binary_ppm_is_readable(service, tmp_path):
    path = tmp_path / "in.ppm"
    path.write_bytes(b"P6\n2 1\n255\n" + bytes([1, 2, 3, 4, 5, 6]))
    loaded = service.load_image(path)
    assert loaded.image.get_pixel(1, 0) == Pixel(4, 5, 6)


@pytest.mark.parametrize(
    "content",
    [
        "hello\n",
        "P3\n2 2\n255\n0 0 0\n",
        "P3\nx y\n255\n",
    ],
)
def test_ppm_reader_rejects_malformed_files(service, tmp_path, content):
    path = tmp_path / "bad.ppm"
    path.write_text(content)
    with pytest.raises(ValueError):
        service.load_image(path)


def test_png_round_trip(service, image, tmp_path):
    path = service.save_image(tmp_path / "out.png", image)
    loaded = service.load_image(path)
    assert loaded.image == image
    assert loaded.format == "PNG"


def test_load_missing_file(service, tmp_path):
    with pytest.raises(FileNotFoundError):
        service.load_image(tmp_path / "missing.png")


def test_load_non_image(service, tmp_path):
    path = tmp_path / "fake.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        service.load_image(path)


def test_save_unsupported_extension(service, image, tmp_path):
    with pytest.raises(ValueError):
        service.save_image(tmp_path / "out.xyz", image)


def test_pil_conversion_drops_alpha():
    pil_image = PILImage.new("RGBA", (2, 1), color=(10, 20, 30, 0))
    converted = image_from_pil(pil_image)
    assert converted.get_pixel(1, 0) == Pixel(10, 20, 30)
    assert image_to_pil(converted).mode == "RGB"
