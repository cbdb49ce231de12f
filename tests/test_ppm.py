import io
import os
import stat

import numpy as np
import PIL.Image
import pytest

from mandelbrot import OutputError, encode_header, write_image, write_ppm

PIXELS = np.array(
    [
        [[1, 2, 3], [4, 5, 6]],
        [[7, 8, 9], [10, 11, 255]],
    ],
    dtype=np.uint8,
)

EXPECTED = "P3\n2 2\n255\n1 2 3\n4 5 6\n7 8 9\n10 11 255\n"


def test_header():
    assert encode_header(3, 2) == "P3\n3 2\n255\n"


def test_write_to_stream():
    stream = io.StringIO()
    write_ppm(PIXELS, stream)
    assert stream.getvalue() == EXPECTED


def test_non_square_is_row_major(parse_ppm):
    pixels = np.zeros((2, 3, 3), dtype=np.uint8)
    pixels[0, 2] = (9, 9, 9)
    pixels[1, 0] = (1, 1, 1)
    stream = io.StringIO()
    write_ppm(pixels, stream)

    lines = stream.getvalue().splitlines()
    assert lines[1] == "3 2"
    assert lines[3 + 2] == "9 9 9"
    assert lines[3 + 3] == "1 1 1"
    width, height, parsed = parse_ppm(stream.getvalue())
    assert (width, height) == (3, 2)
    np.testing.assert_array_equal(parsed, pixels)


def test_write_to_path(tmp_path):
    destination = tmp_path / "image.ppm"
    write_ppm(PIXELS, destination)
    assert destination.read_text() == EXPECTED
    assert os.listdir(tmp_path) == ["image.ppm"]


def test_write_to_str_path_overwrites(tmp_path):
    destination = tmp_path / "image.ppm"
    destination.write_text("stale")
    write_ppm(PIXELS, str(destination))
    assert destination.read_text() == EXPECTED


def test_missing_directory(tmp_path):
    destination = tmp_path / "missing" / "image.ppm"
    with pytest.raises(OutputError) as excinfo:
        write_ppm(PIXELS, destination)
    assert excinfo.value.destination == destination
    assert not destination.exists()


def test_directory_destination_leaves_no_temp_file(tmp_path):
    target = tmp_path / "taken"
    target.mkdir()
    with pytest.raises(OutputError):
        write_ppm(PIXELS, target)
    assert sorted(os.listdir(tmp_path)) == ["taken"]


def test_output_error_is_os_error(tmp_path):
    with pytest.raises(OSError):
        write_ppm(PIXELS, tmp_path / "missing" / "image.ppm")


def test_rejects_bad_shape():
    with pytest.raises(ValueError):
        write_ppm(np.zeros((2, 2), dtype=np.uint8), io.StringIO())


def test_write_image_png(tmp_path):
    destination = tmp_path / "image.png"
    write_image(PIXELS, destination, "png")
    with PIL.Image.open(destination) as image:
        assert image.size == (2, 2)
        assert image.getpixel((1, 0)) == (4, 5, 6)
        assert image.getpixel((0, 1)) == (7, 8, 9)


def test_write_image_missing_directory(tmp_path):
    with pytest.raises(OutputError):
        write_image(PIXELS, tmp_path / "missing" / "image.png", "png")


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


def test_new_file_follows_umask(tmp_path, umask_022):
    destination = tmp_path / "image.ppm"
    write_ppm(PIXELS, destination)
    assert stat.S_IMODE(os.stat(destination).st_mode) == 0o644


def test_overwrite_keeps_existing_mode(tmp_path, umask_022):
    destination = tmp_path / "image.ppm"
    destination.write_text("stale")
    os.chmod(destination, 0o640)
    write_ppm(PIXELS, destination)
    assert stat.S_IMODE(os.stat(destination).st_mode) == 0o640
    assert destination.read_text() == EXPECTED


def test_closed_stream():
    stream = io.StringIO()
    stream.close()
    with pytest.raises(OutputError):
        write_ppm(PIXELS, stream)


def test_binary_stream():
    with pytest.raises(OutputError):
        write_ppm(PIXELS, io.BytesIO())
