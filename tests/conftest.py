import numpy as np
import pytest


def _parse_ppm(text):
    lines = text.splitlines()
    assert lines[0] == "P3"
    width, height = (int(token) for token in lines[1].split())
    assert lines[2] == "255"
    values = [[int(token) for token in line.split()] for line in lines[3:]]
    pixels = np.array(values, dtype=np.int64).reshape(height, width, 3)
    return width, height, pixels


@pytest.fixture
def parse_ppm():
    return _parse_ppm
