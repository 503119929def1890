import numpy as np
import pytest

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def wide_of(rgba_u8):
    """Opaque 8-bit colour -> 16-bit sample, as the decoder widens it."""
    return tuple(c * 257 for c in rgba_u8)


@pytest.fixture
def two_halves_wide():
    """4x4 wide image: rows 0-1 red, rows 2-3 blue."""
    img = np.zeros((4, 4, 4), dtype=np.uint16)
    img[:2] = wide_of(RED)
    img[2:] = wide_of(BLUE)
    return img


@pytest.fixture
def random_wide():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 65536, size=(24, 20, 4)).astype(np.uint16)
