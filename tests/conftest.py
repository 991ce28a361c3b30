import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from bmpedit import PixelBuffer


@pytest.fixture
def small_image():
    # 2 rows x 3 cols, every pixel distinct
    return PixelBuffer.from_rows([
        [(255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(10, 20, 30), (200, 150, 100), (0, 0, 0)],
    ])


@pytest.fixture
def random_image():
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8))


@pytest.fixture
def make_image():
    def _make(height, width, seed=0):
        rng = np.random.default_rng(seed)
        return PixelBuffer(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))
    return _make
