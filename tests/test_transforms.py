import numpy as np
import pytest

from bmpedit import (
    Pixel, PixelBuffer, TransformConfig, TransformPipeline,
    clarendon, darken, enlarge, grayscale, high_contrast, lighten, posterize, rotate, rotate90, vignette,
)


def one(rgb):
    return PixelBuffer.from_rows([[rgb]])


# grayscale

def test_grayscale_example():
    out = grayscale(one((30, 60, 90)))
    assert out.pixel(0, 0) == Pixel(60, 60, 60)


def test_grayscale_rounds_to_nearest():
    assert grayscale(one((1, 1, 2))).pixel(0, 0) == Pixel(1, 1, 1)  # 1.33
    assert grayscale(one((1, 2, 2))).pixel(0, 0) == Pixel(2, 2, 2)  # 1.67
    assert grayscale(one((255, 255, 255))).pixel(0, 0) == Pixel(255, 255, 255)


# high contrast

def test_high_contrast_threshold():
    assert high_contrast(one((127, 127, 127))).pixel(0, 0) == Pixel(0, 0, 0)
    assert high_contrast(one((128, 128, 128))).pixel(0, 0) == Pixel(255, 255, 255)
    # integer mean: 383 // 3 == 127
    assert high_contrast(one((128, 128, 127))).pixel(0, 0) == Pixel(0, 0, 0)


# rotation

def test_rotate90_swaps_dimensions_and_maps_pixels(small_image):
    out = rotate90(small_image)
    assert out.shape == (3, 2)
    h = small_image.height
    for row in range(small_image.height):
        for col in range(small_image.width):
            assert out.pixel(col, h - 1 - row) == small_image.pixel(row, col)


def test_rotate90_four_times_is_identity(random_image):
    out = random_image
    for _ in range(4):
        out = rotate90(out)
    assert out == random_image


@pytest.mark.parametrize("count,turns", [(0, 0), (1, 1), (2, 2), (3, 3), (4, 0), (5, 1), (-1, 3), (-2, 2)])
def test_rotate_counts(random_image, count, turns):
    expected = random_image
    for _ in range(turns):
        expected = rotate90(expected)
    assert rotate(random_image, count) == expected


def test_rotate_non_quarter_turn_returns_input(random_image, caplog):
    out = rotate(random_image, 0.5)
    assert out == random_image
    assert out is not random_image
    assert "not a multiple of 90" in caplog.text


# enlarge

def test_enlarge_single_pixel():
    out = enlarge(one((9, 8, 7)), 2, 2)
    assert out.shape == (2, 2)
    assert all(p == Pixel(9, 8, 7) for row in out.rows() for p in row)


def test_enlarge_nearest_neighbour(small_image):
    out = enlarge(small_image, 3, 2)
    assert out.shape == (4, 9)
    for row in range(out.height):
        for col in range(out.width):
            assert out.pixel(row, col) == small_image.pixel(row // 2, col // 3)


@pytest.mark.parametrize("xs,ys", [(0, 1), (1, 0), (-2, 2), (1.5, 1), (True, 2)])
def test_enlarge_rejects_bad_scales(small_image, xs, ys):
    with pytest.raises(ValueError):
        enlarge(small_image, xs, ys)


# lighten / darken

def test_darken_zero_is_black(random_image):
    out = darken(random_image, 0)
    assert not out.pixels.any()


def test_lighten_one_is_identity(random_image):
    assert lighten(random_image, 1) == random_image


def test_lighten_and_darken_truncate():
    assert darken(one((100, 51, 3)), 0.5).pixel(0, 0) == Pixel(50, 25, 1)
    # 255 - 155 * 0.5 = 177.5
    assert lighten(one((100, 100, 100)), 0.5).pixel(0, 0) == Pixel(177, 177, 177)


def test_scaling_is_clamped():
    assert darken(one((200, 100, 10)), 2).pixel(0, 0) == Pixel(255, 200, 20)
    assert lighten(one((0, 100, 255)), 3).pixel(0, 0) == Pixel(0, 0, 255)
    assert darken(one((10, 10, 10)), -1).pixel(0, 0) == Pixel(0, 0, 0)


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), "abc"])
def test_scale_must_be_finite_number(bad):
    with pytest.raises(ValueError):
        darken(one((1, 2, 3)), bad)


# clarendon

def test_clarendon_bands():
    img = PixelBuffer.from_rows([[(200, 200, 200), (50, 50, 50), (120, 120, 120)]])
    out = clarendon(img, 0.5)
    assert out.pixel(0, 0) == Pixel(227, 227, 227)  # 255 - 55 * 0.5
    assert out.pixel(0, 1) == Pixel(25, 25, 25)
    assert out.pixel(0, 2) == Pixel(120, 120, 120)


def test_clarendon_band_edges():
    # mean exactly 170 lightens, exactly 90 is left alone
    out = clarendon(PixelBuffer.from_rows([[(170, 170, 170), (90, 90, 90), (89, 89, 89)]]), 0)
    assert out.pixel(0, 0) == Pixel(255, 255, 255)
    assert out.pixel(0, 1) == Pixel(90, 90, 90)
    assert out.pixel(0, 2) == Pixel(0, 0, 0)


# vignette

def test_vignette_centre_unchanged():
    img = PixelBuffer.filled(5, 7, (100, 150, 200))
    out = vignette(img)
    assert out.pixel(2, 3) == Pixel(100, 150, 200)


def test_vignette_darkens_corners():
    img = PixelBuffer.filled(4, 4, (200, 200, 200))
    out = vignette(img)
    # corner (0, 0): distance sqrt(8), factor (4 - 2.828...) / 4
    expected = int(200 * (4 - np.sqrt(8)) / 4)
    assert out.pixel(0, 0) == Pixel(expected, expected, expected)
    assert out.pixel(0, 0).red < out.pixel(2, 2).red


def test_vignette_far_pixels_clamp_to_black():
    # wide image: distance exceeds height near the ends
    img = PixelBuffer.filled(1, 9, (255, 255, 255))
    out = vignette(img)
    assert out.pixel(0, 0) == Pixel(0, 0, 0)
    assert out.pixel(0, 4) == Pixel(255, 255, 255)


# posterize

@pytest.mark.parametrize("rgb,expected", [
    ((200, 200, 150), (255, 255, 255)),   # sum 550
    ((50, 50, 50), (0, 0, 0)),            # sum 150
    ((200, 10, 10), (255, 0, 0)),
    ((10, 200, 10), (0, 255, 0)),
    ((10, 10, 200), (0, 0, 255)),
    ((100, 100, 20), (255, 0, 0)),        # red/green tie -> red
    ((20, 100, 100), (0, 255, 0)),        # green/blue tie -> green
])
def test_posterize(rgb, expected):
    assert posterize(one(rgb)).pixel(0, 0) == Pixel(*expected)


# purity and empties

@pytest.mark.parametrize("fn", [
    vignette, grayscale, rotate90, high_contrast, posterize,
    lambda im: clarendon(im, 0.7), lambda im: lighten(im, 0.3), lambda im: darken(im, 0.3),
    lambda im: rotate(im, 2), lambda im: enlarge(im, 2, 3),
])
def test_transforms_do_not_mutate_input(random_image, fn):
    before = random_image.pixels.copy()
    out = fn(random_image)
    assert out is not random_image
    assert np.array_equal(random_image.pixels, before)
    assert fn(random_image) == out


@pytest.mark.parametrize("fn", [
    vignette, grayscale, rotate90, high_contrast, posterize,
    lambda im: clarendon(im, 0.5), lambda im: lighten(im, 0.5), lambda im: darken(im, 0.5),
    lambda im: enlarge(im, 2, 2), lambda im: rotate(im, 1),
])
def test_transforms_reject_empty_image(fn):
    with pytest.raises(ValueError):
        fn(PixelBuffer.empty())


# pipeline driver

def test_pipeline_applies_named_operation(random_image):
    cfg = TransformConfig(operation="enlarge", x_scale=2, y_scale=3)
    out = TransformPipeline(cfg).run(random_image)
    assert out == enlarge(random_image, 2, 3)

    cfg = TransformConfig(operation="darken", scale=0.25)
    assert TransformPipeline(cfg).run(random_image) == darken(random_image, 0.25)

    cfg = TransformConfig(operation="rotate", rotations=3)
    assert TransformPipeline(cfg).run(random_image) == rotate(random_image, 3)


def test_pipeline_unknown_operation():
    with pytest.raises(ValueError):
        TransformPipeline(TransformConfig(operation="sepia"))


def test_available_operations():
    ops = TransformPipeline.available_operations()
    assert len(ops) == 10
    assert {"vignette", "posterize", "rotate90", "rotate"} <= set(ops)
