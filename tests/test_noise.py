import pytest

from livebg.noise import lin_inter, noise2, noise2d, perlin2d, smooth_inter


def test_noise2_in_byte_range():
    values = [noise2(x, y) for x in range(0, 300, 7) for y in range(0, 300, 11)]
    assert all(0 <= v <= 255 for v in values)


@pytest.mark.parametrize("x,y", [(0, 0), (3, 17), (100, 200)])
def test_noise2_periodic(x, y):
    assert noise2(x + 256, y) == noise2(x, y)
    assert noise2(x, y + 256) == noise2(x, y)


@pytest.mark.parametrize(
    "x,y,expected",
    [(0, 31, 34), (1, 31, 231), (4, 31, 248), (0, 25, 204), (0, 62, 161)],
)
def test_noise2_pinned_values(x, y, expected):
    assert noise2(x, y) == expected


def test_lin_inter_endpoints():
    assert lin_inter(2.0, 10.0, 0.0) == 2.0
    assert lin_inter(2.0, 10.0, 1.0) == 10.0
    assert lin_inter(2.0, 10.0, 0.5) == 6.0


def test_smooth_inter_endpoints_and_midpoint():
    assert smooth_inter(4.0, 8.0, 0.0) == 4.0
    assert smooth_inter(4.0, 8.0, 1.0) == 8.0
    assert smooth_inter(4.0, 8.0, 0.5) == 6.0


@pytest.mark.parametrize("s", [0.1, 0.25, 0.4])
def test_smooth_inter_symmetric(s):
    assert smooth_inter(0.0, 1.0, s) + smooth_inter(0.0, 1.0, 1.0 - s) == pytest.approx(1.0)


@pytest.mark.parametrize("x,y", [(0, 0), (5, 9), (40, 2)])
def test_noise2d_matches_lattice(x, y):
    assert noise2d(float(x), float(y)) == noise2(x, y)


def test_noise2d_between_corners():
    value = noise2d(3.3, 7.6)
    corners = [noise2(3, 7), noise2(4, 7), noise2(3, 8), noise2(4, 8)]
    assert min(corners) - 1e-9 <= value <= max(corners) + 1e-9


def test_perlin2d_single_octave():
    assert perlin2d(6.0, 2.0, 1.0, 1) == pytest.approx(noise2(6, 2) / 256)


def test_perlin2d_two_octaves_pinned():
    assert perlin2d(0.0, 31.0, 1.0, 2) == pytest.approx(114.5 / 384)


def test_perlin2d_range():
    values = [perlin2d(x * 0.37, y * 0.53, 0.1, 4) for x in range(20) for y in range(20)]
    assert all(0.0 <= v < 1.0 for v in values)