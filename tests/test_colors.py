import numpy as np
import pytest

from specimage.colors import as_palette, map_color, map_colors
from specimage.config import DEFAULT_PALETTE, PALETTES
from specimage.errors import ConfigurationError


def test_endpoints_hit_first_and_last_stop():
    assert map_color(0.0) == DEFAULT_PALETTE[0]
    assert map_color(1.0) == DEFAULT_PALETTE[-1]


def test_out_of_range_values_are_clamped():
    assert map_color(-3.0) == DEFAULT_PALETTE[0]
    assert map_color(7.5) == DEFAULT_PALETTE[-1]


def test_segment_boundaries_land_on_stops():
    # with gamma = 1, 0.25 / 0.5 / 0.75 are the inner stops of a 5-stop palette
    for i, value in enumerate([0.25, 0.5, 0.75], start=1):
        assert map_color(value, gamma=1.0) == DEFAULT_PALETTE[i]


def test_linear_interpolation_inside_segment():
    palette = ((0, 0, 0), (200, 100, 50))
    assert map_color(0.5, gamma=1.0, palette=palette) == (100, 50, 25)


def test_gamma_boosts_quiet_values():
    palette = PALETTES["gray"]
    quiet = map_color(0.01, gamma=0.2, palette=palette)
    linear = map_color(0.01, gamma=1.0, palette=palette)
    # 0.01 ** 0.2 = 0.398 -> 101.5 -> 102
    assert quiet == (102, 102, 102)
    assert linear == (3, 3, 3)


@pytest.mark.parametrize("boundary", [0.25, 0.5, 0.75])
def test_continuous_across_segment_boundaries(boundary):
    below = np.array(map_color(boundary - 1e-6, gamma=1.0))
    above = np.array(map_color(boundary + 1e-6, gamma=1.0))
    assert np.abs(below - above).max() <= 1


def test_small_steps_give_small_color_changes():
    values = np.linspace(0.0, 1.0, 2001)
    rgb = map_colors(values, gamma=1.0).astype(int)
    # steepest channel moves 255 - 40 = 215 over a quarter of the range
    max_step = np.abs(np.diff(rgb, axis=0)).max()
    assert max_step <= int(np.ceil(215 * 4 / 2000)) + 1


@pytest.mark.parametrize("palette", list(PALETTES))
@pytest.mark.parametrize("gamma", [0.2, 1.0, 2.5])
def test_vectorized_matches_scalar(palette, gamma):
    stops = PALETTES[palette]
    values = np.linspace(-0.1, 1.1, 4001)
    rgb = map_colors(values, gamma=gamma, palette=stops)
    assert rgb.shape == (4001, 3)
    assert rgb.dtype == np.uint8

    scalar = np.array([map_color(v, gamma=gamma, palette=stops) for v in values], dtype=np.uint8)
    assert np.array_equal(rgb, scalar)
    assert tuple(rgb[0]) == stops[0]
    assert tuple(rgb[-1]) == stops[-1]


def test_vectorized_default_palette_endpoints():
    rgb = map_colors([0.0, 1.0])
    assert tuple(rgb[0]) == DEFAULT_PALETTE[0]
    assert tuple(rgb[-1]) == DEFAULT_PALETTE[-1]


def test_vectorized_keeps_input_shape():
    assert map_colors(np.zeros((4, 7))).shape == (4, 7, 3)


def test_as_palette_by_name():
    assert as_palette("amber").tolist() == [[0, 0, 0], [255, 255, 0]]


@pytest.mark.parametrize("bad", [[(0, 0, 0)], [(0, 0, 0), (256, 0, 0)], [(0, 0), (1, 1)], "rainbow"])
def test_as_palette_rejects_invalid(bad):
    with pytest.raises(ConfigurationError):
        as_palette(bad)
