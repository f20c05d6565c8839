"""Tests for framebuffer rendering helpers."""

import numpy as np
import pytest
from chipax import chip8_display_to_rgb, create_color_scheme, batch_render


def test_display_to_rgb_scales_and_colors():
    display = np.zeros((32, 64), dtype=bool)
    display[1, 2] = True

    rgb = chip8_display_to_rgb(display, scale=2, on_color=(1, 2, 3), off_color=(0, 0, 0))

    assert rgb.shape == (64, 128, 3)
    assert tuple(rgb[2, 4]) == (1, 2, 3)
    assert tuple(rgb[3, 5]) == (1, 2, 3)
    assert tuple(rgb[0, 0]) == (0, 0, 0)


def test_display_to_rgb_rejects_wrong_shape():
    with pytest.raises(ValueError):
        chip8_display_to_rgb(np.zeros((64, 32), dtype=bool))


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("neon")


def test_batch_render_grid():
    displays = np.zeros((3, 32, 64), dtype=bool)

    grid = batch_render(displays, scale=1, padding=2)

    assert grid.shape == (2 * 32 + 2, 2 * 64 + 2, 4)
    assert grid[0, 0, 3] == 255
    assert grid[-1, -1, 3] == 0  # fourth cell left transparent
