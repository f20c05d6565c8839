"""CHIP-8 framebuffer rendering utilities."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np

from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT

Color = Tuple[int, int, int]

COLOR_SCHEMES = {
    "chipax": ((179, 102, 184), (45, 25, 61)),
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert a CHIP-8 boolean framebuffer to an upscaled RGB array.

    Args:
        display: Boolean array of shape (32, 64), indexed ``[y, x]``
        scale: Nearest-neighbour upscaling factor
        on_color: RGB color for lit pixels
        off_color: RGB color for dark pixels

    Returns:
        uint8 array of shape (32*scale, 64*scale, 3)
    """
    pixels = np.asarray(display, dtype=np.bool_)
    if pixels.shape != (SCREEN_HEIGHT, SCREEN_WIDTH):
        raise ValueError(f"Expected display shape ({SCREEN_HEIGHT}, {SCREEN_WIDTH}), got {pixels.shape}")

    rgb_frame = np.empty((*pixels.shape, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(scheme: str = "chipax") -> Tuple[Color, Color]:
    """Get a predefined ``(on_color, off_color)`` pair by name."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def batch_render(
    displays: jnp.ndarray, scale: int = 4, color_scheme: str = "chipax", padding: int = 5
) -> np.ndarray:
    """Render framebuffers from independent machines in a grid.

    Args:
        displays: Array of shape (batch_size, 32, 64), e.g. from a vmapped run
        scale: Upscaling factor for each display
        color_scheme: Color scheme name
        padding: Transparent gap between displays, in pixels

    Returns:
        RGBA array holding every display, unused grid cells left transparent
    """
    batch_size = displays.shape[0]
    on_color, off_color = create_color_scheme(color_scheme)

    grid_cols = int(np.ceil(np.sqrt(batch_size)))
    grid_rows = int(np.ceil(batch_size / grid_cols))

    display_height, display_width = SCREEN_HEIGHT * scale, SCREEN_WIDTH * scale
    grid_height = grid_rows * display_height + (grid_rows - 1) * padding
    grid_width = grid_cols * display_width + (grid_cols - 1) * padding
    grid_image = np.zeros((grid_height, grid_width, 4), dtype=np.uint8)

    for i in range(batch_size):
        row, col = divmod(i, grid_cols)
        y_start = row * (display_height + padding)
        x_start = col * (display_width + padding)
        rgb = chip8_display_to_rgb(displays[i], scale, on_color, off_color)
        grid_image[y_start:y_start + display_height, x_start:x_start + display_width, :3] = rgb
        grid_image[y_start:y_start + display_height, x_start:x_start + display_width, 3] = 255

    return grid_image
