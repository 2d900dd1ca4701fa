"""
RGB texture grids and height-field sampling.

A ColorField is the consumer-facing output: an 8-bit RGB grid whose size is
the requested texture size, independent of the height field's grid size.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from ..errors import ConfigurationError
from .height_field import HeightField

RGB = Tuple[int, int, int]


@dataclass
class ColorField:
    """8-bit RGB grid stored as (height, width, 3), addressed by (x, z)."""

    width: int
    height: int
    pixels: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        if self.pixels is None:
            self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        elif self.pixels.shape != (self.height, self.width, 3):
            raise ValueError(
                f"pixels must have shape {(self.height, self.width, 3)}, got {self.pixels.shape}"
            )

    def get_color(self, x: int, z: int) -> RGB:
        r, g, b = self.pixels[z, x]
        return int(r), int(g), int(b)

    def set_color(self, x: int, z: int, rgb: RGB) -> None:
        self.pixels[z, x] = rgb


def validate_texture_size(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
            raise ConfigurationError(f"texture {name} must be a positive integer, got {value!r}")


def to_byte(value: float) -> int:
    """Convert a [0, 1] intensity to an 8-bit channel, truncating and clamping."""
    return min(max(int(value * 255), 0), 255)


def sample_indices(height_field: HeightField, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map texture columns and rows onto height field coordinates.

    Nearest-neighbor mapping: a texture no larger than the grid reads the grid
    directly (a 512 texture over a 513 grid uses cells 0..511).
    """
    size = height_field.size
    xs = (np.arange(width) * size) // width
    zs = (np.arange(height) * size) // height
    return xs, zs


def sample_heights(height_field: HeightField, width: int, height: int) -> np.ndarray:
    """Return the (height, width) array of normalized heights under each texel."""
    xs, zs = sample_indices(height_field, width, height)
    return height_field.as_array()[np.ix_(zs, xs)]


def height_bytes(height_field: HeightField, width: int, height: int) -> np.ndarray:
    """Return the (height, width) array of 0..255 height bytes under each texel."""
    sampled = sample_heights(height_field, width, height)
    return np.clip((sampled * 255).astype(np.int64), 0, 255)


def height_texture(height_field: HeightField, width: int, height: int) -> ColorField:
    """Render the height field as a grayscale texture."""
    validate_texture_size(width, height)
    gray = height_bytes(height_field, width, height).astype(np.uint8)
    return ColorField(width, height, np.repeat(gray[:, :, np.newaxis], 3, axis=2))
