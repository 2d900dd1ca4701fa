"""
Biome coloring based on elevation.

This module implements:
- An ordered band table mapping height bytes (0..255) to base colors
- Per-band random jitter and "fractal" noise with modulo wrapping
- A small shared noise term to hide banding in the final texture
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .color_field import ColorField, height_bytes, to_byte, validate_texture_size
from .height_field import HeightField

logger = structlog.get_logger()

# Picked at random for the lowest ground.
GRASS_COLORS = (
    (0, 100, 0),  # DarkGreen
    (0, 128, 0),  # Green
    (107, 142, 35),  # OliveDrab
)


class BandKind(Enum):
    """How a band produces its color."""

    CHANNELS = "channels"  # independent R, G, B ranges, noise per channel
    GRAY = "gray"  # one shared gray range, noise on the shared value
    SNOW = "snow"  # gray equal to the height byte, no noise


@dataclass(frozen=True)
class ChannelRange:
    """
    ``base + direction * randint(spread)``; a zero spread is a constant.

    Constant channels do not draw from the PRNG.
    """

    base: int
    spread: int = 0
    direction: int = 1

    def sample(self, prng: AleaPRNG) -> int:
        if self.spread == 0:
            return self.base
        return self.base + self.direction * prng.randint(self.spread)

    @property
    def bounds(self) -> Tuple[int, int]:
        far = self.base + self.direction * max(self.spread - 1, 0)
        return min(self.base, far), max(self.base, far)


@dataclass(frozen=True)
class Band:
    """Half-open height range [low, high) and its color rule."""

    name: str
    low: int
    high: int
    kind: BandKind
    red: Optional[ChannelRange] = None
    green: Optional[ChannelRange] = None
    blue: Optional[ChannelRange] = None
    gray: Optional[ChannelRange] = None

    def contains(self, h: int) -> bool:
        return self.low <= h < self.high


BANDS = (
    Band(
        "dark_grass", 0, 50, BandKind.CHANNELS,
        red=ChannelRange(0), green=ChannelRange(128, 65), blue=ChannelRange(0),
    ),
    Band(
        "light_grass", 50, 75, BandKind.CHANNELS,
        red=ChannelRange(64, 65), green=ChannelRange(128, 33), blue=ChannelRange(0, 33),
    ),
    Band(
        "yellow_grass", 75, 100, BandKind.CHANNELS,
        red=ChannelRange(128, 33), green=ChannelRange(160, 33), blue=ChannelRange(32, 33),
    ),
    Band(
        "dirt", 100, 125, BandKind.CHANNELS,
        red=ChannelRange(160, 21), green=ChannelRange(192, 65, -1), blue=ChannelRange(64, 33, -1),
    ),
    Band(
        "dark_dirt", 125, 150, BandKind.CHANNELS,
        red=ChannelRange(180, 61, -1), green=ChannelRange(120, 21, -1), blue=ChannelRange(20),
    ),
    Band(
        "light_dirt", 150, 175, BandKind.CHANNELS,
        red=ChannelRange(180, 41, -1), green=ChannelRange(120, 21, -1), blue=ChannelRange(20, 41),
    ),
    Band("rock", 175, 225, BandKind.GRAY, gray=ChannelRange(128, 98)),
    Band("snow", 225, 256, BandKind.SNOW),
)


def find_band(h: int) -> Band:
    """Return the single band containing height byte ``h``."""
    for band in BANDS:
        if band.contains(h):
            return band
    raise ValueError(f"Height byte {h} is outside 0..255")


def wrap_channel(value: float) -> int:
    """Wrap a channel into 0..254 with truncated modulo, then absolute value."""
    return int(abs(math.fmod(value, 255)))


# Upper limits of BANDS, for searchsorted lookups.
BAND_LIMITS = np.array([band.high for band in BANDS])
GRASS_RULE = -1


def _band_ranges(band: Band) -> Tuple[ChannelRange, ...]:
    if band.kind is BandKind.GRAY:
        return (band.gray,)
    return (band.red, band.green, band.blue)


def _randint(draws: np.ndarray, n: int) -> np.ndarray:
    """Array form of AleaPRNG.randint over already drawn values."""
    if n <= 0:
        raise ValueError(f"randint() bound must be positive, got {n}")
    return (draws * n).astype(np.int64)


@dataclass
class BiomeOptions:
    """Biome coloring options."""

    grass_threshold: int = 5  # Height byte below which random grass is used
    fractal_noise_range: int = 20  # Perturbation is in (-range, range)
    smoothing_noise_divisor: float = 20.0  # Shared noise is random() / divisor


class BiomeColorClassifier:
    """Assigns a biome color to every texel of a height field."""

    def __init__(self, options: Optional[BiomeOptions] = None):
        self.options = options or BiomeOptions()

    def fractal_rand(self, prng: AleaPRNG) -> int:
        """Random integer in (-range, range), sign chosen by a coin flip."""
        limit = self.options.fractal_noise_range
        if prng.randint(2) == 0:
            return prng.randint(limit)
        return -prng.randint(limit)

    def band_color(self, h: int, prng: AleaPRNG) -> Tuple[int, int, int]:
        """
        Base color of the band containing ``h`` with fractal noise applied.

        Channel bands perturb R, G and B independently, the rock band perturbs
        its shared gray value and snow is returned as-is.
        """
        band = find_band(h)

        if band.kind is BandKind.SNOW:
            return h, h, h

        if band.kind is BandKind.GRAY:
            gray = band.gray.sample(prng)
            gray = wrap_channel(gray + self.fractal_rand(prng))
            return gray, gray, gray

        r = band.red.sample(prng)
        g = band.green.sample(prng)
        b = band.blue.sample(prng)
        r = wrap_channel(r + self.fractal_rand(prng))
        g = wrap_channel(g + self.fractal_rand(prng))
        b = wrap_channel(b + self.fractal_rand(prng))
        return r, g, b

    def base_color(self, h: int, prng: AleaPRNG) -> Tuple[int, int, int]:
        """Color of height byte ``h`` before the shared smoothing noise."""
        if h < self.options.grass_threshold:
            return GRASS_COLORS[prng.randint(len(GRASS_COLORS))]
        return self.band_color(h, prng)

    def texel_color(self, h: int, prng: AleaPRNG) -> Tuple[int, int, int]:
        """Final 8-bit color of one texel."""
        r, g, b = self.base_color(h, prng)
        noise = prng.random() / self.options.smoothing_noise_divisor
        return (
            to_byte(r / 255.0 + noise),
            to_byte(g / 255.0 + noise),
            to_byte(b / 255.0 + noise),
        )

    def classify(
        self, height_field: HeightField, width: int, height: int, prng: AleaPRNG
    ) -> ColorField:
        """
        Build the biome color texture for a height field.

        The result matches calling texel_color() column by column (``for x:
        for z:``), but every draw of the pass is taken in one batch and the
        texels are colored band by band.

        Args:
            height_field: Normalized height field
            width: Texture width
            height: Texture height
            prng: PRNG for this pass; draws happen column by column

        Returns:
            New ColorField of the requested size
        """
        validate_texture_size(width, height)
        logger.debug("Classifying biome colors", width=width, height=height)

        # Texels in draw order, x-major
        heights = height_bytes(height_field, width, height).T.ravel()
        rules = np.where(
            heights < self.options.grass_threshold,
            GRASS_RULE,
            np.searchsorted(BAND_LIMITS, heights, side="right"),
        )

        counts = np.full(len(heights), 2, dtype=np.int64)
        for index, band in enumerate(BANDS):
            counts[rules == index] = self.draw_count(band)
        starts = np.cumsum(counts) - counts
        draws = prng.random_array(int(counts.sum()))

        colors = np.zeros((len(heights), 3), dtype=np.int64)
        noise_draws = np.zeros(len(heights))

        grass = rules == GRASS_RULE
        if grass.any():
            pos = starts[grass]
            colors[grass] = np.array(GRASS_COLORS)[_randint(draws[pos], len(GRASS_COLORS))]
            noise_draws[grass] = draws[pos + 1]

        for index, band in enumerate(BANDS):
            selected = rules == index
            if selected.any():
                colors[selected], noise_draws[selected] = self.band_colors(
                    band, heights[selected], draws, starts[selected]
                )

        noise = noise_draws / self.options.smoothing_noise_divisor
        channels = np.clip(((colors / 255.0 + noise[:, None]) * 255).astype(np.int64), 0, 255)
        pixels = np.ascontiguousarray(
            channels.reshape(width, height, 3).transpose(1, 0, 2), dtype=np.uint8
        )

        logger.debug("Biome colors classified", random_calls=prng.call_count)
        return ColorField(width, height, pixels)

    def draw_count(self, band: Band) -> int:
        """Number of PRNG draws one texel of ``band`` consumes, smoothing noise included."""
        if band.kind is BandKind.SNOW:
            return 1
        ranges = _band_ranges(band)
        return sum(1 for channel in ranges if channel.spread) + 2 * len(ranges) + 1

    def band_colors(
        self, band: Band, heights: np.ndarray, draws: np.ndarray, pos: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Array form of band_color() for texels whose draws start at ``pos``.

        Returns the (n, 3) base colors and the smoothing-noise draw of each texel.
        """
        if band.kind is BandKind.SNOW:
            return np.stack([heights, heights, heights], axis=1), draws[pos]

        channels = []
        for channel in _band_ranges(band):
            if channel.spread == 0:
                channels.append(np.full(len(pos), channel.base, dtype=np.int64))
            else:
                channels.append(channel.base + channel.direction * _randint(draws[pos], channel.spread))
                pos = pos + 1

        limit = self.options.fractal_noise_range
        wrapped = []
        for value in channels:
            coin = _randint(draws[pos], 2)
            magnitude = _randint(draws[pos + 1], limit)
            value = value + np.where(coin == 0, magnitude, -magnitude)
            wrapped.append(np.abs(np.fmod(value, 255)))
            pos = pos + 2

        if len(wrapped) == 1:
            wrapped = wrapped * 3
        return np.stack(wrapped, axis=1), draws[pos]
