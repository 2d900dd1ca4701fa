"""
Heightmap generation module.

Implements midpoint displacement (diamond-square, "plasma") on a square grid
of side ``2**edge_size + 1``: the four corners are seeded, the grid is
refined coarse-to-fine by averaging diagonal ("square") and then axis-aligned
("diamond") neighbors plus a shrinking random offset, and the result is
rescaled into [0, 1].
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from ..errors import ConfigurationError, DegenerateFieldError, GenerationError
from .alea_prng import AleaPRNG
from .height_field import HeightField, average

logger = structlog.get_logger()


def _square_deltas(half):
    # Same neighbor order as HeightmapGenerator.square
    return ((-half, -half), (half, -half), (half, half), (-half, half))


def _diamond_deltas(half):
    # Same neighbor order as HeightmapGenerator.diamond
    return ((0, -half), (half, 0), (0, half), (-half, 0))


def _neighbor_means(grid: np.ndarray, xs: np.ndarray, ys: np.ndarray, deltas) -> np.ndarray:
    """
    Mean of the in-bounds neighbors of every (xs[i], ys[i]).

    Neighbors are summed in ``deltas`` order, so each mean is bit-identical
    to ``average()`` over the same samples. Out-of-bounds neighbors add 0.0
    and are left out of the count.
    """
    max_index = grid.shape[0] - 1
    total = np.zeros(len(xs))
    count = np.zeros(len(xs))
    for dx, dy in deltas:
        nx = xs + dx
        ny = ys + dy
        valid = (nx >= 0) & (nx <= max_index) & (ny >= 0) & (ny <= max_index)
        samples = grid[np.clip(ny, 0, max_index), np.clip(nx, 0, max_index)]
        total += np.where(valid, samples, 0.0)
        count += valid
    if np.any(count == 0):
        raise GenerationError("Cannot average an empty set of heights")
    return total / count


@dataclass
class HeightmapConfig:
    """Configuration for heightmap generation."""

    edge_size: int = 9
    roughness: float = 0.7

    def validate(self) -> None:
        """Reject settings that cannot produce a grid."""
        if isinstance(self.edge_size, bool) or not isinstance(self.edge_size, (int, np.integer)):
            raise ConfigurationError(f"edge_size must be an integer, got {self.edge_size!r}")
        if self.edge_size < 1:
            raise ConfigurationError(f"edge_size must be >= 1, got {self.edge_size}")
        if isinstance(self.roughness, bool) or not isinstance(
            self.roughness, (int, float, np.integer, np.floating)
        ):
            raise ConfigurationError(f"roughness must be a number, got {self.roughness!r}")
        roughness = float(self.roughness)
        if not math.isfinite(roughness) or not 0 <= roughness <= 1:
            raise ConfigurationError(f"roughness must be within [0, 1], got {self.roughness}")


class HeightmapGenerator:
    """
    Generates normalized height fields with the diamond-square algorithm.

    The generator holds no per-pass state: the grid and the PRNG are passed
    to every step, so repeated calls never share data.
    """

    def __init__(self, config: Optional[HeightmapConfig] = None):
        self.config = config or HeightmapConfig()
        self.config.validate()

    def create_field(self) -> HeightField:
        """
        Allocate a grid and seed its corners.

        Cells are pre-filled with ``x + y``; the corners are then set so the
        terrain starts out sloped instead of flat.
        """
        height_field = HeightField(self.config.edge_size)
        size = height_field.size
        max_index = height_field.max_index

        xs, ys = np.meshgrid(np.arange(size), np.arange(size))
        height_field.values[:] = (xs + ys).ravel()

        height_field.set_height(0, 0, max_index)
        height_field.set_height(max_index, 0, size / 2.0)
        height_field.set_height(max_index, max_index, 0.0)
        height_field.set_height(0, max_index, max_index / 2.0)
        return height_field

    def square(self, height_field: HeightField, x: int, y: int, half: int, offset: float) -> None:
        """Set (x, y) to the mean of its diagonal neighbors plus offset."""
        mean = average(
            [
                height_field.get_height(x - half, y - half),
                height_field.get_height(x + half, y - half),
                height_field.get_height(x + half, y + half),
                height_field.get_height(x - half, y + half),
            ]
        )
        height_field.set_height(x, y, mean + offset)

    def diamond(self, height_field: HeightField, x: int, y: int, half: int, offset: float) -> None:
        """Set (x, y) to the mean of its axis-aligned neighbors plus offset."""
        mean = average(
            [
                height_field.get_height(x, y - half),
                height_field.get_height(x + half, y),
                height_field.get_height(x, y + half),
                height_field.get_height(x - half, y),
            ]
        )
        height_field.set_height(x, y, mean + offset)

    def divide_level(self, height_field: HeightField, size: int, prng: AleaPRNG) -> bool:
        """
        Run one subdivision level: every square step, then every diamond step.

        Args:
            height_field: Grid being refined
            size: Side of the squares refined at this level
            prng: Source of the displacement offsets

        Returns:
            False when the level is below one cell and nothing was done
        """
        half = size // 2
        if half < 1:
            return False

        max_index = height_field.max_index
        scale = self.config.roughness * size
        grid = height_field.as_array()

        # Points of one step never read each other, so each step is applied
        # as a whole array. Offsets are drawn in row-by-row visiting order.
        centers = np.arange(half, max_index, size)
        ys, xs = (axis.ravel() for axis in np.meshgrid(centers, centers, indexing="ij"))
        means = _neighbor_means(grid, xs, ys, _square_deltas(half))
        grid[ys, xs] = means + prng.uniform_array(-scale, scale, len(xs))

        # Diamond centers read the square centers written above.
        rows = [
            (y, np.arange((y + half) % size, max_index + 1, size))
            for y in range(0, max_index + 1, half)
        ]
        xs = np.concatenate([row for _, row in rows])
        ys = np.concatenate([np.full(len(row), y) for y, row in rows])
        means = _neighbor_means(grid, xs, ys, _diamond_deltas(half))
        grid[ys, xs] = means + prng.uniform_array(-scale, scale, len(xs))

        return True

    def divide(self, height_field: HeightField, size: int, prng: AleaPRNG) -> None:
        """Recursively subdivide from ``size`` down to single cells."""
        if self.divide_level(height_field, size, prng):
            self.divide(height_field, size // 2, prng)

    def normalize(self, height_field: HeightField) -> HeightField:
        """
        Rescale all heights into [0, 1] in place.

        The running minimum and maximum both start at 0, so a field that never
        goes below 0 keeps 0 as its lower bound.

        Raises:
            DegenerateFieldError: If max == min; the field is zeroed first
        """
        values = height_field.values
        min_value = min(0.0, float(values.min()))
        max_value = max(0.0, float(values.max()))

        if max_value == min_value:
            values[:] = 0.0
            raise DegenerateFieldError(
                f"Height field is flat (min == max == {min_value}); cannot normalize",
                field=height_field,
            )

        values -= min_value
        values /= max_value - min_value
        return height_field

    def generate(self, prng: AleaPRNG) -> HeightField:
        """
        Generate a normalized height field.

        Args:
            prng: PRNG for this pass; it keeps advancing, so the same instance
                can be handed to the color classifier afterwards

        Returns:
            New HeightField with values in [0, 1]
        """
        logger.debug(
            "Generating height field",
            edge_size=self.config.edge_size,
            roughness=self.config.roughness,
        )
        height_field = self.create_field()
        self.divide(height_field, height_field.max_index, prng)

        logger.debug(
            "Height field subdivided",
            raw_min=float(height_field.values.min()),
            raw_max=float(height_field.values.max()),
            random_calls=prng.call_count,
        )
        return self.normalize(height_field)


def generate_height_field(
    edge_size: int = 9, roughness: float = 0.7, seed: Optional[str] = None
) -> HeightField:
    """Generate a height field with its own PRNG."""
    from ..utils.random import create_prng

    generator = HeightmapGenerator(HeightmapConfig(edge_size=edge_size, roughness=roughness))
    return generator.generate(create_prng(seed))
