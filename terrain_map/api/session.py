"""
Generation sessions: one call produces a matching height/color texture pair.

A session can regenerate on demand (for example when a viewer asks for a new
map). Every pass builds a fresh PRNG and fresh grids, so earlier results are
never touched.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import structlog

from ..config import Settings
from ..core.biomes import BiomeColorClassifier, BiomeOptions
from ..core.color_field import ColorField, height_texture, validate_texture_size
from ..core.height_field import HeightField
from ..core.heightmap_generator import HeightmapConfig, HeightmapGenerator
from ..errors import TerrainMapError
from ..utils.random import Seed, create_prng, resolve_seed
from .export import save_terrain_as_text, save_texture

logger = structlog.get_logger()


@dataclass
class TerrainMaps:
    """Result of one generation pass."""

    seed: str
    height_field: HeightField
    height_texture: ColorField
    color_texture: ColorField


class TerrainMapSession:
    """Generates, regenerates and saves terrain texture pairs."""

    def __init__(self, settings: Optional[Settings] = None, biome_options: Optional[BiomeOptions] = None):
        self.settings = settings or Settings()
        validate_texture_size(self.settings.texture_width, self.settings.texture_height)
        self.generator = HeightmapGenerator(
            HeightmapConfig(edge_size=self.settings.edge_size, roughness=self.settings.roughness)
        )
        self.classifier = BiomeColorClassifier(biome_options)
        self.current: Optional[TerrainMaps] = None
        self.generation_count = 0

    def generate(self, seed: Optional[Seed] = None) -> TerrainMaps:
        """
        Run one full pass: height field, grayscale texture, biome colors.

        Args:
            seed: Seed for this pass; defaults to the configured seed, then
                to the system clock

        Returns:
            New TerrainMaps
        """
        seed = resolve_seed(seed if seed is not None else self.settings.seed)
        prng = create_prng(seed)
        width = self.settings.texture_width
        height = self.settings.texture_height

        log = logger.bind(seed=seed, edge_size=self.settings.edge_size, roughness=self.settings.roughness)
        log.info("Generating terrain maps", width=width, height=height)

        try:
            height_field = self.generator.generate(prng)
            maps = TerrainMaps(
                seed=seed,
                height_field=height_field,
                height_texture=height_texture(height_field, width, height),
                color_texture=self.classifier.classify(height_field, width, height, prng),
            )
        except TerrainMapError as e:
            log.error("Terrain generation failed", error=str(e))
            raise

        self.current = maps
        self.generation_count += 1
        log.info("Terrain maps generated", random_calls=prng.call_count)
        return maps

    def regenerate(self) -> TerrainMaps:
        """
        Produce a new pair.

        A session pinned to a configured seed reproduces the same maps; an
        unseeded session draws a new clock seed each time.
        """
        return self.generate()

    def save(self, output_dir=None, maps: Optional[TerrainMaps] = None) -> Dict[str, Path]:
        """
        Write the textures (and optionally the terrain text dump).

        Args:
            output_dir: Target directory; defaults to the configured one
            maps: Pair to save; defaults to the last generated pair

        Returns:
            Mapping of output kind to path written
        """
        maps = maps or self.current
        if maps is None:
            maps = self.generate()

        directory = Path(output_dir if output_dir is not None else self.settings.output_dir)
        paths = {
            "height": save_texture(maps.height_texture, directory / self.settings.height_texture_name),
            "color": save_texture(maps.color_texture, directory / self.settings.color_texture_name),
        }
        if self.settings.save_terrain_text:
            paths["text"] = save_terrain_as_text(
                maps.height_texture, maps.color_texture, directory / self.settings.terrain_text_name
            )
        return paths
