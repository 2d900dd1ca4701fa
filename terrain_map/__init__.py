"""
Procedural terrain textures: a diamond-square height field and a matching
biome color field.
"""

from .core import (
    AleaPRNG,
    BiomeColorClassifier,
    ColorField,
    HeightField,
    HeightmapConfig,
    HeightmapGenerator,
    generate_height_field,
    height_texture,
)
from .errors import ConfigurationError, DegenerateFieldError, GenerationError, TerrainMapError

__version__ = "0.1.0"

__all__ = [
    "AleaPRNG",
    "BiomeColorClassifier",
    "ColorField",
    "HeightField",
    "HeightmapConfig",
    "HeightmapGenerator",
    "generate_height_field",
    "height_texture",
    "ConfigurationError",
    "DegenerateFieldError",
    "GenerationError",
    "TerrainMapError",
]
