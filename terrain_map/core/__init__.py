"""
Core terrain generation functionality.
"""

from .alea_prng import AleaPRNG
from .height_field import HeightField, MISSING, average
from .heightmap_generator import HeightmapGenerator, HeightmapConfig, generate_height_field
from .color_field import ColorField, height_texture
from .biomes import BiomeColorClassifier, BiomeOptions, BANDS, GRASS_COLORS

__all__ = ['AleaPRNG', 'HeightField', 'MISSING', 'average',
           'HeightmapGenerator', 'HeightmapConfig', 'generate_height_field',
           'ColorField', 'height_texture',
           'BiomeColorClassifier', 'BiomeOptions', 'BANDS', 'GRASS_COLORS']
