#!/usr/bin/env python3
"""
Simple demo script showing terrain texture generation.
"""

import numpy as np
from terrain_map.api import TerrainMapSession
from terrain_map.config import Settings
from terrain_map.core.biomes import BANDS, GRASS_COLORS
from terrain_map.core.color_field import height_bytes


def main():
    """Demonstrate height field and biome color generation."""
    print("Terrain Map Generation Demo")
    print("=" * 40)

    for roughness in [0.3, 0.7, 1.0]:
        print(f"\nRoughness {roughness}:")
        print("-" * 30)

        settings = Settings(edge_size=7, roughness=roughness, texture_width=128,
                            texture_height=128, seed="demo123")
        maps = TerrainMapSession(settings).generate()
        values = maps.height_field.values

        print(f"  Grid size: {maps.height_field.size} x {maps.height_field.size}")
        print(f"  Mean height: {np.mean(values):.3f}")
        print(f"  Std deviation: {np.std(values):.3f}")

        # Show how texels fall into the color bands
        heights = height_bytes(maps.height_field, settings.texture_width, settings.texture_height)
        total = heights.size
        print("  Band distribution:")
        grass = np.sum(heights < 5)
        print(f"    {'grass':>12}: {'#' * int(grass / total * 40)} ({grass})")
        for band in BANDS:
            count = np.sum((heights >= max(band.low, 5)) & (heights < band.high))
            bar = '#' * int(count / total * 40)
            print(f"    {band.name:>12}: {bar} ({count})")

    print(f"\nGrass palette: {', '.join(str(c) for c in GRASS_COLORS)}")


if __name__ == "__main__":
    main()
