"""
Export of generated textures.

PNG files are written with matplotlib; the terrain dump is plain text with
one line per texel.
"""

from pathlib import Path
from typing import Union

import matplotlib.image as mpimg
import structlog

from ..core.color_field import ColorField

logger = structlog.get_logger()

PathLike = Union[str, Path]

TERRAIN_TEXT_HEADER = "Terrain data: vertex positions (x,y,z) and colors (r,g,b)"


def save_texture(color_field: ColorField, path: PathLike) -> Path:
    """
    Write a ColorField as an RGBA PNG with an opaque alpha channel.

    Image column is x and image row is z.

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    mpimg.imsave(path, color_field.pixels, format="png")
    logger.info("Texture saved", path=str(path), width=color_field.width, height=color_field.height)
    return path


def save_terrain_as_text(
    height_texture: ColorField, color_texture: ColorField, path: PathLike
) -> Path:
    """
    Write the terrain as text: a header line, then ``x  height  z  r  g  b``
    for every texel, columns outermost.

    Returns:
        Path written
    """
    if (height_texture.width, height_texture.height) != (color_texture.width, color_texture.height):
        raise ValueError("Height and color textures must have the same size")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as fout:
        fout.write(TERRAIN_TEXT_HEADER + "\n")
        for x in range(height_texture.width):
            for z in range(height_texture.height):
                height_value = int(height_texture.pixels[z, x, 0])
                r, g, b = color_texture.get_color(x, z)
                fout.write(f"{x}  {height_value}  {z}  {r}  {g}  {b}\n")

    logger.info("Terrain text saved", path=str(path))
    return path
