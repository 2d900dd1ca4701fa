"""Host-side API: generation sessions, export and the command line."""

from .session import TerrainMaps, TerrainMapSession
from .export import save_texture, save_terrain_as_text

__all__ = ["TerrainMaps", "TerrainMapSession", "save_texture", "save_terrain_as_text"]
