"""Configuration management."""

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings pulled from TERRAIN_* environment variables."""

    # Generation
    edge_size: int = Field(default=9, ge=1, le=12, description="Grid side is 2**edge_size + 1")
    roughness: float = Field(default=0.7, ge=0.0, le=1.0, description="Displacement damping factor")
    seed: Optional[str] = Field(default=None, description="PRNG seed; unset seeds from the clock")

    # Textures
    texture_width: int = Field(default=512, ge=1, description="Output texture width")
    texture_height: int = Field(default=512, ge=1, description="Output texture height")

    # Export
    output_dir: str = Field(default=".", description="Directory for exported files")
    height_texture_name: str = Field(default="heightTexture.png", description="Height texture file")
    color_texture_name: str = Field(default="colorTexture.png", description="Color texture file")
    terrain_text_name: str = Field(default="terrain.dat", description="Terrain text dump file")
    save_terrain_text: bool = Field(default=False, description="Also write the terrain text dump")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    class Config:
        env_prefix = "TERRAIN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If any value fails validation
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
