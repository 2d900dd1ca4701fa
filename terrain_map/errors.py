"""Exceptions raised by terrain map generation."""


class TerrainMapError(Exception):
    """Base error for terrain map generation."""


class ConfigurationError(TerrainMapError, ValueError):
    """Raised when generation parameters or settings are invalid."""


class GenerationError(TerrainMapError, RuntimeError):
    """Raised when a generation pass cannot produce a well-defined result."""


class DegenerateFieldError(GenerationError):
    """
    Raised when a height field has no spread to normalize (max == min).

    The uniform-zero field produced instead is kept on ``field`` so the caller
    can decide whether to use it.
    """

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field
