"""Errors for what can go wrong loading a tile atlas or rendering a map."""
import enum


class ConfigLoadErrorKind(enum.Enum):
    DESCRIPTOR_PARSE = "A problem with parsing the provided TOML"
    IMAGE_LOAD = "A problem with loading and processing images"
    MISSING_TILE = "One of the required materials had no tiles supplied"
    INVALID_GEOMETRY = "Tile dimensions cannot form a 2:1 isometric tile"


class ConfigLoadError(Exception):
    """An error with loading and processing a tile atlas descriptor.

    `detail` carries the underlying loader's message where there is one, and
    `material` names the uncovered material for `MISSING_TILE`.
    """

    def __init__(self, kind, detail=None, material=None):
        self.kind = kind
        self.detail = detail
        self.material = material
        super().__init__(str(self))

    def __str__(self):
        text = self.kind.value
        if self.material is not None:
            text = f"{text}: {self.material.name}"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text

    @classmethod
    def missing_tile(cls, material):
        return cls(ConfigLoadErrorKind.MISSING_TILE, material=material)


class RendererError(Exception):
    """An error with rendering an `IsoMap`, wrapping the image library's message."""

    def __init__(self, message):
        self.message = str(message)
        super().__init__(f"image library returned an error: {self.message}")
