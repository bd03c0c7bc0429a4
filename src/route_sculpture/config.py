"""
Sculpture configuration value objects.

A SculptureConfig describes the physical object the caller wants printed:
platform shape and size, layer heights, terrain exaggeration and route
styling. It is immutable; use ``replace()`` to derive a modified copy.

Units:
- size is in centimeters (the product sells 10, 15 and 20 cm pieces)
- base_height, rim_height and route_thickness are in millimeters
- elevation_scale is a dimensionless terrain exaggeration factor
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Material(str, Enum):
    """Printing material."""

    PLA = "pla"
    WOOD = "wood"
    RESIN = "resin"


class Shape(str, Enum):
    """Base platform shape."""

    CIRCULAR = "circular"
    RECTANGULAR = "rectangular"


class RouteStyle(str, Enum):
    """How the route is rendered on the terrain surface."""

    RAISED = "raised"
    ENGRAVED = "engraved"


class TerrainMode(str, Enum):
    """Where terrain elevations come from."""

    ROUTE = "route"
    TERRAIN = "terrain"


SCULPTURE_SIZES = (10, 15, 20)  # cm

# camelCase keys used by the upstream configuration payloads
_CAMEL_KEYS = {
    "baseHeight": "base_height",
    "rimHeight": "rim_height",
    "routeThickness": "route_thickness",
    "elevationScale": "elevation_scale",
    "terrainHeightLimit": "terrain_height_limit",
    "routeClearance": "route_clearance",
    "terrainSmoothing": "terrain_smoothing",
    "terrainMode": "terrain_mode",
    "terrainResolution": "terrain_resolution",
    "routeColor": "route_color",
    "terrainColor": "terrain_color",
    "routeStyle": "route_style",
    "showBase": "show_base",
}


@dataclass(frozen=True)
class SculptureConfig:
    """
    Physical configuration of a route sculpture.

    Attributes:
        material: Printing material
        shape: Platform shape
        size: Platform diameter / edge length in cm
        base_height: Base slab thickness in mm
        rim_height: Raised border height in mm (0 disables the rim)
        route_thickness: Route tube / groove width in mm
        elevation_scale: Terrain exaggeration multiplier
        terrain_height_limit: Fraction of available height the terrain may use
        route_clearance: Gap kept between route and terrain surface
        terrain_smoothing: Smoothing passes applied by the mesh builder
        terrain_mode: Elevation source (route points or terrain tiles)
        terrain_resolution: Elevation grid size (cells per axis)
        route_color: Route color as hex string
        terrain_color: Terrain color as hex string
        route_style: Raised tube or engraved groove
        show_base: Whether the base platform is generated
    """

    material: Material = Material.PLA
    shape: Shape = Shape.CIRCULAR
    size: float = 15.0
    base_height: float = 5.0
    rim_height: float = 2.0
    route_thickness: float = 2.0
    elevation_scale: float = 1.5
    terrain_height_limit: float = 0.8
    route_clearance: float = 0.05
    terrain_smoothing: int = 1
    terrain_mode: TerrainMode = TerrainMode.ROUTE
    terrain_resolution: int = 128
    route_color: str = "#4ade80"
    terrain_color: str = "#8b7355"
    route_style: RouteStyle = RouteStyle.ENGRAVED
    show_base: bool = True

    def __post_init__(self) -> None:
        """Coerce enum fields and validate ranges."""
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "material", Material(self.material))
        object.__setattr__(self, "shape", Shape(self.shape))
        object.__setattr__(self, "route_style", RouteStyle(self.route_style))
        object.__setattr__(self, "terrain_mode", TerrainMode(self.terrain_mode))

        if self.size <= 0:
            raise ValueError("size must be positive")
        if self.base_height < 0:
            raise ValueError("base_height must be non-negative")
        if self.rim_height < 0:
            raise ValueError("rim_height must be non-negative")
        if self.route_thickness < 0:
            raise ValueError("route_thickness must be non-negative")
        if self.elevation_scale < 0:
            raise ValueError("elevation_scale must be non-negative")
        if self.terrain_resolution < 1:
            raise ValueError("terrain_resolution must be >= 1")
        if self.terrain_smoothing < 0:
            raise ValueError("terrain_smoothing must be non-negative")

    @property
    def size_mm(self) -> float:
        """Platform size in mm."""
        return self.size * 10.0

    @property
    def grid_size(self) -> int:
        """Elevation grid dimension (alias of terrain_resolution)."""
        return self.terrain_resolution

    def replace(self, **changes: Any) -> SculptureConfig:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        for key in ("material", "shape", "route_style", "terrain_mode"):
            data[key] = data[key].value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SculptureConfig:
        """
        Build a config from a dict with camelCase or snake_case keys.

        Unknown keys (text settings, rotation, ...) are ignored.
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name in field_names:
                kwargs[name] = value
        return cls(**kwargs)


DEFAULT_SCULPTURE_CONFIG = SculptureConfig()


@dataclass(frozen=True)
class SculpturePreset:
    """Named bundle of style settings."""

    id: str
    name: str
    description: str
    settings: dict[str, Any]


SCULPTURE_PRESETS: dict[str, SculpturePreset] = {
    preset.id: preset
    for preset in (
        SculpturePreset(
            id="classic-earth",
            name="Classic Earth",
            description="Natural terrain with green route",
            settings={
                "terrain_color": "#8b7355",
                "route_color": "#4ade80",
                "route_style": "raised",
                "elevation_scale": 1.5,
                "terrain_height_limit": 0.8,
                "route_clearance": 0.05,
                "terrain_smoothing": 1,
                "terrain_mode": "route",
                "terrain_resolution": 128,
            },
        ),
        SculpturePreset(
            id="midnight-gold",
            name="Midnight Gold",
            description="Dark terrain with golden path",
            settings={
                "terrain_color": "#2d3748",
                "route_color": "#f6ad55",
                "route_style": "raised",
                "elevation_scale": 1.8,
                "terrain_height_limit": 0.85,
                "route_clearance": 0.06,
                "terrain_smoothing": 1,
                "terrain_mode": "route",
                "terrain_resolution": 128,
            },
        ),
        SculpturePreset(
            id="ocean-blue",
            name="Ocean Blue",
            description="Coastal vibes with engraved route",
            settings={
                "terrain_color": "#64748b",
                "route_color": "#22d3ee",
                "route_style": "engraved",
                "elevation_scale": 1.2,
                "terrain_height_limit": 0.7,
                "route_clearance": 0.04,
                "terrain_smoothing": 2,
                "terrain_mode": "route",
                "terrain_resolution": 96,
            },
        ),
        SculpturePreset(
            id="forest-trail",
            name="Forest Trail",
            description="Deep green with engraved path",
            settings={
                "terrain_color": "#166534",
                "route_color": "#a3e635",
                "route_style": "engraved",
                "elevation_scale": 2.0,
                "terrain_height_limit": 0.9,
                "route_clearance": 0.06,
                "terrain_smoothing": 1,
                "terrain_mode": "terrain",
                "terrain_resolution": 128,
            },
        ),
        SculpturePreset(
            id="snow-peak",
            name="Snow Peak",
            description="Alpine white with red trail",
            settings={
                "terrain_color": "#e5e7eb",
                "route_color": "#ef4444",
                "route_style": "raised",
                "elevation_scale": 2.5,
                "terrain_height_limit": 1.0,
                "route_clearance": 0.08,
                "terrain_smoothing": 0,
                "terrain_mode": "terrain",
                "terrain_resolution": 128,
            },
        ),
        SculpturePreset(
            id="desert-sand",
            name="Desert Sand",
            description="Warm desert tones",
            settings={
                "terrain_color": "#fcd34d",
                "route_color": "#dc2626",
                "route_style": "raised",
                "elevation_scale": 1.0,
                "terrain_height_limit": 0.6,
                "route_clearance": 0.03,
                "terrain_smoothing": 2,
                "terrain_mode": "route",
                "terrain_resolution": 96,
            },
        ),
        SculpturePreset(
            id="monochrome",
            name="Monochrome",
            description="Clean black and white",
            settings={
                "terrain_color": "#f5f5f5",
                "route_color": "#1a1a1a",
                "route_style": "raised",
                "elevation_scale": 1.5,
                "terrain_height_limit": 0.8,
                "route_clearance": 0.05,
                "terrain_smoothing": 1,
                "terrain_mode": "route",
                "terrain_resolution": 128,
            },
        ),
        SculpturePreset(
            id="volcanic",
            name="Volcanic",
            description="Dark rock with lava trail",
            settings={
                "terrain_color": "#44403c",
                "route_color": "#f97316",
                "route_style": "engraved",
                "elevation_scale": 2.2,
                "terrain_height_limit": 0.95,
                "route_clearance": 0.07,
                "terrain_smoothing": 0,
                "terrain_mode": "terrain",
                "terrain_resolution": 128,
            },
        ),
    )
}


def apply_preset(config: SculptureConfig, preset_id: str) -> SculptureConfig:
    """Return ``config`` with a style preset applied.

    Raises:
        KeyError: If the preset does not exist
    """
    if preset_id not in SCULPTURE_PRESETS:
        raise KeyError(
            f"Unknown preset '{preset_id}'. Available: {list(SCULPTURE_PRESETS)}"
        )
    return config.replace(**SCULPTURE_PRESETS[preset_id].settings)
