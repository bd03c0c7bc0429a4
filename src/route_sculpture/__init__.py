"""
Route Sculpture - 3D-printable terrain sculptures from GPS routes.

Main exports:
- RouteData, RoutePoint: Route model
- SculptureConfig: Sculpture configuration and style presets
- build_elevation_grid: Elevation grid from route points or terrain tiles
- ElevationGridRequester: Last-request-wins grid fetching
- validate_for_printing: Manufacturability checks and print estimates
- export_to_stl: Binary / ASCII STL export
- MeshGeometry, SceneNode: Scene graph consumed by validation and export
"""

from route_sculpture.config import (
    DEFAULT_SCULPTURE_CONFIG,
    SCULPTURE_PRESETS,
    SCULPTURE_SIZES,
    Material,
    RouteStyle,
    SculptureConfig,
    SculpturePreset,
    Shape,
    TerrainMode,
    apply_preset,
)
from route_sculpture.elevation import (
    ElevationGridRequester,
    ElevationGridResult,
    TerrainTileSource,
    build_elevation_grid,
    build_route_grid,
    decode_terrain_rgb,
)
from route_sculpture.geometry import MeshGeometry, Scene, SceneNode, merge_geometries
from route_sculpture.manufacturing import (
    ExportResult,
    PrintStats,
    PrintValidationResult,
    ValidationCheck,
    calculate_print_stats,
    export_combined_geometries,
    export_to_stl,
    generate_filename,
    get_quick_print_status,
    validate_for_printing,
    validate_mesh_for_printing,
)
from route_sculpture.materials import MaterialParams, get_material_params
from route_sculpture.route import RouteData, RoutePoint, RouteStats

# Submodules for more specific imports
from . import elevation, geometry, io, manufacturing, materials

__version__ = "0.1.0"

__all__ = [
    # Route
    "RouteData",
    "RoutePoint",
    "RouteStats",
    # Configuration
    "SculptureConfig",
    "SculpturePreset",
    "DEFAULT_SCULPTURE_CONFIG",
    "SCULPTURE_PRESETS",
    "SCULPTURE_SIZES",
    "Material",
    "Shape",
    "RouteStyle",
    "TerrainMode",
    "apply_preset",
    # Elevation
    "ElevationGridRequester",
    "ElevationGridResult",
    "TerrainTileSource",
    "build_elevation_grid",
    "build_route_grid",
    "decode_terrain_rgb",
    # Geometry
    "MeshGeometry",
    "SceneNode",
    "Scene",
    "merge_geometries",
    # Manufacturing
    "PrintValidationResult",
    "ValidationCheck",
    "PrintStats",
    "ExportResult",
    "validate_for_printing",
    "get_quick_print_status",
    "calculate_print_stats",
    "export_to_stl",
    "export_combined_geometries",
    "validate_mesh_for_printing",
    "generate_filename",
    # Materials
    "MaterialParams",
    "get_material_params",
    # Submodules
    "elevation",
    "geometry",
    "io",
    "manufacturing",
    "materials",
]
