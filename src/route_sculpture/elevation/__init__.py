"""Elevation grids from route points or terrain-RGB tiles."""

from route_sculpture.elevation.builder import (
    ElevationGridRequester,
    ElevationGridResult,
    build_elevation_grid,
    build_terrain_grid,
)
from route_sculpture.elevation.route_grid import build_route_grid
from route_sculpture.elevation.tiles import (
    TerrainTile,
    TerrainTileSource,
    TileBounds,
    decode_terrain_rgb,
    decode_tile_image,
    fetch_tiles,
    lat_lng_to_tile,
    tile_bounds,
    tiles_covering,
    zoom_for_span,
)

__all__ = [
    "ElevationGridRequester",
    "ElevationGridResult",
    "build_elevation_grid",
    "build_terrain_grid",
    "build_route_grid",
    "TerrainTile",
    "TerrainTileSource",
    "TileBounds",
    "decode_terrain_rgb",
    "decode_tile_image",
    "fetch_tiles",
    "lat_lng_to_tile",
    "tile_bounds",
    "tiles_covering",
    "zoom_for_span",
]
