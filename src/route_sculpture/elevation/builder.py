"""
Elevation grid builder.

Two sources:

- route mode: nearest route point per cell, no I/O
- terrain mode: terrain-RGB tiles covering the route bounding box

Both are exposed through the async :func:`build_elevation_grid`.
:class:`ElevationGridRequester` adds last-request-wins cancellation for
callers that issue requests faster than tiles arrive (e.g. a UI slider).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace

import httpx
import numpy as np

from route_sculpture.config import TerrainMode
from route_sculpture.elevation.route_grid import build_route_grid, cell_coordinates, effective_ranges
from route_sculpture.elevation.tiles import (
    TerrainTileSource,
    fetch_tiles,
    lat_lng_to_tile,
    tiles_covering,
    zoom_for_span,
)
from route_sculpture.route import RouteData

logger = logging.getLogger(__name__)

TERRAIN_FETCH_ERROR = "Could not fetch terrain data"


@dataclass(frozen=True)
class ElevationGridResult:
    """
    Outcome of an elevation grid request.

    Attributes:
        grid: (grid_size, grid_size) read-only elevations in meters, or None
        loading: True only for placeholder results of an in-flight request
        error: Error message when the grid could not be built
        tile_coverage: Fraction of covering tiles that decoded (1.0 in route mode)
        stale: True when a newer request superseded this one
    """

    grid: np.ndarray | None
    loading: bool = False
    error: str | None = None
    tile_coverage: float = 1.0
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.grid is not None and self.error is None


async def build_terrain_grid(
    route: RouteData,
    grid_size: int,
    source: TerrainTileSource | None = None,
    client: httpx.AsyncClient | None = None,
) -> ElevationGridResult:
    """
    Sample terrain-RGB tiles over the route bounding box.

    Cells falling in a tile that failed to load get the route's minimum
    elevation. If no tile loads at all the result carries an error and no
    grid.
    """
    if grid_size < 1:
        raise ValueError("grid_size must be >= 1")

    source = source or TerrainTileSource()
    (min_lng, min_lat), _ = route.bounds
    lng_range, lat_range = effective_ranges(route)

    zoom = zoom_for_span(max(route.lat_span, route.lng_span))
    coords = tiles_covering(((min_lng, min_lat), (min_lng + lng_range, min_lat + lat_range)), zoom)

    tiles = await fetch_tiles(coords, zoom, source, client=client)
    loaded = {xy: tile for xy, tile in tiles.items() if tile is not None}
    coverage = len(loaded) / len(coords) if coords else 0.0

    if not loaded:
        logger.warning("No terrain tiles loaded (%d requested at zoom %d)", len(coords), zoom)
        return ElevationGridResult(grid=None, error=TERRAIN_FETCH_ERROR, tile_coverage=0.0)

    lngs, lats = cell_coordinates(route, grid_size)
    # tile x depends only on longitude, tile y only on latitude
    col_tiles = np.array([lat_lng_to_tile(min_lat, lng, zoom)[0] for lng in lngs])
    row_tiles = np.array([lat_lng_to_tile(lat, min_lng, zoom)[1] for lat in lats])

    grid = np.full((grid_size, grid_size), route.stats.min_elevation, dtype=np.float64)
    for (tx, ty), tile in loaded.items():
        rows = np.nonzero(row_tiles == ty)[0]
        cols = np.nonzero(col_tiles == tx)[0]
        if rows.size == 0 or cols.size == 0:
            continue
        lat_mesh, lng_mesh = np.meshgrid(lats[rows], lngs[cols], indexing="ij")
        grid[np.ix_(rows, cols)] = tile.sample(lat_mesh, lng_mesh)

    grid.flags.writeable = False

    logger.info(
        "Terrain grid %dx%d at zoom %d (%d/%d tiles)",
        grid_size,
        grid_size,
        zoom,
        len(loaded),
        len(coords),
    )
    return ElevationGridResult(grid=grid, tile_coverage=coverage)


async def build_elevation_grid(
    route: RouteData,
    grid_size: int = 32,
    mode: TerrainMode | str = TerrainMode.ROUTE,
    source: TerrainTileSource | None = None,
    client: httpx.AsyncClient | None = None,
) -> ElevationGridResult:
    """
    Build an elevation grid for a route.

    Args:
        route: Route to build the grid for
        grid_size: Cells per axis
        mode: ``route`` (route point elevations) or ``terrain`` (tiles)
        source: Tile endpoint for terrain mode
        client: HTTP client to reuse in terrain mode

    Returns:
        ElevationGridResult. Route mode without elevation data yields
        ``grid=None`` with no error.
    """
    mode = TerrainMode(mode)

    if mode is TerrainMode.TERRAIN:
        return await build_terrain_grid(route, grid_size, source=source, client=client)

    grid = build_route_grid(route, grid_size)
    if grid is not None:
        logger.info("Route grid %dx%d from %d points", grid_size, grid_size, len(route.elevation_points))
    return ElevationGridResult(grid=grid)


class ElevationGridRequester:
    """
    Issues elevation grid requests where only the latest one counts.

    Each :meth:`request` bumps a generation counter and cancels the previous
    in-flight task. A request that finishes after being superseded returns
    a result with ``stale=True``; only non-stale results are kept in
    :attr:`latest`.

    Example:
        >>> requester = ElevationGridRequester()
        >>> result = await requester.request(route, 64, "terrain")
        >>> if not result.stale:
        ...     use(result.grid)
    """

    def __init__(
        self,
        source: TerrainTileSource | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.source = source or TerrainTileSource()
        self.client = client
        self.latest: ElevationGridResult | None = None
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        """Abort the in-flight request; its caller receives a stale result."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def request(
        self,
        route: RouteData,
        grid_size: int = 32,
        mode: TerrainMode | str = TerrainMode.ROUTE,
    ) -> ElevationGridResult:
        self.cancel()
        generation = self._generation

        task = asyncio.ensure_future(
            build_elevation_grid(route, grid_size, mode, source=self.source, client=self.client)
        )
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug("Elevation request %d superseded", generation)
                return ElevationGridResult(grid=None, stale=True)
            raise

        if generation != self._generation:
            logger.debug("Discarding stale elevation result %d", generation)
            return replace(result, stale=True)

        self.latest = result
        self._task = None
        return result
