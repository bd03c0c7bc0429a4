"""
Terrain-RGB tiles.

Slippy-map tile math, the terrain-RGB height encoding and async tile
fetching. Elevation is packed into the RGB channels as

    height = -10000 + (R * 65536 + G * 256 + B) * 0.1   (meters)

Tiles are fetched concurrently with httpx and decoded with Pillow. A tile
that fails to download or decode is reported as missing, never raised.
"""

from __future__ import annotations

import asyncio
import io
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
import numpy as np
from PIL import Image

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.typing import ArrayLike, NDArray

    from route_sculpture.route import Bounds

logger = logging.getLogger(__name__)

MAPTILER_TERRAIN_URL = "https://api.maptiler.com/tiles/terrain-rgb-v2/{z}/{x}/{y}.{format}?key={key}"

TERRAIN_RGB_OFFSET = -10000.0
TERRAIN_RGB_STEP = 0.1

# (span threshold in degrees, zoom); first match wins
ZOOM_THRESHOLDS = (
    (1.0, 9),
    (0.5, 10),
    (0.2, 11),
    (0.1, 12),
    (0.05, 13),
)
MAX_ZOOM = 14


@dataclass(frozen=True)
class TerrainTileSource:
    """
    Where terrain-RGB tiles come from.

    Attributes:
        url_template: URL with ``{z}``, ``{x}``, ``{y}``, ``{format}`` and
            ``{key}`` placeholders
        api_key: Key substituted for ``{key}``
        timeout: Per-request timeout in seconds
        tile_format: Image extension substituted for ``{format}``
    """

    url_template: str = MAPTILER_TERRAIN_URL
    api_key: str = ""
    timeout: float = 10.0
    tile_format: str = "png"

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def tile_url(self, x: int, y: int, zoom: int) -> str:
        return self.url_template.format(z=zoom, x=x, y=y, format=self.tile_format, key=self.api_key)


@dataclass(frozen=True)
class TileBounds:
    """Geographic extent of one tile in degrees."""

    north: float
    south: float
    east: float
    west: float


def decode_terrain_rgb(r: ArrayLike, g: ArrayLike, b: ArrayLike) -> float | NDArray[np.float64]:
    """
    Decode terrain-RGB channels to meters.

    Accepts scalars or arrays; returns the same shape.
    """
    packed = (
        np.asarray(r, dtype=np.float64) * 65536
        + np.asarray(g, dtype=np.float64) * 256
        + np.asarray(b, dtype=np.float64)
    )
    heights = TERRAIN_RGB_OFFSET + packed * TERRAIN_RGB_STEP
    if heights.ndim == 0:
        return float(heights)
    return heights


def zoom_for_span(span: float) -> int:
    """Tile zoom level for a bounding box spanning ``span`` degrees."""
    for threshold, zoom in ZOOM_THRESHOLDS:
        if span > threshold:
            return zoom
    return MAX_ZOOM


def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> tuple[int, int]:
    """Slippy-map (x, y) of the tile containing (lat, lng)."""
    n = 2**zoom
    x = math.floor((lng + 180.0) / 360.0 * n)
    lat_rad = math.radians(lat)
    y = math.floor((1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0 * n)
    return x, y


def tile_bounds(x: int, y: int, zoom: int) -> TileBounds:
    """Inverse of :func:`lat_lng_to_tile`: the extent of tile (x, y)."""
    n = 2**zoom
    west = x / n * 360.0 - 180.0
    east = (x + 1) / n * 360.0 - 180.0
    north = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / n))))
    south = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * (y + 1) / n))))
    return TileBounds(north=north, south=south, east=east, west=west)


def tiles_covering(bounds: Bounds, zoom: int) -> list[tuple[int, int]]:
    """
    All (x, y) tiles intersecting a bounding box.

    Tile y grows southwards, so the northern edge gives the smallest y.
    """
    (min_lng, min_lat), (max_lng, max_lat) = bounds
    x_min, y_min = lat_lng_to_tile(max_lat, min_lng, zoom)
    x_max, y_max = lat_lng_to_tile(min_lat, max_lng, zoom)
    return [(x, y) for y in range(y_min, y_max + 1) for x in range(x_min, x_max + 1)]


@dataclass
class TerrainTile:
    """A decoded terrain-RGB tile."""

    x: int
    y: int
    zoom: int
    pixels: NDArray[np.uint8]  # (H, W, 3)

    @property
    def bounds(self) -> TileBounds:
        return tile_bounds(self.x, self.y, self.zoom)

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    def sample(self, lats: ArrayLike, lngs: ArrayLike) -> NDArray[np.float64]:
        """
        Elevation at each (lat, lng) pair, nearest pixel.

        Pixel indices are clamped to the tile so positions on or past an
        edge read the edge pixel.
        """
        lats = np.asarray(lats, dtype=np.float64)
        lngs = np.asarray(lngs, dtype=np.float64)
        b = self.bounds

        px = np.floor((lngs - b.west) / (b.east - b.west) * self.width).astype(int)
        py = np.floor((b.north - lats) / (b.north - b.south) * self.height).astype(int)
        px = np.clip(px, 0, self.width - 1)
        py = np.clip(py, 0, self.height - 1)

        rgb = self.pixels[py, px]
        return decode_terrain_rgb(rgb[..., 0], rgb[..., 1], rgb[..., 2])


def decode_tile_image(content: bytes) -> NDArray[np.uint8]:
    """Decode PNG / WebP bytes into an (H, W, 3) uint8 array."""
    with Image.open(io.BytesIO(content)) as img:
        return np.asarray(img.convert("RGB"), dtype=np.uint8)


async def fetch_tile(
    client: httpx.AsyncClient,
    source: TerrainTileSource,
    x: int,
    y: int,
    zoom: int,
) -> TerrainTile | None:
    """
    Download and decode one tile.

    Returns None (and logs at debug level) on HTTP errors, transport errors
    or undecodable images.
    """
    url = source.tile_url(x, y, zoom)
    try:
        resp = await client.get(url, timeout=source.timeout)
        resp.raise_for_status()
        pixels = decode_tile_image(resp.content)
    except httpx.HTTPError as err:
        logger.debug("Tile %d/%d/%d failed: %s", zoom, x, y, err)
        return None
    except (OSError, ValueError) as err:
        logger.debug("Tile %d/%d/%d could not be decoded: %s", zoom, x, y, err)
        return None

    return TerrainTile(x=x, y=y, zoom=zoom, pixels=pixels)


async def fetch_tiles(
    coords: Iterable[tuple[int, int]],
    zoom: int,
    source: TerrainTileSource,
    client: httpx.AsyncClient | None = None,
) -> dict[tuple[int, int], TerrainTile | None]:
    """
    Fetch tiles concurrently.

    Args:
        coords: (x, y) tiles to fetch
        zoom: Zoom level
        source: Tile endpoint
        client: Client to reuse; a new one is opened (and closed) if None

    Returns:
        Mapping of (x, y) to the decoded tile, or None where it failed
    """
    coords = list(coords)

    if client is None:
        async with httpx.AsyncClient(timeout=source.timeout) as own_client:
            return await fetch_tiles(coords, zoom, source, client=own_client)

    tiles = await asyncio.gather(*(fetch_tile(client, source, x, y, zoom) for x, y in coords))
    return dict(zip(coords, tiles))
