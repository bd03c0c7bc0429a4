"""
Route-mode elevation grid.

Fills a square grid with the elevation of the nearest route point
(nearest-neighbor, no smoothing). Distance is Euclidean in (lng, lat)
degrees, which is an approximation of true ground distance.

Lookups go through a coarse spatial hash over the route bounding box:
each cell searches the 3x3 neighborhood of its bucket and falls back to a
full scan when that neighborhood is empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from route_sculpture.route import RouteData

logger = logging.getLogger(__name__)

MIN_BUCKET_COUNT = 8
DEGENERATE_RANGE = 0.001  # degrees, used when the bounds have zero width


def bucket_count_for(grid_size: int) -> int:
    """Buckets per axis of the spatial hash."""
    return max(MIN_BUCKET_COUNT, grid_size // 4)


def effective_ranges(route: RouteData) -> tuple[float, float]:
    """(lng_range, lat_range) of the route bounds, zero widths replaced."""
    return (route.lng_span or DEGENERATE_RANGE, route.lat_span or DEGENERATE_RANGE)


def cell_coordinates(route: RouteData, grid_size: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Geographic position of every grid column and row.

    Returns:
        (lngs, lats): column longitudes and row latitudes, each of length
        ``grid_size``; position ``i`` sits at ``min + i / grid_size * range``
    """
    (min_lng, min_lat), _ = route.bounds
    lng_range, lat_range = effective_ranges(route)
    steps = np.arange(grid_size) / grid_size
    return min_lng + steps * lng_range, min_lat + steps * lat_range


class _SpatialHash:
    """Buckets of (lng, lat, elevation) samples keyed by integer cell."""

    def __init__(self, samples: NDArray[np.float64], route: RouteData, bucket_count: int):
        (self.min_lng, self.min_lat), _ = route.bounds
        self.lng_range, self.lat_range = effective_ranges(route)
        self.bucket_count = bucket_count
        self.samples = samples

        bx = np.floor((samples[:, 0] - self.min_lng) / self.lng_range * bucket_count).astype(int)
        by = np.floor((samples[:, 1] - self.min_lat) / self.lat_range * bucket_count).astype(int)

        members: dict[tuple[int, int], list[int]] = {}
        for i, key in enumerate(zip(bx.tolist(), by.tolist())):
            members.setdefault(key, []).append(i)
        self._buckets = {key: np.array(idx) for key, idx in members.items()}
        self._neighborhoods: dict[tuple[int, int], NDArray[np.int64]] = {}

    def neighborhood(self, bucket_x: int, bucket_y: int) -> NDArray[np.int64]:
        """
        Sample indices in the 3x3 buckets around (bucket_x, bucket_y).

        Ordered by bucket x, then bucket y, then insertion order, so argmin
        over the result picks the first point found at the minimum distance.
        """
        key = (bucket_x, bucket_y)
        cached = self._neighborhoods.get(key)
        if cached is not None:
            return cached

        parts = []
        for nx in range(bucket_x - 1, bucket_x + 2):
            for ny in range(bucket_y - 1, bucket_y + 2):
                bucket = self._buckets.get((nx, ny))
                if bucket is not None:
                    parts.append(bucket)

        indices = np.concatenate(parts) if parts else np.empty(0, dtype=np.int64)
        self._neighborhoods[key] = indices
        return indices


def build_route_grid(route: RouteData, grid_size: int) -> NDArray[np.float64] | None:
    """
    Build a nearest-neighbor elevation grid from route points.

    Args:
        route: Route with at least one elevation-bearing point
        grid_size: Cells per axis (>= 1)

    Returns:
        (grid_size, grid_size) array indexed [row][col] with rows following
        latitude and columns following longitude, or None when the route has
        no elevation data
    """
    if grid_size < 1:
        raise ValueError("grid_size must be >= 1")

    if not route.has_elevation:
        return None

    samples = route.elevation_samples()
    bucket_count = bucket_count_for(grid_size)
    index = _SpatialHash(samples, route, bucket_count)
    lngs, lats = cell_coordinates(route, grid_size)

    grid = np.empty((grid_size, grid_size), dtype=np.float64)
    fallbacks = 0

    for row in range(grid_size):
        lat = lats[row]
        bucket_y = int(np.floor(row / grid_size * bucket_count))

        for col in range(grid_size):
            lng = lngs[col]
            bucket_x = int(np.floor(col / grid_size * bucket_count))

            candidates = index.neighborhood(bucket_x, bucket_y)
            if candidates.size == 0:
                # sparse data: scan everything
                candidates_xy = samples
                fallbacks += 1
            else:
                candidates_xy = samples[candidates]

            dist = np.hypot(candidates_xy[:, 0] - lng, candidates_xy[:, 1] - lat)
            grid[row, col] = candidates_xy[int(np.argmin(dist)), 2]

    logger.debug(
        "Route grid %dx%d from %d points (%d buckets/axis, %d full scans)",
        grid_size,
        grid_size,
        len(samples),
        bucket_count,
        fallbacks,
    )
    grid.flags.writeable = False
    return grid
