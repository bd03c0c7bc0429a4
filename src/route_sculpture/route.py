"""
Route data model.

RouteData is produced upstream (GPX import, route drawing, activity import)
and is read-only here. Coordinates are WGS84 degrees, elevations meters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import numpy as np

EARTH_RADIUS_M = 6371000.0


@dataclass(frozen=True)
class RoutePoint:
    """Single route sample."""

    lat: float
    lng: float
    elevation: float | None = None
    time: datetime | None = None

    @property
    def has_elevation(self) -> bool:
        return self.elevation is not None


@dataclass(frozen=True)
class RouteStats:
    """
    Summary statistics for a route.

    Attributes:
        distance: Total distance in meters
        elevation_gain: Cumulative climb in meters
        elevation_loss: Cumulative descent in meters
        min_elevation: Lowest elevation in meters
        max_elevation: Highest elevation in meters
        duration: Elapsed time in seconds, if timestamps are available
    """

    distance: float = 0.0
    elevation_gain: float = 0.0
    elevation_loss: float = 0.0
    min_elevation: float = 0.0
    max_elevation: float = 0.0
    duration: float | None = None


Bounds = tuple[tuple[float, float], tuple[float, float]]


@dataclass(frozen=True)
class RouteData:
    """
    Ordered route with stats and bounding box.

    Attributes:
        points: Route samples in path order
        stats: Summary statistics
        bounds: ((min_lng, min_lat), (max_lng, max_lat))
        source: Where the route came from ("gpx", "strava", "drawn", ...)
        name: Optional display name
    """

    points: tuple[RoutePoint, ...]
    stats: RouteStats
    bounds: Bounds
    source: str = "unknown"
    name: str | None = None
    _elevation_points: tuple[RoutePoint, ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))
        (min_lng, min_lat), (max_lng, max_lat) = self.bounds
        object.__setattr__(
            self,
            "bounds",
            ((float(min_lng), float(min_lat)), (float(max_lng), float(max_lat))),
        )
        object.__setattr__(
            self,
            "_elevation_points",
            tuple(p for p in self.points if p.has_elevation),
        )

    @property
    def has_elevation(self) -> bool:
        """True if at least one point carries an elevation."""
        return bool(self._elevation_points)

    @property
    def elevation_points(self) -> tuple[RoutePoint, ...]:
        """Points that carry an elevation, in path order."""
        return self._elevation_points

    @property
    def lat_span(self) -> float:
        return self.bounds[1][1] - self.bounds[0][1]

    @property
    def lng_span(self) -> float:
        return self.bounds[1][0] - self.bounds[0][0]

    def elevation_samples(self) -> np.ndarray:
        """Return elevation-bearing points as an (N, 3) array of (lng, lat, elevation)."""
        pts = self._elevation_points
        if not pts:
            return np.empty((0, 3))
        return np.array([(p.lng, p.lat, p.elevation) for p in pts], dtype=np.float64)

    @classmethod
    def from_points(
        cls,
        points: list[RoutePoint],
        source: str = "unknown",
        name: str | None = None,
    ) -> RouteData:
        """
        Build RouteData from points, deriving stats and bounds.

        Args:
            points: Route samples in path order (at least one)
            source: Source tag
            name: Optional display name

        Returns:
            RouteData with computed stats and bounding box
        """
        if not points:
            raise ValueError("at least one point is required")

        lngs = [p.lng for p in points]
        lats = [p.lat for p in points]
        bounds = ((min(lngs), min(lats)), (max(lngs), max(lats)))

        distance = 0.0
        for a, b in zip(points[:-1], points[1:]):
            distance += haversine_distance(a.lat, a.lng, b.lat, b.lng)

        elevations = [p.elevation for p in points if p.elevation is not None]
        gain = loss = 0.0
        for a, b in zip(elevations[:-1], elevations[1:]):
            delta = b - a
            if delta > 0:
                gain += delta
            else:
                loss -= delta

        times = [p.time for p in points if p.time is not None]
        duration = (times[-1] - times[0]).total_seconds() if len(times) >= 2 else None

        stats = RouteStats(
            distance=distance,
            elevation_gain=gain,
            elevation_loss=loss,
            min_elevation=min(elevations) if elevations else 0.0,
            max_elevation=max(elevations) if elevations else 0.0,
            duration=duration,
        )
        return cls(points=tuple(points), stats=stats, bounds=bounds, source=source, name=name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RouteData:
        """
        Build RouteData from the upstream JSON shape.

        Points use ``lat``/``lng`` (``latitude``/``longitude`` also accepted),
        stats use camelCase keys and bounds is ``[[minLng, minLat], [maxLng, maxLat]]``.
        Missing stats or bounds are derived from the points.
        """
        points = [_point_from_dict(p) for p in data.get("points", [])]
        source = data.get("source", "unknown")
        name = data.get("name")

        if "stats" not in data or "bounds" not in data:
            return cls.from_points(points, source=source, name=name)

        raw = data["stats"]
        stats = RouteStats(
            distance=float(raw.get("distance", 0.0)),
            elevation_gain=float(raw.get("elevationGain", raw.get("elevation_gain", 0.0))),
            elevation_loss=float(raw.get("elevationLoss", raw.get("elevation_loss", 0.0))),
            min_elevation=float(raw.get("minElevation", raw.get("min_elevation", 0.0))),
            max_elevation=float(raw.get("maxElevation", raw.get("max_elevation", 0.0))),
            duration=raw.get("duration"),
        )
        (min_lng, min_lat), (max_lng, max_lat) = data["bounds"]
        return cls(
            points=tuple(points),
            stats=stats,
            bounds=((min_lng, min_lat), (max_lng, max_lat)),
            source=source,
            name=name,
        )


def _point_from_dict(data: dict[str, Any]) -> RoutePoint:
    lat = data.get("lat", data.get("latitude"))
    lng = data.get("lng", data.get("longitude", data.get("lon")))
    if lat is None or lng is None:
        raise ValueError(f"route point missing coordinates: {data!r}")

    time = data.get("time", data.get("timestamp"))
    if isinstance(time, str):
        time = datetime.fromisoformat(time.replace("Z", "+00:00"))

    elevation = data.get("elevation")
    return RoutePoint(
        lat=float(lat),
        lng=float(lng),
        elevation=None if elevation is None else float(elevation),
        time=time,
    )


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
