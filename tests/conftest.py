"""Shared fixtures for the route-sculpture test suite.

Routes and scenes are small and hand-built so expected values can be
worked out by hand. Terrain tiles are generated in memory with Pillow and
served through httpx.MockTransport; nothing touches the network.
"""

import io
import logging

import numpy as np
import pytest
from PIL import Image

from route_sculpture.config import SculptureConfig
from route_sculpture.geometry import MeshGeometry, SceneNode, box_mesh
from route_sculpture.route import RouteData, RoutePoint, RouteStats


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging (e.g. via `--verbose`)."""
    yield
    logger = logging.getLogger("route_sculpture")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def corner_route():
    """Three points on the corners of a 0.1° box with elevations 100/150/200."""
    points = (
        RoutePoint(lat=50.0, lng=10.0, elevation=100.0),
        RoutePoint(lat=50.0, lng=10.1, elevation=150.0),
        RoutePoint(lat=50.1, lng=10.0, elevation=200.0),
    )
    stats = RouteStats(
        distance=18000.0,
        elevation_gain=100.0,
        elevation_loss=0.0,
        min_elevation=100.0,
        max_elevation=200.0,
    )
    return RouteData(
        points=points,
        stats=stats,
        bounds=((10.0, 50.0), (10.1, 50.1)),
        source="drawn",
        name="Corner Loop",
    )


@pytest.fixture
def flat_route():
    """Route without any elevation data."""
    return RouteData.from_points(
        [RoutePoint(lat=50.0, lng=10.0), RoutePoint(lat=50.05, lng=10.05)],
        source="drawn",
    )


@pytest.fixture
def route_dict():
    """Upstream JSON payload with camelCase stats."""
    return {
        "name": "Morning Ride",
        "source": "gpx",
        "points": [
            {"lat": 46.0, "lng": 7.0, "elevation": 1200, "time": "2024-06-01T08:00:00Z"},
            {"lat": 46.01, "lng": 7.01, "elevation": 1250, "time": "2024-06-01T08:10:00Z"},
            {"lat": 46.02, "lng": 7.0, "elevation": 1230, "time": "2024-06-01T08:20:00Z"},
        ],
        "stats": {
            "distance": 2500,
            "elevationGain": 50,
            "elevationLoss": 20,
            "minElevation": 1200,
            "maxElevation": 1250,
            "duration": 1200,
        },
        "bounds": [[7.0, 46.0], [7.01, 46.02]],
    }


@pytest.fixture
def default_config():
    return SculptureConfig()


@pytest.fixture
def box_scene():
    """Scene with a single 1 x 0.5 x 1 box (indexed, 24 vertices)."""
    return SceneNode(name="sculpture").add(box_mesh(1.0, 0.5, 1.0, name="base"))


@pytest.fixture
def flat_scene():
    """Scene with one upward-facing quad; no overhangs at all."""
    positions = np.array(
        [
            [0.0, 0.0, 0.0],
            [0.0, 0.0, 1.0],
            [1.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0],
            [1.0, 0.0, 1.0],
        ]
    )
    normals = np.tile([0.0, 1.0, 0.0], (6, 1))
    return SceneNode(name="terrain").add(MeshGeometry(positions=positions, normals=normals, name="terrain"))


@pytest.fixture
def make_tile_png():
    """Factory for uniform-color PNG tiles."""

    def _make(rgb=(1, 134, 160), size=256, mode="RGB"):
        color = tuple(rgb) + ((255,) if mode == "RGBA" else ())
        img = Image.new(mode, (size, size), color)
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    return _make
