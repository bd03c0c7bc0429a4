"""
File helpers: routes and configs from JSON, scenes from STL, grids to .npy.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
from stl import mesh as stl_mesh

from route_sculpture.config import SculptureConfig
from route_sculpture.geometry.scene import MeshGeometry, SceneNode
from route_sculpture.route import RouteData

logger = logging.getLogger(__name__)


def _read_json(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def load_route(path: str | Path) -> RouteData:
    """Load a route from JSON (see :meth:`RouteData.from_dict`)."""
    route = RouteData.from_dict(_read_json(path))
    logger.debug("Loaded route %s: %d points", path, len(route.points))
    return route


def load_config(path: str | Path) -> SculptureConfig:
    """Load a sculpture configuration from JSON (camelCase or snake_case keys)."""
    return SculptureConfig.from_dict(_read_json(path))


def load_scene(path: str | Path, name: str | None = None) -> SceneNode:
    """
    Load an STL file as a one-mesh scene.

    The mesh is non-indexed: every triangle keeps its own three vertices,
    as stored in the file. Vertex normals are recomputed from the winding.
    """
    path = Path(path)
    data = stl_mesh.Mesh.from_file(str(path))
    geometry = MeshGeometry.from_triangles(
        np.asarray(data.vectors, dtype=np.float64),
        name=name or path.stem,
    ).compute_vertex_normals()
    logger.debug("Loaded %s: %d triangles", path, geometry.triangle_count)
    return SceneNode(name=path.stem).add(geometry)


def save_grid(grid: np.ndarray, path: str | Path) -> Path:
    """Write an elevation grid to a ``.npy`` file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, np.asarray(grid))
    # np.save appends .npy when missing
    if path.suffix != ".npy":
        path = path.with_name(path.name + ".npy")
    return path
