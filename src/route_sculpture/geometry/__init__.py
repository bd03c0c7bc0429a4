"""Scene graph model and geometry helpers."""

from route_sculpture.geometry.integrity import (
    LOW_VERTEX_COUNT,
    MeshIntegrity,
    scan_mesh,
    scan_scene,
)
from route_sculpture.geometry.primitives import box_mesh, cylinder_mesh
from route_sculpture.geometry.scene import (
    MeshGeometry,
    Scene,
    SceneNode,
    merge_geometries,
)

__all__ = [
    "MeshGeometry",
    "SceneNode",
    "Scene",
    "merge_geometries",
    "MeshIntegrity",
    "LOW_VERTEX_COUNT",
    "scan_mesh",
    "scan_scene",
    "box_mesh",
    "cylinder_mesh",
]
