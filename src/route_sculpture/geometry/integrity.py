"""
Geometry integrity scan shared by the print validator and the STL exporter.

Both report on the same facts (indexing, vertex count, NaN coordinates) but
keep their own reporting surface: the validator turns them into a scored
ValidationCheck, the exporter into a list of plain warnings. Scanning lives
here so the two cannot disagree about what is corrupt.

The scan does not walk edges; watertightness is not verified.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from route_sculpture.geometry.scene import MeshGeometry, SceneNode

LOW_VERTEX_COUNT = 12  # fewer vertices than a closed box


@dataclass(frozen=True)
class MeshIntegrity:
    """
    Integrity facts for one mesh.

    Attributes:
        name: Mesh name
        vertex_count: Number of vertex positions
        is_indexed: Whether triangles are stored as an index
        has_nan: Whether any position coordinate is NaN
    """

    name: str
    vertex_count: int
    is_indexed: bool
    has_nan: bool

    @property
    def has_few_vertices(self) -> bool:
        return self.vertex_count < LOW_VERTEX_COUNT


def scan_mesh(mesh: MeshGeometry) -> MeshIntegrity:
    return MeshIntegrity(
        name=mesh.name,
        vertex_count=mesh.vertex_count,
        is_indexed=mesh.is_indexed,
        has_nan=bool(np.isnan(mesh.positions).any()),
    )


def scan_scene(scene: SceneNode) -> list[MeshIntegrity]:
    """Scan every mesh in the scene, in traversal order."""
    return [scan_mesh(mesh) for mesh in scene.iter_meshes()]
