"""
Scene graph of indexed triangle meshes.

The terrain / route / base meshes are built outside this package and handed
over as a SceneNode tree. Each node carries a uniform scale applied to its
own meshes and to all descendants. Coordinates are Y-up scene units; the
exporter converts scene units to millimeters.

Validation only reads a scene; export works on ``copy()``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass
class MeshGeometry:
    """
    Triangle mesh with optional index and per-vertex normals.

    Indexed meshes store triangles as rows of ``index``. Non-indexed meshes
    store three consecutive positions per triangle.

    Attributes:
        positions: (N, 3) vertex positions
        index: (M, 3) triangle vertex indices, or None for non-indexed meshes
        normals: (N, 3) per-vertex normals, or None
        name: Label used in reports
    """

    positions: NDArray[np.float64]
    index: NDArray[np.int64] | None = None
    normals: NDArray[np.float64] | None = None
    name: str = "mesh"

    def __post_init__(self) -> None:
        """Validate array shapes."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        if self.positions.size == 0:
            self.positions = self.positions.reshape(0, 3)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(
                f"positions must have shape (N, 3), got {self.positions.shape}"
            )

        if self.index is not None:
            index = np.asarray(self.index, dtype=np.int64)
            if index.ndim == 1:
                if index.size % 3 != 0:
                    raise ValueError("flat index length must be a multiple of 3")
                index = index.reshape(-1, 3)
            if index.ndim != 2 or index.shape[1] != 3:
                raise ValueError(f"index must have shape (M, 3), got {index.shape}")
            if index.size and (index.min() < 0 or index.max() >= len(self.positions)):
                raise ValueError("index refers to vertices outside positions")
            self.index = index

        if self.normals is not None:
            self.normals = np.asarray(self.normals, dtype=np.float64)
            if self.normals.shape != self.positions.shape:
                raise ValueError(
                    f"normals must match positions shape {self.positions.shape}, "
                    f"got {self.normals.shape}"
                )

    @property
    def is_indexed(self) -> bool:
        return self.index is not None

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        if self.index is not None:
            return len(self.index)
        return len(self.positions) // 3

    def triangles(self) -> NDArray[np.float64]:
        """Return triangle corners as an (M, 3, 3) array."""
        if self.index is not None:
            return self.positions[self.index]
        usable = self.triangle_count * 3
        return self.positions[:usable].reshape(-1, 3, 3)

    def copy(self) -> MeshGeometry:
        return MeshGeometry(
            positions=self.positions.copy(),
            index=None if self.index is None else self.index.copy(),
            normals=None if self.normals is None else self.normals.copy(),
            name=self.name,
        )

    def compute_vertex_normals(self) -> MeshGeometry:
        """
        Fill ``normals`` with area-weighted averages of adjacent face normals.

        Returns:
            self, for chaining
        """
        tris = self.triangles()
        face_normals = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])

        normals = np.zeros_like(self.positions)
        if self.index is not None:
            for corner in range(3):
                np.add.at(normals, self.index[:, corner], face_normals)
        else:
            usable = self.triangle_count * 3
            normals[:usable] = np.repeat(face_normals, 3, axis=0)

        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        lengths[lengths == 0] = 1.0
        self.normals = normals / lengths
        return self

    @classmethod
    def from_triangles(cls, triangles: NDArray[np.float64], name: str = "mesh") -> MeshGeometry:
        """Build a non-indexed mesh from an (M, 3, 3) triangle array."""
        triangles = np.asarray(triangles, dtype=np.float64)
        return cls(positions=triangles.reshape(-1, 3), name=name)


@dataclass
class SceneNode:
    """
    Node in a scene graph.

    Attributes:
        name: Node label
        scale: Uniform scale applied to this node's meshes and children
        meshes: Meshes attached to this node
        children: Child nodes
    """

    name: str = "scene"
    scale: float = 1.0
    meshes: list[MeshGeometry] = field(default_factory=list)
    children: list[SceneNode] = field(default_factory=list)

    def add(self, item: MeshGeometry | SceneNode) -> SceneNode:
        """Attach a mesh or child node; returns self."""
        if isinstance(item, MeshGeometry):
            self.meshes.append(item)
        elif isinstance(item, SceneNode):
            self.children.append(item)
        else:
            raise TypeError(f"Expected MeshGeometry or SceneNode, got {type(item).__name__}")
        return self

    def traverse(self, parent_scale: float = 1.0) -> Iterator[tuple[MeshGeometry, float]]:
        """Yield (mesh, world_scale) for every mesh in depth-first order."""
        world_scale = parent_scale * self.scale
        for mesh in self.meshes:
            yield mesh, world_scale
        for child in self.children:
            yield from child.traverse(world_scale)

    def iter_meshes(self) -> Iterator[MeshGeometry]:
        for mesh, _ in self.traverse():
            yield mesh

    @property
    def mesh_count(self) -> int:
        return sum(1 for _ in self.traverse())

    @property
    def vertex_count(self) -> int:
        return sum(mesh.vertex_count for mesh in self.iter_meshes())

    @property
    def triangle_count(self) -> int:
        return sum(mesh.triangle_count for mesh in self.iter_meshes())

    def world_triangles(self) -> NDArray[np.float64]:
        """Return all triangles in world space as one (M, 3, 3) array."""
        parts = [mesh.triangles() * scale for mesh, scale in self.traverse()]
        if not parts:
            return np.zeros((0, 3, 3))
        return np.concatenate(parts, axis=0)

    def copy(self) -> SceneNode:
        """Deep copy of the node, its meshes and all descendants."""
        return SceneNode(
            name=self.name,
            scale=self.scale,
            meshes=[mesh.copy() for mesh in self.meshes],
            children=[child.copy() for child in self.children],
        )


Scene = SceneNode


def merge_geometries(geometries: list[MeshGeometry], name: str = "merged") -> MeshGeometry:
    """
    Merge disjoint meshes into a single mesh.

    All inputs must be indexed, or all non-indexed. Normals are kept only when
    every input carries them.

    Args:
        geometries: Meshes to merge (at least one)
        name: Name of the merged mesh

    Returns:
        Merged MeshGeometry

    Raises:
        ValueError: If the list is empty or indexing is mixed
    """
    if not geometries:
        raise ValueError("No geometries to merge")

    indexed = [g.is_indexed for g in geometries]
    if any(indexed) and not all(indexed):
        raise ValueError("Cannot merge indexed and non-indexed geometries")

    positions = np.concatenate([g.positions for g in geometries], axis=0)

    index = None
    if all(indexed):
        offsets = np.cumsum([0] + [g.vertex_count for g in geometries[:-1]])
        index = np.concatenate(
            [g.index + offset for g, offset in zip(geometries, offsets)], axis=0
        )

    normals = None
    if all(g.normals is not None for g in geometries):
        normals = np.concatenate([g.normals for g in geometries], axis=0)

    return MeshGeometry(positions=positions, index=index, normals=normals, name=name)
