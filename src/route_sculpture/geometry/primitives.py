"""
Closed primitive meshes.

Used as stand-ins for the base slab and rim when exercising the validator
and exporter without the external terrain mesh builder. All meshes are
indexed, Y-up, centered on the origin in X/Z with the bottom at y=0, and
carry outward-facing per-vertex normals.
"""

from __future__ import annotations

import numpy as np

from route_sculpture.geometry.scene import MeshGeometry


def box_mesh(width: float, height: float, depth: float, name: str = "box") -> MeshGeometry:
    """
    Axis-aligned box with flat-shaded faces.

    Each face has its own four vertices so per-vertex normals equal the
    face normal (24 vertices, 12 triangles).

    Args:
        width: Extent along X
        height: Extent along Y (up)
        depth: Extent along Z
        name: Mesh name

    Returns:
        Indexed MeshGeometry with normals
    """
    if width <= 0 or height <= 0 or depth <= 0:
        raise ValueError("box dimensions must be positive")

    hx, hz = width / 2, depth / 2
    # (normal, four corners CCW seen from outside)
    faces = [
        ((0, 1, 0), [(-hx, height, -hz), (-hx, height, hz), (hx, height, hz), (hx, height, -hz)]),
        ((0, -1, 0), [(-hx, 0, -hz), (hx, 0, -hz), (hx, 0, hz), (-hx, 0, hz)]),
        ((1, 0, 0), [(hx, 0, -hz), (hx, height, -hz), (hx, height, hz), (hx, 0, hz)]),
        ((-1, 0, 0), [(-hx, 0, -hz), (-hx, 0, hz), (-hx, height, hz), (-hx, height, -hz)]),
        ((0, 0, 1), [(-hx, 0, hz), (hx, 0, hz), (hx, height, hz), (-hx, height, hz)]),
        ((0, 0, -1), [(-hx, 0, -hz), (-hx, height, -hz), (hx, height, -hz), (hx, 0, -hz)]),
    ]

    positions = []
    normals = []
    index = []
    for normal, corners in faces:
        base = len(positions)
        positions.extend(corners)
        normals.extend([normal] * 4)
        index.append([base, base + 1, base + 2])
        index.append([base, base + 2, base + 3])

    return MeshGeometry(
        positions=np.array(positions, dtype=np.float64),
        index=np.array(index, dtype=np.int64),
        normals=np.array(normals, dtype=np.float64),
        name=name,
    )


def cylinder_mesh(
    radius: float,
    height: float,
    segments: int = 32,
    name: str = "cylinder",
) -> MeshGeometry:
    """
    Closed cylinder standing on the XZ plane.

    Caps and side use separate vertices so cap normals point straight
    up / down and side normals point radially outward.

    Args:
        radius: Cylinder radius
        height: Extent along Y (up)
        segments: Number of radial segments (>= 3)
        name: Mesh name

    Returns:
        Indexed MeshGeometry with normals
    """
    if radius <= 0 or height <= 0:
        raise ValueError("cylinder dimensions must be positive")
    if segments < 3:
        raise ValueError("segments must be >= 3")

    angles = np.linspace(0.0, 2 * np.pi, segments, endpoint=False)
    ring = np.column_stack([np.cos(angles), np.zeros(segments), np.sin(angles)])

    positions = []
    normals = []
    index = []

    # Side: bottom ring then top ring
    side_bottom = ring * radius
    side_top = side_bottom + np.array([0.0, height, 0.0])
    positions.extend(side_bottom)
    positions.extend(side_top)
    normals.extend(ring)
    normals.extend(ring)
    for i in range(segments):
        j = (i + 1) % segments
        b0, b1 = i, j
        t0, t1 = segments + i, segments + j
        index.append([b0, t0, t1])
        index.append([b0, t1, b1])

    # Caps: center vertex plus ring
    for y, ny in ((0.0, -1.0), (height, 1.0)):
        center = len(positions)
        positions.append(np.array([0.0, y, 0.0]))
        normals.append(np.array([0.0, ny, 0.0]))
        start = len(positions)
        positions.extend(ring * radius + np.array([0.0, y, 0.0]))
        normals.extend([np.array([0.0, ny, 0.0])] * segments)
        for i in range(segments):
            j = (i + 1) % segments
            if ny > 0:
                index.append([center, start + j, start + i])
            else:
                index.append([center, start + i, start + j])

    return MeshGeometry(
        positions=np.array(positions, dtype=np.float64),
        index=np.array(index, dtype=np.int64),
        normals=np.array(normals, dtype=np.float64),
        name=name,
    )
