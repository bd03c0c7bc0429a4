"""
STL export for sculpture scenes.

Provides binary (default) and ASCII STL serialization through numpy-stl,
geometry merging, a lightweight mesh sanity pass and download filenames.
Export never mutates the caller's scene and never raises: failures
come back as ``ExportResult(success=False, error=...)``.
"""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from stl import Mode
from stl import mesh as stl_mesh

from route_sculpture.config import SculptureConfig
from route_sculpture.geometry.integrity import scan_scene
from route_sculpture.geometry.scene import MeshGeometry, SceneNode, merge_geometries

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "sculpture.stl"
DEFAULT_SCALE = 10.0  # 1 scene unit = 10 mm
MAX_SLUG_LENGTH = 30


@dataclass(frozen=True)
class ExportStats:
    """Post-scale mesh counts of an export."""

    vertices: int
    triangles: int


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of an STL export.

    Attributes:
        success: Whether the export succeeded
        error: Error message when it did not
        file_size: Size of the STL payload in bytes
        stats: Vertex / triangle counts of the exported scene
        path: Written file, when an output directory was given
        data: The STL payload
    """

    success: bool
    error: str | None = None
    file_size: int | None = None
    stats: ExportStats | None = None
    path: Path | None = None
    data: bytes | None = field(default=None, repr=False)


@dataclass(frozen=True)
class MeshSanityReport:
    """Result of the exporter's quick mesh sanity pass."""

    valid: bool
    warnings: list[str]


def serialize_stl(triangles: NDArray[np.float64], binary: bool = True, name: str = "sculpture") -> bytes:
    """
    Serialize an (M, 3, 3) triangle array to STL bytes.

    Facet normals are recomputed from the triangle winding.

    Args:
        triangles: Triangle corners in output units (mm)
        binary: Binary STL if True, ASCII otherwise
        name: Solid name written to the header

    Returns:
        STL file contents
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)

    mesh_data = stl_mesh.Mesh(np.zeros(len(triangles), dtype=stl_mesh.Mesh.dtype))
    if len(triangles):
        mesh_data.vectors[:] = triangles

    buffer = io.BytesIO()
    mesh_data.save(name, fh=buffer, mode=Mode.BINARY if binary else Mode.ASCII)
    return buffer.getvalue()


def _write_download(data: bytes, output_dir: Path, filename: str) -> Path:
    """
    Write the payload to ``output_dir/filename`` through a temporary file.

    The temporary file is always removed, whether or not the final rename
    succeeds.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / Path(filename).name

    fd, tmp_name = tempfile.mkstemp(dir=output_dir, prefix=".", suffix=".part")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        tmp_path.replace(target)
    finally:
        tmp_path.unlink(missing_ok=True)

    return target


def export_to_stl(
    scene: SceneNode,
    filename: str = DEFAULT_FILENAME,
    binary: bool = True,
    scale: float = DEFAULT_SCALE,
    output_dir: Path | str | None = None,
) -> ExportResult:
    """
    Export a scene to STL.

    The scene is deep-copied, scaled uniformly, flattened to world-space
    triangles and serialized. When ``output_dir`` is given the payload is
    written there as ``filename``.

    Args:
        scene: Scene to export (not modified)
        filename: Download filename
        binary: Binary STL if True, ASCII otherwise
        scale: Scene units to mm
        output_dir: Directory to write the file to, or None to only return bytes

    Returns:
        ExportResult; ``success`` is False on any failure
    """
    try:
        export_scene = scene.copy()
        export_scene.scale *= scale

        triangles = export_scene.world_triangles()
        data = serialize_stl(triangles, binary=binary, name=Path(filename).stem)

        stats = ExportStats(
            vertices=export_scene.vertex_count,
            triangles=export_scene.triangle_count,
        )

        path = None
        if output_dir is not None:
            path = _write_download(data, Path(output_dir), filename)

        logger.info(
            "Exported %d triangles (%s, %d bytes)%s",
            stats.triangles,
            "binary" if binary else "ascii",
            len(data),
            f" to {path}" if path else "",
        )

        return ExportResult(
            success=True,
            file_size=len(data),
            stats=stats,
            path=path,
            data=data,
        )
    except Exception as err:
        logger.exception("STL export failed")
        return ExportResult(success=False, error=str(err) or "Unknown export error")


def export_combined_geometries(
    geometries: Sequence[MeshGeometry],
    filename: str = DEFAULT_FILENAME,
    binary: bool = True,
    scale: float = DEFAULT_SCALE,
    output_dir: Path | str | None = None,
) -> ExportResult:
    """
    Merge several geometries into one mesh and export it.

    Returns a failed ExportResult (never raises) for an empty list or a
    failed merge.
    """
    if not geometries:
        return ExportResult(success=False, error="No geometries to export")

    try:
        merged = merge_geometries(list(geometries))
    except Exception as err:
        logger.warning("Geometry merge failed: %s", err)
        return ExportResult(success=False, error=str(err) or "Failed to merge geometries")

    scene = SceneNode(name="combined").add(merged)
    return export_to_stl(
        scene,
        filename=filename,
        binary=binary,
        scale=scale,
        output_dir=output_dir,
    )


def validate_mesh_for_printing(scene: SceneNode) -> MeshSanityReport:
    """
    Quick sanity pass before export.

    Flags non-indexed meshes, meshes with very few vertices and NaN
    coordinates. Lighter than the print validator and independent of any
    configuration.
    """
    warnings: list[str] = []
    for mesh in scan_scene(scene):
        if not mesh.is_indexed:
            warnings.append("Geometry is not indexed - may have duplicate vertices")
        if mesh.has_few_vertices:
            warnings.append("Geometry has very few vertices")
        if mesh.has_nan:
            warnings.append("Geometry contains NaN values")

    return MeshSanityReport(valid=not warnings, warnings=warnings)


def generate_filename(config: SculptureConfig, route_name: str | None = None) -> str:
    """
    Build ``{slug}-{shape}-{size}cm.stl``.

    The slug is the lower-cased route name with every character outside
    ``[a-z0-9]`` replaced by ``-``, cut to 30 characters.
    """
    if route_name:
        slug = re.sub(r"[^a-z0-9]", "-", route_name.lower())[:MAX_SLUG_LENGTH]
    else:
        slug = "sculpture"
    return f"{slug}-{config.shape.value}-{config.size:g}cm.stl"

