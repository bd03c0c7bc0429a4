"""
Print statistics estimator.

Volume, mass and time are coarse estimates from the configuration, not
integrals over the mesh:

- base slab: cylinder or box of ``size`` x ``base_height``
- rim: outer outline minus an inset, times ``rim_height``
- terrain: 30% of the footprint times the terrain relief heuristic

Mesh traversal only contributes vertex / triangle counts.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from route_sculpture.config import SculptureConfig, Shape
from route_sculpture.geometry.scene import SceneNode
from route_sculpture.manufacturing.dimensions import (
    CIRCULAR_RIM_INSET,
    RECTANGULAR_RIM_INSET,
    PrintDimensions,
    footprint_area_mm2,
    perimeter_mm,
    terrain_max_height_mm,
    total_height_mm,
)
from route_sculpture.materials import get_material_params

TERRAIN_FILL_FRACTION = 0.3  # share of the terrain envelope that is solid
SHELL_FRACTION = 0.15  # share of volume printed as perimeters / skins
INFILL_AREA_FRACTION = 0.3  # share of the footprint swept by infill per layer


@dataclass(frozen=True)
class PrintStats:
    """
    Print estimates for one sculpture.

    Attributes:
        estimated_print_time_minutes: Estimated print time
        material_usage_grams: Estimated filament / resin mass
        volume_mm3: Estimated solid volume
        dimensions: Bounding box in mm
        triangle_count: Triangles across all meshes
        vertex_count: Vertices across all meshes
    """

    estimated_print_time_minutes: int
    material_usage_grams: int
    volume_mm3: int
    dimensions: PrintDimensions
    triangle_count: int
    vertex_count: int

    def to_dict(self) -> dict:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def base_volume_mm3(config: SculptureConfig) -> float:
    return footprint_area_mm2(config) * config.base_height


def rim_volume_mm3(config: SculptureConfig) -> float:
    if config.rim_height <= 0:
        return 0.0
    size = config.size_mm
    if config.shape is Shape.CIRCULAR:
        outer = size / 2
        inner = outer - CIRCULAR_RIM_INSET
        ring_area = math.pi * (outer**2 - inner**2)
    else:
        inner = size - RECTANGULAR_RIM_INSET
        ring_area = size * size - inner * inner
    return ring_area * config.rim_height


def terrain_volume_mm3(config: SculptureConfig) -> float:
    return footprint_area_mm2(config) * terrain_max_height_mm(config) * TERRAIN_FILL_FRACTION


def estimate_volume_mm3(config: SculptureConfig) -> float:
    """Total estimated solid volume in mm³."""
    return base_volume_mm3(config) + rim_volume_mm3(config) + terrain_volume_mm3(config)


def calculate_print_stats(scene: SceneNode, config: SculptureConfig) -> PrintStats:
    """
    Estimate print time, material and size.

    Args:
        scene: Scene to count vertices / triangles in
        config: Sculpture configuration

    Returns:
        PrintStats with rounded integer estimates
    """
    params = get_material_params(config.material)
    size = config.size_mm

    vertex_count = 0
    triangle_count = 0
    for mesh in scene.iter_meshes():
        vertex_count += mesh.vertex_count
        triangle_count += mesh.triangle_count

    total_volume = estimate_volume_mm3(config)

    # mm³ -> cm³, then density in g/cm³
    effective_volume = total_volume * params.infill_fraction + total_volume * SHELL_FRACTION
    material_grams = effective_volume / 1000 * params.density

    height = total_height_mm(config)
    layer_count = height / params.layer_height
    perimeter_time = perimeter_mm(config) / params.print_speed
    infill_time = size * size * INFILL_AREA_FRACTION / params.print_speed
    print_minutes = layer_count * (perimeter_time + infill_time) / 60

    return PrintStats(
        estimated_print_time_minutes=_round_half_up(print_minutes),
        material_usage_grams=_round_half_up(material_grams),
        volume_mm3=_round_half_up(total_volume),
        dimensions=PrintDimensions(width=size, depth=size, height=_round_half_up(height)),
        triangle_count=triangle_count,
        vertex_count=vertex_count,
    )


def format_print_time(minutes: int) -> str:
    """Format minutes as "45 min", "2h" or "2h 5m"."""
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(int(minutes), 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_material_usage(grams: int) -> str:
    """Format grams as "850g" or "1.25kg"."""
    if grams < 1000:
        return f"{grams}g"
    return f"{grams / 1000:.2f}kg"
