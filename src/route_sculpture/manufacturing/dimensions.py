"""
Physical dimensions derived from a SculptureConfig.

The terrain height heuristic is the single source for both the print
statistics estimator and the exporter's dimension report.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from route_sculpture.config import SculptureConfig, Shape

TERRAIN_MM_PER_SCALE = 10.0  # mm of terrain relief per unit of elevation_scale

# Rim inset used by the volume estimate
CIRCULAR_RIM_INSET = 2.0  # mm, radial
RECTANGULAR_RIM_INSET = 4.0  # mm, total across both sides


@dataclass(frozen=True)
class PrintDimensions:
    """Bounding box of the printed piece in mm."""

    width: float
    depth: float
    height: float


def terrain_max_height_mm(config: SculptureConfig) -> float:
    """Approximate maximum terrain relief in mm."""
    return config.elevation_scale * TERRAIN_MM_PER_SCALE


def total_height_mm(config: SculptureConfig) -> float:
    """Base + rim + terrain relief in mm."""
    return config.base_height + config.rim_height + terrain_max_height_mm(config)


def footprint_area_mm2(config: SculptureConfig) -> float:
    """Platform footprint area (disc or square) in mm²."""
    size = config.size_mm
    if config.shape is Shape.CIRCULAR:
        return math.pi * (size / 2) ** 2
    return size * size


def perimeter_mm(config: SculptureConfig) -> float:
    size = config.size_mm
    if config.shape is Shape.CIRCULAR:
        return math.pi * size
    return size * 4


def calculate_print_dimensions(config: SculptureConfig) -> PrintDimensions:
    """
    Approximate print bounding box in mm.

    Width and depth equal the platform size; height includes base, rim and
    the terrain relief heuristic.
    """
    size = config.size_mm
    return PrintDimensions(width=size, depth=size, height=total_height_mm(config))
