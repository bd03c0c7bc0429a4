"""Print parameters for sculpture materials.

Example:
    >>> from route_sculpture.materials import get_material_params, list_materials
    >>> list_materials()
    ['pla', 'wood', 'resin']
    >>> get_material_params("resin").layer_height
    0.05
"""

from .base import MaterialParams
from .library import (
    MATERIAL_PARAMS,
    PLA,
    RESIN,
    WOOD_PLA,
    get_material_params,
    list_materials,
)

__all__ = [
    "MaterialParams",
    "MATERIAL_PARAMS",
    "PLA",
    "WOOD_PLA",
    "RESIN",
    "get_material_params",
    "list_materials",
]
