"""Fixed print parameter table for the supported sculpture materials.

- PLA: standard plastic, vibrant colors
- Wood PLA: wood-fill filament; thicker walls, thicker layers, slower
- Resin: high detail; thin walls, fine layers, printed solid

The table is not user-editable:

    >>> from route_sculpture.materials import get_material_params
    >>> get_material_params("wood").support_angle
    40
"""

from __future__ import annotations

from route_sculpture.config import Material

from .base import MaterialParams

PLA = MaterialParams(
    name="pla",
    label="PLA",
    min_wall_thickness=1.2,
    layer_height=0.2,
    print_speed=50,
    density=1.24,
    support_angle=45,
    infill_percent=20,
)
"""Standard PLA filament."""

WOOD_PLA = MaterialParams(
    name="wood",
    label="Wood PLA",
    min_wall_thickness=1.5,
    layer_height=0.25,
    print_speed=40,
    density=1.15,
    support_angle=40,
    infill_percent=25,
)
"""Wood-fill PLA; needs thicker walls and a more conservative overhang limit."""

RESIN = MaterialParams(
    name="resin",
    label="Resin",
    min_wall_thickness=0.5,
    layer_height=0.05,
    print_speed=30,
    density=1.1,
    support_angle=30,
    infill_percent=100,
)
"""Photopolymer resin; slow curing, usually printed solid."""

MATERIAL_PARAMS: dict[str, MaterialParams] = {
    PLA.name: PLA,
    WOOD_PLA.name: WOOD_PLA,
    RESIN.name: RESIN,
}


def get_material_params(material: Material | str) -> MaterialParams:
    """Look up print parameters by material.

    Args:
        material: Material enum or key (case-insensitive)

    Returns:
        MaterialParams for the material

    Raises:
        KeyError: If material not found
    """
    key = material.value if isinstance(material, Material) else str(material).lower()
    try:
        return MATERIAL_PARAMS[key]
    except KeyError:
        raise KeyError(
            f"Material '{material}' not found. Available: {list(MATERIAL_PARAMS)}"
        ) from None


def list_materials() -> list[str]:
    """List available material keys."""
    return list(MATERIAL_PARAMS.keys())
