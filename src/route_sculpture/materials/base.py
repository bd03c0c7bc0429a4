"""Physical print parameters for a printing material.

Values are typical slicer defaults rather than measured properties; they
drive the manufacturability thresholds and the cost / time estimator.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MaterialParams:
    """Print parameters for one material.

    Args:
        name: Material key ("pla", "wood", "resin")
        label: Display label
        min_wall_thickness: Thinnest reliably printable wall in mm
        layer_height: Typical layer height in mm
        print_speed: Typical print speed in mm/s
        density: Material density in g/cm³
        support_angle: Largest overhang angle (degrees) printable without support
        infill_percent: Typical infill percentage (0-100)

    Example:
        >>> from route_sculpture.materials import get_material_params
        >>> pla = get_material_params("pla")
        >>> pla.infill_fraction
        0.2
    """

    name: str
    label: str
    min_wall_thickness: float
    layer_height: float
    print_speed: float
    density: float
    support_angle: float
    infill_percent: float

    def __post_init__(self):
        """Validate parameters."""
        if self.min_wall_thickness <= 0:
            raise ValueError("min_wall_thickness must be positive")
        if self.layer_height <= 0:
            raise ValueError("layer_height must be positive")
        if self.print_speed <= 0:
            raise ValueError("print_speed must be positive")
        if self.density <= 0:
            raise ValueError("density must be positive")
        if not 0 < self.support_angle < 90:
            raise ValueError("support_angle must be in (0, 90)")
        if not 0 <= self.infill_percent <= 100:
            raise ValueError("infill_percent must be in [0, 100]")

    @property
    def infill_fraction(self) -> float:
        """Infill as a fraction in [0, 1]."""
        return self.infill_percent / 100.0
