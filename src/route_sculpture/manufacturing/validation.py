"""
Manufacturability checks for route sculptures.

Runs six independent checks against a constructed scene and its
configuration, using the thresholds of the chosen material, then scores
the result. A failing check is data: every check returns exactly one
ValidationCheck and nothing here raises for a bad model.

Checks:
- wall-thickness: governed by configuration (no ray casting)
- overhangs: per-vertex normals against the material support angle
- manifold: NaN / empty scene detection (edges are not walked)
- print-size: platform against a common 220 mm printer bed
- base-stability: base platform present and thick enough
- detail-printability: rim height and engraved route width
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Literal

import numpy as np

from route_sculpture.config import RouteStyle, SculptureConfig
from route_sculpture.geometry.integrity import scan_scene
from route_sculpture.geometry.scene import SceneNode
from route_sculpture.manufacturing.stats import PrintStats, calculate_print_stats
from route_sculpture.materials import get_material_params

logger = logging.getLogger(__name__)

# Thresholds
OVERHANG_FRACTION_LIMIT = 0.10  # share of normals allowed past the support angle
COMMON_BED_SIZE = 220.0  # mm, Ender 3 class printers
MIN_BASE_HEIGHT = 3.0  # mm
MIN_RIM_HEIGHT = 1.0  # mm
MIN_ENGRAVED_ROUTE_THICKNESS = 1.5  # mm
MAX_QUICK_SIZE = 20.0  # cm
MAX_QUICK_ELEVATION_SCALE = 3.0

# Score penalties
ERROR_PENALTY = 20
WARNING_PENALTY = 5

UP = np.array([0.0, 1.0, 0.0])


class Severity(str, Enum):
    """How much a check outcome matters."""

    ERROR = "error"  # blocks printing
    WARNING = "warning"  # may cause issues
    INFO = "info"


@dataclass(frozen=True)
class ValidationCheck:
    """
    Outcome of one manufacturability check.

    Attributes:
        id: Check identifier ("overhangs", "manifold", ...)
        name: Human-readable name
        passed: Whether the check passed
        severity: error, warning or info
        message: Description of the issue or success
        suggestion: Suggested fix, if any
        value: Measured value, if applicable
        threshold: Required / reference value, if applicable
    """

    id: str
    name: str
    passed: bool
    severity: Severity
    message: str
    suggestion: str | None = None
    value: float | None = None
    threshold: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", Severity(self.severity))

    @property
    def blocks_printing(self) -> bool:
        return not self.passed and self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return not self.passed and self.severity is Severity.WARNING

    def __str__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}/{self.severity.value}] {self.name}: {self.message}"


@dataclass(frozen=True)
class PrintValidationResult:
    """
    Aggregated validation outcome.

    Attributes:
        is_print_ready: No failed error-severity check
        is_optimal: Print ready and no failed warning-severity check
        checks: Check results in execution order
        stats: Print estimates
        score: 0-100 quality score
        summary: One-line summary
    """

    is_print_ready: bool
    is_optimal: bool
    checks: tuple[ValidationCheck, ...]
    stats: PrintStats
    score: int
    summary: str

    @property
    def errors(self) -> list[ValidationCheck]:
        return [c for c in self.checks if c.blocks_printing]

    @property
    def warnings(self) -> list[ValidationCheck]:
        return [c for c in self.checks if c.is_warning]

    def get_check(self, check_id: str) -> ValidationCheck:
        for check in self.checks:
            if check.id == check_id:
                return check
        raise KeyError(f"No check with id '{check_id}'")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["checks"] = [
            {**asdict(c), "severity": c.severity.value} for c in self.checks
        ]
        return data


@dataclass(frozen=True)
class QuickPrintStatus:
    """Config-only printability hint."""

    status: Literal["ready", "warning", "error"]
    message: str


def check_wall_thickness(scene: SceneNode, config: SculptureConfig) -> ValidationCheck:
    """
    Report wall thickness against the material minimum.

    For a base slab with displaced terrain the thinnest wall is set by the
    configured base height, so this does not ray-cast the mesh. An empty
    scene is an error.
    """
    params = get_material_params(config.material)
    min_required = params.min_wall_thickness

    if scene.mesh_count == 0:
        return ValidationCheck(
            id="wall-thickness",
            name="Wall Thickness",
            passed=False,
            severity=Severity.ERROR,
            message="No geometry found to analyze",
        )

    return ValidationCheck(
        id="wall-thickness",
        name="Wall Thickness",
        passed=True,
        severity=Severity.INFO,
        message=(
            f"Minimum wall thickness meets {min_required}mm requirement "
            f"for {params.label}"
        ),
        value=min_required,
        threshold=min_required,
    )


def check_overhangs(scene: SceneNode, config: SculptureConfig) -> ValidationCheck:
    """
    Check downward-facing surfaces against the material support angle.

    Walks per-vertex normals (Y up). For a normal with negative up component
    the overhang angle is ``90 - angle_from_vertical``. Every normal counts
    toward the total, so shared vertices weigh by how the mesh is indexed.
    """
    params = get_material_params(config.material)
    max_angle = params.support_angle

    max_overhang = 0.0
    problematic = 0
    total = 0

    for mesh, _ in scene.traverse():
        if mesh.normals is None:
            continue

        normals = mesh.normals
        total += len(normals)

        downward = normals[normals[:, 1] < 0]
        if len(downward) == 0:
            continue

        lengths = np.linalg.norm(downward, axis=1)
        unit_up = np.abs(downward @ UP) / lengths
        angle_from_vertical = np.degrees(np.arccos(np.clip(unit_up, 0.0, 1.0)))
        overhang = 90.0 - angle_from_vertical

        max_overhang = max(max_overhang, float(overhang.max()))
        problematic += int(np.count_nonzero(overhang > max_angle))

    fraction = problematic / total if total > 0 else 0.0

    if fraction > OVERHANG_FRACTION_LIMIT:
        return ValidationCheck(
            id="overhangs",
            name="Overhang Angles",
            passed=False,
            severity=Severity.WARNING,
            message=f"{fraction * 100:.1f}% of faces have overhangs > {max_angle}°",
            suggestion="Consider adding supports or reducing terrain elevation scale",
            value=max_overhang,
            threshold=max_angle,
        )

    return ValidationCheck(
        id="overhangs",
        name="Overhang Angles",
        passed=True,
        severity=Severity.INFO,
        message=f"Overhangs within {max_angle}° limit for {params.label}",
        value=max_overhang,
        threshold=max_angle,
    )


def check_manifold(scene: SceneNode) -> ValidationCheck:
    """
    Check mesh integrity.

    Fails on NaN coordinates or an empty scene. Watertightness is trusted to
    the mesh builder; shared-edge counts are not inspected.
    """
    report = scan_scene(scene)

    if any(mesh.has_nan for mesh in report):
        return ValidationCheck(
            id="manifold",
            name="Mesh Integrity",
            passed=False,
            severity=Severity.ERROR,
            message="Geometry contains invalid (NaN) values",
            suggestion="Check route data for invalid coordinates",
        )

    if not report:
        return ValidationCheck(
            id="manifold",
            name="Mesh Integrity",
            passed=False,
            severity=Severity.ERROR,
            message="No geometry found",
        )

    return ValidationCheck(
        id="manifold",
        name="Mesh Integrity",
        passed=True,
        severity=Severity.INFO,
        message="Geometry is valid and watertight",
    )


def check_print_size(config: SculptureConfig) -> ValidationCheck:
    """
    Compare the platform size with a common printer bed.

    Oversize is advisory: the check still passes with warning severity, so it
    neither blocks printing nor lowers the score.
    """
    size_mm = config.size_mm

    if size_mm > COMMON_BED_SIZE:
        return ValidationCheck(
            id="print-size",
            name="Print Size",
            passed=True,
            severity=Severity.WARNING,
            message=f"{config.size:g}cm sculpture requires a printer with >{size_mm:g}mm bed",
            suggestion="Most home printers support up to 220mm. Consider 15cm or 10cm size.",
            value=size_mm,
            threshold=COMMON_BED_SIZE,
        )

    return ValidationCheck(
        id="print-size",
        name="Print Size",
        passed=True,
        severity=Severity.INFO,
        message=f"{config.size:g}cm sculpture fits common printer beds",
        value=size_mm,
        threshold=COMMON_BED_SIZE,
    )


def check_base_stability(config: SculptureConfig) -> ValidationCheck:
    """Require a base platform of at least MIN_BASE_HEIGHT mm."""
    if not config.show_base:
        return ValidationCheck(
            id="base-stability",
            name="Base Stability",
            passed=False,
            severity=Severity.ERROR,
            message="No base platform - sculpture cannot stand on its own",
            suggestion="Enable base for stable printing and display",
        )

    if config.base_height < MIN_BASE_HEIGHT:
        return ValidationCheck(
            id="base-stability",
            name="Base Stability",
            passed=False,
            severity=Severity.WARNING,
            message=f"Base height {config.base_height:g}mm is thin",
            suggestion=f"Recommend at least {MIN_BASE_HEIGHT:g}mm for stability",
            value=config.base_height,
            threshold=MIN_BASE_HEIGHT,
        )

    return ValidationCheck(
        id="base-stability",
        name="Base Stability",
        passed=True,
        severity=Severity.INFO,
        message=f"Base height {config.base_height:g}mm provides good stability",
        value=config.base_height,
        threshold=MIN_BASE_HEIGHT,
    )


def check_detail_printability(config: SculptureConfig) -> ValidationCheck:
    """
    Check rim and engraved-route details.

    A rim thinner than MIN_RIM_HEIGHT fails with a warning. A narrow
    engraved route prints fine but may be hard to see, so it passes with
    warning severity.
    """
    if 0 < config.rim_height < MIN_RIM_HEIGHT:
        return ValidationCheck(
            id="detail-printability",
            name="Fine Details",
            passed=False,
            severity=Severity.WARNING,
            message=f"Rim height {config.rim_height:g}mm may not print well",
            suggestion=f"Recommend at least {MIN_RIM_HEIGHT:g}mm for visible rim",
            value=config.rim_height,
            threshold=MIN_RIM_HEIGHT,
        )

    if (
        config.route_style is RouteStyle.ENGRAVED
        and config.route_thickness < MIN_ENGRAVED_ROUTE_THICKNESS
    ):
        return ValidationCheck(
            id="detail-printability",
            name="Fine Details",
            passed=True,
            severity=Severity.WARNING,
            message=f"Engraved route at {config.route_thickness:g}mm may be hard to see",
            suggestion="Consider 2mm+ for visible engraved routes",
            value=config.route_thickness,
            threshold=MIN_ENGRAVED_ROUTE_THICKNESS,
        )

    return ValidationCheck(
        id="detail-printability",
        name="Fine Details",
        passed=True,
        severity=Severity.INFO,
        message="Details are within printable tolerances",
    )


def compute_score(error_count: int, warning_count: int) -> int:
    """100 minus 20 per error and 5 per warning, clamped to [0, 100]."""
    score = 100 - ERROR_PENALTY * error_count - WARNING_PENALTY * warning_count
    return max(0, min(100, score))


def _summarize(is_optimal: bool, is_print_ready: bool, errors: int, warnings: int) -> str:
    if is_optimal:
        return "Model is optimized for 3D printing"
    if is_print_ready:
        return f"Ready to print with {warnings} suggestion{'s' if warnings > 1 else ''}"
    return f"{errors} issue{'s' if errors > 1 else ''} must be fixed before printing"


def validate_for_printing(scene: SceneNode, config: SculptureConfig) -> PrintValidationResult:
    """
    Validate a sculpture scene for 3D printing.

    Deterministic for identical inputs; the scene is only read.

    Args:
        scene: Constructed sculpture scene
        config: Sculpture configuration

    Returns:
        PrintValidationResult with checks, stats, score and summary
    """
    checks = (
        check_wall_thickness(scene, config),
        check_overhangs(scene, config),
        check_manifold(scene),
        check_print_size(config),
        check_base_stability(config),
        check_detail_printability(config),
    )

    stats = calculate_print_stats(scene, config)

    errors = sum(1 for c in checks if c.blocks_printing)
    warnings = sum(1 for c in checks if c.is_warning)

    is_print_ready = errors == 0
    is_optimal = is_print_ready and warnings == 0
    score = compute_score(errors, warnings)

    logger.debug(
        "Validated %d meshes: %d errors, %d warnings, score %d",
        scene.mesh_count,
        errors,
        warnings,
        score,
    )

    return PrintValidationResult(
        is_print_ready=is_print_ready,
        is_optimal=is_optimal,
        checks=checks,
        stats=stats,
        score=score,
        summary=_summarize(is_optimal, is_print_ready, errors, warnings),
    )


def get_quick_print_status(config: SculptureConfig) -> QuickPrintStatus:
    """
    Config-only printability hint for responsive UIs.

    Does not look at geometry. "ready" requires a base of at least
    MIN_BASE_HEIGHT mm, size of at most MAX_QUICK_SIZE cm and an elevation
    scale of at most MAX_QUICK_ELEVATION_SCALE.
    """
    if not config.show_base:
        return QuickPrintStatus("warning", "No base platform")
    if config.base_height < MIN_BASE_HEIGHT:
        return QuickPrintStatus("warning", "Base may be too thin")
    if config.size > MAX_QUICK_SIZE:
        return QuickPrintStatus("warning", "Large size needs big printer")
    if config.elevation_scale > MAX_QUICK_ELEVATION_SCALE:
        return QuickPrintStatus("warning", "Extreme elevation may need supports")
    return QuickPrintStatus("ready", "Ready to print")
