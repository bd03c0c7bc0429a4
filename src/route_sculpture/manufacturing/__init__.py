"""Manufacturing tools: printability validation, print estimates and STL export."""

# Dimensions
from route_sculpture.manufacturing.dimensions import (
    PrintDimensions,
    calculate_print_dimensions,
    terrain_max_height_mm,
)

# STL export
from route_sculpture.manufacturing.export import (
    ExportResult,
    ExportStats,
    MeshSanityReport,
    export_combined_geometries,
    export_to_stl,
    generate_filename,
    serialize_stl,
    validate_mesh_for_printing,
)

# Print estimates
from route_sculpture.manufacturing.stats import (
    PrintStats,
    calculate_print_stats,
    format_material_usage,
    format_print_time,
)

# Printability validation
from route_sculpture.manufacturing.validation import (
    PrintValidationResult,
    QuickPrintStatus,
    Severity,
    ValidationCheck,
    compute_score,
    get_quick_print_status,
    validate_for_printing,
)

__all__ = [
    # Dimensions
    "PrintDimensions",
    "calculate_print_dimensions",
    "terrain_max_height_mm",
    # Export
    "ExportResult",
    "ExportStats",
    "MeshSanityReport",
    "export_to_stl",
    "export_combined_geometries",
    "generate_filename",
    "serialize_stl",
    "validate_mesh_for_printing",
    # Stats
    "PrintStats",
    "calculate_print_stats",
    "format_print_time",
    "format_material_usage",
    # Validation
    "PrintValidationResult",
    "QuickPrintStatus",
    "Severity",
    "ValidationCheck",
    "compute_score",
    "get_quick_print_status",
    "validate_for_printing",
]
