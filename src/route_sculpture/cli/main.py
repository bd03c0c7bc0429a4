"""Command-line tool for route sculpture grids, print checks and STL export.

The route-sculpture CLI wraps the library: it builds elevation grids from
route JSON, validates STL models for 3D printing and re-exports them with
print-ready filenames.
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.table import Table

from route_sculpture.config import DEFAULT_SCULPTURE_CONFIG, SculptureConfig, TerrainMode
from route_sculpture.elevation import TerrainTileSource, build_elevation_grid
from route_sculpture.io import load_config, load_route, load_scene, save_grid
from route_sculpture.logging_config import setup_logging
from route_sculpture.manufacturing import (
    export_to_stl,
    format_material_usage,
    format_print_time,
    generate_filename,
    validate_for_printing,
)
from route_sculpture.manufacturing.export import DEFAULT_SCALE

console = Console()

SEVERITY_STYLES = {
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
}


def format_bytes(num_bytes: float) -> str:
    """Format byte count for display, e.g. "684 B" or "1.5 MB"."""
    for unit in ["B", "KB", "MB", "GB"]:
        if abs(num_bytes) < 1024.0:
            return f"{num_bytes:.0f} {unit}" if unit == "B" else f"{num_bytes:.1f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.1f} TB"


def _load_config_option(path: Path | None) -> SculptureConfig:
    return DEFAULT_SCULPTURE_CONFIG if path is None else load_config(path)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug logging")
@click.version_option(version="0.1.0", prog_name="route-sculpture")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Route sculpture tools: elevation grids, print validation, STL export."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        setup_logging(logging.DEBUG)


@main.command()
@click.argument("route_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--size", "-s", type=click.IntRange(min=1), default=32, show_default=True, help="Grid cells per axis"
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in TerrainMode]),
    default=TerrainMode.ROUTE.value,
    show_default=True,
    help="Elevation source",
)
@click.option(
    "--api-key", envvar="MAPTILER_API_KEY", default="", help="Terrain tile API key (terrain mode)"
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Save grid as .npy")
@click.pass_context
def grid(ctx: click.Context, route_json: Path, size: int, mode: str, api_key: str, output: Path | None):
    """Build an elevation grid from ROUTE_JSON."""
    try:
        route = load_route(route_json)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] could not read route: {e}")
        ctx.exit(1)

    source = TerrainTileSource(api_key=api_key)
    result = asyncio.run(build_elevation_grid(route, size, mode, source=source))

    if result.error:
        console.print(f"[bold red]Error:[/bold red] {result.error}")
        ctx.exit(1)
    if result.grid is None:
        console.print("[yellow]Route has no elevation data[/yellow]")
        ctx.exit(1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Route", route.name or route_json.name)
    table.add_row("Points", str(len(route.points)))
    table.add_row("Grid", f"{size} x {size} ({mode})")
    table.add_row("Elevation", f"{np.min(result.grid):.1f} m to {np.max(result.grid):.1f} m")
    if mode == TerrainMode.TERRAIN.value:
        table.add_row("Tile coverage", f"{result.tile_coverage:.0%}")

    if output is not None:
        saved = save_grid(result.grid, output)
        table.add_row("Output", str(saved))

    console.print(table)


@main.command()
@click.argument("stl", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Sculpture config JSON (default: built-in defaults)",
)
@click.pass_context
def validate(ctx: click.Context, stl: Path, config_path: Path | None):
    """Check STL for 3D-printing issues.

    Exits with status 1 when the model is not ready to print.
    """
    try:
        scene = load_scene(stl)
        config = _load_config_option(config_path)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        ctx.exit(1)

    result = validate_for_printing(scene, config)

    table = Table(title=f"Print checks: {stl.name}")
    table.add_column("Check", style="cyan")
    table.add_column("Result")
    table.add_column("Message")
    for check in result.checks:
        style = "green" if check.passed else SEVERITY_STYLES.get(check.severity.value, "white")
        status = "pass" if check.passed else check.severity.value
        table.add_row(check.name, f"[{style}]{status}[/{style}]", check.message)
    console.print(table)

    stats = result.stats
    dims = stats.dimensions
    console.print(
        f"  Size: {dims.width:g} x {dims.depth:g} x {dims.height:g} mm"
        f"  Time: {format_print_time(stats.estimated_print_time_minutes)}"
        f"  Material: {format_material_usage(stats.material_usage_grams)}"
    )
    console.print(f"  Score: [bold]{result.score}[/bold]/100  {result.summary}")

    if not result.is_print_ready:
        ctx.exit(1)


@main.command()
@click.argument("stl", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Sculpture config JSON (default: built-in defaults)",
)
@click.option("--name", "-n", "route_name", help="Route name used in the output filename")
@click.option("--ascii", "ascii_stl", is_flag=True, help="Write ASCII STL instead of binary")
@click.option("--scale", type=float, default=DEFAULT_SCALE, show_default=True, help="Scene units to mm")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to write the STL to",
)
@click.pass_context
def export(
    ctx: click.Context,
    stl: Path,
    config_path: Path | None,
    route_name: str | None,
    ascii_stl: bool,
    scale: float,
    output_dir: Path,
):
    """Re-export STL with a print-ready filename."""
    try:
        scene = load_scene(stl)
        config = _load_config_option(config_path)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        ctx.exit(1)

    filename = generate_filename(config, route_name)
    result = export_to_stl(scene, filename=filename, binary=not ascii_stl, scale=scale, output_dir=output_dir)

    if not result.success:
        console.print(f"[bold red]Export Error:[/bold red] {result.error}")
        ctx.exit(1)

    console.print("✓ [bold green]Export complete![/bold green]")
    console.print(f"  Output: {result.path} ({format_bytes(result.file_size)})")
    console.print(f"  Triangles: {result.stats.triangles}")


if __name__ == "__main__":
    sys.exit(main())
