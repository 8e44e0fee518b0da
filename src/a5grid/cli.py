"""
Command-line interface for a5grid.

Provides commands for encoding points, inspecting cells and exporting
cell boundaries.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .cell import cell_to_boundary, cell_to_lonlat, lonlat_to_cell
from .cell_info import cell_area, get_num_cells
from .compact import compact, uncompact
from .errors import A5Error
from .export import write_duckdb, write_geojson
from .serialization import (
    MAX_RESOLUTION,
    WORLD_CELL,
    cell_to_children,
    cell_to_hex,
    cell_to_parent,
    hex_to_cell,
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="a5grid",
        description="Equal-area pentagonal global grid",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Encode command
    encode_parser = subparsers.add_parser(
        "encode",
        help="Find the cell containing a point",
    )
    encode_parser.add_argument("lon", type=float, help="Longitude in degrees")
    encode_parser.add_argument("lat", type=float, help="Latitude in degrees")
    encode_parser.add_argument(
        "-r", "--resolution",
        type=int,
        default=10,
        help="Cell resolution (default: 10)",
    )

    # Boundary command
    boundary_parser = subparsers.add_parser(
        "boundary",
        help="Print the boundary ring of a cell",
    )
    boundary_parser.add_argument("cell", type=str, help="Cell id in hex")
    boundary_parser.add_argument(
        "--segments",
        type=int,
        default=None,
        help="Points per pentagon edge (default: depends on resolution)",
    )
    boundary_parser.add_argument(
        "--open",
        action="store_true",
        help="Do not repeat the first vertex at the end",
    )

    # Center command
    center_parser = subparsers.add_parser(
        "center",
        help="Print the centre of a cell",
    )
    center_parser.add_argument("cell", type=str, help="Cell id in hex")

    # Parent command
    parent_parser = subparsers.add_parser(
        "parent",
        help="Print the parent of a cell",
    )
    parent_parser.add_argument("cell", type=str, help="Cell id in hex")
    parent_parser.add_argument(
        "-r", "--resolution",
        type=int,
        default=None,
        help="Parent resolution (default: one level up)",
    )

    # Children command
    children_parser = subparsers.add_parser(
        "children",
        help="Print the children of a cell",
    )
    children_parser.add_argument("cell", type=str, help="Cell id in hex")
    children_parser.add_argument(
        "-r", "--resolution",
        type=int,
        default=None,
        help="Child resolution (default: one level down)",
    )

    # Compact command
    compact_parser = subparsers.add_parser(
        "compact",
        help="Merge complete sibling groups",
    )
    compact_parser.add_argument("cells", nargs="+", type=str, help="Cell ids in hex")

    # Uncompact command
    uncompact_parser = subparsers.add_parser(
        "uncompact",
        help="Expand cells to one resolution",
    )
    uncompact_parser.add_argument("cells", nargs="+", type=str, help="Cell ids in hex")
    uncompact_parser.add_argument(
        "-r", "--resolution",
        type=int,
        required=True,
        help="Target resolution",
    )

    # Wireframe command
    wireframe_parser = subparsers.add_parser(
        "wireframe",
        help="Export every cell at a resolution",
    )
    wireframe_parser.add_argument("resolution", type=int, help="Cell resolution")
    wireframe_parser.add_argument("output", type=Path, help="Output file path")
    wireframe_parser.add_argument(
        "--format",
        type=str,
        choices=["geojson", "duckdb"],
        default="geojson",
        help="Output format (default: geojson)",
    )
    wireframe_parser.add_argument(
        "--segments",
        type=int,
        default=1,
        help="Points per pentagon edge (default: 1)",
    )

    # Stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show cell count and area for a resolution",
    )
    stats_parser.add_argument(
        "-r", "--resolution",
        type=int,
        default=None,
        help="Resolution (default: all resolutions)",
    )

    return parser


def _parse_cells(values: List[str]) -> List[int]:
    return [hex_to_cell(value) for value in values]


def cmd_encode(args: argparse.Namespace) -> int:
    """Handle the encode command."""
    cell_id = lonlat_to_cell(args.lon, args.lat, args.resolution)
    print(cell_to_hex(cell_id))
    return 0


def cmd_boundary(args: argparse.Namespace) -> int:
    """Handle the boundary command."""
    boundary = cell_to_boundary(
        hex_to_cell(args.cell),
        closed_ring=not args.open,
        segments=args.segments,
    )
    for lon, lat in boundary:
        print(f"{lon:.9f} {lat:.9f}")
    return 0


def cmd_center(args: argparse.Namespace) -> int:
    """Handle the center command."""
    lon, lat = cell_to_lonlat(hex_to_cell(args.cell))
    print(f"{lon:.9f} {lat:.9f}")
    return 0


def cmd_parent(args: argparse.Namespace) -> int:
    """Handle the parent command."""
    print(cell_to_hex(cell_to_parent(hex_to_cell(args.cell), args.resolution)))
    return 0


def cmd_children(args: argparse.Namespace) -> int:
    """Handle the children command."""
    for child in cell_to_children(hex_to_cell(args.cell), args.resolution):
        print(cell_to_hex(child))
    return 0


def cmd_compact(args: argparse.Namespace) -> int:
    """Handle the compact command."""
    for cell_id in compact(_parse_cells(args.cells)):
        print(cell_to_hex(cell_id))
    return 0


def cmd_uncompact(args: argparse.Namespace) -> int:
    """Handle the uncompact command."""
    for cell_id in uncompact(_parse_cells(args.cells), args.resolution):
        print(cell_to_hex(cell_id))
    return 0


def cmd_wireframe(args: argparse.Namespace) -> int:
    """Handle the wireframe command."""
    print(f"Generating cells at resolution {args.resolution}...")
    cells = cell_to_children(WORLD_CELL, args.resolution)

    if args.format == "duckdb":
        count = write_duckdb(cells, args.output, segments=args.segments)
    else:
        count = write_geojson(cells, args.output, segments=args.segments)

    print(f"Wrote {count} cells to {args.output}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle the stats command."""
    if args.resolution is None:
        resolutions = range(MAX_RESOLUTION + 1)
    else:
        resolutions = [args.resolution]

    print(f"{'res':>3}  {'cells':>22}  {'area (m^2)':>22}")
    for resolution in resolutions:
        print(f"{resolution:>3}  {get_num_cells(resolution):>22,}  {cell_area(resolution):>22,.6f}")
    return 0


COMMANDS = {
    "encode": cmd_encode,
    "boundary": cmd_boundary,
    "center": cmd_center,
    "parent": cmd_parent,
    "children": cmd_children,
    "compact": cmd_compact,
    "uncompact": cmd_uncompact,
    "wireframe": cmd_wireframe,
    "stats": cmd_stats,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except A5Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
