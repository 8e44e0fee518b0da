"""
a5grid: Equal-area pentagonal discrete global grid.

The sphere is tiled by the twelve faces of a dodecahedron, each face is
split into five quintants, and every quintant is subdivided along a
Hilbert curve. Each cell is addressed by a single 64-bit integer whose
ordering follows the curve.
"""

__version__ = "0.1.0"

from .cell import BoundaryOptions, cell_to_boundary, cell_to_lonlat, lonlat_to_cell
from .cell_info import cell_area, get_num_cells
from .compact import compact, uncompact
from .coords import LonLat
from .errors import (
    A5Error,
    DegenerateGeometry,
    InvalidCellId,
    InvalidInput,
    InvalidResolution,
    MaxResolutionExceeded,
    NoParent,
    ResolutionError,
)
from .serialization import (
    MAX_RESOLUTION,
    WORLD_CELL,
    cell_to_children,
    cell_to_hex,
    cell_to_parent,
    get_res0_cells,
    get_resolution,
    hex_to_cell,
)

__all__ = [
    "lonlat_to_cell",
    "cell_to_boundary",
    "cell_to_lonlat",
    "cell_to_parent",
    "cell_to_children",
    "get_resolution",
    "get_res0_cells",
    "compact",
    "uncompact",
    "cell_to_hex",
    "hex_to_cell",
    "get_num_cells",
    "cell_area",
    "LonLat",
    "BoundaryOptions",
    "MAX_RESOLUTION",
    "WORLD_CELL",
    "A5Error",
    "InvalidInput",
    "InvalidResolution",
    "DegenerateGeometry",
    "InvalidCellId",
    "NoParent",
    "MaxResolutionExceeded",
    "ResolutionError",
]
