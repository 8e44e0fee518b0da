"""
Export of cell boundaries for viewing and analysis.

Cells are written either as a GeoJSON FeatureCollection, with the hex
cell id in the ``cellIdHex`` property, or into a DuckDB table with one
row per cell and the boundary stored as WKT.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import duckdb

from .cell import cell_to_boundary
from .coords import LonLat
from .serialization import cell_to_hex, get_resolution

logger = logging.getLogger(__name__)

TABLE_NAME = "cells"


def boundary_to_wkt(boundary: Sequence[LonLat]) -> str:
    """Format a closed ring as a WKT POLYGON."""
    ring = list(boundary)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    coords = ", ".join(f"{lon!r} {lat!r}" for lon, lat in ring)
    return f"POLYGON(({coords}))"


def cell_to_feature(cell_id: int, segments: Optional[int] = 1) -> Dict[str, Any]:
    """GeoJSON Feature for a single cell."""
    boundary = cell_to_boundary(cell_id, closed_ring=True, segments=segments)
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[lon, lat] for lon, lat in boundary]],
        },
        "properties": {
            "cellIdHex": cell_to_hex(cell_id),
        },
    }


def cells_to_feature_collection(cells: Iterable[int], segments: Optional[int] = 1) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection of cell boundaries.

    Args:
        cells: Cell ids
        segments: Points per pentagon edge, None for the resolution default

    Returns:
        FeatureCollection as a plain dict
    """
    return {
        "type": "FeatureCollection",
        "features": [cell_to_feature(cell_id, segments) for cell_id in cells],
    }


def write_geojson(cells: Iterable[int], output_path: Path, segments: Optional[int] = 1) -> int:
    """
    Write cell boundaries to a GeoJSON file.

    Returns:
        Number of features written
    """
    collection = cells_to_feature_collection(cells, segments)
    Path(output_path).write_text(json.dumps(collection, indent=2))
    count = len(collection["features"])
    logger.debug("Wrote %d features to %s", count, output_path)
    return count


class BoundaryStore:
    """
    DuckDB table of cell boundaries.

    One row per cell: the id as UBIGINT, its hex form, its resolution
    and the boundary polygon as WKT text.
    """

    def __init__(self, database: Union[str, Path] = ":memory:"):
        """
        Open (or create) the database and the cells table.

        Args:
            database: DuckDB file path, or ":memory:"
        """
        self._con = duckdb.connect(str(database))
        self._con.execute(f"""
            CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                cell_id UBIGINT PRIMARY KEY,
                cell_hex VARCHAR NOT NULL,
                resolution INTEGER NOT NULL,
                boundary VARCHAR NOT NULL
            )
        """)

    def add_cells(self, cells: Iterable[int], segments: Optional[int] = 1) -> int:
        """
        Insert cells, replacing rows that already exist.

        Returns:
            Number of cells written
        """
        rows = []
        for cell_id in cells:
            boundary = cell_to_boundary(cell_id, closed_ring=True, segments=segments)
            # Ids above 2^63 do not fit a signed parameter, pass them as text
            rows.append((str(cell_id), cell_to_hex(cell_id), get_resolution(cell_id), boundary_to_wkt(boundary)))

        if rows:
            self._con.executemany(f"""
                INSERT OR REPLACE INTO {TABLE_NAME}
                VALUES (CAST(? AS UBIGINT), ?, ?, ?)
            """, rows)
        return len(rows)

    def count(self, resolution: Optional[int] = None) -> int:
        """Number of stored cells, optionally at one resolution."""
        if resolution is None:
            result = self._con.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
        else:
            result = self._con.execute(
                f"SELECT COUNT(*) FROM {TABLE_NAME} WHERE resolution = ?", [resolution]
            ).fetchone()
        return result[0]

    def fetch(self, resolution: Optional[int] = None) -> List[Tuple[int, str, int, str]]:
        """Stored rows ordered by cell id."""
        if resolution is None:
            query = f"SELECT cell_id, cell_hex, resolution, boundary FROM {TABLE_NAME} ORDER BY cell_id"
            return self._con.execute(query).fetchall()
        query = f"""
            SELECT cell_id, cell_hex, resolution, boundary
            FROM {TABLE_NAME}
            WHERE resolution = ?
            ORDER BY cell_id
        """
        return self._con.execute(query, [resolution]).fetchall()

    def close(self) -> None:
        """Close the database connection."""
        if self._con:
            self._con.close()
            self._con = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def write_duckdb(cells: Iterable[int], database: Union[str, Path], segments: Optional[int] = 1) -> int:
    """
    Write cell boundaries into the ``cells`` table of a DuckDB database.

    Returns:
        Number of cells written
    """
    with BoundaryStore(database) as store:
        count = store.add_cells(cells, segments)
    logger.debug("Wrote %d cells to %s", count, database)
    return count
