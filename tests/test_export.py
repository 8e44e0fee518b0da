"""Tests for boundary export and the command-line interface."""

import json

import duckdb
import pytest

from a5grid.cell import lonlat_to_cell
from a5grid.cli import create_parser, main
from a5grid.export import (
    BoundaryStore,
    boundary_to_wkt,
    cell_to_feature,
    cells_to_feature_collection,
    write_duckdb,
    write_geojson,
)
from a5grid.serialization import WORLD_CELL, cell_to_children, cell_to_hex, get_res0_cells


@pytest.fixture
def store():
    """In-memory boundary store."""
    store = BoundaryStore()
    yield store
    store.close()


class TestGeoJSON:
    """Tests for GeoJSON output."""

    def test_wkt_closes_ring(self):
        """Test open rings are closed in WKT."""
        wkt = boundary_to_wkt([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
        assert wkt == "POLYGON((0.0 0.0, 1.0 0.0, 1.0 1.0, 0.0 0.0))"

    def test_wkt_closed_ring_unchanged(self):
        """Test closed rings are not closed twice."""
        wkt = boundary_to_wkt([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)])
        assert wkt.count("0.0 0.0") == 2

    def test_feature(self):
        """Test a single cell feature."""
        cell_id = lonlat_to_cell(2.35, 48.85, 7)
        feature = cell_to_feature(cell_id)
        assert feature["type"] == "Feature"
        assert feature["geometry"]["type"] == "Polygon"
        ring = feature["geometry"]["coordinates"][0]
        assert len(ring) == 6
        assert ring[0] == ring[-1]
        assert feature["properties"]["cellIdHex"] == cell_to_hex(cell_id)

    def test_feature_collection(self):
        """Test a collection has one feature per cell."""
        collection = cells_to_feature_collection(get_res0_cells())
        assert collection["type"] == "FeatureCollection"
        assert len(collection["features"]) == 12

    def test_write_geojson(self, tmp_path):
        """Test writing the resolution 1 wireframe."""
        output = tmp_path / "res1.geojson"
        count = write_geojson(cell_to_children(WORLD_CELL, 1), output, segments=2)
        assert count == 60

        data = json.loads(output.read_text())
        hexes = {feature["properties"]["cellIdHex"] for feature in data["features"]}
        assert len(hexes) == 60


class TestBoundaryStore:
    """Tests for the DuckDB boundary table."""

    def test_add_and_count(self, store):
        """Test cells are stored once per id."""
        faces = get_res0_cells()
        assert store.add_cells(faces) == 12
        assert store.count() == 12
        assert store.count(resolution=0) == 12
        assert store.count(resolution=1) == 0

    def test_replace(self, store):
        """Test re-adding cells replaces the rows."""
        faces = get_res0_cells()[:3]
        store.add_cells(faces)
        store.add_cells(faces)
        assert store.count() == 3

    def test_large_ids(self, store):
        """Test ids above 2^63 round trip."""
        cells = cell_to_children(WORLD_CELL, 1)
        assert max(cells) >= 1 << 63
        store.add_cells(cells)
        rows = store.fetch(resolution=1)
        assert [row[0] for row in rows] == sorted(cells)

    def test_fetch(self, store):
        """Test fetched rows carry hex, resolution and WKT."""
        cell_id = lonlat_to_cell(-74.006, 40.7128, 9)
        store.add_cells([cell_id])
        [(stored_id, cell_hex, resolution, wkt)] = store.fetch()
        assert stored_id == cell_id
        assert cell_hex == cell_to_hex(cell_id)
        assert resolution == 9
        assert wkt.startswith("POLYGON((")

    def test_empty(self, store):
        """Test adding nothing."""
        assert store.add_cells([]) == 0
        assert store.fetch() == []

    def test_write_duckdb(self, tmp_path):
        """Test writing to a database file."""
        database = tmp_path / "cells.duckdb"
        assert write_duckdb(get_res0_cells(), database) == 12

        con = duckdb.connect(str(database))
        try:
            count = con.execute("SELECT COUNT(*) FROM cells").fetchone()[0]
        finally:
            con.close()
        assert count == 12


class TestCLI:
    """Tests for the command-line interface."""

    def test_no_command(self, capsys):
        """Test running without a command prints help."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_encode(self, capsys):
        """Test encoding a point."""
        assert main(["encode", "139.6917", "35.6895", "-r", "8"]) == 0
        out = capsys.readouterr().out.strip()
        assert out == cell_to_hex(lonlat_to_cell(139.6917, 35.6895, 8))

    def test_center_and_boundary(self, capsys):
        """Test printing the centre and boundary of a cell."""
        cell_hex = cell_to_hex(lonlat_to_cell(18.4, -33.9, 6))
        assert main(["center", cell_hex]) == 0
        assert len(capsys.readouterr().out.split()) == 2

        assert main(["boundary", cell_hex, "--open"]) == 0
        assert len(capsys.readouterr().out.strip().splitlines()) == 5

    def test_parent_and_children(self, capsys):
        """Test walking the hierarchy."""
        cell_id = lonlat_to_cell(18.4, -33.9, 6)
        assert main(["children", cell_to_hex(cell_id)]) == 0
        children = capsys.readouterr().out.split()
        assert len(children) == 4

        assert main(["parent", children[0]]) == 0
        assert capsys.readouterr().out.strip() == cell_to_hex(cell_id)

    def test_compact_uncompact(self, capsys):
        """Test compacting children back to their parent."""
        face = get_res0_cells()[2]
        quintants = [cell_to_hex(c) for c in cell_to_children(face)]
        assert main(["compact", *quintants]) == 0
        assert capsys.readouterr().out.strip() == cell_to_hex(face)

        assert main(["uncompact", cell_to_hex(face), "-r", "2"]) == 0
        assert len(capsys.readouterr().out.split()) == 20

    def test_stats(self, capsys):
        """Test the cell count table."""
        assert main(["stats", "-r", "1"]) == 0
        out = capsys.readouterr().out
        assert "60" in out

    def test_error(self, capsys):
        """Test library errors are reported without a traceback."""
        face = cell_to_hex(get_res0_cells()[0])
        assert main(["parent", face]) == 1
        captured = capsys.readouterr()
        assert captured.err.startswith("Error:")
        assert captured.out == ""

        assert main(["boundary", "not-hex"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_wireframe_geojson(self, tmp_path, capsys):
        """Test exporting every face as GeoJSON."""
        output = tmp_path / "faces.geojson"
        assert main(["wireframe", "0", str(output)]) == 0
        data = json.loads(output.read_text())
        assert len(data["features"]) == 12
        assert "Wrote 12 cells" in capsys.readouterr().out

    def test_wireframe_duckdb(self, tmp_path):
        """Test exporting quintants into DuckDB."""
        output = tmp_path / "quintants.duckdb"
        assert main(["wireframe", "1", str(output), "--format", "duckdb"]) == 0
        with BoundaryStore(output) as store:
            assert store.count(resolution=1) == 60

    def test_parser_defaults(self):
        """Test default arguments."""
        args = create_parser().parse_args(["encode", "1.0", "2.0"])
        assert args.resolution == 10
        assert args.verbose is False
