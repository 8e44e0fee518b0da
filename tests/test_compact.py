"""Tests for compaction module and cell counts."""

import pytest
from a5grid.cell import lonlat_to_cell
from a5grid.cell_info import AUTHALIC_AREA, cell_area, get_num_cells, get_num_children
from a5grid.compact import compact, uncompact
from a5grid.errors import ResolutionError
from a5grid.serialization import Cell, cell_to_children, get_res0_cells, get_resolution, serialize


class TestCellInfo:
    """Tests for cell counts and areas."""

    def test_num_cells(self):
        """Test cell counts per resolution."""
        assert get_num_cells(-1) == 0
        assert get_num_cells(0) == 12
        assert get_num_cells(1) == 60
        assert get_num_cells(2) == 240
        assert get_num_cells(29) == 60 * 4 ** 28

    def test_num_children(self):
        """Test descendant counts."""
        assert get_num_children(0, 0) == 1
        assert get_num_children(0, 1) == 5
        assert get_num_children(0, 2) == 20
        assert get_num_children(1, 2) == 4
        assert get_num_children(2, 5) == 64
        assert get_num_children(-1, 1) == 60
        assert get_num_children(3, 2) == 0

    def test_num_children_matches_hierarchy(self):
        """Test counts agree with cell_to_children."""
        face = get_res0_cells()[5]
        assert len(cell_to_children(face, 3)) == get_num_children(0, 3)

    def test_cell_area(self):
        """Test cells share the surface equally."""
        assert cell_area(0) == pytest.approx(42505468731619.93)
        assert cell_area(1) == pytest.approx(AUTHALIC_AREA / 60)
        assert cell_area(10) * get_num_cells(10) == pytest.approx(AUTHALIC_AREA)

    def test_world_area(self):
        """Test negative resolutions give the whole surface."""
        assert cell_area(-1) == AUTHALIC_AREA


class TestCompact:
    """Tests for merging sibling groups."""

    def test_face_from_grandchildren(self):
        """Test all 20 resolution 2 cells of a face compact to the face."""
        face = lonlat_to_cell(0.0, 0.0, 0)
        assert compact(cell_to_children(face, 2)) == [face]

    def test_world_stays_as_faces(self):
        """Test faces are never merged further."""
        faces = get_res0_cells()
        assert compact(faces) == faces
        assert compact(cell_to_children(faces[0], 1) + faces[1:]) == faces

    def test_incomplete_group(self):
        """Test a missing sibling prevents merging."""
        parent = serialize(Cell(3, 1, 6, 4))
        children = cell_to_children(parent, 5)[1:]
        assert compact(children) == children

    def test_partial_merge(self):
        """Test complete groups merge while the rest stays."""
        parent = serialize(Cell(8, 2, 20, 5))
        grandchildren = cell_to_children(parent, 7)
        # Drop one grandchild; three of the four children remain complete
        result = compact(grandchildren[1:])
        assert len(result) == 3 + 3
        assert all(get_resolution(cell) in (6, 7) for cell in result)
        assert result == sorted(result)

    def test_mixed_resolutions(self):
        """Test cells at several resolutions compact together."""
        parent = serialize(Cell(1, 0, 2, 3))
        first, *rest = cell_to_children(parent)
        cells = cell_to_children(first, 6) + rest
        assert compact(cells) == [parent]

    def test_duplicates_and_order(self):
        """Test repeated and unsorted input."""
        parent = serialize(Cell(10, 4, 1, 2))
        children = cell_to_children(parent)
        assert compact(list(reversed(children)) + children) == [parent]

    def test_idempotent(self):
        """Test compacting twice changes nothing."""
        parent = serialize(Cell(2, 3, 5, 3))
        cells = cell_to_children(parent, 5)[3:]
        once = compact(cells)
        assert compact(once) == once

    def test_overlapping_cells(self):
        """Test cells inside another input cell are dropped."""
        parent = serialize(Cell(7, 1, 9, 3))
        child = cell_to_children(parent)[0]
        assert compact([parent, child]) == [parent]
        assert compact([child, parent, cell_to_children(child, 6)[5]]) == [parent]

    def test_group_with_finer_descendant(self):
        """Test a sibling group merges even with a finer cell among them."""
        parent = serialize(Cell(7, 1, 9, 3))
        children = cell_to_children(parent)
        grandchild = cell_to_children(children[1])[2]
        assert compact(children + [grandchild]) == [parent]

    def test_face_between_quintants(self):
        """Test quintants merge when another face sorts between them."""
        faces = get_res0_cells()
        quintants = cell_to_children(faces[0])
        assert compact(quintants + [faces[1]]) == [faces[0], faces[1]]

    def test_idempotent_mixed(self):
        """Test compacting a mixed resolution set twice changes nothing."""
        parent = serialize(Cell(5, 2, 17, 4))
        children = cell_to_children(parent)
        cells = cell_to_children(children[0], 7)[:10] + children[2:]
        cells += [get_res0_cells()[11], serialize(Cell(0, 3, 2, 2))]
        once = compact(cells)
        assert compact(once) == once
        assert any(get_resolution(cell) == 6 for cell in once)
        assert any(get_resolution(cell) == 7 for cell in once)

    def test_empty(self):
        """Test empty input."""
        assert compact([]) == []


class TestUncompact:
    """Tests for expanding cells to one resolution."""

    def test_expand(self):
        """Test a cell expands to all its descendants."""
        cell = serialize(Cell(0, 4, 1, 2))
        result = uncompact([cell], 4)
        assert len(result) == 16
        assert all(get_resolution(c) == 4 for c in result)

    def test_face(self):
        """Test a face expands to its quintants."""
        assert len(uncompact([get_res0_cells()[0]], 1)) == 5

    def test_same_resolution(self):
        """Test cells already at the target are kept."""
        cell = serialize(Cell(6, 1, 3, 3))
        assert uncompact([cell], 3) == [cell]

    def test_mixed(self):
        """Test mixed input ends up at one resolution without duplicates."""
        parent = serialize(Cell(9, 2, 0, 3))
        child = cell_to_children(parent)[2]
        result = uncompact([parent, child], 5)
        assert len(result) == 16
        assert result == sorted(set(result))

    def test_finer_than_target(self):
        """Test cells finer than the target are rejected."""
        cell = serialize(Cell(0, 0, 0, 6))
        with pytest.raises(ResolutionError):
            uncompact([cell], 5)

    def test_round_trip(self):
        """Test uncompact undoes compact."""
        parent = serialize(Cell(4, 0, 7, 4))
        cells = cell_to_children(parent, 6)[5:]
        compacted = compact(cells)
        assert len(compacted) < len(cells)
        assert uncompact(compacted, 6) == sorted(cells)

    def test_face_scenario(self):
        """Test a face splits into its quintants and compacts back."""
        face = lonlat_to_cell(0.0, 0.0, 0)
        quintants = uncompact([face], 1)
        assert quintants == sorted(cell_to_children(face))
        assert compact(quintants) == [face]

    @pytest.mark.parametrize("target", [4, 6, 8])
    def test_compact_of_uncompact(self, target):
        """Test expanding then compacting matches compacting directly."""
        parent = serialize(Cell(11, 4, 6, 3))
        children = cell_to_children(parent)
        cells = [
            parent,
            children[1],
            serialize(Cell(2, 0, 13, 4)),
            *cell_to_children(serialize(Cell(9, 3, 1, 2)), 4)[2:],
            *cell_to_children(serialize(Cell(6, 0, 0, 3)), 4),
        ]
        assert compact(uncompact(cells, target)) == compact(cells)
