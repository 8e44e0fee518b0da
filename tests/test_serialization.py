"""Tests for cell id serialization and hierarchy module."""

import pytest
from a5grid.errors import InvalidCellId, InvalidResolution, MaxResolutionExceeded, NoParent
from a5grid.serialization import (
    FIRST_HILBERT_RESOLUTION,
    HILBERT_START_BIT,
    MAX_RESOLUTION,
    WORLD_CELL,
    Cell,
    cell_to_children,
    cell_to_hex,
    cell_to_parent,
    deserialize,
    get_res0_cells,
    get_resolution,
    get_stride,
    hex_to_cell,
    is_first_child,
    serialize,
)


def _marker_bit(resolution):
    if resolution < FIRST_HILBERT_RESOLUTION:
        shift = resolution + 1
    else:
        shift = 2 * (resolution - 1) + 1
    return 1 << (HILBERT_START_BIT - shift)


class TestSerialize:
    """Tests for packing cells into ids."""

    def test_resolution_markers(self):
        """Test the marker bit moves down with resolution."""
        for resolution in range(MAX_RESOLUTION + 1):
            cell = Cell(origin_id=0, segment=4, s=0, resolution=resolution)
            assert serialize(cell) == _marker_bit(resolution)

    def test_first_and_last_markers(self):
        """Test the marker positions at both ends of the range."""
        assert serialize(Cell(0, 4, 0, 0)) == 1 << 57
        assert serialize(Cell(0, 4, 0, MAX_RESOLUTION)) == 0b10

    def test_world_cell(self):
        """Test the world cell serializes to zero."""
        assert serialize(Cell(0, 0, 0, -1)) == WORLD_CELL

    def test_s_too_large(self):
        """Test s must fit the bits of its resolution."""
        with pytest.raises(InvalidResolution):
            serialize(Cell(0, 0, 16, 3))

    def test_resolution_too_large(self):
        """Test resolutions past the maximum are rejected."""
        with pytest.raises(InvalidResolution):
            serialize(Cell(0, 0, 0, MAX_RESOLUTION + 1))

    def test_unknown_origin(self):
        """Test origin ids outside 0-11 are rejected."""
        with pytest.raises(InvalidCellId):
            serialize(Cell(12, 0, 0, 3))


class TestDeserialize:
    """Tests for unpacking ids."""

    def test_round_trip(self):
        """Test deserialize inverts serialize."""
        cells = [
            Cell(0, 0, 0, 0),
            Cell(11, 0, 0, 0),
            Cell(3, 2, 0, 1),
            Cell(7, 4, 3, 2),
            Cell(5, 1, 12345, 10),
            Cell(11, 3, (1 << 56) - 1, MAX_RESOLUTION),
        ]
        for cell in cells:
            assert deserialize(serialize(cell)) == cell

    def test_world_cell(self):
        """Test zero decodes to the world cell."""
        assert deserialize(WORLD_CELL).resolution == -1

    def test_bits_below_marker(self):
        """Test ids with bits set below the marker are rejected."""
        with pytest.raises(InvalidCellId):
            deserialize(0b11)
        with pytest.raises(InvalidCellId):
            deserialize((1 << 57) | 1)

    def test_unknown_origin(self):
        """Test origin bits beyond the twelve faces are rejected."""
        with pytest.raises(InvalidCellId):
            deserialize((63 << HILBERT_START_BIT) | _marker_bit(1))
        with pytest.raises(InvalidCellId):
            deserialize((12 << HILBERT_START_BIT) | _marker_bit(0))

    def test_out_of_range(self):
        """Test values outside 64 bits are rejected."""
        with pytest.raises(InvalidCellId):
            deserialize(-1)
        with pytest.raises(InvalidCellId):
            deserialize(1 << 64)

    def test_get_resolution(self):
        """Test resolution is read from the marker."""
        assert get_resolution(WORLD_CELL) == -1
        for resolution in range(MAX_RESOLUTION + 1):
            assert get_resolution(_marker_bit(resolution)) == resolution


class TestHierarchy:
    """Tests for parents and children."""

    def test_res0_cells(self):
        """Test the twelve face cells in ascending order."""
        cells = get_res0_cells()
        assert len(cells) == 12
        assert cells == sorted(cells)
        assert all(get_resolution(cell) == 0 for cell in cells)

    def test_world_children(self):
        """Test the world cell expands to every cell at a resolution."""
        assert len(cell_to_children(WORLD_CELL, 1)) == 60
        assert len(cell_to_children(WORLD_CELL, 2)) == 240

    def test_children_counts(self):
        """Test faces split in five, then every level in four."""
        face = get_res0_cells()[3]
        assert len(cell_to_children(face)) == 5
        quintant = cell_to_children(face)[0]
        assert len(cell_to_children(quintant)) == 4
        assert len(cell_to_children(quintant, 4)) == 64

    def test_children_sorted_and_unique(self):
        """Test children follow the curve."""
        children = cell_to_children(get_res0_cells()[7], 3)
        assert children == sorted(set(children))

    def test_same_resolution(self):
        """Test asking for the current resolution returns the cell."""
        cell = get_res0_cells()[0]
        assert cell_to_children(cell, 0) == [cell]
        assert cell_to_parent(cell, 0) == cell

    def test_parent_of_children(self):
        """Test each child points back to its parent."""
        parent = serialize(Cell(4, 2, 9, 3))
        for child in cell_to_children(parent, 5):
            assert cell_to_parent(child, 3) == parent
        for child in cell_to_children(parent):
            assert cell_to_parent(child) == parent

    def test_parent_of_quintant(self):
        """Test quintants point back to their face."""
        face = get_res0_cells()[9]
        for child in cell_to_children(face):
            assert cell_to_parent(child) == face

    def test_parent_inside_children_range(self):
        """Test a parent sorts between its first and last child."""
        parent = serialize(Cell(2, 1, 3, 4))
        children = cell_to_children(parent)
        assert children[0] < parent < children[-1]

    def test_no_parent_at_res0(self):
        """Test face cells have no parent."""
        with pytest.raises(NoParent):
            cell_to_parent(get_res0_cells()[0])

    def test_parent_finer_resolution(self):
        """Test a parent cannot be finer than the cell."""
        with pytest.raises(InvalidResolution):
            cell_to_parent(serialize(Cell(0, 0, 0, 3)), 5)
        with pytest.raises(InvalidResolution):
            cell_to_parent(serialize(Cell(0, 0, 0, 3)), -1)

    def test_children_past_max(self):
        """Test cells at the finest resolution have no children."""
        with pytest.raises(MaxResolutionExceeded):
            cell_to_children(serialize(Cell(0, 0, 0, MAX_RESOLUTION)))

    def test_children_coarser(self):
        """Test children cannot be coarser than the cell."""
        with pytest.raises(InvalidResolution):
            cell_to_children(serialize(Cell(0, 0, 0, 5)), 4)

    def test_stride_and_first_child(self):
        """Test consecutive siblings differ by one stride."""
        parent = serialize(Cell(6, 3, 2, 6))
        children = cell_to_children(parent)
        stride = get_stride(7)
        assert [b - a for a, b in zip(children, children[1:])] == [stride] * 3
        assert is_first_child(children[0])
        assert not any(is_first_child(child) for child in children[1:])


class TestHex:
    """Tests for hexadecimal cell ids."""

    def test_to_hex(self):
        """Test lowercase hex without padding."""
        assert cell_to_hex(0x2E00000000000000) == "2e00000000000000"
        assert cell_to_hex(0b10) == "2"

    def test_from_hex(self):
        """Test parsing with and without prefix."""
        assert hex_to_cell("2e00000000000000") == 0x2E00000000000000
        assert hex_to_cell("0xEB60000000000000") == 0xEB60000000000000

    def test_round_trip(self):
        """Test hex round trip for every face."""
        for cell in get_res0_cells():
            assert hex_to_cell(cell_to_hex(cell)) == cell

    def test_invalid_hex(self):
        """Test non-hex strings are rejected."""
        for text in ["", "0x", "xyz", "12g4"]:
            with pytest.raises(InvalidCellId):
                hex_to_cell(text)

    def test_too_long(self):
        """Test values over 64 bits are rejected."""
        with pytest.raises(InvalidCellId):
            hex_to_cell("1" + "0" * 16)
