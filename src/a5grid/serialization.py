"""
Packing of cells into 64-bit identifiers and navigation of the hierarchy.

Layout of a cell id, most significant bit first::

    [6 bits origin/segment][2 * (r - 1) bits of s][1][0...0]

The top six bits hold the origin id at resolution 0 and
``5 * origin + segment`` below it. The Hilbert index ``s`` follows, then a
single marker bit whose position encodes the resolution. Sorting ids
therefore sorts cells along the global Hilbert curve, with every parent
sorting inside the range of its children.

The finest level is resolution 29 (``MAX_RESOLUTION``): a marker for
resolution 30 would need a 65th bit, so ids there cannot be represented.
"""

import string
from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidCellId, InvalidResolution, MaxResolutionExceeded, NoParent
from .origin import get_origins

FIRST_HILBERT_RESOLUTION = 2

# Finest addressable resolution. One level deeper would need more than 64 bits.
MAX_RESOLUTION = 29

HILBERT_START_BIT = 58  # 64 - 6 bits for origin & segment

# First 6 bits 0, remaining 58 bits 1
REMOVAL_MASK = 0x03FFFFFFFFFFFFFF

# First 6 bits 1, remaining 58 bits 0
ORIGIN_SEGMENT_MASK = 0xFC00000000000000

ALL_ONES = 0xFFFFFFFFFFFFFFFF

# Abstract cell containing the whole world; resolution -1, the 12 faces are its children
WORLD_CELL = 0

# Largest number of levels expanded in one call to cell_to_children
MAX_CHILD_LEVELS = 20


@dataclass(frozen=True)
class Cell:
    """
    A decoded cell id.

    Attributes:
        origin_id: Face the cell belongs to (0-11)
        segment: Quintant of the face along the curve (0-4), 0 at resolution 0
        s: Position along the Hilbert curve of the segment, 0 below resolution 2
        resolution: Cell resolution, -1 for the world cell
    """
    origin_id: int
    segment: int
    s: int
    resolution: int


def _marker_shift(resolution: int) -> int:
    """Position of the resolution marker counted from HILBERT_START_BIT."""
    if resolution < FIRST_HILBERT_RESOLUTION:
        # One bit per level outside the Hilbert levels
        return resolution + 1
    # Two bits per Hilbert level
    return 2 * (resolution - FIRST_HILBERT_RESOLUTION + 1) + 1


def _hilbert_bits(resolution: int) -> int:
    return 2 * (resolution - FIRST_HILBERT_RESOLUTION + 1)


def get_resolution(index: int) -> int:
    """
    Resolution of a cell id, read from the position of its marker bit.

    Returns:
        Resolution, or -1 when no marker is present (the world cell)
    """
    resolution = MAX_RESOLUTION
    shifted = index >> 1

    while resolution > -1 and (shifted & 1) == 0:
        resolution -= 1
        shifted >>= 1 if resolution < FIRST_HILBERT_RESOLUTION else 2

    return resolution


def deserialize(index: int) -> Cell:
    """
    Decode a cell id.

    Args:
        index: 64-bit cell id

    Returns:
        Decoded Cell

    Raises:
        InvalidCellId: If the id is outside 64 bits, names an unknown origin,
            or has bits set below its resolution marker
    """
    if index < 0 or index > ALL_ONES:
        raise InvalidCellId(f"Cell id {index} is not a 64-bit unsigned integer")

    resolution = get_resolution(index)

    if resolution == -1:
        if index != WORLD_CELL:
            raise InvalidCellId(f"Cell id {index:#x} has no resolution marker")
        return Cell(origin_id=0, segment=0, s=0, resolution=-1)

    marker = 1 << (HILBERT_START_BIT - _marker_shift(resolution))
    if index & (marker - 1):
        raise InvalidCellId(f"Cell id {index:#x} has bits set below its resolution marker")

    top6 = index >> HILBERT_START_BIT
    origins = get_origins()

    if resolution == 0:
        if top6 >= len(origins):
            raise InvalidCellId(f"Could not parse origin: {top6}")
        origin_id = top6
        segment = 0
    else:
        origin_id = top6 // 5
        if origin_id >= len(origins):
            raise InvalidCellId(f"Could not parse origin: {top6}")
        segment = (top6 + origins[origin_id].first_quintant) % 5

    if resolution < FIRST_HILBERT_RESOLUTION:
        return Cell(origin_id=origin_id, segment=segment, s=0, resolution=resolution)

    shift = HILBERT_START_BIT - _hilbert_bits(resolution)
    s = (index & REMOVAL_MASK) >> shift
    return Cell(origin_id=origin_id, segment=segment, s=s, resolution=resolution)


def serialize(cell: Cell) -> int:
    """
    Encode a cell as its 64-bit id.

    Raises:
        InvalidResolution: If the resolution is out of range or s does not fit
    """
    resolution = cell.resolution
    if resolution > MAX_RESOLUTION:
        raise InvalidResolution(f"Resolution ({resolution}) is too large")
    if resolution < -1:
        raise InvalidResolution(f"Resolution ({resolution}) is negative")
    if resolution == -1:
        return WORLD_CELL

    origins = get_origins()
    if not 0 <= cell.origin_id < len(origins):
        raise InvalidCellId(f"Unknown origin {cell.origin_id}")
    origin = origins[cell.origin_id]

    if resolution == 0:
        index = cell.origin_id << HILBERT_START_BIT
    else:
        segment_n = (cell.segment + 5 - origin.first_quintant) % 5
        index = (5 * cell.origin_id + segment_n) << HILBERT_START_BIT

    if resolution >= FIRST_HILBERT_RESOLUTION:
        hilbert_bits = _hilbert_bits(resolution)
        if cell.s >= 1 << hilbert_bits:
            raise InvalidResolution(f"S ({cell.s}) is too large for resolution level {resolution}")
        index += cell.s << (HILBERT_START_BIT - hilbert_bits)

    index |= 1 << (HILBERT_START_BIT - _marker_shift(resolution))
    return index


def cell_to_children(index: int, child_resolution: Optional[int] = None) -> List[int]:
    """
    Descendants of a cell at a finer resolution, in curve order.

    Args:
        index: Cell id, or WORLD_CELL
        child_resolution: Target resolution, defaults to one level down

    Returns:
        List of cell ids; just ``[index]`` when the target equals the
        cell's own resolution

    Raises:
        MaxResolutionExceeded: If the target is past MAX_RESOLUTION
        InvalidResolution: If the target is coarser than the cell
    """
    cell = deserialize(index)
    current = cell.resolution
    new_resolution = current + 1 if child_resolution is None else child_resolution

    if new_resolution > MAX_RESOLUTION:
        raise MaxResolutionExceeded(
            f"Target resolution ({new_resolution}) exceeds maximum resolution ({MAX_RESOLUTION})"
        )
    if new_resolution < current:
        raise InvalidResolution(
            f"Target resolution ({new_resolution}) must be equal to or greater than "
            f"current resolution ({current})"
        )
    if new_resolution == current:
        return [index]

    origins = get_origins()
    origin_ids = [cell.origin_id]
    if current == -1:
        origin_ids = list(range(len(origins)))
    all_segments = (current == -1 and new_resolution > 0) or current == 0

    resolution_diff = new_resolution - max(current, FIRST_HILBERT_RESOLUTION - 1)
    if resolution_diff > MAX_CHILD_LEVELS:
        raise InvalidResolution(f"Resolution difference {resolution_diff} is too large")
    children_count = 4 ** resolution_diff if resolution_diff > 0 else 1
    shifted_s = cell.s << (2 * resolution_diff) if resolution_diff > 0 else cell.s

    children = []
    for origin_id in origin_ids:
        if all_segments:
            # Walk the segments from where the curve enters the face
            first = origins[origin_id].first_quintant
            segments = [(first + n) % 5 for n in range(5)]
        else:
            segments = [cell.segment]
        for segment in segments:
            for i in range(children_count):
                children.append(serialize(Cell(origin_id, segment, shifted_s + i, new_resolution)))
    return children


def cell_to_parent(index: int, parent_resolution: Optional[int] = None) -> int:
    """
    Ancestor of a cell at a coarser resolution.

    Args:
        index: Cell id
        parent_resolution: Target resolution, defaults to one level up

    Raises:
        NoParent: If the cell is at resolution 0 and no target is given
        InvalidResolution: If the target is negative or finer than the cell
    """
    cell = deserialize(index)
    current = cell.resolution

    if parent_resolution is None:
        if current <= 0:
            raise NoParent(f"Cell {index:x} at resolution {current} has no parent")
        new_resolution = current - 1
    else:
        new_resolution = parent_resolution

    if new_resolution < 0:
        raise InvalidResolution(f"Target resolution ({new_resolution}) cannot be negative")
    if new_resolution > current:
        raise InvalidResolution(
            f"Target resolution ({new_resolution}) must be equal to or less than "
            f"current resolution ({current})"
        )
    if new_resolution == current:
        return index

    shifted_s = cell.s >> (2 * (current - new_resolution))
    return serialize(Cell(cell.origin_id, cell.segment, shifted_s, new_resolution))


def get_res0_cells() -> List[int]:
    """The 12 face cells, in curve order."""
    return cell_to_children(WORLD_CELL, 0)


def get_stride(resolution: int) -> int:
    """
    Difference between the ids of consecutive cells at a resolution.

    Consecutive siblings differ by exactly this amount.
    """
    if resolution < FIRST_HILBERT_RESOLUTION:
        return 1 << HILBERT_START_BIT
    return 1 << (HILBERT_START_BIT - _hilbert_bits(resolution))


def is_first_child(index: int, resolution: Optional[int] = None) -> bool:
    """True when the cell is the first of its parent's children."""
    if resolution is None:
        resolution = get_resolution(index)
    if resolution < FIRST_HILBERT_RESOLUTION:
        top6 = index >> HILBERT_START_BIT
        if resolution == 0:
            return top6 == 0
        return top6 % 5 == 0
    shift = HILBERT_START_BIT - _hilbert_bits(resolution)
    s = (index & REMOVAL_MASK) >> shift
    return s % 4 == 0


def cell_to_hex(index: int) -> str:
    """Lowercase hexadecimal form of a cell id, without prefix or padding."""
    return format(index, "x")


def hex_to_cell(hex_string: str) -> int:
    """
    Parse a hexadecimal cell id, with or without a ``0x`` prefix.

    Raises:
        InvalidCellId: If the string is not hexadecimal or exceeds 64 bits
    """
    text = hex_string.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    if not text or any(ch not in string.hexdigits for ch in text):
        raise InvalidCellId(f"Invalid hex string: {hex_string!r}")
    value = int(text, 16)
    if value > ALL_ONES:
        raise InvalidCellId(f"Hex string {hex_string!r} exceeds 64 bits")
    return value
