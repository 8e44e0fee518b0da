"""
Compaction and uncompaction of cell collections.

``compact`` drops cells already covered by one of their ancestors, then
replaces every complete group of siblings by their parent, working from
the finest resolution up. ``uncompact`` expands a mixed set back to a
single resolution. Both return sorted, duplicate-free lists.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Set

from .cell_info import get_num_children
from .errors import ResolutionError
from .serialization import (
    FIRST_HILBERT_RESOLUTION,
    WORLD_CELL,
    cell_to_children,
    cell_to_parent,
    get_resolution,
)

logger = logging.getLogger(__name__)


def _sibling_count(resolution: int) -> int:
    if resolution >= FIRST_HILBERT_RESOLUTION:
        return 4
    return 5


def _remove_covered(cells: Set[int]) -> Dict[int, Set[int]]:
    """Group cells by resolution, skipping any cell with an ancestor in the set."""
    by_resolution = defaultdict(set)
    for cell in cells:
        resolution = get_resolution(cell)
        if any(cell_to_parent(cell, r) in cells for r in range(resolution)):
            continue
        by_resolution[resolution].add(cell)
    return by_resolution


def compact(cells: Iterable[int]) -> List[int]:
    """
    Merge complete sibling groups into their parents.

    Resolution 0 cells are never merged, so the result always stays
    within the 12 faces.

    Args:
        cells: Cell ids, in any order, possibly repeated or overlapping

    Returns:
        Sorted list of cell ids covering the same area
    """
    unique = set(cells)
    if WORLD_CELL in unique:
        return [WORLD_CELL]

    by_resolution = _remove_covered(unique)
    if not by_resolution:
        return []

    # Parents land one level up and are grouped again on the next step
    for resolution in range(max(by_resolution), 0, -1):
        groups = defaultdict(list)
        for cell in by_resolution[resolution]:
            groups[cell_to_parent(cell)].append(cell)

        expected = _sibling_count(resolution)
        for parent, siblings in groups.items():
            if len(siblings) == expected:
                by_resolution[resolution].difference_update(siblings)
                by_resolution[resolution - 1].add(parent)

    result = sorted(cell for level in by_resolution.values() for cell in level)
    logger.debug("Compacted %d cells to %d", len(unique), len(result))
    return result


def uncompact(cells: Iterable[int], target_resolution: int) -> List[int]:
    """
    Expand cells to a single resolution.

    Args:
        cells: Cell ids at or above ``target_resolution``
        target_resolution: Resolution of the output cells

    Returns:
        Sorted list of cell ids, all at ``target_resolution``

    Raises:
        ResolutionError: If any cell is finer than ``target_resolution``
    """
    cells = list(cells)
    for cell in cells:
        resolution = get_resolution(cell)
        if resolution > target_resolution:
            raise ResolutionError(
                f"Cannot uncompact cell at resolution {resolution} "
                f"to lower resolution {target_resolution}"
            )

    result = set()
    for cell in cells:
        if get_num_children(get_resolution(cell), target_resolution) == 1:
            result.add(cell)
        else:
            result.update(cell_to_children(cell, target_resolution))
    return sorted(result)
