"""
Cell counts and areas per resolution.
"""

from .serialization import FIRST_HILBERT_RESOLUTION

AUTHALIC_RADIUS = 6371007.2  # m
AUTHALIC_AREA = 510065624779439.1  # m^2, 4 * pi * AUTHALIC_RADIUS^2


def get_num_cells(resolution: int) -> int:
    """
    Number of cells covering the globe at a resolution.

    Args:
        resolution: Cell resolution

    Returns:
        12 at resolution 0, 60 * 4^(r - 1) above it, 0 for negative input
    """
    if resolution < 0:
        return 0
    if resolution == 0:
        return 12
    return 60 * 4 ** (resolution - 1)


def get_num_children(resolution: int, child_resolution: int) -> int:
    """Number of descendants a cell has ``child_resolution - resolution`` levels down."""
    if child_resolution < resolution:
        return 0
    if child_resolution == resolution:
        return 1
    if resolution < 0:
        return get_num_cells(child_resolution)
    if resolution == 0:
        return get_num_cells(child_resolution) // 12
    # Resolution 1 onwards every level splits in four
    return 4 ** (child_resolution - max(resolution, FIRST_HILBERT_RESOLUTION - 1))


def cell_area(resolution: int) -> float:
    """
    Area of a single cell in square metres.

    All cells at a resolution have the same area. A negative resolution
    refers to the world cell and returns the whole surface.
    """
    if resolution < 0:
        return AUTHALIC_AREA
    return AUTHALIC_AREA / get_num_cells(resolution)
