"""
Placement of cell footprints within a face.

Resolution 0 cells are whole face pentagons and resolution 1 cells are
quintant triangles. From resolution 2 each cell is a copy of the
prototype pentagon, oriented by the flips of its Hilbert anchor and
moved to the anchor's lattice position.
"""

import math
from typing import Tuple

from .constants import TWO_PI_OVER_5
from .coords import Polar, round_half_away_from_zero
from .geometry import Mat2, PentagonShape, ShapeKind
from .hilbert import NO, YES, Anchor
from .pentagon import apply_mat2, get_pentagon_constants

QUINTANT_ROTATIONS: Tuple[Mat2, ...] = tuple(
    (
        math.cos(TWO_PI_OVER_5 * quintant),
        -math.sin(TWO_PI_OVER_5 * quintant),
        math.sin(TWO_PI_OVER_5 * quintant),
        math.cos(TWO_PI_OVER_5 * quintant),
    )
    for quintant in range(5)
)


def get_pentagon_vertices(resolution: int, quintant: int, anchor: Anchor) -> PentagonShape:
    """
    Footprint of a Hilbert cell in face coordinates.

    Args:
        resolution: Hilbert resolution of the cell
        quintant: Quintant of the face the cell lies in (0-4)
        anchor: Lattice anchor from hilbert.s_to_anchor

    Returns:
        Pentagon in face coordinates
    """
    constants = get_pentagon_constants()
    shape = constants.pentagon
    translation = apply_mat2(constants.basis, anchor.offset)
    flip_x, flip_y = anchor.flips

    if flip_x == NO and flip_y == YES:
        shape = shape.rotate180()

    k = anchor.k
    f = flip_x + flip_y
    # Last two pentagons when both or neither flips are set, first and last when only one is
    if ((f == -2 or f == 2) and k > 1) or (f == 0 and k in (0, 3)):
        shape = shape.reflect_y()

    w = constants.w
    if flip_x == YES and flip_y == YES:
        shape = shape.rotate180()
    elif flip_x == YES:
        shape = shape.translate((-w[0], -w[1]))
    elif flip_y == YES:
        shape = shape.translate(w)

    shape = shape.translate(translation)
    shape = shape.scale(1.0 / (2 ** resolution))
    return shape.transform(QUINTANT_ROTATIONS[quintant])


def get_quintant_vertices(quintant: int) -> PentagonShape:
    """Triangle (centre, corner, corner) of a face quintant."""
    return get_pentagon_constants().triangle.transform(QUINTANT_ROTATIONS[quintant])


def get_face_vertices() -> PentagonShape:
    """The whole face pentagon."""
    v = get_pentagon_constants().v
    vertices = [apply_mat2(rotation, v) for rotation in QUINTANT_ROTATIONS]
    vertices.reverse()
    return PentagonShape(vertices, ShapeKind.PENTAGON)


def get_quintant_polar(polar: Polar) -> int:
    """Quintant (0-4) containing a polar face point."""
    gamma = polar[1]
    return (round_half_away_from_zero(gamma / TWO_PI_OVER_5) + 5) % 5
