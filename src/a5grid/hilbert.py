"""
Generalized Hilbert curve over the triangular lattice of a quintant.

A quintant at Hilbert resolution ``n`` is covered by ``4**n`` pentagons.
The curve visits them in order; ``s`` is the position along the curve.
Each quaternary digit of ``s`` picks one of four children, and the
digits are read together with a pair of flips that record how the
sub-curve has been mirrored on the way down.

Offsets are kept in the IJ basis (spanned by the lattice vectors v and w)
and in the KJ basis where k = i + j, which makes u and v unit length.
"""

import math
from enum import Enum
from typing import List, NamedTuple, Sequence, Tuple

from .geometry import Point2

YES = -1
NO = 1

Flips = Tuple[int, int]

FLIP_SHIFT = (-1.0, 1.0)

# Digit rearrangements that keep children overlapping their parent
PATTERN = (0, 1, 3, 4, 5, 6, 7, 2)
PATTERN_FLIPPED = (0, 1, 2, 7, 3, 4, 5, 6)


class Orientation(Enum):
    """
    Orientation of the curve inside the triangle (u, v, w).

    The name gives the start and end corner: ``WV`` starts at w and ends at v.
    """
    UV = "uv"
    VU = "vu"
    UW = "uw"
    WU = "wu"
    VW = "vw"
    WV = "wv"


class Anchor(NamedTuple):
    """Position of a pentagon in the lattice, with its last digit and flips."""
    k: int
    offset: Point2
    flips: Flips


def reverse_pattern(pattern: Sequence[int]) -> Tuple[int, ...]:
    """Inverse permutation of a shift pattern."""
    result = [0] * len(pattern)
    for i, value in enumerate(pattern):
        result[value] = i
    return tuple(result)


PATTERN_REVERSED = reverse_pattern(PATTERN)
PATTERN_FLIPPED_REVERSED = reverse_pattern(PATTERN_FLIPPED)


def ij_to_kj(ij: Point2) -> Point2:
    i, j = ij
    return (i + j, j)


def kj_to_ij(kj: Point2) -> Point2:
    k, j = kj
    return (k - j, j)


def quaternary_to_kj(n: int, flips: Flips) -> Point2:
    """
    Offset of child ``n`` relative to its parent, in KJ units.

    Args:
        n: Quaternary digit 0-3
        flips: Current (x, y) flips

    Returns:
        KJ offset
    """
    if flips == (NO, NO):
        p, q = (1.0, 0.0), (0.0, 1.0)
    elif flips == (YES, NO):
        # Swap and negate
        p, q = (0.0, -1.0), (-1.0, 0.0)
    elif flips == (NO, YES):
        # Swap only
        p, q = (0.0, 1.0), (1.0, 0.0)
    elif flips == (YES, YES):
        # Negate only
        p, q = (-1.0, 0.0), (0.0, -1.0)
    else:
        raise ValueError(f"Invalid flips {flips}")

    if n == 0:
        return (0.0, 0.0)
    if n == 1:
        return p
    if n == 2:
        return (q[0] + p[0], q[1] + p[1])
    if n == 3:
        return (q[0] + 2 * p[0], q[1] + 2 * p[1])
    raise ValueError(f"Invalid quaternary digit {n}")


def quaternary_to_flips(n: int) -> Flips:
    if n == 0:
        return (NO, NO)
    if n == 1:
        return (NO, YES)
    if n == 2:
        return (NO, NO)
    if n == 3:
        return (YES, NO)
    raise ValueError(f"Invalid quaternary digit {n}")


def _combine(flips: Flips, digit: int) -> Flips:
    nx, ny = quaternary_to_flips(digit)
    return (flips[0] * nx, flips[1] * ny)


def _orientation_flags(orientation: Orientation) -> Tuple[bool, bool, bool]:
    reverse = orientation in (Orientation.VU, Orientation.WU, Orientation.VW)
    invert_j = orientation in (Orientation.WV, Orientation.VW)
    flip_ij = orientation in (Orientation.WU, Orientation.UW)
    return reverse, invert_j, flip_ij


def shift_digits(
    digits: List[int],
    i: int,
    flips: Flips,
    invert_j: bool,
    pattern: Sequence[int],
) -> None:
    """Rewrite digits ``i`` and ``i - 1`` in place where the layout needs shifting."""
    if i == 0:
        return

    parent_k = digits[i]
    child_k = digits[i - 1]
    f = flips[0] + flips[1]

    # Which pentagons get shifted depends on invert_j
    if invert_j != (f == 0):
        needs_shift = parent_k in (1, 2)
        first = parent_k == 1
    else:
        needs_shift = parent_k < 2
        first = parent_k == 0

    if not needs_shift:
        return

    src = child_k if first else child_k + 4
    dst = pattern[src]
    digits[i - 1] = dst % 4
    digits[i] = (parent_k + 4 + dst // 4 - src // 4) % 4


def s_to_anchor(s: int, resolution: int, orientation: Orientation) -> Anchor:
    """
    Locate the pentagon at position ``s`` along the curve.

    Args:
        s: Hilbert index, 0 <= s < 4**resolution
        resolution: Hilbert resolution (cell resolution minus one)
        orientation: Curve orientation of the quintant

    Returns:
        Anchor with the IJ offset, final digit and flips
    """
    reverse, invert_j, flip_ij = _orientation_flags(orientation)
    if reverse:
        s = (1 << (2 * resolution)) - s - 1

    anchor = _s_to_anchor(s, resolution, invert_j, flip_ij)
    k, (i, j), flips = anchor

    if flip_ij:
        i, j = j, i
        # The flips moved the origin of the cell
        if flips[0] == YES:
            i += FLIP_SHIFT[0]
            j += FLIP_SHIFT[1]
        if flips[1] == YES:
            i -= FLIP_SHIFT[0]
            j -= FLIP_SHIFT[1]

    if invert_j:
        j = (1 << resolution) - (i + j)
        flips = (-flips[0], flips[1])

    return Anchor(k, (i, j), flips)


def _s_to_anchor(s: int, resolution: int, invert_j: bool, flip_ij: bool) -> Anchor:
    digits: List[int] = []
    remaining = s
    while remaining > 0 or len(digits) < resolution:
        digits.append(remaining % 4)
        remaining >>= 2

    pattern = PATTERN_FLIPPED if flip_ij else PATTERN

    flips = (NO, NO)
    for i in reversed(range(len(digits))):
        shift_digits(digits, i, flips, invert_j, pattern)
        flips = _combine(flips, digits[i])

    flips = (NO, NO)
    k_offset = 0.0
    j_offset = 0.0
    for i in reversed(range(len(digits))):
        child_k, child_j = quaternary_to_kj(digits[i], flips)
        k_offset = 2 * k_offset + child_k
        j_offset = 2 * j_offset + child_j
        flips = _combine(flips, digits[i])

    k = digits[0] if digits else 0
    return Anchor(k, kj_to_ij((k_offset, j_offset)), flips)


def get_required_digits(offset: Point2) -> int:
    """Number of quaternary digits needed to reach an IJ offset."""
    index_sum = math.ceil(offset[0]) + math.ceil(offset[1])
    if index_sum <= 0:
        return 1
    # 1 + floor(log2(index_sum))
    return index_sum.bit_length()


def ij_to_quaternary(ij: Point2, flips: Flips) -> int:
    """Pick the child digit for an IJ offset scaled to the unit parent."""
    u, v = ij

    a = -(u + v) if flips[0] == YES else u + v
    b = -u if flips[1] == YES else u
    c = -v if flips[0] == YES else v

    # Exactly one flip
    if flips[0] + flips[1] == 0:
        if c < 1:
            return 0
        if b > 1:
            return 3
        if a > 1:
            return 2
        return 1

    if a < 1:
        return 0
    if b > 1:
        return 3
    if c > 1:
        return 2
    return 1


def ij_to_s(ij: Point2, resolution: int, orientation: Orientation) -> int:
    """
    Position along the curve of the pentagon covering an IJ point.

    Args:
        ij: Point in lattice coordinates, scaled to the resolution
        resolution: Hilbert resolution
        orientation: Curve orientation of the quintant

    Returns:
        Hilbert index s
    """
    reverse, invert_j, flip_ij = _orientation_flags(orientation)

    i, j = ij
    if flip_ij:
        i, j = j, i
    if invert_j:
        j = (1 << resolution) - (i + j)

    s = _ij_to_s((i, j), invert_j, flip_ij, resolution)
    if reverse:
        s = (1 << (2 * resolution)) - s - 1
    return s


def _ij_to_s(ij: Point2, invert_j: bool, flip_ij: bool, resolution: int) -> int:
    digits = [0] * resolution
    flips = (NO, NO)
    pivot_i = 0.0
    pivot_j = 0.0

    for i in reversed(range(resolution)):
        factor = 1 << i
        scaled = ((ij[0] - pivot_i) / factor, (ij[1] - pivot_j) / factor)
        digit = ij_to_quaternary(scaled, flips)
        digits[i] = digit

        child_i, child_j = kj_to_ij(quaternary_to_kj(digit, flips))
        pivot_i += child_i * factor
        pivot_j += child_j * factor
        flips = _combine(flips, digit)

    pattern = PATTERN_FLIPPED_REVERSED if flip_ij else PATTERN_REVERSED
    for i in range(len(digits)):
        flips = _combine(flips, digits[i])
        shift_digits(digits, i, flips, invert_j, pattern)

    output = 0
    for i in reversed(range(len(digits))):
        output += digits[i] << (2 * i)
    return output
