"""
Dodecahedron projection between the sphere and the planar face of an origin.

Each face is split into ten triangles around its centre. A point is
projected through the triangle it falls in with the equal-area
polyhedral projection. Points past the edge of the face (which happens
near boundaries during encoding) use a triangle reflected across that
edge.

The face and spherical triangles are computed once per process.
"""

import logging
import math
import threading
from typing import List, Optional, Tuple

from . import polyhedral
from .constants import DISTANCE_TO_EDGE, INTERHEDRAL_ANGLE, PI_OVER_5, TWO_PI_OVER_5
from .coords import Polar, Spherical, round_half_away_from_zero, to_cartesian, to_face, to_polar, to_spherical
from .crs import get_vertex
from .geometry import Point2, SphericalTriangleShape
from .gnomonic import project_gnomonic, unproject_gnomonic
from .origin import Origin, get_origins, transform_quat
from .tiling import get_quintant_vertices

logger = logging.getLogger(__name__)

FaceTriangle = Tuple[Point2, Point2, Point2]


class _Tables:
    """Precomputed triangles; index with ``face_triangle`` / ``spherical_triangle``."""

    def __init__(self):
        # 10 base, 10 reflected, 10 squashed reflected
        self.face_triangles: Tuple[FaceTriangle, ...] = tuple(
            [_base_face_triangle(i) for i in range(10)]
            + [_reflected_face_triangle(i, squashed=False) for i in range(10)]
            + [_reflected_face_triangle(i, squashed=True) for i in range(10)]
        )

        # 120 base followed by 120 reflected
        spherical: List[SphericalTriangleShape] = []
        for reflected in (False, True):
            for origin in get_origins():
                for i in range(10):
                    spherical.append(self._spherical_triangle(i, origin, reflected))
        self.spherical_triangles: Tuple[SphericalTriangleShape, ...] = tuple(spherical)

    def face_triangle(self, index: int, reflected: bool = False, squashed: bool = False) -> FaceTriangle:
        if reflected:
            index += 20 if squashed else 10
        return self.face_triangles[index]

    def spherical_triangle(self, index: int, origin_id: int, reflected: bool = False) -> SphericalTriangleShape:
        offset = 10 * origin_id + index
        if reflected:
            offset += 120
        return self.spherical_triangles[offset]

    def _spherical_triangle(self, index: int, origin: Origin, reflected: bool) -> SphericalTriangleShape:
        face_triangle = self.face_triangle(index, reflected, squashed=True)
        vertices = []
        for face in face_triangle:
            rho, gamma = to_polar(face)
            rotated = to_cartesian(unproject_gnomonic((rho, gamma + origin.angle)))
            vertices.append(get_vertex(transform_quat(rotated, origin.quat)))
        triangle = SphericalTriangleShape(vertices)
        # Area is cached on first call, warm it while holding the lock
        triangle.get_area()
        return triangle


_tables: Optional[_Tables] = None
_lock = threading.Lock()


def _get_tables() -> _Tables:
    global _tables
    if _tables is None:
        with _lock:
            if _tables is None:
                _tables = _Tables()
                logger.debug(
                    "Built %d face triangles and %d spherical triangles",
                    len(_tables.face_triangles), len(_tables.spherical_triangles),
                )
    return _tables


def _base_face_triangle(index: int) -> FaceTriangle:
    quintant = ((index + 1) // 2) % 5
    center, corner1, corner2 = get_quintant_vertices(quintant).vertices
    edge_midpoint = ((corner1[0] + corner2[0]) / 2, (corner1[1] + corner2[1]) / 2)

    # Centre and midpoint are swapped relative to the icosahedral layout
    if index % 2 == 0:
        return (center, edge_midpoint, corner1)
    return (center, corner2, edge_midpoint)


def _reflected_face_triangle(index: int, squashed: bool) -> FaceTriangle:
    a, b, c = _base_face_triangle(index)

    # Reflect the face centre across the edge BC
    midpoint = b if index % 2 == 0 else c

    # Squashed triangles unproject onto the correct spherical triangle
    factor = 1 + 1 / math.cos(INTERHEDRAL_ANGLE) if squashed else 2.0
    a = (-a[0] + midpoint[0] * factor, -a[1] + midpoint[1] * factor)

    # Swap midpoint and corner to keep the vertex order
    return (a, c, b)


def get_face_triangle_index(polar: Polar) -> int:
    """Which of the ten face triangles (0-9) a polar point falls in."""
    return (math.floor(polar[1] / PI_OVER_5) + 10) % 10


def normalize_gamma(gamma: float) -> float:
    """Azimuth relative to the nearest quintant bisector, in [-pi/5, pi/5]."""
    segment = gamma / TWO_PI_OVER_5
    offset = segment - round_half_away_from_zero(segment)
    return offset * TWO_PI_OVER_5


def should_reflect(polar: Polar) -> bool:
    """True when the point lies beyond the edge of the face."""
    rho, gamma = polar
    return to_face((rho, normalize_gamma(gamma)))[0] > DISTANCE_TO_EDGE


def forward(spherical: Spherical, origin: Origin) -> Point2:
    """
    Project a spherical point onto the plane of a face.

    Args:
        spherical: Point as (theta, phi)
        origin: Face to project onto

    Returns:
        Face point
    """
    tables = _get_tables()
    unprojected = to_cartesian(spherical)
    out = transform_quat(unprojected, origin.inverse_quat)

    rho, gamma = project_gnomonic(to_spherical(out))
    polar = (rho, gamma - origin.angle)

    index = get_face_triangle_index(polar)
    reflect = should_reflect(polar)
    return polyhedral.forward(
        unprojected,
        tables.spherical_triangle(index, origin.id, reflect),
        tables.face_triangle(index, reflect),
    )


def inverse(face: Point2, origin: Origin) -> Spherical:
    """Unproject a face point back to spherical (theta, phi)."""
    tables = _get_tables()
    polar = to_polar(face)
    index = get_face_triangle_index(polar)
    reflect = should_reflect(polar)
    unprojected = polyhedral.inverse(
        face,
        tables.face_triangle(index, reflect),
        tables.spherical_triangle(index, origin.id, reflect),
    )
    return to_spherical(unprojected)
