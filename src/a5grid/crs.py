"""
Reference vertices of the dodecahedron.

The 62 points are the 12 face centres, the 20 corners and the 30 edge
midpoints, all on the unit sphere. Spherical triangle corners computed
through the projection chain are snapped onto these exact points so that
neighbouring faces share identical vertices.
"""

import logging
import math
import threading
from typing import List, Optional, Tuple

from .constants import DISTANCE_TO_EDGE, DISTANCE_TO_VERTEX
from .coords import to_cartesian
from .errors import DegenerateGeometry
from .origin import get_origins, transform_quat
from .vector import Vec3, distance, normalize

logger = logging.getLogger(__name__)

TOLERANCE = 1e-5
VERTEX_COUNT = 62

_vertices: Optional[Tuple[Vec3, ...]] = None
_lock = threading.Lock()


def _add(vertices: List[Vec3], new_vertex: Vec3) -> None:
    normalized = normalize(new_vertex)
    for existing in vertices:
        if distance(normalized, existing) < TOLERANCE:
            return
    vertices.append(normalized)


def _build() -> Tuple[Vec3, ...]:
    vertices: List[Vec3] = []
    origins = get_origins()

    for origin in origins:
        _add(vertices, to_cartesian(origin.axis))

    phi_vertex = math.atan(DISTANCE_TO_VERTEX)
    for origin in origins:
        for i in range(5):
            theta_vertex = (2 * i + 1) * math.pi / 5
            point = to_cartesian((theta_vertex + origin.angle, phi_vertex))
            _add(vertices, transform_quat(point, origin.quat))

    phi_midpoint = math.atan(DISTANCE_TO_EDGE)
    for origin in origins:
        for i in range(5):
            theta_midpoint = 2 * i * math.pi / 5
            point = to_cartesian((theta_midpoint + origin.angle, phi_midpoint))
            _add(vertices, transform_quat(point, origin.quat))

    if len(vertices) != VERTEX_COUNT:
        raise DegenerateGeometry(
            f"Reference frame has {len(vertices)} vertices instead of {VERTEX_COUNT}"
        )

    logger.debug("Built reference frame with %d vertices", len(vertices))
    return tuple(vertices)


def get_vertices() -> Tuple[Vec3, ...]:
    """All reference vertices, built on first call."""
    global _vertices
    if _vertices is None:
        with _lock:
            if _vertices is None:
                _vertices = _build()
    return _vertices


def get_vertex(point: Vec3) -> Vec3:
    """
    Snap a point to the reference vertex it approximates.

    Args:
        point: Unit vector within TOLERANCE of a reference vertex

    Returns:
        The exact reference vertex

    Raises:
        DegenerateGeometry: If no reference vertex is close enough
    """
    for vertex in get_vertices():
        if distance(point, vertex) < TOLERANCE:
            return vertex
    raise DegenerateGeometry(f"No reference vertex near {point}")
