"""
The twelve dodecahedron faces that act as origins of the grid.

Each origin carries its axis on the sphere, the quaternion that rotates
the north pole onto that axis, the in-plane angle of its pentagon and the
layout of the Hilbert curves in its five quintants. Origins are numbered
in the order the curve visits them.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import INTERHEDRAL_ANGLE, PI_OVER_5, TWO_PI_OVER_5
from .hilbert import Orientation
from .vector import Vec3

logger = logging.getLogger(__name__)

Quat = Tuple[float, float, float, float]  # (x, y, z, w)
Spherical = Tuple[float, float]

_C = 0.8506508083520399
_S = 0.5257311121191336

# Rotations taking the north pole onto each face axis, before reordering
QUATERNIONS: Tuple[Quat, ...] = (
    (0.0, 0.0, 0.0, 1.0),
    (0.0, _S, 0.0, _C),
    (-0.5, 0.16245984811645314, 0.0, _C),
    (-0.30901699437494745, -0.42532540417602, 0.0, _C),
    (0.30901699437494745, -0.42532540417602, 0.0, _C),
    (0.5, 0.16245984811645314, 0.0, _C),
    (0.0, -_C, 0.0, _S),
    (0.8090169943749475, -0.2628655560595668, 0.0, _S),
    (0.5, 0.6881909602355868, 0.0, _S),
    (-0.5, 0.6881909602355868, 0.0, _S),
    (-0.8090169943749475, -0.2628655560595668, 0.0, _S),
    (0.0, -1.0, 0.0, 0.0),
)

# Quintant layouts
CLOCKWISE_FAN = (Orientation.VU, Orientation.UW, Orientation.VW, Orientation.VW, Orientation.VW)
CLOCKWISE_STEP = (Orientation.WU, Orientation.UW, Orientation.VW, Orientation.VU, Orientation.UW)
COUNTER_STEP = (Orientation.WU, Orientation.UV, Orientation.WV, Orientation.WU, Orientation.UW)
COUNTER_JUMP = (Orientation.VU, Orientation.UV, Orientation.WV, Orientation.WU, Orientation.UW)

QUINTANT_ORIENTATIONS = (
    CLOCKWISE_FAN,   # Arctic
    COUNTER_JUMP,    # North America
    COUNTER_STEP,    # South America
    CLOCKWISE_STEP,  # North Atlantic, Western Europe & Africa
    COUNTER_STEP,    # South Atlantic & Africa
    COUNTER_JUMP,    # Europe, Middle East & Central Africa
    COUNTER_STEP,    # Indian Ocean
    CLOCKWISE_STEP,  # Asia
    CLOCKWISE_STEP,  # Australia
    CLOCKWISE_STEP,  # North Pacific
    COUNTER_JUMP,    # South Pacific
    COUNTER_JUMP,    # Antarctic
)

# Index of the first quintant within each face
QUINTANT_FIRST = (4, 2, 3, 2, 0, 4, 3, 2, 2, 0, 3, 0)

# Placement of the faces along the Hilbert curve
ORIGIN_ORDER = (0, 1, 2, 4, 3, 5, 7, 8, 6, 11, 10, 9)


@dataclass(frozen=True)
class Origin:
    """
    One face of the dodecahedron.

    Attributes:
        id: Position of the face along the Hilbert curve (0-11)
        axis: Face centre as spherical (theta, phi)
        quat: Rotation from the north pole to the face
        inverse_quat: Conjugate of ``quat``
        angle: In-plane rotation of the face pentagon
        orientation: Curve orientation of each face-relative quintant
        first_quintant: Quintant where the curve enters the face
    """
    id: int
    axis: Spherical
    quat: Quat
    inverse_quat: Quat
    angle: float
    orientation: Tuple[Orientation, ...]
    first_quintant: int

    @property
    def is_clockwise(self) -> bool:
        return self.orientation in (CLOCKWISE_FAN, CLOCKWISE_STEP)


_origins: Optional[Tuple[Origin, ...]] = None
_lock = threading.Lock()


def quat_conjugate(q: Quat) -> Quat:
    return (-q[0], -q[1], -q[2], q[3])


def transform_quat(v: Vec3, q: Quat) -> Vec3:
    """Rotate a vector by a unit quaternion, computing q * v * q^-1."""
    qx, qy, qz, qw = q
    vx, vy, vz = v

    t_x = qw * vx + qy * vz - qz * vy
    t_y = qw * vy + qz * vx - qx * vz
    t_z = qw * vz + qx * vy - qy * vx
    t_w = -qx * vx - qy * vy - qz * vz

    return (
        -t_w * qx + t_x * qw - t_y * qz + t_z * qy,
        -t_w * qy + t_y * qw - t_z * qx + t_x * qz,
        -t_w * qz + t_z * qw - t_x * qy + t_y * qx,
    )


def _generate_origins() -> Tuple[Origin, ...]:
    generated = []

    def add_origin(axis: Spherical, angle: float, quat: Quat) -> None:
        origin_id = len(generated)
        generated.append(Origin(
            id=origin_id,
            axis=axis,
            quat=quat,
            inverse_quat=quat_conjugate(quat),
            angle=angle,
            orientation=QUINTANT_ORIENTATIONS[origin_id],
            first_quintant=QUINTANT_FIRST[origin_id],
        ))

    # North pole
    add_origin((0.0, 0.0), 0.0, QUATERNIONS[0])

    # Middle band, alternating upper and lower faces
    for i in range(5):
        alpha = i * TWO_PI_OVER_5
        alpha2 = alpha + PI_OVER_5
        add_origin((alpha, INTERHEDRAL_ANGLE), PI_OVER_5, QUATERNIONS[i + 1])
        add_origin((alpha2, math.pi - INTERHEDRAL_ANGLE), PI_OVER_5, QUATERNIONS[(i + 3) % 5 + 6])

    # South pole
    add_origin((0.0, math.pi), 0.0, QUATERNIONS[11])

    reordered = []
    for new_id, original_id in enumerate(ORIGIN_ORDER):
        source = generated[original_id]
        reordered.append(Origin(
            id=new_id,
            axis=source.axis,
            quat=source.quat,
            inverse_quat=source.inverse_quat,
            angle=source.angle,
            orientation=source.orientation,
            first_quintant=source.first_quintant,
        ))

    logger.debug("Generated %d origins", len(reordered))
    return tuple(reordered)


def get_origins() -> Tuple[Origin, ...]:
    """All twelve origins, ordered along the Hilbert curve."""
    global _origins
    if _origins is None:
        with _lock:
            if _origins is None:
                _origins = _generate_origins()
    return _origins


def quintant_to_segment(quintant: int, origin: Origin) -> Tuple[int, Orientation]:
    """
    Map a geometric quintant of a face to its position along the curve.

    Args:
        quintant: Quintant index counted counter-clockwise (0-4)
        origin: Face the quintant belongs to

    Returns:
        Tuple of (segment, orientation)
    """
    step = -1 if origin.is_clockwise else 1

    # Counter-clockwise distance from the first quintant
    delta = (quintant + 5 - origin.first_quintant) % 5

    face_relative_quintant = (step * delta + 5) % 5
    orientation = origin.orientation[face_relative_quintant]
    segment = (origin.first_quintant + face_relative_quintant) % 5
    return segment, orientation


def segment_to_quintant(segment: int, origin: Origin) -> Tuple[int, Orientation]:
    """Inverse of quintant_to_segment."""
    step = -1 if origin.is_clockwise else 1

    face_relative_quintant = (segment + 5 - origin.first_quintant) % 5
    orientation = origin.orientation[face_relative_quintant]
    quintant = (origin.first_quintant + step * face_relative_quintant) % 5
    return quintant, orientation


def haversine(point: Spherical, axis: Spherical) -> float:
    """
    Haversine-style measure between two spherical points.

    Monotonic in the great-circle distance, which is all that is needed
    to rank origins by proximity.
    """
    theta, phi = point
    theta2, phi2 = axis
    a1 = math.sin((phi2 - phi) / 2)
    a2 = math.sin((theta2 - theta) / 2)
    return a1 * a1 + a2 * a2 * math.sin(phi) * math.sin(phi2)


def find_nearest_origin(point: Spherical) -> Origin:
    """
    Find the face whose centre is closest to a point.

    Ties resolve to the origin with the lowest id.
    """
    origins = get_origins()
    nearest = origins[0]
    min_distance = math.inf
    for origin in origins:
        distance = haversine(point, origin.axis)
        if distance < min_distance:
            min_distance = distance
            nearest = origin
    return nearest

