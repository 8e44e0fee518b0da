"""
Conversion between geographic positions and cells.

Encoding projects a point onto its nearest face, picks the quintant and
walks the Hilbert lattice to the requested resolution. The lattice
lookup is exact for the parallelogram cells of the lattice but not for
the pentagons drawn inside them, so from resolution 2 the estimate is
checked against the pentagon and, when it misses, neighbouring
estimates are tried.

Decoding rebuilds the pentagon in face coordinates and unprojects it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from . import dodecahedron
from .constants import TWO_PI_OVER_5
from .coords import (
    LonLat,
    face_to_ij,
    from_lon_lat,
    normalize_lonlat,
    normalize_longitudes,
    to_lon_lat,
    to_polar,
    wrap_longitude,
)
from .errors import InvalidResolution
from .geometry import PentagonShape
from .hilbert import ij_to_s, s_to_anchor
from .origin import find_nearest_origin, get_origins, quintant_to_segment, segment_to_quintant
from .serialization import FIRST_HILBERT_RESOLUTION, MAX_RESOLUTION, Cell, deserialize, serialize
from .tiling import get_face_vertices, get_pentagon_vertices, get_quintant_polar, get_quintant_vertices

logger = logging.getLogger(__name__)

# Spiral of nearby points tried when the first estimate misses
SAMPLE_COUNT = 25
SAMPLE_RADIUS = 50.0  # degrees at Hilbert resolution 0, halved per level


@dataclass(frozen=True)
class BoundaryOptions:
    """
    Options for cell_to_boundary.

    Attributes:
        closed_ring: Repeat the first vertex at the end of the ring
        segments: Points per pentagon edge, None picks a resolution-based default
    """
    closed_ring: bool = True
    segments: Optional[int] = None

    def __post_init__(self):
        if self.segments is not None and self.segments < 1:
            raise ValueError(f"segments must be at least 1, got {self.segments}")

    def segments_for(self, resolution: int) -> int:
        if self.segments is not None:
            return self.segments
        return max(1, 2 ** max(0, 6 - resolution))


def _validate_resolution(resolution: int) -> None:
    if isinstance(resolution, bool) or not isinstance(resolution, int):
        raise InvalidResolution(f"Resolution must be an integer, got {resolution!r}")
    if resolution < 0 or resolution > MAX_RESOLUTION:
        raise InvalidResolution(f"Resolution must be within [0, {MAX_RESOLUTION}], got {resolution}")


def _estimate(lonlat: LonLat, resolution: int) -> Cell:
    """Lattice estimate of the cell containing a point, without validation."""
    spherical = from_lon_lat(lonlat)
    origin = find_nearest_origin(spherical)

    x, y = dodecahedron.forward(spherical, origin)
    quintant = get_quintant_polar(to_polar((x, y)))
    segment, orientation = quintant_to_segment(quintant, origin)

    if resolution < FIRST_HILBERT_RESOLUTION:
        return Cell(origin_id=origin.id, segment=segment, s=0, resolution=resolution)

    # Rotate into the frame of the first quintant
    if quintant != 0:
        angle = -TWO_PI_OVER_5 * quintant
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        x, y = cos_a * x - sin_a * y, sin_a * x + cos_a * y

    hilbert_resolution = 1 + resolution - FIRST_HILBERT_RESOLUTION
    factor = 2 ** hilbert_resolution
    ij = face_to_ij((x * factor, y * factor))
    s = ij_to_s(ij, hilbert_resolution, orientation)
    return Cell(origin_id=origin.id, segment=segment, s=s, resolution=resolution)


def lonlat_to_cell(lon: float, lat: float, resolution: int) -> int:
    """
    Find the cell containing a geographic position.

    Args:
        lon: Longitude in degrees, wrapped into [-180, 180)
        lat: Latitude in degrees [-90, 90]
        resolution: Target resolution [0, MAX_RESOLUTION]

    Returns:
        Cell id

    Raises:
        InvalidInput: If the coordinates are not finite or latitude is out of range
        InvalidResolution: If the resolution is out of range
    """
    lonlat = normalize_lonlat(lon, lat)
    _validate_resolution(resolution)

    if resolution < FIRST_HILBERT_RESOLUTION:
        return serialize(_estimate(lonlat, resolution))

    hilbert_resolution = 1 + resolution - FIRST_HILBERT_RESOLUTION
    radius = SAMPLE_RADIUS / 2 ** hilbert_resolution
    samples = [lonlat]
    for i in range(SAMPLE_COUNT):
        r = (i / SAMPLE_COUNT) * radius
        samples.append(LonLat(lonlat.lon + math.cos(i) * r, lonlat.lat + math.sin(i) * r))

    scores: Dict[int, float] = {}
    for sample in samples:
        estimate = _estimate(sample, resolution)
        cell_id = serialize(estimate)
        if cell_id in scores:
            continue

        score = a5cell_contains_point(estimate, lonlat)
        if score > 0:
            return cell_id
        scores[cell_id] = score

    # No estimate contains the point exactly; take the closest miss
    best = max(scores, key=scores.get)
    logger.debug(
        "No containing cell for (%f, %f) at resolution %d, using closest of %d",
        lonlat.lon, lonlat.lat, resolution, len(scores),
    )
    return best


def get_pentagon(cell: Cell) -> PentagonShape:
    """
    Footprint of a cell in the face coordinates of its origin.

    Resolution 0 gives the face pentagon and resolution 1 a quintant
    triangle; deeper cells are pentagons.
    """
    origin = get_origins()[cell.origin_id]
    quintant, orientation = segment_to_quintant(cell.segment, origin)

    if cell.resolution == 0:
        return get_face_vertices()
    if cell.resolution == 1:
        return get_quintant_vertices(quintant)

    hilbert_resolution = cell.resolution - FIRST_HILBERT_RESOLUTION + 1
    anchor = s_to_anchor(cell.s, hilbert_resolution, orientation)
    return get_pentagon_vertices(hilbert_resolution, quintant, anchor)


def a5cell_contains_point(cell: Cell, point: Union[LonLat, tuple]) -> float:
    """
    Containment score of a point for a cell.

    Returns:
        1.0 when the point lies inside the cell, otherwise a negative
        value growing with the distance from the cell
    """
    pentagon = get_pentagon(cell)
    origin = get_origins()[cell.origin_id]
    projected = dodecahedron.forward(from_lon_lat(point), origin)
    return pentagon.contains_point(projected)


def cell_to_lonlat(cell_id: int) -> LonLat:
    """
    Centre of a cell.

    Args:
        cell_id: Cell id at resolution 0 or finer

    Returns:
        LonLat of the pentagon centroid, unprojected onto the sphere,
        with longitude in [-180, 180)
    """
    cell = deserialize(cell_id)
    _validate_resolution(cell.resolution)
    origin = get_origins()[cell.origin_id]
    center = get_pentagon(cell).get_center()
    lon, lat = to_lon_lat(dodecahedron.inverse(center, origin))
    return LonLat(wrap_longitude(lon), lat)


def cell_to_boundary(
    cell_id: int,
    closed_ring: bool = True,
    segments: Optional[int] = None,
) -> List[LonLat]:
    """
    Boundary ring of a cell.

    Args:
        cell_id: Cell id at resolution 0 or finer
        closed_ring: Repeat the first vertex at the end
        segments: Points per pentagon edge; defaults to 2^(6 - r), at least 1

    Returns:
        Counter-clockwise list of LonLat with continuous longitudes
    """
    options = BoundaryOptions(closed_ring=closed_ring, segments=segments)
    cell = deserialize(cell_id)
    _validate_resolution(cell.resolution)
    origin = get_origins()[cell.origin_id]

    pentagon = get_pentagon(cell).split_edges(options.segments_for(cell.resolution))
    boundary = [to_lon_lat(dodecahedron.inverse(vertex, origin)) for vertex in pentagon.vertices]
    boundary = normalize_longitudes(boundary)

    if options.closed_ring:
        boundary.append(boundary[0])

    boundary.reverse()
    return boundary
