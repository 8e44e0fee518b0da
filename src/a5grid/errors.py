"""
Exception types raised by a5grid.

Every error derives from ValueError so callers that already guard
argument validation with ``except ValueError`` keep working.
"""


class A5Error(ValueError):
    """Base class for all a5grid errors."""


class InvalidInput(A5Error):
    """Longitude, latitude or resolution outside the accepted range."""


class InvalidResolution(InvalidInput):
    """Resolution outside [0, MAX_RESOLUTION] or otherwise unusable."""


class DegenerateGeometry(A5Error):
    """Zero-length vector or collapsed polygon during normalization."""


class InvalidCellId(A5Error):
    """Cell identifier with an unknown origin or a reserved bit pattern."""


class NoParent(A5Error):
    """Parent requested for a resolution 0 cell."""


class MaxResolutionExceeded(A5Error):
    """Children requested for a cell at the finest resolution."""


class ResolutionError(A5Error):
    """Uncompaction target coarser than one of the input cells."""
