"""
Center and Bounds Module

Numeric helpers for framing a map view around the extracted shapes.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

import numpy as np

from ..constants import EMPTY_CENTER
from ..features.models import BoundingBox, Coordinate

if TYPE_CHECKING:
    from ..shapes.models import MapPolygon, Marker

logger = logging.getLogger(__name__)


def center(points: Sequence[Coordinate]) -> Coordinate:
    """
    Arithmetic mean of latitude and longitude.

    Args:
        points: Sequence of (lat, lon) pairs

    Returns:
        (lat, lon) center, or (0, 0) for an empty sequence
    """
    if len(points) == 0:
        return EMPTY_CENTER

    arr = np.asarray(points, dtype=float)
    lat, lon = arr.mean(axis=0)
    return (float(lat), float(lon))


def coordinate_span(points: Sequence[Coordinate]) -> Coordinate:
    """
    Extent (max - min) of a point sequence on each axis.

    Returns:
        (lat_span, lon_span); (0, 0) for an empty sequence
    """
    if len(points) == 0:
        return (0.0, 0.0)

    arr = np.asarray(points, dtype=float)
    spans = arr.max(axis=0) - arr.min(axis=0)
    return (float(spans[0]), float(spans[1]))


def bounds(
    markers: Iterable["Marker"],
    polygons: Iterable["MapPolygon"]
) -> Optional[BoundingBox]:
    """
    Minimal rectangle covering every marker and polygon coordinate.

    Args:
        markers: Markers to include
        polygons: Polygons to include

    Returns:
        BoundingBox, or None when there is nothing to frame
    """
    coords = [marker.coordinate for marker in markers]
    for polygon in polygons:
        coords.extend(polygon.coordinates)

    if not coords:
        return None

    arr = np.asarray(coords, dtype=float)
    min_lat, min_lon = arr.min(axis=0)
    max_lat, max_lon = arr.max(axis=0)

    return BoundingBox(
        min_lat=float(min_lat),
        min_lon=float(min_lon),
        max_lat=float(max_lat),
        max_lon=float(max_lon),
    )
