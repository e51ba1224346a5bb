"""
Shape Classifier Module

Final classification of assembled shapes: closed ring or open path, and
whether the shape is too small to see without a marker.
"""

import logging
from typing import Iterable, List

from ..constants import MIN_RING_NODE_REFS, VERY_SMALL_SPAN_DEG, ShapeKind
from ..geometry.bounds import coordinate_span
from .models import MapPolygon

logger = logging.getLogger(__name__)


def is_very_small(polygon: MapPolygon, threshold: float = VERY_SMALL_SPAN_DEG) -> bool:
    """
    Check whether a shape spans less than `threshold` degrees on both axes.

    Args:
        polygon: Shape to check
        threshold: Span limit in degrees

    Returns:
        True if both the latitude and longitude spans are below the threshold
    """
    lat_span, lon_span = coordinate_span(polygon.coordinates)
    return lat_span < threshold and lon_span < threshold


def shape_kind(polygon: MapPolygon) -> str:
    """AREA for closed shapes, PATH otherwise."""
    return ShapeKind.AREA if polygon.closed else ShapeKind.PATH


def classify_shape(polygon: MapPolygon, threshold: float = VERY_SMALL_SPAN_DEG) -> MapPolygon:
    """
    Settle `closed` and `is_very_small` on a shape.

    `closed` is only decided here when no builder set it; it then follows
    the coordinates (first == last).
    """
    if polygon.closed is None:
        coords = polygon.coordinates
        polygon.closed = len(coords) >= MIN_RING_NODE_REFS and coords[0] == coords[-1]

    polygon.is_very_small = is_very_small(polygon, threshold)
    return polygon


def classify_shapes(
    polygons: Iterable[MapPolygon],
    threshold: float = VERY_SMALL_SPAN_DEG
) -> List[MapPolygon]:
    """
    Classify every shape, dropping any with no coordinates.

    Args:
        polygons: Assembled shapes
        threshold: Very-small span limit in degrees

    Returns:
        Classified shapes in input order
    """
    result = []
    for polygon in polygons:
        if not polygon.coordinates:
            continue
        result.append(classify_shape(polygon, threshold))

    small = sum(1 for p in result if p.is_very_small)
    closed = sum(1 for p in result if p.closed)
    logger.debug(
        f"Shape classification: {closed} areas, {len(result) - closed} paths, "
        f"{small} very small"
    )
    return result
