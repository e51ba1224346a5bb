"""
Renderable Shape Module

Markers and polygons handed to the rendering side.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from ..constants import MIN_POLYGON_COORDS
from ..features.models import BoundingBox, Coordinate, Tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    """A tagged point of interest."""
    lat: float
    lon: float
    tags: Tags = field(default_factory=OrderedDict)

    @property
    def coordinate(self) -> Coordinate:
        return (self.lat, self.lon)

    def to_shapely(self) -> Point:
        # Shapely works in (x, y) = (lon, lat)
        return Point(self.lon, self.lat)

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lon": self.lon, "tags": dict(self.tags)}


@dataclass
class MapPolygon:
    """
    An assembled shape: a ring or an open path.

    The coordinate list is extended in place while segments are merged
    and left alone afterwards.
    """
    coordinates: List[Coordinate]
    tags: Tags = field(default_factory=OrderedDict)
    closed: Optional[bool] = None  # None until a builder or the classifier decides
    source_id: Optional[int] = None
    role: Optional[str] = None
    is_very_small: bool = False

    @property
    def start(self) -> Coordinate:
        return self.coordinates[0]

    @property
    def end(self) -> Coordinate:
        return self.coordinates[-1]

    def copy(self) -> "MapPolygon":
        """Copy with its own coordinate list, so merging never touches the original."""
        return MapPolygon(
            coordinates=list(self.coordinates),
            tags=self.tags,
            closed=self.closed,
            source_id=self.source_id,
            role=self.role,
            is_very_small=self.is_very_small,
        )

    def to_shapely(self) -> BaseGeometry:
        """
        Convert to a shapely geometry in (lon, lat) order.

        Closed shapes with enough coordinates become Polygons,
        everything else a LineString (or a Point for one coordinate).
        """
        xy = [(lon, lat) for lat, lon in self.coordinates]

        if len(xy) == 1:
            return Point(xy[0])
        if self.closed and len(set(xy)) >= MIN_POLYGON_COORDS:
            return Polygon(xy)
        return LineString(xy)

    def to_dict(self) -> Dict[str, Any]:
        """Convert polygon to dictionary for JSON serialization."""
        return {
            "source_id": self.source_id,
            "role": self.role,
            "closed": bool(self.closed),
            "very_small": self.is_very_small,
            "coordinates": [list(coord) for coord in self.coordinates],
            "tags": dict(self.tags),
        }


@dataclass
class MapShapes:
    """Everything the renderer needs for one set of query results."""
    markers: List[Marker] = field(default_factory=list)
    polygons: List[MapPolygon] = field(default_factory=list)
    bounds: Optional[BoundingBox] = None
    center: Coordinate = (0.0, 0.0)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.markers and not self.polygons

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markers": [m.to_dict() for m in self.markers],
            "polygons": [p.to_dict() for p in self.polygons],
            "bounds": self.bounds.to_list() if self.bounds else None,
            "center": list(self.center),
            "warnings": self.warnings,
        }
