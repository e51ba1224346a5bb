"""
Feature Model Module

Typed representation of the raw elements returned by a geographic query:
nodes (points), ways (paths) and relations (areas built from member ways).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

# (latitude, longitude)
Coordinate = Tuple[float, float]

Tags = Dict[str, str]


@dataclass(frozen=True)
class BoundingBox:
    """Latitude/longitude rectangle."""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    def corners(self) -> List[Coordinate]:
        """Return the rectangle as a closed ring, counter-clockwise from south-west."""
        return [
            (self.min_lat, self.min_lon),
            (self.min_lat, self.max_lon),
            (self.max_lat, self.max_lon),
            (self.max_lat, self.min_lon),
            (self.min_lat, self.min_lon),
        ]

    def to_list(self) -> List[float]:
        """GeoJSON bbox order: [west, south, east, north]."""
        return [self.min_lon, self.min_lat, self.max_lon, self.max_lat]


@dataclass
class NodeFeature:
    """A single point, optionally tagged."""
    id: int
    lat: float
    lon: float
    tags: Optional[Tags] = None
    role: Optional[str] = None  # Set when the node is a relation member

    @property
    def coordinate(self) -> Coordinate:
        return (self.lat, self.lon)


@dataclass
class WayFeature:
    """A path given by embedded geometry, node references, or a reference to another way."""
    id: Optional[int] = None
    geometry: Optional[List[Coordinate]] = None
    node_refs: Optional[List[int]] = None
    tags: Optional[Tags] = None
    bounds: Optional[BoundingBox] = None
    role: Optional[str] = None
    ref: Optional[int] = None


@dataclass
class RelationFeature:
    """A compound area or route described by role-tagged members."""
    id: int
    bounds: BoundingBox
    members: List[Union[WayFeature, NodeFeature]] = field(default_factory=list)
    tags: Optional[Tags] = None


RawFeature = Union[NodeFeature, WayFeature, RelationFeature]
