"""
Way Resolver Module

Produces a coordinate sequence for a way, from its embedded geometry or by
looking up its node references.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from ..constants import MIN_RING_NODE_REFS
from ..features.models import Coordinate, NodeFeature, WayFeature
from .models import MapPolygon

logger = logging.getLogger(__name__)


def refs_form_ring(node_refs: Optional[List[int]]) -> bool:
    """True if the reference list starts and ends on the same node."""
    if not node_refs or len(node_refs) < MIN_RING_NODE_REFS:
        return False
    return node_refs[0] == node_refs[-1]


def resolve_node_refs(
    node_refs: List[int],
    node_index: Dict[int, NodeFeature]
) -> Optional[List[Coordinate]]:
    """
    Look up every referenced node, in order.

    Args:
        node_refs: Node ids
        node_index: Map of node id to node

    Returns:
        Coordinate list, or None if any reference is missing
    """
    coords = []
    for ref in node_refs:
        node = node_index.get(ref)
        if node is None:
            return None
        coords.append(node.coordinate)
    return coords


def resolve_way(
    way: WayFeature,
    node_index: Dict[int, NodeFeature],
    infer_closed_from_geometry: bool = False
) -> Optional[MapPolygon]:
    """
    Resolve a way into a polygon.

    Embedded geometry wins over node references. A way with a missing node
    reference is dropped entirely rather than emitted partially.

    Args:
        way: The way to resolve
        node_index: Map of node id to node
        infer_closed_from_geometry: Treat geometry-only ways whose first and
            last coordinates match as closed

    Returns:
        MapPolygon, or None if the way has no usable geometry
    """
    if way.geometry:
        coords = list(way.geometry)
    elif way.node_refs:
        coords = resolve_node_refs(way.node_refs, node_index)
        if coords is None:
            logger.debug(f"Dropping way {way.id}: unresolved node reference")
            return None
    else:
        logger.debug(f"Dropping way {way.id}: no geometry")
        return None

    if not coords:
        return None

    if way.node_refs:
        closed = refs_form_ring(way.node_refs)
    elif infer_closed_from_geometry:
        closed = len(coords) >= MIN_RING_NODE_REFS and coords[0] == coords[-1]
    else:
        closed = False

    return MapPolygon(
        coordinates=coords,
        tags=way.tags if way.tags is not None else OrderedDict(),
        closed=closed,
        source_id=way.id,
        role=way.role,
    )


def resolve_ways(
    ways: Iterable[WayFeature],
    node_index: Dict[int, NodeFeature],
    infer_closed_from_geometry: bool = False
) -> List[MapPolygon]:
    """
    Resolve every way, dropping the ones that cannot be resolved.

    Args:
        ways: Way bucket
        node_index: Map of node id to node
        infer_closed_from_geometry: See resolve_way

    Returns:
        List of MapPolygon objects in way order
    """
    polygons = []
    dropped = 0

    for way in ways:
        polygon = resolve_way(way, node_index, infer_closed_from_geometry)
        if polygon is None:
            dropped += 1
            continue
        polygons.append(polygon)

    logger.debug(f"Ways: {len(polygons)} resolved, {dropped} dropped")
    return polygons
