"""
Relation Builder Module

Turns relations (multipolygons, routes, boundaries) into shapes by
resolving their member ways and stitching them together.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from ..constants import MERGE_ROLES
from ..features.models import NodeFeature, RelationFeature, WayFeature
from .models import MapPolygon
from .segment_merger import merge_segments
from .way_resolver import resolve_way

logger = logging.getLogger(__name__)


def member_segment(
    member: WayFeature,
    relation: RelationFeature,
    node_index: Dict[int, NodeFeature],
    way_index: Dict[int, WayFeature],
    roles: Sequence[str] = MERGE_ROLES
) -> Optional[MapPolygon]:
    """
    Resolve one way member into a segment.

    Embedded geometry is used when present; otherwise the member's 'ref'
    is looked up among the top-level ways, and finally the member's own
    node references are tried.

    Args:
        member: Way member of the relation
        relation: Owning relation (supplies tags and id)
        node_index: Map of node id to node
        way_index: Map of way id to top-level way
        roles: Roles that mark a member as part of a ring

    Returns:
        MapPolygon carrying the member role, or None if unresolvable
    """
    source = member
    if not member.geometry and member.ref is not None and member.ref in way_index:
        source = way_index[member.ref]

    segment = resolve_way(source, node_index)
    if segment is None:
        logger.debug(f"Relation {relation.id}: dropping unresolved member {member.ref}")
        return None

    tags = OrderedDict(relation.tags or {})
    segment.tags = tags
    segment.role = member.role
    segment.source_id = relation.id
    segment.closed = member.role in roles
    return segment


def bounds_ring(relation: RelationFeature) -> MapPolygon:
    """Closed ring around a relation's bounding rectangle."""
    return MapPolygon(
        coordinates=relation.bounds.corners(),
        tags=OrderedDict(relation.tags or {}),
        closed=True,
        source_id=relation.id,
    )


def build_relation_shapes(
    relation: RelationFeature,
    node_index: Dict[int, NodeFeature],
    way_index: Dict[int, WayFeature],
    roles: Sequence[str] = MERGE_ROLES,
    bounds_fallback: bool = True
) -> List[MapPolygon]:
    """
    Build the shapes for a single relation.

    Args:
        relation: Relation to assemble
        node_index: Map of node id to node
        way_index: Map of way id to top-level way
        roles: Roles eligible for merging
        bounds_fallback: Emit the bounding rectangle when no member resolves

    Returns:
        Merged member shapes, the bounds ring, or an empty list
    """
    segments = []
    for member in relation.members:
        if isinstance(member, NodeFeature):
            # Label and admin_centre nodes do not contribute shape
            continue
        segment = member_segment(member, relation, node_index, way_index, roles)
        if segment is not None:
            segments.append(segment)

    if not segments:
        if bounds_fallback:
            logger.debug(f"Relation {relation.id}: no member geometry, using bounds")
            return [bounds_ring(relation)]
        return []

    return merge_segments(segments, roles)


def build_relations(
    relations: Iterable[RelationFeature],
    node_index: Dict[int, NodeFeature],
    way_index: Dict[int, WayFeature],
    roles: Sequence[str] = MERGE_ROLES,
    bounds_fallback: bool = True
) -> List[MapPolygon]:
    """
    Build shapes for every relation; each relation is merged on its own.

    Returns:
        All relation shapes, relation by relation
    """
    shapes = []
    count = 0
    for relation in relations:
        shapes.extend(build_relation_shapes(
            relation, node_index, way_index, roles, bounds_fallback
        ))
        count += 1

    logger.debug(f"Relations: {count} relations -> {len(shapes)} shapes")
    return shapes
