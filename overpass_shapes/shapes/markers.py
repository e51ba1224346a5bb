"""
Marker Builder Module

Turns tagged nodes into map markers.
"""

import logging
from typing import Iterable, List

from ..features.models import NodeFeature
from .models import Marker

logger = logging.getLogger(__name__)


def build_markers(nodes: Iterable[NodeFeature]) -> List[Marker]:
    """
    Build a marker for every tagged node.

    Untagged nodes are treated as way support nodes and skipped.

    Args:
        nodes: Node bucket

    Returns:
        List of Marker objects in node order
    """
    markers = []
    untagged = 0

    for node in nodes:
        if node.tags is None:
            untagged += 1
            continue
        markers.append(Marker(lat=node.lat, lon=node.lon, tags=node.tags))

    logger.debug(f"Markers: {len(markers)} built, {untagged} untagged nodes skipped")
    return markers
