"""
Feature Classifier Module

Partitions a mixed feature collection into node, way and relation buckets.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import NodeFeature, RawFeature, RelationFeature, WayFeature

logger = logging.getLogger(__name__)


@dataclass
class FeatureBuckets:
    """Features split by kind, each in input order."""
    nodes: List[NodeFeature] = field(default_factory=list)
    ways: List[WayFeature] = field(default_factory=list)
    relations: List[RelationFeature] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes) + len(self.ways) + len(self.relations)

    def node_index(self) -> Dict[int, NodeFeature]:
        """Map node id to node for reference resolution."""
        return {node.id: node for node in self.nodes}

    def way_index(self) -> Dict[int, WayFeature]:
        """Map way id to way, for relation members that only carry a 'ref'."""
        return {way.id: way for way in self.ways if way.id is not None}


def classify_features(features: Iterable[RawFeature]) -> FeatureBuckets:
    """
    Partition features by kind.

    Features are never dropped or duplicated here; filtering happens in
    the consuming builders. Anything that is not a feature is skipped.

    Args:
        features: Parsed features

    Returns:
        FeatureBuckets with nodes, ways and relations
    """
    buckets = FeatureBuckets()
    skipped = 0

    for feature in features:
        if isinstance(feature, NodeFeature):
            buckets.nodes.append(feature)
        elif isinstance(feature, WayFeature):
            buckets.ways.append(feature)
        elif isinstance(feature, RelationFeature):
            buckets.relations.append(feature)
        else:
            skipped += 1
            logger.debug(f"Skipping non-feature element: {type(feature).__name__}")

    if skipped:
        logger.warning(f"Skipped {skipped} elements that are not features")

    logger.debug(
        f"Classified features: {len(buckets.nodes)} nodes, "
        f"{len(buckets.ways)} ways, {len(buckets.relations)} relations"
    )
    return buckets
