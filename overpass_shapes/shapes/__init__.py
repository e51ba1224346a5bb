# Shape construction: markers, way resolution, segment merging, classification

from .models import (
    Marker,
    MapPolygon,
    MapShapes,
)

from .markers import (
    build_markers,
)

from .way_resolver import (
    refs_form_ring,
    resolve_node_refs,
    resolve_way,
    resolve_ways,
)

from .segment_merger import (
    Splice,
    find_splice,
    apply_splice,
    merge_pass,
    merge_segments,
)

from .relation_builder import (
    build_relation_shapes,
    build_relations,
)

from .shape_classifier import (
    is_very_small,
    shape_kind,
    classify_shape,
    classify_shapes,
)

__all__ = [
    # Models
    "Marker",
    "MapPolygon",
    "MapShapes",
    # Markers
    "build_markers",
    # Way Resolver
    "refs_form_ring",
    "resolve_node_refs",
    "resolve_way",
    "resolve_ways",
    # Segment Merger
    "Splice",
    "find_splice",
    "apply_splice",
    "merge_pass",
    "merge_segments",
    # Relation Builder
    "build_relation_shapes",
    "build_relations",
    # Shape Classifier
    "is_very_small",
    "shape_kind",
    "classify_shape",
    "classify_shapes",
]
