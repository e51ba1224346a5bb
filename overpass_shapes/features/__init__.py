# Raw feature model, parsing and classification

from .models import (
    Coordinate,
    Tags,
    BoundingBox,
    NodeFeature,
    WayFeature,
    RelationFeature,
    RawFeature,
)

from .parser import (
    ElementParseError,
    OverpassResponseError,
    parse_element,
    parse_elements,
    load_overpass_json,
)

from .classifier import (
    FeatureBuckets,
    classify_features,
)

__all__ = [
    # Models
    "Coordinate",
    "Tags",
    "BoundingBox",
    "NodeFeature",
    "WayFeature",
    "RelationFeature",
    "RawFeature",
    # Parser
    "ElementParseError",
    "OverpassResponseError",
    "parse_element",
    "parse_elements",
    "load_overpass_json",
    # Classifier
    "FeatureBuckets",
    "classify_features",
]
