# Output writers

from .geojson_writer import (
    marker_to_feature,
    polygon_to_feature,
    centroid_feature,
    shapes_to_feature_collection,
    generate_geojson_filename,
    write_shapes_to_geojson,
)
from .json_writer import (
    generate_json_filename,
    write_shapes_to_json,
)

__all__ = [
    "marker_to_feature",
    "polygon_to_feature",
    "centroid_feature",
    "shapes_to_feature_collection",
    "generate_geojson_filename",
    "write_shapes_to_geojson",
    "generate_json_filename",
    "write_shapes_to_json",
]
