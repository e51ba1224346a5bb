"""
GeoJSON Writer Module

Serializes extracted shapes as a GeoJSON FeatureCollection.
"""

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List

from shapely.geometry import Point, mapping

from ..constants import GEOJSON_SUFFIX, ShapeKind
from ..geometry.bounds import center
from ..shapes.models import MapPolygon, MapShapes, Marker
from ..shapes.shape_classifier import shape_kind

logger = logging.getLogger(__name__)


def marker_to_feature(marker: Marker) -> Dict[str, Any]:
    properties = OrderedDict(marker.tags)
    properties["kind"] = ShapeKind.MARKER
    return {
        "type": "Feature",
        "geometry": mapping(marker.to_shapely()),
        "properties": properties,
    }


def polygon_to_feature(polygon: MapPolygon) -> Dict[str, Any]:
    """
    Convert a polygon to a GeoJSON feature.

    Element tags come first; shape flags are added after them and win
    over tags with the same name.
    """
    properties = OrderedDict(polygon.tags)
    properties["kind"] = shape_kind(polygon)
    properties["closed"] = bool(polygon.closed)
    properties["very_small"] = polygon.is_very_small
    properties["role"] = polygon.role
    properties["source_id"] = polygon.source_id

    return {
        "type": "Feature",
        "geometry": mapping(polygon.to_shapely()),
        "properties": properties,
    }


def centroid_feature(polygon: MapPolygon) -> Dict[str, Any]:
    """Point feature marking a shape too small to see on its own."""
    lat, lon = center(polygon.coordinates)
    properties = OrderedDict(polygon.tags)
    properties["kind"] = ShapeKind.CENTROID
    properties["source_id"] = polygon.source_id
    return {
        "type": "Feature",
        "geometry": mapping(Point(lon, lat)),
        "properties": properties,
    }


def shapes_to_feature_collection(shapes: MapShapes) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection.

    Very small polygons get an extra centroid point feature right after
    their own feature.

    Args:
        shapes: Pipeline output

    Returns:
        FeatureCollection dictionary
    """
    features: List[Dict[str, Any]] = []

    for marker in shapes.markers:
        features.append(marker_to_feature(marker))

    for polygon in shapes.polygons:
        features.append(polygon_to_feature(polygon))
        if polygon.is_very_small:
            features.append(centroid_feature(polygon))

    collection: Dict[str, Any] = {
        "type": "FeatureCollection",
        "features": features,
    }
    if shapes.bounds is not None:
        collection["bbox"] = shapes.bounds.to_list()

    return collection


def generate_geojson_filename(input_file: str, output_dir: str) -> str:
    """Output path next to the other results: <output_dir>/<input stem>_shapes.geojson."""
    stem = Path(input_file).stem
    return str(Path(output_dir) / f"{stem}{GEOJSON_SUFFIX}")


def write_shapes_to_geojson(shapes: MapShapes, filepath: str) -> str:
    """
    Write shapes to a GeoJSON file.

    Args:
        shapes: Pipeline output
        filepath: Destination path (parent directories are created)

    Returns:
        The path written
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    collection = shapes_to_feature_collection(shapes)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)

    logger.debug(f"Wrote {len(collection['features'])} features to {path}")
    return str(path)
