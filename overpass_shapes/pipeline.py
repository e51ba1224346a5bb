"""
Pipeline Orchestration Module

Coordinates the full flow from query elements to renderable shapes,
and from a saved response file to GeoJSON output.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from .features.classifier import FeatureBuckets, classify_features
from .features.models import RawFeature
from .features.parser import load_overpass_json, parse_elements
from .geometry.bounds import bounds, center
from .output.geojson_writer import generate_geojson_filename, write_shapes_to_geojson
from .output.json_writer import generate_json_filename, write_shapes_to_json
from .settings import PipelineConfig, load_settings
from .shapes.markers import build_markers
from .shapes.models import MapShapes
from .shapes.relation_builder import build_relations
from .shapes.shape_classifier import classify_shapes
from .shapes.way_resolver import resolve_ways

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PipelineResult:
    """Result from a file-to-file pipeline run."""
    input_file: str
    output_dir: str
    total_elements: int
    total_markers: int
    total_polygons: int
    shapes: MapShapes
    geojson_path: Optional[str]
    json_path: Optional[str]
    warnings: List[str]
    processing_time: float


def run_guarded(
    component: str,
    func: Callable[..., T],
    fallback: T,
    warnings: List[str],
    *args: Any,
    **kwargs: Any
) -> T:
    """Call one pipeline component, replacing a failure with `fallback`."""
    try:
        return func(*args, **kwargs)
    except Exception as e:
        message = f"{component} failed: {e}"
        logger.warning(message)
        logger.debug("Component failure", exc_info=True)
        warnings.append(message)
        return fallback


def build_map_shapes(
    features: Iterable[RawFeature],
    config: Optional[PipelineConfig] = None
) -> MapShapes:
    """
    Build markers, polygons and framing bounds from parsed features.

    Never raises: a failing component contributes an empty result and a
    warning instead.

    Args:
        features: Parsed features
        config: Pipeline options (defaults when None)

    Returns:
        MapShapes with markers, classified polygons, bounds and center
    """
    config = config or PipelineConfig()
    warnings: List[str] = []

    buckets = run_guarded(
        "Feature classification", classify_features, FeatureBuckets(), warnings,
        list(features)
    )
    node_index = buckets.node_index()
    way_index = buckets.way_index()

    markers = run_guarded(
        "Marker building", build_markers, [], warnings,
        buckets.nodes
    )

    polygons = run_guarded(
        "Way resolution", resolve_ways, [], warnings,
        buckets.ways, node_index, config.infer_closed_from_geometry
    )

    if config.include_relations:
        polygons = polygons + run_guarded(
            "Relation assembly", build_relations, [], warnings,
            buckets.relations, node_index, way_index,
            config.merge_roles, config.relation_bounds_fallback
        )

    polygons = run_guarded(
        "Shape classification", classify_shapes, [], warnings,
        polygons, config.very_small_span_deg
    )

    framing = run_guarded("Bounds", bounds, None, warnings, markers, polygons)

    all_coords = [m.coordinate for m in markers]
    for polygon in polygons:
        all_coords.extend(polygon.coordinates)
    view_center = run_guarded("Center", center, (0.0, 0.0), warnings, all_coords)

    logger.info(
        f"Shapes: {len(markers)} markers, {len(polygons)} polygons "
        f"from {len(buckets)} features"
    )

    return MapShapes(
        markers=markers,
        polygons=polygons,
        bounds=framing,
        center=view_center,
        warnings=warnings,
    )


def build_map_shapes_from_elements(
    raw_elements: List[Dict[str, Any]],
    config: Optional[PipelineConfig] = None
) -> MapShapes:
    """Parse raw Overpass elements and build shapes from them."""
    return build_map_shapes(parse_elements(raw_elements), config)


def config_from_args(args: Any) -> PipelineConfig:
    """Settings file first, then command-line overrides."""
    config = load_settings(getattr(args, "settings", None))

    if getattr(args, "no_relations", False):
        config.include_relations = False
    if getattr(args, "very_small_span", None) is not None:
        config.very_small_span_deg = args.very_small_span
    if getattr(args, "infer_closed", False):
        config.infer_closed_from_geometry = True

    return config


def run_pipeline(args: Any) -> PipelineResult:
    """
    Run the full pipeline on a saved Overpass response.

    Args:
        args: Parsed command-line arguments

    Returns:
        PipelineResult with all outputs
    """
    start_time = time.time()

    # Setup logging
    log_level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=log_level, format='%(message)s')

    config = config_from_args(args)

    logger.info(f"Processing: {args.input}")

    raw_elements = load_overpass_json(args.input)
    shapes = build_map_shapes_from_elements(raw_elements, config)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    geojson_path = None
    json_path = None
    if shapes.is_empty:
        shapes.warnings.append("No shapes extracted")
        logger.warning("No shapes extracted")
    else:
        geojson_path = generate_geojson_filename(args.input, args.output)
        write_shapes_to_geojson(shapes, geojson_path)
        logger.info(f"GeoJSON written: {geojson_path}")
        json_path = generate_json_filename(args.input, args.output)
        write_shapes_to_json(shapes, json_path)
        logger.info(f"JSON written: {json_path}")

    processing_time = time.time() - start_time

    # Summary
    areas = sum(1 for p in shapes.polygons if p.closed)
    small = sum(1 for p in shapes.polygons if p.is_very_small)
    logger.info(f"\nSummary:")
    logger.info(f"  Elements: {len(raw_elements)}")
    logger.info(f"  Markers: {len(shapes.markers)}")
    logger.info(f"  Areas: {areas}")
    logger.info(f"  Paths: {len(shapes.polygons) - areas}")
    logger.info(f"  Very small: {small}")
    if shapes.bounds is not None:
        b = shapes.bounds
        logger.info(f"  Bounds: ({b.min_lat:.5f}, {b.min_lon:.5f}) - ({b.max_lat:.5f}, {b.max_lon:.5f})")
    logger.info(f"  Processing time: {processing_time:.2f}s")

    if shapes.warnings and getattr(args, "verbose", False):
        logger.info(f"\nWarnings ({len(shapes.warnings)}):")
        for w in shapes.warnings[:10]:
            logger.info(f"  - {w}")
        if len(shapes.warnings) > 10:
            logger.info(f"  ... and {len(shapes.warnings) - 10} more")

    return PipelineResult(
        input_file=args.input,
        output_dir=args.output,
        total_elements=len(raw_elements),
        total_markers=len(shapes.markers),
        total_polygons=len(shapes.polygons),
        shapes=shapes,
        geojson_path=geojson_path,
        json_path=json_path,
        warnings=shapes.warnings,
        processing_time=processing_time,
    )
