# Overpass query results to renderable map shapes

from .pipeline import (
    PipelineResult,
    build_map_shapes,
    build_map_shapes_from_elements,
    run_pipeline,
)
from .settings import PipelineConfig, load_settings
from .shapes.models import MapPolygon, MapShapes, Marker

__all__ = [
    "PipelineResult",
    "build_map_shapes",
    "build_map_shapes_from_elements",
    "run_pipeline",
    "PipelineConfig",
    "load_settings",
    "MapPolygon",
    "MapShapes",
    "Marker",
]
