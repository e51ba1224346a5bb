"""
JSON Writer Module

Writes the extracted shapes as plain JSON: markers, polygons with their
flags, framing bounds, view center and warnings.
"""

import json
import logging
from pathlib import Path

from ..constants import JSON_SUFFIX
from ..shapes.models import MapShapes

logger = logging.getLogger(__name__)


def generate_json_filename(input_file: str, output_dir: str) -> str:
    """Output path: <output_dir>/<input stem>_shapes.json."""
    stem = Path(input_file).stem
    return str(Path(output_dir) / f"{stem}{JSON_SUFFIX}")


def write_shapes_to_json(shapes: MapShapes, filepath: str) -> str:
    """
    Write shapes to a JSON file.

    Args:
        shapes: Pipeline output
        filepath: Destination path (parent directories are created)

    Returns:
        The path written
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(shapes.to_dict(), f, indent=2, ensure_ascii=False)

    logger.debug(
        f"Wrote {len(shapes.markers)} markers and {len(shapes.polygons)} polygons to {path}"
    )
    return str(path)
