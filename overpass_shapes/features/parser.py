"""
Overpass Parser Module

Converts Overpass API JSON elements into typed features.

Handles both 'out body' (node references) and 'out geom' (embedded geometry)
output, including relation members that only reference a way by id.
"""

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import ElementType
from .models import (
    BoundingBox,
    Coordinate,
    NodeFeature,
    RawFeature,
    RelationFeature,
    Tags,
    WayFeature,
)

logger = logging.getLogger(__name__)


class ElementParseError(ValueError):
    """Raised when an element cannot be converted to a feature."""
    pass


class OverpassResponseError(Exception):
    """Raised when a saved Overpass response cannot be read."""
    pass


def _require(raw: Dict[str, Any], key: str) -> Any:
    if key not in raw or raw[key] is None:
        raise ElementParseError(f"{raw.get('type', 'element')} missing required field '{key}'")
    return raw[key]


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ElementParseError(f"Field '{key}' is not numeric: {value!r}") from e


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ElementParseError(f"Field '{key}' is not an identifier: {value!r}") from e


def parse_role(raw_role: Any) -> Optional[str]:
    """Member role as a string; None when absent or not a scalar."""
    if raw_role is None or isinstance(raw_role, (dict, list)):
        return None
    return str(raw_role)


def parse_tags(raw_tags: Any) -> Optional[Tags]:
    """
    Normalize a tag object to an ordered string -> string mapping.

    Args:
        raw_tags: The element's 'tags' value (may be None)

    Returns:
        OrderedDict of tags, or None when the element has no tags
    """
    if raw_tags is None:
        return None
    if not isinstance(raw_tags, dict):
        raise ElementParseError(f"Tags must be an object, got {type(raw_tags).__name__}")
    return OrderedDict((str(key), str(value)) for key, value in raw_tags.items())


def parse_bounds(raw_bounds: Any) -> Optional[BoundingBox]:
    """Parse an Overpass bounds object ({minlat, minlon, maxlat, maxlon})."""
    if raw_bounds is None:
        return None
    if not isinstance(raw_bounds, dict):
        raise ElementParseError("Bounds must be an object")
    return BoundingBox(
        min_lat=_as_float(_require(raw_bounds, "minlat"), "minlat"),
        min_lon=_as_float(_require(raw_bounds, "minlon"), "minlon"),
        max_lat=_as_float(_require(raw_bounds, "maxlat"), "maxlat"),
        max_lon=_as_float(_require(raw_bounds, "maxlon"), "maxlon"),
    )


def parse_geometry(raw_geometry: Any) -> Optional[List[Coordinate]]:
    """
    Parse an embedded geometry list.

    Overpass emits null entries for nodes outside the query bbox;
    those are skipped.

    Args:
        raw_geometry: List of {"lat": ..., "lon": ...} objects

    Returns:
        List of (lat, lon) tuples, or None when absent
    """
    if raw_geometry is None:
        return None
    if not isinstance(raw_geometry, list):
        raise ElementParseError("Geometry must be a list")

    coords = []
    for point in raw_geometry:
        if point is None:
            continue
        if isinstance(point, dict):
            coords.append((
                _as_float(_require(point, "lat"), "lat"),
                _as_float(_require(point, "lon"), "lon"),
            ))
        else:
            raise ElementParseError(f"Unexpected geometry entry: {point!r}")
    return coords


def parse_node(raw: Dict[str, Any], member: bool = False) -> NodeFeature:
    id_key = "ref" if member else "id"
    return NodeFeature(
        id=_as_int(_require(raw, id_key), id_key),
        lat=_as_float(_require(raw, "lat"), "lat"),
        lon=_as_float(_require(raw, "lon"), "lon"),
        tags=parse_tags(raw.get("tags")),
        role=parse_role(raw.get("role")),
    )


def parse_way(raw: Dict[str, Any], member: bool = False) -> WayFeature:
    node_refs = raw.get("nodes")
    if node_refs is not None:
        if not isinstance(node_refs, list):
            raise ElementParseError("Way 'nodes' must be a list")
        node_refs = [_as_int(ref, "nodes") for ref in node_refs]

    # A member way's 'ref' is the id of the way it stands for
    ref = raw.get("ref") if member else None
    way_id = raw.get("id")

    return WayFeature(
        id=_as_int(way_id, "id") if way_id is not None else None,
        geometry=parse_geometry(raw.get("geometry")),
        node_refs=node_refs,
        tags=parse_tags(raw.get("tags")),
        bounds=parse_bounds(raw.get("bounds")),
        role=parse_role(raw.get("role")),
        ref=_as_int(ref, "ref") if ref is not None else None,
    )


def parse_relation(raw: Dict[str, Any]) -> RelationFeature:
    raw_members = raw.get("members") or []
    if not isinstance(raw_members, list):
        raise ElementParseError("Relation 'members' must be a list")

    members = []
    for raw_member in raw_members:
        member_type = raw_member.get("type") if isinstance(raw_member, dict) else None
        if member_type == ElementType.WAY:
            members.append(parse_way(raw_member, member=True))
        elif member_type == ElementType.NODE:
            try:
                members.append(parse_node(raw_member, member=True))
            except ElementParseError as e:
                # 'out geom' only carries coordinates for nodes inside the bbox
                logger.debug(f"Skipping node member without coordinates: {e}")
        else:
            # Nested relations are not expanded
            logger.debug(f"Skipping relation member of type {member_type!r}")

    return RelationFeature(
        id=_as_int(_require(raw, "id"), "id"),
        bounds=parse_bounds(_require(raw, "bounds")),
        members=members,
        tags=parse_tags(raw.get("tags")),
    )


def parse_element(raw: Dict[str, Any]) -> RawFeature:
    """
    Convert one Overpass JSON element to a typed feature.

    Args:
        raw: Element dictionary from the response 'elements' array

    Returns:
        NodeFeature, WayFeature or RelationFeature

    Raises:
        ElementParseError: If the type is unknown or a required field is missing
    """
    if not isinstance(raw, dict):
        raise ElementParseError(f"Element must be an object, got {type(raw).__name__}")

    element_type = raw.get("type")
    if element_type == ElementType.NODE:
        return parse_node(raw)
    if element_type == ElementType.WAY:
        return parse_way(raw)
    if element_type == ElementType.RELATION:
        return parse_relation(raw)
    raise ElementParseError(f"Unknown element type: {element_type!r}")


def parse_elements(raw_elements: List[Dict[str, Any]]) -> List[RawFeature]:
    """
    Parse a list of Overpass elements, skipping malformed ones.

    Args:
        raw_elements: The response 'elements' array

    Returns:
        Parsed features in input order
    """
    features = []
    skipped = 0

    for raw in raw_elements:
        try:
            features.append(parse_element(raw))
        except ElementParseError as e:
            skipped += 1
            logger.debug(f"Skipping element: {e}")

    if skipped:
        logger.warning(f"Skipped {skipped} malformed elements")
    logger.info(f"Parsed {len(features)} of {len(raw_elements)} elements")

    return features


def load_overpass_json(filepath: str) -> List[Dict[str, Any]]:
    """
    Load the elements array from a saved Overpass JSON response.

    Accepts either the full response object or a bare elements list.

    Args:
        filepath: Path to the JSON file

    Returns:
        List of raw element dictionaries

    Raises:
        OverpassResponseError: If the file is missing or not a valid response
    """
    path = Path(filepath)

    if not path.is_file():
        raise OverpassResponseError(f"File not found: {filepath}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f, object_pairs_hook=OrderedDict)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise OverpassResponseError(f"Invalid JSON in {filepath}: {e}") from e

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("elements"), list):
        if data.get("remark"):
            logger.warning(f"Overpass remark: {data['remark']}")
        return data["elements"]

    raise OverpassResponseError(f"No 'elements' array in {filepath}")
