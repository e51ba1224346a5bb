"""
Overpass Shapes - Master Constants Reference

Fixed values shared by the parser, the shape builders and the writers.
Per-run overrides go through config/settings.yaml, not through these names.
"""

# =============================================================================
# ELEMENT TYPES
# =============================================================================

class ElementType:
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


# =============================================================================
# MEMBER ROLES
# =============================================================================

class Role:
    OUTER = "outer"
    INNER = "inner"


# Roles whose member segments get stitched together into rings
MERGE_ROLES = (Role.OUTER, Role.INNER)

# =============================================================================
# SHAPE CLASSIFICATION CONSTANTS
# =============================================================================

# Shapes spanning less than this (degrees) on both axes are "very small"
VERY_SMALL_SPAN_DEG = 0.0005

# Minimum node references for a way to count as a ring
MIN_RING_NODE_REFS = 2

# Closed shapes need this many coordinates to render as a filled polygon
MIN_POLYGON_COORDS = 3

# =============================================================================
# DEGENERATE DEFAULTS
# =============================================================================

# Center returned for an empty point sequence
EMPTY_CENTER = (0.0, 0.0)

# =============================================================================
# OUTPUT CONSTANTS
# =============================================================================

GEOJSON_SUFFIX = "_shapes.geojson"
JSON_SUFFIX = "_shapes.json"

# =============================================================================
# SHAPE KINDS
# =============================================================================

class ShapeKind:
    MARKER = "MARKER"
    AREA = "AREA"
    PATH = "PATH"
    CENTROID = "CENTROID"
