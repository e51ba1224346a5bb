# Center and bounds helpers

from .bounds import (
    center,
    coordinate_span,
    bounds,
)

__all__ = [
    "center",
    "coordinate_span",
    "bounds",
]
