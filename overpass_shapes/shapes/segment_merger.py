"""
Segment Merger Module

Stitches relation member segments into continuous chains.

Multipolygon relations usually describe one ring as several member ways
that meet end to end, in no particular order or direction. Segments with
the same "inner"/"outer" role whose endpoints coincide are fused until
nothing more fits together.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..constants import MERGE_ROLES
from .models import MapPolygon

logger = logging.getLogger(__name__)


class Splice(Enum):
    """How segment A attaches to segment B."""
    APPEND = "append"                    # A.start == B.end
    PREPEND = "prepend"                  # A.end == B.start
    PREPEND_REVERSED = "prepend_reversed"  # A.start == B.start
    APPEND_REVERSED = "append_reversed"    # A.end == B.end


def find_splice(seg_a: MapPolygon, seg_b: MapPolygon) -> Optional[Splice]:
    """
    Find how A attaches to B, checking the four cases in a fixed order.

    Endpoints are compared exactly; adjacent members of one relation share
    the very same node coordinates.

    Args:
        seg_a: Segment to be absorbed
        seg_b: Segment to be extended

    Returns:
        Splice case, or None if the segments do not touch
    """
    if seg_a.start == seg_b.end:
        return Splice.APPEND
    if seg_a.end == seg_b.start:
        return Splice.PREPEND
    if seg_a.start == seg_b.start:
        return Splice.PREPEND_REVERSED
    if seg_a.end == seg_b.end:
        return Splice.APPEND_REVERSED
    return None


def apply_splice(seg_a: MapPolygon, seg_b: MapPolygon, splice: Splice) -> None:
    """
    Extend B in place with A's coordinates.

    The shared joint coordinate is kept once.
    """
    coords_a = seg_a.coordinates

    if splice is Splice.APPEND:
        seg_b.coordinates.extend(coords_a[1:])
    elif splice is Splice.PREPEND:
        seg_b.coordinates[:0] = coords_a[:-1]
    elif splice is Splice.PREPEND_REVERSED:
        seg_b.coordinates[:0] = list(reversed(coords_a))[:-1]
    elif splice is Splice.APPEND_REVERSED:
        seg_b.coordinates.extend(list(reversed(coords_a))[1:])


def is_merge_candidate(segment: MapPolygon, roles: Sequence[str] = MERGE_ROLES) -> bool:
    return segment.role in roles and len(segment.coordinates) > 0


def merge_pass(
    segments: List[MapPolygon],
    roles: Sequence[str] = MERGE_ROLES
) -> Tuple[List[MapPolygon], int]:
    """
    Run one pass over the working set.

    Each eligible segment A, in index order, is fused into the first other
    segment B of the same role it touches. A is then dropped from the
    survivor list. Segments already absorbed in this pass are skipped
    on both sides.

    Args:
        segments: Working set (B records are mutated)
        roles: Roles eligible for merging

    Returns:
        Tuple of (surviving segments, number of fusions)
    """
    absorbed: Set[int] = set()

    for i, seg_a in enumerate(segments):
        if not is_merge_candidate(seg_a, roles):
            continue

        for j, seg_b in enumerate(segments):
            if j == i or j in absorbed:
                continue
            if seg_b.role != seg_a.role or not seg_b.coordinates:
                continue

            splice = find_splice(seg_a, seg_b)
            if splice is None:
                continue

            apply_splice(seg_a, seg_b, splice)
            absorbed.add(i)
            break

    survivors = [seg for k, seg in enumerate(segments) if k not in absorbed]
    return survivors, len(absorbed)


def merge_segments(
    segments: Iterable[MapPolygon],
    roles: Sequence[str] = MERGE_ROLES
) -> List[MapPolygon]:
    """
    Fuse touching segments until a pass makes no progress.

    Works on copies, so the caller's records are left unchanged. Segments
    whose role is not in `roles` pass through as they are.

    Args:
        segments: Member segments of one relation
        roles: Roles eligible for merging (default "outer" and "inner")

    Returns:
        Reduced list of segments
    """
    working = [seg.copy() for seg in segments]
    n = len(working)

    passes = 0
    total_fusions = 0
    while True:
        working, fusions = merge_pass(working, roles)
        passes += 1
        total_fusions += fusions
        if fusions == 0:
            break

    logger.debug(
        f"Segment merge: {total_fusions} fusions in {passes} passes, "
        f"{n} -> {len(working)} segments"
    )
    return working
