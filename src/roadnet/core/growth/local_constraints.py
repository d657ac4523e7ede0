#!/usr/bin/env python3
"""
Local Constraints

Resolve a candidate segment against segments already placed nearby. Three
rules are tried against every nearby segment and the single highest-priority
match is executed:

- crossing (4): the candidate crosses another segment; split it there
- endpoint snap (3): the candidate ends near another segment's end; join
  the junction there
- mid-edge snap (2): the candidate ends near the interior (not an end) of another
  segment; split it at the projected point

Every executed rule truncates the candidate and marks it severed.
"""

import logging
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from ..config import RoadNetworkConfig
from ..geometry_utils import (
    Vector2,
    direction_of,
    distance_to_line,
    equal_v,
    length2,
    line_segments_intersect,
    min_degree_difference,
)
from ..segment import Segment
from ...spatial.spatial_index import BoundingBoxEntry, SpatialIndex
from .contracts import DebugAnnotations

logger = logging.getLogger(__name__)


class ConstraintKind(IntEnum):
    """Local-constraint rules; higher values take precedence."""
    MID_EDGE_SNAP = 2
    ENDPOINT_SNAP = 3
    CROSSING = 4


@dataclass(frozen=True)
class ConstraintMatch:
    """
    The rule selected for a candidate.

    Attributes:
        kind: Rule that matched
        other: Placed segment the candidate interacts with
        point: Point the candidate will be truncated to
        rank: Tie-break key within a rule (intersection parameter along the
            candidate for crossings, squared distance for snaps); smaller wins
        deviation: Angle between the truncated candidate and other, in [0, 90]
        requires_split: Whether executing the rule splits other in two
    """
    kind: ConstraintKind
    other: Segment
    point: Vector2
    rank: float
    deviation: float
    requires_split: bool


def _make_match(kind: ConstraintKind, candidate: Segment, other: Segment, point: Vector2,
                rank: float, config: RoadNetworkConfig) -> ConstraintMatch:
    deviation = min_degree_difference(other.direction(), direction_of(candidate.start, point))
    splits = (kind is not ConstraintKind.ENDPOINT_SNAP and
              deviation >= config.constraints.minimum_intersection_deviation)
    return ConstraintMatch(kind, other, point, rank, deviation, splits)


def _is_better(match: ConstraintMatch, best: Optional[ConstraintMatch]) -> bool:
    if best is None or match.kind > best.kind:
        return True
    return match.kind == best.kind and match.rank < best.rank


def find_constraint_match(candidate: Segment,
                          spatial_index: SpatialIndex,
                          config: RoadNetworkConfig,
                          performance_tracker=None) -> Optional[ConstraintMatch]:
    """
    Select the highest-priority rule for a candidate.

    The spatial index query box is the candidate's box grown by the snap
    distance so that snaps near the candidate's end are not missed.

    Args:
        candidate: Proposed segment, not yet in the index
        spatial_index: Index of placed segments
        config: Generation configuration
        performance_tracker: Optional tracker for index query timing

    Returns:
        The winning ConstraintMatch, or None if no rule applies
    """
    snap_distance = config.constraints.road_snap_distance
    snap_distance2 = snap_distance * snap_distance

    box = candidate.collider.limits()
    query = BoundingBoxEntry(box.x - snap_distance, box.y - snap_distance,
                             box.width + 2 * snap_distance, box.height + 2 * snap_distance)

    query_start = time.perf_counter()
    entries = spatial_index.retrieve(query)
    if performance_tracker is not None:
        performance_tracker.record_spatial_index_time("retrieve", time.perf_counter() - query_start)

    best: Optional[ConstraintMatch] = None

    for entry in entries:
        other = entry.payload
        if other is candidate:
            continue

        intersection = line_segments_intersect(candidate.start, candidate.end, other.start, other.end, omit_ends=True)
        if intersection is not None:
            point, t = intersection
            match = _make_match(ConstraintKind.CROSSING, candidate, other, point, t, config)
            if _is_better(match, best):
                best = match
            continue

        if best is not None and best.kind is ConstraintKind.CROSSING:
            continue

        end_distance2 = length2(candidate.end, other.end)
        if end_distance2 <= snap_distance2:
            match = _make_match(ConstraintKind.ENDPOINT_SNAP, candidate, other, other.end, end_distance2, config)
            if _is_better(match, best):
                best = match
            continue

        line_distance = distance_to_line(candidate.end, other.start, other.end)
        point = line_distance.point_on_line
        # interior points only; a split at an endpoint would leave a zero-length half
        if (line_distance.distance2 < snap_distance2 and
                0 < line_distance.line_proj2 < line_distance.length2 and
                not equal_v(point, other.start) and not equal_v(point, other.end)):
            match = _make_match(ConstraintKind.MID_EDGE_SNAP, candidate, other,
                                point, line_distance.distance2, config)
            if _is_better(match, best):
                best = match

    return best


def _has_duplicate_edge(links: List[Segment], segment: Segment) -> bool:
    for link in links:
        if equal_v(link.start, segment.end) and equal_v(link.end, segment.start):
            return True
        if equal_v(link.start, segment.start) and equal_v(link.end, segment.end):
            return True
    return False


def _execute_crossing(candidate, match, segments, spatial_index, debug, config) -> bool:
    if match.deviation < config.constraints.minimum_intersection_deviation:
        return False

    match.other.split(match.point, candidate, segments, spatial_index)
    candidate.end = match.point
    candidate.meta.severed = True
    debug.intersections.append(match.point)
    return True


def _execute_endpoint_snap(candidate, match, segments, spatial_index, debug, config) -> bool:
    other = match.other
    candidate.end = match.point
    candidate.meta.severed = True

    links = other.links_f if other.start_is_backwards() else other.links_b
    if _has_duplicate_edge(links, candidate):
        return False

    for link in list(links):
        link_list = link.links_for_end_containing(other)
        if link_list is None:
            logger.warning(f"Segment {link!r} does not link back to snap target {other!r}")
        else:
            link_list.append(candidate)
        candidate.links_f.append(link)

    links.append(candidate)
    candidate.links_f.append(other)
    debug.snaps.append(match.point)
    return True


def _execute_mid_edge_snap(candidate, match, segments, spatial_index, debug, config) -> bool:
    candidate.end = match.point
    candidate.meta.severed = True

    if match.deviation < config.constraints.minimum_intersection_deviation:
        return False

    match.other.split(match.point, candidate, segments, spatial_index)
    debug.intersections_radius.append(match.point)
    return True


_EXECUTORS = {
    ConstraintKind.CROSSING: _execute_crossing,
    ConstraintKind.ENDPOINT_SNAP: _execute_endpoint_snap,
    ConstraintKind.MID_EDGE_SNAP: _execute_mid_edge_snap,
}


def apply_local_constraints(candidate: Segment,
                            match: Optional[ConstraintMatch],
                            segments: List[Segment],
                            spatial_index: SpatialIndex,
                            debug: DebugAnnotations,
                            config: RoadNetworkConfig) -> bool:
    """
    Execute the selected rule against the candidate.

    A rule whose guard fails (near-parallel crossing, duplicate edge) leaves
    the candidate as the guard found it; it is still accepted.

    Returns:
        Always True; candidates are never discarded here
    """
    if match is None:
        return True

    executed = _EXECUTORS[match.kind](candidate, match, segments, spatial_index, debug, config)
    if executed:
        logger.debug(f"{match.kind.name} resolved at ({match.point[0]:.1f}, {match.point[1]:.1f})")
    else:
        logger.debug(f"{match.kind.name} guard rejected, candidate kept as is")
    return True
