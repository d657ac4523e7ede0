#!/usr/bin/env python3
"""
Growth Contracts

Records exchanged between the growth stages: queued candidates with their
pending link setup, debug annotations collected while resolving constraints,
and the immutable snapshot handed to consumers when a run completes.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
from shapely.geometry import Point

from ..config import RoadNetworkConfig, get_default_config
from ..geometry_utils import Vector2
from ..segment import Segment

logger = logging.getLogger(__name__)


class LinkSetup(Enum):
    """How an accepted candidate is wired into the existing graph."""
    NONE = "none"            # bootstrap segments, already linked
    BRANCH = "branch"        # attach to the predecessor's forward junction


@dataclass
class GrowthCandidate:
    """
    A proposed segment waiting in the queue.

    Link setup is applied by the generator only when the candidate is
    accepted, so a candidate discarded by the segment ceiling leaves the
    graph untouched.
    """
    segment: Segment
    link_setup: LinkSetup = LinkSetup.NONE
    predecessor: Optional[Segment] = None

    def __post_init__(self):
        if self.link_setup is LinkSetup.BRANCH and self.predecessor is None:
            raise ValueError("branch link setup requires a predecessor segment")

    @property
    def time_delay(self) -> int:
        return self.segment.time_delay

    def setup_links(self):
        """Connect the segment to its predecessor and the predecessor's forward neighbours."""
        if self.link_setup is not LinkSetup.BRANCH:
            return

        branch = self.segment
        previous = self.predecessor
        for link in previous.links_f:
            branch.links_b.append(link)
            link_list = link.links_for_end_containing(previous)
            if link_list is None:
                logger.warning(f"Segment {link!r} does not link back to predecessor {previous!r}")
                continue
            link_list.append(branch)

        previous.links_f.append(branch)
        branch.links_b.append(previous)


@dataclass
class DebugAnnotations:
    """Resolution points recorded per local-constraint rule."""
    intersections: List[Vector2] = field(default_factory=list)
    intersections_radius: List[Vector2] = field(default_factory=list)
    snaps: List[Vector2] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            'intersections': len(self.intersections),
            'intersections_radius': len(self.intersections_radius),
            'snaps': len(self.snaps),
        }


@dataclass(frozen=True)
class GenerationResult:
    """
    Snapshot produced by one generation run.

    Consumers treat the segment list and spatial index as read-only; a new
    seed produces a new result rather than mutating this one.
    """
    segments: List[Segment]
    spatial_index: Any
    population: Any
    debug_annotations: DebugAnnotations
    seed: int
    performance: Optional[Any] = None
    config: Optional[RoadNetworkConfig] = None

    def segments_near(self, point: Vector2, radius: float) -> List[Segment]:
        """
        Segments whose centre line passes within radius of a point.

        Args:
            point: Query point in world coordinates
            radius: Search radius

        Returns:
            Matching segments ordered by distance, nearest first
        """
        query = Point(point)
        found = []
        seen = set()
        for entry in self.spatial_index.find_entries_near_point(point, radius):
            segment = entry.payload
            if id(segment) in seen:
                continue
            seen.add(id(segment))
            distance = query.distance(segment.as_linestring())
            if distance <= radius:
                found.append((distance, segment))

        found.sort(key=lambda pair: pair[0])
        return [segment for _, segment in found]

    def nearest_segment(self, point: Vector2, max_distance: float = math.inf) -> Optional[Segment]:
        """Closest segment to a point, or None if nothing lies within max_distance."""
        if not math.isinf(max_distance):
            nearby = self.segments_near(point, max_distance)
            return nearby[0] if nearby else None

        query = Point(point)
        return min(self.segments, key=lambda segment: query.distance(segment.as_linestring()), default=None)

    def select_segment(self, point: Vector2) -> Optional[Segment]:
        """Segment under a pointer, within the configured selection range."""
        return self.nearest_segment(point, self._config().interaction.selection_range)

    def segments_in_pickup_range(self, point: Vector2) -> List[Segment]:
        return self.segments_near(point, self._config().interaction.default_pickup_range)

    def population_heat_map(self, x: float, y: float, width: float, height: float) -> np.ndarray:
        """Population grid over an area at the configured heat-map cell size."""
        return self.population.sample_grid(x, y, width, height, self._config().population.heat_map_cell_size)

    def _config(self) -> RoadNetworkConfig:
        return self.config or get_default_config()
