#!/usr/bin/env python3
"""
Segment Data Model

A Segment is a directed road edge with geometry, growth metadata, traffic
figures for path cost and two adjacency lists (backward and forward links).
Geometry is mutated only through the start/end setters, which bump a road
revision so derived values (direction, length, collider box) are recomputed
lazily.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional

from shapely.geometry import LineString

from ..collision.collision import CollisionShape, ShapeType
from .config import RoadNetworkConfig, get_default_config
from .geometry_utils import Vector2, cos_degrees, direction_of, equal_v, length, sin_degrees

logger = logging.getLogger(__name__)


@dataclass
class SegmentMeta:
    """Metadata consulted by the growth heuristics."""
    highway: bool = False
    color: int = 0
    severed: bool = False


class SegmentEnd(Enum):
    """Physical end of a segment at which a neighbour is attached."""
    START = "start"
    END = "end"


class Segment:
    """
    Directed road edge.

    Links are kept as direct references to neighbouring segments. A neighbour
    listed in links_b is attached at the "backward" end, which is the start
    unless the topology around the segment says otherwise (see
    start_is_backwards).
    """

    def __init__(self,
                 start: Vector2,
                 end: Vector2,
                 time_delay: int = 0,
                 meta: Optional[SegmentMeta] = None,
                 config: Optional[RoadNetworkConfig] = None):
        self.config = config or get_default_config()
        self.id = -1

        self._start = (float(start[0]), float(start[1]))
        self._end = (float(end[0]), float(end[1]))
        self.time_delay = time_delay
        self.meta = replace(meta) if meta is not None else SegmentMeta()

        segments_config = self.config.segments
        traffic_config = self.config.traffic
        if self.meta.highway:
            self.width = segments_config.highway_segment_width
            self.max_speed = traffic_config.highway_max_speed
            self.capacity = traffic_config.highway_capacity
        else:
            self.width = segments_config.default_segment_width
            self.max_speed = traffic_config.default_max_speed
            self.capacity = traffic_config.default_capacity

        self.collider = CollisionShape(self, ShapeType.LINE, start=self._start, end=self._end, width=self.width)

        self.links_b: List['Segment'] = []
        self.links_f: List['Segment'] = []
        self.users: List[object] = []

        self._road_revision = 0
        self._dir_revision: Optional[int] = None
        self._length_revision: Optional[int] = None
        self._cached_dir: Optional[float] = None
        self._cached_length: Optional[float] = None

    @property
    def start(self) -> Vector2:
        return self._start

    @start.setter
    def start(self, value: Vector2):
        self._start = (float(value[0]), float(value[1]))
        self.collider.update(start=self._start)
        self._road_revision += 1

    @property
    def end(self) -> Vector2:
        return self._end

    @end.setter
    def end(self, value: Vector2):
        self._end = (float(value[0]), float(value[1]))
        self.collider.update(end=self._end)
        self._road_revision += 1

    @property
    def road_revision(self) -> int:
        return self._road_revision

    def direction(self) -> float:
        """Clockwise direction from +y in degrees."""
        if self._dir_revision != self._road_revision:
            self._dir_revision = self._road_revision
            self._cached_dir = direction_of(self._start, self._end)
        return self._cached_dir

    def length(self) -> float:
        if self._length_revision != self._road_revision:
            self._length_revision = self._road_revision
            self._cached_length = length(self._start, self._end)
        return self._cached_length

    # Traffic

    def add_user(self, user: object):
        self.users.append(user)

    def remove_user(self, user: object):
        self.users.remove(user)

    def current_speed(self) -> float:
        # a single user travels at full speed
        congestion = max(0, len(self.users) - 1) / self.capacity
        return max(self.config.traffic.min_speed_proportion, 1 - congestion) * self.max_speed

    def cost(self) -> float:
        """Time to traverse the whole segment at its current speed."""
        return self.length() / self.current_speed()

    def cost_to(self, other: 'Segment', from_fraction: Optional[float] = None) -> float:
        """
        Share of this segment's cost spent travelling towards a neighbour.

        Args:
            other: Neighbouring segment being moved towards
            from_fraction: Position along this segment the traversal starts
                from; None means the segment is crossed halfway on average

        Returns:
            Cost of the part of this segment between the position and the
            end shared with other
        """
        fraction = 0.5
        if from_fraction is not None:
            segment_end = self.end_containing(other)
            if segment_end is SegmentEnd.START:
                fraction = from_fraction
            elif segment_end is SegmentEnd.END:
                fraction = 1 - from_fraction
        return self.cost() * fraction

    # Topology

    def neighbours(self) -> List['Segment']:
        return self.links_f + self.links_b

    def start_is_backwards(self) -> bool:
        """
        Whether the backward links attach at this segment's start point.

        Derived from geometry of the first linked neighbour; an unlinked
        segment counts as start-backwards.
        """
        if self.links_b:
            return equal_v(self.links_b[0].start, self._start) or equal_v(self.links_b[0].end, self._start)
        if self.links_f:
            return equal_v(self.links_f[0].start, self._end) or equal_v(self.links_f[0].end, self._end)
        return True

    def end_containing(self, other: 'Segment') -> Optional[SegmentEnd]:
        start_backwards = self.start_is_backwards()
        if other in self.links_b:
            return SegmentEnd.START if start_backwards else SegmentEnd.END
        if other in self.links_f:
            return SegmentEnd.END if start_backwards else SegmentEnd.START
        return None

    def links_for_end_containing(self, other: 'Segment') -> Optional[List['Segment']]:
        """The link list (backward or forward) that holds other, if any."""
        if other in self.links_b:
            return self.links_b
        if other in self.links_f:
            return self.links_f
        return None

    def split(self, point: Vector2, new_neighbour: 'Segment', segments: List['Segment'], spatial_index) -> 'Segment':
        """
        Cut this segment at a point lying on it, joining new_neighbour there.

        The new half covers the part nearer this segment's start and is added
        to the segment list and spatial index; this segment keeps the rest.
        Neighbours on the start side are repointed to the new half and the two
        halves are linked to each other and to new_neighbour.

        Args:
            point: Split point on this segment
            new_neighbour: Segment ending at the split point
            segments: Segment list the new half is appended to
            spatial_index: Index the new half is inserted into

        Returns:
            The newly created half
        """
        start_is_backwards = self.start_is_backwards()

        split_part = Segment.from_existing(self)
        split_part.add_to(segments, spatial_index)
        split_part.end = point
        self.start = point

        split_part.links_b = list(self.links_b)
        split_part.links_f = list(self.links_f)

        if start_is_backwards:
            first_split, second_split = split_part, self
            fix_links = split_part.links_b
        else:
            first_split, second_split = self, split_part
            fix_links = split_part.links_f

        for link in fix_links:
            link_list = link.links_for_end_containing(self)
            if link_list is None:
                logger.warning(f"Segment {link!r} does not link back to split segment {self!r}")
                continue
            link_list[link_list.index(self)] = split_part

        first_split.links_f = [new_neighbour, second_split]
        second_split.links_b = [new_neighbour, first_split]

        new_neighbour.links_f.append(first_split)
        new_neighbour.links_f.append(second_split)

        logger.debug(f"Split segment at ({point[0]:.1f}, {point[1]:.1f})")
        return split_part

    def add_to(self, segments: List['Segment'], spatial_index):
        """Append to the segment list and insert the current collider box."""
        segments.append(self)
        spatial_index.insert(self.collider.limits())

    def as_linestring(self) -> LineString:
        return LineString([self._start, self._end])

    # Factories

    @classmethod
    def from_existing(cls,
                      segment: 'Segment',
                      time_delay: Optional[int] = None,
                      start: Optional[Vector2] = None,
                      end: Optional[Vector2] = None,
                      meta: Optional[SegmentMeta] = None) -> 'Segment':
        """Copy geometry, delay and metadata of a segment; links are not copied."""
        return cls(
            start if start is not None else segment.start,
            end if end is not None else segment.end,
            segment.time_delay if time_delay is None else time_delay,
            meta if meta is not None else segment.meta,
            segment.config
        )

    @classmethod
    def using_direction(cls,
                        start: Vector2,
                        direction: float = 90.0,
                        segment_length: Optional[float] = None,
                        time_delay: int = 0,
                        meta: Optional[SegmentMeta] = None,
                        config: Optional[RoadNetworkConfig] = None) -> 'Segment':
        """Create a segment from a start point, clockwise direction and length."""
        config = config or get_default_config()
        if segment_length is None:
            segment_length = config.segments.default_segment_length

        end = (
            start[0] + segment_length * sin_degrees(direction),
            start[1] + segment_length * cos_degrees(direction)
        )
        return cls(start, end, time_delay, meta, config)

    def __repr__(self):
        kind = "highway" if self.meta.highway else "road"
        return (f"Segment(id={self.id}, {kind}, "
                f"({self._start[0]:.1f}, {self._start[1]:.1f}) -> ({self._end[0]:.1f}, {self._end[1]:.1f}))")
