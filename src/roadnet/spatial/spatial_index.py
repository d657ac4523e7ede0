#!/usr/bin/env python3
"""
Spatial Index Module

R-tree based spatial indexing of axis-aligned bounding boxes.
Answers "which stored boxes may overlap this query box" for collision
resolution during growth and for point lookups by consumers.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from rtree import index

logger = logging.getLogger(__name__)

Box = Tuple[float, float, float, float]


@dataclass(frozen=True)
class BoundingBoxEntry:
    """Axis-aligned box tagged with a back-reference to the object it describes."""
    x: float
    y: float
    width: float
    height: float
    payload: Any = None

    @property
    def bounds(self) -> Box:
        """(minx, miny, maxx, maxy) as used by the R-tree."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def overlaps(self, other: 'BoundingBoxEntry') -> bool:
        """Closed-interval overlap test; touching boxes overlap."""
        return not (
            self.x + self.width < other.x or other.x + other.width < self.x or
            self.y + self.height < other.y or other.y + other.height < self.y
        )


class SpatialIndex:
    """
    R-tree over bounding box entries.

    Entries are only ever appended. If the geometry behind an entry changes
    after insertion the index is not told, so results are a superset that
    callers must filter with an exact test.
    """

    def __init__(self, region: Box = (-20000.0, -20000.0, 40000.0, 40000.0), max_objects: int = 10):
        self.region = BoundingBoxEntry(*region)
        self.max_objects = max_objects

        properties = index.Property()
        properties.leaf_capacity = max_objects
        properties.index_capacity = max_objects
        properties.near_minimum_overlap_factor = max(1, max_objects // 2)
        self._index = index.Index(properties=properties)
        self._entries: List[BoundingBoxEntry] = []  # position doubles as the R-tree id

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[BoundingBoxEntry]:
        """All entries in insertion order."""
        return list(self._entries)

    def insert(self, entry: BoundingBoxEntry):
        """Store an entry; entries outside the configured region are kept as well."""
        if not entry.overlaps(self.region):
            logger.warning(f"Inserting entry outside spatial index region: {entry.bounds}")

        entry_id = len(self._entries)
        self._entries.append(entry)
        self._index.insert(entry_id, entry.bounds)

    def retrieve(self, query: Union[BoundingBoxEntry, Box]) -> List[BoundingBoxEntry]:
        """
        Find entries whose boxes may overlap the query box.

        Args:
            query: A BoundingBoxEntry or an (x, y, width, height) tuple

        Returns:
            Matching entries in insertion order
        """
        if not isinstance(query, BoundingBoxEntry):
            query = BoundingBoxEntry(*query)

        if not self._entries:
            return []

        candidate_ids = sorted(self._index.intersection(query.bounds))
        return [self._entries[i] for i in candidate_ids]

    def find_entries_near_point(self, point: Tuple[float, float], radius: float) -> List[BoundingBoxEntry]:
        """Find entries whose boxes overlap the square of half-size radius around a point."""
        x, y = point
        return self.retrieve((x - radius, y - radius, 2 * radius, 2 * radius))
