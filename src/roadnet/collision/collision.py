#!/usr/bin/env python3
"""
Collision Geometry Module

Typed collision shapes (line, rectangle, circle) with revision-cached
bounding boxes and pairwise overlap tests. Rectangle-like pairs are resolved
with the Separating Axis Theorem and report the minimum translation vector
that pushes the first shape out of the second.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core.errors import InvalidShapeType
from ..core.geometry_utils import (
    Vector2,
    add_points,
    distance_to_line,
    dot_product,
    length2,
    length_v,
    length_v2,
    multiply_scalar,
    project,
    subtract_points,
)
from ..spatial.spatial_index import BoundingBoxEntry

logger = logging.getLogger(__name__)

CollisionResult = Union[bool, Vector2]


class ShapeType(Enum):
    """Supported collision shape variants."""
    RECT = "rect"
    LINE = "line"
    CIRCLE = "circle"


class CollisionShape:
    """
    Collision shape owned by a segment or building.

    Properties per variant:
    - LINE: start, end, width
    - RECT: corners (4 points, in order around the rectangle)
    - CIRCLE: center, radius

    Every call to update() bumps the revision; limits() recomputes its
    bounding box only when the revision has moved on.
    """

    def __init__(self, payload: Any, shape_type: Union[ShapeType, str], **properties):
        try:
            self.shape_type = ShapeType(shape_type)
        except ValueError:
            raise InvalidShapeType(shape_type) from None

        self.payload = payload
        self.properties: Dict[str, Any] = dict(properties)

        self.revision = 0
        self._limits_revision: Optional[int] = None
        self._cached_limits: Optional[BoundingBoxEntry] = None

    def update(self, **properties):
        """Merge new geometric properties and invalidate the cached box."""
        self.revision += 1
        self.properties.update(properties)

    def limits(self) -> BoundingBoxEntry:
        """Axis-aligned bounding box of the shape, tagged with the payload."""
        if self._limits_revision != self.revision:
            self._limits_revision = self.revision
            self._cached_limits = self._compute_limits()
        return self._cached_limits

    def _compute_limits(self) -> BoundingBoxEntry:
        props = self.properties

        if self.shape_type is ShapeType.RECT:
            xs = [corner[0] for corner in props['corners']]
            ys = [corner[1] for corner in props['corners']]
            return BoundingBoxEntry(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys), self.payload)

        if self.shape_type is ShapeType.LINE:
            # grown by half the width on every side so the box covers the inflated quad
            start, end = props['start'], props['end']
            half_width = props['width'] / 2
            return BoundingBoxEntry(
                min(start[0], end[0]) - half_width,
                min(start[1], end[1]) - half_width,
                abs(start[0] - end[0]) + props['width'],
                abs(start[1] - end[1]) + props['width'],
                self.payload
            )

        if self.shape_type is ShapeType.CIRCLE:
            center, radius = props['center'], props['radius']
            return BoundingBoxEntry(center[0] - radius, center[1] - radius, radius * 2, radius * 2, self.payload)

        raise InvalidShapeType(self.shape_type)

    def collide(self, other: 'CollisionShape') -> CollisionResult:
        """
        Test this shape against another.

        Returns:
            False when the shapes do not overlap. For rectangle and line pairs,
            the translation vector that moves this shape out of the overlap.
            True for an overlap involving a circle.
        """
        # avoid the exact test when the boxes are separated on either axis
        if not self.limits().overlaps(other.limits()):
            return False

        if self.shape_type is ShapeType.CIRCLE:
            if other.shape_type is ShapeType.RECT:
                return rect_circle_collision(other.properties['corners'], self.properties)
        elif self.shape_type is ShapeType.RECT:
            if other.shape_type is ShapeType.RECT:
                return rect_rect_intersection(self.properties['corners'], other.properties['corners'])
            if other.shape_type is ShapeType.LINE:
                return rect_rect_intersection(self.properties['corners'], rect_corners_from_line(other.properties))
            if other.shape_type is ShapeType.CIRCLE:
                return rect_circle_collision(self.properties['corners'], other.properties)
        elif self.shape_type is ShapeType.LINE:
            if other.shape_type is ShapeType.RECT:
                return rect_rect_intersection(rect_corners_from_line(self.properties), other.properties['corners'])
            if other.shape_type is ShapeType.LINE:
                return rect_rect_intersection(rect_corners_from_line(self.properties), rect_corners_from_line(other.properties))

        return False

    def __repr__(self):
        return f"CollisionShape({self.shape_type.value}, revision={self.revision})"


def rect_corners_from_line(line_props: Dict[str, Any]) -> List[Vector2]:
    """Inflate a line into a quad of the line's width."""
    start, end = line_props['start'], line_props['end']
    direction = subtract_points(end, start)
    perp_dir = (-direction[1], direction[0])
    perp_length = length_v(perp_dir)
    if perp_length == 0:
        return [start, start, end, end]

    half_width_perp_dir = multiply_scalar(perp_dir, (0.5 * line_props['width']) / perp_length)
    return [
        add_points(start, half_width_perp_dir),
        subtract_points(start, half_width_perp_dir),
        subtract_points(end, half_width_perp_dir),
        add_points(end, half_width_perp_dir)
    ]


def rect_rect_intersection(corners_a: List[Vector2], corners_b: List[Vector2]) -> Union[bool, Vector2]:
    """
    Separating Axis Theorem test for two rectangles.

    Args:
        corners_a: Corners of the rectangle to push out
        corners_b: Corners of the obstacle rectangle

    Returns:
        False if a separating axis exists, otherwise the displacement that
        moves rectangle A out of the collision along the axis of least overlap
    """
    axes = [
        subtract_points(corners_a[3], corners_a[0]),
        subtract_points(corners_a[3], corners_a[2]),
        subtract_points(corners_b[0], corners_b[1]),
        subtract_points(corners_b[0], corners_b[3])
    ]

    # overlap vectors per axis; the smallest becomes the response
    axis_overlaps = []

    for axis in axes:
        if length_v2(axis) == 0:
            continue

        projected_a = [project(corner, axis)[1] for corner in corners_a]
        projected_b = [project(corner, axis)[1] for corner in corners_b]

        positions_a = [dot_product(v, axis) for v in projected_a]
        positions_b = [dot_product(v, axis) for v in projected_b]

        # first index wins on ties
        max_a_i = max(range(len(positions_a)), key=positions_a.__getitem__)
        min_a_i = min(range(len(positions_a)), key=positions_a.__getitem__)
        max_b_i = max(range(len(positions_b)), key=positions_b.__getitem__)
        min_b_i = min(range(len(positions_b)), key=positions_b.__getitem__)

        if positions_a[max_a_i] < positions_b[min_b_i] or positions_b[max_b_i] < positions_a[min_a_i]:
            return False

        diff1 = subtract_points(projected_a[max_a_i], projected_b[min_b_i])
        diff2 = subtract_points(projected_b[max_b_i], projected_a[min_a_i])

        if length_v2(diff1) < length_v2(diff2):
            axis_overlaps.append(diff1)
        else:
            # overlap is on the other side, invert so it pushes out
            axis_overlaps.append(multiply_scalar(diff2, -1))

    if not axis_overlaps:
        return False

    min_vector = min(axis_overlaps, key=length_v2)
    return multiply_scalar(min_vector, -1)


def rect_circle_collision(corners: List[Vector2], circle_props: Dict[str, Any]) -> bool:
    """Check a rectangle against a circle: corner inside, edge within radius, or circle enclosed."""
    center = circle_props['center']
    radius2 = circle_props['radius'] * circle_props['radius']

    for corner in corners:
        if length2(corner, center) <= radius2:
            return True

    for i, start in enumerate(corners):
        end = corners[(i + 1) % len(corners)]
        distance = distance_to_line(center, start, end)
        if 0 < distance.line_proj2 < distance.length2 and distance.distance2 <= radius2:
            return True

    axes = [
        subtract_points(corners[3], corners[0]),
        subtract_points(corners[3], corners[2])
    ]
    projections = [
        project(subtract_points(center, corners[0]), axes[0]),
        project(subtract_points(center, corners[2]), axes[1])
    ]

    for (d_product, projected), axis in zip(projections, axes):
        if d_product < 0 or length_v2(projected) > length_v2(axis):
            return False

    return True
